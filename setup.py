from setuptools import setup, find_packages

setup(
    name="search-node-launcher",
    version="0.1.0",
    description=(
        "Resolve host properties into embedded search node settings "
        "and launch the node process."
    ),
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2",
        "PyYAML",
        "rich",
        "typer",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "search-node=search_node.cli:main",
        ],
    },
)
