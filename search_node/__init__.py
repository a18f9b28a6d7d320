"""Search node launcher - Python control plane for an embedded search node.

Resolves host application properties into engine settings and starts the
node process, either attached to the caller or as a detached background
process with a startup liveness check.
"""

try:
    from importlib.metadata import version

    __version__ = version("search-node-launcher")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
