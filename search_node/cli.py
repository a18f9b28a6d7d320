"""CLI entry point for search-node, built on typer.

Provides ``settings`` (resolve host properties into engine settings) and
``start`` (launch the node process).

Usage::

    python -m search_node --help
    python -m search_node settings -p sonar.search.port=9001 -p sonar.path.home=/srv/app
    python -m search_node settings --properties node.yml --output $ES_PATH_CONF
    python -m search_node start -d
"""

from __future__ import annotations

import json
import logging
import sys
from typing import List, Optional

import typer

from search_node import ui
from search_node.config.models import LaunchConfig, PropertySet
from search_node.config.properties import load_properties, properties_from_pairs
from search_node.errors import ConfigurationError, LaunchError
from search_node.launcher.runner import LaunchMode, detect_mode, launch
from search_node.settings.models import ResolutionErrorKind
from search_node.settings.resolver import resolve_settings
from search_node.settings.store import write_settings_file

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_MISSING_PORT = 2

app = typer.Typer(
    name="search-node",
    help="Resolve settings for and launch an embedded search node.",
    no_args_is_help=True,
    add_completion=False,
)


# ── Root callback (global options) ───────────────────────────────────────────


@app.callback()
def _root_callback(
    debug: bool = typer.Option(
        False, "--debug", help="Enable debug logging."
    ),
) -> None:
    """Search node control plane."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)


# ── settings command ─────────────────────────────────────────────────────────


@app.command()
def settings(
    prop: Optional[List[str]] = typer.Option(
        None,
        "--property",
        "-p",
        help="Host property as key=value. Can be specified multiple times.",
    ),
    properties_file: Optional[str] = typer.Option(
        None,
        "--properties",
        help="YAML file of host properties. -p values override it.",
    ),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the resolved settings to this file or directory.",
    ),
    json_flag: bool = typer.Option(
        False, "--json", "-j", help="Print the settings as JSON."
    ),
) -> None:
    """Resolve host properties into search node settings.

    Exit codes: 0 = resolved, 1 = invalid configuration,
    2 = port property missing.
    """
    try:
        base = load_properties(properties_file) if properties_file else PropertySet()
        props = properties_from_pairs(prop or [], base=base)
    except (OSError, ConfigurationError) as exc:
        ui.error_msg(str(exc))
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    result = resolve_settings(props)
    if not result.success:
        ui.error_msg(result.error.message)
        if result.error.kind is ResolutionErrorKind.MISSING_PORT:
            raise typer.Exit(EXIT_MISSING_PORT)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    if json_flag:
        typer.echo(json.dumps(result.settings.to_dict(), indent=2, sort_keys=True))
    else:
        ui.phase("SETTINGS")
        if result.fallback_node_name:
            ui.warn(
                "Local hostname could not be resolved; node name is "
                f"{result.settings['node.name']}"
            )
        for key in sorted(result.settings):
            ui.detail(key, result.settings[key])
        if result.in_cluster:
            ui.step(f"Joining cluster via {', '.join(result.cluster_nodes)}")

    if output_path:
        dest = write_settings_file(result.settings, output_path)
        if not json_flag:
            ui.ok(f"Settings written to {dest}")

    raise typer.Exit(EXIT_SUCCESS)


# ── start command ────────────────────────────────────────────────────────────


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True}
)
def start(ctx: typer.Context) -> None:
    """Start the search node.

    All arguments are forwarded to the node.  ``-d`` / ``--daemonize``
    starts it in the background and checks it is still running after
    ES_STARTUP_SLEEP_TIME seconds.

    Environment variables:
      ES_HOME                Node installation directory (required).
      ES_PATH_CONF           Config directory. Default: $ES_HOME/config.
      ES_JVM_OPTIONS         Options file. Default: $ES_PATH_CONF/jvm.options.
      ES_JAVA_OPTS           Extra JVM flags appended after the options file.
      JAVA_HOME              Java installation; otherwise java on PATH.
      ES_STARTUP_SLEEP_TIME  Grace period before the liveness check.
    """
    args = list(ctx.args)
    try:
        config = LaunchConfig.from_environ()
    except LaunchError as exc:
        ui.error_msg(str(exc))
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    mode = detect_mode(args)
    ui.phase("START")
    ui.step(f"Starting search node ({mode.value}) from {config.home}")

    try:
        result = launch(config, args, mode=mode)
    except LaunchError as exc:
        ui.error_msg(str(exc))
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    if result.success:
        if mode is LaunchMode.DETACHED:
            ui.ok(f"Search node running (pid {result.pid})")
    else:
        ui.fail(f"Search node failed to start: {result.error or 'not running'}")
    raise typer.Exit(result.returncode)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
