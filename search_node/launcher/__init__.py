"""Search node process launch: options file, mode detection, spawn."""

from search_node.launcher.options import parse_options, parse_options_file
from search_node.launcher.runner import (
    EXIT_NOT_RUNNING,
    EXIT_SUCCESS,
    LaunchMode,
    LaunchResult,
    build_command,
    detect_mode,
    exec_attached,
    launch,
    start_detached,
)

__all__ = [
    "EXIT_NOT_RUNNING",
    "EXIT_SUCCESS",
    "LaunchMode",
    "LaunchResult",
    "build_command",
    "detect_mode",
    "exec_attached",
    "launch",
    "parse_options",
    "parse_options_file",
    "start_detached",
]
