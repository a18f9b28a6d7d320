"""Search node process launcher.

Starts the engine JVM in one of two modes:

* **attached**: the current process image is replaced with the JVM
  (``os.execv``); the node inherits the launcher's pid and exit code.
* **detached**: the JVM is spawned in a new session with stdin closed.
  After an optional grace period the child is checked once; a child that
  already exited is reported as a failure.

The liveness check is a heuristic: it only catches failures that happen
within the grace period.
"""

from __future__ import annotations

import errno
import logging
import os
import re
import subprocess
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from search_node.config.models import LaunchConfig
from search_node.launcher.options import parse_options_file

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0

#: Child exited during the grace period (or generic failure).
EXIT_NOT_RUNNING: int = 1

#: Executable exists but cannot be run.
EXIT_CANNOT_EXECUTE: int = 126

#: Executable not found.
EXIT_NOT_FOUND: int = 127

_DAEMONIZE_RE = re.compile(r"(?:^|\s)(?:-d|--daemonize)(?:\s|$)")


class LaunchMode(str, Enum):
    ATTACHED = "attached"
    DETACHED = "detached"


@dataclass
class LaunchResult:
    """Outcome of a launch attempt."""

    mode: LaunchMode
    command: List[str]
    returncode: int
    pid: Optional[int] = None
    alive: bool = False
    error: str = ""
    success: bool = False
    process: Optional[subprocess.Popen] = field(default=None, repr=False)


# ---------------------------------------------------------------------------
# Mode + command
# ---------------------------------------------------------------------------


def detect_mode(args: Sequence[str]) -> LaunchMode:
    """Return DETACHED when ``-d`` or ``--daemonize`` appears as a whole token."""
    if _DAEMONIZE_RE.search(" ".join(args)):
        return LaunchMode.DETACHED
    return LaunchMode.ATTACHED


def build_command(
    config: LaunchConfig,
    options: Sequence[str],
    args: Sequence[str],
) -> List[str]:
    """Assemble the JVM command line.

    Order: java, options file flags, extra java opts, engine system
    properties, classpath, main class, then the original arguments.
    """
    return [
        config.java,
        *options,
        *config.extra_java_opts,
        *config.system_properties(),
        "-cp",
        config.classpath,
        config.main_class,
        *args,
    ]


def _spawn_error_code(exc: OSError) -> int:
    """Map a spawn/exec failure to a shell-style exit code."""
    if isinstance(exc, FileNotFoundError):
        return EXIT_NOT_FOUND
    if isinstance(exc, PermissionError) or exc.errno == errno.ENOEXEC:
        return EXIT_CANNOT_EXECUTE
    return exc.errno or EXIT_NOT_RUNNING


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def exec_attached(
    command: List[str],
    *,
    _exec_fn: Optional[Callable[[str, List[str]], Any]] = None,
) -> LaunchResult:
    """Replace the current process with *command*.

    Only returns when the exec itself fails (or when *_exec_fn*, a test
    hook, returns).
    """
    execv = _exec_fn or os.execv
    logger.info("Exec: %s", " ".join(command))
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        execv(command[0], command)
    except OSError as exc:
        rc = _spawn_error_code(exc)
        logger.error("Exec of %s failed (rc=%d): %s", command[0], rc, exc)
        return LaunchResult(
            mode=LaunchMode.ATTACHED,
            command=command,
            returncode=rc,
            error=str(exc),
        )
    return LaunchResult(
        mode=LaunchMode.ATTACHED,
        command=command,
        returncode=EXIT_SUCCESS,
        pid=os.getpid(),
        alive=True,
        success=True,
    )


def start_detached(
    command: List[str],
    *,
    grace_period: float = 0.0,
    _sleep_fn: Any = None,
) -> LaunchResult:
    """Spawn *command* detached and check it once after *grace_period*.

    A spawn failure is returned immediately with its exit code and no
    liveness check.  Otherwise the result is ``0`` when the child is still
    running and :data:`EXIT_NOT_RUNNING` when it already exited.

    The *_sleep_fn* parameter is for test injection (avoids real sleeps).
    """
    sleep = _sleep_fn or time.sleep
    logger.info("Spawning detached: %s", " ".join(command))

    try:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        rc = _spawn_error_code(exc)
        logger.error("Spawn of %s failed (rc=%d): %s", command[0], rc, exc)
        return LaunchResult(
            mode=LaunchMode.DETACHED,
            command=command,
            returncode=rc,
            error=str(exc),
        )

    if grace_period > 0:
        sleep(grace_period)

    # poll() also reaps the child, so an exited child is never mistaken for
    # a live zombie.
    exit_status = proc.poll()
    if exit_status is not None:
        logger.error(
            "Search node (pid %d) is not running; exited with %d",
            proc.pid,
            exit_status,
        )
        return LaunchResult(
            mode=LaunchMode.DETACHED,
            command=command,
            returncode=EXIT_NOT_RUNNING,
            pid=proc.pid,
            error=f"process exited with status {exit_status}",
        )

    logger.info("Search node running in background (pid %d)", proc.pid)
    return LaunchResult(
        mode=LaunchMode.DETACHED,
        command=command,
        returncode=EXIT_SUCCESS,
        pid=proc.pid,
        alive=True,
        success=True,
        process=proc,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def launch(
    config: LaunchConfig,
    args: Sequence[str],
    *,
    mode: Optional[LaunchMode] = None,
    _exec_fn: Optional[Callable[[str, List[str]], Any]] = None,
    _sleep_fn: Any = None,
) -> LaunchResult:
    """Parse the options file and start the node in *mode*.

    When *mode* is ``None`` it is detected from *args*.  Raises
    :class:`~search_node.errors.OptionsFileNotFoundError` before anything
    is started when the options file is missing.
    """
    options = parse_options_file(config.options_file)
    mode = mode or detect_mode(args)
    command = build_command(config, options, args)

    if mode is LaunchMode.DETACHED:
        return start_detached(
            command, grace_period=config.grace_period, _sleep_fn=_sleep_fn
        )
    return exec_attached(command, _exec_fn=_exec_fn)
