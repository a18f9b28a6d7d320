"""Exception hierarchy for settings resolution and node launch."""

from __future__ import annotations

from typing import Optional


class SearchNodeError(Exception):
    """Base class for all errors raised by :mod:`search_node`."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(SearchNodeError):
    """The property set cannot be turned into node settings."""

    def __init__(self, message: str, *, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class MissingPropertyError(ConfigurationError):
    """A mandatory property is absent (or empty where a value is required)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Property is not set: {key}", key=key)


class InvalidPropertyError(ConfigurationError):
    """A property is present but its value cannot be interpreted."""


# ---------------------------------------------------------------------------
# Launch
# ---------------------------------------------------------------------------


class LaunchError(SearchNodeError):
    """The node process cannot be started."""


class LaunchConfigError(LaunchError):
    """The launch environment is incomplete (e.g. no home directory)."""


class OptionsFileNotFoundError(LaunchError):
    """The options file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Could not find options file: {path}")
        self.path = path


class JavaNotFoundError(LaunchError):
    """No java executable could be located."""
