"""Settings resolution: host properties → engine node configuration."""

from search_node.settings.models import (
    ResolutionError,
    ResolutionErrorKind,
    ResolutionResult,
    ResolvedSettings,
)
from search_node.settings.resolver import (
    PROP_CLUSTER_ACTIVATION,
    PROP_CLUSTER_MASTER,
    PROP_CLUSTER_NAME,
    PROP_MARVEL,
    PROP_NODE_NAME,
    PROP_TCP_PORT,
    SettingsResolver,
    merge_thread_count,
    resolve_settings,
)
from search_node.settings.store import load_settings_file, write_settings_file

__all__ = [
    "PROP_CLUSTER_ACTIVATION",
    "PROP_CLUSTER_MASTER",
    "PROP_CLUSTER_NAME",
    "PROP_MARVEL",
    "PROP_NODE_NAME",
    "PROP_TCP_PORT",
    "ResolutionError",
    "ResolutionErrorKind",
    "ResolutionResult",
    "ResolvedSettings",
    "SettingsResolver",
    "load_settings_file",
    "merge_thread_count",
    "resolve_settings",
    "write_settings_file",
]
