"""Host properties and launch environment configuration."""

from search_node.config.models import (
    DEFAULT_MAIN_CLASS,
    LaunchConfig,
    PropertySet,
    resolve_java,
)
from search_node.config.properties import (
    load_properties,
    parse_host_list,
    properties_from_pairs,
)

__all__ = [
    "DEFAULT_MAIN_CLASS",
    "LaunchConfig",
    "PropertySet",
    "load_properties",
    "parse_host_list",
    "properties_from_pairs",
    "resolve_java",
]
