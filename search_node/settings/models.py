"""Resolved node settings and the typed resolution outcome."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml

SettingValue = Union[str, int, bool]


class ResolvedSettings(Mapping[str, SettingValue]):
    """Frozen engine configuration produced by the settings resolver.

    Iteration follows the order in which the configuration stages wrote
    their keys; :meth:`to_yaml` sorts keys for stable output.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, SettingValue]) -> None:
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> SettingValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ResolvedSettings({dict(self._values)!r})"

    def __str__(self) -> str:
        return self.to_yaml()

    def to_dict(self) -> Dict[str, SettingValue]:
        return dict(self._values)

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            self.to_dict(), default_flow_style=False, sort_keys=True
        )


# ---------------------------------------------------------------------------
# Resolution outcome
# ---------------------------------------------------------------------------


class ResolutionErrorKind(str, Enum):
    """Why resolution failed."""

    # The port is injected by the supervising process, so its absence is an
    # integration fault rather than user misconfiguration.
    MISSING_PORT = "MISSING_PORT"
    INVALID_PROPERTY = "INVALID_PROPERTY"


@dataclass(frozen=True)
class ResolutionError:
    kind: ResolutionErrorKind
    message: str
    key: Optional[str] = None


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of :func:`~search_node.settings.resolver.resolve_settings`.

    Exactly one of *settings* and *error* is set.  The derived scalars are
    only populated on success.
    """

    settings: Optional[ResolvedSettings] = None
    error: Optional[ResolutionError] = None
    tcp_port: Optional[int] = None
    cluster_name: Optional[str] = None
    cluster_nodes: Tuple[str, ...] = ()
    #: ``node.name`` is the synthetic ``sq-<millis>`` name.
    fallback_node_name: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and self.settings is not None

    @property
    def in_cluster(self) -> bool:
        return bool(self.cluster_nodes)
