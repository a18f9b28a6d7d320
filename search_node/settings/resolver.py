"""Host properties → search engine node settings.

Builds the node configuration in successive stages, each writing into a
shared builder dict:

1. File system layout (data, work/plugins, logs)
2. Storage tuning
3. Native script registration
4. Network binding
5. Cluster formation
6. Monitoring export

:class:`SettingsResolver` raises :class:`~search_node.errors.ConfigurationError`
subclasses; :func:`resolve_settings` wraps it into a typed
:class:`~search_node.settings.models.ResolutionResult`.
"""

from __future__ import annotations

import logging
import os
import socket
import time
from typing import Any, Callable, Dict, Optional, Tuple

from search_node.config.models import PropertySet
from search_node.config.properties import parse_host_list
from search_node.errors import ConfigurationError, MissingPropertyError
from search_node.settings.models import (
    ResolutionError,
    ResolutionErrorKind,
    ResolutionResult,
    ResolvedSettings,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Property keys
# ---------------------------------------------------------------------------

#: Set by the supervising process, so it is never absent in a sane setup.
PROP_TCP_PORT: str = "sonar.search.port"

PROP_CLUSTER_ACTIVATION: str = "sonar.cluster.activation"
PROP_NODE_NAME: str = "sonar.node.name"
PROP_CLUSTER_NAME: str = "sonar.cluster.name"
PROP_CLUSTER_MASTER: str = "sonar.cluster.master"
PROP_MARVEL: str = "sonar.search.marvel"

PATH_HOME: str = "sonar.path.home"
PATH_DATA: str = "sonar.path.data"
PATH_TEMP: str = "sonar.path.temp"
PATH_LOG: str = "sonar.path.log"

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Engine-specific data subdirectory under the data root.
ENGINE_DIR_NAME: str = "es"

#: Name under which the list-update native script is registered.
LIST_UPDATE_SCRIPT: str = "listUpdate"

#: Engine-side factory implementing :data:`LIST_UPDATE_SCRIPT`.
LIST_UPDATE_SCRIPT_FACTORY: str = (
    "org.sonar.search.script.ListUpdate$UpdateListScriptFactory"
)

#: Monitoring indices the engine may create on demand.
MARVEL_INDEX_PATTERN: str = ".marvel-*"

#: ``node.rack_id`` when no node name is configured.
UNKNOWN_RACK_ID: str = "unknown"

#: Prefix of the synthetic node name used when the hostname is unavailable.
FALLBACK_NODE_NAME_PREFIX: str = "sq-"

MAX_MERGE_THREADS: int = 3


def merge_thread_count(cpu_count: Optional[int]) -> int:
    """Half the processors, clamped to ``[1, MAX_MERGE_THREADS]``."""
    return max(1, min(MAX_MERGE_THREADS, (cpu_count or 1) // 2))


def _dir(path: str) -> str:
    """Absolute directory path with a trailing separator."""
    return os.path.join(os.path.abspath(path), "")


def resolve_local_hostname() -> str:
    """Return the local host name once it resolves to an address.

    Raises :class:`OSError` (``socket.gaierror``) when the name does not
    resolve, e.g. on a host without DNS.
    """
    hostname = socket.gethostname()
    socket.getaddrinfo(hostname, None)
    return hostname


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class SettingsResolver:
    """Maps a :class:`PropertySet` onto engine settings.

    The port, cluster name and cluster master list are read on construction;
    a missing port raises :class:`MissingPropertyError` before any setting is
    built.  An absent cluster name leaves ``cluster.name`` unset.

    The ``_cpu_count_fn``, ``_hostname_fn`` and ``_clock_fn`` parameters are
    for test injection.
    """

    def __init__(
        self,
        props: PropertySet,
        *,
        _cpu_count_fn: Optional[Callable[[], Optional[int]]] = None,
        _hostname_fn: Optional[Callable[[], str]] = None,
        _clock_fn: Optional[Callable[[], float]] = None,
    ) -> None:
        self._props = props
        self._cpu_count = _cpu_count_fn or os.cpu_count
        self._hostname = _hostname_fn or resolve_local_hostname
        self._clock = _clock_fn or time.time

        self.cluster_nodes: Tuple[str, ...] = parse_host_list(
            props.value(PROP_CLUSTER_MASTER, "")
        )
        self.cluster_name: Optional[str] = props.value(PROP_CLUSTER_NAME)
        self.fallback_node_name: bool = False
        port = props.value_as_int(PROP_TCP_PORT)
        if port is None:
            raise MissingPropertyError(PROP_TCP_PORT)
        self.tcp_port: int = port

    def in_cluster(self) -> bool:
        return bool(self.cluster_nodes)

    def build(self) -> ResolvedSettings:
        builder: Dict[str, Any] = {}
        self._configure_file_system(builder)
        self._configure_storage(builder)
        self._configure_plugins(builder)
        self._configure_network(builder)
        self._configure_cluster(builder)
        self._configure_marvel(builder)
        settings = ResolvedSettings(builder)
        logger.info("Resolved search node settings:\n%s", settings.to_yaml())
        return settings

    # -- stages --------------------------------------------------------------

    def _configure_file_system(self, builder: Dict[str, Any]) -> None:
        home = str(self._props.non_null_value_as_path(PATH_HOME))

        data_path = self._props.value(PATH_DATA)
        if data_path:
            data_dir = os.path.join(data_path, ENGINE_DIR_NAME)
        else:
            data_dir = os.path.join(home, "data", ENGINE_DIR_NAME)
        builder["path.data"] = _dir(data_dir)

        # the working dir is also where plugins are loaded from
        work_dir = self._props.value(PATH_TEMP) or os.path.join(home, "temp")
        builder["path.work"] = _dir(work_dir)
        builder["path.plugins"] = _dir(work_dir)

        log_dir = self._props.value(PATH_LOG) or os.path.join(home, "log")
        builder["path.logs"] = _dir(log_dir)

    def _configure_storage(self, builder: Dict[str, Any]) -> None:
        builder["index.number_of_shards"] = "1"
        builder["index.refresh_interval"] = "30s"
        builder["index.store.type"] = "mmapfs"
        builder["indices.store.throttle.type"] = "none"
        builder["index.merge.scheduler.max_thread_count"] = merge_thread_count(
            self._cpu_count()
        )

    def _configure_plugins(self, builder: Dict[str, Any]) -> None:
        builder["script.default_lang"] = "native"
        builder[f"script.native.{LIST_UPDATE_SCRIPT}.type"] = LIST_UPDATE_SCRIPT_FACTORY

    def _configure_network(self, builder: Dict[str, Any]) -> None:
        builder["discovery.zen.ping.multicast.enabled"] = "false"
        builder["transport.tcp.port"] = self.tcp_port
        builder["http.enabled"] = False

    def _configure_cluster(self, builder: Dict[str, Any]) -> None:
        if self.cluster_nodes:
            logger.info("Joining cluster with master: %s", list(self.cluster_nodes))
            builder["discovery.zen.ping.unicast.hosts"] = ",".join(self.cluster_nodes)
            builder["node.master"] = False
            # Intended as N/2+1; the cluster size is not known here, so this
            # stays at 1.
            builder["discovery.zen.minimum_master_nodes"] = 1

        # Replicas only when the node runs as part of an activated cluster
        activated = self._props.value_as_bool(PROP_CLUSTER_ACTIVATION, False)
        builder["index.number_of_replicas"] = 1 if activated else 0

        # absent lets the engine pick its default cluster name
        if self.cluster_name is not None:
            builder["cluster.name"] = self.cluster_name
        builder["node.rack_id"] = self._props.value(PROP_NODE_NAME, UNKNOWN_RACK_ID)
        if self._props.contains(PROP_NODE_NAME):
            builder["node.name"] = self._props.value(PROP_NODE_NAME)
        else:
            builder["node.name"] = self._local_node_name()

    def _configure_marvel(self, builder: Dict[str, Any]) -> None:
        marvels = sorted(set(parse_host_list(self._props.value(PROP_MARVEL, ""))))

        builder["action.auto_create_index"] = MARVEL_INDEX_PATTERN
        if marvels:
            builder["marvel.agent.exporter.es.hosts"] = ",".join(marvels)

    # -- helpers -------------------------------------------------------------

    def _local_node_name(self) -> str:
        try:
            hostname = self._hostname()
        except OSError as exc:
            logger.warning("Could not determine hostname: %s", exc)
            hostname = ""
        if hostname:
            return hostname
        self.fallback_node_name = True
        return f"{FALLBACK_NODE_NAME_PREFIX}{int(self._clock() * 1000)}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_settings(props: PropertySet, **hooks: Any) -> ResolutionResult:
    """Resolve *props* into node settings without raising.

    A missing port yields :attr:`ResolutionErrorKind.MISSING_PORT`; every
    other :class:`ConfigurationError` yields
    :attr:`ResolutionErrorKind.INVALID_PROPERTY`.  On failure no settings
    are returned.  *hooks* are forwarded to :class:`SettingsResolver`.
    """
    try:
        resolver = SettingsResolver(props, **hooks)
        settings = resolver.build()
    except MissingPropertyError as exc:
        kind = (
            ResolutionErrorKind.MISSING_PORT
            if exc.key == PROP_TCP_PORT
            else ResolutionErrorKind.INVALID_PROPERTY
        )
        logger.error("Settings resolution failed: %s", exc)
        return ResolutionResult(error=ResolutionError(kind, str(exc), exc.key))
    except ConfigurationError as exc:
        logger.error("Settings resolution failed: %s", exc)
        return ResolutionResult(
            error=ResolutionError(
                ResolutionErrorKind.INVALID_PROPERTY, str(exc), exc.key
            )
        )

    return ResolutionResult(
        settings=settings,
        tcp_port=resolver.tcp_port,
        cluster_name=resolver.cluster_name,
        cluster_nodes=resolver.cluster_nodes,
        fallback_node_name=resolver.fallback_node_name,
    )
