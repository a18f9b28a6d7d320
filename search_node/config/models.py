"""Pydantic models for host properties and the launch environment.

Defines the data structures for:
- The host application's property set (immutable key/value strings)
- The launch configuration built once at process entry
"""

from __future__ import annotations

import os
import shlex
import shutil
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from search_node.errors import (
    InvalidPropertyError,
    JavaNotFoundError,
    LaunchConfigError,
    MissingPropertyError,
)


class PropertySet(BaseModel):
    """Immutable mapping of host property keys to string values.

    Lookups distinguish an absent key (``value`` returns the default) from a
    key set to the empty string (``value`` returns ``""``).
    """

    model_config = ConfigDict(frozen=True)

    entries: Dict[str, str] = Field(default_factory=dict)

    @field_validator("entries", mode="before")
    @classmethod
    def _coerce_entries(cls, data: Any) -> Any:
        """Stringify values: null → dropped, True/False → 'true'/'false'."""
        if not isinstance(data, Mapping):
            return data
        coerced: Dict[str, str] = {}
        for key, val in data.items():
            if val is None:
                continue
            if isinstance(val, bool):
                coerced[str(key)] = "true" if val else "false"
            else:
                coerced[str(key)] = str(val)
        return coerced

    @classmethod
    def of(cls, mapping: Optional[Mapping[str, Any]] = None) -> "PropertySet":
        """Build a property set from a plain mapping."""
        return cls(entries=dict(mapping or {}))

    # -- lookups -------------------------------------------------------------

    def contains(self, key: str) -> bool:
        return key in self.entries

    def value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the raw value of *key*, or *default* when absent."""
        return self.entries.get(key, default)

    def non_null_value(self, key: str) -> str:
        """Return the value of *key*; absent or empty raises MissingPropertyError."""
        val = self.entries.get(key)
        if not val:
            raise MissingPropertyError(key)
        return val

    def non_null_value_as_path(self, key: str) -> Path:
        return Path(self.non_null_value(key))

    def value_as_int(self, key: str) -> Optional[int]:
        """Return *key* as an int, ``None`` when absent or blank.

        Raises :class:`InvalidPropertyError` when the value is not an integer.
        """
        val = self.entries.get(key)
        if val is None or not val.strip():
            return None
        try:
            return int(val.strip())
        except ValueError:
            raise InvalidPropertyError(
                f"Value of property {key} is not an integer: {val!r}", key=key
            ) from None

    def value_as_bool(self, key: str, default: bool = False) -> bool:
        """Return *key* as a bool; only ``true`` (any case) is truthy."""
        val = self.entries.get(key)
        if val is None:
            return default
        return val.strip().lower() == "true"

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Launch environment
# ---------------------------------------------------------------------------

#: Engine entry point handed to the JVM.
DEFAULT_MAIN_CLASS: str = "org.elasticsearch.bootstrap.Elasticsearch"

DEFAULT_DISTRIBUTION_FLAVOR: str = "oss"
DEFAULT_DISTRIBUTION_TYPE: str = "tar"


class LaunchConfig(BaseModel):
    """Everything the launcher needs, resolved once at process entry.

    :meth:`from_environ` is the only place environment variables are read;
    the launcher itself receives this object and never consults ``os.environ``.
    """

    model_config = ConfigDict(frozen=True)

    home: Path
    conf_dir: Path
    options_file: Path
    java: str
    classpath: str
    main_class: str = DEFAULT_MAIN_CLASS
    distribution_flavor: str = DEFAULT_DISTRIBUTION_FLAVOR
    distribution_type: str = DEFAULT_DISTRIBUTION_TYPE
    extra_java_opts: Tuple[str, ...] = ()
    grace_period: float = Field(default=0.0, ge=0.0)

    def system_properties(self) -> List[str]:
        """Engine system properties passed ahead of the classpath."""
        return [
            f"-Des.path.home={self.home}",
            f"-Des.path.conf={self.conf_dir}",
            f"-Des.distribution.flavor={self.distribution_flavor}",
            f"-Des.distribution.type={self.distribution_type}",
        ]

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "LaunchConfig":
        """Build a :class:`LaunchConfig` from ``ES_*`` environment variables.

        ``ES_HOME`` is required.  Everything else has a default derived from
        it: ``ES_PATH_CONF`` → ``<home>/config``, ``ES_JVM_OPTIONS`` →
        ``<conf>/jvm.options``, ``ES_CLASSPATH`` → ``<home>/lib/*``.
        """
        env = dict(os.environ if environ is None else environ)

        home_raw = env.get("ES_HOME", "")
        if not home_raw:
            raise LaunchConfigError("ES_HOME is not set")
        home = Path(home_raw)

        conf_dir = Path(env.get("ES_PATH_CONF") or home / "config")
        options_file = Path(env.get("ES_JVM_OPTIONS") or conf_dir / "jvm.options")
        classpath = env.get("ES_CLASSPATH") or str(home / "lib" / "*")

        sleep_raw = env.get("ES_STARTUP_SLEEP_TIME", "").strip()
        try:
            grace_period = float(sleep_raw) if sleep_raw else 0.0
        except ValueError:
            raise LaunchConfigError(
                f"ES_STARTUP_SLEEP_TIME is not a number: {sleep_raw!r}"
            ) from None
        if grace_period < 0:
            raise LaunchConfigError("ES_STARTUP_SLEEP_TIME must not be negative")

        return cls(
            home=home,
            conf_dir=conf_dir,
            options_file=options_file,
            java=resolve_java(env.get("JAVA_HOME"), env.get("PATH")),
            classpath=classpath,
            distribution_flavor=env.get("ES_DISTRIBUTION_FLAVOR") or DEFAULT_DISTRIBUTION_FLAVOR,
            distribution_type=env.get("ES_DISTRIBUTION_TYPE") or DEFAULT_DISTRIBUTION_TYPE,
            extra_java_opts=tuple(shlex.split(env.get("ES_JAVA_OPTS", ""))),
            grace_period=grace_period,
        )


def resolve_java(java_home: Optional[str], search_path: Optional[str] = None) -> str:
    """Return the java executable: ``$JAVA_HOME/bin/java``, else ``java`` on PATH."""
    if java_home:
        return str(Path(java_home) / "bin" / "java")
    found = shutil.which("java", path=search_path)
    if not found:
        raise JavaNotFoundError(
            "Could not find any executable java binary. "
            "Please install java in your PATH or set JAVA_HOME"
        )
    return found
