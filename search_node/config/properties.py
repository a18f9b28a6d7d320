"""Property loading and value parsing helpers.

- :func:`load_properties`: parse a YAML file into a :class:`PropertySet`
- :func:`properties_from_pairs`: parse ``key=value`` strings (CLI ``-p``)
- :func:`parse_host_list`: split a comma-separated host list
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml

from search_node.config.models import PropertySet
from search_node.errors import InvalidPropertyError


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Collapse nested mappings into dotted keys (``a: {b: 1}`` → ``a.b``)."""
    flat: Dict[str, Any] = {}
    for key, val in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(val, dict):
            flat.update(_flatten(val, prefix=f"{dotted}."))
        else:
            flat[dotted] = val
    return flat


def load_properties(path: str | Path) -> PropertySet:
    """Load a YAML mapping of host properties.

    Nested mappings are flattened to dotted keys so both
    ``sonar.search.port: 9001`` and the nested form are accepted.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise InvalidPropertyError(f"Properties file must contain a mapping: {path}")
    return PropertySet.of(_flatten(raw))


def properties_from_pairs(
    pairs: Iterable[str],
    base: Optional[PropertySet] = None,
) -> PropertySet:
    """Build a property set from ``key=value`` strings.

    Later pairs override earlier ones and anything in *base*.
    """
    merged: Dict[str, str] = base.as_dict() if base is not None else {}
    for pair in pairs:
        key, sep, val = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidPropertyError(f"Expected key=value, got: {pair!r}")
        merged[key] = val
    return PropertySet.of(merged)


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def parse_host_list(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated host list.

    Entries are stripped; empty entries and duplicates are dropped, keeping
    the first occurrence's position.
    """
    hosts: Dict[str, None] = {}
    for item in (value or "").split(","):
        item = item.strip()
        if item:
            hosts.setdefault(item, None)
    return tuple(hosts)
