"""Persist resolved settings for the engine's own bootstrap.

The file is YAML with **sorted keys** so repeated launches with the same
properties produce byte-identical output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from search_node.settings.models import ResolvedSettings

logger = logging.getLogger(__name__)

#: File name the engine reads from its config directory.
SETTINGS_FILE_NAME: str = "elasticsearch.yml"


def write_settings_file(settings: ResolvedSettings, path: str | Path) -> Path:
    """Write *settings* to *path* and return the written path.

    When *path* is an existing directory, :data:`SETTINGS_FILE_NAME` is
    written inside it.  Parent directories are created as needed.
    """
    dest = Path(path)
    if dest.is_dir():
        dest = dest / SETTINGS_FILE_NAME
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(settings.to_yaml(), encoding="utf-8")
    logger.info("Settings written to %s", dest)
    return dest


def load_settings_file(path: str | Path) -> ResolvedSettings:
    """Read back a file written by :func:`write_settings_file`."""
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    return ResolvedSettings(data)
