"""Tests for search_node.settings.store and ResolvedSettings serialisation."""

from __future__ import annotations

import yaml

from search_node.settings.models import ResolvedSettings
from search_node.settings.store import (
    SETTINGS_FILE_NAME,
    load_settings_file,
    write_settings_file,
)


def _settings():
    return ResolvedSettings({
        "transport.tcp.port": 9001,
        "cluster.name": "sonarqube",
        "http.enabled": False,
        "index.number_of_shards": "1",
    })


class TestResolvedSettings:
    def test_mapping_behaviour(self):
        s = _settings()
        assert len(s) == 4
        assert s["transport.tcp.port"] == 9001
        assert list(s) == [
            "transport.tcp.port",
            "cluster.name",
            "http.enabled",
            "index.number_of_shards",
        ]

    def test_source_mutation_not_visible(self):
        src = {"a": "1"}
        s = ResolvedSettings(src)
        src["a"] = "2"
        assert s["a"] == "1"

    def test_yaml_sorted_and_typed(self):
        text = _settings().to_yaml()
        keys = [line.split(":")[0] for line in text.splitlines()]
        assert keys == sorted(keys)
        data = yaml.safe_load(text)
        assert data["http.enabled"] is False
        assert data["transport.tcp.port"] == 9001
        assert data["index.number_of_shards"] == "1"

    def test_str_is_yaml(self):
        assert str(_settings()) == _settings().to_yaml()


class TestWriteSettingsFile:
    def test_write_to_file(self, tmp_path):
        dest = write_settings_file(_settings(), tmp_path / "conf" / "node.yml")
        assert dest == tmp_path / "conf" / "node.yml"
        assert dest.is_file()
        assert load_settings_file(dest) == _settings()

    def test_write_into_directory(self, tmp_path):
        dest = write_settings_file(_settings(), tmp_path)
        assert dest == tmp_path / SETTINGS_FILE_NAME

    def test_deterministic(self, tmp_path):
        a = write_settings_file(_settings(), tmp_path / "a.yml").read_bytes()
        b = write_settings_file(_settings(), tmp_path / "b.yml").read_bytes()
        assert a == b
