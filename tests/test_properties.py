"""Tests for search_node.config property set, loading and host lists."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from search_node.config.models import PropertySet
from search_node.config.properties import (
    load_properties,
    parse_host_list,
    properties_from_pairs,
)
from search_node.errors import InvalidPropertyError, MissingPropertyError


# ── PropertySet ──────────────────────────────────────────────────────────


class TestPropertySet:
    def test_absent_vs_empty(self):
        props = PropertySet.of({"a": ""})
        assert props.contains("a") is True
        assert props.value("a") == ""
        assert props.contains("b") is False
        assert props.value("b") is None
        assert props.value("b", "dflt") == "dflt"

    def test_values_coerced_to_str(self):
        props = PropertySet.of({"port": 9001, "flag": True, "off": False, "gone": None})
        assert props.value("port") == "9001"
        assert props.value("flag") == "true"
        assert props.value("off") == "false"
        assert props.contains("gone") is False

    def test_frozen(self):
        props = PropertySet.of({"a": "1"})
        with pytest.raises(ValidationError):
            props.entries = {}  # type: ignore[misc]

    def test_value_as_int(self):
        props = PropertySet.of({"port": " 9001 "})
        assert props.value_as_int("port") == 9001
        assert props.value_as_int("missing") is None

    def test_value_as_int_blank_is_none(self):
        props = PropertySet.of({"port": "", "spaces": "  "})
        assert props.value_as_int("port") is None
        assert props.value_as_int("spaces") is None

    def test_value_as_int_invalid(self):
        props = PropertySet.of({"port": "abc"})
        with pytest.raises(InvalidPropertyError) as exc_info:
            props.value_as_int("port")
        assert exc_info.value.key == "port"

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("TRUE", True), ("True", True), ("false", False),
         ("yes", False), ("", False)],
    )
    def test_value_as_bool(self, raw, expected):
        assert PropertySet.of({"k": raw}).value_as_bool("k") is expected

    def test_value_as_bool_default(self):
        assert PropertySet().value_as_bool("k") is False
        assert PropertySet().value_as_bool("k", True) is True

    def test_non_null_value(self):
        props = PropertySet.of({"home": "/srv/app", "empty": ""})
        assert props.non_null_value("home") == "/srv/app"
        assert props.non_null_value_as_path("home") == Path("/srv/app")
        with pytest.raises(MissingPropertyError):
            props.non_null_value("empty")
        with pytest.raises(MissingPropertyError) as exc_info:
            props.non_null_value("missing")
        assert "missing" in str(exc_info.value)

    def test_as_dict_is_copy(self):
        props = PropertySet.of({"a": "1"})
        d = props.as_dict()
        d["a"] = "2"
        assert props.value("a") == "1"


# ── load_properties ──────────────────────────────────────────────────────


class TestLoadProperties:
    def test_flat_keys(self, tmp_path):
        f = tmp_path / "props.yml"
        f.write_text(textwrap.dedent("""\
            sonar.search.port: 9001
            sonar.cluster.activation: true
            sonar.node.name: node-1
        """))
        props = load_properties(f)
        assert props.value("sonar.search.port") == "9001"
        assert props.value("sonar.cluster.activation") == "true"
        assert props.value("sonar.node.name") == "node-1"

    def test_nested_keys_flattened(self, tmp_path):
        f = tmp_path / "props.yml"
        f.write_text(textwrap.dedent("""\
            sonar:
              search:
                port: 9001
              path:
                home: /srv/app
        """))
        props = load_properties(f)
        assert props.value("sonar.search.port") == "9001"
        assert props.value("sonar.path.home") == "/srv/app"

    def test_empty_file(self, tmp_path):
        f = tmp_path / "props.yml"
        f.write_text("")
        assert len(load_properties(f)) == 0

    def test_non_mapping_rejected(self, tmp_path):
        f = tmp_path / "props.yml"
        f.write_text("- a\n- b\n")
        with pytest.raises(InvalidPropertyError):
            load_properties(f)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_properties(tmp_path / "nope.yml")


# ── properties_from_pairs ────────────────────────────────────────────────


class TestPropertiesFromPairs:
    def test_pairs(self):
        props = properties_from_pairs(["a=1", "b=x=y", "c="])
        assert props.value("a") == "1"
        assert props.value("b") == "x=y"
        assert props.value("c") == ""

    def test_later_overrides_earlier_and_base(self):
        base = PropertySet.of({"a": "base", "keep": "k"})
        props = properties_from_pairs(["a=1", "a=2"], base=base)
        assert props.value("a") == "2"
        assert props.value("keep") == "k"

    @pytest.mark.parametrize("bad", ["novalue", "=value"])
    def test_invalid_pair(self, bad):
        with pytest.raises(InvalidPropertyError):
            properties_from_pairs([bad])


# ── parse_host_list ──────────────────────────────────────────────────────


class TestParseHostList:
    def test_empty(self):
        assert parse_host_list("") == ()
        assert parse_host_list(None) == ()

    def test_extra_commas_and_whitespace(self):
        assert parse_host_list(" a , ,b,, c ,") == ("a", "b", "c")

    def test_duplicates_collapsed_first_position_kept(self):
        assert parse_host_list("b,a,b,a,c") == ("b", "a", "c")

    @pytest.mark.parametrize(
        "raw",
        ["h1,h1,,h2", ",,,", " h1 ,h2 ,h1", "h3,, ,h3,h4,"],
    )
    def test_no_duplicates_no_empties(self, raw):
        hosts = parse_host_list(raw)
        assert len(hosts) == len(set(hosts))
        assert all(h and h == h.strip() for h in hosts)
