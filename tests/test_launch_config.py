"""Tests for LaunchConfig.from_environ and java resolution."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest
from pydantic import ValidationError

from search_node.config.models import (
    DEFAULT_MAIN_CLASS,
    LaunchConfig,
    resolve_java,
)
from search_node.errors import JavaNotFoundError, LaunchConfigError


def _env(**extra):
    env = {"ES_HOME": "/opt/es", "JAVA_HOME": "/opt/jdk"}
    env.update(extra)
    return env


class TestFromEnviron:
    def test_defaults_derived_from_home(self):
        cfg = LaunchConfig.from_environ(_env())
        assert cfg.home == Path("/opt/es")
        assert cfg.conf_dir == Path("/opt/es/config")
        assert cfg.options_file == Path("/opt/es/config/jvm.options")
        assert cfg.classpath == "/opt/es/lib/*"
        assert cfg.java == "/opt/jdk/bin/java"
        assert cfg.main_class == DEFAULT_MAIN_CLASS
        assert cfg.distribution_flavor == "oss"
        assert cfg.distribution_type == "tar"
        assert cfg.extra_java_opts == ()
        assert cfg.grace_period == 0.0

    def test_overrides(self):
        cfg = LaunchConfig.from_environ(_env(
            ES_PATH_CONF="/etc/es",
            ES_JVM_OPTIONS="/etc/es/custom.options",
            ES_CLASSPATH="/opt/es/lib/a.jar",
            ES_JAVA_OPTS="-Xmx2g -Dname='a b'",
            ES_DISTRIBUTION_FLAVOR="default",
            ES_DISTRIBUTION_TYPE="deb",
            ES_STARTUP_SLEEP_TIME="5",
        ))
        assert cfg.conf_dir == Path("/etc/es")
        assert cfg.options_file == Path("/etc/es/custom.options")
        assert cfg.classpath == "/opt/es/lib/a.jar"
        assert cfg.extra_java_opts == ("-Xmx2g", "-Dname=a b")
        assert cfg.distribution_flavor == "default"
        assert cfg.distribution_type == "deb"
        assert cfg.grace_period == 5.0

    def test_options_file_follows_conf_dir(self):
        cfg = LaunchConfig.from_environ(_env(ES_PATH_CONF="/etc/es"))
        assert cfg.options_file == Path("/etc/es/jvm.options")

    def test_missing_home(self):
        with pytest.raises(LaunchConfigError):
            LaunchConfig.from_environ({"JAVA_HOME": "/opt/jdk"})

    def test_bad_sleep_time(self):
        with pytest.raises(LaunchConfigError):
            LaunchConfig.from_environ(_env(ES_STARTUP_SLEEP_TIME="soon"))

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("ES_HOME", "/from/env")
        monkeypatch.setenv("JAVA_HOME", "/opt/jdk")
        monkeypatch.delenv("ES_PATH_CONF", raising=False)
        assert LaunchConfig.from_environ().home == Path("/from/env")

    def test_system_properties(self):
        cfg = LaunchConfig.from_environ(_env())
        assert cfg.system_properties() == [
            "-Des.path.home=/opt/es",
            "-Des.path.conf=/opt/es/config",
            "-Des.distribution.flavor=oss",
            "-Des.distribution.type=tar",
        ]

    def test_frozen(self):
        cfg = LaunchConfig.from_environ(_env())
        with pytest.raises(ValidationError):
            cfg.java = "other"  # type: ignore[misc]

    def test_negative_grace_period_rejected(self):
        with pytest.raises(LaunchConfigError):
            LaunchConfig.from_environ(_env(ES_STARTUP_SLEEP_TIME="-1"))


class TestResolveJava:
    def test_java_home(self):
        assert resolve_java("/opt/jdk") == "/opt/jdk/bin/java"

    def test_java_on_path(self, tmp_path):
        java = tmp_path / "java"
        java.write_text("#!/bin/sh\n")
        java.chmod(java.stat().st_mode | stat.S_IXUSR)
        assert resolve_java(None, str(tmp_path)) == str(java)

    def test_not_found(self, tmp_path):
        with pytest.raises(JavaNotFoundError):
            resolve_java(None, str(tmp_path))

    def test_from_environ_without_java(self, tmp_path):
        with pytest.raises(JavaNotFoundError):
            LaunchConfig.from_environ({"ES_HOME": "/opt/es", "PATH": str(tmp_path)})
