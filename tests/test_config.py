"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest
import yaml

from agen.config import AgenConfig, config_path, load_config
from agen.errors import ConfigError


def test_missing_file_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(Path(tmpdir) / "config.yaml")
        assert config == AgenConfig()
        assert config.default_adapter == "antigravity"


def test_empty_file_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("")
        assert load_config(path) == AgenConfig()


def test_load_values():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text(yaml.dump({"default_adapter": "cursor", "catalog_source": "/srv/catalog"}))

        config = load_config(path)
        assert config.default_adapter == "cursor"
        assert config.catalog_source == "/srv/catalog"
        assert config.cache_dir == ""


def test_save_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "nested" / "config.yaml"
        original = AgenConfig(default_adapter="zed", cache_dir="/tmp/agen-cache")
        original.save(path)
        assert load_config(path) == original


def test_invalid_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("default_adapter: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)


def test_non_mapping():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)


def test_config_path_env(monkeypatch):
    monkeypatch.setenv("AGEN_CONFIG", "/etc/agen.yaml")
    assert config_path() == Path("/etc/agen.yaml")

    monkeypatch.delenv("AGEN_CONFIG")
    monkeypatch.setenv("XDG_CONFIG_HOME", "/xdg")
    assert config_path() == Path("/xdg/agen/config.yaml")


def test_cache_dir(monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", "/xdg-cache")
    assert AgenConfig().get_cache_dir() == Path("/xdg-cache/agen")
    assert AgenConfig(cache_dir="/custom").get_cache_dir() == Path("/custom")
