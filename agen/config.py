"""User configuration — defaults for destination, catalog source and cache location.

Read from ``$AGEN_CONFIG`` or ``$XDG_CONFIG_HOME/agen/config.yaml``. A missing
file means defaults; nothing is written until :meth:`AgenConfig.save`.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path

import yaml

from agen.errors import ConfigError

CONFIG_ENV = "AGEN_CONFIG"
CONFIG_FILE = "config.yaml"


@dataclass
class AgenConfig:
    """Global agen settings."""

    default_adapter: str = "antigravity"  # Used when no destination is detected
    catalog_source: str = ""  # Directory or zip archive; empty = embedded bundle
    cache_dir: str = ""  # Empty = platform cache directory

    def get_cache_dir(self) -> Path:
        if self.cache_dir:
            return Path(self.cache_dir).expanduser()
        base = os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache"
        return Path(base) / "agen"

    def save(self, path: str | Path | None = None) -> Path:
        target = Path(path) if path else config_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            yaml.safe_dump(asdict(self), f, default_flow_style=False, sort_keys=False)
        return target


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "agen" / CONFIG_FILE


def load_config(path: str | Path | None = None) -> AgenConfig:
    """Load the configuration file, or defaults if it does not exist."""
    source = Path(path) if path else config_path()
    if not source.exists():
        return AgenConfig()

    try:
        with open(source, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {source}: {e}") from e

    if data is None:
        return AgenConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {source} must be a mapping, got {type(data).__name__}")

    defaults = AgenConfig()
    return AgenConfig(
        default_adapter=str(data.get("default_adapter") or defaults.default_adapter),
        catalog_source=str(data.get("catalog_source") or ""),
        cache_dir=str(data.get("cache_dir") or ""),
    )
