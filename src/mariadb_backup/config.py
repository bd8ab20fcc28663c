"""Configuration management for the MariaDB backup plugin."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MARIADB_BACKUP_CONFIG"


def _default_config_file() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / ".cf" / "plugins" / "mariadb-backup.yaml"


def _default_cf_home() -> Path:
    return Path(os.environ.get("CF_HOME") or Path.home())


@dataclass
class PluginConfig:
    """Plugin configuration settings."""

    # cf CLI
    cf_binary: str = "cf"
    cf_home: Path = field(default_factory=_default_cf_home)
    command_timeout: float | None = None

    # Only service instances whose offering name contains this are accepted
    offering_name: str = "mariadb"

    # Output
    date_format: str = "%Y-%m-%d %H:%M:%S"
    log_level: str = "WARNING"

    config_file: Path = field(default_factory=_default_config_file)

    def __post_init__(self) -> None:
        """Convert string paths to Path objects if needed."""
        for field_name in ("cf_home", "config_file"):
            value = getattr(self, field_name)
            if isinstance(value, str):
                setattr(self, field_name, Path(value).expanduser())

    @property
    def cf_config_path(self) -> Path:
        """Location of the cf CLI's own config.json."""
        return self.cf_home / ".cf" / "config.json"

    @classmethod
    def load(cls, config_path: Path | None = None) -> "PluginConfig":
        """Load configuration from YAML file, falling back to defaults."""
        config = cls()

        if config_path is None:
            config_path = config.config_file

        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f) or {}
                config = cls._from_dict(data)
                config.config_file = config_path
            except (yaml.YAMLError, OSError, TypeError, AttributeError) as e:
                logger.warning(f"Ignoring invalid config file {config_path}: {e}")

        return config

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "PluginConfig":
        """Create config from dictionary."""
        keys = (
            "cf_binary",
            "cf_home",
            "command_timeout",
            "offering_name",
            "date_format",
            "log_level",
        )
        kwargs = {key: data[key] for key in keys if key in data}
        return cls(**kwargs)


# Global config instance (loaded lazily)
_config: PluginConfig | None = None


def get_config() -> PluginConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = PluginConfig.load()
    return _config


def reload_config(config_path: Path | None = None) -> PluginConfig:
    """Reload configuration from file."""
    global _config
    _config = PluginConfig.load(config_path)
    return _config
