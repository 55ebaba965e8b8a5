"""Configuration for kbview stored in YAML files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml

from kbview.backends.local_api import DEFAULT_API_URL, DEFAULT_API_VERSION, MAX_LIMIT

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".kbview"
CONFIG_FILE_NAME = "config.yaml"

SORT_FIELDS = ("created_date", "last_modified_date", "last_opened_date", "name")

DEFAULTS: dict[str, Any] = {
    "api.url": DEFAULT_API_URL,
    "api.version": DEFAULT_API_VERSION,
    "api.limit": 100,
    "sort": "last_modified_date",
}


@dataclass(frozen=True)
class ApiSettings:
    """Settings needed to talk to the REST API."""

    url: str
    key: str | None
    version: str
    gateway: str | None
    limit: int


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


class Config:
    """Configuration backed by a YAML file.

    A local config in ``.kbview/config.yaml`` under the working directory falls
    back to the global ``~/.kbview/config.yaml``. Unset known keys fall back to
    built-in defaults.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            use_global: Read and write the global config only
            config_dir: Directory holding the config file (overrides use_global)
        """
        self.is_global = use_global
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        elif use_global:
            self.config_dir = Path.home() / CONFIG_DIR_NAME
        else:
            self.config_dir = Path.cwd() / CONFIG_DIR_NAME
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: dict[str, Any] = self._load()
        self._global_config: dict[str, Any] = {}

        global_file = Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if not self.is_global and global_file.exists() and global_file != self.config_file:
            try:
                self._global_config = _read_yaml(global_file)
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    def _load(self) -> dict[str, Any]:
        if not self.config_file.exists():
            logger.debug("Config file does not exist, starting empty")
            return {}
        try:
            config = _read_yaml(self.config_file)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", error=str(e))
            raise ValueError(f"Failed to load config from {self.config_file}: {e}") from e
        logger.debug("Config loaded", keys=list(config.keys()))
        return config

    def _save(self) -> None:
        try:
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e
        logger.debug("Config saved")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from local config, then global config, then built-in defaults."""
        if key in self._config:
            return self._config[key]
        if key in self._global_config:
            return self._global_config[key]
        if default is None:
            return DEFAULTS.get(key)
        return default

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self.get(key, default)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Config value {key} must be an integer, got {value!r}") from e

    def set(self, key: str, value: str) -> None:
        if key == "sort" and value not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {value!r}. Expected one of {', '.join(SORT_FIELDS)}")
        logger.debug("Setting config value", key=key)
        self._config[key] = value
        self._save()

    def unset(self, key: str) -> None:
        logger.debug("Unsetting config value", key=key)
        if key in self._config:
            del self._config[key]
            self._save()

    def list(self) -> dict[str, Any]:
        """All explicitly set values, local values taking precedence."""
        merged = dict(self._global_config)
        merged.update(self._config)
        return merged

    def api_settings(self) -> ApiSettings:
        limit = self.get_int("api.limit") or DEFAULTS["api.limit"]
        return ApiSettings(
            url=self.get("api.url"),
            key=self.get("api.key"),
            version=self.get("api.version"),
            gateway=self.get("api.gateway"),
            limit=max(1, min(limit, MAX_LIMIT)),
        )


def get_config(use_global: bool = False) -> Config:
    return Config(use_global=use_global)
