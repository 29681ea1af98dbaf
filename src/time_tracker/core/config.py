"""Configuration management for Time Tracker."""

import copy
import logging
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]
from jsonschema import ValidationError, validate  # type: ignore[import-untyped]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigManager:
    """Manage application configuration."""

    DEFAULT_CONFIG = {
        "version": "1.0",
        "general": {
            "data_dir": "~/.time-tracker",
            "database_file": "timetracker.sqlite3",
        },
        "advanced": {
            "log_level": "INFO",
        },
        "api": {
            "host": "127.0.0.1",
            "port": 5540,
            "cors": {
                "enabled": False,
                "origins": ["http://localhost:3000"],
            },
            "advanced": {
                "reload": False,
                "log_level": "info",
                "access_log": True,
            },
        },
    }

    CONFIG_SCHEMA = {
        "type": "object",
        "properties": {
            "version": {"type": "string"},
            "general": {
                "type": "object",
                "properties": {
                    "data_dir": {"type": "string"},
                    "database_file": {"type": "string", "minLength": 1},
                },
            },
            "advanced": {
                "type": "object",
                "properties": {
                    "log_level": {
                        "type": "string",
                        "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
                    },
                },
            },
            "api": {
                "type": "object",
                "properties": {
                    "host": {"type": "string"},
                    "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                    "cors": {
                        "type": "object",
                        "properties": {
                            "enabled": {"type": "boolean"},
                            "origins": {
                                "type": "array",
                                "items": {"type": "string"},
                            },
                        },
                    },
                    "advanced": {
                        "type": "object",
                        "properties": {
                            "reload": {"type": "boolean"},
                            "log_level": {"type": "string"},
                            "access_log": {"type": "boolean"},
                        },
                    },
                },
            },
        },
        "required": ["version"],
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. Defaults to ~/.time-tracker/config.yml
        """
        self.config_path = config_path or Path.home() / ".time-tracker" / "config.yml"
        self._config: dict[str, Any] = {}
        self._load_or_create()

    def _load_or_create(self) -> None:
        """Load the config file, writing defaults when it is missing.

        Raises:
            ValueError: If the file is invalid. It is moved aside to
                ``config.yml.backup`` and replaced with defaults first.
        """
        if not self.config_path.exists():
            self.reset()
            return

        with open(self.config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}

        self._config = _merged(self.DEFAULT_CONFIG, loaded)
        try:
            self.validate()
        except ValueError as e:
            backup_path = self.config_path.with_suffix(".yml.backup")
            self.config_path.replace(backup_path)
            self.reset()
            raise ValueError(f"{e}. Moved the file to {backup_path} and restored defaults.")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'api.port')
            default: Value returned when the key is missing or null

        Example:
            >>> config.get('api.port')
            5540
            >>> config.get('general.missing', 'fallback')
            'fallback'
        """
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or node.get(part) is None:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation and save the file.

        Raises:
            ValueError: If the resulting configuration is invalid. Nothing is
                saved in that case.
        """
        *parents, leaf = key.split(".")
        updated = copy.deepcopy(self._config)
        node = updated
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

        _check(updated, self.CONFIG_SCHEMA)
        self._config = updated
        self.save()

    def validate(self) -> bool:
        """Validate configuration against schema.

        Raises:
            ValueError: If configuration is invalid
        """
        _check(self._config, self.CONFIG_SCHEMA)
        return True

    def save(self) -> None:
        """Write the configuration to its YAML file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            yaml.safe_dump(self._config, sort_keys=False, allow_unicode=True), encoding="utf-8"
        )

    def reset(self) -> None:
        """Replace the configuration with defaults and save it."""
        self._config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.save()

    def to_dict(self) -> dict[str, Any]:
        """Get a copy of the full configuration."""
        return copy.deepcopy(self._config)

    def database_path(self) -> Optional[Path]:
        """Resolve the database file location.

        Returns:
            Path of the SQLite file, or None for an in-memory database
        """
        database_file = self.get("general.database_file", "timetracker.sqlite3")
        if database_file == ":memory:":
            return None
        path = Path(database_file).expanduser()
        if not path.is_absolute():
            path = Path(self.get("general.data_dir", "~/.time-tracker")).expanduser() / path
        return path

    def database_url(self) -> str:
        """Get the SQLAlchemy URL of the database.

        Creates the data directory if it does not exist yet.
        """
        path = self.database_path()
        if path is None:
            return "sqlite://"
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{path}"


def configure_logging(config: ConfigManager) -> None:
    """Send log records to stderr at the configured level.

    Args:
        config: Configuration manager providing ``advanced.log_level``
    """
    log_level = getattr(logging, config.get("advanced.log_level", "INFO"))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)


def _merged(defaults: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return defaults with override applied recursively."""
    result = copy.deepcopy(defaults)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _merged(result[key], value)
        else:
            result[key] = value
    return result


def _check(config: dict[str, Any], schema: dict[str, Any]) -> None:
    try:
        validate(instance=config, schema=schema)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e.message}")
