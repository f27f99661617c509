"""Configuration manager for persistent settings stored as JSON."""

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import (
    CatchViewError,
    ConfigurationError,
    FileSystemError,
    InvalidConfigError,
    MissingConfigError,
)
from .logging import get_logger
from .paths import CONFIG_PATH

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:8025"
DEFAULT_POLL_INTERVAL = 10.0  # in seconds


class ServerConfig(BaseModel):
    """Pydantic model for the mail backend connection."""

    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None  # in seconds, None waits forever

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive")
        return value


class ViewerConfig(BaseModel):
    """Pydantic model for viewer behaviour."""

    poll_interval: float = DEFAULT_POLL_INTERVAL

    @field_validator("poll_interval")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("poll_interval must be positive")
        return value


class LoggingConfig(BaseModel):
    """Pydantic model for logging settings."""

    log_level: str = "INFO"
    max_file_size: int = 5_242_880  # 5 MB
    backup_count: int = 5


class AppConfig(BaseModel):
    """Pydantic model for overall application configuration."""

    version: str = "0.1.0"
    server: ServerConfig = Field(default_factory=ServerConfig)
    viewer: ViewerConfig = Field(default_factory=ViewerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages persistent application configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        self.path = Path(config_path) if config_path else CONFIG_PATH
        self.config = self._load_or_create_config()
        logger.info(f"Configuration loaded from {self.path}")

    def _load_or_create_config(self) -> AppConfig:
        """Load configuration from file or create default if not present."""

        if not self.path.exists():
            logger.info("No config file found, creating default configuration.")
            config = AppConfig()
            self._save_config(config)
            return config

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = AppConfig(**data)
            logger.debug("Configuration successfully loaded and validated.")
            return config

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise InvalidConfigError(f"Configuration file is not valid JSON: {str(e)}") from e
        except ValidationError as e:
            logger.error(f"Failed to validate config file: {e}")
            raise InvalidConfigError(f"Configuration data does not match expected schema: {str(e)}") from e
        except OSError as e:
            raise FileSystemError(f"Failed to read configuration file: {self.path}") from e
        except TypeError as e:
            raise InvalidConfigError(f"Configuration file must contain a JSON object: {str(e)}") from e

    def _save_config(self, config: Optional[AppConfig] = None):
        """Save the current configuration to file."""

        config = config or self.config

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
            logger.debug("Configuration successfully saved.")
        except OSError as e:
            raise FileSystemError(f"Failed to write configuration file: {str(e)}") from e

    def save(self):
        """Persist the current configuration."""
        self._save_config()

    def get_config(self, key_path: str) -> Any:
        """Read a configuration value using a dot-separated key path."""

        obj = self.config
        for key in key_path.split("."):
            if not hasattr(obj, key):
                raise MissingConfigError(f"Configuration path '{key_path}' is invalid: '{key}' not found")
            obj = getattr(obj, key)
        return obj

    def set_config(self, key_path: str, value: Any, persist: bool = True):
        """Set a configuration value using dot-separated key path."""

        try:
            keys = key_path.split(".")
            section = self.get_config(".".join(keys[:-1])) if len(keys) > 1 else self.config

            if not hasattr(section, keys[-1]):
                raise MissingConfigError(f"Configuration key '{keys[-1]}' does not exist in path '{key_path}'")

            # Rebuild the section so field validators run on the new value
            updated = section.model_validate({**section.model_dump(), keys[-1]: value})
            if len(keys) > 1:
                parent = self.get_config(".".join(keys[:-2])) if len(keys) > 2 else self.config
                setattr(parent, keys[-2], updated)
            else:
                self.config = updated

            if persist:
                self._save_config()

            logger.info(f"Config key '{key_path}' updated.")

        except CatchViewError:
            raise
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid value for '{key_path}': {str(e)}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to set configuration key '{key_path}': {str(e)}") from e

    def reset_to_defaults(self):
        """Reset configuration to default values."""

        logger.warning("Resetting configuration to default values.")
        self.config = AppConfig()
        self._save_config()
