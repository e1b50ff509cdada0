"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .calendar.day_utils import SUNDAY
from .calendar.recurrence import DEFAULT_MAX_ITERATIONS
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TEMPOSCRIBE_"


class TemposcribeSettings(BaseSettings):
    """Library settings with environment variable and YAML file support.

    Precedence, highest first: keyword arguments, ``TEMPOSCRIBE_*`` environment
    variables (and ``.env``), the YAML ``config_file``, field defaults.
    """

    _explicit_args: set[str] = PrivateAttr(default_factory=set)

    # Recurrence engine
    max_iterations: int = Field(
        default=DEFAULT_MAX_ITERATIONS,
        ge=1,
        description="Occurrence candidates examined per event per query",
    )
    default_timezone: Optional[str] = Field(
        default=None, description="IANA zone for local-day comparisons"
    )

    # Calendar views
    week_starts_on: int = Field(
        default=SUNDAY, ge=0, le=6, description="First weekday of calendar weeks (Monday=0, Sunday=6)"
    )

    # Logging
    log_level: Optional[str] = Field(
        default=None, description="Root log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    debug: bool = Field(default=False, description="Enable debug logging")

    # Optional YAML configuration file
    config_file: Optional[Path] = Field(default=None, description="YAML configuration file")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    def __init__(self, **kwargs: Any) -> None:
        env_vars_set = {
            key[len(ENV_PREFIX) :].lower() for key in os.environ if key.upper().startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys()) | env_vars_set
        self._load_yaml_config()

    @field_validator("default_timezone")
    @classmethod
    def _validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {value!r}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level {value!r}")
        return level

    def _load_yaml_config(self) -> None:
        """Apply values from the YAML config file for settings not set explicitly."""
        if self.config_file is None:
            return
        if not self.config_file.exists():
            logger.warning("Config file %s not found; using defaults", self.config_file)
            return

        with self.config_file.open(encoding="utf-8") as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            return
        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {self.config_file} must contain a mapping at top level")

        for key, value in config_data.items():
            if key == "config_file" or key not in type(self).model_fields:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            if key in self._explicit_args:
                continue
            setattr(self, key, value)

        logger.debug("Loaded configuration from %s", self.config_file)

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Zone for local-day comparisons, None to use each value's own wall clock."""
        return ZoneInfo(self.default_timezone) if self.default_timezone else None


# Global settings management
_settings_instance: Optional[TemposcribeSettings] = None


def get_settings() -> TemposcribeSettings:
    """Get the global settings instance, creating it lazily if needed."""
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = TemposcribeSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
