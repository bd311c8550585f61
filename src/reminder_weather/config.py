"""Typed settings loader for the reminder weather service."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

DEFAULT_WEATHER_API_URL = "https://api.data.gov.sg/v1/environment/2-hour-weather-forecast"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")
    weather_api_url: AnyUrl = Field(
        default=DEFAULT_WEATHER_API_URL,
        alias="WEATHER_API_URL",
        validate_default=True,
    )
    weather_timeout_seconds: float = Field(default=10.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_refresh_interval_seconds: int = Field(
        default=1800,
        alias="WEATHER_REFRESH_INTERVAL_SECONDS",
    )
    weather_user_agent: str = Field(default="Reminder-App/1.0", alias="WEATHER_USER_AGENT")
    weather_aliases_file: Path | None = Field(default=None, alias="WEATHER_ALIASES_FILE")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    @field_validator("weather_aliases_file", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_weather(self) -> Settings:
        """Validate timing and alias-table settings."""
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_refresh_interval_seconds <= 0:
            raise ValueError("WEATHER_REFRESH_INTERVAL_SECONDS must be > 0.")
        if not self.weather_user_agent.strip():
            raise ValueError("WEATHER_USER_AGENT must not be empty.")
        if self.weather_aliases_file is not None and not self.weather_aliases_file.exists():
            raise ValueError(
                f"WEATHER_ALIASES_FILE does not exist: {self.weather_aliases_file}"
            )
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging."""
        return {
            "app_env": self.app_env,
            "weather_api_url": str(self.weather_api_url),
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "weather_refresh_interval_seconds": self.weather_refresh_interval_seconds,
            "weather_aliases_file": (
                str(self.weather_aliases_file) if self.weather_aliases_file else None
            ),
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
