"""Typed settings loader for the history client."""

from __future__ import annotations

from typing import Any

from pydantic import AnyUrl, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .units import DATA_UNITS, valid_data_unit

DEFAULT_HISTORY_URL = "https://history.openweathermap.org/data/2.5/history/city"
DEFAULT_TIMEOUT_SECONDS = 15.0


class Settings(BaseSettings):
    """Client settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    owm_api_key: str = Field(alias="OWM_API_KEY", repr=False)
    owm_history_base_url: AnyUrl = Field(
        default=DEFAULT_HISTORY_URL,
        validate_default=True,
        alias="OWM_HISTORY_BASE_URL",
    )
    owm_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        alias="OWM_TIMEOUT_SECONDS",
    )
    owm_default_unit: str = Field(default="C", alias="OWM_DEFAULT_UNIT")
    owm_max_print: int = Field(default=10, alias="OWM_MAX_PRINT")

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        """Reject values the client would only fail on later."""
        if not self.owm_api_key.strip():
            raise ValueError("OWM_API_KEY must not be empty.")
        if self.owm_timeout_seconds <= 0:
            raise ValueError("OWM_TIMEOUT_SECONDS must be > 0.")
        if not valid_data_unit(self.owm_default_unit):
            raise ValueError(
                f"OWM_DEFAULT_UNIT must be one of {sorted(DATA_UNITS)}, "
                f"got {self.owm_default_unit!r}."
            )
        if self.owm_max_print <= 0:
            raise ValueError("OWM_MAX_PRINT must be > 0.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "base_url": str(self.owm_history_base_url),
            "timeout_seconds": self.owm_timeout_seconds,
            "default_unit": self.owm_default_unit,
            "max_print": self.owm_max_print,
            "api_key_set": bool(self.owm_api_key),
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in exc.errors(include_input=False)
        )
        raise ConfigError(f"Invalid configuration: {problems}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
