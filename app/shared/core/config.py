from functools import lru_cache
from threading import Lock
from typing import Optional
import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator

# Environment Constants
ENV_PRODUCTION = "production"
ENV_STAGING = "staging"
ENV_DEVELOPMENT = "development"
ENV_LOCAL = "local"

_KNOWN_ENVIRONMENTS = {ENV_PRODUCTION, ENV_STAGING, ENV_DEVELOPMENT, ENV_LOCAL}


@lru_cache
def get_settings() -> "Settings":
    """Returns a singleton instance of the application settings."""
    return Settings()


_settings_reload_lock = Lock()


def reload_settings_from_environment() -> "Settings":
    """
    Atomically rebuild and replace cached settings from environment values.

    This avoids mutating the cached singleton instance in-place.
    """
    logger = structlog.get_logger()
    with _settings_reload_lock:
        logger.info("settings_reload_started")
        get_settings.cache_clear()
        refreshed = get_settings()
        logger.info("settings_reload_completed")
        return refreshed


class Settings(BaseSettings):
    """
    Main configuration for AutomateROI.
    Uses Pydantic-Settings for environment variable parsing from .env.
    """

    APP_NAME: str = "AutomateROI"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    # ENVIRONMENT options: local, development, staging, production
    ENVIRONMENT: str = ENV_DEVELOPMENT
    TESTING: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None
    OTEL_EXPORTER_OTLP_INSECURE: bool = False
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Lead capture log (newline-delimited JSON, append-only)
    LEADS_FILE_PATH: str = "data/leads.jsonl"
    LEADS_FSYNC: bool = True

    RATELIMIT_ENABLED: bool = True
    LEADS_RATE_LIMIT: str = "30/minute"
    # Shared limiter storage; falls back to process memory when unset.
    REDIS_URL: Optional[str] = None
    ALLOW_IN_MEMORY_RATE_LIMITS: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @model_validator(mode="after")
    def validate_all_config(self) -> "Settings":
        """Centralized validation orchestrator."""
        if self.ENVIRONMENT.lower() not in _KNOWN_ENVIRONMENTS:
            raise ValueError(
                f"ENVIRONMENT must be one of {sorted(_KNOWN_ENVIRONMENTS)}, "
                f"got {self.ENVIRONMENT!r}"
            )
        if self.TESTING and self.is_production_like:
            raise ValueError(
                "TESTING must be false in staging/production runtime environments."
            )
        if self.TESTING:
            return self

        self._validate_lead_storage()
        self._validate_rate_limit_config()
        return self

    def _validate_lead_storage(self) -> None:
        if not self.LEADS_FILE_PATH.strip():
            raise ValueError("LEADS_FILE_PATH must not be empty.")

    def _validate_rate_limit_config(self) -> None:
        if not self.RATELIMIT_ENABLED or not self.is_production_like:
            return
        if not self.REDIS_URL and not self.ALLOW_IN_MEMORY_RATE_LIMITS:
            raise ValueError(
                "Distributed rate limiting is required in staging/production. "
                "Set REDIS_URL (or explicitly ALLOW_IN_MEMORY_RATE_LIMITS=true)."
            )

    @property
    def is_production_like(self) -> bool:
        return self.ENVIRONMENT.lower() in {ENV_PRODUCTION, ENV_STAGING}
