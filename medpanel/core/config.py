"""
Configuration module for the MedPanel service.
Uses Pydantic BaseSettings for validation - app fails fast on malformed config.
"""
import logging
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.

    Every field can be overridden with a ``MEDPANEL_``-prefixed environment
    variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEDPANEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    host: str = Field(default="127.0.0.1", description="API host")
    port: int = Field(default=8000, description="API port")
    reload: bool = Field(default=False, description="Enable hot reload")

    # Upload Configuration
    upload_max_size: int = Field(
        default=10485760,
        gt=0,
        description="Max size of a single uploaded PDF in bytes (10MB)",
    )

    # Pipeline Configuration
    extraction_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the PDF engine before giving up on a file",
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for synthesized placeholder data (unset = non-deterministic)",
    )
    strict_validation: bool = Field(
        default=False,
        description="Reject extracted vitals outside physiological limits",
    )

    # Session Configuration
    max_sessions: int = Field(
        default=100,
        ge=1,
        description="Maximum number of in-memory sessions before the oldest is evicted",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format: 'json' or 'text'")

    @model_validator(mode="after")
    def validate_logging(self) -> "Settings":
        """Normalize logging options and warn about unsupported values."""
        self.log_level = self.log_level.upper()
        self.log_format = self.log_format.lower()
        if self.log_format not in ("json", "text"):
            logger.warning(
                "Unknown MEDPANEL_LOG_FORMAT, falling back to json",
                extra={"log_format": self.log_format},
            )
            self.log_format = "json"
        if self.random_seed is not None:
            logger.warning(
                "MEDPANEL_RANDOM_SEED is set - synthesized data will repeat across sessions"
            )
        return self


def get_settings() -> Settings:
    """Create and return a fresh Settings instance."""
    return Settings()


# Global settings instance
settings = Settings()
