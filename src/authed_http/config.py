"""Configuration management."""

import logging
from functools import cache

from pydantic import ConfigDict, Field, computed_field
from pydantic_settings import BaseSettings

from .consts import (
    DEFAULT_STORAGE_FILE,
    DEFAULT_TOKEN_STORAGE_KEY,
    LOGOUT_URL_PATH,
    PACKAGE_NAME,
    REFRESH_URL_PATH,
)


class Config(BaseSettings):
    """Configuration with computed auth endpoints."""

    model_config = ConfigDict(
        env_prefix="AUTHED_HTTP_", case_sensitive=False, extra="ignore"
    )
    base_url: str = Field(
        default="", description="Base URL prepended to relative request URLs"
    )
    auth_base_url: str | None = Field(
        default=None,
        description="Base URL of the auth service; falls back to base_url",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )
    storage_file: str = Field(
        default=DEFAULT_STORAGE_FILE,
        description="Path to the JSON file backing persisted credentials",
    )
    token_storage_key: str = Field(
        default=DEFAULT_TOKEN_STORAGE_KEY,
        min_length=1,
        description="Storage key holding the credential pair",
    )

    @computed_field
    @property
    def refresh_url(self) -> str:
        """URL for exchanging a refresh token."""
        return f"{self.auth_root}{REFRESH_URL_PATH}"

    @computed_field
    @property
    def logout_url(self) -> str:
        """URL for ending the remote session."""
        return f"{self.auth_root}{LOGOUT_URL_PATH}"

    @property
    def auth_root(self) -> str:
        """Auth service base URL without a trailing slash."""
        base = self.auth_base_url if self.auth_base_url is not None else self.base_url
        return base.rstrip("/")


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return Config()


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    return logging.getLogger(PACKAGE_NAME)
