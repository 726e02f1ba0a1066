"""Env var config loading with pydantic-settings."""

from __future__ import annotations

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from csp_html.config.defaults import VALID_HASHING_METHODS

logger = structlog.get_logger()


class CspSettings(BaseSettings):
    """Process-wide plugin defaults, overridden by env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CSP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    hashing_method: str = "sha256"
    dev_allow_unsafe: bool = False
    xhtml: bool = False

    log_level: str = "info"
    log_json: bool = True

    @field_validator("hashing_method")
    @classmethod
    def _check_hashing_method(cls, value: str) -> str:
        if value not in VALID_HASHING_METHODS:
            raise ValueError(f"'{value}' is not a valid hashing method")
        return value


_settings: CspSettings | None = None


def get_settings() -> CspSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings() -> CspSettings:
    """Load settings from env vars (env vars override model defaults)."""
    global _settings
    _settings = CspSettings()
    logger.debug(
        "config_loaded",
        enabled=_settings.enabled,
        hashing_method=_settings.hashing_method,
    )
    return _settings
