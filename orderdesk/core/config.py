"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Uses the mock payment gateway (no API keys needed)
    - STAGING: Uses the real gateway with test keys
    - PRODUCTION: Uses the real gateway with live keys

The ENV_MODE variable controls which gateway client is instantiated,
so the same code runs locally and in production.

Usage:
    from orderdesk.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock gateway
    else:
        # Use Razorpay
"""

import logging
import sys
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with the mock gateway
        PRODUCTION: Live environment with real gateway keys
        STAGING: Pre-production testing with gateway test keys
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Gateway secrets should NEVER be committed to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the API server
        port: Port for the API server

        # Database
        database_url: Async SQLAlchemy connection string

        # Payment Gateway
        gateway_key_id: Gateway key id (basic-auth user)
        gateway_key_secret: Shared secret for API auth and signature checks
        gateway_currency: Fixed currency for gateway orders

        # Menu publishing
        public_directory: Directory served as static files
        menu_filename: Name of the published menu inside public_directory
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Order Desk",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    port: int = Field(
        default=3000,
        description="API server port"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./orderdesk.db",
        description="Async SQLAlchemy database URL"
    )
    database_echo: bool = Field(
        default=False,
        description="Log all SQL statements"
    )

    # ==========================================================================
    # PAYMENT GATEWAY
    # ==========================================================================

    gateway_key_id: Optional[str] = Field(
        default=None,
        description="Gateway key id (rzp_live_... or rzp_test_...)"
    )
    gateway_key_secret: Optional[str] = Field(
        default=None,
        description="Gateway key secret, also the HMAC signing key"
    )
    gateway_currency: str = Field(
        default="INR",
        description="Currency for gateway orders"
    )
    gateway_base_url: str = Field(
        default="https://api.razorpay.com/v1",
        description="Gateway REST API base URL"
    )
    gateway_timeout: float = Field(
        default=10.0,
        description="Gateway HTTP timeout in seconds"
    )

    # ==========================================================================
    # MENU PUBLISHING
    # ==========================================================================

    public_directory: str = Field(
        default="public",
        description="Directory served as static files"
    )
    menu_filename: str = Field(
        default="menu.json",
        description="Published menu filename"
    )
    menu_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for the menu file lock"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if the real payment gateway should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def menu_path(self) -> Path:
        """Full path of the published menu file."""
        return Path(self.public_directory) / self.menu_filename

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.gateway_key_id:
                missing.append("GATEWAY_KEY_ID")
            if not self.gateway_key_secret:
                missing.append("GATEWAY_KEY_SECRET")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once per process. Tests that change the
    environment call ``get_settings.cache_clear()``.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("orderdesk")
