"""
Environment configuration loader with validation for ticketdesk.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class TrackerConfig(BaseModel):
    """Configuration model for ticketdesk with validation."""

    # Database Configuration
    database_url: Optional[str] = Field(
        default=None,
        description="Database connection URL; built from the DB_* variables when unset",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # View cache
    view_cache_enabled: bool = Field(
        default=False, description="Read list views through Valkey"
    )
    view_cache_ttl: int = Field(
        default=300, ge=1, description="Seconds a cached list view is kept"
    )

    # Valkey Cache Configuration
    valkey_host: str = Field(default="localhost", description="Valkey server host")
    valkey_port: int = Field(
        default=6379, ge=1, le=65535, description="Valkey server port"
    )
    valkey_password: Optional[str] = Field(
        default=None, description="Valkey server password"
    )
    valkey_database: int = Field(
        default=0, ge=0, le=15, description="Valkey database number"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()


def load_config(env_file: Optional[str] = None) -> TrackerConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        TrackerConfig: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    # raw strings; pydantic coerces numbers and booleans
    config_data: Dict[str, Any] = {
        "database_url": os.getenv("DATABASE_URL") or None,
        "database_echo": os.getenv("DATABASE_ECHO", "false"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "view_cache_enabled": os.getenv("VIEW_CACHE_ENABLED", "false"),
        "view_cache_ttl": os.getenv("VIEW_CACHE_TTL", "300"),
        "valkey_host": os.getenv("VALKEY_HOST", "localhost"),
        "valkey_port": os.getenv("VALKEY_PORT", "6379"),
        "valkey_password": os.getenv("VALKEY_PASSWORD") or None,
        "valkey_database": os.getenv("VALKEY_DATABASE", "0"),
    }

    try:
        return TrackerConfig(**config_data)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed: {e}")


def configure_logging(level: str = "INFO") -> None:
    """Apply the configured level to the root logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())


# Global configuration instance
_config: Optional[TrackerConfig] = None


def get_config() -> TrackerConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        TrackerConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config
