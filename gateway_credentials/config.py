"""
Centralized configuration management for the gateway credentials package.

This module provides a unified configuration system with support for:
- Environment variables
- Feature flags
- Resolver tuning (fan-out pool size, production key prefixes)
- Validation using Pydantic
"""

import os
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .constants import PRODUCTION_KEY_PREFIXES, EnvironmentVariable, LogLevel


class DatabaseSettings(BaseModel):
    """Database connection settings read from the environment."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.DATABASE_URL.value, "sqlite:///./gateway_credentials.db"
        ),
        description="Database connection string",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")


class QueueConfig(BaseModel):
    """Queue configuration for shipping structured logs to Azure Storage Queues."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.AZURE_STORAGE_CONNECTION.value, ""),
        description="Azure Storage connection string",
    )
    logs_queue_name: str = Field(default="logs-queue", description="Logs queue name")
    batch_size: int = Field(default=10, description="Log entries buffered before sending")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class FeatureFlags(BaseModel):
    """Feature flags for controlling package behavior."""

    enable_logs_queue: bool = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.ENABLE_LOGS_QUEUE.value, "false"
        ).lower()
        == "true",
        description="Ship structured logs to the Azure logs queue",
    )
    enable_audit_logging: bool = Field(
        default=True, description="Emit an audit log line for every credential promotion"
    )


class ResolverConfig(BaseModel):
    """Configuration for credential origin resolution."""

    max_workers: int = Field(
        default_factory=lambda: int(os.getenv(EnvironmentVariable.RESOLVER_MAX_WORKERS.value, "2")),
        description="Thread pool size used to read scoped and legacy rows concurrently",
    )
    production_key_prefixes: Tuple[str, ...] = Field(
        default=PRODUCTION_KEY_PREFIXES,
        description="Masked key prefixes that mark a legacy credential as production",
    )

    @field_validator("max_workers")
    def validate_max_workers(cls, v: int) -> int:
        """Fan-out needs at least one worker."""
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Database configuration"
    )
    queue: QueueConfig = Field(default_factory=QueueConfig, description="Queue configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    features: FeatureFlags = Field(default_factory=FeatureFlags, description="Feature flags")
    resolver: ResolverConfig = Field(
        default_factory=ResolverConfig, description="Origin resolver configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
