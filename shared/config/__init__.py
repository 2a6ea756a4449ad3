"""Shared configuration base classes.

Provides common configuration patterns used by the adapter service and its
tooling to reduce duplication and ensure consistency.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
    ]
    app_environment: str = "production"


class BaseCirconusConfig(BaseSettings):
    """Common Circonus API configuration."""

    circonus_api_url: str = "https://api.circonus.com/v2"
    circonus_app_name: str = "custom-metrics-circonus-adapter"
    circonus_request_timeout_seconds: float = 10.0


class BaseServiceConfig(BaseLoggingConfig, BaseCirconusConfig):
    """Base configuration combining logging and Circonus settings.

    Services should inherit from this and add their own specific settings.
    The otel_service_name should be overridden by each service.
    """

    otel_service_name: str = "unknown"  # Should be overridden by service


__all__ = ["BaseLoggingConfig", "BaseCirconusConfig", "BaseServiceConfig"]
