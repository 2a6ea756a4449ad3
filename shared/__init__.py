"""Shared utilities and components for the adapter service."""

from .config import BaseCirconusConfig, BaseLoggingConfig, BaseServiceConfig
from .constants import APIGroups, Environment

__all__ = [
    "APIGroups",
    "Environment",
    "BaseServiceConfig",
    "BaseLoggingConfig",
    "BaseCirconusConfig",
]
