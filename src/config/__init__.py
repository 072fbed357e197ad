"""Configuration module for the task manager."""

from .database import DatabaseSettings, get_database_settings
from .settings import (
    AuthSettings,
    Settings,
    StartupSecurityError,
    get_auth_settings,
    get_settings,
    validate_startup_security,
)

__all__ = [
    "AuthSettings",
    "DatabaseSettings",
    "get_auth_settings",
    "get_database_settings",
    "Settings",
    "StartupSecurityError",
    "get_settings",
    "validate_startup_security",
]
