"""Configuration for neo-keycloak: environment settings and logging."""

from .logging_config import LoggingConfig, LogFormat, LogVerbosity, setup_logging
from .settings import KeycloakSettings, get_keycloak_settings

__all__ = [
    "KeycloakSettings",
    "LogFormat",
    "LogVerbosity",
    "LoggingConfig",
    "get_keycloak_settings",
    "setup_logging",
]
