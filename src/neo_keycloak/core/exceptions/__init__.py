"""Exceptions module for neo-keycloak."""

from .base import NeoKeycloakError, create_error_response
from .auth import (
    AuthenticationError,
    ConfigurationError,
    DiscoveryError,
    InvalidResourceError,
    InvalidTokenError,
    KeycloakConnectionError,
    ResourceNotFoundError,
    TokenExpiredError,
    UMARequestError,
)

__all__ = [
    "NeoKeycloakError",
    "create_error_response",
    "AuthenticationError",
    "ConfigurationError",
    "DiscoveryError",
    "InvalidResourceError",
    "InvalidTokenError",
    "KeycloakConnectionError",
    "ResourceNotFoundError",
    "TokenExpiredError",
    "UMARequestError",
]
