"""Keycloak integration exceptions for neo-keycloak."""

from .base import NeoKeycloakError


class ConfigurationError(NeoKeycloakError):
    """Raised when module options are invalid."""
    pass


class AuthenticationError(NeoKeycloakError):
    """Base exception for authentication errors."""
    pass


class KeycloakConnectionError(AuthenticationError):
    """Raised when the identity provider cannot be reached or answers with an error."""
    pass


class DiscoveryError(KeycloakConnectionError):
    """Raised when a discovery document is malformed or inconsistent."""
    pass


class InvalidTokenError(AuthenticationError):
    """Raised when a token is invalid."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when a token or refresh token has expired."""
    pass


class UMARequestError(NeoKeycloakError):
    """Raised when a UMA endpoint answers with an HTTP error status."""

    def __init__(self, message: str, status_code: int, body=None, **kwargs):
        details = {"status_code": status_code, "body": body}
        super().__init__(message, details=details, **kwargs)
        self.status_code = status_code
        self.body = body


class ResourceNotFoundError(UMARequestError):
    """Raised when a UMA resource does not exist."""
    pass


class InvalidResourceError(NeoKeycloakError):
    """Raised when a resource cannot be sent to the protection API as given."""
    pass
