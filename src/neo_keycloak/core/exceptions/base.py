"""Base exceptions for neo-keycloak.

All exceptions raised by the library inherit from NeoKeycloakError and carry
an error code and a details dictionary so callers can render them into API
responses without string parsing.
"""

from typing import Any, Dict, Optional


class NeoKeycloakError(Exception):
    """Base exception for all neo-keycloak errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: NeoKeycloakError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-keycloak exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
