"""Auth feature services."""

from .keycloak_service import KeycloakService

__all__ = [
    "KeycloakService",
]
