"""Neo-Keycloak - Keycloak confidential client and UMA helpers.

Connects an application to a Keycloak realm as a confidential client:
discovers the realm's UMA2 configuration, keeps a machine-to-machine access
token current, and offers resource and permission helpers over the UMA
endpoints plus FastAPI access control.
"""

from .__version__ import __version__

from .config import KeycloakSettings, get_keycloak_settings, setup_logging

from .core.exceptions import (
    # Base Exception
    NeoKeycloakError,

    # Keycloak Exceptions
    AuthenticationError,
    ConfigurationError,
    DiscoveryError,
    InvalidResourceError,
    InvalidTokenError,
    KeycloakConnectionError,
    ResourceNotFoundError,
    TokenExpiredError,
    UMARequestError,

    # Utility Functions
    create_error_response,
)

from .features.auth import (
    ClientCredentials,
    Grant,
    KeycloakConfig,
    KeycloakModuleOptions,
    KeycloakService,
    PermissionManager,
    Resource,
    ResourceManager,
    TokenSet,
    UMAConfiguration,
    configure_access_control,
    require_grant,
    require_permission,
    require_role,
)

__all__ = [
    "__version__",

    # Configuration
    "KeycloakSettings",
    "get_keycloak_settings",
    "setup_logging",

    # Exceptions
    "NeoKeycloakError",
    "AuthenticationError",
    "ConfigurationError",
    "DiscoveryError",
    "InvalidResourceError",
    "InvalidTokenError",
    "KeycloakConnectionError",
    "ResourceNotFoundError",
    "TokenExpiredError",
    "UMARequestError",
    "create_error_response",

    # Auth feature
    "ClientCredentials",
    "Grant",
    "KeycloakConfig",
    "KeycloakModuleOptions",
    "KeycloakService",
    "PermissionManager",
    "Resource",
    "ResourceManager",
    "TokenSet",
    "UMAConfiguration",
    "configure_access_control",
    "require_grant",
    "require_permission",
    "require_role",
]
