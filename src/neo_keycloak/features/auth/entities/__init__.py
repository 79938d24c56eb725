"""Auth feature entities.

Contains the domain objects exchanged with Keycloak.
"""

from .grant import Grant
from .keycloak_config import ClientCredentials, KeycloakConfig, KeycloakModuleOptions
from .resource import Resource
from .token_set import TokenSet
from .uma_configuration import UMAConfiguration

__all__ = [
    "ClientCredentials",
    "Grant",
    "KeycloakConfig",
    "KeycloakModuleOptions",
    "Resource",
    "TokenSet",
    "UMAConfiguration",
]
