"""Auth feature adapters.

Contains adapters for Keycloak and its UMA endpoints.
"""

from .keycloak_admin import KeycloakAdminAdapter
from .keycloak_connect import KeycloakConnectAdapter
from .keycloak_openid import KeycloakOpenIDAdapter
from .permission_manager import PermissionManager, format_permission
from .request_manager import RequestManager
from .resource_manager import ResourceManager

__all__ = [
    "KeycloakAdminAdapter",
    "KeycloakConnectAdapter",
    "KeycloakOpenIDAdapter",
    "PermissionManager",
    "RequestManager",
    "ResourceManager",
    "format_permission",
]
