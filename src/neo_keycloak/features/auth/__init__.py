"""Auth feature module - Keycloak confidential client and UMA helpers.

This module provides:
- KeycloakService: UMA discovery, admin client authentication and the
  service token lifecycle for one realm
- ResourceManager / PermissionManager: thin wrappers over the UMA endpoints
- KeycloakConnectAdapter and AccessControlMiddleware: bearer token
  validation for FastAPI applications
- FastAPI dependencies for route protection

Usage Example:
```python
from neo_keycloak.features.auth import (
    ClientCredentials,
    KeycloakConfig,
    KeycloakModuleOptions,
    KeycloakService,
    configure_access_control,
    require_permission,
)

service = KeycloakService(
    KeycloakModuleOptions(
        config=KeycloakConfig(base_url="https://sso.example.com", realm_name="acme"),
        credentials=ClientCredentials(client_id="orders", client_secret="..."),
    )
)
configure_access_control(app, service)

@app.on_event("startup")
async def startup():
    await service.initialize()

@router.get("/orders")
async def list_orders(grant: Grant = Depends(require_permission("orders", "view"))):
    ...
```
"""

# Core entities
from .entities.grant import Grant
from .entities.keycloak_config import ClientCredentials, KeycloakConfig, KeycloakModuleOptions
from .entities.resource import Resource
from .entities.token_set import TokenSet
from .entities.uma_configuration import UMAConfiguration

# Adapter implementations
from .adapters.keycloak_admin import KeycloakAdminAdapter
from .adapters.keycloak_connect import KeycloakConnectAdapter
from .adapters.keycloak_openid import KeycloakOpenIDAdapter
from .adapters.permission_manager import PermissionManager, format_permission
from .adapters.request_manager import RequestManager
from .adapters.resource_manager import ResourceManager

# Service implementations
from .services.keycloak_service import KeycloakService

# FastAPI integration
from .dependencies import (
    AccessControlError,
    get_grant,
    require_grant,
    require_permission,
    require_role,
)
from .middleware import AccessControlMiddleware, configure_access_control

__all__ = [
    # Core entities
    "ClientCredentials",
    "Grant",
    "KeycloakConfig",
    "KeycloakModuleOptions",
    "Resource",
    "TokenSet",
    "UMAConfiguration",

    # Adapter implementations
    "KeycloakAdminAdapter",
    "KeycloakConnectAdapter",
    "KeycloakOpenIDAdapter",
    "PermissionManager",
    "RequestManager",
    "ResourceManager",
    "format_permission",

    # Service implementations
    "KeycloakService",

    # FastAPI integration
    "AccessControlError",
    "AccessControlMiddleware",
    "configure_access_control",
    "get_grant",
    "require_grant",
    "require_permission",
    "require_role",
]
