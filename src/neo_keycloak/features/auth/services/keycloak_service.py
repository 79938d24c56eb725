"""Keycloak service wiring the admin, OIDC and access-control clients together."""

import asyncio
import logging
from typing import Optional

import httpx

from ....core.exceptions.auth import DiscoveryError
from ..adapters.keycloak_admin import KeycloakAdminAdapter
from ..adapters.keycloak_connect import KeycloakConnectAdapter
from ..adapters.keycloak_openid import KeycloakOpenIDAdapter
from ..adapters.permission_manager import PermissionManager
from ..adapters.request_manager import RequestManager
from ..adapters.resource_manager import ResourceManager
from ..entities.keycloak_config import KeycloakModuleOptions
from ..entities.token_set import TokenSet
from ..entities.uma_configuration import UMAConfiguration

logger = logging.getLogger(__name__)


class KeycloakService:
    """Confidential client session against one Keycloak realm.

    Construction is synchronous and performs no network traffic; the options
    are validated when they are built, so an invalid base URL fails before a
    service exists. initialize() discovers the realm's UMA configuration,
    authenticates the admin client and obtains the service token. Until then
    uma_configuration, resource_manager and permission_manager are None.
    """

    def __init__(
        self,
        options: KeycloakModuleOptions,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Keycloak service.

        Args:
            options: Realm configuration and client credentials
            transport: Optional httpx transport for realm HTTP requests
        """
        self.options = options
        self.base_url = options.config.realm_url

        self.connect = KeycloakConnectAdapter.from_options(options)
        self.client = KeycloakAdminAdapter(
            server_url=options.config.server_url,
            realm_name=options.config.realm_name,
            client_id=options.credentials.client_id,
            client_secret=options.credentials.client_secret,
            verify=options.config.verify_ssl,
            timeout=options.config.timeout,
        )
        self.request_manager = RequestManager(
            self,
            self.base_url,
            timeout=options.config.timeout,
            verify=options.config.verify_ssl,
            transport=transport,
        )

        self.uma_configuration: Optional[UMAConfiguration] = None
        self.resource_manager: Optional[ResourceManager] = None
        self.permission_manager: Optional[PermissionManager] = None

        self._issuer_client: Optional[KeycloakOpenIDAdapter] = None
        self._token_set: Optional[TokenSet] = None
        self._initialized = False

        self._init_lock = asyncio.Lock()
        self._refresh_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def token_set(self) -> Optional[TokenSet]:
        """The cached service token, if one has been obtained."""
        return self._token_set

    @property
    def issuer_client(self) -> Optional[KeycloakOpenIDAdapter]:
        return self._issuer_client

    async def _fetch_uma_configuration(self) -> UMAConfiguration:
        response = await self.request_manager.get(
            self.options.config.uma_configuration_url, authenticated=False
        )
        try:
            document = response.json()
        except ValueError as e:
            raise DiscoveryError(f"UMA configuration at {self.base_url} is not valid JSON") from e
        return UMAConfiguration.from_dict(document)

    async def initialize(self) -> None:
        """Discover the realm and obtain the service token.

        Runs once; later calls return immediately. Failures propagate and
        leave the service uninitialized, so a later call starts over.
        """
        async with self._init_lock:
            if self._initialized:
                return

            credentials = self.options.credentials
            config = self.options.config

            uma_configuration = await self._fetch_uma_configuration()
            self.uma_configuration = uma_configuration
            logger.info(f"Loaded UMA configuration for realm {config.realm_name}")

            self.resource_manager = ResourceManager(
                self, uma_configuration.resource_registration_endpoint
            )
            self.permission_manager = PermissionManager(self, uma_configuration.token_endpoint)

            await self.client.authenticate()

            self._issuer_client = await KeycloakOpenIDAdapter.discover(
                uma_configuration.issuer,
                credentials.client_id,
                credentials.client_secret,
                verify=config.verify_ssl,
                timeout=config.timeout,
            )

            self._token_set = await self._issuer_client.grant()

            if self._token_set.expires_at:
                logger.info(f"Initial token expires at {self._token_set.expires_at.isoformat()}")

            self._initialized = True

    async def refresh_grant(self) -> Optional[TokenSet]:
        """Get a current service token, refreshing it when expired.

        Returns:
            The cached token when still valid, the refreshed token otherwise,
            or None when there is no token or no refresh token to use
        """
        async with self._refresh_lock:
            token_set = self._token_set

            if token_set is not None and not token_set.is_expired:
                return token_set

            if token_set is None:
                logger.error("Token set is missing. Could not refresh grant.")
                return None

            logger.debug("Grant token expired, refreshing.")

            if not token_set.refresh_token:
                logger.error("Could not refresh token. Refresh token is missing.")
                return None

            if self._issuer_client is None:
                logger.error("Could not refresh token. Issuer has not been discovered.")
                return None

            self._token_set = await self._issuer_client.refresh(token_set.refresh_token)

            if self._token_set.access_token:
                self.client.set_token(self._token_set)

            return self._token_set

    async def close(self) -> None:
        """Release HTTP resources held by the service."""
        await self.request_manager.close()
        await self.client.close()
        logger.debug(f"Closed Keycloak service for realm {self.options.config.realm_name}")
