"""Keycloak Admin API adapter."""

import logging
from typing import Optional

from keycloak import KeycloakAdmin, KeycloakOpenIDConnection
from keycloak.exceptions import KeycloakError

from ....core.exceptions.auth import KeycloakConnectionError
from ..entities.token_set import TokenSet

logger = logging.getLogger(__name__)


class KeycloakAdminAdapter:
    """Adapter for Keycloak Admin API access as a confidential client."""

    def __init__(
        self,
        server_url: str,
        realm_name: str,
        client_id: str,
        client_secret: str,
        verify: bool = True,
        timeout: int = 30,
    ):
        """Initialize Keycloak admin adapter.

        Args:
            server_url: Keycloak server URL, including the context path
            realm_name: Realm the client lives in and manages
            client_id: Confidential client id
            client_secret: Confidential client secret
            verify: SSL verification (default: True)
            timeout: HTTP timeout in seconds (default: 30)
        """
        self.server_url = server_url
        self.realm_name = realm_name
        self.client_id = client_id
        self.client_secret = client_secret
        self.verify = verify
        self.timeout = timeout

        self._connection: Optional[KeycloakOpenIDConnection] = None
        self._admin_client: Optional[KeycloakAdmin] = None
        self._access_token: Optional[str] = None

    def _ensure_client(self) -> None:
        """Build the connection and admin client; no network traffic happens here."""
        if self._admin_client is None:
            self._connection = KeycloakOpenIDConnection(
                server_url=self.server_url,
                realm_name=self.realm_name,
                client_id=self.client_id,
                client_secret_key=self.client_secret,
                verify=self.verify,
                timeout=self.timeout,
            )
            self._admin_client = KeycloakAdmin(connection=self._connection)

    @property
    def connection(self) -> KeycloakOpenIDConnection:
        self._ensure_client()
        return self._connection

    @property
    def admin(self) -> KeycloakAdmin:
        """The underlying KeycloakAdmin client."""
        self._ensure_client()
        return self._admin_client

    @property
    def access_token(self) -> Optional[str]:
        """Bearer token currently sent with admin requests."""
        return self._access_token

    async def authenticate(self) -> TokenSet:
        """Authenticate the admin client with the client-credentials grant."""
        try:
            token = await self.connection.keycloak_openid.a_token(grant_type="client_credentials")
        except KeycloakError as e:
            logger.error(f"Admin client authentication failed for {self.client_id}: {e}")
            raise KeycloakConnectionError(f"Cannot authenticate admin client: {e}") from e

        self.connection.token = token
        self._access_token = token["access_token"]

        logger.info(f"Authenticated admin client {self.client_id} in realm {self.realm_name}")
        return TokenSet.from_keycloak_response(token)

    def set_token(self, token_set: TokenSet) -> None:
        """Use a new token for subsequent admin requests.

        The connection's token and expiry are replaced along with the
        Authorization header, so the connection refreshes from this token
        instead of re-granting over it.
        """
        if token_set.expires_in is None:
            self.connection.add_param_headers("Authorization", f"Bearer {token_set.access_token}")
        else:
            token = token_set.to_dict()
            # Remaining lifetime; the token may have been issued a while ago
            token["expires_in"] = token_set.time_until_expiry
            self.connection.token = token

        self._access_token = token_set.access_token
        logger.debug("Updated admin client bearer token")

    async def close(self) -> None:
        """Drop the admin client; KeycloakAdmin needs no explicit closing."""
        self._admin_client = None
        self._connection = None
        self._access_token = None
