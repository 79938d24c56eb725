"""Keycloak OpenID Connect adapter."""

import logging
from typing import Dict, Optional, Tuple

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakAuthenticationError, KeycloakError

from ....core.exceptions.auth import (
    DiscoveryError,
    InvalidTokenError,
    KeycloakConnectionError,
    TokenExpiredError,
)
from ..entities.token_set import TokenSet

logger = logging.getLogger(__name__)


def split_issuer(issuer: str) -> Tuple[str, str]:
    """Split an issuer URL into the server URL and realm name.

    ``https://sso.example.com/auth/realms/acme`` becomes
    ``("https://sso.example.com/auth/", "acme")``.
    """
    server, separator, realm_name = issuer.rstrip("/").rpartition("/realms/")
    if not separator or not server or not realm_name or "/" in realm_name:
        raise DiscoveryError(
            f"Issuer is not a Keycloak realm URL: {issuer}",
            details={"issuer": issuer},
        )
    return f"{server}/", realm_name


class KeycloakOpenIDAdapter:
    """Adapter for the token operations of one discovered issuer."""

    def __init__(
        self,
        issuer: str,
        client_id: str,
        client_secret: str,
        verify: bool = True,
        timeout: int = 30,
    ):
        """Initialize adapter for an issuer; call discover() before use."""
        self.issuer = issuer
        self.server_url, self.realm_name = split_issuer(issuer)
        self.client_id = client_id
        self.verify = verify
        self.metadata: Dict = {}

        self._openid_client = KeycloakOpenID(
            server_url=self.server_url,
            realm_name=self.realm_name,
            client_id=client_id,
            client_secret_key=client_secret,
            verify=verify,
            timeout=timeout,
        )

    @classmethod
    async def discover(
        cls,
        issuer: str,
        client_id: str,
        client_secret: str,
        verify: bool = True,
        timeout: int = 30,
    ) -> "KeycloakOpenIDAdapter":
        """Create an adapter for the issuer and load its OpenID configuration."""
        adapter = cls(issuer, client_id, client_secret, verify=verify, timeout=timeout)
        await adapter.load_metadata()
        return adapter

    async def load_metadata(self) -> Dict:
        """Fetch the OpenID configuration and check it belongs to this issuer."""
        try:
            metadata = await self._openid_client.a_well_known()
        except KeycloakError as e:
            logger.error(f"Failed to discover issuer {self.issuer}: {e}")
            raise KeycloakConnectionError(f"Issuer discovery failed: {e}") from e

        advertised = (metadata.get("issuer") or "").rstrip("/")
        if advertised != self.issuer.rstrip("/"):
            raise DiscoveryError(
                f"Issuer mismatch: expected {self.issuer}, provider advertises {advertised or 'none'}",
                details={"expected": self.issuer, "advertised": advertised},
            )

        self.metadata = metadata
        logger.info(f"Discovered issuer {self.issuer}")
        return metadata

    @property
    def openid(self) -> KeycloakOpenID:
        return self._openid_client

    @property
    def token_endpoint(self) -> Optional[str]:
        return self.metadata.get("token_endpoint")

    async def grant(self) -> TokenSet:
        """Obtain a token with the client-credentials grant."""
        try:
            token_response = await self._openid_client.a_token(grant_type="client_credentials")
        except KeycloakError as e:
            logger.error(f"Client credentials grant failed for {self.client_id}: {e}")
            raise KeycloakConnectionError(f"Client credentials grant failed: {e}") from e

        logger.info(f"Obtained client credentials token for {self.client_id}")
        return TokenSet.from_keycloak_response(token_response)

    async def refresh(self, refresh_token: str) -> TokenSet:
        """Exchange a refresh token for a new token set."""
        try:
            token_response = await self._openid_client.a_refresh_token(refresh_token)

        except KeycloakAuthenticationError as e:
            logger.warning(f"Token refresh failed: {e}")
            if "invalid_grant" in str(e).lower():
                raise TokenExpiredError("Refresh token expired or invalid") from e
            raise InvalidTokenError("Invalid refresh token") from e

        except KeycloakError as e:
            # Keycloak answers 400 invalid_grant for expired or revoked refresh tokens
            if "invalid_grant" in str(e).lower():
                logger.warning(f"Refresh token rejected: {e}")
                raise TokenExpiredError("Refresh token expired or invalid") from e
            logger.error(f"Keycloak error during token refresh: {e}")
            raise KeycloakConnectionError(f"Token refresh service error: {e}") from e

        logger.info("Successfully refreshed access token")
        return TokenSet.from_keycloak_response(token_response)
