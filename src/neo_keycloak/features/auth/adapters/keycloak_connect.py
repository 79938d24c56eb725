"""Access-control adapter validating bearer tokens on incoming requests."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from jwcrypto import jwk
from jwcrypto.common import JWException, base64url_decode, json_decode
from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

from ....core.exceptions.auth import (
    ConfigurationError,
    DiscoveryError,
    KeycloakConnectionError,
)
from ..entities.grant import Grant
from ..entities.keycloak_config import KeycloakModuleOptions

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ("resource", "realm", "auth-server-url")


class KeycloakConnectAdapter:
    """Validates request tokens against one realm and client.

    Settings use the Keycloak adapter (keycloak.json) keys: ``resource``,
    ``realm``, ``auth-server-url``, ``credentials.secret``, ``ssl-required``
    and ``confidential-port``. A request whose token fails validation is not
    rejected here; access_denied() marks it and the request continues, so
    route dependencies decide how to answer.

    The realm JWKS is fetched once and cached; it is fetched again only when
    a token names a key id the cached set does not contain.
    """

    def __init__(self, config: Dict[str, Any], verify: bool = True, timeout: int = 30):
        missing = [key for key in REQUIRED_SETTINGS if not config.get(key)]
        if missing:
            raise ConfigurationError(
                f"Access control settings are missing: {', '.join(missing)}",
                details={"missing": missing},
            )

        self.config = dict(config)
        self.client_id: str = config["resource"]
        self.realm: str = config["realm"]
        self.auth_server_url: str = config["auth-server-url"].rstrip("/")
        self.verify = verify
        self.timeout = timeout

        self._openid_client: Optional[KeycloakOpenID] = None
        self._signing_keys: Optional[jwk.JWKSet] = None
        self._keys_lock = asyncio.Lock()

    @classmethod
    def from_options(cls, options: KeycloakModuleOptions) -> "KeycloakConnectAdapter":
        """Build adapter settings for the service's realm and client."""
        config = {
            "resource": options.credentials.client_id,
            "realm": options.config.realm_name,
            "confidential-port": 0,
            "ssl-required": "all",
            "auth-server-url": options.config.server_url.rstrip("/"),
            "credentials": {"secret": options.credentials.client_secret},
        }
        return cls(config, verify=options.config.verify_ssl, timeout=options.config.timeout)

    @property
    def secret(self) -> Optional[str]:
        credentials = self.config.get("credentials") or {}
        return credentials.get("secret") or self.config.get("secret")

    @property
    def realm_url(self) -> str:
        return f"{self.auth_server_url}/realms/{self.realm}"

    @property
    def openid(self) -> KeycloakOpenID:
        """OpenID client used for token validation; created on first use."""
        if self._openid_client is None:
            self._openid_client = KeycloakOpenID(
                server_url=f"{self.auth_server_url}/",
                realm_name=self.realm,
                client_id=self.client_id,
                client_secret_key=self.secret,
                verify=self.verify,
                timeout=self.timeout,
            )
        return self._openid_client

    @staticmethod
    def extract_bearer(request: Request) -> Optional[str]:
        """Get the bearer token from the Authorization header, if any."""
        authorization = request.headers.get("authorization")
        if not authorization:
            return None

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    @staticmethod
    def _key_id(token: str) -> Optional[str]:
        """Read the ``kid`` from a token header without verifying the token."""
        try:
            header = json_decode(base64url_decode(token.split(".", 1)[0]))
        except ValueError:
            return None
        if not isinstance(header, dict):
            return None
        return header.get("kid")

    async def load_signing_keys(self) -> jwk.JWKSet:
        """Fetch the realm's JWKS and cache it on the adapter.

        Raises:
            KeycloakConnectionError: The certs endpoint could not be reached
            DiscoveryError: The certs endpoint returned an unusable key set
        """
        try:
            certs = await self.openid.a_certs()
        except KeycloakError as e:
            logger.error(f"Cannot fetch signing keys for realm {self.realm}: {e}")
            raise KeycloakConnectionError(f"Cannot fetch realm signing keys: {e}") from e

        try:
            keys = jwk.JWKSet.from_json(json.dumps(certs))
        except JWException as e:
            raise DiscoveryError(f"Realm {self.realm} published an invalid key set") from e

        self._signing_keys = keys
        logger.info(f"Loaded {len(keys['keys'])} signing keys for realm {self.realm}")
        return keys

    async def signing_keys(self, key_id: Optional[str] = None) -> jwk.JWKSet:
        """Get the cached JWKS; refetch only for a key id it does not contain."""
        async with self._keys_lock:
            keys = self._signing_keys
            if keys is None or (key_id and keys.get_key(key_id) is None):
                keys = await self.load_signing_keys()
            return keys

    async def validate(self, token: str) -> Optional[Grant]:
        """Validate a token's signature, expiry and issuer.

        Returns:
            The grant, or None when the token is not acceptable

        Raises:
            KeycloakConnectionError: Signing keys are needed but unreachable
        """
        keys = await self.signing_keys(self._key_id(token))

        try:
            claims = await self.openid.a_decode_token(token, validate=True, key=keys)
        except (JWException, ValueError) as e:
            logger.warning(f"Token validation failed: {e}")
            return None

        issuer = (claims.get("iss") or "").rstrip("/")
        if issuer != self.realm_url:
            logger.warning(f"Token issued by {issuer or 'unknown issuer'}, expected {self.realm_url}")
            return None

        return Grant(access_token=token, claims=claims, client_id=self.client_id)

    async def get_grant(self, request: Request) -> Optional[Grant]:
        """Get the validated grant for a request, if it carries a valid token.

        Raises:
            KeycloakConnectionError: Signing keys are needed but unreachable
        """
        token = self.extract_bearer(request)
        if token is None:
            return None
        return await self.validate(token)

    def access_denied(self, request: Request) -> None:
        """Mark the request as denied and let it continue."""
        request.state.access_denied = True
