"""HTTP request helper for Keycloak realm and UMA endpoints."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import httpx

from ....core.exceptions.auth import (
    KeycloakConnectionError,
    ResourceNotFoundError,
    UMARequestError,
)

if TYPE_CHECKING:
    from ..services.keycloak_service import KeycloakService

logger = logging.getLogger(__name__)


class RequestManager:
    """Sends requests to the realm on behalf of the Keycloak service.

    Relative URLs resolve against the realm base URL; absolute URLs, such as
    endpoints taken from a discovery document, are used as given. Authenticated
    requests carry the service's current access token, refreshed on demand.
    """

    def __init__(
        self,
        service: "KeycloakService",
        base_url: str,
        timeout: int = 30,
        verify: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._service = service
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify = verify
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> None:
        """Ensure the HTTP client exists."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            )

    async def close(self) -> None:
        """Close the HTTP client if open."""
        if self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
        self._http_client = None

    def resolve(self, url: str) -> str:
        """Resolve a URL against the realm base URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    async def _authorization_header(self) -> Optional[str]:
        token_set = await self._service.refresh_grant()
        if token_set is None:
            return None
        return f"Bearer {token_set.access_token}"

    async def request(
        self,
        method: str,
        url: str,
        *,
        authenticated: bool = True,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request and map error answers to neo-keycloak exceptions.

        Raises:
            UMARequestError: The endpoint answered with a 4xx/5xx status
            ResourceNotFoundError: The endpoint answered 404
            KeycloakConnectionError: The request could not be sent
        """
        await self._ensure_client()
        target = self.resolve(url)

        request_headers = httpx.Headers({"Accept": "application/json"})
        if headers:
            request_headers.update(headers)

        if authenticated and "Authorization" not in request_headers:
            authorization = await self._authorization_header()
            if authorization:
                request_headers["Authorization"] = authorization
            else:
                logger.warning(f"No service token available, sending {method} {target} unauthenticated")

        try:
            response = await self._http_client.request(
                method,
                target,
                headers=request_headers,
                params=params,
                json=json,
                data=data,
            )
        except httpx.RequestError as e:
            logger.error(f"{method} {target} failed: {e}")
            raise KeycloakConnectionError(f"Request to {target} failed: {e}") from e

        if response.is_error:
            self._raise_for_status(method, target, response)

        logger.debug(f"{method} {target} -> {response.status_code}")
        return response

    @staticmethod
    def _raise_for_status(method: str, target: str, response: httpx.Response) -> None:
        try:
            body = response.json()
        except ValueError:
            body = response.text

        message = f"{method} {target} returned {response.status_code}"
        logger.warning(message)

        if response.status_code == 404:
            raise ResourceNotFoundError(message, status_code=404, body=body)
        raise UMARequestError(message, status_code=response.status_code, body=body)

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
