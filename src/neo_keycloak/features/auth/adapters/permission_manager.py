"""UMA permission request adapter."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

from ....core.exceptions.auth import UMARequestError
from ..entities.token_set import TokenSet

if TYPE_CHECKING:
    from ..services.keycloak_service import KeycloakService
    from .request_manager import RequestManager

logger = logging.getLogger(__name__)

UMA_TICKET_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:uma-ticket"

# Status codes the token endpoint uses to refuse a permission request
DENIED_STATUS_CODES = (401, 403)


def format_permission(resource: str, scopes: Optional[Sequence[str]] = None) -> str:
    """Format a permission as ``resource#scope[,scope...]``."""
    if not scopes:
        return resource
    return f"{resource}#{','.join(scopes)}"


class PermissionManager:
    """Builds UMA ticket grant requests against the realm token endpoint.

    The subject token defaults to the service's own token and the audience
    to the service's client id.
    """

    def __init__(self, service: "KeycloakService", token_endpoint: str):
        self._service = service
        self.token_endpoint = token_endpoint

    @property
    def _requests(self) -> "RequestManager":
        return self._service.request_manager

    def _build_form(
        self,
        permissions: Optional[Iterable[str]],
        audience: Optional[str],
        response_mode: Optional[str],
        ticket: Optional[str],
    ) -> Dict[str, Any]:
        form: Dict[str, Any] = {
            "grant_type": UMA_TICKET_GRANT_TYPE,
            "audience": audience or self._service.options.credentials.client_id,
        }

        permission_list = list(permissions or [])
        if permission_list:
            form["permission"] = permission_list
        if response_mode:
            form["response_mode"] = response_mode
        if ticket:
            form["ticket"] = ticket

        return form

    async def _ticket_grant(
        self,
        permissions: Optional[Iterable[str]] = None,
        token: Optional[str] = None,
        audience: Optional[str] = None,
        response_mode: Optional[str] = None,
        ticket: Optional[str] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else None
        return await self._requests.post(
            self.token_endpoint,
            data=self._build_form(permissions, audience, response_mode, ticket),
            headers=headers,
        )

    async def request_rpt(
        self,
        permissions: Optional[Iterable[str]] = None,
        token: Optional[str] = None,
        audience: Optional[str] = None,
        ticket: Optional[str] = None,
    ) -> TokenSet:
        """Obtain a requesting party token carrying the granted permissions."""
        response = await self._ticket_grant(permissions, token, audience, ticket=ticket)
        logger.debug("Obtained requesting party token")
        return TokenSet.from_keycloak_response(response.json())

    async def list_permissions(
        self,
        permissions: Optional[Iterable[str]] = None,
        token: Optional[str] = None,
        audience: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """List the permissions the subject token is granted.

        Returns:
            Permission entries (``rsid``, ``rsname``, ``scopes``); empty when
            the request is denied
        """
        try:
            response = await self._ticket_grant(
                permissions, token, audience, response_mode="permissions"
            )
        except UMARequestError as e:
            if e.status_code in DENIED_STATUS_CODES:
                logger.debug(f"Permission listing denied with status {e.status_code}")
                return []
            raise

        return list(response.json())

    async def check(
        self,
        resource: str,
        scope: Optional[str] = None,
        token: Optional[str] = None,
        audience: Optional[str] = None,
    ) -> bool:
        """Ask the server whether the subject token may access a resource."""
        permission = format_permission(resource, [scope] if scope else None)

        try:
            response = await self._ticket_grant(
                [permission], token, audience, response_mode="decision"
            )
        except UMARequestError as e:
            if e.status_code in DENIED_STATUS_CODES:
                logger.debug(f"Permission {permission} denied with status {e.status_code}")
                return False
            raise

        return bool(response.json().get("result", False))
