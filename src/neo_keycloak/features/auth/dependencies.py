"""FastAPI dependencies protecting routes with Keycloak grants."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status

from ...core.exceptions import NeoKeycloakError
from .entities.grant import Grant

logger = logging.getLogger(__name__)


class AccessControlError(HTTPException):
    """HTTP error raised by access control dependencies."""

    def __init__(self, detail: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
        headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        super().__init__(status_code=status_code, detail=detail, headers=headers)


def get_grant(request: Request) -> Optional[Grant]:
    """Get the request's grant, if the middleware accepted its token."""
    return getattr(request.state, "grant", None)


def require_grant(
    request: Request,
    grant: Annotated[Optional[Grant], Depends(get_grant)],
) -> Grant:
    """Require a valid bearer token."""
    if grant is not None:
        return grant

    if getattr(request.state, "access_control_error", None) is not None:
        raise AccessControlError(
            "Authorization service unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    if getattr(request.state, "access_denied", False):
        raise AccessControlError("Access denied", status_code=status.HTTP_403_FORBIDDEN)
    raise AccessControlError("Authentication required")


def require_role(role: str):
    """Require a role in ``[realm|client:]role`` form."""

    def dependency(grant: Annotated[Grant, Depends(require_grant)]) -> Grant:
        if not grant.has_role(role):
            logger.warning(f"User {grant.username or grant.subject} lacks role {role}")
            raise AccessControlError(f"Role required: {role}", status_code=status.HTTP_403_FORBIDDEN)
        return grant

    return dependency


def require_permission(resource: str, scope: Optional[str] = None):
    """Require the server to grant the caller access to a resource (and scope)."""

    async def dependency(
        request: Request,
        grant: Annotated[Grant, Depends(require_grant)],
    ) -> Grant:
        service = getattr(request.app.state, "keycloak", None)
        if service is None or service.permission_manager is None:
            logger.error("Permission check requested before the Keycloak service was initialized")
            raise AccessControlError(
                "Authorization service unavailable",
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        try:
            allowed = await service.permission_manager.check(
                resource, scope, token=grant.access_token
            )
        except NeoKeycloakError as e:
            logger.error(f"Permission check for {resource} failed: {e}")
            raise AccessControlError(
                "Authorization service unavailable",
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            ) from e

        if not allowed:
            target = f"{resource}#{scope}" if scope else resource
            logger.warning(f"User {grant.username or grant.subject} denied {target}")
            raise AccessControlError("Access denied", status_code=status.HTTP_403_FORBIDDEN)
        return grant

    return dependency
