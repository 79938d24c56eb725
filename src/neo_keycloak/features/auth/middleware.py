"""FastAPI middleware attaching Keycloak grants to requests."""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from fastapi import FastAPI, Request, Response

from ...core.exceptions import NeoKeycloakError
from .adapters.keycloak_connect import KeycloakConnectAdapter

if TYPE_CHECKING:
    from .services.keycloak_service import KeycloakService

logger = logging.getLogger(__name__)


class AccessControlMiddleware:
    """Resolves the bearer token of each request into a grant.

    Sets ``request.state.grant`` (None without a valid token),
    ``request.state.access_denied`` and ``request.state.access_control_error``
    (the error raised when the token could not be checked at all). The
    middleware never answers on its own; route dependencies turn a missing
    grant into 401/403, or 503 when the provider was unreachable.
    """

    def __init__(
        self,
        adapter: KeycloakConnectAdapter,
        excluded_paths: Optional[list[str]] = None,
    ):
        """Initialize access control middleware."""
        self.adapter = adapter

        # Paths whose tokens are never inspected
        self.excluded_paths = excluded_paths or [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
        ]

    async def __call__(self, request: Request, call_next: Callable) -> Response:
        """Process request through the access control middleware."""
        request.state.grant = None
        request.state.access_denied = False
        request.state.access_control_error = None

        if not self._should_exclude_path(request.url.path):
            token = self.adapter.extract_bearer(request)
            if token is not None:
                try:
                    grant = await self.adapter.validate(token)
                except NeoKeycloakError as e:
                    logger.error(f"Cannot validate token for {request.method} {request.url.path}: {e}")
                    request.state.access_control_error = e
                    return await call_next(request)

                if grant is None:
                    logger.debug(f"Access denied for {request.method} {request.url.path}")
                    self.adapter.access_denied(request)
                else:
                    request.state.grant = grant

        return await call_next(request)

    def _should_exclude_path(self, path: str) -> bool:
        """Check if path should be excluded from token processing."""
        return any(path.startswith(excluded) for excluded in self.excluded_paths)


def configure_access_control(
    app: FastAPI,
    service: "KeycloakService",
    excluded_paths: Optional[list[str]] = None,
) -> AccessControlMiddleware:
    """Register the access control middleware and expose the service on app.state."""
    app.state.keycloak = service

    middleware = AccessControlMiddleware(service.connect, excluded_paths=excluded_paths)
    app.middleware("http")(middleware)
    logger.info(f"Added access control middleware for realm {service.connect.realm}")

    return middleware
