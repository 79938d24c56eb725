"""UMA resource registration adapter."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import quote

from ....core.exceptions.auth import InvalidResourceError, ResourceNotFoundError
from ..entities.resource import Resource

if TYPE_CHECKING:
    from ..services.keycloak_service import KeycloakService
    from .request_manager import RequestManager

logger = logging.getLogger(__name__)


class ResourceManager:
    """Manages resources through the UMA protection API.

    Every call is authenticated with the service's own client-credentials
    token, which acts as the protection API token.
    """

    def __init__(self, service: "KeycloakService", resource_registration_endpoint: str):
        self._service = service
        self.endpoint = resource_registration_endpoint.rstrip("/")

    @property
    def _requests(self) -> "RequestManager":
        return self._service.request_manager

    def _resource_url(self, resource_id: str) -> str:
        return f"{self.endpoint}/{quote(resource_id, safe='')}"

    @staticmethod
    def _build_params(
        name: Optional[str] = None,
        uri: Optional[str] = None,
        owner: Optional[str] = None,
        resource_type: Optional[str] = None,
        scope: Optional[str] = None,
        exact_name: Optional[bool] = None,
        first: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = {
            "name": name,
            "uri": uri,
            "owner": owner,
            "type": resource_type,
            "scope": scope,
            "first": first,
            "max": max_results,
        }
        if exact_name is not None:
            params["exactName"] = "true" if exact_name else "false"
        return {key: value for key, value in params.items() if value is not None}

    async def create(self, resource: Resource) -> Resource:
        """Register a resource and return it with its assigned id."""
        response = await self._requests.post(self.endpoint, json=resource.to_dict())
        created = Resource.from_dict(response.json())
        logger.info(f"Created UMA resource {created.name} ({created.id})")
        return created

    async def update(self, resource: Resource) -> Resource:
        """Replace a registered resource's representation.

        Raises:
            InvalidResourceError: The resource has no id
        """
        if not resource.id:
            raise InvalidResourceError(
                f"Cannot update resource {resource.name} without an id",
                details={"name": resource.name},
            )

        await self._requests.put(self._resource_url(resource.id), json=resource.to_dict())
        logger.info(f"Updated UMA resource {resource.name} ({resource.id})")
        return resource

    async def delete(self, resource_id: str) -> None:
        """Delete a registered resource."""
        await self._requests.delete(self._resource_url(resource_id))
        logger.info(f"Deleted UMA resource {resource_id}")

    async def find_by_id(self, resource_id: str) -> Resource:
        """Get a resource by id.

        Raises:
            ResourceNotFoundError: No resource has this id
        """
        response = await self._requests.get(self._resource_url(resource_id))
        return Resource.from_dict(response.json())

    async def find_ids(self, **filters) -> List[str]:
        """List ids of resources matching the given filters."""
        response = await self._requests.get(self.endpoint, params=self._build_params(**filters))
        return list(response.json())

    async def find(
        self,
        name: Optional[str] = None,
        uri: Optional[str] = None,
        owner: Optional[str] = None,
        resource_type: Optional[str] = None,
        scope: Optional[str] = None,
        exact_name: Optional[bool] = None,
        first: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[Resource]:
        """List full representations of resources matching the given filters."""
        params = self._build_params(
            name=name,
            uri=uri,
            owner=owner,
            resource_type=resource_type,
            scope=scope,
            exact_name=exact_name,
            first=first,
            max_results=max_results,
        )
        params["deep"] = "true"

        response = await self._requests.get(self.endpoint, params=params)
        return [Resource.from_dict(item) for item in response.json()]

    async def find_by_name(self, name: str) -> Optional[Resource]:
        """Get the resource with exactly this name, if any."""
        resources = await self.find(name=name, exact_name=True)
        if not resources:
            return None
        return resources[0]

    async def exists(self, resource_id: str) -> bool:
        """Check whether a resource with this id is registered."""
        try:
            await self.find_by_id(resource_id)
        except ResourceNotFoundError:
            return False
        return True
