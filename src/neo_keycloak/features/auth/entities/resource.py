"""UMA resource entity."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _scope_names(scopes: Optional[List[Any]]) -> List[str]:
    """Normalize scope entries given as names or {"name": ...} objects."""
    names = []
    for scope in scopes or []:
        if isinstance(scope, dict):
            name = scope.get("name")
        else:
            name = scope
        if name:
            names.append(name)
    return names


@dataclass(frozen=True)
class Resource:
    """Resource registered with the UMA protection API."""

    name: str
    id: Optional[str] = None
    type: Optional[str] = None
    uris: List[str] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    owner: Optional[str] = None
    owner_managed_access: bool = False
    display_name: Optional[str] = None
    icon_uri: Optional[str] = None
    attributes: Dict[str, List[str]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("name is required")

    def to_dict(self) -> Dict[str, Any]:
        """Convert resource to the protection API representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "resource_scopes": list(self.scopes),
            "ownerManagedAccess": self.owner_managed_access,
        }

        if self.id:
            result["_id"] = self.id
        if self.type:
            result["type"] = self.type
        if self.uris:
            result["uris"] = list(self.uris)
        if self.owner:
            result["owner"] = self.owner
        if self.display_name:
            result["displayName"] = self.display_name
        if self.icon_uri:
            result["icon_uri"] = self.icon_uri
        if self.attributes:
            result["attributes"] = dict(self.attributes)

        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        """Create resource from a protection API representation."""
        owner = data.get("owner")
        if isinstance(owner, dict):
            owner = owner.get("id") or owner.get("name")

        scopes = data.get("resource_scopes")
        if scopes is None:
            scopes = data.get("scopes")

        return cls(
            name=data["name"],
            id=data.get("_id") or data.get("id"),
            type=data.get("type"),
            uris=list(data.get("uris") or []),
            scopes=_scope_names(scopes),
            owner=owner,
            owner_managed_access=bool(data.get("ownerManagedAccess", False)),
            display_name=data.get("displayName"),
            icon_uri=data.get("icon_uri"),
            attributes=dict(data.get("attributes") or {}),
        )
