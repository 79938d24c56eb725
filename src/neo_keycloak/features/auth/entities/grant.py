"""Grant entity for validated bearer tokens on incoming requests."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Grant:
    """A bearer token that passed validation, with its decoded claims.

    Role checks follow the Keycloak adapter convention:
    ``realm:<role>`` checks realm roles, ``<client>:<role>`` checks the roles
    of that client, and a bare ``<role>`` checks the roles of the client the
    adapter was configured for.
    """

    access_token: str
    claims: Dict[str, Any] = field(default_factory=dict)
    client_id: Optional[str] = None

    @property
    def subject(self) -> Optional[str]:
        return self.claims.get("sub")

    @property
    def username(self) -> Optional[str]:
        return self.claims.get("preferred_username")

    @property
    def expires_at(self) -> Optional[datetime]:
        exp = self.claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc)

    @property
    def is_expired(self) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return False
        return datetime.now(timezone.utc) >= expires_at

    @property
    def realm_roles(self) -> List[str]:
        return list(self.claims.get("realm_access", {}).get("roles", []))

    def application_roles(self, client_id: str) -> List[str]:
        resource_access = self.claims.get("resource_access", {})
        return list(resource_access.get(client_id, {}).get("roles", []))

    def has_realm_role(self, role: str) -> bool:
        return role in self.realm_roles

    def has_application_role(self, client_id: str, role: str) -> bool:
        return role in self.application_roles(client_id)

    def has_role(self, role: str) -> bool:
        """Check a role written in the adapter's ``[realm|client:]role`` form."""
        if ":" not in role:
            if not self.client_id:
                return False
            return self.has_application_role(self.client_id, role)

        prefix, _, name = role.partition(":")
        if prefix == "realm":
            return self.has_realm_role(name)
        return self.has_application_role(prefix, name)
