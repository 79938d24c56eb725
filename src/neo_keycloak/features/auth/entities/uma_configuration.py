"""UMA2 discovery document entity."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ....core.exceptions.auth import DiscoveryError

REQUIRED_KEYS = ("issuer", "token_endpoint", "resource_registration_endpoint")


@dataclass(frozen=True)
class UMAConfiguration:
    """Provider metadata published at /.well-known/uma2-configuration."""

    issuer: str
    token_endpoint: str
    resource_registration_endpoint: str

    permission_endpoint: Optional[str] = None
    policy_endpoint: Optional[str] = None
    introspection_endpoint: Optional[str] = None
    authorization_endpoint: Optional[str] = None
    end_session_endpoint: Optional[str] = None
    jwks_uri: Optional[str] = None

    grant_types_supported: List[str] = field(default_factory=list)
    response_modes_supported: List[str] = field(default_factory=list)
    scopes_supported: List[str] = field(default_factory=list)

    # Full document as published, including keys not modelled above
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UMAConfiguration":
        """Create configuration from the discovery document."""
        if not isinstance(data, dict):
            raise DiscoveryError("UMA configuration document is not a JSON object")

        missing = [key for key in REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise DiscoveryError(
                f"UMA configuration is missing required keys: {', '.join(missing)}",
                details={"missing": missing},
            )

        return cls(
            issuer=data["issuer"],
            token_endpoint=data["token_endpoint"],
            resource_registration_endpoint=data["resource_registration_endpoint"],
            permission_endpoint=data.get("permission_endpoint"),
            policy_endpoint=data.get("policy_endpoint"),
            introspection_endpoint=data.get("introspection_endpoint"),
            authorization_endpoint=data.get("authorization_endpoint"),
            end_session_endpoint=data.get("end_session_endpoint"),
            jwks_uri=data.get("jwks_uri"),
            grant_types_supported=list(data.get("grant_types_supported", [])),
            response_modes_supported=list(data.get("response_modes_supported", [])),
            scopes_supported=list(data.get("scopes_supported", [])),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the discovery document as published."""
        return dict(self.raw)
