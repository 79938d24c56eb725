"""Keycloak module configuration entities."""

from dataclasses import dataclass, field
from typing import Dict
from urllib.parse import quote, urlsplit

from ....core.exceptions.auth import ConfigurationError


@dataclass(frozen=True)
class KeycloakConfig:
    """Connection settings for one Keycloak realm."""

    base_url: str
    realm_name: str

    # Context path Keycloak is served under; "" for Keycloak 17+ (Quarkus)
    auth_path: str = "/auth"

    # Connection settings
    verify_ssl: bool = True
    timeout: int = 30

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.base_url:
            raise ConfigurationError("base_url is required")

        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(
                "Invalid base url. It should start with either http or https.",
                details={"base_url": self.base_url},
            )

        if not self.realm_name:
            raise ConfigurationError("realm_name is required")

        # Set normalized values using object.__setattr__ since dataclass is frozen
        auth_path = (self.auth_path or "").strip("/")
        object.__setattr__(self, "auth_path", f"/{auth_path}" if auth_path else "")

    @property
    def origin(self) -> str:
        """Scheme and authority of the base URL, without any path."""
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def server_url(self) -> str:
        """Server URL in the form python-keycloak clients expect."""
        return f"{self.origin}{self.auth_path}/"

    @property
    def realm_url(self) -> str:
        """Base URL of the realm; any path on base_url is replaced."""
        return f"{self.origin}{self.auth_path}/realms/{quote(self.realm_name, safe='')}"

    @property
    def uma_configuration_url(self) -> str:
        """Location of the realm's UMA2 discovery document."""
        return f"{self.realm_url}/.well-known/uma2-configuration"

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            "base_url": self.base_url,
            "realm_name": self.realm_name,
            "auth_path": self.auth_path,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "KeycloakConfig":
        """Create configuration from dictionary."""
        return cls(
            base_url=data["base_url"],
            realm_name=data["realm_name"],
            auth_path=data.get("auth_path", "/auth"),
            verify_ssl=data.get("verify_ssl", True),
            timeout=data.get("timeout", 30),
        )


@dataclass(frozen=True)
class ClientCredentials:
    """Confidential client credentials."""

    client_id: str
    client_secret: str = field(repr=False)

    def __post_init__(self):
        if not self.client_id:
            raise ConfigurationError("client_id is required")

        if not self.client_secret:
            raise ConfigurationError("client_secret is required")


@dataclass(frozen=True)
class KeycloakModuleOptions:
    """Everything the Keycloak service needs to connect as a confidential client."""

    config: KeycloakConfig
    credentials: ClientCredentials
