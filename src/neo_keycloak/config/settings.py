"""
Environment settings for the Keycloak service.

Reads KEYCLOAK_* variables (or a .env file) and turns them into the
immutable module options the service is built from.
"""
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..features.auth.entities.keycloak_config import (
    ClientCredentials,
    KeycloakConfig,
    KeycloakModuleOptions,
)


class KeycloakSettings(BaseSettings):
    """Keycloak connection settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="KEYCLOAK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(description="Keycloak base URL, e.g. https://sso.example.com")
    realm_name: str = Field(description="Realm the client belongs to")
    client_id: str = Field(description="Confidential client id")
    client_secret: SecretStr = Field(description="Confidential client secret")

    auth_path: str = Field(default="/auth", description="Context path; empty for Keycloak 17+")
    verify_ssl: bool = True
    timeout: int = Field(default=30, gt=0)

    def to_options(self) -> KeycloakModuleOptions:
        """Build module options; raises ConfigurationError on an invalid base URL."""
        return KeycloakModuleOptions(
            config=KeycloakConfig(
                base_url=self.base_url,
                realm_name=self.realm_name,
                auth_path=self.auth_path,
                verify_ssl=self.verify_ssl,
                timeout=self.timeout,
            ),
            credentials=ClientCredentials(
                client_id=self.client_id,
                client_secret=self.client_secret.get_secret_value(),
            ),
        )


@lru_cache()
def get_keycloak_settings() -> KeycloakSettings:
    """Get cached Keycloak settings instance."""
    return KeycloakSettings()
