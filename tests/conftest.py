"""Pytest configuration and fixtures for neo-keycloak tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from neo_keycloak.features.auth.entities.keycloak_config import (
    ClientCredentials,
    KeycloakConfig,
    KeycloakModuleOptions,
)
from neo_keycloak.features.auth.entities.token_set import TokenSet

ISSUER = "https://sso.example.com/auth/realms/acme"


@pytest.fixture
def keycloak_config():
    """Realm configuration for testing."""
    return KeycloakConfig(base_url="https://sso.example.com", realm_name="acme")


@pytest.fixture
def client_credentials():
    """Confidential client credentials for testing."""
    return ClientCredentials(client_id="orders-service", client_secret="s3cr3t")


@pytest.fixture
def module_options(keycloak_config, client_credentials):
    """Module options for testing."""
    return KeycloakModuleOptions(config=keycloak_config, credentials=client_credentials)


@pytest.fixture
def uma_document():
    """UMA2 discovery document as published by Keycloak."""
    return {
        "issuer": ISSUER,
        "authorization_endpoint": f"{ISSUER}/protocol/openid-connect/auth",
        "token_endpoint": f"{ISSUER}/protocol/openid-connect/token",
        "introspection_endpoint": f"{ISSUER}/protocol/openid-connect/token/introspect",
        "end_session_endpoint": f"{ISSUER}/protocol/openid-connect/logout",
        "jwks_uri": f"{ISSUER}/protocol/openid-connect/certs",
        "grant_types_supported": [
            "authorization_code",
            "client_credentials",
            "refresh_token",
            "urn:ietf:params:oauth:grant-type:uma-ticket",
        ],
        "response_modes_supported": ["query", "fragment", "form_post"],
        "scopes_supported": ["openid"],
        "resource_registration_endpoint": f"{ISSUER}/authz/protection/resource_set",
        "permission_endpoint": f"{ISSUER}/authz/protection/permission",
        "policy_endpoint": f"{ISSUER}/authz/protection/uma-policy",
    }


@pytest.fixture
def token_response():
    """Token endpoint response for a client credentials grant."""
    return {
        "access_token": "service-access-token",
        "expires_in": 300,
        "refresh_expires_in": 0,
        "token_type": "Bearer",
        "not-before-policy": 0,
        "scope": "profile email",
    }


@pytest.fixture
def valid_token_set():
    """Token set that is still valid."""
    return TokenSet(access_token="service-access-token", expires_in=300, refresh_token="refresh-1")


@pytest.fixture
def expired_token_set():
    """Token set that expired a minute ago and can be refreshed."""
    return TokenSet(
        access_token="expired-access-token",
        expires_in=60,
        refresh_token="refresh-1",
        issued_at=datetime.now(timezone.utc) - timedelta(seconds=120),
    )


@pytest.fixture
def mock_service(module_options, valid_token_set):
    """Keycloak service stand-in for adapter tests."""
    service = MagicMock()
    service.options = module_options
    service.refresh_grant = AsyncMock(return_value=valid_token_set)
    return service
