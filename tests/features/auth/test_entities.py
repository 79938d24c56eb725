"""Tests for auth feature entities."""

from datetime import datetime, timedelta, timezone

import pytest

from neo_keycloak.core.exceptions import ConfigurationError, DiscoveryError
from neo_keycloak.features.auth.entities.grant import Grant
from neo_keycloak.features.auth.entities.keycloak_config import (
    ClientCredentials,
    KeycloakConfig,
)
from neo_keycloak.features.auth.entities.resource import Resource
from neo_keycloak.features.auth.entities.token_set import TokenSet
from neo_keycloak.features.auth.entities.uma_configuration import UMAConfiguration


class TestKeycloakConfig:
    """Test realm configuration validation and URL derivation."""

    @pytest.mark.parametrize("base_url", [
        "sso.example.com",
        "ftp://sso.example.com",
        "//sso.example.com",
        "https://",
    ])
    def test_rejects_base_url_without_http_scheme(self, base_url):
        with pytest.raises(ConfigurationError) as exc_info:
            KeycloakConfig(base_url=base_url, realm_name="acme")

        assert "http or https" in exc_info.value.message

    def test_rejects_empty_realm(self):
        with pytest.raises(ConfigurationError):
            KeycloakConfig(base_url="https://sso.example.com", realm_name="")

    def test_accepts_http_and_https(self):
        assert KeycloakConfig(base_url="http://localhost:8080", realm_name="acme")
        assert KeycloakConfig(base_url="https://sso.example.com", realm_name="acme")

    def test_realm_url_replaces_base_path(self):
        config = KeycloakConfig(base_url="https://sso.example.com/some/path", realm_name="acme")

        assert config.realm_url == "https://sso.example.com/auth/realms/acme"
        assert config.server_url == "https://sso.example.com/auth/"

    def test_realm_url_without_auth_path(self):
        config = KeycloakConfig(base_url="http://localhost:8080", realm_name="acme", auth_path="")

        assert config.realm_url == "http://localhost:8080/realms/acme"
        assert config.server_url == "http://localhost:8080/"

    def test_auth_path_is_normalized(self):
        config = KeycloakConfig(base_url="https://sso.example.com", realm_name="acme", auth_path="auth/")

        assert config.auth_path == "/auth"
        assert config.uma_configuration_url == (
            "https://sso.example.com/auth/realms/acme/.well-known/uma2-configuration"
        )

    def test_dict_round_trip_keeps_defaults(self):
        config = KeycloakConfig.from_dict({"base_url": "https://sso.example.com", "realm_name": "acme"})

        assert config.to_dict() == {
            "base_url": "https://sso.example.com",
            "realm_name": "acme",
            "auth_path": "/auth",
            "verify_ssl": True,
            "timeout": 30,
        }


class TestClientCredentials:
    """Test client credential validation."""

    def test_secret_not_in_repr(self):
        credentials = ClientCredentials(client_id="orders-service", client_secret="s3cr3t")

        assert "s3cr3t" not in repr(credentials)

    @pytest.mark.parametrize("client_id,client_secret", [("", "s3cr3t"), ("orders-service", "")])
    def test_requires_id_and_secret(self, client_id, client_secret):
        with pytest.raises(ConfigurationError):
            ClientCredentials(client_id=client_id, client_secret=client_secret)


class TestTokenSet:
    """Test token set expiry handling."""

    def test_from_keycloak_response(self, token_response):
        token_set = TokenSet.from_keycloak_response(token_response)

        assert token_set.access_token == "service-access-token"
        assert token_set.refresh_token is None
        assert token_set.expires_at == token_set.issued_at + timedelta(seconds=300)
        assert not token_set.is_expired

    def test_expired_token(self, expired_token_set):
        assert expired_token_set.is_expired
        assert expired_token_set.time_until_expiry == 0

    def test_without_expiry_never_expires(self):
        token_set = TokenSet(access_token="abc")

        assert token_set.expires_at is None
        assert not token_set.is_expired
        assert token_set.time_until_expiry is None

    def test_requires_access_token(self):
        with pytest.raises(ValueError):
            TokenSet(access_token="")

    def test_refresh_token_expiry(self):
        issued_at = datetime.now(timezone.utc) - timedelta(seconds=100)

        assert TokenSet(access_token="a").is_refresh_token_expired
        assert TokenSet(
            access_token="a", refresh_token="r", refresh_expires_in=50, issued_at=issued_at
        ).is_refresh_token_expired
        assert not TokenSet(
            access_token="a", refresh_token="r", refresh_expires_in=1800, issued_at=issued_at
        ).is_refresh_token_expired

    def test_is_immutable(self, valid_token_set):
        with pytest.raises(AttributeError):
            valid_token_set.access_token = "other"

    def test_to_dict(self):
        token_set = TokenSet(access_token="a", expires_in=60, refresh_token="r")

        assert token_set.to_dict() == {
            "access_token": "a",
            "token_type": "Bearer",
            "expires_in": 60,
            "refresh_token": "r",
        }


class TestUMAConfiguration:
    """Test UMA discovery document parsing."""

    def test_from_dict(self, uma_document):
        uma = UMAConfiguration.from_dict(uma_document)

        assert uma.issuer == "https://sso.example.com/auth/realms/acme"
        assert uma.resource_registration_endpoint.endswith("/authz/protection/resource_set")
        assert uma.permission_endpoint.endswith("/authz/protection/permission")
        assert "urn:ietf:params:oauth:grant-type:uma-ticket" in uma.grant_types_supported
        assert uma.to_dict() == uma_document

    def test_missing_required_keys(self, uma_document):
        del uma_document["token_endpoint"]
        del uma_document["resource_registration_endpoint"]

        with pytest.raises(DiscoveryError) as exc_info:
            UMAConfiguration.from_dict(uma_document)

        assert exc_info.value.details["missing"] == ["token_endpoint", "resource_registration_endpoint"]

    def test_rejects_non_object(self):
        with pytest.raises(DiscoveryError):
            UMAConfiguration.from_dict(["issuer"])


class TestResource:
    """Test UMA resource representation mapping."""

    def test_to_dict(self):
        resource = Resource(
            name="orders",
            type="urn:orders-service:resources:order",
            uris=["/orders/*"],
            scopes=["view", "edit"],
            owner_managed_access=True,
            display_name="Orders",
        )

        assert resource.to_dict() == {
            "name": "orders",
            "type": "urn:orders-service:resources:order",
            "uris": ["/orders/*"],
            "resource_scopes": ["view", "edit"],
            "ownerManagedAccess": True,
            "displayName": "Orders",
        }

    def test_from_dict_accepts_scope_objects(self):
        resource = Resource.from_dict({
            "_id": "d2f1",
            "name": "orders",
            "owner": {"id": "3a9c", "name": "orders-service"},
            "scopes": [{"id": "s1", "name": "view"}, {"id": "s2", "name": "edit"}],
            "ownerManagedAccess": False,
        })

        assert resource.id == "d2f1"
        assert resource.owner == "3a9c"
        assert resource.scopes == ["view", "edit"]

    def test_from_dict_accepts_scope_names(self):
        resource = Resource.from_dict({"name": "orders", "resource_scopes": ["view"]})

        assert resource.scopes == ["view"]
        assert resource.id is None


class TestGrant:
    """Test role checks on validated grants."""

    @pytest.fixture
    def grant(self):
        return Grant(
            access_token="user-token",
            client_id="orders-service",
            claims={
                "sub": "a1b2",
                "preferred_username": "alice",
                "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()),
                "realm_access": {"roles": ["offline_access", "admin"]},
                "resource_access": {
                    "orders-service": {"roles": ["clerk"]},
                    "billing": {"roles": ["viewer"]},
                },
            },
        )

    def test_claims(self, grant):
        assert grant.subject == "a1b2"
        assert grant.username == "alice"
        assert not grant.is_expired

    def test_realm_role(self, grant):
        assert grant.has_role("realm:admin")
        assert not grant.has_role("realm:clerk")

    def test_application_role(self, grant):
        assert grant.has_role("billing:viewer")
        assert not grant.has_role("billing:clerk")

    def test_bare_role_uses_configured_client(self, grant):
        assert grant.has_role("clerk")
        assert not grant.has_role("viewer")

    def test_bare_role_without_client(self):
        grant = Grant(access_token="t", claims={"resource_access": {"x": {"roles": ["clerk"]}}})

        assert not grant.has_role("clerk")

    def test_expired(self):
        grant = Grant(access_token="t", claims={"exp": 1})

        assert grant.is_expired
