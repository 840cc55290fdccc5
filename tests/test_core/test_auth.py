"""
Unit tests for password hashing, JWT handling and API key validation

Date: 2025-11-04
"""
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from ecomm.core import auth
from ecomm.core.auth import (
    Principal,
    create_access_token,
    decode_access_token,
    generate_api_key,
    hash_api_key,
    hash_password,
    last_four_chars,
    require_role,
    validate_api_key,
    verify_password,
)


def _user(**overrides):
    data = dict(
        id="user-9",
        email="ops@example.com",
        display_name="Ops",
        role="TENANT_ADMIN",
        tenant_id="tenant-a",
        assigned_market_ids=["market-1"],
    )
    data.update(overrides)
    return SimpleNamespace(**data)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("password123")

        assert hashed != "password123"
        assert verify_password("password123", hashed)
        assert not verify_password("password124", hashed)


class TestJwt:

    def test_round_trip_carries_claims(self):
        payload = decode_access_token(create_access_token(_user()))

        assert payload["sub"] == "user-9"
        assert payload["role"] == "TENANT_ADMIN"
        assert payload["tenant_id"] == "tenant-a"
        assert payload["market_ids"] == ["market-1"]

    def test_superadmin_token_has_no_tenant_claim(self):
        payload = decode_access_token(create_access_token(_user(role="SUPERADMIN", tenant_id=None)))
        assert "tenant_id" not in payload

    def test_expired_token_is_rejected(self):
        token = create_access_token(_user(), expires_minutes=-1)

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience_is_rejected(self):
        token = create_access_token(_user())

        with patch.object(auth.settings, "JWT_AUDIENCE", "someone-else"):
            with pytest.raises(HTTPException) as exc_info:
                decode_access_token(token)

        assert exc_info.value.status_code == 401


class TestApiKeys:

    def test_generated_key_format(self):
        key = generate_api_key()

        assert key.startswith("sk_live_")
        assert len(key) == 72
        assert last_four_chars(key) == key[-4:]

    def test_sha256_validation(self):
        key = generate_api_key()

        assert validate_api_key(key, hash_api_key(key))
        assert not validate_api_key(key + "x", hash_api_key(key))

    def test_legacy_hash_accepted_while_enabled(self):
        assert validate_api_key("sk_live_demo", "hash_of_sk_live_demo")
        assert not validate_api_key("sk_live_other", "hash_of_sk_live_demo")

    def test_legacy_hash_refused_when_disabled(self):
        with patch.object(auth.settings, "ALLOW_LEGACY_API_KEY_HASHES", False):
            assert not validate_api_key("sk_live_demo", "hash_of_sk_live_demo")

    def test_empty_values_never_validate(self):
        assert not validate_api_key("", hash_api_key(""))
        assert not validate_api_key("key", "")


class TestRoles:

    def test_higher_role_passes(self):
        checker = require_role("TENANT_ADMIN")
        user = Principal(id="user-1", role="SUPERADMIN")

        assert checker(user=user) is user

    def test_lower_role_is_forbidden(self):
        checker = require_role("SUPERADMIN")

        with pytest.raises(HTTPException) as exc_info:
            checker(user=Principal(id="user-3", role="TENANT_USER"))

        assert exc_info.value.status_code == 403
