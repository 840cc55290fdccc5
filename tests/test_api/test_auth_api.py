"""
API tests for login, the two authentication schemes and admin-only policies

Date: 2025-11-04
"""
from datetime import timedelta

from ecomm.core.auth import hash_api_key
from ecomm.core.utils import utcnow
from ecomm.models import ApiKey, User


class TestLogin:
    """POST /api/v1/auth/login"""

    def test_login_returns_user_and_token(self, client, seeded_db):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@demostore.com", "password": "password123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "admin@demostore.com"
        assert body["user"]["role"] == "TENANT_ADMIN"
        assert "passwordHash" not in body["user"]

        user = seeded_db.query(User).filter(User.email == "admin@demostore.com").one()
        assert user.last_login_at is not None

    def test_login_sets_http_only_cookie(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@platform.com", "password": "password123"},
        )

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("auth-token=")
        assert "HttpOnly" in cookie
        assert "SameSite=strict" in cookie

    def test_email_is_case_insensitive(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "ADMIN@Platform.com", "password": "password123"},
        )
        assert response.status_code == 200

    def test_missing_fields_return_400(self, client):
        response = client.post("/api/v1/auth/login", json={"email": "admin@platform.com"})
        assert response.status_code == 400

    def test_wrong_password_returns_401(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@platform.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_inactive_user_cannot_log_in(self, client, seeded_db):
        user = seeded_db.query(User).filter(User.email == "catalog@demostore.com").one()
        user.is_active = False
        seeded_db.commit()

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "catalog@demostore.com", "password": "password123"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"


class TestMeAndLogout:

    def test_me_returns_current_user(self, client, admin_headers):
        response = client.get("/api/v1/auth/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["id"] == "user-2"
        assert response.json()["tenantId"] == "tenant-a"

    def test_me_rejects_api_keys(self, client, api_key_headers):
        response = client.get("/api/v1/auth/me", headers=api_key_headers)
        assert response.status_code == 401

    def test_tampered_token_returns_401(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401

    def test_logout_clears_cookie(self, client, admin_headers):
        response = client.post("/api/v1/auth/logout", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["set-cookie"].startswith('auth-token=""')

    def test_logout_requires_authentication(self, client):
        assert client.post("/api/v1/auth/logout").status_code == 401


class TestApiKeyAuthentication:

    def test_legacy_key_authenticates_and_is_upgraded(self, client, seeded_db, api_key_headers):
        response = client.get("/api/v1/categories", headers=api_key_headers)

        assert response.status_code == 200
        key = seeded_db.get(ApiKey, "key-1")
        assert key.key_hash == hash_api_key("sk_live_demo_key_12345")
        assert key.last_used_at is not None

        # Second call goes through the SHA-256 lookup
        assert client.get("/api/v1/categories", headers=api_key_headers).status_code == 200

    def test_unknown_key_returns_401(self, client):
        response = client.get("/api/v1/categories", headers={"X-API-Key": "sk_live_nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_revoked_seed_key_returns_401(self, client):
        response = client.get("/api/v1/categories", headers={"X-API-Key": "sk_test_online_44444"})
        assert response.status_code == 401

    def test_expired_key_returns_401(self, client, seeded_db, api_key_headers):
        key = seeded_db.get(ApiKey, "key-1")
        key.expires_at = utcnow() - timedelta(days=1)
        seeded_db.commit()

        response = client.get("/api/v1/products", headers=api_key_headers)

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"


class TestAdminOnlyPolicy:

    def test_api_key_cannot_reach_admin_endpoints(self, client, api_key_headers):
        response = client.get("/api/v1/admin/tenants", headers=api_key_headers)
        assert response.status_code == 401

    def test_jwt_reaches_admin_endpoints(self, client, admin_headers):
        response = client.get("/api/v1/admin/tenants", headers=admin_headers)
        assert response.status_code == 200

    def test_role_hierarchy_blocks_tenant_creation_for_tenant_admin(self, client, admin_headers):
        response = client.post(
            "/api/v1/admin/tenants",
            json={"name": "New Co", "displayName": "New Co", "contactEmail": "ops@newco.com"},
            headers=admin_headers,
        )
        assert response.status_code == 403
