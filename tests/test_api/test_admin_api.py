"""
API tests for tenant, market, API key and order status administration

Date: 2025-11-04
"""
from ecomm.models import Market, OrderStatus, Tenant


class TestTenantsAdmin:
    """/api/v1/admin/tenants"""

    def test_paged_list(self, client, admin_headers):
        response = client.get("/api/v1/admin/tenants", params={"limit": 2}, headers=admin_headers)

        assert response.status_code == 200
        page = response.json()
        assert page["total"] == 3
        assert page["limit"] == 2
        assert [t["displayName"] for t in page["data"]] == ["Demo Retail Group", "Sample Corp"]

    def test_search_matches_contact_email(self, client, admin_headers):
        page = client.get(
            "/api/v1/admin/tenants", params={"search": "testretail"}, headers=admin_headers
        ).json()

        assert [t["id"] for t in page["data"]] == ["tenant-b"]

    def test_update_display_name_is_visible_in_get(self, client, admin_headers):
        response = client.put(
            "/api/v1/admin/tenants/tenant-b",
            json={"displayName": "Test Retail Chain Inc."},
            headers=admin_headers,
        )
        assert response.status_code == 200

        tenant = client.get("/api/v1/admin/tenants/tenant-b", headers=admin_headers).json()
        assert tenant["displayName"] == "Test Retail Chain Inc."
        assert tenant["name"] == "test-retail-chain"

    def test_deactivate_and_reactivate(self, client, admin_headers, seeded_db):
        response = client.delete("/api/v1/admin/tenants/tenant-c", headers=admin_headers)
        assert response.status_code == 204
        assert seeded_db.get(Tenant, "tenant-c").status == "inactive"

        inactive = client.get("/api/v1/admin/tenants", params={"status": "inactive"}, headers=admin_headers).json()
        assert [t["id"] for t in inactive["data"]] == ["tenant-c"]

        response = client.post("/api/v1/admin/tenants/tenant-c/reactivate", headers=admin_headers)
        assert response.json()["status"] == "active"

    def test_unknown_tenant_returns_404(self, client, admin_headers):
        assert client.get("/api/v1/admin/tenants/tenant-x", headers=admin_headers).status_code == 404

    def test_superadmin_creates_tenant_with_default_statuses(self, client, superadmin_headers, seeded_db):
        response = client.post(
            "/api/v1/admin/tenants",
            json={"name": "North Shop", "displayName": "North Shop", "contactEmail": "ops@north.example.com"},
            headers=superadmin_headers,
        )

        assert response.status_code == 201
        assert response.json()["id"] == "tenant-north-shop"
        assert seeded_db.query(OrderStatus).filter(OrderStatus.tenant_id == "tenant-north-shop").count() == 8

    def test_duplicate_tenant_name_conflicts(self, client, superadmin_headers):
        response = client.post(
            "/api/v1/admin/tenants",
            json={"name": "Sample Corp", "displayName": "Sample", "contactEmail": "x@sample.example.com"},
            headers=superadmin_headers,
        )
        assert response.status_code == 409


class TestTenantInfo:
    """GET /api/v1/tenants/{tenant_id}"""

    def test_api_key_sees_only_its_market(self, client, api_key_headers):
        response = client.get("/api/v1/tenants/tenant-a", headers=api_key_headers)

        assert response.status_code == 200
        info = response.json()
        assert info["tenantName"] == "Demo Retail Group"
        assert [m["id"] for m in info["markets"]] == ["market-1"]

    def test_tenant_admin_sees_every_active_market(self, client, admin_headers):
        info = client.get("/api/v1/tenants/tenant-a", headers=admin_headers).json()
        assert {m["id"] for m in info["markets"]} == {"market-1", "market-2", "market-3"}

    def test_other_tenant_is_forbidden(self, client, api_key_headers):
        assert client.get("/api/v1/tenants/tenant-b", headers=api_key_headers).status_code == 403

    def test_unknown_tenant_returns_404(self, client, api_key_headers):
        assert client.get("/api/v1/tenants/tenant-x", headers=api_key_headers).status_code == 404


class TestMarketsAdmin:
    """/api/v1/admin/markets"""

    def test_list_filtered_by_tenant_and_type(self, client, admin_headers):
        page = client.get(
            "/api/v1/admin/markets",
            params={"tenantId": "tenant-a", "type": "online"},
            headers=admin_headers,
        ).json()

        assert page["total"] == 1
        assert page["data"][0]["code"] == "ONL-001"

    def test_update_rejects_duplicate_code(self, client, admin_headers):
        response = client.put(
            "/api/v1/admin/markets/market-2", json={"code": "dt-001"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_update_market(self, client, admin_headers):
        response = client.put(
            "/api/v1/admin/markets/market-2",
            json={"name": "Airport Terminal B", "type": "hybrid"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Airport Terminal B"
        assert response.json()["type"] == "hybrid"

    def test_invalid_type_is_rejected(self, client, admin_headers):
        response = client.put("/api/v1/admin/markets/market-2", json={"type": "kiosk"}, headers=admin_headers)
        assert response.status_code == 422

    def test_create_increments_tenant_market_count(self, client, admin_headers, seeded_db):
        response = client.post(
            "/api/v1/admin/markets",
            json={"tenantId": "tenant-b", "name": "Lakeside", "code": "LAKE-001", "type": "physical"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert seeded_db.get(Tenant, "tenant-b").market_count == 3

    def test_create_respects_max_markets(self, client, admin_headers):
        # tenant-c allows 3 markets and has 2
        client.post(
            "/api/v1/admin/markets",
            json={"tenantId": "tenant-c", "name": "Third", "code": "THR-001"},
            headers=admin_headers,
        )

        response = client.post(
            "/api/v1/admin/markets",
            json={"tenantId": "tenant-c", "name": "Fourth", "code": "FOU-001"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "suggestion" in response.json()

    def test_deactivate_market(self, client, admin_headers, seeded_db):
        assert client.delete("/api/v1/admin/markets/market-7", headers=admin_headers).status_code == 204
        assert seeded_db.get(Market, "market-7").status == "inactive"

    def test_property_templates_round_trip(self, client, admin_headers, api_key_headers):
        templates = {"templates": [{"name": "Material", "defaultValue": "Cotton", "sortOrder": 1}]}

        response = client.put(
            "/api/v1/admin/markets/market-1/property-templates", json=templates, headers=admin_headers
        )
        assert response.status_code == 200

        # Any authenticated principal can read the templates
        response = client.get("/api/v1/admin/markets/market-1/property-templates", headers=api_key_headers)
        assert response.json()["templates"][0]["defaultValue"] == "Cotton"


class TestApiKeysAdmin:
    """/api/v1/markets/{market_id}/api-keys"""

    def test_list_hides_hashes(self, client, admin_headers):
        keys = client.get("/api/v1/markets/market-1/api-keys", headers=admin_headers).json()

        assert {k["id"] for k in keys} == {"key-1", "key-2"}
        assert all("keyHash" not in k for k in keys)

    def test_create_returns_full_key_once(self, client, admin_headers, seeded_db):
        response = client.post(
            "/api/v1/markets/market-2/api-keys", json={"name": "POS terminal"}, headers=admin_headers
        )

        assert response.status_code == 201
        created = response.json()
        assert created["key"].startswith("sk_live_")
        assert len(created["key"]) == len("sk_live_") + 64
        assert seeded_db.get(Market, "market-2").api_key_count == 2

        # The new key authenticates
        response = client.get("/api/v1/categories", headers={"X-API-Key": created["key"]})
        assert response.status_code == 200

    def test_expiry_in_the_past_is_rejected(self, client, admin_headers):
        response = client.post(
            "/api/v1/markets/market-2/api-keys",
            json={"name": "Old", "expiresAt": "2020-01-01T00:00:00Z"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Expiration date must be in the future"

    def test_revoked_key_stops_authenticating(self, client, admin_headers, api_key_headers, seeded_db):
        assert client.get("/api/v1/categories", headers=api_key_headers).status_code == 200

        response = client.delete("/api/v1/markets/market-1/api-keys/key-1", headers=admin_headers)

        assert response.status_code == 204
        assert client.get("/api/v1/categories", headers=api_key_headers).status_code == 401
        assert seeded_db.get(Market, "market-1").api_key_count == 1

    def test_revoking_twice_returns_400(self, client, admin_headers):
        client.delete("/api/v1/markets/market-1/api-keys/key-2", headers=admin_headers)

        response = client.delete("/api/v1/markets/market-1/api-keys/key-2", headers=admin_headers)

        assert response.status_code == 400

    def test_key_of_other_market_returns_404(self, client, admin_headers):
        response = client.delete("/api/v1/markets/market-2/api-keys/key-1", headers=admin_headers)
        assert response.status_code == 404


class TestOrderStatusesAdmin:
    """/api/v1/order-statuses"""

    def _headers(self, admin_headers):
        return {**admin_headers, "X-Tenant-ID": "tenant-a"}

    def test_tenant_header_is_required(self, client, admin_headers):
        assert client.get("/api/v1/order-statuses", headers=admin_headers).status_code == 400

    def test_defaults_listed_in_sort_order(self, client, admin_headers):
        statuses = client.get("/api/v1/order-statuses", headers=self._headers(admin_headers)).json()

        assert [s["code"] for s in statuses] == [
            "new", "submitted", "paid", "processing", "completed", "cancelled", "on-hold", "refunded",
        ]

    def test_create_and_reject_duplicate_code(self, client, admin_headers):
        body = {"name": "Awaiting Pickup", "code": "awaiting-pickup", "color": "#123ABC", "sortOrder": 9}

        response = client.post("/api/v1/order-statuses", json=body, headers=self._headers(admin_headers))
        assert response.status_code == 201
        assert response.json()["id"].startswith("status-")
        assert response.json()["isSystemDefault"] is False

        response = client.post("/api/v1/order-statuses", json=body, headers=self._headers(admin_headers))
        assert response.status_code == 409

    def test_system_default_cannot_be_deleted(self, client, admin_headers):
        response = client.delete(
            "/api/v1/order-statuses/status-tenant-a-paid", headers=self._headers(admin_headers)
        )
        assert response.status_code == 400

    def test_active_list_excludes_deactivated(self, client, admin_headers):
        client.put(
            "/api/v1/order-statuses/status-tenant-a-on-hold",
            json={"isActive": False},
            headers=self._headers(admin_headers),
        )

        active = client.get("/api/v1/order-statuses/active", headers=self._headers(admin_headers)).json()

        assert "on-hold" not in [s["code"] for s in active]
        assert len(active) == 7

    def test_reset_defaults_removes_unused_custom_status(self, client, admin_headers):
        headers = self._headers(admin_headers)
        client.post("/api/v1/order-statuses", json={"name": "Temp", "code": "temp"}, headers=headers)
        client.put("/api/v1/order-statuses/status-tenant-a-new", json={"isActive": False}, headers=headers)

        response = client.post("/api/v1/order-statuses/reset-defaults", headers=headers)

        assert response.status_code == 200
        statuses = response.json()
        assert len(statuses) == 8
        assert all(s["isActive"] for s in statuses)
