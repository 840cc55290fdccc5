"""
API tests for categories, file uploads and the public endpoints

Date: 2025-11-04
"""
from pathlib import Path

import pytest

from ecomm.api.files import get_storage
from ecomm.core.config import settings
from ecomm.main import app
from ecomm.services.file_storage_service import FileStorageService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestCategories:
    """/api/v1/categories"""

    def test_list_is_scoped_and_ordered(self, client, api_key_headers):
        categories = client.get("/api/v1/categories", headers=api_key_headers).json()

        assert len(categories) == 11
        roots = [c["name"] for c in categories if c["parentId"] is None]
        assert roots == ["Electronics", "Clothing", "Home & Garden", "Sports & Outdoors", "Books"]

    def test_other_market_has_no_categories(self, client, api_key_headers):
        categories = client.get(
            "/api/v1/categories", params={"marketId": "market-2"}, headers=api_key_headers
        ).json()
        assert categories == []

    def test_create_generates_id(self, client, api_key_headers):
        response = client.post(
            "/api/v1/categories",
            json={"name": "Kitchen", "parentId": "cat-3", "displayOrder": 1},
            headers=api_key_headers,
        )

        assert response.status_code == 201
        category = response.json()
        assert category["id"].startswith("cat-")
        assert category["tenantId"] == "tenant-a"
        assert category["parentId"] == "cat-3"

    def test_create_with_existing_id_conflicts(self, client, api_key_headers):
        response = client.post(
            "/api/v1/categories",
            json={"id": "cat-3", "name": "Garden again"},
            headers=api_key_headers,
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Category 'cat-3' already exists"

    def test_create_without_scope_is_rejected(self, client):
        response = client.post(
            "/api/v1/categories",
            json={"name": "Kitchen"},
            headers={"X-API-Key": "sk_live_demo_key_12345"},
        )
        assert response.status_code == 400

    def test_update_preserves_scope(self, client, api_key_headers):
        response = client.put(
            "/api/v1/categories/cat-5",
            json={"name": "Books & Media", "tenantId": "tenant-b", "displayOrder": 6},
            headers=api_key_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Books & Media"
        assert response.json()["tenantId"] == "tenant-a"

    def test_category_cannot_move_under_its_descendant(self, client, api_key_headers):
        response = client.put(
            "/api/v1/categories/cat-1", json={"name": "Electronics", "parentId": "cat-1-1-2"},
            headers=api_key_headers,
        )
        assert response.status_code == 400

    def test_delete_with_subcategories_is_rejected(self, client, api_key_headers):
        response = client.delete("/api/v1/categories/cat-1", headers=api_key_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete category with subcategories"

    def test_delete_with_products_is_rejected(self, client, api_key_headers):
        response = client.delete("/api/v1/categories/cat-1-2", headers=api_key_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete category with products"

    def test_delete_empty_leaf(self, client, api_key_headers):
        assert client.delete("/api/v1/categories/cat-5", headers=api_key_headers).status_code == 204
        assert client.get("/api/v1/categories/cat-5", headers=api_key_headers).status_code == 404


class TestFiles:
    """/api/v1/files"""

    @pytest.fixture
    def storage(self, tmp_path):
        storage = FileStorageService(root=str(tmp_path), max_bytes=1024 * 1024)
        app.dependency_overrides[get_storage] = lambda: storage
        return storage

    def test_upload_returns_absolute_urls(self, client, api_key_headers, storage, tmp_path):
        response = client.post(
            "/api/v1/files/upload",
            files=[("files", ("photo.PNG", PNG_BYTES, "image/png"))],
            headers=api_key_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert "errors" not in body
        url = body["urls"][0]
        assert url.startswith("http://testserver/uploads/tenant-a/market-1/")
        assert url.endswith(".png")
        assert (tmp_path / "tenant-a" / "market-1" / url.rsplit("/", 1)[1]).is_file()

    def test_invalid_files_are_reported_per_file(self, client, api_key_headers, storage):
        response = client.post(
            "/api/v1/files/upload",
            files=[
                ("files", ("ok.jpg", b"abc", "image/jpeg")),
                ("files", ("notes.txt", b"abc", "text/plain")),
                ("files", ("empty.png", b"", "image/png")),
                ("files", ("huge.png", b"x" * (1024 * 1024 + 1), "image/png")),
            ],
            headers=api_key_headers,
        )

        body = response.json()
        assert len(body["urls"]) == 1
        assert body["errors"] == [
            "notes.txt: Invalid file type. Allowed types: jpg, jpeg, png, gif, webp",
            "empty.png: File is empty",
            "huge.png: File size exceeds 1MB limit",
        ]

    def test_oversized_file_is_read_only_past_the_limit(self, client, api_key_headers, storage):
        storage.max_bytes = 2 * 1024 * 1024

        response = client.post(
            "/api/v1/files/upload",
            files=[("files", ("big.png", b"x" * (3 * 1024 * 1024), "image/png"))],
            headers=api_key_headers,
        )

        assert response.json()["urls"] == []
        assert response.json()["errors"] == ["big.png: File size exceeds 2MB limit"]
        assert not any(p.is_file() for p in storage.root.rglob("*"))

    def test_upload_requires_scope_headers(self, client, storage):
        response = client.post(
            "/api/v1/files/upload",
            files=[("files", ("photo.png", PNG_BYTES, "image/png"))],
            headers={"X-API-Key": "sk_live_demo_key_12345"},
        )
        assert response.status_code == 400

    def test_delete_file(self, client, api_key_headers, storage):
        url = client.post(
            "/api/v1/files/upload",
            files=[("files", ("photo.png", PNG_BYTES, "image/png"))],
            headers=api_key_headers,
        ).json()["urls"][0]
        file_name = url.rsplit("/", 1)[1]

        assert client.delete(f"/api/v1/files/{file_name}", headers=api_key_headers).status_code == 204
        assert client.delete(f"/api/v1/files/{file_name}", headers=api_key_headers).status_code == 404


class TestPublicEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    def test_health_reports_status(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"]["status"] == "connected"

    def test_uploads_are_served_with_cache_header(self, client):
        path = Path(settings.UPLOADS_DIR) / "tenant-a" / "market-1" / "served.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(PNG_BYTES)

        response = client.get("/uploads/tenant-a/market-1/served.png")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "public,max-age=604800"
