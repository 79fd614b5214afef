"""
Application wiring.

Covers:
  - /health reports every component
  - unknown mock-storage objects are 404 JSON
  - storage route disabled outside development
  - error responses use the {"error": message} shape
"""

from menucup import main
from menucup.core.config import EnvironmentMode
from menucup.errors import ConflictError, ForbiddenError, NotFoundError


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "operational"
        assert body["database"] == "healthy"
        assert body["auth_service"] == "healthy"
        assert body["storage_service"] == "healthy"
        assert body["email_service"] == "healthy"


class TestMockStorageRoute:
    async def test_unknown_object(self, client):
        response = await client.get("/storage/menu-items/nothing.png")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    async def test_disabled_outside_development(self, client, storage, monkeypatch):
        await storage.upload("menu-items", "a/b.png", b"data", "image/png")
        monkeypatch.setattr(main.settings, "env_mode", EnvironmentMode.PRODUCTION)
        response = await client.get("/storage/menu-items/a/b.png")
        assert response.status_code == 404


class TestErrorShape:
    def test_to_dict(self):
        assert NotFoundError("Restaurant not found").to_dict() == {"error": "Restaurant not found"}
        assert ForbiddenError().to_dict() == {"error": "Access denied"}

    def test_status_codes(self):
        assert NotFoundError.status_code == 404
        assert ConflictError.status_code == 409
        assert ForbiddenError.status_code == 403
