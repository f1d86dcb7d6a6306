"""
Unit tests for style template endpoints.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from imagestudio.api.dependencies.auth import require_admin
from imagestudio.api.dependencies.services import get_style_service
from imagestudio.api.error_handlers import register_exception_handlers
from imagestudio.api.styles import LISTING_CACHE_CONTROL, router
from imagestudio.core.exceptions import AuthorizationError, NotFoundError
from imagestudio.models.style import StyleTemplate

# ===== Fixtures =====


@pytest.fixture
def sample_style():
    return StyleTemplate(
        style_id="style_1",
        name="Runway",
        cover_image="https://cdn.example.com/cover.png",
        reference_image="https://cdn.example.com/ref.png",
        prompt="Dress the mannequin",
    )


@pytest.fixture
def mock_style_service(sample_style):
    service = Mock()
    service.list_styles = AsyncMock(
        return_value=([{"style_id": "style_1", "cover_image": "c", "requires_logo_upload": True}], False)
    )
    service.get_style = AsyncMock(return_value=sample_style)
    service.create_style = AsyncMock(return_value=sample_style)
    service.update_style = AsyncMock(return_value=sample_style)
    service.delete_style = AsyncMock()
    return service


def build_client(mock_style_service, admin=True) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    app.dependency_overrides[get_style_service] = lambda: mock_style_service

    if admin:
        app.dependency_overrides[require_admin] = lambda: None
    else:

        def deny():
            raise AuthorizationError("Admin privileges required")

        app.dependency_overrides[require_admin] = deny

    return TestClient(app)


@pytest.fixture
def client(mock_style_service):
    return build_client(mock_style_service)


# ===== Listing =====


class TestListStyles:
    """Test the cached listing endpoint."""

    def test_list_summary(self, client, mock_style_service):
        """Test camelCase keys and cache headers."""
        response = client.get("/api/styles")

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "data": [{"styleId": "style_1", "coverImage": "c", "requiresLogoUpload": True}],
        }
        assert response.headers["Cache-Control"] == LISTING_CACHE_CONTROL
        assert response.headers["X-Cache"] == "MISS"
        mock_style_service.list_styles.assert_awaited_once_with(full=False)

    def test_list_full_cache_hit(self, client, mock_style_service):
        mock_style_service.list_styles.return_value = ([], True)

        response = client.get("/api/styles?full=1")

        assert response.headers["X-Cache"] == "HIT"
        mock_style_service.list_styles.assert_awaited_once_with(full=True)

    def test_get_style(self, client):
        response = client.get("/api/styles/style_1")

        assert response.status_code == 200
        assert response.json()["data"]["styleId"] == "style_1"
        assert response.json()["data"]["referenceImage"] == "https://cdn.example.com/ref.png"

    def test_get_missing_style(self, client, mock_style_service):
        mock_style_service.get_style.side_effect = NotFoundError("Style not found")

        response = client.get("/api/styles/ghost")

        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Style not found"}


# ===== Admin =====


class TestStyleAdmin:
    """Test admin-only mutations."""

    def test_create(self, client, mock_style_service):
        response = client.post(
            "/api/styles",
            json={
                "name": "Runway",
                "coverImage": "https://cdn.example.com/cover.png",
                "referenceImage": "https://cdn.example.com/ref.png",
                "prompt": "Dress the mannequin",
            },
        )

        assert response.status_code == 201
        body = mock_style_service.create_style.call_args[0][0]
        assert body.reference_image == "https://cdn.example.com/ref.png"

    def test_create_missing_required_field(self, client):
        response = client.post("/api/styles", json={"name": "Runway"})

        assert response.status_code == 400

    def test_update(self, client, mock_style_service):
        response = client.put("/api/styles/style_1", json={"name": "Studio"})

        assert response.status_code == 200
        style_id, body = mock_style_service.update_style.call_args[0]
        assert style_id == "style_1"
        assert body.model_dump(exclude_unset=True) == {"name": "Studio"}

    def test_delete(self, client):
        response = client.delete("/api/styles/style_1")

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Style deleted"}

    def test_non_admin_forbidden(self, mock_style_service):
        client = build_client(mock_style_service, admin=False)

        response = client.delete("/api/styles/style_1")

        assert response.status_code == 403
        mock_style_service.delete_style.assert_not_called()
