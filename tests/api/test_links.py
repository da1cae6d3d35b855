"""Tests for the link API endpoints."""

import pytest
from fastapi.testclient import TestClient

from shortlinks.api.dependencies import get_api_tokens
from shortlinks.core.config import settings
from shortlinks.main import create_app
from tests.utils import FailingLinkStore


@pytest.mark.api
class TestShortenEndpoint:
    """Tests for POST /api/shorten."""

    def test_shorten_random(self, client):
        response = client.post("/api/shorten", json={"url": "https://example.com/page"})

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"id", "code", "originalUrl", "shortUrl", "createdAt"}
        assert len(data["code"]) == 6
        assert data["originalUrl"] == "https://example.com/page"
        assert data["shortUrl"] == f"{settings.BASE_URL}/{data['code']}"

    def test_shorten_custom_code(self, client):
        response = client.post(
            "/api/shorten", json={"url": "https://example.com", "customCode": "my_code"}
        )
        assert response.status_code == 201
        assert response.json()["code"] == "my_code"

    def test_blank_custom_code_is_ignored(self, client):
        response = client.post(
            "/api/shorten", json={"url": "  https://example.com/trim  ", "customCode": "   "}
        )
        assert response.status_code == 201
        data = response.json()
        assert len(data["code"]) == 6
        assert data["originalUrl"] == "https://example.com/trim"

    def test_custom_code_conflict(self, client):
        body = {"url": "https://example.com", "customCode": "taken"}
        assert client.post("/api/shorten", json=body).status_code == 201

        response = client.post("/api/shorten", json=body)

        assert response.status_code == 409
        assert "taken" in response.json()["error"]

    def test_invalid_url(self, client):
        response = client.post("/api/shorten", json={"url": "not-a-url"})
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.parametrize(
        "code, reason",
        [("ab", "too_short"), ("a" * 33, "too_long"), ("abc!def", "invalid_character")],
    )
    def test_invalid_custom_code(self, client, code, reason):
        response = client.post("/api/shorten", json={"url": "https://example.com", "customCode": code})
        assert response.status_code == 400
        assert response.json()["reason"] == reason
        assert response.json()["error"]

    def test_missing_url(self, client):
        response = client.post("/api/shorten", json={"customCode": "abc"})
        assert response.status_code == 400
        assert response.json()["error"] == "Malformed request body"

    def test_storage_unavailable(self):
        app = create_app(link_store=FailingLinkStore())
        with TestClient(app) as failing_client:
            response = failing_client.post("/api/shorten", json={"url": "https://example.com"})
        assert response.status_code == 503
        assert response.json() == {"error": "Storage unavailable"}


@pytest.mark.api
class TestListEndpoints:
    """Tests for GET /api/links and GET /api/links/{code}."""

    def test_list_empty(self, client):
        response = client.get("/api/links")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_newest_first(self, client):
        created = [
            client.post("/api/shorten", json={"url": f"https://example.com/{i}"}).json()
            for i in range(3)
        ]

        response = client.get("/api/links")

        assert response.status_code == 200
        assert response.json() == list(reversed(created))

    def test_get_link(self, client):
        created = client.post(
            "/api/shorten", json={"url": "https://example.com/info", "customCode": "info"}
        ).json()

        response = client.get("/api/links/info")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_link_missing(self, client):
        response = client.get("/api/links/missing")
        assert response.status_code == 404
        assert "missing" in response.json()["error"]


@pytest.mark.api
class TestBearerAuthorization:
    """Tests for the bearer token precondition."""

    @pytest.fixture
    def secured_client(self, test_app):
        test_app.dependency_overrides[get_api_tokens] = lambda: ["s3cret", "other"]
        with TestClient(test_app) as test_client:
            yield test_client
        test_app.dependency_overrides.clear()

    def test_missing_token(self, secured_client):
        response = secured_client.get("/api/links")
        assert response.status_code == 401
        assert response.json() == {"error": "Missing bearer token"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_token(self, secured_client):
        response = secured_client.post(
            "/api/shorten",
            json={"url": "https://example.com"},
            headers={"Authorization": "Bearer nope"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid bearer token"}

    def test_valid_token(self, secured_client):
        headers = {"Authorization": "Bearer s3cret"}
        assert secured_client.post(
            "/api/shorten", json={"url": "https://example.com"}, headers=headers
        ).status_code == 201
        assert len(secured_client.get("/api/links", headers=headers).json()) == 1

    def test_redirect_does_not_require_token(self, secured_client):
        secured_client.post(
            "/api/shorten",
            json={"url": "https://example.com/open", "customCode": "open"},
            headers={"Authorization": "Bearer other"},
        )
        response = secured_client.get("/open", follow_redirects=False)
        assert response.status_code == 302
