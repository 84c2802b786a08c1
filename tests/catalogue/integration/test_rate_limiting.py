"""Per-client request limits on the HTTP API."""

from fastapi.testclient import TestClient
from storefront.api import create_app
from storefront.services import build_services


def test_requests_over_the_window_limit_are_rejected(client):
    for _ in range(100):
        assert client.get("/products/meta/categories").status_code == 200

    response = client.get("/products/meta/categories")
    assert response.status_code == 429
    assert response.json()["message"] == "Too many requests from this IP, please try again later."


def test_limit_is_shared_across_endpoints(settings):
    client = TestClient(create_app(build_services(settings.model_copy(update={"rate_limit": "2 per 15 minutes"}))))

    assert client.get("/products").status_code == 200
    assert client.get("/products/meta/categories").status_code == 200
    assert client.get("/products").status_code == 429


def test_health_is_not_limited(settings):
    client = TestClient(create_app(build_services(settings.model_copy(update={"rate_limit": "1 per 15 minutes"}))))

    assert all(client.get("/health").status_code == 200 for _ in range(5))


def test_limits_can_be_disabled(settings):
    client = TestClient(
        create_app(build_services(settings.model_copy(update={"rate_limit": "1 per 15 minutes", "rate_limit_enabled": False})))
    )

    assert client.get("/products").status_code == 200
    assert client.get("/products").status_code == 200
