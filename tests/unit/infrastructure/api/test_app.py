"""Tests for the dev server application."""

import pytest

from anacan.infrastructure.api.app import create_app


@pytest.mark.asyncio
async def test_health_check(api_client, fake_appwrite):
    response = await api_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "Anacan"
    assert body["version"]
    assert fake_appwrite.calls == []


@pytest.mark.asyncio
async def test_correlation_id_is_generated(api_client):
    response = await api_client.get("/health")

    assert response.headers["X-Correlation-ID"].startswith("cid_")


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(api_client):
    response = await api_client.get("/health", headers={"X-Correlation-ID": "cid_test123"})

    assert response.headers["X-Correlation-ID"] == "cid_test123"


@pytest.mark.asyncio
async def test_docs_disabled_outside_development(api_client):
    response = await api_client.get("/docs")

    assert response.status_code == 404


def test_docs_enabled_in_development(monkeypatch):
    monkeypatch.setenv("ANACAN_ENVIRONMENT", "development")

    app = create_app()

    assert app.docs_url == "/docs"
    assert {route.path for route in app.routes} >= {
        "/health",
        "/sitemap.xml",
        "/sitemap-az.xml",
        "/sitemap-ru.xml",
        "/rss.xml",
        "/robots.txt",
    }
