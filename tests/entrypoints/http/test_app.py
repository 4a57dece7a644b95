"""
Unit tests for FastAPI application setup and configuration.

This test suite verifies the application structure and wiring:
- build_app() creates properly configured FastAPI instance
- Application metadata (title, version, docs URLs)
- Router registration (health at the root, deals and lease under /v1)
- OpenAPI schema generation
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dealer_desk.entrypoints.http.app import build_app


# ==============================================================================
# Application Creation
# ==============================================================================


def test_build_app_returns_fastapi_instance() -> None:
    """build_app() returns a FastAPI application instance."""
    app = build_app()
    assert isinstance(app, FastAPI)


def test_build_app_creates_new_instance_each_call() -> None:
    """build_app() creates a new app instance for each call (not cached)."""
    assert build_app() is not build_app()


# ==============================================================================
# Application Metadata
# ==============================================================================


def test_app_metadata() -> None:
    app = build_app()

    assert app.title == "Dealer Desk API"
    assert app.version == "0.1.0"
    assert "Dealership deal-desk API" in app.description
    assert app.license_info == {"name": "Proprietary"}


def test_app_documentation_urls() -> None:
    app = build_app()

    assert app.docs_url == "/docs"
    assert app.redoc_url == "/redoc"
    assert app.openapi_url == "/openapi.json"


def test_app_documentation_endpoints_are_accessible() -> None:
    """Documentation endpoints are accessible."""
    client = TestClient(build_app())

    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200

    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"


# ==============================================================================
# Router Registration
# ==============================================================================


@pytest.mark.parametrize(
    ("path", "method"),
    [
        ("/v1/deals", "post"),
        ("/v1/deals", "get"),
        ("/v1/deals/{deal_id}", "get"),
        ("/v1/deals/{deal_id}/structure", "put"),
        ("/v1/deals/{deal_id}/status", "patch"),
        ("/v1/deals/{deal_id}/commit", "patch"),
        ("/v1/deals/{deal_id}/stipulations", "patch"),
        ("/v1/lease/calculate", "post"),
        ("/v1/lease/compare", "post"),
    ],
)
def test_app_registers_v1_routes(path: str, method: str) -> None:
    # Verified via OpenAPI schema (doesn't trigger dependencies)
    paths = build_app().openapi()["paths"]

    assert path in paths
    assert method in paths[path]


def test_business_routes_are_not_mounted_at_root() -> None:
    paths = build_app().openapi()["paths"]

    assert "/deals" not in paths
    assert "/lease/calculate" not in paths


def test_openapi_tags() -> None:
    paths = build_app().openapi()["paths"]

    assert "health" in paths["/health"]["get"]["tags"]
    assert "Deals" in paths["/v1/deals"]["post"]["tags"]
    assert "Lease" in paths["/v1/lease/calculate"]["post"]["tags"]
    assert paths["/v1/deals"]["post"]["summary"] == "Pencil a new deal"


def test_list_deals_documents_salesperson_filter() -> None:
    params = build_app().openapi()["paths"]["/v1/deals"]["get"]["parameters"]

    assert [p["name"] for p in params] == ["salesperson_id"]


# ==============================================================================
# Route Accessibility
# ==============================================================================


def test_health_endpoint_responds() -> None:
    client = TestClient(build_app())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_app_returns_404_for_unknown_routes() -> None:
    client = TestClient(build_app())

    assert client.get("/unknown").status_code == 404
    assert client.get("/v1/unknown").status_code == 404


def test_module_level_app_is_from_build_app() -> None:
    from dealer_desk.entrypoints.http.app import app

    assert isinstance(app, FastAPI)
    assert app.title == "Dealer Desk API"
