"""
Test suite for the /v1/deals routes.

Routes run against the real use cases wired to an in-memory repository and
publisher through dependency overrides, so status codes, payload shapes and
error bodies are checked end to end without a database.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dealer_desk.adapters.in_memory_activity_publisher import InMemoryActivityPublisher
from dealer_desk.adapters.in_memory_deal_repository import InMemoryDealRepository
from dealer_desk.entrypoints.http.app import build_app
from dealer_desk.entrypoints.http.dependencies import get_activity_publisher, get_deal_repository

PENCIL = {
    "customer_id": "cust-1",
    "vehicle_id": "stock-9",
    "salesperson_id": "user-7",
    "structure": {
        "sale_price": "30000.00",
        "down_payment": "2000.00",
        "trade_in_value": "3000.00",
        "term_months": 60,
        "apr": "6",
    },
}


@pytest.fixture
def repository() -> InMemoryDealRepository:
    return InMemoryDealRepository()


@pytest.fixture
def publisher() -> InMemoryActivityPublisher:
    return InMemoryActivityPublisher()


@pytest.fixture
def app(repository: InMemoryDealRepository, publisher: InMemoryActivityPublisher) -> FastAPI:
    test_app = build_app()
    test_app.dependency_overrides[get_deal_repository] = lambda: repository
    test_app.dependency_overrides[get_activity_publisher] = lambda: publisher
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def create_deal(client: TestClient, **overrides) -> dict:
    response = client.post("/v1/deals", json={**PENCIL, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


# ==============================================================================
# POST /v1/deals
# ==============================================================================


def test_create_deal_returns_201_with_structure(
    client: TestClient, publisher: InMemoryActivityPublisher
) -> None:
    data = create_deal(client)

    assert data["status"] == "pending"
    assert data["allowed_transitions"] == ["cancelled", "pending_manager"]
    assert data["structure"] == {
        "sale_price": "30000.00",
        "down_payment": "2000.00",
        "trade_in_value": "3000.00",
        "term_months": 60,
        "apr": "6",
        "principal": "25000.00",
        "monthly_payment": "483.32",
        "total_of_payments": "28999.20",
        "finance_charge": "3999.20",
        "has_negative_equity": False,
        "is_overpaid": False,
    }
    assert data["stipulations"]["outstanding"] == [
        "id_verified",
        "video_sent",
        "insurance_proof",
        "credit_consent",
    ]
    assert data["created_at"] is not None
    assert data["version"] == 1
    assert publisher.events[0].type == "DEAL_CREATED"


def test_create_deal_with_appraisal_uses_acv(client: TestClient) -> None:
    data = create_deal(
        client,
        structure={"sale_price": "25000", "trade_in_value": "9999"},
        appraisal={
            "vin": "1hgcm82633a004352",
            "base_value": "5000",
            "deductions": [{"label": "Tires", "cost": "800"}],
        },
    )

    assert data["structure"]["trade_in_value"] == "4200.00"
    assert data["structure"]["principal"] == "20800.00"
    assert data["appraisal"] == {
        "vin": "1HGCM82633A004352",
        "base_value": "5000.00",
        "deductions": [{"label": "Tires", "cost": "800.00"}],
        "total_deductions": "800.00",
        "final_acv": "4200.00",
    }


def test_create_deal_zero_price_is_rejected(client: TestClient) -> None:
    response = client.post("/v1/deals", json={**PENCIL, "structure": {"sale_price": "0"}})

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "sale_price"
    assert data["errors"][0]["message"] == "must be > 0"


def test_create_deal_malformed_decimal_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/v1/deals", json={**PENCIL, "structure": {"sale_price": "thirty grand"}}
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "structure.sale_price"


def test_create_deal_zero_term_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/v1/deals", json={**PENCIL, "structure": {"sale_price": "100", "term_months": 0}}
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "structure.term_months"


@pytest.mark.parametrize(
    ("structure", "field"),
    [
        ({"sale_price": "1" * 30}, "structure.sale_price"),
        ({"sale_price": "100", "down_payment": "12345678901"}, "structure.down_payment"),
        ({"sale_price": "100", "apr": "1000"}, "structure.apr"),
        ({"sale_price": "100", "term_months": 601}, "structure.term_months"),
    ],
)
def test_create_deal_oversized_input_is_rejected(
    client: TestClient, repository: InMemoryDealRepository, structure: dict, field: str
) -> None:
    response = client.post("/v1/deals", json={**PENCIL, "structure": structure})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == field
    assert repository.search() == []


def test_create_deal_oversized_appraisal_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/v1/deals",
        json={**PENCIL, "appraisal": {"base_value": "9" * 30, "deductions": []}},
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "appraisal.base_value"


def test_create_deal_largest_accepted_price(client: TestClient) -> None:
    data = create_deal(
        client,
        structure={"sale_price": "9999999999.99", "term_months": 600, "apr": "999.999"},
    )

    assert data["structure"]["sale_price"] == "9999999999.99"


def test_create_deal_requires_parties(client: TestClient) -> None:
    response = client.post("/v1/deals", json={**PENCIL, "customer_id": ""})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "customer_id"


# ==============================================================================
# GET /v1/deals, GET /v1/deals/{id}
# ==============================================================================


def test_get_deal(client: TestClient) -> None:
    created = create_deal(client)

    response = client.get(f"/v1/deals/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_get_unknown_deal_returns_404(client: TestClient) -> None:
    response = client.get("/v1/deals/nope")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_list_deals_filters_by_salesperson(client: TestClient) -> None:
    first = create_deal(client)
    create_deal(client, salesperson_id="user-8")
    third = create_deal(client)

    response = client.get("/v1/deals", params={"salesperson_id": "user-7"})

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 2
    assert [deal["id"] for deal in data["deals"]] == [third["id"], first["id"]]

    assert client.get("/v1/deals").json()["total_count"] == 3


# ==============================================================================
# PUT /v1/deals/{id}/structure
# ==============================================================================


def test_restructure_deal(client: TestClient, publisher: InMemoryActivityPublisher) -> None:
    created = create_deal(client)

    response = client.put(
        f"/v1/deals/{created['id']}/structure",
        json={"structure": {"sale_price": "20000", "term_months": 60}, "user_id": "user-7"},
    )

    assert response.status_code == 200
    assert response.json()["structure"]["monthly_payment"] == "333.33"
    assert publisher.events[-1].message == "Pencil Updated: $483.32/mo -> $333.33/mo"


def test_restructure_cancelled_deal_returns_409(client: TestClient) -> None:
    created = create_deal(client)
    client.patch(f"/v1/deals/{created['id']}/status", json={"status": "cancelled"})

    response = client.put(
        f"/v1/deals/{created['id']}/structure", json={"structure": {"sale_price": "20000"}}
    )

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


# ==============================================================================
# PATCH /v1/deals/{id}/status, /commit
# ==============================================================================


def test_status_walk_to_delivered(client: TestClient) -> None:
    deal_id = create_deal(client)["id"]

    for version, status in enumerate(("pending_manager", "approved", "delivered"), start=2):
        response = client.patch(f"/v1/deals/{deal_id}/status", json={"status": status})
        assert response.status_code == 200
        assert response.json()["status"] == status
        assert response.json()["version"] == version

    assert response.json()["allowed_transitions"] == []


def test_forbidden_transition_returns_409_with_context(client: TestClient) -> None:
    deal_id = create_deal(client)["id"]

    response = client.patch(f"/v1/deals/{deal_id}/status", json={"status": "delivered"})

    assert response.status_code == 409
    assert response.json() == {
        "detail": "Cannot move deal from 'pending' to 'delivered'",
        "code": "INVALID_TRANSITION",
        "context": {
            "current_status": "pending",
            "requested_status": "delivered",
            "allowed": ["cancelled", "pending_manager"],
        },
    }


def test_status_change_on_stale_copy_returns_409(
    client: TestClient, repository: InMemoryDealRepository, publisher: InMemoryActivityPublisher
) -> None:
    deal_id = create_deal(client)["id"]
    client.patch(f"/v1/deals/{deal_id}/status", json={"status": "pending_manager"})
    stale = repository.get_by_id(deal_id)
    client.patch(f"/v1/deals/{deal_id}/status", json={"status": "approved"})
    published = len(publisher.events)

    # A writer that loaded the deal before the approval lands afterwards
    original_get = repository.get_by_id
    repository.get_by_id = lambda _deal_id: stale
    try:
        response = client.patch(f"/v1/deals/{deal_id}/status", json={"status": "cancelled"})
    finally:
        repository.get_by_id = original_get

    assert response.status_code == 409
    assert response.json()["code"] == "STALE_DEAL"
    assert response.json()["context"]["expected_version"] == 2
    assert response.json()["context"]["current_version"] == 3
    assert client.get(f"/v1/deals/{deal_id}").json()["status"] == "approved"
    assert len(publisher.events) == published


def test_unknown_status_value_is_rejected(client: TestClient) -> None:
    deal_id = create_deal(client)["id"]

    response = client.patch(f"/v1/deals/{deal_id}/status", json={"status": "sold"})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "status"


def test_commit_to_manager(client: TestClient, publisher: InMemoryActivityPublisher) -> None:
    deal_id = create_deal(client)["id"]

    response = client.patch(f"/v1/deals/{deal_id}/commit", json={"user_id": "user-7"})

    assert response.status_code == 200
    assert response.json()["status"] == "pending_manager"
    event = publisher.events[-1]
    assert event.type == "COMMIT_TO_MANAGER"
    assert event.user_id == "user-7"


def test_commit_without_body(client: TestClient) -> None:
    deal_id = create_deal(client)["id"]

    response = client.patch(f"/v1/deals/{deal_id}/commit")

    assert response.status_code == 200
    assert response.json()["status"] == "pending_manager"


def test_recommit_is_a_noop(client: TestClient, publisher: InMemoryActivityPublisher) -> None:
    deal_id = create_deal(client)["id"]
    client.patch(f"/v1/deals/{deal_id}/commit")
    published = len(publisher.events)

    response = client.patch(f"/v1/deals/{deal_id}/commit")

    assert response.status_code == 200
    assert len(publisher.events) == published


# ==============================================================================
# PATCH /v1/deals/{id}/stipulations
# ==============================================================================


def test_update_stipulations(client: TestClient) -> None:
    deal_id = create_deal(client)["id"]

    response = client.patch(
        f"/v1/deals/{deal_id}/stipulations",
        json={"id_verified": True, "credit_consent": True},
    )

    assert response.status_code == 200
    stipulations = response.json()["stipulations"]
    assert stipulations["id_verified"] is True
    assert stipulations["video_sent"] is False
    assert stipulations["outstanding"] == ["video_sent", "insurance_proof"]


def test_update_stipulations_unknown_deal(client: TestClient) -> None:
    response = client.patch("/v1/deals/missing/stipulations", json={"video_sent": True})

    assert response.status_code == 404
