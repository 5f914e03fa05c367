"""
리스팅 API 라우터 테스트
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from market_listing.api import create_listing_router
from market_listing.core.requirements import RequirementEngine


@pytest.fixture
def client(repository):
    app = FastAPI()
    app.include_router(create_listing_router(repository, engine=RequirementEngine()))
    return TestClient(app)


TIERS_WITH_GAP = [
    {"id": "t1", "min_usage": 0, "max_usage": 50, "price_per_unit": 1.0},
    {"id": "t2", "min_usage": 60, "max_usage": "unbounded", "price_per_unit": 2.0},
]


class TestValidationEndpoints:
    """검증 API"""

    def test_validate_tiers(self, client):
        response = client.post("/listings/validate/tiers", json={"tiers": TIERS_WITH_GAP})

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert "51-59" in data["errors"][0]

    def test_validate_tiers_warning_policy(self, client):
        response = client.post(
            "/listings/validate/tiers",
            json={"tiers": TIERS_WITH_GAP, "gap_policy": "warning"},
        )

        data = response.json()
        assert data["is_valid"] is True
        assert len(data["warnings"]) == 1

    def test_validate_tiers_accepts_camel_case(self, client):
        tiers = [
            {"id": "t1", "minUsage": 0, "maxUsage": 99, "pricePerUnit": 1},
            {"id": "t2", "minUsage": 100, "pricePerUnit": 2},
        ]

        response = client.post("/listings/validate/tiers", json={"tiers": tiers})

        assert response.json()["is_valid"] is True

    def test_bounded_tier_without_value(self, client):
        tiers = [{"id": "t1", "min_usage": 0, "max_usage": {"kind": "bounded"}, "price_per_unit": 1.0}]

        response = client.post("/listings/validate/tiers", json={"tiers": tiers})

        assert response.status_code == 422

    def test_fractional_max_usage(self, client):
        tiers = [{"id": "t1", "min_usage": 0, "max_usage": 50.5, "price_per_unit": 1.0}]

        response = client.post("/listings/validate/tiers", json={"tiers": tiers})

        assert response.status_code == 422

    def test_invalid_gap_policy(self, client):
        response = client.post(
            "/listings/validate/tiers",
            json={"tiers": TIERS_WITH_GAP, "gap_policy": "ignore"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_REQUEST"

    def test_validate_workflow(self, client):
        response = client.post("/listings/validate/workflow", json={"platform": "zapier"})

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert {"field": "trigger_type", "message": "Trigger type is required"} in data["errors"]

    def test_requirements(self, client, flat_document):
        body = flat_document.to_dict()
        body["tags"] = []

        response = client.post("/listings/requirements", json={"document": body})

        data = response.json()
        assert data["can_publish"] is False
        assert [r["id"] for r in data["requirements"] if not r["completed"]] == ["tags"]

    def test_requirements_with_explicit_mode(self, client, flat_document):
        response = client.post(
            "/listings/requirements",
            json={"document": flat_document.to_dict(), "pricing_mode": "usage"},
        )

        ids = [r["id"] for r in response.json()["requirements"]]
        assert "usage_test" in ids
        assert "price" not in ids


class TestListingEndpoints:
    """리스팅 조회 API"""

    def test_get_listing(self, client, gateway, flat_document):
        first = client.get(f"/listings/{flat_document.id}")
        second = client.get(f"/listings/{flat_document.id}")

        assert first.status_code == 200
        assert first.json()["name"] == "Invoice Reminder"
        assert second.json() == first.json()
        assert gateway.load_calls == [flat_document.id]

    def test_get_listing_not_found(self, client):
        response = client.get("/listings/missing")

        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["error"] == "LISTING_NOT_FOUND"
        assert detail["message"] == "Listing missing not found"

    def test_listing_requirements(self, client, flat_document):
        response = client.get(f"/listings/{flat_document.id}/requirements")

        assert response.status_code == 200
        assert response.json()["can_publish"] is True
