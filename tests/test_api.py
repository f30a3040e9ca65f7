"""Tests for the HTTP API"""

import pytest
from fastapi.testclient import TestClient

from contract_automation.api.app import create_app
from contract_automation.db import sqlite as sqlite_ops
from contract_automation.services.dispatch import DispatchClient
from contract_automation.services.generation import ContractGenerationService

FREELANCE = "freelance_service_agreement_v2"


@pytest.fixture
def client(registry, db, settings):
    service = ContractGenerationService(
        registry=registry,
        db=db,
        dispatcher=DispatchClient(None),
        settings=settings,
    )
    with TestClient(create_app(service)) as test_client:
        yield test_client


class TestGenerate:

    def test_created_with_failed_dispatch(self, client, freelance_data):
        response = client.post("/api/contracts/generate", json={
            "contract_type": FREELANCE,
            "contract_data": freelance_data,
        })
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Contract generated successfully"

        data = body["data"]
        assert data["state"] == "done"
        assert data["dispatch_state"] == "dispatch_failed"
        assert data["contract"]["status"] == "pending"
        assert data["contract"]["contract_number"].startswith("PAC-")
        assert data["validation"]["is_valid"] is True
        assert data["dispatch"]["success"] is False
        assert data["dispatch"]["error_message"] == "Webhook URL not configured"
        assert data["storage_url"].endswith("/folder-freelance-123")

    def test_dispatch_skipped(self, client, freelance_data):
        response = client.post("/api/contracts/generate", json={
            "contract_type": FREELANCE,
            "contract_data": freelance_data,
            "trigger_dispatch": False,
        })
        assert response.status_code == 200
        assert response.json()["data"]["dispatch"] is None

    def test_validation_failure(self, client, freelance_data):
        freelance_data["project_fee"] = 60000
        freelance_data["currency"] = "EUR"
        response = client.post("/api/contracts/generate", json={
            "contract_type": FREELANCE,
            "contract_data": freelance_data,
        })
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Contract validation failed"
        assert body["errors"] == [
            "Contract value cannot exceed 50000 OMR",
            "Currency 'EUR' is not allowed. Allowed currencies: OMR, USD",
        ]
        assert sqlite_ops.count_rows("contracts") == 0

    def test_unknown_type(self, client):
        response = client.post("/api/contracts/generate", json={
            "contract_type": "no_such_contract_v9",
            "contract_data": {},
        })
        assert response.status_code == 400
        assert response.json()["errors"] == ["Template configuration for 'no_such_contract_v9' not found"]

    def test_malformed_request(self, client):
        response = client.post("/api/contracts/generate", json={"contract_type": FREELANCE})
        assert response.status_code == 422


class TestContractTypes:

    def test_list(self, client):
        response = client.get("/api/contracts/types")
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 9
        freelance = next(item for item in data if item["id"] == FREELANCE)
        assert freelance["has_storage"] is True
        assert "project_fee" in freelance["required_fields"]

    def test_list_by_category(self, client):
        data = client.get("/api/contracts/types", params={"category": "freelance"}).json()["data"]
        assert [item["id"] for item in data] == [FREELANCE]

    def test_detail(self, client):
        response = client.get(f"/api/contracts/types/{FREELANCE}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["value_bounds"] == {"min": 1000.0, "max": 50000.0}
        assert data["storage_hint"]["location_id"] == "folder-freelance-123"

    def test_detail_not_found(self, client):
        response = client.get("/api/contracts/types/no_such_contract_v9")
        assert response.status_code == 404
        assert response.json()["error"] == "Template configuration not found"

    def test_blueprint(self, client):
        response = client.get(f"/api/contracts/types/{FREELANCE}/blueprint")
        assert response.status_code == 200
        assert response.json()["data"]["blueprint_name"] == "Freelance Service Agreement Automation"

    def test_blueprint_not_found(self, client):
        assert client.get("/api/contracts/types/no_such_contract_v9/blueprint").status_code == 404


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["db_mode"] == "sqlite"
    assert body["webhook_configured"] is False
