"""Tests for contract persistence"""

import re
from datetime import datetime

import pytest

from contract_automation.db import sqlite as sqlite_ops
from contract_automation.models.contract import ContractRequest, ContractStatus
from contract_automation.services.errors import PersistenceError
from contract_automation.services.persistence import ContractPersistence, generate_contract_number

FREELANCE = "freelance_service_agreement_v2"


@pytest.fixture
def config(registry):
    return registry.lookup(FREELANCE)


def _request(data):
    return ContractRequest(contract_type=FREELANCE, contract_data=data)


def test_contract_number_format():
    number = generate_contract_number(datetime(2026, 10, 18, 9, 30))
    assert re.fullmatch(r"PAC-18102026-\d{4}", number)


class TestBuildRow:

    def test_row_from_request(self, db, config, freelance_data):
        freelance_data.update({
            "first_party_id": "party-1",
            "contract_start_date": "2026-11-01",
            "contract_end_date": "2027-01-31",
            "special_terms": "Remote only",
        })
        row = ContractPersistence(db).build_row(_request(freelance_data), config, "PAC-01112026-0001")

        assert row["contract_number"] == "PAC-01112026-0001"
        assert row["contract_type"] == FREELANCE
        assert row["first_party_id"] == "party-1"
        assert row["start_date"] == "2026-11-01"
        assert row["end_date"] == "2027-01-31"
        assert row["title"] == "Freelance Service Agreement"
        assert row["description"] == "Remote only"
        assert row["value"] == 4000.0
        assert row["currency"] == "USD"
        assert row["status"] == "pending"

    def test_currency_defaults_to_first_allowed(self, db, config, freelance_data):
        del freelance_data["currency"]
        row = ContractPersistence(db).build_row(_request(freelance_data), config)
        assert row["currency"] == "OMR"

    def test_generated_number(self, db, config, freelance_data):
        row = ContractPersistence(db).build_row(_request(freelance_data), config)
        assert row["contract_number"].startswith("PAC-")


class TestCreate:

    def test_create_persists_pending(self, db, config, freelance_data):
        contract = ContractPersistence(db).create(_request(freelance_data), config)

        assert contract.id
        assert contract.status == ContractStatus.PENDING
        assert contract.value == 4000.0
        stored = db.get_contract(contract.id)
        assert stored["contract_number"] == contract.contract_number
        assert stored["status"] == "pending"

    def test_duplicate_number_raises(self, db, config, freelance_data):
        persistence = ContractPersistence(db)
        persistence.create(_request(freelance_data), config, "PAC-18102026-0001")

        with pytest.raises(PersistenceError) as exc_info:
            persistence.create(_request(freelance_data), config, "PAC-18102026-0001")
        assert exc_info.value.status_code == 500
        assert sqlite_ops.count_rows("contracts") == 1


class TestUpdateStatus:

    def test_update_existing(self, db, config, freelance_data):
        persistence = ContractPersistence(db)
        contract = persistence.create(_request(freelance_data), config)

        assert persistence.update_status(contract.id, ContractStatus.PROCESSING)
        assert db.get_contract(contract.id)["status"] == "processing"

    def test_update_missing_returns_false(self, db):
        assert ContractPersistence(db).update_status("no-such-id", ContractStatus.PROCESSING) is False


class TestNonStringInput:

    def test_numeric_ids_stored_as_text(self, db, config, freelance_data):
        freelance_data.update({"promoter_id": 42, "first_party_id": 7, "contract_number": 1001})
        contract = ContractPersistence(db).create(_request(freelance_data), config)

        assert contract.promoter_id == "42"
        assert contract.first_party_id == "7"
        assert contract.contract_number == "1001"
        assert db.get_contract(contract.id)["promoter_id"] == "42"

    def test_unusable_stored_row_raises(self, config, freelance_data):
        class MalformedInsertDB:
            def insert_contract(self, contract):
                return {"contract_number": contract["contract_number"]}

        with pytest.raises(PersistenceError):
            ContractPersistence(MalformedInsertDB()).create(_request(freelance_data), config)

    def test_invalid_row_never_written(self, db, config, freelance_data, monkeypatch):
        persistence = ContractPersistence(db)
        original = persistence.build_row

        def build_row(*args, **kwargs):
            row = original(*args, **kwargs)
            row["status"] = "archived"
            return row

        monkeypatch.setattr(persistence, "build_row", build_row)
        with pytest.raises(PersistenceError):
            persistence.create(_request(freelance_data), config)
        assert sqlite_ops.count_rows("contracts") == 0
