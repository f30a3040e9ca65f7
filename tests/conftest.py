"""Pytest configuration and fixtures"""

from contextlib import asynccontextmanager
from typing import Union

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from contract_automation.utils.config import Settings


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch):
    """Set up test environment with temporary database and no webhook"""
    db_path = tmp_path / "test.db"

    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    monkeypatch.setenv("DB_MODE", "sqlite")
    for var in ("WEBHOOK_URL", "WEBHOOK_URL_EXTRA", "WEBHOOK_SECRET", "STORAGE_FOLDERS", "SUPABASE_URL"):
        monkeypatch.delenv(var, raising=False)

    from contract_automation.api.routes import contracts
    from contract_automation.services.registry import get_registry

    get_registry.cache_clear()
    monkeypatch.setattr(contracts, "service", None)

    yield

    get_registry.cache_clear()


@pytest.fixture
def settings():
    return Settings(storage_folders={"freelance": "folder-freelance-123"})


@pytest.fixture
def registry(settings):
    from contract_automation.services.registry import build_registry

    return build_registry(settings)


@pytest.fixture
def db():
    from contract_automation.db.sqlite_client import SQLiteClient

    return SQLiteClient()


@pytest.fixture
def freelance_data():
    return {
        "freelancer_name": "Ada",
        "client_name": "Acme",
        "project_description": "X",
        "project_duration": "3mo",
        "project_fee": 4000,
        "payment_schedule": "monthly",
        "deliverables": "report",
        "currency": "USD",
    }


@pytest.fixture
def seeded_entities(db):
    """One promoter and two parties in the test database"""
    from contract_automation.db import sqlite as sqlite_ops

    sqlite_ops.insert_promoter({
        "id": "prom-1",
        "name_en": "Ada Lovelace",
        "name_ar": "ادا لوفليس",
        "id_card_number": "ID-778",
        "passport_number": "P-991",
        "id_card_url": "https://files.example.com/prom-1/id.png",
        "passport_url": "not a url",
        "email": "ada@example.com",
        "mobile_number": "+96890000000",
        "employer_id": "party-2",
    })
    sqlite_ops.insert_party({
        "id": "party-1",
        "name_en": "Acme LLC",
        "name_ar": "اكمي",
        "crn": "CR-1001",
        "logo_url": "https://files.example.com/acme.png",
    })
    sqlite_ops.insert_party({
        "id": "party-2",
        "name_en": "Globex SAOC",
        "crn": "CR-2002",
        "logo_url": "",
    })
    return {"promoter_id": "prom-1", "first_party_id": "party-1", "second_party_id": "party-2"}


@pytest.fixture
def webhook_server():
    """Factory for a local webhook endpoint that records what it receives.

    Usage inside an async test:
        async with webhook_server(status=200) as (url, received): ...
    """
    @asynccontextmanager
    async def _start(status: int = 200, body: Union[str, bytes] = '{"accepted": true}'):
        received = []

        async def handler(request):
            received.append({"headers": request.headers.copy(), "json": await request.json()})
            if isinstance(body, bytes):
                return web.Response(status=status, body=body, content_type="application/json", charset="utf-8")
            return web.Response(status=status, text=body, content_type="application/json")

        app = web.Application()
        app.router.add_post("/webhook", handler)
        server = TestServer(app)
        await server.start_server()
        try:
            yield str(server.make_url("/webhook")), received
        finally:
            await server.close()

    return _start
