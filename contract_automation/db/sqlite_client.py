"""SQLite wrapper implementing DatabaseInterface"""

import logging
from typing import Optional

from contract_automation.db.base import DatabaseInterface
from contract_automation.db import sqlite as sqlite_ops
from contract_automation.utils.config import get_settings

logger = logging.getLogger(__name__)


class SQLiteClient(DatabaseInterface):
    """SQLite implementation of DatabaseInterface.
    Wraps sqlite.py functions; the schema is created on first use."""

    def __init__(self):
        sqlite_ops.init_db()

    def init_db(self) -> None:
        sqlite_ops.init_db()

    def get_promoter(self, promoter_id: str) -> Optional[dict]:
        return sqlite_ops.get_promoter(promoter_id)

    def get_party(self, party_id: str) -> Optional[dict]:
        return sqlite_ops.get_party(party_id)

    def insert_contract(self, contract: dict) -> dict:
        return sqlite_ops.insert_contract(contract)

    def update_contract_status(self, contract_id: str, status: str) -> None:
        changed = sqlite_ops.update_contract_status(contract_id, status)
        if not changed:
            raise LookupError(f"Contract not found: {contract_id}")

    def get_contract(self, contract_id: str) -> Optional[dict]:
        return sqlite_ops.get_contract(contract_id)

    def get_status(self) -> dict:
        settings = get_settings()
        try:
            return {
                "mode": "sqlite",
                "path": settings.database_path,
                "contracts": sqlite_ops.count_rows("contracts"),
                "promoters": sqlite_ops.count_rows("promoters"),
                "parties": sqlite_ops.count_rows("parties"),
                "status": "connected",
            }
        except Exception as e:
            return {
                "mode": "sqlite",
                "path": settings.database_path,
                "status": f"error: {e}",
            }
