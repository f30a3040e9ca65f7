"""Supabase database client implementing DatabaseInterface"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from contract_automation.db.base import DatabaseInterface
from contract_automation.utils.config import get_settings

logger = logging.getLogger(__name__)

# Lazy imports to avoid requiring supabase when using sqlite mode
_supabase_client = None
_service_client = None

PROMOTER_COLUMNS = (
    "id, name_en, name_ar, id_card_number, passport_number, id_card_url, "
    "passport_url, email, mobile_number, employer_id"
)
PARTY_COLUMNS = "id, name_en, name_ar, crn, logo_url"
# Party foreign keys are left out of the returned row to avoid FK expansion;
# the orchestrator restores them from the request.
CONTRACT_RETURN_COLUMNS = (
    "id, contract_number, contract_type, status, promoter_id, start_date, end_date, "
    "title, description, value, currency, created_at, updated_at"
)

MIGRATION_PATH = Path(__file__).parent / "migrations" / "001_contracts.sql"


def _get_supabase_client():
    """Get or create the singleton Supabase client (anon key)."""
    global _supabase_client
    if _supabase_client is None:
        from supabase import ClientOptions, create_client

        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_KEY must be set when DB_MODE=supabase"
            )
        _supabase_client = create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(
                postgrest_client_timeout=10,
                storage_client_timeout=30,
            ),
        )
    return _supabase_client


def _get_service_client():
    """Get or create the singleton Supabase service-role client (bypasses RLS)."""
    global _service_client
    if _service_client is None:
        from supabase import ClientOptions, create_client

        settings = get_settings()
        key = settings.supabase_service_key or settings.supabase_key
        if not settings.supabase_url or not key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set for write operations"
            )
        _service_client = create_client(
            settings.supabase_url,
            key,
            options=ClientOptions(
                postgrest_client_timeout=10,
                storage_client_timeout=30,
            ),
        )
    return _service_client


class SupabaseClient(DatabaseInterface):
    """Supabase implementation of DatabaseInterface."""

    def __init__(self):
        self._read = _get_supabase_client
        self._write = _get_service_client

    def init_db(self) -> None:
        """Verify the schema exists.
        Users run the migration SQL in the Supabase SQL Editor."""
        client = self._read()
        try:
            client.table("contracts").select("id").limit(1).execute()
            logger.info("Supabase schema verified: tables accessible")
        except Exception as e:
            logger.error(
                f"Schema not found. Run migration SQL in Supabase SQL Editor: {MIGRATION_PATH}"
            )
            raise RuntimeError(
                f"Supabase schema not initialized. Run {MIGRATION_PATH.name} in SQL Editor. Error: {e}"
            ) from e

    def get_promoter(self, promoter_id: str) -> Optional[dict]:
        # Service client: promoter documents are behind RLS
        client = self._write()
        result = (
            client.table("promoters")
            .select(PROMOTER_COLUMNS)
            .eq("id", promoter_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def get_party(self, party_id: str) -> Optional[dict]:
        client = self._write()
        result = (
            client.table("parties")
            .select(PARTY_COLUMNS)
            .eq("id", party_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def insert_contract(self, contract: dict) -> dict:
        """Insert a contract. Persists legacy party columns alongside the new ones."""
        client = self._write()
        data = {k: v for k, v in contract.items() if v is not None}
        data.setdefault("status", "pending")
        data["client_id"] = contract.get("first_party_id")
        data["employer_id"] = contract.get("second_party_id")
        data["is_current"] = True
        result = client.table("contracts").insert(data).execute()
        if not result.data:
            raise RuntimeError("Contract insert returned no row")
        row = result.data[0]
        return {k: row.get(k) for k in [c.strip() for c in CONTRACT_RETURN_COLUMNS.split(",")]}

    def update_contract_status(self, contract_id: str, status: str) -> None:
        client = self._write()
        result = (
            client.table("contracts")
            .update({
                "status": status,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("id", contract_id)
            .execute()
        )
        if not result.data:
            raise LookupError(f"Contract not found: {contract_id}")

    def get_contract(self, contract_id: str) -> Optional[dict]:
        client = self._read()
        result = (
            client.table("contracts")
            .select("*")
            .eq("id", contract_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def get_status(self) -> dict:
        """Get database status info."""
        client = self._read()
        settings = get_settings()
        try:
            contracts = client.table("contracts").select("id", count="exact").execute()
            promoters = client.table("promoters").select("id", count="exact").execute()
            parties = client.table("parties").select("id", count="exact").execute()
            return {
                "mode": "supabase",
                "url": settings.supabase_url,
                "contracts": contracts.count or 0,
                "promoters": promoters.count or 0,
                "parties": parties.count or 0,
                "status": "connected",
            }
        except Exception as e:
            return {
                "mode": "supabase",
                "url": settings.supabase_url,
                "status": f"error: {e}",
            }


def get_database(mode: str = None) -> DatabaseInterface:
    """Factory: returns appropriate database implementation.

    mode: 'supabase' or 'sqlite'. Defaults to DB_MODE env var.
    """
    if mode is None:
        mode = get_settings().db_mode

    if mode == "supabase":
        return SupabaseClient()
    else:
        # Import here to avoid circular imports
        from contract_automation.db.sqlite_client import SQLiteClient

        return SQLiteClient()
