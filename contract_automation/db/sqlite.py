"""SQLite database operations"""

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from contract_automation.utils.config import get_settings

CONTRACT_COLUMNS = (
    "id", "contract_number", "contract_type", "first_party_id", "second_party_id",
    "promoter_id", "start_date", "end_date", "title", "description", "value",
    "currency", "status", "created_at", "updated_at",
)


def get_db_path() -> Path:
    """Get database path from settings"""
    settings = get_settings()
    return Path(settings.database_path)


@contextmanager
def get_connection():
    """Get a database connection as context manager"""
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db():
    """Initialize database with schema"""
    with get_connection() as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS promoters (
                id TEXT PRIMARY KEY,
                name_en TEXT,
                name_ar TEXT,
                id_card_number TEXT,
                passport_number TEXT,
                id_card_url TEXT,
                passport_url TEXT,
                email TEXT,
                mobile_number TEXT,
                employer_id TEXT
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS parties (
                id TEXT PRIMARY KEY,
                name_en TEXT,
                name_ar TEXT,
                crn TEXT,
                logo_url TEXT
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS contracts (
                id TEXT PRIMARY KEY,
                contract_number TEXT NOT NULL UNIQUE,
                contract_type TEXT,
                first_party_id TEXT,
                second_party_id TEXT,
                promoter_id TEXT,
                start_date TEXT,
                end_date TEXT,
                title TEXT,
                description TEXT,
                value REAL,
                currency TEXT,
                status TEXT NOT NULL DEFAULT 'pending',
                created_at TIMESTAMP,
                updated_at TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_contracts_status
            ON contracts(status)
        """)


def _fetch_one(table: str, row_id: str) -> Optional[dict]:
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_promoter(promoter_id: str) -> Optional[dict]:
    return _fetch_one("promoters", promoter_id)


def get_party(party_id: str) -> Optional[dict]:
    return _fetch_one("parties", party_id)


def get_contract(contract_id: str) -> Optional[dict]:
    return _fetch_one("contracts", contract_id)


def insert_promoter(promoter: dict) -> str:
    """Insert or replace a promoter. Returns promoter ID."""
    promoter_id = promoter.get("id") or str(uuid.uuid4())
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT OR REPLACE INTO promoters
            (id, name_en, name_ar, id_card_number, passport_number,
             id_card_url, passport_url, email, mobile_number, employer_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            promoter_id,
            promoter.get("name_en"),
            promoter.get("name_ar"),
            promoter.get("id_card_number"),
            promoter.get("passport_number"),
            promoter.get("id_card_url"),
            promoter.get("passport_url"),
            promoter.get("email"),
            promoter.get("mobile_number"),
            promoter.get("employer_id"),
        ))
    return promoter_id


def insert_party(party: dict) -> str:
    """Insert or replace a party. Returns party ID."""
    party_id = party.get("id") or str(uuid.uuid4())
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT OR REPLACE INTO parties (id, name_en, name_ar, crn, logo_url)
            VALUES (?, ?, ?, ?, ?)
        """, (
            party_id,
            party.get("name_en"),
            party.get("name_ar"),
            party.get("crn"),
            party.get("logo_url"),
        ))
    return party_id


def insert_contract(contract: dict) -> dict:
    """Insert a contract. Fails on duplicate contract_number. Returns stored row."""
    now = datetime.now(timezone.utc).isoformat()
    row = {col: contract.get(col) for col in CONTRACT_COLUMNS}
    row["id"] = row["id"] or str(uuid.uuid4())
    row["status"] = row["status"] or "pending"
    row["created_at"] = row["created_at"] or now
    row["updated_at"] = row["updated_at"] or now

    placeholders = ", ".join("?" for _ in CONTRACT_COLUMNS)
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"INSERT INTO contracts ({', '.join(CONTRACT_COLUMNS)}) VALUES ({placeholders})",
            tuple(row[col] for col in CONTRACT_COLUMNS),
        )
    return row


def update_contract_status(contract_id: str, status: str) -> int:
    """Update contract status. Returns number of rows changed."""
    now = datetime.now(timezone.utc).isoformat()
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "UPDATE contracts SET status = ?, updated_at = ? WHERE id = ?",
            (status, now, contract_id),
        )
        return cursor.rowcount


def count_rows(table: str) -> int:
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT COUNT(*) FROM {table}")
        return cursor.fetchone()[0]
