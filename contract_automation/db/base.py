"""Abstract database interface: strategy pattern for SQLite/Supabase switching"""

from abc import ABC, abstractmethod
from typing import Optional


class DatabaseInterface(ABC):
    """Abstract interface for database operations.
    Implemented by both SQLite and Supabase backends.

    Rows are plain dicts keyed by column name. Methods raise on backend
    failure; callers decide what is fatal.
    """

    @abstractmethod
    def init_db(self) -> None:
        """Initialize database schema (create tables, indexes)."""

    @abstractmethod
    def get_promoter(self, promoter_id: str) -> Optional[dict]:
        """Get promoter by ID. Returns None if not found."""

    @abstractmethod
    def get_party(self, party_id: str) -> Optional[dict]:
        """Get party by ID. Returns None if not found."""

    @abstractmethod
    def insert_contract(self, contract: dict) -> dict:
        """Insert a contract row. Returns the stored row (with id and timestamps)."""

    @abstractmethod
    def update_contract_status(self, contract_id: str, status: str) -> None:
        """Set contract status and bump updated_at."""

    @abstractmethod
    def get_contract(self, contract_id: str) -> Optional[dict]:
        """Get contract by ID."""

    @abstractmethod
    def get_status(self) -> dict:
        """Get database status info (table counts, connection status)."""
