"""Database modules"""

from contract_automation.db.base import DatabaseInterface
from contract_automation.db.supabase import get_database

__all__ = [
    "DatabaseInterface",
    "get_database",
]
