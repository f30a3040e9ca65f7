"""Contract persistence: creates contract records and tracks their status"""

import logging
import random
from datetime import datetime
from typing import Any, Optional

from contract_automation.db.base import DatabaseInterface
from contract_automation.models.contract import Contract, ContractRequest, ContractStatus
from contract_automation.models.template import ContractTypeConfig
from contract_automation.services.errors import PersistenceError
from contract_automation.services.validation import coerce_amount, resolve_contract_value

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "OMR"


def as_text(value: Any) -> Optional[str]:
    """Stored text form of an id, number or date; None stays None."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def generate_contract_number(now: Optional[datetime] = None) -> str:
    """PAC-DDMMYYYY-NNNN"""
    now = now or datetime.now()
    return f"PAC-{now:%d%m%Y}-{random.randint(0, 9999):04d}"


class ContractPersistence:
    """Contract writes. create() fails closed, update_status() is best-effort."""

    def __init__(self, db: DatabaseInterface):
        self.db = db

    def build_row(
        self,
        request: ContractRequest,
        config: ContractTypeConfig,
        contract_number: Optional[str] = None,
    ) -> dict:
        data = request.contract_data
        currency = data.get("currency") or (
            config.allowed_currencies[0] if config.allowed_currencies else DEFAULT_CURRENCY
        )
        return {
            "contract_number": as_text(data.get("contract_number") or contract_number or generate_contract_number()),
            "contract_type": request.contract_type,
            "first_party_id": as_text(data.get("first_party_id")),
            "second_party_id": as_text(data.get("second_party_id")),
            "promoter_id": as_text(data.get("promoter_id")),
            "start_date": as_text(data.get("contract_start_date") or data.get("start_date")),
            "end_date": as_text(data.get("contract_end_date") or data.get("end_date")),
            "title": as_text(data.get("job_title") or data.get("title") or config.name),
            "description": as_text(data.get("special_terms") or ""),
            "value": coerce_amount(resolve_contract_value(config, data)),
            "currency": as_text(currency),
            "status": ContractStatus.PENDING.value,
        }

    def create(
        self,
        request: ContractRequest,
        config: ContractTypeConfig,
        contract_number: Optional[str] = None,
    ) -> Contract:
        """Insert the contract. Raises PersistenceError if the write fails.

        The row is checked against the Contract model before the insert, so a
        record that could not be returned is never written.
        """
        row = self.build_row(request, config, contract_number)
        try:
            Contract.model_validate({**row, "id": ""})
            stored = self.db.insert_contract(row)
            contract = Contract.model_validate(stored)
        except Exception as e:
            logger.error(f"Failed to create contract {row['contract_number']}: {e}")
            raise PersistenceError(f"Failed to create contract: {e}") from e

        logger.info(f"Created contract {contract.contract_number} ({contract.id})")
        return contract

    def update_status(self, contract_id: str, status: ContractStatus) -> bool:
        """Set contract status. Logs and returns False on failure instead of raising."""
        try:
            self.db.update_contract_status(contract_id, status.value)
        except Exception as e:
            logger.warning(f"Failed to update contract {contract_id} status to {status.value}: {e}")
            return False
        return True
