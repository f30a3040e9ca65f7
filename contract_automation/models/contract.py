"""Contract generation models: requests, persisted contracts and pipeline results."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ContractStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    ERROR = "error"


class GenerationState(str, Enum):
    """Orchestrator states for one generation request"""
    RECEIVED = "received"
    VALIDATED = "validated"
    PERSISTED = "persisted"
    DISPATCHED = "dispatched"
    DISPATCH_SKIPPED = "dispatch_skipped"
    DISPATCH_FAILED = "dispatch_failed"
    DONE = "done"
    REJECTED = "rejected"


class ContractRequest(BaseModel):
    """Raw caller input for one generation request"""
    contract_type: str
    contract_data: Dict[str, Any]
    trigger_dispatch: bool = True


class ValidationResult(BaseModel):
    """Outcome of checking contract data against a registry entry.

    warnings never block generation; callers must accept a non-empty list.
    """
    is_valid: bool
    errors: List[str] = []
    warnings: List[str] = []


class Contract(BaseModel):
    """Persisted contract record"""
    id: str
    contract_number: str
    contract_type: Optional[str] = None
    first_party_id: Optional[str] = None
    second_party_id: Optional[str] = None
    promoter_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    title: str = ""
    description: str = ""
    value: Optional[float] = None
    currency: Optional[str] = None
    status: ContractStatus = ContractStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DispatchResult(BaseModel):
    """Outcome of the single outbound webhook call"""
    status_code: int
    success: bool
    timestamp_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error_message: Optional[str] = None
    response_body: Optional[str] = None


class EnrichmentResult(BaseModel):
    """Enriched contract data plus non-blocking lookup warnings"""
    data: Dict[str, Any]
    warnings: List[str] = []


class GenerationResult(BaseModel):
    """Final orchestrator response for an accepted request"""
    state: GenerationState
    dispatch_state: GenerationState     # dispatched, dispatch_skipped or dispatch_failed
    contract: Contract
    validation: ValidationResult
    dispatch: Optional[DispatchResult] = None
    storage_url: Optional[str] = None
    enrichment_warnings: List[str] = []
