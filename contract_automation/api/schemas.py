"""Request/response schemas for the Contract API"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from contract_automation.models.contract import (
    Contract,
    DispatchResult,
    GenerationState,
    ValidationResult,
)


class GenerateRequest(BaseModel):
    """Contract generation request"""
    contract_type: str = Field(..., description="Registry id, e.g. 'freelance_service_agreement_v2'")
    contract_data: Dict[str, Any]
    trigger_dispatch: bool = Field(True, description="Send the payload to the automation webhook")


class GenerationData(BaseModel):
    contract: Contract
    validation: ValidationResult
    state: GenerationState
    dispatch_state: GenerationState
    dispatch: Optional[DispatchResult] = None
    storage_url: Optional[str] = None
    enrichment_warnings: List[str] = []


class GenerateResponse(BaseModel):
    """Successful generation: the contract exists, whatever the dispatch outcome"""
    success: bool = True
    message: str = "Contract generated successfully"
    data: GenerationData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    errors: List[str] = []
    warnings: List[str] = []


class ContractTypeItem(BaseModel):
    """A contract type in the types list"""
    id: str
    name: str
    description: str = ""
    category: str
    is_active: bool = True
    required_fields: List[str] = []
    optional_fields: List[str] = []
    has_storage: bool = False


class ContractTypesResponse(BaseModel):
    success: bool = True
    data: List[ContractTypeItem] = []


class HealthResponse(BaseModel):
    """Health check response"""
    status: str  # "ok" | "error"
    db_mode: str
    version: str = "0.1.0"
    webhook_configured: bool = False
