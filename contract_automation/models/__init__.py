"""Data models"""

from contract_automation.models.template import (
    ValueBounds,
    StorageHint,
    ApprovalRules,
    ContractTypeConfig,
    ContractTypeDefinition,
)
from contract_automation.models.contract import (
    ContractStatus,
    GenerationState,
    ContractRequest,
    ValidationResult,
    Contract,
    DispatchResult,
    EnrichmentResult,
    GenerationResult,
)
from contract_automation.models.entity import (
    Promoter,
    Party,
)

__all__ = [
    "ValueBounds",
    "StorageHint",
    "ApprovalRules",
    "ContractTypeConfig",
    "ContractTypeDefinition",
    "ContractStatus",
    "GenerationState",
    "ContractRequest",
    "ValidationResult",
    "Contract",
    "DispatchResult",
    "EnrichmentResult",
    "GenerationResult",
    "Promoter",
    "Party",
]
