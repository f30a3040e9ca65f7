"""Contract type configuration models"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ValueBounds(BaseModel):
    """Inclusive bounds on the contract value"""
    model_config = ConfigDict(frozen=True)

    min: Optional[float] = None
    max: Optional[float] = None


class StorageHint(BaseModel):
    """Where the automation service should file the rendered document"""
    model_config = ConfigDict(frozen=True)

    location_id: str
    naming_pattern: str


class ApprovalRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    auto_approval: bool = False
    requires_legal_review: bool = False
    requires_financial_approval: bool = False


class ContractTypeConfig(BaseModel):
    """Registry entry for one contract type.

    Everything under automation_steps and error_policy is descriptive
    metadata for the automation service and operators; nothing here
    executes those steps.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: str
    is_active: bool = True
    required_trigger_fields: List[str]
    optional_fields: List[str] = []
    value_field: Optional[str] = None       # field carrying the monetary value, e.g. 'project_fee'
    value_bounds: ValueBounds = ValueBounds()
    allowed_currencies: List[str] = []
    compliance_checks: List[str] = []
    output_format: str = "pdf"              # 'pdf', 'docx', 'html'
    storage_hint: Optional[StorageHint] = None
    automation_steps: List[str] = []
    error_policy: List[str] = []
    document_template_id: Optional[str] = None
    template_variables: Dict[str, Any] = {}
    approval: ApprovalRules = ApprovalRules()


class ContractTypeDefinition(BaseModel):
    """Raw registry entry as stored in templates/contract_types.json.

    storage_key + naming_pattern become a StorageHint once the folder id
    for storage_key is found in settings.
    """
    id: str
    name: str
    description: str = ""
    category: str
    is_active: bool = True
    required_trigger_fields: List[str]
    optional_fields: List[str] = []
    value_field: Optional[str] = None
    value_bounds: ValueBounds = ValueBounds()
    allowed_currencies: List[str] = []
    compliance_checks: List[str] = []
    output_format: str = "pdf"
    storage_key: Optional[str] = None
    naming_pattern: Optional[str] = None
    automation_steps: List[str] = []
    error_policy: List[str] = []
    document_template_id: Optional[str] = None
    template_variables: Dict[str, Any] = {}
    approval: ApprovalRules = ApprovalRules()
