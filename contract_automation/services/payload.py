"""Payload assembler: builds the webhook body sent to the automation service"""

from typing import Any, Dict, Optional, Tuple

from contract_automation.models.contract import Contract
from contract_automation.models.template import ContractTypeConfig

STORAGE_FOLDER_URL = "https://drive.google.com/drive/folders/{location_id}"

# Payload key -> extra keys carrying the same value for template compatibility
PAYLOAD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "contract_number": ("ref_number",),
}


def assemble(
    config: ContractTypeConfig,
    enriched: Dict[str, Any],
    contract: Contract,
    callback_url: str,
) -> Dict[str, Any]:
    """Build the webhook payload for one persisted contract.

    Pure: the same inputs always give the same payload.
    """
    payload: Dict[str, Any] = {
        **enriched,
        "contract_type": config.id,
        "template_id": config.document_template_id,
        "output_format": config.output_format,
        "template_variables": dict(config.template_variables),
        "approval": config.approval.model_dump(),
        "compliance_checks": list(config.compliance_checks),
        "contract_id": contract.id,
        "contract_number": contract.contract_number,
        "callback_url": callback_url,
    }

    if config.storage_hint:
        payload["storage_location_id"] = config.storage_hint.location_id
        payload["file_naming_pattern"] = config.storage_hint.naming_pattern

    for key, aliases in PAYLOAD_ALIASES.items():
        for alias in aliases:
            payload[alias] = payload[key]

    return payload


def storage_folder_url(config: Optional[ContractTypeConfig]) -> Optional[str]:
    """Browsable link to the folder the rendered document is filed in, if any."""
    if config is None or config.storage_hint is None:
        return None
    return STORAGE_FOLDER_URL.format(location_id=config.storage_hint.location_id)
