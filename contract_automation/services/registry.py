"""Template registry: read-only catalog of supported contract types"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from contract_automation.models.template import (
    ContractTypeConfig,
    ContractTypeDefinition,
    StorageHint,
)
from contract_automation.services.errors import TemplateNotFoundError
from contract_automation.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFINITIONS_PATH = Path(__file__).resolve().parent.parent / "templates" / "contract_types.json"


def load_definitions(path: Path = DEFINITIONS_PATH) -> List[ContractTypeDefinition]:
    """Load raw contract type definitions from JSON"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return [ContractTypeDefinition(**entry) for entry in data]


def _to_config(definition: ContractTypeDefinition, storage_folders: Dict[str, str]) -> ContractTypeConfig:
    """Resolve a definition into a config, attaching a storage hint when its folder is configured."""
    storage_hint = None
    folder_id = storage_folders.get(definition.storage_key or "", "")
    if folder_id and definition.naming_pattern:
        storage_hint = StorageHint(location_id=folder_id, naming_pattern=definition.naming_pattern)

    fields = definition.model_dump(exclude={"storage_key", "naming_pattern"})
    return ContractTypeConfig(**fields, storage_hint=storage_hint)


class TemplateRegistry:
    """Immutable lookup of ContractTypeConfig by contract type id."""

    def __init__(self, configs: List[ContractTypeConfig]):
        entries = {}
        for config in configs:
            if config.id in entries:
                raise ValueError(f"Duplicate contract type id: {config.id}")
            entries[config.id] = config
        self._entries: Mapping[str, ContractTypeConfig] = MappingProxyType(entries)

    @classmethod
    def from_definitions(
        cls,
        definitions: List[ContractTypeDefinition],
        storage_folders: Optional[Dict[str, str]] = None,
    ) -> "TemplateRegistry":
        folders = storage_folders or {}
        return cls([_to_config(d, folders) for d in definitions])

    def lookup(self, contract_type_id: str) -> Optional[ContractTypeConfig]:
        """Return the config for a contract type, or None if unknown"""
        return self._entries.get(contract_type_id)

    def require(self, contract_type_id: str) -> ContractTypeConfig:
        """Return the config for a contract type, raising TemplateNotFoundError if unknown"""
        config = self.lookup(contract_type_id)
        if config is None:
            raise TemplateNotFoundError(contract_type_id)
        return config

    def list_all(self) -> List[ContractTypeConfig]:
        return list(self._entries.values())

    def by_category(self, category: str) -> List[ContractTypeConfig]:
        return [c for c in self._entries.values() if c.category == category]

    def __contains__(self, contract_type_id: object) -> bool:
        return contract_type_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def blueprint(self, contract_type_id: str) -> Optional[dict]:
        """Describe one entry for operators configuring the automation scenario.

        Not used by the generation path.
        """
        config = self.lookup(contract_type_id)
        if config is None:
            return None

        return {
            "blueprint_name": f"{config.name} Automation",
            "description": config.description,
            "category": config.category,
            "webhook_configuration": {
                "trigger_fields": list(config.required_trigger_fields),
                "optional_fields": list(config.optional_fields),
                "authentication": "webhook_secret",
                "callback": "contract_id, contract_number, callback_url",
            },
            "document_integration": {
                "template_id": config.document_template_id,
                "variables": dict(config.template_variables),
                "output_format": config.output_format,
                "storage": config.storage_hint.model_dump() if config.storage_hint else None,
            },
            "automation_steps": list(config.automation_steps),
            "error_handling": list(config.error_policy),
            "business_rules": {
                "min_contract_value": config.value_bounds.min,
                "max_contract_value": config.value_bounds.max,
                "allowed_currencies": list(config.allowed_currencies),
                **config.approval.model_dump(),
            },
            "compliance_checks": list(config.compliance_checks),
        }


def build_registry(settings: Optional[Settings] = None) -> TemplateRegistry:
    """Build a registry from the bundled definitions and configured storage folders"""
    settings = settings or get_settings()
    registry = TemplateRegistry.from_definitions(load_definitions(), settings.storage_folders)
    logger.info(f"Loaded {len(registry)} contract types")
    return registry


@lru_cache(maxsize=1)
def get_registry() -> TemplateRegistry:
    """Process-wide registry, built once on first use."""
    return build_registry()
