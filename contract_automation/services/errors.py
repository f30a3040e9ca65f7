"""Exceptions raised by the contract generation pipeline.

Only request-level failures are exceptions. Enrichment lookups, media URL
fallbacks, dispatch failures and status bookkeeping are reported as data
and logged, never raised.
"""

from contract_automation.models.contract import ValidationResult


class GenerationError(Exception):
    """Base class for generation failures surfaced to the caller."""

    status_code = 500


class TemplateNotFoundError(GenerationError, LookupError):
    """A contract type was queried directly and is not in the registry."""

    status_code = 404

    def __init__(self, contract_type: str):
        self.contract_type = contract_type
        super().__init__(f"Template configuration for '{contract_type}' not found")


class ContractRejectedError(GenerationError):
    """Validation failed (or the type is unknown); nothing was persisted."""

    status_code = 400

    def __init__(self, validation: ValidationResult):
        self.validation = validation
        super().__init__("Contract validation failed: " + "; ".join(validation.errors))


class PersistenceError(GenerationError):
    """The contract record could not be written."""

    status_code = 500
