"""Validation engine: checks contract data against a registry entry's business rules"""

import math
from typing import Any, Optional

from contract_automation.models.contract import ValidationResult
from contract_automation.models.template import ContractTypeConfig


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple, set)):
        return len(value) == 0
    return False


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def resolve_contract_value(config: Optional[ContractTypeConfig], contract_data: dict) -> Any:
    """Return the raw contract value: explicit 'value', else the type's value field."""
    value = contract_data.get("value")
    if _is_empty(value) and config is not None and config.value_field:
        value = contract_data.get(config.value_field)
    return None if _is_empty(value) else value


def coerce_amount(value: Any) -> Optional[float]:
    """Parse a contract value as a finite number, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        amount = float(value)
    except (ValueError, OverflowError):
        return None
    return amount if math.isfinite(amount) else None


def validate(config: Optional[ContractTypeConfig], contract_data: dict, contract_type: str = "") -> ValidationResult:
    """Validate contract data for one contract type.

    All violations are collected; nothing short-circuits except an unknown
    contract type (config is None).
    """
    if config is None:
        return ValidationResult(
            is_valid=False,
            errors=[f"Template configuration for '{contract_type}' not found"],
            warnings=[],
        )

    errors = []
    warnings = []

    for field in config.required_trigger_fields:
        if _is_empty(contract_data.get(field)):
            errors.append(f"Required field '{field}' is missing")

    raw_value = resolve_contract_value(config, contract_data)
    if raw_value is not None:
        amount = coerce_amount(raw_value)
        bounds = config.value_bounds
        currency = config.allowed_currencies[0] if config.allowed_currencies else ""
        if amount is None:
            errors.append("Contract value must be a number")
        else:
            if bounds.min is not None and amount < bounds.min:
                errors.append(f"Contract value must be at least {_format_amount(bounds.min)} {currency}".rstrip())
            if bounds.max is not None and amount > bounds.max:
                errors.append(f"Contract value cannot exceed {_format_amount(bounds.max)} {currency}".rstrip())

    currency = contract_data.get("currency")
    if not _is_empty(currency) and currency not in config.allowed_currencies:
        errors.append(
            f"Currency '{currency}' is not allowed. "
            f"Allowed currencies: {', '.join(config.allowed_currencies)}"
        )

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
