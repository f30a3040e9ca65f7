"""Contract API routes: generate contracts and inspect the template registry."""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from contract_automation.api.schemas import (
    ContractTypeItem,
    ContractTypesResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    GenerationData,
    HealthResponse,
)
from contract_automation.services.errors import (
    ContractRejectedError,
    PersistenceError,
    TemplateNotFoundError,
)
from contract_automation.services.generation import ContractGenerationService
from contract_automation.utils.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Shared generation service, replaced via init_service() (app factory, tests)
service: Optional[ContractGenerationService] = None


def init_service(shared_service: ContractGenerationService):
    """Set the shared generation service."""
    global service
    service = shared_service


def get_service() -> ContractGenerationService:
    global service
    if service is None:
        service = ContractGenerationService()
    return service


def _error(status_code: int, error: str, errors=None, warnings=None) -> JSONResponse:
    body = ErrorResponse(error=error, errors=errors or [], warnings=warnings or [])
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/api/contracts/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_contract(request: GenerateRequest):
    """Validate, persist and dispatch a contract."""
    try:
        result = await get_service().generate(
            request.contract_type,
            request.contract_data,
            trigger_dispatch=request.trigger_dispatch,
        )
    except ContractRejectedError as e:
        return _error(
            e.status_code,
            "Contract validation failed",
            errors=e.validation.errors,
            warnings=e.validation.warnings,
        )
    except PersistenceError as e:
        return _error(e.status_code, "Failed to create contract", errors=[str(e)])

    return GenerateResponse(data=GenerationData(**result.model_dump()))


@router.get("/api/contracts/types", response_model=ContractTypesResponse)
async def list_contract_types(category: Optional[str] = None):
    """List contract types, optionally filtered by category."""
    registry = get_service().registry
    configs = registry.by_category(category) if category else registry.list_all()
    return ContractTypesResponse(data=[
        ContractTypeItem(
            id=c.id,
            name=c.name,
            description=c.description,
            category=c.category,
            is_active=c.is_active,
            required_fields=list(c.required_trigger_fields),
            optional_fields=list(c.optional_fields),
            has_storage=c.storage_hint is not None,
        )
        for c in configs
    ])


@router.get("/api/contracts/types/{contract_type}", responses={404: {"model": ErrorResponse}})
async def get_contract_type(contract_type: str):
    """Full configuration of one contract type."""
    try:
        config = get_service().registry.require(contract_type)
    except TemplateNotFoundError as e:
        return _error(e.status_code, "Template configuration not found", errors=[str(e)])
    return {"success": True, "data": config.model_dump()}


@router.get("/api/contracts/types/{contract_type}/blueprint", responses={404: {"model": ErrorResponse}})
async def get_blueprint(contract_type: str):
    """Operator blueprint for configuring the automation scenario."""
    blueprint = get_service().registry.blueprint(contract_type)
    if blueprint is None:
        return _error(TemplateNotFoundError.status_code, "Template configuration not found")
    return {"success": True, "data": blueprint}


@router.get("/api/health", response_model=HealthResponse)
async def health():
    settings = get_settings()
    svc = get_service()
    try:
        status = svc.db.get_status()
        ok = status.get("status") == "connected"
    except Exception as e:
        logger.warning(f"Health check failed: {e}")
        ok = False
    return HealthResponse(
        status="ok" if ok else "error",
        db_mode=settings.db_mode,
        webhook_configured=svc.dispatcher.is_configured,
    )
