"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contract_automation.api.routes.contracts import get_service, init_service, router as contracts_router
from contract_automation.services.generation import ContractGenerationService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build the registry once so a bad definition fails fast"""
    registry = get_service().registry
    logger.info(f"Contract automation API ready with {len(registry)} contract types")
    yield


def create_app(service: Optional[ContractGenerationService] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    if service is not None:
        init_service(service)

    app = FastAPI(
        title="Contract Automation API",
        description="Template-driven contract generation and dispatch to the document automation service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(contracts_router)

    return app
