"""Generation orchestrator: validate, enrich, persist, dispatch.

State machine per request:

    received -> validated -> persisted -> dispatched | dispatch_skipped | dispatch_failed -> done
    received -> rejected

Only rejection (400) and persistence failure (500) end a request with an
error. Once the contract row exists the request succeeds; a failed
dispatch is reported in the result and leaves the contract 'pending'.
There is no rollback and no retry.
"""

import logging
from typing import Any, Dict, Optional

from contract_automation.db.base import DatabaseInterface
from contract_automation.models.contract import (
    ContractRequest,
    ContractStatus,
    GenerationResult,
    GenerationState,
)
from contract_automation.services.dispatch import DispatchClient
from contract_automation.services.enrichment import EnrichmentService
from contract_automation.services.errors import ContractRejectedError
from contract_automation.services.payload import assemble, storage_folder_url
from contract_automation.services.persistence import ContractPersistence, as_text
from contract_automation.services.registry import TemplateRegistry, get_registry
from contract_automation.services.validation import resolve_contract_value, validate
from contract_automation.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ContractGenerationService:
    """Runs one contract generation request end to end."""

    def __init__(
        self,
        registry: Optional[TemplateRegistry] = None,
        db: Optional[DatabaseInterface] = None,
        enrichment: Optional[EnrichmentService] = None,
        dispatcher: Optional[DispatchClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self._registry = registry
        self._db = db
        self._enrichment = enrichment
        self._dispatcher = dispatcher
        self._persistence = None

    @property
    def registry(self) -> TemplateRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    @property
    def db(self) -> DatabaseInterface:
        """Lazy-load database client."""
        if self._db is None:
            from contract_automation.db.supabase import get_database
            self._db = get_database()
        return self._db

    @property
    def enrichment(self) -> EnrichmentService:
        if self._enrichment is None:
            self._enrichment = EnrichmentService(self.db)
        return self._enrichment

    @property
    def dispatcher(self) -> DispatchClient:
        if self._dispatcher is None:
            self._dispatcher = DispatchClient.from_settings()
        return self._dispatcher

    @property
    def persistence(self) -> ContractPersistence:
        if self._persistence is None:
            self._persistence = ContractPersistence(self.db)
        return self._persistence

    async def generate(
        self,
        contract_type: str,
        contract_data: Dict[str, Any],
        trigger_dispatch: bool = True,
    ) -> GenerationResult:
        """Generate one contract.

        Raises:
            ContractRejectedError: unknown type or failed validation; nothing persisted.
            PersistenceError: the contract row could not be written.
        """
        request = ContractRequest(
            contract_type=contract_type,
            contract_data=contract_data,
            trigger_dispatch=trigger_dispatch,
        )
        state = GenerationState.RECEIVED

        config = self.registry.lookup(request.contract_type)
        validation = validate(config, request.contract_data, request.contract_type)
        if not validation.is_valid:
            logger.info(
                f"Rejected {request.contract_type}: {len(validation.errors)} validation error(s)"
            )
            raise ContractRejectedError(validation)
        state = self._advance(state, GenerationState.VALIDATED)

        data = dict(request.contract_data)
        if data.get("value") in (None, ""):
            resolved = resolve_contract_value(config, data)
            if resolved is not None:
                data["value"] = resolved
        enrichment = self.enrichment.enrich(data)

        contract = self.persistence.create(request, config)
        # The insert does not select party foreign keys back
        contract = contract.model_copy(update={
            "first_party_id": as_text(request.contract_data.get("first_party_id")),
            "second_party_id": as_text(request.contract_data.get("second_party_id")),
            "promoter_id": contract.promoter_id or as_text(request.contract_data.get("promoter_id")),
        })
        state = self._advance(state, GenerationState.PERSISTED)

        dispatch = None
        if not request.trigger_dispatch:
            dispatch_state = GenerationState.DISPATCH_SKIPPED
        else:
            payload = assemble(config, enrichment.data, contract, self.settings.callback_url)
            dispatch = await self.dispatcher.dispatch(payload)
            if dispatch.success:
                dispatch_state = GenerationState.DISPATCHED
                if self.persistence.update_status(contract.id, ContractStatus.PROCESSING):
                    contract = contract.model_copy(update={"status": ContractStatus.PROCESSING})
            else:
                dispatch_state = GenerationState.DISPATCH_FAILED
        state = self._advance(state, dispatch_state)
        state = self._advance(state, GenerationState.DONE)

        return GenerationResult(
            state=state,
            dispatch_state=dispatch_state,
            contract=contract,
            validation=validation,
            dispatch=dispatch,
            storage_url=storage_folder_url(config),
            enrichment_warnings=enrichment.warnings,
        )

    @staticmethod
    def _advance(current: GenerationState, target: GenerationState) -> GenerationState:
        logger.debug(f"Generation state {current.value} -> {target.value}")
        return target
