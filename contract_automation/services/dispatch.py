"""Dispatch client: single best-effort POST of the payload to the automation webhook"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from contract_automation.models.contract import DispatchResult
from contract_automation.utils.config import get_settings

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Webhook URL not configured"
USER_AGENT = "Contract-Automation/1.0"


class DispatchClient:
    """Posts webhook payloads. One attempt, no retries, transport-default timeout."""

    def __init__(self, endpoint_url: Optional[str] = None, secret: Optional[str] = None):
        self.endpoint_url = endpoint_url
        self.secret = secret or ""

    @classmethod
    def from_settings(cls) -> "DispatchClient":
        settings = get_settings()
        return cls(settings.effective_webhook_url, settings.webhook_secret)

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_url)

    async def dispatch(self, payload: Dict[str, Any]) -> DispatchResult:
        """Send payload and report the outcome. Never raises: every failure becomes a result."""
        if not self.is_configured:
            logger.info("Webhook URL not configured, dispatch skipped")
            return DispatchResult(status_code=0, success=False, error_message=NOT_CONFIGURED)

        headers = {
            "Content-Type": "application/json",
            "X-Webhook-Secret": self.secret,
            "User-Agent": USER_AGENT,
        }
        body = json.dumps(payload, default=str)

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.endpoint_url, data=body, headers=headers) as response:
                    status = response.status
                    text = await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or type(e).__name__
            logger.warning(f"Webhook dispatch failed: {message}")
            return DispatchResult(status_code=0, success=False, error_message=message)
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            logger.exception(f"Unexpected webhook dispatch error: {message}")
            return DispatchResult(status_code=0, success=False, error_message=message)

        success = 200 <= status < 300
        if success:
            logger.info(f"Webhook dispatched for contract {payload.get('contract_number')}: HTTP {status}")
            return DispatchResult(status_code=status, success=True, response_body=text)

        logger.warning(f"Webhook returned HTTP {status}: {text[:200]}")
        return DispatchResult(
            status_code=status,
            success=False,
            error_message=f"Webhook returned HTTP {status}",
            response_body=text,
        )
