"""Callback dispatcher: one outbound POST per scan, failures logged only."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from scanworker.core.config import settings
from scanworker.domain.errors import CallbackDeliveryError
from scanworker.domain.models import AggregateResult, utc_now

logger = logging.getLogger(__name__)


class CallbackDispatcher:
    def __init__(
        self,
        timeout_sec: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.CALLBACK_TIMEOUT_SEC
        self._transport = transport

    def deliver(self, result: AggregateResult, callback_url: str) -> None:
        """Send the final scan result. Never raises."""
        self._send(callback_url, result.to_payload(), result.scan_id)

    def deliver_failure(self, scan_id: str, callback_url: str, error_message: str) -> None:
        """Report a scan that failed before any tool outcome existed. Never raises."""
        payload = {
            "scanId": scan_id,
            "status": "FAILED",
            "errorMessage": error_message,
            "failedAt": utc_now(),
        }
        self._send(callback_url, payload, scan_id)

    def _send(self, callback_url: str, payload: dict[str, Any], scan_id: str) -> bool:
        try:
            self._post(callback_url, payload)
        except CallbackDeliveryError as e:
            logger.error("Failed to send callback: %s", e, extra={"scan_id": scan_id})
            return False
        except Exception:
            logger.exception("Unexpected error sending callback", extra={"scan_id": scan_id})
            return False
        logger.info(
            "Sent callback with status %s to %s",
            payload.get("status"),
            callback_url,
            extra={"scan_id": scan_id},
        )
        return True

    def _post(self, callback_url: str, payload: dict[str, Any]) -> None:
        if not callback_url:
            raise CallbackDeliveryError("no callback URL")

        body = json.dumps(payload, default=str)
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        try:
            with httpx.Client(timeout=self.timeout_sec, transport=self._transport) as client:
                r = client.post(callback_url, content=body, headers=headers)
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CallbackDeliveryError(
                f"{e.response.status_code} from {callback_url} - Response: {e.response.text[:500]}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CallbackDeliveryError(f"{type(e).__name__}: {e}") from e
