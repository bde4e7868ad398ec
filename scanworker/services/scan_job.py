from __future__ import annotations

import logging

from scanworker.domain.errors import RequestValidationError
from scanworker.domain.models import AggregateResult, ScanRequest
from scanworker.services.scan_service import ScanOrchestrator

logger = logging.getLogger(__name__)


def run_scan_job(request: ScanRequest, orchestrator: ScanOrchestrator) -> AggregateResult | None:
    """Background entry point. Always ends in exactly one callback; never raises."""
    log_ctx = {"scan_id": request.scan_id}
    logger.info("Starting scan job", extra=log_ctx)
    try:
        return orchestrator.run(request)
    except RequestValidationError as e:
        logger.error("Scan request rejected: %s", e, extra=log_ctx)
        orchestrator.dispatcher.deliver_failure(request.scan_id, request.callback_url, str(e))
    except Exception as e:
        logger.exception("Scan job failed", extra=log_ctx)
        orchestrator.dispatcher.deliver_failure(request.scan_id, request.callback_url, str(e))
    return None
