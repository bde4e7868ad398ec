from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, HTTPException
from fastapi.responses import JSONResponse

from scanworker.core.config import settings
from scanworker.core.containers import build_orchestrator
from scanworker.domain.errors import RequestValidationError
from scanworker.domain.models import ScanRequest
from scanworker.domain.schemas import ScanStartRequest
from scanworker.services.scan_job import run_scan_job

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["scan"])

# Build once at module level
orchestrator = build_orchestrator()


@router.get(
    "/tools",
    summary="List supported tools",
    response_description="Names of registered scanner adapters",
)
def list_tools() -> list[str]:
    """Return the tool names accepted in `scan_tools`.

    Tools: **nuclei** (template scanner), **zap** (OWASP ZAP full scan),
    **nikto** (web server scanner).
    """
    return orchestrator.registry.list()


@router.post(
    "/start",
    summary="Start a scan",
    status_code=202,
    response_description="Queued confirmation, or the final result when `wait=true`",
)
def start_scan(req: ScanStartRequest, background_tasks: BackgroundTasks, wait: bool = False) -> Any:
    """Validate a scan request and run it.

    By default the scan is queued and the result is delivered only to
    `callback_url`. With `wait=true` (or `SCAN_EXECUTION_MODE=inline`) the
    scan runs in the request and the callback payload is also returned.
    """
    request = ScanRequest.create(
        scan_id=req.scan_id,
        target_url=req.target_url,
        tools=req.scan_tools,
        callback_url=req.callback_url,
        parameters=req.scan_parameters,
    )

    try:
        orchestrator.validate(request)
    except RequestValidationError as e:
        raise HTTPException(status_code=400, detail={"errors": e.errors})

    logger.info(
        "Received scan request for %s, tools: %s",
        request.target_url,
        ", ".join(request.tools),
        extra={"scan_id": request.scan_id},
    )

    if wait or settings.SCAN_EXECUTION_MODE == "inline":
        result = orchestrator.run(request)
        return JSONResponse(status_code=200, content=result.to_payload())

    background_tasks.add_task(run_scan_job, request, orchestrator)
    return {
        "message": f"Scan request received and queued for Scan ID: {request.scan_id}",
        "scan_id": request.scan_id,
    }
