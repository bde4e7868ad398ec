from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor

from scanworker.domain.errors import RequestValidationError, UnsupportedToolError
from scanworker.domain.models import AggregateResult, ScanRequest, ToolOutcome
from scanworker.scanners.registry import ScannerRegistry
from scanworker.services.callback_service import CallbackDispatcher

logger = logging.getLogger(__name__)

TARGET_URL_RE = re.compile(r"^https?://\S+$")


class ScanOrchestrator:
    """
    Orchestrates: validate request → run each requested adapter → aggregate → callback.

    ``run`` only ever raises ``RequestValidationError``; every per-tool
    problem becomes a FAILED ``ToolOutcome`` for that tool.
    """

    def __init__(
        self,
        registry: ScannerRegistry,
        dispatcher: CallbackDispatcher,
        reject_unsupported_tools: bool = False,
        max_parallel_tools: int = 1,
    ):
        self.registry = registry
        self.dispatcher = dispatcher
        self.reject_unsupported_tools = reject_unsupported_tools
        self.max_parallel_tools = max(1, max_parallel_tools)

    def validate(self, request: ScanRequest) -> None:
        errors: list[str] = []
        if not request.scan_id:
            errors.append("scan_id is required")
        if not request.target_url:
            errors.append("target_url is required")
        elif not TARGET_URL_RE.match(request.target_url):
            errors.append(f"target_url must be an http(s) URL: {request.target_url!r}")
        if not request.tools:
            errors.append("scan_tools must not be empty")
        elif self.reject_unsupported_tools:
            unsupported = [t for t in request.tools if not self.registry.supports(t)]
            if unsupported:
                errors.append(f"unsupported scan tools: {', '.join(unsupported)}")
        if not request.callback_url:
            errors.append("callback_url is required")

        if errors:
            raise RequestValidationError(errors)

    def run(self, request: ScanRequest) -> AggregateResult:
        self.validate(request)
        log_ctx = {"scan_id": request.scan_id}
        logger.info(
            "Starting scan of %s with %s",
            request.target_url,
            ", ".join(request.tools),
            extra=log_ctx,
        )

        if self.max_parallel_tools > 1 and len(request.tools) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_parallel_tools, len(request.tools))) as pool:
                outcomes = list(pool.map(lambda t: self._run_tool(t, request), request.tools))
        else:
            outcomes = [self._run_tool(t, request) for t in request.tools]

        result = AggregateResult.build(request.scan_id, dict(zip(request.tools, outcomes)))
        logger.info("Scan finished with status %s", result.status, extra=log_ctx)

        self.dispatcher.deliver(result, request.callback_url)
        return result

    def _run_tool(self, tool: str, request: ScanRequest) -> ToolOutcome:
        log_ctx = {"scan_id": request.scan_id, "tool": tool}
        try:
            adapter = self.registry.get(tool)
        except UnsupportedToolError as e:
            logger.warning("Scan tool '%s' not configured", tool, extra=log_ctx)
            return ToolOutcome.failed(str(e))

        try:
            return adapter.run(request.target_url, request.scan_id, request.params_for(tool))
        except Exception as e:
            logger.exception("Adapter %s crashed", tool, extra=log_ctx)
            return ToolOutcome.failed(str(e) or type(e).__name__)
