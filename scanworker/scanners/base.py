"""Scanner adapter contract.

An adapter owns everything tool-specific: the docker invocation, which exit
codes count as success, where the report lands, and which normalizer reads
it. The shared ``run`` flow only wires those pieces together and guarantees
one ``ToolOutcome`` per call.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from scanworker.core.config import settings
from scanworker.core.util import CmdResult, run_cmd
from scanworker.domain.errors import ProcessExecutionError
from scanworker.domain.models import ToolOutcome
from scanworker.normalizers.base import ReportNormalizer

logger = logging.getLogger(__name__)


class ScannerAdapter(ABC):
    # Exit codes that mean "the tool ran", findings or not
    success_codes: frozenset[int] = frozenset({0})

    def __init__(self, normalizer: ReportNormalizer):
        self.normalizer = normalizer

    @abstractmethod
    def tool_name(self) -> str: ...

    @abstractmethod
    def build_command(
        self,
        target_url: str,
        parameters: dict[str, Any],
        workdir: Path,
        container_name: str | None = None,
    ) -> list[str]: ...

    def docker_run(self, container_name: str | None = None) -> list[str]:
        cmd = [settings.DOCKER_BIN, "run", "--rm"]
        if container_name:
            cmd += ["--name", container_name]
        return cmd

    def read_report(self, result: CmdResult, workdir: Path) -> str | None:
        return result.stdout

    def timeout_sec(self, parameters: dict[str, Any]) -> int:
        return settings.SCAN_TOOL_TIMEOUT_SEC

    def run(self, target_url: str, scan_id: str, parameters: dict[str, Any] | None = None) -> ToolOutcome:
        tool = self.tool_name()
        params = dict(parameters or {})
        log_ctx = {"scan_id": scan_id, "tool": tool}

        # graceful handling if the container runtime is missing
        if shutil.which(settings.DOCKER_BIN) is None:
            logger.error("%s not found on PATH", settings.DOCKER_BIN, extra=log_ctx)
            return ToolOutcome.failed(f"{settings.DOCKER_BIN} not installed")

        with tempfile.TemporaryDirectory(prefix=f"{tool}_{_safe(scan_id)}_") as tmp:
            workdir = Path(tmp)
            # container user must be able to write the report
            os.chmod(workdir, 0o777)

            name = _container_name(tool, scan_id)
            cmd = self.build_command(target_url, params, workdir, container_name=name)
            logger.info("Running %s", " ".join(cmd), extra=log_ctx)

            try:
                r = run_cmd(
                    cmd,
                    timeout_sec=self.timeout_sec(params),
                    on_timeout=[settings.DOCKER_BIN, "rm", "-f", name],
                )
            except ProcessExecutionError as e:
                logger.error("%s execution failed: %s", tool, e, extra=log_ctx)
                return ToolOutcome.failed(str(e))

            if r.exit_code not in self.success_codes:
                logger.error("%s exited with code %d", tool, r.exit_code, extra=log_ctx)
                return ToolOutcome.failed(r.stderr.strip() or f"{tool} exited with code {r.exit_code}")

            report = self.normalizer.normalize(self.read_report(r, workdir))

        if not report.ok:
            logger.error("%s report rejected: %s", tool, report.error, extra=log_ctx)
            return ToolOutcome.failed(report.error or "unparseable report")

        logger.info("%s completed: %d findings", tool, len(report.vulnerabilities), extra=log_ctx)
        return ToolOutcome.completed(report.vulnerabilities, report.target_updates)


class FileReportAdapter(ScannerAdapter):
    """Adapter whose tool writes its report into the mounted work directory."""

    report_name: str = "report.json"

    def read_report(self, result: CmdResult, workdir: Path) -> str | None:
        p = workdir / self.report_name
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8", errors="replace")


def _container_name(tool: str, scan_id: str) -> str:
    return f"scanworker_{tool}_{_safe(scan_id)}_{uuid.uuid4().hex[:8]}"


def _safe(value: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in value)[:40]
