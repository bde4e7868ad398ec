from __future__ import annotations

from pathlib import Path
from typing import Any

from scanworker.core.config import settings
from scanworker.normalizers.zap_normalizer import ZapNormalizer

from .base import FileReportAdapter

DEFAULT_TIMEOUT = 300
# headroom over -m for the active scan phase and report writing
TIMEOUT_MARGIN_SEC = 900


class ZapScanner(FileReportAdapter):
    """OWASP ZAP full scan, JSON report written to the mounted work dir.

    Parameters: ``timeout`` (passed to -m, default 300), ``policy`` (-p).
    """

    # 2 = warnings found; that is a finished scan, not an execution error
    success_codes = frozenset({0, 2})
    report_name = "zap_report.json"

    def __init__(self) -> None:
        super().__init__(ZapNormalizer())

    def tool_name(self) -> str:
        return "zap"

    def timeout_sec(self, parameters: dict[str, Any]) -> int:
        try:
            minutes = int(parameters.get("timeout") or DEFAULT_TIMEOUT)
        except (TypeError, ValueError):
            minutes = DEFAULT_TIMEOUT
        return max(settings.SCAN_TOOL_TIMEOUT_SEC, minutes * 60 + TIMEOUT_MARGIN_SEC)

    def build_command(
        self,
        target_url: str,
        parameters: dict[str, Any],
        workdir: Path,
        container_name: str | None = None,
    ) -> list[str]:
        timeout = parameters.get("timeout") or DEFAULT_TIMEOUT
        policy = parameters.get("policy")

        cmd = [
            *self.docker_run(container_name),
            "-u", "zap",
            "-v", f"{workdir}:/zap/wrk",
            settings.ZAP_IMAGE,
            "zap-full-scan.py",
            "-t", target_url,
            # relative name: the script writes into /zap/wrk
            "-J", self.report_name,
            "-m", str(timeout),
            "-I",
        ]

        if policy:
            cmd += ["-p", str(policy)]
        return cmd
