from __future__ import annotations

from pathlib import Path
from typing import Any

from scanworker.core.config import settings
from scanworker.normalizers.nikto_normalizer import NiktoNormalizer

from .base import FileReportAdapter


class NiktoScanner(FileReportAdapter):
    """Nikto web server scan with a JSON report file.

    Parameters: ``tuning`` (-Tuning), ``maxtime`` (-maxtime, e.g. ``"30m"``).
    """

    success_codes = frozenset({0})
    report_name = "nikto_report.json"

    def __init__(self) -> None:
        super().__init__(NiktoNormalizer())

    def tool_name(self) -> str:
        return "nikto"

    def build_command(
        self,
        target_url: str,
        parameters: dict[str, Any],
        workdir: Path,
        container_name: str | None = None,
    ) -> list[str]:
        cmd = [
            *self.docker_run(container_name),
            "-v", f"{workdir}:/app",
            "--network", "host",
            settings.NIKTO_IMAGE,
            "-h", target_url,
            "-o", f"/app/{self.report_name}",
            "-Format", "json",
            "-ask", "no",
            "-nointeractive",
        ]

        if parameters.get("tuning"):
            cmd += ["-Tuning", str(parameters["tuning"])]
        if parameters.get("maxtime"):
            cmd += ["-maxtime", str(parameters["maxtime"])]
        return cmd
