from __future__ import annotations

from pathlib import Path
from typing import Any

from scanworker.core.config import settings
from scanworker.normalizers.nuclei_normalizer import NucleiNormalizer

from .base import ScannerAdapter


class NucleiScanner(ScannerAdapter):
    """projectdiscovery/nuclei, JSON lines on stdout.

    Parameters: ``template_path`` (-t), ``severity`` (-severity, string or list).
    """

    success_codes = frozenset({0})

    def __init__(self) -> None:
        super().__init__(NucleiNormalizer())

    def tool_name(self) -> str:
        return "nuclei"

    def build_command(
        self,
        target_url: str,
        parameters: dict[str, Any],
        workdir: Path,
        container_name: str | None = None,
    ) -> list[str]:
        cmd = [
            *self.docker_run(container_name),
            "-i",
            settings.NUCLEI_IMAGE,
            "-u", target_url,
            "-jsonl",
            "-silent",
            "-nc",
        ]

        template_path = parameters.get("template_path")
        severity = parameters.get("severity")
        if isinstance(severity, (list, tuple)):
            severity = ",".join(str(s) for s in severity)

        if template_path:
            cmd += ["-t", str(template_path)]
        if severity:
            cmd += ["-severity", str(severity)]
        return cmd
