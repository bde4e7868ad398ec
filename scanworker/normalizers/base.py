from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from scanworker.domain.errors import ReportParseError
from scanworker.domain.models import NormalizedVulnerability

logger = logging.getLogger(__name__)


@dataclass
class ParsedReport:
    """Normalizer output. ``error`` is set when the report was unusable."""

    vulnerabilities: list[NormalizedVulnerability] = field(default_factory=list)
    target_updates: dict[str, Any] = field(default_factory=dict)
    skipped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReportNormalizer(ABC):
    @abstractmethod
    def tool_name(self) -> str: ...

    @abstractmethod
    def parse(self, raw: str) -> ParsedReport:
        """Parse a non-empty report. May raise ``ReportParseError``."""

    def normalize(self, raw: str | None) -> ParsedReport:
        """Never raises: empty, missing or unreadable reports come back with ``error`` set."""
        if raw is None or not raw.strip():
            return ParsedReport(error=f"{self.tool_name()} report is empty or missing")
        try:
            report = self.parse(raw)
        except ReportParseError as e:
            return ParsedReport(error=str(e))
        except Exception as e:
            logger.exception("Unexpected error normalizing %s report", self.tool_name())
            return ParsedReport(error=f"Invalid {self.tool_name()} report: {e}")

        if report.skipped:
            logger.warning(
                "Skipped %d malformed %s record(s)",
                report.skipped,
                self.tool_name(),
                extra={"tool": self.tool_name()},
            )
        return report
