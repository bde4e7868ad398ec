from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Literal, Mapping, Union

Severity = Literal["critical", "high", "medium", "low", "info"]
SEVERITIES: tuple[str, ...] = ("critical", "high", "medium", "low", "info")

ToolStatus = Literal["COMPLETED", "FAILED"]
ScanStatus = Literal["COMPLETED", "FAILED", "PARTIAL"]


@dataclass(frozen=True)
class ScanRequest:
    scan_id: str
    target_url: str
    tools: tuple[str, ...]
    callback_url: str
    parameters: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        scan_id: str,
        target_url: str,
        tools: list[str] | tuple[str, ...],
        callback_url: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> "ScanRequest":
        """Case-normalize tool names (ordered, de-duplicated) and their parameter bags."""
        ordered: list[str] = []
        for t in tools or []:
            name = str(t or "").strip().lower()
            if name and name not in ordered:
                ordered.append(name)

        params: dict[str, dict[str, Any]] = {}
        for k, v in (parameters or {}).items():
            if isinstance(v, Mapping):
                params[str(k).strip().lower()] = dict(v)

        return cls(
            scan_id=(scan_id or "").strip(),
            target_url=(target_url or "").strip(),
            tools=tuple(ordered),
            callback_url=(callback_url or "").strip(),
            parameters=MappingProxyType(params),
        )

    def params_for(self, tool: str) -> dict[str, Any]:
        return dict(self.parameters.get(tool) or {})


# ── Evidence variants ────────────────────────────────────────────


@dataclass(frozen=True)
class ExtractedEvidence:
    resources: list[str]
    type: str = "extracted"


@dataclass(frozen=True)
class InteractionEvidence:
    interaction_domain: str | None
    remote_ip: str | None
    type: str = "oast"


@dataclass(frozen=True)
class CurlEvidence:
    command: str
    type: str = "curl"


Evidence = Union[ExtractedEvidence, InteractionEvidence, CurlEvidence]


@dataclass(frozen=True)
class NormalizedVulnerability:
    template_id: str | None
    name: str
    severity: Severity
    description: str
    matched_at: str | None
    parameter: str | None = None
    evidence: Evidence | None = None
    references: list[str] = field(default_factory=list)
    cwe_ids: list[int] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarize(vulnerabilities: list[NormalizedVulnerability]) -> dict[str, int]:
    """Count per severity plus total, derived from the normalized records."""
    counts = {"total": len(vulnerabilities)}
    counts.update({s: 0 for s in SEVERITIES})
    for v in vulnerabilities:
        counts[v.severity] = counts.get(v.severity, 0) + 1
    return counts


@dataclass(frozen=True)
class ToolOutcome:
    status: ToolStatus
    summary: Mapping[str, int] | None = None
    target_updates: Mapping[str, Any] | None = None
    vulnerabilities: tuple[NormalizedVulnerability, ...] = ()
    error: str | None = None

    @classmethod
    def completed(
        cls,
        vulnerabilities: list[NormalizedVulnerability],
        target_updates: dict[str, Any] | None = None,
    ) -> "ToolOutcome":
        return cls(
            status="COMPLETED",
            summary=MappingProxyType(summarize(vulnerabilities)),
            target_updates=MappingProxyType(dict(target_updates or {})),
            vulnerabilities=tuple(vulnerabilities),
        )

    @classmethod
    def failed(cls, error: str) -> "ToolOutcome":
        return cls(status="FAILED", error=error or "unknown error")

    def to_dict(self) -> dict[str, Any]:
        if self.status == "FAILED":
            return {"status": self.status, "error": self.error}
        return {
            "status": self.status,
            "summary": dict(self.summary or {}),
            "target_updates": dict(self.target_updates or {}),
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
        }


def aggregate_status(outcomes: Mapping[str, ToolOutcome]) -> ScanStatus:
    statuses = {o.status for o in outcomes.values()}
    if statuses == {"COMPLETED"}:
        return "COMPLETED"
    if statuses == {"FAILED"} or not statuses:
        return "FAILED"
    return "PARTIAL"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class AggregateResult:
    scan_id: str
    status: ScanStatus
    completed_at: str
    results: Mapping[str, ToolOutcome]

    @classmethod
    def build(cls, scan_id: str, results: Mapping[str, ToolOutcome]) -> "AggregateResult":
        return cls(
            scan_id=scan_id,
            status=aggregate_status(results),
            completed_at=utc_now(),
            results=MappingProxyType(dict(results)),
        )

    def to_payload(self) -> dict[str, Any]:
        """Outbound callback body (camelCase at the top level)."""
        return {
            "scanId": self.scan_id,
            "status": self.status,
            "completedAt": self.completed_at,
            "results": {tool: o.to_dict() for tool, o in self.results.items()},
        }
