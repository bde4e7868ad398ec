from __future__ import annotations

import json
import logging
from typing import Any

from scanworker.domain.errors import ReportParseError
from scanworker.domain.models import NormalizedVulnerability

from .base import ParsedReport, ReportNormalizer
from .util import as_list, cwe_number, map_severity, pick_evidence

logger = logging.getLogger(__name__)


class NucleiNormalizer(ReportNormalizer):
    """Nuclei ``-jsonl`` output: one JSON object per line."""

    def tool_name(self) -> str:
        return "nuclei"

    def parse(self, raw: str) -> ParsedReport:
        records: list[dict[str, Any]] = []
        out: list[NormalizedVulnerability] = []
        skipped = 0
        for line in raw.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                it = json.loads(line)
            except ValueError as e:
                logger.warning("Invalid JSON line from Nuclei: %s", e)
                skipped += 1
                continue
            if not isinstance(it, dict):
                skipped += 1
                continue
            try:
                out.append(_to_vulnerability(it))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed nuclei record %r: %s", it.get("template-id"), e)
                skipped += 1
                continue
            records.append(it)

        if not records:
            raise ReportParseError(f"No valid records in nuclei output ({skipped} malformed line(s))")

        return ParsedReport(
            vulnerabilities=out,
            target_updates=_target_updates(records[0]),
            skipped=skipped,
        )


def _to_vulnerability(r: dict[str, Any]) -> NormalizedVulnerability:
    info = r.get("info") or {}
    if not isinstance(info, dict):
        raise TypeError("'info' must be an object")
    classification = info.get("classification") if isinstance(info.get("classification"), dict) else {}

    cwe_ids: list[int] = []
    for c in as_list(classification.get("cwe-id")):
        n = cwe_number(c)
        if n is not None and n not in cwe_ids:
            cwe_ids.append(n)

    interaction = r.get("interaction") if isinstance(r.get("interaction"), dict) else None
    extracted = r.get("extracted-results") if isinstance(r.get("extracted-results"), list) else None

    return NormalizedVulnerability(
        template_id=r.get("template-id"),
        name=info.get("name") or "Unknown Vulnerability",
        severity=map_severity(info.get("severity")),
        description=str(info.get("description") or "").strip(),
        matched_at=r.get("matched-at") or r.get("url") or r.get("host"),
        parameter=r.get("fuzzing_parameter") or None,
        evidence=pick_evidence(extracted, interaction, r.get("curl-command")),
        references=as_list(info.get("reference")),
        cwe_ids=cwe_ids,
        extra={k: r[k] for k in ("type", "matcher-name", "timestamp") if r.get(k)},
    )


def _target_updates(first: dict[str, Any]) -> dict[str, Any]:
    return {k: first.get(k) for k in ("ip", "host", "scheme", "port")}
