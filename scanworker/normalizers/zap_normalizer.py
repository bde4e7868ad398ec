from __future__ import annotations

import json
import logging
import re
from typing import Any

from scanworker.domain.errors import ReportParseError
from scanworker.domain.models import NormalizedVulnerability, Severity

from .base import ParsedReport, ReportNormalizer
from .util import cwe_number, extract_urls, map_severity, pick_evidence

# ZAP riskcode: 3 High, 2 Medium, 1 Low, 0 Informational
RISKCODE_SEVERITY: dict[str, Severity] = {"3": "high", "2": "medium", "1": "low", "0": "info"}

_TAG_RE = re.compile(r"<[^>]+>")

logger = logging.getLogger(__name__)


class ZapNormalizer(ReportNormalizer):
    """ZAP traditional JSON report (``-J``): ``site[].alerts[]``."""

    def tool_name(self) -> str:
        return "zap"

    def parse(self, raw: str) -> ParsedReport:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ReportParseError("Invalid JSON output from ZAP") from e

        sites = data.get("site") if isinstance(data, dict) else None
        if isinstance(sites, dict):
            sites = [sites]
        if not isinstance(sites, list):
            raise ReportParseError("ZAP report has no 'site' section")

        out: list[NormalizedVulnerability] = []
        skipped = 0
        for site in sites:
            if not isinstance(site, dict):
                skipped += 1
                continue
            alerts = site.get("alerts") or []
            if not isinstance(alerts, list):
                skipped += 1
                continue
            for alert in alerts:
                if not isinstance(alert, dict):
                    skipped += 1
                    continue
                try:
                    out.append(_to_vulnerability(alert, site))
                except (TypeError, ValueError, AttributeError) as e:
                    logger.warning("Skipping malformed ZAP alert %r: %s", alert.get("pluginid"), e)
                    skipped += 1

        first = next((s for s in sites if isinstance(s, dict)), {})
        return ParsedReport(vulnerabilities=out, target_updates=_target_updates(first), skipped=skipped)


def _to_vulnerability(alert: dict[str, Any], site: dict[str, Any]) -> NormalizedVulnerability:
    raw_instances = alert.get("instances") or []
    if not isinstance(raw_instances, list):
        raise TypeError("'instances' must be a list")
    reference = alert.get("reference") or ""
    if not isinstance(reference, str):
        raise TypeError("'reference' must be a string")

    instances = [i for i in raw_instances if isinstance(i, dict)]
    first = instances[0] if instances else {}
    cwe = cwe_number(alert.get("cweid"))

    return NormalizedVulnerability(
        template_id=alert.get("pluginid"),
        name=alert.get("alert") or alert.get("name") or "ZAP alert",
        severity=map_severity(alert.get("riskcode"), RISKCODE_SEVERITY),
        description=_strip_html(alert.get("desc")),
        matched_at=first.get("uri") or site.get("@name"),
        parameter=first.get("param") or None,
        evidence=pick_evidence(extracted=[i.get("evidence") for i in instances]),
        references=extract_urls(reference),
        cwe_ids=[cwe] if cwe else [],
        extra={
            "confidence": alert.get("confidence"),
            "solution": _strip_html(alert.get("solution")),
            "wasc_id": alert.get("wascid"),
            "instances": [
                {"uri": i.get("uri"), "method": i.get("method"), "param": i.get("param"), "evidence": i.get("evidence")}
                for i in instances
            ],
        },
    )


def _target_updates(site: dict[str, Any]) -> dict[str, Any]:
    return {
        "host": site.get("@host") or site.get("@name"),
        "port": site.get("@port"),
        "scheme": "https" if str(site.get("@ssl")).lower() == "true" else "http",
    }


def _strip_html(text: Any) -> str:
    lines = _TAG_RE.sub("\n", str(text or "")).splitlines()
    return "\n".join(line.strip() for line in lines if line.strip())
