from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urljoin

from scanworker.domain.errors import ReportParseError
from scanworker.domain.models import NormalizedVulnerability

from .base import ParsedReport, ReportNormalizer

logger = logging.getLogger(__name__)


class NiktoNormalizer(ReportNormalizer):
    """Nikto ``-Format json``: a host object, or a list of them."""

    def tool_name(self) -> str:
        return "nikto"

    def parse(self, raw: str) -> ParsedReport:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ReportParseError("Invalid JSON output from Nikto") from e

        hosts = data if isinstance(data, list) else [data]
        hosts = [h for h in hosts if isinstance(h, dict)]
        if not hosts:
            raise ReportParseError("Nikto report has no host entries")

        out: list[NormalizedVulnerability] = []
        skipped = 0
        for host in hosts:
            vulns = host.get("vulnerabilities") or []
            if not isinstance(vulns, list):
                logger.warning("Skipping nikto host %r: 'vulnerabilities' is not a list", host.get("host"))
                skipped += 1
                continue
            base = _base_url(host)
            for vuln in vulns:
                if not isinstance(vuln, dict) or not vuln.get("msg"):
                    skipped += 1
                    continue
                try:
                    out.append(_to_vulnerability(vuln, base))
                except (TypeError, ValueError, AttributeError) as e:
                    logger.warning("Skipping malformed nikto entry %r: %s", vuln.get("id"), e)
                    skipped += 1

        first = hosts[0]
        return ParsedReport(
            vulnerabilities=out,
            target_updates={"host": first.get("host"), "ip": first.get("ip"), "port": first.get("port")},
            skipped=skipped,
        )


def _base_url(host: dict[str, Any]) -> str:
    name = str(host.get("host") or "").strip()
    if not name:
        return ""
    if name.startswith(("http://", "https://")):
        return name
    port = str(host.get("port") or "").strip()
    scheme = "https" if port == "443" else "http"
    if port and port not in ("80", "443"):
        return f"{scheme}://{name}:{port}"
    return f"{scheme}://{name}"


def _to_vulnerability(vuln: dict[str, Any], base: str) -> NormalizedVulnerability:
    url = vuln.get("url") or ""
    if not isinstance(url, str):
        raise TypeError("'url' must be a string")
    path = url.strip()
    matched = urljoin(base + "/", path) if base and path else (path or base or None)
    msg = str(vuln["msg"]).strip()
    return NormalizedVulnerability(
        template_id=str(vuln["id"]) if vuln.get("id") is not None else None,
        name=msg,
        # nikto has no severity scale
        severity="info",
        description=msg,
        matched_at=matched,
        extra={k: vuln.get(k) for k in ("method", "OSVDB", "references") if vuln.get(k)},
    )
