import re
from typing import Any, Iterable, Mapping

from scanworker.domain.models import (
    CurlEvidence,
    Evidence,
    ExtractedEvidence,
    InteractionEvidence,
    Severity,
)

_SEVERITY_ALIASES: dict[str, Severity] = {
    "critical": "critical",
    "high": "high",
    "medium": "medium",
    "moderate": "medium",
    "low": "low",
    "info": "info",
    "informational": "info",
}

_URL_RE = re.compile(r"https?://[^\s<>\"']+")


def map_severity(value: Any, mapping: Mapping[str, Severity] = _SEVERITY_ALIASES) -> Severity:
    """Total mapping onto the five-level scale; anything unknown is ``info``."""
    key = str(value if value is not None else "").strip().lower()
    return mapping.get(key, "info")


def pick_evidence(
    extracted: Iterable[Any] | None = None,
    interaction: Mapping[str, Any] | None = None,
    curl_command: str | None = None,
) -> Evidence | None:
    """First applicable variant wins: extracted, then out-of-band, then curl."""
    resources = [str(r) for r in (extracted or []) if r not in (None, "")]
    if resources:
        return ExtractedEvidence(resources=resources)
    if interaction:
        return InteractionEvidence(
            interaction_domain=interaction.get("full-id"),
            remote_ip=interaction.get("remote-address"),
        )
    if curl_command:
        return CurlEvidence(command=str(curl_command))
    return None


def as_list(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [s.strip() for s in str(value).split(",") if s.strip()]


def extract_urls(text: str | None) -> list[str]:
    """Pull links out of free text or HTML (ZAP ``reference`` field)."""
    out: list[str] = []
    for m in _URL_RE.findall(text or ""):
        if m not in out:
            out.append(m)
    return out


def cwe_number(value: Any) -> int | None:
    """``CWE-79`` / ``cwe-79`` / ``79`` -> 79. ZAP uses -1 for "none"."""
    s = str(value if value is not None else "").strip().lower()
    if s.startswith("cwe-"):
        s = s[4:]
    try:
        n = int(s)
    except ValueError:
        return None
    return n if n > 0 else None
