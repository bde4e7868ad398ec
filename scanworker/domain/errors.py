"""Error taxonomy for scan orchestration.

Only ``RequestValidationError`` leaves the orchestrator as an exception;
everything else is turned into a FAILED tool outcome or a log line.
"""

from __future__ import annotations


class ScanError(Exception):
    """Base class for all scan-worker errors."""


class RequestValidationError(ScanError):
    """Malformed or incomplete scan request. Raised before any tool runs."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid scan request")


class UnsupportedToolError(ScanError):
    def __init__(self, tool: str):
        self.tool = tool
        super().__init__("tool not supported")


class ProcessExecutionError(ScanError):
    """External tool could not be launched, timed out, or exited with a failure code."""


class ReportParseError(ScanError):
    """Tool report is missing, empty, or has no usable records."""


class CallbackDeliveryError(ScanError):
    """Outbound callback could not be delivered. Logged, never escalated."""
