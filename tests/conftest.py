import json

import httpx
import pytest
from fastapi.testclient import TestClient

from scanworker.domain.models import NormalizedVulnerability, ToolOutcome
from scanworker.main import app
from scanworker.scanners.registry import ScannerRegistry
from scanworker.services.callback_service import CallbackDispatcher
from scanworker.services.scan_service import ScanOrchestrator


class FakeAdapter:
    """Stands in for a docker-backed adapter."""

    def __init__(self, name, outcome=None, exc=None):
        self._name = name
        self.outcome = outcome
        self.exc = exc
        self.calls = []

    def tool_name(self):
        return self._name

    def run(self, target_url, scan_id, parameters=None):
        self.calls.append((target_url, scan_id, parameters))
        if self.exc:
            raise self.exc
        return self.outcome


class CallbackRecorder:
    """httpx transport that records every callback POST."""

    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return httpx.Response(self.status_code, json={"ok": True})

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


def vuln(severity="high", name="finding"):
    return NormalizedVulnerability(
        template_id="t-1",
        name=name,
        severity=severity,
        description="",
        matched_at="http://example.com/",
    )


def completed(*severities):
    return ToolOutcome.completed([vuln(s) for s in severities])


@pytest.fixture
def recorder():
    return CallbackRecorder()


@pytest.fixture
def make_orchestrator(recorder):
    def _make(*adapters, **kwargs):
        dispatcher = CallbackDispatcher(timeout_sec=1, transport=recorder.transport)
        return ScanOrchestrator(ScannerRegistry(adapters), dispatcher, **kwargs)

    return _make


@pytest.fixture
def client():
    return TestClient(app)
