from conftest import FakeAdapter, completed
from scanworker.domain.models import ScanRequest
from scanworker.services.scan_job import run_scan_job


def test_job_runs_scan_and_sends_one_callback(make_orchestrator, recorder):
    orch = make_orchestrator(FakeAdapter("nuclei", completed("low")))
    req = ScanRequest.create("s1", "http://example.com", ["nuclei"], "http://cb")

    result = run_scan_job(req, orch)

    assert result.status == "COMPLETED"
    assert [p["status"] for p in recorder.payloads] == ["COMPLETED"]


def test_invalid_request_sends_failure_callback(make_orchestrator, recorder):
    orch = make_orchestrator(FakeAdapter("nuclei", completed()))
    req = ScanRequest.create("s1", "not-a-url", ["nuclei"], "http://cb")

    assert run_scan_job(req, orch) is None

    assert len(recorder.payloads) == 1
    body = recorder.payloads[0]
    assert body["scanId"] == "s1"
    assert body["status"] == "FAILED"
    assert "target_url" in body["errorMessage"]
    assert "failedAt" in body


def test_unexpected_error_sends_failure_callback(make_orchestrator, recorder, monkeypatch):
    orch = make_orchestrator(FakeAdapter("nuclei", completed()))

    def explode(request):
        raise RuntimeError("registry corrupted")

    monkeypatch.setattr(orch, "run", explode)
    req = ScanRequest.create("s9", "http://example.com", ["nuclei"], "http://cb")

    assert run_scan_job(req, orch) is None
    assert recorder.payloads[0]["errorMessage"] == "registry corrupted"
