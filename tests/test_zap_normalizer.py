import json

from scanworker.domain.models import ExtractedEvidence
from scanworker.normalizers.zap_normalizer import ZapNormalizer


def _report(alerts, **site):
    s = {"@name": "https://example.com", "@host": "example.com", "@port": "443", "@ssl": "true", "alerts": alerts}
    s.update(site)
    return json.dumps({"@version": "2.14.0", "site": [s]})


def _alert(**overrides):
    a = {
        "pluginid": "10038",
        "alert": "Content Security Policy (CSP) Header Not Set",
        "riskcode": "2",
        "confidence": "3",
        "desc": "<p>CSP is an added layer of security.</p>",
        "solution": "<p>Set the header.</p>",
        "reference": "<p>https://developer.mozilla.org/csp</p><p>https://owasp.org/csp</p>",
        "cweid": "693",
        "wascid": "15",
        "instances": [
            {"uri": "https://example.com/search", "method": "GET", "param": "q", "evidence": "<script>"},
            {"uri": "https://example.com/", "method": "GET", "param": "", "evidence": ""},
        ],
    }
    a.update(overrides)
    return a


def test_normalizes_zap_alerts():
    report = ZapNormalizer().normalize(_report([_alert()]))

    assert report.ok
    v = report.vulnerabilities[0]
    assert v.template_id == "10038"
    assert v.name.startswith("Content Security Policy")
    assert v.severity == "medium"
    assert v.description == "CSP is an added layer of security."
    assert v.matched_at == "https://example.com/search"
    assert v.parameter == "q"
    assert v.references == ["https://developer.mozilla.org/csp", "https://owasp.org/csp"]
    assert v.cwe_ids == [693]
    assert v.extra["confidence"] == "3"
    assert len(v.extra["instances"]) == 2
    assert isinstance(v.evidence, ExtractedEvidence)
    assert v.evidence.resources == ["<script>"]


def test_riskcode_mapping_is_total():
    alerts = [_alert(riskcode=c) for c in ("3", "2", "1", "0", "7", None)]
    sevs = [v.severity for v in ZapNormalizer().normalize(_report(alerts)).vulnerabilities]
    assert sevs == ["high", "medium", "low", "info", "info", "info"]


def test_alert_without_instances_falls_back_to_site():
    v = ZapNormalizer().normalize(_report([_alert(instances=[])])).vulnerabilities[0]
    assert v.matched_at == "https://example.com"
    assert v.parameter is None
    assert v.evidence is None


def test_target_updates_from_first_site():
    report = ZapNormalizer().normalize(_report([]))
    assert report.ok
    assert report.vulnerabilities == []
    assert report.target_updates == {"host": "example.com", "port": "443", "scheme": "https"}


def test_malformed_alert_is_skipped():
    report = ZapNormalizer().normalize(_report([_alert(), "oops", _alert()]))
    assert len(report.vulnerabilities) == 2
    assert report.skipped == 1


def test_invalid_json_is_a_parse_failure():
    report = ZapNormalizer().normalize("{ not json")
    assert not report.ok
    assert report.error == "Invalid JSON output from ZAP"


def test_blank_report_is_a_parse_failure():
    report = ZapNormalizer().normalize("   \n")
    assert not report.ok
    assert "empty" in report.error


def test_report_without_site_is_a_parse_failure():
    assert not ZapNormalizer().normalize(json.dumps({"@version": "2.14.0"})).ok


def test_wrongly_typed_instances_skips_only_that_alert():
    report = ZapNormalizer().normalize(_report([_alert(), _alert(instances=1), _alert()]))
    assert report.ok
    assert len(report.vulnerabilities) == 2
    assert report.skipped == 1


def test_wrongly_typed_reference_skips_only_that_alert():
    report = ZapNormalizer().normalize(_report([_alert(reference=7), _alert()]))
    assert report.ok
    assert len(report.vulnerabilities) == 1
    assert report.skipped == 1


def test_site_with_non_list_alerts_is_skipped():
    raw = json.dumps({"site": [
        {"@name": "https://a.example", "alerts": 5},
        {"@name": "https://b.example", "alerts": [_alert()]},
    ]})
    report = ZapNormalizer().normalize(raw)
    assert report.ok
    assert len(report.vulnerabilities) == 1
    assert report.skipped == 1
