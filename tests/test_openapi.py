"""Tests for OpenAPI documentation."""

from fastapi.testclient import TestClient

from scanworker.main import app

client = TestClient(app)


def test_openapi_schema_accessible():
    r = client.get("/openapi.json")
    assert r.status_code == 200
    schema = r.json()
    assert schema["info"]["title"] == "Scan Worker"
    assert schema["info"]["version"] == "0.3.0"


def test_swagger_ui_accessible():
    r = client.get("/docs")
    assert r.status_code == 200
    assert "swagger-ui" in r.text.lower()


def test_openapi_has_tag_descriptions():
    schema = client.get("/openapi.json").json()
    tags = {t["name"]: t["description"] for t in schema.get("tags", [])}
    assert "scan" in tags
    assert "health" in tags
    assert len(tags["scan"]) > 10, "Tag description should be meaningful"


def test_all_endpoints_have_summaries():
    schema = client.get("/openapi.json").json()
    paths = schema.get("paths", {})
    for path, methods in paths.items():
        for method, details in methods.items():
            if method in ("get", "post", "put", "delete", "patch"):
                assert "summary" in details, f"{method.upper()} {path} missing summary"
