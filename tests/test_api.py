"""
Tests for the Hunter API — integration tests for the full pipeline over HTTP.
"""

from fastapi.testclient import TestClient

from hunter.config import settings
from hunter.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "1.0.0"
    assert data["rules"] == 39


def test_analyze_files(sample_files):
    response = client.post("/analyze", json={"files": sample_files})
    assert response.status_code == 200
    data = response.json()

    project = data["project"]
    assert project["files_analyzed"] == 2
    assert [f["path"] for f in project["files"]] == ["src/clean.rs", "src/garbage.rs"]
    assert project["files"][0]["issues"] == []
    issues = project["files"][1]["issues"]
    assert issues
    assert all(i["file"] == "src/garbage.rs" for i in issues)
    assert "duration_ms" not in project["files"][1]

    score = data["score"]
    assert 0 < score["overall_score"] <= 100
    assert score["quality_level"] in {"excellent", "good", "average", "poor", "terrible"}
    assert len(score["contributions"]) == 7


def test_analyze_with_config_override(sample_files):
    response = client.post(
        "/analyze",
        json={"files": sample_files, "config": {"min_commented_block": 10}},
    )
    assert response.status_code == 200
    issues = response.json()["project"]["files"][1]["issues"]
    assert all(i["rule_id"] != "commented-code" for i in issues)


def test_analyze_empty_files():
    response = client.post("/analyze", json={"files": []})
    assert response.status_code == 422


def test_analyze_invalid_config(sample_files):
    response = client.post("/analyze", json={"files": sample_files, "config": {"nesting_threshold": 0}})
    assert response.status_code == 422


def test_analyze_duplicate_paths():
    files = [{"path": "lib.rs", "content": "fn a() {}"}, {"path": "lib.rs", "content": "fn b() {}"}]
    response = client.post("/analyze", json={"files": files})
    assert response.status_code == 422
    assert "lib.rs" in response.json()["detail"]


def test_analyze_too_many_files(monkeypatch, sample_files):
    monkeypatch.setattr(settings, "max_request_files", 1)
    response = client.post("/analyze", json={"files": sample_files})
    assert response.status_code == 413


def test_analyze_unencodable_file_is_reported_not_fatal():
    # a lone surrogate escape is valid JSON but cannot be encoded as UTF-8
    body = (
        '{"files": [{"path": "bad.rs", "content": "fn a() { let s = \\"\\ud800\\"; }"},'
        ' {"path": "good.rs", "content": "fn b() {}"}]}'
    )
    response = client.post("/analyze", content=body, headers={"content-type": "application/json"})
    assert response.status_code == 200
    project = response.json()["project"]
    assert [f["path"] for f in project["files"]] == ["good.rs"]
    assert [e["path"] for e in project["errors"]] == ["bad.rs"]
    assert project["errors"][0]["kind"] == "file_unreadable"
