from __future__ import annotations

from fastapi.testclient import TestClient

from storygraph.main import app


def _document() -> dict:
    return {
        "meta": {"title": "API"},
        "start": "A",
        "scenes": {
            "A": {"text": "a", "options": [{"label": "to b", "to": "B"}, {"label": "bad", "to": "Z"}]},
            "B": {"text": "b", "options": [{"label": "back", "to": "A"}]},
            "C": {"text": ""},
        },
    }


def test_health() -> None:
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_sample_endpoint_returns_raw_document() -> None:
    client = TestClient(app)
    resp = client.get("/api/v1/stories/sample")
    assert resp.status_code == 200
    body = resp.json()
    assert body["start"] == "S01"
    assert set(body["scenes"]) == {"S01", "S02", "S03", "S04"}


def test_normalize_endpoint_returns_canonical_story() -> None:
    client = TestClient(app)
    resp = client.post(
        "/api/v1/stories/normalize",
        json={"document": {"root": "x", "sections": [{"name": "x", "body": "hi", "links": ["Stay"]}]}},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "story": {
            "start": "x",
            "scenes": {"x": {"text": "hi", "choices": [{"label": "Stay", "to": ""}]}},
        }
    }


def test_audit_endpoint_reports_issues_and_summary() -> None:
    client = TestClient(app)
    resp = client.post("/api/v1/stories/audit", json={"document": _document()})
    assert resp.status_code == 200
    body = resp.json()

    assert body["ok"] is False
    assert body["story"]["meta"] == {"title": "API"}
    assert [item["code"] for item in body["issues"]] == [
        "E_DANGLING_TO",
        "W_EMPTY_TEXT",
        "W_DEAD_END",
        "W_UNREACHABLE_SCENE",
        "I_CYCLES_DETECTED",
    ]
    assert body["issues"][0] == {
        "severity": "error",
        "code": "E_DANGLING_TO",
        "message": 'Choice points to missing scene "Z".',
        "scene": "A",
        "choice": "A.choice1",
    }
    assert "scene" not in body["issues"][-1]
    assert body["summary"] == {
        "scenes": 3,
        "reachable": 2,
        "cycles": 1,
        "errors": 1,
        "warnings": 3,
        "infos": 1,
    }
    assert body["cycles"] == [["A", "B", "A"]]


def test_audit_endpoint_ok_when_no_errors() -> None:
    client = TestClient(app)
    resp = client.post(
        "/api/v1/stories/audit",
        json={"document": {"start": "A", "scenes": {"A": {"text": "end"}}}},
    )
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_non_object_document_is_rejected() -> None:
    client = TestClient(app)
    for endpoint in ("/api/v1/stories/normalize", "/api/v1/stories/audit", "/api/v1/stories/overview"):
        resp = client.post(endpoint, json={"document": ["not", "an", "object"]})
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "STORY_NOT_OBJECT"


def test_overview_endpoint() -> None:
    client = TestClient(app)
    resp = client.post("/api/v1/stories/overview", json={"document": _document()})
    assert resp.status_code == 200
    body = resp.json()

    assert body["start"] == "A"
    assert body["active_scene"] == "A"
    assert body["scenes"][0] == {"id": "A", "choice_count": 2, "is_start": True, "is_ending": False}
    assert [row["id"] for row in body["scenes"]] == ["A", "B", "C"]
