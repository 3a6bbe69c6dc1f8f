import random

import pytest
from fastapi.testclient import TestClient

from recruitai.api.deps import get_interview_service, get_mock_test_engine, get_session_registry
from recruitai.interview.service import MockInterviewService
from recruitai.main import app
from recruitai.mock_test import MockTestEngine
from recruitai.session import SessionRegistry


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def engine():
    return MockTestEngine(rng=random.Random(11))


@pytest.fixture
def client(registry, engine):
    service = MockInterviewService(enable_llm=False)
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_mock_test_engine] = lambda: engine
    app.dependency_overrides[get_interview_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
    registry.clear()


def _create_session(client, headers, **body) -> str:
    response = client.post("/api/proctoring/sessions", json=body, headers=headers)
    assert response.status_code == 200
    return response.json()["session_id"]


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok", "service": "backend"}


def test_requires_bearer_token(client):
    assert client.post("/api/mock-test/start").status_code == 401
    assert client.post("/api/mock-test/start", headers={"Authorization": "Token abc"}).status_code == 401


def test_attention_violations_auto_submit_once(client, auth_headers):
    session_id = _create_session(client, auth_headers, max_attention_violations=2)
    url = f"/api/proctoring/sessions/{session_id}/face-check"

    first = client.post(url, json={"detections": []}, headers=auth_headers).json()
    assert first["count"] == 1
    assert first["state"] == "created"

    second = client.post(url, json={"detections": []}, headers=auth_headers).json()
    assert second["count"] == 2
    assert second["state"] == "auto_submitted"
    assert second["auto_submit_reasons"] == ["attention-violation"]

    third = client.post(url, json={"detections": []}, headers=auth_headers).json()
    assert third["auto_submit_reasons"] == ["attention-violation"]


def test_detector_failure_is_skipped(client, auth_headers):
    session_id = _create_session(client, auth_headers)
    body = client.post(
        f"/api/proctoring/sessions/{session_id}/face-check",
        json={"detections": None},
        headers=auth_headers,
    ).json()
    assert body["skipped"] is True
    assert body["count"] is None


def test_tab_switch_signals(client, auth_headers):
    session_id = _create_session(client, auth_headers, max_tab_violations=2)
    base = f"/api/proctoring/sessions/{session_id}"

    assert client.post(f"{base}/visibility", json={"hidden": False}, headers=auth_headers).json()["count"] == 0
    assert client.post(f"{base}/blur", headers=auth_headers).json()["count"] == 1
    body = client.post(f"{base}/visibility", json={"hidden": True}, headers=auth_headers).json()
    assert body["count"] == 2
    assert body["auto_submit_reasons"] == ["tab-switch-violation"]


def test_camera_check(client, auth_headers):
    session_id = _create_session(client, auth_headers, max_camera_violations=1)
    url = f"/api/proctoring/sessions/{session_id}/camera-check"

    body = client.post(url, json={"detections": [{}, {}]}, headers=auth_headers).json()
    assert body["result"] == "multi-face"
    assert body["violation_count"] == 1

    body = client.post(url, json={"detections": [{}]}, headers=auth_headers).json()
    assert body["result"] == "ok"
    assert body["violation_count"] == 1


def test_eye_contact_flow(client, auth_headers, good_frame, bad_frame):
    session_id = _create_session(client, auth_headers)
    base = f"/api/proctoring/sessions/{session_id}"

    assert client.post(f"{base}/frames", json={"landmarks": good_frame}, headers=auth_headers).json()["percent"] == 100
    assert client.post(f"{base}/frames", json={"landmarks": None}, headers=auth_headers).json()["percent"] == 100
    assert client.post(f"{base}/frames", json={"landmarks": bad_frame}, headers=auth_headers).json()["percent"] == 50

    summary = client.get(f"{base}/eye-contact", headers=auth_headers).json()
    assert summary["label"] == "Fair"
    assert summary["stats"]["total_frames"] == 2

    reset = client.post(f"{base}/eye-contact/reset", headers=auth_headers).json()
    assert reset["percent"] == 0


def test_stop_is_idempotent(client, auth_headers):
    session_id = _create_session(client, auth_headers)
    url = f"/api/proctoring/sessions/{session_id}/stop"

    first = client.post(url, headers=auth_headers).json()
    second = client.post(url, headers=auth_headers).json()
    assert first["stopped_now"] is True
    assert second["stopped_now"] is False
    assert second["state"] == "stopped"


def test_session_ownership(client, auth_headers, other_auth_headers):
    session_id = _create_session(client, auth_headers)
    assert client.get(f"/api/proctoring/sessions/{session_id}", headers=other_auth_headers).status_code == 403
    assert client.get("/api/proctoring/sessions/missing", headers=auth_headers).status_code == 404


def test_session_create_validates_limits(client, auth_headers):
    response = client.post("/api/proctoring/sessions", json={"max_tab_violations": 0}, headers=auth_headers)
    assert response.status_code == 422


def test_interview_metrics(client, auth_headers):
    body = client.post(
        "/api/interview/metrics",
        json={"transcript": "", "eyeContactPercent": 0},
        headers=auth_headers,
    ).json()
    assert body["wordCount"] == 0
    assert body["appearanceScore"] == 0
    assert body["eyeContactPercent"] == 0
    assert body["languageGrammarScore"] == 0

    body = client.post(
        "/api/interview/metrics",
        json={"transcript": "It went well.", "hesitationInfo": {"fillerCount": 3}},
        headers=auth_headers,
    ).json()
    assert body["pauses"] == {"estimatedPauses": 3, "hesitationScore": 85}


def test_mock_test_lifecycle(client, auth_headers, engine):
    started = client.post("/api/mock-test/start", headers=auth_headers).json()
    again = client.post("/api/mock-test/start", headers=auth_headers).json()
    assert started["attempt_id"] == again["attempt_id"]
    assert len(started["questions"]) == 60
    assert all("correct_index" not in q for q in started["questions"])

    record = engine.get_attempt(started["attempt_id"])
    answers = [{"questionId": q.id, "selectedIndex": q.correct_index} for q in record.questions[:30]]
    payload = {
        "attemptId": started["attempt_id"],
        "answers": answers,
        "violations": {"attentionIncrement": 1, "tabSwitchIncrement": 2},
    }

    submitted = client.post("/api/mock-test/submit", json=payload, headers=auth_headers)
    assert submitted.status_code == 200
    body = submitted.json()
    assert body["scores"]["total_correct"] == 30
    assert body["scores"]["percent"] == 50
    assert body["violations"] == {"attention": 1, "tab_switch": 2}

    assert client.post("/api/mock-test/submit", json=payload, headers=auth_headers).status_code == 409

    result = client.get(f"/api/mock-test/result/{started['attempt_id']}", headers=auth_headers)
    assert result.status_code == 200
    assert result.json()["scores"] == body["scores"]


def test_mock_test_unknown_attempt(client, auth_headers, other_auth_headers):
    missing = {"attemptId": "nope", "answers": []}
    assert client.post("/api/mock-test/submit", json=missing, headers=auth_headers).status_code == 404
    assert client.get("/api/mock-test/result/nope", headers=auth_headers).status_code == 404

    started = client.post("/api/mock-test/start", headers=auth_headers).json()
    foreign = client.get(f"/api/mock-test/result/{started['attempt_id']}", headers=other_auth_headers)
    assert foreign.status_code == 404


def test_mock_interview_lifecycle(client, auth_headers, other_auth_headers):
    started = client.post("/api/mock-interview/start", headers=auth_headers).json()
    assert started["success"] is True
    assert started["userId"] == "pytest-user"
    assert started["config"]["questions_count"] == 5
    interview_id = started["interviewId"]

    payload = {
        "interviewId": interview_id,
        "transcript": "I am happy and excited about this great opportunity.",
        "eyeContactPercent": 72,
        "durationSec": 30,
    }
    submitted = client.post("/api/mock-interview/submit", json=payload, headers=auth_headers)
    assert submitted.status_code == 200
    body = submitted.json()
    assert body["status"] == "completed"
    assert body["metrics"]["sentiment"] == "positive"
    assert body["metrics"]["appearanceScore"] == 72
    assert body["overallScore"] == body["metrics"]["overallScore"]
    assert 0 <= body["overallScore"] <= 100
    assert body["insights"]["eyeContactLabel"] == "stable"
    assert body["insights"]["sentimentSummary"] == "Overall positive and confident emotional tone."
    assert body["insights"]["wpm"] == body["metrics"]["wordCount"]
    assert body["llmMetrics"] is None

    assert client.post("/api/mock-interview/submit", json=payload, headers=auth_headers).status_code == 409

    fetched = client.get(f"/api/mock-interview/{interview_id}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["metrics"] == body["metrics"]

    assert client.get(f"/api/mock-interview/{interview_id}", headers=other_auth_headers).status_code == 404
    missing = {**payload, "interviewId": "interview_missing"}
    assert client.post("/api/mock-interview/submit", json=missing, headers=auth_headers).status_code == 404


def test_system_metrics(client, auth_headers):
    _create_session(client, auth_headers)
    body = client.get("/api/system/metrics", headers=auth_headers).json()
    assert body["proctoring_sessions_active"] == 1
    assert body["session_cleanup_ttl_sec"] >= 60
