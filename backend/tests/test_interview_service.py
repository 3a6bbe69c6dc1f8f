import asyncio

import pytest

from recruitai.errors import DuplicateSubmissionError
from recruitai.interview import service as service_module
from recruitai.interview.service import MockInterviewService


def _slow_analysis(delay: float = 0.05, calls: list | None = None):
    async def _analyze(**kwargs):
        if calls is not None:
            calls.append(kwargs["transcript"])
        await asyncio.sleep(delay)
        return {"source": "llm", "overallScore": 80}

    return _analyze


@pytest.mark.asyncio
async def test_concurrent_submits_only_first_wins(monkeypatch: pytest.MonkeyPatch):
    calls: list = []
    monkeypatch.setattr(service_module, "analyze_interview_with_llm", _slow_analysis(calls=calls))
    svc = MockInterviewService(enable_llm=True)
    interview_id = svc.start("u1")["interview_id"]

    results = await asyncio.gather(
        svc.submit(interview_id, "u1", transcript="first answer", eye_contact_percent=80),
        svc.submit(interview_id, "u1", transcript="second answer", eye_contact_percent=10),
        return_exceptions=True,
    )

    records = [item for item in results if isinstance(item, dict)]
    errors = [item for item in results if isinstance(item, DuplicateSubmissionError)]
    assert len(records) == 1
    assert len(errors) == 1
    assert calls == ["first answer"]

    stored = svc.get(interview_id)
    assert stored["status"] == "completed"
    assert stored["transcript"] == "first answer"
    assert stored["metrics"]["eyeContactPercent"] == 80
    assert stored["llm_metrics"] == {"source": "llm", "overallScore": 80}


@pytest.mark.asyncio
async def test_failed_analysis_releases_the_interview(monkeypatch: pytest.MonkeyPatch):
    async def _broken(**kwargs):
        raise RuntimeError("analysis crashed")

    monkeypatch.setattr(service_module, "analyze_interview_with_llm", _broken)
    svc = MockInterviewService(enable_llm=True)
    interview_id = svc.start("u1")["interview_id"]

    with pytest.raises(RuntimeError):
        await svc.submit(interview_id, "u1", transcript="answer")
    assert svc.get(interview_id)["status"] == "in_progress"

    monkeypatch.setattr(service_module, "analyze_interview_with_llm", _slow_analysis(delay=0))
    record = await svc.submit(interview_id, "u1", transcript="answer")
    assert record["status"] == "completed"


@pytest.mark.asyncio
async def test_submit_stores_overall_score_and_insights():
    svc = MockInterviewService(enable_llm=False)
    interview_id = svc.start("u1")["interview_id"]

    record = await svc.submit(interview_id, "u1", transcript="", eye_contact_percent=100, duration_sec=30)

    assert record["overall_score"] == 50
    assert record["metrics"]["overallScore"] == 50
    assert record["insights"] == {
        "eyeContactScore": 100,
        "eyeContactLabel": "stable",
        "fillerCount": 0,
        "fillerUsage": "low",
        "wpm": 0,
        "speakingPace": "slow",
        "sentimentScore": 60,
        "sentimentSummary": "Overall neutral emotional tone.",
    }
    assert svc.get(interview_id)["overall_score"] == 50
