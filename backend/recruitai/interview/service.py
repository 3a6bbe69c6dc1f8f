import logging
import time
import uuid
from typing import Any, Mapping

from core.config import ENABLE_LLM_ANALYSIS
from core.logger import log_event
from recruitai.errors import DuplicateSubmissionError, InterviewNotFoundError
from recruitai.system_metrics import increment_metric, observe_analysis_latency_ms

from .insights import build_insights
from .llm_analysis import analyze_interview_with_llm
from .scoring import compute_all_metrics
from .store import InterviewStore

logger = logging.getLogger("recruitai.interview.service")

INTERVIEW_CONFIG = {
    "questions_count": 5,
    "question_time_limit_sec": 120,
    "total_time_limit_sec": 600,
}

IN_PROGRESS = "in_progress"
ANALYZING = "analyzing"
COMPLETED = "completed"


class MockInterviewService:
    def __init__(self, store: InterviewStore | None = None, enable_llm: bool | None = None):
        self.store = store if store is not None else InterviewStore()
        self.enable_llm = ENABLE_LLM_ANALYSIS if enable_llm is None else bool(enable_llm)

    def start(self, user_id: str) -> dict[str, Any]:
        interview_id = f"interview_{uuid.uuid4()}"
        now_ts = time.time()
        record = {
            "interview_id": interview_id,
            "user_id": str(user_id),
            "status": IN_PROGRESS,
            "created_at": now_ts,
            "updated_at": now_ts,
            "video_url": None,
            "transcript": None,
            "metrics": None,
            "overall_score": None,
            "insights": None,
            "llm_metrics": None,
            "config": dict(INTERVIEW_CONFIG),
        }
        self.store.save(interview_id, record)
        log_event("interview", "interview_started", interview_id, user_id=user_id)
        return record

    def get(self, interview_id: str, user_id: str | None = None) -> dict[str, Any]:
        record = self.store.get(interview_id)
        if not record or (user_id is not None and str(record.get("user_id") or "") != str(user_id)):
            raise InterviewNotFoundError(interview_id)
        return record

    async def submit(
        self,
        interview_id: str,
        user_id: str,
        transcript: str = "",
        eye_contact_percent: float | None = 0,
        duration_sec: float = 0,
        video_url: str | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Score and persist one interview. Only the first submit wins: the
        record is moved to "analyzing" before any await, so a concurrent
        second submit sees it taken and gets DuplicateSubmissionError.
        """
        record = self.get(interview_id, user_id=user_id)
        if record.get("status") != IN_PROGRESS:
            raise DuplicateSubmissionError(interview_id)

        record.update({"status": ANALYZING, "updated_at": time.time()})
        self.store.save(interview_id, record)

        try:
            started = time.perf_counter()
            result = compute_all_metrics(transcript=transcript, eye_contact_percent=eye_contact_percent, extra=extra)

            llm_metrics = None
            if self.enable_llm:
                llm_metrics = await analyze_interview_with_llm(
                    transcript=transcript,
                    eye_contact_percent=eye_contact_percent or 0,
                    word_count=result.word_count,
                    duration_sec=duration_sec,
                )
        except BaseException:
            record.update({"status": IN_PROGRESS, "updated_at": time.time()})
            self.store.save(interview_id, record)
            raise

        observe_analysis_latency_ms((time.perf_counter() - started) * 1000.0)
        increment_metric("interview_analyses_total")

        record.update({
            "status": COMPLETED,
            "updated_at": time.time(),
            "video_url": video_url,
            "transcript": str(transcript or ""),
            "duration_sec": float(duration_sec or 0),
            "metrics": result.to_dict(),
            "overall_score": result.overall_score,
            "insights": build_insights(result, duration_sec),
            "llm_metrics": llm_metrics,
        })
        self.store.save(interview_id, record)
        log_event(
            "interview",
            "interview_submitted",
            interview_id,
            transcript=transcript,
            word_count=result.word_count,
            eye_contact_percent=eye_contact_percent,
            overall_score=result.overall_score,
            llm=bool(llm_metrics),
        )
        return record
