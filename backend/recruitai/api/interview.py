from fastapi import APIRouter, Depends, HTTPException, Request

from recruitai.auth import get_user_id
from recruitai.errors import DuplicateSubmissionError, InterviewNotFoundError
from recruitai.interview.scoring import compute_all_metrics
from recruitai.interview.service import MockInterviewService
from recruitai.schemas import InterviewSubmitRequest, MetricsRequest
from recruitai.system_metrics import increment_metric

from .deps import get_interview_service

router = APIRouter(tags=["interview"])


@router.post("/api/interview/metrics")
def compute_interview_metrics(req: MetricsRequest, request: Request):
    get_user_id(request)
    result = compute_all_metrics(
        transcript=req.transcript,
        eye_contact_percent=req.eye_contact_percent,
        extra=req.extra(),
    )
    increment_metric("interview_analyses_total")
    return result.to_dict()


@router.post("/api/mock-interview/start")
def start_mock_interview(request: Request, service: MockInterviewService = Depends(get_interview_service)):
    user_id = get_user_id(request)
    record = service.start(user_id)
    return {
        "success": True,
        "interviewId": record["interview_id"],
        "userId": user_id,
        "config": record["config"],
        "message": "Interview session created. Ready to record.",
    }


@router.post("/api/mock-interview/submit")
async def submit_mock_interview(
    req: InterviewSubmitRequest,
    request: Request,
    service: MockInterviewService = Depends(get_interview_service),
):
    user_id = get_user_id(request)
    try:
        record = await service.submit(
            req.interview_id,
            user_id=user_id,
            transcript=req.transcript,
            eye_contact_percent=req.eye_contact_percent,
            duration_sec=req.duration_sec,
            video_url=req.video_url,
            extra=req.extra(),
        )
    except InterviewNotFoundError:
        raise HTTPException(status_code=404, detail="Interview not found")
    except DuplicateSubmissionError:
        raise HTTPException(status_code=409, detail="Interview already submitted")

    return {
        "success": True,
        "interviewId": record["interview_id"],
        "status": record["status"],
        "overallScore": record["overall_score"],
        "metrics": record["metrics"],
        "insights": record["insights"],
        "llmMetrics": record["llm_metrics"],
    }


@router.get("/api/mock-interview/{interview_id}")
def get_mock_interview(interview_id: str, request: Request, service: MockInterviewService = Depends(get_interview_service)):
    user_id = get_user_id(request)
    try:
        return service.get(interview_id, user_id=user_id)
    except InterviewNotFoundError:
        raise HTTPException(status_code=404, detail="Interview not found")
