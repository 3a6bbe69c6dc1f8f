from fastapi import APIRouter, Depends, HTTPException, Request

from recruitai.auth import get_user_id
from recruitai.schemas import FaceCheckRequest, FrameRequest, SessionCreateRequest, VisibilityRequest
from recruitai.session.controller import ProctoringSession
from recruitai.session.registry import SessionRegistry

from .deps import get_session_registry

router = APIRouter(prefix="/api/proctoring", tags=["proctoring"])


def _owned_session(session_id: str, user_id: str, registry: SessionRegistry) -> ProctoringSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.user_id != user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return session


def _violation_payload(session: ProctoringSession, count: int | None) -> dict:
    return {
        "session_id": session.session_id,
        "count": count,
        "skipped": count is None,
        "warning": session.monitor.warning,
        "state": session.state.value,
        "auto_submit_reasons": list(session.auto_submit_reasons),
    }


@router.post("/sessions")
def create_session(req: SessionCreateRequest, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    user_id = get_user_id(request)
    session = ProctoringSession(
        user_id=user_id,
        max_tab_violations=req.max_tab_violations,
        max_attention_violations=req.max_attention_violations,
        max_camera_violations=req.max_camera_violations,
        camera_grace_frames=req.camera_grace_frames,
        eye_contact_threshold_px=req.eye_contact_threshold_px,
    )
    registry.register(session)
    return session.snapshot()


@router.get("/sessions/{session_id}")
def get_session_status(session_id: str, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    user_id = get_user_id(request)
    return _owned_session(session_id, user_id, registry).snapshot()


@router.post("/sessions/{session_id}/frames")
def register_frame(session_id: str, req: FrameRequest, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    session.register_frame(req.landmarks)
    summary = session.get_eye_contact_summary()
    return {
        "session_id": session.session_id,
        "percent": summary["percent"],
        "is_good_eye_contact": summary["is_good_eye_contact"],
    }


@router.post("/sessions/{session_id}/face-check")
def face_check(session_id: str, req: FaceCheckRequest, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    count = session.on_face_check_result(req.detections)
    return _violation_payload(session, count)


@router.post("/sessions/{session_id}/camera-check")
def camera_check(session_id: str, req: FaceCheckRequest, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    result = session.on_camera_check_result(req.detections)
    payload = session.camera.snapshot()
    payload["session_id"] = session.session_id
    payload["result"] = result.value if result is not None else None
    payload["skipped"] = result is None
    return payload


@router.post("/sessions/{session_id}/visibility")
def visibility_change(session_id: str, req: VisibilityRequest, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    count = session.on_visibility_change(req.hidden)
    return _violation_payload(session, count)


@router.post("/sessions/{session_id}/blur")
def window_blur(session_id: str, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    count = session.on_blur()
    return _violation_payload(session, count)


@router.get("/sessions/{session_id}/eye-contact")
def eye_contact_summary(session_id: str, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    return session.get_eye_contact_summary()


@router.post("/sessions/{session_id}/eye-contact/reset")
def reset_eye_contact(session_id: str, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    session.reset_eye_contact()
    return session.get_eye_contact_summary()


@router.post("/sessions/{session_id}/stop")
def stop_session(session_id: str, request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    session = _owned_session(session_id, get_user_id(request), registry)
    stopped_now = session.stop()
    payload = session.snapshot()
    payload["stopped_now"] = stopped_now
    return payload
