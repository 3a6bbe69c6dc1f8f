import asyncio

import pytest

from core.state import ProctoringSessionState
from recruitai.proctoring import FaceCheckStatus
from recruitai.proctoring import rules
from recruitai.session import ProctoringSession


def test_stop_is_idempotent_and_releases_capture_once():
    released: list[bool] = []
    session = ProctoringSession(user_id="u1", release_capture=lambda: released.append(True))

    assert session.stop() is True
    assert session.stop() is False
    assert released == [True]
    assert session.state is ProctoringSessionState.STOPPED
    assert not session.active


def test_capture_release_failure_still_stops():
    def _explode():
        raise OSError("device busy")

    session = ProctoringSession(user_id="u1", release_capture=_explode)
    assert session.stop() is True
    assert session.state is ProctoringSessionState.STOPPED


def test_auto_submit_updates_state_and_calls_back():
    reasons: list[str] = []
    session = ProctoringSession(user_id="u1", on_auto_submit=reasons.append, max_attention_violations=2)

    session.on_face_check_result([])
    assert session.state is ProctoringSessionState.CREATED
    session.on_face_check_result([])

    assert reasons == [rules.ATTENTION_VIOLATION]
    assert session.auto_submit_reasons == [rules.ATTENTION_VIOLATION]
    assert session.state is ProctoringSessionState.AUTO_SUBMITTED
    assert session.stop() is True


def test_tab_signals_route_to_monitor():
    session = ProctoringSession(user_id="u1", max_tab_violations=2)
    assert session.on_blur() == 1
    assert session.on_visibility_change(False) == 1
    assert session.on_visibility_change(True) == 2
    assert session.auto_submit_reasons == [rules.TAB_SWITCH_VIOLATION]


def test_camera_violations_are_forwarded():
    events: list[dict] = []
    session = ProctoringSession(user_id="u1", on_violation=events.append, max_camera_violations=1)

    assert session.on_camera_check_result([{}, {}]) is FaceCheckStatus.MULTI_FACE
    assert session.on_camera_check_result([]) is FaceCheckStatus.NO_FACE
    assert [event["count"] for event in events] == [1, 2]
    assert session.violation_events == events


def test_eye_contact_roundtrip(good_frame, bad_frame):
    session = ProctoringSession(user_id="u1")
    session.register_frame(good_frame)
    session.register_frame(bad_frame)
    assert session.get_eye_contact_summary()["percent"] == 50

    session.reset_eye_contact()
    assert session.get_eye_contact_summary()["stats"]["total_frames"] == 0


@pytest.mark.asyncio
async def test_failing_detector_leaves_counters_unchanged():
    def _broken():
        raise RuntimeError("model not loaded")

    session = ProctoringSession(user_id="u1", face_detector=_broken, camera_detector=_broken)
    await session.poll_face_check()
    await session.poll_camera_check()

    assert session.monitor.attention_violations == 0
    assert session.camera.violation_count == 0
    session.stop()


@pytest.mark.asyncio
async def test_polls_use_async_sources(good_frame):
    async def _landmarks():
        return good_frame

    async def _no_face():
        return []

    session = ProctoringSession(user_id="u1", landmark_source=_landmarks, face_detector=_no_face)
    await session.poll_frame()
    await session.poll_face_check()

    assert session.eye_contact.stats.good_frames == 1
    assert session.monitor.attention_violations == 1
    session.stop()


@pytest.mark.asyncio
async def test_start_runs_cadence_and_stop_halts_before_release(good_frame):
    observed: dict = {}
    session = ProctoringSession(
        user_id="u1",
        landmark_source=lambda: good_frame,
        frame_interval_sec=0.005,
        release_capture=lambda: observed.setdefault("frame_task_running", session.frame_task.running),
    )

    session.start()
    assert session.state is ProctoringSessionState.RUNNING
    assert session.frame_task.running
    assert not session.face_check_task.running
    assert not session.camera_check_task.running

    await asyncio.sleep(0.05)
    await session.aclose()

    assert observed == {"frame_task_running": False}
    assert session.eye_contact.stats.total_frames >= 1
    frames = session.eye_contact.stats.total_frames
    await asyncio.sleep(0.02)
    assert session.eye_contact.stats.total_frames == frames


@pytest.mark.asyncio
async def test_start_after_stop_is_a_no_op():
    session = ProctoringSession(user_id="u1", face_detector=lambda: [{}], face_check_interval_sec=0.01)
    session.stop()
    session.start()
    assert session.state is ProctoringSessionState.STOPPED
    assert not session.face_check_task.running


def test_snapshot_shape():
    session = ProctoringSession(user_id="u1", session_id="s-1")
    snapshot = session.snapshot()
    assert snapshot["session_id"] == "s-1"
    assert snapshot["user_id"] == "u1"
    assert snapshot["state"] == "created"
    assert snapshot["active"] is True
    assert set(snapshot) >= {"eye_contact", "proctoring", "camera", "auto_submit_reasons"}
    session.stop()
