import inspect
import logging
import time
import uuid
from typing import Any, Callable, Optional

from core import config
from core.logger import log_event
from core.state import ProctoringSessionState
from recruitai.eye_contact import EyeContactTracker
from recruitai.proctoring import CameraPreviewMonitor, FaceCheckStatus, ProctoringMonitor
from recruitai.scheduling import PeriodicTask
from recruitai.system_metrics import decrement_metric, increment_metric

logger = logging.getLogger("recruitai.session.controller")

DetectFn = Callable[[], Any]


async def _call_source(fn: DetectFn | None, name: str, session_id: str):
    """Run an external detector; any failure maps to None (skip this tick)."""
    if fn is None:
        return None
    try:
        result = fn()
        if inspect.isawaitable(result):
            result = await result
        return result
    except Exception as exc:
        increment_metric("detector_failures")
        logger.warning("%s failed | session=%s err=%s", name, session_id, exc)
        return None


class ProctoringSession:
    """
    Owns everything one proctored interview needs: the eye-contact tracker,
    both violation monitors, their cadence tasks and the capture-device
    release hook.

    Nothing here is shared across sessions. All mutation happens on the
    event loop that drives the cadence tasks or the HTTP handlers.
    """

    def __init__(
        self,
        user_id: str = "",
        session_id: str | None = None,
        on_auto_submit: Optional[Callable[[str], None]] = None,
        on_violation: Optional[Callable[[dict], None]] = None,
        max_tab_violations: int = config.MAX_TAB_VIOLATIONS,
        max_attention_violations: int = config.MAX_ATTENTION_VIOLATIONS,
        max_camera_violations: int = config.MAX_CAMERA_VIOLATIONS,
        camera_grace_frames: int = 1,
        eye_contact_threshold_px: float | None = None,
        landmark_source: DetectFn | None = None,
        face_detector: DetectFn | None = None,
        camera_detector: DetectFn | None = None,
        release_capture: Callable[[], Any] | None = None,
        frame_interval_sec: float = config.FRAME_INTERVAL_SEC,
        face_check_interval_sec: float = config.FACE_CHECK_INTERVAL_SEC,
        camera_check_interval_sec: float = config.CAMERA_CHECK_INTERVAL_SEC,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.user_id = str(user_id or "")
        self.created_at = time.time()
        self.updated_at = self.created_at
        self.state = ProctoringSessionState.CREATED
        self.auto_submit_reasons: list[str] = []
        self.violation_events: list[dict] = []

        self._on_auto_submit = on_auto_submit
        self._on_violation = on_violation
        self._release_capture = release_capture
        self._capture_released = False

        self.landmark_source = landmark_source
        self.face_detector = face_detector
        self.camera_detector = camera_detector

        self.eye_contact = EyeContactTracker(threshold_px=eye_contact_threshold_px)
        self.monitor = ProctoringMonitor(
            on_auto_submit=self._handle_auto_submit,
            max_tab_violations=max_tab_violations,
            max_attention_violations=max_attention_violations,
            session_id=self.session_id,
        )
        self.camera = CameraPreviewMonitor(
            on_violation=self._handle_camera_violation,
            max_violations=max_camera_violations,
            grace_frames=camera_grace_frames,
            session_id=self.session_id,
        )

        self.frame_task = PeriodicTask(self.poll_frame, frame_interval_sec, name=f"frames:{self.session_id}")
        self.face_check_task = PeriodicTask(self.poll_face_check, face_check_interval_sec, name=f"face:{self.session_id}")
        self.camera_check_task = PeriodicTask(self.poll_camera_check, camera_check_interval_sec, name=f"camera:{self.session_id}")

        increment_metric("proctoring_sessions_active")

    @property
    def active(self) -> bool:
        return self.state in {ProctoringSessionState.CREATED, ProctoringSessionState.RUNNING}

    def _touch(self) -> None:
        self.updated_at = time.time()

    # -------------------------
    # CALLBACK SINKS
    # -------------------------

    def _handle_auto_submit(self, reason: str) -> None:
        self.auto_submit_reasons.append(reason)
        if self.active:
            self.state = ProctoringSessionState.AUTO_SUBMITTED
        if self._on_auto_submit is not None:
            self._on_auto_submit(reason)

    def _handle_camera_violation(self, event: dict) -> None:
        self.violation_events.append(dict(event))
        if self._on_violation is not None:
            self._on_violation(event)

    # -------------------------
    # EVENT INPUTS
    # -------------------------

    def register_frame(self, landmarks) -> None:
        self.eye_contact.register_frame(landmarks)
        increment_metric("frames_registered")
        self._touch()

    def on_face_check_result(self, detections) -> int | None:
        self._touch()
        return self.monitor.on_face_check_result(detections)

    def on_camera_check_result(self, detections) -> FaceCheckStatus | None:
        self._touch()
        return self.camera.on_check_result(detections)

    def on_visibility_change(self, hidden: bool) -> int:
        self._touch()
        return self.monitor.on_visibility_change(hidden)

    def on_blur(self) -> int:
        self._touch()
        return self.monitor.on_blur()

    def get_eye_contact_summary(self) -> dict:
        return self.eye_contact.summary()

    def reset_eye_contact(self) -> None:
        self.eye_contact.reset()
        self._touch()

    # -------------------------
    # CADENCE
    # -------------------------

    async def poll_frame(self) -> None:
        landmarks = await _call_source(self.landmark_source, "landmark_source", self.session_id)
        if landmarks is not None:
            self.register_frame(landmarks)

    async def poll_face_check(self) -> None:
        detections = await _call_source(self.face_detector, "face_detector", self.session_id)
        self.on_face_check_result(detections)

    async def poll_camera_check(self) -> None:
        detections = await _call_source(self.camera_detector, "camera_detector", self.session_id)
        self.on_camera_check_result(detections)

    def start(self) -> None:
        """Start cadence tasks for whichever sources were supplied. Needs a running loop."""
        if not self.active:
            return
        if self.landmark_source is not None:
            self.frame_task.start()
        if self.face_detector is not None:
            self.face_check_task.start()
        if self.camera_detector is not None:
            self.camera_check_task.start()
        self.state = ProctoringSessionState.RUNNING
        log_event("session", "session_started", self.session_id, user_id=self.user_id)

    def stop(self) -> bool:
        """
        Halt cadence tasks, then release the capture device. Safe to call
        more than once; returns False when already stopped.
        """
        if self.state == ProctoringSessionState.STOPPED:
            return False

        self.frame_task.stop()
        self.face_check_task.stop()
        self.camera_check_task.stop()

        if self._release_capture is not None and not self._capture_released:
            self._capture_released = True
            try:
                self._release_capture()
            except Exception as exc:
                logger.warning("capture release failed | session=%s err=%s", self.session_id, exc)

        self.state = ProctoringSessionState.STOPPED
        self._touch()
        decrement_metric("proctoring_sessions_active")
        increment_metric("proctoring_sessions_stopped")
        log_event(
            "session",
            "session_stopped",
            self.session_id,
            eye_contact_percent=self.eye_contact.percent,
            violations=self.monitor.state.to_dict(),
            camera_violations=self.camera.violation_count,
        )
        return True

    async def aclose(self) -> None:
        self.stop()
        for task in (self.frame_task, self.face_check_task, self.camera_check_task):
            await task.aclose()

    def snapshot(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "state": self.state.value,
            "active": self.active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "eye_contact": self.eye_contact.summary(),
            "proctoring": self.monitor.snapshot(),
            "camera": self.camera.snapshot(),
            "auto_submit_reasons": list(self.auto_submit_reasons),
        }
