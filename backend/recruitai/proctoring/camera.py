import logging
from enum import Enum
from typing import Callable, Optional

from core.logger import log_event
from recruitai.system_metrics import increment_metric, record_violation

from . import rules
from .violations import ViolationState

logger = logging.getLogger("recruitai.proctoring.camera")

ViolationFn = Callable[[dict], None]


class FaceCheckStatus(str, Enum):
    NO_FACE = "no-face"
    MULTI_FACE = "multi-face"
    OK = "ok"


def classify_detections(detections) -> FaceCheckStatus:
    face_count = len(detections or [])
    if face_count == 0:
        return FaceCheckStatus.NO_FACE
    if face_count > 1:
        return FaceCheckStatus.MULTI_FACE
    return FaceCheckStatus.OK


class CameraPreviewMonitor:
    """
    Camera-preview monitor with a single combined violation counter.

    on_violation receives {reason, type, count, max} on every increment,
    including increments past max; deciding when to act is left to the
    caller.
    """

    def __init__(
        self,
        on_violation: Optional[ViolationFn] = None,
        max_violations: int = rules.DEFAULT_MAX_CAMERA_VIOLATIONS,
        grace_frames: int = 1,
        session_id: str = "",
    ):
        self.on_violation = on_violation
        self.max_violations = max(1, int(max_violations))
        self.grace_frames = max(1, int(grace_frames))
        self.session_id = session_id
        self.state = ViolationState()
        self.status = rules.INITIAL_STATUS
        self.last_result: FaceCheckStatus | None = None
        self._no_face_streak = 0
        self._multi_face_streak = 0

    @property
    def violation_count(self) -> int:
        return self.state.no_face + self.state.multi_face

    def on_check_result(self, detections) -> FaceCheckStatus | None:
        if detections is None:
            increment_metric("detector_failures")
            logger.warning("camera check skipped | session=%s reason=detector_failure", self.session_id)
            return None

        try:
            result = classify_detections(detections)
        except TypeError:
            logger.warning("camera check skipped | session=%s reason=malformed_result", self.session_id)
            return None

        self.last_result = result

        if result is FaceCheckStatus.NO_FACE:
            self._no_face_streak += 1
            self._multi_face_streak = 0
            self.status = rules.NO_FACE_STATUS
            if self._no_face_streak >= self.grace_frames:
                self._no_face_streak = 0
                self.state.register_no_face()
                self._register(rules.NO_FACE_REASON, "no_face")
        elif result is FaceCheckStatus.MULTI_FACE:
            self._multi_face_streak += 1
            self._no_face_streak = 0
            self.status = rules.MULTI_FACE_STATUS
            if self._multi_face_streak >= self.grace_frames:
                self._multi_face_streak = 0
                self.state.register_multi_face()
                self._register(rules.MULTI_FACE_REASON, "multi_face")
        else:
            self._no_face_streak = 0
            self._multi_face_streak = 0
            self.status = rules.OK_STATUS

        self.state.warn(self.status)
        return result

    def _register(self, reason: str, kind: str) -> None:
        count = self.violation_count
        record_violation(kind)
        log_event("proctoring", "camera_violation", self.session_id, reason=reason, count=count, max=self.max_violations)
        if self.on_violation is not None:
            self.on_violation({
                "reason": reason,
                "type": rules.CAMERA_VIOLATION_TYPE,
                "count": count,
                "max": self.max_violations,
            })

    def reset(self) -> None:
        self.state.reset()
        self.status = rules.INITIAL_STATUS
        self.last_result = None
        self._no_face_streak = 0
        self._multi_face_streak = 0

    def snapshot(self) -> dict:
        return {
            "status": self.status,
            "last_result": self.last_result.value if self.last_result else None,
            "violation_count": self.violation_count,
            "no_face": self.state.no_face,
            "multi_face": self.state.multi_face,
            "max_violations": self.max_violations,
        }
