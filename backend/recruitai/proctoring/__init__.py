from recruitai.proctoring.camera import CameraPreviewMonitor, FaceCheckStatus, classify_detections
from recruitai.proctoring.monitor import ProctoringMonitor
from recruitai.proctoring.violations import ViolationState

__all__ = [
    "CameraPreviewMonitor",
    "FaceCheckStatus",
    "ProctoringMonitor",
    "ViolationState",
    "classify_detections",
]
