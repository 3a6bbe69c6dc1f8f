"""
Reason codes, warning copy and default limits for proctoring monitors.
"""

ATTENTION_VIOLATION = "attention-violation"
TAB_SWITCH_VIOLATION = "tab-switch-violation"

DEFAULT_MAX_TAB_VIOLATIONS = 3
DEFAULT_MAX_ATTENTION_VIOLATIONS = 5
DEFAULT_MAX_CAMERA_VIOLATIONS = 5

ATTENTION_WARNING = "Please keep your face in view. Attention violation logged."
TAB_SWITCH_WARNING = "Tab/window switch detected. Violation logged."

NO_FACE_REASON = "No face detected"
MULTI_FACE_REASON = "Multiple faces detected"
CAMERA_VIOLATION_TYPE = "camera"

NO_FACE_STATUS = "No face detected. Please stay in frame."
MULTI_FACE_STATUS = "Multiple faces detected. Only you should be visible."
OK_STATUS = "Proctoring OK. Keep looking at the screen."
INITIAL_STATUS = "Camera active. Proctoring running."
