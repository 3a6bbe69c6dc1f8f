import logging
from collections.abc import Sequence

from core.config import EYE_CONTACT_THRESHOLD_PX
from recruitai.numbers import percent_of

from . import rules
from .models import EyeContactStats

logger = logging.getLogger("recruitai.eye_contact")


def _x_of(point) -> float | None:
    if isinstance(point, dict):
        value = point.get("x")
    elif isinstance(point, Sequence) and not isinstance(point, (str, bytes)) and len(point) > 0:
        value = point[0]
    else:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_landmark_sequence(landmarks) -> bool:
    return (
        isinstance(landmarks, Sequence)
        and not isinstance(landmarks, (str, bytes))
        and len(landmarks) > 0
    )


class EyeContactTracker:
    """
    Accumulates per-frame "facing camera" classifications for one session.

    Runs on the frame cadence, so register_frame does no I/O and keeps no
    per-frame history beyond the counters.
    """

    def __init__(self, threshold_px: float | None = None):
        self.threshold_px = float(EYE_CONTACT_THRESHOLD_PX if threshold_px is None else threshold_px)
        self.stats = EyeContactStats()
        self.is_good_eye_contact = False

    @property
    def percent(self) -> int:
        return self.stats.percent

    def is_facing_camera(self, landmarks) -> bool:
        if not _is_landmark_sequence(landmarks):
            return False

        needed = (rules.LEFT_EYE_OUTER_INDEX, rules.RIGHT_EYE_OUTER_INDEX, rules.NOSE_TIP_INDEX)
        if len(landmarks) <= max(needed):
            return False

        left_x = _x_of(landmarks[rules.LEFT_EYE_OUTER_INDEX])
        right_x = _x_of(landmarks[rules.RIGHT_EYE_OUTER_INDEX])
        nose_x = _x_of(landmarks[rules.NOSE_TIP_INDEX])
        if left_x is None or right_x is None or nose_x is None:
            return False

        eye_center_x = (left_x + right_x) / 2
        return abs(eye_center_x - nose_x) < self.threshold_px

    def register_frame(self, landmarks) -> None:
        if not _is_landmark_sequence(landmarks):
            return

        stats = self.stats
        stats.total_frames += 1
        facing = self.is_facing_camera(landmarks)
        if facing:
            stats.good_frames += 1

        percent = percent_of(stats.good_frames, stats.total_frames)
        stats.percent = percent
        # average mirrors the latest percent, not a historical mean
        stats.average = percent
        stats.max = max(stats.max, percent)
        stats.min = min(stats.min, percent)
        stats.samples = stats.total_frames
        self.is_good_eye_contact = facing

    def reset(self) -> None:
        logger.debug("resetting eye contact tracking | frames=%s", self.stats.total_frames)
        self.stats = EyeContactStats()
        self.is_good_eye_contact = False

    def summary_label(self) -> str:
        for floor, label in rules.SUMMARY_LABELS:
            if self.stats.percent > floor:
                return label
        return rules.FALLBACK_LABEL

    def summary(self) -> dict:
        return {
            "percent": self.stats.percent,
            "label": self.summary_label(),
            "is_good_eye_contact": self.is_good_eye_contact,
            "stats": self.stats.to_dict(),
        }
