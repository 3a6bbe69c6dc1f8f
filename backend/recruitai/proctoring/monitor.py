import logging
from typing import Callable, Optional

from core.logger import log_event
from recruitai.system_metrics import increment_metric, record_violation

from . import rules
from .violations import ViolationState

logger = logging.getLogger("recruitai.proctoring.monitor")

AutoSubmitFn = Callable[[str], None]


class ProctoringMonitor:
    """
    Exam-time monitor: attention (no face in view) and tab/window switches.

    on_auto_submit fires once per violation class, on the call that first
    brings that class to its limit. Counting continues afterwards; callers
    are expected to stop feeding events once the exam is auto-submitted.
    """

    def __init__(
        self,
        on_auto_submit: Optional[AutoSubmitFn] = None,
        max_tab_violations: int = rules.DEFAULT_MAX_TAB_VIOLATIONS,
        max_attention_violations: int = rules.DEFAULT_MAX_ATTENTION_VIOLATIONS,
        session_id: str = "",
    ):
        self.on_auto_submit = on_auto_submit
        self.max_tab_violations = max(1, int(max_tab_violations))
        self.max_attention_violations = max(1, int(max_attention_violations))
        self.session_id = session_id
        self.state = ViolationState()
        self._fired: set[str] = set()

    @property
    def tab_violations(self) -> int:
        return self.state.tab_switch

    @property
    def attention_violations(self) -> int:
        return self.state.attention

    @property
    def warning(self) -> str:
        return self.state.warning_message

    def has_fired(self, reason: str) -> bool:
        return reason in self._fired

    def _maybe_fire(self, reason: str, count: int, limit: int) -> bool:
        if count < limit or reason in self._fired:
            return False
        # mark before calling out so a failing callback is never re-fired
        self._fired.add(reason)
        increment_metric("auto_submits_total")
        log_event("proctoring", "auto_submit", self.session_id, reason=reason, count=count, max=limit)
        if self.on_auto_submit is not None:
            self.on_auto_submit(reason)
        return True

    def on_face_check_result(self, detections) -> int | None:
        """
        Feed one face-presence detection result.

        None means the detector call failed; the check is skipped and will be
        retried on the next tick. Returns the attention count after the
        call, or None when skipped.
        """
        if detections is None:
            increment_metric("detector_failures")
            logger.warning("face check skipped | session=%s reason=detector_failure", self.session_id)
            return None

        try:
            face_count = len(detections)
        except TypeError:
            logger.warning("face check skipped | session=%s reason=malformed_result", self.session_id)
            return None

        if face_count > 0:
            return self.state.attention

        count = self.state.register_attention()
        self.state.warn(rules.ATTENTION_WARNING)
        record_violation("attention")
        log_event("proctoring", "attention_violation", self.session_id, count=count)
        self._maybe_fire(rules.ATTENTION_VIOLATION, count, self.max_attention_violations)
        return count

    def on_visibility_change(self, hidden: bool) -> int:
        if not hidden:
            return self.state.tab_switch
        return self._register_tab_switch(source="visibility")

    def on_blur(self) -> int:
        return self._register_tab_switch(source="blur")

    def _register_tab_switch(self, source: str) -> int:
        count = self.state.register_tab_switch()
        self.state.warn(rules.TAB_SWITCH_WARNING)
        record_violation("tab_switch")
        log_event("proctoring", "tab_switch_violation", self.session_id, count=count, source=source)
        self._maybe_fire(rules.TAB_SWITCH_VIOLATION, count, self.max_tab_violations)
        return count

    def reset(self) -> None:
        self.state.reset()
        self._fired.clear()

    def snapshot(self) -> dict:
        return {
            "tab_violations": self.state.tab_switch,
            "attention_violations": self.state.attention,
            "max_tab_violations": self.max_tab_violations,
            "max_attention_violations": self.max_attention_violations,
            "warning": self.state.warning_message,
            "auto_submitted_reasons": sorted(self._fired),
        }
