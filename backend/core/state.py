# backend/core/state.py

from enum import Enum


class ProctoringSessionState(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    AUTO_SUBMITTED = "auto_submitted"
    STOPPED = "stopped"
