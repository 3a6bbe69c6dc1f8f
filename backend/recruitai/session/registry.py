from __future__ import annotations

import time
from threading import Lock

from recruitai.errors import SessionNotFoundError

from .controller import ProctoringSession


class SessionRegistry:
    def __init__(self):
        self._lock = Lock()
        self._sessions: dict[str, ProctoringSession] = {}

    def register(self, session: ProctoringSession) -> ProctoringSession:
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> ProctoringSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def require(self, session_id: str) -> ProctoringSession:
        session = self.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def touch(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.updated_at = time.time()

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for session in self._sessions.values() if session.active)

    def stop_all(self) -> int:
        with self._lock:
            sessions = list(self._sessions.values())
        return sum(1 for session in sessions if session.stop())

    def cleanup_inactive(self, ttl_sec: float) -> int:
        """
        Stop and drop sessions untouched for ttl_sec (clamped to at least
        30s). Returns how many were removed.
        """
        now_ts = time.time()
        cutoff = now_ts - max(30.0, float(ttl_sec or 900.0))
        removed = 0
        with self._lock:
            for session_id, session in list(self._sessions.items()):
                if float(session.updated_at or 0.0) > cutoff:
                    continue
                session.stop()
                self._sessions.pop(session_id, None)
                removed += 1
        return removed

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.stop()


session_registry = SessionRegistry()
