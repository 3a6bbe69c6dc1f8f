from recruitai.session.controller import ProctoringSession
from recruitai.session.registry import SessionRegistry, session_registry

__all__ = ["ProctoringSession", "SessionRegistry", "session_registry"]
