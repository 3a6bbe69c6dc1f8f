from functools import lru_cache

from core import config
from recruitai.interview.service import MockInterviewService
from recruitai.interview.store import InterviewStore
from recruitai.mock_test.engine import MockTestEngine
from recruitai.mock_test.store import AttemptStore
from recruitai.session.registry import SessionRegistry, session_registry


@lru_cache(maxsize=1)
def get_mock_test_engine() -> MockTestEngine:
    if config.STORE_BACKEND == "json":
        store = AttemptStore.json_file(config.DATA_DIR / "mock_test_attempts.json")
    else:
        store = AttemptStore()
    return MockTestEngine(store=store)


@lru_cache(maxsize=1)
def get_interview_service() -> MockInterviewService:
    if config.STORE_BACKEND == "json":
        store = InterviewStore.json_file(config.DATA_DIR / "mock_interviews.json")
    else:
        store = InterviewStore()
    return MockInterviewService(store=store)


def get_session_registry() -> SessionRegistry:
    return session_registry
