from recruitai.mock_test.engine import MockTestEngine, score_attempt
from recruitai.mock_test.store import AttemptStore

__all__ = ["AttemptStore", "MockTestEngine", "score_attempt"]
