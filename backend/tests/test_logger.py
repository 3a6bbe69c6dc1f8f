import json
import logging

from core.logger import log_event


def test_log_event_redacts_free_text(caplog):
    with caplog.at_level(logging.INFO, logger="recruitai.events"):
        log_event("interview", "interview_submitted", "iv-1", transcript="my private answer", word_count=3)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["component"] == "interview"
    assert payload["session_id"] == "iv-1"
    assert payload["transcript"] == {"redacted": True, "length": len("my private answer")}
    assert payload["word_count"] == 3


def test_log_event_redacts_answer_lists(caplog):
    with caplog.at_level(logging.INFO, logger="recruitai.events"):
        log_event("mock_test", "attempt_submitted", "a-1", answers=[{"questionId": "quant-1"}] * 4)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["answers"] == {"redacted": True, "length": 4}
