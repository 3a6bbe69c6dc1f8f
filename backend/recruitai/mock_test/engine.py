import logging
import random
import time
import uuid
from threading import RLock
from typing import Dict, Iterable, List, Mapping

from core.config import QUESTIONS_PER_CATEGORY
from core.logger import log_event
from recruitai.errors import AttemptNotFoundError, DuplicateSubmissionError
from recruitai.numbers import percent_of
from recruitai.system_metrics import increment_metric

from .models import AttemptRecord, AttemptScores, CategoryScore, Question
from .question_bank import CATEGORIES, build_default_bank, pick_random_questions
from .store import AttemptStore

logger = logging.getLogger("recruitai.mock_test")


def _answer_map(answers: Iterable) -> Dict[str, int | None]:
    mapping: Dict[str, int | None] = {}
    for answer in answers or []:
        if not isinstance(answer, Mapping):
            continue
        question_id = answer.get("questionId", answer.get("question_id"))
        if question_id is None:
            continue
        selected = answer.get("selectedIndex", answer.get("selected_index"))
        try:
            mapping[str(question_id)] = None if selected is None else int(selected)
        except (TypeError, ValueError):
            mapping[str(question_id)] = None
    return mapping


def score_attempt(attempt: AttemptRecord, answers: Iterable) -> AttemptScores:
    """
    Score every question in the attempt. Questions without an answer count
    as incorrect and stay in total_questions.
    """
    answer_map = _answer_map(answers)
    section_scores: Dict[str, CategoryScore] = {category: CategoryScore() for category in CATEGORIES}
    total_correct = 0

    for question in attempt.questions:
        section = section_scores.setdefault(question.category, CategoryScore())
        section.total += 1
        if answer_map.get(question.id) == question.correct_index:
            section.correct += 1
            total_correct += 1

    total_questions = len(attempt.questions)
    return AttemptScores(
        total_correct=total_correct,
        total_questions=total_questions,
        percent=percent_of(total_correct, total_questions),
        section_scores=section_scores,
    )


class MockTestEngine:
    def __init__(
        self,
        store: AttemptStore | None = None,
        bank: Mapping[str, List[Question]] | None = None,
        questions_per_category: int = QUESTIONS_PER_CATEGORY,
        rng: random.Random | None = None,
    ):
        self.store = store if store is not None else AttemptStore()
        self.bank = dict(bank) if bank is not None else build_default_bank()
        self.questions_per_category = int(questions_per_category)
        self.rng = rng
        # guards find-or-create in start() and check-then-write in submit;
        # sync route handlers run these on threadpool workers
        self._lock = RLock()

    def _new_attempt_id(self, user_id: str) -> str:
        return f"{user_id}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"

    def create_attempt(self, user_id: str) -> AttemptRecord:
        drawn: List[Question] = []
        for category in CATEGORIES:
            drawn.extend(pick_random_questions(self.bank.get(category, []), self.questions_per_category, self.rng))

        questions = [
            Question(
                id=question.id,
                category=question.category,
                text=question.text,
                options=question.options,
                correct_index=question.correct_index,
                number=index + 1,
            )
            for index, question in enumerate(drawn)
        ]

        record = AttemptRecord(
            attempt_id=self._new_attempt_id(user_id),
            user_id=str(user_id),
            questions=questions,
            created_at=time.time(),
        )
        self.store.save(record)
        increment_metric("mock_test_attempts_created")
        log_event("mock_test", "attempt_created", record.attempt_id, user_id=user_id, questions=len(questions))
        return record

    def start(self, user_id: str) -> dict:
        with self._lock:
            record = self.store.find_in_progress(user_id)
            if record is None:
                record = self.create_attempt(user_id)
            else:
                logger.info("reusing in-progress attempt | attempt=%s", record.attempt_id)
        return {
            "attempt_id": record.attempt_id,
            "questions": record.public_questions(),
        }

    def get_attempt(self, attempt_id: str, user_id: str | None = None) -> AttemptRecord:
        record = self.store.get(attempt_id)
        if record is None or (user_id is not None and record.user_id != str(user_id)):
            raise AttemptNotFoundError(attempt_id)
        return record

    def record_violations(self, attempt_id: str, attention_increment: int = 0, tab_switch_increment: int = 0) -> None:
        with self._lock:
            record = self.store.get(attempt_id)
            if record is None:
                return
            record.violations.attention += int(attention_increment or 0)
            record.violations.tab_switch += int(tab_switch_increment or 0)
            self.store.save(record)

    def submit_attempt(
        self,
        attempt_id: str,
        answers: Iterable,
        violations: Mapping | None = None,
        user_id: str | None = None,
    ) -> dict:
        with self._lock:
            record = self.get_attempt(attempt_id, user_id=user_id)
            if not record.in_progress:
                increment_metric("mock_test_duplicate_submissions")
                log_event("mock_test", "duplicate_submission", attempt_id)
                raise DuplicateSubmissionError(attempt_id)

            if violations:
                self.record_violations(
                    attempt_id,
                    attention_increment=violations.get("attentionIncrement", violations.get("attention_increment", 0)),
                    tab_switch_increment=violations.get("tabSwitchIncrement", violations.get("tab_switch_increment", 0)),
                )
                record = self.get_attempt(attempt_id)

            record.scores = score_attempt(record, answers)
            record.submitted_at = time.time()
            self.store.save(record)

        increment_metric("mock_test_attempts_submitted")
        log_event(
            "mock_test",
            "attempt_submitted",
            attempt_id,
            percent=record.scores.percent,
            attention=record.violations.attention,
            tab_switch=record.violations.tab_switch,
        )
        return self.result_payload(record)

    def get_result(self, attempt_id: str, user_id: str | None = None) -> dict:
        return self.result_payload(self.get_attempt(attempt_id, user_id=user_id))

    @staticmethod
    def result_payload(record: AttemptRecord) -> dict:
        return {
            "attempt_id": record.attempt_id,
            "scores": record.scores.to_dict() if record.scores else None,
            "violations": {
                "attention": record.violations.attention,
                "tab_switch": record.violations.tab_switch,
            },
        }
