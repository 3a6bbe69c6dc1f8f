from dataclasses import dataclass, field, asdict
from typing import List, Optional


@dataclass(frozen=True)
class Question:
    id: str
    category: str
    text: str
    options: tuple
    correct_index: int
    number: int = 0

    def to_public_dict(self) -> dict:
        # never includes the answer key
        return {
            "id": self.id,
            "category": self.category,
            "text": self.text,
            "options": list(self.options),
            "number": self.number,
        }

    def to_dict(self) -> dict:
        payload = self.to_public_dict()
        payload["correct_index"] = self.correct_index
        return payload

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            text=str(data.get("text") or ""),
            options=tuple(data.get("options") or ()),
            correct_index=int(data["correct_index"]),
            number=int(data.get("number") or 0),
        )


@dataclass
class CategoryScore:
    correct: int = 0
    total: int = 0


@dataclass
class AttemptScores:
    total_correct: int
    total_questions: int
    percent: int
    section_scores: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AttemptScores":
        return cls(
            total_correct=int(data.get("total_correct") or 0),
            total_questions=int(data.get("total_questions") or 0),
            percent=int(data.get("percent") or 0),
            section_scores={
                str(name): CategoryScore(**dict(value))
                for name, value in dict(data.get("section_scores") or {}).items()
            },
        )


@dataclass
class AttemptViolations:
    attention: int = 0
    tab_switch: int = 0


@dataclass
class AttemptRecord:
    attempt_id: str
    user_id: str
    questions: List[Question]
    created_at: float
    submitted_at: Optional[float] = None
    scores: Optional[AttemptScores] = None
    violations: AttemptViolations = field(default_factory=AttemptViolations)

    @property
    def in_progress(self) -> bool:
        return self.submitted_at is None

    def public_questions(self) -> list[dict]:
        return [question.to_public_dict() for question in self.questions]

    def to_dict(self) -> dict:
        return {
            "attempt_id": self.attempt_id,
            "user_id": self.user_id,
            "questions": [question.to_dict() for question in self.questions],
            "created_at": self.created_at,
            "submitted_at": self.submitted_at,
            "scores": self.scores.to_dict() if self.scores else None,
            "violations": asdict(self.violations),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AttemptRecord":
        scores = data.get("scores")
        return cls(
            attempt_id=str(data["attempt_id"]),
            user_id=str(data["user_id"]),
            questions=[Question.from_dict(item) for item in data.get("questions") or []],
            created_at=float(data.get("created_at") or 0.0),
            submitted_at=data.get("submitted_at"),
            scores=AttemptScores.from_dict(scores) if isinstance(scores, dict) else None,
            violations=AttemptViolations(**dict(data.get("violations") or {})),
        )
