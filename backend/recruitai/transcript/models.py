from dataclasses import dataclass, field, asdict
from typing import List

from . import rules


@dataclass(frozen=True)
class TranscriptTokens:
    words: List[str] = field(default_factory=list)
    sentences: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class HesitationInfo:
    filler_count: int = 0
    hesitation_score: int = 100

    @classmethod
    def from_dict(cls, data: dict) -> "HesitationInfo":
        """
        Accepts snake_case or camelCase keys so upstream pause data can be
        passed straight from a client payload.
        """
        raw = dict(data or {})
        filler_count = raw.get("filler_count", raw.get("fillerCount", 0))
        hesitation_score = raw.get("hesitation_score", raw.get("hesitationScore"))
        try:
            filler_count = max(0, int(filler_count or 0))
        except (TypeError, ValueError):
            filler_count = 0
        if hesitation_score is None:
            hesitation_score = max(0, 100 - filler_count * rules.FILLER_PENALTY)
        try:
            hesitation_score = max(0, min(100, int(hesitation_score)))
        except (TypeError, ValueError):
            hesitation_score = max(0, 100 - filler_count * rules.FILLER_PENALTY)
        return cls(filler_count=filler_count, hesitation_score=hesitation_score)


@dataclass(frozen=True)
class SentimentInfo:
    sentiment: str = "neutral"
    sentiment_score: int = 60


@dataclass(frozen=True)
class KnowledgeInfo:
    knowledge_score: int = 50
    content_delivery_score: int = 50


@dataclass(frozen=True)
class EmotionFrame:
    index: int
    text: str
    emotion: str

    def to_dict(self) -> dict:
        return asdict(self)
