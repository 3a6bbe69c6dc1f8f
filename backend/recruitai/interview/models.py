from dataclasses import dataclass, field
from typing import Tuple

from recruitai.transcript.models import EmotionFrame


@dataclass(frozen=True)
class PauseInfo:
    estimated_pauses: int = 0
    hesitation_score: int = 100


@dataclass(frozen=True)
class InterviewScoreResult:
    """
    Composite soft-skill score for one answer or session. overall_score is
    the rounded mean of the five clamped sub-scores. Immutable once
    produced; persisted by the caller.
    """
    appearance_score: float = 0
    language_grammar_score: int = 0
    confidence_score: int = 50
    content_delivery_score: int = 50
    knowledge_score: int = 50
    sentiment: str = "neutral"
    sentiment_score: int = 60
    word_count: int = 0
    pauses: PauseInfo = field(default_factory=PauseInfo)
    emotion_timeline: Tuple[EmotionFrame, ...] = ()
    eye_contact_percent: float | None = 0
    overall_score: int = 0

    def to_dict(self) -> dict:
        return {
            "wordCount": self.word_count,
            "pauses": {
                "estimatedPauses": self.pauses.estimated_pauses,
                "hesitationScore": self.pauses.hesitation_score,
            },
            "appearanceScore": self.appearance_score,
            "languageGrammarScore": self.language_grammar_score,
            "confidenceScore": self.confidence_score,
            "contentDeliveryScore": self.content_delivery_score,
            "knowledgeScore": self.knowledge_score,
            "sentiment": self.sentiment,
            "sentimentScore": self.sentiment_score,
            "emotionTimeline": [frame.to_dict() for frame in self.emotion_timeline],
            "eyeContactPercent": self.eye_contact_percent,
            "overallScore": self.overall_score,
        }
