from typing import Any, Mapping, Optional

from recruitai.numbers import round_half_up, safe_float
from recruitai.transcript.models import HesitationInfo
from recruitai.transcript.metrics import (
    build_emotion_timeline,
    compute_appearance_score,
    estimate_confidence,
    estimate_grammar,
    estimate_hesitation,
    estimate_knowledge_and_delivery,
    estimate_sentiment,
    word_count,
)

from .models import InterviewScoreResult, PauseInfo


def _hesitation_override(extra: Optional[Mapping[str, Any]]) -> HesitationInfo | None:
    if not extra:
        return None
    raw = extra.get("hesitation_info", extra.get("hesitationInfo"))
    if raw is None:
        return None
    if isinstance(raw, HesitationInfo):
        return raw
    if isinstance(raw, Mapping):
        return HesitationInfo.from_dict(dict(raw))
    return None


def overall_score(*sub_scores) -> int:
    """Rounded mean of the sub-scores, each clamped to [0, 100] and rounded first."""
    clamped = [max(0, min(100, round_half_up(safe_float(score, 0.0)))) for score in sub_scores]
    if not clamped:
        return 0
    return round_half_up(sum(clamped) / len(clamped))


def compute_all_metrics(
    transcript: str = "",
    eye_contact_percent: float | None = 0,
    extra: Optional[Mapping[str, Any]] = None,
) -> InterviewScoreResult:
    """
    Compose transcript heuristics and the session's eye-contact percentage
    into one InterviewScoreResult.

    extra["hesitation_info"] (or "hesitationInfo"), when given, replaces the
    filler-based hesitation estimate. Upstream pause data is finer-grained
    than anything recoverable from plain text.
    """
    text = "" if transcript is None else str(transcript)

    hesitation = _hesitation_override(extra) or estimate_hesitation(text)
    sentiment = estimate_sentiment(text)
    knowledge = estimate_knowledge_and_delivery(text)
    appearance = compute_appearance_score(eye_contact_percent)
    grammar = estimate_grammar(text)
    confidence = estimate_confidence(text, hesitation)

    return InterviewScoreResult(
        appearance_score=appearance,
        language_grammar_score=grammar,
        confidence_score=confidence,
        content_delivery_score=knowledge.content_delivery_score,
        knowledge_score=knowledge.knowledge_score,
        sentiment=sentiment.sentiment,
        sentiment_score=sentiment.sentiment_score,
        word_count=word_count(text),
        pauses=PauseInfo(
            estimated_pauses=hesitation.filler_count,
            hesitation_score=hesitation.hesitation_score,
        ),
        emotion_timeline=tuple(build_emotion_timeline(text)),
        eye_contact_percent=eye_contact_percent,
        overall_score=overall_score(
            appearance,
            grammar,
            confidence,
            knowledge.content_delivery_score,
            knowledge.knowledge_score,
        ),
    )
