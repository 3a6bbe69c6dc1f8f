"""
Deterministic transcript heuristics.

Every function here is total: a missing or empty transcript produces the
neutral/zero result rather than an error.
"""
import re
from typing import List, Sequence

from . import rules
from .models import (
    EmotionFrame,
    HesitationInfo,
    KnowledgeInfo,
    SentimentInfo,
    TranscriptTokens,
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def _phrase_pattern(phrase: str) -> re.Pattern:
    body = r"\s+".join(re.escape(part) for part in phrase.split())
    return re.compile(r"(?<!\w)" + body + r"(?!\w)")


_FILLER_PATTERNS = [_phrase_pattern(word) for word in rules.FILLER_WORDS]
_POSITIVE_PATTERNS = [_phrase_pattern(word) for word in rules.POSITIVE_WORDS]
_NEGATIVE_PATTERNS = [_phrase_pattern(word) for word in rules.NEGATIVE_WORDS]


def _as_text(transcript) -> str:
    if transcript is None:
        return ""
    return str(transcript)


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))


def _count_matches(text: str, patterns: Sequence[re.Pattern]) -> int:
    return sum(len(pattern.findall(text)) for pattern in patterns)


def tokenize(transcript) -> TranscriptTokens:
    text = _as_text(transcript).strip()
    if not text:
        return TranscriptTokens()

    words = text.split()
    sentences = [part.strip() for part in _SENTENCE_SPLIT.split(text) if part.strip()]
    return TranscriptTokens(words=words, sentences=sentences)


def word_count(transcript) -> int:
    return len(tokenize(transcript).words)


def estimate_hesitation(transcript) -> HesitationInfo:
    lower = _as_text(transcript).lower()
    filler_count = _count_matches(lower, _FILLER_PATTERNS)
    return HesitationInfo(
        filler_count=filler_count,
        hesitation_score=max(0, 100 - filler_count * rules.FILLER_PENALTY),
    )


def estimate_grammar(transcript) -> int:
    tokens = tokenize(transcript)
    words, sentences = tokens.words, tokens.sentences
    if not words:
        return 0

    avg_sentence_length = len(words) / len(sentences) if sentences else float(len(words))
    long_words = sum(1 for word in words if len(word) >= rules.LONG_WORD_MIN_CHARS)
    long_word_ratio = long_words / len(words)

    score = rules.BASE_GRAMMAR_SCORE
    low, high = rules.SENTENCE_LENGTH_RANGE
    if low <= avg_sentence_length <= high:
        score += rules.SENTENCE_LENGTH_BONUS
    if long_word_ratio > rules.LONG_WORD_RATIO_MIN:
        score += rules.LONG_WORD_BONUS

    return _clamp(score)


def estimate_sentiment(transcript) -> SentimentInfo:
    lower = _as_text(transcript).lower()
    pos = _count_matches(lower, _POSITIVE_PATTERNS)
    neg = _count_matches(lower, _NEGATIVE_PATTERNS)

    sentiment = "neutral"
    if pos > neg + rules.SENTIMENT_MARGIN:
        sentiment = "positive"
    elif neg > pos + rules.SENTIMENT_MARGIN:
        sentiment = "negative"

    return SentimentInfo(sentiment=sentiment, sentiment_score=rules.SENTIMENT_SCORES[sentiment])


def estimate_confidence(transcript, hesitation: HesitationInfo | None = None) -> int:
    count = word_count(transcript)
    info = hesitation if hesitation is not None else estimate_hesitation(transcript)

    score = rules.BASE_CONFIDENCE_SCORE
    for min_words, bonus in rules.CONFIDENCE_WORD_TIERS:
        if count > min_words:
            score += bonus
    score -= info.filler_count * rules.CONFIDENCE_FILLER_PENALTY

    return _clamp(score)


def type_token_ratio(words: List[str]) -> float:
    if not words:
        return 0.0
    return len({word.lower() for word in words}) / len(words)


def estimate_knowledge_and_delivery(transcript) -> KnowledgeInfo:
    tokens = tokenize(transcript)
    ratio = type_token_ratio(tokens.words)

    knowledge = rules.BASE_KNOWLEDGE_SCORE
    for min_ratio, bonus in rules.KNOWLEDGE_TTR_TIERS:
        if ratio > min_ratio:
            knowledge += bonus

    delivery = rules.BASE_DELIVERY_SCORE
    for min_sentences, bonus in rules.DELIVERY_SENTENCE_TIERS:
        if len(tokens.sentences) >= min_sentences:
            delivery += bonus

    return KnowledgeInfo(knowledge_score=_clamp(knowledge), content_delivery_score=_clamp(delivery))


def compute_appearance_score(eye_contact_percent) -> float:
    # None means no eye-contact data; 0 is a real measurement.
    if eye_contact_percent is None:
        return 0
    try:
        value = float(eye_contact_percent)
    except (TypeError, ValueError):
        return 0
    if value != value:
        return 0
    clamped = max(0.0, min(100.0, value))
    return int(clamped) if clamped.is_integer() else clamped


def build_emotion_timeline(transcript) -> List[EmotionFrame]:
    timeline = []
    for index, sentence in enumerate(tokenize(transcript).sentences):
        sentiment = estimate_sentiment(sentence).sentiment
        timeline.append(
            EmotionFrame(index=index, text=sentence, emotion=rules.EMOTION_BY_SENTIMENT[sentiment])
        )
    return timeline
