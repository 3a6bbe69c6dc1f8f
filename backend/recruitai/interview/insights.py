"""
Dashboard labels derived from a scored interview: eye-contact stability,
filler usage, speaking rate and a one-line sentiment summary.
"""
from recruitai.numbers import round_half_up, safe_float

from .models import InterviewScoreResult

EYE_CONTACT_LABELS = ((70, "stable"), (40, "variable"))
EYE_CONTACT_FALLBACK = "weak"

FILLER_USAGE_LABELS = ((15, "high"), (8, "medium"))
FILLER_USAGE_FALLBACK = "low"

SLOW_PACE_WPM = 90
FAST_PACE_WPM = 160

SENTIMENT_SUMMARIES = {
    "positive": "Overall positive and confident emotional tone.",
    "negative": "Overall negative or highly nervous emotional tone.",
    "neutral": "Overall neutral emotional tone.",
}
SENTIMENT_SUMMARY_FALLBACK = "Emotional tone: neutral to positive."


def words_per_minute(word_count: int, duration_sec: float) -> int:
    duration = safe_float(duration_sec, 0.0)
    words = int(word_count or 0)
    if duration <= 0 or words <= 0:
        return 0
    # anything under a minute is scored as a full minute
    minutes = max(1.0, duration / 60)
    return round_half_up(words / minutes)


def speaking_pace(wpm: int) -> str:
    if wpm > FAST_PACE_WPM:
        return "fast"
    if wpm < SLOW_PACE_WPM:
        return "slow"
    return "normal"


def eye_contact_label(score) -> str:
    value = safe_float(score, 0.0)
    for floor, label in EYE_CONTACT_LABELS:
        if value > floor:
            return label
    return EYE_CONTACT_FALLBACK


def filler_usage_label(filler_count: int) -> str:
    count = int(filler_count or 0)
    for floor, label in FILLER_USAGE_LABELS:
        if count > floor:
            return label
    return FILLER_USAGE_FALLBACK


def sentiment_summary(sentiment: str) -> str:
    return SENTIMENT_SUMMARIES.get(str(sentiment or ""), SENTIMENT_SUMMARY_FALLBACK)


def build_insights(result: InterviewScoreResult, duration_sec: float = 0) -> dict:
    eye_contact_score = max(0, min(100, round_half_up(safe_float(result.eye_contact_percent, 0.0))))
    filler_count = result.pauses.estimated_pauses
    wpm = words_per_minute(result.word_count, duration_sec)
    return {
        "eyeContactScore": eye_contact_score,
        "eyeContactLabel": eye_contact_label(eye_contact_score),
        "fillerCount": filler_count,
        "fillerUsage": filler_usage_label(filler_count),
        "wpm": wpm,
        "speakingPace": speaking_pace(wpm),
        "sentimentScore": result.sentiment_score,
        "sentimentSummary": sentiment_summary(result.sentiment),
    }
