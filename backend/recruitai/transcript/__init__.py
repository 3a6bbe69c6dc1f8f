from recruitai.transcript.metrics import (
    build_emotion_timeline,
    compute_appearance_score,
    estimate_confidence,
    estimate_grammar,
    estimate_hesitation,
    estimate_knowledge_and_delivery,
    estimate_sentiment,
    tokenize,
    word_count,
)

__all__ = [
    "build_emotion_timeline",
    "compute_appearance_score",
    "estimate_confidence",
    "estimate_grammar",
    "estimate_hesitation",
    "estimate_knowledge_and_delivery",
    "estimate_sentiment",
    "tokenize",
    "word_count",
]
