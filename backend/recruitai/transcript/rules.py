"""
Lexicons and scoring thresholds for transcript heuristics.
Changing these changes every stored interview score.
"""

FILLER_WORDS = (
    "um",
    "uh",
    "like",
    "you know",
    "actually",
    "basically",
    "sort of",
    "kind of",
)

POSITIVE_WORDS = ("good", "great", "excited", "happy", "confident", "enjoy", "learn", "opportunity")
NEGATIVE_WORDS = ("bad", "worried", "nervous", "afraid", "upset", "problem", "issue", "difficult")

# Hesitation
FILLER_PENALTY = 5

# Grammar / language
BASE_GRAMMAR_SCORE = 50
SENTENCE_LENGTH_RANGE = (12, 25)
SENTENCE_LENGTH_BONUS = 20
LONG_WORD_MIN_CHARS = 7
LONG_WORD_RATIO_MIN = 0.2
LONG_WORD_BONUS = 15

# Sentiment
SENTIMENT_MARGIN = 1
SENTIMENT_SCORES = {"positive": 80, "negative": 30, "neutral": 60}

# Confidence
BASE_CONFIDENCE_SCORE = 50
CONFIDENCE_WORD_TIERS = ((150, 20), (250, 10))
CONFIDENCE_FILLER_PENALTY = 3

# Knowledge / content delivery
BASE_KNOWLEDGE_SCORE = 50
KNOWLEDGE_TTR_TIERS = ((0.4, 20), (0.5, 10))
BASE_DELIVERY_SCORE = 50
DELIVERY_SENTENCE_TIERS = ((5, 15), (8, 10))

EMOTION_BY_SENTIMENT = {
    "positive": "engaged",
    "negative": "concerned",
    "neutral": "neutral",
}
