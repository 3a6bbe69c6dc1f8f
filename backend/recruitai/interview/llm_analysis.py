import asyncio
import json
import logging
import re

from openai import AsyncOpenAI

from core.config import MODEL_NAME, OPENAI_API_KEY
from recruitai.numbers import round_half_up, safe_float
from recruitai.system_metrics import increment_metric

from .insights import speaking_pace, words_per_minute
from .scoring import overall_score

logger = logging.getLogger("recruitai.interview.llm_analysis")

_client: AsyncOpenAI | None = None

REQUIRED_SCORE_FIELDS = (
    "appearanceScore",
    "languageGrammarScore",
    "confidenceScore",
    "contentDeliveryScore",
    "knowledgeScore",
)

SYSTEM_PROMPT = (
    "You are an expert AI interview evaluator. Analyze the interview transcript and provide "
    "structured JSON feedback on 5 key parameters. Return ONLY valid JSON, no markdown, "
    "no extra text, no code blocks."
)

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def default_metrics() -> dict:
    return {
        "appearanceScore": 75,
        "languageGrammarScore": 75,
        "confidenceScore": 70,
        "contentDeliveryScore": 72,
        "knowledgeScore": 70,
        "sentimentScore": 60,
        "sentiment": "neutral",
        "eyeContactPercent": 50,
        "emotionalTone": "Neutral emotional tone detected.",
        "wordCount": 0,
        "wpm": 0,
        "fillerCount": 5,
        "speakingPace": "normal",
        "pauses": {"estimatedPauses": 5},
        "overallScore": 72,
        "source": "default",
    }


def get_client() -> AsyncOpenAI:
    # built on first use so the app imports without an API key
    global _client
    if _client is None:
        _client = AsyncOpenAI(api_key=OPENAI_API_KEY)
    return _client


def build_analysis_prompt(transcript: str, eye_contact_percent: float, word_count: int, duration_sec: float) -> str:
    wpm = words_per_minute(word_count, duration_sec)
    return f"""Analyze the following interview transcript and provide scores for 5 key parameters.

INTERVIEW TRANSCRIPT:
\"\"\"
{transcript}
\"\"\"

CONTEXT:
- Eye Contact: {eye_contact_percent}%
- Word Count: {word_count}
- Duration: {duration_sec}s
- Speaking Rate: {wpm} WPM

EVALUATE AND PROVIDE SCORES (0-100) FOR:
1. Appearance & Professionalism
2. Language & Grammar
3. Confidence
4. Content Delivery
5. Technical Knowledge

ALSO PROVIDE:
- "sentiment": "positive", "neutral", or "negative"
- "emotionalTone": brief description (max 100 chars)
- "fillerCount": estimate of filler words (um, uh, like, you know, actually, basically)
- "speakingPace": "slow" (< 90 WPM), "normal" (90-160 WPM), or "fast" (> 160 WPM)

Return ONLY this JSON structure:
{{
  "appearanceScore": <0-100>,
  "languageGrammarScore": <0-100>,
  "confidenceScore": <0-100>,
  "contentDeliveryScore": <0-100>,
  "knowledgeScore": <0-100>,
  "sentiment": "<positive|neutral|negative>",
  "emotionalTone": "<description>",
  "fillerCount": <number>,
  "speakingPace": "<slow|normal|fast>",
  "sentimentScore": <0-100>
}}"""


def parse_analysis_response(response_text: str) -> dict | None:
    match = _JSON_BLOCK.search(str(response_text or ""))
    if not match:
        logger.warning("analysis reply had no JSON block")
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        logger.warning("analysis reply JSON parse error | err=%s", exc)
        return None

    if not isinstance(parsed, dict):
        return None

    for name in REQUIRED_SCORE_FIELDS:
        value = parsed.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("analysis reply missing or invalid field | field=%s", name)
            return None
    return parsed


def _clamp_score(value) -> int:
    number = safe_float(value, float("nan"))
    if number != number:
        return 0
    return max(0, min(100, round_half_up(number)))


def _validate_sentiment(value) -> str:
    return value if value in {"positive", "negative", "neutral"} else "neutral"


def normalize_metrics(metrics: dict | None, eye_contact_percent=0, word_count: int = 0, duration_sec: float = 0) -> dict:
    if not metrics:
        return default_metrics()

    wpm = words_per_minute(word_count, duration_sec)
    filler_count = _clamp_score(metrics.get("fillerCount", 0))
    tone = metrics.get("emotionalTone")
    pace = metrics.get("speakingPace")
    if pace not in {"slow", "normal", "fast"}:
        pace = speaking_pace(wpm) if wpm else "normal"
    scores = {name: _clamp_score(metrics.get(name)) for name in REQUIRED_SCORE_FIELDS}

    return {
        **scores,
        "sentimentScore": _clamp_score(metrics.get("sentimentScore", 60)),
        "sentiment": _validate_sentiment(metrics.get("sentiment")),
        "eyeContactPercent": _clamp_score(eye_contact_percent),
        "emotionalTone": tone[:150] if isinstance(tone, str) else "Neutral emotional tone.",
        "wordCount": int(word_count or 0),
        "wpm": wpm,
        "fillerCount": filler_count,
        "speakingPace": pace,
        "pauses": {"estimatedPauses": filler_count},
        "overallScore": overall_score(*scores.values()),
        "source": "llm",
    }


async def analyze_interview_with_llm(
    transcript: str = "",
    eye_contact_percent=0,
    word_count: int = 0,
    duration_sec: float = 0,
    timeout_sec: float = 30.0,
    retries: int = 1,
) -> dict:
    """
    Score an interview transcript with the chat-completions model.

    Never raises: a missing API key, an empty transcript, a failed call or
    an unparseable reply all yield default_metrics().
    """
    if not OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set; using default metrics")
        increment_metric("llm_analysis_fallbacks")
        return default_metrics()

    text = str(transcript or "").strip()
    if not text:
        logger.warning("no transcript provided; using default metrics")
        increment_metric("llm_analysis_fallbacks")
        return default_metrics()

    prompt = build_analysis_prompt(text, eye_contact_percent, word_count, duration_sec)
    last_error: Exception | None = None

    for attempt in range(max(1, retries + 1)):
        increment_metric("llm_analysis_calls")
        try:
            response = await asyncio.wait_for(
                get_client().chat.completions.create(
                    model=MODEL_NAME,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=0.7,
                    max_tokens=2000,
                ),
                timeout=timeout_sec,
            )
            reply = str(response.choices[0].message.content or "")
            parsed = parse_analysis_response(reply)
            if parsed is None:
                break
            return normalize_metrics(
                parsed,
                eye_contact_percent=eye_contact_percent,
                word_count=word_count,
                duration_sec=duration_sec,
            )
        except asyncio.TimeoutError as exc:
            last_error = exc
            logger.warning("analysis timeout | attempt=%s", attempt + 1)
        except Exception as exc:
            last_error = exc
            logger.warning("analysis failure | attempt=%s err=%s", attempt + 1, exc)

        if attempt < retries:
            await asyncio.sleep(0.35 * (attempt + 1))

    logger.warning("analysis fallback activated | err=%s", last_error)
    increment_metric("llm_analysis_fallbacks")
    return default_metrics()
