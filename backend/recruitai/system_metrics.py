import threading
import time
from typing import Any


_lock = threading.Lock()
_metrics: dict[str, float] = {
    "proctoring_sessions_active": 0.0,
    "proctoring_sessions_stopped": 0.0,
    "frames_registered": 0.0,
    "violations_total": 0.0,
    "violations_attention": 0.0,
    "violations_tab_switch": 0.0,
    "violations_no_face": 0.0,
    "violations_multi_face": 0.0,
    "violations_other": 0.0,
    "auto_submits_total": 0.0,
    "detector_failures": 0.0,
    "mock_test_attempts_created": 0.0,
    "mock_test_attempts_submitted": 0.0,
    "mock_test_duplicate_submissions": 0.0,
    "interview_analyses_total": 0.0,
    "llm_analysis_calls": 0.0,
    "llm_analysis_fallbacks": 0.0,
    "analysis_latency_total_ms": 0.0,
    "analysis_latency_samples": 0.0,
}


def increment_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = float(_metrics.get(key, 0.0)) + float(amount)


def decrement_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        next_value = float(_metrics.get(key, 0.0)) - float(amount)
        _metrics[key] = max(0.0, next_value)


def set_metric(name: str, value: float) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = max(0.0, float(value))


def observe_analysis_latency_ms(value_ms: float) -> None:
    latency = max(0.0, float(value_ms or 0.0))
    with _lock:
        _metrics["analysis_latency_total_ms"] = float(_metrics.get("analysis_latency_total_ms", 0.0)) + latency
        _metrics["analysis_latency_samples"] = float(_metrics.get("analysis_latency_samples", 0.0)) + 1.0


def record_violation(kind: str) -> None:
    normalized = str(kind or "").strip().lower().replace(" ", "_").replace("-", "_")
    key_map = {
        "attention": "violations_attention",
        "tab_switch": "violations_tab_switch",
        "no_face": "violations_no_face",
        "multi_face": "violations_multi_face",
    }
    metric_key = key_map.get(normalized, "violations_other")
    with _lock:
        _metrics["violations_total"] = float(_metrics.get("violations_total", 0.0)) + 1.0
        _metrics[metric_key] = float(_metrics.get(metric_key, 0.0)) + 1.0


def get_metrics_snapshot(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    with _lock:
        data = dict(_metrics)

    latency_samples = max(1.0, float(data.get("analysis_latency_samples") or 0.0))

    payload: dict[str, Any] = {"generated_at": time.time()}
    for key, value in data.items():
        if key == "analysis_latency_total_ms":
            payload[key] = float(value or 0.0)
        else:
            payload[key] = int(value or 0.0)
    payload["avg_analysis_latency_ms"] = round(float(data.get("analysis_latency_total_ms") or 0.0) / latency_samples, 2)

    if extra:
        payload.update(extra)
    return payload
