import math


def safe_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except Exception:
        return default


def round_half_up(value: float) -> int:
    # x.5 always rounds up, so 12.5% reports as 13 rather than 12
    return int(math.floor(float(value) + 0.5))


def percent_of(part: int, whole: int) -> int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100)
