import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    try:
        return max(minimum, int(os.getenv(name, str(default))))
    except ValueError:
        return default


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    try:
        return max(minimum, float(os.getenv(name, str(default))))
    except ValueError:
        return default


OPENAI_API_KEY = str(os.getenv("OPENAI_API_KEY") or "").strip()
MODEL_NAME = str(os.getenv("MODEL_NAME") or "gpt-4-turbo").strip()
QA_MODE = os.getenv("QA_MODE", "false").lower() == "true"
ENABLE_LLM_ANALYSIS = os.getenv("ENABLE_LLM_ANALYSIS", "false").lower() == "true"

DATA_DIR = Path(os.getenv("DATA_DIR") or (_BACKEND_ROOT / "data"))

# Proctoring thresholds (per session, overridable on session create)
MAX_TAB_VIOLATIONS = _env_int("MAX_TAB_VIOLATIONS", 3)
MAX_ATTENTION_VIOLATIONS = _env_int("MAX_ATTENTION_VIOLATIONS", 5)
MAX_CAMERA_VIOLATIONS = _env_int("MAX_CAMERA_VIOLATIONS", 5)
FACE_CHECK_INTERVAL_SEC = _env_float("FACE_CHECK_INTERVAL_SEC", 5.0, minimum=0.1)
CAMERA_CHECK_INTERVAL_SEC = _env_float("CAMERA_CHECK_INTERVAL_SEC", 1.5, minimum=0.1)
FRAME_INTERVAL_SEC = _env_float("FRAME_INTERVAL_SEC", 1.0 / 30.0, minimum=0.001)
EYE_CONTACT_THRESHOLD_PX = _env_float("EYE_CONTACT_THRESHOLD_PX", 20.0)

QUESTIONS_PER_CATEGORY = _env_int("QUESTIONS_PER_CATEGORY", 15)

# "memory" keeps attempts/interviews in process; "json" mirrors them under DATA_DIR
STORE_BACKEND = str(os.getenv("STORE_BACKEND") or "memory").strip().lower()
