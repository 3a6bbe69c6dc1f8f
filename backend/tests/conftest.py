import base64
import json
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("ALLOW_UNVERIFIED_JWT_DEV", "true")
    monkeypatch.setenv("QA_MODE", "true")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.delenv("JWT_SECRET", raising=False)


def _dev_token(sub: str) -> str:
    def _enc(obj: dict) -> str:
        raw = json.dumps(obj, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")

    header = _enc({"alg": "none", "typ": "JWT"})
    payload = _enc({"sub": sub, "iat": 0})
    return f"{header}.{payload}."


@pytest.fixture
def dev_jwt_token() -> str:
    return _dev_token("pytest-user")


@pytest.fixture
def auth_headers(dev_jwt_token: str) -> dict:
    return {"Authorization": f"Bearer {dev_jwt_token}"}


@pytest.fixture
def other_auth_headers() -> dict:
    return {"Authorization": f"Bearer {_dev_token('someone-else')}"}


def facing_landmarks(offset: float = 0.0) -> list:
    """468 points with eyes at x=100/200 and the nose at 150 + offset."""
    points = [[0.0, 0.0, 0.0] for _ in range(468)]
    points[33] = [100.0, 120.0, 0.0]
    points[263] = [200.0, 120.0, 0.0]
    points[1] = [150.0 + offset, 160.0, 0.0]
    return points


@pytest.fixture
def good_frame() -> list:
    return facing_landmarks(0.0)


@pytest.fixture
def bad_frame() -> list:
    return facing_landmarks(45.0)


@pytest.fixture
def make_landmarks():
    return facing_landmarks
