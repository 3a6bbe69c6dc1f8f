from pathlib import Path
from typing import Any

from recruitai.storage import InMemoryStore, JsonFileStore


class InterviewStore:
    """Mock interview records keyed by interview id."""

    def __init__(self, backing: InMemoryStore | None = None):
        self._backing = backing if backing is not None else InMemoryStore()

    @classmethod
    def json_file(cls, path: Path | str) -> "InterviewStore":
        return cls(JsonFileStore(path))

    def get(self, interview_id: str) -> dict[str, Any] | None:
        return self._backing.get(interview_id)

    def save(self, interview_id: str, payload: dict[str, Any]) -> None:
        self._backing.put(interview_id, payload)

    def list_for_user(self, user_id: str, limit: int = 50) -> list[dict[str, Any]]:
        uid = str(user_id or "").strip()
        if not uid:
            return []
        capped = max(1, min(int(limit or 50), 200))
        rows = [dict(data) for _, data in self._backing.items() if str(data.get("user_id") or "") == uid]
        rows.sort(key=lambda item: float(item.get("created_at") or 0.0))
        return rows[-capped:]
