from pathlib import Path

from recruitai.storage import InMemoryStore, JsonFileStore

from .models import AttemptRecord


class AttemptStore:
    """
    Attempt repository over an injectable keyed backing: InMemoryStore for
    tests, JsonFileStore (or anything with the same get/put/items surface)
    for a running service.
    """

    def __init__(self, backing: InMemoryStore | None = None):
        self._backing = backing if backing is not None else InMemoryStore()

    @classmethod
    def json_file(cls, path: Path | str) -> "AttemptStore":
        return cls(JsonFileStore(path))

    def get(self, attempt_id: str) -> AttemptRecord | None:
        data = self._backing.get(attempt_id)
        return AttemptRecord.from_dict(data) if data else None

    def save(self, record: AttemptRecord) -> None:
        self._backing.put(record.attempt_id, record.to_dict())

    def find_in_progress(self, user_id: str) -> AttemptRecord | None:
        uid = str(user_id or "")
        candidates = [
            data
            for _, data in self._backing.items()
            if str(data.get("user_id") or "") == uid and data.get("submitted_at") is None
        ]
        if not candidates:
            return None
        candidates.sort(key=lambda item: float(item.get("created_at") or 0.0))
        return AttemptRecord.from_dict(candidates[-1])

    def list_for_user(self, user_id: str) -> list[AttemptRecord]:
        uid = str(user_id or "")
        rows = [
            AttemptRecord.from_dict(data)
            for _, data in self._backing.items()
            if str(data.get("user_id") or "") == uid
        ]
        rows.sort(key=lambda item: item.created_at)
        return rows

    def __len__(self) -> int:
        return len(self._backing)
