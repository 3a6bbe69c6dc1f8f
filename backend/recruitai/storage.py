import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Iterator

logger = logging.getLogger("recruitai.storage")


class InMemoryStore:
    """Keyed document store; every read and write copies the record."""

    def __init__(self):
        self._lock = Lock()
        self._records: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            data = self._records.get(str(key or ""))
            return dict(data) if isinstance(data, dict) else None

    def put(self, key: str, payload: dict[str, Any]) -> None:
        k = str(key or "").strip()
        if not k:
            raise ValueError("store key must be non-empty")
        with self._lock:
            self._records[k] = dict(payload or {})
            self._persist()

    def delete(self, key: str) -> bool:
        with self._lock:
            removed = self._records.pop(str(key or ""), None) is not None
            if removed:
                self._persist()
            return removed

    def items(self) -> Iterator[tuple[str, dict[str, Any]]]:
        with self._lock:
            snapshot = [(key, dict(value)) for key, value in self._records.items()]
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _persist(self) -> None:
        return None


class JsonFileStore(InMemoryStore):
    """InMemoryStore mirrored to a JSON file, replaced atomically on write."""

    def __init__(self, path: Path | str):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            self._records = {}
            return
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("store load failed | path=%s err=%s", self.path, exc)
            self._records = {}
            return
        if isinstance(payload, dict):
            self._records = {
                str(key): value
                for key, value in payload.items()
                if isinstance(key, str) and isinstance(value, dict)
            }
        else:
            self._records = {}

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(".tmp")
        temp_path.write_text(json.dumps(self._records, ensure_ascii=False), encoding="utf-8")
        temp_path.replace(self.path)
