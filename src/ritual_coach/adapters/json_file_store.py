"""Key-value store persisted as a single JSON file."""

import json
from dataclasses import dataclass
from pathlib import Path

from ritual_coach.services.kv_store import KeyValueStore


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores every entry in one JSON object on disk.

    Each write rewrites the whole file through a temporary sibling, so a
    crash mid-write leaves the previous contents in place. A missing file is
    an empty store.
    """

    path: Path

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        entries = self._load()
        entries[key] = value
        self._dump(entries)

    def remove(self, key: str) -> None:
        entries = self._load()
        if entries.pop(key, None) is not None:
            self._dump(entries)

    def list_keys(self, prefix: str) -> list[str]:
        return [key for key in self._load() if key.startswith(prefix)]

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return {str(key): str(value) for key, value in data.items()}

    def _dump(self, entries: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(
            json.dumps(entries, indent=2, sort_keys=True, ensure_ascii=False),
            encoding="utf-8",
        )
        tmp_path.replace(self.path)
