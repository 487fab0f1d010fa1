"""Key-value store abstractions."""

from dataclasses import dataclass
from typing import Protocol


class KeyValueStore(Protocol):
    """String key-value storage used for persisted ritual records."""

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""

    def list_keys(self, prefix: str) -> list[str]:
        """Return every stored key that starts with the prefix."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-process store, lost when the process exits."""

    _entries: dict[str, str]

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries = dict(entries or {})

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def list_keys(self, prefix: str) -> list[str]:
        return [key for key in self._entries if key.startswith(prefix)]
