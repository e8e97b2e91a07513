"""
In-memory key-value store.

Dict-backed store for tests and for hosts that embed the sanitizer around a
store they already hold in memory.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..models.store import StoreSnapshot, StoreValue
from .interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Key-value store held in a plain dict."""

    def __init__(self, name: str = "memory", entries: Mapping[str, StoreValue] | None = None) -> None:
        super().__init__(name)
        self._entries: dict[str, StoreValue] = {}
        for key, value in (entries or {}).items():
            self._entries[key] = self.validate_entry(key, value)

    def load(self) -> dict[str, StoreValue]:
        return dict(self._entries)

    def set(self, key: str, value: StoreValue) -> None:
        self._entries[key] = self.validate_entry(key, value)

    def remove(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            store_name=self.name,
            entry_count=len(self._entries),
            approx_size_bytes=self.estimate_size(self._entries) if self._entries else 0,
        )

    def clear_all(self) -> None:
        self._entries.clear()
