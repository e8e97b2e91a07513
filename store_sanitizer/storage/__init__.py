"""Key-value store backends for store-sanitizer."""

from __future__ import annotations

from ..core.config import StoreConfig
from .interface import KeyValueStore
from .local import FileBackedStore, JsonFileStore
from .memory import InMemoryStore
from .shared_prefs import SharedPreferencesStore


def build_store(config: StoreConfig) -> KeyValueStore:
    """Create the store described by configuration."""
    path = config.file_path
    if path is None:
        return InMemoryStore(config.name)
    if config.backend == "json":
        return JsonFileStore(path, name=config.name)
    return SharedPreferencesStore(path, name=config.name)


__all__ = [
    "KeyValueStore",
    "FileBackedStore",
    "JsonFileStore",
    "InMemoryStore",
    "SharedPreferencesStore",
    "build_store",
]
