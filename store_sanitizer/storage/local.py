"""
Local filesystem key-value stores.

Provides the file-based plumbing shared by on-disk backends and a JSON
implementation. Every commit writes the whole store to a temporary file in the
target directory and moves it into place with ``os.replace``, so readers see
either the old or the new content and never a partial write.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from abc import abstractmethod
from pathlib import Path

from ..core.exceptions import StoreUnreadableError, StoreWriteError
from ..core.logging import get_logger
from ..models.store import StoreSnapshot, StoreValue, is_store_value
from .interface import KeyValueStore

logger = get_logger(__name__)


class FileBackedStore(KeyValueStore):
    """Base class for stores persisted as a single file."""

    def __init__(self, path: Path, name: str | None = None) -> None:
        """Initialize a file-backed store.

        Args:
            path: Backing file. A missing file is an empty store.
            name: Store name; defaults to the file name without suffix.
        """
        self.path = Path(path)
        super().__init__(name or self.path.stem)

    @abstractmethod
    def decode(self, raw: bytes) -> dict[str, StoreValue]:
        """Parse file content into entries.

        Raises:
            ValueError: If the content is malformed.
        """
        ...

    @abstractmethod
    def encode(self, entries: dict[str, StoreValue]) -> bytes:
        """Serialize entries into file content."""
        ...

    def _read_raw(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreUnreadableError(
                message=f"Cannot read store file {self.path}",
                context={"path": str(self.path)},
                cause=exc,
                store_name=self.name,
                operation="read",
            ) from exc

    def _decode_raw(self, raw: bytes) -> dict[str, StoreValue]:
        try:
            return self.decode(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise StoreUnreadableError(
                message=f"Malformed store file {self.path}",
                context={"path": str(self.path), "size_bytes": len(raw)},
                cause=exc,
                store_name=self.name,
                operation="decode",
            ) from exc

    def _commit(self, entries: dict[str, StoreValue], operation: str) -> None:
        data = self.encode(entries)
        tmp_path: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise StoreWriteError(
                message=f"Cannot commit store file {self.path}",
                context={"path": str(self.path)},
                cause=exc,
                store_name=self.name,
                operation=operation,
            ) from exc
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)

    def load(self) -> dict[str, StoreValue]:
        raw = self._read_raw()
        if raw is None:
            return {}
        return self._decode_raw(raw)

    def set(self, key: str, value: StoreValue) -> None:
        value = self.validate_entry(key, value)
        entries = self.load()
        entries[key] = value
        self._commit(entries, "set")

    def remove(self, key: str) -> bool:
        entries = self.load()
        if key not in entries:
            return False
        del entries[key]
        self._commit(entries, "remove")
        return True

    def snapshot(self) -> StoreSnapshot:
        raw = self._read_raw()
        if raw is None:
            return StoreSnapshot(store_name=self.name)
        entries = self._decode_raw(raw)
        return StoreSnapshot(
            store_name=self.name,
            entry_count=len(entries),
            approx_size_bytes=len(raw),
        )

    def clear_all(self) -> None:
        # The old content is never parsed, so a corrupt file can still be cleared.
        if not self.path.exists():
            logger.debug("store_file_absent", path=str(self.path))
            return
        self._commit({}, "clear_all")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, path={str(self.path)!r})"


class JsonFileStore(FileBackedStore):
    """Store persisted as one JSON object mapping keys to values."""

    def decode(self, raw: bytes) -> dict[str, StoreValue]:
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        for key, value in data.items():
            if not is_store_value(value):
                raise ValueError(f"Unsupported value type {type(value).__name__} for key {key!r}")
        return data

    def encode(self, entries: dict[str, StoreValue]) -> bytes:
        return json.dumps(entries, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")
