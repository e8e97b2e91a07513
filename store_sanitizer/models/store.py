"""
Key-value store models.

Defines the value types a persisted preference store may hold and the
read-only snapshot that health policies assess.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Union

from pydantic import BaseModel, Field

StoreValue = Union[bool, int, float, str, list[str]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_store_value(value: Any) -> bool:
    """Check whether a value can be persisted in a key-value store.

    Supported types are bool, int, float, str and an ordered sequence of str.
    """
    if isinstance(value, (bool, int, float, str)):
        return True
    if isinstance(value, (list, tuple)):
        return all(isinstance(item, str) for item in value)
    return False


class StoreSnapshot(BaseModel):
    """Point-in-time, read-only summary of a key-value store."""

    store_name: str = Field(description="Name of the store the snapshot was taken from")
    entry_count: int = Field(default=0, ge=0, description="Number of keys in the store")
    approx_size_bytes: int = Field(default=0, ge=0, description="Approximate serialized size")
    load_failed: bool = Field(default=False, description="Store content could not be loaded")
    failure_detail: str | None = Field(default=None, description="Why loading failed")
    taken_at: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}

    @classmethod
    def unreadable(cls, store_name: str, detail: str | None = None) -> StoreSnapshot:
        """Snapshot standing in for a store whose content could not be loaded."""
        return cls(store_name=store_name, load_failed=True, failure_detail=detail)

    @property
    def is_empty(self) -> bool:
        return not self.load_failed and self.entry_count == 0
