"""
Key-value store interface.

Defines the abstract interface for persisted preference stores, enabling
pluggable backends (in-memory, JSON file, Android SharedPreferences XML).
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from ..core.exceptions import ValidationError
from ..models.store import StoreSnapshot, StoreValue, is_store_value


class KeyValueStore(ABC):
    """Abstract persisted key-value store.

    Keys are unique strings with no ordering guarantee; values are one of
    bool, int, float, str or an ordered sequence of str.
    """

    def __init__(self, name: str) -> None:
        """Initialize the store.

        Args:
            name: Store name, e.g. ``FlutterSharedPreferences``
        """
        if not name:
            raise ValidationError(message="Store name must not be empty", field_name="name")
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def load(self) -> dict[str, StoreValue]:
        """Load all entries.

        Returns:
            A copy of the store's entries.

        Raises:
            StoreUnreadableError: If the persisted content cannot be loaded.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: StoreValue) -> None:
        """Set a key and commit synchronously.

        Args:
            key: Entry key.
            value: Entry value.

        Raises:
            ValidationError: If the key or value type is not supported.
            StoreWriteError: If the commit fails.
        """
        ...

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Remove a key and commit synchronously.

        Args:
            key: Entry key.

        Returns:
            True if the key existed, False otherwise.
        """
        ...

    @abstractmethod
    def snapshot(self) -> StoreSnapshot:
        """Read the current state of the store.

        Holds no lock beyond the duration of the call.

        Returns:
            A read-only summary of the store.

        Raises:
            StoreUnreadableError: If the persisted content cannot be loaded.
        """
        ...

    @abstractmethod
    def clear_all(self) -> None:
        """Remove every entry, committing before returning.

        Clearing an already-empty store succeeds. On failure the previously
        committed content is left intact.

        Raises:
            StoreWriteError: If the commit fails.
        """
        ...

    def get(self, key: str, default: StoreValue | None = None) -> StoreValue | None:
        return self.load().get(key, default)

    def keys(self) -> list[str]:
        return sorted(self.load())

    def __len__(self) -> int:
        return len(self.load())

    def __contains__(self, key: object) -> bool:
        return key in self.load()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"

    @staticmethod
    def validate_entry(key: str, value: Any) -> StoreValue:
        """Check that a key/value pair can be stored.

        Args:
            key: Entry key.
            value: Candidate value.

        Returns:
            The value, with tuples normalized to lists.

        Raises:
            ValidationError: If the key is empty or the value type is not supported.
        """
        if not isinstance(key, str) or not key:
            raise ValidationError(
                message="Keys must be non-empty strings",
                field_name="key",
                expected_type="str",
                actual_value=key,
            )
        if not is_store_value(value):
            raise ValidationError(
                message=f"Unsupported value type {type(value).__name__} for key {key!r}",
                field_name=key,
                expected_type="bool | int | float | str | list[str]",
                actual_value=value,
            )
        if isinstance(value, tuple):
            return list(value)
        return value

    @staticmethod
    def estimate_size(entries: dict[str, StoreValue]) -> int:
        """Approximate serialized size of entries in bytes (UTF-8 JSON)."""
        return len(json.dumps(entries, ensure_ascii=False).encode("utf-8"))
