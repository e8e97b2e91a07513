"""
Custom exception hierarchy for store-sanitizer.

All exceptions inherit from SanitizerError so callers can handle every failure
of a store backend, policy or sink in one place. Each exception carries
context for debugging and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SanitizerError(Exception):
    """Base exception for all store-sanitizer errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ValidationError(SanitizerError):
    """Raised when a value or configuration parameter is rejected."""

    field_name: str | None = None
    expected_type: str | None = None
    actual_value: Any = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_name:
            return f"Validation failed for '{self.field_name}': {base}"
        return f"Validation failed: {base}"


@dataclass
class StoreError(SanitizerError):
    """Raised when a key-value store operation fails."""

    store_name: str = ""
    operation: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.store_name}.{self.operation}]: {base}"


@dataclass
class StoreUnreadableError(StoreError):
    """Raised when a store's persisted content cannot be loaded."""

    def __post_init__(self) -> None:
        if not self.operation:
            self.operation = "snapshot"


@dataclass
class StoreWriteError(StoreError):
    """Raised when committing a mutation to a store fails.

    The store's previously committed content is left in place.
    """

    def __post_init__(self) -> None:
        if not self.operation:
            self.operation = "commit"


@dataclass
class ReportingError(SanitizerError):
    """Raised by an observability sink that could not deliver an outcome."""

    sink_name: str = ""

    def __str__(self) -> str:
        return f"[sink: {self.sink_name}] {super().__str__()}"
