"""Data models for store-sanitizer."""

from .outcome import ActionTaken, ErrorKind, Outcome, Verdict, VerdictReason, VerdictStatus
from .store import StoreSnapshot, StoreValue, is_store_value

__all__ = [
    "ActionTaken",
    "ErrorKind",
    "Outcome",
    "Verdict",
    "VerdictReason",
    "VerdictStatus",
    "StoreSnapshot",
    "StoreValue",
    "is_store_value",
]
