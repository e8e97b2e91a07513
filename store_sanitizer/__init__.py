"""
store-sanitizer: Startup sanitation for persisted key-value stores.

Assesses a persisted preference store once at application startup and wipes
it when a health policy decides it must go, reporting a structured outcome
for every run without ever aborting the host's startup.
"""

__version__ = "1.0.0"
__author__ = "store-sanitizer Team"

from .models import ActionTaken, ErrorKind, Outcome, StoreSnapshot, Verdict
from .sanitizer import StartupSanitizer, sanitize_on_startup

__all__ = [
    "ActionTaken",
    "ErrorKind",
    "Outcome",
    "StoreSnapshot",
    "Verdict",
    "StartupSanitizer",
    "sanitize_on_startup",
]
