"""
Health policy interface.

A health policy is a pure, deterministic classification of a store snapshot.
It never raises: a snapshot of an unreadable store is itself a verdict.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.outcome import Verdict, VerdictReason
from ..models.store import StoreSnapshot


class HealthPolicy(ABC):
    """Decides whether a store must be wiped."""

    name: str = "policy"

    def assess(self, snapshot: StoreSnapshot) -> Verdict:
        """Classify a snapshot.

        Args:
            snapshot: Store state taken at or before the call.

        Returns:
            ``Unhealthy("unreadable")`` for a snapshot that failed to load,
            otherwise the policy's own verdict.
        """
        if snapshot.load_failed:
            return Verdict.unhealthy(VerdictReason.UNREADABLE)
        return self.evaluate(snapshot)

    @abstractmethod
    def evaluate(self, snapshot: StoreSnapshot) -> Verdict:
        """Classify a snapshot whose content loaded successfully."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
