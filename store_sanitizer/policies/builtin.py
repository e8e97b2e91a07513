"""Built-in health policies."""

from __future__ import annotations

from ..core.exceptions import ValidationError
from ..models.outcome import Verdict, VerdictReason
from ..models.store import StoreSnapshot
from .base import HealthPolicy


class ForcedClearPolicy(HealthPolicy):
    """Declare every store unhealthy, wiping it on every startup."""

    name = "forced"

    def evaluate(self, snapshot: StoreSnapshot) -> Verdict:
        return Verdict.unhealthy(VerdictReason.FORCED)


class LoadFailurePolicy(HealthPolicy):
    """Wipe the store only when its content cannot be loaded."""

    name = "load_failure"

    def evaluate(self, snapshot: StoreSnapshot) -> Verdict:
        return Verdict.healthy()


class SizeThresholdPolicy(HealthPolicy):
    """Wipe the store once it grows past an entry count or byte size.

    The entry limit is checked before the size limit. Limits are exclusive:
    a store holding exactly ``max_entries`` entries is healthy.
    """

    name = "size_threshold"

    def __init__(self, max_entries: int | None = None, max_bytes: int | None = None) -> None:
        if max_entries is None and max_bytes is None:
            raise ValidationError(message="At least one of max_entries or max_bytes is required")
        for field_name, limit in (("max_entries", max_entries), ("max_bytes", max_bytes)):
            if limit is not None and limit < 0:
                raise ValidationError(
                    message="Limits must be non-negative",
                    field_name=field_name,
                    actual_value=limit,
                )
        self.max_entries = max_entries
        self.max_bytes = max_bytes

    def evaluate(self, snapshot: StoreSnapshot) -> Verdict:
        if self.max_entries is not None and snapshot.entry_count > self.max_entries:
            return Verdict.unhealthy(VerdictReason.TOO_MANY_ENTRIES)
        if self.max_bytes is not None and snapshot.approx_size_bytes > self.max_bytes:
            return Verdict.unhealthy(VerdictReason.TOO_LARGE)
        return Verdict.healthy()

    def __repr__(self) -> str:
        return f"SizeThresholdPolicy(max_entries={self.max_entries}, max_bytes={self.max_bytes})"


class CompositePolicy(HealthPolicy):
    """Combine policies; the first unhealthy verdict wins."""

    name = "composite"

    def __init__(self, *policies: HealthPolicy) -> None:
        if not policies:
            raise ValidationError(message="CompositePolicy needs at least one policy")
        self.policies = policies

    def evaluate(self, snapshot: StoreSnapshot) -> Verdict:
        for policy in self.policies:
            verdict = policy.assess(snapshot)
            if not verdict.is_healthy:
                return verdict
        return Verdict.healthy()

    def __repr__(self) -> str:
        inner = ", ".join(repr(p) for p in self.policies)
        return f"CompositePolicy({inner})"
