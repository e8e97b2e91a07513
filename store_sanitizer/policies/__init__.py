"""Health policies deciding when a persisted store is wiped."""

from __future__ import annotations

from ..core.config import PolicyConfig
from .base import HealthPolicy
from .builtin import CompositePolicy, ForcedClearPolicy, LoadFailurePolicy, SizeThresholdPolicy


def build_policy(config: PolicyConfig) -> HealthPolicy:
    """Create the health policy described by configuration."""
    if config.kind == "size_threshold":
        return SizeThresholdPolicy(max_entries=config.max_entries, max_bytes=config.max_bytes)
    if config.kind == "load_failure":
        return LoadFailurePolicy()
    return ForcedClearPolicy()


__all__ = [
    "HealthPolicy",
    "CompositePolicy",
    "ForcedClearPolicy",
    "LoadFailurePolicy",
    "SizeThresholdPolicy",
    "build_policy",
]
