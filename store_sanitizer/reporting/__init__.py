"""Outcome reporting for store-sanitizer."""

from __future__ import annotations

from ..core.config import ReportingConfig
from .sinks import (
    CompositeSink,
    JsonLinesSink,
    LoggingSink,
    NullSink,
    ObservabilitySink,
    report_outcome,
)


def build_sink(config: ReportingConfig) -> ObservabilitySink:
    """Create the sink(s) described by configuration."""
    sinks: list[ObservabilitySink] = []
    if config.log_events:
        sinks.append(LoggingSink())
    if config.jsonl_path is not None:
        sinks.append(JsonLinesSink(config.jsonl_path))
    if not sinks:
        return NullSink()
    if len(sinks) == 1:
        return sinks[0]
    return CompositeSink(*sinks)


__all__ = [
    "CompositeSink",
    "JsonLinesSink",
    "LoggingSink",
    "NullSink",
    "ObservabilitySink",
    "build_sink",
    "report_outcome",
]
