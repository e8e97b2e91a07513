"""
Observability sinks for sanitizer outcomes.

Sinks may raise when delivery fails; callers go through :func:`report_outcome`,
which never lets a reporting failure reach the host's startup path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..core.exceptions import ReportingError
from ..core.logging import get_logger
from ..models.outcome import ActionTaken, ErrorKind, Outcome

logger = get_logger(__name__)


class ObservabilitySink(ABC):
    """Receives the outcome of every sanitizer run."""

    name: str = "sink"

    @abstractmethod
    def report(self, outcome: Outcome) -> None:
        """Deliver an outcome.

        Args:
            outcome: Result of one sanitizer run.

        Raises:
            ReportingError: If the outcome could not be delivered.
        """
        ...


def report_outcome(sink: ObservabilitySink, outcome: Outcome) -> bool:
    """Hand an outcome to a sink without ever raising.

    Args:
        sink: Destination sink.
        outcome: Outcome to deliver.

    Returns:
        True if the sink accepted the outcome, False if it failed.
    """
    try:
        sink.report(outcome)
    except Exception as exc:  # noqa: BLE001
        logger.debug("outcome_report_failed", sink=sink.name, error=str(exc))
        return False
    return True


class LoggingSink(ObservabilitySink):
    """Emit each outcome as a ``store_sanitized`` structlog event."""

    name = "log"

    def report(self, outcome: Outcome) -> None:
        fields = {
            "store_name": outcome.store_name,
            "verdict": outcome.verdict.status.value,
            "reason": outcome.verdict.reason,
            "action_taken": outcome.action_taken.value,
            "error": outcome.error.value if outcome.error else None,
            "entries_before": outcome.entries_before,
            "duration_ms": round(outcome.duration_ms, 3),
        }
        if outcome.error is ErrorKind.CLEAR_FAILED:
            logger.error("store_sanitized", error_detail=outcome.error_detail, **fields)
        elif outcome.error is ErrorKind.UNREADABLE:
            logger.warning("store_sanitized", error_detail=outcome.error_detail, **fields)
        elif outcome.action_taken is ActionTaken.CLEARED:
            logger.info("store_sanitized", **fields)
        else:
            logger.debug("store_sanitized", **fields)


class JsonLinesSink(ObservabilitySink):
    """Append each outcome as one JSON line to a file."""

    name = "jsonl"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def report(self, outcome: Outcome) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(outcome.model_dump_json() + "\n")
        except OSError as exc:
            raise ReportingError(
                message=f"Cannot append outcome to {self.path}",
                context={"path": str(self.path)},
                cause=exc,
                sink_name=self.name,
            ) from exc


class CompositeSink(ObservabilitySink):
    """Forward outcomes to several sinks; one failing sink does not stop the rest."""

    name = "composite"

    def __init__(self, *sinks: ObservabilitySink) -> None:
        self.sinks = sinks

    def report(self, outcome: Outcome) -> None:
        failed = [sink.name for sink in self.sinks if not report_outcome(sink, outcome)]
        if failed:
            raise ReportingError(
                message="Some sinks failed to deliver the outcome",
                context={"failed": failed},
                sink_name=self.name,
            )


class NullSink(ObservabilitySink):
    """Discard outcomes."""

    name = "null"

    def report(self, outcome: Outcome) -> None:
        return None
