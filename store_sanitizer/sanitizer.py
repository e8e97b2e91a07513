"""
Startup store sanitizer.

Runs once during application initialization, before any other component reads
the persisted store: take a snapshot, ask the health policy for a verdict,
clear the store when it is unhealthy, and report exactly one outcome. Store
and sink failures end up on the outcome; they never abort the host's startup.
"""

from __future__ import annotations

import time
from enum import Enum

from .core.config import Config, get_config
from .core.exceptions import SanitizerError
from .core.logging import get_logger, log_context
from .models.outcome import ActionTaken, ErrorKind, Outcome
from .models.store import StoreSnapshot
from .policies import ForcedClearPolicy, HealthPolicy, build_policy
from .reporting import LoggingSink, ObservabilitySink, build_sink, report_outcome
from .storage import KeyValueStore, build_store

logger = get_logger(__name__)


class SanitizerState(str, Enum):
    """Lifecycle of a sanitizer instance."""

    NOT_RUN = "not_run"
    RAN = "ran"


class StartupSanitizer:
    """Assess a key-value store and wipe it when the health policy says so.

    The store is not owned by the sanitizer; it is only accessed through
    ``snapshot()`` and ``clear_all()``. ``run()`` is synchronous: an
    unhealthy store is empty by the time it returns.
    """

    def __init__(
        self,
        store: KeyValueStore,
        policy: HealthPolicy | None = None,
        sink: ObservabilitySink | None = None,
    ) -> None:
        """Initialize the sanitizer.

        Args:
            store: Store to assess
            policy: Health policy, defaults to unconditional clearing
            sink: Observability sink, defaults to structured logging
        """
        self.store = store
        self.policy = policy if policy is not None else ForcedClearPolicy()
        self.sink = sink if sink is not None else LoggingSink()
        self.run_count = 0
        self.last_outcome: Outcome | None = None

    @property
    def state(self) -> SanitizerState:
        return SanitizerState.RAN if self.run_count else SanitizerState.NOT_RUN

    def _take_snapshot(self) -> tuple[StoreSnapshot, str | None]:
        try:
            return self.store.snapshot(), None
        except Exception as exc:  # noqa: BLE001
            logger.warning("store_unreadable", error=str(exc))
            return StoreSnapshot.unreadable(self.store.name, str(exc)), str(exc)

    def _clear(self) -> str | None:
        try:
            self.store.clear_all()
        except Exception as exc:  # noqa: BLE001
            logger.error("store_clear_failed", error=str(exc), exc_info=True)
            return str(exc)
        return None

    def run(self) -> Outcome:
        """Run one full assess cycle.

        Returns:
            The outcome of this run. It is also handed to the sink; sink
            failures are swallowed.
        """
        started = time.perf_counter()
        with log_context(store_name=self.store.name):
            snapshot, unreadable_detail = self._take_snapshot()
            verdict = self.policy.assess(snapshot)
            logger.debug(
                "store_assessed",
                policy=self.policy.name,
                verdict=str(verdict),
                entry_count=snapshot.entry_count,
                approx_size_bytes=snapshot.approx_size_bytes,
            )

            action = ActionTaken.NONE
            error: ErrorKind | None = ErrorKind.UNREADABLE if snapshot.load_failed else None
            error_detail = unreadable_detail

            if not verdict.is_healthy:
                clear_detail = self._clear()
                if clear_detail is None:
                    action = ActionTaken.CLEARED
                else:
                    error = ErrorKind.CLEAR_FAILED
                    error_detail = clear_detail

            outcome = Outcome(
                store_name=self.store.name,
                verdict=verdict,
                action_taken=action,
                error=error,
                error_detail=error_detail,
                entries_before=None if snapshot.load_failed else snapshot.entry_count,
                duration_ms=(time.perf_counter() - started) * 1000,
            )
            self.run_count += 1
            self.last_outcome = outcome
            report_outcome(self.sink, outcome)
        return outcome


def sanitize_on_startup(
    config: Config | None = None,
    *,
    store: KeyValueStore | None = None,
    policy: HealthPolicy | None = None,
    sink: ObservabilitySink | None = None,
) -> Outcome | None:
    """Sanitize the configured store once, as the first step of host startup.

    Collaborators not passed explicitly are built from configuration.

    Args:
        config: Configuration, defaults to :func:`get_config`
        store: Store override
        policy: Health policy override
        sink: Sink override

    Returns:
        The run's outcome, or None when sanitizing is disabled or the
        sanitizer could not be built from configuration.
    """
    try:
        cfg = config if config is not None else get_config()
    except ValueError as exc:
        logger.error("sanitizer_setup_failed", error=str(exc))
        return None
    if not cfg.enabled:
        logger.debug("sanitizer_disabled", store_name=cfg.store.name)
        return None

    try:
        sanitizer = StartupSanitizer(
            store=store if store is not None else build_store(cfg.store),
            policy=policy if policy is not None else build_policy(cfg.policy),
            sink=sink if sink is not None else build_sink(cfg.reporting),
        )
    except (SanitizerError, ValueError) as exc:
        logger.error("sanitizer_setup_failed", store_name=cfg.store.name, error=str(exc))
        return None
    return sanitizer.run()
