"""
Healthcheck orchestrator - Runs every probe on its own schedule.

Lifecycle: CREATED -> INITIALIZED -> RUNNING -> STOPPED.

    orchestrator = HealthcheckOrchestrator(default_registry(), notifier)
    orchestrator.initialize(specs)
    orchestrator.start()
    ...
    orchestrator.stop()

start() spawns one scheduler thread per probe. A scheduler runs a check
immediately and then once per interval until the shared shutdown event is
set. Checks run on a small thread pool owned by each probe, and results are
awaited and notifications sent on short-lived daemon threads, so a slow
endpoint never delays any schedule. stop() sets the event, joins the
scheduler threads and shuts the pools down without waiting for them.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum
from typing import List, Sequence

from healthcheck_scraper.application.registry import ProbeRegistry
from healthcheck_scraper.core.entities import CheckResult, ProbeSpec
from healthcheck_scraper.core.errors import (
    CheckDeadlineExceeded,
    OrchestratorStateError,
)
from healthcheck_scraper.core.ports import Notifier, Probe

logger = logging.getLogger(__name__)

CHECK_TIMEOUT_SECONDS = 30
# Checks of one probe that may be in flight at once
CHECK_WORKERS_PER_PROBE = 4


class OrchestratorState(Enum):
    """Lifecycle states, traversed in order."""

    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    STOPPED = "stopped"


class HealthcheckOrchestrator:
    """
    Owns the probes, their scheduler threads and their check pools.

    The only state shared between schedulers is the shutdown event. Each
    probe is touched by its own scheduler and its own pool only, so a hung
    endpoint can exhaust its own workers but never another probe's.
    """

    def __init__(
        self,
        registry: ProbeRegistry,
        notifier: Notifier,
        check_timeout: float = CHECK_TIMEOUT_SECONDS,
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: Registry used to build probes from specs
            notifier: Notifier called with the probe's notify target on success
            check_timeout: Deadline in seconds for each individual check
        """
        self.registry = registry
        self.notifier = notifier
        self.check_timeout = check_timeout
        self._state = OrchestratorState.CREATED
        self._probes: List[Probe] = []
        self._schedulers: List[threading.Thread] = []
        self._executors: List[ThreadPoolExecutor] = []
        self._shutdown = threading.Event()

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def probes(self) -> List[Probe]:
        return list(self._probes)

    def initialize(self, specs: Sequence[ProbeSpec]) -> None:
        """
        Build one probe per spec.

        Either every probe is built or none is kept.

        Args:
            specs: Probe definitions in configuration order

        Raises:
            UnknownProbeKindError: If a spec names an unregistered kind
            OrchestratorStateError: If called more than once
        """
        self._require_state(OrchestratorState.CREATED, "initialize")
        logger.info("Initializing healthcheck manager")

        probes: List[Probe] = []
        for spec in specs:
            probe = self.registry.build(spec)
            probes.append(probe)
            logger.info(
                "Created probe %s for %s",
                probe.kind(),
                spec.scrape_target,
                extra={
                    "probe_kind": probe.kind(),
                    "scrape_url": spec.scrape_target,
                    "ping_url": spec.notify_target,
                    "interval_seconds": probe.interval(),
                },
            )

        self._probes = probes
        self._state = OrchestratorState.INITIALIZED
        logger.info(
            "Healthcheck manager initialized with %d probe(s)",
            len(probes),
            extra={"probe_count": len(probes)},
        )

    def start(self) -> None:
        """
        Start one scheduler thread and one check pool per probe.

        Raises:
            OrchestratorStateError: If initialize() has not run or start()
                                    was already called
        """
        self._require_state(OrchestratorState.INITIALIZED, "start")
        logger.info("Starting healthcheck manager")

        for index, probe in enumerate(self._probes):
            executor = ThreadPoolExecutor(
                max_workers=CHECK_WORKERS_PER_PROBE,
                thread_name_prefix=f"probe-check-{index}-{probe.kind()}",
            )
            self._executors.append(executor)
            scheduler = threading.Thread(
                target=self._schedule,
                args=(probe, executor, self._shutdown),
                name=f"probe-scheduler-{index}-{probe.kind()}",
                daemon=True,
            )
            self._schedulers.append(scheduler)
            scheduler.start()

        self._state = OrchestratorState.RUNNING
        logger.info("Healthcheck manager started")

    def stop(self) -> None:
        """
        Signal every scheduler to exit and wait until they all have.

        In-flight checks and notifications are not waited for; queued
        checks are cancelled. Calling stop() again after it returned is
        a no-op.
        """
        if self._state is OrchestratorState.STOPPED:
            logger.debug("Healthcheck manager already stopped")
            return

        logger.info("Stopping healthcheck manager")
        self._shutdown.set()
        for scheduler in self._schedulers:
            scheduler.join()
        # Schedulers are the only submitters, so nothing is submitted from here on
        for executor in self._executors:
            executor.shutdown(wait=False, cancel_futures=True)
        self._state = OrchestratorState.STOPPED
        logger.info("Healthcheck manager stopped")

    def _require_state(self, expected: OrchestratorState, operation: str) -> None:
        if self._state is not expected:
            raise OrchestratorStateError(
                f"cannot {operation} in state {self._state.value}, "
                f"expected {expected.value}"
            )

    def _schedule(
        self, probe: Probe, executor: ThreadPoolExecutor, shutdown: threading.Event
    ) -> None:
        """
        Fixed-rate tick loop for one probe, until shutdown is set.

        Ticks missed while the loop was held up are dropped, not replayed.
        """
        interval = probe.interval()
        next_tick = time.monotonic()

        while True:
            self._dispatch_check(probe, executor)
            next_tick += interval
            now = time.monotonic()
            if next_tick <= now:
                next_tick += ((now - next_tick) // interval + 1) * interval
            if shutdown.wait(next_tick - now):
                return

    def _dispatch_check(self, probe: Probe, executor: ThreadPoolExecutor) -> None:
        future = executor.submit(probe.check, self.check_timeout)
        threading.Thread(
            target=self._run_single_check,
            args=(probe, future),
            name=f"probe-result-{probe.kind()}",
            daemon=True,
        ).start()

    def _run_single_check(self, probe: Probe, future: "Future[CheckResult]") -> None:
        """Wait for one bounded check, log it, and notify on success."""
        try:
            result = self._await_with_deadline(future)
        except Exception as e:
            logger.error(
                "Healthcheck failed with error: %s",
                e,
                extra={"probe_kind": probe.kind(), "error": str(e)},
            )
            return

        logger.info(
            "Healthcheck completed for %s: healthy=%s, %s",
            probe.kind(),
            result.healthy,
            result.message,
            extra={
                "probe_kind": probe.kind(),
                "healthy": result.healthy,
                "result_message": result.message,
                "timestamp": result.timestamp.isoformat(),
                "details": result.details,
            },
        )

        if result.healthy:
            self._dispatch_notification(probe.notify_target())

    def _await_with_deadline(self, future: "Future[CheckResult]") -> CheckResult:
        """
        Wait at most check_timeout for a submitted check.

        Time spent queued behind busy workers counts against the deadline.
        A check still queued at the deadline is cancelled.

        Raises:
            CheckDeadlineExceeded: If the check has not finished by the deadline
            Exception: Whatever probe.check raised
        """
        try:
            return future.result(timeout=self.check_timeout)
        except FutureTimeoutError as e:
            future.cancel()
            raise CheckDeadlineExceeded(
                f"check did not finish within {self.check_timeout}s"
            ) from e

    def _dispatch_notification(self, target: str) -> None:
        if not target:
            return
        threading.Thread(
            target=self.notifier.notify,
            args=(target,),
            name="probe-notify",
            daemon=True,
        ).start()
