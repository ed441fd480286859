"""Concurrency-bounded monitoring cycle scheduler."""

import asyncio
import logging
import time
from typing import Callable, List

from ..config.models import MonitorSystemConfig
from ..utils.metrics import CheckResult
from .dispatcher import NotificationDispatcher
from .executor import CheckExecutor
from .state import MonitorState
from .topology import ProbeInstance, build_instances


def result_sort_key(result: CheckResult):
    """Deterministic reconciliation order: category, server, check label."""
    return (result.category, result.server_name, result.check_label)


class CycleScheduler:
    """
    Drives the perpetual monitoring loop.

    Each cycle expands the topology, runs one task per probe instance with
    at most `max_concurrency` executing at once, sorts the completed results
    and feeds them one by one to the state reconciler.
    """

    def __init__(
        self,
        config: MonitorSystemConfig,
        executor: CheckExecutor,
        state: MonitorState,
        dispatcher: NotificationDispatcher,
        logger: logging.Logger,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize scheduler.

        Args:
            config: Monitor configuration
            executor: Runs a single instance with retries
            state: Shared monitor state
            dispatcher: Receives detected transitions
            logger: Logger instance
            clock: Monotonic clock in seconds used for interval pacing
        """
        self.config = config
        self.executor = executor
        self.state = state
        self.dispatcher = dispatcher
        self.logger = logger.getChild(self.__class__.__name__)
        self.clock = clock
        self.semaphore = asyncio.Semaphore(config.max_concurrency)

    def initialize_state(self) -> int:
        """Seed placeholders for every known tracked key."""
        self.logger.info("Initializing infrastructure mesh state...")
        tracked = self.state.seed(build_instances(self.config))
        self.logger.info(f"Mesh state warmed with {tracked} tracking points")
        return tracked

    async def _run_instance(self, instance: ProbeInstance) -> CheckResult:
        # The permit is held for the whole retry sequence
        async with self.semaphore:
            return await self.executor.execute_with_retry(instance)

    async def run_cycle(self) -> List[CheckResult]:
        """
        Execute one complete monitoring cycle.

        Instances whose task errors or is cancelled are dropped for this
        cycle; their keys keep the previous result.

        Returns:
            List[CheckResult]: Reconciled results in reconciliation order
        """
        start_time = self.clock()
        instances = build_instances(self.config)

        outcomes = await asyncio.gather(
            *(self._run_instance(instance) for instance in instances),
            return_exceptions=True
        )

        results = []
        for instance, outcome in zip(instances, outcomes):
            if isinstance(outcome, BaseException):
                self.logger.debug(f"Dropping {instance.key} this cycle: {outcome!r}")
                continue
            results.append(outcome)

        results.sort(key=result_sort_key)

        transitions = 0
        for result in results:
            transition = self.state.reconcile(result)
            if transition is not None:
                transitions += 1
                self.dispatcher.dispatch(transition)

        duration = self.clock() - start_time
        self.logger.info(
            f"Cycle completed {len(instances)} checks in {duration:.2f}s",
            extra={
                "checks": len(instances),
                "reconciled": len(results),
                "transitions": transitions
            }
        )
        return results

    async def run_forever(self):
        """
        Run cycles on a fixed interval measured from each cycle's start.

        A cycle that overruns the interval is followed immediately by the next.
        """
        self.logger.info(f"Max concurrency: {self.config.max_concurrency} workers")
        self.initialize_state()

        while True:
            cycle_start = self.clock()

            try:
                await self.run_cycle()
            except Exception:
                self.logger.error("Monitoring cycle failed", exc_info=True)

            remaining = self.config.check_interval - (self.clock() - cycle_start)
            if remaining > 0:
                await asyncio.sleep(remaining)
