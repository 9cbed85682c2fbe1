# Copyright (c) Syntropy Systems
"""Sequential execution of test cases with per-item lifecycle tracking."""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from claimcheck.aggregator import ResultAggregator
from claimcheck.exceptions import InvalidTransitionError, RunPreconditionError
from claimcheck.models.base import utc_timestamp
from claimcheck.models.run import ItemStatus, RunItem

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from claimcheck.models.results import RefreshResult, RunSummary, TestResult
    from claimcheck.models.testcase import TestCase
    from claimcheck.resolver import OutcomeResolver

logger = logging.getLogger(__name__)

IDLE = -1
TEST_EXECUTION_DELAY = 3.0


def _new_run_id() -> str:
    now = time.strftime("%Y%m%d-%H%M%S")
    return f"run-{now}-{str(uuid.uuid4())[:6]}"


@dataclass
class RunState:
    """Everything one run owns: its items, cursor and results."""

    items: list[RunItem]
    run_id: str = field(default_factory=_new_run_id)
    current_index: int = IDLE
    aggregator: ResultAggregator = field(default_factory=ResultAggregator)
    started_at: Optional[str] = None
    finished_at: Optional[str] = None

    @property
    def results(self) -> list[TestResult]:
        """Results recorded so far, in execution order."""
        return self.aggregator.results

    @property
    def is_running(self) -> bool:
        """Whether a batch is in progress."""
        return self.current_index != IDLE

    def summary(self) -> RunSummary:
        """Summary statistics of the recorded results."""
        return self.aggregator.summary()

    def index_of(self, key: str) -> int:
        """Position of the item with the given key."""
        for index, item in enumerate(self.items):
            if item.key == key:
                return index
        msg = f"No test case '{key}' in run {self.run_id}"
        raise KeyError(msg)


class Orchestrator:
    """Runs admitted test cases one at a time against the claims service.

    Items are executed strictly in order with a pacing delay between them.
    A failing item never stops the batch.
    """

    _submitter: Optional[Callable[[TestCase], TestResult]]
    pacing_delay: float
    _sleep: Callable[[float], None]
    _on_progress: Optional[Callable[[RunState, RunItem], None]]
    _on_complete: Optional[Callable[[RunState], None]]

    def __init__(
        self,
        submitter: Optional[Callable[[TestCase], TestResult]],
        pacing_delay: float = TEST_EXECUTION_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[Callable[[RunState, RunItem], None]] = None,
        on_complete: Optional[Callable[[RunState], None]] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            submitter: Executes one test case and returns its result
            pacing_delay: Seconds to wait between items
            sleep: Sleep function, replaceable in tests
            on_progress: Called whenever an item changes status
            on_complete: Called once after the last item of a batch

        """
        self._submitter = submitter
        self.pacing_delay = pacing_delay
        self._sleep = sleep
        self._on_progress = on_progress
        self._on_complete = on_complete

    @staticmethod
    def admit(test_cases: Iterable[TestCase]) -> RunState:
        """Create a new run with every test case pending."""
        return RunState(items=[RunItem(tc) for tc in test_cases])

    def _check_preconditions(self, run: RunState) -> Callable[[TestCase], TestResult]:
        if self._submitter is None:
            msg = "No submitter configured"
            raise RunPreconditionError(msg)
        if not run.items:
            msg = "Please add at least one test case to run"
            raise RunPreconditionError(msg)
        return self._submitter

    def _advance(self, run: RunState, item: RunItem, status: ItemStatus) -> None:
        item.advance(status)
        if self._on_progress is not None:
            self._on_progress(run, item)

    def _execute(
        self,
        run: RunState,
        item: RunItem,
        submitter: Callable[[TestCase], TestResult],
    ) -> None:
        self._advance(run, item, ItemStatus.RUNNING)
        try:
            result = submitter(item.test_case)
        except Exception:
            logger.exception("Error running test %r", item.test_case.title)
            self._advance(run, item, ItemStatus.FAILED)
            return

        run.aggregator.append(result)
        self._advance(run, item, ItemStatus.FAILED if result.error else ItemStatus.COMPLETED)

    def run_batch(self, run: RunState) -> RunState:
        """Run every item of ``run`` in order.

        Raises:
            RunPreconditionError: If there is no submitter or nothing to run

        """
        submitter = self._check_preconditions(run)

        run.items = [RunItem(item.test_case) for item in run.items]
        run.started_at = utc_timestamp()
        run.finished_at = None
        total = len(run.items)

        for index, item in enumerate(run.items):
            if index > 0 and self.pacing_delay > 0:
                self._sleep(self.pacing_delay)
            run.current_index = index
            logger.info("Running test %d/%d: %s", index + 1, total, item.test_case.title)
            self._execute(run, item, submitter)

        run.current_index = IDLE
        run.finished_at = utc_timestamp()
        logger.info("All tests completed for %s", run.run_id)
        if self._on_complete is not None:
            self._on_complete(run)
        return run

    def run_single(self, run: RunState, key: str) -> RunState:
        """Run one item of ``run`` without touching the others or the cursor.

        Only a pending item can run. A finished item stays finished for the
        rest of the run; admit a new run to execute it again.

        Raises:
            RunPreconditionError: If there is no submitter or nothing to run
            KeyError: If no item has the given key
            InvalidTransitionError: If the item already ran

        """
        submitter = self._check_preconditions(run)
        index = run.index_of(key)

        item = run.items[index]
        if item.status is not ItemStatus.PENDING:
            msg = f"Test case '{key}' already {item.status.value} in run {run.run_id}"
            raise InvalidTransitionError(msg)

        logger.info("Running single test: %s", item.test_case.title)
        self._execute(run, item, submitter)
        return run

    def refresh_result(
        self,
        run: RunState,
        claim_id: str,
        resolver: OutcomeResolver,
    ) -> RefreshResult:
        """Re-resolve a recorded claim and update its result in place.

        Raises:
            KeyError: If the run has no result for the claim

        """
        existing = run.aggregator.find(claim_id)
        if existing is None:
            msg = f"No result for claim {claim_id} in run {run.run_id}"
            raise KeyError(msg)

        refresh = resolver.refresh(claim_id, existing.test_polarity)
        _ = run.aggregator.apply_refresh(claim_id, refresh)
        return refresh
