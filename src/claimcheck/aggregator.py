# Copyright (c) Syntropy Systems
"""Ordered result collection with summary statistics."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from claimcheck.models.base import utc_timestamp
from claimcheck.models.results import RunSummary
from claimcheck.outcomes import ClaimState, Verdict

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from claimcheck.models.results import RefreshResult, TestResult


def pass_rate(passed: int, total: int) -> int:
    """Percentage of passes, rounded half up; 0 for an empty run."""
    if total <= 0:
        return 0
    return int(math.floor(100 * passed / total + 0.5))


class ResultAggregator:
    """Holds the results of one run in execution order."""

    _results: list[TestResult]

    def __init__(self, results: Iterable[TestResult] | None = None) -> None:
        self._results = list(results) if results is not None else []

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[TestResult]:
        return iter(list(self._results))

    @property
    def results(self) -> list[TestResult]:
        """Snapshot of the results in order."""
        return list(self._results)

    def append(self, result: TestResult) -> None:
        """Add a result to the end of the run."""
        self._results.append(result)

    def extend(self, results: Iterable[TestResult]) -> None:
        """Add several results in order."""
        self._results.extend(results)

    def find(self, claim_id: str) -> Optional[TestResult]:
        """First result recorded for a claim, if any."""
        for result in self._results:
            if result.claim_id == claim_id:
                return result
        return None

    def summary(self) -> RunSummary:
        """Count passes, failures and pending outcomes.

        A result whose outcome is still Pending is counted as pending rather
        than failed.
        """
        total = len(self._results)
        passed = sum(1 for r in self._results if r.status is Verdict.PASSED)
        pending = sum(1 for r in self._results if r.outcome == ClaimState.PENDING)
        failed = sum(
            1 for r in self._results
            if r.status is Verdict.FAILED and r.outcome != ClaimState.PENDING
        )
        return RunSummary(
            total=total,
            passed=passed,
            failed=failed,
            pending=pending,
            pass_rate=pass_rate(passed, total),
        )

    def apply_refresh(self, claim_id: str, refresh: RefreshResult) -> int:
        """Update every result for ``claim_id`` in place.

        Returns:
            Number of results updated

        """
        updated = 0
        timestamp = utc_timestamp()
        for result in self._results:
            if result.claim_id != claim_id:
                continue
            result.outcome = refresh.outcome
            result.status = refresh.status
            result.message = refresh.message
            result.timestamp = timestamp
            updated += 1
        return updated
