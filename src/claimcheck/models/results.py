# Copyright (c) Syntropy Systems
"""Pydantic models for test results and run summaries."""

from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import Field

from claimcheck.outcomes import Intent, Verdict

from .base import ClaimCheckBaseModel, JSONValue, utc_timestamp


class TestResult(ClaimCheckBaseModel):
    """Outcome of executing one test case."""

    __test__: ClassVar[bool] = False

    id: str
    claim_id: Optional[str] = None
    test_polarity: Optional[Intent] = None
    testcase_id: Optional[int] = None
    name: str
    use: Optional[str] = None
    status: Verdict
    outcome: str = ""
    duration: int = 0
    timestamp: str = Field(default_factory=utc_timestamp)
    message: str = ""
    # Set when submission or outcome resolution raised
    error: Optional[str] = None
    details: dict[str, JSONValue] = Field(default_factory=dict)

    @property
    def passed(self) -> bool:
        """Whether the verdict is a pass."""
        return self.status is Verdict.PASSED


class RefreshResult(ClaimCheckBaseModel):
    """Re-derived outcome and verdict for an already submitted claim."""

    outcome: str
    status: Verdict
    message: str


class RunSummary(ClaimCheckBaseModel):
    """Aggregate counts for a run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    pending: int = 0
    pass_rate: int = 0


class RunReport(ClaimCheckBaseModel):
    """Saved results of a run, as written by ``claimcheck run --output``."""

    run_id: str
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    summary: RunSummary = Field(default_factory=RunSummary)
    results: list[TestResult] = Field(default_factory=list)
