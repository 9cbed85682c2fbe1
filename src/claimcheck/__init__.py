"""
claimcheck - Scripted test runs against a claims-adjudication service.

Sample test cases, submit them as claims, classify the outcomes.
"""

from claimcheck.outcomes import Intent, Verdict, classify
from claimcheck.aggregator import ResultAggregator
from claimcheck.classifier import ResultBuilder
from claimcheck.client import ClaimApiError, ClaimCheckClient, ClaimCheckClientError
from claimcheck.corpus import group_by_intervention, sample, select_test_cases
from claimcheck.executor import ClaimSubmitter
from claimcheck.models import TestCase, TestResult
from claimcheck.orchestrator import Orchestrator, RunState
from claimcheck.resolver import OutcomeResolver

__version__ = "0.1.0"
__all__ = [
    "ClaimApiError",
    "ClaimCheckClient",
    "ClaimCheckClientError",
    "ClaimSubmitter",
    "Intent",
    "Orchestrator",
    "OutcomeResolver",
    "ResultAggregator",
    "ResultBuilder",
    "RunState",
    "TestCase",
    "TestResult",
    "Verdict",
    "__version__",
    "classify",
    "group_by_intervention",
    "sample",
    "select_test_cases",
]
