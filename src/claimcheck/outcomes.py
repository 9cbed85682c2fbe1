# Copyright (c) Syntropy Systems
"""Claim outcome vocabulary and the verdict policy table."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union, cast

if TYPE_CHECKING:
    from collections.abc import Mapping


class Intent(str, Enum):
    """What a test case expects the adjudication service to do with its claim."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    BUILD = "build"
    COMPLEX = "complex"

    @classmethod
    def parse(cls, value: object) -> Optional[Intent]:
        """Return the matching intent, or None for anything unrecognised."""
        if isinstance(value, Intent):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Verdict(str, Enum):
    """Derived pass/fail status of a test result."""

    PASSED = "passed"
    FAILED = "failed"


class ClaimState:
    """Display strings reported by the adjudication service."""

    APPROVED = "Approved"
    SENT_FOR_PAYMENT = "Sent for payment processing"
    CLINICAL_REVIEW = "Medical Review"
    MANUAL_REVIEW = "Manual Review"
    IN_REVIEW = "In Review"
    PENDING = "Pending"
    DECLINED = "Declined"
    REJECTED = "Rejected"
    SENT_BACK = "Returned back"
    DECLINE = "Decline"


POSITIVE_OUTCOMES = frozenset({
    ClaimState.APPROVED,
    ClaimState.SENT_FOR_PAYMENT,
    ClaimState.CLINICAL_REVIEW,
    ClaimState.MANUAL_REVIEW,
})

NEGATIVE_OUTCOMES = frozenset({
    ClaimState.DECLINED,
    ClaimState.REJECTED,
    ClaimState.SENT_BACK,
    ClaimState.DECLINE,
})

# Intents that expect the claim to be accepted
ACCEPTING_INTENTS = frozenset({Intent.POSITIVE, Intent.BUILD, Intent.COMPLEX})

# Substituted when the outcome lookup itself fails
OUTCOME_ERROR = "Error determining outcome"

STATE_EXTENSION_SUFFIX = "claim-state-extension"
STATE_SYSTEM_SUFFIX = "claim-state"


def classify(
    intent: Union[Intent, str, None],
    submission_succeeded: bool,
    outcome: Optional[str],
) -> Verdict:
    """Classify a test run against the policy table.

    A negative test passes on any rejection outcome even when the submission
    itself failed; every other intent needs a successful submission and an
    accepting outcome. Unknown intents and outcomes are simply failures.
    """
    parsed = Intent.parse(intent)
    if parsed is None:
        return Verdict.FAILED

    if parsed is Intent.NEGATIVE:
        return Verdict.PASSED if outcome in NEGATIVE_OUTCOMES else Verdict.FAILED

    if submission_succeeded and parsed in ACCEPTING_INTENTS:
        return Verdict.PASSED if outcome in POSITIVE_OUTCOMES else Verdict.FAILED

    return Verdict.FAILED


def _as_list(value: object) -> list[object]:
    if isinstance(value, list):
        return cast("list[object]", value)
    return []


def extract_claim_state(resource: Mapping[str, object] | None) -> str:
    """Read the claim state display text from a claim or claim-response resource.

    Returns an empty string when the extension, coding or display is missing.
    """
    if not resource:
        return ""

    for extension in _as_list(resource.get("extension")):
        if not isinstance(extension, dict):
            continue
        url = extension.get("url")
        if not isinstance(url, str) or not url.endswith(STATE_EXTENSION_SUFFIX):
            continue

        concept = extension.get("valueCodeableConcept")
        if not isinstance(concept, dict):
            return ""
        for coding in _as_list(concept.get("coding")):
            if not isinstance(coding, dict):
                continue
            system = coding.get("system")
            if isinstance(system, str) and system.endswith(STATE_SYSTEM_SUFFIX):
                display = coding.get("display")
                return display if isinstance(display, str) else ""
        return ""

    return ""
