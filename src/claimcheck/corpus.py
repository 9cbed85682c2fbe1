# Copyright (c) Syntropy Systems
"""Test corpus grouping and random sampling."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Optional

from claimcheck.outcomes import Intent

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from claimcheck.models.testcase import TestCase

MAX_RANDOM_TEST_CASES_PER_TYPE = 2

PolarityOrigin = Literal["explicit", "description", "unclassified"]


@dataclass(frozen=True)
class PolarityTag:
    """How a test case's polarity was determined."""

    polarity: Optional[Intent]
    origin: PolarityOrigin


def resolve_polarity(test_case: TestCase) -> PolarityTag:
    """Determine a test case's polarity.

    The explicit intent wins. Without one, the description is searched for
    "positive" then "negative" as a last resort.
    """
    if test_case.intent is not None:
        return PolarityTag(test_case.intent, "explicit")

    description = (test_case.description or "").lower()
    if "positive" in description:
        return PolarityTag(Intent.POSITIVE, "description")
    if "negative" in description:
        return PolarityTag(Intent.NEGATIVE, "description")
    return PolarityTag(None, "unclassified")


@dataclass
class InterventionGroup:
    """Test cases for one intervention, bucketed by polarity."""

    positive: list[TestCase] = field(default_factory=list)
    negative: list[TestCase] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.positive) + len(self.negative)


def group_by_intervention(test_cases: Iterable[TestCase]) -> dict[int, InterventionGroup]:
    """Group test cases by intervention id.

    Cases without an intervention (a missing or zero id) are skipped.
    Cases that are neither positive nor negative (build, complex, unclassified) are not bucketed.
    """
    groups: dict[int, InterventionGroup] = {}

    for test_case in test_cases:
        if not test_case.intervention_id:
            continue

        group = groups.setdefault(test_case.intervention_id, InterventionGroup())
        tag = resolve_polarity(test_case)
        if tag.polarity is Intent.POSITIVE:
            group.positive.append(test_case)
        elif tag.polarity is Intent.NEGATIVE:
            group.negative.append(test_case)

    return groups


def _draw(bucket: list[TestCase], cap: int, rng: random.Random) -> list[TestCase]:
    if not bucket:
        return []
    shuffled = list(bucket)
    rng.shuffle(shuffled)
    return shuffled[: min(cap, len(shuffled))]


def sample(
    groups: dict[int, InterventionGroup],
    cap_per_polarity: int = MAX_RANDOM_TEST_CASES_PER_TYPE,
    rng: random.Random | None = None,
) -> list[TestCase]:
    """Draw up to ``cap_per_polarity`` cases from each polarity of each group.

    Output is ordered by intervention, positives before negatives.
    """
    if cap_per_polarity < 0:
        msg = f"cap_per_polarity must be >= 0, got {cap_per_polarity}"
        raise ValueError(msg)

    if rng is None:
        rng = random.Random()  # noqa: S311

    selected: list[TestCase] = []
    for group in groups.values():
        selected.extend(_draw(group.positive, cap_per_polarity, rng))
        selected.extend(_draw(group.negative, cap_per_polarity, rng))
    return selected


def select_test_cases(
    test_cases: Iterable[TestCase],
    cap_per_polarity: int = MAX_RANDOM_TEST_CASES_PER_TYPE,
    rng: random.Random | None = None,
    intervention_ids: Collection[int] | None = None,
) -> list[TestCase]:
    """Scope a corpus to some interventions, group it and sample it."""
    if intervention_ids is not None:
        wanted = set(intervention_ids)
        test_cases = [tc for tc in test_cases if tc.intervention_id in wanted]
    return sample(group_by_intervention(test_cases), cap_per_polarity, rng)
