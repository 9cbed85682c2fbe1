# Copyright (c) Syntropy Systems
"""Tests for corpus grouping and sampling."""

import random

import pytest
from fakes import make_record

from claimcheck.corpus import (
    group_by_intervention,
    resolve_polarity,
    sample,
    select_test_cases,
)
from claimcheck.models import TestCase
from claimcheck.outcomes import Intent


@pytest.fixture
def test_cases(corpus_records):
    return [TestCase.from_record(r) for r in corpus_records]


class TestResolvePolarity:
    """Tests for polarity resolution."""

    def test_explicit_intent_wins(self):
        tc = TestCase.from_record(
            make_record(1, 1, "positive", "t", description="a negative scenario")
        )
        tag = resolve_polarity(tc)
        assert tag.polarity is Intent.POSITIVE
        assert tag.origin == "explicit"

    def test_description_fallback(self):
        tc = TestCase.from_record(make_record(1, 1, None, "t", description="Negative path"))
        tag = resolve_polarity(tc)
        assert tag.polarity is Intent.NEGATIVE
        assert tag.origin == "description"

    def test_positive_checked_before_negative(self):
        tc = TestCase(title="t", description="positive then negative")
        assert resolve_polarity(tc).polarity is Intent.POSITIVE

    def test_unclassified(self):
        tag = resolve_polarity(TestCase(title="t"))
        assert tag.polarity is None
        assert tag.origin == "unclassified"


class TestGroupByIntervention:
    """Tests for grouping."""

    def test_buckets(self, test_cases):
        groups = group_by_intervention(test_cases)

        assert set(groups) == {10, 20}
        assert [tc.id for tc in groups[10].positive] == [1, 2, 3]
        assert [tc.id for tc in groups[10].negative] == [4, 5]
        assert [tc.id for tc in groups[20].positive] == [6]
        assert [tc.id for tc in groups[20].negative] == [7]

    def test_build_cases_are_not_bucketed(self, test_cases):
        groups = group_by_intervention(test_cases)
        assert len(groups[20]) == 2

    def test_cases_without_intervention_are_skipped(self):
        groups = group_by_intervention([TestCase(title="t", intent=Intent.POSITIVE)])
        assert groups == {}

    def test_intervention_zero_is_skipped(self):
        case = TestCase.from_record(make_record(1, 0, "positive", "zero"))
        assert group_by_intervention([case]) == {}


class TestSample:
    """Tests for random sampling."""

    def test_caps_each_polarity(self, test_cases):
        selected = sample(group_by_intervention(test_cases), 2, random.Random(1))

        by_group = [tc for tc in selected if tc.intervention_id == 10]
        assert len(by_group) == 4
        assert sum(1 for tc in by_group if tc.intent is Intent.POSITIVE) == 2
        assert len([tc for tc in selected if tc.intervention_id == 20]) == 2

    def test_positives_before_negatives_within_group(self, test_cases):
        selected = sample(group_by_intervention(test_cases), 2, random.Random(3))
        group_10 = [resolve_polarity(tc).polarity for tc in selected if tc.intervention_id == 10]
        assert group_10 == [Intent.POSITIVE, Intent.POSITIVE, Intent.NEGATIVE, Intent.NEGATIVE]

    def test_seeded_rng_is_reproducible(self, test_cases):
        groups = group_by_intervention(test_cases)
        first = [tc.id for tc in sample(groups, 1, random.Random(42))]
        second = [tc.id for tc in sample(groups, 1, random.Random(42))]
        assert first == second

    def test_no_duplicates(self, test_cases):
        selected = sample(group_by_intervention(test_cases), 5, random.Random(0))
        ids = [tc.id for tc in selected]
        assert len(ids) == len(set(ids)) == 7

    def test_does_not_mutate_groups(self, test_cases):
        groups = group_by_intervention(test_cases)
        before = [tc.id for tc in groups[10].positive]
        _ = sample(groups, 1, random.Random(9))
        assert [tc.id for tc in groups[10].positive] == before

    def test_zero_cap_selects_nothing(self, test_cases):
        assert sample(group_by_intervention(test_cases), 0) == []

    def test_negative_cap_rejected(self, test_cases):
        with pytest.raises(ValueError, match="cap_per_polarity"):
            _ = sample(group_by_intervention(test_cases), -1)


class TestSelectTestCases:
    """Tests for scoped selection."""

    def test_scopes_to_interventions(self, test_cases):
        selected = select_test_cases(test_cases, 2, random.Random(0), intervention_ids=[20])
        assert {tc.id for tc in selected} == {6, 7}

    def test_unknown_intervention_selects_nothing(self, test_cases):
        assert select_test_cases(test_cases, 2, intervention_ids={99}) == []
