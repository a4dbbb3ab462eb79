"""Tests for the selection engine."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from factlet.corpus import CORPUS, Category, Factlet, Level
from factlet.preferences import RefreshInterval
from factlet.selection import filter_corpus, is_refresh_due, next_refresh_time, pick_random

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestFilterCorpus:
    """Tests for filter_corpus."""

    def test_science_level1(self):
        result = filter_corpus(CORPUS, {Category.SCIENCE}, {Level.LEVEL_1})
        assert [f.id for f in result] == ["F001", "F002", "F003"]

    def test_wildcard_expands_to_all_categories(self):
        result = filter_corpus(CORPUS, {Category.ALL}, set(Level))
        assert result == list(CORPUS)

    def test_wildcard_respects_levels(self):
        result = filter_corpus(CORPUS, {Category.ALL}, {Level.LEVEL_3})
        assert len(result) == 16
        assert {f.category for f in result} == set(Category.concrete())
        assert all(f.level is Level.LEVEL_3 for f in result)

    def test_only_selected_categories_and_levels(self):
        selection = {Category.HISTORY, Category.NATURE}
        levels = {Level.LEVEL_2, Level.LEVEL_3}
        result = filter_corpus(CORPUS, selection, levels)
        assert len(result) == 10
        assert all(f.category in selection and f.level in levels for f in result)

    def test_preserves_corpus_order(self):
        result = filter_corpus(CORPUS, {Category.TECHNOLOGY, Category.SCIENCE}, set(Level))
        positions = [CORPUS.index(f) for f in result]
        assert positions == sorted(positions)

    def test_per_category_callable(self):
        levels = {Category.SCIENCE: {Level.LEVEL_1}, Category.HISTORY: {Level.LEVEL_3}}
        result = filter_corpus(CORPUS, {Category.SCIENCE, Category.HISTORY}, levels.get)
        assert len(result) == 5
        for factlet in result:
            assert factlet.level in levels[factlet.category]

    def test_per_category_mapping(self):
        levels = {Category.SCIENCE: {Level.LEVEL_2}}
        result = filter_corpus(CORPUS, {Category.SCIENCE}, levels)
        assert {f.level for f in result} == {Level.LEVEL_2}

    def test_missing_category_entry_means_all_levels(self):
        levels = {Category.SCIENCE: {Level.LEVEL_1}}
        result = filter_corpus(CORPUS, {Category.SCIENCE, Category.NATURE}, levels.get)
        assert len(result) == 3 + 8

    def test_empty_result_is_allowed(self):
        assert filter_corpus(CORPUS, {Category.SCIENCE}, set()) == []
        assert filter_corpus([], {Category.ALL}, set(Level)) == []


def _sample(n: int) -> list[Factlet]:
    return [Factlet(f"T{i}", f"fact {i}", Category.SCIENCE) for i in range(n)]


class TestPickRandom:
    """Tests for pick_random."""

    def test_empty_falls_back_to_corpus(self):
        rng = random.Random(0)
        for _ in range(20):
            assert pick_random([], "F001", rng) in CORPUS

    def test_empty_uses_given_corpus(self):
        pool = _sample(2)
        assert pick_random([], None, random.Random(0), corpus=pool) in pool

    def test_single_element_returned_even_if_excluded(self):
        only = _sample(1)
        assert pick_random(only, "T0", random.Random(0)) is only[0]

    @pytest.mark.parametrize("seed", range(25))
    def test_never_returns_excluded_when_alternative_exists(self, seed):
        pool = _sample(2)
        assert pick_random(pool, "T0", random.Random(seed)).id == "T1"

    def test_duplicates_of_excluded_only(self):
        same = [Factlet("X", "a", Category.SCIENCE), Factlet("X", "a", Category.SCIENCE)]
        assert pick_random(same, "X", random.Random(0)).id == "X"

    def test_seeded_picks_are_reproducible(self):
        pool = _sample(10)
        first = [pick_random(pool, None, random.Random(42)).id for _ in range(3)]
        second = [pick_random(pool, None, random.Random(42)).id for _ in range(3)]
        assert first == second

    def test_draws_cover_pool(self):
        pool = _sample(4)
        rng = random.Random(3)
        seen = {pick_random(pool, None, rng).id for _ in range(200)}
        assert seen == {f.id for f in pool}


class TestRefreshTiming:
    """Tests for is_refresh_due and next_refresh_time."""

    def test_first_run_is_due(self):
        assert is_refresh_due(None, RefreshInterval.DAILY, NOW) is True

    def test_not_due_right_after_refresh(self):
        assert is_refresh_due(NOW, RefreshInterval.HOURLY, NOW) is False

    def test_due_exactly_at_interval(self):
        interval = RefreshInterval.HOURLY
        just_before = NOW + timedelta(seconds=interval.seconds - 1)
        exactly = NOW + timedelta(seconds=interval.seconds)
        assert is_refresh_due(NOW, interval, just_before) is False
        assert is_refresh_due(NOW, interval, exactly) is True

    @pytest.mark.parametrize(
        "interval,seconds",
        [
            (RefreshInterval.HOURLY, 3600),
            (RefreshInterval.TWICE_DAILY, 43200),
            (RefreshInterval.DAILY, 86400),
        ],
    )
    def test_next_refresh_time(self, interval, seconds):
        assert next_refresh_time(NOW, interval) == NOW + timedelta(seconds=seconds)

    def test_next_refresh_time_clamps_at_max(self):
        end = datetime.max.replace(tzinfo=timezone.utc) - timedelta(minutes=1)
        assert next_refresh_time(end, RefreshInterval.DAILY) == datetime.max.replace(tzinfo=timezone.utc)
