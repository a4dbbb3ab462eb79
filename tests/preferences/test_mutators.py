"""Tests for pure preference transitions."""

from datetime import datetime, timezone

import pytest

from factlet.corpus import CORPUS, Category, Level
from factlet.preferences import NotificationFrequency, Preferences, RefreshInterval, TextColor
from factlet.preferences import mutators


@pytest.fixture
def prefs() -> Preferences:
    return Preferences()


class TestToggleCategory:
    def test_wildcard_always_resets(self, prefs):
        prefs = mutators.toggle_category(prefs, Category.SCIENCE)
        prefs = mutators.toggle_category(prefs, Category.HISTORY)
        result = mutators.toggle_category(prefs, Category.ALL)
        assert result.selected_categories == {Category.ALL}

    def test_wildcard_on_wildcard(self, prefs):
        assert mutators.toggle_category(prefs, Category.ALL).selected_categories == {Category.ALL}

    def test_concrete_replaces_wildcard(self, prefs):
        result = mutators.toggle_category(prefs, Category.SCIENCE)
        assert result.selected_categories == {Category.SCIENCE}

    def test_adds_second_category(self, prefs):
        prefs = mutators.toggle_category(prefs, Category.SCIENCE)
        result = mutators.toggle_category(prefs, Category.NATURE)
        assert result.selected_categories == {Category.SCIENCE, Category.NATURE}

    def test_removing_last_falls_back_to_wildcard(self, prefs):
        prefs = mutators.toggle_category(prefs, Category.SCIENCE)
        result = mutators.toggle_category(prefs, Category.SCIENCE)
        assert result.selected_categories == {Category.ALL}

    def test_input_is_untouched(self, prefs):
        mutators.toggle_category(prefs, Category.SCIENCE)
        assert prefs.selected_categories == {Category.ALL}


class TestToggleLevel:
    def test_per_category_remove(self, prefs):
        result = mutators.toggle_level(prefs, Level.LEVEL_2, Category.SCIENCE)
        assert result.levels_for(Category.SCIENCE) == {Level.LEVEL_1, Level.LEVEL_3}
        assert result.levels_for(Category.HISTORY) == set(Level)

    def test_per_category_add_back(self, prefs):
        prefs = mutators.toggle_level(prefs, Level.LEVEL_2, Category.SCIENCE)
        result = mutators.toggle_level(prefs, Level.LEVEL_2, Category.SCIENCE)
        assert result.levels_for(Category.SCIENCE) == set(Level)

    def test_removing_sole_level_reinserts_lowest(self, prefs):
        prefs = mutators.toggle_level(prefs, Level.LEVEL_1, Category.SCIENCE)
        prefs = mutators.toggle_level(prefs, Level.LEVEL_2, Category.SCIENCE)
        assert prefs.levels_for(Category.SCIENCE) == {Level.LEVEL_3}

        result = mutators.toggle_level(prefs, Level.LEVEL_3, Category.SCIENCE)
        assert result.levels_for(Category.SCIENCE) == {Level.LEVEL_1}

    def test_removing_sole_lowest_keeps_lowest(self, prefs):
        prefs = mutators.toggle_level(prefs, Level.LEVEL_2, Category.NATURE)
        prefs = mutators.toggle_level(prefs, Level.LEVEL_3, Category.NATURE)
        result = mutators.toggle_level(prefs, Level.LEVEL_1, Category.NATURE)
        assert result.levels_for(Category.NATURE) == {Level.LEVEL_1}

    def test_wildcard_category_is_rejected(self, prefs):
        assert mutators.toggle_level(prefs, Level.LEVEL_1, Category.ALL) is prefs

    def test_flat_toggle_spans_selected_categories(self, prefs):
        prefs = mutators.toggle_category(prefs, Category.SCIENCE)
        prefs = mutators.toggle_category(prefs, Category.HISTORY)
        result = mutators.toggle_level(prefs, Level.LEVEL_3)
        assert result.levels_for(Category.SCIENCE) == {Level.LEVEL_1, Level.LEVEL_2}
        assert result.levels_for(Category.HISTORY) == {Level.LEVEL_1, Level.LEVEL_2}
        assert result.levels_for(Category.NATURE) == set(Level)

    def test_flat_toggle_with_wildcard_spans_everything(self, prefs):
        result = mutators.toggle_level(prefs, Level.LEVEL_2)
        for category in Category.concrete():
            assert Level.LEVEL_2 not in result.levels_for(category)

    def test_flat_toggle_adds_when_partially_selected(self, prefs):
        prefs = mutators.toggle_level(prefs, Level.LEVEL_3, Category.SCIENCE)
        result = mutators.toggle_level(prefs, Level.LEVEL_3)
        for category in Category.concrete():
            assert Level.LEVEL_3 in result.levels_for(category)

    def test_never_empty_for_any_sequence(self, prefs):
        for level in list(Level) * 3:
            prefs = mutators.toggle_level(prefs, level, Category.GEOGRAPHY)
            assert prefs.levels_for(Category.GEOGRAPHY)
            prefs = mutators.toggle_level(prefs, level)
            for category in Category.concrete():
                assert prefs.levels_for(category)


class TestIsLevelSelected:
    def test_per_category(self, prefs):
        prefs = mutators.toggle_level(prefs, Level.LEVEL_1, Category.SCIENCE)
        assert mutators.is_level_selected(prefs, Level.LEVEL_1, Category.SCIENCE) is False
        assert mutators.is_level_selected(prefs, Level.LEVEL_1, Category.HISTORY) is True

    def test_flat_requires_every_active_category(self, prefs):
        prefs = mutators.toggle_level(prefs, Level.LEVEL_1, Category.SCIENCE)
        assert mutators.is_level_selected(prefs, Level.LEVEL_1) is False


class TestSimpleSetters:
    def test_set_refresh_interval(self, prefs):
        result = mutators.set_refresh_interval(prefs, RefreshInterval.DAILY)
        assert result.refresh_interval is RefreshInterval.DAILY

    def test_set_text_color(self, prefs):
        assert mutators.set_text_color(prefs, TextColor.LIGHT).text_color is TextColor.LIGHT

    def test_notification_frequency_toggles_enabled(self, prefs):
        on = mutators.set_notification_frequency(prefs, NotificationFrequency.DAILY)
        assert on.notifications_enabled is True
        off = mutators.set_notification_frequency(on, NotificationFrequency.OFF)
        assert off.notifications_enabled is False

    def test_set_current_factlet_stamps_time(self, prefs):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        result = mutators.set_current_factlet(prefs, CORPUS[5], now)
        assert result.current_factlet is CORPUS[5]
        assert result.last_update == now

    def test_set_selected_categories_normalizes(self, prefs):
        assert mutators.set_selected_categories(prefs, []).selected_categories == {Category.ALL}
        mixed = mutators.set_selected_categories(prefs, [Category.ALL, Category.SCIENCE])
        assert mixed.selected_categories == {Category.ALL}

    def test_set_category_levels_drops_wildcard_and_empty(self, prefs):
        result = mutators.set_category_levels(
            prefs,
            {Category.ALL: {Level.LEVEL_1}, Category.SCIENCE: set(), Category.NATURE: {Level.LEVEL_2}},
        )
        assert result.category_levels == {Category.NATURE: frozenset({Level.LEVEL_2})}

    def test_complete_onboarding(self, prefs):
        assert mutators.complete_onboarding(prefs).has_completed_onboarding is True
