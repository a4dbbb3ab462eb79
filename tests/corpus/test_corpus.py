"""Tests for the factlet corpus and its models."""

import pytest

from factlet.corpus import CORPUS, Category, Factlet, Level, get_factlet, random_factlet


class TestCorpus:
    """Tests for the static collection."""

    def test_ids_are_unique(self):
        ids = [f.id for f in CORPUS]
        assert len(ids) == len(set(ids))

    def test_eight_per_category(self):
        for category in Category.concrete():
            assert len([f for f in CORPUS if f.category is category]) == 8

    def test_no_wildcard_factlets(self):
        assert all(not f.category.is_wildcard for f in CORPUS)

    def test_level_split_per_category(self):
        science = [f for f in CORPUS if f.category is Category.SCIENCE]
        assert [f.level for f in science].count(Level.LEVEL_1) == 3
        assert [f.level for f in science].count(Level.LEVEL_2) == 3
        assert [f.level for f in science].count(Level.LEVEL_3) == 2

    def test_get_factlet(self):
        assert get_factlet("F001") is CORPUS[0]
        assert get_factlet("missing") is None

    def test_random_factlet_is_member(self):
        import random

        assert random_factlet(random.Random(7)) in CORPUS


class TestCategory:
    def test_concrete_excludes_wildcard(self):
        assert Category.ALL not in Category.concrete()
        assert len(Category.concrete()) == 8

    @pytest.mark.parametrize("name", ["Human Body", "human_body", "HUMAN BODY"])
    def test_parse(self, name):
        assert Category.parse(name) is Category.HUMAN_BODY

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown category"):
            Category.parse("Astrology")


class TestLevel:
    def test_order_and_lowest(self):
        assert [lv.rank for lv in Level] == [1, 2, 3]
        assert Level.lowest() is Level.LEVEL_1

    @pytest.mark.parametrize("name", ["level2", "Level 2", "LEVEL_2", "2"])
    def test_parse(self, name):
        assert Level.parse(name) is Level.LEVEL_2

    def test_display_name(self):
        assert Level.LEVEL_3.display_name == "Level 3"


class TestFactletSerialization:
    def test_from_dict(self):
        factlet = Factlet.from_dict(
            {"id": "F009", "text": "x", "category": "History", "level": "level2"}
        )
        assert factlet == Factlet("F009", "x", Category.HISTORY, Level.LEVEL_2)

    def test_legacy_record_without_level(self):
        factlet = Factlet.from_dict({"id": "abc", "fact": "Old text", "category": "Nature"})
        assert factlet.text == "Old text"
        assert factlet.level is Level.LEVEL_1

    def test_rejects_wildcard_category(self):
        with pytest.raises(ValueError):
            Factlet.from_dict({"id": "x", "text": "t", "category": "All"})

    def test_to_dict_keys(self):
        assert set(CORPUS[0].to_dict()) == {"id", "text", "category", "level"}
