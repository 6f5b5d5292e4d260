"""Unit tests for scaffold utilities."""

from __future__ import annotations

import pytest

from promptforge.core.scaffold.models import SLOT_KEYS, ScaffoldSlot, SlotKey
from promptforge.core.scaffold.slots import (
    create_empty_scaffold,
    get_empty_slots,
    get_filled_slots,
    get_scaffold_slot,
    has_scaffold_content,
    normalize_scaffold,
    scaffold_from_object,
    scaffold_to_object,
    update_scaffold_slot,
    validate_scaffold,
)

CANONICAL = ["S", "C", "St", "Co", "L", "A", "Q"]


class TestSlotKey:
    def test_equal_to_plain_code(self):
        assert SlotKey.STYLE == "St"
        assert {"St": 1}[SlotKey.STYLE] == 1

    def test_token(self):
        assert SlotKey.COMPOSITION.token == "{Co}"
        assert str(SlotKey.QUALITY) == "Q"


class TestCreateEmptyScaffold:
    def test_seven_empty_slots_in_order(self):
        scaffold = create_empty_scaffold()
        assert [s.key.value for s in scaffold] == CANONICAL
        assert all(s.content == "" for s in scaffold)
        assert [s.name for s in scaffold] == [
            "Subject", "Context", "Style", "Composition", "Lighting", "Atmosphere", "Quality",
        ]

    def test_instances_are_independent(self):
        first = create_empty_scaffold()
        second = create_empty_scaffold()
        first[0].content = "changed"
        assert second[0].content == ""
        assert create_empty_scaffold()[0].content == ""


class TestUpdateScaffoldSlot:
    def test_returns_new_scaffold(self):
        original = create_empty_scaffold()
        updated = update_scaffold_slot(original, "L", "golden hour", weight=1.2)
        assert original[4].content == ""
        assert updated[4].content == "golden hour"
        assert updated[4].weight == 1.2
        assert updated is not original

    def test_other_slots_untouched(self):
        updated = update_scaffold_slot(create_empty_scaffold(), SlotKey.SUBJECT, "fox")
        assert [s.content for s in updated] == ["fox", "", "", "", "", "", ""]

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError):
            update_scaffold_slot(create_empty_scaffold(), "X", "nope")

    def test_shape_preserved_for_partial_input(self):
        partial = [ScaffoldSlot(key=SlotKey.QUALITY, name="Quality", description="", content="4k")]
        updated = update_scaffold_slot(partial, "S", "owl")
        assert [s.key.value for s in updated] == CANONICAL
        assert updated[6].content == "4k"


class TestNormalize:
    def test_missing_unknown_and_duplicate_entries(self):
        scaffold = normalize_scaffold([
            {"key": "S", "content": "first"},
            {"key": "S", "content": "second"},
            {"key": "Zz", "content": "ignored"},
            {"key": "Q", "content": None},
        ])
        assert [s.key.value for s in scaffold] == CANONICAL
        assert scaffold[0].content == "first"
        assert scaffold[6].content == ""

    def test_none_input(self):
        assert [s.key.value for s in normalize_scaffold(None)] == CANONICAL

    def test_mapping_gets_catalog_name(self):
        slot = normalize_scaffold([{"key": "A", "content": "eerie"}])[5]
        assert slot.name == "Atmosphere"
        assert slot.description == "Mood, emotion, and atmospheric qualities"


class TestPartitions:
    def test_whitespace_counts_as_empty(self):
        scaffold = scaffold_from_object({"S": "cat", "C": "   ", "St": "ink"})
        assert [s.key.value for s in get_filled_slots(scaffold)] == ["S", "St"]
        assert len(get_empty_slots(scaffold)) == 5
        assert has_scaffold_content(scaffold)
        assert not has_scaffold_content(create_empty_scaffold())

    def test_get_scaffold_slot(self, sample_scaffold):
        assert get_scaffold_slot(sample_scaffold, "Co").content == "close-up"
        assert get_scaffold_slot(sample_scaffold, "nope") is None


class TestObjects:
    def test_to_object_has_exactly_seven_keys(self, sample_scaffold):
        assert list(scaffold_to_object(sample_scaffold)) == CANONICAL
        assert list(scaffold_to_object([])) == CANONICAL
        assert list(scaffold_to_object(None)) == CANONICAL

    def test_to_object_values(self, sample_scaffold, sample_values):
        assert scaffold_to_object(sample_scaffold) == sample_values

    def test_from_object_none_values(self):
        scaffold = scaffold_from_object({"S": None, "C": "x", "extra": "dropped"})
        assert scaffold_to_object(scaffold) == {
            "S": "", "C": "x", "St": "", "Co": "", "L": "", "A": "", "Q": "",
        }

    @pytest.mark.parametrize("key", list(SLOT_KEYS))
    def test_shape_invariant_after_any_update(self, key):
        updated = update_scaffold_slot(create_empty_scaffold(), key, "value")
        assert set(scaffold_to_object(updated)) == set(CANONICAL)
        assert len(updated) == 7


class TestValidateScaffold:
    def test_complete(self, sample_scaffold):
        assert validate_scaffold(sample_scaffold)

    def test_missing_slot(self, sample_scaffold):
        assert not validate_scaffold(sample_scaffold[:-1])
