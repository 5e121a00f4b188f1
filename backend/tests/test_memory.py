"""Tests for session memory merge, gating and payload sanitization."""

from datetime import date

import pytest

from concierge.services.dates import DateRange
from concierge.services.memory import (
    SessionMemory,
    criteria_met,
    merge,
    missing_fields,
)
from concierge.services.slots import ExtractedSlots

JAN = DateRange(date(2026, 1, 7), date(2026, 1, 10))


class TestMerge:

    def test_extracted_values_fill_empty_memory(self):
        merged = merge(SessionMemory(), ExtractedSlots(location="Rome, Italy", guest_count=2))
        assert merged.location == "Rome, Italy"
        assert merged.guest_count == 2
        assert merged.category is None

    def test_absent_extraction_never_erases(self):
        memory = SessionMemory(location="Rome, Italy", category="Food, Drinks & Culinary",
                               date_range=JAN, guest_count=2)
        assert merge(memory, ExtractedSlots()) == memory

    def test_newer_value_overrides(self):
        memory = SessionMemory(location="Rome, Italy", guest_count=2)
        merged = merge(memory, ExtractedSlots(location="Paris, France"))
        assert merged.location == "Paris, France"
        assert merged.guest_count == 2

    def test_merge_returns_new_value(self):
        memory = SessionMemory()
        merged = merge(memory, ExtractedSlots(category="Nature & Wildlife"))
        assert memory.category is None
        assert merged is not memory

    def test_keywords_union_case_insensitive_oldest_first(self):
        memory = SessionMemory(keywords=("Food", "rome"))
        merged = merge(memory, ExtractedSlots(keywords=("food", "tour")))
        assert merged.keywords == ("Food", "rome", "tour")

    def test_keywords_capped_keeps_oldest(self):
        memory = SessionMemory(keywords=tuple(f"old{i}" for i in range(10)))
        merged = merge(memory, ExtractedSlots(keywords=("new1", "new2", "new3", "new4")))
        assert len(merged.keywords) == 12
        assert merged.keywords[-2:] == ("new1", "new2")


class TestGate:

    def test_missing_fields_in_fixed_order(self):
        assert missing_fields(SessionMemory()) == ["location", "category", "dates", "guests"]
        assert missing_fields(SessionMemory(category="Nature & Wildlife", guest_count=3)) == [
            "location", "dates",
        ]

    def test_criteria_met_only_when_all_four_present(self):
        partial = SessionMemory(location="Rome, Italy", category="Food, Drinks & Culinary", date_range=JAN)
        assert not criteria_met(partial)
        complete = merge(partial, ExtractedSlots(guest_count=2))
        assert criteria_met(complete)
        assert missing_fields(complete) == []


class TestPayload:

    def test_round_trip(self):
        memory = SessionMemory(location="Rome, Italy", category="Food, Drinks & Culinary",
                               date_range=JAN, guest_count=2, keywords=("food", "tour"))
        payload = memory.to_payload()
        assert payload == {
            "location": "Rome, Italy",
            "category": "Food, Drinks & Culinary",
            "dateRange": {"startDate": "2026-01-07", "endDate": "2026-01-10"},
            "guestCount": 2,
            "keywords": ["food", "tour"],
        }
        assert SessionMemory.from_payload(payload) == memory

    def test_empty_memory_payload(self):
        assert SessionMemory().to_payload() == {
            "location": None, "category": None, "dateRange": None, "guestCount": None, "keywords": [],
        }

    @pytest.mark.parametrize("payload", [None, "garbage", 42, ["location"]])
    def test_non_object_payload_is_empty_memory(self, payload):
        assert SessionMemory.from_payload(payload) == SessionMemory()

    def test_bad_fields_are_dropped(self):
        memory = SessionMemory.from_payload({
            "location": "   ",
            "category": 7,
            "dateRange": {"startDate": "not-a-date", "endDate": "2026-01-10"},
            "guestCount": -3,
            "keywords": ["food", 5, None, "  "],
        })
        assert memory == SessionMemory(keywords=("food",))

    @pytest.mark.parametrize("value, expected", [
        (True, None),
        (0, None),
        (float("nan"), None),
        (float("inf"), None),
        ("4", 4),
        ("four", None),
        (3.0, 3),
    ])
    def test_guest_count_sanitization(self, value, expected):
        assert SessionMemory.from_payload({"guestCount": value}).guest_count == expected

    def test_reversed_date_range_is_swapped(self):
        memory = SessionMemory.from_payload({
            "dateRange": {"startDate": "2026-01-10", "endDate": "2026-01-07T00:00:00.000Z"},
        })
        assert memory.date_range == JAN

    def test_payload_keywords_are_capped(self):
        memory = SessionMemory.from_payload({"keywords": [f"kw{i}" for i in range(30)]})
        assert len(memory.keywords) == 12
