"""Tests for party size, category, keyword and per-turn slot extraction."""

from datetime import date

import pytest

from concierge.services.dates import DateRange
from concierge.services.slots import (
    extract_guest_count,
    extract_keywords,
    extract_slots,
)
from concierge.services.taxonomy import CATEGORY_LABELS, canonical_category, extract_category

TODAY = date(2026, 1, 1)


class TestGuestCount:

    @pytest.mark.parametrize("text, expected", [
        ("just me", 1),
        ("travelling solo this time", 1),
        ("me and 2 friends", 3),
        ("with 3 friends", 4),
        ("a food tour for 2 people", 2),
        ("6 guests", 6),
        ("with my wife", 2),
        ("just me and my sister", 2),
        ("the two of us", 2),
        ("a party of six", 6),
        ("we're 4", 4),
        ("table for 3", 3),
        ("4 adults", 4),
    ])
    def test_phrases(self, text, expected):
        assert extract_guest_count(text) == expected

    def test_duration_after_for_is_not_a_party_size(self):
        assert extract_guest_count("looking for 3 days in Rome") is None

    def test_bare_number_after_guest_question(self):
        assert extract_guest_count("3", "How many guests will be joining?") == 3
        assert extract_guest_count("five.", "How many people are travelling?") == 5

    def test_bare_number_without_guest_question(self):
        assert extract_guest_count("3") is None
        assert extract_guest_count("3", "Which dates work for you?") is None

    def test_explicit_phrase_beats_context(self):
        assert extract_guest_count("2 people", "How many guests will be joining?") == 2


class TestCategory:

    def test_first_entry_in_table_order_wins(self):
        # hiking (Adventure) comes before wine (Food) in the taxonomy
        assert extract_category("hiking and wine tasting") == "Adventure & Outdoor"

    def test_food_tour(self):
        assert extract_category("I want a food tour in Rome") == "Food, Drinks & Culinary"

    def test_short_keywords_match_whole_words(self):
        assert extract_category("visiting Spain") is None
        assert extract_category("a spa day") == "Sports, Fitness & Well-Being"
        assert extract_category("a great start") is None

    def test_longer_keywords_match_word_prefixes(self):
        assert extract_category("snorkelling trip") == "Water Activities"
        assert extract_category("museums and galleries") == "Culture & History"

    def test_plural_keywords(self):
        assert extract_category("pottery classes") == "Workshops & Skill-Learning"

    def test_no_category(self):
        assert extract_category("somewhere nice") is None

    def test_taxonomy_size_and_order(self):
        assert len(CATEGORY_LABELS) == 18
        assert CATEGORY_LABELS[0] == "Adventure & Outdoor"
        assert CATEGORY_LABELS[-1] == "Business & Networking"

    def test_canonical_category(self):
        assert canonical_category("food, drinks & culinary") == "Food, Drinks & Culinary"
        assert canonical_category("Food") is None


class TestKeywords:

    def test_stop_words_short_tokens_numbers_and_months_are_dropped(self):
        text = "I want a food tour in Rome, Italy for 2 people from Jan 7 to Jan 10 2026"
        assert extract_keywords(text) == ["food", "tour", "rome", "italy"]

    def test_deduplicated_and_capped(self):
        text = " ".join(f"word{i}" for i in range(20)) + " word0 word1"
        keywords = extract_keywords(text)
        assert len(keywords) == 12
        assert keywords[0] == "word0"
        assert len(set(keywords)) == 12

    def test_hyphens_survive(self):
        assert extract_keywords("family-friendly snorkeling!") == ["family-friendly", "snorkeling"]


def test_extract_slots_end_to_end():
    slots = extract_slots(
        "I want a food tour in Rome, Italy for 2 people from Jan 7 to Jan 10 2026",
        today=TODAY,
    )
    assert slots.location == "Rome, Italy"
    assert slots.category == "Food, Drinks & Culinary"
    assert slots.guest_count == 2
    assert slots.date_range == DateRange(date(2026, 1, 7), date(2026, 1, 10))
    assert set(["food", "tour", "rome", "italy"]) <= set(slots.keywords)


def test_extract_slots_empty_turn():
    slots = extract_slots("hi", today=TODAY)
    assert slots.location is None
    assert slots.category is None
    assert slots.date_range is None
    assert slots.guest_count is None
    assert slots.keywords == ()
