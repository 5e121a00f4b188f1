"""Tests for the concierge engine: gating, memory handling, hobby branch and search."""

import pytest

from conftest import TODAY, FakeCatalog, FakeProfiles, make_listing
from concierge.services.catalog import CatalogError
from concierge.services.concierge import ConciergeEngine, ConversationTurn, recent_turns
from concierge.services.memory import SessionMemory
from concierge.services.replies import INVITATION_REPLY
from concierge.services.tiers import QueryTier

FOOD = "Food, Drinks & Culinary"
E2E = "I want a food tour in Rome, Italy for 2 people from Jan 7 to Jan 10 2026"

KNOWN_MEMORY = {
    "location": "Lisbon, Portugal",
    "category": "Water Activities",
    "dateRange": {"startDate": "2026-03-01", "endDate": "2026-03-04"},
    "guestCount": None,
    "keywords": ["surf"],
}


def user(text):
    return {"role": "user", "content": text}


def assistant(text):
    return {"role": "assistant", "content": text}


def _engine(responder=lambda f: [], profiles=None):
    catalog = FakeCatalog(responder)
    return ConciergeEngine(catalog, profiles=profiles, today=TODAY), catalog


class TestInvitation:

    @pytest.mark.parametrize("messages", [[], None, [assistant("Hello!")], [user("   ")]])
    def test_no_user_turn(self, messages):
        engine, catalog = _engine()
        result = engine.respond(messages)
        assert result.reply == INVITATION_REPLY
        assert result.recommendations == []
        assert result.memory == SessionMemory()
        assert catalog.calls == []

    def test_memory_is_echoed(self):
        engine, _ = _engine()
        result = engine.respond([], memory=KNOWN_MEMORY)
        assert result.memory.location == "Lisbon, Portugal"
        assert result.missing_fields == ["guests"]


class TestCriteriaGate:

    def test_missing_slots_prompt(self):
        engine, catalog = _engine()
        result = engine.respond([user("I want to go to Lisbon")])
        assert result.missing_fields == ["category", "dates", "guests"]
        assert not result.criteria_met
        assert "✓ Destination: Lisbon" in result.reply
        assert "How many guests will be joining?" in result.reply
        assert "Where would you like to go?" not in result.reply
        assert catalog.calls == []

    def test_contextual_guest_answer_completes_criteria(self):
        listing = make_listing("surf", categories=["Water Activities"], location="Lisbon, Portugal")
        engine, catalog = _engine(lambda f: [listing])
        result = engine.respond(
            [assistant("How many guests will be joining?"), user("3")],
            memory=KNOWN_MEMORY,
        )
        assert result.memory.guest_count == 3
        assert result.criteria_met
        assert len(catalog.calls) == 1


class TestSearch:

    def test_end_to_end_strict_match(self):
        listing = make_listing("pasta", title="Roman Food Tour", categories=[FOOD], location="Rome, Italy")
        engine, catalog = _engine(lambda f: [listing])

        result = engine.respond([user(E2E)])

        assert result.tier is QueryTier.STRICT
        assert result.criteria_met
        assert [r["id"] for r in result.recommendations] == ["pasta"]
        assert result.reply.startswith("Great news! I found 1 experience")
        strict = catalog.calls[0]
        assert strict.location == "Rome, Italy"
        assert strict.category == FOOD
        assert strict.guest_count == 2
        assert strict.date_range.to_payload() == {"startDate": "2026-01-07", "endDate": "2026-01-10"}

        payload = result.to_payload()
        assert payload["memory"]["guestCount"] == 2
        assert payload["tier"] == "strict"
        assert payload["totalMatched"] == 1
        assert payload["hasMore"] is False

    def test_relaxed_tier_reply(self):
        listing = make_listing("big", location="Rome, Italy")
        engine, _ = _engine(lambda f: [listing] if f.guest_count is None else [])
        result = engine.respond([user(E2E)])
        assert result.tier is QueryTier.NO_GUESTS
        assert "2 guests" in result.reply

    def test_nothing_found_is_a_soft_failure(self):
        engine, catalog = _engine()
        result = engine.respond([user(E2E)])
        assert result.tier is None
        assert result.recommendations == []
        assert result.criteria_met
        assert result.reply.startswith("Sorry, I couldn't find any listings in Rome, Italy")
        assert len(catalog.calls) == 5

    def test_pagination(self):
        listings = [make_listing(f"l{i:02d}") for i in range(25)]
        engine, _ = _engine(lambda f: listings)
        result = engine.respond([user(E2E)], offset=20, limit=10)
        assert [r["id"] for r in result.recommendations] == ["l20", "l21", "l22", "l23", "l24"]
        assert result.has_more is False
        assert result.total_matched == 25

    def test_limit_is_capped(self):
        listings = [make_listing(f"l{i:02d}") for i in range(25)]
        engine, _ = _engine(lambda f: listings)
        result = engine.respond([user(E2E)], limit=50)
        assert len(result.recommendations) == 10
        assert result.has_more is True

    def test_hard_catalog_failure_propagates(self):
        engine, _ = _engine(lambda f: CatalogError("connection refused"))
        with pytest.raises(CatalogError):
            engine.respond([user(E2E)])


class TestMemoryHandling:

    def test_transcript_replayed_without_memory(self):
        engine, catalog = _engine(lambda f: [make_listing("x")])
        result = engine.respond([
            user("A food tour in Rome, Italy"),
            assistant("Which dates work for you? How many guests will be joining?"),
            user("Jan 7 to Jan 10 2026 for 2 people"),
        ])
        assert result.memory.location == "Rome, Italy"
        assert result.memory.category == FOOD
        assert result.memory.guest_count == 2
        assert result.criteria_met
        assert catalog.calls

    def test_only_latest_turn_read_when_memory_supplied(self):
        engine, _ = _engine(lambda f: [make_listing("x")])
        result = engine.respond(
            [user("Actually make it Paris, France"), assistant("Sure."), user("for 2 people")],
            memory=KNOWN_MEMORY,
        )
        assert result.memory.location == "Lisbon, Portugal"
        assert result.memory.guest_count == 2

    def test_memory_round_trips_between_turns(self):
        engine, _ = _engine(lambda f: [make_listing("x")])
        first = engine.respond([user("A food tour in Rome, Italy")])
        assert first.missing_fields == ["dates", "guests"]

        second = engine.respond(
            [user("A food tour in Rome, Italy"), assistant(first.reply), user("Jan 7 to Jan 10 2026, 2 people")],
            memory=first.to_payload()["memory"],
        )
        assert second.criteria_met
        assert second.memory.location == "Rome, Italy"

    def test_malformed_memory_is_ignored(self):
        engine, _ = _engine()
        result = engine.respond([user("I want to go to Lisbon")], memory="garbage")
        assert result.memory.location == "Lisbon"

    def test_transcript_window(self):
        filler = [assistant("Noted."), user("hmm")] * 9
        engine, _ = _engine()
        result = engine.respond([user("A food tour in Rome, Italy")] + filler)
        assert result.memory.location is None
        assert "location" in result.missing_fields


class TestHobbyBranch:

    def test_suggestions_from_profile(self):
        profiles = FakeProfiles({"u1": ["street food", "museums", "yoga"]})
        engine, catalog = _engine(profiles=profiles)
        result = engine.respond(
            [user("What should I do there?")],
            memory={"location": "Rome, Italy"},
            user_id="u1",
        )
        assert result.reply.startswith("Here are a few ideas for Rome, Italy")
        assert "street food" in result.reply
        assert "museums" in result.reply
        assert catalog.calls == []
        assert result.recommendations == []

    def test_asks_for_hobbies_without_profile(self):
        engine, catalog = _engine(profiles=FakeProfiles({}))
        result = engine.respond(
            [user("any ideas what to do?")],
            memory={"location": "Rome, Italy"},
            user_id="ghost",
        )
        assert "What are some of your hobbies or interests?" in result.reply
        assert catalog.calls == []

    @pytest.mark.parametrize("prefix", ["Any suggestions?", "What do you recommend?", "Any ideas?"])
    def test_asking_for_recommendations_still_searches(self, prefix):
        listing = make_listing("pasta", categories=[FOOD], location="Rome, Italy")
        engine, catalog = _engine(lambda f: [listing], profiles=FakeProfiles({"u1": ["yoga"]}))
        result = engine.respond([user(f"{prefix} {E2E}")], user_id="u1")
        assert result.tier is QueryTier.STRICT
        assert [r["id"] for r in result.recommendations] == ["pasta"]
        assert len(catalog.calls) == 1

    def test_needs_a_known_location(self):
        engine, _ = _engine(profiles=FakeProfiles({"u1": ["yoga"]}))
        result = engine.respond([user("What should I do?")], user_id="u1")
        assert result.reply.startswith("Here's what I have so far:")


def test_recent_turns_filters_roles_and_blanks():
    turns = recent_turns(
        [user("a"), {"role": "system", "content": "x"}, assistant(""), user("b"), {"content": "c"}],
        window=18,
    )
    assert turns == [ConversationTurn("user", "a"), ConversationTurn("user", "b")]


def test_payload_without_reply():
    engine, _ = _engine()
    payload = engine.respond([user("hello")]).to_payload(include_reply=False)
    assert "reply" not in payload
    assert payload["criteriaMet"] is False
    assert payload["missingFields"] == ["location", "category", "dates", "guests"]
