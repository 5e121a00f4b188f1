"""
Reply composer: every user-facing sentence the concierge produces.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple
import logging
import re

from concierge.services.dates import DateRange
from concierge.services.memory import SessionMemory, missing_fields
from concierge.services.tiers import QueryTier

logger = logging.getLogger(__name__)

INVITATION_REPLY = "Tell me what you are looking for and I will curate listings for you."

CHECK = "✓"
BULLET = "•"

MAX_HOBBY_SUGGESTIONS = 5

SLOT_LABELS = {
    "location": "Destination",
    "category": "Experience type",
    "dates": "Dates",
    "guests": "Guests",
}

SLOT_PROMPTS = {
    "location": "Where would you like to go?",
    "category": "What kind of experience are you in the mood for (food, culture, adventure, wellness...)?",
    "dates": "Which dates work for you?",
    "guests": "How many guests will be joining?",
}


def format_date_range(date_range: DateRange) -> str:
    start, end = date_range.start, date_range.end
    if start == end:
        return f"{start:%b} {start.day}, {start.year}"
    if start.year == end.year:
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"
    return f"{start:%b} {start.day}, {start.year} - {end:%b} {end.day}, {end.year}"


def _guests_text(count: int) -> str:
    return "1 guest" if count == 1 else f"{count} guests"


def _slot_value(memory: SessionMemory, slot: str) -> Optional[str]:
    if slot == "location":
        return memory.location
    if slot == "category":
        return memory.category
    if slot == "dates":
        return format_date_range(memory.date_range) if memory.date_range else None
    return _guests_text(memory.guest_count) if memory.guest_count else None


# ============================================================================
# CRITERIA GATE FOLLOW-UP
# ============================================================================

def compose_missing_slots(memory: SessionMemory) -> str:
    missing = missing_fields(memory)
    lines = ["Here's what I have so far:"]
    for slot in ("location", "category", "dates", "guests"):
        value = _slot_value(memory, slot)
        if value:
            lines.append(f"{CHECK} {SLOT_LABELS[slot]}: {value}")
        else:
            lines.append(f"{BULLET} {SLOT_LABELS[slot]}: not set yet")
    lines.append("")
    lines.extend(SLOT_PROMPTS[slot] for slot in missing)
    return "\n".join(lines)


# ============================================================================
# SEARCH RESULTS
# ============================================================================

def _criteria_summary(memory: SessionMemory) -> str:
    parts = []
    if memory.category:
        parts.append(memory.category.lower())
    if memory.location:
        parts.append(f"in {memory.location}")
    if memory.date_range:
        parts.append(f"for {format_date_range(memory.date_range)}")
    if memory.guest_count:
        parts.append(f"({_guests_text(memory.guest_count)})")
    return " ".join(parts)


def compose_search_reply(tier: Optional[QueryTier], total: int, memory: SessionMemory) -> str:
    where = memory.location or "your destination"
    noun = "experience" if total == 1 else "experiences"

    if tier is None:
        return (
            f"Sorry, I couldn't find any listings in {where} that fit yet. "
            "Try another destination, different dates or a broader experience type."
        )
    if tier is QueryTier.STRICT:
        return f"Great news! I found {total} {noun} matching {_criteria_summary(memory)}."
    if tier is QueryTier.NO_AVAILABILITY:
        return (
            f"Nothing is free for exactly those dates, but here are {total} {noun} in {where} "
            "that match everything else. Check each listing's calendar for openings."
        )
    if tier is QueryTier.NO_GUESTS:
        size = _guests_text(memory.guest_count) if memory.guest_count else "your group"
        return (
            f"I couldn't find a perfect fit for {size}, so I widened the search. "
            f"Here are {total} close {noun} in {where}; please double-check capacity before booking."
        )
    if tier is QueryTier.NO_CATEGORY:
        wanted = memory.category.lower() if memory.category else "that kind of"
        return (
            f"I couldn't find {wanted} experiences in {where}, "
            f"so here are {total} other {noun} that fit your plans."
        )
    return (
        f"I couldn't find close matches for everything you asked, "
        f"so here are the top {total} {noun} in {where}."
    )


# ============================================================================
# HOBBY SUGGESTIONS
# ============================================================================

HobbyTemplate = Callable[[str, str], str]

HOBBY_FAMILIES: Tuple[Tuple[str, Tuple[str, ...], HobbyTemplate], ...] = (
    (
        "food",
        ("food", "cook", "culinary", "wine", "eat", "coffee", "bak", "beer", "cuisine", "brunch",
         "barbecue", "bbq", "grill"),
        lambda hobby, place: f"Since you enjoy {hobby}, book a market tour or a hands-on cooking class in {place}.",
    ),
    (
        "art",
        ("art", "paint", "photo", "design", "draw", "sketch", "camera"),
        lambda hobby, place: f"For {hobby}, try a gallery walk or a golden-hour photo tour around {place}.",
    ),
    (
        "history",
        ("history", "museum", "architecture", "heritage", "archaeolog", "castle"),
        lambda hobby, place: f"With your interest in {hobby}, a guided heritage walk through {place}'s old town is a must.",
    ),
    (
        "nightlife",
        ("music", "night", "danc", "party", "club", "jazz", "concert", "bar"),
        lambda hobby, place: f"You like {hobby}, so check out a live music night or a local bar crawl in {place}.",
    ),
    (
        "nature",
        ("hik", "nature", "outdoor", "garden", "bird", "wildlife", "beach", "climb", "camp", "trek"),
        lambda hobby, place: f"As a fan of {hobby}, head out on a guided nature trail or day hike near {place}.",
    ),
    (
        "wellness",
        ("yoga", "spa", "wellness", "meditat", "fitness", "run", "pilates", "massage"),
        lambda hobby, place: f"To keep up with {hobby}, look for a sunrise yoga session or a spa afternoon in {place}.",
    ),
)


def _generic_template(hobby: str, place: str) -> str:
    return f"Look for small-group {hobby} experiences in {place}; local hosts often run them."


# Stems match from a word start: "art" must not fire on "party"
_HOBBY_PATTERNS: Tuple[Tuple["re.Pattern", HobbyTemplate], ...] = tuple(
    (re.compile(r"\b(?:" + "|".join(re.escape(stem) for stem in stems) + ")"), template)
    for _, stems, template in HOBBY_FAMILIES
)


def suggestion_for_hobby(hobby: str, place: str) -> str:
    lowered = hobby.lower()
    for pattern, template in _HOBBY_PATTERNS:
        if pattern.search(lowered):
            return template(hobby, place)
    return _generic_template(hobby, place)


def compose_hobby_reply(location: str, interests: Optional[List[str]]) -> str:
    hobbies = [i.strip() for i in interests or [] if i and i.strip()][:MAX_HOBBY_SUGGESTIONS]
    if not hobbies:
        return (
            f"I'd love to suggest things to do in {location}. "
            "What are some of your hobbies or interests?"
        )
    lines = [f"Here are a few ideas for {location} based on your interests:"]
    lines.extend(f"{BULLET} {suggestion_for_hobby(hobby, location)}" for hobby in hobbies)
    lines.append("")
    lines.append("Tell me which one sounds good and I'll find bookable experiences for it.")
    return "\n".join(lines)
