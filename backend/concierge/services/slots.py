"""
Slot extraction for a single user turn.
========================================

Extractors return None when a slot is not present; they never raise.
Party size follows the same pattern as dates and locations: an ordered
tuple of strategies, first hit wins. Category matching lives in
`concierge.services.taxonomy`.

  extract_guest_count("me and 2 friends")   -> 3
  extract_category("a food tour in Rome")   -> "Food, Drinks & Culinary"
  extract_keywords("a food tour in Rome")   -> ["food", "tour", "rome"]
  extract_slots(text, previous_assistant)   -> ExtractedSlots
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple
import logging
import re

from concierge.services.dates import DateRange, MONTH_ALIASES, extract_date_range
from concierge.services.locations import extract_location
from concierge.services.taxonomy import extract_category

logger = logging.getLogger(__name__)

KEYWORD_CAP = 12


@dataclass(frozen=True)
class ExtractedSlots:
    """What one user turn says; every field may be absent."""
    location: Optional[str] = None
    category: Optional[str] = None
    date_range: Optional[DateRange] = None
    guest_count: Optional[int] = None
    keywords: Tuple[str, ...] = field(default_factory=tuple)


# ============================================================================
# PARTY SIZE
# ============================================================================

NUMBER_WORDS: Dict[str, int] = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19, "twenty": 20,
}

_NUM = r"(\d{1,3}(?!\d)|" + "|".join(sorted(NUMBER_WORDS, key=len, reverse=True)) + r")\b"
_DURATION_UNITS = r"(?:days?|nights?|weeks?|months?|hours?|hrs?|years?|mins?|minutes?|am|pm)\b"

_EXPLICIT_GUESTS_RE = re.compile(rf"\b{_NUM}\s+(?:guests?|people|persons?|travell?ers|pax)\b")
_SOLO_RE = re.compile(
    r"\bjust me\b(?!\s+and)|\bonly me\b(?!\s+and)|\b(?:alone|solo)\b"
    r"|\bby myself\b|\bon my own\b|\bsingle travell?er\b"
)
_COUPLE_RE = re.compile(
    r"\b(?:my|with my)\s+(?:partner|wife|husband|girlfriend|boyfriend|spouse|fianc[eé]e?)\b"
    r"|\bme and my (?:friend|partner|wife|husband|girlfriend|boyfriend|spouse|mom|mum|dad|mother|father|sister|brother)\b"
    r"|\bwith a friend\b|\b(?:the )?two of us\b|\bboth of us\b|\bhoneymoon\b"
    r"|\ba couple\b(?!\s+(?:of|more|days|nights))"
)
_PEOPLE_RE = re.compile(rf"(?<!me and )(?<!with )(?<!my )\b{_NUM}\s+(?:people|friends|adults|of us)\b")
_FOR_N_RE = re.compile(rf"\bfor\s+{_NUM}(?!\s*{_DURATION_UNITS})(?!\s*[-/:.]\s*\d)")
_GROUP_OF_RE = re.compile(rf"\b(?:group|party|family|team) of\s+{_NUM}")
_WE_ARE_RE = re.compile(rf"\b(?:we are|we're)\s+{_NUM}(?!\s*{_DURATION_UNITS})")
_ME_AND_FRIENDS_RE = re.compile(rf"\bme and\s+{_NUM}\s+(?:friends|others|more|people)\b")
_WITH_FRIENDS_RE = re.compile(rf"\bwith (?:my\s+)?{_NUM}\s+(?:friends|others|people|colleagues)\b")

_GUEST_QUESTION_RE = re.compile(
    r"how many (?:guests|people|travell?ers|persons|adults|of you)|number of (?:guests|people|travell?ers)"
    r"|party size|guest count|group size"
)
_BARE_NUMBER_RE = re.compile(rf"^\s*{_NUM}\s*[.!]?\s*$")


def _to_int(token: str) -> Optional[int]:
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS.get(token)


def _first_number(pattern: "re.Pattern", text: str, offset: int = 0) -> Optional[int]:
    match = pattern.search(text)
    if not match:
        return None
    value = _to_int(match.group(1))
    return value + offset if value else None


def _explicit_guests(text: str) -> Optional[int]:
    return _first_number(_EXPLICIT_GUESTS_RE, text)


def _solo(text: str) -> Optional[int]:
    return 1 if _SOLO_RE.search(text) else None


def _couple(text: str) -> Optional[int]:
    return 2 if _COUPLE_RE.search(text) else None


def _people_or_for_n(text: str) -> Optional[int]:
    return _first_number(_PEOPLE_RE, text) or _first_number(_FOR_N_RE, text)


def _group_of(text: str) -> Optional[int]:
    return _first_number(_GROUP_OF_RE, text)


def _we_are(text: str) -> Optional[int]:
    return _first_number(_WE_ARE_RE, text)


def _me_and_friends(text: str) -> Optional[int]:
    return _first_number(_ME_AND_FRIENDS_RE, text, offset=1)


def _with_friends(text: str) -> Optional[int]:
    return _first_number(_WITH_FRIENDS_RE, text, offset=1)


GUEST_STRATEGIES: Tuple[Callable[[str], Optional[int]], ...] = (
    _explicit_guests,
    _solo,
    _couple,
    _people_or_for_n,
    _group_of,
    _we_are,
    _me_and_friends,
    _with_friends,
)


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").lower().replace("’", "'")).strip()


def extract_guest_count(text: str, previous_assistant: Optional[str] = None) -> Optional[int]:
    """Party size from the user turn, or from a bare reply to a guest question."""
    normalized = _normalize(text)
    if not normalized:
        return None
    for strategy in GUEST_STRATEGIES:
        count = strategy(normalized)
        if count:
            return count

    if previous_assistant and _GUEST_QUESTION_RE.search(_normalize(previous_assistant)):
        return _first_number(_BARE_NUMBER_RE, normalized)
    return None


# ============================================================================
# KEYWORDS
# ============================================================================

STOP_WORDS = frozenset({
    "the", "and", "for", "with", "from", "that", "this", "there", "then", "than", "them",
    "they", "their", "what", "when", "where", "which", "who", "why", "how", "want", "wants",
    "would", "could", "should", "like", "love", "looking", "look", "find", "need", "please",
    "can", "you", "your", "our", "ours", "have", "has", "had", "are", "was", "were", "will",
    "just", "some", "any", "something", "anything", "about", "into", "onto", "over", "under",
    "between", "during", "starting", "next", "trip", "travel", "traveling", "travelling",
    "plan", "planning", "book", "booking", "visit", "visiting", "going", "get", "also",
    "people", "person", "persons", "guest", "guests", "adults", "friends", "friend",
    "day", "days", "night", "nights", "week", "weeks", "month", "months", "year",
    "until", "till", "through", "thru", "not", "but", "all", "out", "around", "near",
    "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten",
    "me", "my", "myself", "we", "us", "it", "its", "i'm", "im", "lets", "let",
    "show", "tell", "give", "help", "thanks", "thank", "hello", "hey", "hi", "ideas",
    "recommend", "suggest", "suggestions", "options", "experience", "experiences",
})

_KEYWORD_CLEAN_RE = re.compile(r"[^a-z0-9\- ]+")


def extract_keywords(text: str, cap: int = KEYWORD_CAP) -> List[str]:
    cleaned = _KEYWORD_CLEAN_RE.sub(" ", (text or "").lower())
    keywords: List[str] = []
    for token in cleaned.split():
        token = token.strip("-")
        if len(token) <= 2 or token.isdigit():
            continue
        if token in STOP_WORDS or token in MONTH_ALIASES:
            continue
        if token not in keywords:
            keywords.append(token)
        if len(keywords) >= cap:
            break
    return keywords


# ============================================================================
# PER-TURN EXTRACTION
# ============================================================================

def extract_slots(
    text: str,
    previous_assistant: Optional[str] = None,
    today: Optional[date] = None,
    keyword_cap: int = KEYWORD_CAP,
) -> ExtractedSlots:
    slots = ExtractedSlots(
        location=extract_location(text),
        category=extract_category(text),
        date_range=extract_date_range(text, today),
        guest_count=extract_guest_count(text, previous_assistant),
        keywords=tuple(extract_keywords(text, keyword_cap)),
    )
    logger.debug(
        f"Extracted slots: location={slots.location!r} category={slots.category!r} "
        f"dates={slots.date_range} guests={slots.guest_count} keywords={list(slots.keywords)}"
    )
    return slots
