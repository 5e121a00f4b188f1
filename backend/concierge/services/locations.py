"""
Destination extraction from free traveler text.

Strategies, tried in order (first hit wins):
  1. preposition-led phrase   "food tour in Rome, Italy for 2"  -> "Rome, Italy"
  2. country synonym anywhere "rome italy food tour"            -> "Rome, Italy"
  3. region keyword           "somewhere in southeast asia"     -> "Southeast Asia"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import logging
import re

from concierge.services.countries import (
    REGION_KEYWORDS,
    REGIONS_BY_LENGTH,
    SYNONYMS_BY_LENGTH,
    COUNTRY_SYNONYMS,
    lookup_country,
    lookup_region,
)
from concierge.services.dates import MONTH_ALIASES
from concierge.services.taxonomy import extract_category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationMatch:
    value: str
    country: Optional[str] = None
    city: Optional[str] = None


_PREPOSITION_RE = re.compile(
    r"\b(?:in|at|near|around|from|to|country|region|city|visit|visiting|explore|exploring)\s+"
)

# Where a destination phrase stops
_CONNECTOR_RE = re.compile(
    r"\s+(?:for|with|on|at|around|from|to|in|during|between|starting|next|this|"
    r"please|so|but|because|who|where|which|that|when|i|we)\b"
    r"|[.!?;:()\n]|\s+\d"
)

# A candidate phrase starting with one of these is not a place
_FILLER_WORDS = frozenset({
    "a", "an", "the", "my", "our", "your", "their", "me", "us", "them", "it", "you",
    "go", "going", "do", "doing", "be", "get", "have", "book", "booking", "see", "find",
    "try", "stay", "travel", "plan", "make", "take", "eat", "enjoy", "learn", "experience",
    "least", "all", "mind", "there", "here", "somewhere", "anywhere", "everywhere",
    "what", "how", "some", "any", "mid", "early", "late", "end", "beginning",
    "weekend", "night", "nights", "morning", "evening", "afternoon", "day", "days",
    "week", "weeks", "month", "months", "year", "years", "summer", "winter", "spring",
    "autumn", "fall", "tomorrow", "today", "tonight", "person", "people", "guests",
    "about", "around", "town", "home", "work", "bed", "time",
})

# Leading words that belong to multi-word city names ("new york", "buenos aires")
_CITY_PREFIX_WORDS = frozenset({
    "new", "san", "santa", "santo", "los", "las", "st", "st.", "saint", "rio", "de",
    "la", "le", "el", "hong", "kuala", "buenos", "cape", "tel", "abu", "ho", "chi",
    "port", "mexico", "sao", "são", "porto", "salt", "lake", "palm", "key", "fort",
})

_MAX_PHRASE_WORDS = 5


def _title(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


def _is_month(word: str) -> bool:
    return word.rstrip(".,") in MONTH_ALIASES


def _acceptable_phrase(phrase: str) -> bool:
    if not phrase or not re.search(r"[a-z]", phrase):
        return False
    words = phrase.split()
    first = words[0].strip(",")
    if first[:1].isdigit() or first in _FILLER_WORDS or _is_month(first):
        return False
    return len(words) <= _MAX_PHRASE_WORDS


def _composite(city: str, country: str) -> LocationMatch:
    city_title = _title(city)
    return LocationMatch(f"{city_title}, {country}", country=country, city=city_title)


def _canonicalize(phrase: str) -> Optional[LocationMatch]:
    """Map a raw phrase onto a country, region or "City, Country" value."""
    phrase = phrase.strip(" ,'\"-")
    if not phrase:
        return None

    country = lookup_country(phrase)
    if country:
        return LocationMatch(country, country=country)
    region = lookup_region(phrase)
    if region:
        return LocationMatch(region)

    parts = [part.strip() for part in phrase.split(",") if part.strip()]
    if len(parts) >= 2:
        country = lookup_country(parts[-1])
        if country:
            return _composite(parts[0], country)
        return LocationMatch(", ".join(_title(part) for part in parts), city=_title(parts[0]))

    for synonym in SYNONYMS_BY_LENGTH:
        if phrase.endswith(" " + synonym):
            city = phrase[: -len(synonym)].strip()
            if city and city.split()[0] not in _FILLER_WORDS:
                return _composite(city, COUNTRY_SYNONYMS[synonym])

    city = _title(phrase)
    return LocationMatch(city, city=city)


# ============================================================================
# STRATEGIES
# ============================================================================

def _from_preposition_phrase(text: str) -> Optional[LocationMatch]:
    for match in _PREPOSITION_RE.finditer(text):
        rest = text[match.end():]
        stop = _CONNECTOR_RE.search(rest)
        phrase = (rest[: stop.start()] if stop else rest).strip(" ,'\"-")
        if not _acceptable_phrase(phrase):
            continue
        resolved = _canonicalize(phrase)
        if resolved is None:
            continue
        if resolved.country is None and resolved.city is not None and extract_category(phrase):
            # "in food tours" names an activity, not a place
            continue
        return resolved
    return None


def _letter_count(value: str) -> int:
    return len(re.sub(r"[^a-z]", "", value))


def _synonym_pattern(synonym: str) -> "re.Pattern":
    # Short synonyms ("uk", "uae") must stand alone on both sides
    right = r"(?![a-z])" if _letter_count(synonym) <= 3 else ""
    return re.compile(rf"(?<![a-z]){re.escape(synonym)}{right}")


_SYNONYM_PATTERNS: List[Tuple[str, "re.Pattern"]] = [
    (synonym, _synonym_pattern(synonym)) for synonym in SYNONYMS_BY_LENGTH
]
_REGION_PATTERNS: List[Tuple[str, "re.Pattern"]] = [
    (keyword, re.compile(rf"\b{re.escape(keyword)}\b")) for keyword in REGIONS_BY_LENGTH
]

_CITY_WORD_RE = re.compile(r"([a-z][a-z'.\-]*)$")


def _city_before(prefix: str) -> Optional[str]:
    """City name directly preceding a country mention ("paris, " / "paris ")."""
    stripped = prefix.rstrip()
    if stripped.endswith(","):
        stripped = stripped[:-1].rstrip()
    elif stripped == prefix:
        return None  # country glued to a previous token

    words = stripped.split()
    if not words or not _CITY_WORD_RE.match(words[-1]):
        return None
    last = words[-1]
    if last in _FILLER_WORDS or _is_month(last) or _PREPOSITION_RE.match(last + " "):
        return None

    city_words = [last]
    for word in reversed(words[:-1]):
        if word in _CITY_PREFIX_WORDS and len(city_words) < 3:
            city_words.insert(0, word)
        else:
            break
    return " ".join(city_words)


def _region_spans(text: str) -> List[Tuple[int, int]]:
    return [m.span() for _, pattern in _REGION_PATTERNS for m in pattern.finditer(text)]


def _from_country_synonym(text: str) -> Optional[LocationMatch]:
    # "south america" must not resolve to the United States
    blocked = [span for span in _region_spans(text) if " " in text[span[0]:span[1]]]
    for synonym, pattern in _SYNONYM_PATTERNS:
        for match in pattern.finditer(text):
            if any(start <= match.start() < end for start, end in blocked):
                continue
            country = COUNTRY_SYNONYMS[synonym]
            city = _city_before(text[: match.start()])
            if city:
                return _composite(city, country)
            return LocationMatch(country, country=country)
    return None


def _from_region_keyword(text: str) -> Optional[LocationMatch]:
    for keyword, pattern in _REGION_PATTERNS:
        if pattern.search(text):
            return LocationMatch(REGION_KEYWORDS[keyword])
    return None


LOCATION_STRATEGIES: Tuple[Callable[[str], Optional[LocationMatch]], ...] = (
    _from_preposition_phrase,
    _from_country_synonym,
    _from_region_keyword,
)


def extract_location_match(text: str) -> Optional[LocationMatch]:
    normalized = re.sub(r"\s+", " ", (text or "").lower()).strip()
    if not normalized:
        return None
    for strategy in LOCATION_STRATEGIES:
        result = strategy(normalized)
        if result is not None:
            logger.debug(f"Location strategy {strategy.__name__} matched {result.value!r}")
            return result
    return None


def extract_location(text: str) -> Optional[str]:
    match = extract_location_match(text)
    return match.value if match else None
