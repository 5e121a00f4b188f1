"""
Date-range extraction from free traveler text.
================================================

Two families of strategies, each an ordered tuple of pure functions
``(text, today) -> Optional[DateRange]``. The first non-None result wins.

  Pair strategies (tried first, a two-ended match always wins):
    1. two ISO dates            "2026-01-07 ... 2026-01-10"
    2. named ranges             "Jan 7 to Jan 10, 2026" / "7 Jan - 10 Jan"
                                "March 3-8 2026" / "3-8 March"
    3. loose month-day pairing  "arrive jan 7 ... leave jan 10"
    4. loose day-month pairing  "arrive 7 jan ... leave 10 jan"

  Single-date strategies (start == end):
    5. ISO date                 "2026-01-07"
    6. numeric D/M/Y or M/D/Y   "25/12/2026", "12/25/26"
    7. named date               "Jan 7", "7th of January 2026"

Text is normalized before matching: lowercase, ordinal suffixes dropped,
"7 of January" -> "7 january", en/em dashes -> "-".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar span."""
    start: date
    end: date

    def overlaps(self, other: "DateRange") -> bool:
        return self.start <= other.end and other.start <= self.end

    def to_payload(self) -> Dict[str, str]:
        return {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()}


# Month aliases, including misspellings seen in real chat transcripts
MONTH_ALIASES: Dict[str, int] = {
    "jan": 1, "january": 1, "janury": 1, "janaury": 1, "januray": 1, "jenuary": 1,
    "feb": 2, "february": 2, "febuary": 2, "feburary": 2, "febrary": 2,
    "mar": 3, "march": 3, "marhc": 3,
    "apr": 4, "april": 4, "aprl": 4, "apirl": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7, "jully": 7,
    "aug": 8, "august": 8, "agust": 8, "augst": 8,
    "sep": 9, "sept": 9, "september": 9, "septmber": 9, "setember": 9, "septemebr": 9,
    "oct": 10, "october": 10, "octobr": 10, "ocotber": 10,
    "nov": 11, "november": 11, "novmber": 11, "novembr": 11,
    "dec": 12, "december": 12, "decmber": 12, "decemeber": 12, "decembr": 12,
}

_M = "|".join(sorted(MONTH_ALIASES, key=len, reverse=True))
_MONTH = rf"\b({_M})\b\.?"
_DAY = r"\b(\d{1,2})(?!\d)"
_YEAR = r"(?:,?\s+(\d{4})\b)?"
_SEP = r"(?:\s*-\s*|\s+(?:to|until|till|through|thru|and)\s+)"
_SPAN = r"(?:\s*-\s*|\s+(?:to|until|till|through|thru)\s+)"

_ISO_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
_NUMERIC_RE = re.compile(r"\b(\d{1,2})[/.](\d{1,2})[/.](\d{4}|\d{2})\b")
_MONTH_DAY_RE = re.compile(rf"{_MONTH}\s+{_DAY}{_YEAR}")
_DAY_MONTH_RE = re.compile(rf"{_DAY}\s+{_MONTH}{_YEAR}")

# Named range patterns: (regex, group layout)
_MD_TO_MD_RE = re.compile(rf"{_MONTH}\s+{_DAY}{_YEAR}{_SEP}{_MONTH}\s+{_DAY}{_YEAR}")
_DM_TO_DM_RE = re.compile(rf"{_DAY}\s+{_MONTH}{_YEAR}{_SEP}{_DAY}\s+{_MONTH}{_YEAR}")
_M_D_D_RE = re.compile(rf"{_MONTH}\s+{_DAY}{_SPAN}{_DAY}{_YEAR}")
_D_D_M_RE = re.compile(rf"{_DAY}{_SPAN}{_DAY}\s+{_MONTH}{_YEAR}")

_ORDINAL_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b")
_DAY_OF_RE = re.compile(r"\b(\d{1,2})\s+of\s+")


def normalize_date_text(text: str) -> str:
    cleaned = (text or "").lower().replace("–", "-").replace("—", "-")
    cleaned = _ORDINAL_RE.sub(r"\1", cleaned)
    cleaned = _DAY_OF_RE.sub(r"\1 ", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _month(alias: str) -> int:
    return MONTH_ALIASES[alias.rstrip(".")]


def _resolve_pair(
    m1: int, d1: str, y1: Optional[str],
    m2: int, d2: str, y2: Optional[str],
    today: date,
) -> Optional[DateRange]:
    """Build a range, borrowing a missing year from the other side."""
    year1 = int(y1) if y1 else (int(y2) if y2 else today.year)
    year2 = int(y2) if y2 else year1
    start = _safe_date(year1, m1, int(d1))
    end = _safe_date(year2, m2, int(d2))
    if start is None or end is None:
        return None
    if end < start:
        if not y2:
            # "Dec 28 to Jan 3": the end rolls into the next year
            end = _safe_date(year2 + 1, m2, int(d2))
        elif not y1:
            start = _safe_date(year1 - 1, m1, int(d1))
        else:
            start, end = end, start
        if start is None or end is None:
            return None
    return DateRange(start, end)


# ============================================================================
# PAIR STRATEGIES
# ============================================================================

def _iso_pair(text: str, today: date) -> Optional[DateRange]:
    found = []
    for y, m, d in _ISO_RE.findall(text):
        parsed = _safe_date(int(y), int(m), int(d))
        if parsed is not None:
            found.append(parsed)
    if len(found) < 2:
        return None
    start, end = sorted(found[:2])
    return DateRange(start, end)


def _named_range(text: str, today: date) -> Optional[DateRange]:
    match = _MD_TO_MD_RE.search(text)
    if match:
        m1, d1, y1, m2, d2, y2 = match.groups()
        return _resolve_pair(_month(m1), d1, y1, _month(m2), d2, y2, today)

    match = _DM_TO_DM_RE.search(text)
    if match:
        d1, m1, y1, d2, m2, y2 = match.groups()
        return _resolve_pair(_month(m1), d1, y1, _month(m2), d2, y2, today)

    match = _M_D_D_RE.search(text)
    if match:
        m, d1, d2, y = match.groups()
        return _resolve_pair(_month(m), d1, y, _month(m), d2, y, today)

    match = _D_D_M_RE.search(text)
    if match:
        d1, d2, m, y = match.groups()
        return _resolve_pair(_month(m), d1, y, _month(m), d2, y, today)

    return None


def _loose_month_day_pair(text: str, today: date) -> Optional[DateRange]:
    matches = list(_MONTH_DAY_RE.finditer(text))
    if len(matches) < 2:
        return None
    (m1, d1, y1), (m2, d2, y2) = matches[0].groups(), matches[1].groups()
    return _resolve_pair(_month(m1), d1, y1, _month(m2), d2, y2, today)


def _loose_day_month_pair(text: str, today: date) -> Optional[DateRange]:
    matches = list(_DAY_MONTH_RE.finditer(text))
    if len(matches) < 2:
        return None
    (d1, m1, y1), (d2, m2, y2) = matches[0].groups(), matches[1].groups()
    return _resolve_pair(_month(m1), d1, y1, _month(m2), d2, y2, today)


# ============================================================================
# SINGLE-DATE STRATEGIES
# ============================================================================

def _iso_single(text: str, today: date) -> Optional[DateRange]:
    for y, m, d in _ISO_RE.findall(text):
        parsed = _safe_date(int(y), int(m), int(d))
        if parsed is not None:
            return DateRange(parsed, parsed)
    return None


def _numeric_single(text: str, today: date) -> Optional[DateRange]:
    match = _NUMERIC_RE.search(text)
    if not match:
        return None
    first, second, year_raw = int(match.group(1)), int(match.group(2)), match.group(3)
    year = int(year_raw) + 2000 if len(year_raw) == 2 else int(year_raw)
    if first > 12 and second <= 12:
        day, month = first, second
    elif first <= 12:
        # M/D/Y, also the reading used when both parts could be a month
        month, day = first, second
    else:
        return None
    parsed = _safe_date(year, month, day)
    return DateRange(parsed, parsed) if parsed else None


def _named_single(text: str, today: date) -> Optional[DateRange]:
    candidates = []
    month_day = _MONTH_DAY_RE.search(text)
    if month_day:
        m, d, y = month_day.groups()
        candidates.append((month_day.start(), _month(m), d, y))
    day_month = _DAY_MONTH_RE.search(text)
    if day_month:
        d, m, y = day_month.groups()
        candidates.append((day_month.start(), _month(m), d, y))
    if not candidates:
        return None
    _, month, day, year = min(candidates, key=lambda c: c[0])
    parsed = _safe_date(int(year) if year else today.year, month, int(day))
    return DateRange(parsed, parsed) if parsed else None


Strategy = Callable[[str, date], Optional[DateRange]]

PAIR_STRATEGIES: Tuple[Strategy, ...] = (
    _iso_pair,
    _named_range,
    _loose_month_day_pair,
    _loose_day_month_pair,
)

SINGLE_STRATEGIES: Tuple[Strategy, ...] = (
    _iso_single,
    _numeric_single,
    _named_single,
)


def _run(strategies: Tuple[Strategy, ...], text: str, today: Optional[date]) -> Optional[DateRange]:
    normalized = normalize_date_text(text)
    if not normalized:
        return None
    today = today or date.today()
    for strategy in strategies:
        result = strategy(normalized, today)
        if result is not None:
            logger.debug(f"Date strategy {strategy.__name__} matched {result}")
            return result
    return None


def parse_date_range(text: str, today: Optional[date] = None) -> Optional[DateRange]:
    """Two-ended date range only."""
    return _run(PAIR_STRATEGIES, text, today)


def parse_single_date(text: str, today: Optional[date] = None) -> Optional[DateRange]:
    """A single date, returned as a one-day range."""
    return _run(SINGLE_STRATEGIES, text, today)


def extract_date_range(text: str, today: Optional[date] = None) -> Optional[DateRange]:
    """Pair strategies first, then single-date strategies."""
    return parse_date_range(text, today) or parse_single_date(text, today)
