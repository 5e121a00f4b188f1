"""
Session memory: the slot state a caller round-trips between turns.

The engine holds no per-conversation state. The client sends the last
snapshot it received, the engine merges the new turn into it and returns
a fresh snapshot. `SessionMemory` is immutable; `merge` always builds a
new value.

Merge rule:
  location / category / date_range / guest_count -> extracted ?? memory
  keywords -> memory + extracted, de-duplicated case-insensitively,
              oldest first, capped (12 by default)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
import logging
import math

from concierge.services.dates import DateRange
from concierge.services.slots import ExtractedSlots, KEYWORD_CAP

logger = logging.getLogger(__name__)

# Order matters: the follow-up prompt lists missing slots in this order
SLOT_NAMES: Tuple[str, ...] = ("location", "category", "dates", "guests")


@dataclass(frozen=True)
class SessionMemory:
    location: Optional[str] = None
    category: Optional[str] = None
    date_range: Optional[DateRange] = None
    guest_count: Optional[int] = None
    keywords: Tuple[str, ...] = field(default_factory=tuple)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_payload(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "category": self.category,
            "dateRange": self.date_range.to_payload() if self.date_range else None,
            "guestCount": self.guest_count,
            "keywords": list(self.keywords),
        }

    @classmethod
    def from_payload(cls, payload: Any, keyword_cap: int = KEYWORD_CAP) -> "SessionMemory":
        """Build memory from untrusted client JSON. Bad fields become empty."""
        if not isinstance(payload, dict):
            return cls()
        return cls(
            location=_clean_text(payload.get("location")),
            category=_clean_text(payload.get("category")),
            date_range=_parse_date_range_payload(payload.get("dateRange")),
            guest_count=_parse_guest_count(payload.get("guestCount")),
            keywords=tuple(_union_keywords((), _parse_keywords(payload.get("keywords")), keyword_cap)),
        )


# ============================================================================
# SANITIZERS
# ============================================================================

def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _parse_iso_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        # Accept full ISO timestamps; only the calendar date matters
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _parse_date_range_payload(value: Any) -> Optional[DateRange]:
    if not isinstance(value, dict):
        return None
    start = _parse_iso_date(value.get("startDate"))
    end = _parse_iso_date(value.get("endDate"))
    if start is None or end is None:
        return None
    if end < start:
        start, end = end, start
    return DateRange(start, end)


def _parse_guest_count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    count = int(value)
    return count if count > 0 else None


def _parse_keywords(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


# ============================================================================
# MERGE & GATE
# ============================================================================

def _union_keywords(existing, incoming, cap: int) -> List[str]:
    merged: List[str] = []
    seen = set()
    for keyword in list(existing) + list(incoming):
        key = keyword.lower()
        if key in seen:
            continue
        seen.add(key)
        merged.append(keyword)
        if len(merged) >= cap:
            break
    return merged


def merge(memory: SessionMemory, extracted: ExtractedSlots, keyword_cap: int = KEYWORD_CAP) -> SessionMemory:
    """Fold one turn's extraction into memory without erasing known slots."""
    return replace(
        memory,
        location=extracted.location if extracted.location is not None else memory.location,
        category=extracted.category if extracted.category is not None else memory.category,
        date_range=extracted.date_range if extracted.date_range is not None else memory.date_range,
        guest_count=extracted.guest_count if extracted.guest_count is not None else memory.guest_count,
        keywords=tuple(_union_keywords(memory.keywords, extracted.keywords, keyword_cap)),
    )


def missing_fields(memory: SessionMemory) -> List[str]:
    present = {
        "location": memory.location is not None,
        "category": memory.category is not None,
        "dates": memory.date_range is not None,
        "guests": memory.guest_count is not None,
    }
    return [name for name in SLOT_NAMES if not present[name]]


def criteria_met(memory: SessionMemory) -> bool:
    return not missing_fields(memory)
