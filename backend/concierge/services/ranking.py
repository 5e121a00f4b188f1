"""
Ranking Engine
==============
Deterministic additive scoring over the candidates of the selected tier.

Scoring weights (defaults, see `ScoringWeights`):
  Category exact match:                +5
  Location contains resolved location: +4
  Per keyword: title +2, description +1, location +1
  Guest capacity >= party size:        +1
  Boost:                               boost / 5
  Average rating:                      rating x 3
  Review volume:                       min(reviews, 50) x 0.1

Sort order: score desc, boost desc, rating desc, review count desc, then
the catalog's own order (Python's sort is stable).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple
import logging
import math

from concierge.services.catalog import CandidateListing
from concierge.services.memory import SessionMemory

logger = logging.getLogger(__name__)

DEFAULT_BADGE = "Featured"


@dataclass(frozen=True)
class ScoringWeights:
    category_match: float = 5.0
    location_match: float = 4.0
    keyword_title: float = 2.0
    keyword_description: float = 1.0
    keyword_location: float = 1.0
    guest_fit: float = 1.0
    boost_divisor: float = 5.0
    rating_multiplier: float = 3.0
    review_cap: int = 50
    review_weight: float = 0.1

    @classmethod
    def from_settings(cls, settings) -> "ScoringWeights":
        return cls(
            category_match=settings.score_category_match,
            location_match=settings.score_location_match,
            keyword_title=settings.score_keyword_title,
            keyword_description=settings.score_keyword_description,
            keyword_location=settings.score_keyword_location,
            guest_fit=settings.score_guest_fit,
            boost_divisor=settings.score_boost_divisor,
            rating_multiplier=settings.score_rating_multiplier,
            review_cap=settings.score_review_cap,
            review_weight=settings.score_review_weight,
        )


@dataclass
class RankedResult:
    listing: CandidateListing
    score: float
    rating: float
    review_count: int


def _finite(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def average_rating(ratings: List[float]) -> float:
    values = [_finite(r, default=math.nan) for r in ratings or []]
    values = [v for v in values if not math.isnan(v)]
    if not values:
        return 0.0
    return sum(values) / len(values)


def score_candidate(
    candidate: CandidateListing,
    criteria: SessionMemory,
    weights: ScoringWeights = ScoringWeights(),
) -> RankedResult:
    score = 0.0
    title = (candidate.title or "").lower()
    description = (candidate.description or "").lower()
    location = (candidate.location or "").lower()

    if criteria.category:
        wanted = criteria.category.lower()
        if any((c or "").lower() == wanted for c in candidate.categories):
            score += weights.category_match

    if criteria.location and criteria.location.lower() in location:
        score += weights.location_match

    for keyword in criteria.keywords:
        needle = keyword.lower()
        if needle in title:
            score += weights.keyword_title
        if needle in description:
            score += weights.keyword_description
        if needle in location:
            score += weights.keyword_location

    if criteria.guest_count is not None and _finite(candidate.guest_capacity) >= criteria.guest_count:
        score += weights.guest_fit

    boost = _finite(candidate.boost)
    if weights.boost_divisor:
        score += boost / weights.boost_divisor

    rating = average_rating(candidate.ratings)
    review_count = len(candidate.ratings or [])
    score += rating * weights.rating_multiplier
    score += min(review_count, weights.review_cap) * weights.review_weight

    return RankedResult(candidate, score, rating, review_count)


def _sort_key(result: RankedResult) -> Tuple[float, float, float, int]:
    return (-result.score, -_finite(result.listing.boost), -result.rating, -result.review_count)


def rank_candidates(
    candidates: List[CandidateListing],
    criteria: SessionMemory,
    weights: ScoringWeights = ScoringWeights(),
) -> List[RankedResult]:
    scored = [score_candidate(c, criteria, weights) for c in candidates]
    ranked = sorted(scored, key=_sort_key)
    if ranked:
        logger.debug(f"Ranked {len(ranked)} candidates, top score {ranked[0].score:.2f}")
    return ranked


@dataclass(frozen=True)
class Page:
    items: List[RankedResult]
    offset: int
    limit: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


def clamp_page(offset: Any, limit: Any, default_limit: int = 10, max_limit: int = 10) -> Tuple[int, int]:
    """Coerce client paging values: offset >= 0, 1 <= limit <= max_limit."""
    safe_offset = int(_finite(offset)) if offset is not None else 0
    safe_limit = int(_finite(limit)) if limit is not None else default_limit
    if safe_limit <= 0:
        safe_limit = default_limit
    return max(safe_offset, 0), min(safe_limit, max_limit)


def paginate(
    ranked: List[RankedResult],
    offset: Any = 0,
    limit: Any = None,
    default_limit: int = 10,
    max_limit: int = 10,
) -> Page:
    safe_offset, safe_limit = clamp_page(offset, limit, default_limit, max_limit)
    items = ranked[safe_offset: safe_offset + safe_limit]
    return Page(items, safe_offset, safe_limit, len(ranked))


def _badge(listing: CandidateListing) -> str:
    for values in (listing.group_styles, listing.activity_forms, listing.environments):
        for value in values or []:
            if value:
                return value
    return listing.duration_category or DEFAULT_BADGE


def _one_decimal(value: float) -> float:
    """Half-up rounding of the decimal text: 4.25 -> 4.3, not 4.2."""
    return float(Decimal(repr(_finite(value))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _truncate(text: Optional[str], max_chars: int) -> str:
    text = (text or "").strip()
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 3].rstrip() + "..."


def project_result(result: RankedResult, description_max_chars: int = 160) -> Dict[str, Any]:
    """Flat JSON shape the chat widget renders."""
    listing = result.listing
    return {
        "id": listing.id,
        "slug": listing.slug,
        "title": listing.title,
        "category": listing.category,
        "location": listing.location,
        "badge": _badge(listing),
        "description": _truncate(listing.description, description_max_chars),
        "image": listing.image,
        "vinPoints": _finite(listing.boost),
        "rating": _one_decimal(result.rating),
        "reviewCount": result.review_count,
    }
