"""
Tiered query planner.
=====================

When the strict search returns nothing, filters are relaxed one dimension
at a time. The tiers are data, not code: each entry names the tier and the
dimension dropped on entering it, and the active set is cumulative.

  strict          keyword + category + location + availability + guests
  noAvailability  drop availability
  noGuests        drop guest capacity
  noCategory      drop category
  locationOnly    drop keyword (skipped when no location is known)

Tiers run sequentially against the catalog; the first non-empty tier wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple
import logging

from concierge.services.catalog import (
    CandidateListing,
    CatalogCollaborator,
    FilterSet,
    TransientCatalogError,
)
from concierge.services.memory import SessionMemory

logger = logging.getLogger(__name__)


class QueryTier(str, Enum):
    STRICT = "strict"
    NO_AVAILABILITY = "noAvailability"
    NO_GUESTS = "noGuests"
    NO_CATEGORY = "noCategory"
    LOCATION_ONLY = "locationOnly"


class FilterDimension(str, Enum):
    KEYWORD = "keyword"
    CATEGORY = "category"
    LOCATION = "location"
    AVAILABILITY = "availability"
    GUEST_CAPACITY = "guestCapacity"


# (tier, dimension dropped when entering it)
TIER_TRANSITIONS: Tuple[Tuple[QueryTier, Optional[FilterDimension]], ...] = (
    (QueryTier.STRICT, None),
    (QueryTier.NO_AVAILABILITY, FilterDimension.AVAILABILITY),
    (QueryTier.NO_GUESTS, FilterDimension.GUEST_CAPACITY),
    (QueryTier.NO_CATEGORY, FilterDimension.CATEGORY),
    (QueryTier.LOCATION_ONLY, FilterDimension.KEYWORD),
)


def _cumulative_dimensions() -> Tuple[Tuple[QueryTier, FrozenSet[FilterDimension]], ...]:
    active = set(FilterDimension)
    tiers = []
    for tier, dropped in TIER_TRANSITIONS:
        if dropped is not None:
            active.discard(dropped)
        tiers.append((tier, frozenset(active)))
    return tuple(tiers)


TIER_DIMENSIONS: Tuple[Tuple[QueryTier, FrozenSet[FilterDimension]], ...] = _cumulative_dimensions()


def build_filters(
    criteria: SessionMemory,
    dimensions: FrozenSet[FilterDimension],
    limit: int,
) -> FilterSet:
    """FilterSet for the active dimensions; unresolved criteria stay off."""
    return FilterSet(
        keywords=tuple(criteria.keywords) if FilterDimension.KEYWORD in dimensions else (),
        category=criteria.category if FilterDimension.CATEGORY in dimensions else None,
        location=criteria.location if FilterDimension.LOCATION in dimensions else None,
        date_range=criteria.date_range if FilterDimension.AVAILABILITY in dimensions else None,
        guest_count=criteria.guest_count if FilterDimension.GUEST_CAPACITY in dimensions else None,
        limit=limit,
    )


@dataclass(frozen=True)
class TierPlan:
    tier: QueryTier
    dimensions: FrozenSet[FilterDimension]
    filters: FilterSet


@dataclass
class TierOutcome:
    tier: Optional[QueryTier]
    filters: Optional[FilterSet]
    candidates: List[CandidateListing] = field(default_factory=list)
    attempted: List[QueryTier] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.candidates)


class TieredQueryPlanner:
    """Builds the relaxation sequence and runs it against a catalog."""

    def __init__(self, candidate_cap: int = 60):
        self.candidate_cap = candidate_cap

    def plan(self, criteria: SessionMemory) -> List[TierPlan]:
        plans: List[TierPlan] = []
        previous: Optional[FilterSet] = None
        for tier, dimensions in TIER_DIMENSIONS:
            if tier is QueryTier.LOCATION_ONLY and not criteria.location:
                continue
            filters = build_filters(criteria, dimensions, self.candidate_cap)
            if filters == previous:
                # Dropping an inactive dimension gives the same query again
                continue
            plans.append(TierPlan(tier, dimensions, filters))
            previous = filters
        return plans

    def execute(self, catalog: CatalogCollaborator, criteria: SessionMemory) -> TierOutcome:
        attempted: List[QueryTier] = []
        for plan in self.plan(criteria):
            attempted.append(plan.tier)
            try:
                candidates = list(catalog.query(plan.filters))[: self.candidate_cap]
            except TransientCatalogError as e:
                logger.warning(f"Tier '{plan.tier.value}': transient catalog failure, treating as empty: {e}")
                continue

            if candidates:
                logger.info(
                    f"Tier '{plan.tier.value}' matched {len(candidates)} candidates",
                    extra={"tier": plan.tier.value, "candidates": len(candidates)},
                )
                return TierOutcome(plan.tier, plan.filters, candidates, attempted)
            logger.info(f"Tier '{plan.tier.value}': no candidates, relaxing")

        logger.info(f"No candidates after {len(attempted)} tiers")
        return TierOutcome(None, None, [], attempted)
