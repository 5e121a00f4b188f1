"""
Catalog collaborator contract.

The concierge never talks to the listing store directly: it hands a
`FilterSet` to something implementing `CatalogCollaborator.query` and gets
back at most `filters.limit` candidates. `concierge.db.repositories`
provides the SQLAlchemy implementation; tests use in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

from concierge.services.dates import DateRange

APPROVED_STATUS = "approved"


class CatalogError(Exception):
    """The listing store failed; the request cannot be answered."""


class TransientCatalogError(CatalogError):
    """A recoverable store failure (timeout, pool exhaustion) for one query."""


@dataclass(frozen=True)
class FilterSet:
    """Filters for one catalog query. None / empty means the dimension is off."""
    status: str = APPROVED_STATUS
    keywords: Tuple[str, ...] = ()
    category: Optional[str] = None
    location: Optional[str] = None
    date_range: Optional[DateRange] = None
    guest_count: Optional[int] = None
    limit: int = 60

    @property
    def location_tokens(self) -> List[str]:
        """Full location plus each comma part ("Rome, Italy" -> rome, italy)."""
        if not self.location:
            return []
        tokens = [self.location.strip().lower()]
        for part in self.location.split(","):
            part = part.strip().lower()
            if part and part not in tokens:
                tokens.append(part)
        return tokens


@dataclass
class CandidateListing:
    id: str
    title: str
    slug: Optional[str] = None
    description: str = ""
    categories: List[str] = field(default_factory=list)
    primary_category: Optional[str] = None
    location: str = ""
    location_description: str = ""
    meeting_point: str = ""
    guest_capacity: int = 0
    boost: float = 0.0
    image: Optional[str] = None
    group_styles: List[str] = field(default_factory=list)
    activity_forms: List[str] = field(default_factory=list)
    environments: List[str] = field(default_factory=list)
    location_types: List[str] = field(default_factory=list)
    seo_keywords: List[str] = field(default_factory=list)
    duration_category: Optional[str] = None
    reserved_ranges: List[DateRange] = field(default_factory=list)
    ratings: List[float] = field(default_factory=list)

    @property
    def category(self) -> Optional[str]:
        if self.primary_category:
            return self.primary_category
        return self.categories[0] if self.categories else None

    def is_available(self, dates: DateRange) -> bool:
        return not any(reserved.overlaps(dates) for reserved in self.reserved_ranges)


class CatalogCollaborator(Protocol):
    def query(self, filters: FilterSet) -> List[CandidateListing]:
        ...


class UserProfileCollaborator(Protocol):
    def get_interests(self, user_id: str) -> Optional[List[str]]:
        ...
