"""
Repository pattern for data access.
SQLAlchemy implementations of the catalog and user-profile collaborators.
"""

from typing import List, Optional
from sqlalchemy import Text, and_, func, literal, or_
from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, selectinload
import logging

from concierge.db.models import Listing, Reservation, UserProfile, split_pipe
from concierge.services.catalog import (
    CandidateListing,
    CatalogError,
    FilterSet,
    TransientCatalogError,
)
from concierge.services.dates import DateRange

logger = logging.getLogger(__name__)

# Driver messages that mean "this one query was too slow / blocked", not "the store is broken"
_TRANSIENT_MARKERS = ("statement timeout", "canceling statement", "database is locked", "lock timeout")

# Columns searched for free keywords
_KEYWORD_COLUMNS = (
    Listing.title,
    Listing.description,
    Listing.category,
    Listing.group_styles,
    Listing.environments,
    Listing.activity_forms,
    Listing.location_type,
    Listing.duration_category,
    Listing.seo_keywords,
    Listing.location_value,
    Listing.location_description,
    Listing.meeting_point,
)

_LOCATION_COLUMNS = (
    Listing.location_value,
    Listing.location_description,
    Listing.meeting_point,
)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, needle: str):
    """Case-insensitive substring test with LIKE wildcards escaped."""
    pattern = f"%{_escape_like(needle.lower())}%"
    return func.lower(func.coalesce(column, "")).like(pattern, escape="\\")


def _has_tag(column, tag: str):
    """Exact (case-insensitive) membership in a pipe-delimited column."""
    wrapped = (
        literal("|", Text)
        + func.replace(func.lower(func.coalesce(column, "")), " | ", "|", type_=Text)
        + literal("|", Text)
    )
    return wrapped.like(f"%|{_escape_like(tag.strip().lower())}|%", escape="\\")


def _is_transient(error: OperationalError) -> bool:
    message = str(getattr(error, "orig", error)).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


class ListingCatalog:
    """
    Catalog collaborator backed by the `listings` table.
    One call = one SELECT with the filters of a single tier.
    """

    def __init__(self, db: Session):
        self.db = db

    def _build_query(self, filters: FilterSet):
        query = self.db.query(Listing).filter(Listing.status == filters.status)

        if filters.keywords:
            query = query.filter(or_(*[
                _contains(column, keyword)
                for keyword in filters.keywords
                for column in _KEYWORD_COLUMNS
            ]))

        if filters.category:
            query = query.filter(_has_tag(Listing.category, filters.category))

        tokens = filters.location_tokens
        if tokens:
            query = query.filter(or_(*[
                _contains(column, token)
                for token in tokens
                for column in _LOCATION_COLUMNS
            ]))

        if filters.date_range is not None:
            query = query.filter(~Listing.reservations.any(and_(
                Reservation.start_date <= filters.date_range.end,
                Reservation.end_date >= filters.date_range.start,
            )))

        if filters.guest_count is not None:
            query = query.filter(Listing.guest_count >= filters.guest_count)

        return (
            query.options(selectinload(Listing.reviews), selectinload(Listing.reservations))
            .order_by(Listing.created_at.desc(), Listing.id.desc())
            .limit(filters.limit)
        )

    def query(self, filters: FilterSet) -> List[CandidateListing]:
        try:
            rows = self._build_query(filters).all()
        except PoolTimeoutError as e:
            self.db.rollback()
            raise TransientCatalogError(f"Connection pool timeout: {e}") from e
        except OperationalError as e:
            self.db.rollback()
            if _is_transient(e):
                raise TransientCatalogError(f"Catalog query timed out: {e.orig}") from e
            logger.error(f"Catalog query failed: {e}")
            raise CatalogError("Listing catalog is unavailable") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Catalog query failed: {e}")
            raise CatalogError("Listing catalog query failed") from e

        logger.debug(f"Catalog query returned {len(rows)} listings")
        return [self._to_candidate(row) for row in rows]

    @staticmethod
    def _to_candidate(row: Listing) -> CandidateListing:
        return CandidateListing(
            id=row.id,
            slug=row.slug,
            title=row.title or "",
            description=row.description or "",
            categories=split_pipe(row.category),
            primary_category=row.primary_category,
            location=row.location_value or "",
            location_description=row.location_description or "",
            meeting_point=row.meeting_point or "",
            guest_capacity=row.guest_count or 0,
            boost=row.boost or 0.0,
            image=row.image_src,
            group_styles=split_pipe(row.group_styles),
            activity_forms=split_pipe(row.activity_forms),
            environments=split_pipe(row.environments),
            location_types=split_pipe(row.location_type),
            seo_keywords=split_pipe(row.seo_keywords),
            duration_category=row.duration_category,
            reserved_ranges=[DateRange(r.start_date, r.end_date) for r in row.reservations],
            ratings=[review.rating for review in row.reviews],
        )

    def count_approved(self) -> int:
        return self.db.query(func.count(Listing.id)).filter(Listing.status == "approved").scalar() or 0


class UserProfileRepository:
    """Read-only access to traveler interests for hobby suggestions."""

    def __init__(self, db: Session):
        self.db = db

    def get_interests(self, user_id: str) -> Optional[List[str]]:
        """Interests then hobbies, de-duplicated; None when the profile is unknown."""
        try:
            profile = self.db.query(UserProfile).filter(UserProfile.id == user_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching profile {user_id}: {e}")
            raise CatalogError("User profile lookup failed") from e
        if profile is None:
            return None

        interests: List[str] = []
        for value in split_pipe(profile.interests) + split_pipe(profile.hobbies):
            if value.lower() not in (i.lower() for i in interests):
                interests.append(value)
        return interests
