"""
Database models -- SQLAlchemy ORM definitions for the listing catalog.
Compatible with both PostgreSQL and SQLite.

Array-like listing attributes (categories, group styles, keywords, ...)
are stored pipe-delimited, e.g. "Food, Drinks & Culinary | Tours & Sightseeing".
Use `split_pipe` / `join_pipe` when reading or writing them.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, Text, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

PIPE = " | "


def split_pipe(value: Optional[str]) -> List[str]:
    """Split a pipe-delimited column into its non-empty parts."""
    if not value:
        return []
    return [part.strip() for part in value.split("|") if part.strip()]


def join_pipe(values: Optional[Iterable[str]]) -> Optional[str]:
    """Inverse of `split_pipe`; returns None for an empty collection."""
    if not values:
        return None
    parts = [str(v).strip() for v in values if v and str(v).strip()]
    return PIPE.join(parts) if parts else None


class Listing(Base):
    """A bookable experience listing."""
    __tablename__ = "listings"

    id = Column(Text, primary_key=True)
    slug = Column(Text, unique=True, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    image_src = Column(Text)
    status = Column(Text, nullable=False, default="pending", index=True)

    # Pipe-delimited tag columns
    category = Column(Text, index=True)
    primary_category = Column(Text)
    group_styles = Column(Text)
    environments = Column(Text)
    activity_forms = Column(Text)
    location_type = Column(Text)
    seo_keywords = Column(Text)
    duration_category = Column(Text)

    # Free-text location fields
    location_value = Column(Text, index=True)
    location_description = Column(Text)
    meeting_point = Column(Text)

    guest_count = Column(Integer, nullable=False, default=1)
    boost = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    reservations = relationship("Reservation", back_populates="listing", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="listing", cascade="all, delete-orphan")


class Reservation(Base):
    """A booked date span on a listing (inclusive on both ends)."""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    listing = relationship("Listing", back_populates="reservations")

    __table_args__ = (
        Index("ix_reservations_listing_span", "listing_id", "start_date", "end_date"),
    )


class Review(Base):
    """A guest rating (1-5) for a listing."""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Float, nullable=False)
    comment = Column(Text)

    listing = relationship("Listing", back_populates="reviews")


class UserProfile(Base):
    """Traveler profile; only the interest fields are read by the concierge."""
    __tablename__ = "user_profiles"

    id = Column(Text, primary_key=True)
    interests = Column(Text)
    hobbies = Column(Text)
