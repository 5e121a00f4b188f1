"""
Load listing and profile records (JSON, camelCase keys) into the database.
Used by scripts/seed_sqlite.py and the test fixtures.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional
import logging

from sqlalchemy.orm import Session

from concierge.db.models import Listing, Reservation, Review, UserProfile, join_pipe

logger = logging.getLogger(__name__)

# JSON key -> column, for plain text / number fields
FIELD_MAP = {
    "id": "id",
    "slug": "slug",
    "title": "title",
    "description": "description",
    "imageSrc": "image_src",
    "status": "status",
    "primaryCategory": "primary_category",
    "durationCategory": "duration_category",
    "locationValue": "location_value",
    "locationDescription": "location_description",
    "meetingPoint": "meeting_point",
    "guestCount": "guest_count",
    "boost": "boost",
}

# JSON key -> pipe-delimited column, for array fields
ARRAY_FIELD_MAP = {
    "category": "category",
    "groupStyles": "group_styles",
    "environments": "environments",
    "activityForms": "activity_forms",
    "locationType": "location_type",
    "seoKeywords": "seo_keywords",
}


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


def listing_from_record(record: Dict[str, Any]) -> Listing:
    row: Dict[str, Any] = {}
    for json_key, column in FIELD_MAP.items():
        if record.get(json_key) is not None:
            row[column] = record[json_key]
    for json_key, column in ARRAY_FIELD_MAP.items():
        row[column] = join_pipe(_as_list(record.get(json_key)))
    row.setdefault("status", "approved")

    created_at = _as_datetime(record.get("createdAt"))
    if created_at is not None:
        row["created_at"] = created_at

    listing = Listing(**row)
    listing.reservations = [
        Reservation(start_date=_as_date(r["startDate"]), end_date=_as_date(r["endDate"]))
        for r in record.get("reservations", [])
    ]
    listing.reviews = [
        Review(rating=float(r["rating"]), comment=r.get("comment"))
        for r in record.get("reviews", [])
    ]
    return listing


def seed_listings(session: Session, records: Iterable[Dict[str, Any]]) -> int:
    count = 0
    seen_ids = set()
    for record in records:
        listing_id = record.get("id")
        if not listing_id or listing_id in seen_ids:
            logger.warning(f"Skipping listing record without a unique id: {listing_id!r}")
            continue
        seen_ids.add(listing_id)
        session.add(listing_from_record(record))
        count += 1
    session.commit()
    logger.info(f"Seeded {count} listings")
    return count


def seed_profiles(session: Session, records: Iterable[Dict[str, Any]]) -> int:
    count = 0
    for record in records:
        session.add(UserProfile(
            id=record["id"],
            interests=join_pipe(_as_list(record.get("interests"))),
            hobbies=join_pipe(_as_list(record.get("hobbies"))),
        ))
        count += 1
    session.commit()
    logger.info(f"Seeded {count} user profiles")
    return count
