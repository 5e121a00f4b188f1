"""Tests for the SQLAlchemy catalog and profile repositories against seeded SQLite."""

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from concierge.db.repositories import ListingCatalog, UserProfileRepository
from concierge.services.catalog import CatalogError, FilterSet, TransientCatalogError
from concierge.services.dates import DateRange

FOOD = "Food, Drinks & Culinary"


def _ids(candidates):
    return [c.id for c in candidates]


class TestListingCatalog:

    def test_strict_query_excludes_reserved_listing(self, db_session):
        filters = FilterSet(
            keywords=("food", "tour", "rome", "italy"),
            category=FOOD,
            location="Rome, Italy",
            date_range=DateRange(date(2026, 1, 7), date(2026, 1, 10)),
            guest_count=2,
        )
        assert _ids(ListingCatalog(db_session).query(filters)) == ["lst-rome-pasta-02"]

    def test_only_approved_newest_first(self, db_session):
        assert _ids(ListingCatalog(db_session).query(FilterSet())) == [
            "lst-rome-food-01",
            "lst-rome-pasta-02",
            "lst-rome-history-03",
            "lst-paris-wine-04",
            "lst-lisbon-surf-05",
        ]

    def test_limit(self, db_session):
        assert len(ListingCatalog(db_session).query(FilterSet(limit=2))) == 2

    @pytest.mark.parametrize("start, end, reserved_excluded", [
        (date(2026, 1, 8), date(2026, 1, 8), True),
        (date(2026, 1, 5), date(2026, 1, 8), True),
        (date(2026, 1, 8), date(2026, 1, 20), True),
        (date(2026, 1, 9), date(2026, 1, 12), False),
        (date(2026, 1, 1), date(2026, 1, 7), False),
    ])
    def test_reservation_overlap(self, db_session, start, end, reserved_excluded):
        filters = FilterSet(location="Rome", date_range=DateRange(start, end))
        ids = _ids(ListingCatalog(db_session).query(filters))
        assert ("lst-rome-food-01" not in ids) is reserved_excluded
        assert "lst-rome-pasta-02" in ids

    def test_category_is_exact_tag(self, db_session):
        catalog = ListingCatalog(db_session)
        assert _ids(catalog.query(FilterSet(category=FOOD))) == [
            "lst-rome-food-01", "lst-rome-pasta-02", "lst-paris-wine-04",
        ]
        assert catalog.query(FilterSet(category="Food")) == []
        assert _ids(catalog.query(FilterSet(category="tours & sightseeing"))) == [
            "lst-rome-food-01", "lst-rome-history-03",
        ]

    def test_location_matches_city_or_country(self, db_session):
        catalog = ListingCatalog(db_session)
        assert _ids(catalog.query(FilterSet(location="Lisbon"))) == ["lst-lisbon-surf-05"]
        assert _ids(catalog.query(FilterSet(location="Paris, France"))) == ["lst-paris-wine-04"]
        assert len(catalog.query(FilterSet(location="Italy"))) == 3

    def test_keyword_searches_secondary_columns(self, db_session):
        # "urbana" only appears in a meeting point
        assert _ids(ListingCatalog(db_session).query(FilterSet(keywords=("Urbana",)))) == [
            "lst-rome-pasta-02",
        ]

    def test_like_wildcards_are_literal(self, db_session):
        catalog = ListingCatalog(db_session)
        assert catalog.query(FilterSet(keywords=("%",))) == []
        assert catalog.query(FilterSet(keywords=("_",))) == []

    def test_guest_capacity(self, db_session):
        assert _ids(ListingCatalog(db_session).query(FilterSet(guest_count=11))) == [
            "lst-rome-history-03", "lst-paris-wine-04",
        ]

    def test_candidate_mapping(self, db_session):
        candidate = ListingCatalog(db_session).query(FilterSet(location="Lisbon"))[0]
        assert candidate.title == "Cascais Surf Lesson"
        assert candidate.categories == ["Water Activities", "Sports, Fitness & Well-Being"]
        assert candidate.category == "Water Activities"
        assert candidate.guest_capacity == 6
        assert candidate.boost == 5
        assert candidate.environments == ["Beach"]
        assert candidate.group_styles == []
        assert candidate.ratings == []

        food = ListingCatalog(db_session).query(FilterSet(keywords=("trastevere",)))[0]
        assert food.reserved_ranges == [DateRange(date(2026, 1, 8), date(2026, 1, 8))]
        assert sorted(food.ratings) == [4.5, 5.0, 5.0]

    def test_count_approved(self, db_session):
        assert ListingCatalog(db_session).count_approved() == 5


class _FailingSession:
    """Stands in for a Session whose every query raises."""

    def __init__(self, error):
        self.error = error
        self.rolled_back = False

    def query(self, *args, **kwargs):
        raise self.error

    def rollback(self):
        self.rolled_back = True


class TestCatalogFailures:

    def test_statement_timeout_is_transient(self):
        session = _FailingSession(OperationalError(
            "SELECT 1", {}, Exception("canceling statement due to statement timeout"),
        ))
        with pytest.raises(TransientCatalogError):
            ListingCatalog(session).query(FilterSet())
        assert session.rolled_back

    def test_lost_connection_is_fatal(self):
        session = _FailingSession(OperationalError("SELECT 1", {}, Exception("connection refused")))
        with pytest.raises(CatalogError) as exc_info:
            ListingCatalog(session).query(FilterSet())
        assert not isinstance(exc_info.value, TransientCatalogError)

    def test_other_database_errors_are_fatal(self):
        session = _FailingSession(ProgrammingError("SELECT 1", {}, Exception("no such table")))
        with pytest.raises(CatalogError):
            ListingCatalog(session).query(FilterSet())
        assert session.rolled_back


class TestUserProfileRepository:

    def test_interests_then_hobbies(self, db_session):
        repo = UserProfileRepository(db_session)
        assert repo.get_interests("user-foodie") == ["street food", "photography", "yoga"]

    def test_empty_profile(self, db_session):
        assert UserProfileRepository(db_session).get_interests("user-empty") == []

    def test_unknown_user(self, db_session):
        assert UserProfileRepository(db_session).get_interests("nobody") is None
