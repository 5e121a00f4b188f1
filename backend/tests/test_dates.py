"""Tests for date-range extraction."""

from datetime import date

from concierge.services.dates import (
    DateRange,
    extract_date_range,
    normalize_date_text,
    parse_date_range,
    parse_single_date,
)

TODAY = date(2026, 1, 1)


class TestPairStrategies:

    def test_two_iso_dates(self):
        result = parse_date_range("We arrive 2026-01-07 and leave 2026-01-10 if possible", TODAY)
        assert result == DateRange(date(2026, 1, 7), date(2026, 1, 10))

    def test_iso_dates_out_of_order_are_sorted(self):
        result = parse_date_range("between 2026-01-10 and 2026-01-07", TODAY)
        assert result == DateRange(date(2026, 1, 7), date(2026, 1, 10))

    def test_month_day_range_borrows_year_from_end(self):
        result = parse_date_range("from Jan 7 to Jan 10 2026", TODAY)
        assert result == DateRange(date(2026, 1, 7), date(2026, 1, 10))

    def test_month_day_range_with_commas(self):
        result = parse_date_range("March 3, 2027 - March 9, 2027", TODAY)
        assert result == DateRange(date(2027, 3, 3), date(2027, 3, 9))

    def test_day_month_range_defaults_to_current_year(self):
        result = parse_date_range("7 March to 12 March", TODAY)
        assert result == DateRange(date(2026, 3, 7), date(2026, 3, 12))

    def test_single_month_day_span(self):
        result = parse_date_range("sometime around June 3-8, 2026", TODAY)
        assert result == DateRange(date(2026, 6, 3), date(2026, 6, 8))

    def test_day_span_before_month(self):
        result = parse_date_range("3-8 june", TODAY)
        assert result == DateRange(date(2026, 6, 3), date(2026, 6, 8))

    def test_misspelled_month(self):
        result = parse_date_range("janury 5 to janury 9 2027", TODAY)
        assert result == DateRange(date(2027, 1, 5), date(2027, 1, 9))

    def test_ordinals_and_of(self):
        result = parse_date_range("the 7th of January until the 10th of January", TODAY)
        assert result == DateRange(date(2026, 1, 7), date(2026, 1, 10))

    def test_range_crossing_new_year_rolls_end_forward(self):
        result = parse_date_range("Dec 28 to Jan 3", TODAY)
        assert result == DateRange(date(2026, 12, 28), date(2027, 1, 3))

    def test_loose_month_day_pairing(self):
        result = parse_date_range("arrive jan 7, leave jan 10", TODAY)
        assert result == DateRange(date(2026, 1, 7), date(2026, 1, 10))

    def test_loose_day_month_pairing(self):
        result = parse_date_range("arriving 7 feb, heading home 11 feb", TODAY)
        assert result == DateRange(date(2026, 2, 7), date(2026, 2, 11))

    def test_no_pair_in_single_date(self):
        assert parse_date_range("on Jan 7", TODAY) is None


class TestSingleDateStrategies:

    def test_single_iso_date(self):
        result = parse_single_date("just 2026-05-04", TODAY)
        assert result == DateRange(date(2026, 5, 4), date(2026, 5, 4))

    def test_numeric_day_first_when_day_exceeds_twelve(self):
        result = parse_single_date("25/12/2026", TODAY)
        assert result.start == date(2026, 12, 25)
        assert result.start == result.end

    def test_numeric_month_first_when_second_exceeds_twelve(self):
        result = parse_single_date("12/25/26", TODAY)
        assert result.start == date(2026, 12, 25)

    def test_ambiguous_numeric_date_reads_month_first(self):
        result = parse_single_date("03/04/2026", TODAY)
        assert result.start == date(2026, 3, 4)

    def test_named_single_date(self):
        result = parse_single_date("on the 14th of February", TODAY)
        assert result == DateRange(date(2026, 2, 14), date(2026, 2, 14))


class TestExtractDateRange:

    def test_pair_wins_over_single(self):
        result = extract_date_range("Jan 7 to Jan 10 2026, or maybe 2026-02-01", TODAY)
        assert result == DateRange(date(2026, 1, 7), date(2026, 1, 10))

    def test_falls_back_to_single_date(self):
        result = extract_date_range("Can we do July 4?", TODAY)
        assert result == DateRange(date(2026, 7, 4), date(2026, 7, 4))

    def test_no_dates(self):
        assert extract_date_range("a food tour for 2 people", TODAY) is None
        assert extract_date_range("", TODAY) is None

    def test_invalid_calendar_date_is_absent(self):
        assert extract_date_range("2026-02-30", TODAY) is None

    def test_payload_uses_iso_dates(self):
        payload = DateRange(date(2026, 1, 7), date(2026, 1, 10)).to_payload()
        assert payload == {"startDate": "2026-01-07", "endDate": "2026-01-10"}


def test_normalize_date_text():
    assert normalize_date_text("The 7th  of January – 10th") == "the 7 january - 10"
