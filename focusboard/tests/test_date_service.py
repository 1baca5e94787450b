"""
Tests for DateService.
"""
import pytest
from datetime import date, datetime, timezone

from focusboard.exceptions import ValidationException
from focusboard.services.date_service import DateService


class TestReferenceDate:
    """Tests for get_reference_date"""

    def test_new_york_is_behind_utc(self):
        """At 02:00 UTC it is still the previous day in New York"""
        now = datetime(2026, 3, 11, 2, 0, tzinfo=timezone.utc)
        assert DateService.get_reference_date("America/New_York", now) == date(2026, 3, 10)

    def test_tokyo_is_ahead_of_utc(self):
        now = datetime(2026, 3, 11, 20, 0, tzinfo=timezone.utc)
        assert DateService.get_reference_date("Asia/Tokyo", now) == date(2026, 3, 12)

    def test_naive_now_is_treated_as_utc(self):
        assert DateService.get_reference_date("UTC", datetime(2026, 3, 11, 23, 59)) == date(2026, 3, 11)

    def test_unknown_timezone(self):
        with pytest.raises(ValidationException):
            DateService.get_reference_date("Mars/Olympus_Mons")


class TestDayRange:
    """Tests for get_day_range"""

    def test_utc_day(self):
        start, end = DateService.get_day_range(date(2026, 3, 11), "UTC")

        assert start == datetime(2026, 3, 11, 0, 0)
        assert end == datetime(2026, 3, 12, 0, 0)

    def test_offset_day_in_utc(self):
        """Berlin is UTC+1 in winter"""
        start, end = DateService.get_day_range(date(2026, 1, 15), "Europe/Berlin")

        assert start == datetime(2026, 1, 14, 23, 0)
        assert end == datetime(2026, 1, 15, 23, 0)


class TestToLocalDate:
    """Tests for to_local_date"""

    def test_converts_naive_utc(self):
        assert DateService.to_local_date(datetime(2026, 3, 11, 2, 0), "America/New_York") == date(2026, 3, 10)
