"""
Unit tests for calendar arithmetic.
"""
from datetime import datetime, timezone

from core.domain.dates import add_months, add_years, end_of_year


class TestAddYears:
    """Tests for add_years."""

    def test_keeps_month_day_and_time(self):
        """Test a plain one year shift."""
        moment = datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)
        assert add_years(moment, 1) == datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)

    def test_multiple_years(self):
        """Test a three year shift."""
        moment = datetime(2025, 7, 15, tzinfo=timezone.utc)
        assert add_years(moment, 3) == datetime(2028, 7, 15, tzinfo=timezone.utc)

    def test_leap_day_rolls_to_first_of_march(self):
        """29 February in a non-leap target year becomes 1 March."""
        moment = datetime(2024, 2, 29, 8, 0, tzinfo=timezone.utc)
        assert add_years(moment, 1) == datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_leap_day_to_leap_year(self):
        """29 February is kept when the target year is a leap year."""
        moment = datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert add_years(moment, 4) == datetime(2028, 2, 29, tzinfo=timezone.utc)


class TestAddMonths:
    """Tests for add_months."""

    def test_crosses_year_boundary(self):
        """Test shifting past December."""
        moment = datetime(2025, 11, 10, tzinfo=timezone.utc)
        assert add_months(moment, 6) == datetime(2026, 5, 10, tzinfo=timezone.utc)

    def test_clamps_to_month_end(self):
        """31 August plus six months is the last day of February."""
        moment = datetime(2025, 8, 31, tzinfo=timezone.utc)
        assert add_months(moment, 6) == datetime(2026, 2, 28, tzinfo=timezone.utc)


class TestEndOfYear:
    """Tests for end_of_year."""

    def test_last_millisecond_of_year(self):
        """Test end of year keeps the timezone."""
        moment = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert end_of_year(moment) == datetime(2025, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)
