"""Unit tests for date and clock utilities."""
import pytest
from src.utils.date_utils import (
    FixedClock,
    SystemClock,
    format_date,
    format_datetime,
    parse_timestamp,
    to_timestamp,
)


class TestToTimestamp:
    """Test string to timestamp conversion."""

    def test_date_only(self):
        """Test a plain date is midnight UTC."""
        assert to_timestamp("2024-05-01") == 1714521600

    def test_date_with_time(self):
        """Test a date with hours and minutes."""
        assert to_timestamp("2024-05-01 09:30") == 1714521600 + 9 * 3600 + 30 * 60

    def test_timezone_shifts_result(self):
        """Test the timezone the string is expressed in is honoured."""
        assert to_timestamp("2024-05-01", "Asia/Kolkata") == 1714521600 - (5 * 3600 + 30 * 60)

    def test_invalid_format_raises_error(self):
        """Test invalid format raises ValueError."""
        with pytest.raises(ValueError, match="Invalid date format"):
            to_timestamp("01/05/2024")


class TestFormatting:
    """Test human-readable rendering."""

    def test_format_date(self):
        """Test day rendering."""
        assert format_date(1714521600) == "01 May 2024"

    def test_format_datetime(self):
        """Test day and minute rendering."""
        assert format_datetime(1714521600 + 9 * 3600 + 5 * 60) == "01 May 2024 09:05"

    def test_format_in_other_timezone(self):
        """Test rendering in a configured timezone."""
        assert format_datetime(1714521600, "Asia/Kolkata") == "01 May 2024 05:30"


class TestParseTimestamp:
    """Test coercion of widget values."""

    @pytest.mark.parametrize("value", [None, "", "abc", "1.5x"])
    def test_unusable_values_become_none(self, value):
        """Test blanks and junk map to None."""
        assert parse_timestamp(value) is None

    def test_numeric_string(self):
        """Test numeric strings are converted."""
        assert parse_timestamp("1714521600") == 1714521600

    def test_integer_passthrough(self):
        """Test ints pass through."""
        assert parse_timestamp(42) == 42


class TestClocks:
    """Test clock implementations."""

    def test_fixed_clock_advances(self):
        """Test FixedClock only moves when told to."""
        clock = FixedClock(100)
        assert clock.now() == 100
        clock.advance(50)
        assert clock.now() == 150

    def test_system_clock_returns_int(self):
        """Test SystemClock returns a positive integer."""
        now = SystemClock().now()
        assert isinstance(now, int)
        assert now > 1_700_000_000
