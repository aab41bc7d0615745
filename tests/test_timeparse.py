"""Tests for astrosched.timeparse module."""

from __future__ import annotations

from datetime import datetime

import pytest

from astrosched.timeparse import (
    DEFAULT_FORMAT,
    format_datetime,
    parse_datetime,
    parse_datetime_or_now,
)


class TestParseDatetime:
    """Tests for parse_datetime."""

    def test_default_format(self) -> None:
        """Test yyyy-MM-dd HH:mm input."""
        assert parse_datetime("2025-03-14 09:30") == datetime(2025, 3, 14, 9, 30)

    def test_strips_whitespace(self) -> None:
        """Test surrounding whitespace is ignored."""
        assert parse_datetime("  2025-03-14 09:30\n") == datetime(2025, 3, 14, 9, 30)

    def test_custom_format(self) -> None:
        """Test a custom strftime format."""
        assert parse_datetime("14/03/2025 09:30", "%d/%m/%Y %H:%M") == datetime(
            2025, 3, 14, 9, 30
        )

    @pytest.mark.parametrize("text", ["", "tomorrow", "2025-03-14", "2025-13-01 09:00"])
    def test_invalid(self, text: str) -> None:
        """Test malformed input raises ValueError."""
        with pytest.raises(ValueError):
            parse_datetime(text)


class TestParseDatetimeOrNow:
    """Tests for the lenient parser."""

    def test_valid_input(self) -> None:
        """Test valid input is parsed and flagged ok."""
        value, ok = parse_datetime_or_now("2025-03-14 09:30")
        assert value == datetime(2025, 3, 14, 9, 30)
        assert ok is True

    def test_fallback_to_now(self) -> None:
        """Test unparsable input yields the current time, minute precision."""
        now = datetime(2025, 3, 14, 9, 30, 45, 123456)
        value, ok = parse_datetime_or_now("not a date", now=now)
        assert value == datetime(2025, 3, 14, 9, 30)
        assert ok is False

    def test_fallback_uses_clock(self) -> None:
        """Test fallback without an explicit now uses the clock."""
        before = datetime.now().replace(second=0, microsecond=0)
        value, ok = parse_datetime_or_now("garbage")
        after = datetime.now()
        assert ok is False
        assert before <= value <= after
        assert value.second == 0
        assert value.microsecond == 0


class TestFormatDatetime:
    """Tests for format_datetime."""

    def test_default_format(self) -> None:
        """Test formatting with the default format."""
        assert format_datetime(datetime(2025, 3, 14, 9, 5)) == "2025-03-14 09:05"
        assert DEFAULT_FORMAT == "%Y-%m-%d %H:%M"

