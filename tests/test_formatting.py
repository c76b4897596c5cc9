"""Tests for --format parsing and relative publish ages."""

from datetime import datetime, timezone

import pytest

from faro.common.timeutil import age_in_days, parse_timestamp, publish_age
from faro.errors import FormatOptionError
from faro.formatting import FormatOptions, parse_format_flag

NOW = datetime(2026, 1, 17, tzinfo=timezone.utc)


class TestParseFormatFlag:
    """Comma-delimited modifier parsing."""

    def test_empty(self):
        assert parse_format_flag("") == FormatOptions()
        assert parse_format_flag(None) == FormatOptions()

    def test_all_modifiers(self):
        assert parse_format_flag("group,lines,time") == FormatOptions(True, True, True)

    def test_whitespace_case_and_empty_items(self):
        assert parse_format_flag(" Group , ,TIME,") == FormatOptions(group=True, time=True)

    def test_unknown_modifier(self):
        with pytest.raises(FormatOptionError) as exc:
            parse_format_flag("group,json")
        assert "json" in str(exc.value)


class TestTimestamps:
    """RFC 3339 parsing and ages."""

    def test_z_suffix(self):
        assert parse_timestamp("2026-01-10T00:00:00Z") == datetime(2026, 1, 10, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-01-10T00:00:00").tzinfo is not None

    def test_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert age_in_days(None, NOW) is None

    def test_naive_now(self):
        assert age_in_days("2026-01-10T00:00:00Z", datetime(2026, 1, 17)) == 7

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2026-01-17T00:00:00Z", "today"),
            ("2026-01-16T00:00:00Z", "1 day ago"),
            ("2026-01-10T00:00:00Z", "7 days ago"),
            ("2025-11-01T00:00:00Z", "2 months ago"),
            ("2023-01-01T00:00:00Z", "3 years ago"),
            (None, ""),
        ],
    )
    def test_publish_age(self, value, expected):
        assert publish_age(value, NOW) == expected
