"""
Unit tests for inspection_core.utils.datetime_utils
"""
from datetime import datetime, timedelta, timezone

from inspection_core.utils.datetime_utils import now, parse_iso, to_iso


class TestNow:
    def test_utc_configured(self, mock_settings):
        assert now().tzinfo == timezone.utc

    def test_invalid_zone_falls_back_to_utc(self, mock_settings):
        mock_settings.local_timezone = "Not/AZone"
        assert now().tzinfo == timezone.utc


class TestParseIso:
    """Tests for parse_iso"""

    def test_none_empty_returns_none(self, mock_settings):
        assert parse_iso(None) is None
        assert parse_iso("") is None

    def test_parse_utc_z_suffix(self, mock_settings):
        dt = parse_iso("2025-01-15T12:00:00Z")
        assert dt == datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def test_naive_string_gets_line_timezone(self, mock_settings):
        dt = parse_iso("2025-01-15T12:00:00")
        assert dt.tzinfo == timezone.utc

    def test_invalid_returns_none(self, mock_settings):
        assert parse_iso("not-a-date") is None


class TestToIso:
    """Tests for to_iso"""

    def test_none_returns_none(self, mock_settings):
        assert to_iso(None) is None

    def test_utc_uses_z_suffix(self, mock_settings):
        dt = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert to_iso(dt) == "2025-01-15T12:00:00.000Z"

    def test_offset_kept(self, mock_settings):
        dt = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso(dt) == "2025-01-15T12:00:00.000+02:00"
