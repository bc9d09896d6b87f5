"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from jobmatch.utils.timestamps import ensure_utc, parse_iso_datetime, to_iso_string, utc_now


class TestUtcNow:
    """Tests for utc_now function."""

    def test_utc_now_returns_utc_datetime(self):
        now = utc_now()

        assert isinstance(now, datetime)
        assert now.tzinfo == timezone.utc

    def test_utc_now_is_recent(self):
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_ensure_utc_with_none(self):
        assert ensure_utc(None) is None

    def test_ensure_utc_with_naive_datetime(self):
        """Naive datetimes are assumed to already be UTC."""
        result = ensure_utc(datetime(2025, 11, 4, 10, 30))

        assert result == datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc)

    def test_ensure_utc_with_other_timezone(self):
        eastern = timezone(timedelta(hours=-5))
        result = ensure_utc(datetime(2025, 11, 4, 5, 30, tzinfo=eastern))

        assert result == datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc


class TestParseIsoDatetime:
    """Tests for parse_iso_datetime function."""

    @pytest.mark.parametrize(
        "value",
        [
            "2025-11-04T10:30:00Z",
            "2025-11-04T10:30:00.000Z",
            "2025-11-04T12:30:00+02:00",
            "2025-11-04T10:30:00",
            " 2025-11-04T10:30:00Z ",
        ],
    )
    def test_parse_variants(self, value):
        assert parse_iso_datetime(value) == datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc)

    def test_parse_date_only(self):
        assert parse_iso_datetime("2025-11-04") == datetime(2025, 11, 4, tzinfo=timezone.utc)

    def test_parse_epoch_seconds(self):
        assert parse_iso_datetime(1762252200) == datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2025-13-45", True])
    def test_unparseable_returns_none(self, value):
        assert parse_iso_datetime(value) is None


class TestToIsoString:
    def test_formats_with_z_suffix(self):
        dt = datetime(2025, 11, 4, 10, 30, 15, 123456, tzinfo=timezone.utc)
        assert to_iso_string(dt) == "2025-11-04T10:30:15Z"

    def test_converts_to_utc(self):
        dt = datetime(2025, 11, 4, 12, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso_string(dt) == "2025-11-04T10:30:00Z"

    def test_none(self):
        assert to_iso_string(None) is None
