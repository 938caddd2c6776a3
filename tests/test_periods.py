"""
Tests for reference dates, week buckets and calendar-month parsing.
"""
import pytest
import pandas as pd
import sys
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.data.periods import (
    resolve_reference_date,
    to_local_timestamps,
    week_of_year,
    week_label,
    trailing_week_labels,
    parse_year_month,
    in_month,
)


TZ = "America/Bogota"


class TestWeekOfYear:
    """Tests for the Sunday-based week number."""

    def test_first_days_of_year(self):
        # 2025-01-01 is a Wednesday; the first Sunday starts week 2
        assert week_of_year(date(2025, 1, 1)) == 1
        assert week_of_year(date(2025, 1, 4)) == 1
        assert week_of_year(date(2025, 1, 5)) == 2

    def test_mid_year(self):
        assert week_of_year(date(2025, 10, 15)) == 42

    def test_year_end(self):
        assert week_of_year(date(2025, 12, 31)) == 53

    def test_year_starting_on_sunday(self):
        # 2023-01-01 is a Sunday
        assert week_of_year(date(2023, 1, 1)) == 1
        assert week_of_year(date(2023, 1, 7)) == 1
        assert week_of_year(date(2023, 1, 8)) == 2

    def test_label(self):
        assert week_label(date(2025, 10, 15)) == "S42"


class TestTrailingWeekLabels:
    """Tests for the trailing weekly window."""

    def test_eight_labels_ending_today(self):
        labels = trailing_week_labels(date(2025, 10, 15))

        assert labels == ["S35", "S36", "S37", "S38", "S39", "S40", "S41", "S42"]

    def test_window_crossing_new_year(self):
        labels = trailing_week_labels(date(2026, 1, 7))

        assert labels == ["S47", "S48", "S49", "S50", "S51", "S52", "S53", "S2"]

    def test_custom_length(self):
        assert trailing_week_labels(date(2025, 10, 15), weeks=3) == ["S40", "S41", "S42"]


class TestResolveReferenceDate:
    """Tests for reference instant normalisation."""

    def test_naive_is_local_wall_time(self):
        now = resolve_reference_date("2025-10-15 12:00", tz=TZ)

        assert str(now.tz) == TZ
        assert now.hour == 12
        assert now.date() == date(2025, 10, 15)

    def test_aware_is_converted(self):
        now = resolve_reference_date(pd.Timestamp("2025-10-15 03:00", tz="UTC"), tz=TZ)

        assert now.date() == date(2025, 10, 14)
        assert now.hour == 22

    def test_date_object(self):
        now = resolve_reference_date(date(2025, 10, 15), tz=TZ)

        assert now.date() == date(2025, 10, 15)

    def test_none_is_now(self):
        before = pd.Timestamp.now(tz=TZ)
        now = resolve_reference_date(None, tz=TZ)

        assert now >= before
        assert str(now.tz) == TZ


class TestToLocalTimestamps:
    """Tests for stored timestamp parsing."""

    def test_offset_strings_are_converted(self):
        values = pd.Series(["2025-10-15T03:00:00+00:00"])

        local = to_local_timestamps(values, tz=TZ)

        assert local.iloc[0].date() == date(2025, 10, 14)
        assert local.iloc[0].hour == 22

    def test_naive_strings_are_utc(self):
        values = pd.Series(["2025-10-15T12:00:00"])

        local = to_local_timestamps(values, tz=TZ)

        assert local.iloc[0].hour == 7

    def test_missing_and_garbage_are_nat(self):
        values = pd.Series(["2025-10-15T12:00:00Z", None, "not a date"])

        local = to_local_timestamps(values, tz=TZ)

        assert local.notna().tolist() == [True, False, False]

    def test_datetime_dtype(self):
        values = pd.Series(pd.to_datetime(["2025-10-15 12:00"]))

        local = to_local_timestamps(values, tz=TZ)

        assert local.iloc[0].hour == 7


class TestParseYearMonth:
    """Tests for literal calendar-date parsing."""

    def test_iso_date(self):
        assert parse_year_month("2025-10-01") == (2025, 10)

    def test_trailing_time_is_ignored(self):
        assert parse_year_month("2025-10-31T23:59:00") == (2025, 10)

    def test_date_object(self):
        assert parse_year_month(date(2025, 10, 1)) == (2025, 10)
        assert parse_year_month(datetime(2025, 10, 1, 8)) == (2025, 10)

    def test_malformed(self):
        assert parse_year_month("2025-10") is None
        assert parse_year_month("10/01/2025") is None
        assert parse_year_month("abc-de-fg") is None
        assert parse_year_month("") is None

    def test_missing(self):
        assert parse_year_month(None) is None
        assert parse_year_month(float("nan")) is None
        assert parse_year_month(pd.NaT) is None


class TestInMonth:
    """Tests for the calendar-month mask."""

    def test_mask(self):
        local = to_local_timestamps(
            pd.Series(["2025-10-01T12:00:00-05:00", "2025-09-30T12:00:00-05:00", None]),
            tz=TZ,
        )

        assert in_month(local, 2025, 10).tolist() == [True, False, False]
