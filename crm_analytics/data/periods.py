"""
Reference-date handling, week-of-year buckets and calendar-month windows.

Every time-dependent metric takes an optional ``reference_date``; these
helpers turn it (or the wall clock) into a timezone-aware Timestamp in the
configured zone so that calendar dates are taken consistently.
"""
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple, Union

import pandas as pd

from crm_analytics.config import config, TRAILING_WEEKS

DateLike = Union[date, datetime, pd.Timestamp, str, None]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# =============================================================================
# REFERENCE DATE
# =============================================================================

def resolve_reference_date(reference_date: DateLike = None,
                           tz: Optional[str] = None) -> pd.Timestamp:
    """
    Return the reference instant as an aware Timestamp in ``tz``.

    None means now. Naive values are read as local wall time in ``tz``;
    aware values are converted.
    """
    tz = tz or config.timezone
    if reference_date is None:
        return pd.Timestamp.now(tz=tz)

    ts = pd.Timestamp(reference_date)
    if ts.tzinfo is None:
        return ts.tz_localize(tz)
    return ts.tz_convert(tz)


def to_local_timestamps(values: pd.Series, tz: Optional[str] = None) -> pd.Series:
    """
    Parse stored timestamps and convert them to ``tz``.

    Values without an offset are taken as UTC. Unparseable values become NaT.
    """
    tz = tz or config.timezone
    if pd.api.types.is_datetime64_any_dtype(values):
        parsed = pd.to_datetime(values, utc=True)
    else:
        parsed = pd.to_datetime(values.astype(object), errors="coerce", utc=True, format="ISO8601")
    return parsed.dt.tz_convert(tz)


# =============================================================================
# WEEK BUCKETS
# =============================================================================

def week_of_year(day: date) -> int:
    """
    Sunday-based week number of ``day`` within its own year (1-based).

    week = ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7), with the
    weekday counted 0=Sunday..6=Saturday.
    """
    jan1 = date(day.year, 1, 1)
    jan1_weekday = (jan1.weekday() + 1) % 7
    return math.ceil(((day - jan1).days + jan1_weekday + 1) / 7)


def week_label(day: date) -> str:
    """Chart label for the week containing ``day``, e.g. 'S42'."""
    return f"S{week_of_year(day)}"


def trailing_week_labels(today: date, weeks: int = TRAILING_WEEKS) -> List[str]:
    """
    Labels of the ``weeks`` weeks ending at ``today``, oldest first.

    Labels carry no year, so a label may repeat only if the window spans a
    full year.
    """
    return [week_label(today - timedelta(days=7 * i)) for i in range(weeks - 1, -1, -1)]


# =============================================================================
# CALENDAR MONTHS
# =============================================================================

def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def parse_year_month(value: Any) -> Optional[Tuple[int, int]]:
    """
    Read (year, month) from a literal 'YYYY-MM-DD' calendar date.

    The string is split on '-' and never handed to a timezone-aware parser,
    so the stored calendar day is kept as is. Returns None for missing or
    malformed values.
    """
    if isinstance(value, (date, datetime)) and not pd.isna(value):
        return value.year, value.month
    if not isinstance(value, str):
        return None

    parts = value.split("-")
    if len(parts) != 3:
        return None

    year = _leading_int(parts[0])
    month = _leading_int(parts[1])
    if year is None or month is None:
        return None
    return year, month


def in_month(local_ts: pd.Series, year: int, month: int) -> pd.Series:
    """Mask of local timestamps falling in the given calendar month."""
    return (local_ts.dt.year == year) & (local_ts.dt.month == month)
