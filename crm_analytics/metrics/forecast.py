"""
Weighted forecast metrics pack.

Single source of truth for: probability-weighted value of open deals expected
to close in the current calendar month.
"""
import logging

import numpy as np

from crm_analytics.data.periods import DateLike, resolve_reference_date, parse_year_month
from crm_analytics.data.schema import FrameLike
from crm_analytics.data.semantic import open_deals, deal_amounts, coalesce_zero

logger = logging.getLogger(__name__)


def calculate_weighted_forecast(deals: FrameLike,
                                stages: FrameLike,
                                reference_date: DateLike = None) -> float:
    """
    Weighted value of open deals expected to close this month.

    Each open deal whose expected_close_date (a literal 'YYYY-MM-DD' date)
    falls in the reference month contributes value * probability / 100,
    with null value or probability counting as 0. Deals with a missing or
    malformed expected date are left out. The result is not rounded.

    The answer depends on the month of ``reference_date`` (now when None).
    """
    now = resolve_reference_date(reference_date)

    candidates = open_deals(deals, stages)
    expected = candidates["expected_close_date"].map(parse_year_month)

    unparsed = expected.isna() & candidates["expected_close_date"].notna()
    if unparsed.any():
        logger.debug("Ignoring %d open deals with malformed expected_close_date", int(unparsed.sum()))

    this_month = expected.map(lambda ym: ym == (now.year, now.month)).astype(bool)
    probability = coalesce_zero(candidates["probability"])

    weighted = np.where(this_month, deal_amounts(candidates) * probability / 100, 0.0)
    return float(weighted.sum())
