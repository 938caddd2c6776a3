"""
Sales trend metrics pack.

Single source of truth for: won value per week over the trailing weeks.
"""
import logging
from typing import Dict, List

from crm_analytics.config import TRAILING_WEEKS
from crm_analytics.data.periods import (
    DateLike,
    resolve_reference_date,
    to_local_timestamps,
    trailing_week_labels,
    week_label,
)
from crm_analytics.data.schema import FrameLike
from crm_analytics.data.semantic import won_deals, deal_amounts

logger = logging.getLogger(__name__)


def compute_sales_by_period(deals: FrameLike,
                            stages: FrameLike,
                            reference_date: DateLike = None,
                            weeks: int = TRAILING_WEEKS) -> Dict[str, List]:
    """
    Sum won deal value into the trailing weekly buckets ending today.

    Buckets are labelled 'S<week of year>' oldest first and keyed by week
    number only, so a deal closed in the same week number of another year
    lands in the matching bucket. Deals closing outside the window are
    dropped; won deals without a usable closed_at are skipped.

    Returns {"labels": week labels, "data": won value per week}.
    """
    now = resolve_reference_date(reference_date)
    labels = trailing_week_labels(now.date(), weeks)

    won = won_deals(deals, stages)
    closed = to_local_timestamps(won["closed_at"])
    has_close = closed.notna()
    if (~has_close).any():
        logger.debug("Skipping %d won deals without closed_at", int((~has_close).sum()))

    won = won[has_close].assign(
        week=closed[has_close].map(lambda ts: week_label(ts.date())).astype(object),
        amount=deal_amounts(won[has_close]),
    )

    totals = won.groupby("week")["amount"].sum()
    data = totals.reindex(labels, fill_value=0).astype(float)

    return {"labels": labels, "data": data.tolist()}
