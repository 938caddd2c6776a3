"""
Goal attainment metrics pack.

Single source of truth for: monthly quota vs won value and blended forecast.
"""
from collections.abc import Mapping
from typing import Any, Dict

import pandas as pd

from crm_analytics.data.periods import DateLike, resolve_reference_date, to_local_timestamps, in_month
from crm_analytics.data.schema import FrameLike, coerce_frame
from crm_analytics.data.semantic import won_deals, deal_amounts, safe_rate
from crm_analytics.metrics.forecast import calculate_weighted_forecast


def monthly_goal(goals: FrameLike, year: int, month: int) -> float:
    """
    Quota for a calendar month.

    Uses the first goal record of ``year`` and its month key (str(month));
    a missing year, month or amount gives 0.
    """
    goals = coerce_frame(goals, "goals")
    year_goals = goals[pd.to_numeric(goals["year"], errors="coerce") == year]
    if len(year_goals) == 0:
        return 0.0

    months = year_goals["months"].iloc[0]
    if not isinstance(months, Mapping):
        return 0.0

    amount = pd.to_numeric(pd.Series([months.get(str(month))]), errors="coerce").iloc[0]
    return 0.0 if pd.isna(amount) else float(amount)


def compute_goal_vs_actual(deals: FrameLike,
                           goals: FrameLike,
                           stages: FrameLike,
                           reference_date: DateLike = None) -> Dict[str, Any]:
    """
    Compare this month's quota with won value and the blended forecast.

    actual: value of won deals closed in the reference month.
    forecast: actual + the weighted forecast of open deals for the same month.
    percentage: actual / goal * 100, or 0 when there is no goal.

    Returns {"goal", "actual", "forecast", "percentage"}.
    """
    now = resolve_reference_date(reference_date)
    goal = monthly_goal(goals, now.year, now.month)

    won = won_deals(deals, stages)
    closed = to_local_timestamps(won["closed_at"])
    won_this_month = won[in_month(closed, now.year, now.month).fillna(False).astype(bool)]

    actual = float(deal_amounts(won_this_month).sum())
    weighted = calculate_weighted_forecast(deals, stages, reference_date=now)

    return {
        "goal": goal,
        "actual": actual,
        "forecast": actual + weighted,
        "percentage": safe_rate(actual, goal) if goal > 0 else 0.0,
    }
