"""
Analytics payload: every chart series of the analytics page in one call.
"""
from typing import Any, Dict, Optional

from crm_analytics.data.periods import DateLike, resolve_reference_date
from crm_analytics.data.schema import FrameLike
from crm_analytics.data.semantic import filter_by_pipeline
from crm_analytics.metrics.funnel import compute_funnel
from crm_analytics.metrics.goals import compute_goal_vs_actual
from crm_analytics.metrics.ranking import compute_salesperson_ranking
from crm_analytics.metrics.sales_trend import compute_sales_by_period
from crm_analytics.metrics.sectors import compute_sales_by_sector, compute_win_loss


def compute_analytics_payload(deals: FrameLike,
                              stages: FrameLike,
                              users: FrameLike,
                              accounts: FrameLike,
                              goals: FrameLike,
                              reference_date: DateLike = None,
                              pipeline_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the six analytics series from one snapshot.

    Deals and stages are restricted to ``pipeline_id`` when given; users,
    accounts and goals are shared across pipelines. All time-dependent
    series use the same reference instant.
    """
    now = resolve_reference_date(reference_date)
    deals = filter_by_pipeline(deals, pipeline_id, "deals")
    stages = filter_by_pipeline(stages, pipeline_id, "stages")

    return {
        "funnel": compute_funnel(deals, stages),
        "sales_by_period": compute_sales_by_period(deals, stages, reference_date=now),
        "salesperson_ranking": compute_salesperson_ranking(deals, users, stages),
        "sales_by_sector": compute_sales_by_sector(deals, accounts, stages),
        "goal_vs_actual": compute_goal_vs_actual(deals, goals, stages, reference_date=now),
        "win_loss": compute_win_loss(deals, accounts, stages),
    }
