"""
Pipeline KPI metrics pack.

Single source of truth for: the headline cards above the board (opportunity
count, new today, pipeline value, weighted forecast, conversion, age).
"""
from typing import Dict

from crm_analytics.config import STATUS_WON, STATUS_LOST, STATUS_OPEN
from crm_analytics.data.periods import DateLike, resolve_reference_date, to_local_timestamps
from crm_analytics.data.schema import FrameLike, coerce_frame
from crm_analytics.data.semantic import classify_deals, deal_amounts, safe_rate
from crm_analytics.metrics.forecast import calculate_weighted_forecast

SECONDS_PER_DAY = 86400


def compute_pipeline_kpis(deals: FrameLike,
                          stages: FrameLike,
                          reference_date: DateLike = None) -> Dict[str, float]:
    """
    Compute the KPI strip for a set of deals.

    Returns dict with:
    - total_opportunities: every deal, whatever its status
    - created_today: deals created on the reference calendar day
    - pipeline_value: value of open deals
    - weighted_forecast: see calculate_weighted_forecast
    - conversion_rate: won / (won + lost) * 100, 0 with nothing closed
    - average_age_days: mean days since creation of open deals, 0 with none
    """
    now = resolve_reference_date(reference_date)
    deals = coerce_frame(deals, "deals")
    status = classify_deals(deals, stages)

    created = to_local_timestamps(deals["created_at"])
    created_today = int((created.dt.date == now.date()).sum())

    is_open = status == STATUS_OPEN
    won_count = int((status == STATUS_WON).sum())
    lost_count = int((status == STATUS_LOST).sum())

    open_created = created[is_open].dropna()
    ages = (now - open_created).dt.total_seconds() / SECONDS_PER_DAY
    average_age = float(ages.mean()) if len(ages) > 0 else 0.0

    return {
        "total_opportunities": len(deals),
        "created_today": created_today,
        "pipeline_value": float(deal_amounts(deals[is_open]).sum()),
        "weighted_forecast": calculate_weighted_forecast(deals, stages, reference_date=now),
        "conversion_rate": safe_rate(won_count, won_count + lost_count),
        "average_age_days": average_age,
    }
