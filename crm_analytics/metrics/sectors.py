"""
Sector metrics pack.

Single source of truth for: won value by client sector, won/lost counts by sector.
"""
from typing import Any, Dict, List

from crm_analytics.config import WIN_LABEL, LOSS_LABEL
from crm_analytics.data.schema import FrameLike
from crm_analytics.data.semantic import (
    won_deals,
    lost_deals,
    deal_amounts,
    resolve_sectors,
)


def compute_sales_by_sector(deals: FrameLike,
                            accounts: FrameLike,
                            stages: FrameLike) -> Dict[str, List]:
    """
    Sum won deal value per account sector.

    Sectors appear in the order they are first met. Deals without an
    account, or whose account has no sector, count as 'No especificado'.
    """
    won = won_deals(deals, stages)
    won = won.assign(sector=resolve_sectors(won, accounts), amount=deal_amounts(won))

    totals = won.groupby("sector", sort=False)["amount"].sum()

    return {"labels": totals.index.tolist(), "data": totals.astype(float).tolist()}


def compute_win_loss(deals: FrameLike,
                     accounts: FrameLike,
                     stages: FrameLike) -> Dict[str, Any]:
    """
    Count won and lost deals per account sector.

    Labels are the union of sectors seen in won deals and in lost deals
    (won first, each sector once); a side with no deals in a sector
    reports 0.

    Returns {"labels": sectors, "datasets": [{"label": "Ganadas", "data"},
    {"label": "Perdidas", "data"}]}.
    """
    won_sectors = resolve_sectors(won_deals(deals, stages), accounts)
    lost_sectors = resolve_sectors(lost_deals(deals, stages), accounts)

    won_counts = won_sectors.value_counts(sort=False)
    lost_counts = lost_sectors.value_counts(sort=False)

    labels = list(dict.fromkeys(won_sectors.tolist() + lost_sectors.tolist()))

    return {
        "labels": labels,
        "datasets": [
            {"label": WIN_LABEL, "data": [int(won_counts.get(sector, 0)) for sector in labels]},
            {"label": LOSS_LABEL, "data": [int(lost_counts.get(sector, 0)) for sector in labels]},
        ],
    }
