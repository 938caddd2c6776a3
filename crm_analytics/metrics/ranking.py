"""
Salesperson ranking metrics pack.

Single source of truth for: won value per owner, best seller first.
"""
from typing import Dict, List

from crm_analytics.config import UNKNOWN_OWNER
from crm_analytics.data.schema import FrameLike, coerce_frame
from crm_analytics.data.semantic import (
    won_deals,
    deal_amounts,
    has_owner,
    first_match_lookup,
)


def compute_salesperson_ranking(deals: FrameLike,
                                users: FrameLike,
                                stages: FrameLike) -> Dict[str, List]:
    """
    Rank owners by the total value of their won deals.

    Deals without an owner are ignored. Owners with no user profile (or a
    blank name) are shown as 'Desconocido'. Ties keep first-encountered
    order, which is not part of the contract.

    Returns {"labels": owner names, "data": won value}, highest first.
    """
    users = coerce_frame(users, "users")

    won = won_deals(deals, stages)
    won = won[has_owner(won)]
    won = won.assign(amount=deal_amounts(won))

    totals = won.groupby("owner_id", sort=False)["amount"].sum()
    totals = totals.sort_values(ascending=False, kind="stable")

    names = first_match_lookup(users, "id", "name")

    return {
        "labels": [names.get(owner_id, UNKNOWN_OWNER) for owner_id in totals.index],
        "data": totals.astype(float).tolist(),
    }
