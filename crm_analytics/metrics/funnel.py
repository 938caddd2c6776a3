"""
Funnel metrics pack.

Single source of truth for: deals sitting in each open stage.
"""
from typing import Dict, List

from crm_analytics.config import STATUS_OPEN
from crm_analytics.data.schema import FrameLike, coerce_frame
from crm_analytics.data.semantic import status_from_std_map


def compute_funnel(deals: FrameLike, stages: FrameLike) -> Dict[str, List]:
    """
    Count deals per open stage, left to right by stage order.

    Terminal stages (won/lost) are not part of the funnel. Every deal in an
    open stage is counted regardless of age.

    Returns {"labels": stage names, "data": deal counts}.
    """
    deals = coerce_frame(deals, "deals")
    stages = coerce_frame(stages, "stages")

    is_open = stages["std_map"].map(status_from_std_map) == STATUS_OPEN
    open_stages = stages[is_open].sort_values("order", kind="stable")

    counts = deals["stage_id"].value_counts()

    return {
        "labels": open_stages["name"].tolist(),
        "data": [int(counts.get(stage_id, 0)) for stage_id in open_stages["id"]],
    }
