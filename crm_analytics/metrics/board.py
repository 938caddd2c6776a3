"""
Board column metrics pack.

Single source of truth for: per-stage deal count and value shown on the
Kanban column headers.
"""
from typing import Optional

import pandas as pd

from crm_analytics.data.schema import FrameLike
from crm_analytics.data.semantic import filter_by_pipeline, status_from_std_map, deal_amounts


BOARD_COLUMNS = ["stage_id", "name", "order", "status", "deal_count", "total_value"]


def compute_board_columns(deals: FrameLike,
                          stages: FrameLike,
                          pipeline_id: Optional[str] = None) -> pd.DataFrame:
    """
    Summarise each stage column of a pipeline board.

    Returns DataFrame ordered by stage order with:
    - stage_id, name, order
    - status: won / lost / open from the stage tag
    - deal_count: deals currently in the stage
    - total_value: their summed value (null → 0)
    """
    stages = filter_by_pipeline(stages, pipeline_id, "stages")
    deals = filter_by_pipeline(deals, pipeline_id, "deals")

    if len(stages) == 0:
        return pd.DataFrame(columns=BOARD_COLUMNS)

    columns = stages.sort_values("order", kind="stable").rename(columns={"id": "stage_id"})
    columns["status"] = columns["std_map"].map(status_from_std_map)

    counts = deals["stage_id"].value_counts()
    values = deal_amounts(deals).groupby(deals["stage_id"]).sum()

    columns["deal_count"] = columns["stage_id"].map(counts).fillna(0).astype(int)
    columns["total_value"] = columns["stage_id"].map(values).fillna(0).astype(float)

    return columns[BOARD_COLUMNS].reset_index(drop=True)
