"""
Semantic layer: deal status classification, relational lookups and safe sums.

CRITICAL: All aggregations must classify deals through these helpers so the
board, the KPI cards and every chart agree on what "won", "lost" and "open"
mean.
"""
import logging
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from crm_analytics.config import (
    STAGE_TAG_WON,
    STAGE_TAG_LOST,
    STATUS_WON,
    STATUS_LOST,
    STATUS_OPEN,
    UNKNOWN_SECTOR,
)
from crm_analytics.data.schema import FrameLike, coerce_frame

logger = logging.getLogger(__name__)


# =============================================================================
# STAGE CLASSIFICATION
# =============================================================================
# Stage.std_map → status: "Ganado" → won, "Perdido" → lost, anything else → open.

def status_from_std_map(std_map: Any) -> str:
    """Status implied by a stage's standard-mapping tag."""
    if not isinstance(std_map, str):
        return STATUS_OPEN
    if std_map == STAGE_TAG_WON:
        return STATUS_WON
    if std_map == STAGE_TAG_LOST:
        return STATUS_LOST
    return STATUS_OPEN


def stage_status_lookup(stages: FrameLike) -> Dict[Any, str]:
    """Map stage id → status. The first stage wins when ids repeat."""
    stages = coerce_frame(stages, "stages")
    first = stages.drop_duplicates(subset="id", keep="first")
    return {
        stage_id: status_from_std_map(tag)
        for stage_id, tag in zip(first["id"], first["std_map"])
    }


def get_deal_status(deal: Mapping[str, Any], stages: FrameLike) -> str:
    """
    Classify a single deal as 'won', 'lost' or 'open'.

    A deal whose stage cannot be found is open.
    """
    lookup = stage_status_lookup(stages)
    return lookup.get(deal.get("stage_id"), STATUS_OPEN)


def classify_deals(deals: pd.DataFrame, stages: FrameLike) -> pd.Series:
    """Status per deal row, indexed like ``deals``."""
    lookup = stage_status_lookup(stages)
    return deals["stage_id"].map(lambda stage_id: lookup.get(stage_id, STATUS_OPEN)).astype(object)


def deals_with_status(deals: FrameLike, stages: FrameLike, status: str) -> pd.DataFrame:
    """Rows of ``deals`` whose stage classifies as ``status``."""
    deals = coerce_frame(deals, "deals")
    return deals[classify_deals(deals, stages) == status].copy()


def won_deals(deals: FrameLike, stages: FrameLike) -> pd.DataFrame:
    return deals_with_status(deals, stages, STATUS_WON)


def lost_deals(deals: FrameLike, stages: FrameLike) -> pd.DataFrame:
    return deals_with_status(deals, stages, STATUS_LOST)


def open_deals(deals: FrameLike, stages: FrameLike) -> pd.DataFrame:
    return deals_with_status(deals, stages, STATUS_OPEN)


# =============================================================================
# NULL-SAFE NUMERICS
# =============================================================================

def coalesce_zero(values: pd.Series) -> pd.Series:
    """Numeric view of a nullable column with nulls (and junk) as 0."""
    return pd.to_numeric(values, errors="coerce").fillna(0).astype(float)


def deal_amounts(deals: pd.DataFrame) -> pd.Series:
    """Deal values with null → 0."""
    return coalesce_zero(deals["value"])


def safe_rate(numerator: float, denominator: float, scale: float = 100.0) -> float:
    """numerator / denominator * scale, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator) * scale


# =============================================================================
# RELATIONAL LOOKUPS
# =============================================================================

def _is_present(value: Any) -> bool:
    """Truthy, non-null text/identifier."""
    if value is None:
        return False
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return False
    return bool(value)


def first_match_lookup(df: pd.DataFrame, key: str, value: str) -> Dict[Any, Any]:
    """
    Map ``key`` → ``value`` keeping the first row per key.

    Entries whose value is null or empty are left out so callers fall back
    to their default.
    """
    first = df.drop_duplicates(subset=key, keep="first")
    return {
        k: v for k, v in zip(first[key], first[value])
        if _is_present(v)
    }


def resolve_sectors(deals: pd.DataFrame, accounts: FrameLike) -> pd.Series:
    """Account sector per deal; missing account or sector → 'No especificado'."""
    accounts = coerce_frame(accounts, "accounts")
    sectors = first_match_lookup(accounts, "id", "sector")
    return deals["account_id"].map(lambda account_id: sectors.get(account_id, UNKNOWN_SECTOR)).astype(object)


def has_owner(deals: pd.DataFrame) -> pd.Series:
    """Mask of deals with a non-empty owner."""
    return deals["owner_id"].map(_is_present).astype(bool)


# =============================================================================
# PIPELINE SCOPE
# =============================================================================

def filter_by_pipeline(df: FrameLike, pipeline_id: Optional[str], table_name: str) -> pd.DataFrame:
    """
    Restrict a deals or stages frame to one pipeline.

    None keeps every row.
    """
    df = coerce_frame(df, table_name)
    if pipeline_id is None:
        return df
    return df[df["pipeline_id"] == pipeline_id].copy()
