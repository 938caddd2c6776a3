"""
Snapshot loading utilities with Streamlit caching.

Snapshots are exports of the backend tables (deals, stages, users, accounts,
goals, pipelines) stored as parquet, csv or json records.
"""
import logging
from pathlib import Path
from typing import Optional, Dict, Any

import pandas as pd
import streamlit as st

from crm_analytics.config import config, TABLE_FILES, CORE_TABLES
from crm_analytics.data.schema import coerce_frame, ensure_column_types
from crm_analytics.data.semantic import filter_by_pipeline

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIXES = (".parquet", ".csv", ".json")


def find_snapshot(filepath: Path) -> Optional[Path]:
    """First existing snapshot file for a table stem, in suffix preference order."""
    for suffix in SNAPSHOT_SUFFIXES:
        candidate = filepath.with_suffix(suffix)
        if candidate.exists():
            return candidate
    return None


def _load_file(filepath: Path) -> Optional[pd.DataFrame]:
    """Load a single snapshot file (parquet, csv or json records)."""
    path = find_snapshot(filepath)
    if path is None:
        return None

    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        # Identifiers and literal dates must stay text
        return pd.read_csv(path, dtype=str, keep_default_na=True)
    return pd.read_json(path, orient="records", dtype=False, convert_dates=False)


def load_raw_table(table_name: str, snapshot_dir: Optional[Path] = None) -> Optional[pd.DataFrame]:
    """Load a snapshot exactly as exported, without coercion. None if absent."""
    snapshot_dir = snapshot_dir or config.snapshot_dir
    return _load_file(snapshot_dir / TABLE_FILES[table_name])


def load_table_from_dir(table_name: str, snapshot_dir: Path) -> pd.DataFrame:
    """
    Load and normalise one table from ``snapshot_dir``.

    A missing file yields an empty frame with the model columns.
    """
    filepath = snapshot_dir / TABLE_FILES[table_name]
    df = _load_file(filepath)
    if df is None:
        level = logging.ERROR if table_name in CORE_TABLES else logging.WARNING
        logger.log(level, "No %s snapshot found in %s", table_name, snapshot_dir)
        df = pd.DataFrame()

    return ensure_column_types(coerce_frame(df, table_name), table_name)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_table(table_name: str) -> pd.DataFrame:
    """Load a snapshot table from the configured data directory."""
    return load_table_from_dir(table_name, config.snapshot_dir)


def load_snapshot(pipeline_id: Optional[str] = None,
                  snapshot_dir: Optional[Path] = None) -> Dict[str, pd.DataFrame]:
    """
    Load every table needed by the analytics page.

    Deals and stages are restricted to ``pipeline_id`` when given.
    """
    if snapshot_dir is None:
        tables = {name: load_table(name) for name in TABLE_FILES}
    else:
        tables = {name: load_table_from_dir(name, snapshot_dir) for name in TABLE_FILES}

    tables["deals"] = filter_by_pipeline(tables["deals"], pipeline_id, "deals")
    tables["stages"] = filter_by_pipeline(tables["stages"], pipeline_id, "stages")
    return tables


def get_data_status(snapshot_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Get status of all snapshot files."""
    snapshot_dir = snapshot_dir or config.snapshot_dir
    status = {}

    for key, filename in TABLE_FILES.items():
        path = find_snapshot(snapshot_dir / filename)
        status[key] = {
            "exists": path is not None,
            "format": path.suffix.lstrip(".") if path is not None else None,
            "required": key in CORE_TABLES,
        }

    return status
