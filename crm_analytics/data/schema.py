"""
Schema validation and frame coercion for backend table snapshots.
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

import pandas as pd
import streamlit as st

from crm_analytics.config import (
    REQUIRED_COLUMNS,
    OPTIONAL_COLUMNS,
    MODEL_COLUMNS,
    STAGE_TAG_WON,
    STAGE_TAG_LOST,
)

logger = logging.getLogger(__name__)

# Rows as fetched from the backend, or an already-built frame
FrameLike = Union[pd.DataFrame, Sequence[Mapping[str, Any]], None]


class SchemaValidationError(Exception):
    """Raised when required columns are missing."""
    pass


def coerce_frame(data: FrameLike, table_name: str) -> pd.DataFrame:
    """
    Return a DataFrame carrying every model column of ``table_name``.

    Accepts a DataFrame or a sequence of row mappings. Columns missing from
    the input are added as nulls; extra columns are kept. The input is never
    modified.
    """
    if data is None:
        df = pd.DataFrame()
    elif isinstance(data, pd.DataFrame):
        df = data.copy()
    else:
        df = pd.DataFrame.from_records(list(data))

    for col in MODEL_COLUMNS.get(table_name, []):
        if col not in df.columns:
            df[col] = None

    return df


def validate_required_columns(df: pd.DataFrame, table_name: str) -> Tuple[bool, List[str]]:
    """(is_valid, missing) for the hard column contract of ``table_name``."""
    missing = [col for col in REQUIRED_COLUMNS.get(table_name, []) if col not in df.columns]
    return not missing, missing


def check_optional_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """Optional columns absent from ``df``; their metrics fall back to defaults."""
    return [col for col in OPTIONAL_COLUMNS.get(table_name, []) if col not in df.columns]


def check_values(df: pd.DataFrame, table_name: str) -> List[str]:
    """
    Soft value checks that do not block loading.

    Rows without an id are reported for every table; stage tags other than
    'Ganado'/'Perdido' are reported because such stages classify as open.
    """
    issues = []

    if "id" in df.columns:
        null_ids = int(df["id"].isna().sum())
        if null_ids:
            issues.append(f"{null_ids:,} rows without id")

    if table_name == "stages" and "std_map" in df.columns:
        tags = df["std_map"].dropna()
        unknown = sorted(set(tags[~tags.isin([STAGE_TAG_WON, STAGE_TAG_LOST])].astype(str)))
        if unknown:
            issues.append(f"stage tags treated as open: {unknown}")

    return issues


def validate_schema(df: pd.DataFrame, table_name: str, strict: bool = True) -> Dict:
    """
    Validate one snapshot table.

    Args:
        df: Table as exported (before coercion)
        table_name: Key into the column contracts
        strict: Raise SchemaValidationError on missing required columns

    Returns:
        Dict with is_valid, missing_required, missing_optional, value_issues,
        total_columns and total_rows
    """
    is_valid, missing_required = validate_required_columns(df, table_name)
    missing_optional = check_optional_columns(df, table_name)
    value_issues = check_values(df, table_name)

    if missing_optional:
        logger.warning("%s: missing optional columns %s", table_name, missing_optional)
    for issue in value_issues:
        logger.warning("%s: %s", table_name, issue)

    if strict and not is_valid:
        raise SchemaValidationError(
            f"{table_name} snapshot lacks required columns {missing_required}"
        )

    return {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "missing_optional": missing_optional,
        "value_issues": value_issues,
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }


def display_validation_result(result: Dict, table_name: str):
    """Show one table's validation outcome in Streamlit."""
    if not result["is_valid"]:
        st.error(f"`{table_name}` lacks required columns: {', '.join(result['missing_required'])}")
        return

    st.success(f"`{table_name}`: {result['total_rows']:,} rows, {result['total_columns']} columns")
    if result["missing_optional"]:
        st.warning(f"`{table_name}`: optional columns absent, defaults apply: {', '.join(result['missing_optional'])}")
    for issue in result["value_issues"]:
        st.warning(f"`{table_name}`: {issue}")


def _parse_months(value: Any) -> Any:
    """Goal month mappings arrive as JSON text from csv exports."""
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            logger.warning("Unparseable goal months mapping: %r", value)
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return value


def ensure_column_types(df: pd.DataFrame, table_name: str) -> pd.DataFrame:
    """
    Ensure consistent column types for a loaded snapshot.

    Timestamps are left as stored; they are parsed with timezone handling
    where they are used.
    """
    df = df.copy()

    if table_name == "deals":
        for col in ["value", "probability"]:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors="coerce")
        # Literal YYYY-MM-DD strings; parquet/csv readers may turn them into dates
        if "expected_close_date" in df.columns:
            df["expected_close_date"] = df["expected_close_date"].map(
                lambda v: v.strftime("%Y-%m-%d") if hasattr(v, "strftime") and pd.notna(v) else v
            )

    elif table_name == "stages":
        if "order" in df.columns:
            df["order"] = pd.to_numeric(df["order"], errors="coerce")

    elif table_name == "goals":
        if "year" in df.columns:
            df["year"] = pd.to_numeric(df["year"], errors="coerce")
        if "months" in df.columns:
            df["months"] = df["months"].map(_parse_months)

    return df


def get_column_info(df: pd.DataFrame) -> pd.DataFrame:
    """Per-column dtype, fill rate, cardinality and a sample value."""
    rows = []
    for col in df.columns:
        values = df[col]
        present = values.dropna()
        rows.append({
            "column": col,
            "dtype": str(values.dtype),
            "filled": f"{values.notna().mean() * 100:.0f}%" if len(values) else "-",
            "distinct": present.astype(str).nunique(),
            "sample": str(present.iloc[0]) if len(present) else "",
        })
    return pd.DataFrame(rows)
