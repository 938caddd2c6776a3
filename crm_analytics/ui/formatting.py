"""
Consistent number and display formatting (Colombian peso, es-CO grouping).
"""
import pandas as pd
from typing import Union, Dict, Any

from crm_analytics.config import CURRENCY_SYMBOL, FORMAT_PERCENT, FORMAT_DAYS


# =============================================================================
# NUMBER FORMATTERS
# =============================================================================

def _group_es(value: float, decimals: int = 0) -> str:
    """1234567.5 → '1.234.567,5' (es-CO separators)."""
    text = f"{value:,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def fmt_currency(value: Union[float, int, None], decimals: int = 0) -> str:
    """Format as pesos: $ 1.234.567"""
    if value is None or pd.isna(value):
        return "—"
    return f"{CURRENCY_SYMBOL} {_group_es(value, decimals)}"


def fmt_percent(value: Union[float, int, None]) -> str:
    """Format percentage without decimals: 42%"""
    if value is None or pd.isna(value):
        return "—"
    return FORMAT_PERCENT.format(value)


def fmt_days(value: Union[float, int, None]) -> str:
    """Format an age in days: 12d"""
    if value is None or pd.isna(value):
        return "—"
    return FORMAT_DAYS.format(value)


def fmt_count(value: Union[float, int, None]) -> str:
    """Format count: 1.234"""
    if value is None or pd.isna(value):
        return "—"
    return _group_es(int(value))


# =============================================================================
# KPI CARD HELPERS
# =============================================================================

def kpi_value(value: Union[float, int, None], format_type: str = "currency") -> str:
    """
    Format a KPI value for card display.

    Args:
        value: The value to format
        format_type: One of 'currency', 'percent', 'days', 'count'
    """
    if format_type == "currency":
        return fmt_currency(value)
    elif format_type == "percent":
        return fmt_percent(value)
    elif format_type == "days":
        return fmt_days(value)
    elif format_type == "count":
        return fmt_count(value)
    else:
        return str(value) if value is not None else "—"


def format_kpi_cards(kpis: Dict[str, Any]) -> Dict[str, str]:
    """Display strings for the board KPI strip."""
    return {
        "total_opportunities": fmt_count(kpis["total_opportunities"]),
        "created_today": f"+{int(kpis['created_today'])} hoy",
        "pipeline_value": fmt_currency(kpis["pipeline_value"]),
        "weighted_forecast": fmt_currency(kpis["weighted_forecast"]),
        "conversion_rate": fmt_percent(kpis["conversion_rate"]),
        "average_age_days": fmt_days(kpis["average_age_days"]),
    }
