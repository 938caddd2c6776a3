"""
Reusable UI components and blocks.
"""
import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from typing import Optional, Dict, Any

from crm_analytics.data.loader import load_table
from crm_analytics.ui.formatting import kpi_value, fmt_currency, fmt_count
from crm_analytics.ui.state import resolve_pipeline_id, set_state


def kpi_strip(metrics: Dict[str, Any],
              format_map: Optional[Dict[str, str]] = None,
              captions: Optional[Dict[str, str]] = None):
    """
    Render horizontal strip of KPI cards.

    Args:
        metrics: Dict of {label: value}
        format_map: Dict of {label: format_type} where format_type is
                    'currency', 'percent', 'days', 'count'
        captions: Dict of {label: caption shown under the value}
    """
    if format_map is None:
        format_map = {}
    if captions is None:
        captions = {}

    cols = st.columns(len(metrics))

    for i, (label, value) in enumerate(metrics.items()):
        with cols[i]:
            st.metric(label=label, value=kpi_value(value, format_map.get(label, "currency")))
            if label in captions:
                st.caption(captions[label])


def chart_card(title: str, fig: go.Figure, empty: bool = False):
    """Render a titled chart, or a placeholder when there is nothing to plot."""
    with st.container(border=True):
        st.markdown(f"**{title}**")
        if empty:
            st.info("Sin datos para mostrar.")
        else:
            st.plotly_chart(fig, use_container_width=True)


def pipeline_selector(key: str = "pipeline_selector") -> Optional[str]:
    """
    Render the pipeline dropdown and return the selected pipeline id.

    Falls back to the first pipeline when nothing is selected yet.
    """
    pipelines = load_table("pipelines")
    if len(pipelines) == 0:
        return None

    names = dict(zip(pipelines["id"], pipelines["name"]))
    ids = list(names.keys())
    current = resolve_pipeline_id(ids)

    selected = st.selectbox(
        "Pipeline",
        options=ids,
        index=ids.index(current),
        format_func=lambda pipeline_id: names.get(pipeline_id) or str(pipeline_id),
        key=key,
    )
    set_state("selected_pipeline_id", selected)
    return selected


def board_column_table(columns: pd.DataFrame):
    """Render board columns with formatted count and value."""
    display = columns.assign(
        deal_count=columns["deal_count"].map(fmt_count),
        total_value=columns["total_value"].map(fmt_currency),
    ).rename(columns={
        "name": "Etapa",
        "status": "Estado",
        "deal_count": "Oportunidades",
        "total_value": "Valor",
    })
    st.dataframe(display[["Etapa", "Estado", "Oportunidades", "Valor"]], use_container_width=True, hide_index=True)
