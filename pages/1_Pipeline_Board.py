"""
Pipeline Board: stage columns and headline KPIs for one pipeline.
"""
import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.data.loader import load_snapshot
from crm_analytics.metrics.board import compute_board_columns
from crm_analytics.metrics.kpis import compute_pipeline_kpis
from crm_analytics.ui.components import kpi_strip, pipeline_selector, board_column_table
from crm_analytics.ui.formatting import format_kpi_cards
from crm_analytics.ui.state import init_state


def main():
    init_state()
    st.title("Tablero")

    pipeline_id = pipeline_selector(key="board_pipeline")
    if pipeline_id is None:
        st.warning("No hay pipelines. Exporta la tabla `pipelines` para continuar.")
        st.stop()

    snapshot = load_snapshot(pipeline_id)
    deals, stages = snapshot["deals"], snapshot["stages"]

    kpis = compute_pipeline_kpis(deals, stages)
    cards = format_kpi_cards(kpis)

    show_forecast = st.toggle("Previsión ponderada", key="show_weighted_forecast")
    value_label = "Previsión Ponderada" if show_forecast else "Valor en Pipeline"
    value_key = "weighted_forecast" if show_forecast else "pipeline_value"

    kpi_strip(
        {
            "Oportunidades": kpis["total_opportunities"],
            value_label: kpis[value_key],
            "Tasa de Conversión": kpis["conversion_rate"],
            "Edad Promedio": kpis["average_age_days"],
        },
        format_map={
            "Oportunidades": "count",
            value_label: "currency",
            "Tasa de Conversión": "percent",
            "Edad Promedio": "days",
        },
        captions={
            "Oportunidades": cards["created_today"],
            value_label: "Estimación para este mes" if show_forecast else "Suma de oportunidades abiertas",
            "Tasa de Conversión": "Ganado vs. Cerrado",
            "Edad Promedio": "Desde creación",
        },
    )

    st.markdown("---")
    columns = compute_board_columns(deals, stages, pipeline_id)
    if len(columns) == 0:
        st.info("Este pipeline no tiene etapas.")
        return
    board_column_table(columns)


main()
