"""
Analytics: funnel, weekly trend, ranking, sectors, goal gauge and win/loss.
"""
import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.data.loader import load_snapshot
from crm_analytics.metrics.dashboard import compute_analytics_payload
from crm_analytics.ui.charts import (
    funnel_chart,
    sales_trend_chart,
    ranking_chart,
    sector_chart,
    goal_gauge_chart,
    win_loss_chart,
)
from crm_analytics.ui.components import chart_card, pipeline_selector
from crm_analytics.ui.formatting import fmt_currency
from crm_analytics.ui.state import init_state


def main():
    init_state()
    st.title("Analíticas")

    pipeline_id = pipeline_selector(key="analytics_pipeline")
    if pipeline_id is None:
        st.info("Para ver las analíticas, primero debes seleccionar un pipeline.")
        st.stop()

    try:
        snapshot = load_snapshot(pipeline_id)
    except Exception as e:
        st.error(f"Error al cargar datos: {e}")
        st.stop()

    payload = compute_analytics_payload(
        snapshot["deals"],
        snapshot["stages"],
        snapshot["users"],
        snapshot["accounts"],
        snapshot["goals"],
    )

    goal = payload["goal_vs_actual"]

    row1 = st.columns(2)
    with row1[0]:
        chart_card("Embudo de Ventas", funnel_chart(payload["funnel"]),
                   empty=len(payload["funnel"]["labels"]) == 0)
    with row1[1]:
        chart_card("Ventas por Semana", sales_trend_chart(payload["sales_by_period"]))

    row2 = st.columns(2)
    with row2[0]:
        chart_card("Ranking de Vendedores", ranking_chart(payload["salesperson_ranking"]),
                   empty=len(payload["salesperson_ranking"]["labels"]) == 0)
    with row2[1]:
        chart_card("Ventas por Sector", sector_chart(payload["sales_by_sector"]),
                   empty=len(payload["sales_by_sector"]["labels"]) == 0)

    row3 = st.columns(2)
    with row3[0]:
        chart_card("Meta vs. Real", goal_gauge_chart(goal))
        st.caption(
            f"Meta {fmt_currency(goal['goal'])} · Real {fmt_currency(goal['actual'])} · "
            f"Previsión {fmt_currency(goal['forecast'])}"
        )
    with row3[1]:
        chart_card("Ganadas vs. Perdidas", win_loss_chart(payload["win_loss"]),
                   empty=len(payload["win_loss"]["labels"]) == 0)


main()
