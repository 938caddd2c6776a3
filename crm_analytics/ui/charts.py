"""
Standard chart wrappers using Plotly.

Each builder takes the plain series produced by the metric packs.
"""
import plotly.graph_objects as go
from typing import Any, Dict, List


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "primary": "#FEA20F",
    "success": "#4CE5B1",
    "danger": "#F25F5C",
    "neutral": "#6c757d",
    "track": "rgba(128, 128, 128, 0.15)",
}

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 30, "t": 40, "b": 50},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


# =============================================================================
# PIPELINE CHARTS
# =============================================================================

def funnel_chart(series: Dict[str, List], title: str = "") -> go.Figure:
    """Open deals per stage, widest first."""
    fig = go.Figure(go.Funnel(
        y=series["labels"],
        x=series["data"],
        textinfo="value",
        marker={"color": CHART_COLORS["primary"]},
    ))
    return apply_layout(fig, title=title)


def sales_trend_chart(series: Dict[str, List], title: str = "") -> go.Figure:
    """Won value per week as a filled line."""
    fig = go.Figure(go.Scatter(
        x=series["labels"],
        y=series["data"],
        mode="lines+markers",
        name="Valor Ganado",
        line={"color": CHART_COLORS["primary"], "shape": "spline"},
        fill="tozeroy",
    ))
    fig.update_layout(showlegend=False)
    return apply_layout(fig, title=title)


def ranking_chart(series: Dict[str, List], title: str = "") -> go.Figure:
    """Horizontal bars, best seller on top."""
    fig = go.Figure(go.Bar(
        x=series["data"],
        y=series["labels"],
        orientation="h",
        marker_color=CHART_COLORS["primary"],
    ))
    fig.update_layout(yaxis={"autorange": "reversed"})
    return apply_layout(fig, title=title)


def sector_chart(series: Dict[str, List], title: str = "") -> go.Figure:
    """Share of won value per sector as a doughnut."""
    fig = go.Figure(go.Pie(
        labels=series["labels"],
        values=series["data"],
        hole=0.5,
    ))
    return apply_layout(fig, title=title)


def win_loss_chart(series: Dict[str, Any], title: str = "") -> go.Figure:
    """Grouped won/lost counts per sector."""
    colors = [CHART_COLORS["success"], CHART_COLORS["danger"]]

    fig = go.Figure()
    for i, dataset in enumerate(series["datasets"]):
        fig.add_trace(go.Bar(
            name=dataset["label"],
            x=series["labels"],
            y=dataset["data"],
            marker_color=colors[i % len(colors)],
        ))

    fig.update_layout(barmode="group")
    return apply_layout(fig, title=title)


def goal_gauge_chart(goal_vs_actual: Dict[str, float], title: str = "") -> go.Figure:
    """
    Half gauge of goal attainment.

    The bar shows percentage achieved; the threshold marks the blended
    forecast as a share of the goal when a goal exists.
    """
    goal = goal_vs_actual["goal"]
    forecast_pct = goal_vs_actual["forecast"] / goal * 100 if goal > 0 else None

    gauge = {
        "axis": {"range": [0, 100]},
        "bar": {"color": CHART_COLORS["success"]},
        "bgcolor": CHART_COLORS["track"],
    }
    if forecast_pct is not None:
        gauge["threshold"] = {
            "line": {"color": CHART_COLORS["primary"], "width": 2},
            "value": forecast_pct,
        }

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=goal_vs_actual["percentage"],
        number={"suffix": "%", "valueformat": ".0f"},
        title={"text": "Alcanzado"},
        gauge=gauge,
    ))

    return apply_layout(fig, title=title, height=260)
