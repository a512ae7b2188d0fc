from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from annotator import AnnotatedSeries
from thresholds import Thresholds

LINE_COLOR = "#3b82f6"
UPPER_COLOR = "#EF4444"
LOWER_COLOR = "#FBBF24"
VIOLATION_COLOR = "rgba(239,68,68,0.8)"


def series_frame(series: AnnotatedSeries) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "time": [p.time for p in series.points],
            "actual": [p.value for p in series.points],
            "is_violation": [p.is_violation for p in series.points],
        },
        columns=["time", "actual", "is_violation"],
    )


def build_parameter_figure(
    series: AnnotatedSeries, thresholds: Thresholds, *, height: int = 420
) -> go.Figure:
    fig = go.Figure()
    df = series_frame(series)
    # Category axis keeps the delivered order of the time labels
    x_order = df["time"].tolist()

    fig.add_trace(
        go.Scatter(
            x=df["time"],
            y=df["actual"],
            mode="lines",
            name="Actual",
            line=dict(color=LINE_COLOR, width=2),
            # absent readings break the line
            connectgaps=False,
        )
    )

    violations = series.violations
    if violations:
        fig.add_trace(
            go.Scatter(
                x=[p.time for p in violations],
                y=[p.value for p in violations],
                mode="markers",
                name="Violation",
                marker=dict(
                    symbol="triangle-up",
                    size=12,
                    color="rgba(239,68,68,0.5)",
                    line=dict(color=VIOLATION_COLOR, width=1),
                ),
            )
        )

    extremes = series.extrema.points
    if extremes:
        fig.add_trace(
            go.Scatter(
                x=[p.time for p in extremes],
                y=[p.value for p in extremes],
                mode="markers+text",
                name="Min/Max",
                text=[f"{p.value:g}" for p in extremes],
                textposition="top center",
                textfont=dict(size=12, color="#333"),
                marker=dict(size=12, color="#ffffff", line=dict(color="rgba(0,0,0,0.6)", width=1)),
            )
        )

    # Reference lines only for bounds that are set
    if thresholds.upper is not None:
        fig.add_hline(
            y=thresholds.upper,
            line_dash="dash",
            line_color=UPPER_COLOR,
            annotation_text="Upper Std Spec",
            annotation_position="top right",
            annotation_font_color=UPPER_COLOR,
        )
    if thresholds.lower is not None:
        fig.add_hline(
            y=thresholds.lower,
            line_dash="dash",
            line_color=LOWER_COLOR,
            annotation_text="Lower Std Spec",
            annotation_position="bottom right",
            annotation_font_color=LOWER_COLOR,
        )

    fig.update_layout(
        template="simple_white",
        height=height,
        margin=dict(l=20, r=30, t=40, b=20),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        title=f"Performance - {series.parameter.label}",
        xaxis_title="Time",
        yaxis_title=series.parameter.label,
    )
    fig.update_xaxes(type="category", categoryorder="array", categoryarray=x_order)
    fig.update_yaxes(range=list(series.domain), showgrid=True, gridcolor="#E5E7EB")
    return fig
