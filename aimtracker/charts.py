"""
Chart data for the area and radar views.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd
import plotly.graph_objects as go

from aimtracker.models import BenchmarkEntry
from aimtracker.stats import ScenarioStats, parse_entry_date
from aimtracker.theme import ThemePalette


def area_chart_frame(entries: Iterable[BenchmarkEntry]) -> pd.DataFrame:
    """Score and accuracy per entry, indexed by date (ascending)."""
    rows = []
    for entry in entries:
        entry_date = parse_entry_date(entry.date)
        if entry_date is None:
            continue
        rows.append({"date": pd.Timestamp(entry_date), "Score": entry.score, "Accuracy": entry.accuracy})

    if not rows:
        return pd.DataFrame(columns=["Score", "Accuracy"], index=pd.DatetimeIndex([], name="date"))

    df = pd.DataFrame(rows)
    df = df.sort_values("date", kind="stable").set_index("date")
    return df


def score_radar_points(stats: ScenarioStats) -> list[tuple[str, float]]:
    if stats.count == 0:
        return []
    return [
        ("Avg Score", stats.avg_score),
        ("Best Score", stats.best_score),
        ("Lowest Score", stats.lowest_score),
    ]


def accuracy_radar_points(stats: ScenarioStats) -> list[tuple[str, float]]:
    if stats.count == 0:
        return []
    return [
        ("Avg Acc", stats.avg_accuracy),
        ("Best Acc", stats.best_accuracy),
        ("Lowest Acc", stats.lowest_accuracy),
    ]


def radar_figure(
    points: Sequence[tuple[str, float]],
    palette: ThemePalette,
    title: str,
    color: str,
    radial_max: float | None = None,
) -> go.Figure:
    labels = [label for label, _ in points]
    values = [float(value) for _, value in points]
    fig = go.Figure()
    if points:
        fig.add_trace(go.Scatterpolar(
            r=values + [values[0]],
            theta=labels + [labels[0]],
            fill="toself",
            name=title,
            line_color=color,
            opacity=0.75,
        ))
    radial_axis = dict(visible=True, gridcolor=palette.chart_grid, tickfont=dict(color=palette.chart_text))
    if radial_max is not None:
        radial_axis["range"] = [0, radial_max]
    fig.update_layout(
        polar=dict(bgcolor=palette.card_background, radialaxis=radial_axis),
        paper_bgcolor=palette.card_background,
        font_color=palette.chart_text,
        title=title,
        showlegend=False,
    )
    return fig
