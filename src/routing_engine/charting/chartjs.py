"""Render a ChartSpec as a Chart.js configuration object."""

from __future__ import annotations

from routing_engine.models.domain import ChartSpec

CHART_COLORS = (
    (255, 99, 132),
    (54, 162, 235),
    (255, 206, 86),
    (75, 192, 192),
    (153, 102, 255),
    (255, 159, 64),
)


def _rgba(rgb: tuple[int, int, int], alpha: float) -> str:
    r, g, b = rgb
    return f"rgba({r}, {g}, {b}, {alpha:g})"


def to_chartjs_config(spec: ChartSpec) -> dict:
    dataset: dict = {
        "label": spec.title,
        "data": list(spec.data),
        "backgroundColor": [_rgba(c, 0.8) for c in CHART_COLORS],
        "borderColor": [_rgba(c, 1) for c in CHART_COLORS],
        "borderWidth": 1,
    }
    options: dict = {
        "responsive": True,
        "plugins": {
            "legend": {"position": "top"},
            "title": {"display": True, "text": spec.title},
        },
    }

    if spec.chart_type == "line":
        dataset["tension"] = 0.4
        dataset["fill"] = False
    if spec.chart_type in ("bar", "line"):
        options["scales"] = {"y": {"beginAtZero": True}}

    return {
        "type": spec.chart_type,
        "data": {"labels": list(spec.labels), "datasets": [dataset]},
        "options": options,
    }
