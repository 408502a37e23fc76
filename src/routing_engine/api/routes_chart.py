"""Chart.js rendering endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from routing_engine.charting.chartjs import to_chartjs_config
from routing_engine.models.schemas import ChartRenderRequest, ChartRenderResponse

router = APIRouter()


@router.post("/chart/render", response_model=ChartRenderResponse)
async def render_chart(request: ChartRenderRequest) -> ChartRenderResponse:
    """Turn a ``chartConfig`` from a query response into a Chart.js config."""
    return ChartRenderResponse(config=to_chartjs_config(request.chart_config.to_domain()))
