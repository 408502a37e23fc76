"""Metric recording helpers for request traces."""

from __future__ import annotations

from routing_engine.models.domain import Decision, TaskOutcome
from routing_engine.observability.logger import get_logger

logger = get_logger("metrics")


def log_routing_decision(trace_id: str, decision: Decision, duration_ms: float) -> None:
    logger.info(
        "routing_decision",
        trace_id=trace_id,
        retrieval=decision.wants_retrieval,
        chart=decision.wants_chart,
        direct=decision.wants_direct,
        rationale=decision.rationale,
        duration_ms=round(duration_ms, 2),
    )


def log_retrieval_metrics(
    tenant: str,
    strategy: str,
    keyword_hits: int,
    documents: int,
    duration_ms: float,
) -> None:
    # trace_id arrives through the bound contextvars
    logger.info(
        "retrieval_metrics",
        tenant=tenant,
        strategy=strategy,
        keyword_hits=keyword_hits,
        documents=documents,
        duration_ms=round(duration_ms, 2),
    )


def log_orchestration_metrics(
    trace_id: str,
    outcomes: list[TaskOutcome],
    duration_ms: float,
) -> None:
    logger.info(
        "orchestration_metrics",
        trace_id=trace_id,
        scheduled=[str(o.capability) for o in outcomes],
        failed=[str(o.capability) for o in outcomes if not o.ok],
        duration_ms=round(duration_ms, 2),
    )
