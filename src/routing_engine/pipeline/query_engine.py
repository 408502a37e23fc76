"""Query engine: classify, fan out, merge. The online path of the service."""

from __future__ import annotations

import structlog

from routing_engine.config.settings import Settings
from routing_engine.exceptions import RoutingEngineError
from routing_engine.merging.merger import merge_outcomes
from routing_engine.models.domain import Query, Response
from routing_engine.observability.logger import get_logger
from routing_engine.observability.metrics import (
    log_orchestration_metrics,
    log_routing_decision,
)
from routing_engine.observability.tracing import TraceContext
from routing_engine.orchestration.deadline import Deadline
from routing_engine.orchestration.orchestrator import Orchestrator
from routing_engine.routing.classifier import CapabilityClassifier

logger = get_logger("query_engine")


class QueryEngine:
    def __init__(
        self,
        classifier: CapabilityClassifier,
        orchestrator: Orchestrator,
        settings: Settings,
    ) -> None:
        self._classifier = classifier
        self._orchestrator = orchestrator
        self._settings = settings

    async def execute(self, query: Query, deadline: Deadline | None = None) -> Response:
        """Answer ``query`` for its tenant.

        Raises a RoutingEngineError (CapabilityError, DeadlineExceeded) when the
        request cannot be answered; callers present ``failure_response``.
        """
        trace = TraceContext()
        deadline = deadline or Deadline(self._settings.request_timeout_s)

        with structlog.contextvars.bound_contextvars(
            trace_id=trace.trace_id, tenant=query.tenant.tenant_id
        ):
            logger.info("query_received", query_len=len(query.text))
            try:
                response = await self._run(query, trace, deadline)
            except RoutingEngineError as e:
                logger.error(
                    "query_failed",
                    error_type=type(e).__name__,
                    error=str(e),
                    total_ms=round(trace.elapsed_ms, 2),
                    spans=trace.span_summary(),
                )
                raise

            logger.info(
                "query_completed",
                file_ids=list(response.file_ids),
                has_chart=response.chart_spec is not None,
                degraded=response.error is not None,
                total_ms=round(trace.elapsed_ms, 2),
                spans=trace.span_summary(),
            )
            return response

    async def _run(self, query: Query, trace: TraceContext, deadline: Deadline) -> Response:
        # STEP 1: Capability classification
        with trace.span("classification") as span:
            decision = await self._classifier.classify(query.text, deadline)
        log_routing_decision(trace.trace_id, decision, span.duration_ms)

        # STEP 2: Concurrent capability execution
        with trace.span("orchestration") as span:
            outcomes = await self._orchestrator.run(query, decision, deadline)
        log_orchestration_metrics(trace.trace_id, outcomes, span.duration_ms)

        # STEP 3: Merge under the partial-failure policy
        with trace.span("merge"):
            return merge_outcomes(outcomes, self._settings.partial_failure_policy)
