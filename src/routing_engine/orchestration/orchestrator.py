"""Capability selection and concurrent execution."""

from __future__ import annotations

from routing_engine.charting.extractor import ChartSpecExtractor
from routing_engine.generation.answer_generator import DirectResponder
from routing_engine.models.domain import Capability, Decision, Query, TaskOutcome
from routing_engine.observability.logger import get_logger
from routing_engine.orchestration.deadline import Deadline
from routing_engine.orchestration.tasks import CapabilityTask, join_all
from routing_engine.pipeline.rag_pipeline import RAGPipeline

logger = get_logger("orchestrator")


class Orchestrator:
    def __init__(
        self,
        rag: RAGPipeline,
        chart_extractor: ChartSpecExtractor,
        direct_responder: DirectResponder,
    ) -> None:
        self._rag = rag
        self._chart_extractor = chart_extractor
        self._direct_responder = direct_responder

    @staticmethod
    def plan(decision: Decision) -> list[Capability]:
        """Capabilities to schedule, in scheduling order.

        Direct answering is only scheduled when neither retrieval nor chart is.
        """
        plan: list[Capability] = []
        if decision.wants_retrieval:
            plan.append(Capability.RETRIEVAL)
        if decision.wants_chart:
            plan.append(Capability.CHART)
        if decision.wants_direct and not plan:
            plan.append(Capability.DIRECT)
        return plan

    def _build_task(
        self, capability: Capability, query: Query, deadline: Deadline
    ) -> CapabilityTask:
        if capability is Capability.RETRIEVAL:
            return CapabilityTask(
                capability,
                lambda: self._rag.answer(query.text, query.tenant, deadline),
            )
        if capability is Capability.CHART:
            return CapabilityTask(
                capability,
                lambda: self._chart_extractor.extract(query.text, deadline),
            )
        return CapabilityTask(
            capability,
            lambda: self._direct_responder.respond(query.text, deadline),
        )

    async def run(
        self, query: Query, decision: Decision, deadline: Deadline
    ) -> list[TaskOutcome]:
        plan = self.plan(decision)
        if not plan:
            logger.warning("nothing_scheduled", rationale=decision.rationale)
            return []

        logger.info(
            "tasks_scheduled",
            tenant=query.tenant.tenant_id,
            capabilities=[str(c) for c in plan],
        )
        tasks = [self._build_task(c, query, deadline) for c in plan]
        outcomes = await join_all(tasks, deadline)

        for outcome in outcomes:
            if not outcome.ok:
                logger.error(
                    "capability_failed",
                    capability=str(outcome.capability),
                    error_type=type(outcome.error).__name__,
                    error=str(outcome.error),
                )
        return outcomes
