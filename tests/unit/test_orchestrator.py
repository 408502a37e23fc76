"""Tests for capability selection and the concurrent join."""

import asyncio

import pytest

from conftest import CHART, DIRECT, SYNTHESIZE, ScriptedLLM
from routing_engine.charting.extractor import ChartSpecExtractor
from routing_engine.exceptions import CapabilityError, DeadlineExceeded, GenerationError, StoreError
from routing_engine.generation.answer_generator import AnswerGenerator, DirectResponder
from routing_engine.merging.merger import merge_outcomes
from routing_engine.models.domain import (
    Capability,
    ChartSpec,
    Decision,
    DirectAnswer,
    Query,
    RAGAnswer,
    RetrievedDocument,
    TenantContext,
)
from routing_engine.orchestration.deadline import Deadline
from routing_engine.orchestration.orchestrator import Orchestrator
from routing_engine.orchestration.tasks import CapabilityTask, join_all
from routing_engine.pipeline.rag_pipeline import RAGPipeline
from routing_engine.retrieval.tenant_retriever import TenantRetriever

TENANT = TenantContext("tenant1")
DOC = RetrievedDocument("FILE-001", "What is the capital of France?", "Paris.")
BAR_JSON = '{"chartType": "bar", "title": "t", "labels": ["a"], "data": [1]}'


class StaticStore:
    def __init__(self, documents):
        self._documents = documents

    async def search_keyword(self, tenant, query_text, limit=5):
        return list(self._documents)[:limit]

    async def fetch_all(self, tenant, limit=100):
        return list(self._documents)[:limit]


def _orchestrator(llm, documents=(DOC,)) -> Orchestrator:
    rag = RAGPipeline(TenantRetriever(StaticStore(documents)), AnswerGenerator(llm))
    return Orchestrator(rag, ChartSpecExtractor(llm), DirectResponder(llm))


@pytest.mark.parametrize(
    "flags, expected",
    [
        ((True, False, False), [Capability.RETRIEVAL]),
        ((False, True, False), [Capability.CHART]),
        ((True, True, False), [Capability.RETRIEVAL, Capability.CHART]),
        ((False, False, True), [Capability.DIRECT]),
        ((True, False, True), [Capability.RETRIEVAL]),
        ((False, True, True), [Capability.CHART]),
        ((True, True, True), [Capability.RETRIEVAL, Capability.CHART]),
        ((False, False, False), []),
    ],
)
def test_plan(flags, expected):
    assert Orchestrator.plan(Decision(*flags, rationale="r")) == expected


@pytest.mark.asyncio
async def test_run_retrieval_and_chart():
    llm = ScriptedLLM().on(SYNTHESIZE, respond="Paris.").on(CHART, respond=BAR_JSON)
    query = Query("capital of France as a chart", TENANT)
    outcomes = await _orchestrator(llm).run(
        query, Decision(True, True, False, "r"), Deadline.unbounded()
    )
    assert [o.capability for o in outcomes] == [Capability.RETRIEVAL, Capability.CHART]
    assert all(o.ok for o in outcomes)
    assert isinstance(outcomes[0].result.payload, RAGAnswer)
    assert isinstance(outcomes[1].result.payload, ChartSpec)
    assert not llm.calls_matching(DIRECT)


@pytest.mark.asyncio
async def test_run_direct_only():
    llm = ScriptedLLM().on(DIRECT, respond="Hello!")
    outcomes = await _orchestrator(llm).run(
        Query("Hi", TENANT), Decision(False, False, True, "r"), Deadline.unbounded()
    )
    (outcome,) = outcomes
    assert outcome.result.payload == DirectAnswer("Hello!")


@pytest.mark.asyncio
async def test_run_nothing_scheduled():
    llm = ScriptedLLM()
    outcomes = await _orchestrator(llm).run(
        Query("?", TENANT), Decision(False, False, False, "r"), Deadline.unbounded()
    )
    assert outcomes == []
    assert llm.calls == []


@pytest.mark.asyncio
async def test_failure_does_not_cancel_sibling():
    llm = (
        ScriptedLLM()
        .on(SYNTHESIZE, respond=GenerationError("quota"))
        .on(CHART, respond=BAR_JSON, delay=0.05)
    )
    outcomes = await _orchestrator(llm).run(
        Query("q", TENANT), Decision(True, True, False, "r"), Deadline.unbounded()
    )
    retrieval, chart = outcomes
    assert isinstance(retrieval.error, GenerationError)
    assert chart.ok
    assert chart.result.payload.chart_type == "bar"


@pytest.mark.asyncio
async def test_tasks_run_concurrently():
    running = 0
    peak = 0

    async def work():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.02)
        running -= 1
        return DirectAnswer("done")

    tasks = [CapabilityTask(Capability.RETRIEVAL, work), CapabilityTask(Capability.CHART, work)]
    outcomes = await join_all(tasks, Deadline.unbounded())
    assert peak == 2
    assert [o.capability for o in outcomes] == [Capability.RETRIEVAL, Capability.CHART]


@pytest.mark.asyncio
async def test_join_records_settle_order():
    async def slow_failure():
        await asyncio.sleep(0.05)
        raise StoreError("db locked")

    async def fast_failure():
        raise GenerationError("quota")

    tasks = [
        CapabilityTask(Capability.RETRIEVAL, slow_failure),
        CapabilityTask(Capability.CHART, fast_failure),
    ]
    retrieval, chart = await join_all(tasks, Deadline.unbounded())
    assert (retrieval.settled_order, chart.settled_order) == (1, 0)

    with pytest.raises(CapabilityError) as exc_info:
        merge_outcomes([retrieval, chart], "fail")
    assert exc_info.value.capability == "chart"


@pytest.mark.asyncio
async def test_join_deadline_cancels_unfinished_tasks():
    cancelled = []

    async def slow():
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    tasks = [CapabilityTask(Capability.RETRIEVAL, slow), CapabilityTask(Capability.CHART, slow)]
    with pytest.raises(DeadlineExceeded):
        await join_all(tasks, Deadline(0.05))
    assert len(cancelled) == 2


@pytest.mark.asyncio
async def test_join_of_nothing():
    assert await join_all([], Deadline.unbounded()) == []
