"""End-to-end routing scenarios through the query engine with a scripted model."""

import pytest

from conftest import CHART, CLASSIFY, DIRECT, SYNTHESIZE, decision_json
from routing_engine.bootstrap import build_query_engine
from routing_engine.config.constants import (
    CHART_ONLY_ANSWER,
    CHART_SUFFIX,
    NO_DOCUMENTS_ANSWER,
    UNROUTABLE_ANSWER,
)
from routing_engine.exceptions import CapabilityError, DeadlineExceeded, GenerationError
from routing_engine.models.domain import Query, TenantContext
from routing_engine.orchestration.deadline import Deadline

T1 = TenantContext("tenant1")
T2 = TenantContext("tenant2")
T3 = TenantContext("tenant3")


@pytest.mark.asyncio
async def test_scenario_a_retrieval_only(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(retrieval=True, rationale="factual question"))
    llm.on(SYNTHESIZE, respond="The capital of France is Paris.")

    response = await engine.execute(Query("What is the capital of France?", T1))

    assert response.answer == "The capital of France is Paris."
    assert response.file_ids == ("FILE-001",)
    assert [r.file_id for r in response.references] == ["FILE-001"]
    assert response.chart_spec is None
    assert response.error is None
    assert not llm.calls_matching(CHART)
    assert not llm.calls_matching(DIRECT)


@pytest.mark.asyncio
async def test_scenario_b_chart_only(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(chart=True))
    llm.on(
        CHART,
        respond='{"chartType": "bar", "title": "Quarterly", "labels": ["Q1", "Q2", "Q3"], "data": [100, 150, 120]}',
    )

    response = await engine.execute(Query("Create a bar chart: Q1 100, Q2 150, Q3 120", T1))

    assert response.answer == CHART_ONLY_ANSWER
    assert response.file_ids == ()
    assert response.references == ()
    assert response.chart_spec.chart_type == "bar"
    assert len(response.chart_spec.labels) == 3
    assert len(response.chart_spec.data) == 3
    assert not llm.calls_matching(SYNTHESIZE)


@pytest.mark.asyncio
async def test_scenario_c_retrieval_and_chart(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(retrieval=True, chart=True))
    llm.on(SYNTHESIZE, respond="Plants turn sunlight, water and CO2 into sugar and oxygen.")
    llm.on(
        CHART,
        respond='{"chartType": "pie", "title": "Inputs", "labels": ["Sunlight", "Water", "CO2"], "data": [40, 30, 30]}',
    )

    response = await engine.execute(
        Query("Tell me about photosynthesis and show a pie chart", T1)
    )

    assert response.answer.endswith(CHART_SUFFIX)
    assert response.answer.startswith("Plants turn sunlight")
    assert response.file_ids == ("FILE-002",)
    assert response.chart_spec.chart_type == "pie"


@pytest.mark.asyncio
async def test_scenario_d_direct_only(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(direct=True))
    llm.on(DIRECT, respond="I'm doing well, thanks for asking!")

    response = await engine.execute(Query("Hello, how are you?", T1))

    assert response.answer == "I'm doing well, thanks for asking!"
    assert response.file_ids == ()
    assert response.references == ()
    assert response.chart_spec is None
    (direct_call,) = llm.calls_matching(DIRECT)
    assert direct_call.temperature == 0.7


@pytest.mark.asyncio
async def test_scenario_e_tenant_isolation(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(retrieval=True))
    llm.on(SYNTHESIZE, respond="William Shakespeare wrote it.")

    response = await engine.execute(Query("Who wrote Romeo and Juliet?", T2))
    assert response.file_ids == ("FILE-004",)

    empty = await engine.execute(Query("Who wrote Romeo and Juliet?", T3))
    assert empty.answer == NO_DOCUMENTS_ANSWER
    assert empty.file_ids == ()
    assert empty.references == ()
    assert len(llm.calls_matching(SYNTHESIZE)) == 1


@pytest.mark.asyncio
async def test_no_keyword_match_falls_back_to_full_scan(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(retrieval=True))
    llm.on(SYNTHESIZE, respond="Here is what I know.")

    response = await engine.execute(Query("Tell me something interesting", T2))

    assert response.file_ids == ("FILE-003", "FILE-004")
    (call,) = llm.calls_matching(SYNTHESIZE)
    assert call.prompt.index("FILE-003") < call.prompt.index("FILE-004")


@pytest.mark.asyncio
async def test_unparseable_classification_routes_to_retrieval(engine, llm):
    llm.on(CLASSIFY, respond="Definitely a knowledge-base question.")
    llm.on(SYNTHESIZE, respond="Paris.")

    response = await engine.execute(Query("What is the capital of France?", T1))

    assert response.answer == "Paris."
    assert response.file_ids == ("FILE-001",)


@pytest.mark.asyncio
async def test_classification_gateway_failure_routes_to_retrieval(engine, llm):
    llm.on(CLASSIFY, respond=GenerationError("503"))
    llm.on(SYNTHESIZE, respond="Paris.")

    response = await engine.execute(Query("What is the capital of France?", T1))
    assert response.file_ids == ("FILE-001",)


@pytest.mark.asyncio
async def test_unknown_tenant_yields_canned_answer(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(retrieval=True))

    response = await engine.execute(Query("What is the capital of France?", TenantContext("ghost")))
    assert response.answer == NO_DOCUMENTS_ANSWER


@pytest.mark.asyncio
async def test_fail_policy_surfaces_capability_error(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(retrieval=True, chart=True))
    llm.on(SYNTHESIZE, respond=GenerationError("quota exceeded"))
    llm.on(CHART, respond='{"chartType": "pie", "title": "t", "labels": ["a"], "data": [1]}')

    with pytest.raises(CapabilityError, match="retrieval"):
        await engine.execute(Query("Tell me about photosynthesis and show a pie chart", T1))


@pytest.mark.asyncio
async def test_degrade_policy_returns_partial_response(settings, store, llm):
    engine = build_query_engine(
        settings.model_copy(update={"partial_failure_policy": "degrade"}), store, llm
    )
    llm.on(CLASSIFY, respond=decision_json(retrieval=True, chart=True))
    llm.on(SYNTHESIZE, respond=GenerationError("quota exceeded"))
    llm.on(CHART, respond='{"chartType": "pie", "title": "t", "labels": ["a"], "data": [1]}')

    response = await engine.execute(Query("Tell me about photosynthesis and show a pie chart", T1))

    assert response.answer == CHART_ONLY_ANSWER
    assert response.chart_spec.chart_type == "pie"
    assert response.error == "retrieval: quota exceeded"


@pytest.mark.asyncio
async def test_all_false_decision_falls_back_rather_than_unroutable(engine, llm):
    llm.on(CLASSIFY, respond=decision_json())
    llm.on(SYNTHESIZE, respond="Paris.")

    response = await engine.execute(Query("What is the capital of France?", T1))
    assert response.answer != UNROUTABLE_ANSWER
    assert response.file_ids == ("FILE-001",)


@pytest.mark.asyncio
async def test_deadline_expiry_fails_request(engine, llm):
    llm.on(CLASSIFY, respond=decision_json(direct=True))
    llm.on(DIRECT, respond="Hi!", delay=1.0)

    with pytest.raises(DeadlineExceeded):
        await engine.execute(Query("Hello", T1), deadline=Deadline(0.1))
