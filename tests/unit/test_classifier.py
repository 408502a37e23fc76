"""Tests for capability classification and its fallback."""

import pytest

from conftest import CLASSIFY, ScriptedLLM, decision_json
from routing_engine.exceptions import DeadlineExceeded, GenerationError
from routing_engine.models.domain import Decision
from routing_engine.orchestration.deadline import Deadline
from routing_engine.parsing.json_extract import ParseFailure
from routing_engine.routing.classifier import (
    FALLBACK_DECISION,
    CapabilityClassifier,
    parse_decision,
)


def test_fallback_is_retrieval_only():
    assert FALLBACK_DECISION == Decision(True, False, False, "fallback")


def test_parse_valid_decision():
    decision = parse_decision(decision_json(retrieval=True, chart=True, rationale="both"))
    assert decision == Decision(True, True, False, "both")


def test_parse_decision_wrapped_in_prose():
    raw = "Here is my analysis:\n```json\n" + decision_json(direct=True) + "\n```"
    assert parse_decision(raw) == Decision(False, False, True, "test")


@pytest.mark.parametrize(
    "raw",
    [
        "retrieval please",
        '{"retrieval": true, "chart": false',
        '{"retrieval": "true", "chart": false, "direct": false, "rationale": "x"}',
        '{"retrieval": 1, "chart": 0, "direct": 0, "rationale": "x"}',
        '{"retrieval": true, "chart": false, "direct": false, "rationale": 5}',
        decision_json(),
    ],
)
def test_parse_rejects_unusable_output(raw):
    assert isinstance(parse_decision(raw), ParseFailure)


def test_parse_ignores_extra_keys():
    raw = '{"retrieval": false, "chart": true, "direct": false, "rationale": "r", "confidence": 0.9}'
    assert parse_decision(raw) == Decision(False, True, False, "r")


def test_parse_without_rationale_keeps_flags():
    raw = '{"retrieval": true, "chart": false, "direct": false}'
    assert parse_decision(raw) == Decision(True, False, False, "")


@pytest.mark.asyncio
async def test_classify_uses_model_decision():
    llm = ScriptedLLM().on(CLASSIFY, respond=decision_json(chart=True, rationale="viz"))
    classifier = CapabilityClassifier(llm, temperature=0.3, max_tokens=2048)
    decision = await classifier.classify("Plot Q1 10, Q2 20", Deadline.unbounded())
    assert decision == Decision(False, True, False, "viz")

    (call,) = llm.calls
    assert 'User query: "Plot Q1 10, Q2 20"' in call.prompt
    assert call.temperature == 0.3
    assert call.max_tokens == 2048


@pytest.mark.asyncio
async def test_classify_unparseable_output_falls_back():
    llm = ScriptedLLM().on(CLASSIFY, respond="I would search the knowledge base.")
    decision = await CapabilityClassifier(llm).classify("anything", Deadline.unbounded())
    assert decision == FALLBACK_DECISION


@pytest.mark.asyncio
async def test_classify_gateway_failure_falls_back():
    llm = ScriptedLLM().on(CLASSIFY, respond=GenerationError("quota exceeded"))
    decision = await CapabilityClassifier(llm).classify("anything", Deadline.unbounded())
    assert decision == FALLBACK_DECISION
    assert len(llm.calls) == 1  # no retry


@pytest.mark.asyncio
async def test_classify_deadline_expiry_propagates():
    llm = ScriptedLLM().on(CLASSIFY, respond=decision_json(direct=True), delay=1.0)
    with pytest.raises(DeadlineExceeded):
        await CapabilityClassifier(llm).classify("hi", Deadline(0.05))
