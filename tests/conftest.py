"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from routing_engine.bootstrap import build_query_engine, open_store
from routing_engine.config.settings import Settings
from routing_engine.models.domain import RetrievedDocument
from routing_engine.storage.seed import SAMPLE_RECORDS, seed_store

# Prompt markers, one per completion request kind.
CLASSIFY = "You are a routing assistant"
CHART = "Extract chart parameters"
SYNTHESIZE = "Knowledge:\n"
DIRECT = "Reply to the user's message"


@dataclass
class Rule:
    markers: tuple[str, ...]
    respond: object  # str, Exception, or callable(prompt) -> str
    delay: float = 0.0


@dataclass
class Call:
    prompt: str
    temperature: float
    max_tokens: int


@dataclass
class ScriptedLLM:
    """LLMProvider fake answering by the first rule whose markers all occur in the prompt."""

    rules: list[Rule] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)

    def on(self, *markers: str, respond, delay: float = 0.0) -> ScriptedLLM:
        self.rules.append(Rule(markers=markers, respond=respond, delay=delay))
        return self

    def calls_matching(self, marker: str) -> list[Call]:
        return [c for c in self.calls if marker in c.prompt]

    async def complete(
        self, prompt: str, temperature: float = 0.7, max_tokens: int = 2048
    ) -> str:
        self.calls.append(Call(prompt, temperature, max_tokens))
        for rule in self.rules:
            if all(m in prompt for m in rule.markers):
                if rule.delay:
                    await asyncio.sleep(rule.delay)
                if isinstance(rule.respond, Exception):
                    raise rule.respond
                if callable(rule.respond):
                    return rule.respond(prompt)
                return rule.respond
        raise AssertionError(f"no scripted response for prompt: {prompt[:120]!r}")


def decision_json(retrieval=False, chart=False, direct=False, rationale="test") -> str:
    return (
        f'{{"retrieval": {str(retrieval).lower()}, "chart": {str(chart).lower()}, '
        f'"direct": {str(direct).lower()}, "rationale": "{rationale}"}}'
    )


# tenant3 is provisioned but holds no records.
TEST_RECORDS: dict[str, list[RetrievedDocument]] = {
    "tenant1": SAMPLE_RECORDS["tenant1"],
    "tenant2": SAMPLE_RECORDS["tenant2"],
    "tenant3": [],
}


@pytest.fixture
def settings():
    """Test settings with temp paths."""
    tmp = tempfile.mkdtemp()
    return Settings(
        google_api_key="test-key",
        sqlite_qa_db_path=str(Path(tmp) / "test_qa.db"),
        request_timeout_s=5.0,
    )


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
async def store(settings):
    qa_store = await open_store(settings)
    await seed_store(qa_store, TEST_RECORDS)
    return qa_store


@pytest.fixture
async def engine(settings, store, llm):
    return build_query_engine(settings, store, llm)
