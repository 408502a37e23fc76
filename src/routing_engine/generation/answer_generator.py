"""Grounded answer synthesis and the untethered direct answer."""

from __future__ import annotations

from routing_engine.generation.prompt_templates import (
    DIRECT_ANSWER_PROMPT,
    RAG_ANSWER_PROMPT,
    format_context_block,
)
from routing_engine.models.domain import DirectAnswer, RetrievedDocument
from routing_engine.observability.logger import get_logger
from routing_engine.orchestration.deadline import Deadline
from routing_engine.protocols.llm import LLMProvider

logger = get_logger("generation")


class AnswerGenerator:
    def __init__(
        self, llm: LLMProvider, temperature: float = 0.5, max_tokens: int = 2048
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(
        self,
        query: str,
        documents: list[RetrievedDocument],
        deadline: Deadline,
    ) -> str:
        """Synthesize an answer grounded in ``documents``. Gateway errors propagate."""
        prompt = RAG_ANSWER_PROMPT.format(
            context_block=format_context_block(documents),
            query=query,
        )
        answer = await deadline.run(
            self._llm.complete(
                prompt, temperature=self._temperature, max_tokens=self._max_tokens
            ),
            operation="answer synthesis",
        )

        logger.info(
            "generated_answer",
            query_len=len(query),
            documents=len(documents),
            answer_len=len(answer),
        )
        return answer


class DirectResponder:
    def __init__(
        self, llm: LLMProvider, temperature: float = 0.7, max_tokens: int = 2048
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def respond(self, query: str, deadline: Deadline) -> DirectAnswer:
        prompt = DIRECT_ANSWER_PROMPT.format(query=query)
        answer = await deadline.run(
            self._llm.complete(
                prompt, temperature=self._temperature, max_tokens=self._max_tokens
            ),
            operation="direct answer",
        )
        logger.info("direct_answer", query_len=len(query), answer_len=len(answer))
        return DirectAnswer(answer=answer)
