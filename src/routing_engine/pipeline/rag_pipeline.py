"""Retrieval-augmented answering over one tenant's Q&A records."""

from __future__ import annotations

from routing_engine.config.constants import NO_DOCUMENTS_ANSWER
from routing_engine.generation.answer_generator import AnswerGenerator
from routing_engine.models.domain import RAGAnswer, Reference, TenantContext
from routing_engine.observability.logger import get_logger
from routing_engine.orchestration.deadline import Deadline
from routing_engine.retrieval.tenant_retriever import TenantRetriever

logger = get_logger("rag_pipeline")


class RAGPipeline:
    def __init__(self, retriever: TenantRetriever, generator: AnswerGenerator) -> None:
        self._retriever = retriever
        self._generator = generator

    async def answer(
        self, query_text: str, tenant: TenantContext, deadline: Deadline
    ) -> RAGAnswer:
        """Retrieve, then synthesize.

        An empty tenant yields the canned no-information answer without a
        model call. Store and gateway errors propagate to the orchestrator.
        """
        outcome = await self._retriever.retrieve(query_text, tenant, deadline)

        if not outcome.documents:
            logger.info("no_documents", tenant=tenant.tenant_id)
            return RAGAnswer(
                answer=NO_DOCUMENTS_ANSWER,
                file_ids=(),
                references=(),
                strategy=outcome.strategy,
            )

        documents = list(outcome.documents)
        answer = await self._generator.generate(query_text, documents, deadline)
        return RAGAnswer(
            answer=answer,
            file_ids=tuple(d.file_id for d in documents),
            references=tuple(Reference.from_document(d) for d in documents),
            strategy=outcome.strategy,
        )
