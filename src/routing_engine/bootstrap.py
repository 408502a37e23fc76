"""Component wiring shared by the HTTP app and the CLI."""

from __future__ import annotations

from pathlib import Path

from routing_engine.charting.extractor import ChartSpecExtractor
from routing_engine.config.settings import Settings
from routing_engine.generation.answer_generator import AnswerGenerator, DirectResponder
from routing_engine.generation.gemini_provider import GeminiProvider
from routing_engine.keyword_search.bm25_ranker import BM25Ranker
from routing_engine.orchestration.orchestrator import Orchestrator
from routing_engine.pipeline.query_engine import QueryEngine
from routing_engine.pipeline.rag_pipeline import RAGPipeline
from routing_engine.protocols.llm import LLMProvider
from routing_engine.retrieval.tenant_retriever import TenantRetriever
from routing_engine.routing.classifier import CapabilityClassifier
from routing_engine.storage.sqlite_qa_store import SQLiteQAStore


async def open_store(settings: Settings) -> SQLiteQAStore:
    """Create the data directory and schema, returning a ready store."""
    Path(settings.sqlite_qa_db_path).parent.mkdir(parents=True, exist_ok=True)
    store = SQLiteQAStore(
        settings.sqlite_qa_db_path,
        ranker=BM25Ranker(k1=settings.bm25_k1, b=settings.bm25_b),
    )
    await store.initialize()
    return store


def build_llm(settings: Settings) -> LLMProvider:
    return GeminiProvider(api_key=settings.google_api_key, model=settings.gemini_model)


def build_query_engine(
    settings: Settings, store: SQLiteQAStore, llm: LLMProvider
) -> QueryEngine:
    max_tokens = settings.llm_max_tokens

    # Retrieval + synthesis
    retriever = TenantRetriever(
        store,
        top_k=settings.keyword_top_k,
        scan_limit=settings.fallback_scan_limit,
    )
    generator = AnswerGenerator(
        llm, temperature=settings.rag_temperature, max_tokens=max_tokens
    )
    rag = RAGPipeline(retriever=retriever, generator=generator)

    # Chart + direct
    chart_extractor = ChartSpecExtractor(
        llm, temperature=settings.chart_temperature, max_tokens=max_tokens
    )
    direct_responder = DirectResponder(
        llm, temperature=settings.direct_temperature, max_tokens=max_tokens
    )

    # Routing
    classifier = CapabilityClassifier(
        llm, temperature=settings.classifier_temperature, max_tokens=max_tokens
    )
    orchestrator = Orchestrator(
        rag=rag,
        chart_extractor=chart_extractor,
        direct_responder=direct_responder,
    )
    return QueryEngine(classifier=classifier, orchestrator=orchestrator, settings=settings)
