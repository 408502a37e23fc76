"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from routing_engine.api.middleware import RequestTimingMiddleware
from routing_engine.api.routes_chart import router as chart_router
from routing_engine.api.routes_health import router as health_router
from routing_engine.api.routes_query import router as query_router
from routing_engine.bootstrap import build_llm, build_query_engine, open_store
from routing_engine.config.settings import Settings
from routing_engine.observability.logger import get_logger, setup_logging
from routing_engine.protocols.llm import LLMProvider

logger = get_logger("app")


def create_app(settings: Settings | None = None, llm: LLMProvider | None = None) -> FastAPI:
    """Build the app. ``llm`` replaces the Gemini provider when given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or Settings()
        setup_logging(cfg.log_level, cfg.json_logs)

        # Storage
        store = await open_store(cfg)

        # LLM + engine
        provider = llm or build_llm(cfg)
        engine = build_query_engine(cfg, store, provider)

        # Attach to app state
        app.state.settings = cfg
        app.state.store = store
        app.state.query_engine = engine

        logger.info(
            "startup_complete",
            tenants=await store.list_tenants(),
            records=await store.count_records(),
            failure_policy=cfg.partial_failure_policy,
        )

        yield

        logger.info("shutdown_complete")

    app = FastAPI(
        title="Query Routing Engine",
        version="1.0.0",
        description="Multi-tenant query orchestration over retrieval, charting and chat",
        lifespan=lifespan,
    )
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(query_router, tags=["query"])
    app.include_router(chart_router, tags=["chart"])
    return app
