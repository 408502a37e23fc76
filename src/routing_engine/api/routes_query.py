"""Query endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from routing_engine.api.dependencies import get_query_engine, get_settings, get_store
from routing_engine.config.settings import Settings
from routing_engine.exceptions import RoutingEngineError
from routing_engine.merging.merger import failure_response
from routing_engine.models.domain import Query, TenantContext
from routing_engine.models.schemas import QueryRequest, QueryResponse
from routing_engine.observability.logger import get_logger
from routing_engine.pipeline.query_engine import QueryEngine
from routing_engine.storage.sqlite_qa_store import SQLiteQAStore

logger = get_logger("routes_query")

router = APIRouter()


@router.post("/query", response_model=QueryResponse)
async def query(
    request: QueryRequest,
    engine: QueryEngine = Depends(get_query_engine),
    store: SQLiteQAStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    # The only place a missing tenant falls back to the configured default.
    try:
        tenant = TenantContext(
            request.tenant if request.tenant is not None else settings.default_tenant
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        if settings.validate_tenants and not await store.tenant_exists(tenant):
            raise HTTPException(status_code=404, detail=f"Unknown tenant: {tenant.tenant_id}")
        response = await engine.execute(Query(text=request.query, tenant=tenant))
    except RoutingEngineError as e:
        body = QueryResponse.from_domain(failure_response(e))
        return JSONResponse(status_code=502, content=body.model_dump(mode="json", by_alias=True))
    return QueryResponse.from_domain(response)
