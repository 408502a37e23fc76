"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from routing_engine.api.dependencies import get_store
from routing_engine.models.schemas import HealthResponse
from routing_engine.storage.sqlite_qa_store import SQLiteQAStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(store: SQLiteQAStore = Depends(get_store)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        tenants=await store.list_tenants(),
        record_count=await store.count_records(),
    )
