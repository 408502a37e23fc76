"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from routing_engine.config.settings import Settings
from routing_engine.pipeline.query_engine import QueryEngine
from routing_engine.storage.sqlite_qa_store import SQLiteQAStore


def get_query_engine(request: Request) -> QueryEngine:
    return request.app.state.query_engine


def get_store(request: Request) -> SQLiteQAStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
