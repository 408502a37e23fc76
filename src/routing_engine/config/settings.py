"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from routing_engine.config.constants import MAX_FETCH_ALL


class Settings(BaseSettings):
    # API Keys
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("router_google_api_key", "google_api_key"),
    )

    # LLM / Gemini
    gemini_model: str = "gemini-2.5-flash"
    classifier_temperature: float = 0.3
    chart_temperature: float = 0.3
    rag_temperature: float = 0.5
    direct_temperature: float = 0.7
    llm_max_tokens: int = 2048

    # Retrieval
    keyword_top_k: int = 5
    fallback_scan_limit: int = Field(default=MAX_FETCH_ALL, ge=1, le=MAX_FETCH_ALL)
    bm25_k1: float = 1.2
    bm25_b: float = 0.75

    # Storage paths
    sqlite_qa_db_path: str = "data/qa.db"

    # Tenancy (consulted only by the CLI and HTTP entry points)
    default_tenant: str = "tenant1"
    validate_tenants: bool = True

    # Orchestration
    request_timeout_s: float = 60.0
    partial_failure_policy: Literal["fail", "degrade"] = "fail"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    model_config = {"env_file": ".env", "env_prefix": "ROUTER_", "extra": "ignore"}
