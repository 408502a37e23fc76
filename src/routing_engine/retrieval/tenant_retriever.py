"""Tenant-scoped retrieval: BM25 keyword search with a full-scan fallback."""

from __future__ import annotations

import time

from routing_engine.config.constants import MAX_FETCH_ALL
from routing_engine.models.domain import RetrievalOutcome, TenantContext
from routing_engine.observability.logger import get_logger
from routing_engine.observability.metrics import log_retrieval_metrics
from routing_engine.orchestration.deadline import Deadline
from routing_engine.protocols.document_store import DocumentStore

logger = get_logger("tenant_retriever")


class TenantRetriever:
    def __init__(
        self,
        store: DocumentStore,
        top_k: int = 5,
        scan_limit: int = MAX_FETCH_ALL,
    ) -> None:
        self._store = store
        self._top_k = top_k
        self._scan_limit = min(scan_limit, MAX_FETCH_ALL)

    async def retrieve(
        self, query: str, tenant: TenantContext, deadline: Deadline
    ) -> RetrievalOutcome:
        start = time.monotonic()

        # 1. Ranked keyword match
        documents = await deadline.run(
            self._store.search_keyword(tenant, query, limit=self._top_k),
            operation="keyword search",
        )
        keyword_hits = len(documents)
        strategy = "keyword"

        # 2. Unranked scan of the tenant when nothing matched
        if not documents:
            logger.info("keyword_search_empty", tenant=tenant.tenant_id)
            documents = await deadline.run(
                self._store.fetch_all(tenant, limit=self._scan_limit),
                operation="full scan",
            )
            strategy = "full_scan" if documents else "empty"

        log_retrieval_metrics(
            tenant=tenant.tenant_id,
            strategy=strategy,
            keyword_hits=keyword_hits,
            documents=len(documents),
            duration_ms=(time.monotonic() - start) * 1000,
        )
        return RetrievalOutcome(documents=tuple(documents), strategy=strategy)
