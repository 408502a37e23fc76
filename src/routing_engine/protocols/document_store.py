"""Protocol for the tenant-scoped document store gateway."""

from __future__ import annotations

from typing import Protocol

from routing_engine.models.domain import RetrievedDocument, TenantContext


class DocumentStore(Protocol):
    async def search_keyword(
        self, tenant: TenantContext, query_text: str, limit: int = 5
    ) -> list[RetrievedDocument]: ...

    async def fetch_all(
        self, tenant: TenantContext, limit: int = 100
    ) -> list[RetrievedDocument]: ...
