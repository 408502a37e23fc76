"""SQLite-backed, tenant-partitioned question/answer store.

Every call opens its own connection and closes it on the way out, success or
failure. Nothing is pooled or shared between requests.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import aiosqlite

from routing_engine.config.constants import MAX_FETCH_ALL
from routing_engine.exceptions import StoreError
from routing_engine.keyword_search.bm25_ranker import BM25Ranker
from routing_engine.models.domain import RetrievedDocument, TenantContext
from routing_engine.observability.logger import get_logger
from routing_engine.storage.migrations import initialize_qa_db

logger = get_logger("qa_store")


class SQLiteQAStore:
    def __init__(self, db_path: str, ranker: BM25Ranker | None = None) -> None:
        self._db_path = db_path
        self._ranker = ranker or BM25Ranker()

    async def initialize(self) -> None:
        try:
            await initialize_qa_db(self._db_path)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to initialize store at {self._db_path}: {e}") from e

    # -- provisioning -------------------------------------------------------

    async def create_tenant(self, tenant: TenantContext) -> bool:
        """Create ``tenant`` if missing. Returns True when it was created."""
        try:
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute(
                    "INSERT OR IGNORE INTO tenants (tenant_id, created_at) VALUES (?, ?)",
                    (tenant.tenant_id, _now()),
                )
                await db.commit()
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to create tenant {tenant.tenant_id}: {e}") from e

    async def list_tenants(self) -> list[str]:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute(
                    "SELECT tenant_id FROM tenants ORDER BY tenant_id"
                ) as cursor:
                    rows = await cursor.fetchall()
                    return [row[0] for row in rows]
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to list tenants: {e}") from e

    async def tenant_exists(self, tenant: TenantContext) -> bool:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute(
                    "SELECT 1 FROM tenants WHERE tenant_id = ?", (tenant.tenant_id,)
                ) as cursor:
                    return await cursor.fetchone() is not None
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to look up tenant {tenant.tenant_id}: {e}") from e

    async def save_records(
        self, tenant: TenantContext, documents: list[RetrievedDocument]
    ) -> int:
        """Append ``documents`` to ``tenant``, creating the tenant if needed."""
        if not documents:
            return 0
        now = _now()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(
                    "INSERT OR IGNORE INTO tenants (tenant_id, created_at) VALUES (?, ?)",
                    (tenant.tenant_id, now),
                )
                await db.executemany(
                    "INSERT INTO qa_records (tenant_id, file_id, question, answer, created_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    [
                        (tenant.tenant_id, d.file_id, d.question, d.answer, now)
                        for d in documents
                    ],
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to save records for {tenant.tenant_id}: {e}") from e
        logger.info("records_saved", tenant=tenant.tenant_id, count=len(documents))
        return len(documents)

    async def count_records(self, tenant: TenantContext | None = None) -> int:
        sql = "SELECT COUNT(*) FROM qa_records"
        params: tuple = ()
        if tenant is not None:
            sql += " WHERE tenant_id = ?"
            params = (tenant.tenant_id,)
        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute(sql, params) as cursor:
                    row = await cursor.fetchone()
                    return row[0] if row else 0
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to count records: {e}") from e

    # -- gateway ------------------------------------------------------------

    async def search_keyword(
        self, tenant: TenantContext, query_text: str, limit: int = 5
    ) -> list[RetrievedDocument]:
        """BM25-ranked records of ``tenant`` matching ``query_text``; may be empty."""
        candidates = await self._load_tenant_records(tenant)
        if not candidates:
            return []
        ranked = await asyncio.to_thread(self._ranker.rank, query_text, candidates, limit)
        logger.debug(
            "keyword_search",
            tenant=tenant.tenant_id,
            candidates=len(candidates),
            matches=len(ranked),
            top_scores=[round(score, 4) for _, score in ranked],
        )
        return [doc for doc, _ in ranked]

    async def fetch_all(
        self, tenant: TenantContext, limit: int = MAX_FETCH_ALL
    ) -> list[RetrievedDocument]:
        """Unranked records of ``tenant`` in insertion order, at most 100."""
        limit = max(0, min(limit, MAX_FETCH_ALL))
        return await self._load_tenant_records(tenant, limit)

    async def _load_tenant_records(
        self, tenant: TenantContext, limit: int | None = None
    ) -> list[RetrievedDocument]:
        sql = (
            "SELECT file_id, question, answer FROM qa_records "
            "WHERE tenant_id = ? ORDER BY record_id"
        )
        params: tuple = (tenant.tenant_id,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (tenant.tenant_id, limit)
        try:
            async with aiosqlite.connect(self._db_path) as db:
                db.row_factory = aiosqlite.Row
                async with db.execute(sql, params) as cursor:
                    rows = await cursor.fetchall()
                    return [self._row_to_document(row) for row in rows]
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read records for {tenant.tenant_id}: {e}") from e

    @staticmethod
    def _row_to_document(row: aiosqlite.Row) -> RetrievedDocument:
        return RetrievedDocument(
            file_id=row["file_id"],
            question=row["question"],
            answer=row["answer"],
        )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
