"""Idempotent database schema creation."""

from __future__ import annotations

import aiosqlite

TENANTS_TABLE = """
CREATE TABLE IF NOT EXISTS tenants (
    tenant_id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL
)
"""

QA_RECORDS_TABLE = """
CREATE TABLE IF NOT EXISTS qa_records (
    record_id INTEGER PRIMARY KEY AUTOINCREMENT,
    tenant_id TEXT NOT NULL,
    file_id TEXT NOT NULL,
    question TEXT NOT NULL,
    answer TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY (tenant_id) REFERENCES tenants(tenant_id)
)
"""

QA_RECORDS_TENANT_INDEX = """
CREATE INDEX IF NOT EXISTS idx_qa_records_tenant ON qa_records(tenant_id, record_id)
"""


async def initialize_qa_db(db_path: str) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(TENANTS_TABLE)
        await db.execute(QA_RECORDS_TABLE)
        await db.execute(QA_RECORDS_TENANT_INDEX)
        await db.commit()
