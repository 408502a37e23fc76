"""Sample tenants and Q&A records for development and demos."""

from __future__ import annotations

from routing_engine.models.domain import RetrievedDocument, TenantContext
from routing_engine.observability.logger import get_logger
from routing_engine.storage.sqlite_qa_store import SQLiteQAStore

logger = get_logger("seed")

SAMPLE_RECORDS: dict[str, list[RetrievedDocument]] = {
    "tenant1": [
        RetrievedDocument(
            file_id="FILE-001",
            question="What is the capital of France?",
            answer="The capital of France is Paris, which is also the largest city in the country.",
        ),
        RetrievedDocument(
            file_id="FILE-002",
            question="How does photosynthesis work?",
            answer=(
                "Photosynthesis is the process by which plants use sunlight, water, and "
                "carbon dioxide to create oxygen and energy in the form of sugar."
            ),
        ),
    ],
    "tenant2": [
        RetrievedDocument(
            file_id="FILE-003",
            question="What is the speed of light?",
            answer=(
                "The speed of light in a vacuum is approximately 299,792,458 meters per "
                "second (or about 186,282 miles per second)."
            ),
        ),
        RetrievedDocument(
            file_id="FILE-004",
            question="Who wrote Romeo and Juliet?",
            answer=(
                "Romeo and Juliet was written by William Shakespeare, one of the most "
                "famous playwrights in history."
            ),
        ),
    ],
    "tenant3": [
        RetrievedDocument(
            file_id="FILE-005",
            question="What is artificial intelligence?",
            answer=(
                "Artificial Intelligence (AI) is the simulation of human intelligence "
                "processes by machines, especially computer systems, including learning, "
                "reasoning, and self-correction."
            ),
        ),
    ],
}


async def seed_store(
    store: SQLiteQAStore,
    records: dict[str, list[RetrievedDocument]] | None = None,
) -> dict[str, int]:
    """Provision tenants and insert their records.

    A tenant that already holds records is left untouched, so reseeding is safe.
    Returns the number of records inserted per tenant.
    """
    records = SAMPLE_RECORDS if records is None else records
    inserted: dict[str, int] = {}
    for tenant_id, documents in records.items():
        tenant = TenantContext(tenant_id)
        await store.create_tenant(tenant)
        if await store.count_records(tenant) > 0:
            logger.info("tenant_already_seeded", tenant=tenant_id)
            inserted[tenant_id] = 0
            continue
        inserted[tenant_id] = await store.save_records(tenant, documents)
    return inserted
