"""Seed the store with the sample tenants and Q&A records for development."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from routing_engine.bootstrap import open_store
from routing_engine.config.settings import Settings
from routing_engine.models.domain import TenantContext
from routing_engine.storage.seed import seed_store


async def main():
    settings = Settings()
    store = await open_store(settings)

    inserted = await seed_store(store)
    for tenant_id, count in inserted.items():
        print(f"{tenant_id}: {count} record(s) inserted")

    print()
    for tenant_id in await store.list_tenants():
        total = await store.count_records(TenantContext(tenant_id))
        print(f"{tenant_id}: {total} record(s) total")


if __name__ == "__main__":
    asyncio.run(main())
