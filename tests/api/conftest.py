"""API test fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from partsledger.api import dependencies
from partsledger.api.main import app
from partsledger.core.services import (
    Catalog,
    FIFOCostResolver,
    JobCostAllocator,
    Ledger,
    LocationGraph,
)


@pytest.fixture
async def live_client(
    catalog: Catalog,
    ledger: Ledger,
    resolver: FIFOCostResolver,
    location_graph: LocationGraph,
    allocator: JobCostAllocator,
) -> AsyncGenerator[AsyncClient, None]:
    """Client wired to real services on a migrated temporary database."""
    overrides = {
        dependencies.get_catalog: lambda: catalog,
        dependencies.get_ledger: lambda: ledger,
        dependencies.get_resolver: lambda: resolver,
        dependencies.get_location_graph: lambda: location_graph,
        dependencies.get_job_allocator: lambda: allocator,
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)
