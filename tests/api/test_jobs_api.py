"""API tests for job part allocation endpoints."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from partsledger.api.dependencies import get_job_allocator
from partsledger.api.main import app
from partsledger.core.entities import AllocationSource, JobPartAllocation, Part
from partsledger.core.exceptions import AllocationNotFoundError, ConcurrencyConflictError
from partsledger.core.services import JobCostAllocator


@pytest.fixture
def mock_allocator():
    allocator = AsyncMock(spec=JobCostAllocator)
    allocator.allocate.return_value = JobPartAllocation(
        id=7,
        job_id="J-1",
        part_code="W100",
        quantity=2,
        unit_cost=Decimal("5.00"),
        total_cost=Decimal("10.00"),
        markup_percent=Decimal("20"),
        sell_price=Decimal("12.00"),
        source=AllocationSource.STOCK,
        ledger_entry_id=3,
    )
    return allocator


@pytest.fixture
async def jobs_client(mock_allocator):
    app.dependency_overrides[get_job_allocator] = lambda: mock_allocator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_job_allocator, None)


class TestJobsAPIWithMocks:
    async def test_allocate_defaults_to_stock(self, jobs_client: AsyncClient, mock_allocator):
        response = await jobs_client.post(
            "/api/jobs/J-1/parts", json={"part_code": "W100", "quantity": 2}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 7
        assert Decimal(data["margin"]) == Decimal("2.00")
        kwargs = mock_allocator.allocate.await_args.kwargs
        assert kwargs["job_id"] == "J-1"
        assert kwargs["source"] is AllocationSource.STOCK

    async def test_quantity_must_be_positive(self, jobs_client: AsyncClient, mock_allocator):
        response = await jobs_client.post(
            "/api/jobs/J-1/parts", json={"part_code": "W100", "quantity": 0}
        )

        assert response.status_code == 422
        mock_allocator.allocate.assert_not_awaited()

    async def test_unknown_allocation_is_404(self, jobs_client: AsyncClient, mock_allocator):
        mock_allocator.deallocate.side_effect = AllocationNotFoundError(99)

        response = await jobs_client.delete("/api/jobs/parts/99")

        assert response.status_code == 404
        assert response.json()["error_code"] == "ALLOCATION_NOT_FOUND"

    async def test_lock_conflict_is_503(self, jobs_client: AsyncClient, mock_allocator):
        mock_allocator.allocate.side_effect = ConcurrencyConflictError("begin", "database is locked")

        response = await jobs_client.post(
            "/api/jobs/J-1/parts", json={"part_code": "W100", "quantity": 1}
        )

        assert response.status_code == 503
        assert response.json()["error_code"] == "CONCURRENCY_CONFLICT"


class TestJobsAPI:
    async def test_allocate_cost_and_remove(
        self, live_client: AsyncClient, w100: Part, purchase
    ):
        await purchase("W100", 10, "5.00")
        await purchase("W100", 10, "7.00")

        response = await live_client.post(
            "/api/jobs/J-1/parts", json={"part_code": "W100", "quantity": 12}
        )
        assert response.status_code == 201
        allocation = response.json()
        assert Decimal(allocation["total_cost"]) == Decimal("64.00")
        assert Decimal(allocation["sell_price"]) == Decimal("76.80")
        assert allocation["source"] == "stock"

        assert (await live_client.get("/api/parts/W100")).json()["in_stock"] == 8

        costs = (await live_client.get("/api/jobs/J-1/costs")).json()
        assert costs["allocation_count"] == 1
        assert Decimal(costs["parts_cost"]) == Decimal("64.00")

        response = await live_client.delete(f"/api/jobs/parts/{allocation['id']}?actor=sam")
        assert response.status_code == 200
        assert response.json()["id"] == allocation["id"]

        part = (await live_client.get("/api/parts/W100")).json()
        assert part["in_stock"] == 20
        assert Decimal(part["avg_cost"]) == Decimal("6")
        listing = (await live_client.get("/api/jobs/J-1/parts")).json()
        assert listing == {"job_id": "J-1", "allocations": [], "total": 0}

    async def test_insufficient_stock_is_422(self, live_client: AsyncClient, w100: Part):
        response = await live_client.post(
            "/api/jobs/J-1/parts", json={"part_code": "W100", "quantity": 1}
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "INSUFFICIENT_STOCK"
        assert data["details"]["available"] == 0

    async def test_direct_order(self, live_client: AsyncClient, w100: Part):
        response = await live_client.post(
            "/api/jobs/J-2/parts",
            json={
                "part_code": "W100",
                "quantity": 1,
                "source": "direct_order",
                "unit_cost": "18.00",
            },
        )

        assert response.status_code == 201
        assert response.json()["ledger_entry_id"] is None
        assert (await live_client.get("/api/parts/W100/history")).json()["total"] == 0

    async def test_direct_order_without_cost_is_400(self, live_client: AsyncClient, w100: Part):
        response = await live_client.post(
            "/api/jobs/J-2/parts",
            json={"part_code": "W100", "quantity": 1, "source": "direct_order"},
        )

        assert response.status_code == 400
