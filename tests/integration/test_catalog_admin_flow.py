"""Integration tests for catalog administration."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from partsledger.core.entities import AllocationSource, Part, RecommendationConfidence
from partsledger.core.exceptions import (
    DuplicatePartError,
    InvalidLocationError,
    PartInUseError,
    PartNotFoundError,
    ValidationError,
)
from partsledger.core.services import Catalog, JobCostAllocator


class TestCreate:
    async def test_defaults(self, catalog: Catalog):
        part = await catalog.create("r-12", "Relay 12V")

        assert part.part_code == "R-12"
        assert part.in_stock == 0
        assert part.avg_cost is None
        assert part.markup_percent == Decimal("20")
        assert await catalog.get("R-12") == part

    async def test_duplicate(self, catalog: Catalog, w100: Part):
        with pytest.raises(DuplicatePartError):
            await catalog.create("w100", "Another wiper")

    async def test_unknown_location(self, catalog: Catalog):
        with pytest.raises(InvalidLocationError):
            await catalog.create("R-12", "Relay 12V", location_code="NOPE")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"description": "  "},
            {"description": "Relay", "markup_percent": "-5"},
            {"description": "Relay", "markup_percent": "NaN"},
            {"description": "Relay", "min_stock": -1},
        ],
    )
    async def test_invalid(self, catalog: Catalog, kwargs: dict):
        with pytest.raises(ValidationError):
            await catalog.create("R-12", **kwargs)


class TestUpdate:
    async def test_markup_change_reprices(
        self, w100: Part, purchase: Callable, catalog: Catalog
    ):
        await purchase("W100", 4, "10.00")

        updated = await catalog.update("W100", markup_percent="50")

        assert updated.sell_price == Decimal("15.00")
        assert (await catalog.get("W100")).sell_price == Decimal("15.00")

    async def test_descriptive_fields(self, w100: Part, catalog: Catalog):
        updated = await catalog.update("W100", brand="Bosch", min_stock=5)

        assert updated.brand == "Bosch"
        assert updated.min_stock == 5
        assert updated.in_stock == 0

    async def test_derived_fields_are_not_editable(self, w100: Part, catalog: Catalog):
        with pytest.raises(ValidationError):
            await catalog.update("W100", in_stock=99)

    async def test_unknown_part(self, catalog: Catalog):
        with pytest.raises(PartNotFoundError):
            await catalog.update("NOPE", brand="x")


class TestDelete:
    async def test_unused_part(self, w100: Part, catalog: Catalog):
        await catalog.delete("W100")

        with pytest.raises(PartNotFoundError):
            await catalog.get("W100")

    async def test_part_with_history_is_kept(
        self, w100: Part, purchase: Callable, catalog: Catalog
    ):
        await purchase("W100", 1, "1.00")

        with pytest.raises(PartInUseError) as exc_info:
            await catalog.delete("W100")

        assert exc_info.value.details["entry_count"] == 1
        assert (await catalog.get("W100")).in_stock == 1

    async def test_part_on_a_job_is_kept(
        self, w100: Part, catalog: Catalog, allocator: JobCostAllocator
    ):
        await allocator.allocate(
            "J-1", "W100", 1, AllocationSource.DIRECT_ORDER, unit_cost="2.00"
        )

        with pytest.raises(PartInUseError) as exc_info:
            await catalog.delete("W100")

        assert exc_info.value.details["allocation_count"] == 1


class TestLowStock:
    async def test_override_wins_and_emptiest_first(
        self, catalog: Catalog, purchase: Callable
    ):
        await catalog.create("A1", "Part A", min_stock=5)
        await catalog.create("B1", "Part B", min_stock=1, min_stock_override=3)
        await catalog.create("C1", "Part C", min_stock=2)
        await catalog.create("D1", "Part D")
        await purchase("A1", 4, "1.00")
        await purchase("B1", 2, "1.00")
        await purchase("C1", 2, "1.00")

        low = await catalog.low_stock()

        assert [p.part_code for p in low] == ["B1", "A1"]


class TestListParts:
    async def test_category_filter(self, catalog: Catalog, w100: Part):
        await catalog.create("F1", "Fuse", category="electrical")

        wipers = await catalog.list_parts(category="wipers")

        assert [p.part_code for p in wipers] == ["W100"]
        assert len(await catalog.list_parts()) == 2


class TestSearch:
    @pytest.fixture
    async def stocked(self, catalog: Catalog):
        await catalog.create("W100", "Wiper blade 20in", brand="Bosch")
        await catalog.create("W200", "Wiper blade 24in", brand="Trico")
        await catalog.create("F10", "Fuse 10A", brand="Littelfuse")
        await catalog.create("R_1", "Relay 12V")

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("wiper", ["W100", "W200"]),
            ("w1", ["W100"]),
            ("BOSCH", ["W100"]),
            ("fuse", ["F10"]),
            ("", ["F10", "R_1", "W100", "W200"]),
            ("_", ["R_1"]),
            ("%", []),
        ],
    )
    async def test_matches_code_description_or_brand(
        self, catalog: Catalog, stocked: None, query: str, expected: list[str]
    ):
        assert [p.part_code for p in await catalog.search(query)] == expected

    async def test_limit(self, catalog: Catalog, stocked: None):
        assert [p.part_code for p in await catalog.search("w", limit=1)] == ["W100"]

    async def test_limit_must_be_positive(self, catalog: Catalog):
        with pytest.raises(ValidationError):
            await catalog.search("w", limit=0)


class TestMinStock:
    async def test_recommendation_from_job_usage(
        self, catalog: Catalog, allocator: JobCostAllocator, w100: Part, purchase: Callable
    ):
        await purchase("W100", 30, "5.00")
        for _ in range(5):
            await allocator.allocate("J-1", "W100", 2, AllocationSource.STOCK)
        reversed_allocation = await allocator.allocate("J-1", "W100", 1, AllocationSource.STOCK)
        await allocator.deallocate(reversed_allocation.id)

        recommendation = await catalog.recommend_min_stock("w100")

        assert recommendation.part_code == "W100"
        assert recommendation.data_points == 5
        assert recommendation.confidence is RecommendationConfidence.MEDIUM
        assert recommendation.value == 1

    async def test_usage_outside_window_is_ignored(
        self, catalog: Catalog, allocator: JobCostAllocator, w100: Part, purchase: Callable
    ):
        await purchase("W100", 30, "5.00")
        for _ in range(12):
            await allocator.allocate("J-1", "W100", 1, AllocationSource.STOCK)

        now = await catalog.recommend_min_stock("W100")
        later = await catalog.recommend_min_stock(
            "W100", now=datetime.now(UTC) + timedelta(days=91)
        )

        assert now.confidence is RecommendationConfidence.HIGH
        assert now.value == 2
        assert later.data_points == 0
        assert later.value == 1

    async def test_recommendation_unknown_part(self, catalog: Catalog):
        with pytest.raises(PartNotFoundError):
            await catalog.recommend_min_stock("NOPE")

    async def test_override_records_reason(self, catalog: Catalog, w100: Part):
        part = await catalog.override_min_stock("W100", 6)

        assert part.min_stock_override == 6
        assert part.min_stock_override_reason == "Manually set"
        assert part.reorder_threshold == 6
        assert part.is_low_stock

        await catalog.override_min_stock("W100", 2, reason="Seasonal")
        assert (await catalog.get("W100")).min_stock_override_reason == "Seasonal"

    async def test_override_rejects_negative(self, catalog: Catalog, w100: Part):
        with pytest.raises(ValidationError):
            await catalog.override_min_stock("W100", -1)
