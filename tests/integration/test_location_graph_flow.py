"""Integration tests for the storage location tree and part transfers."""

import pytest

from partsledger.core.entities import LocationKind, MovementKind, Part
from partsledger.core.exceptions import (
    CycleDetectedError,
    DuplicateLocationError,
    InvalidLocationError,
    LocationNotFoundError,
    ValidationError,
)
from partsledger.core.services import Catalog, Ledger, LocationGraph


@pytest.fixture
async def shop(location_graph: LocationGraph):
    """Building SHOP > shelf S1 > crate C1, plus a van with bin B1."""
    await location_graph.create_location("Main shop", LocationKind.BUILDING, code="SHOP")
    await location_graph.create_location(
        "Shelf 1", LocationKind.CONTAINER, code="S1", parent_code="SHOP"
    )
    await location_graph.create_location(
        "Crate 1", LocationKind.CONTAINER, code="C1", parent_code="S1"
    )
    await location_graph.create_location("Van 1", LocationKind.VEHICLE, code="VAN1")
    await location_graph.create_location(
        "Van bin", LocationKind.CONTAINER, code="B1", parent_code="VAN1"
    )
    return location_graph


class TestCreateLocation:
    async def test_generated_codes(self, location_graph: LocationGraph):
        first = await location_graph.create_location("Shop", "building")
        second = await location_graph.create_location("Yard", "building")

        assert first.code == "LOC-001"
        assert second.code == "LOC-002"
        assert first.is_root

    async def test_code_is_uppercased(self, location_graph: LocationGraph):
        location = await location_graph.create_location("Van", "vehicle", code="van-2")
        assert location.code == "VAN-2"
        assert (await location_graph.get_location("Van-2")).name == "Van"

    async def test_duplicate_code(self, shop: LocationGraph):
        with pytest.raises(DuplicateLocationError):
            await shop.create_location("Again", "building", code="shop")

    async def test_unknown_parent(self, location_graph: LocationGraph):
        with pytest.raises(LocationNotFoundError):
            await location_graph.create_location("Bin", "container", parent_code="NOPE")

    async def test_inactive_parent(self, shop: LocationGraph):
        await shop.set_active("VAN1", False)
        with pytest.raises(InvalidLocationError):
            await shop.create_location("Bin 2", "container", parent_code="VAN1")

    @pytest.mark.parametrize(
        ("name", "kind", "code"),
        [("", "building", None), ("Bin", "drawer", None), ("Bin", "container", "BAD CODE!")],
    )
    async def test_invalid_input(
        self, location_graph: LocationGraph, name: str, kind: str, code: str | None
    ):
        with pytest.raises(ValidationError):
            await location_graph.create_location(name, kind, code=code)


class TestMoveLocation:
    async def test_reparent(self, shop: LocationGraph):
        moved = await shop.move_location("C1", "B1")

        assert moved.parent_code == "B1"
        path = await shop.resolve_ancestry_path("C1")
        assert [loc.code for loc in path] == ["VAN1", "B1", "C1"]

    async def test_make_root(self, shop: LocationGraph):
        await shop.move_location("S1", None)
        assert (await shop.get_location("S1")).is_root

    async def test_cycle_is_rejected_without_mutation(self, shop: LocationGraph):
        with pytest.raises(CycleDetectedError):
            await shop.move_location("SHOP", "C1")

        assert (await shop.get_location("SHOP")).parent_code is None
        path = await shop.resolve_ancestry_path("C1")
        assert [loc.code for loc in path] == ["SHOP", "S1", "C1"]

    async def test_self_parent_is_a_cycle(self, shop: LocationGraph):
        with pytest.raises(CycleDetectedError):
            await shop.move_location("S1", "S1")

    async def test_unknown_locations(self, shop: LocationGraph):
        with pytest.raises(LocationNotFoundError):
            await shop.move_location("NOPE", "SHOP")
        with pytest.raises(LocationNotFoundError):
            await shop.move_location("S1", "NOPE")

    async def test_inactive_parent_is_rejected(self, shop: LocationGraph):
        await shop.set_active("B1", False)

        with pytest.raises(InvalidLocationError):
            await shop.move_location("C1", "B1")

        assert (await shop.get_location("C1")).parent_code == "S1"


class TestQueries:
    async def test_ancestry_path_of_root(self, shop: LocationGraph):
        path = await shop.resolve_ancestry_path("shop")
        assert [loc.code for loc in path] == ["SHOP"]

    async def test_children(self, shop: LocationGraph):
        children = await shop.children("SHOP")
        assert [loc.code for loc in children] == ["S1"]

    async def test_list_hides_inactive_by_default(self, shop: LocationGraph):
        await shop.set_active("B1", False)

        active = {loc.code for loc in await shop.list_locations()}
        everything = {loc.code for loc in await shop.list_locations(active_only=False)}

        assert "B1" not in active
        assert everything == active | {"B1"}


class TestTransfer:
    @pytest.fixture
    async def stocked(self, shop: LocationGraph, catalog: Catalog, purchase) -> Part:
        await catalog.create("F200", "Fuse 20A", location_code="C1")
        await purchase("F200", 6, "0.40")
        return await catalog.get("F200")

    async def test_transfer_moves_part_only(
        self, shop: LocationGraph, stocked: Part, catalog: Catalog, ledger: Ledger
    ):
        entry = await shop.transfer("F200", "C1", "B1", reason="Loading the van", actor="sam")

        assert entry.kind is MovementKind.TRANSFER
        assert entry.quantity == 0
        assert entry.notes == "Loading the van"
        part = await catalog.get("F200")
        assert part.location_code == "B1"
        assert part.in_stock == stocked.in_stock
        assert part.avg_cost == stocked.avg_cost
        assert (await ledger.history("F200"))[-1] == entry

    async def test_default_reason(self, shop: LocationGraph, stocked: Part):
        entry = await shop.transfer("F200", "C1", "B1")
        assert entry.notes == "Part transfer"

    async def test_source_must_match_current_location(
        self, shop: LocationGraph, stocked: Part
    ):
        with pytest.raises(InvalidLocationError):
            await shop.transfer("F200", "S1", "B1")

    async def test_same_source_and_destination(self, shop: LocationGraph, stocked: Part):
        with pytest.raises(InvalidLocationError):
            await shop.transfer("F200", "C1", "C1")

    async def test_inactive_destination(
        self, shop: LocationGraph, stocked: Part, catalog: Catalog
    ):
        await shop.set_active("B1", False)

        with pytest.raises(InvalidLocationError):
            await shop.transfer("F200", "C1", "B1")

        assert (await catalog.get("F200")).location_code == "C1"

    async def test_unknown_destination(self, shop: LocationGraph, stocked: Part):
        with pytest.raises(InvalidLocationError):
            await shop.transfer("F200", "C1", "NOPE")

    async def test_unplaced_part_can_be_placed(
        self, shop: LocationGraph, w100: Part, catalog: Catalog
    ):
        await shop.transfer("W100", "S1", "B1")
        assert (await catalog.get("W100")).location_code == "B1"
