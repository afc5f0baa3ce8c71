"""
Aggregate projector.

Recomputes a part's cached stock level, average cost, sell price and
current location from its full ledger history. Always a full replay,
never an incremental delta, so the cached stock equals the sum of the
ledger after every write.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import assert_never

from partsledger.config import get_logger
from partsledger.core.entities.ledger import LedgerEntry, MovementKind, PartProjection
from partsledger.core.entities.part import Part
from partsledger.core.exceptions import PartNotFoundError
from partsledger.core.interfaces.unit_of_work import IUnitOfWork
from partsledger.core.money import apply_markup, round_unit_cost

logger = get_logger(__name__)


def project(part: Part, entries: Sequence[LedgerEntry]) -> PartProjection:
    """Fold a part's ledger history into its cached aggregates."""
    in_stock = 0
    purchased_qty = 0
    purchased_cost = Decimal("0")
    location_code = part.location_code

    for entry in sorted(entries, key=lambda e: e.id or 0):
        in_stock += entry.quantity

        match entry.kind:
            case MovementKind.PURCHASE:
                if entry.unit_cost is not None:
                    purchased_qty += entry.quantity
                    purchased_cost += entry.unit_cost * entry.quantity
            case MovementKind.TRANSFER:
                location_code = entry.to_location_code
            case (
                MovementKind.CONSUMPTION
                | MovementKind.DIRECT_ORDER
                | MovementKind.RETURN_TO_SUPPLIER
                | MovementKind.CUSTOMER_RETURN
                | MovementKind.LOSS
                | MovementKind.ADJUSTMENT
            ):
                pass
            case _:
                assert_never(entry.kind)

    avg_cost = round_unit_cost(purchased_cost / purchased_qty) if purchased_qty > 0 else None
    sell_price = apply_markup(avg_cost, part.markup_percent) if avg_cost is not None else None

    return PartProjection(
        in_stock=in_stock,
        avg_cost=avg_cost,
        sell_price=sell_price,
        location_code=location_code,
    )


class AggregateProjector:
    """Writes projections back to the catalog inside the caller's transaction."""

    async def recompute(self, uow: IUnitOfWork, part_code: str) -> Part:
        part = await uow.parts.get(part_code)
        if part is None:
            raise PartNotFoundError(part_code)

        entries = await uow.ledger.history(part_code)
        projection = project(part, entries)
        await uow.parts.apply_projection(part_code, projection)

        logger.info(
            "part_projected",
            part_code=part_code,
            entries=len(entries),
            in_stock=projection.in_stock,
            avg_cost=str(projection.avg_cost) if projection.avg_cost is not None else None,
        )
        return part.model_copy(update=projection.model_dump())
