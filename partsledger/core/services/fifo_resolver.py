"""
FIFO cost resolver.

Prices a consumption against the purchase lots recorded in the ledger,
oldest purchase first. The core, ``resolve_fifo``, is a pure function of
the entry list: the same snapshot always yields the same lots and totals.
It reports a shortfall when purchase history cannot cover the request but
never decides what to do about it.
"""

from collections.abc import Sequence
from decimal import Decimal

from partsledger.config import get_logger
from partsledger.core.entities.ledger import (
    ConsumptionPrice,
    FIFOLot,
    LedgerEntry,
    MovementKind,
)
from partsledger.core.entities.part import normalize_part_code
from partsledger.core.exceptions import PartNotFoundError, ValidationError
from partsledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from partsledger.core.money import round_money, round_unit_cost

logger = get_logger(__name__)


def _in_sequence(entries: Sequence[LedgerEntry]) -> list[LedgerEntry]:
    if any(e.id is None for e in entries):
        raise ValidationError("entries", "FIFO pricing needs persisted entries with ids")
    return sorted(entries, key=lambda e: e.id)  # type: ignore[arg-type, return-value]


def already_drawn(entries: Sequence[LedgerEntry]) -> int:
    """
    Units already taken out of purchase lots.

    Every negative delta draws from the lots; positive deltas that are not
    purchases (customer returns, reversing adjustments) put units back.
    """
    outflow = sum(-e.quantity for e in entries if e.quantity < 0)
    restored = sum(
        e.quantity
        for e in entries
        if e.quantity > 0 and e.kind is not MovementKind.PURCHASE
    )
    return max(0, outflow - restored)


def purchase_lots(entries: Sequence[LedgerEntry]) -> list[LedgerEntry]:
    """Costed purchase entries, oldest first."""
    return [
        e
        for e in _in_sequence(entries)
        if e.kind is MovementKind.PURCHASE and e.quantity > 0 and e.unit_cost is not None
    ]


def resolve_fifo(
    part_code: str,
    entries: Sequence[LedgerEntry],
    quantity: int,
) -> ConsumptionPrice:
    """Select the purchase lots that pay for ``quantity`` units."""
    if quantity <= 0:
        raise ValidationError("quantity", "must be a positive integer", quantity)

    drawn = already_drawn(entries)
    remaining = quantity
    lots: list[FIFOLot] = []

    for purchase in purchase_lots(entries):
        if remaining <= 0:
            break

        available = max(0, purchase.quantity - drawn)
        drawn = max(0, drawn - purchase.quantity)
        if available == 0:
            continue

        take = min(remaining, available)
        unit_cost: Decimal = purchase.unit_cost  # type: ignore[assignment]
        lots.append(
            FIFOLot(
                entry_id=purchase.id,  # type: ignore[arg-type]
                recorded_at=purchase.recorded_at,
                quantity=take,
                unit_cost=unit_cost,
                subtotal=unit_cost * take,
            )
        )
        remaining -= take

    exact_total = sum((lot.subtotal for lot in lots), Decimal("0"))
    priced = quantity - remaining

    return ConsumptionPrice(
        part_code=part_code,
        requested=quantity,
        lots=tuple(lots),
        total_cost=round_money(exact_total),
        average_unit_cost=round_unit_cost(exact_total / priced) if priced else None,
    )


class FIFOCostResolver:
    """Reads a part's ledger inside a unit of work and prices consumptions."""

    def __init__(self, uow_factory: UnitOfWorkFactory | None = None) -> None:
        self._uow_factory = uow_factory

    async def price_consumption(self, part_code: str, quantity: int) -> ConsumptionPrice:
        """Price against a consistent read snapshot (preview only, nothing is held)."""
        if self._uow_factory is None:
            raise ValidationError("uow_factory", "resolver was built without a store")
        async with self._uow_factory(read_only=True) as uow:
            return await self.price_in(uow, part_code, quantity)

    async def price_in(
        self, uow: IUnitOfWork, part_code: str, quantity: int
    ) -> ConsumptionPrice:
        """Price inside the caller's transaction, before it appends the consumption."""
        code = normalize_part_code(part_code)
        if await uow.parts.get(code) is None:
            raise PartNotFoundError(code)

        entries = await uow.ledger.history(code)
        price = resolve_fifo(code, entries, quantity)

        logger.debug(
            "fifo_priced",
            part_code=code,
            requested=quantity,
            lots=len(price.lots),
            shortfall=price.shortfall,
            total_cost=price.total_cost,
        )
        return price
