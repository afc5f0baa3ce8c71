"""
Append-only inventory ledger.

The ledger is the system of record: every stock and cost fact is derived
from it. ``append`` validates an entry against the part and its history,
inserts it, and re-runs the aggregate projector, all inside one unit of
work. There is no update or delete; corrections are new offsetting entries.
"""

from partsledger.config import get_logger
from partsledger.core.entities.ledger import LedgerEntry, MovementKind
from partsledger.core.entities.location import normalize_location_code
from partsledger.core.entities.part import Part, normalize_part_code
from partsledger.core.exceptions import (
    InsufficientStockError,
    InvalidLocationError,
    PartNotFoundError,
    ValidationError,
)
from partsledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from partsledger.core.services.projector import AggregateProjector

logger = get_logger(__name__)


def _location_key(code: str | None) -> str | None:
    return normalize_location_code(code) if code else None


def check_entry_shape(entry: LedgerEntry) -> None:
    """Enforce the per-kind sign, cost and location rules."""
    kind = entry.kind

    if entry.unit_cost is not None and entry.unit_cost < 0:
        raise ValidationError("unit_cost", "must not be negative", entry.unit_cost)

    if kind is not MovementKind.TRANSFER and (
        entry.from_location_code is not None or entry.to_location_code is not None
    ):
        raise ValidationError(
            "location", f"only transfers carry locations, not {kind.value}"
        )

    match kind:
        case MovementKind.PURCHASE:
            if entry.quantity <= 0:
                raise ValidationError("quantity", "purchase must be positive", entry.quantity)
            if entry.unit_cost is None:
                raise ValidationError("unit_cost", "required for a purchase")
        case MovementKind.CONSUMPTION | MovementKind.RETURN_TO_SUPPLIER | MovementKind.LOSS:
            if entry.quantity >= 0:
                raise ValidationError(
                    "quantity", f"{kind.value} must be negative", entry.quantity
                )
        case MovementKind.CUSTOMER_RETURN:
            if entry.quantity <= 0:
                raise ValidationError(
                    "quantity", "customer return must be positive", entry.quantity
                )
        case MovementKind.ADJUSTMENT:
            if entry.quantity == 0:
                raise ValidationError("quantity", "adjustment must not be zero", entry.quantity)
        case MovementKind.TRANSFER:
            if entry.quantity != 0:
                raise ValidationError(
                    "quantity", "transfer moves location, not quantity", entry.quantity
                )
            if entry.unit_cost is not None:
                raise ValidationError("unit_cost", "transfer carries no cost", entry.unit_cost)
        case MovementKind.DIRECT_ORDER:
            raise ValidationError(
                "kind", "direct-order parts are not stocked; allocate them to the job instead"
            )


class Ledger:
    """Validating, projecting front of the ledger store."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        projector: AggregateProjector | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._projector = projector or AggregateProjector()

    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Append one entry as its own atomic unit. Returns the stored entry."""
        async with self._uow_factory() as uow:
            return await self.append_in(uow, entry)

    async def append_in(self, uow: IUnitOfWork, entry: LedgerEntry) -> LedgerEntry:
        """Append inside a caller-owned unit of work."""
        code = normalize_part_code(entry.part_code)
        entry = entry.model_copy(
            update={
                "part_code": code,
                "id": None,
                "from_location_code": _location_key(entry.from_location_code),
                "to_location_code": _location_key(entry.to_location_code),
            }
        )

        part = await uow.parts.get(code)
        if part is None:
            raise PartNotFoundError(code)

        check_entry_shape(entry)
        if entry.kind is MovementKind.TRANSFER:
            await self._check_transfer(uow, part, entry)

        history = await uow.ledger.history(code)
        current = sum(e.quantity for e in history)
        if entry.kind.draws_from_stock and current + entry.quantity < 0:
            raise InsufficientStockError(code, -entry.quantity, max(current, 0))

        stored = await uow.ledger.append(entry)
        await self._projector.recompute(uow, code)

        logger.info(
            "ledger_entry_appended",
            entry_id=stored.id,
            part_code=code,
            kind=stored.kind.value,
            quantity=stored.quantity,
            stock_after=current + stored.quantity,
            actor=stored.actor,
        )
        return stored

    async def history(self, part_code: str, limit: int | None = None) -> list[LedgerEntry]:
        """Entries for a part, oldest first.

        The full history unless ``limit`` is given, in which case only the
        most recent ``limit`` entries are returned.
        """
        if limit is not None and limit < 1:
            raise ValidationError("limit", "must be at least 1", limit)
        code = normalize_part_code(part_code)
        async with self._uow_factory(read_only=True) as uow:
            if await uow.parts.get(code) is None:
                raise PartNotFoundError(code)
            return await uow.ledger.history(code, limit=limit)

    async def _check_transfer(self, uow: IUnitOfWork, part: Part, entry: LedgerEntry) -> None:
        source = entry.from_location_code
        destination = entry.to_location_code
        if source is None or destination is None:
            raise InvalidLocationError(
                source or destination, "transfer needs both source and destination"
            )
        if source == destination:
            raise InvalidLocationError(source, "source and destination are the same")

        for code in (source, destination):
            location = await uow.locations.get(code)
            if location is None:
                raise InvalidLocationError(code, "location does not exist")
            if not location.active:
                raise InvalidLocationError(code, "location is inactive")

        if part.location_code is not None and part.location_code != source:
            raise InvalidLocationError(
                source,
                f"part {part.part_code} is at {part.location_code}, not {source}",
            )
