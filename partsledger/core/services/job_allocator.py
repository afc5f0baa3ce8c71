"""
Job cost allocator.

Charges parts to jobs. Stock-sourced parts are priced by the FIFO
resolver and leave the shelf through a Consumption entry; direct-order
parts are bought for the job, never stocked, and touch no ledger entry.
Pricing, the consumption append, the projection and the allocation row
all commit together or not at all.
"""

from datetime import UTC, datetime
from decimal import Decimal

from partsledger.config import get_logger
from partsledger.core.entities.allocation import (
    AllocationSource,
    JobCostSummary,
    JobPartAllocation,
)
from partsledger.core.entities.ledger import LedgerEntry, MovementKind
from partsledger.core.entities.part import normalize_part_code
from partsledger.core.exceptions import (
    AllocationNotFoundError,
    InsufficientStockError,
    JobNotFoundError,
    PartNotFoundError,
    ValidationError,
)
from partsledger.core.interfaces.job_directory import IJobDirectory
from partsledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from partsledger.core.money import apply_markup, round_money, to_decimal
from partsledger.core.services.fifo_resolver import FIFOCostResolver
from partsledger.core.services.ledger import Ledger

logger = get_logger(__name__)


class JobCostAllocator:
    """Allocates parts to jobs and reverses those allocations exactly."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        ledger: Ledger,
        resolver: FIFOCostResolver | None = None,
        job_directory: IJobDirectory | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._ledger = ledger
        self._resolver = resolver or FIFOCostResolver()
        self._job_directory = job_directory

    async def allocate(
        self,
        job_id: str,
        part_code: str,
        quantity: int,
        source: AllocationSource | str,
        unit_cost: Decimal | int | str | None = None,
        markup_percent: Decimal | int | str | None = None,
        notes: str | None = None,
        actor: str | None = None,
    ) -> JobPartAllocation:
        """Charge ``quantity`` of a part to a job."""
        job_id = (job_id or "").strip()
        if not job_id:
            raise ValidationError("job_id", "must not be empty")
        if quantity <= 0:
            raise ValidationError("quantity", "must be a positive integer", quantity)
        try:
            source = AllocationSource(source)
        except ValueError as e:
            raise ValidationError("source", "must be stock or direct_order", source) from e

        if self._job_directory is not None and not await self._job_directory.exists(job_id):
            raise JobNotFoundError(job_id)

        code = normalize_part_code(part_code)

        async with self._uow_factory() as uow:
            part = await uow.parts.get(code)
            if part is None:
                raise PartNotFoundError(code)

            markup = (
                part.markup_percent
                if markup_percent is None
                else to_decimal(markup_percent, "markup_percent")
            )
            if markup < 0:
                raise ValidationError("markup_percent", "must not be negative", markup)

            if source is AllocationSource.STOCK:
                price = await self._resolver.price_in(uow, code, quantity)
                if not price.is_fully_priced:
                    raise InsufficientStockError(code, quantity, price.priced_quantity)

                cost: Decimal = price.average_unit_cost  # type: ignore[assignment]
                entry = await self._ledger.append_in(
                    uow,
                    LedgerEntry(
                        part_code=code,
                        quantity=-quantity,
                        kind=MovementKind.CONSUMPTION,
                        unit_cost=cost,
                        job_id=job_id,
                        notes=notes or f"Used on job {job_id}",
                        actor=actor,
                    ),
                )
                await uow.parts.record_usage(code, datetime.now(UTC))
                total_cost = price.total_cost
                entry_id = entry.id
            else:
                if unit_cost is None:
                    raise ValidationError("unit_cost", "required for a direct order")
                cost = to_decimal(unit_cost, "unit_cost")
                if cost < 0:
                    raise ValidationError("unit_cost", "must not be negative", cost)
                total_cost = round_money(cost * quantity)
                entry_id = None

            allocation = await uow.allocations.create(
                JobPartAllocation(
                    job_id=job_id,
                    part_code=code,
                    description=part.description,
                    quantity=quantity,
                    unit_cost=cost,
                    total_cost=total_cost,
                    markup_percent=markup,
                    sell_price=apply_markup(cost, markup, quantity),
                    source=source,
                    ledger_entry_id=entry_id,
                    notes=notes,
                )
            )

        logger.info(
            "allocation_created",
            allocation_id=allocation.id,
            job_id=job_id,
            part_code=code,
            quantity=quantity,
            source=source.value,
            total_cost=allocation.total_cost,
        )
        return allocation

    async def deallocate(self, allocation_id: int, actor: str | None = None) -> JobPartAllocation:
        """
        Remove an allocation, undoing its stock effect.

        Stock allocations put the units back with an Adjustment at the
        allocation's unit cost; the original Consumption stays in the ledger.
        Returns the removed allocation.
        """
        async with self._uow_factory() as uow:
            allocation = await uow.allocations.get(allocation_id)
            if allocation is None:
                raise AllocationNotFoundError(allocation_id)

            if allocation.source is AllocationSource.STOCK:
                await self._ledger.append_in(
                    uow,
                    LedgerEntry(
                        part_code=allocation.part_code,
                        quantity=allocation.quantity,
                        kind=MovementKind.ADJUSTMENT,
                        unit_cost=allocation.unit_cost,
                        reference=f"ALLOC-{allocation.id}",
                        notes=f"Removed from job {allocation.job_id}",
                        actor=actor,
                    ),
                )

            await uow.allocations.delete(allocation_id)

        logger.info(
            "allocation_removed",
            allocation_id=allocation_id,
            job_id=allocation.job_id,
            part_code=allocation.part_code,
            source=allocation.source.value,
        )
        return allocation

    async def list_allocations(self, job_id: str) -> list[JobPartAllocation]:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.allocations.list_for_job(job_id)

    async def job_costs(self, job_id: str) -> JobCostSummary:
        """Cost and sell totals over the job's live allocations."""
        allocations = await self.list_allocations(job_id)
        return JobCostSummary(
            job_id=job_id,
            allocation_count=len(allocations),
            parts_cost=round_money(sum((a.total_cost for a in allocations), Decimal("0"))),
            parts_total=round_money(sum((a.sell_price for a in allocations), Decimal("0"))),
        )
