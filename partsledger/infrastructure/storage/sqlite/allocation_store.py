"""SQLite implementation of job part allocation storage."""

import aiosqlite

from partsledger.core.entities.allocation import AllocationSource, JobPartAllocation
from partsledger.core.interfaces.allocation_store import IAllocationStore
from partsledger.infrastructure.storage.sqlite.columns import dec_in, dec_out, dt_in, dt_out


class SQLiteAllocationStore(IAllocationStore):
    """Job allocation rows on a connection owned by the unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def create(self, allocation: JobPartAllocation) -> JobPartAllocation:
        cursor = await self._conn.execute(
            """
            INSERT INTO job_part_allocations (
                job_id, part_code, description, quantity,
                unit_cost, total_cost, markup_percent, sell_price,
                source, ledger_entry_id, notes, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                allocation.job_id,
                allocation.part_code,
                allocation.description,
                allocation.quantity,
                dec_out(allocation.unit_cost),
                dec_out(allocation.total_cost),
                dec_out(allocation.markup_percent),
                dec_out(allocation.sell_price),
                allocation.source.value,
                allocation.ledger_entry_id,
                allocation.notes,
                dt_out(allocation.created_at),
            ),
        )
        return allocation.model_copy(update={"id": cursor.lastrowid})

    async def get(self, allocation_id: int) -> JobPartAllocation | None:
        cursor = await self._conn.execute(
            "SELECT * FROM job_part_allocations WHERE id = ?", (allocation_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_allocation(row)

    async def delete(self, allocation_id: int) -> bool:
        cursor = await self._conn.execute(
            "DELETE FROM job_part_allocations WHERE id = ?", (allocation_id,)
        )
        return cursor.rowcount > 0

    async def list_for_job(self, job_id: str) -> list[JobPartAllocation]:
        cursor = await self._conn.execute(
            "SELECT * FROM job_part_allocations WHERE job_id = ? ORDER BY id",
            (job_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_allocation(row) for row in rows]

    async def count_for_part(self, part_code: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM job_part_allocations WHERE part_code = ?",
            (part_code,),
        )
        row = await cursor.fetchone()
        return row[0]

    def _row_to_allocation(self, row: aiosqlite.Row) -> JobPartAllocation:
        return JobPartAllocation(
            id=row["id"],
            job_id=row["job_id"],
            part_code=row["part_code"],
            description=row["description"],
            quantity=row["quantity"],
            unit_cost=dec_in(row["unit_cost"]),
            total_cost=dec_in(row["total_cost"]),
            markup_percent=dec_in(row["markup_percent"]),
            sell_price=dec_in(row["sell_price"]),
            source=AllocationSource(row["source"]),
            ledger_entry_id=row["ledger_entry_id"],
            notes=row["notes"],
            created_at=dt_in(row["created_at"]),
        )
