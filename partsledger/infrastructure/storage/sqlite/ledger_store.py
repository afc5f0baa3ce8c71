"""SQLite implementation of the append-only ledger."""

import aiosqlite

from partsledger.config import get_logger
from partsledger.core.entities.ledger import LedgerEntry, MovementKind
from partsledger.core.interfaces.ledger_store import ILedgerStore
from partsledger.infrastructure.storage.sqlite.columns import dec_in, dec_out, dt_in, dt_out

logger = get_logger(__name__)


class SQLiteLedgerStore(ILedgerStore):
    """Inserts and reads ledger rows. Triggers reject UPDATE and DELETE."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        cursor = await self._conn.execute(
            """
            INSERT INTO ledger_entries (
                part_code, quantity, kind, unit_cost,
                from_location_code, to_location_code,
                job_id, reference, notes, actor, recorded_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.part_code,
                entry.quantity,
                entry.kind.value,
                dec_out(entry.unit_cost),
                entry.from_location_code,
                entry.to_location_code,
                entry.job_id,
                entry.reference,
                entry.notes,
                entry.actor,
                dt_out(entry.recorded_at),
            ),
        )
        stored = entry.model_copy(update={"id": cursor.lastrowid})
        logger.debug("ledger_row_inserted", entry_id=stored.id, part_code=stored.part_code)
        return stored

    async def get(self, entry_id: int) -> LedgerEntry | None:
        cursor = await self._conn.execute(
            "SELECT * FROM ledger_entries WHERE id = ?", (entry_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    async def history(self, part_code: str, limit: int | None = None) -> list[LedgerEntry]:
        if limit is None:
            cursor = await self._conn.execute(
                "SELECT * FROM ledger_entries WHERE part_code = ? ORDER BY id",
                (part_code,),
            )
        else:
            # Most recent N, returned oldest first
            cursor = await self._conn.execute(
                """
                SELECT * FROM (
                    SELECT * FROM ledger_entries WHERE part_code = ?
                    ORDER BY id DESC LIMIT ?
                ) ORDER BY id
                """,
                (part_code, limit),
            )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def count_for_part(self, part_code: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM ledger_entries WHERE part_code = ?", (part_code,)
        )
        row = await cursor.fetchone()
        return row[0]

    def _row_to_entry(self, row: aiosqlite.Row) -> LedgerEntry:
        return LedgerEntry(
            id=row["id"],
            part_code=row["part_code"],
            quantity=row["quantity"],
            kind=MovementKind(row["kind"]),
            unit_cost=dec_in(row["unit_cost"]),
            from_location_code=row["from_location_code"],
            to_location_code=row["to_location_code"],
            job_id=row["job_id"],
            reference=row["reference"],
            notes=row["notes"],
            actor=row["actor"],
            recorded_at=dt_in(row["recorded_at"]),
        )
