"""SQLite implementation of storage location persistence."""

import aiosqlite

from partsledger.core.entities.location import LocationKind, StorageLocation
from partsledger.core.exceptions import DuplicateLocationError
from partsledger.core.interfaces.location_store import ILocationStore
from partsledger.infrastructure.storage.sqlite.columns import dt_in, dt_out


class SQLiteLocationStore(ILocationStore):
    """Location tree rows on a connection owned by the unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def create(self, location: StorageLocation) -> StorageLocation:
        try:
            await self._conn.execute(
                """
                INSERT INTO storage_locations (
                    code, name, kind, parent_code, description,
                    label_number, active, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    location.code,
                    location.name,
                    location.kind.value,
                    location.parent_code,
                    location.description,
                    location.label_number,
                    int(location.active),
                    dt_out(location.created_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" in str(e) or "PRIMARY KEY" in str(e):
                raise DuplicateLocationError(location.code) from e
            raise
        return location

    async def get(self, code: str) -> StorageLocation | None:
        cursor = await self._conn.execute(
            "SELECT * FROM storage_locations WHERE code = ?", (code,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_location(row)

    async def set_parent(self, code: str, parent_code: str | None) -> None:
        await self._conn.execute(
            "UPDATE storage_locations SET parent_code = ? WHERE code = ?",
            (parent_code, code),
        )

    async def set_active(self, code: str, active: bool) -> None:
        await self._conn.execute(
            "UPDATE storage_locations SET active = ? WHERE code = ?",
            (int(active), code),
        )

    async def list_locations(self, active_only: bool = True) -> list[StorageLocation]:
        query = "SELECT * FROM storage_locations"
        if active_only:
            query += " WHERE active = 1"
        cursor = await self._conn.execute(query + " ORDER BY name, code")
        rows = await cursor.fetchall()
        return [self._row_to_location(row) for row in rows]

    async def children(self, code: str) -> list[StorageLocation]:
        cursor = await self._conn.execute(
            "SELECT * FROM storage_locations WHERE parent_code = ? ORDER BY name, code",
            (code,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_location(row) for row in rows]

    async def last_generated_code(self, prefix: str) -> str | None:
        # Zero-padded suffixes sort correctly up to 999; longer ones sort by length first
        cursor = await self._conn.execute(
            """
            SELECT code FROM storage_locations
            WHERE code GLOB ?
            ORDER BY LENGTH(code) DESC, code DESC
            LIMIT 1
            """,
            (f"{prefix}-[0-9]*",),
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    def _row_to_location(self, row: aiosqlite.Row) -> StorageLocation:
        return StorageLocation(
            code=row["code"],
            name=row["name"],
            kind=LocationKind(row["kind"]),
            parent_code=row["parent_code"],
            description=row["description"],
            label_number=row["label_number"],
            active=bool(row["active"]),
            created_at=dt_in(row["created_at"]),
        )
