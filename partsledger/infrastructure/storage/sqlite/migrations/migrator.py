"""
Versioned schema migrations for the ledger database.

Migrations are ``v###_name.sql`` files applied in version order. Each one
runs in its own transaction together with its ``schema_migrations`` row,
so a failing script leaves the database at the previous version. Applied
scripts must never change: a checksum drift stops start-up.

``verify_schema_integrity`` checks the guarantees the services rely on:
the ledger is append-only, referenced parts and locations cannot be
deleted, and every cached ``in_stock`` equals its ledger sum.
"""

import asyncio
import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from partsledger.config import configure_logging, get_logger, get_settings
from partsledger.core.exceptions import ConfigurationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_FILE_PATTERN = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = (
    "parts",
    "storage_locations",
    "ledger_entries",
    "job_part_allocations",
    "schema_migrations",
)

# Triggers that keep ledger rows append-only
LEDGER_TRIGGERS = ("ledger_entries_no_update", "ledger_entries_no_delete")

# (table, column) pairs that must reference with ON DELETE RESTRICT
RESTRICTED_REFERENCES = (
    ("ledger_entries", "part_code"),
    ("job_part_allocations", "part_code"),
    ("parts", "location_code"),
    ("storage_locations", "parent_code"),
)

CREATE_MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""


@dataclass
class MigrationInfo:
    """A migration script on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_FILE_PATTERN.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration scripts in version order; badly named files are skipped."""
    migrations = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their recorded checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one script and record it, atomically."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()

    try:
        await conn.executescript("BEGIN;\n" + migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.perf_counter() - start) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        if conn.in_transaction:
            await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - start) * 1000),
            error=str(e),
        )

    elapsed = int((time.perf_counter() - start) * 1000)
    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed)
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def initialize_database(
    db_path: Path | None = None,
    directory: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema version.

    Returns the results of the migrations that were attempted; applying
    stops at the first failure.

    Raises:
        ConfigurationError: an applied script was edited after the fact
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path, isolation_level=None) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute(CREATE_MIGRATIONS_TABLE)

        applied = await get_applied_migrations(conn)
        for migration in discover_migrations(directory):
            recorded = applied.get(migration.version)
            if recorded is not None:
                if recorded != migration.checksum:
                    raise ConfigurationError(
                        f"Migration v{migration.version} changed after it was applied",
                        code="MIGRATION_CHECKSUM_MISMATCH",
                        details={
                            "version": migration.version,
                            "applied": recorded,
                            "current": migration.checksum,
                        },
                    )
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version plus applied and pending migrations."""
    db_path = db_path or get_settings().storage.db_path
    discovered = [m.version for m in discover_migrations()]

    if not db_path.exists():
        return {"exists": False, "current_version": None, "applied": [], "pending": discovered}

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied": sorted(applied),
        "pending": [v for v in discovered if v not in applied],
    }


def _check(name: str, problems: list, **extra) -> dict:
    return {"check": name, "status": "FAIL" if problems else "PASS", "problems": problems, **extra}


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Check the storage guarantees of a migrated database.

    Each check is ``{"check", "status", "problems"}`` with status PASS or FAIL.
    """
    db_path = db_path or get_settings().storage.db_path
    checks = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("SELECT type, name FROM sqlite_master")
        objects = {(row[0], row[1]) for row in await cursor.fetchall()}

        missing_tables = [t for t in REQUIRED_TABLES if ("table", t) not in objects]
        checks.append(_check("required_tables", missing_tables))

        missing_triggers = [t for t in LEDGER_TRIGGERS if ("trigger", t) not in objects]
        checks.append(_check("ledger_append_only", missing_triggers))

        unrestricted = []
        for table, column in RESTRICTED_REFERENCES:
            if ("table", table) not in objects:
                continue
            cursor = await conn.execute(f"PRAGMA foreign_key_list({table})")
            # Row layout: id, seq, table, from, to, on_update, on_delete, match
            on_delete = {row[3]: row[6] for row in await cursor.fetchall()}
            if on_delete.get(column) != "RESTRICT":
                unrestricted.append(f"{table}.{column}")
        checks.append(_check("delete_restricted", unrestricted))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        checks.append(_check("foreign_keys", [tuple(row) for row in await cursor.fetchall()]))

        drifted = []
        if {("table", "parts"), ("table", "ledger_entries")} <= objects:
            cursor = await conn.execute(
                """
                SELECT p.part_code, p.in_stock, COALESCE(SUM(e.quantity), 0) AS ledger_sum
                FROM parts p
                LEFT JOIN ledger_entries e ON e.part_code = p.part_code
                GROUP BY p.part_code, p.in_stock
                HAVING p.in_stock <> COALESCE(SUM(e.quantity), 0)
                """
            )
            drifted = [
                {"part_code": row[0], "in_stock": row[1], "ledger_sum": row[2]}
                for row in await cursor.fetchall()
            ]
        checks.append(_check("stock_matches_ledger", drifted))

        cursor = await conn.execute("PRAGMA integrity_check")
        result = (await cursor.fetchone())[0]
        checks.append(_check("integrity", [] if result == "ok" else [result]))

    return checks


def main() -> None:
    """``partsledger-migrate``: apply migrations, or report status/integrity."""
    import argparse

    parser = argparse.ArgumentParser(description="Parts Ledger database migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show migration status")
    group.add_argument("--verify", action="store_true", help="Verify ledger storage guarantees")
    args = parser.parse_args()
    configure_logging()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Current version: {status['current_version'] or '-'}")
            print(f"Applied: {', '.join(status['applied']) or '-'}")
            print(f"Pending: {', '.join(status['pending']) or '-'}")
            return 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                print(f"[{check['status']}] {check['check']}")
                for problem in check["problems"]:
                    print(f"       {problem}")
            return 0 if all(c["status"] == "PASS" for c in checks) else 1

        results = await initialize_database(args.db_path)
        for result in results:
            outcome = "OK" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"       {result.error}")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
