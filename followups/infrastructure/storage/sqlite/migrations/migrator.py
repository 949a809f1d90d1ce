"""
Versioned schema migrations.

Migrations are ``vNNN_name.sql`` files next to this module, applied in
version order and recorded in ``schema_migrations`` together with a checksum
of the file that was run.
"""

import hashlib
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from followups.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(\d+)_(\w+)\.sql$")

_RECORD_MIGRATION = """
    INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
    VALUES (?, ?, ?, ?)
"""


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    """Applied and pending versions of a database file."""

    exists: bool
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def is_current(self) -> bool:
        return self.exists and not self.pending


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map applied versions to the checksum recorded when they ran."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        # Fresh database, the first migration creates the table
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


def discover_migrations(directory: Path | None = None) -> list[MigrationInfo]:
    """Migration files in ``directory``, lowest version first."""
    directory = directory or MIGRATIONS_DIR
    migrations = []
    for path in directory.glob("v*.sql"):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(migrations, key=lambda m: int(m.version))


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it."""
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            _RECORD_MIGRATION,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=elapsed_ms(),
            error=str(e),
        )

    result = MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed_ms(),
    )
    logger.info(
        "migration_applied",
        version=result.version,
        name=result.name,
        execution_time_ms=result.execution_time_ms,
    )
    return result


async def initialize_database(db_path: Path | None = None) -> list[MigrationResult]:
    """
    Bring a database file up to the latest schema.

    Already applied versions are skipped; an edited migration file only
    triggers a warning. Stops at the first failing migration.

    Args:
        db_path: Database file; ``settings.storage.db_path`` when omitted.

    Returns:
        Results for the migrations applied by this call, empty when current.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await get_applied_migrations(conn)
        for migration in discover_migrations():
            recorded = applied.get(migration.version)
            if recorded is not None:
                if recorded != migration.checksum:
                    logger.warning(
                        "migration_checksum_changed",
                        version=migration.version,
                        recorded=recorded,
                        current=migration.checksum,
                    )
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    logger.info(
        "database_initialized",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
        failed=[r.version for r in results if not r.success],
    )
    return results


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    """Report which migrations a database file has and still needs."""
    db_path = db_path or get_settings().storage.db_path
    if not db_path.exists():
        return MigrationStatus(exists=False)

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return MigrationStatus(
        exists=True,
        applied=list(applied),
        pending=[m.version for m in discover_migrations() if m.version not in applied],
    )
