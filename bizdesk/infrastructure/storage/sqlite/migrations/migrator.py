"""
Schema migrations for the Bizdesk SQLite database.

Migrations are ``vNNN_name.sql`` files in this package, applied in version
order. Each one runs in a single ``BEGIN IMMEDIATE`` transaction together
with its ``schema_migrations`` row, so a failing migration leaves the
database at the previous version.
"""

import asyncio
import hashlib
import re
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from bizdesk.config import get_logger, get_settings
from bizdesk.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(\d{3})_(\w+)\.sql$")

REQUIRED_TABLES = ("users", "clients", "products", "services", "sales", "reminders")

# index -> table. The sweep's pending scan, tenant reminder listings and
# sales history all read through these.
REQUIRED_INDEXES = {
    "idx_reminders_status_due": "reminders",
    "idx_reminders_tenant_due": "reminders",
    "idx_sales_tenant_date": "sales",
    "idx_clients_tenant": "clients",
}

_BOOKKEEPING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""


@dataclass(frozen=True)
class Migration:
    """One versioned SQL file."""

    version: str
    name: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode()).hexdigest()[:16]

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        match = _FILENAME.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        return cls(
            version=match.group(1),
            name=match.group(2),
            sql=path.read_text(encoding="utf-8"),
        )

    def script(self) -> str:
        """The migration plus its bookkeeping row, as one transaction."""
        # version and name are constrained by _FILENAME, checksum is hex
        return (
            "BEGIN IMMEDIATE;\n"
            f"{self.sql.rstrip()}\n"
            "INSERT INTO schema_migrations (version, name, checksum) "
            f"VALUES ('{self.version}', '{self.name}', '{self.checksum}');\n"
            "COMMIT;\n"
        )


@dataclass
class SchemaStatus:
    exists: bool
    current_version: str | None = None
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


@dataclass
class SchemaCheck:
    name: str
    ok: bool
    detail: str = ""


def discover_migrations(directory: Path | None = None) -> list[Migration]:
    """Load migration files in version order, skipping misnamed ones."""
    migrations = []
    for path in sorted((directory or MIGRATIONS_DIR).glob("v*.sql")):
        try:
            migrations.append(Migration.from_file(path))
        except ValueError as e:
            logger.warning("migration_file_skipped", path=path.name, error=str(e))
    return migrations


class SchemaMigrator:
    """Applies and inspects migrations for one database file."""

    def __init__(self, db_path: Path, migrations: list[Migration] | None = None):
        self.db_path = db_path
        self.migrations = migrations if migrations is not None else discover_migrations()

    @staticmethod
    async def _applied(conn: aiosqlite.Connection) -> dict[str, str]:
        """Applied version -> checksum; empty before the first run."""
        try:
            cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
        except aiosqlite.OperationalError:
            return {}
        return {version: checksum for version, checksum in await cursor.fetchall()}

    async def apply(self) -> list[Migration]:
        """
        Apply pending migrations.

        Returns:
            The migrations applied by this call, oldest first

        Raises:
            DatabaseError: if a migration fails; later ones are not attempted
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        applied_now: list[Migration] = []

        async with aiosqlite.connect(self.db_path) as conn:
            await conn.execute("PRAGMA foreign_keys=ON")
            await conn.execute(_BOOKKEEPING_TABLE)
            await conn.commit()
            applied = await self._applied(conn)

            for migration in self.migrations:
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        logger.warning("migration_checksum_changed", version=migration.version)
                    continue

                try:
                    await conn.executescript(migration.script())
                except aiosqlite.Error as e:
                    if conn.in_transaction:
                        await conn.rollback()
                    logger.error(
                        "migration_failed",
                        version=migration.version,
                        name=migration.name,
                        error=str(e),
                    )
                    raise DatabaseError(f"migration v{migration.version}", str(e)) from e

                logger.info("migration_applied", version=migration.version, name=migration.name)
                applied_now.append(migration)

        return applied_now

    async def status(self) -> SchemaStatus:
        if not self.db_path.exists():
            return SchemaStatus(exists=False, pending=[m.version for m in self.migrations])

        async with aiosqlite.connect(self.db_path) as conn:
            applied = await self._applied(conn)

        return SchemaStatus(
            exists=True,
            current_version=max(applied) if applied else None,
            applied=sorted(applied),
            pending=[m.version for m in self.migrations if m.version not in applied],
        )

    async def verify(self) -> list[SchemaCheck]:
        """Check integrity, foreign keys, required tables and indexes, and checksums."""
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute("PRAGMA integrity_check")
            integrity = (await cursor.fetchone())[0]
            cursor = await conn.execute("PRAGMA foreign_key_check")
            violations = await cursor.fetchall()
            cursor = await conn.execute(
                "SELECT type, name, tbl_name FROM sqlite_master WHERE type IN ('table', 'index')"
            )
            objects = await cursor.fetchall()
            applied = await self._applied(conn)

        tables = {name for kind, name, _ in objects if kind == "table"}
        indexes = {name: table for kind, name, table in objects if kind == "index"}
        missing_tables = [t for t in REQUIRED_TABLES if t not in tables]
        missing_indexes = [i for i, table in REQUIRED_INDEXES.items() if indexes.get(i) != table]
        changed = [
            m.version
            for m in self.migrations
            if m.version in applied and applied[m.version] != m.checksum
        ]

        return [
            SchemaCheck("integrity", integrity == "ok", "" if integrity == "ok" else integrity),
            SchemaCheck(
                "foreign_keys",
                not violations,
                f"{len(violations)} violation(s)" if violations else "",
            ),
            SchemaCheck("tables", not missing_tables, ", ".join(missing_tables)),
            SchemaCheck("indexes", not missing_indexes, ", ".join(missing_indexes)),
            SchemaCheck("checksums", not changed, ", ".join(f"v{v}" for v in changed)),
        ]


async def initialize_database(db_path: Path | None = None) -> list[Migration]:
    """Bring the configured database up to the newest schema version."""
    db_path = db_path or get_settings().storage.db_path
    logger.info("database_initializing", db_path=str(db_path))
    return await SchemaMigrator(db_path).apply()


def main() -> None:
    """CLI entry point: apply migrations, or report with --status/--verify."""
    import argparse

    parser = argparse.ArgumentParser(description="Bizdesk schema migrations")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    parser.add_argument("--status", action="store_true", help="Show applied and pending versions")
    parser.add_argument("--verify", action="store_true", help="Check the schema and exit 1 on failure")
    args = parser.parse_args()

    migrator = SchemaMigrator(args.db_path or get_settings().storage.db_path)

    if args.status:
        status = asyncio.run(migrator.status())
        print(f"Database exists: {status.exists}")
        print(f"Current version: {status.current_version or 'none'}")
        print(f"Pending: {', '.join(status.pending) or 'none'}")
    elif args.verify:
        checks = asyncio.run(migrator.verify())
        for check in checks:
            line = f"[{'PASS' if check.ok else 'FAIL'}] {check.name}"
            print(f"{line}: {check.detail}" if check.detail else line)
        if not all(c.ok for c in checks):
            raise SystemExit(1)
    else:
        for migration in asyncio.run(migrator.apply()):
            print(f"applied v{migration.version}_{migration.name}")


if __name__ == "__main__":
    main()
