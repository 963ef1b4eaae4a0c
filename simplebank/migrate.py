"""Versioned schema migrations kept as pairs of ``.up.sql``/``.down.sql`` files."""

from __future__ import annotations

import argparse
import os
import re
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from dotenv import load_dotenv

MIGRATION_DIR = "db/migration"

_MIGRATION_FILE = re.compile(r"^(\d+)_(.+)\.(up|down)\.sql$")
_SEQUENCE_PREFIX = re.compile(r"^[+-]?(\d+)_")
_URL_PREFIXES = ("sqlite3://", "sqlite://")

_UP_TEMPLATE = "-- Write your UP migration SQL here\n"
_DOWN_TEMPLATE = "-- Write your DOWN migration SQL here\n"


@dataclass
class _Migration:
    version: int
    up: Path | None = None
    down: Path | None = None


def _scan(migration_dir: Path) -> dict[int, _Migration]:
    migrations: dict[int, _Migration] = {}
    for path in migration_dir.iterdir():
        match = _MIGRATION_FILE.match(path.name)
        if match is None or not path.is_file():
            continue
        version = int(match.group(1))
        migration = migrations.setdefault(version, _Migration(version))
        if match.group(3) == "up":
            migration.up = path
        else:
            migration.down = path
    return migrations


class Migrator:
    """Applies and reverts the migrations in a directory on a SQLite connection.

    The applied version is kept in a ``schema_migrations`` table. Each method
    returns how many migrations it ran; zero means there was nothing to do.
    """

    def __init__(self, migration_dir: str | os.PathLike[str], conn: sqlite3.Connection) -> None:
        self.migration_dir = Path(migration_dir)
        self.conn = conn
        self._migrations = _scan(self.migration_dir)
        self._versions = sorted(self._migrations)
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations "
            "(version INTEGER NOT NULL PRIMARY KEY, dirty INTEGER NOT NULL)"
        )
        conn.commit()

    @property
    def version(self) -> int | None:
        """The version the database is at, or None before any migration."""
        return self._state()[0]

    def up(self) -> int:
        """Apply every pending migration."""
        return self._run_up(self._pending(self._current()))

    def down(self) -> int:
        """Revert every applied migration."""
        return self._run_down(self._applied(self._current()))

    def steps(self, n: int) -> int:
        """Apply n migrations when n is positive, revert -n when negative."""
        current = self._current()
        if n > 0:
            return self._run_up(self._pending(current)[:n])
        if n < 0:
            return self._run_down(self._applied(current)[:-n])
        return 0

    def _state(self) -> tuple[int | None, bool]:
        row = self.conn.execute("SELECT version, dirty FROM schema_migrations LIMIT 1").fetchone()
        if row is None:
            return None, False
        return row[0], bool(row[1])

    def _current(self) -> int | None:
        version, dirty = self._state()
        if dirty:
            raise RuntimeError(f"Dirty database version {version}. Fix and force version.")
        if version is not None and version not in self._migrations:
            raise RuntimeError(f"no migration found for version {version}")
        return version

    def _pending(self, current: int | None) -> list[int]:
        return [v for v in self._versions if current is None or v > current]

    def _applied(self, current: int | None) -> list[int]:
        if current is None:
            return []
        return [v for v in reversed(self._versions) if v <= current]

    def _set_version(self, version: int | None, dirty: bool) -> None:
        self.conn.execute("DELETE FROM schema_migrations")
        if version is not None:
            self.conn.execute(
                "INSERT INTO schema_migrations (version, dirty) VALUES (?, ?)",
                (version, int(dirty)),
            )
        self.conn.commit()

    def _run_script(self, path: Path | None) -> None:
        if path is not None:
            self.conn.executescript(path.read_text(encoding="utf-8"))

    def _run_up(self, versions: Sequence[int]) -> int:
        for version in versions:
            self._set_version(version, dirty=True)
            self._run_script(self._migrations[version].up)
            self._set_version(version, dirty=False)
        return len(versions)

    def _run_down(self, versions: Sequence[int]) -> int:
        for version in versions:
            index = self._versions.index(version)
            target = self._versions[index - 1] if index > 0 else None
            self._set_version(version, dirty=True)
            self._run_script(self._migrations[version].down)
            self._set_version(target, dirty=False)
        return len(versions)


def next_migration_id(migration_dir: str | os.PathLike[str]) -> str:
    """Return the zero-padded six-digit id that follows the highest one in the directory."""
    highest = 0
    for entry in Path(migration_dir).iterdir():
        match = _SEQUENCE_PREFIX.match(entry.name)
        if match is None or entry.name.startswith("-"):
            continue
        highest = max(highest, int(match.group(1)))
    return f"{highest + 1:06d}"


def create_migration(
    name: str, migration_dir: str | os.PathLike[str] = MIGRATION_DIR
) -> tuple[Path, Path]:
    """Create an empty up/down migration pair and return their paths."""
    directory = Path(migration_dir)
    directory.mkdir(parents=True, exist_ok=True)
    next_id = next_migration_id(directory)
    up_file = directory / f"{next_id}_{name}.up.sql"
    down_file = directory / f"{next_id}_{name}.down.sql"
    up_file.write_text(_UP_TEMPLATE, encoding="utf-8")
    down_file.write_text(_DOWN_TEMPLATE, encoding="utf-8")
    print(f"Migration files created:\n- {up_file}\n- {down_file}")
    return up_file, down_file


def _connect(db_url: str) -> sqlite3.Connection:
    for prefix in _URL_PREFIXES:
        if db_url.startswith(prefix):
            return sqlite3.connect(db_url[len(prefix):], isolation_level=None)
    if "://" in db_url:
        raise ValueError(f"unsupported database URL scheme: {db_url.split('://', 1)[0]}")
    return sqlite3.connect(db_url, isolation_level=None)


_ACTIONS: dict[str, tuple[Callable[[Migrator], int], str, str]] = {
    "up": (Migrator.up, "Failed to run migrations", "Migrations applied successfully."),
    "up1": (
        lambda m: m.steps(1),
        "Failed to apply one migration step",
        "One migration step applied successfully.",
    ),
    "down": (Migrator.down, "Failed to rollback migrations", "Migrations rolled back successfully."),
    "down1": (
        lambda m: m.steps(-1),
        "Failed to rollback one migration step",
        "One migration step rolled back successfully.",
    ),
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run a migration action named on the command line."""
    parser = argparse.ArgumentParser(description="Manage database schema migrations.")
    parser.add_argument(
        "-action", "--action", default="", help="Migration action: up, down, up1, down1, create"
    )
    parser.add_argument(
        "-name", "--name", default="", help="Migration name (required for create action)"
    )
    args = parser.parse_args(argv)

    env_file = Path(".env")
    if not env_file.is_file():
        print(f"Error loading .env file: open {env_file}: no such file or directory")
        return 1
    load_dotenv(env_file)

    db_url = os.environ.get("DB_URL", "")
    if not db_url:
        raise SystemExit("DB_URL environment variable is not set")

    if args.action == "create":
        if not args.name:
            raise SystemExit("Migration name is required for the create action")
        create_migration(args.name, MIGRATION_DIR)
        print("Migration files created successfully.")
        return 0

    try:
        conn = _connect(db_url)
    except (ValueError, sqlite3.Error) as exc:
        raise SystemExit(f"Failed to initialize migrate instance: {exc}") from exc

    with closing(conn):
        try:
            migrator = Migrator(MIGRATION_DIR, conn)
        except (OSError, sqlite3.Error) as exc:
            raise SystemExit(f"Failed to initialize migrate instance: {exc}") from exc

        if args.action not in _ACTIONS:
            raise SystemExit(
                f"Invalid action: {args.action}. Valid actions are up, down, up1, down1, create."
            )
        run, failure, success = _ACTIONS[args.action]
        try:
            run(migrator)
        except (OSError, RuntimeError, sqlite3.Error) as exc:
            raise SystemExit(f"{failure}: {exc}") from exc
        print(success)
    return 0