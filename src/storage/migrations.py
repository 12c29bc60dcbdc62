from __future__ import annotations

import sqlite3
from typing import Callable, Iterable, List, Tuple

from .schema import initial_schema, schema_v2


# Each entry upgrades the database from ``version - 1`` to ``version``.
MIGRATIONS: Tuple[Tuple[int, Callable[[], List[str]]], ...] = (
    (1, initial_schema),
    (2, schema_v2),
)

LATEST_VERSION = MIGRATIONS[-1][0]


def current_version(conn: sqlite3.Connection) -> int:
    conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL);")
    row = conn.execute("SELECT version FROM schema_version LIMIT 1;").fetchone()
    return int(row[0]) if row is not None else 0


def _run(conn: sqlite3.Connection, statements: Iterable[str]) -> None:
    for statement in filter(None, (s.strip() for s in statements)):
        conn.execute(statement)


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Bring the record database up to ``LATEST_VERSION``; no-op when current."""
    version = current_version(conn)
    if version > LATEST_VERSION:
        raise RuntimeError(f"Database schema version {version} is newer than this release ({LATEST_VERSION}).")

    pending = [(target, build) for target, build in MIGRATIONS if target > version]
    if not pending:
        return
    for target, build in pending:
        _run(conn, build())
        version = target
    conn.execute("DELETE FROM schema_version;")
    conn.execute("INSERT INTO schema_version (version) VALUES (?);", (version,))
    conn.commit()
