from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from .migrations import ensure_schema

MEMORY_PATH = ":memory:"


def get_db_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the database file: explicit path, ``BAILDESK_DB_PATH``, then ``data/baildesk.db``."""
    if path:
        return Path(path).expanduser()
    env_path = os.getenv("BAILDESK_DB_PATH")
    if env_path:
        return Path(env_path).expanduser()
    project_root = Path(__file__).resolve().parent.parent.parent
    return project_root / "data" / "baildesk.db"


def _apply_pragmas(conn: sqlite3.Connection, in_memory: bool) -> None:
    conn.execute("PRAGMA foreign_keys=ON;")
    if in_memory:
        return
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=10000;")


class Database:
    """Lazily opened sqlite connection with the record schema applied."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.in_memory = str(path) == MEMORY_PATH
        self.path = Path(MEMORY_PATH) if self.in_memory else get_db_path(path)
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            if self.in_memory:
                conn = sqlite3.connect(MEMORY_PATH, check_same_thread=False)
            else:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(str(self.path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            _apply_pragmas(conn, self.in_memory)
            ensure_schema(conn)
            self._conn = conn
        return self._conn

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        conn = self.connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
