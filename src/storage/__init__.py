"""SQLite record store backing the search snapshot."""

from .db import Database, get_db_path
from .migrations import ensure_schema
from .repos import Repositories, import_snapshot

__all__ = [
    "Database",
    "get_db_path",
    "ensure_schema",
    "Repositories",
    "import_snapshot",
]
