"""Internal database connection management."""

import logging
import sqlite3
from pathlib import Path

from rfmsearch.exceptions import DatabaseInvalid, DatabaseNotFound

logger = logging.getLogger(__name__)


def _casefold(value):
    # SQLite's NOCASE only folds ASCII; city names include æ, ø and å
    return value.casefold() if isinstance(value, str) else value


class _DatabasePool:
    """
    Manages a read-only SQLite connection with reuse.

    The postal-code table and the expert snapshot are only ever read,
    so one connection is held open across searches.
    """

    def __init__(self, path: Path, name: str):
        self._path = path
        self._name = name
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> Path:
        return self._path

    def get_connection(self) -> sqlite3.Connection:
        """Return an open read-only connection, creating one if needed."""
        if self._conn is None:
            self._open()
        return self._conn

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """
        Execute a query, translating a vanished database file into
        DatabaseNotFound.
        """
        conn = self.get_connection()
        try:
            return conn.execute(sql, params)
        except sqlite3.OperationalError:
            if not self._path.is_file():
                logger.warning("%s database disappeared: %s", self._name, self._path)
                self.close()
                raise DatabaseNotFound(str(self._path), self._name)
            raise

    def _open(self) -> None:
        if not self._path.is_file():
            raise DatabaseNotFound(str(self._path), self._name)
        logger.debug("Opening %s database at %s", self._name, self._path)
        self._conn = sqlite3.connect(f"file:{self._path}?mode=ro", uri=True)
        self._conn.execute("PRAGMA query_only = ON")
        self._conn.create_function("casefold", 1, _casefold, deterministic=True)

    def validate_tables(self, expected: list[str]) -> None:
        """Raise DatabaseInvalid if any of *expected* tables is missing."""
        cur = self.execute("SELECT name FROM sqlite_master WHERE type='table'")
        actual = {row[0] for row in cur}
        missing = set(expected) - actual
        if missing:
            raise DatabaseInvalid(
                str(self._path),
                f"missing tables: {', '.join(sorted(missing))}",
            )

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
