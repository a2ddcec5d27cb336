"""Read-only SQLite sessions on the Reminders store."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Union

from .errors import StoreUnavailableError


logger = logging.getLogger(__name__)


def _readonly_uri(path: Union[str, Path]) -> str:
    # as_uri() percent-encodes the spaces in "Group Containers"
    return Path(path).resolve().as_uri() + "?mode=ro"


@contextmanager
def open_store(path: Union[str, Path], busy_timeout: float = 1.5) -> Iterator[sqlite3.Connection]:
    """
    Open a store read-only and close it when the block exits.

    The Reminders app may be writing to the store at the same time. SQLite
    waits up to busy_timeout seconds for its locks before giving up.

    Raises:
        StoreUnavailableError: The file is missing, unreadable, corrupt or
            stayed locked for longer than busy_timeout.
    """
    try:
        conn = sqlite3.connect(
            _readonly_uri(path),
            uri=True,
            timeout=busy_timeout,
            check_same_thread=False,
        )
    except (sqlite3.Error, OSError, ValueError) as e:
        raise StoreUnavailableError(path, str(e)) from e

    try:
        try:
            # connect() is lazy, so touch the schema to surface a bad file here
            conn.execute("PRAGMA schema_version").fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailableError(path, str(e)) from e
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def has_columns(conn: sqlite3.Connection, table: str, columns: Iterable[str]) -> bool:
    """Check that a table exists and carries all of the given columns."""
    try:
        rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    except sqlite3.Error as e:
        logger.debug("table_info(%s) failed: %s", table, e)
        return False
    present = {str(row[1]) for row in rows}
    missing = set(columns) - present
    if missing:
        logger.debug("%s is missing columns %s", table, sorted(missing))
        return False
    return True
