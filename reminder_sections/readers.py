"""Reads from the Reminders CoreData tables.

Every reader returns an empty mapping when its query fails, so one broken
table never takes the others down with it.
"""

import logging
import sqlite3
from typing import Any, Dict, Optional

from .memberships import Malformed, decode_membership_payload, merge_memberships
from .session import has_columns


logger = logging.getLogger(__name__)

SECTION_TABLE = "ZREMCDBASESECTION"
REMINDER_TABLE = "ZREMCDREMINDER"
LIST_TABLE = "ZREMCDBASELIST"

CK_COLUMN = "ZCKIDENTIFIER"
DISPLAY_NAME_COLUMN = "ZDISPLAYNAME"
EXTERNAL_ID_COLUMN = "ZDACALENDARITEMUNIQUEIDENTIFIER"
MEMBERSHIPS_COLUMN = "ZMEMBERSHIPSOFREMINDERSINSECTIONSASDATA"


def _text(value: Any) -> Optional[str]:
    """Column value as text, like sqlite3_column_text would give it."""
    if value is None:
        return None
    if isinstance(value, (bytes, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _read_pairs(
    conn: sqlite3.Connection,
    table: str,
    sql: str,
    key: str,
    value: str,
    require_value: bool = False,
) -> Dict[str, str]:
    """Read a two-column query into a dict, skipping rows without a usable key or value."""
    if not has_columns(conn, table, (key, value)):
        return {}

    mapping: Dict[str, str] = {}
    try:
        for row in conn.execute(sql):
            k = _text(row[key])
            v = _text(row[value])
            if not k or v is None or (require_value and not v):
                continue
            mapping[k] = v
    except sqlite3.Error as e:
        logger.debug("Reading %s failed: %s", table, e)
        return {}
    return mapping


def read_sections(conn: sqlite3.Connection) -> Dict[str, str]:
    """Section CK identifier -> display name."""
    return _read_pairs(
        conn,
        SECTION_TABLE,
        f"SELECT {CK_COLUMN}, {DISPLAY_NAME_COLUMN} FROM {SECTION_TABLE}",
        CK_COLUMN,
        DISPLAY_NAME_COLUMN,
    )


def read_reminder_identifiers(conn: sqlite3.Connection) -> Dict[str, str]:
    """Reminder CK identifier -> EventKit calendar item identifier."""
    return _read_pairs(
        conn,
        REMINDER_TABLE,
        f"SELECT {CK_COLUMN}, {EXTERNAL_ID_COLUMN} FROM {REMINDER_TABLE} "
        f"WHERE {EXTERNAL_ID_COLUMN} IS NOT NULL",
        CK_COLUMN,
        EXTERNAL_ID_COLUMN,
        require_value=True,
    )


def read_memberships(conn: sqlite3.Connection) -> Dict[str, str]:
    """Reminder CK identifier -> section CK identifier, from the list payloads."""
    if not has_columns(conn, LIST_TABLE, (MEMBERSHIPS_COLUMN,)):
        return {}

    sql = (
        f"SELECT {MEMBERSHIPS_COLUMN} FROM {LIST_TABLE} "
        f"WHERE {MEMBERSHIPS_COLUMN} IS NOT NULL"
    )
    results = []
    try:
        for row in conn.execute(sql):
            result = decode_membership_payload(row[MEMBERSHIPS_COLUMN])
            if isinstance(result, Malformed):
                logger.debug("Skipping membership payload: %s", result.reason)
            results.append(result)
    except sqlite3.Error as e:
        logger.debug("Reading %s failed: %s", LIST_TABLE, e)
        return {}
    return merge_memberships(results)
