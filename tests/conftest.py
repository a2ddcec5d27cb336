"""Shared fixtures: small Reminders-shaped SQLite stores."""

import json
import sqlite3
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

import pytest


SCHEMA = """
CREATE TABLE ZREMCDBASESECTION (
    Z_PK INTEGER PRIMARY KEY,
    ZCKIDENTIFIER VARCHAR,
    ZDISPLAYNAME VARCHAR
);
CREATE TABLE ZREMCDREMINDER (
    Z_PK INTEGER PRIMARY KEY,
    ZCKIDENTIFIER VARCHAR,
    ZDACALENDARITEMUNIQUEIDENTIFIER VARCHAR
);
CREATE TABLE ZREMCDBASELIST (
    Z_PK INTEGER PRIMARY KEY,
    ZMEMBERSHIPSOFREMINDERSINSECTIONSASDATA BLOB
);
"""


def membership_payload(*pairs: Tuple[str, str]) -> bytes:
    """Encode (memberID, groupID) pairs the way the Reminders app stores them."""
    return json.dumps(
        {"memberships": [{"memberID": m, "groupID": g} for m, g in pairs]}
    ).encode("utf-8")


def build_store(
    path: Path,
    sections: Iterable[Tuple[Optional[str], Optional[str]]] = (),
    reminders: Iterable[Tuple[Optional[str], Optional[str]]] = (),
    payloads: Iterable[Optional[Union[bytes, str]]] = (),
    schema: str = SCHEMA,
) -> Path:
    """Create a store file with the given rows."""
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.executemany(
            "INSERT INTO ZREMCDBASESECTION (ZCKIDENTIFIER, ZDISPLAYNAME) VALUES (?, ?)",
            list(sections),
        )
        conn.executemany(
            "INSERT INTO ZREMCDREMINDER (ZCKIDENTIFIER, ZDACALENDARITEMUNIQUEIDENTIFIER) VALUES (?, ?)",
            list(reminders),
        )
        conn.executemany(
            "INSERT INTO ZREMCDBASELIST (ZMEMBERSHIPSOFREMINDERSINSECTIONSASDATA) VALUES (?)",
            [(p,) for p in payloads],
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def groceries_store(tmp_path):
    """A store where R1 sits in the Groceries section."""
    return build_store(
        tmp_path / "Data-groceries.sqlite",
        sections=[("S1", "Groceries")],
        reminders=[("R1", "ek-abc")],
        payloads=[membership_payload(("R1", "S1"))],
    )
