"""
Decoding of the section membership payload stored on list rows.

Each list row carries a JSON document shaped like::

    {"memberships": [{"memberID": "<reminder CK>", "groupID": "<section CK>"}, ...]}

The format is private to the Reminders app. A payload that does not look
like this is dropped as a whole; a single bad entry only drops that entry.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

MEMBERSHIPS_KEY = "memberships"
MEMBER_KEY = "memberID"
GROUP_KEY = "groupID"


@dataclass(frozen=True)
class MembershipPair:
    """A reminder (member) placed in a section (group)."""
    member_id: str
    group_id: str


@dataclass
class Decoded:
    """A payload that had the expected shape."""
    pairs: List[MembershipPair] = field(default_factory=list)


@dataclass
class Malformed:
    """A payload that was dropped, and why."""
    reason: str


DecodeResult = Union[Decoded, Malformed]


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def decode_membership_entry(entry: Any) -> Optional[MembershipPair]:
    """Decode one element of the memberships array, or None to skip it."""
    if not isinstance(entry, dict):
        return None
    member_id = _non_empty_str(entry.get(MEMBER_KEY))
    group_id = _non_empty_str(entry.get(GROUP_KEY))
    if member_id is None or group_id is None:
        return None
    return MembershipPair(member_id=member_id, group_id=group_id)


def decode_membership_payload(data: Optional[Union[bytes, str]]) -> DecodeResult:
    """
    Decode a raw membership payload.

    Args:
        data: Column value as read from SQLite (bytes for a BLOB, str for TEXT)

    Returns:
        Decoded with the valid pairs in payload order, or Malformed
    """
    if data is None:
        return Malformed("payload is empty")
    if isinstance(data, memoryview):
        data = data.tobytes()
    if not isinstance(data, (bytes, str)):
        return Malformed(f"unexpected payload type {type(data).__name__}")
    if not data:
        return Malformed("payload is empty")

    try:
        document = json.loads(data)
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        return Malformed(f"invalid JSON: {e}")

    if not isinstance(document, dict):
        return Malformed("payload is not an object")
    entries = document.get(MEMBERSHIPS_KEY)
    if not isinstance(entries, list):
        return Malformed(f"'{MEMBERSHIPS_KEY}' is missing or not an array")

    pairs = []
    for entry in entries:
        pair = decode_membership_entry(entry)
        if pair is not None:
            pairs.append(pair)
    return Decoded(pairs)


def merge_memberships(results: Iterable[DecodeResult]) -> Dict[str, str]:
    """Fold decode results into reminder CK -> section CK, later pairs winning."""
    memberships: Dict[str, str] = {}
    for result in results:
        if isinstance(result, Malformed):
            continue
        for pair in result.pairs:
            memberships[pair.member_id] = pair.group_id
    return memberships
