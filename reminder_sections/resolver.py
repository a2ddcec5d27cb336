"""Resolve EventKit reminder identifiers to their section names."""

import logging
import threading
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from .config import DEFAULT_BUSY_TIMEOUT, ConfigManager, StoreConfig
from .errors import StoreUnavailableError
from .locator import find_store
from .readers import read_memberships, read_reminder_identifiers, read_sections
from .session import open_store


logger = logging.getLogger(__name__)


def join_sections(
    sections: Mapping[str, str],
    reminders: Mapping[str, str],
    memberships: Mapping[str, str],
) -> Dict[str, str]:
    """
    Join the three reads into external identifier -> section name.

    Args:
        sections: Section CK -> display name
        reminders: Reminder CK -> external identifier
        memberships: Reminder CK -> section CK

    Returns:
        External identifier -> section display name. Memberships whose
        reminder or section is unknown are dropped.
    """
    result: Dict[str, str] = {}
    for reminder_ck, section_ck in memberships.items():
        name = sections.get(section_ck)
        external_id = reminders.get(reminder_ck)
        if name is None or not external_id:
            continue
        result[external_id] = name
    return result


def resolve_store(
    path: Union[str, Path], busy_timeout: float = DEFAULT_BUSY_TIMEOUT
) -> Dict[str, str]:
    """Resolve sections from one store file. Returns {} if it cannot be read."""
    try:
        with open_store(path, busy_timeout=busy_timeout) as conn:
            sections = read_sections(conn)
            if not sections:
                return {}
            reminders = read_reminder_identifiers(conn)
            memberships = read_memberships(conn)
    except StoreUnavailableError as e:
        logger.debug("%s", e)
        return {}

    result = join_sections(sections, reminders, memberships)
    logger.debug(
        "Resolved %d of %d memberships (%d sections, %d reminders)",
        len(result), len(memberships), len(sections), len(reminders),
    )
    return result


def resolve_sections(config: Optional[StoreConfig] = None) -> Dict[str, str]:
    """
    Build the EventKit identifier -> section name mapping.

    Never raises for a missing, locked or unexpected store; the result is
    simply empty (or partial) in that case.
    """
    if config is None:
        config = ConfigManager().load_or_default()

    path = find_store(config.stores_dir)
    if path is None:
        return {}
    return resolve_store(path, busy_timeout=config.busy_timeout)


def resolve_sections_within(timeout: float, config: Optional[StoreConfig] = None) -> Dict[str, str]:
    """
    Like resolve_sections, but give up after timeout seconds.

    The worker thread is not interrupted; it finishes in the background and
    its result is discarded.
    """
    outcome: Dict[str, Dict[str, str]] = {}

    def _run():
        outcome["result"] = resolve_sections(config)

    worker = threading.Thread(target=_run, name="resolve-sections", daemon=True)
    worker.start()
    worker.join(timeout=timeout)
    if worker.is_alive():
        logger.debug("Section resolution still running after %.1fs, giving up", timeout)
        return {}
    return outcome.get("result", {})
