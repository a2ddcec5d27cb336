"""Look up which section of a Reminders list each reminder sits in."""

from .errors import ReminderSectionsError, StoreUnavailableError
from .locator import find_store, newest_readable_store
from .resolver import join_sections, resolve_sections, resolve_sections_within, resolve_store

__all__ = [
    "ReminderSectionsError",
    "StoreUnavailableError",
    "find_store",
    "join_sections",
    "newest_readable_store",
    "resolve_sections",
    "resolve_sections_within",
    "resolve_store",
]
