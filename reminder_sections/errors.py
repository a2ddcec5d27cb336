"""Exceptions raised inside the resolver pipeline."""

from pathlib import Path
from typing import Union


class ReminderSectionsError(Exception):
    """Base class for resolver errors."""


class StoreUnavailableError(ReminderSectionsError):
    """The store could not be opened for reading."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Cannot open store {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
