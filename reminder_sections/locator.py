"""Locate the Reminders CoreData store on disk."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Union


logger = logging.getLogger(__name__)

DEFAULT_STORES_DIR = (
    Path.home()
    / "Library"
    / "Group Containers"
    / "group.com.apple.reminders"
    / "Container_v1"
    / "Stores"
)

STORE_PREFIX = "Data-"
STORE_SUFFIX = ".sqlite"

PathLike = Union[str, os.PathLike]


class FileSystem(Protocol):
    """The filesystem queries the locator needs."""

    def listdir(self, path: Path) -> List[str]: ...

    def modified_time(self, path: Path) -> float: ...

    def is_readable(self, path: Path) -> bool: ...


class LocalFileSystem:
    """FileSystem backed by the os module."""

    def listdir(self, path: Path) -> List[str]:
        return os.listdir(path)

    def modified_time(self, path: Path) -> float:
        return os.stat(path).st_mtime

    def is_readable(self, path: Path) -> bool:
        return os.path.isfile(path) and os.access(path, os.R_OK)


@dataclass
class StoreCandidate:
    """A store file and its modification time."""
    path: Path
    modified: float


def _newest_readable(
    directory: Path, names: Iterable[str], filesystem: FileSystem
) -> Optional[StoreCandidate]:
    """Pick the most recently modified readable file among names."""
    best: Optional[StoreCandidate] = None
    for name in names:
        path = directory / name
        try:
            if not filesystem.is_readable(path):
                continue
            modified = filesystem.modified_time(path)
        except (OSError, ValueError):
            continue
        if best is None or modified >= best.modified:
            best = StoreCandidate(path=path, modified=modified)
    return best


def newest_readable_store(
    directory: PathLike, filesystem: Optional[FileSystem] = None
) -> Optional[Path]:
    """
    Find the best store file in a directory.

    Data-*.sqlite files are preferred over any other *.sqlite file, whatever
    their timestamps. Within each group the newest readable file wins.

    Args:
        directory: Directory to search
        filesystem: Filesystem to query, the local one by default

    Returns:
        Path of the selected store, or None if nothing qualifies
    """
    filesystem = filesystem or LocalFileSystem()
    directory = Path(directory)

    try:
        names = list(filesystem.listdir(directory))
    except (OSError, ValueError) as e:
        # ValueError: embedded NUL in the path
        logger.debug("Cannot list %s: %s", directory, e)
        return None

    stores = [name for name in names if name.endswith(STORE_SUFFIX)]
    primary = [name for name in stores if name.startswith(STORE_PREFIX)]

    selected = _newest_readable(directory, primary, filesystem)
    if selected is None:
        selected = _newest_readable(directory, stores, filesystem)
    if selected is None:
        logger.debug("No readable store in %s", directory)
        return None

    logger.debug("Selected store %s", selected.path)
    return selected.path


def find_store(stores_dir: Optional[PathLike] = None) -> Optional[Path]:
    """Find the store in the given directory, or in the Reminders container."""
    return newest_readable_store(stores_dir or DEFAULT_STORES_DIR)
