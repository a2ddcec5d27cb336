"""Configuration parser for the section resolver."""

import logging
import math
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .locator import DEFAULT_STORES_DIR


logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT = 1.5  # seconds


@dataclass
class StoreConfig:
    """Where to look for the Reminders store and how long to wait on locks."""
    stores_dir: Path = field(default_factory=lambda: DEFAULT_STORES_DIR)
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT

    def __post_init__(self):
        if isinstance(self.stores_dir, str):
            self.stores_dir = Path(self.stores_dir)

    @classmethod
    def from_dict(cls, settings: dict) -> "StoreConfig":
        """Create a StoreConfig from a dictionary."""
        stores_dir = settings.get("stores_dir")
        if stores_dir is None:
            stores_dir = DEFAULT_STORES_DIR
        elif not isinstance(stores_dir, str) or not stores_dir.strip():
            raise ValueError("'stores_dir' must be a non-empty string")
        elif "\0" in stores_dir:
            raise ValueError("'stores_dir' must not contain a NUL character")
        else:
            stores_dir = Path(stores_dir).expanduser()

        busy_timeout = settings.get("busy_timeout", DEFAULT_BUSY_TIMEOUT)
        if isinstance(busy_timeout, bool) or not isinstance(busy_timeout, (int, float)):
            raise ValueError(f"'busy_timeout' must be a number, got {busy_timeout!r}")
        if not math.isfinite(busy_timeout) or busy_timeout <= 0:
            raise ValueError(f"'busy_timeout' must be a positive finite number, got {busy_timeout}")

        return cls(stores_dir=stores_dir, busy_timeout=float(busy_timeout))


def parse_config_data(config_data: dict) -> StoreConfig:
    """
    Parse configuration data into a StoreConfig.

    Args:
        config_data: Raw parsed TOML data

    Returns:
        StoreConfig built from the [store] table, or defaults when it is absent
    """
    settings = config_data.get("store")
    if settings is None:
        return StoreConfig()
    if not isinstance(settings, dict):
        raise ValueError("[store] must be a table")
    return StoreConfig.from_dict(settings)


def load_config_file(config_file: Path) -> dict:
    """Load and parse a TOML configuration file."""
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_file}\n"
            f"Please create a config file at {config_file}"
        )

    with open(config_file, "rb") as f:
        return tomllib.load(f)


class ConfigManager:
    """Manages loading and parsing of the resolver configuration."""

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "reminder-sections"
    CONFIG_FILE = "config.toml"

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else self.DEFAULT_CONFIG_DIR
        self.config_file = self.config_dir / self.CONFIG_FILE
        self.store: StoreConfig = StoreConfig()

    def ensure_config_dir(self) -> None:
        """Create the config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_config(self) -> StoreConfig:
        """Load and parse the configuration file."""
        config_data = load_config_file(self.config_file)
        self.store = parse_config_data(config_data)
        return self.store

    def load_or_default(self) -> StoreConfig:
        """Load the configuration file, falling back to defaults on any problem."""
        try:
            return self.load_config()
        except FileNotFoundError:
            logger.debug("No config at %s, using defaults", self.config_file)
        except (OSError, ValueError) as e:
            # TOMLDecodeError is a ValueError
            logger.debug("Ignoring unusable config %s: %s", self.config_file, e)
        self.store = StoreConfig()
        return self.store

    def create_example_config(self) -> None:
        """Create an example configuration file."""
        self.ensure_config_dir()

        example_config = '''# Reminder sections configuration

[store]
# Directory holding the Reminders CoreData stores (Data-*.sqlite)
stores_dir = "~/Library/Group Containers/group.com.apple.reminders/Container_v1/Stores"
busy_timeout = 1.5  # Seconds to wait while Reminders holds a write lock
'''

        with open(self.config_file, "w") as f:
            f.write(example_config)

        print(f"Created example config at: {self.config_file}")
