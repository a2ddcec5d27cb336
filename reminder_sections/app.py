"""Command line entry point for dumping reminder sections."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .resolver import resolve_sections, resolve_sections_within, resolve_store


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reminder-sections",
        description="Print the section of every reminder that has one.",
    )
    parser.add_argument("--config-dir", type=Path, help="Directory holding config.toml")
    parser.add_argument("--stores-dir", type=Path, help="Override the directory searched for stores")
    parser.add_argument("--store", type=Path, help="Read this store file instead of searching")
    parser.add_argument("--timeout", type=float, help="Give up after this many seconds")
    parser.add_argument("--json", action="store_true", help="Print a JSON object")
    parser.add_argument("--init-config", action="store_true", help="Write an example config and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log why lookups come back empty")
    return parser


def format_sections(sections: dict, as_json: bool = False) -> str:
    """Render the mapping as tab separated lines, or as JSON."""
    if as_json:
        return json.dumps(sections, indent=2, sort_keys=True, ensure_ascii=False)
    return "\n".join(f"{external_id}\t{name}" for external_id, name in sorted(sections.items()))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.store and args.timeout is not None:
        parser.error("--timeout cannot be combined with --store")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_manager = ConfigManager(args.config_dir)
    if args.init_config:
        config_manager.create_example_config()
        return 0

    config = config_manager.load_or_default()
    if args.stores_dir:
        config.stores_dir = args.stores_dir

    if args.store:
        sections = resolve_store(args.store, busy_timeout=config.busy_timeout)
    elif args.timeout is not None:
        sections = resolve_sections_within(args.timeout, config)
    else:
        sections = resolve_sections(config)

    if not sections and not args.json:
        print("No reminder sections found.", file=sys.stderr)
        return 0

    print(format_sections(sections, as_json=args.json))
    return 0


if __name__ == "__main__":
    sys.exit(main())
