"""Command-line interface: ``sl-registry [list|add|use]``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from .config import load_all
from .editor import add_profile
from .errors import RegistryError
from .live_config import LiveConfig
from .logging_setup import setup_logging
from .profile_store import REGISTRY_KEY, ProfileStore
from .sync import SyncEngine

logger = logging.getLogger(__name__)


def build_parser(program_name: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=program_name,
        description="Switch npm between named registry configurations",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory with stored configurations (default ~/.strong-registry)",
    )
    parser.add_argument(
        "--npmrc",
        type=Path,
        default=None,
        help="Live npm configuration file (default ~/.npmrc)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("list", help="List available configurations")

    add_cmd = commands.add_parser("add", help="Create a new configuration")
    add_cmd.add_argument("name")
    add_cmd.add_argument("url", nargs="?", default=None)
    add_cmd.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Edit the configuration if it already exists",
    )

    use_cmd = commands.add_parser("use", help="Switch npm to a configuration")
    use_cmd.add_argument("name")
    return parser


def print_list(engine: SyncEngine, program_name: str) -> None:
    profiles = engine.store.load_all()
    active = engine.resolve_active()
    print("Available configurations:")
    for name, profile in profiles.items():
        marker = "*" if name == active else " "
        print(f" {marker} {name} ({profile.get(REGISTRY_KEY, '')})")
    print()
    print(f"Run `{program_name} use <name>` to switch to a different registry")


def run_add(engine: SyncEngine, name: str, url: Optional[str], force: bool, program_name: str) -> None:
    print(f'Adding a new configuration "{name}"')
    add_profile(engine.store, engine.live, name, url, overwrite=force)
    print(f'Configuration "{name}" was created.')
    print(f'Run `{program_name} use "{name}"` to let npm use this registry.')


def run_use(engine: SyncEngine, name: str) -> None:
    result = engine.use(name)
    for warning in result.warnings:
        print(str(warning), file=sys.stderr)
    if result.backfilled and result.backfilled != result.name:
        print(f'Updating "{result.backfilled}" with config from npmrc.')
    print(f'Using the registry "{result.name}" ({result.registry}).')


def main(argv: Optional[Iterable[str]] = None) -> int:
    cfg = load_all()
    program_name = cfg.registry.program_name
    parser = build_parser(program_name)
    args_ns = parser.parse_args(list(argv) if argv is not None else None)

    setup_logging(cfg.log, verbose=args_ns.verbose)

    data_dir: Path = (args_ns.data_dir or cfg.paths.data_dir).expanduser()
    npmrc: Path = (args_ns.npmrc or cfg.paths.npmrc).expanduser()
    store = ProfileStore(data_dir)
    engine = SyncEngine(store, LiveConfig(npmrc), default_registry=cfg.registry.default_url)

    try:
        if store.ensure_initialized(cfg.registry.default_url):
            print(f"Running for the first time. Initializing {data_dir}")

        command = args_ns.command or "list"
        if command == "list":
            print_list(engine, program_name)
        elif command == "add":
            run_add(engine, args_ns.name, args_ns.url, args_ns.force, program_name)
        elif command == "use":
            run_use(engine, args_ns.name)
    except RegistryError as exc:
        logger.debug("Command %s failed", args_ns.command, exc_info=True)
        print(str(exc), file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nAborted, nothing was saved.", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
