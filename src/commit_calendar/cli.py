from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
from pathlib import Path

from .aggregate import aggregate_store
from .config import exclude_dirnames_from, infer_email, load_config, store_path_from
from .errors import StoreIOError
from .git import discover_git_roots
from .log import get_logger
from .render import print_tally
from .store import RepoStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commit-calendar",
        description="Show a colour-coded calendar of git commits over the last 180 days.",
    )
    parser.add_argument("--add", type=Path, default=None, help="Scan a folder for git repos, remember them, and exit.")
    who = parser.add_mutually_exclusive_group()
    who.add_argument("--email", type=str, default=None, help="Only count commits authored by this email.")
    who.add_argument("--me", action="store_true", help="Only count commits by your global git user.email.")
    parser.add_argument("--store", type=Path, default=None, help="Repo list file (default: repos.txt in the working directory).")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeat for debug).")
    return parser


def _add_folder(folder: Path, store: RepoStore, exclude_dirnames: set[str], log: logging.Logger) -> int:
    folder = folder.resolve()
    scan = discover_git_roots(folder, exclude_dirnames, logger=log)
    if len(scan.skipped) == 1 and scan.skipped[0].path == str(folder):
        log.warning("Could not read %s: %s", folder, scan.skipped[0].reason)
    if not scan.roots:
        log.warning("No git repositories found under %s", folder)
        return 0
    try:
        added = store.add(scan.roots)
    except StoreIOError as e:
        log.error("Failed to store git repos: %s", e)
        return 1
    log.info("Found %d repos, %d new, stored in %s", len(scan.roots), len(added), store.path)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)
    log = get_logger(args.verbose)

    try:
        config = load_config(args.config)
    except ValueError as e:
        log.error("Invalid config %s: %s", args.config, e)
        return 1
    store = RepoStore(store_path_from(config, args.store))

    if args.add is not None:
        return _add_folder(args.add, store, exclude_dirnames_from(config), log)

    email = args.email if args.email is not None else str(config.get("email") or "")
    if args.me:
        email = infer_email()
        if not email:
            log.warning("No global git user.email configured; showing all commits.")

    today = dt.date.today()
    try:
        tally = aggregate_store(store, email or None, today=today, logger=log)
    except StoreIOError as e:
        log.error("Failed to read repo list: %s", e)
        return 1
    print_tally(tally, today=today)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
