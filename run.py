"""CLI entrypoint."""
from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv as _load_dotenv

from lunchpicker import config
from lunchpicker.errors import LunchPickerError
from lunchpicker.http import RequestMetrics
from lunchpicker.pipeline import render_summary, run
from lunchpicker.reporting import render_results


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    _load_dotenv(dotenv_path=env_path, override=False)


def _split_names(raw: str) -> List[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


def _config_path(argv: Optional[List[str]] = None) -> Optional[str]:
    """Read only --config so the file can be loaded before the full parser is built."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", type=str, default=None)
    known, _ = pre.parse_known_args(argv)
    return known.config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pick random open restaurants nearby, ranked by rating")
    parser.add_argument("--config", type=str, default=None, help="Path to lunch_config.json")
    parser.add_argument("--origin", type=str, default=None, help="Address to search around")
    parser.add_argument(
        "--walk-origin",
        type=str,
        default=None,
        help="Address walking distances are measured from (default: --origin)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help=f"Number of restaurants ({config.MIN_COUNT}-{config.MAX_COUNT}, default: {config.DEFAULT_COUNT})",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--blacklist", type=str, default=None, help="Comma-separated names to exclude")
    group.add_argument("--blacklist-file", type=str, default=None, help="File with one excluded name per line")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sampling")
    parser.add_argument("--out", type=str, default=None, help="Write results.json/results.csv to this directory")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    try:
        config.load_lunch_config(_config_path(argv))
    except LunchPickerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    api_key = (os.environ.get(config.API_KEY_ENV) or "").strip()
    if not api_key:
        print(f"Missing {config.API_KEY_ENV} in environment", file=sys.stderr)
        return 1

    origin = args.origin or config.SEARCH_ORIGIN
    if not origin:
        print("Missing search origin: pass --origin or set search_origin in the config", file=sys.stderr)
        return 1

    blacklist: Optional[List[str]] = None
    blacklist_path: Optional[str] = None
    if args.blacklist is not None:
        blacklist = _split_names(args.blacklist)
    elif args.blacklist_file is not None:
        blacklist_path = args.blacklist_file
    elif config.BLACKLIST_PATH and config.BLACKLIST_NAMES is not None:
        print("Config sets both blacklist and blacklist_path; keep only one", file=sys.stderr)
        return 1
    elif config.BLACKLIST_PATH:
        blacklist_path = config.BLACKLIST_PATH
    elif config.BLACKLIST_NAMES is not None:
        blacklist = list(config.BLACKLIST_NAMES)
    else:
        print("Missing blacklist: pass --blacklist or --blacklist-file", file=sys.stderr)
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    metrics = RequestMetrics()
    try:
        result = run(
            api_key=api_key,
            search_origin=origin,
            walk_origin=args.walk_origin or config.WALK_ORIGIN,
            count=args.count,
            blacklist=blacklist,
            blacklist_path=blacklist_path,
            output_dir=args.out or config.OUTPUT_DIR,
            write_outputs=args.out is not None,
            rng=rng,
            metrics=metrics,
        )
    except LunchPickerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for line in render_summary(result.summary):
        print(line)
    if not result.records:
        print("No open restaurants matched.")
    for line in render_results(result.records):
        print(line)
    if args.out is not None:
        print(f"Done. Results written to {args.out}/results.csv and {args.out}/results.json")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
