"""
slurmtop - live terminal view of your Slurm jobs

Shows one user's jobs with their GPU allocations and requests, and for
pending jobs how many queued jobs in the whole cluster are ahead of them.

Views (keys 1-4):
- Overview: job counts, GPUs in use and GPUs requested per GPU type
- Running: running jobs with runtime and allocated GPUs
- Pending: pending jobs by priority, with the number of higher-priority
  jobs queued cluster-wide ("Higher")
- All: every job of the user

Left/Right focuses a column so it can show its full text; the other columns
give up space for it.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .app import run_app
from .config import VIEW_NAMES, Config
from .slurm_client import SlurmClient
from .state import View


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    p = argparse.ArgumentParser(description="Live terminal view of a user's Slurm jobs")
    p.add_argument("username", nargs="?", default=None, help="User whose jobs are shown (default: $USER)")
    p.add_argument("--refresh", type=float, default=None, help="Auto-refresh interval in seconds (0 = manual)")
    p.add_argument("--view", choices=VIEW_NAMES, default=None, help="View shown at startup")
    p.add_argument(
        "--mock",
        action="store_true",
        help="Use mock data (for development/testing without Slurm)",
    )
    p.add_argument("--log-file", type=str, default=None, help="Write logs to this file")
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level for --log-file",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Store the given username, --refresh and --view as the new defaults",
    )
    return p.parse_args(argv)


def resolve_username(arg: Optional[str], config: Config) -> str:
    """Username from the command line, else the config file, else the environment."""
    return arg or config.username or os.getenv("USER") or os.getenv("USERNAME") or "unknown"


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for slurmtop."""
    args = parse_args(argv)

    # The terminal belongs to the UI, so logs only ever go to a file
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, args.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    config = Config.load()
    username = resolve_username(args.username, config)
    refresh_sec = args.refresh if args.refresh is not None else config.refresh_sec
    view = View(args.view or config.default_view)

    if args.save_config:
        Config(
            refresh_sec=refresh_sec,
            username=args.username or config.username,
            default_view=view.value,
            theme=config.theme,
        ).save()

    try:
        client = SlurmClient(mock_mode=args.mock)
    except RuntimeError as e:
        print(f"slurmtop: {e}", file=sys.stderr)
        sys.exit(1)

    run_app(username, client, refresh_sec=refresh_sec, view=view, dark=config.theme != "light")


if __name__ == "__main__":
    main()
