from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .console import Console, format_high_scores
from .core.rng import RNG
from .errors import ConfigError
from .ledger import HighScoreLedger
from .logging_config import configure_logging
from .settings import DIFFICULTIES, Settings

logger = logging.getLogger(__name__)


def _verbosity_level(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return logging.WARNING


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memoy",
        description="MEMOY - a terminal memory-matching game",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file to load/override defaults.",
    )
    parser.add_argument("--ledger", type=Path, default=None, help="High-score file to use")
    parser.add_argument("--seed", type=int, default=None, help="Fixed board seed (for replays and testing)")
    level = parser.add_mutually_exclusive_group()
    level.add_argument("--easy", action="store_true", help=f"Play one {DIFFICULTIES['easy']}x{DIFFICULTIES['easy']} game, skipping the menu")
    level.add_argument("--hard", action="store_true", help=f"Play one {DIFFICULTIES['hard']}x{DIFFICULTIES['hard']} game, skipping the menu")
    parser.add_argument("--timed", action="store_true", help="Play one timed game, skipping the menu")
    parser.add_argument("--time-limit", type=int, default=None, help="Time limit in seconds for timed games")
    parser.add_argument("--scores", action="store_true", help="Print the high-score table and exit")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colours and screen clearing")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(_verbosity_level(args.verbose))

    try:
        settings = Settings.load(user_path=args.settings_path)
        if args.ledger is not None:
            settings.ledger.path = args.ledger
        if args.time_limit is not None:
            settings.game.time_limit_seconds = args.time_limit
        if args.no_color:
            settings.display.color = False
        settings.validate()
    except ConfigError as e:
        print(f"memoy: {e}", file=sys.stderr)
        return 2

    ledger = HighScoreLedger.load(settings.ledger.resolved_path(), capacity=settings.ledger.capacity)

    if args.scores:
        for line in format_high_scores(ledger.to_display_rows()):
            print(line)
        return 0

    console = Console(settings, ledger, rng_factory=lambda: RNG(args.seed))
    try:
        if args.easy or args.hard or args.timed:
            grid_size = DIFFICULTIES["easy"] if args.easy else DIFFICULTIES["hard"]
            console.play(grid_size, timed=args.timed)
        else:
            console.run_menu()
    except (KeyboardInterrupt, EOFError):
        print()
        logger.info("Interrupted; exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
