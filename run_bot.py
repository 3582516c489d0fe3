"""
Coachbot

Telegram bot for an ESPN fantasy football league: scheduled score, standings,
trophy and injury reports plus on-demand chat commands.

Usage:
    python run_bot.py                      # run the bot until Ctrl-C
    python run_bot.py --report standings   # print one report and exit
"""

import argparse
import logging
import sys
from pathlib import Path

from coachbot.app import build_service, run
from coachbot.config import get_config, load_credentials
from coachbot.errors import CoachbotError
from coachbot.logging_config import setup_logging
from coachbot.schemas import REPORT_KINDS


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Coachbot fantasy football Telegram bot")
    parser.add_argument(
        "--report", "-r",
        choices=REPORT_KINDS,
        help="Print one report to stdout and exit (no scheduler, no Telegram)"
    )
    parser.add_argument(
        "--log-level", "-l",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Also write logs to a timestamped file in this directory"
    )
    args = parser.parse_args(argv)

    logger = setup_logging(
        log_dir=args.log_dir,
        level=getattr(logging, args.log_level),
        log_to_file=args.log_dir is not None,
        # Keep stdout clean for the report itself
        log_to_console=args.report is None,
    )

    try:
        credentials = load_credentials()
        config = get_config()
    except (CoachbotError, FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.report:
        try:
            print(build_service(credentials, config).report(args.report))
        except CoachbotError as e:
            print(e, file=sys.stderr)
            return 1
        return 0

    logger.info(f"Starting Coachbot for league {credentials.league_id} ({credentials.year})")
    run(credentials, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
