"""
Top-Up Module Entry Point

Allows execution via: python -m apps.topup [options]

Exit code 0 on success, 1 when any source or the output could not be handled.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from apps.topup.pipeline import RunConfig, process
from utils.config import get_settings
from utils.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="python -m apps.topup",
        description="Generate the token top-up report from users and companies JSON files.",
    )
    parser.add_argument(
        "-u", "--users", default=settings.USERS_FILE,
        help=f"Path to users JSON file (default: {settings.USERS_FILE})",
    )
    parser.add_argument(
        "-c", "--companies", default=settings.COMPANIES_FILE,
        help=f"Path to companies JSON file (default: {settings.COMPANIES_FILE})",
    )
    parser.add_argument(
        "-o", "--output", default=settings.OUTPUT_FILE,
        help=f"Path to output file (default: {settings.OUTPUT_FILE})",
    )
    parser.add_argument(
        "--rejects", default=settings.REJECTS_FILE,
        help="Optional path for a JSON Lines file of dropped records",
    )
    parser.add_argument(
        "--log-level", default=settings.LOG_LEVEL,
        help=f"Diagnostic log level (default: {settings.LOG_LEVEL})",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run once with command-line options and return the process exit code."""
    args = parse_args(argv)
    setup_logging(level=args.log_level, format_type=get_settings().LOG_FORMAT)

    config = RunConfig(
        users_file=args.users,
        companies_file=args.companies,
        output_file=args.output,
        rejects_file=args.rejects,
    )

    try:
        outcome = process(config)
    except Exception as e:
        logger.error("Unexpected error during processing: %s", e, exc_info=True)
        return 1

    if not outcome.success:
        return 1

    print(f"Processing complete! Output written to {config.output_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
