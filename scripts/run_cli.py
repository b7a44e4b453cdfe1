"""Take the survey in the terminal.

Example:
    python -m scripts.run_cli --pilot
    python scripts/run_cli.py --participant-id p03 -v
"""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from priors_survey.cli.runner import run_cli
from priors_survey.helpers.logging_helpers import add_console_sink, configure_logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the survey in the terminal")
    parser.add_argument("--survey", default="btom-priors", help="Name or YAML path.")
    parser.add_argument(
        "--participant-id",
        default=None,
        help="Claim this participant (e.g. p03) instead of the next free one.",
    )
    parser.add_argument(
        "--pilot",
        action="store_true",
        help="Run the fallback trials without claiming participant slots.",
    )
    parser.add_argument("--theme", default=None, help="Theme YAML file.")
    parser.add_argument("--source", default="cli", help="Prefix for log files.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Echo logs to the console: -v INFO, -vv DEBUG.",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()
    configure_logger(source=args.source)
    add_console_sink(args.verbose)

    try:
        run_cli(
            survey=args.survey,
            source=args.source,
            participant_id=args.participant_id,
            pilot=args.pilot,
            custom_theme_path=args.theme,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted; CLI stopped.")
        sys.exit(130)
    except Exception:
        logger.exception("CLI stopped with an error")
        sys.exit(1)


if __name__ == "__main__":
    main()
