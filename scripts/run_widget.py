"""Serve the survey as a Gradio web page.

Example:
    python -m scripts.run_widget
    python scripts/run_widget.py --pilot --banner "<b>PILOT - data not used</b>"
"""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from priors_survey.helpers.logging_helpers import add_console_sink, configure_logger
from priors_survey.widget.widget import build_widget


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the survey in the browser")
    parser.add_argument("--survey", default="btom-priors", help="Name or YAML path.")
    parser.add_argument(
        "--pilot",
        action="store_true",
        help="Run the fallback trials without claiming participant slots.",
    )
    parser.add_argument("--banner", default=None, help="HTML shown above the page.")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address.")
    parser.add_argument("--port", type=int, default=8080, help="Bind port.")
    parser.add_argument("--share", action="store_true", help="Public Gradio link.")
    parser.add_argument(
        "--source", default="widget", help="Prefix for this server's log files."
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Echo logs to the console: -v INFO, -vv DEBUG.",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Build and launch the widget; returns a process exit code."""
    try:
        app = build_widget(
            survey=args.survey,
            banner=args.banner,
            source=args.source,
            pilot=args.pilot,
        )
    except Exception:
        logger.exception(f"Could not build the widget for survey {args.survey!r}")
        return 1

    logger.info(f"Serving survey {args.survey!r} on {args.host}:{args.port}")
    try:
        app.launch(server_name=args.host, server_port=args.port, share=args.share)
    except KeyboardInterrupt:
        logger.info("Interrupted; widget stopped.")
        return 130
    except Exception:
        logger.exception("Widget server crashed")
        return 1
    finally:
        app.close()
    return 0


def main() -> None:
    args = parse_args()
    configure_logger(source=args.source)
    add_console_sink(args.verbose)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
