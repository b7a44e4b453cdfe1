"""Serve the survey API with uvicorn.

Example:
    python -m scripts.run_api --port 8000
    python scripts/run_api.py --reload -vv
"""

from __future__ import annotations

import argparse
import sys

import uvicorn
from loguru import logger

from priors_survey.helpers.logging_helpers import (
    add_console_sink,
    configure_logger,
    intercept_stdlib_logging,
)

APP_PATH = "priors_survey.api.main:app"


def _port(value: str) -> int:
    """argparse type for a TCP port in 1..65535."""
    try:
        port = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid port {value!r}") from e
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port {port} out of range 1-65535")
    return port


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the survey session API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    parser.add_argument("--port", type=_port, default=8000, help="Bind port.")
    parser.add_argument(
        "--reload", action="store_true", help="Restart on code changes (dev only)."
    )
    parser.add_argument(
        "--source", default="api", help="Prefix for this server's log files."
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
    """Run uvicorn until it stops; returns a process exit code.

    Sessions live in this process's memory, so the server always runs a
    single worker.
    """
    logger.info(f"Starting API on {args.host}:{args.port} (reload={args.reload})")
    config = uvicorn.Config(
        APP_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    try:
        uvicorn.Server(config).run()
    except KeyboardInterrupt:
        logger.info("Interrupted; API stopped.")
        return 130
    except Exception:
        logger.exception("API server crashed")
        return 1
    return 0


def main() -> None:
    args = parse_args()
    configure_logger(source=args.source)
    add_console_sink(args.verbose)
    intercept_stdlib_logging()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
