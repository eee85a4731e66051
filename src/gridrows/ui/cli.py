from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

import uvicorn
from dotenv import load_dotenv

from gridrows.app import create_server_app, initialise_database, load_registry
from gridrows.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Process selected or filtered grid rows")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve registered actions over HTTP")
    serve.add_argument(
        "--actions",
        type=str,
        required=True,
        help="Action registry as 'package.module:attribute'",
    )
    serve.add_argument("--host", type=str, default=DEFAULT_HOST, help="Bind address")
    serve.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help="Bind port (default: %(default)s)",
    )
    serve.add_argument(
        "--database-uri",
        type=str,
        help="Database URI (defaults to DATABASE_URI or the data directory)",
    )

    init_db = subparsers.add_parser("init-db", help="Create or upgrade the database schema")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="Database URI (defaults to DATABASE_URI or the data directory)",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "serve" and not 0 < args.port < 65536:
        raise ValueError(f"Invalid port: {args.port}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=getattr(logging, parsed_args.log_level))
    try:
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "serve":
            registry = load_registry(parsed_args.actions)
            app = create_server_app(registry, database_uri=parsed_args.database_uri)
            uvicorn.run(app, host=parsed_args.host, port=parsed_args.port)
        elif parsed_args.command == "init-db":
            uri = initialise_database(database_uri=parsed_args.database_uri)
            log.info("Database ready at %s", uri)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
