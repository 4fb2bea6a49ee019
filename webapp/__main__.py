"""Start the backend server: ``python -m webapp [--host HOST] [--port PORT] [--log-dir DIR]``."""

import argparse

from aiohttp import web

from shared.config import defaults
from shared.logging_utils import configure_rotating_logger, resolve_log_file
from webapp.app import create_app


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trinity backend API server.")
    parser.add_argument("--host", default=defaults["host"], help=f"Interface to bind (default: {defaults['host']}).")
    parser.add_argument("--port", type=int, default=defaults["port"], help=f"Port to listen on (default: {defaults['port']}).")
    parser.add_argument("--log-dir", default=None, help="Directory for trinity.log (default: TRINITY_LOG_DIR or ./logs).")
    return parser


def main() -> None:
    args = _build_arg_parser().parse_args()
    logger, log_file = configure_rotating_logger(preferred_log_file=resolve_log_file(args.log_dir))
    logger.info("Trinity backend starting on http://%s:%s (logging to %s)", args.host, args.port, log_file)
    web.run_app(create_app(), host=args.host, port=args.port, access_log=None, print=None)


if __name__ == "__main__":
    main()
