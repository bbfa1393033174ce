"""
main.py

Entry point. Serves the tools over MCP stdio (default) or over HTTP.
"""

import argparse
import asyncio
from typing import List, Optional

import uvicorn

from blockscout_mcp import __version__
from blockscout_mcp.mcp_server.server import run_stdio
from blockscout_mcp.utils.config import get_config
from blockscout_mcp.utils.logger import get_logger
from blockscout_mcp.utils.sentry import close_sentry, init_sentry

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="blockscout-mcp",
        description="Expose the Blockscout explorer API as MCP tools.",
    )
    parser.add_argument("--transport", choices=config.VALID_TRANSPORTS,
                        default=config.MCP_TRANSPORT,
                        help="tool surface to serve (default: %(default)s)")
    parser.add_argument("--host", default=config.HTTP_HOST,
                        help="bind address for the http transport (default: %(default)s)")
    parser.add_argument("--port", type=int, default=config.HTTP_PORT,
                        help="bind port for the http transport (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parses arguments and runs the selected transport until it stops.

    Returns:
        int: Process exit code.
    """
    args = build_parser().parse_args(argv)

    try:
        get_config().validate()
    except ValueError as e:
        logger.error(str(e))
        return 2

    init_sentry()
    try:
        if args.transport == "http":
            logger.info(f"Serving HTTP on {args.host}:{args.port}")
            uvicorn.run("blockscout_mcp.api_server.app:app", host=args.host, port=args.port)
        else:
            asyncio.run(run_stdio())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        close_sentry()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
