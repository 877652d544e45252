"""Command-line entry point for the jsondb.cloud MCP server.

Usage:
    jsondb-mcp                         # stdio, for MCP clients that spawn the server
    jsondb-mcp --transport http        # stateless HTTP on 127.0.0.1:3100
    python -m jsondb_mcp --port 8080 --transport http

Everything else comes from the environment (or a ./.env file):
JSONDB_API_KEY (required), JSONDB_PROJECT, JSONDB_BASE_URL,
JSONDB_MCP_TRANSPORT, JSONDB_MCP_HOST, JSONDB_MCP_PORT, JSONDB_TIMEOUT,
JSONDB_MCP_LOG_LEVEL.
"""

import argparse
import dataclasses
import logging
import sys

from jsondb_mcp import __version__
from jsondb_mcp.config import TRANSPORT_HTTP, TRANSPORT_STDIO, ConfigError, load_config
from jsondb_mcp.http_app import run_http
from jsondb_mcp.server import run_stdio


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsondb-mcp", description="jsondb.cloud MCP server for AI agents"
    )
    parser.add_argument(
        "--transport",
        choices=[TRANSPORT_STDIO, TRANSPORT_HTTP],
        help="Override JSONDB_MCP_TRANSPORT",
    )
    parser.add_argument("--host", type=str, help="Override JSONDB_MCP_HOST (http only)")
    parser.add_argument("--port", type=int, help="Override JSONDB_MCP_PORT (http only)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None, environ=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(environ)
    except ConfigError as err:
        print(f"Error: {err}", file=sys.stderr)
        sys.exit(1)

    overrides = {
        key: value
        for key, value in (("transport", args.transport), ("host", args.host), ("port", args.port))
        if value is not None
    }
    if overrides:
        config = dataclasses.replace(config, **overrides)

    # stdout is the protocol channel in stdio mode
    logging.basicConfig(
        stream=sys.stderr,
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if config.transport == TRANSPORT_HTTP:
            run_http(config)
        else:
            run_stdio(config)
    except KeyboardInterrupt:
        pass
    except Exception as err:
        print(f"Fatal error starting MCP server: {err}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
