"""MCP server assembly and the stdio transport.

``create_server`` builds one protocol instance with the whole tool catalog
and the resources bound to a jsondb.cloud client. stdio mode runs a single
instance for the life of the process; HTTP mode builds one per request
(see ``jsondb_mcp.http_app``).
"""

import logging
from typing import Any, Optional

import anyio
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from jsondb_mcp import __version__
from jsondb_mcp.client import JsonDBClient
from jsondb_mcp.config import Config
from jsondb_mcp.resources import MIME_TYPE, read_resource, resource_templates, resources
from jsondb_mcp.responses import format_error
from jsondb_mcp.tools import registered_tools

logger = logging.getLogger("jsondb_mcp.server")

SERVER_NAME = "jsondb-cloud"

INSTRUCTIONS = (
    "Tools for a jsondb.cloud project: document CRUD, filtered search, bulk "
    "import/export, JSON Schema management, version history, webhooks and "
    "semantic search. Every failure carries an error code and a suggestion "
    "describing how to recover."
)


def create_server(config: Config, client: Optional[JsonDBClient] = None) -> Server:
    """Build a protocol instance with every tool and resource registered."""
    db = client if client is not None else JsonDBClient(config)
    server = Server(SERVER_NAME, version=__version__, instructions=INSTRUCTIONS)
    catalog = {spec.name: spec for spec in registered_tools()}

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [spec.definition() for spec in catalog.values()]

    # Arguments are validated by each tool's pydantic model so failures come
    # back as INVALID_ARGUMENTS results instead of protocol errors.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        spec = catalog.get(name)
        if spec is None:
            logger.warning("Unknown tool requested: %s", name)
            return format_error(
                "UNKNOWN_TOOL",
                f"Unknown tool '{name}'.",
                "Use tools/list to see the available jsondb.cloud tools.",
            )
        logger.debug("Calling %s", name)
        return await spec.invoke(db, arguments)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return resources()

    @server.list_resource_templates()
    async def list_resource_templates() -> list[types.ResourceTemplate]:
        return resource_templates()

    @server.read_resource()
    async def read(uri) -> list[ReadResourceContents]:
        text = await read_resource(db, str(uri))
        return [ReadResourceContents(content=text, mime_type=MIME_TYPE)]

    return server


async def serve_stdio(config: Config) -> None:
    server = create_server(config)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_stdio(config: Config) -> None:
    """Serve over stdin/stdout until the client hangs up."""
    logger.info("jsondb-cloud MCP server %s on stdio (project %s)", __version__, config.project)
    anyio.run(serve_stdio, config)
