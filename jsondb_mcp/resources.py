"""Read-only MCP resources: the collection list and per-collection schemas.

Failures are reported inside the resource text as ``{"error": ...}`` so a
client reading context never sees a protocol error for an upstream problem.
"""

import logging
import re
from typing import Optional
from urllib.parse import unquote

from mcp import types

from jsondb_mcp.client import JsonDBClient
from jsondb_mcp.errors import message_of
from jsondb_mcp.responses import to_json
from jsondb_mcp.tools.schemas import schema_payload

logger = logging.getLogger("jsondb_mcp.resources")

MIME_TYPE = "application/json"
COLLECTIONS_URI = "jsondb://collections"
SCHEMA_URI_TEMPLATE = "jsondb://collections/{collection}/schema"

_SCHEMA_URI = re.compile(r"^jsondb://collections/([^/]+)/schema$")


def resources() -> list[types.Resource]:
    return [
        types.Resource(
            uri=COLLECTIONS_URI,
            name="jsondb.cloud Collections",
            description=(
                "List of all collections in the current project. "
                "Use this to discover what data is available."
            ),
            mimeType=MIME_TYPE,
        )
    ]


def resource_templates() -> list[types.ResourceTemplate]:
    return [
        types.ResourceTemplate(
            uriTemplate=SCHEMA_URI_TEMPLATE,
            name="Collection Schema",
            description=(
                "JSON Schema for a specific collection (if set). Helps AI agents "
                "understand the expected document structure."
            ),
            mimeType=MIME_TYPE,
        )
    ]


def schema_collection(uri: str) -> Optional[str]:
    """Collection name addressed by a schema resource URI, or None."""
    match = _SCHEMA_URI.match(uri)
    return unquote(match.group(1)) if match else None


async def read_collections(db: JsonDBClient) -> str:
    try:
        data = await db.list_collections()
    except Exception as exc:
        logger.info("collections resource failed: %s", exc)
        return to_json({"error": f"Failed to fetch collections: {message_of(exc)}"})
    return to_json(data)


async def read_schema(db: JsonDBClient, collection: str) -> str:
    try:
        schema = await db.collection(collection).get_schema()
    except Exception as exc:
        logger.info("schema resource for %s failed: %s", collection, exc)
        return to_json(
            {"error": message_of(exc) or f"Failed to fetch schema for collection '{collection}'"}
        )
    return to_json(schema_payload(collection, schema))


async def read_resource(db: JsonDBClient, uri: str) -> str:
    """Resolve a ``jsondb://`` URI to its JSON text.

    Raises:
        ValueError: for a URI that names no known resource.
    """
    if uri == COLLECTIONS_URI:
        return await read_collections(db)
    collection = schema_collection(uri)
    if collection is not None:
        return await read_schema(db, collection)
    raise ValueError(f"Unknown resource: {uri}")
