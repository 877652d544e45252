"""The jsondb.cloud tool catalog.

Importing this package registers every tool: documents, collections,
schemas, versions, webhooks and vectors.
"""

from jsondb_mcp.tools import collections, documents, schemas, vectors, versions, webhooks  # noqa: F401
from jsondb_mcp.tools.base import ToolSpec, registered_tools

__all__ = ["ToolSpec", "registered_tools"]
