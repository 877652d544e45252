"""MCP server exposing jsondb.cloud to AI agents.

28 tools across documents, collections, schemas, versions, webhooks and
vector search, plus read-only resources for the collection list and
per-collection schemas. Runs over stdio or stateless HTTP.
"""

__version__ = "1.0.0"

from jsondb_mcp.client import Collection, JsonDBClient
from jsondb_mcp.config import Config, ConfigError, load_config
from jsondb_mcp.errors import ErrorRule, ErrorTable, UpstreamError
from jsondb_mcp.filters import compile_filters, filter_params
from jsondb_mcp.responses import format_error, format_success

__all__ = [
    "__version__",
    # Configuration
    "Config",
    "ConfigError",
    "load_config",
    # REST client
    "JsonDBClient",
    "Collection",
    # Errors
    "UpstreamError",
    "ErrorRule",
    "ErrorTable",
    # Responses
    "format_success",
    "format_error",
    # Filters
    "compile_filters",
    "filter_params",
]
