"""The two response shapes handed back to the MCP session."""

import json
from datetime import datetime

from mcp.types import CallToolResult, TextContent


def _serialize(obj):
    """Recursively convert values json.dumps cannot handle on its own."""
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, set):
        return sorted(_serialize(item) for item in obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def to_json(data) -> str:
    return json.dumps(_serialize(data), indent=2, default=str)


def format_success(data) -> CallToolResult:
    """Wrap a result value as a single pretty-printed JSON text block."""
    return CallToolResult(content=[TextContent(type="text", text=to_json(data))])


def format_error(code: str, message: str, suggestion: str) -> CallToolResult:
    """Wrap a failure as ``{"error": {code, message, suggestion}}`` with isError set."""
    payload = {"error": {"code": code, "message": message, "suggestion": suggestion}}
    return CallToolResult(
        content=[TextContent(type="text", text=to_json(payload))],
        isError=True,
    )
