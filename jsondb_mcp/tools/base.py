"""Tool catalog plumbing shared by every tool module.

A tool is a plain ``async def handler(db, args)`` registered with
``@tool(name, InputModel)``; its docstring is the description agents read.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Type

from mcp import types
from pydantic import BaseModel, ValidationError

from jsondb_mcp.errors import ErrorTable, status_of
from jsondb_mcp.responses import format_error

logger = logging.getLogger("jsondb_mcp.tools")

Handler = Callable[..., Awaitable[types.CallToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    arguments: Type[BaseModel]
    handler: Handler

    def definition(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.arguments.model_json_schema(by_alias=True),
        )

    async def invoke(self, db, arguments: dict) -> types.CallToolResult:
        """Validate raw arguments, then run the handler."""
        try:
            args = self.arguments.model_validate(arguments or {})
        except ValidationError as err:
            details = "; ".join(
                f"{'.'.join(str(p) for p in e['loc']) or '(root)'}: {e['msg']}"
                for e in err.errors()
            )
            return format_error(
                "INVALID_ARGUMENTS",
                f"Invalid arguments for {self.name}: {details}",
                f"Check the arguments against the {self.name} input schema and try again.",
            )
        return await self.handler(db, args)


_TOOLS: dict[str, ToolSpec] = {}


def tool(name: str, arguments: Type[BaseModel]):
    """Register the decorated handler under ``name``."""

    def decorator(fn: Handler) -> Handler:
        _TOOLS[name] = ToolSpec(name, inspect.cleandoc(fn.__doc__ or ""), arguments, fn)
        return fn

    return decorator


def registered_tools() -> list[ToolSpec]:
    return list(_TOOLS.values())


def failure(table: ErrorTable, exc: Exception, tool_name: str, **context) -> types.CallToolResult:
    """Classify a failed call through the tool's table and format it."""
    code, message, suggestion = table.classify(exc, **context)
    status = status_of(exc)
    if status is None:
        logger.warning("%s failed: %s (%s)", tool_name, code, exc)
    else:
        logger.info("%s failed: %s (HTTP %s)", tool_name, code, status)
    return format_error(code, message, suggestion)
