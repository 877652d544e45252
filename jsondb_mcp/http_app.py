"""Stateless HTTP transport.

FastAPI app with three surfaces:

    GET  /health   liveness check, always {"status": "ok"}
    *    /mcp      one MCP request/response cycle on a fresh protocol instance
    anything else  404 {"error": "Not found"}

Every /mcp request gets its own ``EphemeralSession``: a new server from
``create_server`` plus a non-resumable session manager. The session is
released exactly once, when the request finishes or as soon as the client
disconnects, whichever comes first.

Usage:
    JSONDB_MCP_TRANSPORT=http jsondb-mcp
    # or: jsondb-mcp --transport http --port 3100
"""

import logging
from contextlib import AsyncExitStack
from typing import Callable, List, Optional

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Route

from jsondb_mcp import __version__
from jsondb_mcp.config import Config
from jsondb_mcp.server import create_server

logger = logging.getLogger("jsondb_mcp.http")

MCP_PATH = "/mcp"


class EphemeralSession:
    """One protocol instance and its session adapter, for a single request."""

    def __init__(self, config: Config, client=None):
        self.server = create_server(config, client)
        self.manager = StreamableHTTPSessionManager(
            app=self.server,
            event_store=None,
            json_response=True,
            stateless=True,
        )
        self._stack = AsyncExitStack()
        self._closed = False

    async def open(self) -> None:
        await self._stack.enter_async_context(self.manager.run())

    async def handle(self, scope, receive, send) -> None:
        await self.manager.handle_request(scope, receive, send)

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Release the adapter and the protocol instance. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._stack.aclose()
        except Exception as exc:
            logger.debug("Ignoring error while releasing MCP session: %s", exc)


async def read_request(receive) -> Optional[List[dict]]:
    """Drain the request body messages, or None if the client left first."""
    messages = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            return None
        messages.append(message)
        if not message.get("more_body", False):
            return messages


class BufferedReceive:
    """ASGI receive that replays an already-read body, then waits forever.

    Disconnects are watched on the real channel by the endpoint.
    """

    def __init__(self, messages: List[dict]):
        self._messages = list(messages)

    async def __call__(self) -> dict:
        if self._messages:
            return self._messages.pop(0)
        await anyio.sleep_forever()


class StatelessMCPEndpoint:
    """ASGI endpoint running each request on its own ephemeral session."""

    def __init__(self, session_factory: Callable[[], EphemeralSession]):
        self.session_factory = session_factory

    async def __call__(self, scope, receive, send) -> None:
        session = self.session_factory()
        try:
            await session.open()
            messages = await read_request(receive)
            if messages is None:
                logger.debug("Client disconnected before the request body arrived")
                return
            await self._serve(session, scope, messages, receive, send)
        finally:
            await session.close()

    async def _serve(self, session, scope, messages, receive, send) -> None:
        failure = None
        async with anyio.create_task_group() as tg:

            async def watch_disconnect():
                while (await receive())["type"] != "http.disconnect":
                    pass
                logger.debug("Client disconnected, releasing MCP session")
                tg.cancel_scope.cancel()

            tg.start_soon(watch_disconnect)
            try:
                await session.handle(scope, BufferedReceive(messages), send)
            except Exception as exc:
                # re-raised below, unwrapped from the task group
                failure = exc
            tg.cancel_scope.cancel()
        if failure is not None:
            raise failure


def create_http_app(config: Config, session_factory=None) -> FastAPI:
    """Build the FastAPI app; ``session_factory`` defaults to a fresh EphemeralSession."""
    if session_factory is None:
        session_factory = lambda: EphemeralSession(config)  # noqa: E731

    app = FastAPI(
        title="jsondb.cloud MCP",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request, exc):
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    app.router.routes.append(Route(MCP_PATH, endpoint=StatelessMCPEndpoint(session_factory)))
    return app


def run_http(config: Config) -> None:
    logger.info(
        "jsondb-cloud MCP server %s listening on %s:%s (project %s)",
        __version__, config.host, config.port, config.project,
    )
    uvicorn.run(
        create_http_app(config),
        host=config.host,
        port=config.port,
    )
