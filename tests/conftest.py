import json
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

import jsondb_mcp.tools  # noqa: F401  registers the catalog
from jsondb_mcp.client import JsonDBClient
from jsondb_mcp.config import Config
from jsondb_mcp.tools.base import registered_tools

BASE = "https://api.jsondb.cloud/test-project"


class FakeResponse:
    """Just enough of curl_cffi's Response for JsonDBClient."""

    def __init__(self, status_code=200, payload=None, reason="", content=None):
        self.status_code = status_code
        self.reason = reason
        if content is None:
            content = b"" if payload is None else json.dumps(payload).encode()
        self.content = content

    def json(self):
        return json.loads(self.content)


@dataclass
class SentRequest:
    method: str
    url: str
    kwargs: dict = field(default_factory=dict)

    @property
    def headers(self) -> dict:
        return self.kwargs.get("headers") or {}

    @property
    def params(self) -> Optional[dict]:
        return self.kwargs.get("params")

    @property
    def body(self) -> Any:
        data = self.kwargs.get("data")
        return None if data is None else json.loads(data)


class FakeSession:
    """Records requests and replays queued responses (or raises queued exceptions)."""

    def __init__(self):
        self.requests: list[SentRequest] = []
        self.responses: list = []

    def reply(self, status_code=200, payload=None, **kwargs) -> "FakeSession":
        self.responses.append(FakeResponse(status_code, payload, **kwargs))
        return self

    def fail(self, exc: Exception) -> "FakeSession":
        self.responses.append(exc)
        return self

    async def request(self, method, url, **kwargs):
        self.requests.append(SentRequest(method, url, kwargs))
        item = self.responses.pop(0) if self.responses else FakeResponse(200, {})
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def last(self) -> SentRequest:
        return self.requests[-1]


@pytest.fixture
def config():
    return Config(api_key="jdb_sk_test_123", project="test-project")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def db(config, session):
    return JsonDBClient(config, session=session)


def decode(result) -> Any:
    """Parse the single JSON text block of a tool result."""
    assert len(result.content) == 1
    return json.loads(result.content[0].text)


def error_of(result) -> dict:
    assert result.isError is True
    return decode(result)["error"]


@pytest.fixture
def call_tool(db):
    catalog = {spec.name: spec for spec in registered_tools()}

    async def _call(name: str, arguments: Optional[dict] = None):
        return await catalog[name].invoke(db, arguments or {})

    return _call
