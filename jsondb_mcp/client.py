"""jsondb.cloud REST client.

``JsonDBClient.call`` performs one authenticated request per invocation and
raises ``UpstreamError`` for non-2xx answers. ``Collection`` layers the
document, schema and validation operations of a single collection on top.

Uses curl_cffi's AsyncSession for the outbound HTTP calls.
"""

import json
from http import HTTPStatus
from typing import Any, List, Optional
from urllib.parse import quote

from curl_cffi.requests import AsyncSession

from jsondb_mcp.config import Config
from jsondb_mcp.errors import UpstreamError
from jsondb_mcp.filters import filter_params

JSON = "application/json"
MERGE_PATCH = "application/merge-patch+json"
JSON_PATCH = "application/json-patch+json"

_BODY_METHODS = ("POST", "PUT", "PATCH", "DELETE")


def empty_success() -> dict:
    """What a 204 (or an empty 2xx body) resolves to."""
    return {"ok": True}


def segment(value: Any) -> str:
    """Quote one path segment (collection name, document or webhook id)."""
    return quote(str(value), safe="")


def _error_message(response) -> str:
    """Prefer the API's ``error`` string, else the HTTP status text."""
    try:
        body = response.json()
    except (ValueError, TypeError):
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error = error.get("message")
    if error:
        return str(error)
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status_code).phrase
    except ValueError:
        return f"HTTP {response.status_code}"


class JsonDBClient:
    """Authenticated access to one jsondb.cloud project.

    A fresh AsyncSession is opened per call unless ``session`` is given,
    in which case every call goes through it.
    """

    def __init__(self, config: Config, session=None):
        self.config = config
        self._session = session

    def _headers(self, content_type: str) -> dict:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": content_type,
            "Accept": JSON,
        }

    async def _send(self, method: str, url: str, **kwargs):
        if self._session is not None:
            return await self._session.request(method, url, **kwargs)
        async with AsyncSession() as session:
            return await session.request(method, url, **kwargs)

    async def call(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[dict] = None,
        content_type: str = JSON,
    ):
        """Call ``{base_url}/{project}{path}`` and return the decoded JSON.

        Raises:
            UpstreamError: on any non-2xx status.
        """
        method = method.upper()
        url = f"{self.config.project_url}{path}"
        data = None
        if body is not None and method in _BODY_METHODS:
            data = json.dumps(body)

        response = await self._send(
            method,
            url,
            headers=self._headers(content_type),
            data=data,
            params=params or None,
            timeout=self.config.timeout,
        )

        if not 200 <= response.status_code < 300:
            raise UpstreamError(response.status_code, _error_message(response), path)
        if response.status_code == 204 or not response.content:
            return empty_success()
        return response.json()

    def collection(self, name: str) -> "Collection":
        return Collection(self, name)

    async def list_collections(self):
        return await self.call("")


class Collection:
    """Document, schema and validation operations on one collection."""

    def __init__(self, client: JsonDBClient, name: str):
        self.client = client
        self.name = name
        self.path = f"/{segment(name)}"

    def _doc_path(self, doc_id: str) -> str:
        return f"{self.path}/{segment(doc_id)}"

    # -----------------------------------------------------------------------
    # Documents
    # -----------------------------------------------------------------------

    async def create(self, data: dict, doc_id: Optional[str] = None):
        body = dict(data)
        if doc_id:
            body["_id"] = doc_id
        return await self.client.call(self.path, "POST", body)

    async def get(self, doc_id: str):
        return await self.client.call(self._doc_path(doc_id))

    async def list(
        self,
        filter: Optional[dict] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        select: Optional[List[str]] = None,
    ):
        params = filter_params(filter)
        if sort:
            params["sort"] = sort
        if limit is not None:
            params["limit"] = str(limit)
        if offset is not None:
            params["offset"] = str(offset)
        if select:
            params["select"] = ",".join(select)
        return await self.client.call(self.path, params=params)

    async def update(self, doc_id: str, data: dict):
        return await self.client.call(self._doc_path(doc_id), "PUT", data)

    async def patch(self, doc_id: str, data: dict):
        return await self.client.call(
            self._doc_path(doc_id), "PATCH", data, content_type=MERGE_PATCH
        )

    async def json_patch(self, doc_id: str, operations: List[dict]):
        return await self.client.call(
            self._doc_path(doc_id), "PATCH", operations, content_type=JSON_PATCH
        )

    async def delete(self, doc_id: str):
        return await self.client.call(self._doc_path(doc_id), "DELETE")

    async def count(self, filter: Optional[dict] = None) -> int:
        result = await self.client.call(f"{self.path}/_count", params=filter_params(filter))
        if isinstance(result, dict):
            return result.get("count", 0)
        return result

    # -----------------------------------------------------------------------
    # Schema
    # -----------------------------------------------------------------------

    async def get_schema(self) -> Optional[dict]:
        """Return the collection's JSON Schema, or None when none is set."""
        try:
            result = await self.client.call(f"{self.path}/_schema")
        except UpstreamError as err:
            if err.status_code == 404:
                return None
            raise
        if isinstance(result, dict) and "schema" in result:
            return result["schema"]
        return result

    async def set_schema(self, schema: dict):
        return await self.client.call(f"{self.path}/_schema", "PUT", schema)

    async def remove_schema(self):
        return await self.client.call(f"{self.path}/_schema", "DELETE")

    async def validate(self, data: dict) -> dict:
        return await self.client.call(f"{self.path}/_validate", "POST", data)
