from conftest import BASE, decode, error_of

SCHEMA = {"type": "object", "required": ["name"], "properties": {"name": {"type": "string"}}}


async def test_get_schema(call_tool, session):
    session.reply(200, {"schema": SCHEMA})
    result = await call_tool("get_schema", {"collection": "users"})
    assert decode(result) == {"collection": "users", "schema": SCHEMA}
    assert session.last.url == f"{BASE}/users/_schema"


async def test_get_schema_when_none_set(call_tool, session):
    session.reply(404, {"error": "No schema"})
    result = await call_tool("get_schema", {"collection": "users"})
    assert not result.isError
    assert decode(result) == {
        "collection": "users",
        "schema": None,
        "message": "No schema is set for collection 'users'. Any valid JSON document can be stored.",
    }


async def test_get_schema_failure(call_tool, session):
    session.reply(500)
    error = error_of(await call_tool("get_schema", {"collection": "users"}))
    assert error["code"] == "GET_SCHEMA_FAILED"


async def test_set_schema(call_tool, session):
    result = await call_tool("set_schema", {"collection": "users", "schema": SCHEMA})
    payload = decode(result)
    assert payload["schema"] == SCHEMA
    assert payload["message"].startswith("Schema set successfully for collection 'users'.")
    assert (session.last.method, session.last.body) == ("PUT", SCHEMA)


async def test_set_schema_invalid(call_tool, session):
    session.reply(400, {"error": "unknown keyword 'typo'"})
    error = error_of(await call_tool("set_schema", {"collection": "users", "schema": {"typo": 1}}))
    assert (error["code"], error["message"]) == ("INVALID_SCHEMA", "unknown keyword 'typo'")


async def test_remove_schema(call_tool, session):
    session.reply(204)
    payload = decode(await call_tool("remove_schema", {"collection": "users"}))
    assert payload == {
        "collection": "users",
        "schema": None,
        "message": "Schema removed from collection 'users'. Documents are no longer validated.",
    }
    assert session.last.method == "DELETE"


async def test_remove_schema_not_found(call_tool, session):
    session.reply(404)
    error = error_of(await call_tool("remove_schema", {"collection": "users"}))
    assert error["code"] == "SCHEMA_NOT_FOUND"
    assert error["message"] == "No schema is set for collection 'users'."


async def test_validate_document(call_tool, session):
    session.reply(200, {"valid": False, "errors": [{"path": "/name", "message": "required"}]})
    payload = decode(await call_tool("validate_document", {"collection": "users", "data": {}}))
    assert payload["collection"] == "users"
    assert payload["valid"] is False
    assert session.last.url == f"{BASE}/users/_validate"


async def test_validate_document_without_schema(call_tool, session):
    session.reply(404)
    error = error_of(await call_tool("validate_document", {"collection": "users", "data": {}}))
    assert error["code"] == "SCHEMA_NOT_FOUND"
    assert error["suggestion"].startswith("Use set_schema to add a schema first")
