import pytest

from conftest import BASE, decode, error_of

HOOK = {"url": "https://example.com/hook", "events": ["document.created"]}


async def test_create_webhook(call_tool, session):
    session.reply(201, {"id": "wh_1", **HOOK})
    result = await call_tool("create_webhook", {"collection": "users", **HOOK})
    assert decode(result)["id"] == "wh_1"
    assert (session.last.method, session.last.url) == ("POST", f"{BASE}/users/_webhooks")
    assert session.last.body == HOOK


async def test_create_webhook_with_description(call_tool, session):
    await call_tool("create_webhook", {"collection": "users", "description": "audit", **HOOK})
    assert session.last.body["description"] == "audit"


async def test_create_webhook_rejects_bad_input(call_tool, session):
    error = error_of(await call_tool("create_webhook", {
        "collection": "users", "url": "not a url", "events": ["document.created"],
    }))
    assert error["code"] == "INVALID_ARGUMENTS"

    error = error_of(await call_tool("create_webhook", {
        "collection": "users", "url": "https://example.com", "events": ["document.read"],
    }))
    assert error["code"] == "INVALID_ARGUMENTS"
    assert session.requests == []


async def test_create_webhook_limit(call_tool, session):
    session.reply(403, {"error": "Webhook limit of 3 reached"})
    error = error_of(await call_tool("create_webhook", {"collection": "users", **HOOK}))
    assert (error["code"], error["message"]) == ("WEBHOOK_LIMIT", "Webhook limit of 3 reached")


async def test_list_webhooks(call_tool, session):
    session.reply(200, {"data": []})
    await call_tool("list_webhooks", {"collection": "users"})
    assert session.last.url == f"{BASE}/users/_webhooks"

    session.reply(500)
    error = error_of(await call_tool("list_webhooks", {"collection": "users"}))
    assert error["code"] == "LIST_WEBHOOKS_FAILED"


async def test_get_webhook_not_found(call_tool, session):
    session.reply(404)
    error = error_of(await call_tool("get_webhook", {"collection": "users", "webhookId": "wh_9"}))
    assert error["code"] == "WEBHOOK_NOT_FOUND"
    assert error["message"] == "Webhook 'wh_9' not found in collection 'users'."
    assert session.last.url == f"{BASE}/users/_webhooks/wh_9"


async def test_update_webhook_sends_only_supplied_fields(call_tool, session):
    await call_tool("update_webhook", {"collection": "users", "webhookId": "wh_1", "status": "disabled"})
    assert session.last.method == "PUT"
    assert session.last.body == {"status": "disabled"}


@pytest.mark.parametrize("field", ["url", "events", "description", "status"])
async def test_update_webhook_rejects_null_fields(call_tool, session, field):
    error = error_of(await call_tool(
        "update_webhook", {"collection": "users", "webhookId": "wh_1", field: None}
    ))
    assert error["code"] == "INVALID_ARGUMENTS"
    assert session.requests == []


async def test_update_webhook_failure(call_tool, session):
    session.reply(500, {"error": "boom"})
    error = error_of(await call_tool("update_webhook", {"collection": "users", "webhookId": "wh_1"}))
    assert error["code"] == "UPDATE_WEBHOOK_FAILED"
    assert error["suggestion"] == "Verify the collection name and webhook ID are correct."


async def test_delete_webhook(call_tool, session):
    session.reply(204)
    result = await call_tool("delete_webhook", {"collection": "users", "webhookId": "wh_1"})
    assert decode(result) == {"deleted": True, "webhookId": "wh_1", "collection": "users"}
    assert session.last.method == "DELETE"


async def test_test_webhook(call_tool, session):
    session.reply(200, {"delivered": True, "status": 200})
    result = await call_tool("test_webhook", {"collection": "users", "webhookId": "wh_1"})
    assert decode(result)["delivered"] is True
    assert (session.last.method, session.last.url) == ("POST", f"{BASE}/users/_webhooks/wh_1/test")

    session.reply(502)
    error = error_of(await call_tool("test_webhook", {"collection": "users", "webhookId": "wh_1"}))
    assert error["code"] == "TEST_WEBHOOK_FAILED"
