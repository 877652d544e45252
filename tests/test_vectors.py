from conftest import BASE, decode, error_of


async def test_semantic_search_sends_only_supplied_keys(call_tool, session):
    session.reply(200, {"data": [{"_id": "a1", "_score": 0.91}]})
    result = await call_tool("semantic_search", {"collection": "articles", "query": "vector databases"})
    assert decode(result)["data"][0]["_score"] == 0.91
    assert (session.last.method, session.last.url) == ("POST", f"{BASE}/articles/_search")
    assert session.last.body == {"query": "vector databases"}


async def test_semantic_search_passes_options(call_tool, session):
    await call_tool("semantic_search", {
        "collection": "articles",
        "query": "q",
        "limit": 5,
        "threshold": 0.8,
        "filter": {"lang": "en"},
    })
    assert session.last.body == {"query": "q", "limit": 5, "threshold": 0.8, "filter": {"lang": "en"}}


async def test_semantic_search_bounds(call_tool, session):
    for bad in ({"limit": 0}, {"limit": 101}, {"threshold": 1.5}):
        error = error_of(await call_tool("semantic_search", {"collection": "a", "query": "q", **bad}))
        assert error["code"] == "INVALID_ARGUMENTS"
    assert session.requests == []


async def test_semantic_search_error_codes(call_tool, session):
    session.reply(404)
    error = error_of(await call_tool("semantic_search", {"collection": "articles", "query": "q"}))
    assert error["code"] == "COLLECTION_NOT_FOUND"
    assert error["message"] == "Collection 'articles' not found or has no embeddings."

    session.reply(403, {"error": "Upgrade required"})
    error = error_of(await call_tool("semantic_search", {"collection": "articles", "query": "q"}))
    assert (error["code"], error["message"]) == ("SEARCH_NOT_AVAILABLE", "Upgrade required")

    session.reply(400, {"error": "query must not be empty"})
    error = error_of(await call_tool("semantic_search", {"collection": "articles", "query": ""}))
    assert error["code"] == "INVALID_SEARCH"


async def test_store_with_embedding_posts_with_directive(call_tool, session):
    await call_tool("store_with_embedding", {
        "collection": "articles", "data": {"title": "Hi", "body": "text"}, "embed_field": "body",
    })
    assert (session.last.method, session.last.url) == ("POST", f"{BASE}/articles")
    assert session.last.body == {"title": "Hi", "body": "text", "$embed": "body"}


async def test_store_with_embedding_puts_with_id(call_tool, session):
    await call_tool("store_with_embedding", {
        "collection": "articles", "data": {"body": "text"}, "embed_field": "body", "id": "custom-id",
    })
    assert (session.last.method, session.last.url) == ("PUT", f"{BASE}/articles/custom-id")


async def test_store_with_embedding_error_codes(call_tool, session):
    args = {"collection": "articles", "data": {"body": "t"}, "embed_field": "summary"}

    session.reply(403)
    assert error_of(await call_tool("store_with_embedding", args))["code"] == "EMBEDDING_NOT_AVAILABLE"

    session.reply(413)
    assert error_of(await call_tool("store_with_embedding", args))["code"] == "DOCUMENT_TOO_LARGE"

    session.reply(400, {"error": "field missing"})
    error = error_of(await call_tool("store_with_embedding", args))
    assert error["code"] == "VALIDATION_ERROR"
    assert "embed_field 'summary'" in error["suggestion"]

    session.reply(500)
    assert error_of(await call_tool("store_with_embedding", args))["code"] == "STORE_EMBEDDING_FAILED"
