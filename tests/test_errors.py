from jsondb_mcp.errors import ErrorRule, ErrorTable, UpstreamError, message_of, status_of

TABLE = ErrorTable(
    "THING_FAILED",
    "Failed to handle '$collection'.",
    "Check '$collection' and '$id'.",
    rules=(
        ErrorRule(404, "THING_NOT_FOUND", "Thing '$id' missing from '$collection'.", "List '$collection'."),
        ErrorRule(400, "VALIDATION_ERROR", "Thing failed validation.", "Fix it.", prefer_upstream=True),
        ErrorRule(413, "TOO_LARGE", "Too large.", "Shrink it."),
    ),
)


def test_upstream_error_fields_and_text():
    err = UpstreamError(404, "Not Found", "/users/u1")
    assert err.status_code == 404
    assert err.message == "Not Found"
    assert err.path == "/users/u1"
    assert str(err) == "jsondb.cloud API 404 on /users/u1: Not Found"
    assert status_of(err) == 404
    assert message_of(err) == "Not Found"


def test_status_and_message_of_plain_exception():
    exc = ConnectionError("connection refused")
    assert status_of(exc) is None
    assert message_of(exc) == "connection refused"


def test_rule_with_fixed_message_renders_template():
    code, message, suggestion = TABLE.classify(
        UpstreamError(404, "Not Found", "/x"), collection="users", id="u1"
    )
    assert code == "THING_NOT_FOUND"
    assert message == "Thing 'u1' missing from 'users'."
    assert suggestion == "List 'users'."


def test_fixed_message_ignores_upstream_text():
    code, message, _ = TABLE.classify(UpstreamError(413, "payload too big", "/x"))
    assert (code, message) == ("TOO_LARGE", "Too large.")


def test_prefer_upstream_uses_api_message():
    code, message, _ = TABLE.classify(UpstreamError(400, "name is required", "/x"))
    assert code == "VALIDATION_ERROR"
    assert message == "name is required"


def test_prefer_upstream_falls_back_to_template_when_empty():
    _, message, _ = TABLE.classify(UpstreamError(400, "", "/x"))
    assert message == "Thing failed validation."


def test_unmatched_status_uses_fallback_with_upstream_message():
    code, message, suggestion = TABLE.classify(
        UpstreamError(500, "Internal Server Error", "/x"), collection="users", id="u1"
    )
    assert code == "THING_FAILED"
    assert message == "Internal Server Error"
    assert suggestion == "Check 'users' and 'u1'."


def test_network_error_without_text_uses_default_message():
    code, message, _ = TABLE.classify(Exception(), collection="users")
    assert code == "THING_FAILED"
    assert message == "Failed to handle 'users'."


def test_missing_context_leaves_placeholder():
    _, _, suggestion = TABLE.classify(UpstreamError(500, "boom", "/x"), collection="users")
    assert suggestion == "Check 'users' and '$id'."
