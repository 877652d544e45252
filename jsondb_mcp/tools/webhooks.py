"""Webhook management tools."""

from mcp.types import CallToolResult

from jsondb_mcp.client import JsonDBClient, segment
from jsondb_mcp.errors import ErrorRule, ErrorTable
from jsondb_mcp.models import CollectionInput, CreateWebhookInput, UpdateWebhookInput, WebhookRef
from jsondb_mcp.responses import format_success
from jsondb_mcp.tools.base import failure, tool

CHECK_WEBHOOK = "Verify the collection name and webhook ID are correct."
WEBHOOK_NOT_FOUND = ErrorRule(
    404,
    "WEBHOOK_NOT_FOUND",
    "Webhook '$webhookId' not found in collection '$collection'.",
    "Use list_webhooks({ collection: '$collection' }) to see available webhooks.",
)

CREATE_WEBHOOK_ERRORS = ErrorTable(
    "CREATE_WEBHOOK_FAILED",
    "Failed to create webhook for collection '$collection'.",
    "Verify the URL is reachable HTTPS and the event names are valid.",
    rules=(
        ErrorRule(
            403,
            "WEBHOOK_LIMIT",
            "Webhook limit reached for this collection or plan.",
            "Free plans allow 3 total webhooks (1 per collection). Pro plans allow 50 total (10 per collection). Delete unused webhooks or upgrade.",
            prefer_upstream=True,
        ),
    ),
)

LIST_WEBHOOKS_ERRORS = ErrorTable(
    "LIST_WEBHOOKS_FAILED",
    "Failed to list webhooks for collection '$collection'.",
    "Verify the collection name is correct. Use list_collections to see available collections.",
)

GET_WEBHOOK_ERRORS = ErrorTable(
    "GET_WEBHOOK_FAILED", "Failed to get webhook '$webhookId'.", CHECK_WEBHOOK,
    rules=(WEBHOOK_NOT_FOUND,),
)

UPDATE_WEBHOOK_ERRORS = ErrorTable(
    "UPDATE_WEBHOOK_FAILED", "Failed to update webhook '$webhookId'.", CHECK_WEBHOOK,
    rules=(WEBHOOK_NOT_FOUND,),
)

DELETE_WEBHOOK_ERRORS = ErrorTable(
    "DELETE_WEBHOOK_FAILED", "Failed to delete webhook '$webhookId'.", CHECK_WEBHOOK,
    rules=(WEBHOOK_NOT_FOUND,),
)

TEST_WEBHOOK_ERRORS = ErrorTable(
    "TEST_WEBHOOK_FAILED",
    "Failed to send test event to webhook '$webhookId'.",
    "Verify the webhook URL is reachable and responding with a 2xx status.",
    rules=(WEBHOOK_NOT_FOUND,),
)


def webhooks_path(collection: str, webhook_id=None) -> str:
    path = f"/{segment(collection)}/_webhooks"
    if webhook_id is not None:
        path = f"{path}/{segment(webhook_id)}"
    return path


def _context(args: WebhookRef) -> dict:
    return {"collection": args.collection, "webhookId": args.webhook_id}


@tool("create_webhook", CreateWebhookInput)
async def create_webhook(db: JsonDBClient, args: CreateWebhookInput) -> CallToolResult:
    """Register a webhook on a jsondb.cloud collection. The webhook URL receives POST requests signed with HMAC-SHA256 when the specified events occur."""
    body = {"url": args.url, "events": list(args.events)}
    if args.description is not None:
        body["description"] = args.description
    try:
        data = await db.call(webhooks_path(args.collection), "POST", body)
    except Exception as exc:
        return failure(CREATE_WEBHOOK_ERRORS, exc, "create_webhook", collection=args.collection)
    return format_success(data)


@tool("list_webhooks", CollectionInput)
async def list_webhooks(db: JsonDBClient, args: CollectionInput) -> CallToolResult:
    """List all webhooks registered on a jsondb.cloud collection. Returns webhook IDs, URLs, subscribed events, and status."""
    try:
        data = await db.call(webhooks_path(args.collection))
    except Exception as exc:
        return failure(LIST_WEBHOOKS_ERRORS, exc, "list_webhooks", collection=args.collection)
    return format_success(data)


@tool("get_webhook", WebhookRef)
async def get_webhook(db: JsonDBClient, args: WebhookRef) -> CallToolResult:
    """Get details for a specific webhook including its recent delivery history and failure counts."""
    try:
        data = await db.call(webhooks_path(args.collection, args.webhook_id))
    except Exception as exc:
        return failure(GET_WEBHOOK_ERRORS, exc, "get_webhook", **_context(args))
    return format_success(data)


@tool("update_webhook", UpdateWebhookInput)
async def update_webhook(db: JsonDBClient, args: UpdateWebhookInput) -> CallToolResult:
    """Update a webhook's URL, subscribed events, description, or enabled status. Only provided fields are changed."""
    try:
        data = await db.call(
            webhooks_path(args.collection, args.webhook_id), "PUT", args.changes()
        )
    except Exception as exc:
        return failure(UPDATE_WEBHOOK_ERRORS, exc, "update_webhook", **_context(args))
    return format_success(data)


@tool("delete_webhook", WebhookRef)
async def delete_webhook(db: JsonDBClient, args: WebhookRef) -> CallToolResult:
    """Delete a webhook permanently. Delivery of pending events is stopped immediately. This action cannot be undone."""
    try:
        await db.call(webhooks_path(args.collection, args.webhook_id), "DELETE")
    except Exception as exc:
        return failure(DELETE_WEBHOOK_ERRORS, exc, "delete_webhook", **_context(args))
    return format_success(
        {"deleted": True, "webhookId": args.webhook_id, "collection": args.collection}
    )


@tool("test_webhook", WebhookRef)
async def test_webhook(db: JsonDBClient, args: WebhookRef) -> CallToolResult:
    """Send a test event to a webhook to verify the endpoint is reachable and signature verification is working. Returns the delivery result."""
    try:
        data = await db.call(f"{webhooks_path(args.collection, args.webhook_id)}/test", "POST")
    except Exception as exc:
        return failure(TEST_WEBHOOK_ERRORS, exc, "test_webhook", **_context(args))
    return format_success(data)
