"""Schema management tools."""

from mcp.types import CallToolResult

from jsondb_mcp.client import JsonDBClient
from jsondb_mcp.errors import ErrorRule, ErrorTable
from jsondb_mcp.models import (
    GetSchemaInput,
    RemoveSchemaInput,
    SetSchemaInput,
    ValidateDocumentInput,
)
from jsondb_mcp.responses import format_success
from jsondb_mcp.tools.base import failure, tool

COLLECTIONS_HINT = "Verify the collection name is correct. Use list_collections to see available collections."
NO_SCHEMA = "No schema is set for collection '$collection'."

GET_SCHEMA_ERRORS = ErrorTable(
    "GET_SCHEMA_FAILED",
    "Failed to get schema for collection '$collection'.",
    COLLECTIONS_HINT,
)

SET_SCHEMA_ERRORS = ErrorTable(
    "SET_SCHEMA_FAILED",
    "Failed to set schema for collection '$collection'.",
    "Verify the collection name and ensure the schema is valid JSON Schema format.",
    rules=(
        ErrorRule(
            400,
            "INVALID_SCHEMA",
            "The provided schema is not a valid JSON Schema.",
            "Ensure the schema follows JSON Schema format. The top-level 'type' should typically be 'object'. Example: { type: 'object', properties: { name: { type: 'string' } }, required: ['name'] }",
            prefer_upstream=True,
        ),
    ),
)

REMOVE_SCHEMA_ERRORS = ErrorTable(
    "REMOVE_SCHEMA_FAILED",
    "Failed to remove schema from collection '$collection'.",
    COLLECTIONS_HINT,
    rules=(
        ErrorRule(
            404,
            "SCHEMA_NOT_FOUND",
            NO_SCHEMA,
            "Use get_schema({ collection: '$collection' }) to check whether a schema exists.",
        ),
    ),
)

VALIDATE_DOCUMENT_ERRORS = ErrorTable(
    "VALIDATE_FAILED",
    "Failed to validate document against collection '$collection' schema.",
    "Verify the collection name is correct and the data is a valid JSON object.",
    rules=(
        ErrorRule(
            404,
            "SCHEMA_NOT_FOUND",
            NO_SCHEMA,
            "Use set_schema to add a schema first, or use create_document directly if no validation is needed.",
        ),
    ),
)


def schema_payload(collection: str, schema) -> dict:
    """The ``{collection, schema}`` view shared by get_schema and the schema resource."""
    if schema is None:
        return {
            "collection": collection,
            "schema": None,
            "message": f"No schema is set for collection '{collection}'. Any valid JSON document can be stored.",
        }
    return {"collection": collection, "schema": schema}


@tool("get_schema", GetSchemaInput)
async def get_schema(db: JsonDBClient, args: GetSchemaInput) -> CallToolResult:
    """Get the JSON Schema for a jsondb.cloud collection. Returns the schema if one is set, or null if no schema is configured. Knowing the schema helps you create valid documents."""
    try:
        schema = await db.collection(args.collection).get_schema()
    except Exception as exc:
        return failure(GET_SCHEMA_ERRORS, exc, "get_schema", collection=args.collection)
    return format_success(schema_payload(args.collection, schema))


@tool("set_schema", SetSchemaInput)
async def set_schema(db: JsonDBClient, args: SetSchemaInput) -> CallToolResult:
    """Set a JSON Schema for a jsondb.cloud collection. Documents created or updated in this collection will be validated against the schema. Supports standard JSON Schema keywords: type, required, properties, enum, minimum, maximum, minLength, maxLength, pattern, and additionalProperties."""
    try:
        await db.collection(args.collection).set_schema(args.schema_)
    except Exception as exc:
        return failure(SET_SCHEMA_ERRORS, exc, "set_schema", collection=args.collection)
    return format_success({
        "collection": args.collection,
        "schema": args.schema_,
        "message": (
            f"Schema set successfully for collection '{args.collection}'. "
            "All new and updated documents will be validated against this schema."
        ),
    })


@tool("remove_schema", RemoveSchemaInput)
async def remove_schema(db: JsonDBClient, args: RemoveSchemaInput) -> CallToolResult:
    """Remove the JSON Schema from a jsondb.cloud collection. After removal, any valid JSON document can be stored without validation. Existing documents are not affected."""
    try:
        await db.collection(args.collection).remove_schema()
    except Exception as exc:
        return failure(REMOVE_SCHEMA_ERRORS, exc, "remove_schema", collection=args.collection)
    return format_success({
        "collection": args.collection,
        "schema": None,
        "message": f"Schema removed from collection '{args.collection}'. Documents are no longer validated.",
    })


@tool("validate_document", ValidateDocumentInput)
async def validate_document(db: JsonDBClient, args: ValidateDocumentInput) -> CallToolResult:
    """Dry-run validate a document against a collection's schema without storing it. Returns { valid: true } or { valid: false, errors: [...] } with field-level error details. Use this before create_document when unsure if a document conforms to the schema."""
    try:
        result = await db.collection(args.collection).validate(args.data)
    except Exception as exc:
        return failure(VALIDATE_DOCUMENT_ERRORS, exc, "validate_document", collection=args.collection)
    payload = {"collection": args.collection}
    if isinstance(result, dict):
        payload.update(result)
    return format_success(payload)
