"""Document CRUD tools."""

from mcp.types import CallToolResult

from jsondb_mcp.client import JsonDBClient
from jsondb_mcp.errors import ErrorRule, ErrorTable
from jsondb_mcp.models import (
    CountDocumentsInput,
    CreateDocumentInput,
    DeleteDocumentInput,
    GetDocumentInput,
    JsonPatchDocumentInput,
    ListDocumentsInput,
    PatchDocumentInput,
    UpdateDocumentInput,
)
from jsondb_mcp.responses import format_success
from jsondb_mcp.tools.base import failure, tool

SCHEMA_HINT = "Use get_schema({ collection: '$collection' }) to see the required schema, then adjust your document to match."
LIST_HINT = "Use list_documents({ collection: '$collection' }) to see available documents."
NOT_FOUND = "Document '$id' not found in collection '$collection'."
CHECK_IDS = "Verify that collection '$collection' and document ID '$id' are correct."
TOO_LARGE = ErrorRule(
    413,
    "DOCUMENT_TOO_LARGE",
    "The document exceeds the maximum allowed size.",
    "Reduce the document size. Free plans allow up to 16 KB per document, Pro plans allow up to 1 MB.",
)

CREATE_DOCUMENT_ERRORS = ErrorTable(
    "CREATE_FAILED",
    "Failed to create document",
    "Check that the collection name '$collection' is valid and the data is a valid JSON object.",
    rules=(
        ErrorRule(
            409,
            "DOCUMENT_CONFLICT",
            "A document with this ID already exists in collection '$collection'.",
            "Use update_document to replace an existing document, or omit the 'id' parameter to auto-generate a unique ID.",
        ),
        TOO_LARGE,
        ErrorRule(
            400,
            "VALIDATION_ERROR",
            "The document failed schema validation for collection '$collection'.",
            SCHEMA_HINT,
            prefer_upstream=True,
        ),
    ),
)

GET_DOCUMENT_ERRORS = ErrorTable(
    "GET_FAILED",
    "Failed to get document",
    "Verify that the collection '$collection' exists and the document ID '$id' is correct.",
    rules=(
        ErrorRule(
            404,
            "DOCUMENT_NOT_FOUND",
            NOT_FOUND,
            "Use list_documents({ collection: '$collection' }) to see available documents, or check that the ID is correct.",
        ),
    ),
)

LIST_DOCUMENTS_ERRORS = ErrorTable(
    "LIST_FAILED",
    "Failed to list documents in collection '$collection'.",
    "Verify the collection name is correct. Use list_collections to see available collections.",
)

UPDATE_DOCUMENT_ERRORS = ErrorTable(
    "UPDATE_FAILED",
    "Failed to update document",
    CHECK_IDS,
    rules=(
        ErrorRule(
            404,
            "DOCUMENT_NOT_FOUND",
            NOT_FOUND,
            "Use list_documents({ collection: '$collection' }) to see available documents. To create a new document, use create_document instead.",
        ),
        ErrorRule(
            400,
            "VALIDATION_ERROR",
            "The document failed schema validation.",
            SCHEMA_HINT,
            prefer_upstream=True,
        ),
    ),
)

PATCH_DOCUMENT_ERRORS = ErrorTable(
    "PATCH_FAILED",
    "Failed to patch document",
    CHECK_IDS,
    rules=(
        ErrorRule(
            404,
            "DOCUMENT_NOT_FOUND",
            NOT_FOUND,
            "Use list_documents({ collection: '$collection' }) to see available documents. To create a new document, use create_document instead.",
        ),
        ErrorRule(
            400,
            "VALIDATION_ERROR",
            "The patched document failed schema validation.",
            "Use get_schema({ collection: '$collection' }) to see the required schema. Ensure the patched result conforms to it.",
            prefer_upstream=True,
        ),
    ),
)

DELETE_DOCUMENT_ERRORS = ErrorTable(
    "DELETE_FAILED",
    "Failed to delete document",
    CHECK_IDS,
    rules=(
        ErrorRule(
            404,
            "DOCUMENT_NOT_FOUND",
            NOT_FOUND,
            "The document may have already been deleted. Use list_documents({ collection: '$collection' }) to see current documents.",
        ),
    ),
)

COUNT_DOCUMENTS_ERRORS = ErrorTable(
    "COUNT_FAILED",
    "Failed to count documents in collection '$collection'.",
    "Verify the collection name is correct. Use list_collections to see available collections.",
)

JSON_PATCH_ERRORS = ErrorTable(
    "JSON_PATCH_FAILED",
    "Failed to apply JSON Patch",
    "Verify the patch operations are valid RFC 6902. Paths must use JSON Pointer format (e.g., '/field', '/nested/key').",
    rules=(
        ErrorRule(404, "DOCUMENT_NOT_FOUND", NOT_FOUND, LIST_HINT),
        ErrorRule(
            409,
            "PATCH_CONFLICT",
            "A 'test' operation failed or a path conflict occurred.",
            "Review the patch operations. A 'test' op asserts a value must match before applying changes.",
            prefer_upstream=True,
        ),
        ErrorRule(
            400,
            "VALIDATION_ERROR",
            "The patched document failed schema validation.",
            "Use get_schema({ collection: '$collection' }) to review the required schema.",
            prefer_upstream=True,
        ),
    ),
)


@tool("create_document", CreateDocumentInput)
async def create_document(db: JsonDBClient, args: CreateDocumentInput) -> CallToolResult:
    """Create a new JSON document in a jsondb.cloud collection. Returns the created document with auto-generated _id, $createdAt, $updatedAt, and $version metadata."""
    try:
        doc = await db.collection(args.collection).create(args.data, args.id)
    except Exception as exc:
        return failure(CREATE_DOCUMENT_ERRORS, exc, "create_document", collection=args.collection)
    return format_success(doc)


@tool("get_document", GetDocumentInput)
async def get_document(db: JsonDBClient, args: GetDocumentInput) -> CallToolResult:
    """Read a single document by ID from a jsondb.cloud collection. Returns the full document including metadata fields (_id, $createdAt, $updatedAt, $version)."""
    try:
        doc = await db.collection(args.collection).get(args.id)
    except Exception as exc:
        return failure(GET_DOCUMENT_ERRORS, exc, "get_document", collection=args.collection, id=args.id)
    return format_success(doc)


@tool("list_documents", ListDocumentsInput)
async def list_documents(db: JsonDBClient, args: ListDocumentsInput) -> CallToolResult:
    """List documents in a jsondb.cloud collection with optional filtering, sorting, and pagination. Returns a paginated response with data array and metadata (total count, hasMore)."""
    try:
        result = await db.collection(args.collection).list(
            filter=args.filter,
            sort=args.sort,
            limit=args.limit,
            offset=args.offset,
            select=args.select,
        )
    except Exception as exc:
        return failure(LIST_DOCUMENTS_ERRORS, exc, "list_documents", collection=args.collection)
    return format_success(result)


@tool("update_document", UpdateDocumentInput)
async def update_document(db: JsonDBClient, args: UpdateDocumentInput) -> CallToolResult:
    """Replace a document entirely in a jsondb.cloud collection. The new data replaces all existing fields (except metadata). Use patch_document for partial updates."""
    try:
        doc = await db.collection(args.collection).update(args.id, args.data)
    except Exception as exc:
        return failure(UPDATE_DOCUMENT_ERRORS, exc, "update_document", collection=args.collection, id=args.id)
    return format_success(doc)


@tool("patch_document", PatchDocumentInput)
async def patch_document(db: JsonDBClient, args: PatchDocumentInput) -> CallToolResult:
    """Partially update a document in a jsondb.cloud collection using merge patch. Only the provided fields are updated; other fields remain unchanged. This is preferred over update_document when you only need to change a few fields."""
    try:
        doc = await db.collection(args.collection).patch(args.id, args.data)
    except Exception as exc:
        return failure(PATCH_DOCUMENT_ERRORS, exc, "patch_document", collection=args.collection, id=args.id)
    return format_success(doc)


@tool("delete_document", DeleteDocumentInput)
async def delete_document(db: JsonDBClient, args: DeleteDocumentInput) -> CallToolResult:
    """Delete a document by ID from a jsondb.cloud collection. This action is permanent and cannot be undone."""
    try:
        await db.collection(args.collection).delete(args.id)
    except Exception as exc:
        return failure(DELETE_DOCUMENT_ERRORS, exc, "delete_document", collection=args.collection, id=args.id)
    return format_success({"deleted": True, "_id": args.id, "collection": args.collection})


@tool("count_documents", CountDocumentsInput)
async def count_documents(db: JsonDBClient, args: CountDocumentsInput) -> CallToolResult:
    """Count documents in a jsondb.cloud collection, optionally filtered. Returns a single number. Use this instead of list_documents when you only need a count."""
    try:
        count = await db.collection(args.collection).count(args.filter)
    except Exception as exc:
        return failure(COUNT_DOCUMENTS_ERRORS, exc, "count_documents", collection=args.collection)
    return format_success({"collection": args.collection, "count": count})


@tool("json_patch_document", JsonPatchDocumentInput)
async def json_patch_document(db: JsonDBClient, args: JsonPatchDocumentInput) -> CallToolResult:
    """Apply RFC 6902 JSON Patch operations to a document. Supports op types: add, remove, replace, move, copy, test. Use patch_document for simple field merges; use this for precise structural mutations like array element updates."""
    operations = [op.to_wire() for op in args.operations]
    try:
        doc = await db.collection(args.collection).json_patch(args.id, operations)
    except Exception as exc:
        return failure(JSON_PATCH_ERRORS, exc, "json_patch_document", collection=args.collection, id=args.id)
    return format_success(doc)
