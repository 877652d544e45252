"""Collection-level tools: discovery, filtered search, bulk import and export."""

from mcp.types import CallToolResult

from jsondb_mcp.client import JsonDBClient, segment
from jsondb_mcp.errors import ErrorRule, ErrorTable
from jsondb_mcp.filters import compile_filters, filter_params
from jsondb_mcp.models import (
    ExportCollectionInput,
    ImportDocumentsInput,
    ListCollectionsInput,
    SearchDocumentsInput,
)
from jsondb_mcp.responses import format_success
from jsondb_mcp.tools.base import failure, tool

LIST_COLLECTIONS_ERRORS = ErrorTable(
    "LIST_COLLECTIONS_FAILED",
    "Failed to list collections.",
    "Verify that the JSONDB_API_KEY and JSONDB_PROJECT environment variables are set correctly.",
)

SEARCH_DOCUMENTS_ERRORS = ErrorTable(
    "SEARCH_FAILED",
    "Failed to search documents in collection '$collection'.",
    "Verify the collection name and filter syntax. Available operators: eq, neq, gt, gte, lt, lte, contains, in. Use list_collections to see available collections.",
)

IMPORT_DOCUMENTS_ERRORS = ErrorTable(
    "IMPORT_FAILED",
    "Failed to import documents into collection '$collection'.",
    "Verify each document is a valid JSON object. Check the import limits for your plan.",
    rules=(
        ErrorRule(
            413,
            "IMPORT_TOO_LARGE",
            "The import payload exceeds the maximum allowed size.",
            "Free plans support up to 1,000 documents (5 MB). Pro plans support up to 10,000 documents (50 MB). Try importing in smaller batches.",
        ),
        ErrorRule(
            409,
            "IMPORT_CONFLICT",
            "One or more documents conflict with existing IDs.",
            "Use onConflict: 'skip' to ignore duplicates or 'overwrite' to replace existing documents.",
            prefer_upstream=True,
        ),
    ),
)

EXPORT_COLLECTION_ERRORS = ErrorTable(
    "EXPORT_FAILED",
    "Failed to export collection '$collection'.",
    "Verify the collection name is correct. Use list_collections to see available collections.",
    rules=(
        ErrorRule(
            403,
            "EXPORT_LIMIT_EXCEEDED",
            "Export limit exceeded for your plan.",
            "Free plans support up to 1,000 documents per export. Upgrade to Pro for up to 100,000.",
        ),
    ),
)


def export_documents(payload) -> list:
    """Documents from an export payload: a bare array, or an object's ``data``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return payload.get("data") or []
    return []


@tool("list_collections", ListCollectionsInput)
async def list_collections(db: JsonDBClient, args: ListCollectionsInput) -> CallToolResult:
    """List all collections in the current jsondb.cloud project. Returns collection names that contain documents. Use this to discover what data is available before querying."""
    try:
        data = await db.list_collections()
    except Exception as exc:
        return failure(LIST_COLLECTIONS_ERRORS, exc, "list_collections")
    return format_success(data)


@tool("search_documents", SearchDocumentsInput)
async def search_documents(db: JsonDBClient, args: SearchDocumentsInput) -> CallToolResult:
    """Search for documents matching specific criteria. Supports equality, comparison operators (gt, gte, lt, lte), contains (case-insensitive substring), and in (value in list). Filters are combined with AND logic."""
    try:
        result = await db.collection(args.collection).list(
            filter=compile_filters(args.filters),
            sort=args.sort,
            limit=args.limit,
            offset=args.offset,
        )
    except Exception as exc:
        return failure(SEARCH_DOCUMENTS_ERRORS, exc, "search_documents", collection=args.collection)
    return format_success(result)


@tool("import_documents", ImportDocumentsInput)
async def import_documents(db: JsonDBClient, args: ImportDocumentsInput) -> CallToolResult:
    """Bulk import multiple documents into a jsondb.cloud collection at once. More efficient than creating documents one by one. Supports conflict resolution and custom ID field mapping."""
    params = {}
    if args.on_conflict:
        params["onConflict"] = args.on_conflict
    if args.id_field:
        params["idField"] = args.id_field
    try:
        data = await db.call(
            f"/{segment(args.collection)}/_import", "POST", args.documents, params=params
        )
    except Exception as exc:
        return failure(IMPORT_DOCUMENTS_ERRORS, exc, "import_documents", collection=args.collection)
    return format_success(data)


@tool("export_collection", ExportCollectionInput)
async def export_collection(db: JsonDBClient, args: ExportCollectionInput) -> CallToolResult:
    """Export all documents from a jsondb.cloud collection as a JSON array. Supports optional filtering to export a subset. Free plans support up to 1,000 documents, Pro plans up to 100,000."""
    try:
        data = await db.call(
            f"/{segment(args.collection)}/_export", params=filter_params(args.filter)
        )
    except Exception as exc:
        return failure(EXPORT_COLLECTION_ERRORS, exc, "export_collection", collection=args.collection)
    documents = export_documents(data)
    return format_success(
        {"collection": args.collection, "count": len(documents), "documents": documents}
    )
