"""Document version history tools."""

from mcp.types import CallToolResult

from jsondb_mcp.client import JsonDBClient, segment
from jsondb_mcp.errors import ErrorRule, ErrorTable
from jsondb_mcp.models import (
    DiffVersionsInput,
    GetVersionInput,
    ListVersionsInput,
    RestoreVersionInput,
)
from jsondb_mcp.responses import format_success
from jsondb_mcp.tools.base import failure, tool

VERIFY_VERSION = "Verify the collection, document ID, and version number are correct."
VERSION_NOT_FOUND = ErrorRule(
    404,
    "VERSION_NOT_FOUND",
    "Version $version of document '$id' not found in collection '$collection'.",
    "Use list_versions({ collection: '$collection', id: '$id' }) to see available versions.",
)

LIST_VERSIONS_ERRORS = ErrorTable(
    "LIST_VERSIONS_FAILED",
    "Failed to list versions for document '$id'.",
    "Verify the collection and document ID are correct.",
    rules=(
        ErrorRule(
            404,
            "DOCUMENT_NOT_FOUND",
            "Document '$id' not found in collection '$collection'.",
            "Use list_documents({ collection: '$collection' }) to see available documents.",
        ),
    ),
)

GET_VERSION_ERRORS = ErrorTable(
    "GET_VERSION_FAILED",
    "Failed to get version $version of document '$id'.",
    VERIFY_VERSION,
    rules=(VERSION_NOT_FOUND,),
)

RESTORE_VERSION_ERRORS = ErrorTable(
    "RESTORE_VERSION_FAILED",
    "Failed to restore document '$id' to version $version.",
    VERIFY_VERSION,
    rules=(
        VERSION_NOT_FOUND,
        ErrorRule(
            400,
            "VALIDATION_ERROR",
            "The restored document failed schema validation.",
            "The historical version may not match the current schema. Use get_schema({ collection: '$collection' }) to review.",
            prefer_upstream=True,
        ),
    ),
)

DIFF_VERSIONS_ERRORS = ErrorTable(
    "DIFF_VERSIONS_FAILED",
    "Failed to diff versions $from and $to of document '$id'.",
    "Verify the collection, document ID, and both version numbers are correct.",
    rules=(
        ErrorRule(
            403,
            "PRO_FEATURE",
            "Version diff is a Pro plan feature.",
            "Upgrade to Pro at https://jsondb.cloud/dashboard/billing to enable version diffs.",
        ),
        ErrorRule(
            404,
            "VERSION_NOT_FOUND",
            "One or both versions ($from, $to) not found for document '$id'.",
            "Use list_versions({ collection: '$collection', id: '$id' }) to see available version numbers.",
        ),
    ),
)


def versions_path(collection: str, doc_id: str) -> str:
    return f"/{segment(collection)}/{segment(doc_id)}/versions"


@tool("list_versions", ListVersionsInput)
async def list_versions(db: JsonDBClient, args: ListVersionsInput) -> CallToolResult:
    """List all stored versions of a document. Returns version numbers, timestamps, and size. Version history depth depends on plan (Free: 5, Pro: 50)."""
    try:
        data = await db.call(versions_path(args.collection, args.id))
    except Exception as exc:
        return failure(LIST_VERSIONS_ERRORS, exc, "list_versions", collection=args.collection, id=args.id)
    return format_success(data)


@tool("get_version", GetVersionInput)
async def get_version(db: JsonDBClient, args: GetVersionInput) -> CallToolResult:
    """Retrieve the document as it existed at a specific version number. Returns the full document snapshot at that version."""
    try:
        data = await db.call(f"{versions_path(args.collection, args.id)}/{args.version}")
    except Exception as exc:
        return failure(
            GET_VERSION_ERRORS, exc, "get_version",
            collection=args.collection, id=args.id, version=args.version,
        )
    return format_success(data)


@tool("restore_version", RestoreVersionInput)
async def restore_version(db: JsonDBClient, args: RestoreVersionInput) -> CallToolResult:
    """Restore a document to a previous version. The current document is overwritten with the historical snapshot. Creates a new version entry. This action cannot be undone."""
    try:
        data = await db.call(
            f"{versions_path(args.collection, args.id)}/{args.version}/restore", "POST"
        )
    except Exception as exc:
        return failure(
            RESTORE_VERSION_ERRORS, exc, "restore_version",
            collection=args.collection, id=args.id, version=args.version,
        )
    return format_success(data)


@tool("diff_versions", DiffVersionsInput)
async def diff_versions(db: JsonDBClient, args: DiffVersionsInput) -> CallToolResult:
    """Compare two versions of a document and return a structured diff showing added, removed, and changed fields. Pro plan feature only."""
    params = {"from": str(args.from_), "to": str(args.to)}
    try:
        data = await db.call(f"{versions_path(args.collection, args.id)}/diff", params=params)
    except Exception as exc:
        return failure(
            DIFF_VERSIONS_ERRORS, exc, "diff_versions",
            collection=args.collection, id=args.id, **params,
        )
    return format_success(data)
