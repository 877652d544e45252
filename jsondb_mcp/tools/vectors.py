"""Vector / semantic search tools."""

from mcp.types import CallToolResult

from jsondb_mcp.client import JsonDBClient, segment
from jsondb_mcp.errors import ErrorRule, ErrorTable
from jsondb_mcp.models import SemanticSearchInput, StoreWithEmbeddingInput
from jsondb_mcp.responses import format_success
from jsondb_mcp.tools.base import failure, tool
from jsondb_mcp.tools.documents import TOO_LARGE

EMBED_DIRECTIVE = "$embed"

SEMANTIC_SEARCH_ERRORS = ErrorTable(
    "SEARCH_FAILED",
    "Failed to search collection '$collection'.",
    "Verify the collection name and that documents have been stored with embeddings.",
    rules=(
        ErrorRule(
            404,
            "COLLECTION_NOT_FOUND",
            "Collection '$collection' not found or has no embeddings.",
            "Ensure the collection exists and documents were stored with store_with_embedding. Use list_collections to see available collections.",
        ),
        ErrorRule(
            400,
            "INVALID_SEARCH",
            "Invalid search request for collection '$collection'.",
            "Check that the query is a non-empty string and threshold is between 0 and 1.",
            prefer_upstream=True,
        ),
        ErrorRule(
            403,
            "SEARCH_NOT_AVAILABLE",
            "Semantic search is not available on your current plan.",
            "Upgrade your plan at https://jsondb.cloud/dashboard/billing to enable vector search.",
            prefer_upstream=True,
        ),
    ),
)

STORE_WITH_EMBEDDING_ERRORS = ErrorTable(
    "STORE_EMBEDDING_FAILED",
    "Failed to store document with embedding in collection '$collection'.",
    "Check that the collection name is valid, the data is a valid JSON object, and the embed_field references an existing text field.",
    rules=(
        ErrorRule(
            400,
            "VALIDATION_ERROR",
            "The document failed validation for collection '$collection'.",
            "Ensure the embed_field '$embed_field' exists in your data and contains text content suitable for embedding.",
            prefer_upstream=True,
        ),
        TOO_LARGE,
        ErrorRule(
            403,
            "EMBEDDING_NOT_AVAILABLE",
            "Embedding generation is not available on your current plan.",
            "Upgrade your plan at https://jsondb.cloud/dashboard/billing to enable automatic embeddings.",
            prefer_upstream=True,
        ),
    ),
)


@tool("semantic_search", SemanticSearchInput)
async def semantic_search(db: JsonDBClient, args: SemanticSearchInput) -> CallToolResult:
    """Search documents using natural language semantic similarity. Returns ranked results with relevance scores. Requires documents to have been stored with embeddings."""
    body = {"query": args.query}
    if args.limit is not None:
        body["limit"] = args.limit
    if args.threshold is not None:
        body["threshold"] = args.threshold
    if args.filter is not None:
        body["filter"] = args.filter
    try:
        data = await db.call(f"/{segment(args.collection)}/_search", "POST", body)
    except Exception as exc:
        return failure(SEMANTIC_SEARCH_ERRORS, exc, "semantic_search", collection=args.collection)
    return format_success(data)


@tool("store_with_embedding", StoreWithEmbeddingInput)
async def store_with_embedding(db: JsonDBClient, args: StoreWithEmbeddingInput) -> CallToolResult:
    """Store a document and automatically generate a vector embedding for semantic search. The embed_field specifies which field's text content should be embedded."""
    payload = {**args.data, EMBED_DIRECTIVE: args.embed_field}
    path = f"/{segment(args.collection)}"
    try:
        if args.id:
            data = await db.call(f"{path}/{segment(args.id)}", "PUT", payload)
        else:
            data = await db.call(path, "POST", payload)
    except Exception as exc:
        return failure(
            STORE_WITH_EMBEDDING_ERRORS, exc, "store_with_embedding",
            collection=args.collection, embed_field=args.embed_field,
        )
    return format_success(data)
