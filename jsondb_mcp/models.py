"""Pydantic input models for the jsondb.cloud MCP tools.

Each tool validates its arguments against one of these models, and the
model's JSON Schema (by alias) is what MCP clients see as the tool's
input schema.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

FilterOperator = Literal["eq", "neq", "gt", "gte", "lt", "lte", "contains", "in", "exists"]
PatchOp = Literal["add", "remove", "replace", "move", "copy", "test"]
ConflictMode = Literal["fail", "skip", "overwrite"]
WebhookEvent = Literal["document.created", "document.updated", "document.deleted"]
WebhookStatus = Literal["active", "disabled"]

_URL = TypeAdapter(AnyUrl)


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is not None:
        _URL.validate_python(value)
    return value


# --- Base Config ---

class ToolInput(BaseModel):
    """Base for tool arguments. Unknown keys are dropped, aliases accepted."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CollectionInput(ToolInput):
    collection: str = Field(..., description="The collection name")


class DocumentRef(CollectionInput):
    id: str = Field(..., description="The document ID")


# --- Documents ---

class CreateDocumentInput(ToolInput):
    collection: str = Field(
        ..., description="The collection name (e.g., 'users', 'posts', 'settings')"
    )
    data: Dict[str, Any] = Field(
        ..., description="The JSON document to store. Can contain any valid JSON."
    )
    id: Optional[str] = Field(
        default=None,
        description="Optional custom document ID. If not provided, an ID is auto-generated.",
    )


class GetDocumentInput(CollectionInput):
    id: str = Field(..., description="The document ID to retrieve")


class ListDocumentsInput(CollectionInput):
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description=(
            "Filter criteria. Keys are field names, values are match values. "
            "Use {field: {$gt: N}} for comparisons."
        ),
    )
    sort: Optional[str] = Field(
        default=None,
        description="Field to sort by. Prefix with '-' for descending (e.g., '-$createdAt')",
    )
    limit: Optional[int] = Field(
        default=None, description="Max documents to return (default: 20, max: 100)"
    )
    offset: Optional[int] = Field(
        default=None, description="Number of documents to skip for pagination"
    )
    select: Optional[List[str]] = Field(
        default=None,
        description=(
            "Field names to return. Omit to return all fields. "
            "Example: ['name', 'email', '$createdAt']"
        ),
    )


class UpdateDocumentInput(CollectionInput):
    id: str = Field(..., description="The document ID to replace")
    data: Dict[str, Any] = Field(
        ...,
        description="The complete new document data. This replaces all existing fields.",
    )


class PatchDocumentInput(CollectionInput):
    id: str = Field(..., description="The document ID to patch")
    data: Dict[str, Any] = Field(
        ...,
        description=(
            "The fields to update. Only these fields are modified; "
            "other existing fields are preserved."
        ),
    )


class DeleteDocumentInput(CollectionInput):
    id: str = Field(..., description="The document ID to delete")


class CountDocumentsInput(CollectionInput):
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description=(
            "Filter criteria. Same format as list_documents. "
            "Only matching documents are counted."
        ),
    )


class PatchOperation(ToolInput):
    """One RFC 6902 operation."""
    op: PatchOp = Field(..., description="Patch operation type")
    path: str = Field(..., description="JSON Pointer path (e.g., '/name', '/tags/0')")
    value: Optional[Any] = Field(
        default=None, description="Value for add/replace/test operations"
    )
    from_: Optional[str] = Field(
        default=None, alias="from", description="Source path for move/copy operations"
    )

    def to_wire(self) -> dict:
        # exclude_unset keeps an explicit null value, drops absent keys
        return self.model_dump(by_alias=True, exclude_unset=True)


class JsonPatchDocumentInput(CollectionInput):
    id: str = Field(..., description="The document ID to patch")
    operations: List[PatchOperation] = Field(
        ..., description="Array of JSON Patch operations to apply in order"
    )


# --- Collections ---

class ListCollectionsInput(ToolInput):
    pass


class FilterCondition(ToolInput):
    field: str = Field(
        ..., description="Field path (supports dot notation for nested fields)"
    )
    operator: FilterOperator = Field(..., description="Comparison operator")
    value: Any = Field(default=None, description="Value to compare against")


class SearchDocumentsInput(CollectionInput):
    filters: List[FilterCondition] = Field(
        ..., description="Array of filter conditions (combined with AND logic)"
    )
    sort: Optional[str] = Field(
        default=None,
        description="Field to sort by. Prefix with '-' for descending (e.g., '-$createdAt')",
    )
    limit: Optional[int] = Field(
        default=None, description="Max documents to return (default: 20, max: 100)"
    )
    offset: Optional[int] = Field(
        default=None, description="Number of documents to skip for pagination"
    )


class ImportDocumentsInput(ToolInput):
    collection: str = Field(..., description="The collection name to import into")
    documents: List[Dict[str, Any]] = Field(
        ..., description="Array of JSON documents to import"
    )
    on_conflict: Optional[ConflictMode] = Field(
        default=None,
        alias="onConflict",
        description=(
            "How to handle ID conflicts: 'fail' (default) rejects the batch, "
            "'skip' ignores duplicates, 'overwrite' replaces existing documents"
        ),
    )
    id_field: Optional[str] = Field(
        default=None,
        alias="idField",
        description="Field in each document to use as _id. If omitted, IDs are auto-generated.",
    )


class ExportCollectionInput(ToolInput):
    collection: str = Field(..., description="The collection name to export")
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description=(
            "Optional filter to export only matching documents. "
            "Same format as list_documents filter."
        ),
    )


# --- Schemas ---

class GetSchemaInput(ToolInput):
    collection: str = Field(..., description="The collection name to get the schema for")


class SetSchemaInput(ToolInput):
    collection: str = Field(..., description="The collection name to set the schema for")
    schema_: Dict[str, Any] = Field(
        ...,
        alias="schema",
        description=(
            "The JSON Schema object. Example: { type: 'object', required: ['name'], "
            "properties: { name: { type: 'string' }, age: { type: 'number', minimum: 0 } } }"
        ),
    )


class RemoveSchemaInput(ToolInput):
    collection: str = Field(
        ..., description="The collection name to remove the schema from"
    )


class ValidateDocumentInput(ToolInput):
    collection: str = Field(
        ..., description="The collection name whose schema to validate against"
    )
    data: Dict[str, Any] = Field(..., description="The document to validate")


# --- Versions ---

class ListVersionsInput(DocumentRef):
    pass


class GetVersionInput(DocumentRef):
    version: int = Field(
        ..., gt=0, description="The version number to retrieve (from list_versions)"
    )


class RestoreVersionInput(DocumentRef):
    version: int = Field(
        ..., gt=0, description="The version number to restore to (from list_versions)"
    )


class DiffVersionsInput(DocumentRef):
    from_: int = Field(
        ..., gt=0, alias="from", description="The base version number (older version)"
    )
    to: int = Field(..., gt=0, description="The target version number (newer version)")


# --- Webhooks ---

class CreateWebhookInput(ToolInput):
    collection: str = Field(..., description="The collection name to watch")
    url: str = Field(
        ...,
        description="The HTTPS URL to deliver webhook events to",
        json_schema_extra={"format": "uri"},
    )
    events: List[WebhookEvent] = Field(
        ...,
        description=(
            "Events to subscribe to: 'document.created', 'document.updated', "
            "'document.deleted'"
        ),
    )
    description: Optional[str] = Field(
        default=None, description="Optional human-readable label for this webhook"
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class WebhookRef(CollectionInput):
    webhook_id: str = Field(
        ...,
        alias="webhookId",
        description="The webhook ID (from list_webhooks or create_webhook)",
    )


class UpdateWebhookInput(WebhookRef):
    url: Optional[str] = Field(
        default=None, description="New delivery URL", json_schema_extra={"format": "uri"}
    )
    events: Optional[List[WebhookEvent]] = Field(
        default=None, description="New event subscriptions (replaces existing list)"
    )
    description: Optional[str] = Field(default=None, description="New description")
    status: Optional[WebhookStatus] = Field(
        default=None,
        description="Set to 'disabled' to pause delivery, 'active' to resume",
    )

    @field_validator("url", "events", "description", "status", mode="before")
    @classmethod
    def reject_null(cls, v):
        # omitted means unchanged; an explicit null is not a value
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)

    def changes(self) -> dict:
        """Only the fields the caller actually supplied."""
        return self.model_dump(
            include={"url", "events", "description", "status"}, exclude_unset=True
        )


# --- Vectors ---

class SemanticSearchInput(ToolInput):
    collection: str = Field(..., description="Collection to search in")
    query: str = Field(..., description="Natural language search query")
    limit: Optional[int] = Field(
        default=None, ge=1, le=100, description="Max results to return"
    )
    threshold: Optional[float] = Field(
        default=None, ge=0, le=1, description="Minimum similarity score (0-1)"
    )
    filter: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional filter criteria"
    )


class StoreWithEmbeddingInput(ToolInput):
    collection: str = Field(..., description="Collection to store in")
    data: Dict[str, Any] = Field(..., description="Document data to store")
    embed_field: str = Field(
        ..., description="Field name whose content will be embedded for search"
    )
    id: Optional[str] = Field(default=None, description="Optional custom document ID")
