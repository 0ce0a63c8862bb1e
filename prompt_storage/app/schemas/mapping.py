"""
Conversions between wire-level request/response shapes and stored records.
"""
import time
import uuid

from .prompt import (
    PromptCreate,
    PromptInDB,
    PromptMetadata,
    PromptMetadataInDB,
    PromptMetadataUpdate,
    PromptResponse,
)


def now_timestamp() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


def new_prompt_id() -> str:
    return str(uuid.uuid4())


def prompt_from_create(request: PromptCreate) -> PromptInDB:
    """
    Build the first revision of a prompt from a create request.

    A prompt created without a parent becomes the root of its own lineage.
    Metadata is attached only when at least one metadata field was supplied.
    """
    prompt_id = new_prompt_id()
    now = now_timestamp()

    metadata = None
    if request.has_metadata():
        metadata = PromptMetadataInDB(
            id=prompt_id,
            name=request.name,
            description=request.description,
            category=request.category,
            tags=request.tags,
            updated_at=now,
        )

    return PromptInDB(
        id=prompt_id,
        version=1,
        content=request.content,
        parent=request.parent if request.parent is not None else prompt_id,
        branched=request.branched,
        archived=False,
        created_at=now,
        metadata=metadata,
    )


def prompt_to_response(prompt: PromptInDB) -> PromptResponse:
    """Convert a stored record to its response shape."""
    metadata = None
    if prompt.metadata is not None:
        metadata = PromptMetadata(
            name=prompt.metadata.name,
            description=prompt.metadata.description,
            category=prompt.metadata.category,
            tags=prompt.metadata.tags,
        )
    return PromptResponse(
        id=prompt.id,
        content=prompt.content,
        version=prompt.version,
        parent=prompt.parent,
        branched=prompt.branched,
        archived=prompt.archived,
        created_at=prompt.created_at,
        metadata=metadata,
    )


def metadata_from_update(request: PromptMetadataUpdate) -> PromptMetadataInDB:
    return PromptMetadataInDB(
        id=request.id,
        name=request.name,
        description=request.description,
        category=request.category,
        tags=request.tags,
        updated_at=now_timestamp(),
    )
