"""
Schemas package containing all Pydantic models for the application.
"""

# Common schemas
from .common import (
    ErrorResponse,
    StatusResponse
)

# Prompt schemas
from .prompt import (
    PromptMetadataFields,
    PromptCreate,
    PromptUpdate,
    PromptMetadataUpdate,
    PromptMetadataInDB,
    PromptInDB,
    PromptMetadata,
    PromptResponse
)

from .mapping import (
    now_timestamp,
    prompt_from_create,
    prompt_to_response,
    metadata_from_update
)

__all__ = [
    # Common schemas
    "ErrorResponse",
    "StatusResponse",

    # Prompt schemas
    "PromptMetadataFields",
    "PromptCreate",
    "PromptUpdate",
    "PromptMetadataUpdate",
    "PromptMetadataInDB",
    "PromptInDB",
    "PromptMetadata",
    "PromptResponse",

    # Mapping
    "now_timestamp",
    "prompt_from_create",
    "prompt_to_response",
    "metadata_from_update"
]
