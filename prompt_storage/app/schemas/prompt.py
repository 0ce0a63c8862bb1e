from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List

from ..models import TAG_SEPARATOR


def _check_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    # tags are persisted comma-joined; an empty or comma-bearing tag would not survive a read
    if tags is not None:
        for tag in tags:
            if not tag:
                raise ValueError("Tags must not be empty")
            if TAG_SEPARATOR in tag:
                raise ValueError(f"Tag {tag!r} must not contain '{TAG_SEPARATOR}'")
    return tags


class PromptMetadataFields(BaseModel):
    name: Optional[str] = Field(None, description="The name of the prompt")
    description: Optional[str] = Field(None, description="The description of the prompt")
    category: Optional[str] = Field(None, description="The category of the prompt, e.g. react, typescript")
    tags: Optional[List[str]] = Field(None, description="The tags of the prompt")

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_tags(v)


class PromptCreate(PromptMetadataFields):
    """Request body for creating a prompt"""
    content: str = Field(..., description="The content of the prompt")
    parent: Optional[str] = Field(
        None,
        description="The parent of the prompt. Leave empty for a new prompt with no lineage."
    )
    branched: Optional[bool] = Field(None, description="Whether the prompt is being branched")

    def has_metadata(self) -> bool:
        return any(
            value is not None
            for value in (self.name, self.description, self.category, self.tags)
        )


class PromptUpdate(BaseModel):
    """Request body for appending a new version to a lineage"""
    id: str = Field(..., description="The lineage (parent) id to add a version to")
    content: str = Field(..., description="The content of the new version")
    branched: Optional[bool] = Field(None, description="Whether the new version is a branch")


class PromptMetadataUpdate(PromptMetadataFields):
    """Request body for replacing a prompt's metadata. Omitted fields are cleared."""
    id: str = Field(..., description="The id of the prompt")


class PromptMetadataInDB(PromptMetadataFields):
    id: str
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class PromptInDB(BaseModel):
    id: str
    version: int
    content: str
    parent: str
    branched: Optional[bool] = None
    archived: Optional[bool] = None
    created_at: int
    metadata: Optional[PromptMetadataInDB] = None

    model_config = ConfigDict(from_attributes=True)


class PromptMetadata(PromptMetadataFields):
    """Metadata as returned to clients"""
    pass


class PromptResponse(BaseModel):
    """Prompt model for API responses"""
    id: str = Field(..., description="The id of the prompt")
    content: str = Field(..., description="The content of the prompt")
    version: int = Field(..., description="The version of the prompt")
    parent: str = Field(..., description="The parent of the prompt")
    branched: Optional[bool] = Field(None, description="Whether the prompt is branched")
    archived: Optional[bool] = Field(None, description="Whether the prompt is archived")
    created_at: int = Field(..., description="Creation time as a Unix timestamp")
    metadata: Optional[PromptMetadata] = Field(None, description="The metadata of the prompt")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "3f6c2a0e-8d6b-4f0e-9a55-0c1b2d3e4f5a",
            "content": "You are a senior React reviewer...",
            "version": 1,
            "parent": "3f6c2a0e-8d6b-4f0e-9a55-0c1b2d3e4f5a",
            "branched": False,
            "archived": False,
            "created_at": 1735689600,
            "metadata": {
                "name": "react-review",
                "description": "Code review prompt for React components",
                "category": "react",
                "tags": ["react", "review"]
            }
        }
    })
