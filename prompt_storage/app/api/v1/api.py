from fastapi import APIRouter, Body, Depends, Path, Query, Response, status
from fastapi.responses import PlainTextResponse
from typing import List, Optional

from ...core.logger import get_logger
from ...crud import PromptStore
from ... import schemas
from .deps import get_store
from . import errors

# Initialize logger
logger = get_logger(__name__)

router = APIRouter(
    tags=["Prompts"],
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": schemas.ErrorResponse,
            "description": "Internal server error"
        },
    },
)


# ======================
# Write Endpoints
# ======================

@router.post(
    "/prompt",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
    summary="Create a prompt",
    response_description="The id of the created prompt",
    responses={
        201: {"description": "Successfully created prompt"},
        400: {"model": schemas.ErrorResponse, "description": "Invalid request body"},
    }
)
def create_prompt(
    prompt_in: schemas.PromptCreate = Body(
        ...,
        examples=[{
            "content": "You are a senior React reviewer...",
            "name": "react-review",
            "description": "Code review prompt for React components",
            "category": "react",
            "tags": ["react", "review"]
        }]
    ),
    store: PromptStore = Depends(get_store),
) -> str:
    """
    Create a new prompt.

    - **content**: The prompt text
    - **parent**: Optional lineage id; omitted for a brand new prompt
    - **branched**: Whether this prompt forks another lineage
    - **name**, **description**, **category**, **tags**: Optional metadata

    Metadata is stored only if at least one metadata field is given.
    """
    prompt = store.insert_prompt(schemas.prompt_from_create(prompt_in))
    logger.info(f"Successfully created prompt {prompt.id} (parent: {prompt.parent})")
    return prompt.id


@router.put(
    "/prompt",
    response_class=PlainTextResponse,
    summary="Add a new version to a prompt lineage",
    response_description="The id of the new version",
    responses={
        200: {"description": "Successfully created new version"},
        400: {"model": schemas.ErrorResponse, "description": "Invalid request body"},
        404: {"model": schemas.ErrorResponse, "description": "Prompt lineage not found"},
    }
)
def update_prompt(
    prompt_in: schemas.PromptUpdate,
    store: PromptStore = Depends(get_store),
) -> str:
    """
    Store new content as the next version of the lineage identified by **id**.

    Existing versions are never modified.
    """
    logger.info(f"Updating prompt: {prompt_in.id}")
    prompt = store.update_prompt(prompt_in.id, prompt_in.content, prompt_in.branched)
    logger.info(f"Created version {prompt.version} of {prompt.parent} (ID: {prompt.id})")
    return prompt.id


@router.put(
    "/prompt/metadata",
    response_class=PlainTextResponse,
    summary="Update prompt metadata",
    response_description="The id of the updated prompt",
    responses={
        200: {"description": "Successfully updated prompt metadata"},
        400: {"model": schemas.ErrorResponse, "description": "Invalid request body"},
        404: {"model": schemas.ErrorResponse, "description": "Prompt not found"},
    }
)
def update_prompt_metadata(
    metadata_in: schemas.PromptMetadataUpdate,
    store: PromptStore = Depends(get_store),
) -> str:
    """
    Replace the metadata of an existing prompt.

    Every field is overwritten; omitted fields are cleared. Prompts created
    without metadata have nothing to update and return 404.
    """
    logger.info(f"Updating metadata for prompt: {metadata_in.id}")
    return store.update_prompt_metadata(
        metadata_in.id, schemas.metadata_from_update(metadata_in)
    )


@router.delete(
    "/prompt/{prompt_id}",
    summary="Archive a prompt",
    responses={
        200: {"description": "Successfully deleted prompt"},
        404: {"model": schemas.ErrorResponse, "description": "Prompt does not exist"},
    }
)
def delete_prompt(
    prompt_id: str = Path(..., description="Prompt identifier"),
    store: PromptStore = Depends(get_store),
) -> Response:
    """
    Soft delete a prompt by marking it as archived. Its row stays queryable.
    """
    if not store.delete_prompt(prompt_id):
        logger.warning(f"Prompt with ID {prompt_id} not found for deletion")
        raise errors.PromptNotFoundError()
    logger.info(f"Archived prompt {prompt_id}")
    return Response(status_code=status.HTTP_200_OK)


# ======================
# Read Endpoints
# ======================

@router.get(
    "/prompt/categories",
    response_model=List[str],
    summary="List prompt categories",
    response_description="Distinct categories in use",
)
def get_prompt_categories(store: PromptStore = Depends(get_store)) -> List[str]:
    """Return every distinct category assigned to a prompt."""
    return store.get_prompt_categories()


@router.get(
    "/prompt/{prompt_id}",
    response_model=schemas.PromptResponse,
    summary="Get a prompt by ID",
    response_description="The requested prompt",
    responses={
        200: {"description": "Successfully retrieved prompt"},
        404: {"model": schemas.ErrorResponse, "description": "Prompt not found"},
    }
)
def read_prompt(
    prompt_id: str = Path(..., description="Prompt identifier"),
    metadata: bool = Query(False, description="Whether to include metadata in the response"),
    store: PromptStore = Depends(get_store),
) -> schemas.PromptResponse:
    """
    Retrieve a prompt by its identifier, with its metadata when **metadata=true**.
    """
    logger.info(f"Requested prompt with id: {prompt_id}")
    prompt = store.get_prompt(prompt_id, include_metadata=metadata)
    if prompt is None:
        logger.warning(f"Prompt with ID {prompt_id} not found")
        raise errors.PromptNotFoundError()
    return schemas.prompt_to_response(prompt)


@router.get(
    "/prompt/{prompt_id}/content",
    response_model=str,
    summary="Get prompt content",
    response_description="The prompt content",
    responses={
        200: {"description": "Successfully retrieved prompt content"},
        404: {"model": schemas.ErrorResponse, "description": "Prompt not found"},
    }
)
def read_prompt_content(
    prompt_id: str = Path(..., description="Prompt identifier"),
    latest: bool = Query(False, description="Return the latest version of the prompt lineage"),
    store: PromptStore = Depends(get_store),
) -> str:
    """
    Retrieve only the content of a prompt.

    With **latest=true** the id is treated as a lineage root and the content
    of its highest version is returned.
    """
    logger.info(f"Requested content of prompt with id: {prompt_id} (latest={latest})")
    if latest:
        return store.get_prompt_content_latest_version(prompt_id)
    return store.get_prompt_content(prompt_id)


@router.get(
    "/prompt/{prompt_id}/versions",
    response_model=List[schemas.PromptResponse],
    summary="List all versions of a prompt",
    response_description="Every version in the lineage, oldest first",
)
def list_prompt_versions(
    prompt_id: str = Path(..., description="Lineage root identifier"),
    store: PromptStore = Depends(get_store),
) -> List[schemas.PromptResponse]:
    """
    List every version whose parent is **prompt_id**, archived ones included.
    """
    versions = store.get_prompt_versions(prompt_id)
    logger.info(f"Found {len(versions)} versions for prompt: {prompt_id}")
    return [schemas.prompt_to_response(prompt) for prompt in versions]


@router.get(
    "/prompts",
    response_model=List[schemas.PromptResponse],
    summary="List prompts with pagination",
    response_description="A page of prompts",
    responses={
        200: {"description": "Successfully retrieved prompts"},
        400: {"model": schemas.ErrorResponse, "description": "Invalid pagination parameters"},
    }
)
def list_prompts(
    category: Optional[str] = Query(None, description="The category of the prompts to return"),
    offset: int = Query(0, description="The pagination offset to start from (0-based)"),
    limit: int = Query(10, description="The number of prompts to return"),
    store: PromptStore = Depends(get_store),
) -> List[schemas.PromptResponse]:
    """
    List prompts, optionally filtered by exact **category**.

    Order is not guaranteed to be stable between calls.
    """
    logger.info(f"Requested prompts with params: category={category}, offset={offset}, limit={limit}")
    prompts = store.get_prompts(category=category, offset=offset, limit=limit)
    return [schemas.prompt_to_response(prompt) for prompt in prompts]
