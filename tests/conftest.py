"""Shared fixtures: a prompt store on a temporary database file and an API client bound to it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

import pytest
from fastapi.testclient import TestClient

from prompt_storage.app.api.v1.deps import get_store
from prompt_storage.app.crud import PromptStore
from prompt_storage.app.main import app
from prompt_storage.app.schemas import PromptInDB, PromptMetadataInDB, now_timestamp

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def store(tmp_path: Path) -> Iterator[PromptStore]:
    prompt_store = PromptStore(tmp_path / "test.db", pool_size=4)
    yield prompt_store
    prompt_store.close()


@pytest.fixture
def client(store: PromptStore) -> Iterator[TestClient]:
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _build_prompt(
    prompt_id: str,
    content: str = "Hello, world!",
    version: int = 1,
    parent: str | None = None,
    category: str | None = None,
    name: str | None = None,
    tags: list[str] | None = None,
    with_metadata: bool = False,
) -> PromptInDB:
    """Build a stored-shape prompt with an explicit id, as the store tests need."""
    now = now_timestamp()
    metadata = None
    if with_metadata or category is not None or name is not None or tags is not None:
        metadata = PromptMetadataInDB(
            id=prompt_id,
            name=name,
            description=None,
            category=category,
            tags=tags,
            updated_at=now,
        )
    return PromptInDB(
        id=prompt_id,
        version=version,
        content=content,
        parent=parent or prompt_id,
        branched=False,
        archived=False,
        created_at=now,
        metadata=metadata,
    )


@pytest.fixture
def make_prompt():
    return _build_prompt
