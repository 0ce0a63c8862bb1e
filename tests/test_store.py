"""Tests for the prompt store against a real SQLite file."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from prompt_storage.app.crud import (
    InvalidRequestError,
    NotFoundError,
    PoolError,
    PromptStore,
    UnhandledError,
)
from prompt_storage.app.schemas import (
    PromptCreate,
    PromptMetadataInDB,
    now_timestamp,
    prompt_from_create,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_connections_use_wal_and_busy_timeout(store: PromptStore) -> None:
    with store.engine.connect() as conn:
        journal_mode = conn.exec_driver_sql("PRAGMA journal_mode").scalar()
        busy_timeout = conn.exec_driver_sql("PRAGMA busy_timeout").scalar()

    assert journal_mode.lower() == "wal"
    assert busy_timeout == 30000


def test_insert_created_prompt_is_first_version_of_own_lineage(store: PromptStore) -> None:
    prompt = store.insert_prompt(prompt_from_create(PromptCreate(content="Hello, world!")))

    stored = store.get_prompt(prompt.id)
    assert stored is not None
    assert stored.version == 1
    assert stored.archived is False
    assert stored.parent == stored.id
    assert stored.metadata is None


def test_get_prompt_missing_returns_none(store: PromptStore) -> None:
    assert store.get_prompt("missing") is None
    assert store.get_prompt("missing", include_metadata=True) is None


def test_get_prompt_with_metadata(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(
        make_prompt("test_id", name="Test Name", category="test", tags=["tag1", "tag2"])
    )

    with_metadata = store.get_prompt("test_id", include_metadata=True)
    assert with_metadata is not None
    assert with_metadata.metadata is not None
    assert with_metadata.metadata.name == "Test Name"
    assert with_metadata.metadata.category == "test"
    assert with_metadata.metadata.tags == ["tag1", "tag2"]

    without_metadata = store.get_prompt("test_id", include_metadata=False)
    assert without_metadata is not None
    assert without_metadata.metadata is None


def test_get_prompt_with_metadata_when_none_stored(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("bare"))

    prompt = store.get_prompt("bare", include_metadata=True)

    assert prompt is not None
    assert prompt.metadata is None


def test_empty_tag_list_round_trips(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("empty_tags", tags=[]))

    prompt = store.get_prompt("empty_tags", include_metadata=True)

    assert prompt.metadata.tags == []


def test_empty_tag_cannot_reach_the_store(store: PromptStore, make_prompt) -> None:
    with pytest.raises(ValidationError):
        make_prompt("blank_tag", tags=[""])

    assert store.get_prompt("blank_tag") is None


def test_tags_round_trip_in_order(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("ordered", tags=["b", "a", "c"]))

    assert store.get_prompt("ordered", include_metadata=True).metadata.tags == ["b", "a", "c"]


def test_duplicate_id_is_unhandled_error(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("dup"))

    with pytest.raises(UnhandledError):
        store.insert_prompt(make_prompt("dup", content="again"))

    assert store.get_prompt_content("dup") == "Hello, world!"


def test_latest_version_follows_lineage(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("123", content="Hello, world!"))
    store.insert_prompt(make_prompt("1234", content="updated content", version=2, parent="123"))

    assert store.get_prompt_content_latest_version("123") == "updated content"
    assert store.get_prompt_content("1234") == "updated content"
    assert store.get_prompt_content("123") == "Hello, world!"


def test_content_reads_raise_not_found(store: PromptStore) -> None:
    with pytest.raises(NotFoundError):
        store.get_prompt_content("missing")
    with pytest.raises(NotFoundError):
        store.get_prompt_content_latest_version("missing")


def test_update_prompt_appends_next_version(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("root", content="v1"))

    second = store.update_prompt("root", "v2")
    third = store.update_prompt("root", "v3", branched=True)

    assert (second.version, third.version) == (2, 3)
    assert second.parent == third.parent == "root"
    assert third.branched is True
    assert second.archived is False
    assert store.get_prompt_content_latest_version("root") == "v3"
    assert store.get_prompt_content("root") == "v1"


def test_update_prompt_unknown_lineage(store: PromptStore) -> None:
    with pytest.raises(NotFoundError):
        store.update_prompt("missing", "content")


def test_concurrent_updates_allocate_distinct_versions(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("root", content="v1"))

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda i: store.update_prompt("root", f"v{i}"), range(8)))

    assert sorted(prompt.version for prompt in results) == list(range(2, 10))


def test_get_prompt_versions_ordered(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("root", content="v1", category="test"))
    store.update_prompt("root", "v2")
    store.delete_prompt("root")

    versions = store.get_prompt_versions("root")

    assert [prompt.version for prompt in versions] == [1, 2]
    assert versions[0].archived is True
    assert versions[0].metadata.category == "test"
    assert versions[1].metadata is None
    assert store.get_prompt_versions("missing") == []


def test_get_prompts(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("prompt1", content="Content 1", category="test", tags=["tag1"]))
    store.insert_prompt(make_prompt("prompt2", content="Content 2", category="other", tags=["tag2"]))

    assert len(store.get_prompts(None, 0, 10)) == 2

    test_prompts = store.get_prompts("test", 0, 10)
    assert [prompt.id for prompt in test_prompts] == ["prompt1"]

    assert len(store.get_prompts(None, 0, 1)) == 1
    assert len(store.get_prompts(None, 1, 10)) == 1
    assert store.get_prompts(None, 2, 10) == []


def test_get_prompts_includes_prompts_without_metadata_unless_filtered(
    store: PromptStore, make_prompt
) -> None:
    store.insert_prompt(make_prompt("with", category="test"))
    store.insert_prompt(make_prompt("without"))

    everything = {prompt.id: prompt for prompt in store.get_prompts()}
    assert set(everything) == {"with", "without"}
    assert everything["without"].metadata is None
    assert everything["with"].metadata.category == "test"

    assert [prompt.id for prompt in store.get_prompts(category="test")] == ["with"]


@pytest.mark.parametrize("limit", [0, -1])
def test_get_prompts_rejects_non_positive_limit(store: PromptStore, limit: int) -> None:
    with pytest.raises(InvalidRequestError):
        store.get_prompts(None, 0, limit)


def test_get_prompts_rejects_negative_offset(store: PromptStore) -> None:
    with pytest.raises(InvalidRequestError):
        store.get_prompts(None, -1, 10)


def test_get_prompt_categories(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("a", category="test"))
    store.insert_prompt(make_prompt("b", category="test"))
    store.insert_prompt(make_prompt("c", name="uncategorized"))
    store.insert_prompt(make_prompt("d"))

    assert store.get_prompt_categories() == ["test"]


def test_update_prompt_metadata(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(
        make_prompt("update_test", name="Original Name", category="original", tags=["original"])
    )

    result = store.update_prompt_metadata(
        "update_test",
        PromptMetadataInDB(
            id="update_test",
            name="Updated Name",
            description="Updated Description",
            category="updated",
            tags=["updated"],
            updated_at=now_timestamp(),
        ),
    )

    assert result == "update_test"
    metadata = store.get_prompt("update_test", include_metadata=True).metadata
    assert metadata.name == "Updated Name"
    assert metadata.description == "Updated Description"
    assert metadata.category == "updated"
    assert metadata.tags == ["updated"]


def test_update_prompt_metadata_clears_omitted_fields(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("partial", name="Name", category="keep", tags=["x"]))

    store.update_prompt_metadata(
        "partial",
        PromptMetadataInDB(id="partial", category="keep", updated_at=now_timestamp()),
    )

    metadata = store.get_prompt("partial", include_metadata=True).metadata
    assert metadata.category == "keep"
    assert metadata.name is None
    assert metadata.tags is None


def test_update_prompt_metadata_requires_existing_row(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("no_metadata"))
    update = PromptMetadataInDB(id="no_metadata", name="Test", updated_at=now_timestamp())

    with pytest.raises(NotFoundError):
        store.update_prompt_metadata("no_metadata", update)
    with pytest.raises(NotFoundError):
        store.update_prompt_metadata("non_existent", update)


def test_delete_prompt_archives(store: PromptStore, make_prompt) -> None:
    store.insert_prompt(make_prompt("delete_test", content="Content to delete"))
    assert store.get_prompt("delete_test").archived is False

    assert store.delete_prompt("delete_test") is True

    archived = store.get_prompt("delete_test")
    assert archived is not None
    assert archived.archived is True
    assert store.get_prompt_content("delete_test") == "Content to delete"
    assert store.delete_prompt("non_existent") is False


def test_pool_exhaustion_raises_pool_error(tmp_path: Path) -> None:
    store = PromptStore(tmp_path / "pool.db", pool_size=1, pool_timeout=0.1)
    try:
        with store.engine.connect():
            with pytest.raises(PoolError):
                store.get_prompt("anything")
        # connection returned, store usable again
        assert store.get_prompt("anything") is None
    finally:
        store.close()
