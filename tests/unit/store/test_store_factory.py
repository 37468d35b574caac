import pytest

from draft_kit.store import (
    ChapterRef,
    FileChapterStore,
    InMemoryChapterStore,
    StoreConfig,
    create_chapter_store,
)


def test_creates_file_store(tmp_path) -> None:
    store = create_chapter_store(
        StoreConfig(provider="file", project_path=str(tmp_path), max_attempts=5)
    )

    assert isinstance(store, FileChapterStore)
    assert store.project_path == tmp_path


def test_file_store_requires_project_path() -> None:
    with pytest.raises(ValueError, match="requires project_path"):
        create_chapter_store(StoreConfig(provider="file"))


def test_creates_memory_store() -> None:
    assert isinstance(
        create_chapter_store(StoreConfig(provider="memory")), InMemoryChapterStore
    )


def test_unknown_provider_raises() -> None:
    with pytest.raises(ValueError, match="Unknown chapter store provider"):
        create_chapter_store(StoreConfig(provider="cloud"))  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_memory_store_round_trip() -> None:
    store = InMemoryChapterStore({"001": "seeded"})
    chapter = ChapterRef(id="001", title="One")

    assert await store.read(chapter) == "seeded"
    await store.write(chapter, "updated")

    assert store.text_of("001") == "updated"
    assert store.writes == [(chapter, "updated")]
    assert await store.read(ChapterRef(id="404", title="Missing")) == ""
