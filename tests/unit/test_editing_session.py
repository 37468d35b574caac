import asyncio
from time import monotonic
from unittest.mock import AsyncMock, Mock

import pytest

from draft_kit import (
    ChapterRef,
    ChapterStoreError,
    EditingSession,
    EditorConfig,
    InMemoryChapterStore,
    Position,
    RawText,
)
from draft_kit.annotations import Heading, Todo

FAST = EditorConfig(save_delay=0.02, search_delay=0.01, content_search_delay=0.02)
ONE = ChapterRef(id="001", title="One")
TWO = ChapterRef(id="002", title="Two")


@pytest.fixture
def store() -> InMemoryChapterStore:
    return InMemoryChapterStore({"001": "Hello\n\nWorld", "002": "Second chapter"})


@pytest.fixture
def session(store: InMemoryChapterStore) -> EditingSession:
    return EditingSession(store, FAST)


class TestLoading:
    @pytest.mark.asyncio
    async def test_load_puts_text_in_document(self, session: EditingSession) -> None:
        result = await session.load_chapter(ONE)

        assert result.ok
        assert session.chapter == ONE
        assert session.enabled
        assert session.get_content() == "Hello\n\nWorld"

    @pytest.mark.asyncio
    async def test_switch_flushes_previous_chapter(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)
        session.type_text("!")

        result = await session.load_chapter(TWO)

        assert result.ok
        assert result.previous_save is not None and result.previous_save.ok
        assert store.writes == [(ONE, "Hello\n\nWorld!")]
        assert session.get_content() == "Second chapter"

        await asyncio.sleep(0.1)
        assert len(store.writes) == 1

    @pytest.mark.asyncio
    async def test_clean_switch_does_not_write(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)

        result = await session.load_chapter(TWO)

        assert result.previous_save is None
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_failed_save_abandons_switch(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)
        session.type_text("!")
        store.write = AsyncMock(side_effect=ChapterStoreError("disk full"))

        result = await session.load_chapter(TWO)

        assert not result.ok
        assert result.error == "disk full"
        assert session.chapter == ONE
        assert session.get_content() == "Hello\n\nWorld!"
        assert session.autosave.dirty
        assert session.enabled

    @pytest.mark.asyncio
    async def test_typing_is_rejected_while_switching(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)
        session.type_text("!")
        writing = asyncio.Event()
        release = asyncio.Event()
        real_write = store.write

        async def gated_write(chapter: ChapterRef, text: str) -> None:
            writing.set()
            await release.wait()
            await real_write(chapter, text)

        store.write = gated_write  # type: ignore[method-assign]
        switch = asyncio.create_task(session.load_chapter(TWO))
        await writing.wait()

        assert session.type_text("?") is False
        release.set()
        result = await switch

        assert result.ok
        assert store.text_of(ONE.id) == "Hello\n\nWorld!"
        assert session.get_content() == "Second chapter"

    @pytest.mark.asyncio
    async def test_edit_landing_during_switch_save_is_flushed(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)
        session.type_text("!")
        session.search.open(with_replace=True)
        session.search.search("World")
        writing = asyncio.Event()
        release = asyncio.Event()
        real_write = store.write

        async def gated_write(chapter: ChapterRef, text: str) -> None:
            writing.set()
            await release.wait()
            await real_write(chapter, text)

        store.write = gated_write  # type: ignore[method-assign]
        switch = asyncio.create_task(session.load_chapter(TWO))
        await writing.wait()

        session.search.replace_all("Earth")
        release.set()
        result = await switch

        assert result.ok
        assert store.writes == [
            (ONE, "Hello\n\nWorld!"),
            (ONE, "Hello\n\nEarth!"),
        ]
        assert session.chapter == TWO

    @pytest.mark.asyncio
    async def test_read_failure_leaves_nothing_editable(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        store.read = AsyncMock(side_effect=ChapterStoreError("unreadable"))

        result = await session.load_chapter(ONE)

        assert not result.ok
        assert result.error == "unreadable"
        assert session.chapter is None
        assert not session.enabled
        assert session.get_content() == ""

    @pytest.mark.asyncio
    async def test_close_project(self, session: EditingSession) -> None:
        await session.load_chapter(ONE)
        session.search.open()
        session.search.search("World")

        result = await session.close_project()

        assert result.ok
        assert session.chapter is None
        assert not session.enabled
        assert session.get_content() == ""
        assert not session.search.is_open
        assert session.annotations.headings == []


class TestInput:
    @pytest.mark.asyncio
    async def test_typing_is_saved_once(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)

        assert session.type_text("!") is True
        await asyncio.sleep(0.1)

        assert store.writes == [(ONE, "Hello\n\nWorld!")]
        assert not session.autosave.dirty

    @pytest.mark.asyncio
    async def test_burst_of_edits_is_saved_once(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(TWO)

        session.press_enter()
        session.type_text("More")
        session.backspace()
        session.press_enter()
        session.paste("line one\n\nline two")
        await asyncio.sleep(0.1)

        assert store.writes == [(TWO, "Second chapter\nMor\nline one\nline two")]

    def test_input_ignored_without_chapter(self, session: EditingSession) -> None:
        assert session.type_text("x") is False
        assert session.get_content() == ""
        assert session.last_activity is None

    @pytest.mark.asyncio
    async def test_content_change_callback(self, session: EditingSession) -> None:
        await session.load_chapter(ONE)
        on_change = Mock()
        session.on_content_change = on_change

        session.type_text("a")
        session.backspace()

        assert on_change.call_count == 2

    @pytest.mark.asyncio
    async def test_annotations_follow_typing(self, session: EditingSession) -> None:
        await session.load_chapter(TWO)

        session.press_enter()
        session.type_text("## Part two <check dates>")

        assert session.annotations.todos == [
            Todo(text="check dates", line=2, column=12)
        ]
        assert session.annotations.headings == [
            Heading(text="Part two <check dates>", line=2)
        ]

    @pytest.mark.asyncio
    async def test_search_refreshes_after_typing(
        self, session: EditingSession
    ) -> None:
        await session.load_chapter(ONE)
        session.search.open()
        session.search.search("world")

        session.type_text(" world")

        assert session.search.matches == ()
        await asyncio.sleep(0.1)
        assert session.search.status.count == 2

    @pytest.mark.asyncio
    async def test_replace_all_schedules_save(
        self, session: EditingSession, store: InMemoryChapterStore
    ) -> None:
        await session.load_chapter(ONE)
        session.search.open(with_replace=True)
        session.search.search("hello")

        session.search.replace_all("Goodbye")
        await asyncio.sleep(0.1)

        assert store.writes == [(ONE, "Goodbye\n\nWorld")]

    @pytest.mark.asyncio
    async def test_apply_raw_normalizes_host_tree(
        self, session: EditingSession
    ) -> None:
        await session.load_chapter(ONE)

        assert session.apply_raw([RawText("typed\ndirectly")]) is True

        assert session.get_content() == "typed\ndirectly"
        assert session.autosave.dirty


class TestNavigationAndStats:
    @pytest.mark.asyncio
    async def test_jump_to_line(self, session: EditingSession) -> None:
        await session.load_chapter(ONE)

        assert session.jump_to_line(3) is True
        assert session.document.cursor.position == Position(2, 0)
        assert session.jump_to_line(0) is False
        assert session.jump_to_line(4) is False

    @pytest.mark.asyncio
    async def test_word_count(self, session: EditingSession) -> None:
        await session.load_chapter(TWO)

        assert session.word_count().label == "2 words"

        session.document.cursor.select(Position(0, 0), Position(0, 6))
        count = session.word_count()

        assert (count.total, count.selected) == (2, 1)
        assert count.label == "1 of 2 words"

    def test_word_count_singular(self, session: EditingSession) -> None:
        session.set_content("Alone")

        assert session.word_count().label == "1 word"

    def test_large_counts_are_grouped(self, session: EditingSession) -> None:
        session.set_content(" ".join(["word"] * 1500))

        assert session.word_count().label == "1,500 words"

    @pytest.mark.asyncio
    async def test_inactivity(self, session: EditingSession) -> None:
        assert not session.is_inactive()

        await session.load_chapter(ONE)
        session.type_text("x")
        assert not session.is_inactive()

        session.last_activity = monotonic() - 120
        assert session.is_inactive()
        assert not session.is_inactive(threshold=600)

    def test_detect_passthroughs(self, session: EditingSession) -> None:
        session.set_content("## Title\nFix <me>")

        assert session.detect_todos() == [Todo(text="me", line=2, column=4)]
        assert session.detect_headings() == [Heading(text="Title", line=1)]
