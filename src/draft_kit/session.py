# src/draft_kit/session.py

"""The editing session: one live chapter and everything that follows its edits.

Input events flow through the document model first, then fan out to the
autosave scheduler, the annotation scanner and the search engine. Loading
another chapter always flushes the previous one before its text is replaced.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from time import monotonic

from draft_kit.annotations import AnnotationScanner, Heading, Todo
from draft_kit.autosave import AutosaveScheduler, SaveResult
from draft_kit.config import EditorConfig
from draft_kit.document import DocumentModel, RawNode
from draft_kit.observability import names
from draft_kit.observability.base import MetricsHook, NoOpMetricsHook
from draft_kit.search import SearchEngine
from draft_kit.store.base import ChapterRef, ChapterStore, ChapterStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    chapter: ChapterRef | None
    ok: bool
    error: str | None = None
    previous_save: SaveResult | None = None


@dataclass(frozen=True)
class WordCount:
    total: int
    selected: int = 0

    @property
    def label(self) -> str:
        if self.selected:
            return f"{self.selected:,} of {self.total:,} words"
        return f"{self.total:,} word{'' if self.total == 1 else 's'}"


def count_words(text: str) -> int:
    return len(text.split())


class EditingSession:
    def __init__(
        self,
        store: ChapterStore,
        config: EditorConfig = EditorConfig(),
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.store = store
        self.config = config
        self.metrics_hook = metrics_hook

        self.document = DocumentModel(metrics_hook=metrics_hook)
        self.annotations = AnnotationScanner(
            todo_preview_length=config.todo_preview_length,
            heading_preview_length=config.heading_preview_length,
            metrics_hook=metrics_hook,
        )
        self.autosave = AutosaveScheduler(
            store,
            self.document.get_content,
            delay=config.save_delay,
            metrics_hook=metrics_hook,
        )
        self.search = SearchEngine(
            self.document,
            on_edit=self._after_programmatic_edit,
            search_delay=config.search_delay,
            content_search_delay=config.content_search_delay,
            metrics_hook=metrics_hook,
        )

        self.enabled = False
        self.last_activity: float | None = None
        self.on_content_change: Callable[[], None] | None = None

    @property
    def chapter(self) -> ChapterRef | None:
        return self.autosave.chapter

    # ------------------------------------------------------------------
    # Chapter lifecycle
    # ------------------------------------------------------------------

    async def load_chapter(self, chapter: ChapterRef | None) -> LoadResult:
        """Make `chapter` the live document, saving the previous one first.

        Input is ignored until the new text is in place. If the previous
        chapter cannot be saved the switch is abandoned, so its edits stay
        in memory.
        """
        was_enabled = self.enabled
        self.enabled = False

        previous_save: SaveResult | None = None
        # Programmatic edits can land while a save is awaited; keep flushing
        while self.autosave.dirty:
            result = await self.autosave.flush()
            if result is None:
                break
            previous_save = result
            if not result.ok:
                self.enabled = was_enabled
                return LoadResult(
                    chapter=self.chapter,
                    ok=False,
                    error=result.error,
                    previous_save=result,
                )

        self.autosave.attach(chapter)

        if chapter is None:
            self.document.set_content("")
            self.annotations.clear()
            self.search.on_chapter_load()
            return LoadResult(chapter=None, ok=True, previous_save=previous_save)

        start = monotonic()
        try:
            text = await self.store.read(chapter)
        except ChapterStoreError as exc:
            logger.warning("Loading chapter %s failed: %s", chapter.id, exc)
            self.metrics_hook.increment(names.CHAPTER_LOAD_ERRORS_TOTAL)
            self.autosave.attach(None)
            self.document.set_content("")
            self.annotations.clear()
            self.search.on_chapter_load()
            return LoadResult(
                chapter=chapter, ok=False, error=str(exc), previous_save=previous_save
            )

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.CHAPTER_LOAD_DURATION, elapsed_ms)

        self.document.set_content(text)
        self.enabled = True
        self._scan()
        self.search.on_chapter_load()
        logger.info(
            "Loaded chapter %s (%d paragraphs)",
            chapter.id,
            self.document.paragraph_count,
        )
        return LoadResult(chapter=chapter, ok=True, previous_save=previous_save)

    async def close_project(self) -> LoadResult:
        result = await self.load_chapter(None)
        if result.ok:
            self.search.close()
        return result

    # ------------------------------------------------------------------
    # Canonical text
    # ------------------------------------------------------------------

    def get_content(self) -> str:
        return self.document.get_content()

    def set_content(self, text: str) -> None:
        self.document.set_content(text)
        self._scan()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def schedule_save(self) -> None:
        self.autosave.schedule_save()

    async def save_now(self) -> SaveResult | None:
        return await self.autosave.save_now()

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def detect_todos(self) -> list[Todo]:
        return self.annotations.scan_todos(self.document.get_content())

    def detect_headings(self) -> list[Heading]:
        return self.annotations.scan_headings(self.document.paragraphs)

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def type_text(self, text: str) -> bool:
        return self._handle_input(lambda: self.document.insert_text(text))

    def press_enter(self) -> bool:
        def _split() -> bool:
            self.document.insert_paragraph()
            return True

        return self._handle_input(_split)

    def backspace(self) -> bool:
        return self._handle_input(self.document.delete_backward)

    def paste(self, text: str) -> bool:
        return self._handle_input(lambda: self.document.paste(text))

    def apply_raw(self, nodes: Iterable[RawNode]) -> bool:
        """The host mutated its tree directly; adopt and normalize it."""

        def _adopt() -> bool:
            self.document.apply_raw(list(nodes))
            return True

        return self._handle_input(_adopt)

    def _handle_input(self, edit: Callable[[], bool]) -> bool:
        if not self.enabled:
            logger.debug("Ignoring input while no chapter is editable")
            return False
        self.last_activity = monotonic()
        if not edit():
            return False

        self.autosave.schedule_save()
        self._scan()
        if self.on_content_change:
            self.on_content_change()
        self.search.on_content_change()
        return True

    def _after_programmatic_edit(self) -> None:
        self.autosave.schedule_save()
        self._scan()

    def _scan(self) -> None:
        self.annotations.scan(self.document.get_content(), self.document.paragraphs)

    # ------------------------------------------------------------------
    # Navigation and stats
    # ------------------------------------------------------------------

    def jump_to_line(self, line: int) -> bool:
        """Put the caret at the start of the 1-based paragraph `line`."""
        index = line - 1
        if not 0 <= index < self.document.paragraph_count:
            return False
        self.document.move_cursor_to(index)
        return True

    def word_count(self) -> WordCount:
        total = count_words(self.document.get_content())
        selected = count_words(
            self.document.cursor.selected_text(self.document.paragraphs)
        )
        return WordCount(total=total, selected=selected)

    def touch(self) -> None:
        self.last_activity = monotonic()

    def is_inactive(self, threshold: float | None = None) -> bool:
        if self.last_activity is None:
            return False
        limit = self.config.inactivity_threshold if threshold is None else threshold
        return monotonic() - self.last_activity > limit
