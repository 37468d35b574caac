import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic

from draft_kit.observability import names
from draft_kit.observability.base import MetricsHook, NoOpMetricsHook
from draft_kit.scheduling import Debouncer
from draft_kit.store.base import ChapterRef, ChapterStore, ChapterStoreError

logger = logging.getLogger(__name__)

STATUS_SAVED = "Saved"
STATUS_FAILED = "Save failed"


@dataclass(frozen=True)
class SaveResult:
    chapter: ChapterRef
    ok: bool
    error: str | None = None
    elapsed_ms: float = 0.0


class AutosaveScheduler:
    """Debounced persistence of the active chapter.

    `schedule_save()` coalesces edits into one write `delay` seconds after
    the last call. `save_now()` writes immediately. Writes never overlap and
    are never retried here; a failed write is returned as a `SaveResult`
    with `ok=False` and the chapter stays dirty.
    """

    def __init__(
        self,
        store: ChapterStore,
        content_provider: Callable[[], str],
        delay: float = 0.5,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._store = store
        self._content_provider = content_provider
        self._debouncer = Debouncer(delay, self._save_from_timer, name="autosave")
        self._lock = asyncio.Lock()
        self._generation = 0
        self.metrics_hook = metrics_hook
        self.chapter: ChapterRef | None = None
        self.dirty = False
        self.last_result: SaveResult | None = None
        self.on_status: Callable[[str], None] | None = None

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def attach(self, chapter: ChapterRef | None) -> None:
        """Point the scheduler at another chapter.

        Unsaved edits on the old chapter are dropped with a warning; callers
        `flush()` first.
        """
        if self.dirty:
            logger.warning(
                "Switching away from unsaved chapter %s",
                self.chapter.id if self.chapter else None,
            )
        self._debouncer.cancel()
        self.chapter = chapter
        self.dirty = False

    def schedule_save(self) -> None:
        if self.chapter is None:
            return
        if self._debouncer.pending:
            self.metrics_hook.increment(names.SAVES_COALESCED_TOTAL)
        self._generation += 1
        self.dirty = True
        self._set_status("")
        self._debouncer.trigger()

    async def save_now(self) -> SaveResult | None:
        """Cancel any pending timer and write the current content now.

        Returns None when no chapter is attached.
        """
        self._debouncer.cancel()
        if self.chapter is None:
            return None

        async with self._lock:
            chapter = self.chapter
            generation = self._generation
            content = self._content_provider()
            start = monotonic()

            try:
                await self._store.write(chapter, content)
                await self._store.touch()
            except ChapterStoreError as exc:
                elapsed_ms = 1000 * (monotonic() - start)
                logger.warning("Saving chapter %s failed: %s", chapter.id, exc)
                self.metrics_hook.increment(names.CHAPTER_SAVE_ERRORS_TOTAL)
                self._set_status(STATUS_FAILED)
                self.last_result = SaveResult(
                    chapter=chapter, ok=False, error=str(exc), elapsed_ms=elapsed_ms
                )
                return self.last_result

            elapsed_ms = 1000 * (monotonic() - start)
            # Edits made while the write was in flight keep the chapter dirty
            if self._generation == generation and self.chapter == chapter:
                self.dirty = False

        self.metrics_hook.record_latency(names.CHAPTER_SAVE_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.CHAPTER_SAVES_TOTAL)
        logger.info(
            "Saved chapter %s (%d chars, %.0fms)", chapter.id, len(content), elapsed_ms
        )
        self._set_status(STATUS_SAVED)
        self.last_result = SaveResult(chapter=chapter, ok=True, elapsed_ms=elapsed_ms)
        return self.last_result

    async def flush(self) -> SaveResult | None:
        """Save if there are unsaved edits, otherwise do nothing."""
        if not self.dirty:
            self._debouncer.cancel()
            return None
        return await self.save_now()

    async def _save_from_timer(self) -> None:
        await self.save_now()

    def _set_status(self, status: str) -> None:
        if self.on_status:
            self.on_status(status)
