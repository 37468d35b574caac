import logging
from datetime import datetime

from .base import ChapterRef, ChapterStore
from .models import utcnow

logger = logging.getLogger(__name__)


class InMemoryChapterStore(ChapterStore):
    """Chapter texts held in a dict. Every write is also kept in `writes`."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        self._texts: dict[str, str] = dict(texts or {})
        self.writes: list[tuple[ChapterRef, str]] = []
        self.modified: datetime | None = None

    async def read(self, chapter: ChapterRef) -> str:
        return self._texts.get(chapter.id, "")

    async def write(self, chapter: ChapterRef, text: str) -> None:
        self._texts[chapter.id] = text
        self.writes.append((chapter, text))
        logger.debug("Stored %d characters for chapter %s", len(text), chapter.id)

    async def touch(self) -> None:
        self.modified = utcnow()

    def text_of(self, chapter_id: str) -> str | None:
        return self._texts.get(chapter_id)
