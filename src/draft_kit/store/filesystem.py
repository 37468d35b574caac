"""Chapter store backed by a project directory on disk.

Layout::

    <project>/project.json
    <project>/chapters/<id>-<slug>.md
"""

import asyncio
import json
import logging
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base import ChapterRef, ChapterStore, ChapterStoreError
from .models import ProjectMetadata, utcnow

logger = logging.getLogger(__name__)

PROJECT_FILENAME = "project.json"
CHAPTERS_DIRNAME = "chapters"
CHAPTER_SUFFIX = ".md"

T = TypeVar("T")

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    return _SLUG_INVALID.sub("-", title.lower()).strip("-")


class FileChapterStore(ChapterStore):
    """Reads and writes chapter files, keeping `project.json` up to date.

    Blocking file I/O runs in a worker thread. Transient `OSError`s are
    retried; a missing chapter file reads as empty text.
    """

    def __init__(
        self,
        project_path: str | Path,
        max_attempts: int = 3,
        retry_wait: float = 0.2,
    ) -> None:
        self.project_path = Path(project_path)
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait
        logger.info(
            "Initialized FileChapterStore at %s (max_attempts=%d)",
            self.project_path,
            max_attempts,
        )

    @property
    def chapters_dir(self) -> Path:
        return self.project_path / CHAPTERS_DIRNAME

    @property
    def project_file(self) -> Path:
        return self.project_path / PROJECT_FILENAME

    def chapter_filename(self, chapter: ChapterRef) -> str:
        return f"{chapter.id}-{slugify(chapter.title)}{CHAPTER_SUFFIX}"

    def chapter_path(self, chapter: ChapterRef) -> Path:
        return self.chapters_dir / self.chapter_filename(chapter)

    async def read(self, chapter: ChapterRef) -> str:
        def _read() -> str:
            try:
                return self.chapter_path(chapter).read_text(encoding="utf-8")
            except FileNotFoundError:
                pass

            # The title may have changed since the file was written
            fallback = self._find_by_id(chapter.id)
            if fallback is None:
                logger.info("No file for chapter %s, starting empty", chapter.id)
                return ""
            logger.debug("Reading chapter %s from %s", chapter.id, fallback.name)
            return fallback.read_text(encoding="utf-8")

        return await self._run(_read, f"read chapter {chapter.id}")

    async def write(self, chapter: ChapterRef, text: str) -> None:
        path = self.chapter_path(chapter)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(path, text)

        await self._run(_write, f"write chapter {chapter.id}")
        logger.debug("Wrote %d characters to %s", len(text), path)

    async def touch(self) -> None:
        def _touch() -> None:
            metadata = self._load_metadata()
            metadata.modified = utcnow()
            self._save_metadata(metadata)

        await self._run(_touch, "update project metadata")

    async def load_metadata(self) -> ProjectMetadata:
        return await self._run(self._load_metadata, "read project metadata")

    async def list_chapters(self) -> list[ChapterRef]:
        metadata = await self.load_metadata()
        entries = sorted(metadata.chapters, key=lambda entry: entry.order)
        return [ChapterRef(id=entry.id, title=entry.title) for entry in entries]

    def _find_by_id(self, chapter_id: str) -> Path | None:
        if not self.chapters_dir.is_dir():
            return None
        prefix = f"{chapter_id}-"
        for candidate in sorted(self.chapters_dir.iterdir()):
            if (
                candidate.is_file()
                and candidate.name.startswith(prefix)
                and candidate.suffix == CHAPTER_SUFFIX
            ):
                return candidate
        return None

    def _load_metadata(self) -> ProjectMetadata:
        try:
            raw = self.project_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(
                "No %s in %s, creating one", PROJECT_FILENAME, self.project_path
            )
            return ProjectMetadata(name=self.project_path.name)

        try:
            return ProjectMetadata(**json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            raise ChapterStoreError(f"Invalid {self.project_file}: {exc}") from exc

    def _save_metadata(self, metadata: ProjectMetadata) -> None:
        self.project_path.mkdir(parents=True, exist_ok=True)
        _atomic_write(self.project_file, metadata.model_dump_json(indent=2))

    async def _run(self, func: Callable[[], T], operation: str) -> T:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=wait_exponential(
                    multiplier=self._retry_wait, min=self._retry_wait, max=5
                ),
                retry=retry_if_exception_type(OSError),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    return await asyncio.to_thread(func)
        except OSError as exc:
            logger.warning("Failed to %s: %s", operation, exc)
            raise ChapterStoreError(f"Failed to {operation}: {exc}") from exc
        raise ChapterStoreError(f"Failed to {operation}")


def _atomic_write(path: Path, text: str) -> None:
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(text, encoding="utf-8")
    os.replace(tmp_path, path)
