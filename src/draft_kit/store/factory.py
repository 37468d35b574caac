# src/draft_kit/store/factory.py

from .base import ChapterStore
from .config import StoreConfig
from .filesystem import FileChapterStore
from .memory import InMemoryChapterStore


def create_chapter_store(config: StoreConfig) -> ChapterStore:
    """Create a chapter store from config.

    Raises:
        ValueError: If the provider is unknown or the file provider has no
            project path.
    """
    if config.provider == "file":
        if not config.project_path:
            raise ValueError("file chapter store requires project_path")
        return FileChapterStore(
            config.project_path,
            max_attempts=config.max_attempts,
            retry_wait=config.retry_wait,
        )

    if config.provider == "memory":
        return InMemoryChapterStore()

    raise ValueError(f"Unknown chapter store provider: {config.provider}")
