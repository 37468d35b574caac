from .base import ChapterRef, ChapterStore, ChapterStoreError
from .config import StoreConfig
from .factory import create_chapter_store
from .filesystem import FileChapterStore, slugify
from .memory import InMemoryChapterStore
from .models import ChapterEntry, ProjectMetadata

__all__ = [
    "ChapterEntry",
    "ChapterRef",
    "ChapterStore",
    "ChapterStoreError",
    "FileChapterStore",
    "InMemoryChapterStore",
    "ProjectMetadata",
    "StoreConfig",
    "create_chapter_store",
    "slugify",
]
