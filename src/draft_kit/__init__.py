# Annotations
from .annotations import AnnotationScanner, Heading, Todo, detect_headings, detect_todos

# Autosave
from .autosave import AutosaveScheduler, SaveResult

# Config
from .config import EditorConfig

# Document
from .document import (
    CursorTracker,
    DocumentModel,
    Paragraph,
    Position,
    RawBlock,
    RawBreak,
    RawText,
    Selection,
    normalize,
)

# Observability
from .observability import InMemoryMetricsHook, MetricsHook, NoOpMetricsHook

# Scheduling
from .scheduling import Debouncer

# Search
from .search import Match, SearchEngine, SearchStatus

# Session
from .session import EditingSession, LoadResult, WordCount

# Chapter stores
from .store import (
    ChapterRef,
    ChapterStore,
    ChapterStoreError,
    FileChapterStore,
    InMemoryChapterStore,
    StoreConfig,
    create_chapter_store,
)

__all__ = [
    # Annotations
    "AnnotationScanner",
    "Heading",
    "Todo",
    "detect_headings",
    "detect_todos",
    # Autosave
    "AutosaveScheduler",
    "SaveResult",
    # Config
    "EditorConfig",
    # Document
    "CursorTracker",
    "DocumentModel",
    "Paragraph",
    "Position",
    "RawBlock",
    "RawBreak",
    "RawText",
    "Selection",
    "normalize",
    # Observability
    "InMemoryMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Scheduling
    "Debouncer",
    # Search
    "Match",
    "SearchEngine",
    "SearchStatus",
    # Session
    "EditingSession",
    "LoadResult",
    "WordCount",
    # Chapter stores
    "ChapterRef",
    "ChapterStore",
    "ChapterStoreError",
    "FileChapterStore",
    "InMemoryChapterStore",
    "StoreConfig",
    "create_chapter_store",
]
