from dataclasses import dataclass
from typing import Protocol


class ChapterStoreError(Exception):
    """Reading or writing chapter text failed."""


@dataclass(frozen=True)
class ChapterRef:
    id: str
    title: str


class ChapterStore(Protocol):
    """Durable chapter text, keyed by chapter identity.

    Retries, if any, are the store's business. Callers see either the
    result or a `ChapterStoreError`.
    """

    async def read(self, chapter: ChapterRef) -> str: ...

    async def write(self, chapter: ChapterRef, text: str) -> None: ...

    async def touch(self) -> None:
        """Refresh the project's modification metadata."""
        ...
