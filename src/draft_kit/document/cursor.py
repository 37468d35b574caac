# src/draft_kit/document/cursor.py

"""Caret and selection tracking in (paragraph, offset) coordinates."""

from collections.abc import Sequence
from dataclasses import dataclass

from .paragraph import Paragraph


@dataclass(frozen=True, order=True)
class Position:
    paragraph: int
    offset: int


@dataclass(frozen=True)
class Selection:
    anchor: Position
    focus: Position

    @classmethod
    def caret(cls, paragraph: int, offset: int) -> "Selection":
        position = Position(paragraph, offset)
        return cls(anchor=position, focus=position)

    @property
    def start(self) -> Position:
        return min(self.anchor, self.focus)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.focus)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus


class CursorTracker:
    """Holds the current selection and keeps it inside a real paragraph.

    A selection on an empty document is `None`: there is no paragraph to
    put the caret in.
    """

    def __init__(self) -> None:
        self._selection: Selection | None = None

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def position(self) -> Position | None:
        if self._selection is None:
            return None
        return self._selection.focus

    def clear(self) -> None:
        self._selection = None

    def collapse_to(self, paragraph: int, offset: int) -> None:
        self._selection = Selection.caret(paragraph, offset)

    def select(self, anchor: Position, focus: Position) -> None:
        self._selection = Selection(anchor=anchor, focus=focus)

    def clamp(self, paragraphs: Sequence[Paragraph]) -> None:
        """Pull the selection back inside the paragraph list."""
        if self._selection is None:
            return
        if not paragraphs:
            self._selection = None
            return
        self._selection = Selection(
            anchor=_clamp_position(self._selection.anchor, paragraphs),
            focus=_clamp_position(self._selection.focus, paragraphs),
        )

    def selected_text(self, paragraphs: Sequence[Paragraph]) -> str:
        if self._selection is None or self._selection.is_collapsed:
            return ""
        start, end = self._selection.start, self._selection.end
        if start.paragraph == end.paragraph:
            return paragraphs[start.paragraph].text[start.offset : end.offset]

        parts = [paragraphs[start.paragraph].text[start.offset :]]
        for index in range(start.paragraph + 1, end.paragraph):
            parts.append(paragraphs[index].text)
        parts.append(paragraphs[end.paragraph].text[: end.offset])
        return "\n".join(parts)


def _clamp_position(position: Position, paragraphs: Sequence[Paragraph]) -> Position:
    index = max(0, min(position.paragraph, len(paragraphs) - 1))
    offset = max(0, min(position.offset, len(paragraphs[index].text)))
    return Position(index, offset)
