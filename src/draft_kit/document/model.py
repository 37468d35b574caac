# src/draft_kit/document/model.py

import logging
import re
from collections.abc import Iterable

from draft_kit.observability import names
from draft_kit.observability.base import MetricsHook, NoOpMetricsHook

from .cursor import CursorTracker, Position
from .nodes import RawBlock, RawBreak, RawNode, RawText, paragraph_block
from .paragraph import Paragraph, strip_placeholder

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    return _LINE_SPLIT.split(text)


def normalize(nodes: Iterable[RawNode]) -> list[Paragraph]:
    """Turn an arbitrary host tree into a flat list of paragraphs."""
    paragraphs, _ = _normalize(nodes)
    return paragraphs


def _normalize(nodes: Iterable[RawNode]) -> tuple[list[Paragraph], bool]:
    paragraphs: list[Paragraph] = []
    restructured = False

    for node in nodes:
        if isinstance(node, RawText):
            # Whitespace-only loose text is dropped without forcing a re-render
            if not node.text.strip():
                continue
            for line in node.text.split("\n"):
                if line.strip():
                    paragraphs.append(Paragraph(strip_placeholder(line)))
            restructured = True

        elif isinstance(node, RawBreak):
            restructured = True

        elif node.is_paragraph:
            if node.has_breaks:
                parts = node.split_on_breaks()
                if len(parts) > 1:
                    paragraphs.extend(
                        Paragraph(strip_placeholder(part)) for part in parts
                    )
                    restructured = True
                    continue
            paragraphs.append(Paragraph(strip_placeholder(node.text)))

        else:
            parts = node.split_on_breaks()
            if parts:
                paragraphs.extend(Paragraph(strip_placeholder(part)) for part in parts)
            else:
                paragraphs.append(Paragraph(strip_placeholder(node.text)))
            restructured = True

    return paragraphs, restructured


class DocumentModel:
    """The ordered paragraphs of the chapter being edited.

    Every mutation leaves the document as a plain list of paragraphs with
    the caret inside one of them. Paragraphs are addressed by index; the
    index of a paragraph is only meaningful until the next structural edit.
    """

    def __init__(self, metrics_hook: MetricsHook = NoOpMetricsHook()) -> None:
        self._paragraphs: list[Paragraph] = []
        self.cursor = CursorTracker()
        self.metrics_hook = metrics_hook

    @property
    def paragraphs(self) -> tuple[Paragraph, ...]:
        return tuple(self._paragraphs)

    @property
    def paragraph_count(self) -> int:
        return len(self._paragraphs)

    @property
    def is_empty(self) -> bool:
        return not self._paragraphs

    def paragraph(self, index: int) -> Paragraph:
        return self._paragraphs[index]

    # ------------------------------------------------------------------
    # Host tree
    # ------------------------------------------------------------------

    def apply_raw(self, nodes: Iterable[RawNode]) -> bool:
        """Replace the paragraphs with the normalized host tree.

        Returns True when the tree had to be restructured, in which case the
        host re-renders and the caret lands at the end of the document.
        """
        paragraphs, restructured = _normalize(nodes)
        self._paragraphs = paragraphs
        self.metrics_hook.increment(names.DOCUMENT_NORMALIZATIONS_TOTAL)
        self.metrics_hook.record_gauge(names.DOCUMENT_PARAGRAPHS, len(paragraphs))

        if restructured:
            logger.debug("Host tree restructured into %d paragraphs", len(paragraphs))
            self.move_cursor_to_end()
        else:
            self.cursor.clamp(self._paragraphs)
        return restructured

    def render(self) -> list[RawBlock]:
        return [paragraph_block(p.text) for p in self._paragraphs]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def get_content(self) -> str:
        return "\n".join(p.serialized for p in self._paragraphs)

    def set_content(self, text: str) -> None:
        self.cursor.clear()
        if not text or not text.strip():
            self._paragraphs = []
            return
        self._paragraphs = [
            Paragraph(strip_placeholder(line)) for line in split_lines(text)
        ]

    # ------------------------------------------------------------------
    # Cursor placement
    # ------------------------------------------------------------------

    def move_cursor_to_end(self) -> None:
        if not self._paragraphs:
            self.cursor.clear()
            return
        last = len(self._paragraphs) - 1
        self.cursor.collapse_to(last, len(self._paragraphs[last].text))

    def move_cursor_to(self, paragraph: int, offset: int = 0) -> None:
        if not 0 <= paragraph < len(self._paragraphs):
            raise ValueError(f"Paragraph {paragraph} out of range")
        offset = max(0, min(offset, len(self._paragraphs[paragraph].text)))
        self.cursor.collapse_to(paragraph, offset)

    def _caret(self) -> Position:
        if self.cursor.selection is None:
            self.move_cursor_to_end()
        self.cursor.clamp(self._paragraphs)
        position = self.cursor.position
        if position is None:
            raise RuntimeError("Document has no paragraphs to place the caret in")
        return position

    def _delete_selection(self) -> Position:
        """Remove the selected text (if any) and return the collapsed caret."""
        caret = self._caret()
        selection = self.cursor.selection
        if selection is None or selection.is_collapsed:
            return caret

        start, end = selection.start, selection.end
        first = self._paragraphs[start.paragraph]
        last = self._paragraphs[end.paragraph]
        first.text = first.text[: start.offset] + last.text[end.offset :]
        del self._paragraphs[start.paragraph + 1 : end.paragraph + 1]
        self.cursor.collapse_to(start.paragraph, start.offset)
        return start

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def insert_text(self, text: str) -> bool:
        """Insert typed text at the caret. Returns whether anything changed."""
        if not text:
            return False
        if "\n" in text or "\r" in text:
            return self.insert_lines(text)
        self._insert_inline(text)
        return True

    def insert_lines(self, text: str) -> bool:
        """Insert several lines at the caret, one paragraph per non-blank line.

        The first line joins the current paragraph at the caret, the text
        after the caret follows the last inserted line.
        """
        lines = [line for line in split_lines(text) if line.strip()]
        if not lines:
            return False
        if len(lines) == 1:
            self._insert_inline(lines[0])
            return True

        if not self._paragraphs:
            self._paragraphs = [Paragraph(line) for line in lines]
            self.move_cursor_to_end()
            return True

        caret = self._delete_selection()
        current = self._paragraphs[caret.paragraph]
        head, tail = current.text[: caret.offset], current.text[caret.offset :]

        current.text = head + lines[0]
        inserted = [Paragraph(line) for line in lines[1:]]
        inserted[-1].text += tail
        at = caret.paragraph + 1
        self._paragraphs[at:at] = inserted

        self.move_cursor_to(caret.paragraph + len(inserted), len(lines[-1]))
        return True

    def _insert_inline(self, text: str) -> None:
        # text holds no line breaks
        if not self._paragraphs:
            self._paragraphs.append(Paragraph(text))
            self.move_cursor_to_end()
            return

        caret = self._delete_selection()
        paragraph = self._paragraphs[caret.paragraph]
        paragraph.text = (
            paragraph.text[: caret.offset] + text + paragraph.text[caret.offset :]
        )
        self.cursor.collapse_to(caret.paragraph, caret.offset + len(text))

    def paste(self, text: str) -> bool:
        """Paste clipboard text as plain paragraphs, dropping blank lines."""
        cleaned = "\n".join(
            line
            for line in split_lines(strip_placeholder(text))
            if line.strip() != ""
        )
        if not cleaned:
            return False
        logger.debug("Pasting %d characters", len(cleaned))
        return self.insert_lines(cleaned)

    def insert_paragraph(self) -> None:
        """Split the current paragraph at the caret (the Enter key)."""
        if not self._paragraphs:
            self._paragraphs.append(Paragraph())
            self.move_cursor_to(0)
            return

        caret = self._delete_selection()
        current = self._paragraphs[caret.paragraph]
        before, after = current.text[: caret.offset], current.text[caret.offset :]

        current.text = before if before.strip() else ""
        self._paragraphs.insert(
            caret.paragraph + 1, Paragraph(after if after.strip() else "")
        )
        self.move_cursor_to(caret.paragraph + 1, 0)

    def delete_backward(self) -> bool:
        """Delete the selection or the character before the caret (Backspace)."""
        if not self._paragraphs:
            return False

        selection = self.cursor.selection
        if selection is not None and not selection.is_collapsed:
            self._delete_selection()
            return True

        caret = self._caret()
        current = self._paragraphs[caret.paragraph]
        if caret.offset > 0:
            current.text = (
                current.text[: caret.offset - 1] + current.text[caret.offset :]
            )
            self.cursor.collapse_to(caret.paragraph, caret.offset - 1)
            return True

        if caret.paragraph == 0:
            return False

        previous = self._paragraphs[caret.paragraph - 1]
        join_at = len(previous.text)
        previous.text += current.text
        del self._paragraphs[caret.paragraph]
        self.cursor.collapse_to(caret.paragraph - 1, join_at)
        return True

    def replace_range(self, paragraph: int, start: int, end: int, text: str) -> None:
        """Replace `[start:end]` of one paragraph's text.

        Line breaks in `text` split the paragraph: every line of the
        replacement after the first becomes a paragraph of its own, and the
        text after `end` follows the last one.
        """
        if not 0 <= paragraph < len(self._paragraphs):
            raise ValueError(f"Paragraph {paragraph} out of range")
        target = self._paragraphs[paragraph]
        if not 0 <= start <= end <= len(target.text):
            raise ValueError(
                f"Range {start}:{end} out of bounds for paragraph {paragraph}"
            )

        lines = split_lines(strip_placeholder(text))
        added = len(lines) - 1
        rest = target.text[end:]
        if added:
            target.text = target.text[:start] + lines[0]
            inserted = [Paragraph(line) for line in lines[1:]]
            inserted[-1].text += rest
            self._paragraphs[paragraph + 1 : paragraph + 1] = inserted
            replaced_end = len(lines[-1])
        else:
            target.text = target.text[:start] + lines[0] + rest
            replaced_end = start + len(lines[0])

        caret = self.cursor.position
        if caret is None:
            return
        if caret.paragraph == paragraph and caret.offset > start:
            offset = replaced_end + max(0, caret.offset - end)
            self.cursor.collapse_to(paragraph + added, offset)
        elif caret.paragraph > paragraph and added:
            self.cursor.collapse_to(caret.paragraph + added, caret.offset)
