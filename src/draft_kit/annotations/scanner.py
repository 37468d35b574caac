import logging
import re
from collections.abc import Callable, Iterable
from time import monotonic

from draft_kit.document.paragraph import HEADING_PREFIX, Paragraph
from draft_kit.observability import names
from draft_kit.observability.base import MetricsHook, NoOpMetricsHook

from .types import Heading, Todo

logger = logging.getLogger(__name__)

TODO_PATTERN = re.compile(r"<([^>]+)>")
ELLIPSIS = "..."


def truncate(text: str, length: int) -> str:
    if len(text) > length:
        return text[:length] + ELLIPSIS
    return text


def detect_todos(content: str, preview_length: int = 30) -> list[Todo]:
    todos: list[Todo] = []
    for line_number, line in enumerate(content.split("\n"), start=1):
        for match in TODO_PATTERN.finditer(line):
            todos.append(
                Todo(
                    text=truncate(match.group(1), preview_length),
                    line=line_number,
                    column=match.start(),
                )
            )
    return todos


def detect_headings(
    paragraphs: Iterable[Paragraph], preview_length: int = 40
) -> list[Heading]:
    """Collect `## ` headings and retag every paragraph accordingly."""
    headings: list[Heading] = []
    for index, paragraph in enumerate(paragraphs):
        if paragraph.matches_heading:
            paragraph.is_heading = True
            text = paragraph.text.strip()[len(HEADING_PREFIX) :].strip()
            headings.append(
                Heading(text=truncate(text, preview_length), line=index + 1)
            )
        else:
            paragraph.is_heading = False
    return headings


class AnnotationScanner:
    """Rebuilds the TODO and heading lists from scratch on every call."""

    def __init__(
        self,
        *,
        todo_preview_length: int = 30,
        heading_preview_length: int = 40,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.todo_preview_length = todo_preview_length
        self.heading_preview_length = heading_preview_length
        self.metrics_hook = metrics_hook
        self.todos: list[Todo] = []
        self.headings: list[Heading] = []
        self.on_todos_change: Callable[[list[Todo]], None] | None = None
        self.on_headings_change: Callable[[list[Heading]], None] | None = None

    def scan_todos(self, content: str) -> list[Todo]:
        self.todos = detect_todos(content, self.todo_preview_length)
        self.metrics_hook.record_gauge(names.ANNOTATION_TODOS, len(self.todos))
        if self.on_todos_change:
            self.on_todos_change(list(self.todos))
        return self.todos

    def scan_headings(self, paragraphs: Iterable[Paragraph]) -> list[Heading]:
        self.headings = detect_headings(paragraphs, self.heading_preview_length)
        self.metrics_hook.record_gauge(names.ANNOTATION_HEADINGS, len(self.headings))
        if self.on_headings_change:
            self.on_headings_change(list(self.headings))
        return self.headings

    def scan(
        self, content: str, paragraphs: Iterable[Paragraph]
    ) -> tuple[list[Todo], list[Heading]]:
        start = monotonic()
        todos = self.scan_todos(content)
        headings = self.scan_headings(paragraphs)
        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.ANNOTATION_SCAN_DURATION, elapsed_ms)
        logger.debug("Found %d todos and %d headings", len(todos), len(headings))
        return todos, headings

    def clear(self) -> None:
        self.scan_todos("")
        self.scan_headings([])
