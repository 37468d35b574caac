from draft_kit.annotations import (
    AnnotationScanner,
    Heading,
    Todo,
    detect_headings,
    detect_todos,
)
from draft_kit.document import Paragraph
from draft_kit.observability import InMemoryMetricsHook, names


def _paragraphs(text: str) -> list[Paragraph]:
    return [Paragraph(line) for line in text.split("\n")]


class TestDetectTodos:
    def test_single_marker(self) -> None:
        assert detect_todos("Fix <this later>") == [
            Todo(text="this later", line=1, column=4)
        ]

    def test_multiple_markers_in_order(self) -> None:
        content = "<a> then <b>\nnothing\nend <c>"

        assert detect_todos(content) == [
            Todo(text="a", line=1, column=0),
            Todo(text="b", line=1, column=9),
            Todo(text="c", line=3, column=4),
        ]

    def test_long_marker_is_truncated(self) -> None:
        body = "x" * 45

        (todo,) = detect_todos(f"<{body}>")

        assert todo.text == "x" * 30 + "..."

    def test_marker_of_exactly_thirty_chars_is_not_truncated(self) -> None:
        (todo,) = detect_todos("<" + "y" * 30 + ">")

        assert todo.text == "y" * 30

    def test_empty_brackets_are_ignored(self) -> None:
        assert detect_todos("a <> b") == []

    def test_markers_do_not_span_lines(self) -> None:
        assert detect_todos("open <here\nclosed> there") == []

    def test_empty_content(self) -> None:
        assert detect_todos("") == []


class TestDetectHeadings:
    def test_headings_with_paragraph_numbers(self) -> None:
        paragraphs = _paragraphs("## Intro\nSome text\n## Body")

        assert detect_headings(paragraphs) == [
            Heading(text="Intro", line=1),
            Heading(text="Body", line=3),
        ]

    def test_heading_tag_is_toggled(self) -> None:
        paragraphs = _paragraphs("## Title\nplain")
        detect_headings(paragraphs)
        assert [p.is_heading for p in paragraphs] == [True, False]

        paragraphs[0].text = "Title"
        paragraphs[1].text = "## Now a heading"
        detect_headings(paragraphs)

        assert [p.is_heading for p in paragraphs] == [False, True]

    def test_prefix_requires_space(self) -> None:
        assert detect_headings(_paragraphs("##Tight\n# Single")) == []

    def test_leading_whitespace_is_ignored(self) -> None:
        assert detect_headings(_paragraphs("   ## Indented")) == [
            Heading(text="Indented", line=1)
        ]

    def test_long_heading_is_truncated(self) -> None:
        (heading,) = detect_headings(_paragraphs("## " + "h" * 50))

        assert heading.text == "h" * 40 + "..."


class TestAnnotationScanner:
    def test_scan_rebuilds_both_lists_and_notifies(self) -> None:
        metrics = InMemoryMetricsHook()
        scanner = AnnotationScanner(metrics_hook=metrics)
        seen_todos: list[list[Todo]] = []
        seen_headings: list[list[Heading]] = []
        scanner.on_todos_change = seen_todos.append
        scanner.on_headings_change = seen_headings.append

        content = "## Part one\nFix <typo>"
        scanner.scan(content, _paragraphs(content))

        assert scanner.todos == [Todo(text="typo", line=2, column=4)]
        assert scanner.headings == [Heading(text="Part one", line=1)]
        assert seen_todos == [scanner.todos]
        assert seen_headings == [scanner.headings]
        assert metrics.gauges[names.ANNOTATION_TODOS] == 1
        assert len(metrics.latencies[names.ANNOTATION_SCAN_DURATION]) == 1

    def test_scan_replaces_previous_results(self) -> None:
        scanner = AnnotationScanner()
        scanner.scan("<one>", _paragraphs("<one>"))

        scanner.scan("clean", _paragraphs("clean"))

        assert scanner.todos == []
        assert scanner.headings == []

    def test_custom_preview_lengths(self) -> None:
        scanner = AnnotationScanner(todo_preview_length=3, heading_preview_length=2)
        content = "<abcdef>\n## xyz"

        todos, headings = scanner.scan(content, _paragraphs(content))

        assert todos[0].text == "abc..."
        assert headings[0].text == "xy..."

    def test_clear(self) -> None:
        scanner = AnnotationScanner()
        scanner.scan("<a>\n## b", _paragraphs("<a>\n## b"))

        scanner.clear()

        assert scanner.todos == []
        assert scanner.headings == []
