# src/draft_kit/search/engine.py

import logging
import re
from collections.abc import Callable, Iterable
from time import monotonic

from draft_kit.document.model import DocumentModel, split_lines
from draft_kit.document.paragraph import Paragraph
from draft_kit.observability import names
from draft_kit.observability.base import MetricsHook, NoOpMetricsHook
from draft_kit.scheduling import Debouncer

from .types import Match, SearchStatus

logger = logging.getLogger(__name__)

NO_RESULTS = "No results"
MAX_PREFILL_LENGTH = 100


def build_pattern(query: str, case_sensitive: bool) -> re.Pattern[str] | None:
    """Compile a literal (escaped) pattern; None when there is nothing to find."""
    if not query:
        return None
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(re.escape(query), flags)
    except re.error as exc:
        logger.warning("Could not compile search for %r: %s", query, exc)
        return None


def find_matches(
    paragraphs: Iterable[Paragraph], pattern: re.Pattern[str]
) -> list[Match]:
    matches: list[Match] = []
    for index, paragraph in enumerate(paragraphs):
        for found in pattern.finditer(paragraph.text):
            if found.end() == found.start():
                continue
            matches.append(Match(paragraph=index, start=found.start(), end=found.end()))
    return matches


def _shift(match: Match, replaced: Match, text: str) -> Match:
    """Where `match` sits once `replaced` has been swapped for `text`."""
    lines = split_lines(text)
    added = len(lines) - 1
    if match.paragraph == replaced.paragraph and match.start >= replaced.end:
        # Same line, after the replacement: now on its last line
        base = len(lines[-1]) if added else replaced.start + len(lines[0])
        delta = base - replaced.end
        return Match(match.paragraph + added, match.start + delta, match.end + delta)
    if match.paragraph > replaced.paragraph and added:
        return Match(match.paragraph + added, match.start, match.end)
    return match


class SearchEngine:
    """Find and replace over the paragraphs of a `DocumentModel`.

    Matches are rebuilt from scratch on every search and kept in document
    order. `current_index` points into the match list, or is -1 when there
    are no matches.

    Replacements edit the document and call `on_edit` (the session uses it
    to schedule a save and rescan annotations). They do not re-run the
    search.
    """

    def __init__(
        self,
        document: DocumentModel,
        on_edit: Callable[[], None] | None = None,
        *,
        search_delay: float = 0.05,
        content_search_delay: float = 0.3,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.document = document
        self.on_edit = on_edit
        self.metrics_hook = metrics_hook
        self.on_status: Callable[[SearchStatus], None] | None = None
        self.on_focus: Callable[[Match], None] | None = None

        self.is_open = False
        self.replace_visible = False
        self.query = ""
        self.case_sensitive = False
        self.current_index = -1
        self._matches: list[Match] = []
        self._label = ""

        self._query_debouncer = Debouncer(
            search_delay, self.perform_search, name="search"
        )
        self._content_debouncer = Debouncer(
            content_search_delay, self._refresh_after_edit, name="search-refresh"
        )

    @property
    def matches(self) -> tuple[Match, ...]:
        return tuple(self._matches)

    @property
    def current_match(self) -> Match | None:
        if 0 <= self.current_index < len(self._matches):
            return self._matches[self.current_index]
        return None

    @property
    def status(self) -> SearchStatus:
        return SearchStatus(
            count=len(self._matches), current=self.current_index, label=self._label
        )

    # ------------------------------------------------------------------
    # Open / close
    # ------------------------------------------------------------------

    def open(
        self, with_replace: bool = False, selected_text: str | None = None
    ) -> SearchStatus:
        """Show the find bar, optionally prefilled from the editor selection."""
        self.is_open = True
        self.replace_visible = with_replace

        if selected_text:
            candidate = selected_text.strip()
            fits = len(candidate) < MAX_PREFILL_LENGTH and "\n" not in candidate
            if candidate and fits:
                self.query = candidate

        if self.query:
            return self.perform_search()
        return self.status

    def toggle_replace(self) -> bool:
        self.replace_visible = not self.replace_visible
        return self.replace_visible

    def close(self) -> None:
        self._query_debouncer.cancel()
        self._content_debouncer.cancel()
        self.is_open = False
        self._reset("")

    # ------------------------------------------------------------------
    # Searching
    # ------------------------------------------------------------------

    def search(self, query: str, case_sensitive: bool | None = None) -> SearchStatus:
        self.query = query
        if case_sensitive is not None:
            self.case_sensitive = case_sensitive
        return self.perform_search()

    def set_query(self, query: str) -> None:
        """Update the query as the user types; the search runs after a short pause."""
        self.query = query
        self._query_debouncer.trigger()

    def toggle_case(self) -> SearchStatus:
        self.case_sensitive = not self.case_sensitive
        return self.perform_search()

    def perform_search(self) -> SearchStatus:
        self._query_debouncer.cancel()
        self._content_debouncer.cancel()

        if not self.query:
            self._reset("")
            return self.status

        start = monotonic()
        pattern = build_pattern(self.query, self.case_sensitive)
        matches = find_matches(self.document.paragraphs, pattern) if pattern else []
        elapsed_ms = 1000 * (monotonic() - start)

        self.metrics_hook.record_latency(names.SEARCH_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.SEARCHES_TOTAL)
        self.metrics_hook.record_gauge(names.SEARCH_MATCHES, len(matches))
        logger.debug(
            "Search %r (case_sensitive=%s): %d matches",
            self.query,
            self.case_sensitive,
            len(matches),
        )

        self._matches = matches
        if matches:
            self._go_to(0)
        else:
            self._reset(NO_RESULTS)
        return self.status

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate_next(self) -> SearchStatus:
        if self._matches:
            self._go_to((self.current_index + 1) % len(self._matches))
        return self.status

    def navigate_prev(self) -> SearchStatus:
        if self._matches:
            count = len(self._matches)
            self._go_to((self.current_index - 1 + count) % count)
        return self.status

    # ------------------------------------------------------------------
    # Replacing
    # ------------------------------------------------------------------

    def replace_current(self, text: str) -> SearchStatus:
        match = self.current_match
        if match is None:
            return self.status

        self.document.replace_range(match.paragraph, match.start, match.end, text)
        del self._matches[self.current_index]

        self._matches = [_shift(m, match, text) for m in self._matches]

        self.metrics_hook.increment(names.SEARCH_REPLACEMENTS_TOTAL)
        if self.on_edit:
            self.on_edit()

        if not self._matches:
            self._reset(NO_RESULTS)
        else:
            if self.current_index >= len(self._matches):
                self.current_index = 0
            self._go_to(self.current_index)
        return self.status

    def replace_all(self, text: str) -> SearchStatus:
        if not self._matches:
            return self.status

        # Back to front, so earlier offsets stay valid
        for match in reversed(self._matches):
            self.document.replace_range(match.paragraph, match.start, match.end, text)

        replaced = len(self._matches)
        logger.info("Replaced %d occurrences of %r", replaced, self.query)
        self.metrics_hook.increment(names.SEARCH_REPLACEMENTS_TOTAL, replaced)
        self._reset(NO_RESULTS)

        if self.on_edit:
            self.on_edit()
        return self.status

    # ------------------------------------------------------------------
    # Document notifications
    # ------------------------------------------------------------------

    def on_content_change(self) -> None:
        """The user edited the document; matches are stale until the refresh."""
        if not self.is_open or not self.query:
            return
        self._matches = []
        self.current_index = -1
        self._content_debouncer.trigger()

    def on_chapter_load(self) -> None:
        if not self.is_open:
            return
        self._query_debouncer.cancel()
        self._content_debouncer.cancel()
        self._reset("")
        if self.query:
            self.perform_search()

    def _refresh_after_edit(self) -> None:
        if self.is_open and self.query:
            self.perform_search()

    def _go_to(self, index: int) -> None:
        self.current_index = index
        self._label = f"{index + 1} of {len(self._matches)}"
        if self.on_focus:
            self.on_focus(self._matches[index])
        self._notify()

    def _reset(self, label: str) -> None:
        self._matches = []
        self.current_index = -1
        self._label = label
        self._notify()

    def _notify(self) -> None:
        if self.on_status:
            self.on_status(self.status)
