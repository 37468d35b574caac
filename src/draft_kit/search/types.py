from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Match:
    """One occurrence of the query: `[start:end]` of a paragraph's text."""

    paragraph: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class SearchStatus:
    """What the find bar shows: match count, current pointer and a label."""

    count: int
    current: int
    label: str
