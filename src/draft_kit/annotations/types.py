from dataclasses import dataclass


@dataclass(frozen=True)
class Todo:
    """A `<...>` note found in the chapter text."""

    text: str
    line: int  # 1-based
    column: int  # 0-based offset within the line


@dataclass(frozen=True)
class Heading:
    """A paragraph starting with `## `."""

    text: str
    line: int  # 1-based paragraph index
