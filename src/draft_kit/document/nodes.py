# src/draft_kit/document/nodes.py

"""Raw nodes reported by the host rendering surface.

The host hands us whatever tree the user's last input produced: loose text
runs, stray line breaks, generic containers, and paragraphs that may carry
embedded breaks. None of this is trusted; `normalize` turns it back into a
plain list of paragraphs.
"""

from dataclasses import dataclass, field
from typing import TypeAlias

ZERO_WIDTH_SPACE = "\u200b"

PARAGRAPH_TAG = "p"


@dataclass(frozen=True)
class RawText:
    text: str


@dataclass(frozen=True)
class RawBreak:
    pass


@dataclass(frozen=True)
class RawBlock:
    tag: str
    children: list["RawNode"] = field(default_factory=list)

    @property
    def is_paragraph(self) -> bool:
        return self.tag.lower() == PARAGRAPH_TAG

    @property
    def text(self) -> str:
        """Text content, ignoring breaks (what the host would call textContent)."""
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, RawText):
                parts.append(child.text)
            elif isinstance(child, RawBlock):
                parts.append(child.text)
        return "".join(parts)

    @property
    def has_breaks(self) -> bool:
        for child in self.children:
            if isinstance(child, RawBreak):
                return True
            if isinstance(child, RawBlock) and child.has_breaks:
                return True
        return False

    def split_on_breaks(self) -> list[str]:
        """Split content at breaks and newlines; trimmed, non-empty parts only."""
        segments = [""]
        for child in self.children:
            if isinstance(child, RawBreak):
                segments.append("")
            elif isinstance(child, RawText):
                segments[-1] += child.text
            else:
                nested = child.split_on_breaks()
                if nested:
                    segments[-1] += nested[0]
                    segments.extend(nested[1:])

        parts: list[str] = []
        for segment in segments:
            for line in segment.split("\n"):
                line = line.strip()
                if line:
                    parts.append(line)
        return parts


RawNode: TypeAlias = RawText | RawBreak | RawBlock


def paragraph_block(text: str) -> RawBlock:
    """Build the canonical host node for one paragraph."""
    return RawBlock(tag=PARAGRAPH_TAG, children=[RawText(text or ZERO_WIDTH_SPACE)])
