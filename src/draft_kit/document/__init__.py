from .cursor import CursorTracker, Position, Selection
from .model import DocumentModel, normalize, split_lines
from .nodes import (
    ZERO_WIDTH_SPACE,
    RawBlock,
    RawBreak,
    RawNode,
    RawText,
    paragraph_block,
)
from .paragraph import HEADING_PREFIX, Paragraph

__all__ = [
    "CursorTracker",
    "DocumentModel",
    "HEADING_PREFIX",
    "Paragraph",
    "Position",
    "RawBlock",
    "RawBreak",
    "RawNode",
    "RawText",
    "Selection",
    "ZERO_WIDTH_SPACE",
    "normalize",
    "paragraph_block",
    "split_lines",
]
