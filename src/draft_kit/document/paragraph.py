from dataclasses import dataclass, field

from .nodes import ZERO_WIDTH_SPACE

HEADING_PREFIX = "## "


def strip_placeholder(text: str) -> str:
    return text.replace(ZERO_WIDTH_SPACE, "")


@dataclass
class Paragraph:
    """One block of chapter text. Position in the document is its index.

    `is_heading` is a display tag kept current by the annotation scanner;
    it does not take part in equality.
    """

    text: str = ""
    is_heading: bool = field(default=False, compare=False)

    @property
    def rendered(self) -> str:
        return self.text or ZERO_WIDTH_SPACE

    @property
    def serialized(self) -> str:
        return strip_placeholder(self.text).strip()

    @property
    def matches_heading(self) -> bool:
        return self.text.strip().startswith(HEADING_PREFIX)
