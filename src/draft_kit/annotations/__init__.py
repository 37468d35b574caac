from .scanner import AnnotationScanner, detect_headings, detect_todos
from .types import Heading, Todo

__all__ = [
    "AnnotationScanner",
    "Heading",
    "Todo",
    "detect_headings",
    "detect_todos",
]
