from .engine import NO_RESULTS, SearchEngine, build_pattern, find_matches
from .types import Match, SearchStatus

__all__ = [
    "Match",
    "NO_RESULTS",
    "SearchEngine",
    "SearchStatus",
    "build_pattern",
    "find_matches",
]
