# src/draft_kit/config.py

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorConfig:
    """Timing and display settings for an editing session.

    Immutable. Delays are in seconds.
    """

    save_delay: float = 0.5
    search_delay: float = 0.05
    content_search_delay: float = 0.3
    todo_preview_length: int = 30
    heading_preview_length: int = 40
    inactivity_threshold: float = 60.0

    def __post_init__(self) -> None:
        for name in ("save_delay", "search_delay", "content_search_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        for name in ("todo_preview_length", "heading_preview_length"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EditorConfig":
        """Load settings from a YAML mapping; missing keys keep their defaults."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping")

        known = {field.name for field in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown editor settings: {', '.join(unknown)}")

        logger.debug("Loaded editor config from %s: %s", path, data)
        return cls(**data)
