# src/draft_kit/store/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["file", "memory"]


@dataclass(frozen=True)
class StoreConfig:
    provider: Provider
    project_path: str | None = None

    # file provider only
    max_attempts: int = 3
    retry_wait: float = 0.2
