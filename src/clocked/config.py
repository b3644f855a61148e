"""Configuration for Clocked."""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_IDLE_THRESHOLD_MS = 30 * 60 * 1000
MAX_FIRST_PROMPT_LENGTH = 500


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    claude_dir: Path = field(default_factory=lambda: Path.home() / ".claude")
    cache_dir: Path = field(default_factory=lambda: Path.home() / ".clocked")
    idle_threshold_ms: int = DEFAULT_IDLE_THRESHOLD_MS

    @property
    def projects_dir(self) -> Path:
        return self.claude_dir / "projects"

    @property
    def db_path(self) -> Path:
        return self.cache_dir / "cache.db"
