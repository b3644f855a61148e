"""Parse and sync result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from clocked.models.projects import ProjectRecord
from clocked.models.sessions import SessionRecord


@dataclass(slots=True)
class ParseOutcome:
    """Sessions parsed for one project plus the data errors met on the way."""

    sessions: list[SessionRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SyncResult:
    """Result of a sync pass.

    ``root`` is None when the Claude projects directory does not exist.
    """

    projects: list[ProjectRecord] = field(default_factory=list)
    sessions: list[SessionRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    root: Path | None = None

    @property
    def root_found(self) -> bool:
        return self.root is not None

    def __str__(self) -> str:
        return (
            f"SyncResult(projects={len(self.projects)}, sessions={len(self.sessions)}, "
            f"errors={len(self.errors)})"
        )


@dataclass(slots=True)
class SyncStatus:
    """Whether a Claude root exists and what the cache currently holds."""

    root_found: bool
    root: Path
    project_count: int = 0
    session_count: int = 0
