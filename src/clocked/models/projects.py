"""Project-level models."""

from __future__ import annotations

from pydantic import BaseModel


class ProjectRecord(BaseModel):
    """One cached project, keyed by its decoded path.

    ``first_activity``/``last_activity``, the counts and ``total_time`` are
    aggregates over the project's sessions and are recomputed on every sync.
    The remaining fields belong to the UI layer and are carried through as-is.
    """

    path: str
    name: str = ""
    first_activity: str = ""
    last_activity: str = ""
    session_count: int = 0
    message_count: int = 0
    total_time: int = 0
    is_hidden: bool = False
    group_id: str | None = None
    is_default: bool = False
    merged_into: str | None = None


class ProjectGroup(BaseModel):
    """A user-defined grouping of projects."""

    id: str
    name: str
    color: str | None = None
    created_at: str = ""
    sort_order: int = 0
