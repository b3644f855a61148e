"""Session-level models."""

from __future__ import annotations

from pydantic import BaseModel


class SessionRecord(BaseModel):
    """One cached session.

    Timestamps are normalized UTC strings; ``duration`` is ``modified - created``
    in milliseconds. The time counters hold the session's time split so that
    project and overall splits can be summed without re-reading logs.
    """

    id: str
    project_path: str
    created: str
    modified: str
    duration: int = 0
    message_count: int = 0
    summary: str | None = None
    first_prompt: str | None = None
    git_branch: str | None = None
    human_time: int = 0
    claude_time: int = 0
    idle_time: int = 0
    message_pair_count: int = 0
    gap_count: int = 0
