"""Message-level models for parsed JSONL data."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ParsedMessage(BaseModel):
    """A user or assistant message extracted from a session log."""

    uuid: str
    session_id: str
    timestamp: datetime
    role: str  # user, assistant
