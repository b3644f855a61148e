"""Pydantic models for Clocked."""

from clocked.models.indexing import ParseOutcome, SyncResult, SyncStatus
from clocked.models.messages import ParsedMessage
from clocked.models.projects import ProjectGroup, ProjectRecord
from clocked.models.sessions import SessionRecord
from clocked.models.timing import TimeSplit

__all__ = [
    "ParseOutcome",
    "ParsedMessage",
    "ProjectGroup",
    "ProjectRecord",
    "SessionRecord",
    "SyncResult",
    "SyncStatus",
    "TimeSplit",
]
