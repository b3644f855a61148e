"""Time split service: human vs. Claude time from cached session counters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from result import Err, Ok, Result

from clocked.data.repositories import ProjectRepository, SessionRepository
from clocked.data.time_split import time_split_from_totals
from clocked.models.timing import TimeSplit

if TYPE_CHECKING:
    from clocked.data.db import Database


class TimeSplitService:
    """Service for time split queries.

    Project and overall splits sum the per-session counters first and derive
    percentages from the sums.
    """

    def __init__(self, db: Database) -> None:
        self._sessions = SessionRepository(db)
        self._projects = ProjectRepository(db)

    async def get_session_time_split(self, session_id: str) -> Result[TimeSplit, str]:
        session = await self._sessions.get_session(session_id)
        if session is None:
            return Err(f"Session {session_id} not found")
        return Ok(
            time_split_from_totals(
                human_time=session.human_time,
                claude_time=session.claude_time,
                idle_time=session.idle_time,
                message_pair_count=session.message_pair_count,
                gap_count=session.gap_count,
            )
        )

    async def get_project_time_split(self, project_path: str) -> Result[TimeSplit, str]:
        if await self._projects.get_project(project_path) is None:
            return Err(f"Project {project_path} not found")
        return Ok(await self._sessions.time_totals(project_path))

    async def get_overall_time_split(self) -> Result[TimeSplit, str]:
        return Ok(await self._sessions.time_totals())
