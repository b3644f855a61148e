"""Session service: queries for session data."""

from __future__ import annotations

from typing import TYPE_CHECKING

from result import Err, Ok, Result

from clocked.data.repositories import SessionRepository
from clocked.data.timestamps import normalize_timestamp
from clocked.models.sessions import SessionRecord

if TYPE_CHECKING:
    from clocked.data.db import Database


class SessionService:
    """Service for session queries."""

    def __init__(self, db: Database) -> None:
        self._sessions = SessionRepository(db)

    async def list_sessions(
        self,
        limit: int | None = 50,
        offset: int = 0,
    ) -> Result[tuple[list[SessionRecord], int], str]:
        """List one page of all sessions, most recently modified first.

        Returns:
            Ok with (sessions, total_count). A limit of None returns every session.
        """
        sessions, total = await self._sessions.list_sessions(
            limit=max(limit, 1) if limit is not None else None,
            offset=max(offset, 0),
        )
        return Ok((sessions, total))

    async def list_sessions_by_project(
        self,
        project_path: str,
        limit: int | None = 50,
        offset: int = 0,
    ) -> Result[tuple[list[SessionRecord], int], str]:
        """List one page of a project's sessions.

        Returns:
            Ok with (sessions, total_count) or Err with error message.
        """
        normalized_limit = max(limit, 1) if limit is not None else None
        sessions, total = await self._sessions.list_sessions_by_project(
            project_path,
            limit=normalized_limit,
            offset=max(offset, 0),
        )
        return Ok((sessions, total))

    async def list_sessions_by_date_range(
        self, start: str, end: str
    ) -> Result[list[SessionRecord], str]:
        """List sessions created between two ISO-8601 timestamps, inclusive."""
        normalized_start = normalize_timestamp(start)
        normalized_end = normalize_timestamp(end)
        if not normalized_start:
            return Err(f"Invalid start timestamp: {start}")
        if not normalized_end:
            return Err(f"Invalid end timestamp: {end}")
        return Ok(
            await self._sessions.list_sessions_by_date_range(normalized_start, normalized_end)
        )

    async def get_session(self, session_id: str) -> Result[SessionRecord, str]:
        session = await self._sessions.get_session(session_id)
        if session is None:
            return Err(f"Session {session_id} not found")
        return Ok(session)

    async def count_sessions(self, project_path: str = "") -> Result[int, str]:
        return Ok(await self._sessions.count_sessions(project_path))
