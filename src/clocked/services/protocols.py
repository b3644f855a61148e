"""Protocol definitions for services."""

from __future__ import annotations

from typing import Protocol

from result import Result

from clocked.models.projects import ProjectRecord
from clocked.models.sessions import SessionRecord
from clocked.models.timing import TimeSplit


class SessionServiceProtocol(Protocol):
    """Interface for session operations."""

    async def list_sessions(
        self,
        limit: int | None = 50,
        offset: int = 0,
    ) -> Result[tuple[list[SessionRecord], int], str]: ...

    async def list_sessions_by_project(
        self,
        project_path: str,
        limit: int | None = 50,
        offset: int = 0,
    ) -> Result[tuple[list[SessionRecord], int], str]: ...

    async def list_sessions_by_date_range(
        self, start: str, end: str
    ) -> Result[list[SessionRecord], str]: ...

    async def count_sessions(self, project_path: str = "") -> Result[int, str]: ...


class ProjectServiceProtocol(Protocol):
    """Interface for project operations."""

    async def list_projects(
        self, *, include_hidden: bool = False
    ) -> Result[list[ProjectRecord], str]: ...

    async def get_project(self, path: str) -> Result[ProjectRecord, str]: ...

    async def count_projects(self) -> Result[int, str]: ...


class TimeSplitServiceProtocol(Protocol):
    """Interface for time split operations."""

    async def get_session_time_split(self, session_id: str) -> Result[TimeSplit, str]: ...

    async def get_project_time_split(self, project_path: str) -> Result[TimeSplit, str]: ...

    async def get_overall_time_split(self) -> Result[TimeSplit, str]: ...
