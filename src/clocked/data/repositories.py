"""Repository layer for SQL persistence and query access."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from clocked.data.coerce import as_int, as_optional_str, as_str
from clocked.data.time_split import time_split_from_totals
from clocked.models.projects import ProjectGroup, ProjectRecord
from clocked.models.sessions import SessionRecord
from clocked.models.timing import TimeSplit

if TYPE_CHECKING:
    from clocked.data.db import Database

_SESSION_COLUMNS = """id, project_path, created, modified, duration, message_count,
    summary, first_prompt, git_branch,
    human_time, claude_time, idle_time, message_pair_count, gap_count"""

_UPSERT_PROJECT_SQL = """INSERT INTO projects
    (path, name, first_activity, last_activity, session_count, message_count, total_time)
    VALUES (?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(path) DO UPDATE SET
        name = excluded.name,
        first_activity = excluded.first_activity,
        last_activity = excluded.last_activity,
        session_count = excluded.session_count,
        message_count = excluded.message_count,
        total_time = excluded.total_time"""

_UPSERT_SESSION_SQL = f"""INSERT INTO sessions ({_SESSION_COLUMNS})
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        project_path = excluded.project_path,
        created = excluded.created,
        modified = excluded.modified,
        duration = excluded.duration,
        message_count = excluded.message_count,
        summary = excluded.summary,
        first_prompt = excluded.first_prompt,
        git_branch = excluded.git_branch,
        human_time = excluded.human_time,
        claude_time = excluded.claude_time,
        idle_time = excluded.idle_time,
        message_pair_count = excluded.message_pair_count,
        gap_count = excluded.gap_count"""


class ProjectRepository:
    """SQL query repository for project data."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def upsert_project(self, project: ProjectRecord) -> None:
        """Insert or update a project's computed fields.

        UI attributes (hidden, group, default, merge target) are left alone on
        update.
        """
        async with self._db.transaction():
            await self._db.execute(
                _UPSERT_PROJECT_SQL,
                (
                    project.path,
                    project.name,
                    project.first_activity,
                    project.last_activity,
                    project.session_count,
                    project.message_count,
                    project.total_time,
                ),
            )

    async def list_projects(self, *, include_hidden: bool = True) -> list[ProjectRecord]:
        where = "" if include_hidden else "WHERE is_hidden = 0"
        rows = await self._db.fetch_all(
            f"SELECT * FROM projects {where} ORDER BY last_activity DESC, path"
        )
        return [_row_to_project(row) for row in rows]

    async def list_hidden(self) -> list[ProjectRecord]:
        rows = await self._db.fetch_all(
            "SELECT * FROM projects WHERE is_hidden = 1 ORDER BY last_activity DESC, path"
        )
        return [_row_to_project(row) for row in rows]

    async def get_project(self, path: str) -> ProjectRecord | None:
        row = await self._db.fetch_one("SELECT * FROM projects WHERE path = ?", (path,))
        return _row_to_project(row) if row is not None else None

    async def count_projects(self) -> int:
        row = await self._db.fetch_one("SELECT COUNT(*) as cnt FROM projects")
        return int(row["cnt"]) if row else 0

    async def list_paths(self) -> set[str]:
        rows = await self._db.fetch_all("SELECT path FROM projects")
        return {str(row["path"]) for row in rows}

    async def delete_project(self, path: str) -> None:
        """Delete a project; its sessions go with it."""
        async with self._db.transaction():
            await self._db.execute("DELETE FROM projects WHERE path = ?", (path,))

    async def delete_orphaned_projects(self, valid_paths: Iterable[str]) -> int:
        """Delete every project whose path is not in ``valid_paths``."""
        keep = set(valid_paths)
        orphaned = sorted(path for path in await self.list_paths() if path not in keep)
        async with self._db.transaction():
            for path in orphaned:
                await self.delete_project(path)
        return len(orphaned)

    async def set_hidden(self, path: str, hidden: bool) -> None:
        await self._update(path, "is_hidden", 1 if hidden else 0)

    async def set_group(self, path: str, group_id: str | None) -> None:
        await self._update(path, "group_id", group_id)

    async def set_merged_into(self, path: str, target_path: str | None) -> None:
        await self._update(path, "merged_into", target_path)

    async def _update(self, path: str, column: str, value: object) -> None:
        async with self._db.transaction():
            await self._db.execute(
                f"UPDATE projects SET {column} = ? WHERE path = ?", (value, path)
            )

    async def set_default(self, path: str) -> None:
        """Make ``path`` the only default project."""
        async with self._db.transaction():
            await self._db.execute("UPDATE projects SET is_default = 0 WHERE is_default = 1")
            await self._db.execute("UPDATE projects SET is_default = 1 WHERE path = ?", (path,))

    async def clear_default(self) -> None:
        async with self._db.transaction():
            await self._db.execute("UPDATE projects SET is_default = 0 WHERE is_default = 1")

    async def get_default(self) -> ProjectRecord | None:
        row = await self._db.fetch_one("SELECT * FROM projects WHERE is_default = 1 LIMIT 1")
        return _row_to_project(row) if row is not None else None


class SessionRepository:
    """SQL query repository for session data."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def upsert_session(self, session: SessionRecord) -> None:
        async with self._db.transaction():
            await self._db.execute(_UPSERT_SESSION_SQL, _session_params(session))

    async def upsert_sessions(self, sessions: list[SessionRecord]) -> None:
        """Upsert many sessions in one transaction with a single prepared statement."""
        if not sessions:
            return
        async with self._db.transaction():
            await self._db.execute_many(
                _UPSERT_SESSION_SQL, [_session_params(session) for session in sessions]
            )

    async def list_sessions(
        self,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[SessionRecord], int]:
        """One page of all sessions, newest first, plus the total count."""
        total = await self.count_sessions()
        sql = f"SELECT {_SESSION_COLUMNS} FROM sessions ORDER BY modified DESC, id"
        if limit is None:
            rows = await self._db.fetch_all(sql)
        else:
            rows = await self._db.fetch_all(f"{sql} LIMIT ? OFFSET ?", (limit, offset))
        return [_row_to_session(row) for row in rows], total

    async def list_sessions_by_project(
        self,
        project_path: str,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[SessionRecord], int]:
        """One page of a project's sessions, newest first, plus the total count."""
        count_row = await self._db.fetch_one(
            "SELECT COUNT(*) as cnt FROM sessions WHERE project_path = ?", (project_path,)
        )
        total = int(count_row["cnt"]) if count_row else 0
        sql = f"""SELECT {_SESSION_COLUMNS} FROM sessions
                  WHERE project_path = ?
                  ORDER BY modified DESC, id"""
        if limit is None:
            rows = await self._db.fetch_all(sql, (project_path,))
        else:
            rows = await self._db.fetch_all(
                f"{sql} LIMIT ? OFFSET ?", (project_path, limit, offset)
            )
        return [_row_to_session(row) for row in rows], total

    async def list_sessions_by_date_range(self, start: str, end: str) -> list[SessionRecord]:
        """Sessions created within [start, end], newest first."""
        rows = await self._db.fetch_all(
            f"""SELECT {_SESSION_COLUMNS} FROM sessions
                WHERE created >= ? AND created <= ?
                ORDER BY created DESC, id""",
            (start, end),
        )
        return [_row_to_session(row) for row in rows]

    async def get_session(self, session_id: str) -> SessionRecord | None:
        row = await self._db.fetch_one(
            f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id = ?", (session_id,)
        )
        return _row_to_session(row) if row is not None else None

    async def count_sessions(self, project_path: str = "") -> int:
        if project_path:
            row = await self._db.fetch_one(
                "SELECT COUNT(*) as cnt FROM sessions WHERE project_path = ?", (project_path,)
            )
        else:
            row = await self._db.fetch_one("SELECT COUNT(*) as cnt FROM sessions")
        return int(row["cnt"]) if row else 0

    async def delete_sessions_by_project(self, project_path: str) -> None:
        async with self._db.transaction():
            await self._db.execute("DELETE FROM sessions WHERE project_path = ?", (project_path,))

    async def time_totals(self, project_path: str = "") -> TimeSplit:
        """Sum the stored time counters, over one project or everything."""
        where = "WHERE project_path = ?" if project_path else ""
        params: tuple[str, ...] = (project_path,) if project_path else ()
        row = await self._db.fetch_one(
            f"""SELECT
                    COALESCE(SUM(human_time), 0) as human_time,
                    COALESCE(SUM(claude_time), 0) as claude_time,
                    COALESCE(SUM(idle_time), 0) as idle_time,
                    COALESCE(SUM(message_pair_count), 0) as message_pair_count,
                    COALESCE(SUM(gap_count), 0) as gap_count
                FROM sessions {where}""",
            params,
        )
        if row is None:
            return TimeSplit()
        r: dict[str, object] = dict(row)
        return time_split_from_totals(
            human_time=as_int(r.get("human_time")),
            claude_time=as_int(r.get("claude_time")),
            idle_time=as_int(r.get("idle_time")),
            message_pair_count=as_int(r.get("message_pair_count")),
            gap_count=as_int(r.get("gap_count")),
        )


class ProjectGroupRepository:
    """SQL query repository for project groups."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_group(self, name: str, color: str | None = None) -> ProjectGroup:
        row = await self._db.fetch_one("SELECT MAX(sort_order) as max_order FROM project_groups")
        max_order = row["max_order"] if row is not None else None
        group = ProjectGroup(
            id=uuid.uuid4().hex,
            name=name,
            color=color,
            created_at=datetime.now(UTC).isoformat(),
            sort_order=(max_order if max_order is not None else -1) + 1,
        )
        async with self._db.transaction():
            await self._db.execute(
                """INSERT INTO project_groups (id, name, color, created_at, sort_order)
                   VALUES (?, ?, ?, ?, ?)""",
                (group.id, group.name, group.color, group.created_at, group.sort_order),
            )
        return group

    async def list_groups(self) -> list[ProjectGroup]:
        rows = await self._db.fetch_all(
            "SELECT * FROM project_groups ORDER BY sort_order ASC, name ASC"
        )
        return [_row_to_group(row) for row in rows]

    async def get_group(self, group_id: str) -> ProjectGroup | None:
        row = await self._db.fetch_one("SELECT * FROM project_groups WHERE id = ?", (group_id,))
        return _row_to_group(row) if row is not None else None

    async def update_group(
        self,
        group_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
        sort_order: int | None = None,
    ) -> ProjectGroup | None:
        """Update the given fields; returns None when the group does not exist."""
        assignments: list[str] = []
        params: list[object] = []
        if name is not None:
            assignments.append("name = ?")
            params.append(name)
        if color is not None:
            assignments.append("color = ?")
            params.append(color)
        if sort_order is not None:
            assignments.append("sort_order = ?")
            params.append(sort_order)
        if assignments:
            async with self._db.transaction():
                await self._db.execute(
                    f"UPDATE project_groups SET {', '.join(assignments)} WHERE id = ?",
                    (*params, group_id),
                )
        return await self.get_group(group_id)

    async def delete_group(self, group_id: str) -> None:
        """Delete a group, unassigning its projects first."""
        async with self._db.transaction():
            await self._db.execute(
                "UPDATE projects SET group_id = NULL WHERE group_id = ?", (group_id,)
            )
            await self._db.execute("DELETE FROM project_groups WHERE id = ?", (group_id,))


class CacheStore:
    """The project/session cache, with the multi-row writes used by sync."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self.projects = ProjectRepository(db)
        self.sessions = SessionRepository(db)
        self.groups = ProjectGroupRepository(db)

    async def replace_project(self, project: ProjectRecord, sessions: list[SessionRecord]) -> None:
        """Write a project and exactly these sessions for it, atomically.

        Sessions cached for the project but absent from ``sessions`` are
        removed.
        """
        async with self._db.transaction():
            await self.projects.upsert_project(project)
            await self.sessions.delete_sessions_by_project(project.path)
            await self.sessions.upsert_sessions(sessions)

    async def remove_project(self, path: str) -> None:
        async with self._db.transaction():
            await self.sessions.delete_sessions_by_project(path)
            await self.projects.delete_project(path)

    async def clear_all(self) -> None:
        """Empty sessions, projects and groups."""
        async with self._db.transaction():
            await self._db.execute("DELETE FROM sessions")
            await self._db.execute("DELETE FROM projects")
            await self._db.execute("DELETE FROM project_groups")


def _session_params(session: SessionRecord) -> tuple[object, ...]:
    return (
        session.id,
        session.project_path,
        session.created,
        session.modified,
        session.duration,
        session.message_count,
        session.summary,
        session.first_prompt,
        session.git_branch,
        session.human_time,
        session.claude_time,
        session.idle_time,
        session.message_pair_count,
        session.gap_count,
    )


def _row_to_project(row: object) -> ProjectRecord:
    r: dict[str, object] = dict(row)  # type: ignore[call-overload]
    return ProjectRecord(
        path=as_str(r.get("path")),
        name=as_str(r.get("name")),
        first_activity=as_str(r.get("first_activity")),
        last_activity=as_str(r.get("last_activity")),
        session_count=as_int(r.get("session_count")),
        message_count=as_int(r.get("message_count")),
        total_time=as_int(r.get("total_time")),
        is_hidden=bool(r.get("is_hidden", 0)),
        group_id=as_optional_str(r.get("group_id")),
        is_default=bool(r.get("is_default", 0)),
        merged_into=as_optional_str(r.get("merged_into")),
    )


def _row_to_session(row: object) -> SessionRecord:
    r: dict[str, object] = dict(row)  # type: ignore[call-overload]
    return SessionRecord(
        id=as_str(r.get("id")),
        project_path=as_str(r.get("project_path")),
        created=as_str(r.get("created")),
        modified=as_str(r.get("modified")),
        duration=as_int(r.get("duration")),
        message_count=as_int(r.get("message_count")),
        summary=as_optional_str(r.get("summary")),
        first_prompt=as_optional_str(r.get("first_prompt")),
        git_branch=as_optional_str(r.get("git_branch")),
        human_time=as_int(r.get("human_time")),
        claude_time=as_int(r.get("claude_time")),
        idle_time=as_int(r.get("idle_time")),
        message_pair_count=as_int(r.get("message_pair_count")),
        gap_count=as_int(r.get("gap_count")),
    )


def _row_to_group(row: object) -> ProjectGroup:
    r: dict[str, object] = dict(row)  # type: ignore[call-overload]
    return ProjectGroup(
        id=as_str(r.get("id")),
        name=as_str(r.get("name")),
        color=as_optional_str(r.get("color")),
        created_at=as_str(r.get("created_at")),
        sort_order=as_int(r.get("sort_order")),
    )
