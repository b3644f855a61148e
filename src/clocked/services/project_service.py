"""Project service: queries and UI attributes for project data."""

from __future__ import annotations

from typing import TYPE_CHECKING

from result import Err, Ok, Result

from clocked.data.repositories import ProjectGroupRepository, ProjectRepository
from clocked.models.projects import ProjectGroup, ProjectRecord

if TYPE_CHECKING:
    from clocked.data.db import Database


class ProjectService:
    """Service for project queries."""

    def __init__(self, db: Database) -> None:
        self._projects = ProjectRepository(db)
        self._groups = ProjectGroupRepository(db)

    async def list_projects(
        self, *, include_hidden: bool = False
    ) -> Result[list[ProjectRecord], str]:
        """List projects sorted by last activity."""
        return Ok(await self._projects.list_projects(include_hidden=include_hidden))

    async def list_hidden_projects(self) -> Result[list[ProjectRecord], str]:
        return Ok(await self._projects.list_hidden())

    async def get_project(self, path: str) -> Result[ProjectRecord, str]:
        """Get a single project by its path."""
        project = await self._projects.get_project(path)
        if project is None:
            return Err(f"Project {path} not found")
        return Ok(project)

    async def count_projects(self) -> Result[int, str]:
        return Ok(await self._projects.count_projects())

    async def set_hidden(self, path: str, hidden: bool) -> Result[ProjectRecord, str]:
        if await self._projects.get_project(path) is None:
            return Err(f"Project {path} not found")
        await self._projects.set_hidden(path, hidden)
        return await self.get_project(path)

    async def set_group(self, path: str, group_id: str | None) -> Result[ProjectRecord, str]:
        if await self._projects.get_project(path) is None:
            return Err(f"Project {path} not found")
        if group_id is not None and await self._groups.get_group(group_id) is None:
            return Err(f"Project group {group_id} not found")
        await self._projects.set_group(path, group_id)
        return await self.get_project(path)

    async def set_merged_into(
        self, path: str, target_path: str | None
    ) -> Result[ProjectRecord, str]:
        if target_path == path:
            return Err("A project cannot be merged into itself")
        for candidate in (path, target_path):
            if candidate is not None and await self._projects.get_project(candidate) is None:
                return Err(f"Project {candidate} not found")
        await self._projects.set_merged_into(path, target_path)
        return await self.get_project(path)

    async def set_default(self, path: str) -> Result[ProjectRecord, str]:
        if await self._projects.get_project(path) is None:
            return Err(f"Project {path} not found")
        await self._projects.set_default(path)
        return await self.get_project(path)

    async def clear_default(self) -> Result[None, str]:
        await self._projects.clear_default()
        return Ok(None)

    async def get_default(self) -> Result[ProjectRecord | None, str]:
        return Ok(await self._projects.get_default())

    async def list_groups(self) -> Result[list[ProjectGroup], str]:
        return Ok(await self._groups.list_groups())

    async def create_group(self, name: str, color: str | None = None) -> Result[ProjectGroup, str]:
        if not name.strip():
            return Err("Group name cannot be empty")
        return Ok(await self._groups.create_group(name.strip(), color))

    async def update_group(
        self,
        group_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
        sort_order: int | None = None,
    ) -> Result[ProjectGroup, str]:
        group = await self._groups.update_group(
            group_id, name=name, color=color, sort_order=sort_order
        )
        if group is None:
            return Err(f"Project group {group_id} not found")
        return Ok(group)

    async def delete_group(self, group_id: str) -> Result[None, str]:
        await self._groups.delete_group(group_id)
        return Ok(None)
