"""Tests for services."""

from __future__ import annotations

import pytest
from result import Err, Ok

from clocked.config import Config
from clocked.data.db import Database
from clocked.data.sync import Synchronizer
from clocked.services.container import ServiceContainer
from clocked.services.project_service import ProjectService
from clocked.services.session_service import SessionService
from clocked.services.time_split_service import TimeSplitService


@pytest.fixture
async def synced_db(test_db: Database, test_config: Config) -> Database:
    """Database with synced test data."""
    await Synchronizer(test_db, test_config).sync()
    return test_db


class TestProjectService:
    @pytest.mark.asyncio
    async def test_list_projects(self, synced_db: Database, alpha_path: str) -> None:
        svc = ProjectService(synced_db)
        result = await svc.list_projects()
        assert isinstance(result, Ok)
        assert len(result.ok_value) == 2
        # alpha holds the most recent session
        assert result.ok_value[0].path == alpha_path

    @pytest.mark.asyncio
    async def test_hidden_projects(self, synced_db: Database, alpha_path: str) -> None:
        svc = ProjectService(synced_db)
        assert isinstance(await svc.set_hidden(alpha_path, True), Ok)

        visible = await svc.list_projects()
        everything = await svc.list_projects(include_hidden=True)
        hidden = await svc.list_hidden_projects()
        assert isinstance(visible, Ok) and len(visible.ok_value) == 1
        assert isinstance(everything, Ok) and len(everything.ok_value) == 2
        assert isinstance(hidden, Ok) and [p.path for p in hidden.ok_value] == [alpha_path]

    @pytest.mark.asyncio
    async def test_get_project(self, synced_db: Database, beta_path: str) -> None:
        svc = ProjectService(synced_db)
        found = await svc.get_project(beta_path)
        assert isinstance(found, Ok)
        assert found.ok_value.name == "beta"
        assert isinstance(await svc.get_project("/no/such/project"), Err)

    @pytest.mark.asyncio
    async def test_count_projects(self, synced_db: Database) -> None:
        assert await ProjectService(synced_db).count_projects() == Ok(2)

    @pytest.mark.asyncio
    async def test_groups(self, synced_db: Database, alpha_path: str) -> None:
        svc = ProjectService(synced_db)
        created = await svc.create_group("  Work  ", "#00ff00")
        assert isinstance(created, Ok)
        group = created.ok_value
        assert group.name == "Work"

        assigned = await svc.set_group(alpha_path, group.id)
        assert isinstance(assigned, Ok)
        assert assigned.ok_value.group_id == group.id
        assert isinstance(await svc.set_group(alpha_path, "missing"), Err)

        renamed = await svc.update_group(group.id, name="Office")
        assert isinstance(renamed, Ok) and renamed.ok_value.name == "Office"
        assert isinstance(await svc.update_group("missing", name="x"), Err)

        assert isinstance(await svc.delete_group(group.id), Ok)
        project = await svc.get_project(alpha_path)
        assert isinstance(project, Ok) and project.ok_value.group_id is None
        assert isinstance(await svc.create_group("   "), Err)

    @pytest.mark.asyncio
    async def test_default_project(
        self, synced_db: Database, alpha_path: str, beta_path: str
    ) -> None:
        svc = ProjectService(synced_db)
        assert await svc.get_default() == Ok(None)
        await svc.set_default(alpha_path)
        await svc.set_default(beta_path)
        default = await svc.get_default()
        assert isinstance(default, Ok)
        assert default.ok_value is not None and default.ok_value.path == beta_path
        assert isinstance(await svc.set_default("/no/such/project"), Err)

    @pytest.mark.asyncio
    async def test_merge(self, synced_db: Database, alpha_path: str, beta_path: str) -> None:
        svc = ProjectService(synced_db)
        merged = await svc.set_merged_into(beta_path, alpha_path)
        assert isinstance(merged, Ok) and merged.ok_value.merged_into == alpha_path
        assert isinstance(await svc.set_merged_into(alpha_path, alpha_path), Err)
        unmerged = await svc.set_merged_into(beta_path, None)
        assert isinstance(unmerged, Ok) and unmerged.ok_value.merged_into is None


class TestSessionService:
    @pytest.mark.asyncio
    async def test_list_sessions(self, synced_db: Database) -> None:
        result = await SessionService(synced_db).list_sessions()
        assert isinstance(result, Ok)
        sessions, total = result.ok_value
        assert total == 3
        assert [s.id for s in sessions] == ["alpha-002", "alpha-001", "beta-001"]

    @pytest.mark.asyncio
    async def test_list_sessions_page(self, synced_db: Database) -> None:
        result = await SessionService(synced_db).list_sessions(limit=1, offset=1)
        assert isinstance(result, Ok)
        sessions, total = result.ok_value
        assert total == 3
        assert [s.id for s in sessions] == ["alpha-001"]

    @pytest.mark.asyncio
    async def test_list_sessions_by_project(self, synced_db: Database, alpha_path: str) -> None:
        svc = SessionService(synced_db)
        result = await svc.list_sessions_by_project(alpha_path, limit=1, offset=1)
        assert isinstance(result, Ok)
        sessions, total = result.ok_value
        assert total == 2
        assert [s.id for s in sessions] == ["alpha-001"]

    @pytest.mark.asyncio
    async def test_date_range_normalizes_bounds(self, synced_db: Database) -> None:
        svc = SessionService(synced_db)
        result = await svc.list_sessions_by_date_range(
            "2026-01-05T12:00:00+02:00", "2026-01-06T23:59:59Z"
        )
        assert isinstance(result, Ok)
        assert [s.id for s in result.ok_value] == ["alpha-002", "alpha-001"]

    @pytest.mark.asyncio
    async def test_date_range_rejects_invalid_bounds(self, synced_db: Database) -> None:
        svc = SessionService(synced_db)
        assert isinstance(await svc.list_sessions_by_date_range("soon", "2026-01-06"), Err)
        assert isinstance(await svc.list_sessions_by_date_range("2026-01-06", ""), Err)

    @pytest.mark.asyncio
    async def test_get_session(self, synced_db: Database) -> None:
        svc = SessionService(synced_db)
        found = await svc.get_session("alpha-001")
        assert isinstance(found, Ok)
        assert found.ok_value.summary == "Fix the parser"
        assert isinstance(await svc.get_session("nonexistent"), Err)

    @pytest.mark.asyncio
    async def test_count_sessions(self, synced_db: Database, beta_path: str) -> None:
        svc = SessionService(synced_db)
        assert await svc.count_sessions() == Ok(3)
        assert await svc.count_sessions(beta_path) == Ok(1)


class TestTimeSplitService:
    @pytest.mark.asyncio
    async def test_session_split(self, synced_db: Database) -> None:
        result = await TimeSplitService(synced_db).get_session_time_split("alpha-001")
        assert isinstance(result, Ok)
        split = result.ok_value
        assert split.active_time == 75_000
        assert split.human_percentage == 80
        assert split.claude_percentage == 20

    @pytest.mark.asyncio
    async def test_project_split(self, synced_db: Database, beta_path: str) -> None:
        svc = TimeSplitService(synced_db)
        result = await svc.get_project_time_split(beta_path)
        assert isinstance(result, Ok)
        assert result.ok_value.claude_time == 30_000
        assert result.ok_value.claude_percentage == 100
        assert isinstance(await svc.get_project_time_split("/no/such/project"), Err)

    @pytest.mark.asyncio
    async def test_overall_split(self, synced_db: Database) -> None:
        result = await TimeSplitService(synced_db).get_overall_time_split()
        assert isinstance(result, Ok)
        split = result.ok_value
        assert split.human_time == 60_000
        assert split.claude_time == 45_000
        assert split.human_percentage == 57
        assert split.claude_percentage == 43
        assert split.message_pair_count == 4

    @pytest.mark.asyncio
    async def test_missing_session(self, synced_db: Database) -> None:
        result = await TimeSplitService(synced_db).get_session_time_split("nonexistent")
        assert isinstance(result, Err)


@pytest.mark.asyncio
async def test_service_container_wiring_and_close(test_config: Config) -> None:
    container = await ServiceContainer.create(test_config)
    try:
        result = await container.synchronizer.sync()
        assert len(result.projects) == 2
        assert await container.project_service.count_projects() == Ok(2)
        assert await container.session_service.count_sessions() == Ok(3)
        overall = await container.time_split_service.get_overall_time_split()
        assert isinstance(overall, Ok) and overall.ok_value.active_time == 105_000
    finally:
        await container.close()
    assert test_config.db_path.is_file()
