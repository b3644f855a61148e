"""Sync Claude session data into the local SQLite cache."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from clocked.data.discovery import discover_project_dirs
from clocked.data.log_parser import load_timeline, parse_session_logs
from clocked.data.paths import decode_project_path, project_name_from_path
from clocked.data.repositories import CacheStore
from clocked.data.session_index import has_session_index, parse_session_index
from clocked.data.time_split import calculate_time_split
from clocked.models.indexing import ParseOutcome, SyncResult, SyncStatus
from clocked.models.projects import ProjectRecord
from clocked.models.sessions import SessionRecord

if TYPE_CHECKING:
    from clocked.config import Config
    from clocked.data.db import Database

logger = logging.getLogger(__name__)

ProgressCallback: TypeAlias = Callable[[int, int, str], None]


class Synchronizer:
    """Reconciles the cache with the Claude projects directory.

    Discovery -> per-project parsing (manifest first, logs as fallback) ->
    time split enrichment -> one transactional write per project. Data problems
    are collected as error strings; they never abort the pass.
    """

    def __init__(self, db: Database, config: Config) -> None:
        self._config = config
        self._store = CacheStore(db)

    @property
    def store(self) -> CacheStore:
        return self._store

    async def sync(
        self,
        progress_callback: ProgressCallback | None = None,
        *,
        clear: bool = False,
        prune: bool = False,
    ) -> SyncResult:
        """Run one full sync pass.

        Args:
            progress_callback: Optional callback for progress updates.
            clear: Empty the cache before syncing.
            prune: Drop cached projects whose directory is gone or no longer
                decodes to an existing path. Projects that failed to parse
                keep their rows.

        Returns:
            SyncResult with the records written and every error collected. Its
            ``root`` is None when the projects directory does not exist, in
            which case nothing is written.
        """
        root = self._config.projects_dir
        if not root.is_dir():
            logger.info("Claude projects directory not found: %s", root)
            return SyncResult(root=None)

        if clear:
            await self._store.clear_all()

        result = SyncResult(root=root)
        project_dirs = discover_project_dirs(root)
        present: set[str] = set()
        total = len(project_dirs)

        for i, dir_name in enumerate(project_dirs):
            project_path = decode_project_path(dir_name)
            if not Path(project_path).exists():
                logger.debug("Skipping %s: %s no longer exists", dir_name, project_path)
                continue
            present.add(project_path)

            if progress_callback:
                progress_callback(i, total, f"Syncing {project_name_from_path(project_path)}...")

            try:
                outcome = self.parse_project(root / dir_name, project_path)
                result.errors.extend(outcome.errors)
                if not outcome.sessions:
                    # Keep what is cached when the source could not be read.
                    if not outcome.errors:
                        await self._store.remove_project(project_path)
                    continue
                project = aggregate_project(project_path, outcome.sessions)
                await self._store.replace_project(project, outcome.sessions)
            except Exception as exc:
                logger.exception("Failed to sync %s", dir_name)
                result.errors.append(f"Failed to sync {dir_name}: {exc}")
                continue

            result.projects.append(project)
            result.sessions.extend(outcome.sessions)

        if prune:
            removed = await self._store.projects.delete_orphaned_projects(present)
            if removed:
                logger.info("Pruned %d stale projects", removed)

        if progress_callback:
            progress_callback(total, total, "Sync complete")

        logger.info(
            "Synced %d projects, %d sessions from %s",
            len(result.projects),
            len(result.sessions),
            root,
        )
        if result.errors:
            logger.warning("Encountered %d parsing errors", len(result.errors))
        return result

    def parse_project(self, project_dir: Path, project_path: str) -> ParseOutcome:
        """Parse one project directory and attach time splits to its sessions."""
        if has_session_index(project_dir):
            outcome = parse_session_index(project_dir, project_path)
        else:
            outcome = parse_session_logs(project_dir, project_path)

        outcome.sessions = [
            self._with_time_split(project_dir, session, outcome.errors)
            for session in outcome.sessions
        ]
        return outcome

    def _with_time_split(
        self,
        project_dir: Path,
        session: SessionRecord,
        errors: list[str],
    ) -> SessionRecord:
        log_path = project_dir / f"{session.id}.jsonl"
        if not log_path.is_file():
            return session
        try:
            timeline = load_timeline(log_path, session.id)
        except OSError as exc:
            errors.append(f"Failed to read {log_path}: {exc}")
            return session

        split = calculate_time_split(timeline, self._config.idle_threshold_ms)
        return session.model_copy(
            update={
                "human_time": split.human_time,
                "claude_time": split.claude_time,
                "idle_time": split.idle_time,
                "message_pair_count": split.message_pair_count,
                "gap_count": split.gap_count,
            }
        )

    async def status(self) -> SyncStatus:
        """Whether the projects directory exists, plus current cache counts."""
        root = self._config.projects_dir
        return SyncStatus(
            root_found=root.is_dir(),
            root=root,
            project_count=await self._store.projects.count_projects(),
            session_count=await self._store.sessions.count_sessions(),
        )


def aggregate_project(project_path: str, sessions: list[SessionRecord]) -> ProjectRecord:
    """Build a project's record from its (non-empty) list of sessions."""
    return ProjectRecord(
        path=project_path,
        name=project_name_from_path(project_path),
        first_activity=min(session.created for session in sessions),
        last_activity=max(session.modified for session in sessions),
        session_count=len(sessions),
        message_count=sum(session.message_count for session in sessions),
        total_time=sum(session.duration for session in sessions),
    )
