"""SQLite cache database: schema, connection lifecycle and transactions."""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS project_groups (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    color TEXT DEFAULT NULL,
    created_at TEXT NOT NULL,
    sort_order INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS projects (
    path TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    first_activity TEXT NOT NULL,
    last_activity TEXT NOT NULL,
    session_count INTEGER DEFAULT 0,
    message_count INTEGER DEFAULT 0,
    total_time INTEGER DEFAULT 0,
    is_hidden INTEGER DEFAULT 0,
    group_id TEXT DEFAULT NULL REFERENCES project_groups(id) ON DELETE SET NULL,
    is_default INTEGER DEFAULT 0,
    merged_into TEXT DEFAULT NULL
);

CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    project_path TEXT NOT NULL REFERENCES projects(path) ON DELETE CASCADE,
    created TEXT NOT NULL,
    modified TEXT NOT NULL,
    duration INTEGER NOT NULL,
    message_count INTEGER DEFAULT 0,
    summary TEXT,
    first_prompt TEXT,
    git_branch TEXT,
    human_time INTEGER DEFAULT 0,
    claude_time INTEGER DEFAULT 0,
    idle_time INTEGER DEFAULT 0,
    message_pair_count INTEGER DEFAULT 0,
    gap_count INTEGER DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_sessions_project ON sessions(project_path, modified);
CREATE INDEX IF NOT EXISTS idx_sessions_created ON sessions(created);
CREATE INDEX IF NOT EXISTS idx_sessions_modified ON sessions(modified);
CREATE INDEX IF NOT EXISTS idx_projects_group ON projects(group_id);
"""


# Dropped children first on a schema rebuild.
_TABLES = ("sessions", "projects", "project_groups")

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class Database:
    """Owns the single aiosqlite connection to the cache.

    Open it with ``async with Database(path) as db:``. Multi-row writes go
    through :meth:`transaction` so readers never see half of them.
    ``requires_full_sync`` is set when opening had to rebuild the schema.
    """

    def __init__(self, db_path: Path) -> None:
        self._path = db_path
        self._conn: aiosqlite.Connection | None = None
        self.requires_full_sync = False

    @property
    def in_memory(self) -> bool:
        return str(self._path) == ":memory:"

    async def __aenter__(self) -> Database:
        return await self.connect()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def connect(self) -> Database:
        """Open the connection and bring the schema up to date."""
        if not self.in_memory:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(self._path))
        conn.row_factory = aiosqlite.Row
        for pragma in _PRAGMAS:
            await conn.execute(pragma)
        self._conn = conn
        await self._migrate()
        await conn.commit()
        return self

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError(f"Database {self._path} is not open; use 'async with Database(...)'")
        return self._conn

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> aiosqlite.Cursor:
        return await self.conn.execute(sql, params)

    async def execute_many(self, sql: str, params_seq: list[tuple[Any, ...]]) -> None:
        await self.conn.executemany(sql, params_seq)

    async def fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[aiosqlite.Row]:
        async with self.conn.execute(sql, params) as cursor:
            return list(await cursor.fetchall())

    async def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> aiosqlite.Row | None:
        async with self.conn.execute(sql, params) as cursor:
            return await cursor.fetchone()

    async def commit(self) -> None:
        await self.conn.commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Database]:
        """Run the enclosed statements atomically, committing on success.

        Nested use is safe: each level is its own savepoint and only the
        outermost level commits.
        """
        savepoint = f"sp_{uuid.uuid4().hex}"
        outermost = not self.conn.in_transaction
        await self.execute(f"SAVEPOINT {savepoint}")
        try:
            yield self
        except BaseException:
            await self.execute(f"ROLLBACK TO {savepoint}")
            await self.execute(f"RELEASE {savepoint}")
            raise
        await self.execute(f"RELEASE {savepoint}")
        if outermost:
            await self.commit()

    async def schema_version(self) -> int:
        row = await self.fetch_one("PRAGMA user_version")
        return int(row[0]) if row is not None else 0

    async def _migrate(self) -> None:
        """Create missing objects, or drop and recreate everything on a version change.

        The cache can always be rebuilt from the Claude directory, so there are
        no incremental migrations.
        """
        current = await self.schema_version()
        self.requires_full_sync = current != SCHEMA_VERSION
        if self.requires_full_sync:
            logger.info("Rebuilding cache schema (version %s -> %s)", current, SCHEMA_VERSION)
            await self.conn.execute("PRAGMA foreign_keys=OFF")
            await self.conn.executescript(
                "".join(f"DROP TABLE IF EXISTS {table};\n" for table in _TABLES)
            )
            await self.conn.execute("PRAGMA foreign_keys=ON")
        await self.conn.executescript(SCHEMA_SQL)
        if self.requires_full_sync:
            await self.conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
