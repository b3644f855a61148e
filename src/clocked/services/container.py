"""Wiring of the database, synchronizer and query services."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import TracebackType
from typing import TYPE_CHECKING

from clocked.data.db import Database
from clocked.data.sync import Synchronizer
from clocked.services.project_service import ProjectService
from clocked.services.session_service import SessionService
from clocked.services.time_split_service import TimeSplitService

if TYPE_CHECKING:
    from clocked.config import Config


@dataclass(frozen=True)
class ServiceContainer:
    """Everything a front end needs, sharing one open database.

    Build with :meth:`create` and release with :meth:`close`, or use the
    container as an async context manager.
    """

    config: Config
    db: Database
    synchronizer: Synchronizer = field(init=False)
    project_service: ProjectService = field(init=False)
    session_service: SessionService = field(init=False)
    time_split_service: TimeSplitService = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "synchronizer", Synchronizer(self.db, self.config))
        object.__setattr__(self, "project_service", ProjectService(self.db))
        object.__setattr__(self, "session_service", SessionService(self.db))
        object.__setattr__(self, "time_split_service", TimeSplitService(self.db))

    @classmethod
    async def create(cls, config: Config) -> ServiceContainer:
        db = await Database(config.db_path).connect()
        return cls(config=config, db=db)

    async def close(self) -> None:
        await self.db.close()

    async def __aenter__(self) -> ServiceContainer:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
