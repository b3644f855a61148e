"""Typer CLI for Clocked: sync the cache and query it."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from result import Err, Ok

from clocked.config import DEFAULT_IDLE_THRESHOLD_MS, Config

app = typer.Typer(
    name="clocked",
    help="Claude Code usage analytics from local session history.",
    no_args_is_help=True,
)

ClaudeDirOption = Annotated[
    Path | None,
    typer.Option("--claude-dir", help="Path to Claude data directory"),
]
CacheDirOption = Annotated[
    Path | None,
    typer.Option("--cache-dir", help="Directory holding the SQLite cache"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Clocked command-line interface."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _config(
    claude_dir: Path | None,
    cache_dir: Path | None,
    idle_minutes: int | None = None,
) -> Config:
    return Config(
        claude_dir=claude_dir or Path.home() / ".claude",
        cache_dir=cache_dir or Path.home() / ".clocked",
        idle_threshold_ms=(
            idle_minutes * 60 * 1000 if idle_minutes is not None else DEFAULT_IDLE_THRESHOLD_MS
        ),
    )


@app.command()
def sync(
    claude_dir: ClaudeDirOption = None,
    cache_dir: CacheDirOption = None,
    idle_minutes: Annotated[
        int | None,
        typer.Option("--idle-minutes", min=1, help="Gap length that counts as idle time"),
    ] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Empty the cache first")] = False,
    prune: Annotated[
        bool, typer.Option("--prune", help="Drop cached projects no longer on disk")
    ] = False,
) -> None:
    """Sync Claude session history into the cache."""
    config = _config(claude_dir, cache_dir, idle_minutes)
    asyncio.run(_do_sync(config, clear, prune))


async def _do_sync(config: Config, clear: bool, prune: bool) -> None:
    """Run the sync operation."""
    from clocked.data.db import Database
    from clocked.data.sync import Synchronizer

    typer.echo(f"Syncing sessions from {config.projects_dir}...")

    async with Database(config.db_path) as db:
        synchronizer = Synchronizer(db, config)

        def progress(current: int, total: int, message: str) -> None:
            typer.echo(f"  [{current}/{total}] {message}")

        result = await synchronizer.sync(progress_callback=progress, clear=clear, prune=prune)

    if not result.root_found:
        typer.echo(f"No Claude projects directory at {config.projects_dir}")
        return

    for error in result.errors:
        typer.echo(f"  ! {error}", err=True)
    typer.echo(f"\nDone! {result}")


@app.command()
def status(
    claude_dir: ClaudeDirOption = None,
    cache_dir: CacheDirOption = None,
) -> None:
    """Show whether Claude data exists and what the cache holds."""
    asyncio.run(_do_status(_config(claude_dir, cache_dir)))


async def _do_status(config: Config) -> None:
    from clocked.data.db import Database
    from clocked.data.sync import Synchronizer

    async with Database(config.db_path) as db:
        current = await Synchronizer(db, config).status()

    found = "found" if current.root_found else "not found"
    typer.echo(f"Claude projects: {current.root} ({found})")
    typer.echo(f"Cache: {config.db_path}")
    typer.echo(f"Projects: {current.project_count}")
    typer.echo(f"Sessions: {current.session_count}")


@app.command()
def projects(
    claude_dir: ClaudeDirOption = None,
    cache_dir: CacheDirOption = None,
    show_all: Annotated[bool, typer.Option("--all", help="Include hidden projects")] = False,
) -> None:
    """List cached projects, most recently active first."""
    asyncio.run(_do_projects(_config(claude_dir, cache_dir), show_all))


async def _do_projects(config: Config, show_all: bool) -> None:
    from clocked.services.container import ServiceContainer

    async with await ServiceContainer.create(config) as services:
        match await services.project_service.list_projects(include_hidden=show_all):
            case Ok(rows):
                if not rows:
                    typer.echo("No projects cached. Run 'clocked sync' first.")
                for project in rows:
                    hidden = " (hidden)" if project.is_hidden else ""
                    typer.echo(
                        f"{project.name}{hidden}  {project.path}  "
                        f"sessions={project.session_count} messages={project.message_count} "
                        f"last={project.last_activity}"
                    )
            case Err(error):
                typer.echo(error, err=True)
                raise typer.Exit(code=1)


@app.command()
def sessions(
    claude_dir: ClaudeDirOption = None,
    cache_dir: CacheDirOption = None,
    project: Annotated[
        str | None, typer.Option("--project", help="Decoded project path to filter by")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", min=1, help="Page size")] = 20,
    offset: Annotated[int, typer.Option("--offset", min=0, help="Rows to skip")] = 0,
) -> None:
    """List cached sessions, newest first."""
    asyncio.run(_do_sessions(_config(claude_dir, cache_dir), project, limit, offset))


async def _do_sessions(config: Config, project: str | None, limit: int, offset: int) -> None:
    from clocked.services.container import ServiceContainer

    async with await ServiceContainer.create(config) as services:
        if project:
            result = await services.session_service.list_sessions_by_project(
                project, limit=limit, offset=offset
            )
        else:
            result = await services.session_service.list_sessions(limit=limit, offset=offset)
        match result:
            case Ok((rows, total)):
                for session in rows:
                    label = session.summary or session.first_prompt or ""
                    typer.echo(
                        f"{session.id}  {session.created}  "
                        f"messages={session.message_count}  {label[:60]}"
                    )
                typer.echo(f"Showing {len(rows)} of {total} sessions")
            case Err(error):
                typer.echo(error, err=True)
                raise typer.Exit(code=1)


@app.command()
def time(
    claude_dir: ClaudeDirOption = None,
    cache_dir: CacheDirOption = None,
    project: Annotated[
        str | None, typer.Option("--project", help="Decoded project path to report on")
    ] = None,
) -> None:
    """Show the human vs. Claude time split."""
    asyncio.run(_do_time(_config(claude_dir, cache_dir), project))


async def _do_time(config: Config, project: str | None) -> None:
    from clocked.data.time_split import format_time_split
    from clocked.services.container import ServiceContainer

    async with await ServiceContainer.create(config) as services:
        if project:
            result = await services.time_split_service.get_project_time_split(project)
        else:
            result = await services.time_split_service.get_overall_time_split()
        match result:
            case Ok(split):
                typer.echo(format_time_split(split))
            case Err(error):
                typer.echo(error, err=True)
                raise typer.Exit(code=1)
