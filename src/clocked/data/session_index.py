"""Parse Claude's per-project sessions-index.json manifest."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from clocked.config import MAX_FIRST_PROMPT_LENGTH
from clocked.data.coerce import as_int, as_optional_str, as_str
from clocked.data.timestamps import duration_ms, format_timestamp, parse_timestamp
from clocked.models.indexing import ParseOutcome
from clocked.models.sessions import SessionRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "sessions-index.json"

# Candidate keys per field, camelCase first.
_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("sessionId", "session_id"),
    "created": ("created",),
    "modified": ("modified",),
    "message_count": ("messageCount", "message_count"),
    "summary": ("summary",),
    "first_prompt": ("firstPrompt", "first_prompt"),
    "git_branch": ("gitBranch", "git_branch"),
}


def index_path_for(project_dir: Path) -> Path:
    return project_dir / INDEX_FILE_NAME


def has_session_index(project_dir: Path) -> bool:
    return index_path_for(project_dir).is_file()


def parse_session_index(project_dir: Path, project_path: str) -> ParseOutcome:
    """Parse the manifest in ``project_dir`` into session records.

    A missing manifest is an empty outcome. A manifest that cannot be read or
    decoded is a single error. Each entry is validated independently, so a bad
    entry only costs itself. When an id repeats, the last entry wins.
    """
    index_path = index_path_for(project_dir)
    outcome = ParseOutcome()
    if not index_path.is_file():
        return outcome

    try:
        with open(index_path, encoding="utf-8") as file:
            data = json.load(file)
    except json.JSONDecodeError as exc:
        outcome.errors.append(f"Failed to parse JSON in {index_path}: {exc}")
        return outcome
    except (OSError, UnicodeDecodeError) as exc:
        outcome.errors.append(f"Failed to read {index_path}: {exc}")
        return outcome

    entries = _index_entries(data)
    if entries is None:
        outcome.errors.append(f"{index_path} does not contain a list of session entries")
        return outcome

    by_id: dict[str, SessionRecord] = {}
    for position, entry in enumerate(entries):
        match parse_index_entry(entry, position, index_path, project_path):
            case Ok(session):
                if session.id in by_id:
                    outcome.errors.append(
                        f"Duplicate session {session.id} in {index_path}, keeping the last entry"
                    )
                by_id[session.id] = session
            case Err(error):
                outcome.errors.append(error)
    outcome.sessions = list(by_id.values())

    logger.debug(
        "Parsed %s: %d sessions, %d errors",
        index_path,
        len(outcome.sessions),
        len(outcome.errors),
    )
    return outcome


def parse_index_entry(
    entry: object,
    position: int,
    index_path: Path,
    project_path: str,
) -> Result[SessionRecord, str]:
    """Validate one manifest entry and normalize it into a SessionRecord."""
    if not isinstance(entry, dict):
        return Err(f"Entry {position} in {index_path} is not an object, skipping")

    session_id = as_str(_field(entry, "id"))
    if not session_id:
        return Err(f"Entry {position} in {index_path} missing session_id/sessionId, skipping")

    raw_created = _field(entry, "created")
    raw_modified = _field(entry, "modified")
    if not raw_created:
        return Err(f"Session {session_id} missing created timestamp, skipping")
    if not raw_modified:
        return Err(f"Session {session_id} missing modified timestamp, skipping")

    created = parse_timestamp(raw_created)
    if created is None:
        return Err(f"Session {session_id} has invalid created date: {raw_created}, skipping")
    modified = parse_timestamp(raw_modified)
    if modified is None:
        return Err(f"Session {session_id} has invalid modified date: {raw_modified}, skipping")

    duration = duration_ms(created, modified)
    if duration < 0:
        return Err(
            f"Session {session_id} modified {raw_modified} precedes created {raw_created}, "
            "skipping"
        )

    first_prompt = as_optional_str(_field(entry, "first_prompt"))
    if first_prompt is not None:
        first_prompt = first_prompt[:MAX_FIRST_PROMPT_LENGTH]

    return Ok(
        SessionRecord(
            id=session_id,
            project_path=project_path,
            created=format_timestamp(created),
            modified=format_timestamp(modified),
            duration=duration,
            message_count=as_int(_field(entry, "message_count")),
            summary=as_optional_str(_field(entry, "summary")),
            first_prompt=first_prompt,
            git_branch=as_optional_str(_field(entry, "git_branch")),
        )
    )


def _index_entries(data: object) -> list[object] | None:
    """Accept a flat entry list or a ``{"version": n, "entries": [...]}`` wrapper."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        entries = data.get("entries")
        if isinstance(entries, list):
            return entries
    return None


def _field(entry: dict[str, object], name: str) -> object:
    for key in _ALIASES[name]:
        value = entry.get(key)
        if value is not None and value != "":
            return value
    return None
