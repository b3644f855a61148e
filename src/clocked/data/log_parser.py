"""Stream-parse Claude JSONL session logs.

Logs are read one line at a time so memory stays bounded whatever the file
size. A malformed line is skipped without giving up on the rest of the file.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

from result import Err, Ok, Result

from clocked.config import MAX_FIRST_PROMPT_LENGTH
from clocked.data.coerce import as_optional_str
from clocked.data.timestamps import duration_ms, format_timestamp, from_epoch, parse_timestamp
from clocked.models.indexing import ParseOutcome
from clocked.models.messages import ParsedMessage
from clocked.models.sessions import SessionRecord

logger = logging.getLogger(__name__)

LOG_SUFFIX = ".jsonl"
_MESSAGE_ROLES = frozenset({"user", "assistant"})


def find_session_logs(project_dir: Path) -> list[Path]:
    """Session log files of a project directory, sorted by name."""
    return sorted(path for path in project_dir.glob(f"*{LOG_SUFFIX}") if path.is_file())


def iter_log_records(path: Path) -> Generator[dict[str, object]]:
    """Yield each JSON object in a JSONL file, skipping lines that are not one.

    Undecodable bytes become U+FFFD so one damaged line cannot end the stream.
    """
    with open(path, encoding="utf-8", errors="replace") as file:
        for line_num, line in enumerate(file, 1):
            line = line.strip()
            if not line:
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("Invalid JSON at %s:%d", path, line_num)
                continue
            if not isinstance(raw, dict):
                logger.debug("Non-object record at %s:%d", path, line_num)
                continue
            yield raw


def parse_session_logs(project_dir: Path, project_path: str) -> ParseOutcome:
    """Derive session records from every log file in a project directory."""
    outcome = ParseOutcome()
    for log_path in find_session_logs(project_dir):
        match parse_session_log(log_path, project_path):
            case Ok(session):
                outcome.sessions.append(session)
            case Err(error):
                outcome.errors.append(error)
    return outcome


def parse_session_log(path: Path, project_path: str) -> Result[SessionRecord, str]:
    """Derive one session's metadata from its log in a single streaming pass.

    ``created``/``modified`` span the valid record timestamps, falling back to
    the file's mtime when there are none. ``message_count`` counts every record
    that decoded, whatever its type. ``first_prompt`` comes from the first user
    record only.
    """
    message_count = 0
    summary: str | None = None
    first_prompt: str | None = None
    seen_user = False
    git_branch: str | None = None
    earliest: datetime | None = None
    latest: datetime | None = None

    try:
        mtime = path.stat().st_mtime
        for raw in iter_log_records(path):
            message_count += 1

            timestamp = parse_timestamp(raw.get("timestamp"))
            if timestamp is not None:
                if earliest is None or timestamp < earliest:
                    earliest = timestamp
                if latest is None or timestamp > latest:
                    latest = timestamp

            if git_branch is None:
                git_branch = as_optional_str(raw.get("gitBranch"))

            match raw.get("type"):
                case "summary":
                    summary = as_optional_str(raw.get("summary")) or summary
                case "user" if not seen_user:
                    seen_user = True
                    text = _first_text_block(raw.get("message"))
                    first_prompt = text[:MAX_FIRST_PROMPT_LENGTH] or None
    except OSError as exc:
        return Err(f"Failed to read {path}: {exc}")

    if earliest is None or latest is None:
        earliest = latest = from_epoch(mtime)

    return Ok(
        SessionRecord(
            id=path.stem,
            project_path=project_path,
            created=format_timestamp(earliest),
            modified=format_timestamp(latest),
            duration=duration_ms(earliest, latest),
            message_count=message_count,
            summary=summary,
            first_prompt=first_prompt,
            git_branch=git_branch,
        )
    )


def iter_log_messages(path: Path, session_id: str = "") -> Generator[ParsedMessage]:
    """Yield the user/assistant messages of a log in file order.

    Meta records, API error records, records without a uuid or a valid
    timestamp, and repeated uuids are skipped.
    """
    fallback_session = session_id or path.stem
    seen: set[str] = set()
    for raw in iter_log_records(path):
        role = raw.get("type")
        if role not in _MESSAGE_ROLES:
            continue
        if raw.get("isMeta") is True or raw.get("isApiErrorMessage") is True:
            continue
        timestamp = parse_timestamp(raw.get("timestamp"))
        uuid = as_optional_str(raw.get("uuid"))
        if timestamp is None or uuid is None or uuid in seen:
            continue
        seen.add(uuid)
        yield ParsedMessage(
            uuid=uuid,
            session_id=as_optional_str(raw.get("sessionId")) or fallback_session,
            timestamp=timestamp,
            role=str(role),
        )


def load_timeline(path: Path, session_id: str = "") -> list[ParsedMessage]:
    """All messages of one log, sorted chronologically."""
    return sorted(iter_log_messages(path, session_id), key=lambda m: m.timestamp)


def _first_text_block(message: object) -> str:
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    for block in content:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str) and text:
                return text
    return ""
