"""Shared fixtures for Clocked tests."""

from __future__ import annotations

import json
import shutil
import tempfile
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest

from clocked.config import Config
from clocked.data.db import Database
from clocked.data.paths import encode_project_path


def write_jsonl(path: Path, records: list[object]) -> Path:
    """Write records as one JSON document per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(json.dumps(record) + "\n" for record in records))
    return path


def user_record(
    uuid: str, timestamp: str, text: str = "hello", **extra: object
) -> dict[str, object]:
    return {
        "type": "user",
        "uuid": uuid,
        "timestamp": timestamp,
        "message": {"role": "user", "content": [{"type": "text", "text": text}]},
        **extra,
    }


def assistant_record(
    uuid: str, timestamp: str, text: str = "ok", **extra: object
) -> dict[str, object]:
    return {
        "type": "assistant",
        "uuid": uuid,
        "timestamp": timestamp,
        "message": {"role": "assistant", "content": [{"type": "text", "text": text}]},
        **extra,
    }


# u -> a 5s, a -> u 60s, u -> a 10s
ALPHA_LOG = [
    {"type": "summary", "summary": "Fix the parser", "leafUuid": "a4"},
    user_record("a1", "2026-01-05T10:00:00.000Z", "Please fix the parser", gitBranch="main"),
    assistant_record("a2", "2026-01-05T10:00:05.000Z"),
    user_record("a3", "2026-01-05T10:01:05.000Z", "Now add tests"),
    assistant_record("a4", "2026-01-05T10:01:15.000Z"),
]

ALPHA_INDEX = {
    "version": 1,
    "entries": [
        {
            "sessionId": "alpha-001",
            "created": "2026-01-05T10:00:00Z",
            "modified": "2026-01-05T10:01:15.000Z",
            "messageCount": 4,
            "summary": "Fix the parser",
            "firstPrompt": "Please fix the parser",
            "gitBranch": "main",
        },
        {
            "sessionId": "alpha-002",
            "created": "2026-01-06T09:00:00.000Z",
            "modified": "2026-01-06T09:30:00.000Z",
            "messageCount": 10,
        },
        {"created": "2026-01-07T09:00:00.000Z", "modified": "2026-01-07T09:10:00.000Z"},
    ],
}

BETA_LOG = [
    user_record("b1", "2026-01-04T08:00:00.000Z", "Set up the repo"),
    assistant_record("b2", "2026-01-04T08:00:30.000Z"),
]


@pytest.fixture
def workspace_dir() -> Generator[Path]:
    """A real directory that stands in for the user's source tree.

    Project paths are only synced while they exist on disk, and the directory
    name codec maps every '-' to '/', so this must be a hyphen-free path.
    """
    root = Path(tempfile.mkdtemp(prefix="clocked_"))
    if "-" in str(root):
        shutil.rmtree(root)
        pytest.skip("temporary directory path contains '-'")
    (root / "alpha").mkdir()
    (root / "beta").mkdir()
    yield root
    shutil.rmtree(root, ignore_errors=True)


@pytest.fixture
def alpha_path(workspace_dir: Path) -> str:
    return str(workspace_dir / "alpha")


@pytest.fixture
def beta_path(workspace_dir: Path) -> str:
    return str(workspace_dir / "beta")


@pytest.fixture
def tmp_claude_dir(tmp_path: Path, alpha_path: str, beta_path: str) -> Path:
    """Create a temporary Claude directory with one manifest and one log-only project."""
    claude_dir = tmp_path / ".claude"
    projects_dir = claude_dir / "projects"

    alpha_dir = projects_dir / encode_project_path(alpha_path)
    alpha_dir.mkdir(parents=True)
    (alpha_dir / "sessions-index.json").write_text(json.dumps(ALPHA_INDEX))
    write_jsonl(alpha_dir / "alpha-001.jsonl", ALPHA_LOG)

    beta_dir = projects_dir / encode_project_path(beta_path)
    write_jsonl(beta_dir / "beta-001.jsonl", BETA_LOG)

    return claude_dir


@pytest.fixture
def projects_dir(tmp_claude_dir: Path) -> Path:
    return tmp_claude_dir / "projects"


@pytest.fixture
def test_config(tmp_claude_dir: Path, tmp_path: Path) -> Config:
    """Config pointing at temporary test data."""
    return Config(claude_dir=tmp_claude_dir, cache_dir=tmp_path / "cache")


@pytest.fixture
async def test_db(tmp_path: Path) -> AsyncGenerator[Database]:
    """A fresh on-disk test database."""
    db_path = tmp_path / "test.db"
    db = Database(db_path)
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
async def in_memory_db() -> AsyncGenerator[Database]:
    """SQLite in-memory database for fast unit/integration tests."""
    db = Database(Path(":memory:"))
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)
