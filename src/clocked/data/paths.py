"""Mapping between project paths and Claude's flat project directory names.

Claude stores each project under ``~/.claude/projects/<token>`` where the token
is the project path with every ``/`` replaced by ``-``, so ``/Users/foo/app``
becomes ``-Users-foo-app``. Decoding turns every ``-`` back into ``/``; a path
that itself contains ``-`` therefore does not survive a round trip.
"""

from __future__ import annotations

PATH_SEPARATOR = "/"
SUBSTITUTE = "-"


def encode_project_path(project_path: str) -> str:
    """Encode '/Users/foo/src/myproject' -> '-Users-foo-src-myproject'."""
    return project_path.replace(PATH_SEPARATOR, SUBSTITUTE)


def decode_project_path(token: str) -> str:
    """Decode '-Users-foo-src-myproject' -> '/Users/foo/src/myproject'."""
    return token.replace(SUBSTITUTE, PATH_SEPARATOR)


def project_name_from_path(project_path: str) -> str:
    """Extract a human-readable project name from a project path."""
    segments = [part for part in project_path.split(PATH_SEPARATOR) if part]
    return segments[-1] if segments else "Unknown"
