"""Time split models."""

from __future__ import annotations

from pydantic import BaseModel


class TimeSplit(BaseModel):
    """Human vs. Claude attribution of the time spent in one or more sessions.

    All durations are milliseconds. ``active_time`` is ``human_time +
    claude_time``; gaps longer than the idle threshold go to ``idle_time`` only.
    """

    active_time: int = 0
    human_time: int = 0
    claude_time: int = 0
    idle_time: int = 0
    human_percentage: int = 0
    claude_percentage: int = 0
    message_pair_count: int = 0
    gap_count: int = 0
