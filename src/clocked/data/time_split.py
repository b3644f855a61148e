"""Human vs. Claude time attribution from message timestamps.

Between two consecutive messages:

- assistant -> user: the human was reading, thinking or typing (human time)
- user -> assistant: Claude was working on the request (Claude time)
- user -> user: further human turns (human time)
- assistant -> assistant: continued generation (Claude time)

Gaps longer than the idle threshold count as idle time and nothing else.

Log timestamps record when a message finishes, not when it starts, so
streaming time is compressed; the split is directional rather than exact.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Literal, TypeAlias

from clocked.config import DEFAULT_IDLE_THRESHOLD_MS
from clocked.data.timestamps import duration_ms
from clocked.models.messages import ParsedMessage
from clocked.models.timing import TimeSplit

Attribution: TypeAlias = Literal["human", "claude", "unknown"]

_ATTRIBUTION: dict[tuple[str, str], Attribution] = {
    ("assistant", "user"): "human",
    ("user", "assistant"): "claude",
    ("user", "user"): "human",
    ("assistant", "assistant"): "claude",
}


def classify_delta(prev_role: str, curr_role: str) -> Attribution:
    """Attribute the time between two messages by their roles."""
    return _ATTRIBUTION.get((prev_role, curr_role), "unknown")


def calculate_time_split(
    messages: Sequence[ParsedMessage],
    idle_threshold_ms: int = DEFAULT_IDLE_THRESHOLD_MS,
) -> TimeSplit:
    """Calculate the time split of one chronologically sorted session."""
    if len(messages) < 2:
        return TimeSplit()

    human_time = 0
    claude_time = 0
    idle_time = 0
    pair_count = 0
    gap_count = 0

    for prev, curr in zip(messages, messages[1:], strict=False):
        delta = duration_ms(prev.timestamp, curr.timestamp)
        if delta < 0:
            continue
        if delta > idle_threshold_ms:
            idle_time += delta
            gap_count += 1
            continue

        pair_count += 1
        match classify_delta(prev.role, curr.role):
            case "human":
                human_time += delta
            case "claude":
                claude_time += delta
            case _:
                half = delta // 2
                human_time += half
                claude_time += delta - half

    return time_split_from_totals(
        human_time=human_time,
        claude_time=claude_time,
        idle_time=idle_time,
        message_pair_count=pair_count,
        gap_count=gap_count,
    )


def aggregate_time_splits(splits: Iterable[TimeSplit]) -> TimeSplit:
    """Sum several splits and recompute percentages from the summed totals.

    Per-split percentages are never averaged, so long sessions weigh more than
    short ones.
    """
    human_time = claude_time = idle_time = pair_count = gap_count = 0
    for split in splits:
        human_time += split.human_time
        claude_time += split.claude_time
        idle_time += split.idle_time
        pair_count += split.message_pair_count
        gap_count += split.gap_count
    return time_split_from_totals(
        human_time=human_time,
        claude_time=claude_time,
        idle_time=idle_time,
        message_pair_count=pair_count,
        gap_count=gap_count,
    )


def time_split_from_totals(
    *,
    human_time: int = 0,
    claude_time: int = 0,
    idle_time: int = 0,
    message_pair_count: int = 0,
    gap_count: int = 0,
) -> TimeSplit:
    """Build a TimeSplit from raw counters, deriving active time and percentages."""
    active_time = human_time + claude_time
    return TimeSplit(
        active_time=active_time,
        human_time=human_time,
        claude_time=claude_time,
        idle_time=idle_time,
        human_percentage=_percentage(human_time, active_time),
        claude_percentage=_percentage(claude_time, active_time),
        message_pair_count=message_pair_count,
        gap_count=gap_count,
    )


def format_time_split(split: TimeSplit) -> str:
    """One-line human-readable summary, e.g. for logs and the CLI."""
    return " | ".join(
        [
            f"Active: {format_duration(split.active_time)}",
            f"Human: {format_duration(split.human_time)} ({split.human_percentage}%)",
            f"Claude: {format_duration(split.claude_time)} ({split.claude_percentage}%)",
            f"Idle: {format_duration(split.idle_time)}",
            f"Pairs: {split.message_pair_count}, Gaps: {split.gap_count}",
        ]
    )


def format_duration(ms: int) -> str:
    hours, remainder = divmod(ms, 60 * 60 * 1000)
    minutes = remainder // (60 * 1000)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _percentage(part: int, total: int) -> int:
    """Half-up rounded integer share of total."""
    if total <= 0:
        return 0
    return (part * 200 + total) // (total * 2)
