"""Types and validation helpers for the polls resource."""

from __future__ import annotations

from typing import Any, Optional, Sequence, TypedDict
from typing_extensions import ReadOnly

DEFAULT_POLL_DURATION = 60


class PollChoice(TypedDict, total=False):
    id: ReadOnly[str]
    title: ReadOnly[str]
    votes: ReadOnly[dict[str, int]]


class PollResponse(TypedDict, total=False):
    """Readonly poll dict returned by poll queries and mutations."""
    id: ReadOnly[str]
    title: ReadOnly[str]
    status: ReadOnly[str]
    durationSeconds: ReadOnly[int]
    startedAt: ReadOnly[Optional[str]]
    choices: ReadOnly[list[PollChoice]]


def _normalize_choices(choices: Sequence[str] | object) -> list[dict[str, str]] | None:
    """Convert a list of choice titles to the ``[{"title": ...}]`` input shape.

    Returns ``None`` if ``choices`` is not a list or tuple of strings.
    """
    if not isinstance(choices, (list, tuple)):
        return None
    if any(not isinstance(choice, str) for choice in choices):
        return None
    return [{"title": choice} for choice in choices]


def _normalize_non_negative(value: Any) -> int | float | None:
    """Return ``value`` if it is a non-negative number, else ``None``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0:
        return None
    return value


__all__ = ["DEFAULT_POLL_DURATION", "PollChoice", "PollResponse"]
