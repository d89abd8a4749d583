"""Types for the streams resource."""

from __future__ import annotations

from typing import Optional, TypedDict
from typing_extensions import ReadOnly


class StreamGame(TypedDict, total=False):
    id: ReadOnly[str]
    name: ReadOnly[str]


class StreamMeta(TypedDict, total=False):
    """Readonly live stream metadata; ``None`` is returned for offline channels."""
    id: ReadOnly[str]
    createdAt: ReadOnly[str]
    type: ReadOnly[str]
    viewersCount: ReadOnly[int]
    game: ReadOnly[Optional[StreamGame]]


__all__ = ["StreamGame", "StreamMeta"]
