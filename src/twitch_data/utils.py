"""Shared helpers for the twitch_data client."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional


def get_path(path: str, payload: Any) -> Any:
    """Walk a dotted ``path`` through nested dicts and lists.

    Two list selectors are understood: ``@each`` maps the rest of the path over
    every element, and ``@last`` picks the final element. Any missing step
    yields ``None``.

    Parameters
    ----------
    path
        Dotted path such as ``"data.searchUsers.edges.@each.node"``.
    payload
        Parsed response to walk.

    Returns
    -------
    object
        The value found at ``path``, or ``None``.
    """
    parts = path.split(".")
    current = payload
    for index, part in enumerate(parts):
        if current is None:
            return None
        if part == "@each":
            if not isinstance(current, list):
                return None
            rest = ".".join(parts[index + 1:])
            if not rest:
                return list(current)
            return [get_path(rest, item) for item in current]
        if part == "@last":
            if not isinstance(current, list) or not current:
                return None
            current = current[-1]
            continue
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            position = int(part)
            current = current[position] if position < len(current) else None
        else:
            return None
    return current


class Debouncer:
    """Trailing-edge debounce of a plain callable on the running event loop.

    Every call to :meth:`__call__` pushes the deadline back by ``delay``
    seconds; the wrapped function runs once the calls stop.
    """

    def __init__(self, func: Callable[[], Any], delay: float) -> None:
        self._func = func
        self._delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None

    def __call__(self, *_args: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self._delay, self._fire)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._func()


__all__ = ["Debouncer", "get_path"]
