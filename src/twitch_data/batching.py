"""Debounced batch loading shared by the user, stream and tag lookups.

A :class:`BatchLoader` owns one :class:`WaiterRegistry` per identifier space
(for example ``"id"`` and ``"login"``). Callers register a waiter for a key and
get back a future. The first registration on an idle loader arms a timer; when
it fires, up to ``batch_size`` pending keys are taken (earlier spaces first,
insertion order within a space) and handed to the fetch function in a single
call. The fetch returns, per space, a mapping of the keys it found. Every
waiter of a selected key is then resolved with its value, or with ``None``
when the key was not found. If the fetch raises, every waiter of every
selected key is rejected with that same exception and unselected keys are left
alone. When the cycle ends, a new one starts straight away if anything is
still pending.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Generic, Hashable, Mapping, Optional, Sequence, TypeVar

from .errors import ClientClosedError

K = TypeVar("K", bound=Hashable)

DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_DELAY = 0.05

Selection = dict[str, list[Any]]
BatchFetch = Callable[[Selection], Awaitable[Mapping[str, Mapping[Any, Any]]]]


class WaiterRegistry(Generic[K]):
    """Ordered mapping of lookup keys to the futures waiting on them."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._waiting: dict[K, list[asyncio.Future]] = {}

    def __len__(self) -> int:
        return len(self._waiting)

    def __contains__(self, key: object) -> bool:
        return key in self._waiting

    def register(self, key: K, waiter: asyncio.Future) -> None:
        """Append ``waiter`` to the list for ``key``, creating the list if needed."""
        self._waiting.setdefault(key, []).append(waiter)

    def drain_all(self, key: K) -> list[asyncio.Future]:
        """Remove and return every waiter registered for ``key``."""
        return self._waiting.pop(key, [])

    def pending_keys(self, limit: Optional[int] = None) -> list[K]:
        """Return up to ``limit`` pending keys in registration order."""
        keys = list(self._waiting)
        if limit is None:
            return keys
        return keys[:max(limit, 0)]

    def resolve(self, key: K, value: Any) -> int:
        """Fulfil every waiter on ``key`` with ``value``; return how many were waiting."""
        waiters = self.drain_all(key)
        for waiter in waiters:
            # A caller may have cancelled its own await.
            if not waiter.done():
                waiter.set_result(value)
        return len(waiters)

    def reject(self, key: K, error: BaseException) -> int:
        """Fail every waiter on ``key`` with ``error``; return how many were waiting."""
        waiters = self.drain_all(key)
        for waiter in waiters:
            if not waiter.done():
                waiter.set_exception(error)
        return len(waiters)

    def reject_all(self, error: BaseException) -> int:
        count = 0
        for key in self.pending_keys():
            count += self.reject(key, error)
        return count


class BatchLoader:
    """Coalesce keyed lookups into bounded, debounced batch fetches.

    Parameters
    ----------
    name
        Entity kind, used in log messages.
    fetch
        Coroutine function called with ``{space: [keys]}`` for the selected
        keys. Must return ``{space: {key: value}}`` for the keys it found.
    spaces
        Identifier spaces in priority order. Keys of earlier spaces are drawn
        before keys of later ones.
    batch_size
        Maximum number of keys across all spaces in one fetch.
    delay
        Seconds between the first request on an idle loader and dispatch.
    logger
        Logger for cycle diagnostics.
    """

    def __init__(
        self,
        name: str,
        fetch: BatchFetch,
        *,
        spaces: Sequence[str] = ("id", "login"),
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay: float = DEFAULT_BATCH_DELAY,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"Invalid batch_size: {batch_size}")
        if not spaces:
            raise ValueError("At least one identifier space is required")
        self.name = name
        self.batch_size = batch_size
        self.delay = delay
        self.registries: dict[str, WaiterRegistry] = {
            space: WaiterRegistry(f"{name}.{space}") for space in spaces
        }
        self._fetch = fetch
        self._logger = logger or logging.getLogger(__name__)
        self._running = False
        self._closed = False
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def scheduled(self) -> bool:
        return self._timer is not None

    @property
    def pending(self) -> bool:
        return any(len(registry) for registry in self.registries.values())

    @property
    def closed(self) -> bool:
        return self._closed

    def registry(self, space: str) -> WaiterRegistry:
        return self.registries[space]

    def load(self, space: str, key: Hashable) -> asyncio.Future:
        """Register a waiter for ``key`` in ``space`` and return its future."""
        registry = self.registries[space]
        future = asyncio.get_running_loop().create_future()
        if self._closed:
            future.set_exception(ClientClosedError(f"{self.name} loader is closed"))
            return future
        registry.register(key, future)
        self.schedule()
        return future

    def schedule(self) -> None:
        """Arm the debounce timer unless a cycle is running or already armed."""
        if self._running or self._timer is not None or self._closed:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._start)

    def _start(self) -> None:
        self._timer = None
        if self._running or self._closed:
            return
        self._running = True
        self._task = asyncio.get_running_loop().create_task(self._run_cycle())

    def _select(self) -> Selection:
        remaining = self.batch_size
        selection: Selection = {}
        for space, registry in self.registries.items():
            keys = registry.pending_keys(remaining) if remaining > 0 else []
            selection[space] = keys
            remaining -= len(keys)
        return selection

    async def _run_cycle(self) -> None:
        selection = self._select()
        try:
            total = sum(len(keys) for keys in selection.values())
            if not total:
                return
            self._logger.debug("Dispatching %s batch of %d keys", self.name, total)
            try:
                found = await self._fetch(selection)
            except Exception as exc:  # noqa: BLE001 - any fetch failure fails the whole cycle
                self._logger.warning("%s batch of %d keys failed: %s", self.name, total, exc)
                for space, keys in selection.items():
                    registry = self.registries[space]
                    for key in keys:
                        registry.reject(key, exc)
                return

            for space, keys in selection.items():
                registry = self.registries[space]
                matches = found.get(space) or {}
                for key in keys:
                    registry.resolve(key, matches.get(key))
        finally:
            self._running = False
            self._task = None
            if not self._closed and self.pending:
                self._start()

    def close(self, error: Optional[BaseException] = None) -> None:
        """Stop scheduling and reject every outstanding waiter."""
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        failure = error or ClientClosedError(f"{self.name} loader was closed")
        for registry in self.registries.values():
            registry.reject_all(failure)

    async def aclose(self) -> None:
        task = self._task
        self.close()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task


__all__ = [
    "DEFAULT_BATCH_DELAY",
    "DEFAULT_BATCH_SIZE",
    "BatchFetch",
    "BatchLoader",
    "Selection",
    "WaiterRegistry",
]
