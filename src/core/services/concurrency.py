"""Concurrency primitives for the dispatcher.

- `ConcurrencyLimiter`: counting admission gate (at most N admitted units).
- `CompletionTracker`: wait-group style join barrier for fire-and-forget tasks.

Both are asyncio-native and must be used from a single event loop.
"""

from __future__ import annotations

import asyncio
from types import TracebackType


class ConcurrencyLimiter:
    """Caps the number of simultaneously admitted dispatch units.

    `acquire` parks the caller until a slot is free; `release` frees exactly
    one slot. Prefer `async with limiter:` so the release happens on every
    exit path.
    """

    def __init__(self, limit: int = 10) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self._admitted = 0
        self._peak = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def admitted(self) -> int:
        """Units currently holding a slot."""

        return self._admitted

    @property
    def peak(self) -> int:
        """Highest `admitted` value observed since construction."""

        return self._peak

    async def acquire(self) -> None:
        await self._semaphore.acquire()
        self._admitted += 1
        self._peak = max(self._peak, self._admitted)

    def release(self) -> None:
        if self._admitted <= 0:
            raise RuntimeError("release() called without a matching acquire()")
        self._admitted -= 1
        self._semaphore.release()

    async def __aenter__(self) -> ConcurrencyLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


class CompletionTracker:
    """Counts outstanding units; `wait` returns once the count drops to zero."""

    def __init__(self) -> None:
        self._pending = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> int:
        return self._pending

    def add(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._pending += count
        if self._pending:
            self._idle.clear()

    def done(self) -> None:
        if self._pending <= 0:
            raise RuntimeError("done() called more times than add()")
        self._pending -= 1
        if self._pending == 0:
            self._idle.set()

    async def wait(self) -> None:
        await self._idle.wait()
