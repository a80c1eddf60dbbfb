"""Work queue feeding reconciliation requests to the controller workers."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Hashable

from . import metrics

logger = logging.getLogger(__name__)


class ShutDown(Exception):
    """Raised by ``WorkQueue.get`` once the queue is shut down."""


class WorkQueue:
    """Deduplicating queue that hands out each key to one worker at a time.

    A key added while it waits is queued once. A key added while a worker
    holds it is marked dirty and queued again when the worker calls ``done``,
    so reconciliations of the same key never overlap.

    Must be used from a single event loop.
    """

    def __init__(
        self,
        min_retry_delay: float = 1.0,
        max_retry_delay: float = 60.0,
        retry_backoff: float = 2.0,
    ) -> None:
        self.min_retry_delay = min_retry_delay
        self.max_retry_delay = max_retry_delay
        self.retry_backoff = retry_backoff

        self._queue: deque[Hashable] = deque()
        self._dirty: set[Hashable] = set()
        self._processing: set[Hashable] = set()
        self._failures: dict[Hashable, int] = {}
        self._timers: set[asyncio.TimerHandle] = set()
        self._has_items = asyncio.Event()
        self._shutting_down = False

    def __len__(self) -> int:
        return len(self._queue)

    def add(self, key: Hashable, source: str = "event") -> None:
        """Queue ``key`` unless it is already waiting."""
        if self._shutting_down or key in self._dirty:
            return
        self._dirty.add(key)
        metrics.workqueue_adds_total.labels(source=source).inc()
        if key in self._processing:
            return
        self._queue.append(key)
        metrics.workqueue_depth.set(len(self._queue))
        self._has_items.set()

    def add_after(self, key: Hashable, delay: float, source: str = "requeue") -> None:
        """Queue ``key`` after ``delay`` seconds."""
        if self._shutting_down:
            return
        if delay <= 0:
            self.add(key, source=source)
            return

        loop = asyncio.get_running_loop()

        def fire() -> None:
            self._timers.discard(handle)
            self.add(key, source=source)

        handle = loop.call_later(delay, fire)
        self._timers.add(handle)

    def add_rate_limited(self, key: Hashable) -> float:
        """Queue ``key`` after its exponential failure backoff.

        Returns:
            The delay applied
        """
        failures = self._failures.get(key, 0)
        self._failures[key] = failures + 1
        delay = min(self.min_retry_delay * self.retry_backoff ** failures, self.max_retry_delay)
        self.add_after(key, delay, source="retry")
        return delay

    def forget(self, key: Hashable) -> None:
        """Reset the failure backoff of ``key``."""
        self._failures.pop(key, None)

    def num_requeues(self, key: Hashable) -> int:
        return self._failures.get(key, 0)

    async def get(self) -> Hashable:
        """Wait for the next key and mark it as being processed.

        Raises:
            ShutDown: If the queue is shut down
        """
        while not self._queue:
            if self._shutting_down:
                raise ShutDown()
            self._has_items.clear()
            await self._has_items.wait()
        if self._shutting_down:
            raise ShutDown()

        key = self._queue.popleft()
        metrics.workqueue_depth.set(len(self._queue))
        self._processing.add(key)
        self._dirty.discard(key)
        return key

    def done(self, key: Hashable) -> None:
        """Release ``key``; requeue it if it was added while being processed."""
        self._processing.discard(key)
        if key in self._dirty and not self._shutting_down:
            self._queue.append(key)
            metrics.workqueue_depth.set(len(self._queue))
            self._has_items.set()

    def shutdown(self) -> None:
        """Stop handing out keys and drop pending delayed adds."""
        self._shutting_down = True
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
        self._has_items.set()
        logger.debug("Work queue shut down")
