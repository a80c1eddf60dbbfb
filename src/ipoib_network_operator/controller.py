"""Controller workers draining the work queue into the reconciler."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from . import health, metrics
from .constants import KIND_IPOIB_NETWORK
from .models import ReconcileResult, ResourceIdentity
from .utils.context import with_correlation_id
from .utils.errors import sanitize_exception
from .workqueue import ShutDown, WorkQueue

logger = logging.getLogger(__name__)


class Reconciler(Protocol):
    def reconcile(self, identity: ResourceIdentity) -> ReconcileResult:
        ...


class Controller:
    """Runs reconciliations for queued identities on a pool of workers.

    Different identities are reconciled concurrently; the queue guarantees a
    single in-flight reconciliation per identity. The reconciler is blocking,
    so each attempt runs in a worker thread.
    """

    def __init__(self, reconciler: Reconciler, queue: WorkQueue, workers: int = 4, kind: str = KIND_IPOIB_NETWORK):
        self.reconciler = reconciler
        self.queue = queue
        self.workers = workers
        self.kind = kind
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        """Spawn the worker tasks on the running loop."""
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._worker(i), name=f"ipoib-network-worker-{i}")
            for i in range(self.workers)
        ]
        health.set_ready(True)
        logger.info(f"Started {self.workers} {self.kind} workers")

    async def stop(self) -> None:
        """Shut the queue down and wait for the workers to exit."""
        health.set_ready(False)
        self.queue.shutdown()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info(f"Stopped {self.kind} workers")

    async def _worker(self, index: int) -> None:
        while True:
            try:
                key = await self.queue.get()
            except ShutDown:
                return
            try:
                await self.process(key)
            finally:
                self.queue.done(key)

    async def process(self, key: ResourceIdentity) -> None:
        """Reconcile ``key`` once and schedule the follow-up.

        Cancellation propagates and is never treated as a completed attempt.
        """
        with with_correlation_id():
            try:
                result = await asyncio.to_thread(self.reconciler.reconcile, key)
            except asyncio.CancelledError:
                logger.info(f"Reconciliation of {key} cancelled")
                raise
            except Exception as e:
                delay = self.queue.add_rate_limited(key)
                metrics.requeue_total.labels(kind=self.kind, reason="error").inc()
                logger.warning(
                    f"Reconciliation of {key} failed ({type(e).__name__}: {sanitize_exception(e)}), "
                    f"retrying in {delay:.1f}s"
                )
                return

        self.queue.forget(key)
        if result.requeue_after is not None:
            self.queue.add_after(key, result.requeue_after)
