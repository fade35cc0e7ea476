"""
RefreshScheduler — keeps a DataStore fresh on a fixed interval, plus a display clock.

Idle → Loading → Ready | Failed, then back to Loading on every tick while active.
stop() tears down both timers and settles a pending Loading state; a fetch still
in flight may finish, but its result is dropped.
"""
from __future__ import annotations

import asyncio
import datetime as dt
import logging
from typing import Callable, Optional

from fleetboard.config import CLOCK_TICK_SECONDS
from fleetboard.data.loader import IngestResult, SheetIngestor
from fleetboard.data.store import DataStore
from fleetboard.errors import AccessDeniedError
from fleetboard.session import Session

logger = logging.getLogger(__name__)


class RefreshScheduler:
    def __init__(
        self,
        ingestor: SheetIngestor,
        store: DataStore,
        interval: float,
        clock_interval: float = CLOCK_TICK_SECONDS,
        now: Callable[[], dt.datetime] = dt.datetime.now,
    ) -> None:
        self.ingestor = ingestor
        self.store = store
        self.interval = interval
        self.clock_interval = clock_interval
        self._now = now
        self.current_time: dt.datetime = now()

        self._generation = 0
        self._active = False
        self._poll_task: Optional[asyncio.Task] = None
        self._clock_task: Optional[asyncio.Task] = None
        self._cycle_task: Optional[asyncio.Task] = None
        self._cycle_generation = 0
        self._cycles: set[asyncio.Task] = set()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def in_flight(self) -> bool:
        """A cycle of the current run is still fetching. Cycles orphaned by stop() do not count."""
        return (
            self._cycle_task is not None
            and not self._cycle_task.done()
            and self._cycle_generation == self._generation
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, session: Session) -> None:
        """Start polling and the clock. Must be called from a running event loop."""
        if not session.authenticated:
            raise AccessDeniedError("Refresh lifecycle requires an authenticated session")
        if self._active:
            return
        loop = asyncio.get_running_loop()
        self._active = True
        self._generation += 1
        self._poll_task = loop.create_task(self._poll_loop())
        self._clock_task = loop.create_task(self._clock_loop())
        logger.info("%s refresh started (every %ss)", self.store.dataset.name, self.interval)

    def stop(self) -> None:
        """Cancel both timers and leave Loading; results of an in-flight cycle will be discarded."""
        if not self._active:
            return
        self._active = False
        self._generation += 1
        for task in (self._poll_task, self._clock_task):
            if task is not None:
                task.cancel()
        self._poll_task = None
        self._clock_task = None
        self.store.abandon_loading()
        logger.info("%s refresh stopped", self.store.dataset.name)

    async def aclose(self) -> None:
        """stop() and wait for in-flight cycles to wind down."""
        self.stop()
        if self._cycles:
            await asyncio.gather(*self._cycles, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    def launch_cycle(self) -> Optional[asyncio.Task]:
        """Start one cycle unless one is already running. Returns the running cycle task."""
        if not self._active:
            return None
        if self.in_flight:
            logger.debug("%s tick skipped: previous cycle still running", self.store.dataset.name)
            return self._cycle_task
        task = asyncio.get_running_loop().create_task(self._run_cycle(self._generation))
        self._cycle_task = task
        self._cycle_generation = self._generation
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)
        return task

    async def refresh_now(self) -> None:
        """Run (or join) a cycle immediately and wait for it."""
        task = self.launch_cycle()
        if task is not None:
            await task

    async def _run_cycle(self, generation: int) -> None:
        if generation != self._generation:
            return
        self.store.begin_loading()
        try:
            result = await self.ingestor.ingest()
        except Exception as exc:
            logger.exception("%s refresh cycle failed", self.store.dataset.name)
            result = IngestResult(error=exc)
        if generation != self._generation or not self._active:
            logger.info("%s discarding result fetched after stop", self.store.dataset.name)
            return
        if result.ok:
            self.store.replace_records(result.records, at=self._now())
        else:
            self.store.mark_failed(str(result.error))

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    async def _poll_loop(self) -> None:
        while True:
            self.launch_cycle()
            await asyncio.sleep(self.interval)

    async def _clock_loop(self) -> None:
        while True:
            self.current_time = self._now()
            await asyncio.sleep(self.clock_interval)
