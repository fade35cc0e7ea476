"""
DataStore — observable in-memory RecordSet for one dataset.

The RecordSet is an immutable tuple swapped by reference, so readers never see
a half-updated set. Every state change publishes a new Snapshot to subscribers.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from fleetboard.analytics.dashboard import compute_stats, dashboard_payload
from fleetboard.data.datasets import Dataset

logger = logging.getLogger(__name__)


class RefreshStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class Snapshot:
    records: tuple = ()
    loading: bool = False
    status: RefreshStatus = RefreshStatus.IDLE
    updated_at: Optional[dt.datetime] = None
    error: Optional[str] = None


Subscriber = Callable[[Snapshot], None]


class DataStore:
    """Latest records + loading flag for one dataset, with period-free accessors."""

    def __init__(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self._snapshot = Snapshot()
        self._settled = RefreshStatus.IDLE
        self._subscribers: list[Subscriber] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def records(self) -> tuple:
        return self._snapshot.records

    @property
    def loading(self) -> bool:
        return self._snapshot.loading

    @property
    def status(self) -> RefreshStatus:
        return self._snapshot.status

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every new Snapshot. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("%s subscriber failed", self.dataset.name)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin_loading(self) -> None:
        """Enter Loading; the last good records stay visible."""
        if not self._snapshot.loading:
            self._settled = self._snapshot.status
        self._publish(replace(self._snapshot, loading=True, status=RefreshStatus.LOADING))

    def abandon_loading(self) -> None:
        """Leave Loading without a result, back to the status held before it."""
        if self._snapshot.loading:
            self._publish(replace(self._snapshot, loading=False, status=self._settled))

    def replace_records(self, records: tuple, at: Optional[dt.datetime] = None) -> None:
        self._publish(Snapshot(
            records=tuple(records),
            loading=False,
            status=RefreshStatus.READY,
            updated_at=at or dt.datetime.now(),
            error=None,
        ))

    def mark_failed(self, error: str) -> None:
        """Keep the previous records (stale beats empty) and record why the cycle failed."""
        self._publish(replace(self._snapshot, loading=False, status=RefreshStatus.FAILED, error=error))

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def dashboard(self, reference: dt.date | dt.datetime | None = None) -> dict:
        return dashboard_payload(self.records, self.dataset, reference)

    def stats(self) -> dict:
        """Stats over the whole RecordSet (no reporting window)."""
        return compute_stats(self.records, self.dataset)
