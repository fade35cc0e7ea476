"""
Dashboards — one DataStore + RefreshScheduler per registered dataset.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from fleetboard.config import Settings
from fleetboard.data.datasets import DATASETS, get_dataset
from fleetboard.data.loader import SheetIngestor
from fleetboard.data.scheduler import RefreshScheduler
from fleetboard.data.store import DataStore
from fleetboard.session import AccessGate, Session

logger = logging.getLogger(__name__)


class Dashboards:
    def __init__(
        self,
        settings: Settings,
        http_client=None,
        datasets: Optional[Iterable[str]] = None,
    ) -> None:
        self.settings = settings
        self.gate = AccessGate(settings.passcode)
        self.stores: dict[str, DataStore] = {}
        self.schedulers: dict[str, RefreshScheduler] = {}

        for name in datasets or DATASETS:
            dataset = get_dataset(name)
            store = DataStore(dataset)
            ingestor = SheetIngestor(
                dataset,
                settings.source_url(dataset.name),
                http_client=http_client,
                timeout=settings.http_timeout,
            )
            self.stores[dataset.name] = store
            self.schedulers[dataset.name] = RefreshScheduler(
                ingestor, store, interval=settings.refresh_interval(dataset.name),
            )

    @property
    def started(self) -> bool:
        return any(s.active for s in self.schedulers.values())

    def store(self, name: str) -> DataStore:
        return self.stores[get_dataset(name).name]

    def scheduler(self, name: str) -> RefreshScheduler:
        return self.schedulers[get_dataset(name).name]

    def start(self, session: Session) -> None:
        for scheduler in self.schedulers.values():
            scheduler.start(session)

    def stop(self) -> None:
        for scheduler in self.schedulers.values():
            scheduler.stop()

    async def aclose(self) -> None:
        for scheduler in self.schedulers.values():
            await scheduler.aclose()
