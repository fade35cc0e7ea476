"""
FastAPI dependencies — Dashboards singleton, passcode check, dataset + date parsing.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import Depends, Header, HTTPException, Path, Query

from fleetboard.data.datasets import Dataset, get_dataset
from fleetboard.data.store import DataStore
from fleetboard.errors import UnknownDatasetError
from fleetboard.runtime import Dashboards

# ---------------------------------------------------------------------------
# Global singleton (set during startup)
# ---------------------------------------------------------------------------
_dashboards: Dashboards | None = None


def set_dashboards(dashboards: Dashboards | None) -> None:
    global _dashboards
    _dashboards = dashboards


def get_dashboards() -> Dashboards:
    if _dashboards is None:
        raise HTTPException(503, "Server not initialized yet")
    return _dashboards


def require_passcode(
    x_dashboard_passcode: Optional[str] = Header(None),
    dashboards: Dashboards = Depends(get_dashboards),
) -> None:
    if not dashboards.gate.check(x_dashboard_passcode):
        raise HTTPException(401, "Invalid or missing dashboard passcode")


def parse_dataset(dataset: str = Path(..., description="inquiry|shipment")) -> Dataset:
    try:
        return get_dataset(dataset)
    except UnknownDatasetError as exc:
        raise HTTPException(404, str(exc))


def get_store(
    dataset: Dataset = Depends(parse_dataset),
    dashboards: Dashboards = Depends(get_dashboards),
) -> DataStore:
    store = dashboards.stores.get(dataset.name)
    if store is None:
        raise HTTPException(404, f"Dataset not enabled: {dataset.name}")
    return store


def parse_reference(
    at: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
) -> dt.date | None:
    if at is None:
        return None
    try:
        return dt.date.fromisoformat(at)
    except ValueError:
        raise HTTPException(400, f"Invalid date: {at}")
