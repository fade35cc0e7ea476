"""
Dataset endpoints — records, reporting-window dashboard, stats, export, reload.
"""
from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from fleetboard.analytics.dashboard import compute_stats
from fleetboard.analytics.window import select_window
from fleetboard.api.dependencies import (
    get_dashboards,
    get_store,
    parse_reference,
    require_passcode,
)
from fleetboard.api.response_models import RecordsResponse
from fleetboard.data.export import export_filename, records_to_csv
from fleetboard.data.store import DataStore
from fleetboard.reports.dashboard_report import generate_workbook
from fleetboard.runtime import Dashboards

router = APIRouter(prefix="/api/{dataset}", tags=["dashboard"], dependencies=[Depends(require_passcode)])

_NO_CACHE = {"Cache-Control": "no-cache, no-store, must-revalidate"}
_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _iso(value: dt.datetime | None) -> str | None:
    return value.isoformat() if value else None


@router.get("/records", response_model=RecordsResponse)
def records(store: DataStore = Depends(get_store)):
    """Latest RecordSet plus the loading flag (last good set stays during refresh)."""
    snap = store.snapshot
    return RecordsResponse(
        dataset=store.dataset.name,
        loading=snap.loading,
        status=snap.status.value,
        updated_at=_iso(snap.updated_at),
        count=len(snap.records),
        records=[r.to_dict() for r in snap.records],
    )


@router.get("/dashboard")
def dashboard(
    store: DataStore = Depends(get_store),
    reference: dt.date | None = Depends(parse_reference),
):
    """Today-or-yesterday subset with its stats."""
    payload = store.dashboard(reference)
    payload["loading"] = store.loading
    return JSONResponse(content=payload, headers=_NO_CACHE)


@router.get("/stats")
def stats(
    scope: str = Query("window", description="window|all"),
    store: DataStore = Depends(get_store),
    reference: dt.date | None = Depends(parse_reference),
):
    if scope == "all":
        return JSONResponse(content=store.stats())
    if scope != "window":
        raise HTTPException(400, f"Invalid scope: {scope}")
    subset = select_window(store.records, reference)
    return JSONResponse(content=compute_stats(subset, store.dataset))


@router.get("/export.csv")
def export_csv(store: DataStore = Depends(get_store)):
    filename = export_filename(store.dataset, "csv")
    return Response(
        content=records_to_csv(store.records, store.dataset),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.xlsx")
def export_xlsx(
    store: DataStore = Depends(get_store),
    reference: dt.date | None = Depends(parse_reference),
):
    filename = export_filename(store.dataset, "xlsx")
    content = generate_workbook(store.records, store.dataset, reference).to_bytes()
    return Response(
        content=content,
        media_type=_XLSX,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/reload")
async def reload(
    store: DataStore = Depends(get_store),
    dashboards: Dashboards = Depends(get_dashboards),
):
    """Run a refresh cycle now (joins one already in flight)."""
    scheduler = dashboards.scheduler(store.dataset.name)
    if not scheduler.active:
        raise HTTPException(409, "Refresh lifecycle not started")
    await scheduler.refresh_now()
    snap = store.snapshot
    return {"status": snap.status.value, "records": len(snap.records), "error": snap.error}
