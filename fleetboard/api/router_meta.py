"""
Meta endpoints: health, session (passcode gate), clock.
"""
from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException

from fleetboard.api.dependencies import get_dashboards, require_passcode
from fleetboard.api.response_models import (
    ClockResponse, DatasetHealth, HealthResponse, SessionRequest, SessionResponse,
)
from fleetboard.runtime import Dashboards

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(dashboards: Dashboards = Depends(get_dashboards)):
    datasets = []
    for name, store in dashboards.stores.items():
        snap = store.snapshot
        datasets.append(DatasetHealth(
            dataset=name,
            status=snap.status.value,
            loading=snap.loading,
            records=len(snap.records),
            updated_at=snap.updated_at.isoformat() if snap.updated_at else None,
            error=snap.error,
        ))
    return HealthResponse(status="ok", started=dashboards.started, datasets=datasets)


@router.post("/session", response_model=SessionResponse)
async def open_session(body: SessionRequest, dashboards: Dashboards = Depends(get_dashboards)):
    """Check the passcode; a match starts the refresh lifecycle if it isn't running."""
    session = dashboards.gate.login(body.passcode)
    if not session.authenticated:
        raise HTTPException(401, "Invalid passcode")
    dashboards.start(session)
    return SessionResponse(authenticated=True, started=dashboards.started)


@router.get("/clock", response_model=ClockResponse, dependencies=[Depends(require_passcode)])
def clock(dashboards: Dashboards = Depends(get_dashboards)):
    times = [s.current_time for s in dashboards.schedulers.values() if s.active]
    now = max(times) if times else dt.datetime.now()
    return ClockResponse(now=now.isoformat(timespec="seconds"))
