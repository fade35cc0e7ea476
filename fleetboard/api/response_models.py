"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class DatasetHealth(BaseModel):
    dataset: str
    status: str
    loading: bool
    records: int
    updated_at: Optional[str] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    started: bool
    datasets: list[DatasetHealth]


class SessionRequest(BaseModel):
    passcode: str


class SessionResponse(BaseModel):
    authenticated: bool
    started: bool


class RecordsResponse(BaseModel):
    dataset: str
    loading: bool
    status: str
    updated_at: Optional[str] = None
    count: int
    records: list[dict[str, Any]]


class ClockResponse(BaseModel):
    now: str
