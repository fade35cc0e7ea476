"""
Reporting-window selection — the "today or yesterday" slice dashboards show as current.
"""
from __future__ import annotations

import datetime as dt
from typing import Iterable

from fleetboard.data.schemas import ReportingWindow


def select_window(records: Iterable, reference: dt.date | dt.datetime | None = None) -> tuple:
    """Records dated on the reference day or the calendar day before it, in source order."""
    window = ReportingWindow.from_reference(reference or dt.datetime.now())
    return tuple(r for r in records if window.contains(r))
