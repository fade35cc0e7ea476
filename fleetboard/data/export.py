"""
Export — RecordSet as downloadable CSV / styled XLSX.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Iterable

from fleetboard.analytics.dashboard import records_frame
from fleetboard.data.datasets import Dataset


def records_to_csv(records: Iterable, dataset: Dataset) -> str:
    """Field names as header, one line per record in source order."""
    return records_frame(records, dataset).to_csv(index=False)


def export_filename(dataset: Dataset, extension: str, day: dt.date | None = None) -> str:
    day = day or dt.date.today()
    return f"{dataset.name}_data_{day.isoformat()}.{extension}"


def write_records_csv(records: Iterable, dataset: Dataset, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(records_to_csv(records, dataset), encoding="utf-8")
    return path
