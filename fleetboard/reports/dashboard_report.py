"""
Dashboard report — window stats + full record listing as JSON or a styled workbook.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Iterable

from fleetboard.analytics.dashboard import dashboard_payload
from fleetboard.data.datasets import Dataset
from fleetboard.data.schemas import ReportingWindow
from fleetboard.excel.writer import ExcelWriter


INQUIRY_COLS = [
    ("row_num", "count", "#"),
    ("year", "text", "Year"),
    ("month", "text", "Month"),
    ("date", "text", "Date"),
    ("week", "text", "Week"),
    ("vessel_name", "text", "Vessel"),
    ("port", "text", "Port"),
    ("principal", "text", "Principal"),
    ("category", "text", "Type"),
    ("status", "status", "Status"),
    ("qtn_value", "money", "QTN Value"),
    ("pda_cost", "money", "PDA Cost"),
    ("profit", "signed", "Profit"),
    ("handled_by", "text", "PIC"),
    ("remarks", "text", "Remarks"),
]

SHIPMENT_COLS = [
    ("shipment_id", "text", "ID"),
    ("departure", "text", "Date"),
    ("vessel_name", "text", "Vessel"),
    ("origin", "text", "Origin"),
    ("destination", "text", "Destination"),
    ("payload_teu", "count", "Payload (TEU)"),
    ("revenue", "money", "Revenue"),
    ("cost", "money", "Op. Costs"),
    ("profit", "signed", "Profit/Loss"),
    ("fuel_efficiency", "ratio", "Eff. (MT/nm)"),
]

RECORD_COLS = {"inquiry": INQUIRY_COLS, "shipment": SHIPMENT_COLS}

GROUP_COLS = [
    ("name", "text", "Name"),
    ("count", "count", "Records"),
    ("value", "money", "Value"),
    ("cost", "money", "Cost"),
    ("profit", "signed", "Profit"),
]

BREAKDOWN_COLS = {
    "status": [("status", "status", "Status"), ("count", "count", "Count"), ("pct", "pct", "Share")],
    "category": [("category", "text", "Category"), ("count", "count", "Count"), ("pct", "pct", "Share")],
}


def generate_json(records: Iterable, dataset: Dataset, reference: dt.date | dt.datetime | None = None) -> dict:
    return dashboard_payload(records, dataset, reference)


def _loss(row: dict) -> str | None:
    return "loss" if (row.get("profit") or 0) < 0 else None


def generate_workbook(
    records: Iterable,
    dataset: Dataset,
    reference: dt.date | dt.datetime | None = None,
) -> ExcelWriter:
    """Summary sheet for the reporting window, then every record (window rows tinted)."""
    records = tuple(records)
    reference = reference or dt.datetime.now()
    data = generate_json(records, dataset, reference)
    window = ReportingWindow.from_reference(reference)
    s = data["stats"]
    labels = dataset.labels
    ew = ExcelWriter()

    ws = ew.add_sheet("Summary")
    row = ew.write_title(
        ws, dataset.title.upper(),
        f"Window {data['window']['label']}  |  {s['record_count']:,} of {len(records):,} records  |  "
        f"Generated {dt.datetime.now():%d %b %Y %H:%M}",
    )

    row = ew.write_section(ws, row, "REPORTING WINDOW")
    row = ew.write_kpi_row(ws, row, [
        (s["record_count"], "RECORDS", "count"),
        (s["total_value"], labels.get("value", "Value").upper(), "money"),
        (s["total_cost"], labels.get("cost", "Cost").upper(), "money"),
        (s["total_profit"], labels.get("profit", "Profit").upper(), "signed"),
    ])

    for key in ("status", "category"):
        breakdown = s[f"{key}_counts"]
        if breakdown:
            row = ew.write_section(ws, row, f"BY {key.upper()}")
            row = ew.write_table(ws, row, BREAKDOWN_COLS[key], breakdown, freeze=False) + 1

    if s["top_groups"]:
        row = ew.write_section(ws, row, f"TOP {labels.get('group', 'Group').upper()}S")
        ew.write_table(ws, row, GROUP_COLS, s["top_groups"], row_fill=_loss, freeze=False)

    rows = []
    for record in records:
        row_data = record.to_dict()
        row_data["_fill"] = _loss(row_data) or ("window" if window.contains(record) else None)
        rows.append(row_data)

    ws_records = ew.add_sheet("Records")
    ew.write_table(ws_records, 1, RECORD_COLS[dataset.name], rows,
                   row_fill=lambda d: d["_fill"], total_label="TOTAL")
    return ew


def generate_excel(
    records: Iterable,
    dataset: Dataset,
    output_path: str | Path,
    reference: dt.date | dt.datetime | None = None,
) -> Path:
    return generate_workbook(records, dataset, reference).save(output_path)
