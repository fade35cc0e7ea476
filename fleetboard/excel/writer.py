"""
ExcelWriter — builds the dashboard workbooks (summary + record listing).
"""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Optional, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fleetboard.excel.formatters import (
    SUMMABLE,
    add_kpi_card,
    fit_columns,
    format_data_cell,
    format_header_row,
)
from fleetboard.excel.styles import BANNER_FONT, BANNER_NOTE_FONT, SECTION_FONT

ColSpec = tuple[str, str, str]  # (record key, column kind, header label)
RowFill = Callable[[dict], Optional[str]]


class ExcelWriter:
    def __init__(self) -> None:
        self.wb = Workbook()
        self._fresh = True

    def add_sheet(self, title: str) -> Worksheet:
        """New worksheet; the workbook's default sheet is renamed on first use."""
        if self._fresh:
            self._fresh = False
            ws = self.wb.active
            ws.title = title
            return ws
        return self.wb.create_sheet(title=title)

    # ------------------------------------------------------------------
    # Summary blocks
    # ------------------------------------------------------------------

    def write_title(self, ws: Worksheet, title: str, note: str, width: int = 8) -> int:
        """Banner across ``width`` columns with a note line under it. Returns the next free row."""
        for row, text, font in ((1, title, BANNER_FONT), (2, note, BANNER_NOTE_FONT)):
            ws.cell(row=row, column=1, value=text).font = font
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
        for col in range(1, width + 1):
            ws.column_dimensions[get_column_letter(col)].width = 16
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1, value=title).font = SECTION_FONT
        return row + 1

    def write_kpi_row(self, ws: Worksheet, row: int, kpis: Sequence[tuple], spacing: int = 2) -> int:
        """``kpis`` is ``[(value, caption, kind), ...]``; cards sit ``spacing`` columns apart."""
        for i, (value, caption, kind) in enumerate(kpis):
            add_kpi_card(ws, row, 1 + i * spacing, value, caption, kind)
        return row + 3

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: Sequence[ColSpec],
        rows: Sequence[dict],
        row_fill: RowFill | None = None,
        freeze: bool = True,
        total_label: str | None = None,
    ) -> int:
        """Header + one line per dict (+ a total row when ``total_label`` is given).

        Returns the first row after the table.
        """
        format_header_row(ws, start_row, [label for _, _, label in columns])

        row = start_row + 1
        for data in rows:
            fill = row_fill(data) if row_fill else None
            for col, (key, kind, _) in enumerate(columns, 1):
                format_data_cell(ws, row, col, data.get(key, ""), kind, row_fill=fill)
            row += 1

        if total_label and rows:
            format_data_cell(ws, row, 1, total_label, is_total=True)
            for col, (key, kind, _) in enumerate(columns[1:], 2):
                value = sum(r.get(key) or 0 for r in rows) if kind in SUMMABLE else ""
                format_data_cell(ws, row, col, value, kind if kind in SUMMABLE else "text", is_total=True)
            row += 1

        fit_columns(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return row

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path

    def to_bytes(self) -> bytes:
        """Workbook as .xlsx bytes, for HTTP downloads."""
        buffer = BytesIO()
        self.wb.save(buffer)
        return buffer.getvalue()
