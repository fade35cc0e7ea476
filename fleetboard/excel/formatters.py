"""
Cell-level helpers: header rows, typed data cells, KPI cards, column fitting.

Column kinds: text, status, count, money, signed, pct, ratio.
"""
from __future__ import annotations

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fleetboard.excel.styles import (
    CELL_BORDER, CELL_FONT, CENTER, HEADER_BORDER, HEADER_FILL, HEADER_FONT,
    KPI_CAPTION_FONT, KPI_FONTS, LEFT, RIGHT, ROW_FILLS, STATUS_FILLS,
    STRIPE_FILL, TOTAL_BORDER, TOTAL_FILL, TOTAL_FONT,
)

NUMBER_FORMATS = {
    "count": "#,##0",
    "money": '"$"#,##0.00',
    "signed": '"$"#,##0.00;[Red]-"$"#,##0.00',
    "pct": '0"%"',
    "ratio": "0.000",
}

# Kinds that are summed on a table's total row
SUMMABLE = {"count", "money", "signed"}


def format_header_row(ws: Worksheet, row_num: int, labels: list[str]) -> None:
    """Write and style one header row, first label in column A."""
    for col, label in enumerate(labels, 1):
        cell = ws.cell(row=row_num, column=col, value=label)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    kind: str = "text",
    is_total: bool = False,
    row_fill: str | None = None,
) -> None:
    """Write one value. Fill precedence: total row, status colour, row fill, stripe."""
    cell = ws.cell(row=row_num, column=col_num, value=value)
    cell.font = TOTAL_FONT if is_total else CELL_FONT
    cell.border = TOTAL_BORDER if is_total else CELL_BORDER
    cell.alignment = RIGHT if kind in NUMBER_FORMATS else LEFT
    if kind in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[kind]

    if is_total:
        cell.fill = TOTAL_FILL
    elif kind == "status" and value in STATUS_FILLS:
        cell.fill = STATUS_FILLS[value]
    elif row_fill in ROW_FILLS:
        cell.fill = ROW_FILLS[row_fill]
    elif row_num % 2 == 0:
        cell.fill = STRIPE_FILL


def fit_columns(ws: Worksheet, min_width: int = 9, max_width: int = 48) -> None:
    """Size every column to its longest rendered value."""
    for column in ws.iter_cols():
        letter = get_column_letter(column[0].column)
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[letter].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(ws: Worksheet, row: int, col: int, value, caption: str, kind: str = "money") -> None:
    """Big number over a small caption. Signed KPIs turn green/red with their sign."""
    tone = "plain"
    if kind == "signed" and value:
        tone = "gain" if value > 0 else "loss"

    value_cell = ws.cell(row=row, column=col, value=value)
    value_cell.font = KPI_FONTS[tone]
    value_cell.alignment = CENTER
    if kind in NUMBER_FORMATS:
        value_cell.number_format = NUMBER_FORMATS[kind]

    caption_cell = ws.cell(row=row + 1, column=col, value=caption)
    caption_cell.font = KPI_CAPTION_FONT
    caption_cell.alignment = CENTER
