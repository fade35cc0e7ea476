"""
Workbook look: harbour palette, fonts, fills, borders, and the status colour map.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
DEEP_SEA = "0B3C5D"
STEEL = "328CC1"
FOAM = "E8F1F8"
MIST = "F4F7FA"
SAND = "FFF4E0"
KELP = "1E7F4F"
KELP_TINT = "E3F4EA"
CORAL = "C0392B"
CORAL_TINT = "FDECEA"
SLATE_TEXT = "1F2933"
MUTED_TEXT = "616E7C"
RULE = "C5D3E0"
WHITE = "FFFFFF"


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, bottom: str = "thin", top: str = "thin") -> Border:
    return Border(
        left=Side(style="thin", color=color),
        right=Side(style="thin", color=color),
        top=Side(style=top, color=color),
        bottom=Side(style=bottom, color=color),
    )


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
BANNER_FONT = Font(name="Calibri", size=22, bold=True, color=DEEP_SEA)
BANNER_NOTE_FONT = Font(name="Calibri", size=11, italic=True, color=MUTED_TEXT)
SECTION_FONT = Font(name="Calibri", size=13, bold=True, color=STEEL)
HEADER_FONT = Font(name="Calibri", size=10, bold=True, color=WHITE)
CELL_FONT = Font(name="Calibri", size=10, color=SLATE_TEXT)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=DEEP_SEA)
KPI_FONTS = {
    "plain": Font(name="Calibri", size=24, bold=True, color=DEEP_SEA),
    "gain": Font(name="Calibri", size=24, bold=True, color=KELP),
    "loss": Font(name="Calibri", size=24, bold=True, color=CORAL),
}
KPI_CAPTION_FONT = Font(name="Calibri", size=9, color=MUTED_TEXT)

# ---------------------------------------------------------------------------
# Fills and borders
# ---------------------------------------------------------------------------
HEADER_FILL = _solid(DEEP_SEA)
STRIPE_FILL = _solid(MIST)
TOTAL_FILL = _solid(FOAM)

CELL_BORDER = _box(RULE)
HEADER_BORDER = _box(DEEP_SEA, bottom="medium")
TOTAL_BORDER = _box(STEEL, bottom="medium", top="medium")

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# Row fills chosen by a table's row_fill callback
ROW_FILLS = {
    "loss": _solid(CORAL_TINT),
    "window": _solid(SAND),
}

# Inquiry status cells
STATUS_FILLS = {
    "CONFIRMED": _solid(KELP_TINT),
    "PENDING": _solid(SAND),
    "QUOTED": _solid(FOAM),
    "CANCELLED": _solid(CORAL_TINT),
}
