"""Workbook styling and the dashboard ExcelWriter."""
from .formatters import NUMBER_FORMATS, add_kpi_card, fit_columns, format_data_cell, format_header_row
from .writer import ExcelWriter
