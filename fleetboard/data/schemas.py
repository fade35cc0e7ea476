"""
Canonical record shapes and the reporting-window definition.
"""
from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Union

from fleetboard.config import STATUS_NORMALIZATION


class InquiryStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"
    QUOTED = "QUOTED"
    CANCELLED = "CANCELLED"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_text(cls, text: str) -> "InquiryStatus":
        """Normalize free-text status cells; blank → UNKNOWN, unrecognised → OTHER."""
        key = " ".join(text.split()).upper()
        if not key:
            return cls.UNKNOWN
        return cls(STATUS_NORMALIZATION.get(key, "OTHER"))


class _RecordMixin:
    """Shared helpers for canonical records."""

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
        return data


@dataclass(frozen=True)
class InquiryRecord(_RecordMixin):
    """One row of the agency inquiry log."""
    row_num: float = 0.0
    year: int = 0
    month: str = ""
    date: int = 0
    week: str = ""
    vessel_name: str = ""
    port: str = ""
    principal: str = ""
    category: str = ""
    status: InquiryStatus = InquiryStatus.UNKNOWN
    qtn_value: float = 0.0
    pda_cost: float = 0.0
    profit: float = 0.0
    handled_by: str = ""
    remarks: str = ""

    def has_signal(self) -> bool:
        return bool(self.vessel_name) or self.qtn_value > 0 or self.row_num > 0


@dataclass(frozen=True)
class ShipmentRecord(_RecordMixin):
    """One voyage of the fleet ledger. year/month/date are derived from ``departure``."""
    shipment_id: str = ""
    departure: str = ""
    year: int = 0
    month: str = ""
    date: int = 0
    vessel_name: str = ""
    origin: str = ""
    destination: str = ""
    payload_teu: float = 0.0
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0
    fuel_efficiency: float = 0.0

    def has_signal(self) -> bool:
        return bool(self.shipment_id) or bool(self.vessel_name) or self.revenue > 0


CanonicalRecord = Union[InquiryRecord, ShipmentRecord]
RecordSet = tuple  # tuple[CanonicalRecord, ...], source row order


# ---------------------------------------------------------------------------
# Reporting window
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowDay:
    """(year, full upper-case month name, day of month) for one calendar day."""
    year: int
    month_name: str
    day: int

    @classmethod
    def from_date(cls, day: dt.date) -> "WindowDay":
        return cls(day.year, calendar.month_name[day.month].upper(), day.day)

    def matches(self, year: int, month_text: str, day: int) -> bool:
        if year != self.year or day != self.day:
            return False
        text = month_text.strip().upper().rstrip(".")
        # "FEBRUARY", "February 2026" or an abbreviation such as "Feb"
        return self.month_name in text or (len(text) >= 3 and self.month_name.startswith(text))

    @property
    def label(self) -> str:
        return f"{self.day} {self.month_name.title()} {self.year}"


@dataclass(frozen=True)
class ReportingWindow:
    """Trailing two-day window: the reference day and the calendar day before it."""
    today: WindowDay
    yesterday: WindowDay

    @classmethod
    def from_reference(cls, reference: dt.date | dt.datetime) -> "ReportingWindow":
        if isinstance(reference, dt.datetime):
            reference = reference.date()
        return cls(
            today=WindowDay.from_date(reference),
            yesterday=WindowDay.from_date(reference - dt.timedelta(days=1)),
        )

    def contains(self, record) -> bool:
        args = (record.year, record.month or "", record.date)
        return self.today.matches(*args) or self.yesterday.matches(*args)

    @property
    def label(self) -> str:
        return f"{self.yesterday.label} to {self.today.label}"
