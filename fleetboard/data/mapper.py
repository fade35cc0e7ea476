"""
Row mapping — raw CSV rows + a resolved HeaderIndex → canonical records.
"""
from __future__ import annotations

import calendar
import datetime as dt
import logging
from typing import Callable, Iterable, Mapping

from fleetboard.config import ROUTE_SEPARATORS
from fleetboard.data.coerce import coerce_integer, coerce_number, coerce_text
from fleetboard.data.headers import HeaderIndex
from fleetboard.data.schemas import CanonicalRecord, InquiryRecord, InquiryStatus, ShipmentRecord

logger = logging.getLogger(__name__)

RawRow = Mapping[str, str]


class CellReader:
    """Reads canonical fields out of one raw row through the header index."""

    def __init__(self, row: RawRow, index: HeaderIndex) -> None:
        self.row = row
        self.index = index

    def raw(self, name: str) -> str | None:
        header = self.index.header_for(name)
        if header is None:
            return None
        return self.row.get(header)

    def number(self, name: str) -> float:
        return coerce_number(self.raw(name))

    def integer(self, name: str) -> int:
        return coerce_integer(self.raw(name))

    def text(self, name: str) -> str:
        return coerce_text(self.raw(name))

    def _identifier(self) -> str | None:
        if self.index.identifier is None:
            return None
        return self.row.get(self.index.identifier)

    def identifier_number(self) -> float:
        return coerce_number(self._identifier())

    def identifier_text(self) -> str:
        return coerce_text(self._identifier())


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_inquiry(cells: CellReader) -> InquiryRecord:
    return InquiryRecord(
        row_num=cells.identifier_number(),
        year=cells.integer("year"),
        month=cells.text("month"),
        date=cells.integer("date"),
        week=cells.text("week"),
        vessel_name=cells.text("vessel_name"),
        port=cells.text("port"),
        principal=cells.text("principal"),
        category=cells.text("category"),
        status=InquiryStatus.from_text(cells.text("status")),
        qtn_value=cells.number("qtn_value"),
        pda_cost=cells.number("pda_cost"),
        profit=cells.number("profit"),
        handled_by=cells.text("handled_by"),
        remarks=cells.text("remarks"),
    )


def split_route(route: str) -> tuple[str, str]:
    """Split "Singapore ➔ Rotterdam" into its ends; ("", "") when there is no arrow."""
    for separator in ROUTE_SEPARATORS:
        if separator in route:
            origin, _, destination = route.partition(separator)
            return origin.strip(), destination.strip()
    return "", ""


def departure_parts(departure: str) -> tuple[int, str, int]:
    """ISO departure date → (year, MONTH NAME, day); (0, "", 0) when unparseable."""
    try:
        day = dt.date.fromisoformat(departure[:10])
    except ValueError:
        return 0, "", 0
    return day.year, calendar.month_name[day.month].upper(), day.day


def build_shipment(cells: CellReader) -> ShipmentRecord:
    departure = cells.text("departure")
    year, month, date = departure_parts(departure)
    origin, destination = split_route(cells.text("route"))
    return ShipmentRecord(
        shipment_id=cells.identifier_text(),
        departure=departure,
        year=year,
        month=month,
        date=date,
        vessel_name=cells.text("vessel_name"),
        origin=origin,
        destination=destination,
        payload_teu=cells.number("payload_teu"),
        revenue=cells.number("revenue"),
        cost=cells.number("cost"),
        profit=cells.number("profit"),
        fuel_efficiency=cells.number("fuel_efficiency"),
    )


RecordBuilder = Callable[[CellReader], CanonicalRecord]


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------

def map_row(row: RawRow, index: HeaderIndex, builder: RecordBuilder) -> CanonicalRecord:
    return builder(CellReader(row, index))


def map_rows(
    rows: Iterable[RawRow],
    index: HeaderIndex,
    builder: RecordBuilder,
) -> tuple[CanonicalRecord, ...]:
    """Map every row, keeping only records that carry some signal (blank tail rows go)."""
    kept: list[CanonicalRecord] = []
    dropped = 0
    for row in rows:
        record = map_row(row, index, builder)
        if record.has_signal():
            kept.append(record)
        else:
            dropped += 1
    if dropped:
        logger.debug("Dropped %d blank rows", dropped)
    return tuple(kept)
