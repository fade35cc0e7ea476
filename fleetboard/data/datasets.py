"""
Dataset registry — the two dashboard variants and what each one aggregates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from fleetboard.config import (
    INQUIRY_HEADER_ALIASES,
    INQUIRY_REFRESH_SECONDS,
    SHIPMENT_HEADER_ALIASES,
    SHIPMENT_REFRESH_SECONDS,
)
from fleetboard.data.mapper import RecordBuilder, build_inquiry, build_shipment
from fleetboard.data.schemas import InquiryRecord, InquiryStatus, ShipmentRecord
from fleetboard.errors import UnknownDatasetError


@dataclass(frozen=True)
class StatFields:
    """Record attribute names feeding compute_stats()."""
    value: str
    cost: str
    profit: str
    group: str
    status: Optional[str] = None
    category: Optional[str] = None
    status_values: tuple[str, ...] = ()
    sums: tuple[str, ...] = ()
    means: tuple[str, ...] = ()


@dataclass(frozen=True)
class Dataset:
    name: str
    title: str
    record_type: type
    aliases: Mapping[str, Sequence[str]]
    builder: RecordBuilder
    stat_fields: StatFields
    refresh_seconds: float
    labels: dict[str, str] = field(default_factory=dict)


INQUIRY = Dataset(
    name="inquiry",
    title="Inquiry Dashboard",
    record_type=InquiryRecord,
    aliases=INQUIRY_HEADER_ALIASES,
    builder=build_inquiry,
    stat_fields=StatFields(
        value="qtn_value",
        cost="pda_cost",
        profit="profit",
        group="vessel_name",
        status="status",
        status_values=tuple(s.value for s in InquiryStatus),
        category="category",
    ),
    refresh_seconds=INQUIRY_REFRESH_SECONDS,
    labels={"value": "QTN Value", "cost": "PDA Cost", "profit": "Profit", "group": "Vessel"},
)

SHIPMENT = Dataset(
    name="shipment",
    title="Shipping Operations Dashboard",
    record_type=ShipmentRecord,
    aliases=SHIPMENT_HEADER_ALIASES,
    builder=build_shipment,
    stat_fields=StatFields(
        value="revenue",
        cost="cost",
        profit="profit",
        group="vessel_name",
        category="destination",
        sums=("payload_teu",),
        means=("fuel_efficiency",),
    ),
    refresh_seconds=SHIPMENT_REFRESH_SECONDS,
    labels={"value": "Revenue", "cost": "Op. Costs", "profit": "Profit/Loss", "group": "Vessel"},
)

DATASETS: dict[str, Dataset] = {d.name: d for d in (INQUIRY, SHIPMENT)}


def get_dataset(name: str) -> Dataset:
    try:
        return DATASETS[name.lower()]
    except KeyError:
        raise UnknownDatasetError(
            f"Unknown dataset '{name}'. Expected one of: {', '.join(DATASETS)}"
        ) from None
