"""
Fleetboard — Configuration: sheet sources, passcode, refresh intervals, header aliases.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from fleetboard.errors import ConfigError

# ---------------------------------------------------------------------------
# Published sheet sources (CSV output), overridden by FLEETBOARD_*_URL
# ---------------------------------------------------------------------------
DEFAULT_INQUIRY_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vSKmvcqLndJ0cQfogCX1Ysk-1JJ9ys7AnXFSJnVABQVKD5rYgQcMalfRVFbh2rQ4A"
    "/pub?gid=685993509&single=true&output=csv"
)
DEFAULT_SHIPMENT_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vRXvjE-mlJ3PfgoCZ_HIkimGGnrG4Uug36Xw1Vv--HuAcK7_eSNwX7BhhMWIjJO5QpvDUlkVdGkZaNp"
    "/pub?output=csv"
)
DEFAULT_PASSCODE = "1234"

# Interactive dashboards poll fast, the voyage ledger changes rarely
INQUIRY_REFRESH_SECONDS = 20.0
SHIPMENT_REFRESH_SECONDS = 300.0
CLOCK_TICK_SECONDS = 1.0
HTTP_TIMEOUT_SECONDS = 15.0

CACHE_BUST_PARAM = "_ts"
TOP_N = 10

DEFAULT_EXPORT_DIR = Path.home() / "fleetboard" / "exports"

# ---------------------------------------------------------------------------
# Header aliases: canonical field → accepted header spellings, first match wins.
# Spellings are exact; stray spaces seen in the live sheets are listed explicitly.
# ---------------------------------------------------------------------------
INQUIRY_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "year": ("YEAR", "YEAR "),
    "month": ("MONTH", "MONTH "),
    "date": ("DATE", "DATE ", "DAY"),
    "week": ("WEEK ", "WEEK"),
    "vessel_name": ("VESSEL NAME", "VESSEL NAME ", "VESSEL"),
    "port": ("PORT", "PORT ", "PORT OF CALL"),
    "principal": ("PRINCIPAL", "PRINCIPAL ", "CLIENT"),
    "category": ("TYPE", "TYPE ", "CATEGORY", "SERVICE"),
    "status": ("STATUS", "STATUS "),
    "qtn_value": ("PDA / QTN  VALUE", "PDA / QTN VALUE", "QTN VALUE"),
    "pda_cost": ("PDA / QTN  COST", "PDA / QTN COST", "COST"),
    "profit": ("PROFIT", "PROFIT ", "PROFIT / LOSS"),
    "handled_by": ("PIC", "PIC ", "HANDLED BY"),
    "remarks": ("REMARKS", "REMARKS ", "REMARK"),
}

SHIPMENT_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "departure": ("Date (Dep.)", "Date", "DATE"),
    "vessel_name": ("Vessel Name", "Vessel"),
    "route": ("Route (Origin-Dest)", "Route"),
    "payload_teu": ("Payload (TEUs)", "Payload"),
    "revenue": ("Revenue ($)", "Revenue"),
    "cost": ("Op. Costs ($)", "Op. Costs", "Cost"),
    "profit": ("Profit/Loss ($)", "Profit/Loss", "Profit"),
    "fuel_efficiency": ("Fuel Efficiency (MT/nm)", "Fuel Efficiency"),
}

ROUTE_SEPARATORS = ("➔", "->")

# ---------------------------------------------------------------------------
# Inquiry status normalization (upper-cased cell text → canonical status name)
# ---------------------------------------------------------------------------
STATUS_NORMALIZATION = {
    "CONFIRMED": "CONFIRMED",
    "CONFIRM": "CONFIRMED",
    "NOMINATED": "CONFIRMED",
    "PENDING": "PENDING",
    "IN PROGRESS": "PENDING",
    "OPEN": "PENDING",
    "AWAITING": "PENDING",
    "QUOTED": "QUOTED",
    "QUOTATION": "QUOTED",
    "QTN SENT": "QUOTED",
    "CANCELLED": "CANCELLED",
    "CANCELED": "CANCELLED",
    "CANCEL": "CANCELLED",
    "LOST": "CANCELLED",
    "REJECTED": "CANCELLED",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment (and a local .env)."""
    inquiry_url: str = DEFAULT_INQUIRY_URL
    shipment_url: str = DEFAULT_SHIPMENT_URL
    passcode: str = DEFAULT_PASSCODE
    inquiry_refresh: float = INQUIRY_REFRESH_SECONDS
    shipment_refresh: float = SHIPMENT_REFRESH_SECONDS
    http_timeout: float = HTTP_TIMEOUT_SECONDS
    autostart: bool = True
    log_level: str = "INFO"
    export_dir: Path = DEFAULT_EXPORT_DIR

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            inquiry_url=os.getenv("FLEETBOARD_INQUIRY_URL", DEFAULT_INQUIRY_URL),
            shipment_url=os.getenv("FLEETBOARD_SHIPMENT_URL", DEFAULT_SHIPMENT_URL),
            passcode=os.getenv("FLEETBOARD_PASSCODE", DEFAULT_PASSCODE),
            inquiry_refresh=_seconds("FLEETBOARD_INQUIRY_REFRESH", INQUIRY_REFRESH_SECONDS),
            shipment_refresh=_seconds("FLEETBOARD_SHIPMENT_REFRESH", SHIPMENT_REFRESH_SECONDS),
            http_timeout=_seconds("FLEETBOARD_HTTP_TIMEOUT", HTTP_TIMEOUT_SECONDS),
            autostart=_flag("FLEETBOARD_AUTOSTART", True),
            log_level=os.getenv("FLEETBOARD_LOG_LEVEL", "INFO").upper(),
            export_dir=Path(os.getenv("FLEETBOARD_EXPORT_DIR", str(DEFAULT_EXPORT_DIR))).expanduser(),
        )

    def source_url(self, dataset: str) -> str:
        return {"inquiry": self.inquiry_url, "shipment": self.shipment_url}[dataset]

    def refresh_interval(self, dataset: str) -> float:
        return {"inquiry": self.inquiry_refresh, "shipment": self.shipment_refresh}[dataset]


def _seconds(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name} value: expected seconds, got '{raw}'") from exc
    if value <= 0:
        raise ConfigError(f"Invalid {name} value: must be positive, got '{raw}'")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid {name} value: expected true/false, got '{raw}'")
