"""Shared fixtures: sample sheet CSVs and a fake requests-style client."""
from __future__ import annotations

import threading

import pytest

from fleetboard.config import Settings
from fleetboard.logging_config import reset_logging

INQUIRY_CSV = (
    ",YEAR,MONTH,DATE,WEEK ,VESSEL NAME,PORT,PRINCIPAL,TYPE,STATUS,"
    "PDA / QTN  VALUE,PDA / QTN  COST,PROFIT,PIC,REMARKS\n"
    '1,2026,FEBRUARY,19,WEEK 8,MV OCEAN STAR,Singapore,Acme Shipping,Husbandry,Confirmed,'
    '"$12,500.00","$9,000.00","$3,500.00",JD,\n'
    '2,2026,FEBRUARY,18,WEEK 8,MV NORTH WIND,Port Klang,Blue Line,Crew Change,pending,'
    '"$4,000","$3,100",$900,AL,urgent\n'
    '3,2026,FEBRUARY,17,WEEK 8,MV OCEAN STAR,Singapore,Acme Shipping,Bunkering,Quoted,'
    '"$7,000","$6,500",$500,JD,\n'
    '4,2026,Feb,19,WEEK 8,MV CORAL,Batam,Acme Shipping,Husbandry,cancelled,'
    '"$2,000",$0,$0,AL,\n'
    '5,2025,FEBRUARY,19,WEEK 8,MV OLD,Singapore,Acme,Husbandry,Confirmed,'
    '"$1,000",$500,$500,JD,\n'
    " , , , , , , , , , , , , , , \n"
)

SHIPMENT_CSV = (
    "ID,Date (Dep.),Vessel Name,Route (Origin-Dest),Payload (TEUs),Revenue ($),"
    "Op. Costs ($),Profit/Loss ($),Fuel Efficiency (MT/nm)\n"
    'SHP-001,2026-02-19,Evergreen Star,Singapore ➔ Rotterdam,"1,200","$450,000","$380,000","+$70,000",0.12\n'
    'SHP-002,2026-02-18,Pacific Dawn,Shanghai ➔ Los Angeles,800,"$300,000","$320,000","-$20,000",0.15\n'
    'SHP-003,2026-01-05,Evergreen Star,Busan -> Hamburg,950,"$280,000","$250,000","$30,000",0.11\n'
)

INQUIRY_URL = "https://sheets.test/inquiry/pub?output=csv"
SHIPMENT_URL = "https://sheets.test/shipment/pub?output=csv"
PASSCODE = "4321"


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200, reason: str = "OK") -> None:
        self.text = text
        self.status_code = status_code
        self.reason = reason
        self.encoding = None

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeHttp:
    """Stands in for the ``requests`` module: ``get(url, **kwargs)``.

    ``routes`` maps a URL prefix to a response, an exception, or a list of those
    consumed one per call (the last one repeats).
    """

    def __init__(self, routes: dict) -> None:
        self.routes = routes
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def get(self, url: str, **kwargs):
        with self._lock:
            self.calls.append(url)
            for prefix, outcome in self.routes.items():
                if url.startswith(prefix):
                    if isinstance(outcome, list):
                        outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
                    break
            else:
                outcome = FakeResponse(status_code=404, reason="Not Found")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_http():
    return FakeHttp({
        INQUIRY_URL.split("?")[0]: FakeResponse(INQUIRY_CSV),
        SHIPMENT_URL.split("?")[0]: FakeResponse(SHIPMENT_CSV),
    })


@pytest.fixture
def settings(tmp_path):
    return Settings(
        inquiry_url=INQUIRY_URL,
        shipment_url=SHIPMENT_URL,
        passcode=PASSCODE,
        inquiry_refresh=3600.0,
        shipment_refresh=3600.0,
        http_timeout=1.0,
        autostart=False,
        log_level="WARNING",
        export_dir=tmp_path / "exports",
    )


@pytest.fixture(autouse=True)
def _fresh_logging():
    yield
    reset_logging()
