import datetime as dt

import pytest
from conftest import INQUIRY_CSV
from openpyxl import load_workbook

from fleetboard.config import DEFAULT_PASSCODE, INQUIRY_REFRESH_SECONDS, Settings
from fleetboard.data.datasets import INQUIRY, get_dataset
from fleetboard.data.export import export_filename, records_to_csv, write_records_csv
from fleetboard.data.loader import load_records
from fleetboard.data.schemas import InquiryRecord
from fleetboard.errors import ConfigError, UnknownDatasetError
from fleetboard.reports.dashboard_report import generate_excel
from fleetboard.session import AccessGate

ENV_NAMES = [
    "FLEETBOARD_INQUIRY_URL", "FLEETBOARD_SHIPMENT_URL", "FLEETBOARD_PASSCODE",
    "FLEETBOARD_INQUIRY_REFRESH", "FLEETBOARD_SHIPMENT_REFRESH", "FLEETBOARD_HTTP_TIMEOUT",
    "FLEETBOARD_AUTOSTART", "FLEETBOARD_LOG_LEVEL", "FLEETBOARD_EXPORT_DIR",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def test_settings_defaults(clean_env):
    settings = Settings.from_env(dotenv=False)
    assert settings.passcode == DEFAULT_PASSCODE
    assert settings.refresh_interval("inquiry") == INQUIRY_REFRESH_SECONDS
    assert settings.autostart is True


def test_settings_from_env(clean_env, tmp_path):
    clean_env.setenv("FLEETBOARD_INQUIRY_URL", "https://sheets.test/a.csv")
    clean_env.setenv("FLEETBOARD_SHIPMENT_REFRESH", "90")
    clean_env.setenv("FLEETBOARD_AUTOSTART", "off")
    clean_env.setenv("FLEETBOARD_LOG_LEVEL", "debug")
    clean_env.setenv("FLEETBOARD_EXPORT_DIR", str(tmp_path))

    settings = Settings.from_env(dotenv=False)
    assert settings.source_url("inquiry") == "https://sheets.test/a.csv"
    assert settings.refresh_interval("shipment") == 90.0
    assert settings.autostart is False
    assert settings.log_level == "DEBUG"
    assert settings.export_dir == tmp_path


@pytest.mark.parametrize("name, value", [
    ("FLEETBOARD_INQUIRY_REFRESH", "soon"),
    ("FLEETBOARD_HTTP_TIMEOUT", "0"),
    ("FLEETBOARD_AUTOSTART", "maybe"),
])
def test_invalid_settings_raise(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ConfigError, match=name):
        Settings.from_env(dotenv=False)


def test_unknown_dataset():
    assert get_dataset("Inquiry") is INQUIRY
    with pytest.raises(UnknownDatasetError):
        get_dataset("tankers")


# ---------------------------------------------------------------------------
# Access gate
# ---------------------------------------------------------------------------

def test_access_gate():
    gate = AccessGate("1234")
    assert gate.check("1234")
    assert not gate.check("12345")
    assert not gate.check("")
    assert not gate.check(None)
    assert gate.login("1234").authenticated
    assert not gate.login("0000").authenticated


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def test_csv_export_has_field_header_and_source_order():
    records = load_records(INQUIRY_CSV, INQUIRY)
    lines = records_to_csv(records, INQUIRY).splitlines()
    assert lines[0] == ",".join(InquiryRecord.field_names())
    assert len(lines) == 6
    assert lines[1].startswith("1.0,2026,FEBRUARY,19,WEEK 8,MV OCEAN STAR")


def test_csv_export_of_empty_set_is_header_only():
    assert records_to_csv((), INQUIRY).splitlines() == [",".join(InquiryRecord.field_names())]


def test_export_filename():
    assert export_filename(INQUIRY, "csv", dt.date(2026, 2, 19)) == "inquiry_data_2026-02-19.csv"


def test_write_records_csv_creates_parent(tmp_path):
    path = write_records_csv(load_records(INQUIRY_CSV, INQUIRY), INQUIRY, tmp_path / "out" / "x.csv")
    assert path.exists()
    assert path.read_text(encoding="utf-8").count("\n") == 6


def test_workbook_export(tmp_path):
    records = load_records(INQUIRY_CSV, INQUIRY)
    path = generate_excel(records, INQUIRY, tmp_path / "inquiry.xlsx", dt.date(2026, 2, 19))
    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Records"]
    assert wb["Summary"]["A1"].value == "INQUIRY DASHBOARD"
    assert wb["Records"]["F1"].value == "Vessel"
