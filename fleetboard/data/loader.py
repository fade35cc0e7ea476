"""
Sheet ingestion: cache-busted fetch, CSV parsing, header resolution, row mapping.
"""
from __future__ import annotations

import asyncio
import io
import logging
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import pandas as pd
import requests

from fleetboard.config import CACHE_BUST_PARAM, HTTP_TIMEOUT_SECONDS
from fleetboard.data.datasets import Dataset
from fleetboard.data.headers import resolve_headers
from fleetboard.data.mapper import map_rows
from fleetboard.errors import FetchError, FleetboardError, SheetParseError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------

def bust_cache(url: str, stamp: int) -> str:
    """Append (or replace) the cache-busting query parameter."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != CACHE_BUST_PARAM]
    query.append((CACHE_BUST_PARAM, str(stamp)))
    return urlunsplit(parts._replace(query=urlencode(query)))


def fetch_text(url: str, http_client=None, timeout: float = HTTP_TIMEOUT_SECONDS) -> str:
    """GET the published sheet as UTF-8 text.

    Raises:
        FetchError: network failure or a non-success status.
    """
    client = http_client or requests
    try:
        response = client.get(url, timeout=timeout, headers={"Cache-Control": "no-cache"})
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch sheet: {exc}") from exc

    if not response.ok:
        raise FetchError(f"Failed to fetch sheet: {response.status_code} {response.reason}")
    response.encoding = "utf-8"
    return response.text


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParsedTable:
    headers: list[str]
    rows: list[dict[str, str]]


def parse_csv_text(text: str) -> ParsedTable:
    """Split delimited text into the header row and header-keyed rows.

    Header text is kept exactly (trailing spaces, empty names) and empty cells
    stay "". Blank lines are skipped.

    Raises:
        SheetParseError: empty input, unterminated quote, or a row whose cell
            count differs from the header row.
    """
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[],
            na_filter=True,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise SheetParseError(f"Malformed sheet CSV: {exc}") from exc

    table = list(frame.itertuples(index=False, name=None))
    if not table:
        raise SheetParseError("Malformed sheet CSV: no header row")

    # Only cells missing from a short row come back as NA
    short = frame.index[frame.isna().any(axis=1)]
    if len(short):
        raise SheetParseError(
            f"Malformed sheet CSV: row {frame.index.get_loc(short[0]) + 1} has fewer cells than the header row"
        )

    headers = [str(h) for h in table[0]]
    rows = []
    for values in table[1:]:
        row: dict[str, str] = {}
        for header, value in zip(headers, values):
            row.setdefault(header, value)
        rows.append(row)
    return ParsedTable(headers=headers, rows=rows)


def load_records(text: str, dataset: Dataset) -> tuple:
    """Parse CSV text and map it onto ``dataset`` records (blank rows dropped)."""
    table = parse_csv_text(text)
    index = resolve_headers(table.headers, dataset.aliases)
    return map_rows(table.rows, index, dataset.builder)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IngestResult:
    """Outcome of one ingest cycle: a fresh RecordSet, or the error that prevented one."""
    records: Optional[tuple] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SheetIngestor:
    """Fetch → parse → resolve → map for one dataset source."""

    def __init__(
        self,
        dataset: Dataset,
        url: str,
        http_client=None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self.dataset = dataset
        self.url = url
        self.http_client = http_client
        self.timeout = timeout
        self._last_stamp = 0

    def next_url(self) -> str:
        stamp = max(time.time_ns() // 1_000_000, self._last_stamp + 1)
        self._last_stamp = stamp
        return bust_cache(self.url, stamp)

    def fetch_records(self) -> tuple:
        """Blocking ingest; raises FetchError / SheetParseError."""
        text = fetch_text(self.next_url(), self.http_client, self.timeout)
        return load_records(text, self.dataset)

    async def ingest(self) -> IngestResult:
        """One ingest cycle. Failures are returned, never raised."""
        try:
            records = await asyncio.to_thread(self.fetch_records)
        except FleetboardError as exc:
            logger.warning("%s ingest failed: %s", self.dataset.name, exc)
            return IngestResult(error=exc)
        except Exception as exc:
            logger.exception("%s ingest crashed", self.dataset.name)
            return IngestResult(error=exc)
        logger.info("%s ingest: %d records", self.dataset.name, len(records))
        return IngestResult(records=records)
