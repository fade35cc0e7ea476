import asyncio

import pytest
from conftest import INQUIRY_CSV, INQUIRY_URL, FakeHttp, FakeResponse

from fleetboard.data.datasets import INQUIRY
from fleetboard.data.loader import IngestResult, SheetIngestor
from fleetboard.data.schemas import InquiryRecord
from fleetboard.data.scheduler import RefreshScheduler
from fleetboard.data.store import DataStore, RefreshStatus
from fleetboard.errors import AccessDeniedError, FetchError
from fleetboard.session import AccessGate, Session

ADMITTED = Session(authenticated=True)


# ---------------------------------------------------------------------------
# DataStore
# ---------------------------------------------------------------------------

def test_store_starts_idle_and_empty():
    store = DataStore(INQUIRY)
    assert store.status is RefreshStatus.IDLE
    assert store.records == ()
    assert store.loading is False


def test_failure_keeps_previous_records():
    store = DataStore(INQUIRY)
    store.replace_records((InquiryRecord(vessel_name="MV A"),))
    store.begin_loading()
    assert store.loading is True
    assert len(store.records) == 1

    store.mark_failed("Failed to fetch sheet: 500 Server Error")
    assert store.loading is False
    assert store.status is RefreshStatus.FAILED
    assert store.snapshot.error.endswith("500 Server Error")
    assert store.records[0].vessel_name == "MV A"


def test_subscribers_get_every_snapshot_until_unsubscribed():
    store = DataStore(INQUIRY)
    seen = []

    def broken(_snapshot):
        raise RuntimeError("boom")

    store.subscribe(broken)
    unsubscribe = store.subscribe(lambda snap: seen.append(snap.status))
    store.begin_loading()
    store.replace_records(())
    unsubscribe()
    store.begin_loading()

    assert seen == [RefreshStatus.LOADING, RefreshStatus.READY]


# ---------------------------------------------------------------------------
# RefreshScheduler
# ---------------------------------------------------------------------------

class GatedIngestor:
    """Ingestor whose fetch blocks until the test releases it."""

    def __init__(self, result: IngestResult) -> None:
        self.result = result
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def ingest(self) -> IngestResult:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.result


def test_start_requires_authenticated_session():
    store = DataStore(INQUIRY)
    scheduler = RefreshScheduler(SheetIngestor(INQUIRY, INQUIRY_URL), store, interval=60)
    with pytest.raises(AccessDeniedError):
        scheduler.start(AccessGate("1234").login("0000"))
    assert scheduler.active is False


def test_success_then_failure_keeps_records_and_reports_error():
    http = FakeHttp({INQUIRY_URL.split("?")[0]: [
        FakeResponse(INQUIRY_CSV),
        FakeResponse(status_code=500, reason="Server Error"),
    ]})
    store = DataStore(INQUIRY)
    scheduler = RefreshScheduler(SheetIngestor(INQUIRY, INQUIRY_URL, http_client=http), store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await scheduler.refresh_now()
        assert store.status is RefreshStatus.READY
        assert len(store.records) == 5

        await scheduler.refresh_now()
        await scheduler.aclose()

    asyncio.run(scenario())
    assert store.status is RefreshStatus.FAILED
    assert "500" in store.snapshot.error
    assert len(store.records) == 5
    assert store.loading is False


def test_stop_discards_in_flight_result():
    store = DataStore(INQUIRY)
    store.replace_records((InquiryRecord(vessel_name="MV KEEP"),))
    ingestor = GatedIngestor(IngestResult(records=(InquiryRecord(vessel_name="MV LATE"),)))
    scheduler = RefreshScheduler(ingestor, store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await asyncio.wait_for(ingestor.started.wait(), timeout=5)
        scheduler.stop()
        before = store.snapshot
        ingestor.release.set()
        await scheduler.aclose()
        return before

    before = asyncio.run(scenario())
    assert store.snapshot is before
    assert store.records[0].vessel_name == "MV KEEP"
    assert scheduler.active is False


def test_overlapping_ticks_are_skipped():
    store = DataStore(INQUIRY)
    ingestor = GatedIngestor(IngestResult(records=()))
    scheduler = RefreshScheduler(ingestor, store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await asyncio.wait_for(ingestor.started.wait(), timeout=5)
        first = scheduler.launch_cycle()
        second = scheduler.launch_cycle()
        assert first is second
        ingestor.release.set()
        await first
        await scheduler.aclose()

    asyncio.run(scenario())
    assert ingestor.calls == 1
    assert store.status is RefreshStatus.READY


def test_failed_ingest_marks_store_failed():
    store = DataStore(INQUIRY)
    ingestor = GatedIngestor(IngestResult(error=FetchError("Failed to fetch sheet: 503 Unavailable")))
    ingestor.release.set()
    scheduler = RefreshScheduler(ingestor, store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await scheduler.refresh_now()
        await scheduler.aclose()

    asyncio.run(scenario())
    assert store.status is RefreshStatus.FAILED
    assert store.records == ()


def test_clock_ticks_while_active():
    store = DataStore(INQUIRY)
    ingestor = GatedIngestor(IngestResult(records=()))
    ingestor.release.set()
    ticks = iter(range(1000))
    scheduler = RefreshScheduler(ingestor, store, interval=3600, clock_interval=0.01,
                                 now=lambda: next(ticks))

    async def scenario():
        scheduler.start(ADMITTED)
        await asyncio.sleep(0.1)
        await scheduler.aclose()
        return scheduler.current_time

    stopped_at = asyncio.run(scenario())
    assert stopped_at > 1
    assert scheduler.current_time == stopped_at


def test_loading_state_seen_while_fetches_are_held():
    store = DataStore(INQUIRY)
    ingestor = GatedIngestor(IngestResult(records=(InquiryRecord(vessel_name="MV A"),)))
    scheduler = RefreshScheduler(ingestor, store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await asyncio.wait_for(ingestor.started.wait(), timeout=5)
        first = store.snapshot
        ingestor.release.set()
        await scheduler.refresh_now()
        ready = store.snapshot

        ingestor.started.clear()
        ingestor.release.clear()
        cycle = scheduler.launch_cycle()
        await asyncio.wait_for(ingestor.started.wait(), timeout=5)
        second = store.snapshot
        ingestor.release.set()
        await cycle
        await scheduler.aclose()
        return first, ready, second

    first, ready, second = asyncio.run(scenario())
    assert first.loading is True
    assert first.status is RefreshStatus.LOADING
    assert first.records == ()

    assert ready.loading is False
    assert ready.status is RefreshStatus.READY

    assert second.loading is True
    assert second.status is RefreshStatus.LOADING
    assert [r.vessel_name for r in second.records] == ["MV A"]
    assert ingestor.calls == 2


def test_unexpected_ingest_error_settles_the_store():
    store = DataStore(INQUIRY)
    http = FakeHttp({INQUIRY_URL.split("?")[0]: ValueError("client blew up")})
    scheduler = RefreshScheduler(SheetIngestor(INQUIRY, INQUIRY_URL, http_client=http), store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await scheduler.refresh_now()
        await scheduler.aclose()

    asyncio.run(scenario())
    assert store.loading is False
    assert store.status is RefreshStatus.FAILED
    assert store.snapshot.error == "client blew up"


def test_cycle_that_raises_is_recorded_as_failure():
    class ExplodingIngestor:
        async def ingest(self):
            raise RuntimeError("mapper exploded")

    store = DataStore(INQUIRY)
    scheduler = RefreshScheduler(ExplodingIngestor(), store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await scheduler.refresh_now()
        await scheduler.aclose()

    asyncio.run(scenario())
    assert store.loading is False
    assert store.status is RefreshStatus.FAILED
    assert store.snapshot.error == "mapper exploded"


def test_restart_while_old_cycle_in_flight_loads_fresh_data():
    store = DataStore(INQUIRY)
    ingestor = GatedIngestor(IngestResult(records=(InquiryRecord(vessel_name="MV NEW"),)))
    scheduler = RefreshScheduler(ingestor, store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await asyncio.wait_for(ingestor.started.wait(), timeout=5)
        scheduler.stop()
        scheduler.start(ADMITTED)
        await asyncio.sleep(0)
        assert scheduler.in_flight
        ingestor.release.set()
        await scheduler.refresh_now()
        await scheduler.aclose()

    asyncio.run(scenario())
    assert ingestor.calls == 2
    assert store.status is RefreshStatus.READY
    assert store.loading is False
    assert [r.vessel_name for r in store.records] == ["MV NEW"]


def test_stop_mid_cycle_clears_loading_flag():
    store = DataStore(INQUIRY)
    store.mark_failed("Failed to fetch sheet: 503 Unavailable")
    ingestor = GatedIngestor(IngestResult(records=()))
    scheduler = RefreshScheduler(ingestor, store, interval=3600)

    async def scenario():
        scheduler.start(ADMITTED)
        await asyncio.wait_for(ingestor.started.wait(), timeout=5)
        assert store.loading is True
        scheduler.stop()
        stopped = store.snapshot
        ingestor.release.set()
        await scheduler.aclose()
        return stopped

    stopped = asyncio.run(scenario())
    assert stopped.loading is False
    assert stopped.status is RefreshStatus.FAILED
    assert store.snapshot is stopped
