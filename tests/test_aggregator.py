"""Unit tests for the concurrent job aggregator."""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from jobmatch.adapters.themuse import TheMuseAdapter
from jobmatch.aggregation import AggregationResult, JobAggregator
from jobmatch.aggregation.aggregator import JOIN_GRACE_SECONDS
from jobmatch.domain.models import JobSource
from jobmatch.logging.context import clear_log_context, get_log_context, log_context
from tests.helpers.fixture_adapter import FixtureAdapter

ALL_SOURCES = [JobSource.JSEARCH, JobSource.ADZUNA, JobSource.THEMUSE, JobSource.REMOTEOK]


@pytest.fixture(autouse=True)
def clean_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def fixture_adapters():
    """One fixture adapter per source, in the default registration order."""
    return [FixtureAdapter(source) for source in ALL_SOURCES]


class RaisingAdapter(FixtureAdapter):
    """Adapter whose fetch_outcome itself raises."""

    def fetch_outcome(self, query, location, remote_only):
        raise RuntimeError("worker crashed")


class BarrierAdapter(FixtureAdapter):
    """Adapter that only completes when all peers are fetching at the same time."""

    def __init__(self, source, barrier, **kwargs):
        super().__init__(source, **kwargs)
        self.barrier = barrier

    def fetch_jobs(self, query, location, remote_only):
        self.barrier.wait(timeout=5)
        return super().fetch_jobs(query, location, remote_only)


class ContextRecordingAdapter(FixtureAdapter):
    def fetch_jobs(self, query, location, remote_only):
        self.seen_context = get_log_context()
        return super().fetch_jobs(query, location, remote_only)


class SlowAdapter(FixtureAdapter):
    """Adapter that blocks until released, well past its own timeout."""

    def __init__(self, source, release, delay=30, **kwargs):
        super().__init__(source, **kwargs)
        self.release = release
        self.delay = delay

    def fetch_jobs(self, query, location, remote_only):
        self.release.wait(timeout=self.delay)
        return super().fetch_jobs(query, location, remote_only)


@pytest.fixture
def release():
    event = threading.Event()
    yield event
    event.set()


class TricklingHandler(BaseHTTPRequestHandler):
    """Sends a valid JSON body one byte at a time until told to stop."""

    body = b'{"results": []}'
    stop = threading.Event()

    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        for i in range(len(self.body)):
            if self.stop.wait(0.25):
                return
            self.wfile.write(self.body[i : i + 1])
            self.wfile.flush()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def trickling_server():
    TricklingHandler.stop.clear()
    server = ThreadingHTTPServer(("127.0.0.1", 0), TricklingHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/api/public/jobs"
    TricklingHandler.stop.set()
    server.shutdown()
    server.server_close()


class TestJobAggregator:
    """Tests for JobAggregator.aggregate."""

    def test_partial_failure_isolation(self, fixture_adapters):
        """One failing source yields one error and the other sources' jobs."""
        result = JobAggregator(fixture_adapters).aggregate("python", "", False)

        assert isinstance(result, AggregationResult)
        assert result.errors == ["TheMuse failed: HTTP 503: Service Unavailable"]
        assert [job.external_id for job in result.jobs] == ["js-1", "js-2", "az-2", "98765"]

    def test_cross_source_duplicate_keeps_first_registered(self, fixture_adapters):
        result = JobAggregator(fixture_adapters).aggregate("python", "", False)

        acme = [job for job in result.jobs if job.company.lower() == "acme"]
        assert len(acme) == 1
        assert acme[0].title == "Backend Engineer"
        assert acme[0].company == "Acme"
        assert acme[0].source == JobSource.JSEARCH

    def test_registration_order_decides_duplicates(self):
        adapters = [FixtureAdapter(JobSource.ADZUNA), FixtureAdapter(JobSource.JSEARCH)]

        result = JobAggregator(adapters).aggregate("python", "", False)

        acme = [job for job in result.jobs if job.company.lower() == "acme"]
        assert acme[0].source == JobSource.ADZUNA
        assert acme[0].external_id == "az-1"

    def test_totals_and_stats(self, fixture_adapters):
        result = JobAggregator(fixture_adapters).aggregate("python", "", False)

        assert result.total_fetched == 5
        assert result.duplicates_removed == 1
        assert [s.source for s in result.source_stats] == ALL_SOURCES
        assert [s.fetched_count for s in result.source_stats] == [2, 2, 0, 1]

        themuse_stats = result.source_stats[2]
        assert themuse_stats.had_errors is True
        assert themuse_stats.error_message == "HTTP 503: Service Unavailable"

    def test_query_passed_to_every_adapter(self, fixture_adapters):
        JobAggregator(fixture_adapters).aggregate("python", "Austin", True)

        for adapter in fixture_adapters:
            assert adapter.calls == [{"query": "python", "location": "Austin", "remote_only": True}]

    def test_remote_only(self, fixture_adapters):
        result = JobAggregator(fixture_adapters).aggregate("python", "", True)

        assert [job.external_id for job in result.jobs] == ["js-2", "98765"]

    def test_skipped_source_adds_no_error(self, tmp_path):
        fixture = tmp_path / "jobs.yaml"
        fixture.write_text(
            """
sources:
  jsearch:
    missing_credentials: true
  remoteok:
    jobs:
      - external_id: r-1
        title: Python Developer
        company: Hooli
        url: https://remoteok.com/remote-jobs/r-1
"""
        )
        adapters = [
            FixtureAdapter(JobSource.JSEARCH, fixture_path=fixture),
            FixtureAdapter(JobSource.REMOTEOK, fixture_path=fixture),
        ]

        result = JobAggregator(adapters).aggregate("python", "", False)

        assert result.errors == []
        assert [job.external_id for job in result.jobs] == ["r-1"]
        assert result.source_stats[0].skipped is True
        assert result.source_stats[0].had_errors is False

    def test_raising_adapter_is_labeled(self):
        adapters = [FixtureAdapter(JobSource.JSEARCH), RaisingAdapter(JobSource.ADZUNA)]

        result = JobAggregator(adapters).aggregate("python", "", False)

        assert result.errors == ["Adzuna failed: worker crashed"]
        assert [job.external_id for job in result.jobs] == ["js-1", "js-2"]

    def test_all_sources_fail(self):
        adapters = [RaisingAdapter(JobSource.JSEARCH), FixtureAdapter(JobSource.THEMUSE)]

        result = JobAggregator(adapters).aggregate("python", "", False)

        assert result.jobs == []
        assert len(result.errors) == 2

    def test_adapters_run_concurrently(self):
        barrier = threading.Barrier(2)
        adapters = [
            BarrierAdapter(JobSource.JSEARCH, barrier),
            BarrierAdapter(JobSource.ADZUNA, barrier),
        ]

        result = JobAggregator(adapters).aggregate("python", "", False)

        # Sequential execution would break the barrier and surface as errors
        assert result.errors == []
        assert result.total_fetched == 4

    def test_log_context_reaches_workers(self):
        adapter = ContextRecordingAdapter(JobSource.REMOTEOK)

        with log_context(run_id="run-1"):
            JobAggregator([adapter]).aggregate("python", "", False)

        assert adapter.seen_context == {"run_id": "run-1", "source": "remoteok"}

    def test_no_adapters(self):
        result = JobAggregator([]).aggregate("python", "", False)

        assert result.jobs == []
        assert result.errors == []

    def test_max_workers_one_still_settles_all(self, fixture_adapters):
        result = JobAggregator(fixture_adapters, max_workers=1).aggregate("python", "", False)

        assert len(result.source_stats) == 4
        assert len(result.jobs) == 4


class TestAggregatorDeadline:
    """An adapter still running past its timeout must not stall the run."""

    def test_hung_adapter_reported_as_timed_out(self, release):
        adapters = [FixtureAdapter(JobSource.JSEARCH), SlowAdapter(JobSource.THEMUSE, release, timeout=1)]

        started = time.monotonic()
        result = JobAggregator(adapters, join_grace_seconds=0.5).aggregate("python", "", False)
        elapsed = time.monotonic() - started

        assert elapsed < 3
        assert result.errors == ["TheMuse failed: timed out after 1s"]
        assert [job.external_id for job in result.jobs] == ["js-1", "js-2"]
        assert result.source_stats[1].had_errors is True
        assert result.source_stats[1].fetched_count == 0

    def test_queued_adapter_deadline_starts_after_the_one_ahead(self, release):
        """With one worker, a queued adapter is not charged for time spent waiting in the queue."""
        adapters = [
            SlowAdapter(JobSource.JSEARCH, release, delay=1.5, timeout=3),
            FixtureAdapter(JobSource.ADZUNA, timeout=1),
        ]

        result = JobAggregator(adapters, max_workers=1, join_grace_seconds=0.2).aggregate("python", "", False)

        assert result.errors == []
        assert result.total_fetched == 4

    def test_fast_adapters_unaffected_by_deadline(self, fixture_adapters):
        result = JobAggregator(fixture_adapters, join_grace_seconds=0.0).aggregate("python", "", False)

        assert all("timed out" not in error for error in result.errors)

    def test_trickling_provider_bounded_by_timeout(self, trickling_server):
        """A body sent one byte at a time never trips the per-read timeout but still ends the run."""
        adapter = TheMuseAdapter(timeout=1)
        adapter.API_URL = trickling_server
        adapter._session.trust_env = False

        started = time.monotonic()
        result = JobAggregator([adapter]).aggregate("python", "", False)
        elapsed = time.monotonic() - started

        assert elapsed < adapter.timeout + JOIN_GRACE_SECONDS + 1
        assert result.errors == ["TheMuse failed: timed out after 1s"]
        assert result.jobs == []
