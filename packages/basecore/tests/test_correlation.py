"""
Tests for the correlation context.
"""

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor

from basecore import correlation
from basecore.correlation import CorrelationContext, CorrelationLogFilter


class TestBegin:
    """Tests for starting a correlation context."""

    def test_uses_inbound_correlator(self):
        """Test that an inbound correlator header is kept as-is."""
        context = correlation.begin("corr-from-upstream")
        assert context.correlator_id == "corr-from-upstream"
        assert context.transaction_id
        assert context.transaction_id != "corr-from-upstream"

    def test_generates_correlator_when_missing(self):
        """Test that a missing header gives a fresh, distinct correlator."""
        context = correlation.begin(None)
        assert context.correlator_id
        assert context.transaction_id
        assert context.correlator_id != context.transaction_id

    def test_generates_correlator_when_empty(self):
        """Test that an empty or blank header counts as missing."""
        assert correlation.begin("").correlator_id
        assert correlation.begin("   ").correlator_id.strip()

    def test_padded_correlator_kept_verbatim(self):
        """Test that surrounding whitespace is not stripped from a usable header."""
        assert correlation.begin(" padded ").correlator_id == " padded "

    def test_transaction_id_never_reused(self):
        """Test that each request gets its own transaction id."""
        ids = {correlation.begin("same").transaction_id for _ in range(50)}
        assert len(ids) == 50

    def test_sets_current(self):
        """Test that begin() activates the context."""
        context = correlation.begin("abc")
        assert correlation.current() == context


class TestCurrent:
    """Tests for reading the active context."""

    def test_absent_without_begin(self):
        """Test that a unit of work that never called begin() has no context."""
        correlation.begin("outer")
        assert contextvars.Context().run(correlation.current) is None

    def test_clear(self):
        """Test clearing the context."""
        correlation.begin("abc")
        correlation.clear()
        assert correlation.current() is None

    def test_units_of_work_are_isolated(self):
        """Test that concurrent units of work keep their own ids."""

        def start(header):
            correlation.begin(header)
            return correlation.current().correlator_id

        def handle(header):
            return contextvars.Context().run(start, header)

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(handle, [f"req-{i}" for i in range(20)]))

        assert results == [f"req-{i}" for i in range(20)]


class TestBound:
    """Tests for explicit context propagation."""

    def test_bound_activates_and_restores(self):
        """Test that bound() restores the previous context on exit."""
        outer = correlation.begin("outer")
        captured = CorrelationContext(transaction_id="t-1", correlator_id="c-1")

        with correlation.bound(captured):
            assert correlation.current() == captured

        assert correlation.current() == outer

    def test_bound_on_worker_thread(self):
        """Test carrying a captured context into an executor thread."""
        captured = correlation.begin("from-request")

        def work(context):
            with correlation.bound(context):
                return correlation.current().correlator_id

        with ThreadPoolExecutor(max_workers=1) as pool:
            assert pool.submit(work, captured).result() == "from-request"


class TestLogFilter:
    """Tests for the logging filter."""

    def _record(self):
        return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    def test_adds_ids(self):
        """Test that records get the active ids."""
        context = correlation.begin("corr-1")
        record = self._record()

        assert CorrelationLogFilter().filter(record) is True
        assert record.correlator_id == "corr-1"
        assert record.transaction_id == context.transaction_id

    def test_placeholder_without_context(self):
        """Test the placeholder used outside of a request."""
        record = self._record()
        CorrelationLogFilter().filter(record)
        assert record.correlator_id == "-"
        assert record.transaction_id == "-"
