"""Unit tests for logging, tracing and metrics."""

import io
import json
import logging
import sys

from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
import pytest

from mcpdict_search.adapters.dictionary_repository import DictionaryStoreError, InMemoryDictionaryRepository
from mcpdict_search.domain.search import SearchMode
from mcpdict_search.observability import (
    SEARCH_LATENCY,
    JsonFormatter,
    bind_search_context,
    configure_logging,
    create_span,
    get_metrics,
    get_trace_context,
    init_tracing,
    metrics as metrics_module,
    tracing as tracing_module,
    track_latency,
)
from mcpdict_search.observability.metrics import MetricBridge
from mcpdict_search.service_layer.search_service import SearchService


def _record(msg="test message", level=logging.INFO, name="mcpdict_search.search.merger"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def span_exporter():
    exporter = InMemorySpanExporter()
    init_tracing("test-service", span_processors=[SimpleSpanProcessor(exporter)])
    yield exporter
    tracing_module._tracer_holder["tracer"] = None


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestJsonFormatter:
    def test_format_includes_trace_context(self):
        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["component"] == "merger"
        assert "timestamp" in data
        assert data["trace_id"] == get_trace_context()["trace_id"]

    def test_format_includes_search_mode(self):
        with bind_search_context(mode="pu"):
            data = json.loads(JsonFormatter().format(_record()))

        assert data["mode"] == "pu"
        assert "mode" not in json.loads(JsonFormatter().format(_record()))

    def test_format_includes_extra_fields(self):
        record = _record()
        record.query = "ming2"
        record.codes = {"660E", "540D"}

        data = json.loads(JsonFormatter().format(record))

        assert data["query"] == "ming2"
        assert data["codes"] == ["540D", "660E"]
        assert "msg" not in data

    def test_format_truncates_and_redacts(self):
        record = _record(msg="x" * 5000)
        record.api_key = "secret"
        record.note = "y" * 800

        data = json.loads(JsonFormatter().format(record))

        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert data["api_key"] == "[REDACTED]"
        assert data["note"].endswith("...")

    def test_format_includes_exception(self):
        try:
            raise DictionaryStoreError("store gone")
        except DictionaryStoreError:
            record = logging.LogRecord("t", logging.ERROR, "t.py", 1, "failed", (), sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "DictionaryStoreError: store gone" in data["exception"]


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    def test_json_output(self):
        stream = io.StringIO()
        configure_logging("debug", json_output=True, stream=stream)

        logging.getLogger("mcpdict_search.test").debug("hello %s", "world")

        assert json.loads(stream.getvalue())["message"] == "hello world"

    def test_plain_output_and_overrides(self):
        stream = io.StringIO()
        configure_logging("info", json_output=False, logger_levels={"mcpdict_search.noisy": "error"}, stream=stream)

        logging.getLogger("mcpdict_search.noisy").warning("suppressed")
        logging.getLogger("mcpdict_search.quiet").info("shown")

        output = stream.getvalue()
        assert "suppressed" not in output
        assert "INFO [mcpdict_search.quiet] shown" in output
        logging.getLogger("mcpdict_search.noisy").setLevel(logging.NOTSET)

    def test_replaces_existing_handlers(self):
        configure_logging("info", stream=io.StringIO())
        configure_logging("info", stream=io.StringIO())

        assert len(logging.getLogger().handlers) == 1


@pytest.mark.unit
class TestTracing:
    def test_create_span_sets_attributes_and_span_id(self, span_exporter):
        with create_span("test.operation", attributes={"search.mode": "hz"}):
            span_id = get_trace_context()["span_id"]

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "test.operation"
        assert span.attributes["search.mode"] == "hz"
        assert span_id == format(span.context.span_id, "016x")

    def test_create_span_records_errors(self, span_exporter):
        with pytest.raises(ValueError), create_span("test.failure"):
            raise ValueError("boom")

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR
        assert [event.name for event in span.events] == ["exception"]

    def test_get_tracer_initializes_lazily(self):
        tracing_module._tracer_holder["tracer"] = None

        assert tracing_module.get_tracer() is not None

    def test_search_emits_span(self, span_exporter, sample_records):
        SearchService(InMemoryDictionaryRepository(sample_records)).search("ming2 xue2", SearchMode.MANDARIN)

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "mcpdict.search"
        assert span.attributes["search.mode"] == "pu"
        assert span.attributes["search.keyword_count"] == 2
        assert span.attributes["search.result_count"] == 6

    def test_store_failure_marks_span(self, span_exporter):
        class _Broken(InMemoryDictionaryRepository):
            def probe(self, column, term):
                raise DictionaryStoreError("corrupt")

        with pytest.raises(DictionaryStoreError):
            SearchService(_Broken([])).search("明", SearchMode.IDEOGRAPH)

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR


@pytest.mark.unit
class TestMetrics:
    def test_track_latency_observes_histogram(self):
        sample = metrics_module._SEARCH_LATENCY_PROM.labels(mode="test")
        before = sample._sum.get()

        with track_latency(SEARCH_LATENCY, mode="test"):
            pass

        assert sample._sum.get() >= before

    def test_bridge_counts_prometheus_and_otel(self):
        bound = metrics_module.SEARCH_ERRORS.labels(mode="test", error_type="Boom")
        counter = metrics_module._SEARCH_ERRORS_PROM.labels(mode="test", error_type="Boom")
        before = counter._value.get()

        bound.inc()

        assert counter._value.get() == before + 1

    def test_unknown_metric_kind(self):
        bridge = MetricBridge(
            metrics_module._SEARCH_COUNT_PROM,
            otel_name="bogus",
            otel_description="bogus",
            otel_kind="summary",
        )

        with pytest.raises(ValueError, match="Unknown metric kind"):
            bridge.inc({"mode": "test", "outcome": "hit"}, 1)

    def test_metrics_exposition(self):
        metrics_module.KEYWORD_COUNT.labels(mode="test").observe(3)

        output = get_metrics().decode("utf-8")

        assert "search_latency_seconds" in output
        assert "search_errors_total" in output
        assert "search_keywords" in output
