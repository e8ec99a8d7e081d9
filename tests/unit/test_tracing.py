"""Tests for tracing helpers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from camunda_operator import tracing


class TestTraceSpan:
    """Test cases for trace_span."""

    def test_no_tracer_yields_none(self, monkeypatch):
        monkeypatch.setattr(tracing, "_tracer", None)
        with tracing.trace_span("observe", kind="Cluster") as span:
            assert span is None

    def test_records_exceptions(self, monkeypatch):
        """Test failures are recorded on the span and re-raised."""
        span = MagicMock()
        span.is_recording.return_value = True
        tracer = MagicMock()
        tracer.start_as_current_span.return_value.__enter__.return_value = span
        monkeypatch.setattr(tracing, "_tracer", tracer)

        with pytest.raises(RuntimeError):
            with tracing.trace_span("create", kind="Cluster", attributes={"resource.name": "x"}):
                raise RuntimeError("boom")

        span.record_exception.assert_called_once()
        _, kwargs = tracer.start_as_current_span.call_args
        assert kwargs["attributes"] == {"resource.name": "x", "resource.kind": "Cluster"}


class TestInitializeTracing:
    """Test cases for initialize_tracing."""

    def test_disabled(self, monkeypatch):
        monkeypatch.setenv("OTEL_TRACES_ENABLED", "false")
        monkeypatch.setattr(tracing, "_tracer", None)
        tracing.initialize_tracing()
        assert tracing.get_tracer() is None

    @patch("camunda_operator.tracing.trace")
    @patch("camunda_operator.tracing.OTLPSpanExporter")
    def test_enabled(self, mock_exporter, mock_trace, monkeypatch):
        monkeypatch.setenv("OTEL_TRACES_ENABLED", "true")
        monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317")
        monkeypatch.setattr(tracing, "_tracer", None)

        tracing.initialize_tracing()

        mock_exporter.assert_called_once_with(endpoint="http://collector:4317")
        assert tracing.get_tracer() is mock_trace.get_tracer.return_value
