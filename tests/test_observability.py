"""Tests for observability hooks and their use during a run."""

import logging

import pytest

from mml_parser.observability import (
    EventType,
    LoggingHook,
    MetricEvent,
    MetricType,
    ObservabilityHook,
    ObservabilityManager,
    StatsDHook,
)
from mml_parser.orchestrator import parse_files


class RecordingHook(ObservabilityHook):
    def __init__(self):
        self.events = []
        self.metrics = []
        self.closed = False

    def on_event(self, event):
        self.events.append(event)

    def on_metric(self, metric):
        self.metrics.append(metric)

    def close(self):
        self.closed = True


class BrokenHook(ObservabilityHook):
    def on_event(self, event):
        raise RuntimeError("hook failure")


def test_run_emits_file_and_block_events(multi_block_printout_file, temp_output_dir):
    hook = RecordingHook()
    parse_files([multi_block_printout_file], temp_output_dir, hooks=[hook])

    types = [e.event_type for e in hook.events]
    assert types[0] == EventType.FILE_START
    assert types[-1] == EventType.FILE_COMPLETE
    assert types.count(EventType.BLOCK_START) == 3
    assert types.count(EventType.BLOCK_COMPLETE) == 3

    rows = [m for m in hook.metrics if m.name == "rows_written"]
    assert len(rows) == 4
    assert {m.tags["entity_type"] for m in rows} == {"UCELL", "UNODEB"}
    assert any(m.metric_type == MetricType.TIMER for m in hook.metrics)
    assert hook.closed


def test_failed_file_emits_error_event(tmp_path, temp_output_dir):
    hook = RecordingHook()
    parse_files([tmp_path / "missing.txt"], temp_output_dir, hooks=[hook])
    assert hook.events[-1].event_type == EventType.FILE_ERROR
    assert "error" in hook.events[-1].details


def test_broken_hook_does_not_stop_parsing(sample_printout_file, temp_output_dir):
    stats, _, file_errors = parse_files([sample_printout_file], temp_output_dir, hooks=[BrokenHook()])
    assert file_errors == {}
    assert stats["succeeded"] == 1


def test_logging_hook_levels(caplog):
    manager = ObservabilityManager([LoggingHook()])
    with caplog.at_level(logging.INFO):
        manager.emit_event(EventType.BLOCK_START, entity_type="UCELL")
        manager.emit_event(EventType.FILE_ERROR, details={"error": "boom"})

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.INFO, logging.WARNING]
    assert "entity=UCELL" in caplog.records[0].getMessage()


def test_timer_not_started():
    assert ObservabilityManager().end_timer("never") == 0.0


def test_prometheus_hook_counts():
    prometheus_client = pytest.importorskip("prometheus_client")
    from mml_parser.observability import PrometheusHook

    registry = prometheus_client.CollectorRegistry()
    manager = ObservabilityManager([PrometheusHook(registry=registry)])
    manager.counter("rows_written", tags={"entity_type": "UCELL"})
    manager.counter("rows_written", value=2, tags={"entity_type": "UCELL"})

    value = registry.get_sample_value("mml_parser_rows_written_total", {"entity_type": "UCELL"})
    assert value == 3.0


def test_prometheus_hooks_use_separate_registries():
    pytest.importorskip("prometheus_client")
    from mml_parser.observability import PrometheusHook

    first, second = PrometheusHook(), PrometheusHook()
    assert first.registry is not second.registry
    for hook in (first, second):
        ObservabilityManager([hook]).counter("rows_written", tags={"entity_type": "UCELL"})
        assert hook.registry.get_sample_value("mml_parser_rows_written_total", {"entity_type": "UCELL"}) == 1.0


def test_prometheus_textfile_written_at_end_of_run(sample_printout_file, tmp_path, temp_output_dir):
    pytest.importorskip("prometheus_client")
    from mml_parser.observability import PrometheusHook

    textfile = tmp_path / "mml_parser.prom"
    parse_files([sample_printout_file], temp_output_dir, hooks=[PrometheusHook(textfile=textfile)])

    exported = textfile.read_text()
    assert 'mml_parser_rows_written_total{entity_type="UCELL"} 2.0' in exported
    assert "mml_parser_file_duration_seconds_count" in exported


def test_statsd_name_folds_tags():
    metric = MetricEvent(MetricType.COUNTER, "rows_written", 1, {"entity_type": "UCELL"})
    assert StatsDHook.stat_name(metric) == "rows_written.entity_type.UCELL"
