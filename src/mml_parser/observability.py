"""
Event and metric hooks for watching a parser run.

A run's ``RunContext`` owns one ``ObservabilityManager``; the parser and
the batch driver report file and block events, a ``rows_written`` counter
and per-file timers to it, and the manager hands them to each hook.
Hooks never interrupt parsing: an exception inside one is logged.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

METRIC_PREFIX = "mml_parser"


class MetricType(Enum):
    COUNTER = "counter"
    TIMER = "timer"  # milliseconds


class EventType(Enum):
    FILE_START = "file_start"
    FILE_COMPLETE = "file_complete"
    FILE_ERROR = "file_error"
    BLOCK_START = "block_start"
    BLOCK_COMPLETE = "block_complete"
    LINE_SKIPPED = "line_skipped"


@dataclass
class MetricEvent:
    metric_type: MetricType
    name: str
    value: float
    tags: Dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        tags = ",".join(f"{k}={v}" for k, v in self.tags.items())
        return f"{self.name}:{self.value}|{self.metric_type.value}|{tags}"


@dataclass
class Event:
    """A file or block milestone, or a skipped line."""
    event_type: EventType
    file_path: Optional[Path] = None
    entity_type: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __str__(self) -> str:
        parts = [self.event_type.value]
        if self.file_path:
            parts.append(f"file={self.file_path.name}")
        if self.entity_type:
            parts.append(f"entity={self.entity_type}")
        parts.extend(f"{k}={v}" for k, v in self.details.items())
        return " ".join(parts)


class ObservabilityHook:
    """Receives the events and metrics of a run. Override what you need."""

    def on_metric(self, metric: MetricEvent) -> None:
        pass

    def on_event(self, event: Event) -> None:
        pass

    def close(self) -> None:
        """Called once when the run ends."""


class LoggingHook(ObservabilityHook):
    """Writes events to the log; metrics go to DEBUG."""

    _WARNING_EVENTS = (EventType.FILE_ERROR, EventType.LINE_SKIPPED)

    def __init__(self, log_metrics: bool = True):
        self.log_metrics = log_metrics

    def on_metric(self, metric: MetricEvent) -> None:
        if self.log_metrics:
            logger.debug(f"METRIC: {metric}")

    def on_event(self, event: Event) -> None:
        level = logging.WARNING if event.event_type in self._WARNING_EVENTS else logging.INFO
        logger.log(level, f"EVENT: {event}")


class PrometheusHook(ObservabilityHook):
    """Collects metrics in a per-run Prometheus registry.

    Counters become ``mml_parser_<name>_total`` and timers become
    ``mml_parser_<name>_seconds`` histograms. When ``textfile`` is given the
    registry is written there on close, in the text format read by the
    node exporter's textfile collector.

    Requires prometheus_client:
        pip install mml-printout-parser[metrics]
    """

    def __init__(self, textfile: Optional[Union[str, Path]] = None, registry=None):
        try:
            import prometheus_client
        except ImportError:
            raise ImportError(
                "prometheus_client is required for PrometheusHook. "
                "Install with: pip install mml-printout-parser[metrics]"
            )
        self._prom = prometheus_client
        self.registry = registry if registry is not None else prometheus_client.CollectorRegistry()
        self.textfile = Path(textfile) if textfile is not None else None
        self._collectors: Dict[str, Any] = {}

    def _collector(self, metric: MetricEvent):
        collector = self._collectors.get(metric.name)
        if collector is None:
            labels = sorted(metric.tags)
            if metric.metric_type == MetricType.COUNTER:
                collector = self._prom.Counter(
                    f"{METRIC_PREFIX}_{metric.name}", f"MML parser {metric.name}",
                    labels, registry=self.registry
                )
            else:
                collector = self._prom.Histogram(
                    f"{METRIC_PREFIX}_{metric.name}_seconds", f"MML parser {metric.name} in seconds",
                    labels, registry=self.registry
                )
            self._collectors[metric.name] = collector
        return collector.labels(**metric.tags) if metric.tags else collector

    def on_metric(self, metric: MetricEvent) -> None:
        collector = self._collector(metric)
        if metric.metric_type == MetricType.COUNTER:
            collector.inc(metric.value)
        else:
            collector.observe(metric.value / 1000.0)

    def close(self) -> None:
        if self.textfile is not None:
            self._prom.write_to_textfile(str(self.textfile), self.registry)
            logger.info(f"Prometheus metrics written to {self.textfile}")


class StatsDHook(ObservabilityHook):
    """Sends metrics to StatsD, tags folded into the dotted name.

    Requires statsd:
        pip install mml-printout-parser[metrics]
    """

    def __init__(self, host: str = "localhost", port: int = 8125, prefix: str = METRIC_PREFIX):
        try:
            import statsd
        except ImportError:
            raise ImportError(
                "statsd is required for StatsDHook. "
                "Install with: pip install mml-printout-parser[metrics]"
            )
        self.client = statsd.StatsClient(host, port, prefix=prefix)

    @staticmethod
    def stat_name(metric: MetricEvent) -> str:
        return ".".join([metric.name] + [f"{k}.{v}" for k, v in metric.tags.items()])

    def on_metric(self, metric: MetricEvent) -> None:
        name = self.stat_name(metric)
        if metric.metric_type == MetricType.COUNTER:
            self.client.incr(name, int(metric.value))
        else:
            self.client.timing(name, metric.value)


class ObservabilityManager:
    """Fans events and metrics out to the hooks of one run."""

    def __init__(self, hooks: Optional[List[ObservabilityHook]] = None):
        self.hooks: List[ObservabilityHook] = list(hooks or [])
        self._timers: Dict[str, float] = {}

    def _dispatch(self, method: str, *args) -> None:
        for hook in self.hooks:
            try:
                getattr(hook, method)(*args)
            except Exception as e:
                logger.error(f"Error in observability hook {type(hook).__name__}: {e}")

    def emit_metric(self, metric_type: MetricType, name: str, value: float,
                    tags: Optional[Dict[str, str]] = None) -> None:
        if self.hooks:
            self._dispatch("on_metric", MetricEvent(metric_type, name, value, tags or {}))

    def emit_event(self, event_type: EventType, file_path: Optional[Path] = None,
                   entity_type: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        if self.hooks:
            self._dispatch("on_event", Event(event_type, file_path, entity_type, details or {}))

    def counter(self, name: str, value: float = 1.0, tags: Optional[Dict[str, str]] = None) -> None:
        self.emit_metric(MetricType.COUNTER, name, value, tags)

    def start_timer(self, name: str) -> None:
        self._timers[name] = time.perf_counter()

    def end_timer(self, name: str, tags: Optional[Dict[str, str]] = None) -> float:
        """Stop a timer, emit its duration in milliseconds and return it in seconds."""
        started = self._timers.pop(name, None)
        if started is None:
            logger.warning(f"Timer '{name}' was not started")
            return 0.0
        duration = time.perf_counter() - started
        self.emit_metric(MetricType.TIMER, name, duration * 1000, tags)
        return duration

    def close(self) -> None:
        """Let every hook finish; called once at the end of the run."""
        self._dispatch("close")
