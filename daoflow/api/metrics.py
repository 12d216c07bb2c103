"""Metric registration, recording, statistics, retention and change events."""

from __future__ import annotations

import enum
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from daoflow.api.errors import ApiError, ApiErrorCode

EVENT_BUFFER_SIZE = 100
CLEANUP_INTERVAL = 3600.0
DEFAULT_AGGREGATION_INTERVAL = 60.0
DEFAULT_RETENTION_PERIOD = 86400.0

_SERIES_FIELDS = ("name", "type", "description", "unit")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MetricType(str, enum.Enum):
    """Kind of a metric."""

    GAUGE = "gauge"
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"
    BUFFER = "buffer"


@dataclass
class MetricValue:
    """One recorded value of a metric."""

    type: MetricType
    value: float
    timestamp: datetime = field(default_factory=_now)
    labels: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class MetricStats:
    """Running statistics of a metric's values."""

    min: float = 0.0
    max: float = 0.0
    sum: float = 0.0
    count: int = 0
    average: float = 0.0
    variance: float = 0.0
    last_update: datetime | None = None

    def add(self, value: float) -> None:
        """Fold ``value`` into the statistics."""
        self.last_update = _now()
        self.count += 1
        self.sum += value
        if self.count == 1:
            self.min = self.max = self.average = value
            return
        self.min = min(self.min, value)
        self.max = max(self.max, value)
        old_average = self.average
        self.average = self.sum / self.count
        self.variance = (
            self.variance * (self.count - 1)
            + (value - old_average) * (value - self.average)
        ) / self.count


@dataclass
class MetricSeries:
    """A named metric with its recorded values and statistics."""

    name: str
    type: MetricType
    description: str = ""
    unit: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    values: list[MetricValue] = field(default_factory=list)
    statistics: MetricStats = field(default_factory=MetricStats)


@dataclass(frozen=True)
class MetricEvent:
    """Notification that a metric value was recorded."""

    type: str
    series: str
    value: MetricValue
    timestamp: datetime = field(default_factory=_now)


@dataclass
class MetricsConfig:
    """Timing of aggregation and retention, in seconds, and default labels."""

    aggregation_interval: float = DEFAULT_AGGREGATION_INTERVAL
    retention_period: float = DEFAULT_RETENTION_PERIOD
    default_labels: dict[str, str] = field(default_factory=dict)


class MetricsAPI:
    """Keeps metric series, their statistics, and drops values past retention."""

    def __init__(self, config: MetricsConfig | None = None) -> None:
        self.config = config if config is not None else MetricsConfig()
        self._lock = threading.RLock()
        self._metrics: dict[str, MetricSeries] = {}
        self._events: queue.Queue[MetricEvent] = queue.Queue(maxsize=EVENT_BUFFER_SIZE)
        self._closed = False
        self._stop = threading.Event()
        self._cleaner = threading.Thread(
            target=self._run_cleanup, name="metrics-cleanup", daemon=True
        )
        self._cleaner.start()

    def _run_cleanup(self) -> None:
        while not self._stop.wait(CLEANUP_INTERVAL):
            self.cleanup_metrics()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("metrics API is closed")

    def register_metric(
        self,
        name: str,
        metric_type: MetricType,
        description: str = "",
        unit: str = "",
    ) -> MetricSeries:
        """Create a new, empty series named ``name``."""
        with self._lock:
            self._ensure_open()
            if name in self._metrics:
                raise ApiError(ApiErrorCode.METRIC_EXISTS, "metric already exists")
            series = MetricSeries(
                name=name,
                type=MetricType(metric_type),
                description=description,
                unit=unit,
                labels=dict(self.config.default_labels),
            )
            self._metrics[name] = series
            return series

    def record_metric(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> MetricValue:
        """Append ``value`` to the series ``name`` and update its statistics."""
        with self._lock:
            self._ensure_open()
            series = self._metrics.get(name)
            if series is None:
                raise ApiError(ApiErrorCode.METRIC_NOT_FOUND, "metric not found")
            metric_value = MetricValue(
                type=series.type, value=value, labels=dict(labels or {})
            )
            series.values.append(metric_value)
            series.statistics.add(value)
            try:
                self._events.put_nowait(
                    MetricEvent(type="metric_recorded", series=name, value=metric_value)
                )
            except queue.Full:
                pass
            return metric_value

    def get_metric(self, name: str) -> MetricSeries:
        with self._lock:
            series = self._metrics.get(name)
            if series is None:
                raise ApiError(ApiErrorCode.METRIC_NOT_FOUND, "metric not found")
            return series

    def metric_value(self, name: str) -> MetricValue:
        """The most recently recorded value of ``name``."""
        with self._lock:
            series = self.get_metric(name)
            if not series.values:
                raise ApiError(ApiErrorCode.METRIC_NO_VALUE, "no values recorded")
            return series.values[-1]

    def query_metrics(self, query: dict[str, Any] | None = None) -> list[MetricSeries]:
        """Series whose name, type, description, unit and labels match ``query``."""
        query = query or {}
        with self._lock:
            return [s for s in self._metrics.values() if self._matches(s, query)]

    @staticmethod
    def _matches(series: MetricSeries, query: dict[str, Any]) -> bool:
        for key in _SERIES_FIELDS:
            if key in query and getattr(series, key) != query[key]:
                return False
        wanted = query.get("labels") or {}
        return all(series.labels.get(k) == v for k, v in wanted.items())

    def subscribe(self) -> queue.Queue[MetricEvent]:
        """Queue receiving metric events; events are dropped when it is full."""
        return self._events

    def cleanup_metrics(self) -> None:
        """Drop values older than the retention period."""
        with self._lock:
            cutoff = _now() - timedelta(seconds=self.config.retention_period)
            for series in self._metrics.values():
                series.values = [v for v in series.values if v.timestamp > cutoff]

    def close(self) -> None:
        """Stop background cleanup; further recording raises."""
        with self._lock:
            self._closed = True
        self._stop.set()
        self._cleaner.join(timeout=1.0)