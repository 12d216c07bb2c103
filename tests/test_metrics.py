import statistics

import pytest

from daoflow.api.errors import ApiError, ApiErrorCode
from daoflow.api.metrics import MetricsAPI, MetricsConfig, MetricType


@pytest.fixture
def api():
    metrics = MetricsAPI()
    yield metrics
    metrics.close()


def test_register_duplicate_raises(api):
    api.register_metric("cpu", MetricType.GAUGE, "cpu load", "%")
    with pytest.raises(ApiError) as info:
        api.register_metric("cpu", MetricType.GAUGE)
    assert info.value.code is ApiErrorCode.METRIC_EXISTS


def test_record_unknown_metric_raises(api):
    with pytest.raises(ApiError) as info:
        api.record_metric("missing", 1.0)
    assert info.value.code is ApiErrorCode.METRIC_NOT_FOUND


def test_get_unknown_metric_raises(api):
    with pytest.raises(ApiError) as info:
        api.get_metric("missing")
    assert info.value.code is ApiErrorCode.METRIC_NOT_FOUND


def test_metric_value_without_values_raises(api):
    api.register_metric("cpu", MetricType.GAUGE)
    with pytest.raises(ApiError) as info:
        api.metric_value("cpu")
    assert info.value.code is ApiErrorCode.METRIC_NO_VALUE


def test_metric_value_is_last_recorded(api):
    api.register_metric("requests", MetricType.COUNTER)
    api.record_metric("requests", 3.0)
    api.record_metric("requests", 7.0, {"host": "a"})
    latest = api.metric_value("requests")
    assert latest.value == 7.0
    assert latest.type is MetricType.COUNTER
    assert latest.labels == {"host": "a"}
    assert [v.value for v in api.get_metric("requests").values] == [3.0, 7.0]


def test_statistics_match_population_figures(api):
    api.register_metric("lat", MetricType.HISTOGRAM)
    values = [2.0, 4.0, 9.0, 1.5]
    for value in values:
        api.record_metric("lat", value)
    stats = api.get_metric("lat").statistics
    assert stats.count == len(values)
    assert stats.min == min(values)
    assert stats.max == max(values)
    assert stats.sum == pytest.approx(sum(values))
    assert stats.average == pytest.approx(statistics.mean(values))
    assert stats.variance == pytest.approx(statistics.pvariance(values))
    assert stats.last_update is not None


def test_single_value_statistics(api):
    api.register_metric("one", MetricType.GAUGE)
    api.record_metric("one", 5.0)
    stats = api.get_metric("one").statistics
    assert (stats.min, stats.max, stats.average, stats.variance) == (5.0, 5.0, 5.0, 0.0)


def test_subscribe_receives_recorded_event(api):
    api.register_metric("cpu", MetricType.GAUGE)
    events = api.subscribe()
    recorded = api.record_metric("cpu", 0.5)
    event = events.get_nowait()
    assert event.type == "metric_recorded"
    assert event.series == "cpu"
    assert event.value is recorded


def test_events_dropped_when_queue_full(api):
    api.register_metric("cpu", MetricType.GAUGE)
    for value in range(150):
        api.record_metric("cpu", float(value))
    assert api.subscribe().qsize() == 100
    assert len(api.get_metric("cpu").values) == 150


def test_cleanup_with_zero_retention_drops_values():
    api = MetricsAPI(MetricsConfig(retention_period=0.0))
    try:
        api.register_metric("cpu", MetricType.GAUGE)
        api.record_metric("cpu", 1.0)
        api.cleanup_metrics()
        assert api.get_metric("cpu").values == []
    finally:
        api.close()


def test_cleanup_keeps_recent_values(api):
    api.register_metric("cpu", MetricType.GAUGE)
    api.record_metric("cpu", 1.0)
    api.cleanup_metrics()
    assert [v.value for v in api.get_metric("cpu").values] == [1.0]


def test_query_without_conditions_returns_all_in_order(api):
    api.register_metric("a", MetricType.GAUGE)
    api.register_metric("b", MetricType.COUNTER)
    assert [s.name for s in api.query_metrics({})] == ["a", "b"]


def test_query_by_type_and_labels():
    api = MetricsAPI(MetricsConfig(default_labels={"env": "test"}))
    try:
        api.register_metric("a", MetricType.GAUGE)
        api.register_metric("b", MetricType.COUNTER)
        assert [s.name for s in api.query_metrics({"type": MetricType.COUNTER})] == ["b"]
        assert len(api.query_metrics({"labels": {"env": "test"}})) == 2
        assert api.query_metrics({"labels": {"env": "prod"}}) == []
    finally:
        api.close()


def test_record_after_close_raises():
    api = MetricsAPI()
    api.register_metric("cpu", MetricType.GAUGE)
    api.close()
    with pytest.raises(RuntimeError):
        api.record_metric("cpu", 1.0)