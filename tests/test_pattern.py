import statistics

import pytest

from daoflow.api.errors import ApiError, ApiErrorCode
from daoflow.api.pattern import Pattern, PatternAPI, PatternType


@pytest.fixture
def api():
    return PatternAPI()


def test_register_without_id_raises(api):
    with pytest.raises(ApiError) as info:
        api.register_pattern(Pattern(id="", type=PatternType.CYCLE))
    assert info.value.code is ApiErrorCode.INVALID_PATTERN


def test_register_with_invalid_type_raises(api):
    with pytest.raises(ApiError) as info:
        api.register_pattern(Pattern(id="p", type="nonsense"))
    assert info.value.code is ApiErrorCode.INVALID_PATTERN


def test_register_accepts_type_name_and_sets_times(api):
    api.register_pattern(Pattern(id="p", type="energy"))
    pattern = api.get_pattern("p")
    assert pattern.type is PatternType.ENERGY
    assert pattern.create_time == pattern.update_time
    assert pattern.create_time is not None


def test_get_unknown_pattern_raises(api):
    with pytest.raises(ApiError) as info:
        api.get_pattern("missing")
    assert info.value.code is ApiErrorCode.PATTERN_NOT_FOUND


def test_match_above_threshold(api):
    api.register_pattern(
        Pattern(id="p", type=PatternType.BEHAVIOR, weights={"x": 2.0}, threshold=0.5)
    )
    matches = api.match_pattern({"x": 0.8})
    assert [m.pattern_id for m in matches] == ["p"]
    assert matches[0].score == pytest.approx(0.8)
    assert matches[0].details["threshold"] == 0.5


def test_no_match_below_threshold(api):
    api.register_pattern(
        Pattern(id="p", type=PatternType.BEHAVIOR, weights={"x": 1.0}, threshold=0.5)
    )
    assert api.match_pattern({"x": 0.2}) == []


def test_score_without_weights_is_zero(api):
    pattern = Pattern(id="p", type=PatternType.ANOMALY)
    assert api.calculate_match_score(pattern, {"x": 1.0}) == 0.0


def test_score_with_missing_features_is_zero(api):
    pattern = Pattern(id="p", type=PatternType.ANOMALY, weights={"a": 1.0, "b": 3.0})
    assert api.calculate_match_score(pattern, {"c": 5.0}) == 0.0


def test_score_is_bounded_by_feature_values(api):
    pattern = Pattern(id="p", type=PatternType.ANOMALY, weights={"a": 1.0, "b": 3.0})
    score = api.calculate_match_score(pattern, {"a": 0.2, "b": 0.9})
    assert 0.2 <= score <= 0.9


def test_update_pattern(api):
    api.register_pattern(Pattern(id="p", type=PatternType.RESOURCE))
    updated = api.update_pattern(
        "p", {"threshold": 0.7, "weights": {"w": 1.0}, "features": {"f": 2.0}}
    )
    assert updated.threshold == 0.7
    assert updated.weights == {"w": 1.0}
    assert updated.features == {"f": 2.0}
    assert updated.update_time >= updated.create_time


def test_update_ignores_wrong_kinds(api):
    api.register_pattern(Pattern(id="p", type=PatternType.RESOURCE, threshold=0.3))
    updated = api.update_pattern("p", {"threshold": "high", "weights": [1, 2]})
    assert updated.threshold == 0.3
    assert updated.weights == {}


def test_update_unknown_pattern_raises(api):
    with pytest.raises(ApiError) as info:
        api.update_pattern("missing", {"threshold": 0.1})
    assert info.value.code is ApiErrorCode.PATTERN_NOT_FOUND


def test_stats(api):
    confidences = [0.9, 0.3]
    api.register_pattern(Pattern(id="a", type=PatternType.CYCLE, confidence=confidences[0]))
    api.register_pattern(Pattern(id="b", type=PatternType.CYCLE, confidence=confidences[1]))
    result = api.stats()
    assert result.total_patterns == 2
    assert result.active_patterns == 1
    assert result.average_score == pytest.approx(statistics.mean(confidences))
    assert result.type_distribution == {PatternType.CYCLE: 2}


def test_stats_empty(api):
    result = api.stats()
    assert (result.total_patterns, result.active_patterns, result.average_score) == (0, 0, 0.0)


def test_events_in_order(api):
    events = api.subscribe()
    api.register_pattern(Pattern(id="p", type=PatternType.CYCLE, weights={"x": 1.0}))
    api.match_pattern({"x": 1.0})
    first, second = events.get_nowait(), events.get_nowait()
    assert first.type == "pattern_registered"
    assert second.type == "pattern_matched"
    assert second.match.pattern_id == "p"


def test_register_after_close_raises(api):
    api.close()
    with pytest.raises(RuntimeError):
        api.register_pattern(Pattern(id="p", type=PatternType.CYCLE))