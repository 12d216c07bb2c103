import json

import pytest

from daoflow.api.config import (
    EVENT_BUFFER_SIZE,
    ConfigAPI,
    ConfigScope,
    ConfigValidation,
    value_type,
)
from daoflow.api.errors import ApiError, ApiErrorCode


@pytest.fixture
def api():
    return ConfigAPI()


@pytest.mark.parametrize(
    "value, expected",
    [
        ("text", "string"),
        (7, "integer"),
        (2.5, "float"),
        (True, "boolean"),
        ([1, 2], "array"),
        ({"a": 1}, "object"),
        (None, "unknown"),
    ],
)
def test_value_type(value, expected):
    assert value_type(value) == expected


def test_set_and_get(api):
    api.set_config("threshold", 0.7, ConfigScope.EVOLUTION, {"note": "x"})
    config = api.get_config("threshold")
    assert config.value == 0.7
    assert config.type == "float"
    assert config.scope is ConfigScope.EVOLUTION
    assert config.version == 1
    assert config.metadata == {"note": "x"}


def test_update_increments_version_and_keeps_scope(api):
    api.set_config("limit", 10, ConfigScope.METRIC)
    first = api.get_config("limit").version
    api.set_config("limit", 20, ConfigScope.GLOBAL)
    config = api.get_config("limit")
    assert config.version == first + 1
    assert config.value == 20
    assert config.scope is ConfigScope.METRIC


def test_get_missing_raises(api):
    with pytest.raises(ApiError) as info:
        api.get_config("missing")
    assert info.value.code is ApiErrorCode.CONFIG_NOT_FOUND


def test_delete(api):
    api.set_config("k", "v")
    api.delete_config("k")
    with pytest.raises(ApiError):
        api.get_config("k")


def test_delete_missing_raises(api):
    with pytest.raises(ApiError) as info:
        api.delete_config("missing")
    assert info.value.code is ApiErrorCode.CONFIG_NOT_FOUND


def test_configs_by_scope(api):
    api.set_config("a", 1, ConfigScope.PATTERN)
    api.set_config("b", 2, ConfigScope.METRIC)
    api.set_config("c", 3, ConfigScope.PATTERN)
    assert sorted(api.configs_by_scope(ConfigScope.PATTERN)) == ["a", "c"]


def test_history_records_updates_and_deletion(api):
    api.set_config("k", "one")
    api.set_config("other", "x")
    api.set_config("k", "two")
    api.delete_config("k")
    records = api.history("k")
    assert [r.reason for r in records] == [
        "Manual update",
        "Manual update",
        "Manual deletion",
    ]
    assert [r.value for r in records] == ["one", "two", None]
    assert all(r.key == "k" for r in records)


def test_subscribe_receives_events(api):
    events = api.subscribe()
    api.set_config("k", "v")
    api.delete_config("k")
    updated = events.get_nowait()
    deleted = events.get_nowait()
    assert updated.type == "config_updated"
    assert updated.key == "k"
    assert updated.version == updated.value.version
    assert deleted.type == "config_deleted"


def test_full_event_queue_drops_events(api):
    for index in range(EVENT_BUFFER_SIZE + 5):
        api.set_config(f"k{index}", index)
    assert api.subscribe().qsize() == EVENT_BUFFER_SIZE


def test_export_import_round_trip(api):
    api.set_config("name", "flow", ConfigScope.COMPONENT, {"tag": "t"})
    api.set_config("ratio", 0.5)
    data = api.export()
    other = ConfigAPI()
    other.import_configs(data)
    for key in ("name", "ratio"):
        assert other.get_config(key) == api.get_config(key)


def test_export_is_json(api):
    api.set_config("count", 3)
    decoded = json.loads(api.export())
    assert decoded["count"]["value"] == 3
    assert decoded["count"]["scope"] == "global"


def test_required_validation(api):
    api.set_validation("k", ConfigValidation(required=True))
    with pytest.raises(ApiError) as info:
        api.set_config("k", None)
    assert info.value.code is ApiErrorCode.INVALID_CONFIG


def test_type_validation(api):
    api.set_validation("k", ConfigValidation(type="integer"))
    with pytest.raises(ApiError):
        api.set_config("k", "text")
    api.set_config("k", 4)
    assert api.get_config("k").value == 4


def test_range_validation(api):
    api.set_validation("k", ConfigValidation(range=[0, 10]))
    with pytest.raises(ApiError):
        api.set_config("k", 11)
    api.set_config("k", 10)
    assert api.get_config("k").value == 10


def test_allowed_values_validation(api):
    api.set_validation("mode", ConfigValidation(range=["fast", "slow", "auto"]))
    with pytest.raises(ApiError):
        api.set_config("mode", "other")
    api.set_config("mode", "auto")
    assert api.get_config("mode").value == "auto"


def test_pattern_validation(api):
    api.set_validation("k", ConfigValidation(pattern=r"[a-z]+"))
    with pytest.raises(ApiError):
        api.set_config("k", "ABC")
    api.set_config("k", "abc")
    assert api.get_config("k").value == "abc"


def test_invalid_import_keeps_existing(api):
    api.set_config("k", 1)
    api.set_validation("k", ConfigValidation(type="integer"))
    source = ConfigAPI()
    source.set_config("k", "text")
    with pytest.raises(ApiError):
        api.import_configs(source.export())
    assert api.get_config("k").value == 1


def test_set_after_close_raises(api):
    api.close()
    with pytest.raises(RuntimeError):
        api.set_config("k", 1)