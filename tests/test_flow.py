import re

import pytest

from daoflow.core.errors import CoreError, ErrorCode
from daoflow.core.flow import (
    BaseFlow,
    Flow,
    FlowConfig,
    FlowDirection,
    FlowEvent,
    FlowState,
    generate_id,
    is_valid_flow_transition,
)


class _Recorder:
    def __init__(self):
        self.events = []

    def on_flow_event(self, event, flow):
        self.events.append((event, flow.state))


def test_generate_id_is_hex_and_unique():
    ids = {generate_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(re.fullmatch(r"[0-9a-f]{32}", i) for i in ids)


def test_new_flow_defaults():
    flow = Flow()
    assert flow.state is FlowState.VOID
    assert flow.energy == 50.0
    assert flow.direction == FlowDirection(0, 0, 0, 0)
    assert flow.modified == flow.created


@pytest.mark.parametrize(
    "current,new,expected",
    [
        (FlowState.VOID, FlowState.INACTIVE, True),
        (FlowState.VOID, FlowState.FLOWING, False),
        (FlowState.INACTIVE, FlowState.FLOWING, True),
        (FlowState.INACTIVE, FlowState.STATIC, False),
        (FlowState.FLOWING, FlowState.TRANSFORMING, True),
        (FlowState.STATIC, FlowState.TERMINATED, True),
        (FlowState.TRANSFORMING, FlowState.STATIC, True),
        (FlowState.TRANSFORMING, FlowState.INACTIVE, False),
        (FlowState.TERMINATED, FlowState.VOID, True),
        (FlowState.TERMINATED, FlowState.FLOWING, False),
    ],
)
def test_transition_table(current, new, expected):
    assert is_valid_flow_transition(current, new) is expected


def test_lifecycle_start_stop_restart():
    bf = BaseFlow(FlowConfig())
    bf.initialize()
    assert bf.state is FlowState.INACTIVE
    bf.start_flow()
    assert bf.state is FlowState.FLOWING
    bf.stop_flow()
    assert bf.state is FlowState.STATIC
    bf.start_flow()
    assert bf.state is FlowState.FLOWING


def test_initialize_twice_raises_state_error():
    bf = BaseFlow()
    bf.initialize()
    with pytest.raises(CoreError) as info:
        bf.initialize()
    assert info.value.code is ErrorCode.STATE


def test_start_from_void_raises():
    bf = BaseFlow()
    with pytest.raises(CoreError):
        bf.start_flow()
    assert bf.state is FlowState.VOID


def test_stop_when_not_flowing_raises():
    bf = BaseFlow()
    bf.initialize()
    with pytest.raises(CoreError):
        bf.stop_flow()
    assert bf.state is FlowState.INACTIVE


def test_transform_valid_and_invalid():
    bf = BaseFlow()
    bf.initialize()
    bf.start_flow()
    bf.transform(FlowState.TRANSFORMING)
    assert bf.state is FlowState.TRANSFORMING
    with pytest.raises(CoreError):
        bf.transform(FlowState.VOID)
    assert bf.state is FlowState.TRANSFORMING
    bf.transform(FlowState.TERMINATED)
    bf.transform(FlowState.VOID)
    assert bf.state is FlowState.VOID


def test_adjust_energy_within_range():
    bf = BaseFlow(FlowConfig(min_energy=0.0, max_energy=60.0))
    bf.adjust_energy(10.0)
    assert bf.energy == pytest.approx(50.0 + 10.0)


def test_adjust_energy_out_of_range_keeps_energy():
    bf = BaseFlow(FlowConfig(min_energy=40.0, max_energy=60.0))
    with pytest.raises(CoreError) as info:
        bf.adjust_energy(-20.0)
    assert info.value.code is ErrorCode.RANGE
    with pytest.raises(CoreError):
        bf.adjust_energy(20.0)
    assert bf.energy == 50.0


def test_adjust_direction_sets_direction():
    bf = BaseFlow()
    direction = FlowDirection(x=1.0, y=2.0, z=3.0, angle=90.0)
    bf.adjust_direction(direction)
    assert bf.flow.direction == direction


def test_observers_receive_events_in_order():
    bf = BaseFlow()
    recorder = _Recorder()
    bf.add_observer(recorder)
    bf.initialize()
    bf.start_flow()
    bf.stop_flow()
    bf.transform(FlowState.TERMINATED)
    bf.adjust_energy(1.0)
    bf.adjust_direction(FlowDirection(angle=45.0))
    assert [e for e, _ in recorder.events] == [
        FlowEvent.INITIALIZE,
        FlowEvent.START,
        FlowEvent.STOP,
        FlowEvent.TRANSFORM,
        FlowEvent.ENERGY_CHANGE,
        FlowEvent.DIRECTION_CHANGE,
    ]
    assert recorder.events[1][1] is FlowState.FLOWING


def test_failed_operation_does_not_notify():
    bf = BaseFlow()
    recorder = _Recorder()
    bf.add_observer(recorder)
    with pytest.raises(CoreError):
        bf.stop_flow()
    assert recorder.events == []


def test_modified_advances_on_change():
    bf = BaseFlow()
    before = bf.flow.modified
    bf.initialize()
    assert bf.flow.modified >= before