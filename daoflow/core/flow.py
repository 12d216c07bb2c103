"""Basic flow with a state machine, energy level, direction and observers."""

from __future__ import annotations

import enum
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol

from daoflow.core.errors import CoreError, ErrorCode

DEFAULT_FLOW_ENERGY = 50.0


class FlowState(enum.IntEnum):
    """Lifecycle state of a flow."""

    VOID = 0
    INACTIVE = 1
    FLOWING = 2
    STATIC = 3
    TRANSFORMING = 4
    TERMINATED = 5


class FlowEvent(enum.IntEnum):
    """Kind of change reported to flow observers."""

    INITIALIZE = 0
    START = 1
    STOP = 2
    TRANSFORM = 3
    ENERGY_CHANGE = 4
    DIRECTION_CHANGE = 5


_TRANSITIONS: dict[FlowState, frozenset[FlowState]] = {
    FlowState.VOID: frozenset({FlowState.INACTIVE}),
    FlowState.INACTIVE: frozenset({FlowState.FLOWING, FlowState.TERMINATED}),
    FlowState.FLOWING: frozenset(
        {FlowState.STATIC, FlowState.TRANSFORMING, FlowState.TERMINATED}
    ),
    FlowState.STATIC: frozenset(
        {FlowState.FLOWING, FlowState.TRANSFORMING, FlowState.TERMINATED}
    ),
    FlowState.TRANSFORMING: frozenset(
        {FlowState.FLOWING, FlowState.STATIC, FlowState.TERMINATED}
    ),
    FlowState.TERMINATED: frozenset({FlowState.VOID}),
}


def generate_id() -> str:
    """Return a random 128-bit identifier as 32 hex digits."""
    return secrets.token_hex(16)


def is_valid_flow_transition(current: FlowState, new: FlowState) -> bool:
    """Whether a flow may move from ``current`` to ``new``."""
    return new in _TRANSITIONS.get(current, frozenset())


@dataclass(frozen=True)
class FlowDirection:
    """Direction of a flow: a vector and an angle in degrees (0-360)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    angle: float = 0.0


@dataclass
class Flow:
    """The data of a flow."""

    id: str = field(default_factory=generate_id)
    energy: float = DEFAULT_FLOW_ENERGY
    state: FlowState = FlowState.VOID
    direction: FlowDirection = field(default_factory=FlowDirection)
    created: float = field(default_factory=time.time)
    modified: float = 0.0

    def __post_init__(self) -> None:
        if not self.modified:
            self.modified = self.created


@dataclass
class FlowConfig:
    """Limits and timing of a flow."""

    min_energy: float = 0.0
    max_energy: float = 100.0
    flow_interval: float = 1.0
    max_transforms: int = 0


class FlowObserver(Protocol):
    """Receives notifications about changes of a flow."""

    def on_flow_event(self, event: FlowEvent, flow: Flow) -> None: ...


class BaseFlow:
    """A flow driven through its states, notifying observers of each change."""

    def __init__(self, config: FlowConfig | None = None) -> None:
        self._lock = threading.RLock()
        self.flow = Flow()
        self.config = config if config is not None else FlowConfig()
        self._observers: list[FlowObserver] = []

    def _require_state(self, allowed: tuple[FlowState, ...], action: str) -> None:
        if self.flow.state not in allowed:
            raise CoreError(
                f"invalid state for {action}: {self.flow.state.name}", ErrorCode.STATE
            )

    def _touch(self, event: FlowEvent) -> None:
        self.flow.modified = time.time()
        for observer in list(self._observers):
            observer.on_flow_event(event, self.flow)

    def initialize(self) -> None:
        """Move a void flow to the inactive state."""
        with self._lock:
            self._require_state((FlowState.VOID,), "initialization")
            self.flow.state = FlowState.INACTIVE
            self._touch(FlowEvent.INITIALIZE)

    def start_flow(self) -> None:
        """Start an inactive or static flow."""
        with self._lock:
            self._require_state(
                (FlowState.INACTIVE, FlowState.STATIC), "starting flow"
            )
            self.flow.state = FlowState.FLOWING
            self._touch(FlowEvent.START)

    def stop_flow(self) -> None:
        """Bring a flowing flow to rest."""
        with self._lock:
            self._require_state((FlowState.FLOWING,), "stopping flow")
            self.flow.state = FlowState.STATIC
            self._touch(FlowEvent.STOP)

    def transform(self, new_state: FlowState) -> None:
        """Move to ``new_state`` if the transition is allowed."""
        with self._lock:
            new_state = FlowState(new_state)
            if not is_valid_flow_transition(self.flow.state, new_state):
                raise CoreError(
                    f"invalid state transition from {self.flow.state.name} "
                    f"to {new_state.name}",
                    ErrorCode.STATE,
                )
            self.flow.state = new_state
            self._touch(FlowEvent.TRANSFORM)

    def adjust_energy(self, delta: float) -> None:
        """Change the energy by ``delta``, keeping it within the configured range."""
        with self._lock:
            new_energy = self.flow.energy + delta
            low, high = self.config.min_energy, self.config.max_energy
            if not low <= new_energy <= high:
                raise CoreError(
                    f"energy level {new_energy:f} out of range [{low:f}, {high:f}]",
                    ErrorCode.RANGE,
                )
            self.flow.energy = new_energy
            self._touch(FlowEvent.ENERGY_CHANGE)

    def adjust_direction(self, direction: FlowDirection) -> None:
        with self._lock:
            self.flow.direction = direction
            self._touch(FlowEvent.DIRECTION_CHANGE)

    @property
    def state(self) -> FlowState:
        with self._lock:
            return self.flow.state

    @property
    def energy(self) -> float:
        with self._lock:
            return self.flow.energy

    def add_observer(self, observer: FlowObserver) -> None:
        with self._lock:
            self._observers.append(observer)