"""Cyclic position counter with phase tracking."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

DEFAULT_CYCLE_LENGTH = 60


@dataclass(frozen=True)
class CycleState:
    """Snapshot of a cycle position."""

    index: int
    phase: float
    energy: float
    timestamp: float = field(default_factory=time.time)


class CycleManager:
    """Steps through a fixed-length cycle and records every step."""

    def __init__(self, length: int = DEFAULT_CYCLE_LENGTH) -> None:
        if length <= 0:
            length = DEFAULT_CYCLE_LENGTH
        self._lock = threading.RLock()
        self.length = length
        self._current = 0
        self._phase = 0.0
        self._energy = 1.0
        self._start_time = time.time()
        self._last_update = self._start_time
        self._history: list[CycleState] = []

    def initialize(self) -> None:
        """Return to the start of the cycle and clear the history."""
        with self._lock:
            self._current = 0
            self._phase = 0.0
            self._energy = 1.0
            self._start_time = time.time()
            self._last_update = self._start_time
            self._history = []

    def advance(self) -> None:
        """Move one step forward, wrapping at the cycle length."""
        with self._lock:
            self._current = (self._current + 1) % self.length
            self._phase = 2 * self._current * 3.14159 / self.length
            self._history.append(
                CycleState(index=self._current, phase=self._phase, energy=self._energy)
            )
            self._last_update = time.time()

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    @property
    def phase(self) -> float:
        with self._lock:
            return self._phase

    @property
    def energy(self) -> float:
        with self._lock:
            return self._energy

    @property
    def history(self) -> tuple[CycleState, ...]:
        """Recorded states, oldest first."""
        with self._lock:
            return tuple(self._history)

    def close(self) -> None:
        """Drop the recorded history."""
        with self._lock:
            self._history = []