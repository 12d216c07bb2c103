"""Resonator that transfers energy between quantum states."""

from __future__ import annotations

import cmath
import math
import threading
import time
from dataclasses import dataclass, field

from daoflow.core.quantum import QuantumState


@dataclass
class ResonatorConfig:
    """Tuning parameters of a resonator."""

    base_frequency: float = 1.0
    decay_rate: float = 0.01
    coherence_length: int = 100
    max_history_size: int = 1000


@dataclass(frozen=True)
class ResonanceState:
    """Snapshot of a resonator."""

    amplitude: float
    frequency: float
    phase: float
    energy: float
    timestamp: float = field(default_factory=time.time)


class Resonator:
    """Damped oscillator whose resonance couples quantum states."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.config = ResonatorConfig()
        self._amplitude = 0.0
        self._frequency = 0.0
        self._phase = 0.0
        self._energy = 0.0
        self._coherence = 0.0
        self._resonance = 0.0
        self._start_time = time.monotonic()
        self._last_update = self._start_time
        self._history: list[ResonanceState] = []

    def initialize(self) -> None:
        with self._lock:
            self._amplitude = 0.0
            self._frequency = self.config.base_frequency
            self._phase = 0.0
            self._energy = 0.0
            self._coherence = 1.0
            self._resonance = 0.0
            self._start_time = time.monotonic()
            self._last_update = self._start_time
            self._history = []

    def update(self) -> None:
        """Advance the oscillator by the time elapsed since the last update."""
        with self._lock:
            now = time.monotonic()
            dt = now - self._last_update
            self._phase = math.fmod(
                self._phase + 2 * math.pi * self._frequency * dt, 2 * math.pi
            )
            self._amplitude *= math.exp(-self.config.decay_rate * dt)
            self._energy = 0.5 * self._amplitude * self._amplitude
            self._update_coherence()
            self._resonance = self._amplitude * self._coherence
            self._record_state()
            self._last_update = now

    @property
    def resonance(self) -> float:
        with self._lock:
            return self._resonance

    def _update_coherence(self) -> None:
        if len(self._history) < 2:
            return
        total = sum(cmath.rect(1.0, state.phase) for state in self._history)
        self._coherence = abs(total) / len(self._history)

    def _record_state(self) -> None:
        self._history.append(
            ResonanceState(
                amplitude=self._amplitude,
                frequency=self._frequency,
                phase=self._phase,
                energy=self._energy,
            )
        )
        if len(self._history) > self.config.max_history_size:
            del self._history[0]

    def apply_resonance(
        self, state1: QuantumState, state2: QuantumState, energy: float
    ) -> None:
        """Drive the resonator with ``energy`` and feed both states in phase."""
        if energy < 0:
            raise ValueError(f"resonance energy cannot be negative: {energy}")
        with self._lock:
            self._amplitude = math.sqrt(2 * energy)
            self._energy = energy
            phase_diff = abs(state1.phase - state2.phase)
            transfer = energy * math.cos(phase_diff) * self._coherence
            if transfer > 0:
                state1.add_energy(transfer)
                state2.add_energy(transfer)
            self._record_state()