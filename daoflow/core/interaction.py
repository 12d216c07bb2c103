"""Interaction between two quantum states."""

from __future__ import annotations

import enum
import math
import threading

from daoflow.core.errors import CoreError
from daoflow.core.quantum import QuantumState

MIN_COUPLING = 0.0
MAX_COUPLING = 1.0
DEFAULT_COUPLING = 0.5


class InteractionType(enum.IntEnum):
    """Kind of interaction, derived from its strength and phase."""

    NONE = 0
    WEAK = 1
    STRONG = 2
    FIELD = 3
    QUANTUM = 4


class Interaction:
    """Coupling between two quantum states."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._type = InteractionType.NONE
        self._coupling = DEFAULT_COUPLING
        self._phase = 0.0
        self._strength = 0.0
        self._energy = 0.0
        self._entropy = 0.0
        self._coherence = 0.0

    def initialize(self) -> None:
        with self._lock:
            self._type = InteractionType.NONE
            self._coupling = DEFAULT_COUPLING
            self._phase = 0.0
            self._strength = 0.0
            self._energy = 0.0
            self._entropy = 0.0
            self._coherence = 1.0

    def update(self, state1: QuantumState, state2: QuantumState) -> None:
        """Recompute the interaction from the two states."""
        with self._lock:
            energy1, energy2 = state1.energy, state2.energy
            self._phase = abs(state1.phase - state2.phase)
            self._strength = self._coupling * math.sqrt(energy1 * energy2)
            self._energy = self._strength * math.cos(self._phase)
            self._coherence = math.exp(-self._phase * self._phase)
            if self._strength > 0:
                self._entropy = -self._strength * math.log(self._strength)
            else:
                self._entropy = 0.0
            self._type = self._classify()

    def _classify(self) -> InteractionType:
        if self._strength < 0.2:
            return InteractionType.WEAK
        if self._strength > 0.8:
            return InteractionType.STRONG
        if self._phase < math.pi / 4:
            return InteractionType.QUANTUM
        return InteractionType.FIELD

    @property
    def type(self) -> InteractionType:
        with self._lock:
            return self._type

    @property
    def strength(self) -> float:
        with self._lock:
            return self._strength

    @property
    def energy(self) -> float:
        with self._lock:
            return self._energy

    @property
    def coherence(self) -> float:
        with self._lock:
            return self._coherence

    def set_coupling(self, coupling: float) -> None:
        with self._lock:
            if not MIN_COUPLING <= coupling <= MAX_COUPLING:
                raise CoreError("invalid coupling strength")
            self._coupling = coupling

    def reset(self) -> None:
        self.initialize()