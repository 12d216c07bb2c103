"""A simple two-level quantum state with probability, phase and energy."""

from __future__ import annotations

import enum
import math
import threading

MAX_PROBABILITY = 1.0
MIN_PROBABILITY = 0.0
DEFAULT_PHASE = 0.0
TWO_PI = 2 * math.pi
DEFAULT_ENERGY = 1.0
DEFAULT_ENTROPY = 0.0


class QuantumPattern(str, enum.Enum):
    """Evolution pattern of a quantum state."""

    INTEGRATE = "integrate"
    SPLIT = "split"
    CYCLE = "cycle"
    BALANCE = "balance"


def _normalize_phase(phase: float) -> float:
    phase = math.fmod(phase, TWO_PI)
    if phase < 0:
        phase += TWO_PI
    return phase


def _clamp_probability(p: float) -> float:
    return max(MIN_PROBABILITY, min(MAX_PROBABILITY, p))


class QuantumState:
    """Thread-safe quantum state holding probability, phase, energy and entropy."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._probability = MAX_PROBABILITY
        self._phase = DEFAULT_PHASE
        self._energy = DEFAULT_ENERGY
        self._entropy = DEFAULT_ENTROPY

    def initialize(self) -> None:
        """Return the state to its defaults."""
        with self._lock:
            self._probability = MAX_PROBABILITY
            self._phase = DEFAULT_PHASE
            self._energy = DEFAULT_ENERGY
            self._entropy = DEFAULT_ENTROPY
            self._validate()

    def reset(self) -> None:
        """Return the state to its defaults."""
        self.initialize()

    def _validate(self) -> None:
        if not MIN_PROBABILITY <= self._probability <= MAX_PROBABILITY:
            raise ValueError(f"invalid probability: {self._probability}")
        if not 0 <= self._phase < TWO_PI:
            raise ValueError(f"invalid phase: {self._phase}")
        if self._energy < 0:
            raise ValueError(f"invalid energy: {self._energy}")
        if self._entropy < 0:
            raise ValueError(f"invalid entropy: {self._entropy}")

    @property
    def probability(self) -> float:
        with self._lock:
            return self._probability

    @property
    def phase(self) -> float:
        with self._lock:
            return self._phase

    @property
    def energy(self) -> float:
        with self._lock:
            return self._energy

    @property
    def entropy(self) -> float:
        with self._lock:
            return self._entropy

    def set_probability(self, p: float) -> None:
        with self._lock:
            if not MIN_PROBABILITY <= p <= MAX_PROBABILITY:
                raise ValueError(
                    f"probability out of range [{MIN_PROBABILITY}, {MAX_PROBABILITY}]: {p}"
                )
            self._probability = p
            self._update_entropy()

    def set_phase(self, phase: float) -> None:
        """Set the phase, wrapped into [0, 2π)."""
        with self._lock:
            self._phase = _normalize_phase(phase)

    def set_energy(self, energy: float) -> None:
        with self._lock:
            if energy < 0:
                raise ValueError(f"energy cannot be negative: {energy}")
            self._energy = energy
            self._update_entropy()

    def evolve(self, pattern: QuantumPattern | str) -> None:
        """Advance the state one step according to ``pattern``."""
        try:
            pattern = QuantumPattern(pattern)
        except ValueError:
            raise ValueError(f"unknown evolution pattern: {pattern}") from None
        with self._lock:
            if pattern is QuantumPattern.INTEGRATE:
                self._phase += math.pi / 4
                self._probability = self._probability ** 0.9
            elif pattern is QuantumPattern.SPLIT:
                self._phase += math.pi / 8
                self._probability *= 0.95
            elif pattern is QuantumPattern.CYCLE:
                self._phase += math.pi / 6
                self._probability = 0.5 + 0.5 * math.sin(self._phase)
            else:
                self._phase += math.pi / 12
                self._probability = (self._probability + 0.5) / 2
            self._phase = _normalize_phase(self._phase)
            self._probability = _clamp_probability(self._probability)
            self._update_entropy()

    def collapse(self) -> None:
        """Collapse onto a definite state: probability 1 or 0, phase reset."""
        with self._lock:
            self._probability = (
                MAX_PROBABILITY if self._probability >= 0.5 else MIN_PROBABILITY
            )
            self._phase = DEFAULT_PHASE
            self._update_entropy()

    def _update_entropy(self) -> None:
        p = self._probability
        if p in (0, 1):
            self._entropy = 0.0
            return
        q = 1 - p
        self._entropy = -p * math.log2(p) - q * math.log2(q)

    @property
    def coherence(self) -> float:
        """Coherence in [0, 1], derived from phase and probability."""
        with self._lock:
            value = (math.cos(self._phase) + 1) * self._probability / 2
            return max(0.0, min(1.0, value))

    def add_energy(self, delta: float) -> None:
        """Add energy, raising the probability towards 1 accordingly."""
        with self._lock:
            if delta < 0:
                raise ValueError(f"energy increment cannot be negative: {delta}")
            if self._energy:
                ratio = delta / self._energy
            else:
                ratio = math.inf if delta > 0 else 0.0
            gain = (1 - self._probability) * (1 - math.exp(-ratio))
            self._energy += delta
            self._probability = _clamp_probability(self._probability + gain)
            self._update_entropy()

    def update(self) -> None:
        """Advance the state using its current energy and coherence."""
        with self._lock:
            coherence = self.coherence
            energy_factor = math.exp(-self._energy / DEFAULT_ENERGY)
            new_probability = (
                self._probability * coherence * (1 - energy_factor)
                + MIN_PROBABILITY * energy_factor
            )
            self._probability = _clamp_probability(new_probability)
            self._phase = math.fmod(self._phase + math.pi / 4 * coherence, TWO_PI)
            self._update_entropy()

    def __str__(self) -> str:
        with self._lock:
            return (
                f"QuantumState{{probability: {self._probability:.4f}, "
                f"phase: {self._phase:.4f}, energy: {self._energy:.4f}, "
                f"entropy: {self._entropy:.4f}}}"
            )