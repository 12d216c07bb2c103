"""Energy system with four energy forms, conversions, entropy and balance."""

from __future__ import annotations

import enum
import math
import threading

MIN_ENERGY = 0.0
MAX_ENERGY = 1000.0
ENTROPY_FACTOR = 0.01
DISSIPATION_RATE = 0.05
DEFAULT_BALANCE = 1.0


class ExceedCapacityError(ValueError):
    """Energy would exceed the system capacity."""

    def __init__(self, message: str = "energy exceeds system capacity") -> None:
        super().__init__(message)


class InvalidParameterError(ValueError):
    """A parameter has an invalid value."""

    def __init__(self, message: str = "invalid parameter value") -> None:
        super().__init__(message)


class InsufficientEnergyError(ValueError):
    """Not enough energy for a conversion."""

    def __init__(self, message: str = "insufficient energy for conversion") -> None:
        super().__init__(message)


class EnergyType(enum.IntEnum):
    """Form of energy held by an energy system."""

    POTENTIAL = 0
    KINETIC = 1
    THERMAL = 2
    FIELD = 3

    @property
    def label(self) -> str:
        return self.name.lower()


ENERGY_TYPE_NAMES: dict[EnergyType, str] = {t: t.label for t in EnergyType}

_SPECIAL_EFFICIENCY = {
    (EnergyType.POTENTIAL, EnergyType.KINETIC): 0.9,
    (EnergyType.KINETIC, EnergyType.THERMAL): 0.85,
    (EnergyType.THERMAL, EnergyType.FIELD): 0.8,
}
_DEFAULT_EFFICIENCY = 0.75


def _efficiency(source: EnergyType, target: EnergyType) -> float:
    if source is target:
        return 1.0
    return _SPECIAL_EFFICIENCY.get((source, target), _DEFAULT_EFFICIENCY)


class EnergySystem:
    """Holds potential, kinetic, thermal and field energy up to a capacity."""

    def __init__(self, capacity: float = MAX_ENERGY) -> None:
        if capacity <= 0:
            capacity = MAX_ENERGY
        self._lock = threading.RLock()
        self.capacity = min(capacity, MAX_ENERGY)
        self._energies: dict[EnergyType, float] = {t: 0.0 for t in EnergyType}
        self._entropy = 0.0
        self._balance = DEFAULT_BALANCE
        self.conversion_efficiency: dict[EnergyType, dict[EnergyType, float]] = {
            source: {target: _efficiency(source, target) for target in EnergyType}
            for source in EnergyType
        }

    def convert(
        self, source: EnergyType, target: EnergyType, amount: float
    ) -> float:
        """Convert ``amount`` of ``source`` energy; return the amount gained."""
        with self._lock:
            if amount <= 0:
                raise InvalidParameterError()
            source, target = EnergyType(source), EnergyType(target)
            if self._energies[source] < amount:
                raise InsufficientEnergyError()
            efficiency = self.conversion_efficiency[source][target]
            converted = amount * efficiency
            self._entropy += amount * (1 - efficiency) * ENTROPY_FACTOR
            self._energies[source] = max(0.0, self._energies[source] - amount)
            self._energies[target] += converted
            self._calculate_balance()
            return converted

    def transform_energy(self, energy_map: dict[EnergyType, float]) -> None:
        """Replace the energy distribution; missing forms become zero."""
        with self._lock:
            if any(amount < 0 for amount in energy_map.values()):
                raise InvalidParameterError()
            if sum(energy_map.values()) > self.capacity:
                raise ExceedCapacityError()
            self._energies = {t: float(energy_map.get(t, 0.0)) for t in EnergyType}
            self._calculate_balance()

    def energy_state(self) -> dict[str, float]:
        """Snapshot of every energy form and the system figures."""
        with self._lock:
            state = {t.label: self._energies[t] for t in EnergyType}
            state.update(
                total=self._total(),
                entropy=self._entropy,
                balance=self._balance,
                capacity=self.capacity,
            )
            return state

    def get_energy(self, energy_type: EnergyType) -> float:
        with self._lock:
            return self._energies.get(EnergyType(energy_type), 0.0)

    @property
    def balance(self) -> float:
        with self._lock:
            return self._balance

    @property
    def total_energy(self) -> float:
        with self._lock:
            return self._total()

    def _total(self) -> float:
        return sum(self._energies.values())

    def _calculate_balance(self) -> None:
        total = self._total()
        if total == 0:
            self._balance = DEFAULT_BALANCE
            return
        mean = total / len(self._energies)
        variance = sum((e - mean) ** 2 for e in self._energies.values()) / len(
            self._energies
        )
        self._balance = 1 / (1 + math.sqrt(variance) / total)

    def __str__(self) -> str:
        state = self.energy_state()
        return (
            f"EnergySystem{{total: {state['total']:.2f}, "
            f"capacity: {state['capacity']:.2f}, balance: {state['balance']:.2f}, "
            f"entropy: {state['entropy']:.2f}}}"
        )