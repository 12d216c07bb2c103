"""Physical properties of a flow: thermodynamics, kinematics and yin-yang balance."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field

GRAVITY = 9.80665
STD_TEMPERATURE = 298.15
STD_PRESSURE = 101.325
STD_DENSITY = 1.0
SPECIFIC_HEAT = 4186.0
BOLTZMANN_CONSTANT = 1.380649e-23
PLANCK_CONSTANT = 6.62607015e-34

_ZERO_CELSIUS = 273.15


@dataclass(frozen=True)
class Vector3D:
    """A point or direction in three-dimensional space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def scaled(self, factor: float) -> Vector3D:
        return Vector3D(self.x * factor, self.y * factor, self.z * factor)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)


@dataclass
class ForceField:
    """Force field acting on a flow."""

    strength: float = 1.0
    gradient: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    potential: list[list[float]] = field(default_factory=lambda: [[], [], []])
    dissipation: float = 0.1
    coherence: float = 0.8
    resonance: float = 1.0


class FlowPhysics:
    """Density, viscosity, temperature, pressure and energies of a flow."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._density = STD_DENSITY
        self._viscosity = 0.001
        self._temperature = STD_TEMPERATURE
        self._pressure = STD_PRESSURE
        self._volume = 1.0
        self._entropy = 0.0

        self._velocity = Vector3D()
        self._acceleration = Vector3D()
        self._angular_velocity = 0.0
        self._momentum = Vector3D()

        self._kinetic_energy = 0.0
        self._potential_energy = 0.0
        self._thermal_energy = 0.0
        self._total_energy = 0.0

        self.field = ForceField()

        self._yin_ratio = 0.5
        self._yang_ratio = 0.5

        self._update_energy()

    def reynolds_number(self, characteristic_length: float) -> float:
        """Reynolds number of the flow for the given characteristic length."""
        with self._lock:
            speed = self._velocity.magnitude
            return self._density * speed * characteristic_length / self._viscosity

    def calculate_entropy(self) -> float:
        """Simplified Boltzmann entropy of the flow."""
        with self._lock:
            return BOLTZMANN_CONSTANT * math.log(self._volume / self._density)

    def _update_energy(self) -> None:
        speed = self._velocity.magnitude
        mass = self._density * self._volume
        self._kinetic_energy = 0.5 * mass * speed**2
        self._potential_energy = mass * GRAVITY * self._velocity.y
        self._thermal_energy = mass * SPECIFIC_HEAT * (self._temperature - _ZERO_CELSIUS)
        self._total_energy = (
            self._kinetic_energy + self._potential_energy + self._thermal_energy
        )

    def apply_yin_yang_transformation(self, yin_ratio: float) -> None:
        """Shift the yin-yang balance; ``yin_ratio`` must lie in [0, 1]."""
        with self._lock:
            if not 0 <= yin_ratio <= 1:
                raise ValueError(f"invalid yin ratio: {yin_ratio:f}")
            yang_ratio = 1 - yin_ratio
            self._yin_ratio = yin_ratio
            self._yang_ratio = yang_ratio
            self._apply_yin(yin_ratio)
            self._apply_yang(yang_ratio)
            self._update_energy()

    def _apply_yin(self, ratio: float) -> None:
        self._viscosity *= 1 + 0.5 * ratio
        self._temperature *= 1 - 0.3 * ratio
        self._pressure *= 1 - 0.2 * ratio
        self._entropy *= 1 + 0.4 * ratio

    def _apply_yang(self, ratio: float) -> None:
        self._velocity = self._velocity.scaled(1 + 0.3 * ratio)
        self._viscosity *= 1 - 0.3 * ratio
        self._temperature *= 1 + 0.2 * ratio
        self._pressure *= 1 + 0.2 * ratio

    def physics_state(self) -> dict[str, float]:
        """Snapshot of the main physical quantities."""
        with self._lock:
            return {
                "density": self._density,
                "temperature": self._temperature,
                "pressure": self._pressure,
                "entropy": self._entropy,
                "total_energy": self._total_energy,
                "yin_ratio": self._yin_ratio,
                "yang_ratio": self._yang_ratio,
            }