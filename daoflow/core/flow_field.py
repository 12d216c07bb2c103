"""Scalar, vector and tensor fields on a square grid."""

from __future__ import annotations

import enum
import math
import threading

from daoflow.core.errors import CoreError, ErrorCode
from daoflow.core.flow_energy import InvalidParameterError
from daoflow.core.flow_physics import Vector3D

MIN_FIELD_STRENGTH = 0.0
MAX_FIELD_STRENGTH = 100.0

INTERACTION_CONSTANT = 8.987551787e9
GRAVITY_CONSTANT = 6.67430e-11

DEFAULT_GRID_SIZE = 32
MIN_WAVE_LENGTH = 1e-10
MAX_WAVE_LENGTH = 1e3

_TWO_PI = 2 * math.pi
_STEP = 1e-6


class FieldType(enum.IntEnum):
    """Mathematical kind of a field."""

    SCALAR = 0
    VECTOR = 1
    TENSOR = 2


def _grid(size: int, value: object) -> list[list]:
    return [[value] * size for _ in range(size)]


class Field:
    """A field with strength, potential and gradient grids and wave dynamics."""

    def __init__(self, field_type: FieldType = FieldType.SCALAR, dimension: int = 1) -> None:
        if dimension <= 0:
            dimension = 1
        self._lock = threading.RLock()
        self.field_type = FieldType(field_type)
        self.dimension = dimension
        self.grid_size = DEFAULT_GRID_SIZE
        self.boundary = [0.0] * (dimension * 2)
        self.strength: list[list[float]] = _grid(self.grid_size, 0.0)
        self.potential: list[list[float]] = _grid(self.grid_size, 0.0)
        self.gradient: list[list[Vector3D]] = _grid(self.grid_size, Vector3D())
        self._reset_dynamics()
        self.yin_field: Field | None = None
        self.yang_field: Field | None = None

    def _reset_dynamics(self) -> None:
        self.wave_number = 1.0
        self.frequency = 1.0
        self.phase = 0.0
        self.coupling = 0.5
        self.interaction = 0.5

    def _clear_grids(self) -> None:
        self.strength = _grid(self.grid_size, 0.0)
        self.potential = _grid(self.grid_size, 0.0)
        self.gradient = _grid(self.grid_size, Vector3D())

    def calculate_field_strength(self, position: Vector3D) -> float:
        """Field strength at ``position``, clamped to the allowed range."""
        with self._lock:
            if self.field_type is FieldType.SCALAR:
                value = self._scalar_strength(position)
            elif self.field_type is FieldType.VECTOR:
                value = self._inverse_square(position, INTERACTION_CONSTANT)
            else:
                value = self._inverse_square(position, GRAVITY_CONSTANT)
            return max(MIN_FIELD_STRENGTH, min(value, MAX_FIELD_STRENGTH))

    def _scalar_strength(self, position: Vector3D) -> float:
        # psi(x, t) = A * sin(kx - wt + phi), evaluated at t = 0
        omega = self.frequency * _TWO_PI
        t = 0.0
        amplitude = 1.0
        return amplitude * math.sin(self.wave_number * position.x - omega * t + self.phase)

    @staticmethod
    def _inverse_square(position: Vector3D, constant: float) -> float:
        r = position.magnitude
        if r == 0:
            return MAX_FIELD_STRENGTH
        return constant / (r * r)

    def calculate_field_gradient(self, position: Vector3D) -> Vector3D:
        """Central-difference gradient of the field strength at ``position``."""
        with self._lock:
            h = _STEP
            x, y, z = position.x, position.y, position.z
            strength = self.calculate_field_strength
            dx = (strength(Vector3D(x + h, y, z)) - strength(Vector3D(x - h, y, z))) / (2 * h)
            dy = (strength(Vector3D(x, y + h, z)) - strength(Vector3D(x, y - h, z))) / (2 * h)
            dz = (strength(Vector3D(x, y, z + h)) - strength(Vector3D(x, y, z - h))) / (2 * h)
            return Vector3D(dx, dy, dz)

    def apply_yin_yang_separation(self, yin_ratio: float) -> None:
        """Split the field into yin and yang parts in the given ratio."""
        with self._lock:
            if not 0 <= yin_ratio <= 1:
                raise InvalidParameterError()
            yang_ratio = 1 - yin_ratio
            yin = Field(self.field_type, self.dimension)
            yang = Field(self.field_type, self.dimension)
            yin.strength = [[value * yin_ratio for value in row] for row in self.strength]
            yang.strength = [[value * yang_ratio for value in row] for row in self.strength]
            yin.frequency *= 1 - 0.3 * yin_ratio
            yang.frequency *= 1 + 0.3 * yang_ratio
            yin.wave_number *= 1 - 0.2 * yin_ratio
            yang.wave_number *= 1 + 0.2 * yang_ratio
            self.yin_field = yin
            self.yang_field = yang

    def calculate_interference(self, other: Field, position: Vector3D) -> float:
        """Intensity of this field superposed with ``other`` at ``position``."""
        with self._lock:
            a1 = self.calculate_field_strength(position)
            a2 = other.calculate_field_strength(position)
            phase_diff = self.phase - other.phase
            return a1**2 + a2**2 + 2 * a1 * a2 * math.cos(phase_diff)

    def initialize(self) -> None:
        """Clear the grids after validating the parameters, then reset the dynamics."""
        with self._lock:
            self._clear_grids()
            try:
                self._validate()
            except CoreError as err:
                raise CoreError(
                    "failed to initialize field parameters", ErrorCode.INITIALIZE, cause=err
                ) from err
            self._reset_dynamics()
            self.yin_field = None
            self.yang_field = None

    def _validate(self) -> None:
        if self.grid_size <= 0:
            raise CoreError("invalid grid size", ErrorCode.INVALID)
        if self.dimension <= 0:
            raise CoreError("invalid dimension", ErrorCode.INVALID)
        if self.wave_number < 0:
            raise CoreError("invalid wave number", ErrorCode.INVALID)
        if self.frequency < 0:
            raise CoreError("invalid frequency", ErrorCode.INVALID)

    def set_strength(self, strength: float) -> None:
        """Set a uniform strength over the whole grid."""
        with self._lock:
            if not MIN_FIELD_STRENGTH <= strength <= MAX_FIELD_STRENGTH:
                raise CoreError("field strength out of range", ErrorCode.RANGE)
            self.strength = _grid(self.grid_size, strength)

    def set_phase(self, phase: float) -> None:
        """Set the phase, wrapped into [0, 2π)."""
        with self._lock:
            phase = math.fmod(phase, _TWO_PI)
            if phase < 0:
                phase += _TWO_PI
            self.phase = phase

    def evolve(self) -> None:
        """Advance the phase by π/4 and decay wave number and frequency."""
        with self._lock:
            self.phase = math.fmod(self.phase + math.pi / 4, _TWO_PI)
            if self.wave_number < MIN_WAVE_LENGTH or self.frequency <= 0:
                raise CoreError("invalid field evolution parameters", ErrorCode.FIELD)
            self.wave_number *= 0.99
            self.frequency *= 0.99

    def mean_strength(self) -> float:
        """Average strength over the grid."""
        with self._lock:
            values = [value for row in self.strength for value in row]
            if not values:
                return 0.0
            return sum(values) / len(values)

    def uniformity(self) -> float:
        """Uniformity in (0, 1]: 1 / (1 + standard deviation of the strength)."""
        with self._lock:
            values = [value for row in self.strength for value in row]
            if not values:
                return 1.0
            mean = sum(values) / len(values)
            variance = sum((value - mean) ** 2 for value in values) / len(values)
            return 1.0 / (1.0 + math.sqrt(variance))

    def update(self, phase: float) -> None:
        """Recompute the strength grid as a wave with the given phase."""
        with self._lock:
            self.phase = phase
            size = self.grid_size
            self.strength = [
                [self._scalar_strength(Vector3D(i / size, j / size, 0.0)) for j in range(size)]
                for i in range(size)
            ]
            self.wave_number *= 0.99
            self.frequency *= 0.99

    def reset(self) -> None:
        """Return the field to its initial state."""
        with self._lock:
            self._clear_grids()
            self._reset_dynamics()
            self.yin_field = None
            self.yang_field = None