"""Time-decaying correlation strengths keyed by name."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass

from daoflow.core.errors import CoreError


@dataclass
class CorrelatorConfig:
    """Tuning parameters of a correlator."""

    decay_time: float = 1.0
    max_correlation: float = 1.0
    update_interval: float = 0.1


class Correlator:
    """Stores correlation strengths that decay exponentially over time."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.config = CorrelatorConfig()
        self._correlations: dict[str, float] = {}
        self._last_updated: dict[str, float] = {}

    def initialize(self) -> None:
        """Forget every correlation."""
        with self._lock:
            self._correlations = {}
            self._last_updated = {}

    def set_correlation(self, key: str, value: float) -> None:
        """Set the strength for ``key``; it must lie in [0, max_correlation]."""
        with self._lock:
            if not 0 <= value <= self.config.max_correlation:
                raise CoreError("correlation value out of range")
            self._correlations[key] = value
            self._last_updated[key] = time.monotonic()

    def get_correlation(self, key: str) -> float:
        """Return the strength for ``key``, or 0 when it is unknown."""
        with self._lock:
            return self._correlations.get(key, 0.0)

    def update(self) -> None:
        """Apply exponential decay to entries not touched within the interval."""
        with self._lock:
            now = time.monotonic()
            for key, last in self._last_updated.items():
                dt = now - last
                if dt > self.config.update_interval:
                    self._correlations[key] *= math.exp(-dt / self.config.decay_time)
                    self._last_updated[key] = now