"""Weighted aggregation of component harmony values."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class HarmonyState:
    """Overall harmony together with the per-component values."""

    value: float
    components: dict[str, float] = field(default_factory=dict)


class Harmonizer:
    """Keeps component harmony values and their weighted mean."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._harmony = 1.0
        self._components: dict[str, float] = {}
        self._weights: dict[str, float] = {}
        self._closed = False

    def initialize(self) -> None:
        """Reset to perfect harmony with no components."""
        with self._lock:
            self._harmony = 1.0
            self._components = {}
            self._weights = {}
            self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("harmonizer is closed")

    def set_weight(self, component: str, weight: float) -> None:
        with self._lock:
            self._ensure_open()
            self._weights[component] = weight

    def update_component(self, component: str, value: float) -> None:
        """Set a component's value, clamped to [0, 1], and recompute harmony."""
        with self._lock:
            self._ensure_open()
            self._components[component] = max(0.0, min(1.0, value))
            self._recalculate()

    @property
    def harmony(self) -> float:
        with self._lock:
            return self._harmony

    @property
    def state(self) -> HarmonyState:
        with self._lock:
            return HarmonyState(value=self._harmony, components=dict(self._components))

    def _recalculate(self) -> None:
        if not self._components:
            self._harmony = 1.0
            return
        total_weight = 0.0
        weighted_sum = 0.0
        for component, value in self._components.items():
            weight = self._weights.get(component, 0.0) or 1.0
            total_weight += weight
            weighted_sum += value * weight
        self._harmony = weighted_sum / total_weight if total_weight > 0 else 0.0

    def close(self) -> None:
        """Drop all components and weights; further updates raise."""
        with self._lock:
            self._components = {}
            self._weights = {}
            self._closed = True