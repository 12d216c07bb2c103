"""Network of energy-holding nodes with recorded transfers."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field

from daoflow.core.errors import CoreError, ErrorCode

MIN_FLOW_RATE = 0.0
MAX_FLOW_RATE = 1.0
DEFAULT_CAPACITY = 100.0


def current_timestamp() -> int:
    """Current wall-clock time in nanoseconds."""
    return time.time_ns()


@dataclass(frozen=True)
class EnergyFlow:
    """One recorded energy transfer."""

    source: str
    target: str
    amount: float
    timestamp: int


@dataclass
class NetworkNode:
    """A node holding energy up to its capacity."""

    id: str
    capacity: float
    energy: float = 0.0
    flows: dict[str, float] = field(default_factory=dict)


class EnergyNetwork:
    """Nodes exchanging energy, with the network's total and balance."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._nodes: dict[str, NetworkNode] = {}
        self._flows: list[EnergyFlow] = []
        self.capacity = DEFAULT_CAPACITY
        self._total_energy = 0.0
        self._flow_rate = 0.0
        self._balance = 0.0

    def initialize(self) -> None:
        """Remove every node and flow and reset the network state."""
        with self._lock:
            self._nodes = {}
            self._flows = []
            self._total_energy = 0.0
            self._flow_rate = MIN_FLOW_RATE
            self._balance = 1.0

    def add_node(self, node_id: str, capacity: float) -> None:
        with self._lock:
            if node_id in self._nodes:
                raise CoreError("node already exists", ErrorCode.INVALID)
            self._nodes[node_id] = NetworkNode(id=node_id, capacity=capacity)

    def update_flow(self, source: str, target: str, amount: float) -> None:
        """Move ``amount`` of energy from ``source`` to ``target``."""
        with self._lock:
            source_node = self._nodes.get(source)
            if source_node is None:
                raise CoreError("source node not found", ErrorCode.INVALID)
            target_node = self._nodes.get(target)
            if target_node is None:
                raise CoreError("target node not found", ErrorCode.INVALID)
            if amount < 0:
                raise CoreError("negative energy flow", ErrorCode.RANGE)
            if amount > source_node.energy:
                raise CoreError("insufficient energy in source node", ErrorCode.RANGE)
            if target_node.energy + amount > target_node.capacity:
                raise CoreError("target node capacity exceeded", ErrorCode.RANGE)

            source_node.energy -= amount
            target_node.energy += amount
            source_node.flows[target] = amount
            target_node.flows[source] = -amount

            self._flows.append(
                EnergyFlow(source, target, amount, current_timestamp())
            )
            self._update_state()

    def node_energy(self, node_id: str) -> float:
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None:
                raise CoreError("node not found", ErrorCode.INVALID)
            return node.energy

    @property
    def total_energy(self) -> float:
        with self._lock:
            return self._total_energy

    @property
    def balance(self) -> float:
        with self._lock:
            return self._balance

    @property
    def flows(self) -> tuple[EnergyFlow, ...]:
        """Recorded transfers, oldest first."""
        with self._lock:
            return tuple(self._flows)

    def _update_state(self) -> None:
        energies = [node.energy for node in self._nodes.values()]
        total = sum(energies)
        self._total_energy = total
        mean = total / len(energies)
        variance = sum((e - mean) ** 2 for e in energies) / len(energies)
        self._balance = 1 / (1 + math.sqrt(variance))