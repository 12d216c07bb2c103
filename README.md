# daoflow

This library provides simulation building blocks: energy stores and networks,
quantum-like states, resonators, fields and fluid physics. It also has
in-memory services for configuration, events, metrics and pattern matching.
It needs nothing outside the standard library. All objects are thread-safe
and guard their state with a lock.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Core primitives (`daoflow.core`)

- `errors`: `CoreError` carries a message, an `ErrorCode`, an optional cause
  and the stack captured when it was raised. `wrap_core_error(err, code, message)`
  wraps an exception and passes `None` through unchanged.
- `quantum`: `QuantumState` holds a probability, a phase in [0, 2π), an energy
  and a Shannon entropy. It evolves under a `QuantumPattern` (`INTEGRATE`,
  `SPLIT`, `CYCLE`, `BALANCE`). It can also collapse, take on energy with
  `add_energy`, and report its `coherence`.
- `interaction`: `Interaction.update(state1, state2)` computes strength, energy
  and coherence from two quantum states. It classifies the result as an
  `InteractionType`. `set_coupling` accepts values in [0, 1].
- `resonator`: `Resonator` is a damped oscillator that tracks phase coherence
  over its history. `apply_resonance(state1, state2, energy)` gives energy to
  both states when they are in phase.
- `correlator`: `Correlator` stores correlation strengths by key. `update()`
  makes them decay exponentially with elapsed time.
- `cycle`: `CycleManager` is a cyclic counter with a default length of 60. It
  records a `CycleState` at every `advance()`.
- `harmonizer`: `Harmonizer` keeps component values clamped to [0, 1] and
  their weighted mean. A weight that is missing or zero counts as 1.
- `energy_network`: `EnergyNetwork` holds nodes with capacities. It moves
  energy between them with `update_flow`, records each `EnergyFlow`, and
  reports `total_energy` and `balance`.
- `flow`: `BaseFlow` is a state machine over `FlowState`. It also has an energy
  level bounded by `FlowConfig` and a `FlowDirection`. It notifies every added
  `FlowObserver` of each change. `is_valid_flow_transition` tells which
  transitions are allowed.
- `flow_energy`: `EnergySystem` holds potential, kinetic, thermal and field
  energy (`EnergyType`) up to a capacity of at most 1000. It converts between
  them with losses that add to entropy. Failures raise `InvalidParameterError`,
  `InsufficientEnergyError` or `ExceedCapacityError`.
- `flow_physics`: `FlowPhysics` provides the Reynolds number, a simplified
  Boltzmann entropy, yin/yang transformations and a `physics_state()` snapshot.
  `Vector3D` and `ForceField` are its supporting types.
- `flow_field`: `Field` is a scalar, vector or tensor field (`FieldType`) on a
  32×32 grid. It covers strength, numerical gradient, interference, yin/yang
  separation, phase evolution, `mean_strength()` and `uniformity()`.

## Services (`daoflow.api`)

- `errors`: `ApiError` with an `ApiErrorCode`.
- `config`: `ConfigAPI` holds scoped (`ConfigScope`), versioned entries. It
  keeps a change history and supports optional `ConfigValidation` rules (type,
  range or allowed values, regex pattern, required). `export()` writes JSON
  bytes and `import_configs()` reads them back. Change events go to the queue
  returned by `subscribe()`.
- `events`: `EventsAPI` publishes `Event`s to subscriptions whose `EventFilter`
  matches. It keeps a bounded cache that `events()` can query, and keeps
  `EventStats`. Each subscription delivers events through a bounded
  `queue.Queue`. Events are dropped when that queue is full.
- `metrics`: `MetricsAPI` registers `MetricSeries` and records values with
  running min, max, mean and variance. `query_metrics()` filters series by
  name, type, description, unit and labels. A background thread drops values
  older than the retention period once an hour, and `cleanup_metrics()` does
  the same on demand. `close()` stops that thread.
- `pattern`: `PatternAPI` registers `Pattern`s and scores feature sets against
  them as a weighted mean. It returns a `PatternMatch` for each pattern whose
  threshold is reached, and it summarises the registry in `PatternStats`.

## Example

```python
from daoflow.core.quantum import QuantumPattern, QuantumState
from daoflow.core.flow_energy import EnergySystem, EnergyType

state = QuantumState()
state.evolve(QuantumPattern.BALANCE)
print(state)

system = EnergySystem(500.0)
system.transform_energy({EnergyType.POTENTIAL: 100.0})
converted = system.convert(EnergyType.POTENTIAL, EnergyType.KINETIC, 50.0)
print(converted, system.balance)
```

Invalid operations raise exceptions such as `CoreError`,
`InsufficientEnergyError`, `ValueError` or `ApiError`. They do not return
status values.

## What it does not do

- It is a library only. It has no command-line program and no server.
- Every service keeps its data in memory. Nothing is written to disk except
  what you do yourself with `ConfigAPI.export()`.
- It has no service that ties the primitives together into a running system.
  That means no lifecycle control, no health checks, and no energy or
  evolution management over the whole system.
- `MetricsAPI` does not aggregate values over time. It only keeps running
  statistics and drops old values.