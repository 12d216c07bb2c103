import math

import pytest

from daoflow.core.quantum import QuantumState
from daoflow.core.resonator import ResonanceState, Resonator, ResonatorConfig


def test_default_config():
    config = ResonatorConfig()
    assert config.base_frequency == 1.0
    assert config.decay_rate == 0.01
    assert config.coherence_length == 100
    assert config.max_history_size == 1000


def test_new_resonator_has_no_resonance():
    res = Resonator()
    res.initialize()
    assert res.resonance == 0.0
    res.update()
    assert res.resonance == 0.0


def test_apply_resonance_transfers_energy_in_phase():
    res = Resonator()
    res.initialize()
    a, b = QuantumState(), QuantumState()
    res.apply_resonance(a, b, 2.0)
    assert a.energy == pytest.approx(3.0)
    assert b.energy == pytest.approx(3.0)


def test_no_transfer_without_coherence():
    res = Resonator()
    a, b = QuantumState(), QuantumState()
    res.apply_resonance(a, b, 2.0)
    assert a.energy == 1.0
    assert b.energy == 1.0


def test_no_transfer_out_of_phase():
    res = Resonator()
    res.initialize()
    a, b = QuantumState(), QuantumState()
    b.set_phase(math.pi)
    res.apply_resonance(a, b, 2.0)
    assert a.energy == 1.0
    assert b.energy == 1.0


def test_resonance_after_drive_follows_amplitude():
    res = Resonator()
    res.initialize()
    res.apply_resonance(QuantumState(), QuantumState(), 2.0)
    res.update()
    assert res.resonance == pytest.approx(2.0, rel=1e-2)
    assert res.resonance <= 2.0


def test_negative_energy_rejected():
    res = Resonator()
    res.initialize()
    a, b = QuantumState(), QuantumState()
    with pytest.raises(ValueError):
        res.apply_resonance(a, b, -1.0)
    assert a.energy == 1.0


def test_history_is_bounded_by_config():
    res = Resonator()
    res.config.max_history_size = 3
    res.initialize()
    res.apply_resonance(QuantumState(), QuantumState(), 0.5)
    for _ in range(10):
        res.update()
    assert 0.0 <= res.resonance <= 1.0


def test_resonance_state_is_immutable():
    state = ResonanceState(amplitude=1.0, frequency=1.0, phase=0.0, energy=0.5)
    with pytest.raises(AttributeError):
        state.amplitude = 2.0
    assert state.timestamp > 0