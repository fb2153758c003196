"""Tests for step-by-step execution history."""

import numpy as np
import pytest

from qfluency import HistoryRecorder, QuantumSimulator


def test_records_each_step(sim):
    history = HistoryRecorder(sim)
    sim.initialize(2).apply_gate("H", 0).apply_cnot(0, 1)
    assert [s.label for s in history.steps] == ["Initial |00⟩", "H q[0]", "CNOT q[0,1]"]
    assert [s.index for s in history.steps] == [-1, 0, 1]
    assert history.steps[-1].description == "0.707|00⟩ + 0.707|11⟩"
    assert set(history.steps[1].probabilities) == {"00", "10"}


def test_attaching_to_initialized_simulator(sim):
    sim.initialize(1)
    history = HistoryRecorder(sim)
    assert len(history) == 1
    assert history.steps[0].kind == "initial"


def test_snapshots_are_independent(sim):
    history = HistoryRecorder(sim)
    sim.initialize(1).apply_gate("X", 0)
    np.testing.assert_allclose(history.steps[0].state, [1, 0], atol=1e-12)
    np.testing.assert_allclose(history.steps[1].state, [0, 1], atol=1e-12)


def test_rotation_params(sim):
    history = HistoryRecorder(sim)
    sim.initialize(1).apply_rotation("Y", 0.5, 0)
    step = history.steps[-1]
    assert step.kind == "rotation"
    assert step.params == (0.5,)
    assert step.qubits == (0,)


def test_measurement_outcomes_recorded(fixed_random):
    sim = QuantumSimulator(rng=fixed_random(0.9))
    history = HistoryRecorder(sim)
    sim.initialize(2).apply_gate("H", 0)
    sim.measure(0)
    sim.measure_all()
    assert history.steps[2].outcome == 1
    assert history.steps[3].outcome == [1, 0]
    assert history.steps[3].label == "MEASURE all"


def test_reinitialize_starts_over(sim):
    history = HistoryRecorder(sim)
    sim.initialize(2).apply_gate("X", 0)
    sim.initialize(1)
    assert [s.label for s in history.steps] == ["Initial |0⟩"]


def test_executor_run_recorded(sim):
    sim.initialize(2)
    with HistoryRecorder(sim) as history:
        result = sim.simulate_circuit([
            {"type": "H", "qubit": 0},
            {"type": "CNOT", "control": 0, "target": 1},
        ])
    assert len(history) == 3
    np.testing.assert_allclose(history.steps[-1].state, result.amplitudes, atol=1e-12)


def test_failed_operation_not_recorded(sim):
    sim.initialize(2)
    with HistoryRecorder(sim) as history:
        sim.simulate_circuit([
            {"type": "H", "qubit": 0},
            {"type": "CNOT", "control": 1, "target": 1},
        ])
    assert [s.label for s in history.steps] == ["Initial |00⟩", "H q[0]"]


def test_detach_on_exit(sim):
    with HistoryRecorder(sim) as history:
        sim.initialize(1)
    sim.apply_gate("X", 0)
    assert len(history) == 1


def test_recorder_does_not_change_results():
    ops = [
        {"type": "H", "qubit": 0},
        {"type": "RY", "qubit": 1, "angle": 0.8},
        {"type": "CNOT", "control": 0, "target": 1},
        {"type": "MEASURE", "qubit": "all"},
    ]
    plain = QuantumSimulator(seed=9).initialize(2).simulate_circuit(ops)
    watched_sim = QuantumSimulator(seed=9).initialize(2)
    HistoryRecorder(watched_sim)
    watched = watched_sim.simulate_circuit(ops)
    assert plain.measurements == watched.measurements
    np.testing.assert_allclose(plain.amplitudes, watched.amplitudes, atol=1e-12)


def test_as_dicts(sim):
    history = HistoryRecorder(sim)
    sim.initialize(1).apply_gate("X", 0)
    steps = history.as_dicts()
    assert steps[1]["label"] == "X q[0]"
    assert steps[1]["statevector"] == [[0.0, 0.0], [1.0, 0.0]]
    assert steps[1]["qubits"] == [0]
    history.clear()
    assert len(history) == 0


def test_norm_after_every_step():
    sim = QuantumSimulator(seed=0)
    history = HistoryRecorder(sim)
    sim.initialize(3)
    for q in range(3):
        sim.apply_gate("H", q).apply_rotation("X", 0.3 * (q + 1), q)
    sim.apply_cnot(0, 2).apply_cz(2, 1).apply_gate("T", 1)
    for step in history.steps:
        assert np.sum(np.abs(step.state) ** 2) == pytest.approx(1.0, abs=1e-10)
