"""Tests for the state vector engine."""

import numpy as np
import pytest

from qfluency import gates
from qfluency.backends import StateVectorEngine
from qfluency.errors import InvalidOperands, QubitLimitExceeded, QubitOutOfRange

S2 = 1 / np.sqrt(2)


@pytest.fixture
def engine():
    return StateVectorEngine(2)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def test_initial_state():
    engine = StateVectorEngine(3)
    expected = np.zeros(8, dtype=np.complex128)
    expected[0] = 1
    np.testing.assert_allclose(engine.amplitudes, expected, atol=1e-12)
    assert engine.dim == 8
    assert engine.num_qubits == 3


def test_qubit_limit():
    with pytest.raises(QubitLimitExceeded) as exc:
        StateVectorEngine(9)
    assert exc.value.requested == 9
    assert exc.value.maximum == 8


def test_lowered_limit():
    engine = StateVectorEngine(max_qubits=3)
    engine.initialize(3)
    with pytest.raises(QubitLimitExceeded):
        engine.initialize(4)


def test_zero_qubits_rejected():
    with pytest.raises(ValueError):
        StateVectorEngine(0)


@pytest.mark.parametrize("size", [2.7, 2.0, "2", True, None])
def test_non_integer_register_size_rejected(size):
    engine = StateVectorEngine()
    with pytest.raises(ValueError):
        engine.initialize(size)
    assert not engine.is_initialized


def test_numpy_integer_register_size_accepted():
    assert StateVectorEngine(np.int64(3)).dim == 8


def test_uninitialized_use_raises():
    engine = StateVectorEngine()
    assert not engine.is_initialized
    with pytest.raises(RuntimeError):
        engine.apply_single_qubit_gate(gates.X, 0)


def test_reset(engine):
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.reset()
    np.testing.assert_allclose(engine.amplitudes, [1, 0, 0, 0], atol=1e-12)


def test_amplitudes_is_a_copy(engine):
    amps = engine.amplitudes
    amps[0] = 0
    assert engine.amplitudes[0] == 1


def test_restore_checks_shape(engine):
    with pytest.raises(ValueError):
        engine.restore(np.zeros(8))


# ---------------------------------------------------------------------------
# Bit ordering: qubit 0 is the most significant bit
# ---------------------------------------------------------------------------

def test_bit_of_msb_first():
    engine = StateVectorEngine(3)
    # index 4 = 0b100 -> qubit 0 is 1
    assert engine.bit_of(4, 0) == 1
    assert engine.bit_of(4, 2) == 0
    assert engine.bit_of(1, 2) == 1


def test_flip_bit():
    engine = StateVectorEngine(3)
    assert engine.flip_bit(0, 0, 1) == 4
    assert engine.flip_bit(7, 1, 0) == 5
    assert engine.flip_bit(5, 2, 1) == 5


def test_x_on_qubit_zero_sets_high_bit(engine):
    engine.apply_single_qubit_gate(gates.X, 0)
    np.testing.assert_allclose(engine.amplitudes, [0, 0, 1, 0], atol=1e-12)
    assert engine.state_description() == "|10⟩"


def test_x_on_last_qubit_sets_low_bit(engine):
    engine.apply_single_qubit_gate(gates.X, 1)
    np.testing.assert_allclose(engine.amplitudes, [0, 1, 0, 0], atol=1e-12)


# ---------------------------------------------------------------------------
# Gate application
# ---------------------------------------------------------------------------

def test_hadamard_superposition():
    engine = StateVectorEngine(1)
    engine.apply_single_qubit_gate(gates.H, 0)
    np.testing.assert_allclose(engine.probabilities(), [0.5, 0.5], atol=1e-12)
    np.testing.assert_allclose(engine.amplitudes, [S2, S2], atol=1e-12)


def test_bell_state(engine):
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.apply_controlled_gate(gates.X, 0, 1)
    np.testing.assert_allclose(engine.amplitudes, [S2, 0, 0, S2], atol=1e-12)
    assert engine.state_description() == "0.707|00⟩ + 0.707|11⟩"


def test_cnot_control_zero_is_identity(engine):
    engine.apply_single_qubit_gate(gates.X, 1)
    before = engine.amplitudes
    engine.apply_controlled_gate(gates.X, 0, 1)
    np.testing.assert_allclose(engine.amplitudes, before, atol=1e-12)


def test_cnot_reversed_direction(engine):
    engine.apply_single_qubit_gate(gates.X, 1)
    engine.apply_controlled_gate(gates.X, 1, 0)
    assert engine.state_description() == "|11⟩"


def test_cz_phase_on_11(engine):
    engine.apply_single_qubit_gate(gates.X, 0)
    engine.apply_single_qubit_gate(gates.X, 1)
    engine.apply_controlled_gate(gates.Z, 0, 1)
    np.testing.assert_allclose(engine.amplitudes, [0, 0, 0, -1], atol=1e-12)


def test_cz_preserves_probabilities(engine):
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.apply_single_qubit_gate(gates.H, 1)
    engine.apply_controlled_gate(gates.Z, 0, 1)
    np.testing.assert_allclose(engine.probabilities(), [0.25] * 4, atol=1e-12)
    np.testing.assert_allclose(engine.amplitudes, [0.5, 0.5, 0.5, -0.5], atol=1e-12)


def test_s_gate_phase():
    engine = StateVectorEngine(1)
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.apply_single_qubit_gate(gates.S, 0)
    np.testing.assert_allclose(engine.amplitudes, [S2, 1j * S2], atol=1e-12)


def test_controlled_gate_same_qubit_leaves_state(engine):
    engine.apply_single_qubit_gate(gates.H, 0)
    before = engine.amplitudes
    with pytest.raises(InvalidOperands):
        engine.apply_controlled_gate(gates.X, 0, 0)
    np.testing.assert_allclose(engine.amplitudes, before, atol=1e-12)


@pytest.mark.parametrize("qubit", [-1, 2, 5, True, 1.0, "0"])
def test_invalid_qubit(engine, qubit):
    with pytest.raises(QubitOutOfRange):
        engine.apply_single_qubit_gate(gates.X, qubit)
    np.testing.assert_allclose(engine.amplitudes, [1, 0, 0, 0], atol=1e-12)


def test_numpy_integer_qubit_accepted(engine):
    engine.apply_single_qubit_gate(gates.X, np.int64(1))
    assert engine.state_description() == "|01⟩"


def test_out_of_range_message():
    engine = StateVectorEngine(3)
    with pytest.raises(QubitOutOfRange, match=r"Qubit 3 out of range \(0-2\)"):
        engine.validate_qubit(3)


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

def test_norm_preserved_by_every_gate():
    engine = StateVectorEngine(3)
    sequence = [
        (gates.H, 0), (gates.T, 0), (gates.Ry(0.7), 1), (gates.S, 2),
        (gates.Rx(2.1), 2), (gates.Y, 1), (gates.Rz(-0.4), 0),
    ]
    for matrix, qubit in sequence:
        engine.apply_single_qubit_gate(matrix, qubit)
        assert engine.norm() == pytest.approx(1.0, abs=1e-10)
    engine.apply_controlled_gate(gates.X, 0, 2)
    engine.apply_controlled_gate(gates.Z, 2, 1)
    assert engine.norm() == pytest.approx(1.0, abs=1e-10)


def _scrambled(n=3):
    engine = StateVectorEngine(n)
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.apply_single_qubit_gate(gates.Ry(0.9), 1)
    engine.apply_controlled_gate(gates.X, 0, 2)
    engine.apply_single_qubit_gate(gates.T, 2)
    engine.apply_single_qubit_gate(gates.Rx(1.3), 2)
    return engine


@pytest.mark.parametrize("matrix", [gates.H, gates.X, gates.Y, gates.Z])
@pytest.mark.parametrize("qubit", [0, 1, 2])
def test_self_inverse_gates(matrix, qubit):
    engine = _scrambled()
    before = engine.amplitudes
    engine.apply_single_qubit_gate(matrix, qubit)
    engine.apply_single_qubit_gate(matrix, qubit)
    np.testing.assert_allclose(engine.amplitudes, before, atol=1e-10)


@pytest.mark.parametrize("control,target", [(0, 1), (1, 0), (0, 2), (2, 1)])
def test_cnot_self_inverse(control, target):
    engine = _scrambled()
    before = engine.amplitudes
    engine.apply_controlled_gate(gates.X, control, target)
    engine.apply_controlled_gate(gates.X, control, target)
    np.testing.assert_allclose(engine.amplitudes, before, atol=1e-10)


@pytest.mark.parametrize("axis", ["X", "Y", "Z"])
def test_zero_angle_rotation_changes_nothing(axis):
    engine = _scrambled()
    before = engine.amplitudes
    engine.apply_single_qubit_gate(gates.rotation(axis, 0.0), 1)
    np.testing.assert_allclose(engine.amplitudes, before, atol=1e-10)


# ---------------------------------------------------------------------------
# Read-out
# ---------------------------------------------------------------------------

def test_state_description_with_phases():
    engine = StateVectorEngine(1)
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.apply_single_qubit_gate(gates.Z, 0)
    assert engine.state_description() == "0.707|0⟩ + 0.707|1⟩"
    assert engine.state_description(include_phases=True) == "0.707|0⟩ - 0.707|1⟩"


def test_state_description_negative_terms_use_minus():
    engine = StateVectorEngine(2)
    engine.apply_single_qubit_gate(gates.X, 0)
    engine.apply_single_qubit_gate(gates.H, 0)
    engine.apply_single_qubit_gate(gates.H, 1)
    engine.apply_controlled_gate(gates.Z, 0, 1)
    # (|00⟩ + |01⟩ - |10⟩ + |11⟩)/2
    assert engine.state_description(include_phases=True) == (
        "0.500|00⟩ + 0.500|01⟩ - 0.500|10⟩ + 0.500|11⟩")


def test_state_description_leading_and_imaginary_minus():
    engine = StateVectorEngine(1)
    engine.apply_single_qubit_gate(gates.X, 0)
    engine.apply_single_qubit_gate(gates.S, 0)
    engine.apply_single_qubit_gate(gates.Z, 0)
    assert engine.state_description(include_phases=True) == "-i|1⟩"
    engine.restore(np.array([S2, -S2 * 1j]))
    assert engine.state_description(include_phases=True) == "0.707|0⟩ - 0.707i|1⟩"


def test_state_description_imaginary_unit():
    engine = StateVectorEngine(1)
    engine.apply_single_qubit_gate(gates.X, 0)
    engine.apply_single_qubit_gate(gates.S, 0)
    assert engine.state_description(include_phases=True) == "i|1⟩"


def test_measurement_distribution(engine):
    engine.apply_single_qubit_gate(gates.H, 0)
    dist = engine.measurement_distribution()
    assert set(dist) == {"00", "10"}
    assert dist["00"] == pytest.approx(0.5)


def test_expectation_z(engine):
    assert engine.expectation_z(0) == pytest.approx(1.0)
    engine.apply_single_qubit_gate(gates.X, 1)
    assert engine.expectation_z(1) == pytest.approx(-1.0)
    engine.apply_single_qubit_gate(gates.H, 0)
    assert engine.expectation_z(0) == pytest.approx(0.0, abs=1e-12)
