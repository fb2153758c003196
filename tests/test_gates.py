"""Tests for quantum gate definitions."""

import numpy as np
import pytest

from qfluency import gates as g
from qfluency.errors import UnknownGate


# ---------------------------------------------------------------------------
# Unitarity tests: every gate must satisfy U†U = I
# ---------------------------------------------------------------------------

FIXED_GATES = [
    ("I", g.I), ("X", g.X), ("Y", g.Y), ("Z", g.Z), ("H", g.H), ("S", g.S), ("T", g.T),
]


@pytest.mark.parametrize("name,matrix", FIXED_GATES)
def test_fixed_gate_unitary(name, matrix):
    product = matrix.conj().T @ matrix
    np.testing.assert_allclose(product, np.eye(2), atol=1e-12, err_msg=f"{name} is not unitary")
    assert g.is_unitary(matrix)


@pytest.mark.parametrize("factory", [g.Rx, g.Ry, g.Rz])
@pytest.mark.parametrize("theta", [0, 0.5, np.pi, 2 * np.pi, -1.3])
def test_rotation_unitary(factory, theta):
    assert g.is_unitary(factory(theta))


def test_non_unitary_detected():
    assert not g.is_unitary(np.array([[1, 1], [0, 1]], dtype=np.complex128))


def test_fixed_gates_are_read_only():
    with pytest.raises(ValueError):
        g.X[0, 0] = 5


# ---------------------------------------------------------------------------
# Matrix contents
# ---------------------------------------------------------------------------

def test_rotation_formulas():
    theta = 0.8
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    np.testing.assert_allclose(g.Rx(theta), [[c, -1j * s], [-1j * s, c]], atol=1e-12)
    np.testing.assert_allclose(g.Ry(theta), [[c, -s], [s, c]], atol=1e-12)
    np.testing.assert_allclose(
        g.Rz(theta),
        [[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]],
        atol=1e-12,
    )


def test_t_squared_is_s():
    np.testing.assert_allclose(g.T @ g.T, g.S, atol=1e-12)


def test_s_squared_is_z():
    np.testing.assert_allclose(g.S @ g.S, g.Z, atol=1e-12)


def test_h_squared_is_identity():
    np.testing.assert_allclose(g.H @ g.H, g.I, atol=1e-12)


@pytest.mark.parametrize("axis", ["X", "Y", "Z", "x", "RX", "rz"])
def test_zero_rotation_is_identity(axis):
    np.testing.assert_allclose(g.rotation(axis, 0.0), g.I, atol=1e-12)


def test_rx_pi_is_x_up_to_phase():
    np.testing.assert_allclose(g.Rx(np.pi), -1j * g.X, atol=1e-12)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def test_get_matrix_case_insensitive():
    assert g.get_matrix("h") is g.H
    assert g.get_matrix("T") is g.T


def test_unknown_gate():
    with pytest.raises(UnknownGate) as exc:
        g.get_matrix("SWAP")
    assert exc.value.name == "SWAP"


def test_unknown_rotation_axis():
    with pytest.raises(UnknownGate):
        g.rotation("W", 1.0)


def test_catalog_covers_fixed_gates():
    names = {entry["name"] for entry in g.GATE_CATALOG}
    assert set(g.FIXED_GATES) <= names
    assert {"RX", "RY", "RZ", "CNOT", "CZ", "MEASURE"} <= names
