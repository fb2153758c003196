"""
Quantum gate library.

All gates are 2x2 unitary matrices (read-only numpy arrays). Controlled
gates reuse the same 2x2 matrix: it acts on the target qubit only where
the control qubit is |1⟩.

Gate categories:
    - Fixed: I, X, Y, Z, H, S, T
    - Rotations: Rx, Ry, Rz (half-angle parameterization)
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

from qfluency.errors import UnknownGate

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)


def _frozen(rows) -> Matrix:
    m = np.array(rows, dtype=np.complex128)
    m.setflags(write=False)
    return m


# ---------------------------------------------------------------------------
# Fixed gates
# ---------------------------------------------------------------------------

I = _frozen([[1, 0], [0, 1]])
"""Identity gate."""

X = _frozen([[0, 1], [1, 0]])
"""Pauli-X (NOT) gate: swaps the |0⟩ and |1⟩ amplitudes."""

Y = _frozen([[0, -1j], [1j, 0]])
"""Pauli-Y gate."""

Z = _frozen([[1, 0], [0, -1]])
"""Pauli-Z gate: negates the |1⟩ amplitude."""

H = _frozen([[_SQRT2_INV, _SQRT2_INV], [_SQRT2_INV, -_SQRT2_INV]])
"""Hadamard gate."""

S = _frozen([[1, 0], [0, 1j]])
"""S (phase) gate: phase i on |1⟩."""

T = _frozen([[1, 0], [0, np.exp(1j * np.pi / 4)]])
"""T gate: phase e^(iπ/4) on |1⟩."""

FIXED_GATES: dict[str, Matrix] = {
    "I": I, "X": X, "Y": Y, "Z": Z, "H": H, "S": S, "T": T,
}

ROTATION_AXES = ("X", "Y", "Z")

# ---------------------------------------------------------------------------
# Rotation gates
# ---------------------------------------------------------------------------

def Rx(theta: float) -> Matrix:
    """Rotation around X-axis: Rx(θ) = exp(-iθX/2)."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return _frozen([[c, -1j * s], [-1j * s, c]])


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis: Ry(θ) = exp(-iθY/2)."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return _frozen([[c, -s], [s, c]])


def Rz(theta: float) -> Matrix:
    """Rotation around Z-axis: Rz(θ) = exp(-iθZ/2)."""
    return _frozen([
        [np.exp(-1j * theta / 2), 0],
        [0, np.exp(1j * theta / 2)],
    ])


_ROTATIONS = {"X": Rx, "Y": Ry, "Z": Rz}


def rotation(axis: str, theta: float) -> Matrix:
    """
    Build the rotation matrix for ``axis`` in {X, Y, Z}.

    Accepts ``"RX"``-style names as well as bare axes.
    """
    key = str(axis).upper()
    if key.startswith("R") and len(key) == 2:
        key = key[1]
    factory = _ROTATIONS.get(key)
    if factory is None:
        raise UnknownGate(f"R{axis}")
    return factory(float(theta))


def get_matrix(name: str) -> Matrix:
    """Look up a fixed gate by (case-insensitive) name."""
    matrix = FIXED_GATES.get(str(name).upper())
    if matrix is None:
        raise UnknownGate(name)
    return matrix


def is_unitary(gate: Matrix, tol: float = 1e-10) -> bool:
    """Check if a matrix is unitary: U†U = I."""
    n = gate.shape[0]
    return np.allclose(gate.conj().T @ gate, np.eye(n), atol=tol)


# ---------------------------------------------------------------------------
# Gate metadata for the dashboard and the views
# ---------------------------------------------------------------------------

GATE_CATALOG = [
    {"name": "I", "label": "I", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "Identity: leaves the qubit unchanged"},
    {"name": "H", "label": "H", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "Hadamard: creates superposition"},
    {"name": "X", "label": "X", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "Pauli-X (NOT gate)"},
    {"name": "Y", "label": "Y", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "Pauli-Y gate"},
    {"name": "Z", "label": "Z", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "Pauli-Z (phase flip)"},
    {"name": "S", "label": "S", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "S gate (√Z)"},
    {"name": "T", "label": "T", "category": "single", "n_qubits": 1, "n_params": 0,
     "description": "T gate (π/8)"},
    {"name": "RX", "label": "Rx", "category": "rotation", "n_qubits": 1, "n_params": 1,
     "description": "X-rotation by θ", "param_names": ["θ"]},
    {"name": "RY", "label": "Ry", "category": "rotation", "n_qubits": 1, "n_params": 1,
     "description": "Y-rotation by θ", "param_names": ["θ"]},
    {"name": "RZ", "label": "Rz", "category": "rotation", "n_qubits": 1, "n_params": 1,
     "description": "Z-rotation by θ", "param_names": ["θ"]},
    {"name": "CNOT", "label": "CX", "category": "controlled", "n_qubits": 2, "n_params": 0,
     "description": "CNOT (controlled-X)"},
    {"name": "CZ", "label": "CZ", "category": "controlled", "n_qubits": 2, "n_params": 0,
     "description": "Controlled-Z"},
    {"name": "MEASURE", "label": "M", "category": "measure", "n_qubits": 1, "n_params": 0,
     "description": "Measure qubit (or 'all')"},
]
