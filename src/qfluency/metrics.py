"""
Educational state metrics for the dashboard.

These numbers are display aids, not load-bearing results:

- ``superposition_degree`` is the normalized Shannon entropy of the
  measurement distribution. It says how spread out the outcomes are, not
  how "quantum" the state is.
- ``entanglement_degree`` averages single-qubit von Neumann entropies.
  It is zero for product states and one for Bell/GHZ states, but it is
  not a rigorous multipartite entanglement measure.

``entanglement_entropy`` and ``bloch_coords`` are exact for pure states.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from numpy import ndarray

from qfluency.complex_math import EPSILON

_PAULI_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
_PAULI_Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
_PAULI_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)


def superposition_degree(probabilities: Sequence[float], eps: float = EPSILON) -> float:
    """0 for a basis state, 1 for a uniform spread over its support."""
    probs = np.asarray(probabilities, dtype=float)
    probs = probs[probs > eps]
    if len(probs) <= 1:
        return 0.0
    entropy = -np.sum(probs * np.log2(probs))
    return float(entropy / np.log2(len(probs)))


def reduced_density_matrix(state: ndarray, n_qubits: int, keep: Sequence[int]) -> ndarray:
    """
    Density matrix of the ``keep`` qubits, tracing out the rest.

    Qubit 0 is the leading tensor axis, matching the MSB-first basis
    ordering of the state vector.
    """
    psi = np.asarray(state, dtype=np.complex128).reshape([2] * n_qubits)
    keep = list(keep)
    rest = [q for q in range(n_qubits) if q not in keep]
    m = np.transpose(psi, keep + rest).reshape(2 ** len(keep), -1)
    return m @ m.conj().T


def entanglement_entropy(state: ndarray, n_qubits: int,
                         qubits: Optional[Sequence[int]] = None) -> float:
    """
    Von Neumann entropy (bits) of the subsystem ``qubits``.

    Returns 0 for the whole register (a pure state) or when ``qubits`` is
    None.
    """
    if qubits is None or len(qubits) == n_qubits:
        return 0.0

    rho = reduced_density_matrix(state, n_qubits, qubits)
    eigenvalues = np.linalg.eigvalsh(rho)
    eigenvalues = eigenvalues[eigenvalues > 1e-12]
    return float(-np.sum(eigenvalues * np.log2(eigenvalues)))


def entanglement_degree(state: ndarray, n_qubits: int) -> float:
    """Mean single-qubit entropy, in [0, 1]. A display heuristic."""
    if n_qubits < 2:
        return 0.0
    entropies = [entanglement_entropy(state, n_qubits, [q]) for q in range(n_qubits)]
    return float(np.clip(np.mean(entropies), 0.0, 1.0))


def bloch_coords(state: ndarray, n_qubits: int, qubit: int) -> dict[str, float]:
    """
    Bloch vector of one qubit from its reduced density matrix.

    Returns {"x", "y", "z", "purity"}; purity is 1 for an unentangled
    qubit and 0.5 for a maximally entangled one.
    """
    rho = reduced_density_matrix(state, n_qubits, [qubit])
    return {
        "x": float(np.trace(rho @ _PAULI_X).real),
        "y": float(np.trace(rho @ _PAULI_Y).real),
        "z": float(np.trace(rho @ _PAULI_Z).real),
        "purity": float(np.trace(rho @ rho).real),
    }


def performance_analysis(n_qubits: int, gate_count: int,
                         probabilities: Sequence[float], state: ndarray) -> dict:
    """
    Classical vs quantum resource comparison for the learning panel.

    The classical side is a brute-force walk over all 2^n basis states;
    the quantum side counts gates. Purely illustrative.
    """
    classical = 2 ** n_qubits
    superposition = superposition_degree(probabilities)
    entanglement = entanglement_degree(state, n_qubits)
    return {
        "classical": {
            "time_complexity": f"O({classical})",
            "space_complexity": f"O({classical})",
            "description": "Exhaustive classical search",
        },
        "quantum": {
            "time_complexity": f"O({gate_count})",
            "space_complexity": f"O({n_qubits})",
            "description": "Gate-level quantum circuit",
        },
        "insights": {
            "superposition_level": superposition,
            "entanglement_level": entanglement,
        },
    }
