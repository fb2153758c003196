"""
State vector engine.

Owns the 2^n complex amplitude array of a small register and applies
single-qubit and controlled gates by bit-indexed amplitude mixing.

Qubit 0 is the most significant bit of the basis index: qubit ``q`` of
basis state ``i`` is bit ``n - 1 - q`` of ``i``. Every bit extraction and
flip goes through ``bit_of`` / ``_shift`` so the convention lives in one
place.

Memory: 16 bytes * 2^n (complex128). The register is capped at a few
qubits, so every operation is cheap, but each is still O(2^n).
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy import ndarray

from qfluency.complex_math import EPSILON, format_complex
from qfluency.config import MAX_QUBITS_CEILING
from qfluency.errors import InvalidOperands, QubitLimitExceeded, QubitOutOfRange


class StateVectorEngine:
    """
    Exact state vector of an n-qubit register.

    Parameters
    ----------
    num_qubits : int, optional
        If given, the register is initialized immediately.
    max_qubits : int
        Largest register ``initialize`` accepts.
    epsilon : float
        Negligibility threshold for descriptions and distributions.

    Example
    -------
    >>> from qfluency import gates
    >>> engine = StateVectorEngine(2)
    >>> engine.apply_single_qubit_gate(gates.H, 0)
    >>> engine.apply_controlled_gate(gates.X, 0, 1)
    >>> engine.state_description()
    '0.707|00⟩ + 0.707|11⟩'
    """

    def __init__(self, num_qubits: Optional[int] = None,
                 max_qubits: int = MAX_QUBITS_CEILING,
                 epsilon: float = EPSILON) -> None:
        self.max_qubits = max_qubits
        self.epsilon = epsilon
        self._num_qubits = 0
        self._data: Optional[ndarray] = None
        if num_qubits is not None:
            self.initialize(num_qubits)

    # -- Lifecycle ----------------------------------------------------------

    def initialize(self, num_qubits: int) -> None:
        """Allocate a fresh register in |0...0⟩."""
        if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
            raise ValueError(f"Register size must be an integer, got {num_qubits!r}")
        if num_qubits > self.max_qubits:
            raise QubitLimitExceeded(num_qubits, self.max_qubits)
        if num_qubits < 1:
            raise ValueError(f"Register needs at least 1 qubit, got {num_qubits}")

        self._num_qubits = int(num_qubits)
        data = np.zeros(2 ** self._num_qubits, dtype=np.complex128)
        data[0] = 1.0 + 0.0j
        self._data = data

    def reset(self) -> None:
        """Return the current register to |0...0⟩."""
        self.initialize(self._num_qubits)

    @property
    def is_initialized(self) -> bool:
        return self._data is not None

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dim(self) -> int:
        return 2 ** self._num_qubits

    @property
    def amplitudes(self) -> ndarray:
        """Copy of the amplitude array."""
        return self._state().copy()

    def snapshot(self) -> ndarray:
        """Copy of the amplitudes, for callers that need to roll back."""
        return self.amplitudes

    def restore(self, snapshot: ndarray) -> None:
        """Replace the amplitudes with a previously taken snapshot."""
        snapshot = np.asarray(snapshot, dtype=np.complex128)
        if snapshot.shape != (self.dim,):
            raise ValueError(
                f"Snapshot shape {snapshot.shape} != expected ({self.dim},)"
            )
        self._data = snapshot.copy()

    # -- Bit helpers ----------------------------------------------------------

    def _shift(self, qubit: int) -> int:
        return self._num_qubits - 1 - qubit

    def bit_of(self, index: int, qubit: int) -> int:
        """Value of ``qubit`` in basis state ``index``."""
        return (index >> self._shift(qubit)) & 1

    def flip_bit(self, index: int, qubit: int, value: int) -> int:
        """Return ``index`` with ``qubit`` set to ``value``."""
        mask = 1 << self._shift(qubit)
        return (index & ~mask) | (value << self._shift(qubit))

    def validate_qubit(self, qubit) -> None:
        """Raise ``QubitOutOfRange`` unless ``qubit`` indexes this register."""
        self._state()
        if (isinstance(qubit, bool)
                or not isinstance(qubit, (int, np.integer))
                or not 0 <= qubit < self._num_qubits):
            raise QubitOutOfRange(qubit, self._num_qubits)

    def qubit_bits(self, qubit: int) -> ndarray:
        """Bit value of ``qubit`` for every basis index, as an int array."""
        indices = np.arange(self.dim)
        return (indices >> self._shift(qubit)) & 1

    # -- Gate application -----------------------------------------------------

    def apply_single_qubit_gate(self, matrix: ndarray, qubit: int) -> None:
        """
        Apply a 2x2 gate to ``qubit``.

        For every basis index ``i`` with old bit value ``b``, the amplitude
        ``matrix[b', b] * amp[i]`` is accumulated at ``i`` with the bit set to
        ``b'``, for both ``b'`` in {0, 1}. Results go into a separate buffer
        that replaces the register when complete.
        """
        self.validate_qubit(qubit)
        state = self._state()
        indices = np.arange(self.dim)
        self._data = self._mix(state, np.asarray(matrix), qubit, indices,
                               np.zeros_like(state))

    def apply_controlled_gate(self, matrix: ndarray, control: int, target: int) -> None:
        """
        Apply a 2x2 gate to ``target`` where ``control`` is |1⟩.

        Amplitudes whose control bit is 0 pass through unchanged.
        """
        self.validate_qubit(control)
        self.validate_qubit(target)
        if control == target:
            raise InvalidOperands(control, target)

        state = self._state()
        indices = np.flatnonzero(self.qubit_bits(control) == 1)
        out = state.copy()
        out[indices] = 0
        self._data = self._mix(state, np.asarray(matrix), target, indices, out)

    def _mix(self, state: ndarray, matrix: ndarray, qubit: int,
             indices: ndarray, out: ndarray) -> ndarray:
        shift = self._shift(qubit)
        mask = 1 << shift
        old_bits = (indices >> shift) & 1
        for new_bit in (0, 1):
            new_indices = (indices & ~mask) | (new_bit << shift)
            np.add.at(out, new_indices, matrix[new_bit, old_bits] * state[indices])
        return out

    # -- Read-out -------------------------------------------------------------

    def probabilities(self) -> ndarray:
        """|amplitude|² for every basis state."""
        state = self._state()
        return state.real ** 2 + state.imag ** 2

    def norm(self) -> float:
        """Sum of squared magnitudes (1 for a valid state)."""
        return float(np.sum(self.probabilities()))

    def basis_label(self, index: int) -> str:
        return format(index, f"0{self._num_qubits}b")

    def state_description(self, include_phases: bool = False) -> str:
        """
        Ket-notation rendering of the non-negligible amplitudes.

        >>> StateVectorEngine(2).state_description()
        '|00⟩'
        """
        text = ""
        for i, amp in enumerate(self._state()):
            if abs(amp) <= self.epsilon:
                continue
            term = (format_complex(amp, include_phase=include_phases, eps=self.epsilon)
                    + f"|{self.basis_label(i)}⟩")
            if not text:
                text = term
            elif term.startswith("-"):
                text += " - " + term[1:]
            else:
                text += " + " + term
        return text or "0"

    def measurement_distribution(self) -> dict[str, float]:
        """Bitstring → probability, for probabilities above epsilon."""
        return {
            self.basis_label(i): float(p)
            for i, p in enumerate(self.probabilities())
            if p > self.epsilon
        }

    def expectation_z(self, qubit: int) -> float:
        """⟨Z⟩ on ``qubit``: P(0) - P(1)."""
        self.validate_qubit(qubit)
        eigenvalues = 1 - 2 * self.qubit_bits(qubit)
        return float(np.sum(self.probabilities() * eigenvalues))

    def _state(self) -> ndarray:
        if self._data is None:
            raise RuntimeError("Register not initialized; call initialize(n) first")
        return self._data

    def __repr__(self) -> str:
        return f"StateVectorEngine(qubits={self._num_qubits}, dim={self.dim})"
