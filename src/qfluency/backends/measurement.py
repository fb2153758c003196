"""
Projective measurement in the computational basis.

Measurement samples an outcome from the Born-rule probabilities using an
injected ``numpy.random.Generator`` and then collapses the register:
amplitudes consistent with the outcome are rescaled by 1/sqrt(P), all
others are zeroed. The collapse is permanent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from qfluency.backends.statevector import StateVectorEngine
from qfluency.errors import CollapseError


@dataclass
class MeasurementRecord:
    """What happened during a single-qubit measurement."""
    qubit: int
    outcome: int
    probabilities: dict[int, float]
    pre_state: str = ""
    post_state: str = ""

    def to_dict(self) -> dict:
        return {
            "qubit": self.qubit,
            "outcome": self.outcome,
            "probabilities": {str(k): v for k, v in self.probabilities.items()},
            "pre_state": self.pre_state,
            "post_state": self.post_state,
        }


@dataclass
class MeasureAllRecord:
    """Result of measuring every qubit; ``bits`` is in qubit-index order."""
    bits: list[int]
    records: list[MeasurementRecord] = field(default_factory=list)

    @property
    def bitstring(self) -> str:
        return "".join(str(b) for b in self.bits)


def measurement_probability(engine: StateVectorEngine, qubit: int, outcome: int) -> float:
    """
    Probability that measuring ``qubit`` yields ``outcome``.

    Sums |amplitude|² over the basis states whose ``qubit`` bit equals
    ``outcome``. Clipped into [0, 1] against rounding.
    """
    engine.validate_qubit(qubit)
    if outcome not in (0, 1):
        raise ValueError(f"Outcome must be 0 or 1, got {outcome}")
    mask = engine.qubit_bits(qubit) == outcome
    p = float(np.sum(engine.probabilities()[mask]))
    return min(1.0, max(0.0, p))


def collapse(engine: StateVectorEngine, qubit: int, outcome: int) -> None:
    """Project ``qubit`` onto ``outcome`` and renormalize."""
    p = measurement_probability(engine, qubit, outcome)
    if not p > 0.0:
        raise CollapseError(qubit, outcome, p)

    state = engine.amplitudes
    keep = engine.qubit_bits(qubit) == outcome
    collapsed = np.zeros_like(state)
    collapsed[keep] = state[keep] / np.sqrt(p)
    engine.restore(collapsed)


def measure_with_record(engine: StateVectorEngine, qubit: int,
                        rng: np.random.Generator) -> MeasurementRecord:
    """Measure ``qubit`` and return the full record."""
    p0 = measurement_probability(engine, qubit, 0)
    p1 = measurement_probability(engine, qubit, 1)
    pre_state = engine.state_description()

    # P(0) relative to the current norm; an empty branch is never drawn.
    total = p0 + p1
    threshold = p0 / total if total > 0 else p0
    outcome = 0 if rng.random() < threshold else 1
    collapse(engine, qubit, outcome)

    return MeasurementRecord(
        qubit=qubit,
        outcome=outcome,
        probabilities={0: p0, 1: p1},
        pre_state=pre_state,
        post_state=engine.state_description(),
    )


def measure(engine: StateVectorEngine, qubit: int, rng: np.random.Generator) -> int:
    """Measure ``qubit``, collapse the register, return 0 or 1."""
    return measure_with_record(engine, qubit, rng).outcome


def measure_all_with_record(engine: StateVectorEngine,
                            rng: np.random.Generator) -> MeasureAllRecord:
    """
    Measure every qubit.

    Qubits are measured from the highest index down to 0; each collapse
    conditions the later ones. The returned bits are in qubit-index order
    regardless.
    """
    n = engine.num_qubits
    bits: list[Optional[int]] = [None] * n
    records = []
    for qubit in range(n - 1, -1, -1):
        record = measure_with_record(engine, qubit, rng)
        bits[qubit] = record.outcome
        records.append(record)
    return MeasureAllRecord(bits=bits, records=records)


def measure_all(engine: StateVectorEngine, rng: np.random.Generator) -> list[int]:
    """Measure every qubit; bits returned as ``[q0, q1, ..., q(n-1)]``."""
    return measure_all_with_record(engine, rng).bits
