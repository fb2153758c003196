"""
Optional execution history.

``HistoryRecorder`` attaches to a ``QuantumSimulator`` as an observer and
keeps a snapshot of the register after every operation, for step-by-step
playback in the dashboard and the ``--steps`` CLI flag. The simulator
computes the same states with or without a recorder attached.

Example
-------
>>> sim = QuantumSimulator(seed=1)
>>> with HistoryRecorder(sim) as history:
...     _ = sim.initialize(2).apply_gate("H", 0).apply_cnot(0, 1)
>>> [step.label for step in history.steps]
['Initial |00⟩', 'H q[0]', 'CNOT q[0,1]']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from numpy import ndarray

from qfluency.circuit import Operation
from qfluency.simulator import QuantumSimulator


@dataclass
class HistoryStep:
    """Register state right after one operation."""
    index: int
    label: str
    kind: str
    qubits: tuple
    params: tuple
    state: ndarray
    probabilities: dict[str, float]
    description: str
    outcome: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "label": self.label,
            "kind": self.kind,
            "qubits": list(self.qubits),
            "params": list(self.params),
            "statevector": [[float(c.real), float(c.imag)] for c in self.state],
            "probabilities": self.probabilities,
            "description": self.description,
            "outcome": self.outcome,
        }


@dataclass(eq=False)
class HistoryRecorder:
    """Record a ``HistoryStep`` for every operation the simulator applies."""
    simulator: QuantumSimulator
    steps: list[HistoryStep] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.simulator.add_observer(self)
        if self.simulator.engine.is_initialized:
            self._record_initial()

    # -- Observer protocol ----------------------------------------------------

    def on_initialize(self, simulator: QuantumSimulator) -> None:
        self.steps.clear()
        self._record_initial()

    def on_operation(self, simulator: QuantumSimulator, operation: Operation,
                     result: Any = None) -> None:
        outcome = None
        if result is not None:
            outcome = getattr(result, "bits", None)
            if outcome is None:
                outcome = getattr(result, "outcome", None)
        self._record(operation.label(), operation.kind.value, operation.qubits,
                     (operation.angle,) if operation.angle is not None else (),
                     outcome)

    # -- Public API -------------------------------------------------------------

    def clear(self) -> None:
        self.steps.clear()

    def detach(self) -> None:
        """Stop recording."""
        self.simulator.remove_observer(self)

    def as_dicts(self) -> list[dict[str, Any]]:
        return [step.to_dict() for step in self.steps]

    def __len__(self) -> int:
        return len(self.steps)

    def __enter__(self) -> HistoryRecorder:
        return self

    def __exit__(self, *args) -> None:
        self.detach()

    # -- Internals -------------------------------------------------------------

    def _record_initial(self) -> None:
        zeros = "0" * self.simulator.num_qubits
        self._record(f"Initial |{zeros}⟩", "initial", (), ())

    def _record(self, label: str, kind: str, qubits: tuple, params: tuple,
                outcome: Optional[Any] = None) -> None:
        sim = self.simulator
        self.steps.append(HistoryStep(
            index=len(self.steps) - 1 if self.steps else -1,
            label=label,
            kind=kind,
            qubits=tuple(qubits),
            params=tuple(params),
            state=sim.get_state_vector(),
            probabilities=sim.get_measurement_distribution(),
            description=sim.get_state_description(include_phases=True),
            outcome=outcome,
        ))
