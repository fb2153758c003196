"""
Quantum simulator - the main user-facing API.

Wraps the state vector engine, the gate library and the measurement
subsystem behind the calls the circuit editor and code panel make.
Gate calls return the simulator, so they chain:

    >>> from qfluency import QuantumSimulator
    >>> sim = QuantumSimulator(seed=7).initialize(2)
    >>> sim.apply_gate("H", 0).apply_cnot(0, 1).get_state_description()
    '0.707|00⟩ + 0.707|11⟩'

Randomness for measurement comes from an injected
``numpy.random.Generator``; pass ``seed`` (or ``rng``) to make outcomes
reproducible.

Observers (see ``qfluency.history``) are notified after the register is
initialized and after each applied operation. They see the state but never
take part in computing it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

import numpy as np
from numpy import ndarray

from qfluency import gates
from qfluency.backends import measurement
from qfluency.backends.measurement import MeasureAllRecord, MeasurementRecord
from qfluency.backends.statevector import StateVectorEngine
from qfluency.circuit import Operation
from qfluency.config import SimulatorConfig

if TYPE_CHECKING:
    from qfluency.executor import SimulationResult

logger = logging.getLogger(__name__)


class QuantumSimulator:
    """
    Educational state vector simulator.

    Parameters
    ----------
    config : SimulatorConfig, optional
        Qubit ceiling, display epsilon and default seed.
    rng : numpy.random.Generator, optional
        Random source for measurement. Takes precedence over ``seed``.
    seed : int, optional
        Seed for a fresh ``default_rng``; falls back to ``config.seed``.
    """

    def __init__(self, config: Optional[SimulatorConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None) -> None:
        self.config = config or SimulatorConfig()
        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else self.config.seed)
        self.rng = rng
        self.engine = StateVectorEngine(max_qubits=self.config.max_qubits,
                                        epsilon=self.config.epsilon)
        self._observers: list[Any] = []

    # =========================================================================
    # REGISTER
    # =========================================================================

    def initialize(self, num_qubits: int) -> QuantumSimulator:
        """Create a fresh register of ``num_qubits`` qubits in |0...0⟩."""
        self.engine.initialize(num_qubits)
        logger.debug("Initialized %d-qubit register", num_qubits)
        for observer in self._observers:
            observer.on_initialize(self)
        return self

    @property
    def num_qubits(self) -> int:
        return self.engine.num_qubits

    # =========================================================================
    # GATES
    # =========================================================================

    def apply_gate(self, name: str, qubit: int) -> QuantumSimulator:
        """Apply a fixed single-qubit gate (I, X, Y, Z, H, S, T)."""
        self.engine.validate_qubit(qubit)
        matrix = gates.get_matrix(name)
        self.engine.apply_single_qubit_gate(matrix, qubit)
        self._notify(Operation.gate(name, qubit))
        return self

    def apply_rotation(self, axis: str, angle: float, qubit: int) -> QuantumSimulator:
        """Rotate ``qubit`` by ``angle`` radians around axis X, Y or Z."""
        self.engine.validate_qubit(qubit)
        matrix = gates.rotation(axis, angle)
        self.engine.apply_single_qubit_gate(matrix, qubit)
        self._notify(Operation.rotation(axis, angle, qubit))
        return self

    def apply_cnot(self, control: int, target: int) -> QuantumSimulator:
        """Controlled-X."""
        self.engine.apply_controlled_gate(gates.X, control, target)
        self._notify(Operation.cnot(control, target))
        return self

    def apply_cz(self, control: int, target: int) -> QuantumSimulator:
        """Controlled-Z."""
        self.engine.apply_controlled_gate(gates.Z, control, target)
        self._notify(Operation.cz(control, target))
        return self

    # =========================================================================
    # MEASUREMENT
    # =========================================================================

    def measure_with_record(self, qubit: int) -> MeasurementRecord:
        record = measurement.measure_with_record(self.engine, qubit, self.rng)
        logger.debug("Measured qubit %d -> %d", qubit, record.outcome)
        self._notify(Operation.measure(qubit), record)
        return record

    def measure(self, qubit: int) -> int:
        """Measure ``qubit``, collapsing the register. Returns 0 or 1."""
        return self.measure_with_record(qubit).outcome

    def measure_all_with_record(self) -> MeasureAllRecord:
        self.engine.validate_qubit(0)
        record = measurement.measure_all_with_record(self.engine, self.rng)
        logger.debug("Measured all qubits -> %s", record.bitstring)
        self._notify(Operation.measure(), record)
        return record

    def measure_all(self) -> list[int]:
        """Measure every qubit; bits in qubit-index order."""
        return self.measure_all_with_record().bits

    def get_measurement_probability(self, qubit: int, outcome: int) -> float:
        return measurement.measurement_probability(self.engine, qubit, outcome)

    # =========================================================================
    # READ-OUT
    # =========================================================================

    def get_probabilities(self) -> list[float]:
        """Probability of every basis state, length 2^n."""
        return [float(p) for p in self.engine.probabilities()]

    def get_state_description(self, include_phases: bool = False) -> str:
        return self.engine.state_description(include_phases)

    def get_measurement_distribution(self) -> dict[str, float]:
        return self.engine.measurement_distribution()

    def get_expectation_z(self, qubit: int) -> float:
        return self.engine.expectation_z(qubit)

    def get_state_vector(self) -> ndarray:
        return self.engine.amplitudes

    # =========================================================================
    # CIRCUITS
    # =========================================================================

    def simulate_circuit(
        self, operations: Iterable[Union[Operation, Mapping[str, Any]]]
    ) -> SimulationResult:
        """Reset the register and run ``operations``; see ``CircuitExecutor``."""
        from qfluency.executor import CircuitExecutor
        return CircuitExecutor(self).simulate_circuit(operations)

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def add_observer(self, observer: Any) -> None:
        """Register an object with ``on_initialize`` / ``on_operation``."""
        self._observers.append(observer)

    def remove_observer(self, observer: Any) -> None:
        self._observers.remove(observer)

    def _notify(self, operation: Operation, result: Any = None) -> None:
        for observer in self._observers:
            observer.on_operation(self, operation, result)

    def __repr__(self) -> str:
        return f"QuantumSimulator(qubits={self.num_qubits})"
