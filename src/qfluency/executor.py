"""
Circuit executor.

Runs an ordered list of operations against a ``QuantumSimulator``:
the register is reset, each operation is dispatched by kind, and the
first failure stops execution. Operations applied before the failure are
not rolled back; callers that need atomicity take
``simulator.engine.snapshot()`` beforehand.

A ``MEASURE`` on ``"all"`` ends the circuit: the bits are recorded and
the remaining operations are skipped.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

import numpy as np
from numpy import ndarray

from qfluency.backends.measurement import MeasurementRecord
from qfluency.circuit import Operation, OperationKind
from qfluency.errors import OperationFailed, SimulatorError, UnknownOperation

if TYPE_CHECKING:
    from qfluency.simulator import QuantumSimulator

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Outcome of ``simulate_circuit``.

    Attributes
    ----------
    success : bool
        False if an operation failed.
    num_qubits : int
        Register size the circuit ran on.
    final_state : str
        Ket description (with phases) of the register after the run.
    amplitudes : ndarray
        Final amplitudes (complex128, length 2^n).
    probabilities : list[float]
        Final basis-state probabilities.
    measurements : list
        One entry per measurement: an int for a single qubit, a list of
        bits (qubit-index order) for measure-all.
    measurement_records : list[MeasurementRecord]
        Per-qubit details of every measurement performed.
    errors : list[str]
        Formatted failure messages (at most one: execution stops).
    failure : OperationFailed | None
        The failure itself, with operation index and cause.
    operations_applied : int
        Number of operations that completed.
    stopped_early : bool
        True when a measure-all ended the circuit.
    execution_time : float
        Wall-clock seconds.
    """

    success: bool = True
    num_qubits: int = 0
    final_state: str = ""
    amplitudes: Optional[ndarray] = None
    probabilities: list[float] = field(default_factory=list)
    measurements: list[Any] = field(default_factory=list)
    measurement_records: list[MeasurementRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    failure: Optional[OperationFailed] = None
    operations_applied: int = 0
    stopped_early: bool = False
    execution_time: float = 0.0

    @property
    def failed_index(self) -> Optional[int]:
        return self.failure.index if self.failure is not None else None

    def raise_for_error(self) -> SimulationResult:
        """Raise the recorded failure, if any; otherwise return self."""
        if self.failure is not None:
            raise self.failure
        return self

    def bitstring(self) -> Optional[str]:
        """Bits of the last measure-all, as a string like ``'01'``."""
        for entry in reversed(self.measurements):
            if isinstance(entry, list):
                return "".join(str(b) for b in entry)
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form (amplitudes as [real, imag] pairs)."""
        amps = self.amplitudes if self.amplitudes is not None else np.zeros(0)
        return {
            "success": self.success,
            "num_qubits": self.num_qubits,
            "final_state": self.final_state,
            "statevector": [[float(c.real), float(c.imag)] for c in amps],
            "probabilities": self.probabilities,
            "measurements": self.measurements,
            "measurement_records": [r.to_dict() for r in self.measurement_records],
            "errors": self.errors,
            "failed_index": self.failed_index,
            "operations_applied": self.operations_applied,
            "stopped_early": self.stopped_early,
            "execution_time": self.execution_time,
        }


class CircuitExecutor:
    """
    Sequential operation dispatcher with first-error-wins semantics.

    Parameters
    ----------
    simulator : QuantumSimulator
        Simulator whose register the circuit runs on.
    """

    def __init__(self, simulator: QuantumSimulator) -> None:
        self.simulator = simulator

    def simulate_circuit(
        self,
        operations: Iterable[Union[Operation, Mapping[str, Any]]],
        num_qubits: Optional[int] = None,
    ) -> SimulationResult:
        """
        Reset the register and run ``operations`` in order.

        Parameters
        ----------
        operations : iterable of Operation or dict
            Dicts are parsed one at a time, so a malformed entry fails at
            its own index.
        num_qubits : int, optional
            Register size. Defaults to the simulator's current size.

        Returns
        -------
        SimulationResult
        """
        sim = self.simulator
        if num_qubits is None:
            if not sim.engine.is_initialized:
                raise ValueError("Register size unknown: initialize the simulator "
                                 "or pass num_qubits")
            num_qubits = sim.num_qubits

        start = time.perf_counter()
        sim.initialize(num_qubits)
        result = SimulationResult(num_qubits=num_qubits)

        for index, item in enumerate(operations):
            try:
                op = item if isinstance(item, Operation) else Operation.from_dict(item)
                logger.debug("op %d: %s", index, op.label())
                finished = self._dispatch(op, result)
            except (SimulatorError, ValueError) as exc:
                failure = OperationFailed(index, _describe(item), exc)
                logger.warning("Circuit stopped at operation %d: %s", index, exc)
                result.success = False
                result.failure = failure
                result.errors.append(str(failure))
                break

            result.operations_applied += 1
            if finished:
                result.stopped_early = True
                break

        result.final_state = sim.get_state_description(include_phases=True)
        result.amplitudes = sim.get_state_vector()
        result.probabilities = sim.get_probabilities()
        result.execution_time = time.perf_counter() - start
        return result

    def _dispatch(self, op: Operation, result: SimulationResult) -> bool:
        """Apply one operation; True means the circuit is finished."""
        sim = self.simulator

        if op.kind is OperationKind.GATE:
            sim.apply_gate(op.name, op.qubit)
        elif op.kind is OperationKind.ROTATION:
            sim.apply_rotation(op.name[1:], op.angle, op.qubit)
        elif op.kind is OperationKind.CONTROLLED:
            if op.name == "CNOT":
                sim.apply_cnot(op.control, op.target)
            elif op.name == "CZ":
                sim.apply_cz(op.control, op.target)
            else:
                raise UnknownOperation(op.name)
        elif op.kind is OperationKind.MEASURE:
            if op.measure_all:
                record = sim.measure_all_with_record()
                result.measurements.append(record.bits)
                result.measurement_records.extend(record.records)
                return True
            single = sim.measure_with_record(op.qubit)
            result.measurements.append(single.outcome)
            result.measurement_records.append(single)
        else:
            raise UnknownOperation(op.kind)
        return False


def _describe(item: Union[Operation, Mapping[str, Any]]) -> str:
    if isinstance(item, Operation):
        return item.label()
    return str(dict(item)) if isinstance(item, Mapping) else repr(item)
