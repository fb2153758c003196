"""
Simulator error kinds.

Every error is caused by invalid caller input and carries the offending
values as attributes, so a caller can report exactly which precondition
was violated. ``CollapseError`` is the one exception: it signals an
internal invariant violation (collapsing onto a zero-probability branch).
"""

from __future__ import annotations

from typing import Any


class SimulatorError(Exception):
    """Base class for all simulator errors."""


class QubitOutOfRange(SimulatorError):
    """Qubit index outside ``[0, num_qubits)``."""

    def __init__(self, qubit: Any, num_qubits: int) -> None:
        super().__init__(
            f"Qubit {qubit} out of range (0-{num_qubits - 1})"
        )
        self.qubit = qubit
        self.num_qubits = num_qubits


class QubitLimitExceeded(SimulatorError):
    """Requested register is larger than the configured maximum."""

    def __init__(self, requested: int, maximum: int) -> None:
        super().__init__(
            f"Maximum {maximum} qubits supported, requested {requested}"
        )
        self.requested = requested
        self.maximum = maximum


class InvalidOperands(SimulatorError):
    """Control and target of a two-qubit gate are the same qubit."""

    def __init__(self, control: int, target: int) -> None:
        super().__init__(
            f"Control and target qubits must be different (got {control} and {target})"
        )
        self.control = control
        self.target = target


class UnknownGate(SimulatorError):
    """Gate name (or rotation axis) not in the gate library."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Unknown gate: {name}")
        self.name = name


class UnknownOperation(SimulatorError):
    """Operation tag the executor cannot dispatch."""

    def __init__(self, kind: Any) -> None:
        super().__init__(f"Unknown operation: {kind}")
        self.kind = kind


class CollapseError(SimulatorError):
    """Attempted to collapse onto an outcome with zero probability."""

    def __init__(self, qubit: int, outcome: int, probability: float) -> None:
        super().__init__(
            f"Cannot collapse qubit {qubit} onto outcome {outcome}: "
            f"probability {probability:.3e}"
        )
        self.qubit = qubit
        self.outcome = outcome
        self.probability = probability


class OperationFailed(SimulatorError):
    """
    An operation in a circuit failed.

    Wraps the underlying error together with the position of the operation
    in the circuit, so the failure can be traced back to the editor.
    """

    def __init__(self, index: int, operation: Any, cause: Exception) -> None:
        super().__init__(f"Operation {index} ({operation}): {cause}")
        self.index = index
        self.operation = operation
        self.cause = cause


# Errors a single gate/measurement call can raise.
GateError = (QubitOutOfRange, InvalidOperands, UnknownGate, CollapseError)

__all__ = [
    "SimulatorError",
    "QubitOutOfRange",
    "QubitLimitExceeded",
    "InvalidOperands",
    "UnknownGate",
    "UnknownOperation",
    "CollapseError",
    "OperationFailed",
    "GateError",
]
