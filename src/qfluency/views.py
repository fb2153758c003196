"""
Four synchronized views of one circuit.

Every view is derived from the same operation list, so editing the
circuit in any panel regenerates all four:

- plain language: one sentence per operation
- code: Python driving ``QuantumSimulator``
- circuit: ASCII diagram
- math: operator product and the resulting ket

Example
-------
>>> ops = parse_operations([{"type": "H", "qubit": 0},
...                         {"type": "CNOT", "control": 0, "target": 1}])
>>> print(draw_circuit(2, ops))
q0: ─[H]───●─────
q1: ───────⊕─────
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

import numpy as np

from qfluency.circuit import Operation, OperationKind, parse_operations
from qfluency.config import SimulatorConfig
from qfluency.errors import (
    InvalidOperands,
    OperationFailed,
    QubitOutOfRange,
    SimulatorError,
)
from qfluency.simulator import QuantumSimulator

OperationLike = Union[Operation, Mapping[str, Any]]

_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")

_GATE_PHRASES = {
    "I": "Leave qubit {q} unchanged (identity gate).",
    "H": "Put qubit {q} into an equal superposition with a Hadamard gate.",
    "X": "Flip qubit {q} with an X (NOT) gate.",
    "Y": "Apply a Y gate to qubit {q}, flipping it and adding a phase.",
    "Z": "Flip the phase of qubit {q}'s |1⟩ part with a Z gate.",
    "S": "Add a quarter-turn phase (i) to qubit {q}'s |1⟩ part with an S gate.",
    "T": "Add an eighth-turn phase to qubit {q}'s |1⟩ part with a T gate.",
}


def _format_angle(angle: float) -> str:
    """Render common multiples of π symbolically."""
    for num, den in ((1, 1), (1, 2), (1, 4), (3, 4), (3, 2), (2, 1), (1, 3), (2, 3)):
        for sign in (1, -1):
            if abs(angle - sign * num * np.pi / den) < 1e-6:
                head = "-" if sign < 0 else ""
                head += "π" if num == 1 else f"{num}π"
                return head if den == 1 else f"{head}/{den}"
    return f"{angle:.3f}"


# ---------------------------------------------------------------------------
# Plain language
# ---------------------------------------------------------------------------

def describe_operation(op: Operation) -> str:
    """One sentence for one operation."""
    if op.kind is OperationKind.GATE:
        return _GATE_PHRASES[op.name].format(q=op.qubit)
    if op.kind is OperationKind.ROTATION:
        return (f"Rotate qubit {op.qubit} by {_format_angle(op.angle)} "
                f"around the {op.name[1]} axis.")
    if op.kind is OperationKind.CONTROLLED:
        if op.name == "CNOT":
            return f"Flip qubit {op.target} only when qubit {op.control} is 1 (CNOT)."
        return (f"Flip the phase where both qubit {op.control} and "
                f"qubit {op.target} are 1 (CZ).")
    if op.measure_all:
        return "Measure every qubit and read out the classical bits."
    return f"Measure qubit {op.qubit}, collapsing it to 0 or 1."


def plain_language(operations: Iterable[OperationLike]) -> list[str]:
    return [describe_operation(op) for op in parse_operations(operations)]


# ---------------------------------------------------------------------------
# Code
# ---------------------------------------------------------------------------

def _code_line(op: Operation) -> str:
    if op.kind is OperationKind.GATE:
        return f'sim.apply_gate("{op.name}", {op.qubit})'
    if op.kind is OperationKind.ROTATION:
        return f'sim.apply_rotation("{op.name[1]}", {op.angle!r}, {op.qubit})'
    if op.kind is OperationKind.CONTROLLED:
        method = "apply_cnot" if op.name == "CNOT" else "apply_cz"
        return f"sim.{method}({op.control}, {op.target})"
    if op.measure_all:
        return "bits = sim.measure_all()"
    return f"m{op.qubit} = sim.measure({op.qubit})"


def to_code(num_qubits: int, operations: Iterable[OperationLike]) -> str:
    """Python source that reproduces the circuit."""
    lines = [
        "from qfluency import QuantumSimulator",
        "",
        f"sim = QuantumSimulator().initialize({num_qubits})",
    ]
    lines.extend(_code_line(op) for op in parse_operations(operations))
    lines.append("print(sim.get_state_description())")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Circuit diagram
# ---------------------------------------------------------------------------

class CircuitDrawer:
    """
    Draw circuits as ASCII art.

    Example output:
        q0: ─[H]───●───[M]────
        q1: ───────⊕─────────
    """

    def __init__(self, num_qubits: int):
        self.num_qubits = num_qubits
        self.columns: list[list[str]] = []

    def add(self, op: Operation) -> None:
        if op.kind is OperationKind.CONTROLLED:
            self._add_controlled(op.control, op.target, "⊕" if op.name == "CNOT" else "●")
        elif op.measure_all:
            self.columns.append(["[M]"] * self.num_qubits)
        elif op.kind is OperationKind.MEASURE:
            self._add_single("M", op.qubit)
        elif op.kind is OperationKind.ROTATION:
            self._add_single(f"{op.name[0]}{op.name[1].lower()}({_format_angle(op.angle)})",
                             op.qubit)
        else:
            self._add_single(op.name, op.qubit)

    def _add_single(self, symbol: str, qubit: int) -> None:
        col = ["─"] * self.num_qubits
        col[qubit] = f"[{symbol}]"
        self.columns.append(col)

    def _add_controlled(self, control: int, target: int, target_symbol: str) -> None:
        col = ["│" if min(control, target) < i < max(control, target) else "─"
               for i in range(self.num_qubits)]
        col[control] = "●"
        col[target] = target_symbol
        self.columns.append(col)

    def draw(self) -> str:
        """Generate the diagram; each column is padded to its widest cell."""
        lines = [f"q{q}: " for q in range(self.num_qubits)]
        for col in self.columns:
            width = max(3, max(len(cell) for cell in col)) + 2
            for q, cell in enumerate(col):
                if cell == "│":
                    lines[q] += "│".center(width)
                else:
                    lines[q] += cell.center(width, "─")
        return "\n".join(line + "───" for line in lines)


def check_operations(num_qubits: int,
                     operations: Iterable[OperationLike]) -> list[Operation]:
    """
    Parse ``operations`` and check their operands against the register.

    Measurements are checked too, although they are never simulated for
    the views. The first bad operation raises ``OperationFailed`` with its
    index.
    """
    ops = []
    for index, item in enumerate(operations):
        try:
            op = item if isinstance(item, Operation) else Operation.from_dict(item)
            for qubit in op.qubits:
                if (isinstance(qubit, bool)
                        or not isinstance(qubit, (int, np.integer))
                        or not 0 <= qubit < num_qubits):
                    raise QubitOutOfRange(qubit, num_qubits)
            if op.kind is OperationKind.CONTROLLED and op.control == op.target:
                raise InvalidOperands(op.control, op.target)
        except (SimulatorError, ValueError) as exc:
            label = item.label() if isinstance(item, Operation) else repr(item)
            raise OperationFailed(index, label, exc) from exc
        ops.append(op)
    return ops


def draw_circuit(num_qubits: int, operations: Iterable[OperationLike]) -> str:
    drawer = CircuitDrawer(num_qubits)
    for op in check_operations(num_qubits, operations):
        drawer.add(op)
    return drawer.draw()


# ---------------------------------------------------------------------------
# Math notation
# ---------------------------------------------------------------------------

def _operator_symbol(op: Operation) -> str:
    if op.kind is OperationKind.CONTROLLED:
        return f"{op.name}{op.control}{op.target}".translate(_SUBSCRIPTS)
    if op.kind is OperationKind.MEASURE:
        return "M" if op.measure_all else f"M{op.qubit}".translate(_SUBSCRIPTS)
    if op.kind is OperationKind.ROTATION:
        return f"{op.name}{op.qubit}".translate(_SUBSCRIPTS) + f"({_format_angle(op.angle)})"
    return f"{op.name}{op.qubit}".translate(_SUBSCRIPTS)


def math_notation(num_qubits: int, operations: Iterable[OperationLike],
                  state_description: str) -> str:
    """
    ``|ψ⟩ = CNOT₀₁ · H₀ |00⟩ = 0.707|00⟩ + 0.707|11⟩``

    Operators are written right-to-left in application order.
    """
    ops = parse_operations(operations)
    initial = f"|{'0' * num_qubits}⟩"
    if not ops:
        return f"|ψ⟩ = {initial}"
    product = " · ".join(_operator_symbol(op) for op in reversed(ops))
    return f"|ψ⟩ = {product} {initial} = {state_description}"


# ---------------------------------------------------------------------------
# All four
# ---------------------------------------------------------------------------

def render_views(num_qubits: int, operations: Iterable[OperationLike],
                 config: SimulatorConfig | None = None) -> dict[str, Any]:
    """
    Build all four views from one operation list.

    The math view shows the state just before any measurement, since
    measurement outcomes are random. The circuit is simulated on a
    private simulator; a failing operation raises ``OperationFailed``.
    """
    ops = check_operations(num_qubits, operations)
    unitary = [op for op in ops if op.kind is not OperationKind.MEASURE]

    sim = QuantumSimulator(config=config).initialize(num_qubits)
    result = sim.simulate_circuit(unitary).raise_for_error()

    return {
        "plain": [describe_operation(op) for op in ops],
        "code": to_code(num_qubits, ops),
        "circuit": draw_circuit(num_qubits, ops),
        "math": math_notation(num_qubits, unitary, result.final_state),
    }
