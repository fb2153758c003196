"""
Circuit operations.

An ``Operation`` is an immutable tagged record consumed once by the
executor. The dictionary form is what the circuit editor and code panel
send::

    {"type": "H", "qubit": 0}
    {"type": "RX", "qubit": 1, "angle": 1.5708}
    {"type": "CNOT", "control": 0, "target": 1}
    {"type": "MEASURE", "qubit": "all"}

Example
-------
>>> ops = parse_operations([
...     {"type": "H", "qubit": 0},
...     {"type": "CNOT", "control": 0, "target": 1},
... ])
>>> ops[1].label()
'CNOT q[0,1]'
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np

from qfluency.errors import UnknownOperation
from qfluency.gates import FIXED_GATES


class OperationKind(enum.Enum):
    GATE = "gate"
    ROTATION = "rotation"
    CONTROLLED = "controlled"
    MEASURE = "measure"


ROTATION_NAMES = ("RX", "RY", "RZ")
CONTROLLED_NAMES = ("CNOT", "CZ")
MEASURE_ALL = "all"

# Aliases accepted from the editor / code panel.
_ALIASES = {"CX": "CNOT", "M": "MEASURE"}


def _kind_for(name: str) -> OperationKind:
    if name in FIXED_GATES:
        return OperationKind.GATE
    if name in ROTATION_NAMES:
        return OperationKind.ROTATION
    if name in CONTROLLED_NAMES:
        return OperationKind.CONTROLLED
    if name == "MEASURE":
        return OperationKind.MEASURE
    raise UnknownOperation(name)


@dataclass(frozen=True)
class Operation:
    """A single circuit step: gate, rotation, controlled gate or measurement."""
    kind: OperationKind
    name: str
    qubit: Optional[int] = None
    control: Optional[int] = None
    target: Optional[int] = None
    angle: Optional[float] = None
    measure_all: bool = False

    # -- Constructors ---------------------------------------------------------

    @classmethod
    def gate(cls, name: str, qubit: int) -> Operation:
        return cls(OperationKind.GATE, name.upper(), qubit=qubit)

    @classmethod
    def rotation(cls, axis: str, angle: float, qubit: int) -> Operation:
        name = axis.upper() if axis.upper().startswith("R") else f"R{axis.upper()}"
        return cls(OperationKind.ROTATION, name, qubit=qubit, angle=float(angle))

    @classmethod
    def cnot(cls, control: int, target: int) -> Operation:
        return cls(OperationKind.CONTROLLED, "CNOT", control=control, target=target)

    @classmethod
    def cz(cls, control: int, target: int) -> Operation:
        return cls(OperationKind.CONTROLLED, "CZ", control=control, target=target)

    @classmethod
    def measure(cls, qubit: Union[int, str] = MEASURE_ALL) -> Operation:
        if qubit == MEASURE_ALL:
            return cls(OperationKind.MEASURE, "MEASURE", measure_all=True)
        return cls(OperationKind.MEASURE, "MEASURE", qubit=qubit)

    # -- Serialization --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Operation:
        """
        Parse the editor's dictionary format.

        Raises ``UnknownOperation`` for an unrecognized ``type`` and
        ``ValueError`` when a required field is missing.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Operation must be an object, got {data!r}")
        if "type" not in data:
            raise ValueError(f"Operation is missing 'type': {dict(data)}")
        name = str(data["type"]).upper()
        name = _ALIASES.get(name, name)
        kind = _kind_for(name)

        if kind is OperationKind.CONTROLLED:
            _require(data, name, "control", "target")
            return cls(kind, name, control=data["control"], target=data["target"])

        _require(data, name, "qubit")
        qubit = data["qubit"]

        if kind is OperationKind.MEASURE:
            return cls.measure(qubit)
        if kind is OperationKind.ROTATION:
            _require(data, name, "angle")
            try:
                angle = float(data["angle"])
            except (TypeError, ValueError):
                raise ValueError(
                    f"{name} angle must be a number, got {data['angle']!r}"
                ) from None
            return cls(kind, name, qubit=qubit, angle=angle)
        return cls(kind, name, qubit=qubit)

    def to_dict(self) -> dict[str, Any]:
        """Inverse of ``from_dict``."""
        out: dict[str, Any] = {"type": self.name}
        if self.kind is OperationKind.CONTROLLED:
            out["control"] = self.control
            out["target"] = self.target
        elif self.measure_all:
            out["qubit"] = MEASURE_ALL
        else:
            out["qubit"] = self.qubit
        if self.angle is not None:
            out["angle"] = self.angle
        return out

    @property
    def qubits(self) -> tuple:
        """Qubits touched by this operation (empty for measure-all)."""
        if self.kind is OperationKind.CONTROLLED:
            return (self.control, self.target)
        if self.measure_all:
            return ()
        return (self.qubit,)

    def label(self) -> str:
        """Short text such as ``RX(1.571) q[0]`` or ``CNOT q[0,1]``."""
        params = f"({self.angle:.3f})" if self.angle is not None else ""
        if self.measure_all:
            return "MEASURE all"
        return f"{self.name}{params} q[{','.join(str(q) for q in self.qubits)}]"


def _require(data: Mapping[str, Any], name: str, *fields: str) -> None:
    missing = [f for f in fields if data.get(f) is None]
    if missing:
        raise ValueError(f"{name} operation is missing {', '.join(missing)}")


def parse_operations(items: Iterable[Union[Operation, Mapping[str, Any]]]) -> list[Operation]:
    """Convert a sequence of dicts (or Operations) to Operations."""
    return [op if isinstance(op, Operation) else Operation.from_dict(op) for op in items]


def load_operations(path: Union[str, Path]) -> tuple[Optional[int], list[Operation]]:
    """
    Read a circuit from a JSON file.

    The document is either a list of operations or an object with
    ``num_qubits`` and ``operations``. Returns ``(num_qubits, operations)``;
    ``num_qubits`` is None for a bare list.
    """
    with open(path, encoding="utf-8") as f:
        doc = json.load(f)

    if isinstance(doc, list):
        return None, parse_operations(doc)
    if isinstance(doc, dict) and "operations" in doc:
        num_qubits = doc.get("num_qubits")
        return (int(num_qubits) if num_qubits is not None else None,
                parse_operations(doc["operations"]))
    raise ValueError(f"{path}: expected a list of operations or an object with 'operations'")


def infer_num_qubits(operations: Iterable[Operation]) -> int:
    """Smallest register that every operation fits in (at least 1)."""
    highest = -1
    for op in operations:
        for q in op.qubits:
            if isinstance(q, (int, np.integer)) and not isinstance(q, bool):
                highest = max(highest, int(q))
    return max(highest + 1, 1)


_RANDOM_GATES = ("H", "X", "Y", "Z", "RX", "RY", "RZ")


def random_circuit(num_qubits: int, depth: int,
                   rng: Optional[np.random.Generator] = None) -> list[Operation]:
    """
    Generate a random practice circuit.

    Each layer puts a random single-qubit gate or rotation on each qubit
    with probability 0.3, then with probability 0.5 adds one CNOT between
    two distinct random qubits.
    """
    rng = rng if rng is not None else np.random.default_rng()
    ops: list[Operation] = []

    for _ in range(depth):
        for qubit in range(num_qubits):
            if rng.random() < 0.3:
                name = _RANDOM_GATES[rng.integers(len(_RANDOM_GATES))]
                if name in ROTATION_NAMES:
                    ops.append(Operation.rotation(name, rng.random() * 2 * np.pi, qubit))
                else:
                    ops.append(Operation.gate(name, qubit))

        if num_qubits > 1 and rng.random() < 0.5:
            control, target = rng.choice(num_qubits, size=2, replace=False)
            ops.append(Operation.cnot(int(control), int(target)))

    return ops
