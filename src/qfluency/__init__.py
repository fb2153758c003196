"""
qfluency: learn quantum computing through four synchronized views.

The same circuit is shown as plain language, code, an ASCII circuit
diagram and math notation, all backed by an exact state vector simulator.

Features:
- Exact complex state vector for small registers (up to 8 qubits)
- Gates: I, X, Y, Z, H, S, T, RX/RY/RZ rotations, CNOT, CZ
- Measurement with collapse, seedable for reproducible lessons
- Step-by-step execution history
- Dashboard API (Flask) and a command-line interface

Quick Start:
    >>> from qfluency import QuantumSimulator
    >>> sim = QuantumSimulator(seed=1).initialize(2)
    >>> sim.apply_gate("H", 0).apply_cnot(0, 1).get_state_description()
    '0.707|00⟩ + 0.707|11⟩'
    >>> sim.measure_all() in ([0, 0], [1, 1])
    True

Circuits:
    >>> result = QuantumSimulator().initialize(1).simulate_circuit(
    ...     [{"type": "H", "qubit": 0}])
    >>> [round(p, 3) for p in result.probabilities]
    [0.5, 0.5]
"""
__version__ = "1.0.0"

from .errors import (
    SimulatorError,
    QubitOutOfRange,
    QubitLimitExceeded,
    InvalidOperands,
    UnknownGate,
    UnknownOperation,
    CollapseError,
    OperationFailed,
)
from .config import SimulatorConfig
from . import gates
from .backends import StateVectorEngine
from .circuit import Operation, OperationKind, parse_operations, random_circuit
from .simulator import QuantumSimulator
from .executor import CircuitExecutor, SimulationResult
from .history import HistoryRecorder, HistoryStep
from .views import render_views, draw_circuit

__all__ = [
    # Core
    'QuantumSimulator',
    'StateVectorEngine',
    'CircuitExecutor',
    'SimulationResult',
    'SimulatorConfig',
    'Operation',
    'OperationKind',
    'parse_operations',
    'random_circuit',
    'gates',
    # History and views
    'HistoryRecorder',
    'HistoryStep',
    'render_views',
    'draw_circuit',
    # Errors
    'SimulatorError',
    'QubitOutOfRange',
    'QubitLimitExceeded',
    'InvalidOperands',
    'UnknownGate',
    'UnknownOperation',
    'CollapseError',
    'OperationFailed',
]
