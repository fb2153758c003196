"""
qfluency dashboard server.

A Flask application the browser UI talks to:
- REST API for circuit simulation in the editor's operation format
- Step-by-step playback (state after each operation)
- The four synchronized views of a circuit
- Preset circuits

Usage:
    from qfluency.dashboard import launch
    launch(port=8888)

    # Or via CLI:
    # qfluency serve --port 8888
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from qfluency.config import SimulatorConfig
from qfluency.errors import SimulatorError
from qfluency.gates import GATE_CATALOG
from qfluency.history import HistoryRecorder
from qfluency.logging_config import configure_logging
from qfluency.metrics import (
    bloch_coords,
    entanglement_degree,
    performance_analysis,
    superposition_degree,
)
from qfluency.simulator import QuantumSimulator
from qfluency.views import render_views

logger = logging.getLogger(__name__)

DEFAULT_SEED = 42

PRESETS = {
    "bell_state": {
        "name": "Bell State (Φ⁺)",
        "description": "Maximally entangled pair: |00⟩ + |11⟩",
        "num_qubits": 2,
        "operations": [
            {"type": "H", "qubit": 0},
            {"type": "CNOT", "control": 0, "target": 1},
        ],
    },
    "ghz_3": {
        "name": "GHZ State (3 qubits)",
        "description": "Three-way entanglement: |000⟩ + |111⟩",
        "num_qubits": 3,
        "operations": [
            {"type": "H", "qubit": 0},
            {"type": "CNOT", "control": 0, "target": 1},
            {"type": "CNOT", "control": 0, "target": 2},
        ],
    },
    "superposition": {
        "name": "Uniform Superposition",
        "description": "All basis states equally likely",
        "num_qubits": 3,
        "operations": [
            {"type": "H", "qubit": 0},
            {"type": "H", "qubit": 1},
            {"type": "H", "qubit": 2},
        ],
    },
    "random_bit": {
        "name": "Quantum Coin Flip",
        "description": "Hadamard then measure: a fair random bit",
        "num_qubits": 1,
        "operations": [
            {"type": "H", "qubit": 0},
            {"type": "MEASURE", "qubit": "all"},
        ],
    },
    "deutsch_jozsa": {
        "name": "Deutsch-Jozsa",
        "description": "Determine if function is constant or balanced",
        "num_qubits": 3,
        "operations": [
            {"type": "X", "qubit": 2},
            {"type": "H", "qubit": 0},
            {"type": "H", "qubit": 1},
            {"type": "H", "qubit": 2},
            {"type": "CNOT", "control": 0, "target": 2},
            {"type": "CNOT", "control": 1, "target": 2},
            {"type": "H", "qubit": 0},
            {"type": "H", "qubit": 1},
        ],
    },
    "grover_2": {
        "name": "Grover's Search",
        "description": "Search for |11⟩ in 2-qubit space",
        "num_qubits": 2,
        "operations": [
            {"type": "H", "qubit": 0},
            {"type": "H", "qubit": 1},
            {"type": "CZ", "control": 0, "target": 1},
            {"type": "H", "qubit": 0},
            {"type": "H", "qubit": 1},
            {"type": "X", "qubit": 0},
            {"type": "X", "qubit": 1},
            {"type": "CZ", "control": 0, "target": 1},
            {"type": "X", "qubit": 0},
            {"type": "X", "qubit": 1},
            {"type": "H", "qubit": 0},
            {"type": "H", "qubit": 1},
        ],
    },
    "phase_rotation": {
        "name": "Phase Rotation",
        "description": "Rz changes phase but not probabilities",
        "num_qubits": 1,
        "operations": [
            {"type": "H", "qubit": 0},
            {"type": "RZ", "qubit": 0, "angle": 1.5707963267948966},
            {"type": "H", "qubit": 0},
        ],
    },
}


# ---------------------------------------------------------------------------
# Simulation helpers
# ---------------------------------------------------------------------------

def _request_circuit(data: Optional[dict]) -> tuple[int, list]:
    """Pull ``num_qubits`` and ``operations`` out of a request body."""
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    num_qubits = data.get("num_qubits", 2)
    if isinstance(num_qubits, bool) or not isinstance(num_qubits, int):
        raise ValueError(f"'num_qubits' must be an integer, got {num_qubits!r}")
    operations = data.get("operations", [])
    if not isinstance(operations, list):
        raise ValueError("'operations' must be a list")
    return num_qubits, operations


def _make_simulator(data: dict, config: SimulatorConfig) -> QuantumSimulator:
    seed = data.get("seed", config.seed if config.seed is not None else DEFAULT_SEED)
    return QuantumSimulator(config=config, seed=seed)


def _simulate(data: dict, config: Optional[SimulatorConfig] = None) -> dict:
    """Run a circuit and return the result plus display metrics."""
    config = config or SimulatorConfig()
    num_qubits, operations = _request_circuit(data)

    sim = _make_simulator(data, config)
    sim.initialize(num_qubits)
    result = sim.simulate_circuit(operations)

    payload = result.to_dict()
    state = result.amplitudes
    payload["distribution"] = sim.get_measurement_distribution()
    payload["state_description"] = sim.get_state_description()
    payload["bloch_coords"] = [bloch_coords(state, num_qubits, q) for q in range(num_qubits)]
    payload["metrics"] = {
        "superposition": superposition_degree(result.probabilities),
        "entanglement": entanglement_degree(state, num_qubits),
    }
    payload["performance"] = performance_analysis(
        num_qubits, result.operations_applied, result.probabilities, state)
    return payload


def _step_simulate(data: dict, config: Optional[SimulatorConfig] = None) -> dict:
    """Run a circuit recording the state after each operation."""
    config = config or SimulatorConfig()
    num_qubits, operations = _request_circuit(data)

    sim = _make_simulator(data, config)
    sim.initialize(num_qubits)
    with HistoryRecorder(sim) as history:
        result = sim.simulate_circuit(operations)

    return {
        "steps": history.as_dicts(),
        "success": result.success,
        "errors": result.errors,
        "failed_index": result.failed_index,
    }


# ---------------------------------------------------------------------------
# Flask Application
# ---------------------------------------------------------------------------

def create_app(config: Optional[SimulatorConfig] = None) -> Any:
    """Create and configure the Flask application."""
    try:
        from flask import Flask, jsonify, request
    except ImportError:
        raise ImportError(
            "Flask is required for the dashboard. Install it with:\n"
            "  pip install flask\n"
            "Or install qfluency with dashboard extras:\n"
            "  pip install quantum-fluency[dashboard]"
        )

    config = config or SimulatorConfig.from_env()
    app = Flask(__name__)
    app.config["JSON_SORT_KEYS"] = False
    app.config["SIMULATOR"] = config

    def _error(exc: Exception):
        logger.info("Rejected request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    # ---- Routes ----

    @app.route("/api/gates")
    def api_gates():
        return jsonify(GATE_CATALOG)

    @app.route("/api/presets")
    def api_presets():
        return jsonify(PRESETS)

    @app.route("/api/simulate", methods=["POST"])
    def api_simulate():
        try:
            return jsonify(_simulate(request.get_json(silent=True), config))
        except (SimulatorError, ValueError) as e:
            return _error(e)

    @app.route("/api/step", methods=["POST"])
    def api_step():
        try:
            return jsonify(_step_simulate(request.get_json(silent=True), config))
        except (SimulatorError, ValueError) as e:
            return _error(e)

    @app.route("/api/views", methods=["POST"])
    def api_views():
        try:
            num_qubits, operations = _request_circuit(request.get_json(silent=True))
            return jsonify(render_views(num_qubits, operations, config))
        except (SimulatorError, ValueError) as e:
            return _error(e)

    return app


def launch(port: int = 8888, host: str = "127.0.0.1", debug: bool = False,
           config: Optional[SimulatorConfig] = None) -> None:
    """
    Serve the dashboard API.

    Parameters
    ----------
    port : int
        Port to serve on (default 8888).
    host : str
        Host address (default localhost).
    debug : bool
        Enable Flask debug mode.
    config : SimulatorConfig, optional
        Defaults to ``SimulatorConfig.from_env()``.
    """
    config = config or SimulatorConfig.from_env()
    configure_logging("DEBUG" if debug else config.log_level)
    app = create_app(config)
    logger.info("qfluency dashboard on http://%s:%d", host, port)
    print(f"qfluency dashboard API: http://{host}:{port}/api/gates  (Ctrl+C to stop)")
    app.run(host=host, port=port, debug=debug)
