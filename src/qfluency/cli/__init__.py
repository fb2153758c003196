"""
Command-line interface for qfluency.

Usage:
    qfluency run circuit.json --seed 7 --steps
    qfluency run bell
    qfluency views circuit.json
    qfluency random --qubits 3 --depth 4
    qfluency serve --port 8888
    qfluency info

Circuit files are JSON: a list of operations such as
``{"type": "H", "qubit": 0}``, or an object with ``num_qubits`` and
``operations``.
"""
import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)

BELL = [
    {"type": "H", "qubit": 0},
    {"type": "CNOT", "control": 0, "target": 1},
    {"type": "MEASURE", "qubit": "all"},
]


def _load(args):
    """Return (num_qubits, operations) for the file argument."""
    from ..circuit import infer_num_qubits, load_operations, parse_operations

    if args.file == "bell":
        ops = parse_operations(BELL)
        num_qubits = 2
    else:
        num_qubits, ops = load_operations(args.file)
    if getattr(args, "qubits", None):
        num_qubits = args.qubits
    if num_qubits is None:
        num_qubits = infer_num_qubits(ops)
    return num_qubits, ops


def _config(args):
    from ..config import SimulatorConfig
    overrides = {}
    if getattr(args, "seed", None) is not None:
        overrides["seed"] = args.seed
    return SimulatorConfig.from_env(**overrides)


def cmd_run(args):
    """Simulate a circuit file."""
    from ..history import HistoryRecorder
    from ..simulator import QuantumSimulator

    num_qubits, ops = _load(args)
    sim = QuantumSimulator(config=_config(args)).initialize(num_qubits)

    history = HistoryRecorder(sim) if args.steps else None
    result = sim.simulate_circuit(ops)
    if history is not None:
        history.detach()

    if args.json:
        payload = result.to_dict()
        if history is not None:
            payload["steps"] = history.as_dicts()
        print(json.dumps(payload, indent=2))
        return 0 if result.success else 1

    if history is not None:
        print("Steps:")
        for step in history.steps:
            print(f"  {step.label:<20s} {step.description}")
        print()

    print(f"Final state: {result.final_state}")
    print("\nProbabilities:")
    for bitstring, p in sim.get_measurement_distribution().items():
        bar = "█" * int(p * 40)
        print(f"  |{bitstring}⟩: {bar:40s} {p * 100:5.1f}%")
    if result.measurements:
        print(f"\nMeasurements: {result.measurements}")
    for error in result.errors:
        print(f"\nError: {error}", file=sys.stderr)
    return 0 if result.success else 1


def cmd_views(args):
    """Print the four views of a circuit."""
    from ..views import render_views

    num_qubits, ops = _load(args)
    views = render_views(num_qubits, ops, _config(args))

    print("Plain language:")
    for i, sentence in enumerate(views["plain"], 1):
        print(f"  {i}. {sentence}")
    print("\nCode:")
    print("\n".join(f"  {line}" for line in views["code"].splitlines()))
    print("\nCircuit:")
    print("\n".join(f"  {line}" for line in views["circuit"].splitlines()))
    print("\nMath:")
    print(f"  {views['math']}")
    return 0


def cmd_random(args):
    """Print a random practice circuit as JSON."""
    import numpy as np
    from ..circuit import random_circuit

    ops = random_circuit(args.qubits, args.depth, np.random.default_rng(args.seed))
    print(json.dumps({"num_qubits": args.qubits,
                      "operations": [op.to_dict() for op in ops]}, indent=2))
    return 0


def cmd_serve(args):
    """Run the dashboard API."""
    from ..dashboard import launch
    launch(port=args.port, host=args.host, debug=args.debug)
    return 0


def cmd_info(args):
    """Show qfluency information."""
    from .. import __version__
    from ..config import MAX_QUBITS_CEILING

    print(f"""
qfluency v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Learn quantum computing through four synchronized views:
plain language, code, circuit diagram and math notation.

Simulator:
  • Exact state vector, up to {MAX_QUBITS_CEILING} qubits
  • Gates: I X Y Z H S T, RX RY RZ, CNOT CZ
  • Measurement with state collapse (seedable)

Usage:
  qfluency run bell
  qfluency run circuit.json --steps
  qfluency views circuit.json
  qfluency serve
""")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    from ..errors import SimulatorError
    from ..logging_config import configure_logging

    parser = argparse.ArgumentParser(
        prog='qfluency',
        description='Educational quantum circuit simulator'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Simulate a circuit')
    run_parser.add_argument('file', help='Circuit JSON file or "bell" for demo')
    run_parser.add_argument('--qubits', type=int, help='Register size (default: inferred)')
    run_parser.add_argument('--seed', type=int, help='Measurement seed')
    run_parser.add_argument('--steps', action='store_true', help='Show state after each operation')
    run_parser.add_argument('--json', action='store_true', help='Output JSON')
    run_parser.set_defaults(func=cmd_run)

    views_parser = subparsers.add_parser('views', help='Show the four views of a circuit')
    views_parser.add_argument('file', help='Circuit JSON file or "bell" for demo')
    views_parser.add_argument('--qubits', type=int, help='Register size (default: inferred)')
    views_parser.set_defaults(func=cmd_views)

    random_parser = subparsers.add_parser('random', help='Generate a random practice circuit')
    random_parser.add_argument('--qubits', type=int, default=2)
    random_parser.add_argument('--depth', type=int, default=3)
    random_parser.add_argument('--seed', type=int)
    random_parser.set_defaults(func=cmd_random)

    serve_parser = subparsers.add_parser('serve', help='Run the dashboard API')
    serve_parser.add_argument('--port', type=int, default=8888)
    serve_parser.add_argument('--host', default='127.0.0.1')
    serve_parser.add_argument('--debug', action='store_true')
    serve_parser.set_defaults(func=cmd_serve)

    info_parser = subparsers.add_parser('info', help='Show qfluency info')
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging("DEBUG" if args.verbose else _config(args).log_level)

    try:
        return args.func(args)
    except (SimulatorError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
