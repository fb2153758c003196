"""Example: Build a Bell state with qfluency and sample it."""
import sys
sys.path.insert(0, 'src')

from collections import Counter

from qfluency import QuantumSimulator, render_views
from qfluency.circuit import load_operations

SHOTS = 1000

print("=" * 50)
print("qfluency: Bell State Example")
print("=" * 50)

num_qubits, ops = load_operations("examples/circuits/bell_state.json")
views = render_views(num_qubits, ops)
print("\n" + views["circuit"])
print("\n" + views["math"])

sim = QuantumSimulator(seed=2024).initialize(num_qubits)
counts = Counter(sim.simulate_circuit(ops).bitstring() for _ in range(SHOTS))

print("\nMeasurement Results:")
for state, count in sorted(counts.items()):
    print(f"  |{state}⟩: {count:4d} ({100*count/SHOTS:5.1f}%)")

print("\nExpected: ~50% |00⟩ and ~50% |11⟩ (entangled!)")
