"""Example: Bell state and a two-qubit Grover search on tiny-qsim."""

from tiny_qsim import NO_CHANGE, Circuit, LoggingProgress, custom_gate
from tiny_qsim.logging import set_log_level

print("=" * 50)
print("tiny-qsim: Bell State Example")
print("=" * 50)

qc = Circuit(2).h(0).cx(0, 1)
print(qc.draw())

m = qc.run()
print("\nProbabilities:")
for state, prob in m.probabilities():
    print(f"  {state}: {prob:.3f}")

counts = m.sample(shots=1000, seed=42)
print("\nMeasurement Results:")
for bits, count in sorted(counts.items()):
    print(f"  |{bits}⟩: {count:4d} ({100*count/1000:5.1f}%)")

print("\nExpected: ~50% |00⟩ and ~50% |11⟩ (entangled!)")


@custom_gate(2, label="ORACLE")
def mark_11(state):
    """Phase-flip |11>, leave everything else alone."""
    if state.bitstring == "11":
        return [(state, -1.0)]
    return NO_CHANGE


print("\n" + "=" * 50)
print("Grover search for |11> with a custom oracle")
print("=" * 50)

set_log_level("INFO")
grover = Circuit(2).h(0).h(1).custom(mark_11, 0, 1)
grover.h(0).h(1).x(0).x(1).cz(0, 1).x(0).x(1).h(0).h(1)
result = grover.run(progress=LoggingProgress())
print(f"P(|11>) = {result.probability(0b11):.3f}")
