"""
ASCII circuit diagrams.

Built only from a circuit's recorded steps (labels and placements); the
amplitude vector is never read.

Example output:
    q0: ──[H]──●───
    q1: ──────[X]──
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tiny_qsim.gates import StandardGate

if TYPE_CHECKING:
    from tiny_qsim.circuit import Circuit, Step

# Number of leading control wires, and the label drawn on the targets
CONTROLLED = {
    "cx": (1, "X"), "cnot": (1, "X"), "cy": (1, "Y"), "cz": (1, "Z"),
    "cp": (1, "P"), "crx": (1, "Rx"), "cry": (1, "Ry"), "crz": (1, "Rz"),
    "ccx": (2, "X"), "toffoli": (2, "X"),
    "cswap": (1, "×"), "fredkin": (1, "×"),
}


def _cells(step: Step) -> dict[int, str]:
    gate = step.gate
    n_controls, target_label = 0, step.label
    if isinstance(gate, StandardGate) and gate.name in CONTROLLED:
        n_controls, target_label = CONTROLLED[gate.name]
    elif isinstance(gate, StandardGate) and gate.name == "swap":
        target_label = "×"

    cells = {}
    for idx, q in enumerate(step.placement):
        if idx < n_controls:
            cells[q] = "●"
        elif target_label == "×":
            cells[q] = "×"
        else:
            cells[q] = f"[{target_label}]"
    return cells


def draw_circuit(circuit: Circuit) -> str:
    """
    Draw the circuit as ASCII art, one line per wire.

    Multi-qubit gates span a vertical bar on the wires between their
    outermost qubits.
    """
    n = circuit.n_qubits
    lines: list[list[str]] = [[] for _ in range(n)]

    for step in circuit.steps:
        cells = _cells(step)
        lo, hi = min(step.placement), max(step.placement)
        width = max(len(c) for c in cells.values())
        for q in range(n):
            if q in cells:
                text = cells[q]
            elif lo < q < hi:
                text = "│"
            else:
                text = ""
            lines[q].append(text.center(width, "─"))

    result = []
    for q in range(n):
        prefix = f"q{q}: "
        content = "─".join(lines[q])
        result.append(f"{prefix}──{content}──")
    return "\n".join(result)
