"""
Gate application engine.

Applies a k-qubit gate to an n-qubit amplitude vector in place without
building any matrix. The 2^n indices are partitioned into 2^(n-k)
spectator-fixed groups: the 2^k indices of a group share every bit outside
the gate's wires and differ only on them. A gate can only move amplitude
inside a group, so each group is updated independently:

    1. gather its 2^k amplitudes into a scratch buffer
    2. push every non-zero amplitude through the gate's column mapping,
       accumulating into a second scratch buffer
    3. scatter the second buffer back

Each amplitude is read and written exactly once per gate. Auxiliary memory
is two 2^k buffers plus a 2^k offset table and a 2^k column table, reused
across groups; the gate's columns are evaluated once per application.
"""

from __future__ import annotations

import numbers
from typing import Iterator, Sequence

from tiny_qsim.basis import insert, placement_mask
from tiny_qsim.errors import ConfigurationError, GateDefinitionError
from tiny_qsim.gates import NO_CHANGE, Column, Gate
from tiny_qsim.logging import get_logger
from tiny_qsim.statevector import AmplitudeVector

logger = get_logger(__name__)


def validate_placement(arity: int, placement: Sequence[int], n_qubits: int) -> tuple[int, ...]:
    """
    Check a wire placement against a gate arity and register size.

    Returns
    -------
    tuple of int
        The placement as a tuple.

    Raises
    ------
    ConfigurationError
        On arity mismatch, out-of-range or duplicate wires.
    """
    placement = tuple(placement)
    for q in placement:
        if isinstance(q, bool) or not isinstance(q, numbers.Integral):
            raise ConfigurationError(f"Qubit index must be an int, got {q!r}")
    placement = tuple(int(q) for q in placement)
    if len(placement) != arity:
        raise ConfigurationError(
            f"Gate acts on {arity} qubit(s) but placement {placement} has {len(placement)}"
        )
    for q in placement:
        if not 0 <= q < n_qubits:
            raise ConfigurationError(
                f"Qubit {q} out of range for {n_qubits}-qubit register"
            )
    if len(set(placement)) != len(placement):
        raise ConfigurationError(f"Duplicate qubits in {placement}")
    return placement


def group_offsets(n_qubits: int, placement: Sequence[int]) -> list[int]:
    """In-group offsets: entry ``s`` is the full index of sub-index ``s`` with all spectators 0."""
    return [insert(0, n_qubits, placement, s) for s in range(1 << len(placement))]


def group_bases(n_qubits: int, placement: Sequence[int]) -> Iterator[int]:
    """
    Yield the base index of every spectator-fixed group, in increasing order.

    A base has all placement bits cleared. Successive bases are produced by
    adding one to the spectator bits only: ``((base | mask) + 1) & spectators``.
    """
    mask = placement_mask(n_qubits, placement)
    spectators = ((1 << n_qubits) - 1) & ~mask
    base = 0
    while True:
        yield base
        base = ((base | mask) + 1) & spectators
        if base == 0:
            return


def check_columns(gate: Gate) -> tuple[Column, ...]:
    """
    Evaluate every column of a gate once, before any amplitude moves.

    Returns
    -------
    tuple
        Column table indexed by sub-index, shared by every group.

    Raises
    ------
    GateDefinitionError
        If a column is malformed or names an output outside the gate.
    """
    size = 1 << gate.arity
    columns = []
    for s in range(size):
        column = gate.column(s)
        if column is not NO_CHANGE:
            column = tuple(column)
            for out, _ in column:
                if not 0 <= out < size:
                    raise GateDefinitionError(
                        f"Gate '{gate.label}' maps sub-index {s} to {out}, "
                        f"outside its {gate.arity}-qubit space"
                    )
        columns.append(column)
    return tuple(columns)


def apply_gate(gate: Gate, placement: Sequence[int], amplitudes: AmplitudeVector) -> int:
    """
    Apply ``gate`` on the wires ``placement`` to ``amplitudes`` in place.

    Parameters
    ----------
    gate : StandardGate or CustomGate
        Gate descriptor.
    placement : sequence of int
        Register wire for each gate wire, in gate-wire order.
    amplitudes : AmplitudeVector
        State to update. Must not be aliased elsewhere during the call.

    Returns
    -------
    int
        Number of spectator-fixed groups processed (2^(n-k)).

    Raises
    ------
    ConfigurationError
        If the placement does not fit the gate or register. Raised before
        the vector is touched.
    GateDefinitionError
        If a column is malformed. Also raised before the vector is touched.
    """
    n = amplitudes.n_qubits
    placement = validate_placement(gate.arity, placement, n)
    columns = check_columns(gate)

    size = 1 << len(placement)
    offsets = group_offsets(n, placement)
    data = amplitudes.data
    in_buf = [0j] * size
    out_buf = [0j] * size

    groups = 0
    for base in group_bases(n, placement):
        for s in range(size):
            in_buf[s] = complex(data[base | offsets[s]])
            out_buf[s] = 0j

        for s in range(size):
            amp = in_buf[s]
            if amp == 0:
                continue
            col = columns[s]
            if col is NO_CHANGE:
                out_buf[s] += amp
                continue
            for out, coeff in col:
                out_buf[out] += amp * coeff

        for s in range(size):
            data[base | offsets[s]] = out_buf[s]
        groups += 1

    logger.debug("applied %s on %s: %d group(s) of %d", gate.label, placement, groups, size)
    return groups
