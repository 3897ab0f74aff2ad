"""
Computational basis states and their integer encoding.

Bit order: wire 0 is the most significant bit. A register of n qubits in
state |q0 q1 ... q(n-1)> has index ``q0 * 2^(n-1) + ... + q(n-1)``, so the
bitstring of a basis state reads left to right in wire order:

    |100> on 3 qubits -> index 4

``extract`` and ``insert`` use the same convention for gate-local indices:
the first wire of a placement is the most significant bit of the k-bit
sub-index.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Sequence


class Qubit(IntEnum):
    """Definite value of one register slot."""
    ZERO = 0
    ONE = 1


# ---------------------------------------------------------------------------
# Index arithmetic
# ---------------------------------------------------------------------------

def bit_position(wire: int, n_qubits: int) -> int:
    """Position of ``wire`` in the integer index (0 = least significant)."""
    return n_qubits - 1 - wire


def placement_mask(n_qubits: int, placement: Sequence[int]) -> int:
    """Integer with ones at the index bits owned by ``placement``."""
    mask = 0
    for wire in placement:
        mask |= 1 << (n_qubits - 1 - wire)
    return mask


def encode(sequence: Iterable[int]) -> int:
    """Index of a qubit sequence, first element most significant."""
    index = 0
    for value in sequence:
        index = (index << 1) | int(value)
    return index


def decode(index: int, n_qubits: int) -> tuple[Qubit, ...]:
    """Qubit sequence of length ``n_qubits`` for ``index``."""
    if not 0 <= index < (1 << n_qubits):
        raise ValueError(f"Index {index} out of range for {n_qubits} qubits")
    return tuple(
        Qubit((index >> (n_qubits - 1 - wire)) & 1) for wire in range(n_qubits)
    )


def extract(index: int, n_qubits: int, placement: Sequence[int]) -> int:
    """
    Project a full index onto the wires of ``placement``.

    Parameters
    ----------
    index : int
        Full register index.
    n_qubits : int
        Register size.
    placement : sequence of int
        Register wires, in gate-wire order.

    Returns
    -------
    int
        k-bit sub-index; ``placement[0]`` supplies the most significant bit.
    """
    sub = 0
    for wire in placement:
        sub = (sub << 1) | ((index >> (n_qubits - 1 - wire)) & 1)
    return sub


def insert(full_index: int, n_qubits: int, placement: Sequence[int], sub_index: int) -> int:
    """
    Overwrite the ``placement`` bits of ``full_index`` with ``sub_index``.

    All other bits are left untouched, so
    ``insert(i, n, p, extract(i, n, p)) == i`` for every index.
    """
    k = len(placement)
    for j, wire in enumerate(placement):
        pos = n_qubits - 1 - wire
        bit = (sub_index >> (k - 1 - j)) & 1
        full_index = (full_index & ~(1 << pos)) | (bit << pos)
    return full_index


# ---------------------------------------------------------------------------
# BasisState
# ---------------------------------------------------------------------------

class BasisState:
    """
    One definite assignment of every qubit in a register.

    Two basis states compare equal iff their indices are equal.

    Parameters
    ----------
    qubits : iterable of Qubit or int
        Qubit values in wire order.

    Example
    -------
    >>> s = BasisState([1, 0, 1])
    >>> s.index
    5
    >>> str(s)
    '|101>'
    """

    __slots__ = ("_qubits", "_index")

    def __init__(self, qubits: Iterable[int]) -> None:
        values = []
        for q in qubits:
            if q not in (0, 1):
                raise ValueError(f"Qubit value must be 0 or 1, got {q!r}")
            values.append(Qubit(q))
        self._qubits: tuple[Qubit, ...] = tuple(values)
        self._index = encode(self._qubits)

    @classmethod
    def from_index(cls, index: int, n_qubits: int) -> BasisState:
        return cls(decode(index, n_qubits))

    @classmethod
    def from_bitstring(cls, bits: str) -> BasisState:
        """Parse ``"0110"`` or ``"|0110>"``."""
        bits = bits.strip().lstrip("|").rstrip(">").rstrip("⟩")
        return cls(int(b) for b in bits)

    @classmethod
    def zeros(cls, n_qubits: int) -> BasisState:
        return cls([Qubit.ZERO] * n_qubits)

    @property
    def qubits(self) -> tuple[Qubit, ...]:
        return self._qubits

    @property
    def index(self) -> int:
        return self._index

    @property
    def n_qubits(self) -> int:
        return len(self._qubits)

    @property
    def bitstring(self) -> str:
        return "".join(str(int(q)) for q in self._qubits)

    def __len__(self) -> int:
        return len(self._qubits)

    def __getitem__(self, wire: int) -> Qubit:
        return self._qubits[wire]

    def __iter__(self):
        return iter(self._qubits)

    def __int__(self) -> int:
        return self._index

    def __index__(self) -> int:
        return self._index

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BasisState):
            return self._index == other._index
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._index)

    def __repr__(self) -> str:
        return f"BasisState('{self.bitstring}')"

    def __str__(self) -> str:
        return f"|{self.bitstring}>"
