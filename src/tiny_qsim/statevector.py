"""
Dense amplitude vector.

The only memory-heavy object in the simulator: one complex128 buffer of
length 2^n, allocated once and mutated in place by the gate engine.

Memory usage: 2^n * 16 bytes
    - 10 qubits: 16 KB
    - 20 qubits: 16 MB
    - 24 qubits: 256 MB
"""

from __future__ import annotations

from typing import Iterator, Union

import numpy as np
from numpy import ndarray

from tiny_qsim.basis import BasisState

Index = Union[int, BasisState]


class AmplitudeVector:
    """
    Complex amplitudes over all 2^n basis states, indexed by basis index.

    Starts in |00...0>. The ``data`` buffer is handed to the gate engine by
    its owning circuit; everyone else reads through ``view()`` or ``copy()``.

    Parameters
    ----------
    n_qubits : int
        Register size.
    """

    def __init__(self, n_qubits: int) -> None:
        self.n_qubits = n_qubits
        self.dim = 1 << n_qubits
        self.data = np.zeros(self.dim, dtype=np.complex128)
        self.data[0] = 1.0

    def reset(self) -> None:
        """Reset to |00...0> without reallocating."""
        self.set_basis_state(0)

    def set_basis_state(self, index: Index) -> None:
        """Overwrite the vector with a single basis state, amplitude 1."""
        index = self._index(index)
        self.data.fill(0)
        self.data[index] = 1.0

    def norm(self) -> float:
        """Sum of squared magnitudes."""
        return float(np.vdot(self.data, self.data).real)

    def is_normalized(self, tol: float = 1e-9) -> bool:
        return abs(self.norm() - 1.0) <= tol

    def view(self) -> ndarray:
        """Read-only view of the buffer (no copy)."""
        v = self.data.view()
        v.flags.writeable = False
        return v

    def copy(self) -> ndarray:
        """Detached copy of the amplitudes."""
        return self.data.copy()

    def nonzero(self, tol: float = 0.0) -> Iterator[tuple[int, complex]]:
        """Yield ``(index, amplitude)`` for amplitudes with |a|^2 > tol."""
        probs = np.abs(self.data) ** 2
        for index in np.flatnonzero(probs > tol):
            yield int(index), complex(self.data[index])

    def _index(self, index: Index) -> int:
        if isinstance(index, BasisState):
            if index.n_qubits != self.n_qubits:
                raise ValueError(
                    f"Basis state {index} has {index.n_qubits} qubits, "
                    f"register has {self.n_qubits}"
                )
            return index.index
        index = int(index)
        if not 0 <= index < self.dim:
            raise IndexError(f"Index {index} out of range for dimension {self.dim}")
        return index

    def __getitem__(self, index: Index) -> complex:
        return complex(self.data[self._index(index)])

    def __len__(self) -> int:
        return self.dim

    def __repr__(self) -> str:
        return f"AmplitudeVector(n_qubits={self.n_qubits}, dim={self.dim})"
