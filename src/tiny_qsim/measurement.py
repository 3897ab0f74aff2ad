"""
Measurement of a simulated register.

Reads outcome probabilities from the final amplitude vector and performs
projective measurement: full-register collapse to one basis state, or
single-wire collapse with renormalisation of the surviving amplitudes.
"""

from __future__ import annotations

from typing import Union

import numpy as np
from numpy import ndarray

from tiny_qsim.basis import BasisState, Qubit
from tiny_qsim.config import DEFAULT_TOLERANCE
from tiny_qsim.errors import ConfigurationError, NotSimulatedError
from tiny_qsim.logging import get_logger
from tiny_qsim.statevector import AmplitudeVector

logger = get_logger(__name__)

Outcome = Union[int, BasisState]
Seed = Union[int, np.random.Generator, None]


class Measurement:
    """
    Outcome statistics and collapse for an amplitude vector.

    Parameters
    ----------
    amplitudes : AmplitudeVector
        Final state of a run.
    tolerance : float
        Probabilities at or below this are not reported.

    Example
    -------
    >>> m = Circuit(2).h(0).cx(0, 1).run()
    >>> [(str(s), round(p, 3)) for s, p in m.probabilities()]
    [('|00>', 0.5), ('|11>', 0.5)]
    >>> m.collapse(3)
    """

    def __init__(self, amplitudes: AmplitudeVector, tolerance: float = DEFAULT_TOLERANCE) -> None:
        self._amplitudes = amplitudes
        self.tolerance = tolerance
        self._collapsed = False
        self._closed = False

    @property
    def n_qubits(self) -> int:
        return self._amplitudes.n_qubits

    @property
    def collapsed(self) -> bool:
        """True once a full-register collapse has happened."""
        return self._collapsed

    @property
    def closed(self) -> bool:
        """True once the owning circuit has been reset."""
        return self._closed

    def close(self) -> None:
        """Detach from the register. Every later read or collapse raises."""
        self._closed = True

    @property
    def amplitudes(self) -> ndarray:
        """Read-only view of the current amplitudes."""
        return self._vector().view()

    # -- Probabilities ------------------------------------------------------

    def probabilities_array(self) -> ndarray:
        """|a|^2 for every basis state, in index order."""
        return np.abs(self._vector().data) ** 2

    def probabilities(self) -> list[tuple[BasisState, float]]:
        """
        Outcome probabilities above the tolerance, ordered by index.

        Returns
        -------
        list of (BasisState, float)
            The probabilities sum to 1 within floating-point tolerance.
        """
        n = self.n_qubits
        probs = self.probabilities_array()
        return [
            (BasisState.from_index(int(i), n), float(probs[i]))
            for i in np.flatnonzero(probs > self.tolerance)
        ]

    def probability(self, outcome: Outcome) -> float:
        """Probability of a single basis state."""
        return abs(self._vector()[self._outcome_index(outcome)]) ** 2

    def expectation_z(self, wire: int) -> float:
        """<Z> on one wire: P(ZERO) - P(ONE)."""
        p0, p1 = self._wire_probabilities(wire)
        return p0 - p1

    # -- Collapse -----------------------------------------------------------

    def collapse(self, outcome: Outcome) -> None:
        """
        Force the register into a single basis state.

        Terminal for the state: further gates need a fresh run. Collapsing
        twice to the same outcome leaves the vector unchanged.
        """
        index = self._outcome_index(outcome)
        self._vector().set_basis_state(index)
        self._collapsed = True
        logger.debug("collapsed to %s", BasisState.from_index(index, self.n_qubits))

    def measure(self, rng: Seed = None) -> BasisState:
        """Draw one outcome from the distribution and collapse to it."""
        rng = np.random.default_rng(rng)
        probs = self.probabilities_array()
        probs /= probs.sum()
        index = int(rng.choice(len(probs), p=probs))
        self.collapse(index)
        return BasisState.from_index(index, self.n_qubits)

    def measure_qubit(self, wire: int, rng: Seed = None) -> Qubit:
        """
        Projective measurement of one wire.

        Amplitudes inconsistent with the outcome are zeroed and the rest are
        renormalised, so the other wires stay in superposition.
        """
        rng = np.random.default_rng(rng)
        p0, p1 = self._wire_probabilities(wire)
        total = p0 + p1
        outcome = Qubit.ZERO if rng.random() < p0 / total else Qubit.ONE

        halves = self._split(wire)
        halves[:, 1 - int(outcome), :] = 0
        kept = p0 if outcome is Qubit.ZERO else p1
        data = self._vector().data
        data /= np.sqrt(kept)
        logger.debug("measured wire %d -> %d (p=%.6f)", wire, int(outcome), kept / total)
        return outcome

    # -- Sampling -----------------------------------------------------------

    def sample(self, shots: int = 1024, seed: Seed = None) -> dict[str, int]:
        """
        Draw ``shots`` outcomes without disturbing the state.

        Returns
        -------
        dict[str, int]
            Counts keyed by bitstring, wire 0 leftmost.
        """
        if shots < 1:
            raise ConfigurationError(f"shots must be positive, got {shots}")
        rng = np.random.default_rng(seed)
        probs = self.probabilities_array()
        # Normalize to handle floating point
        probs /= probs.sum()
        outcomes = rng.choice(len(probs), size=shots, p=probs)
        unique, counts = np.unique(outcomes, return_counts=True)
        return {
            format(int(k), f"0{self.n_qubits}b"): int(v)
            for k, v in zip(unique, counts)
        }

    # -- Internal helpers ---------------------------------------------------

    def _vector(self) -> AmplitudeVector:
        if self._closed:
            raise NotSimulatedError(
                "Measurement belongs to a run that has been reset; run the circuit again"
            )
        return self._amplitudes

    def _outcome_index(self, outcome: Outcome) -> int:
        n = self.n_qubits
        if isinstance(outcome, BasisState):
            if outcome.n_qubits != n:
                raise ConfigurationError(
                    f"Outcome {outcome} has {outcome.n_qubits} qubits, register has {n}"
                )
            return outcome.index
        index = int(outcome)
        if not 0 <= index < (1 << n):
            raise ConfigurationError(f"Outcome {index} out of range for {n} qubits")
        return index

    def _split(self, wire: int) -> ndarray:
        """View of the buffer shaped (left, wire value, right)."""
        n = self.n_qubits
        if not 0 <= wire < n:
            raise ConfigurationError(f"Qubit {wire} out of range for {n}-qubit register")
        return self._vector().data.reshape(1 << wire, 2, 1 << (n - 1 - wire))

    def _wire_probabilities(self, wire: int) -> tuple[float, float]:
        halves = self._split(wire)
        p0 = float(np.sum(np.abs(halves[:, 0, :]) ** 2))
        p1 = float(np.sum(np.abs(halves[:, 1, :]) ** 2))
        return p0, p1

    def __repr__(self) -> str:
        return (
            f"Measurement(n_qubits={self.n_qubits}, collapsed={self._collapsed}, "
            f"closed={self._closed})"
        )
