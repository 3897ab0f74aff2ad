"""
Quantum circuit: register, recorded steps and the run that applies them.

Provides a builder-style API; every gate method returns the circuit so calls
can be chained.

Example
-------
>>> from tiny_qsim import Circuit
>>> qc = Circuit(2).h(0).cx(0, 1)
>>> m = qc.run()
>>> m.sample(shots=1000, seed=7)
{'00': 491, '11': 509}
"""

from __future__ import annotations

import enum
import numbers
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from numpy import ndarray

from tiny_qsim.config import DEFAULT_CONFIG, SimulatorConfig
from tiny_qsim.engine import apply_gate, validate_placement
from tiny_qsim.errors import (
    AlreadySimulatedError,
    ConfigurationError,
    NotSimulatedError,
    SimulationError,
)
from tiny_qsim.gates import GATE_REGISTRY, CustomGate, Gate, StandardGate
from tiny_qsim.logging import get_logger
from tiny_qsim.measurement import Measurement
from tiny_qsim.progress import ProgressReporter
from tiny_qsim.statevector import AmplitudeVector

logger = get_logger(__name__)

Placement = Union[int, Sequence[int]]


# ---------------------------------------------------------------------------
# Step: one recorded gate application
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Step:
    """A gate and the register wires it acts on."""
    gate: Gate
    placement: tuple[int, ...]

    @property
    def label(self) -> str:
        return self.gate.label

    @property
    def n_qubits(self) -> int:
        return len(self.placement)


class RunState(enum.Enum):
    BUILDING = "building"
    SIMULATED = "simulated"
    TAINTED = "tainted"


def _as_placement(placement: Placement) -> tuple:
    if isinstance(placement, (tuple, list)):
        return tuple(placement)
    return (placement,)


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

class Circuit:
    """
    Quantum circuit over a fixed register of ``n_qubits`` qubits.

    The circuit owns the amplitude vector, allocated once here and only
    mutated by ``run()``. Steps can be appended until the run starts; after
    that the step list is frozen until ``reset()``.

    Every gate in ``GATE_REGISTRY`` has a builder method taking its
    parameters first, then its qubits: ``qc.h(0)``, ``qc.rx(0.3, 1)``,
    ``qc.cp(0.5, 0, 2)``, ``qc.ccx(0, 1, 2)``.

    Parameters
    ----------
    n_qubits : int
        Register size, between 1 and ``config.max_qubits``.
    name : str, optional
        Circuit name for display.
    config : SimulatorConfig, optional
        Register bound and numerical tolerance.

    Raises
    ------
    ConfigurationError
        If the register size is out of bounds.
    """

    def __init__(
        self,
        n_qubits: int,
        name: str = "circuit",
        config: SimulatorConfig | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        if isinstance(n_qubits, bool) or not isinstance(n_qubits, numbers.Integral):
            raise ConfigurationError(f"Register size must be an int, got {n_qubits!r}")
        n_qubits = int(n_qubits)
        if not 1 <= n_qubits <= self.config.max_qubits:
            raise ConfigurationError(
                f"Need between 1 and {self.config.max_qubits} qubits, got {n_qubits}"
            )
        self.n_qubits = n_qubits
        self.name = name
        self._steps: list[Step] = []
        self._amplitudes = AmplitudeVector(n_qubits)
        self._state = RunState.BUILDING
        self._measurement: Measurement | None = None

    # -- Properties ---------------------------------------------------------

    @property
    def steps(self) -> tuple[Step, ...]:
        """Recorded steps, in application order (read-only)."""
        return tuple(self._steps)

    @property
    def num_gates(self) -> int:
        return len(self._steps)

    @property
    def depth(self) -> int:
        """Circuit depth (longest path through any qubit)."""
        qubit_depth = [0] * self.n_qubits
        for step in self._steps:
            max_d = max(qubit_depth[q] for q in step.placement)
            for q in step.placement:
                qubit_depth[q] = max_d + 1
        return max(qubit_depth)

    @property
    def is_simulated(self) -> bool:
        return self._state is RunState.SIMULATED

    @property
    def is_tainted(self) -> bool:
        return self._state is RunState.TAINTED

    @property
    def measurement(self) -> Measurement:
        """Measurement of the final state. Requires ``run()``."""
        self._require_results()
        return self._measurement

    @property
    def amplitudes(self) -> ndarray:
        """Read-only view of the final amplitudes. Requires ``run()``."""
        self._require_results()
        return self._amplitudes.view()

    def statevector(self) -> ndarray:
        """Copy of the final amplitudes. Requires ``run()``."""
        self._require_results()
        return self._amplitudes.copy()

    # -- Appending steps ----------------------------------------------------

    def append(self, gate: Gate, placement: Placement) -> Circuit:
        """
        Record ``gate`` acting on ``placement``.

        Parameters
        ----------
        gate : StandardGate or CustomGate
            Gate descriptor.
        placement : int or sequence of int
            Register wire for each gate wire.

        Raises
        ------
        AlreadySimulatedError
            If the circuit has been run.
        ConfigurationError
            On arity mismatch, out-of-range or duplicate wires. The circuit
            is left unchanged.
        """
        self._require_building()
        self._steps.append(self._make_step(gate, placement))
        return self

    def append_many(self, gate: Gate, placements: Iterable[Placement]) -> Circuit:
        """
        Record the same gate on several placements, e.g. H on every wire.

        All placements are validated before any is recorded.
        """
        self._require_building()
        new_steps = [self._make_step(gate, p) for p in placements]
        self._steps.extend(new_steps)
        return self

    def gate(self, name: str, *qubits: int, params: Sequence[float] = ()) -> Circuit:
        """Append a catalog gate by name: ``qc.gate("crz", 0, 2, params=[0.3])``."""
        return self.append(StandardGate(name, tuple(params)), qubits)

    def custom(self, gate: CustomGate, *qubits: int) -> Circuit:
        """Append a custom gate."""
        return self.append(gate, qubits)

    def compose(self, other: Circuit, qubit_map: dict[int, int] | None = None) -> Circuit:
        """
        Append the steps of another circuit to this one.

        Parameters
        ----------
        other : Circuit
            Circuit whose steps are copied.
        qubit_map : dict, optional
            Mapping from other's qubits to this circuit's qubits.
        """
        self._require_building()
        if qubit_map is None:
            if other.n_qubits > self.n_qubits:
                raise ConfigurationError(
                    f"Cannot compose {other.n_qubits}-qubit circuit onto "
                    f"{self.n_qubits}-qubit circuit without qubit_map"
                )
            qubit_map = {i: i for i in range(other.n_qubits)}
        try:
            mapped = [
                (step.gate, tuple(qubit_map[q] for q in step.placement))
                for step in other._steps
            ]
        except KeyError as exc:
            raise ConfigurationError(f"qubit_map has no entry for qubit {exc.args[0]}") from exc
        new_steps = [self._make_step(g, p) for g, p in mapped]
        self._steps.extend(new_steps)
        return self

    def copy(self) -> Circuit:
        """New, unsimulated circuit with the same register and steps."""
        new = Circuit(self.n_qubits, self.name, self.config)
        new._steps = list(self._steps)
        return new

    # -- Simulation ---------------------------------------------------------

    def run(self, progress: ProgressReporter | None = None) -> Measurement:
        """
        Apply every recorded step in order and return the measurement view.

        Parameters
        ----------
        progress : ProgressReporter, optional
            Notified at start, after each step and at the end.

        Returns
        -------
        Measurement
            View over the final amplitude vector.

        Raises
        ------
        AlreadySimulatedError
            If the circuit has already been run (call ``reset()`` first).
        SimulationError
            If a step or the progress reporter fails mid-run. The circuit is
            then tainted: results are unavailable until ``reset()``.
        """
        if self._state is RunState.TAINTED:
            raise SimulationError(f"{self!r} failed during a previous run; call reset()")
        if self._state is RunState.SIMULATED:
            raise AlreadySimulatedError(f"{self!r} has already been run; call reset()")

        progress = progress or ProgressReporter()
        self._state = RunState.SIMULATED
        logger.info("running %r", self)

        try:
            self._apply_steps(progress)
        except SimulationError:
            self._state = RunState.TAINTED
            raise
        except Exception as exc:
            self._state = RunState.TAINTED
            raise SimulationError(f"Progress reporter failed during run: {exc}") from exc

        if self.config.check_norm:
            norm = self._amplitudes.norm()
            if abs(norm - 1.0) > max(self.config.tolerance, 1e-9):
                logger.warning("norm drifted to %.12f after %d step(s)", norm, len(self._steps))

        self._measurement = Measurement(self._amplitudes, self.config.tolerance)
        logger.info("finished %r", self)
        return self._measurement

    def reset(self) -> Circuit:
        """
        Re-initialise the register to |0...0> and allow appending again.

        A ``Measurement`` returned by an earlier run is closed and can no
        longer read or collapse the register.
        """
        if self._measurement is not None:
            self._measurement.close()
        self._amplitudes.reset()
        self._measurement = None
        self._state = RunState.BUILDING
        return self

    # -- Internal helpers ---------------------------------------------------

    def _apply_steps(self, progress: ProgressReporter) -> None:
        progress.start(len(self._steps))
        for position, step in enumerate(self._steps):
            try:
                apply_gate(step.gate, step.placement, self._amplitudes)
            except SimulationError:
                raise
            except Exception as exc:
                raise SimulationError(
                    f"Step {position} ({step.label} on {step.placement}) failed: {exc}"
                ) from exc
            progress.step(position, step)
        progress.done()

    def _make_step(self, gate: Gate, placement: Placement) -> Step:
        if not isinstance(gate, (StandardGate, CustomGate)):
            raise ConfigurationError(f"Expected a StandardGate or CustomGate, got {gate!r}")
        placement = validate_placement(gate.arity, _as_placement(placement), self.n_qubits)
        return Step(gate, placement)

    def _require_building(self) -> None:
        if self._state is not RunState.BUILDING:
            raise AlreadySimulatedError(
                f"Cannot modify {self!r} after simulation has started; call reset()"
            )

    def _require_results(self) -> None:
        if self._state is RunState.TAINTED:
            raise SimulationError(f"{self!r} failed during its run; results are invalid")
        if self._measurement is None:
            raise NotSimulatedError(f"{self!r} has not been run yet")

    # -- Display ------------------------------------------------------------

    def draw(self) -> str:
        """ASCII diagram of the recorded steps."""
        from tiny_qsim.drawing import draw_circuit
        return draw_circuit(self)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return (
            f"Circuit(n_qubits={self.n_qubits}, steps={len(self._steps)}, "
            f"state={self._state.value})"
        )


# ---------------------------------------------------------------------------
# Builder methods: one per catalog gate, parameters first, then qubits
# ---------------------------------------------------------------------------

def _builder(name: str, n_params: int, n_qubits: int):
    signature = ", ".join(
        [f"param{i}" for i in range(n_params)] + [f"q{i}" for i in range(n_qubits)]
    )

    def append_named(self: Circuit, *args) -> Circuit:
        if len(args) != n_params + n_qubits:
            raise ConfigurationError(
                f"{name}({signature}) takes {n_params + n_qubits} argument(s), "
                f"got {len(args)}"
            )
        return self.gate(name, *args[n_params:], params=args[:n_params])

    append_named.__name__ = name
    append_named.__qualname__ = f"Circuit.{name}"
    append_named.__doc__ = f"Append a {name} gate: ``qc.{name}({signature})``."
    return append_named


for _name, _info in GATE_REGISTRY.items():
    setattr(Circuit, _name, _builder(_name, _info["n_params"], _info["n_qubits"]))
