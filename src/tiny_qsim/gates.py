"""
Gate descriptors.

A gate is described by its action on basis states, one column at a time,
never by a matrix. ``column(i)`` takes a k-bit gate-local sub-index and
returns either ``NO_CHANGE`` (|i> -> |i>) or the superposition |i> maps to,
as ``(output_sub_index, coefficient)`` pairs.

Gate categories:
    - Single-qubit: i, x, y, z, h, s, sdg, t, tdg, sx
    - Rotations: rx, ry, rz, p (phase), u1, u2, u3
    - Two-qubit: cx/cnot, cy, cz, swap, iswap
    - Controlled / interaction: cp, crx, cry, crz, rxx, ryy, rzz
    - Three-qubit: ccx/toffoli, cswap/fredkin
    - Custom: any user function over k-qubit basis states

Sub-index convention: the first wire of a gate is the most significant bit,
so for ``cx`` the sub-index is ``control * 2 + target``.
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Sequence, Tuple, Union

from tiny_qsim.basis import BasisState
from tiny_qsim.errors import ConfigurationError, GateDefinitionError, UnknownGateError


class NoChange(Enum):
    """Column result meaning the input basis state is left as is."""
    NO_CHANGE = "no_change"

    def __repr__(self) -> str:
        return "NO_CHANGE"


NO_CHANGE = NoChange.NO_CHANGE

Pairs = Tuple[Tuple[int, complex], ...]
Column = Union[NoChange, Pairs]
Mapping = Callable[[int], Column]
Superposition = Sequence[Tuple[BasisState, complex]]
CustomFunction = Callable[[BasisState], Union[NoChange, Superposition]]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / math.sqrt(2.0)
_T_PHASE = cmath.exp(1j * math.pi / 4)
_TDG_PHASE = cmath.exp(-1j * math.pi / 4)
_SX_DIAG = (1 + 1j) / 2
_SX_OFF = (1 - 1j) / 2

# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

def _identity(i: int) -> Column:
    return NO_CHANGE


def _x(i: int) -> Column:
    return ((i ^ 1, 1.0),)


def _y(i: int) -> Column:
    return ((1, 1j),) if i == 0 else ((0, -1j),)


def _z(i: int) -> Column:
    return NO_CHANGE if i == 0 else ((1, -1.0),)


def _h(i: int) -> Column:
    return ((0, _SQRT2_INV), (1, _SQRT2_INV if i == 0 else -_SQRT2_INV))


def _sx(i: int) -> Column:
    if i == 0:
        return ((0, _SX_DIAG), (1, _SX_OFF))
    return ((0, _SX_OFF), (1, _SX_DIAG))


def _phase_flip(phase: complex) -> Mapping:
    """Diagonal gate diag(1, phase)."""
    def mapping(i: int) -> Column:
        return NO_CHANGE if i == 0 else ((1, phase),)
    return mapping


# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def rx(theta: float) -> Mapping:
    """Rotation around X-axis by angle theta."""
    c = math.cos(theta / 2)
    s = -1j * math.sin(theta / 2)

    def mapping(i: int) -> Column:
        return ((0, c), (1, s)) if i == 0 else ((0, s), (1, c))
    return mapping


def ry(theta: float) -> Mapping:
    """Rotation around Y-axis by angle theta."""
    c = math.cos(theta / 2)
    s = math.sin(theta / 2)

    def mapping(i: int) -> Column:
        return ((0, c), (1, s)) if i == 0 else ((0, -s), (1, c))
    return mapping


def rz(phi: float) -> Mapping:
    """Rotation around Z-axis by angle phi."""
    neg = cmath.exp(-1j * phi / 2)
    pos = cmath.exp(1j * phi / 2)

    def mapping(i: int) -> Column:
        return ((0, neg),) if i == 0 else ((1, pos),)
    return mapping


def p(lam: float) -> Mapping:
    """Phase gate: diag(1, exp(i*lam))."""
    return _phase_flip(cmath.exp(1j * lam))


def u3(theta: float, phi: float, lam: float) -> Mapping:
    """
    Universal single-qubit gate (IBM U3 convention).

    U3(θ, φ, λ) = [[cos(θ/2), -e^(iλ) sin(θ/2)],
                    [e^(iφ) sin(θ/2), e^(i(φ+λ)) cos(θ/2)]]
    """
    c = math.cos(theta / 2)
    s = math.sin(theta / 2)
    col0 = ((0, complex(c)), (1, cmath.exp(1j * phi) * s))
    col1 = ((0, -cmath.exp(1j * lam) * s), (1, cmath.exp(1j * (phi + lam)) * c))

    def mapping(i: int) -> Column:
        return col0 if i == 0 else col1
    return mapping


def u2(phi: float, lam: float) -> Mapping:
    """U2 gate: U3(pi/2, phi, lam)."""
    return u3(math.pi / 2, phi, lam)


def u1(lam: float) -> Mapping:
    """U1 gate: same as the phase gate."""
    return p(lam)


# ---------------------------------------------------------------------------
# Controlled gates
# ---------------------------------------------------------------------------

def controlled(target: Mapping, target_arity: int) -> Mapping:
    """
    Add one control wire in front of ``target``.

    The control is the most significant bit of the new sub-index; the
    target acts on the low ``target_arity`` bits only when it is set.
    """
    control_bit = 1 << target_arity
    low = control_bit - 1

    def mapping(i: int) -> Column:
        if not i & control_bit:
            return NO_CHANGE
        column = target(i & low)
        if column is NO_CHANGE:
            return NO_CHANGE
        return tuple((out | control_bit, coeff) for out, coeff in column)
    return mapping


# ---------------------------------------------------------------------------
# Two-qubit gates
# ---------------------------------------------------------------------------

def _swap(i: int) -> Column:
    if i in (0, 3):
        return NO_CHANGE
    return ((i ^ 3, 1.0),)


def _iswap(i: int) -> Column:
    if i in (0, 3):
        return NO_CHANGE
    return ((i ^ 3, 1j),)


def rxx(theta: float) -> Mapping:
    """Ising XX coupling gate: exp(-i θ/2 XX)."""
    c = math.cos(theta / 2)
    s = -1j * math.sin(theta / 2)

    def mapping(i: int) -> Column:
        return ((i, c), (i ^ 3, s))
    return mapping


def ryy(theta: float) -> Mapping:
    """Ising YY coupling gate: exp(-i θ/2 YY)."""
    c = math.cos(theta / 2)
    s = 1j * math.sin(theta / 2)

    def mapping(i: int) -> Column:
        # |00> and |11> pick up +i sin, |01> and |10> pick up -i sin
        return ((i, c), (i ^ 3, s if i in (0, 3) else -s))
    return mapping


def rzz(theta: float) -> Mapping:
    """Ising ZZ coupling gate: exp(-i θ/2 ZZ)."""
    even = cmath.exp(-1j * theta / 2)
    odd = cmath.exp(1j * theta / 2)

    def mapping(i: int) -> Column:
        return ((i, even if i in (0, 3) else odd),)
    return mapping


def cp(lam: float) -> Mapping:
    """Controlled-Phase gate."""
    return controlled(p(lam), 1)


def crx(theta: float) -> Mapping:
    """Controlled-Rx gate."""
    return controlled(rx(theta), 1)


def cry(theta: float) -> Mapping:
    """Controlled-Ry gate."""
    return controlled(ry(theta), 1)


def crz(phi: float) -> Mapping:
    """Controlled-Rz gate."""
    return controlled(rz(phi), 1)


_CX = controlled(_x, 1)
_CCX = controlled(_CX, 2)
_CSWAP = controlled(_swap, 2)


def _fixed(mapping: Mapping) -> Callable[[], Mapping]:
    return lambda: mapping


# ---------------------------------------------------------------------------
# Gate metadata registry
# ---------------------------------------------------------------------------

GATE_REGISTRY: Dict[str, dict] = {
    # Fixed single-qubit
    "i": {"factory": _fixed(_identity), "n_qubits": 1, "n_params": 0},
    "x": {"factory": _fixed(_x), "n_qubits": 1, "n_params": 0},
    "y": {"factory": _fixed(_y), "n_qubits": 1, "n_params": 0},
    "z": {"factory": _fixed(_z), "n_qubits": 1, "n_params": 0},
    "h": {"factory": _fixed(_h), "n_qubits": 1, "n_params": 0},
    "s": {"factory": _fixed(_phase_flip(1j)), "n_qubits": 1, "n_params": 0},
    "sdg": {"factory": _fixed(_phase_flip(-1j)), "n_qubits": 1, "n_params": 0},
    "t": {"factory": _fixed(_phase_flip(_T_PHASE)), "n_qubits": 1, "n_params": 0},
    "tdg": {"factory": _fixed(_phase_flip(_TDG_PHASE)), "n_qubits": 1, "n_params": 0},
    "sx": {"factory": _fixed(_sx), "n_qubits": 1, "n_params": 0},
    # Parameterized single-qubit
    "rx": {"factory": rx, "n_qubits": 1, "n_params": 1},
    "ry": {"factory": ry, "n_qubits": 1, "n_params": 1},
    "rz": {"factory": rz, "n_qubits": 1, "n_params": 1},
    "p": {"factory": p, "n_qubits": 1, "n_params": 1},
    "u3": {"factory": u3, "n_qubits": 1, "n_params": 3},
    "u2": {"factory": u2, "n_qubits": 1, "n_params": 2},
    "u1": {"factory": u1, "n_qubits": 1, "n_params": 1},
    # Fixed two-qubit
    "cx": {"factory": _fixed(_CX), "n_qubits": 2, "n_params": 0},
    "cnot": {"factory": _fixed(_CX), "n_qubits": 2, "n_params": 0},
    "cy": {"factory": _fixed(controlled(_y, 1)), "n_qubits": 2, "n_params": 0},
    "cz": {"factory": _fixed(controlled(_z, 1)), "n_qubits": 2, "n_params": 0},
    "swap": {"factory": _fixed(_swap), "n_qubits": 2, "n_params": 0},
    "iswap": {"factory": _fixed(_iswap), "n_qubits": 2, "n_params": 0},
    # Parameterized two-qubit
    "cp": {"factory": cp, "n_qubits": 2, "n_params": 1},
    "crx": {"factory": crx, "n_qubits": 2, "n_params": 1},
    "cry": {"factory": cry, "n_qubits": 2, "n_params": 1},
    "crz": {"factory": crz, "n_qubits": 2, "n_params": 1},
    "rxx": {"factory": rxx, "n_qubits": 2, "n_params": 1},
    "ryy": {"factory": ryy, "n_qubits": 2, "n_params": 1},
    "rzz": {"factory": rzz, "n_qubits": 2, "n_params": 1},
    # Three-qubit
    "ccx": {"factory": _fixed(_CCX), "n_qubits": 3, "n_params": 0},
    "toffoli": {"factory": _fixed(_CCX), "n_qubits": 3, "n_params": 0},
    "cswap": {"factory": _fixed(_CSWAP), "n_qubits": 3, "n_params": 0},
    "fredkin": {"factory": _fixed(_CSWAP), "n_qubits": 3, "n_params": 0},
}


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StandardGate:
    """
    A named gate from ``GATE_REGISTRY``.

    Parameters
    ----------
    name : str
        Gate name (case-insensitive).
    params : tuple of float
        Angles for parameterized gates.

    Raises
    ------
    UnknownGateError
        If the name is not in the catalog.
    ConfigurationError
        If the wrong number of parameters is given.
    """

    name: str
    params: Tuple[float, ...] = ()
    _mapping: Mapping = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        key = self.name.lower()
        if key not in GATE_REGISTRY:
            raise UnknownGateError(
                f"Unknown gate: '{self.name}'. Available: {sorted(GATE_REGISTRY)}"
            )
        info = GATE_REGISTRY[key]
        params = tuple(float(v) for v in self.params)
        if len(params) != info["n_params"]:
            raise ConfigurationError(
                f"Gate '{key}' requires {info['n_params']} parameter(s), got {len(params)}"
            )
        object.__setattr__(self, "name", key)
        object.__setattr__(self, "params", params)
        object.__setattr__(self, "_mapping", info["factory"](*params))

    @property
    def arity(self) -> int:
        return GATE_REGISTRY[self.name]["n_qubits"]

    @property
    def label(self) -> str:
        if not self.params:
            return self.name.upper()
        return f"{self.name}({','.join(f'{v:.2f}' for v in self.params)})"

    def column(self, sub_index: int) -> Column:
        return self._mapping(sub_index)


@dataclass(frozen=True)
class CustomGate:
    """
    A gate defined by a user function over k-qubit basis states.

    ``function`` receives a ``BasisState`` of length ``arity`` and returns
    ``NO_CHANGE`` or a sequence of ``(BasisState, complex)`` pairs: the
    column of the unitary for that input. The function must be pure and
    deterministic. Unitarity is the author's responsibility; it is not
    checked.

    Example
    -------
    >>> def flip_if_one(state):
    ...     if state.bitstring == "1":
    ...         return [(BasisState.from_bitstring("1"), -1.0)]
    ...     return NO_CHANGE
    >>> gate = CustomGate(1, flip_if_one, label="Z")
    """

    arity: int
    function: CustomFunction
    label: str = "U"

    def __post_init__(self) -> None:
        if self.arity < 1:
            raise ConfigurationError(f"Custom gate arity must be positive, got {self.arity}")
        if not callable(self.function):
            raise ConfigurationError(f"Custom gate function is not callable: {self.function!r}")

    def column(self, sub_index: int) -> Column:
        result = self.function(BasisState.from_index(sub_index, self.arity))
        if result is NO_CHANGE:
            return NO_CHANGE
        pairs = []
        for entry in result:
            try:
                state, coeff = entry
            except (TypeError, ValueError) as exc:
                raise GateDefinitionError(
                    f"Gate '{self.label}' returned {entry!r}; expected (BasisState, complex)"
                ) from exc
            if not isinstance(state, BasisState):
                raise GateDefinitionError(
                    f"Gate '{self.label}' returned {state!r}; expected a BasisState"
                )
            if state.n_qubits != self.arity:
                raise GateDefinitionError(
                    f"Gate '{self.label}' returned {state} for a {self.arity}-qubit gate"
                )
            pairs.append((state.index, complex(coeff)))
        return tuple(pairs)


Gate = Union[StandardGate, CustomGate]


def standard_gate(name: str, *params: float) -> StandardGate:
    """Look up a catalog gate, e.g. ``standard_gate("rx", 0.5)``."""
    return StandardGate(name, params)


def custom_gate(arity: int, label: str | None = None) -> Callable[[CustomFunction], CustomGate]:
    """
    Decorator turning a basis-state function into a ``CustomGate``.

    Example
    -------
    >>> @custom_gate(2, label="ORACLE")
    ... def oracle(state):
    ...     return [(state, -1.0)] if state.bitstring == "11" else NO_CHANGE
    """
    def wrap(function: CustomFunction) -> CustomGate:
        return CustomGate(arity, function, label or function.__name__.upper())
    return wrap
