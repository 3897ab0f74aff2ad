"""Tests for gate descriptors against textbook matrices."""

import numpy as np
import pytest

from tiny_qsim.basis import BasisState
from tiny_qsim.errors import ConfigurationError, GateDefinitionError, UnknownGateError
from tiny_qsim.gates import (
    GATE_REGISTRY,
    NO_CHANGE,
    CustomGate,
    StandardGate,
    custom_gate,
    standard_gate,
)

_R = 1 / np.sqrt(2)


def dense(gate):
    """Reconstruct the unitary column by column (test helper only)."""
    dim = 2**gate.arity
    mat = np.zeros((dim, dim), dtype=np.complex128)
    for i in range(dim):
        col = gate.column(i)
        if col is NO_CHANGE:
            mat[i, i] = 1
            continue
        for out, coeff in col:
            mat[out, i] += coeff
    return mat


def rx(t):
    c, s = np.cos(t / 2), np.sin(t / 2)
    return np.array([[c, -1j * s], [-1j * s, c]])


def ry(t):
    c, s = np.cos(t / 2), np.sin(t / 2)
    return np.array([[c, -s], [s, c]])


def rz(t):
    return np.diag([np.exp(-1j * t / 2), np.exp(1j * t / 2)])


def ctrl(u):
    k = u.shape[0]
    m = np.eye(2 * k, dtype=np.complex128)
    m[k:, k:] = u
    return m


X = np.array([[0, 1], [1, 0]])
Y = np.array([[0, -1j], [1j, 0]])
Z = np.diag([1, -1])
SWAP = np.array([[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]])

THETA = 0.73

TEXTBOOK = [
    ("i", (), np.eye(2)),
    ("x", (), X),
    ("y", (), Y),
    ("z", (), Z),
    ("h", (), np.array([[1, 1], [1, -1]]) * _R),
    ("s", (), np.diag([1, 1j])),
    ("sdg", (), np.diag([1, -1j])),
    ("t", (), np.diag([1, np.exp(1j * np.pi / 4)])),
    ("tdg", (), np.diag([1, np.exp(-1j * np.pi / 4)])),
    ("sx", (), np.array([[1 + 1j, 1 - 1j], [1 - 1j, 1 + 1j]]) / 2),
    ("rx", (THETA,), rx(THETA)),
    ("ry", (THETA,), ry(THETA)),
    ("rz", (THETA,), rz(THETA)),
    ("p", (THETA,), np.diag([1, np.exp(1j * THETA)])),
    ("u1", (THETA,), np.diag([1, np.exp(1j * THETA)])),
    ("cx", (), ctrl(X)),
    ("cnot", (), ctrl(X)),
    ("cy", (), ctrl(Y)),
    ("cz", (), ctrl(Z)),
    ("swap", (), SWAP),
    ("iswap", (), np.array([[1, 0, 0, 0], [0, 0, 1j, 0], [0, 1j, 0, 0], [0, 0, 0, 1]])),
    ("cp", (THETA,), ctrl(np.diag([1, np.exp(1j * THETA)]))),
    ("crx", (THETA,), ctrl(rx(THETA))),
    ("cry", (THETA,), ctrl(ry(THETA))),
    ("crz", (THETA,), ctrl(rz(THETA))),
    ("rzz", (THETA,), np.diag(np.exp(-1j * THETA / 2 * np.array([1, -1, -1, 1])))),
    ("ccx", (), ctrl(ctrl(X))),
    ("toffoli", (), ctrl(ctrl(X))),
    ("cswap", (), ctrl(SWAP)),
    ("fredkin", (), ctrl(SWAP)),
]


# ---------------------------------------------------------------------------
# Catalog equivalence
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("name,params,matrix", TEXTBOOK, ids=[t[0] for t in TEXTBOOK])
def test_standard_gate_matches_textbook(name, params, matrix):
    gate = StandardGate(name, params)
    np.testing.assert_allclose(dense(gate), matrix, atol=1e-12)


@pytest.mark.parametrize("name", ["rxx", "ryy"])
def test_ising_couplings_match_exponential(name):
    # exp(-i t/2 P⊗P) = cos(t/2) I - i sin(t/2) P⊗P
    pauli = {"rxx": X, "ryy": Y}[name]
    pp = np.kron(pauli, pauli)
    expected = np.cos(THETA / 2) * np.eye(4) - 1j * np.sin(THETA / 2) * pp
    np.testing.assert_allclose(dense(StandardGate(name, (THETA,))), expected, atol=1e-12)


def test_u3_matches_definition():
    theta, phi, lam = 0.4, -1.1, 2.3
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    expected = np.array([
        [c, -np.exp(1j * lam) * s],
        [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c],
    ])
    np.testing.assert_allclose(dense(standard_gate("u3", theta, phi, lam)), expected, atol=1e-12)
    np.testing.assert_allclose(
        dense(standard_gate("u2", phi, lam)),
        dense(standard_gate("u3", np.pi / 2, phi, lam)),
        atol=1e-12,
    )


@pytest.mark.parametrize("name", sorted(GATE_REGISTRY))
def test_every_catalog_gate_is_unitary(name):
    params = (0.3,) * GATE_REGISTRY[name]["n_params"]
    mat = dense(StandardGate(name, params))
    np.testing.assert_allclose(mat.conj().T @ mat, np.eye(mat.shape[0]), atol=1e-12)


# ---------------------------------------------------------------------------
# StandardGate metadata
# ---------------------------------------------------------------------------

def test_standard_gate_name_case_insensitive():
    gate = StandardGate("CX")
    assert gate.name == "cx"
    assert gate.arity == 2
    assert gate == StandardGate("cx")
    assert hash(gate) == hash(StandardGate("cx"))


def test_standard_gate_labels():
    assert StandardGate("h").label == "H"
    assert standard_gate("rx", 0.5).label == "rx(0.50)"


def test_unknown_gate():
    with pytest.raises(UnknownGateError):
        StandardGate("warp")
    with pytest.raises(KeyError):
        StandardGate("warp")


def test_wrong_param_count():
    with pytest.raises(ConfigurationError):
        StandardGate("rx")
    with pytest.raises(ConfigurationError):
        StandardGate("h", (0.1,))


def test_controlled_gate_leaves_control_zero_unchanged():
    cx = StandardGate("cx")
    assert cx.column(0b00) is NO_CHANGE
    assert cx.column(0b01) is NO_CHANGE
    assert cx.column(0b10) == ((0b11, 1.0),)


# ---------------------------------------------------------------------------
# CustomGate
# ---------------------------------------------------------------------------

def test_custom_gate_converts_basis_states():
    def flip(state):
        return [(BasisState([1 - q for q in state]), 1.0)]

    gate = CustomGate(2, flip, label="FLIP")
    assert gate.column(0b01) == ((0b10, 1 + 0j),)
    assert gate.label == "FLIP"


def test_custom_gate_no_change():
    gate = CustomGate(1, lambda state: NO_CHANGE)
    assert gate.column(0) is NO_CHANGE
    assert gate.column(1) is NO_CHANGE


def test_custom_gate_decorator():
    @custom_gate(2)
    def oracle(state):
        return [(state, -1.0)] if state.bitstring == "11" else NO_CHANGE

    assert isinstance(oracle, CustomGate)
    assert oracle.label == "ORACLE"
    assert oracle.arity == 2
    np.testing.assert_allclose(dense(oracle), np.diag([1, 1, 1, -1]), atol=1e-12)


def test_custom_gate_wrong_output_width():
    gate = CustomGate(1, lambda state: [(BasisState([0, 0]), 1.0)])
    with pytest.raises(GateDefinitionError):
        gate.column(0)


def test_custom_gate_output_not_basis_state():
    gate = CustomGate(1, lambda state: [(0, 1.0)])
    with pytest.raises(GateDefinitionError):
        gate.column(0)


def test_custom_gate_invalid_definition():
    with pytest.raises(ConfigurationError):
        CustomGate(0, lambda state: NO_CHANGE)
    with pytest.raises(ConfigurationError):
        CustomGate(1, "not callable")
