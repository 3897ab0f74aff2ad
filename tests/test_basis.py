"""Tests for basis states and index encoding."""

import itertools

import pytest

from tiny_qsim.basis import (
    BasisState,
    Qubit,
    bit_position,
    decode,
    encode,
    extract,
    insert,
    placement_mask,
)


# ---------------------------------------------------------------------------
# encode / decode
# ---------------------------------------------------------------------------

def test_wire_zero_is_most_significant():
    assert encode([1, 0, 0]) == 4
    assert encode([0, 0, 1]) == 1
    assert bit_position(0, 3) == 2


def test_encode_empty_sequence():
    assert encode([]) == 0


@pytest.mark.parametrize("n", [1, 2, 3, 5])
def test_decode_inverts_encode(n):
    for index in range(2**n):
        assert encode(decode(index, n)) == index


def test_decode_returns_qubits():
    assert decode(5, 3) == (Qubit.ONE, Qubit.ZERO, Qubit.ONE)


def test_decode_out_of_range():
    with pytest.raises(ValueError):
        decode(8, 3)
    with pytest.raises(ValueError):
        decode(-1, 3)


# ---------------------------------------------------------------------------
# extract / insert
# ---------------------------------------------------------------------------

def test_extract_reads_in_placement_order():
    # |q0 q1 q2> = |110>
    index = encode([1, 1, 0])
    assert extract(index, 3, (0, 2)) == 0b10
    assert extract(index, 3, (2, 0)) == 0b01
    assert extract(index, 3, (1,)) == 1


def test_insert_overwrites_only_placement_bits():
    index = encode([1, 0, 1, 1])
    new = insert(index, 4, (1, 3), 0b10)
    assert decode(new, 4) == (1, 1, 1, 0)


def _placements(n):
    for k in range(1, n + 1):
        yield from itertools.permutations(range(n), k)


@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_insert_extract_inverse(n):
    for placement in _placements(n):
        for full in range(2**n):
            assert insert(full, n, placement, extract(full, n, placement)) == full


@pytest.mark.parametrize("n", [2, 3, 4])
def test_extract_after_insert(n):
    for placement in _placements(n):
        k = len(placement)
        for sub in range(2**k):
            assert extract(insert(0b1010 % 2**n, n, placement, sub), n, placement) == sub


def test_placement_mask():
    assert placement_mask(3, (0,)) == 0b100
    assert placement_mask(3, (2, 0)) == 0b101
    assert placement_mask(3, ()) == 0


# ---------------------------------------------------------------------------
# BasisState
# ---------------------------------------------------------------------------

def test_basis_state_index_and_str():
    s = BasisState([1, 0, 1])
    assert s.index == 5
    assert s.n_qubits == 3
    assert str(s) == "|101>"
    assert s.bitstring == "101"
    assert s[0] is Qubit.ONE


def test_basis_state_from_bitstring():
    assert BasisState.from_bitstring("0110").index == 6
    assert BasisState.from_bitstring("|11>").index == 3


def test_basis_state_from_index_roundtrip():
    s = BasisState.from_index(6, 4)
    assert s.bitstring == "0110"
    assert BasisState.zeros(3).index == 0


def test_basis_state_equality_by_index():
    a = BasisState([0, 1])
    b = BasisState.from_index(1, 2)
    assert a == b
    assert hash(a) == hash(b)
    assert a != BasisState([1, 0])
    assert len({a, b}) == 1


def test_basis_state_rejects_non_binary():
    with pytest.raises(ValueError):
        BasisState([0, 2])


def test_basis_state_usable_as_index():
    values = list(range(8))
    assert values[BasisState([1, 1, 0])] == 6
