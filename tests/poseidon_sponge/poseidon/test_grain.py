"""
Tests for the Grain LFSR that derives round constants and MDS generators.
"""

import pytest

from poseidon_sponge.fields import Fq, Fr
from poseidon_sponge.poseidon.grain import STATE_BITS, Grain, initial_sequence


def _bits(text: str) -> list[bool]:
    return [c == "1" for c in text.replace(" ", "")]


def test_initial_sequence_layout() -> None:
    """The seed packs the instance description most significant bit first."""
    seed = initial_sequence(field_bits=254, width=3, rounds_f=8, rounds_p=57)

    expected = _bits(
        "01"  # prime field
        " 0000"  # x^alpha S-box
        " 000011111110"  # 254-bit field
        " 000000000011"  # t = 3
        " 0000001000"  # R_F = 8
        " 0000111001"  # R_P = 57
    ) + [True] * 30

    assert len(seed) == STATE_BITS
    assert seed == expected


@pytest.mark.parametrize(
    "field_bits, width, rounds_f, rounds_p",
    [
        (1 << 12, 3, 8, 57),
        (254, 1 << 12, 8, 57),
        (254, 3, 1 << 10, 57),
        (254, 3, 8, 1 << 10),
    ],
    ids=["field_bits", "width", "rounds_f", "rounds_p"],
)
def test_initial_sequence_overflow(
    field_bits: int, width: int, rounds_f: int, rounds_p: int
) -> None:
    """Values that do not fit their slot are rejected."""
    with pytest.raises(ValueError, match="does not fit"):
        initial_sequence(field_bits, width, rounds_f, rounds_p)


def test_determinism() -> None:
    """Two generators with the same seed produce the same stream."""
    first = Grain(Fr, 3, 8, 8)
    second = Grain(Fr, 3, 8, 8)
    assert [first.next_field_element() for _ in range(5)] == [
        second.next_field_element() for _ in range(5)
    ]


@pytest.mark.parametrize(
    "other",
    [(Fr, 5, 8, 8), (Fr, 3, 8, 9), (Fr, 3, 10, 8), (Fq, 3, 8, 8)],
    ids=["width", "rounds_p", "rounds_f", "field"],
)
def test_seed_depends_on_every_parameter(other: tuple) -> None:
    """Changing any part of the instance changes the stream."""
    base = Grain(Fr, 3, 8, 8).next_field_element()
    field, width, rounds_f, rounds_p = other
    assert Grain(field, width, rounds_f, rounds_p).next_field_element().value != base.value


def test_generate_shapes() -> None:
    """One full-width row per round plus a square MDS matrix."""
    constants, mds = Grain(Fr, 4, 8, 10).generate()

    assert len(constants) == 18
    assert all(len(row) == 4 for row in constants)
    assert all(isinstance(c, Fr) and c.value < Fr.P for row in constants for c in row)
    assert mds.size == 4


def test_generate_matches_manual_draws() -> None:
    """Constants are drawn first, then the Cauchy generators."""
    constants, mds = Grain(Fr, 2, 2, 1).generate()

    grain = Grain(Fr, 2, 2, 1)
    manual = [[grain.next_field_element() for _ in range(2)] for _ in range(3)]
    xs = [grain.next_field_element_without_rejection() for _ in range(2)]
    ys = [grain.next_field_element_without_rejection() for _ in range(2)]

    assert constants == manual
    assert mds[0][1] == (xs[0] + ys[1]).inverse()
    assert mds[1][0] == (xs[1] + ys[0]).inverse()
