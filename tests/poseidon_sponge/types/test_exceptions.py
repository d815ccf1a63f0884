"""Tests for the exception hierarchy."""

import pytest

from poseidon_sponge.types import (
    ConstructionError,
    InputLengthError,
    MdsConstructionError,
    ParameterError,
    PoseidonError,
    SingularMatrixError,
    StateWidthError,
)


@pytest.mark.parametrize(
    "error, bases",
    [
        (ParameterError("mds_rows", 2, "must be 3x3"), (PoseidonError, ValueError)),
        (StateWidthError(expected=3, actual=2), (PoseidonError, ValueError)),
        (InputLengthError("MerkleHash", expected=2, actual=1), (PoseidonError, ValueError)),
        (MdsConstructionError(3, "bad"), (ConstructionError, PoseidonError)),
        (SingularMatrixError(2, 1), (ConstructionError, PoseidonError)),
    ],
    ids=["parameter", "state_width", "input_length", "mds", "singular"],
)
def test_hierarchy(error: PoseidonError, bases: tuple[type[Exception], ...]) -> None:
    """Every error is a PoseidonError, caller mistakes are also ValueErrors."""
    for base in bases:
        assert isinstance(error, base)


def test_construction_errors_are_not_value_errors() -> None:
    """Construction failures are not mistaken for bad caller input."""
    assert not isinstance(MdsConstructionError(3, "bad"), ValueError)


def test_messages_and_attributes() -> None:
    """Errors keep their context as attributes and in the message."""
    error = ParameterError("constants", "20 elements", "expected 21")
    assert error.name == "constants"
    assert error.value == "20 elements"
    assert str(error) == "Invalid constants='20 elements': expected 21"
    assert error.message == str(error)

    width = StateWidthError(expected=3, actual=4)
    assert (width.expected, width.actual) == (3, 4)
    assert str(width) == "Input state must have length 3, got 4"

    singular = SingularMatrixError(2, 1)
    assert str(singular) == "2x2 matrix is singular (no pivot in column 1)"

    mds = MdsConstructionError(3, "x_0 + y_1 is zero")
    assert str(mds) == "Cannot build a 3x3 MDS matrix: x_0 + y_1 is zero"


def test_repr() -> None:
    """The repr shows the class and the message."""
    assert repr(PoseidonError("boom")) == "PoseidonError('boom')"
