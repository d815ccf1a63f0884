"""
The Poseidon permutation.

The design is based on the paper "Poseidon: A New Hash Function for
Zero-Knowledge Proof Systems" (https://eprint.iacr.org/2019/458).

Two variants compute the same function:

- `permute` is the optimized form. It uses folded round constants and
  sparse matrices in the partial rounds.
- `permute_reference` is the textbook form: add constants, S-box, dense MDS
  in every round. It checks the optimized form and the published test
  vectors.
"""

from __future__ import annotations

from typing import List, Sequence

from ..fields import PrimeField
from ..types import StateWidthError
from .matrix import Matrix, Vector
from .params import PoseidonSpec
from .rounds import RoundKind, RoundPlan

S_BOX_DEGREE = 5
"""
The S-box exponent `alpha`.

For fields where `gcd(alpha, p-1) = 1`, `x -> x^alpha` is a permutation.
This holds for the BN254 and Pallas scalar fields.
"""


def sbox(x: PrimeField) -> PrimeField:
    """The S-box `x -> x^5`."""
    return x**S_BOX_DEGREE


def inverse_sbox(x: PrimeField) -> PrimeField:
    """
    The inverse S-box `x -> x^(1/5)`.

    The exponent is the inverse of 5 modulo `p - 1`. Unused by the forward
    permutation.
    """
    return x ** pow(S_BOX_DEGREE, -1, x.P - 1)


def sbox_full(state: Sequence[PrimeField]) -> Vector:
    """Applies the S-box to every element of the state."""
    return [sbox(s) for s in state]


def sbox_partial(state: Sequence[PrimeField]) -> Vector:
    """Applies the S-box to the first element of the state only."""
    return [sbox(state[0])] + list(state[1:])


def add_constants(state: Sequence[PrimeField], constants: Sequence[PrimeField]) -> Vector:
    """Adds a full-width constant vector to the state."""
    return [s + c for s, c in zip(state, constants, strict=True)]


def _check_width(state: Sequence[PrimeField], width: int) -> None:
    if len(state) != width:
        raise StateWidthError(expected=width, actual=len(state))


def permute(state: Sequence[PrimeField], spec: PoseidonSpec) -> List[PrimeField]:
    """
    Performs the optimized Poseidon permutation on the given state.

    The permutation follows the structure:
    Full Rounds -> Partial Rounds -> Full Rounds

    Args:
        state: A list of field elements representing the current state.
        spec: The parameter bundle defining the permutation.

    Returns:
        The new state after applying the permutation.

    Raises:
        StateWidthError: If the state does not match the configured width.
    """
    _check_width(state, spec.width)

    constants = spec.constants
    half = spec.plan.half_rounds_f
    full_index = 0
    partial_index = 0

    # The first constant vector is not folded: it enters before any S-box.
    current = add_constants(state, constants.start[0])

    for kind in spec.plan.rounds:
        if kind is RoundKind.FULL:
            current = sbox_full(current)

            if full_index < half:
                # First half. The last round of this half adds the compensation
                # vector of the partial rounds and enters the sparse form.
                current = add_constants(current, constants.start[full_index + 1])
                matrix = spec.pre_sparse_mds if full_index == half - 1 else spec.mds
            else:
                # Second half. The final round has no constant to add.
                end_index = full_index - half
                if end_index < len(constants.end):
                    current = add_constants(current, constants.end[end_index])
                matrix = spec.mds

            current = matrix.mul_vector(current)
            full_index += 1
        else:
            current = sbox_partial(current)
            current[0] = current[0] + constants.partial[partial_index]
            current = spec.sparse_matrices[partial_index].apply(current)
            partial_index += 1

    return current


def permute_reference(
    state: Sequence[PrimeField],
    plan: RoundPlan,
    constants: Sequence[Sequence[PrimeField]],
    mds: Matrix,
) -> List[PrimeField]:
    """
    Performs the unoptimized Poseidon permutation.

    Every round adds its full constant vector, applies the S-box (to the
    whole state or to the first element) and multiplies by the dense MDS.

    Args:
        state: The input state.
        plan: The round schedule.
        constants: One unoptimized constant row per round.
        mds: The dense MDS matrix.

    Returns:
        The new state after applying the permutation.
    """
    _check_width(state, mds.size)
    if len(constants) != len(plan):
        raise ValueError(f"Expected {len(plan)} constant rows, got {len(constants)}")

    current = list(state)
    for kind, round_constants in zip(plan.rounds, constants, strict=True):
        # Add round constants to the entire state.
        current = add_constants(current, round_constants)
        # Apply the S-box to the full state or to the first element only.
        current = sbox_full(current) if kind is RoundKind.FULL else sbox_partial(current)
        # Apply the MDS matrix for diffusion.
        current = mds.mul_vector(current)

    return current
