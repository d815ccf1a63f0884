"""
Optimized round constants.

Constant additions commute with the linear layer once they are pushed
through the inverse MDS matrix: `M * x + c = M * (x + M^-1 * c)`. Folding
the constants this way lets every partial round add a single scalar to the
first state element instead of a full vector. The remaining contribution of
the partial-round constants is collected into one compensation vector that
is added at the end of the first full-round half.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..fields import PrimeField
from ..types import StrictBaseModel
from .matrix import Matrix

ConstantRow = Tuple[PrimeField, ...]


class OptimizedConstants(StrictBaseModel):
    """
    Round constants rewritten for the optimized permutation.

    Full rounds carry `t`-sized vectors, partial rounds a single element.
    """

    start: Tuple[ConstantRow, ...]
    """
    Constants of the first full-round half.

    Holds `R_F / 2 + 1` vectors. The first one is added before the first
    S-box. The last one is the compensation vector of the partial rounds.
    """

    partial: Tuple[PrimeField, ...]
    """One scalar per partial round, added to the first state element."""

    end: Tuple[ConstantRow, ...]
    """
    Constants of the second full-round half.

    Holds `R_F / 2 - 1` vectors: the final round adds no constant.
    """


def optimize_constants(
    rounds_f: int,
    rounds_p: int,
    constants: Sequence[Sequence[PrimeField]],
    mds: Matrix,
) -> OptimizedConstants:
    """
    Folds unoptimized round constants through the inverse MDS matrix.

    Args:
        rounds_f: Total number of full rounds.
        rounds_p: Number of partial rounds.
        constants: `R_F + R_P` full-width constant rows, one per round.
        mds: The dense MDS matrix.

    Returns:
        The folded constants.

    Raises:
        SingularMatrixError: If the MDS matrix cannot be inverted.
    """
    half = rounds_f // 2
    if len(constants) != rounds_f + rounds_p:
        raise ValueError(f"Expected {rounds_f + rounds_p} constant rows, got {len(constants)}")

    inverse_mds = mds.invert()
    zero = mds.field.zero()

    # First half: the very first row stays as is, the others move behind the MDS.
    start: List[ConstantRow] = [tuple(constants[0])]
    start.extend(tuple(inverse_mds.mul_vector(row)) for row in constants[1:half])

    # Partial rounds, walked backwards from the first row of the second half.
    #
    # Each step keeps only the first element of the pushed-back vector as the
    # round scalar and carries the rest into the previous round.
    acc = list(constants[half + rounds_p])
    partial: List[PrimeField] = [zero] * rounds_p
    for i in reversed(range(rounds_p)):
        tmp = inverse_mds.mul_vector(acc)
        partial[i] = tmp[0]
        tmp[0] = zero
        acc = [t + c for t, c in zip(tmp, constants[half + i], strict=True)]
    start.append(tuple(inverse_mds.mul_vector(acc)))

    # Second half: the first row was consumed above, the final round has none.
    end = tuple(tuple(inverse_mds.mul_vector(row)) for row in constants[half + rounds_p + 1 :])

    return OptimizedConstants(start=tuple(start), partial=tuple(partial), end=end)
