"""
Matrix algebra for the Poseidon linear layer.

Besides `mul_vector`, the operations here exist only to build parameters
(the MDS matrix, its inverse and the sparse decomposition). They are not
meant for general purpose linear algebra and are never used in the
permutation hot path.

The sparse decomposition follows Section B of the supplementary material
of the Poseidon paper (https://eprint.iacr.org/2019/458.pdf).
"""

from __future__ import annotations

import itertools
import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..fields import PrimeField
from ..types import MdsConstructionError, SingularMatrixError

Vector = List[PrimeField]
"""A list of field elements, such as the permutation state."""


@dataclass(frozen=True, slots=True)
class Matrix:
    """An immutable square matrix of field elements, stored row by row."""

    rows: Tuple[Tuple[PrimeField, ...], ...]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[PrimeField]]) -> Matrix:
        """Builds a matrix from nested sequences, checking it is square."""
        size = len(rows)
        if size == 0 or any(len(row) != size for row in rows):
            raise ValueError("Matrix must be square and non-empty.")
        return cls(rows=tuple(tuple(row) for row in rows))

    @classmethod
    def identity(cls, field: type[PrimeField], size: int) -> Matrix:
        """The `size x size` identity matrix over `field`."""
        zero, one = field.zero(), field.one()
        return cls(
            rows=tuple(tuple(one if i == j else zero for j in range(size)) for i in range(size))
        )

    @property
    def size(self) -> int:
        """The dimension of the matrix."""
        return len(self.rows)

    @property
    def field(self) -> type[PrimeField]:
        """The field the entries live in."""
        return type(self.rows[0][0])

    def __getitem__(self, index: int) -> Tuple[PrimeField, ...]:
        return self.rows[index]

    def transpose(self) -> Matrix:
        """Swaps rows and columns."""
        return Matrix(rows=tuple(zip(*self.rows, strict=True)))

    def mul(self, other: Matrix) -> Matrix:
        """Matrix product `self * other`."""
        columns = other.transpose().rows
        return Matrix(
            rows=tuple(tuple(_dot(row, column) for column in columns) for row in self.rows)
        )

    def mul_vector(self, vector: Sequence[PrimeField]) -> Vector:
        """Computes `M * v`."""
        return [_dot(row, vector) for row in self.rows]

    def submatrix(self, rows: Sequence[int], columns: Sequence[int]) -> Matrix:
        """Selects the given rows and columns."""
        return Matrix(rows=tuple(tuple(self.rows[i][j] for j in columns) for i in rows))

    def minor(self) -> Matrix:
        """The `(t-1) x (t-1)` block left after dropping row 0 and column 0."""
        rest = range(1, self.size)
        return self.submatrix(rest, rest)

    def first_column_tail(self) -> Vector:
        """The first column without its first element, called `w` in the paper."""
        return [row[0] for row in self.rows[1:]]

    def invert(self) -> Matrix:
        """
        Inverts the matrix with Gauss-Jordan elimination.

        Raises:
            SingularMatrixError: If the matrix is not invertible.
        """
        size = self.size
        field = self.field
        zero, one = field.zero(), field.one()

        # Augment with the identity: [M | I].
        augmented = [
            list(row) + [one if i == j else zero for j in range(size)]
            for i, row in enumerate(self.rows)
        ]

        for col in range(size):
            # Find a row with a non-zero pivot at or below the diagonal.
            pivot = next((r for r in range(col, size) if not augmented[r][col].is_zero()), None)
            if pivot is None:
                raise SingularMatrixError(size, col)
            augmented[col], augmented[pivot] = augmented[pivot], augmented[col]

            # Normalize the pivot row.
            inv = augmented[col][col].inverse()
            augmented[col] = [e * inv for e in augmented[col]]

            # Eliminate the column from every other row.
            for r in range(size):
                if r == col or augmented[r][col].is_zero():
                    continue
                factor = augmented[r][col]
                augmented[r] = [e - factor * p for e, p in zip(augmented[r], augmented[col])]

        return Matrix(rows=tuple(tuple(row[size:]) for row in augmented))

    def determinant(self) -> PrimeField:
        """Computes the determinant by Gaussian elimination."""
        size = self.size
        field = self.field
        rows = [list(row) for row in self.rows]
        det = field.one()

        for col in range(size):
            pivot = next((r for r in range(col, size) if not rows[r][col].is_zero()), None)
            if pivot is None:
                return field.zero()
            if pivot != col:
                rows[col], rows[pivot] = rows[pivot], rows[col]
                det = -det

            det = det * rows[col][col]
            inv = rows[col][col].inverse()
            for r in range(col + 1, size):
                if rows[r][col].is_zero():
                    continue
                factor = rows[r][col] * inv
                rows[r] = [e - factor * p for e, p in zip(rows[r], rows[col])]

        return det


def _dot(a: Sequence[PrimeField], b: Sequence[PrimeField]) -> PrimeField:
    acc = a[0] * b[0]
    for x, y in zip(a[1:], b[1:], strict=True):
        acc = acc + x * y
    return acc


# =================================================================
# MDS Matrix Builder
# =================================================================


def cauchy(xs: Sequence[PrimeField], ys: Sequence[PrimeField]) -> Matrix:
    """
    Builds the `t x t` Cauchy matrix `M[i][j] = 1 / (x_i + y_j)`.

    A Cauchy matrix is MDS whenever the `xs` are pairwise distinct, the `ys`
    are pairwise distinct and no `x_i + y_j` vanishes.

    Args:
        xs: The `t` row generators.
        ys: The `t` column generators.

    Returns:
        The Cauchy matrix.

    Raises:
        MdsConstructionError: If the generators do not satisfy the conditions.
    """
    width = len(xs)
    if len(ys) != width:
        raise MdsConstructionError(width, f"expected {width} column generators, got {len(ys)}")
    if len(set(xs)) != width:
        raise MdsConstructionError(width, "row generators are not pairwise distinct")
    if len(set(ys)) != width:
        raise MdsConstructionError(width, "column generators are not pairwise distinct")

    rows = []
    for i, x in enumerate(xs):
        row = []
        for j, y in enumerate(ys):
            denominator = x + y
            if denominator.is_zero():
                raise MdsConstructionError(width, f"x_{i} + y_{j} is zero")
            row.append(denominator.inverse())
        rows.append(tuple(row))
    return Matrix(rows=tuple(rows))


def is_mds(matrix: Matrix, sample: int | None = None, rng: random.Random | None = None) -> bool:
    """
    Checks that every square submatrix is invertible.

    Args:
        matrix: The matrix to check.
        sample: If given, check only this many randomly chosen submatrices.
        rng: Generator used for sampling.

    Returns:
        True if no checked submatrix has a zero determinant.
    """
    size = matrix.size
    indices = range(size)

    if sample is None:
        candidates = (
            (rows, cols)
            for k in range(1, size + 1)
            for rows in itertools.combinations(indices, k)
            for cols in itertools.combinations(indices, k)
        )
    else:
        rng = rng or random.Random()
        candidates = (
            (sorted(rng.sample(indices, k)), sorted(rng.sample(indices, k)))
            for k in (rng.randint(1, size) for _ in range(sample))
        )

    return all(
        not matrix.submatrix(rows, cols).determinant().is_zero() for rows, cols in candidates
    )


# =================================================================
# Sparse MDS Decomposition
# =================================================================


@dataclass(frozen=True, slots=True)
class SparseMDSMatrix:
    """
    A sparse matrix of the form `[[row], [col_hat | I]]`.

    It replaces the dense MDS matrix in the linear layer of partial rounds,
    reducing the cost of that layer from `O(t^2)` to `O(t)`.
    """

    row: Tuple[PrimeField, ...]
    """The whole first row."""

    col_hat: Tuple[PrimeField, ...]
    """The first column without its first element."""

    def apply(self, state: Sequence[PrimeField]) -> Vector:
        """Computes `S * state`."""
        first = _dot(self.row, state)
        return [first] + [c * state[0] + s for c, s in zip(self.col_hat, state[1:], strict=True)]

    def to_matrix(self) -> Matrix:
        """Expands the sparse form into a dense matrix."""
        field = type(self.row[0])
        zero, one = field.zero(), field.one()
        rows = [self.row]
        for i, c in enumerate(self.col_hat, start=1):
            rows.append((c,) + tuple(one if j == i else zero for j in range(1, len(self.row))))
        return Matrix(rows=tuple(rows))

    @classmethod
    def from_matrix(cls, matrix: Matrix) -> SparseMDSMatrix:
        """
        Reads a dense matrix that is already in sparse form.

        Raises:
            ValueError: If the lower-right block is not the identity.
        """
        field = matrix.field
        zero, one = field.zero(), field.one()
        for i, row in enumerate(matrix.rows[1:], start=1):
            for j, e in enumerate(row[1:], start=1):
                if e != (one if i == j else zero):
                    raise ValueError("Matrix is not in sparse [[row], [col_hat | I]] form.")
        return cls(row=matrix.rows[0], col_hat=tuple(matrix.first_column_tail()))


def factorise(matrix: Matrix) -> Tuple[Matrix, SparseMDSMatrix]:
    """
    Factorises `M` into `M' * M''` where `M''` is sparse.

    With `M = [[m_00, v], [w, M_hat]]`:

    - `M'  = [[1, 0], [0, M_hat]]` carries over to the next factorisation step.
    - `M'' = [[m_00, v], [w_hat, I]]` with `w_hat = M_hat^-1 * w`.

    The returned sparse factor is the transpose of `M''` since the
    decomposition works on transposed matrices.

    Returns:
        The pair `(M', M''^T)`.
    """
    field = matrix.field
    size = matrix.size
    zero, one = field.zero(), field.one()

    m_hat = matrix.minor()
    w_hat = m_hat.invert().mul_vector(matrix.first_column_tail())

    # [[1 | 0], [0 | M_hat]]
    prime = Matrix(
        rows=(tuple(one if j == 0 else zero for j in range(size)),)
        + tuple((zero,) + row for row in m_hat.rows)
    )

    # [[m_00 | v], [w_hat | I]]
    prime_prime = Matrix(
        rows=(matrix.rows[0],)
        + tuple(
            (w,) + tuple(one if j == i else zero for j in range(1, size))
            for i, w in enumerate(w_hat, start=1)
        )
    )

    return prime, SparseMDSMatrix.from_matrix(prime_prime.transpose())


def sparse_decomposition(mds: Matrix, rounds_p: int) -> Tuple[List[SparseMDSMatrix], Matrix]:
    """
    Decomposes the MDS matrix for every partial round.

    The dense MDS multiplications of the partial rounds are rewritten as one
    dense "pre-sparse" matrix applied at the end of the first full-round half,
    followed by one sparse matrix per partial round.

    Args:
        mds: The dense MDS matrix.
        rounds_p: The number of partial rounds.

    Returns:
        The sparse matrices in application order and the pre-sparse matrix.

    Raises:
        SingularMatrixError: If a minor of the accumulator is not invertible.
    """
    mds_t = mds.transpose()
    acc = mds_t
    sparse_matrices = []
    for _ in range(rounds_p):
        m_prime, m_prime_prime = factorise(acc)
        acc = mds_t.mul(m_prime)
        sparse_matrices.append(m_prime_prime)

    sparse_matrices.reverse()
    return sparse_matrices, acc.transpose()
