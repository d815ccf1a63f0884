"""
Poseidon construction parameters and the shared parameter bundle.

A `PoseidonSpec` holds everything the permutation reads: the dense MDS
matrix, the sparse decomposition and the optimized round constants. It is
immutable, so one bundle can be shared by any number of sponges built over
the same parameters.

Bundles come from a `ParameterProvider`. Two interchangeable providers
exist: `derive_spec` computes everything from the Grain LFSR, while
`spec_from_tables` starts from hardcoded constants. Both feed the same
folding and decomposition code and so produce identical bundles from
identical values.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Protocol, Sequence, Tuple

from pydantic import model_validator

from .. import config
from ..fields import Fr, PrimeField
from ..metrics import registry as metrics
from ..types import FrozenModel, ParameterError
from .constants import OptimizedConstants, optimize_constants
from .grain import Grain
from .matrix import Matrix, SparseMDSMatrix, sparse_decomposition
from .rounds import RoundPlan

logger = logging.getLogger(__name__)

MAX_WIDTH = 1 << 12
"""The width is encoded on 12 bits in the Grain seed."""

MAX_ROUNDS = 1 << 10
"""Round counts are encoded on 10 bits in the Grain seed."""


class PoseidonParams(FrozenModel):
    """Construction parameters of a Poseidon instance."""

    field: type[PrimeField]
    """The prime field the permutation works over."""

    width: int
    """The size of the state (t). One element is capacity, the rest is rate."""

    rounds_f: int
    """Total number of full rounds, split evenly around the partial rounds."""

    rounds_p: int
    """Total number of partial rounds."""

    @model_validator(mode="after")
    def check_ranges(self) -> "PoseidonParams":
        """Rejects parameters that cannot describe a Poseidon instance."""
        if not 2 <= self.width < MAX_WIDTH:
            raise ValueError(f"width must be in [2, {MAX_WIDTH}), got {self.width}")
        if not 2 <= self.rounds_f < MAX_ROUNDS:
            raise ValueError(f"rounds_f must be in [2, {MAX_ROUNDS}), got {self.rounds_f}")
        if self.rounds_f % 2 != 0:
            raise ValueError(f"rounds_f must be even, got {self.rounds_f}")
        if not 0 <= self.rounds_p < MAX_ROUNDS:
            raise ValueError(f"rounds_p must be in [0, {MAX_ROUNDS}), got {self.rounds_p}")
        return self

    @property
    def rate(self) -> int:
        """Number of state elements exposed to absorption and squeezing."""
        return self.width - 1


@dataclass(frozen=True)
class PoseidonSpec:
    """The immutable parameter bundle read by the permutation."""

    params: PoseidonParams
    """The parameters this bundle was built for."""

    plan: RoundPlan
    """The full, partial, full round schedule."""

    mds: Matrix
    """The dense MDS matrix used by full rounds."""

    pre_sparse_mds: Matrix
    """The dense matrix applied at the end of the first full-round half."""

    sparse_matrices: Tuple[SparseMDSMatrix, ...]
    """One sparse matrix per partial round, in application order."""

    constants: OptimizedConstants
    """The folded round constants."""

    @property
    def field(self) -> type[PrimeField]:
        """The prime field of the state."""
        return self.params.field

    @property
    def width(self) -> int:
        """The size of the state."""
        return self.params.width

    @property
    def rate(self) -> int:
        """The size of the rate region."""
        return self.params.rate


class ParameterProvider(Protocol):
    """Anything that turns construction parameters into a parameter bundle."""

    def __call__(self, params: PoseidonParams) -> PoseidonSpec: ...


def _assemble(
    params: PoseidonParams,
    constants: Sequence[Sequence[PrimeField]],
    mds: Matrix,
) -> PoseidonSpec:
    """Folds the constants and decomposes the MDS matrix into a bundle."""
    optimized = optimize_constants(params.rounds_f, params.rounds_p, constants, mds)
    sparse_matrices, pre_sparse_mds = sparse_decomposition(mds, params.rounds_p)
    return PoseidonSpec(
        params=params,
        plan=RoundPlan.build(params.rounds_f, params.rounds_p),
        mds=mds,
        pre_sparse_mds=pre_sparse_mds,
        sparse_matrices=tuple(sparse_matrices),
        constants=optimized,
    )


def unoptimized_parameters(params: PoseidonParams) -> Tuple[List[List[PrimeField]], Matrix]:
    """
    Derives the raw round constants and MDS matrix with the Grain LFSR.

    Returns:
        One constant row per round and the Cauchy MDS matrix.
    """
    return Grain(params.field, params.width, params.rounds_f, params.rounds_p).generate()


def derive_spec(params: PoseidonParams) -> PoseidonSpec:
    """
    Builds a parameter bundle from scratch.

    Raises:
        MdsConstructionError: If no MDS matrix can be built for the parameters.
        SingularMatrixError: If the decomposition hits a non-invertible matrix.
    """
    started = time.perf_counter()
    constants, mds = unoptimized_parameters(params)
    spec = _assemble(params, constants, mds)
    elapsed = time.perf_counter() - started

    metrics.parameter_derivations.inc()
    metrics.parameter_derivation_time.observe(elapsed)
    logger.debug(
        "Derived Poseidon parameters (field=%s, width=%d, rounds_f=%d, rounds_p=%d) in %.3fs",
        params.field.__name__,
        params.width,
        params.rounds_f,
        params.rounds_p,
        elapsed,
    )
    return spec


def spec_from_tables(
    params: PoseidonParams,
    mds_rows: Sequence[Sequence[PrimeField]],
    constants: Sequence[PrimeField] | Sequence[Sequence[PrimeField]],
) -> PoseidonSpec:
    """
    Builds a parameter bundle from precomputed tables.

    Args:
        params: The construction parameters the tables belong to.
        mds_rows: The `t x t` MDS matrix, row by row.
        constants: The unoptimized round constants, either one row per round
            or flattened round after round.

    Returns:
        The same bundle `derive_spec` would build from these values.

    Raises:
        ParameterError: If the table sizes do not match the parameters.
    """
    width = params.width
    rounds = params.rounds_f + params.rounds_p

    if len(mds_rows) != width or any(len(row) != width for row in mds_rows):
        raise ParameterError("mds_rows", f"{len(mds_rows)} rows", f"must be {width}x{width}")

    rows: List[List[PrimeField]]
    if constants and isinstance(constants[0], PrimeField):
        flat = list(constants)
        if len(flat) != rounds * width:
            raise ParameterError(
                "constants", f"{len(flat)} elements", f"expected {rounds * width}"
            )
        rows = [flat[i : i + width] for i in range(0, len(flat), width)]
    else:
        rows = [list(row) for row in constants]  # type: ignore[arg-type]
        if len(rows) != rounds or any(len(row) != width for row in rows):
            raise ParameterError("constants", f"{len(rows)} rows", f"expected {rounds}x{width}")

    return _assemble(params, rows, Matrix.from_rows(mds_rows))


@lru_cache(maxsize=config.PARAMETER_CACHE_SIZE)
def cached_spec(params: PoseidonParams) -> PoseidonSpec:
    """
    Memoizing provider.

    Identical parameters share one bundle instead of re-deriving it for every
    sponge. Bundles are immutable, so sharing needs no locking.
    """
    logger.debug("Parameter cache miss for width=%d", params.width)
    return derive_spec(params)


# =================================================================
# Named Parameter Sets
# =================================================================

BN254_X5_3 = PoseidonParams(field=Fr, width=3, rounds_f=8, rounds_p=57)
"""BN254, x^5, t=3: the `poseidonperm_x5_254_3` reference instance."""

BN254_X5_5 = PoseidonParams(field=Fr, width=5, rounds_f=8, rounds_p=60)
"""BN254, x^5, t=5: the `poseidonperm_x5_254_5` reference instance."""

TEST_PARAMS = PoseidonParams(field=Fr, width=3, rounds_f=8, rounds_p=8)
"""A lightweight, insecure instance for test environments."""

DEFAULT_PARAMS = BN254_X5_3 if config.POSEIDON_ENV == "prod" else TEST_PARAMS
"""The instance selected by `POSEIDON_ENV`."""
