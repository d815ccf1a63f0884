"""Poseidon permutation and sponge for deriving SNARK transcript challenges."""

from .fields import Fq, Fr, PrimeField
from .poseidon import (
    DEFAULT_PARAMS,
    PoseidonParams,
    PoseidonSponge,
    PoseidonSpec,
    cached_spec,
    derive_spec,
)

__all__ = [
    "Fq",
    "Fr",
    "PrimeField",
    "DEFAULT_PARAMS",
    "PoseidonParams",
    "PoseidonSponge",
    "PoseidonSpec",
    "cached_spec",
    "derive_spec",
]
