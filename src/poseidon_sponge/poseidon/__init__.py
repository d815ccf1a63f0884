"""The Poseidon permutation, its parameters and the sponge built on it."""

from .hash import ConstantLengthHash, MerkleHash
from .params import (
    BN254_X5_3,
    BN254_X5_5,
    DEFAULT_PARAMS,
    TEST_PARAMS,
    ParameterProvider,
    PoseidonParams,
    PoseidonSpec,
    cached_spec,
    derive_spec,
    spec_from_tables,
)
from .permutation import permute, permute_reference
from .rounds import RoundKind, RoundPlan
from .sponge import PoseidonSponge, SpongeMode

__all__ = [
    "permute",
    "permute_reference",
    "PoseidonSponge",
    "SpongeMode",
    "ConstantLengthHash",
    "MerkleHash",
    "PoseidonParams",
    "PoseidonSpec",
    "ParameterProvider",
    "RoundKind",
    "RoundPlan",
    "cached_spec",
    "derive_spec",
    "spec_from_tables",
    "BN254_X5_3",
    "BN254_X5_5",
    "TEST_PARAMS",
    "DEFAULT_PARAMS",
]
