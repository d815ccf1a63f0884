"""
Shared fixtures for Poseidon tests.

Parameter bundles are expensive to derive, so they are built once per session.
"""

from __future__ import annotations

from typing import List, Tuple

import pytest

from poseidon_sponge.fields import PrimeField
from poseidon_sponge.poseidon import (
    BN254_X5_3,
    BN254_X5_5,
    TEST_PARAMS,
    PoseidonSpec,
    cached_spec,
)
from poseidon_sponge.poseidon.matrix import Matrix
from poseidon_sponge.poseidon.params import unoptimized_parameters


@pytest.fixture(scope="session")
def test_spec() -> PoseidonSpec:
    """Bundle for the lightweight width-3 test instance."""
    return cached_spec(TEST_PARAMS)


@pytest.fixture(scope="session")
def bn254_3_spec() -> PoseidonSpec:
    """Bundle for the BN254, x^5, t=3 reference instance."""
    return cached_spec(BN254_X5_3)


@pytest.fixture(scope="session")
def bn254_5_spec() -> PoseidonSpec:
    """Bundle for the BN254, x^5, t=5 reference instance."""
    return cached_spec(BN254_X5_5)


@pytest.fixture(scope="session")
def bn254_3_tables() -> Tuple[List[List[PrimeField]], Matrix]:
    """Raw Grain constants and MDS matrix of the BN254, t=3 instance."""
    return unoptimized_parameters(BN254_X5_3)
