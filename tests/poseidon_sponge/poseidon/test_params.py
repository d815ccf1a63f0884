"""
Tests for construction parameters and parameter providers.
"""

import pytest
from pydantic import ValidationError

from poseidon_sponge import config
from poseidon_sponge.fields import Fq, Fr
from poseidon_sponge.metrics import REGISTRY
from poseidon_sponge.poseidon import (
    BN254_X5_3,
    BN254_X5_5,
    DEFAULT_PARAMS,
    TEST_PARAMS,
    PoseidonParams,
    PoseidonSpec,
    PoseidonSponge,
    cached_spec,
    derive_spec,
    spec_from_tables,
)
from poseidon_sponge.poseidon.matrix import cauchy
from poseidon_sponge.poseidon.params import unoptimized_parameters
from poseidon_sponge.types import (
    ConstructionError,
    MdsConstructionError,
    ParameterError,
    SingularMatrixError,
)

SMALL = PoseidonParams(field=Fr, width=3, rounds_f=4, rounds_p=3)


class TestPoseidonParams:
    """Tests for parameter validation."""

    def test_named_sets(self) -> None:
        """The published instances have their reference round counts."""
        assert (BN254_X5_3.width, BN254_X5_3.rounds_f, BN254_X5_3.rounds_p) == (3, 8, 57)
        assert (BN254_X5_5.width, BN254_X5_5.rounds_f, BN254_X5_5.rounds_p) == (5, 8, 60)
        assert BN254_X5_3.field is Fr
        assert BN254_X5_5.rate == 4

    def test_default_follows_environment(self) -> None:
        """The test environment selects the lightweight instance."""
        assert config.POSEIDON_ENV == "test"
        assert DEFAULT_PARAMS == TEST_PARAMS

    @pytest.mark.parametrize(
        "width, rounds_f, rounds_p, message",
        [
            (1, 8, 8, "width must be in"),
            (4096, 8, 8, "width must be in"),
            (3, 9, 8, "rounds_f must be even"),
            (3, 1024, 8, "rounds_f must be in"),
            (3, 8, 1024, "rounds_p must be in"),
        ],
        ids=["width_one", "width_too_large", "odd_full", "too_many_full", "too_many_partial"],
    )
    def test_invalid(self, width: int, rounds_f: int, rounds_p: int, message: str) -> None:
        """Parameters outside the encodable ranges are rejected."""
        with pytest.raises(ValidationError, match=message):
            PoseidonParams(field=Fr, width=width, rounds_f=rounds_f, rounds_p=rounds_p)

    def test_hashable(self) -> None:
        """Equal parameters hash equally, so they can key a cache."""
        again = PoseidonParams(field=Fr, width=3, rounds_f=4, rounds_p=3)
        assert again == SMALL
        assert hash(again) == hash(SMALL)
        assert PoseidonParams(field=Fq, width=3, rounds_f=4, rounds_p=3) != SMALL


class TestProviders:
    """Tests for the derived, tabulated and cached providers."""

    def test_derive_spec(self) -> None:
        """A derived bundle carries everything the permutation reads."""
        spec = derive_spec(SMALL)

        assert spec.params == SMALL
        assert spec.field is Fr
        assert spec.width == 3
        assert spec.rate == 2
        assert spec.plan.rounds_f == 4
        assert spec.plan.rounds_p == 3
        assert spec.mds.size == 3
        assert len(spec.sparse_matrices) == 3

    def test_derive_spec_updates_metrics(self) -> None:
        """Every derivation is counted and timed."""
        before = REGISTRY.get_sample_value("poseidon_parameter_derivations_total") or 0.0
        timed = REGISTRY.get_sample_value("poseidon_parameter_derivation_seconds_count") or 0.0

        derive_spec(SMALL)

        assert REGISTRY.get_sample_value("poseidon_parameter_derivations_total") == before + 1
        assert REGISTRY.get_sample_value("poseidon_parameter_derivation_seconds_count") == timed + 1

    def test_tables_match_derivation(self) -> None:
        """Feeding the Grain output back as tables reproduces the bundle."""
        derived = derive_spec(SMALL)
        constants, mds = unoptimized_parameters(SMALL)

        nested = spec_from_tables(SMALL, mds.rows, constants)
        flat = spec_from_tables(SMALL, mds.rows, [c for row in constants for c in row])

        assert nested == derived
        assert flat == derived

    def test_tables_wrong_mds_shape(self) -> None:
        """The MDS table must be `t x t`."""
        constants, mds = unoptimized_parameters(SMALL)
        with pytest.raises(ParameterError, match="Invalid mds_rows"):
            spec_from_tables(SMALL, mds.rows[:2], constants)

    def test_tables_wrong_flat_length(self) -> None:
        """A flat constant table must hold one full row per round."""
        constants, mds = unoptimized_parameters(SMALL)
        flat = [c for row in constants for c in row]
        with pytest.raises(ParameterError, match="expected 21"):
            spec_from_tables(SMALL, mds.rows, flat[:-1])

    def test_tables_wrong_row_count(self) -> None:
        """A nested constant table must hold one row per round."""
        constants, mds = unoptimized_parameters(SMALL)
        with pytest.raises(ParameterError, match="expected 7x3"):
            spec_from_tables(SMALL, mds.rows, constants[:-1])

    def test_parameter_error_is_value_error(self) -> None:
        """Table mismatches can be handled as plain value errors."""
        _, mds = unoptimized_parameters(SMALL)
        with pytest.raises(ValueError):
            spec_from_tables(SMALL, mds.rows, [])

    def test_tables_singular_mds(self) -> None:
        """An MDS table without an inverse cannot be folded."""
        constants, _ = unoptimized_parameters(SMALL)
        ones = [[Fr.one()] * 3 for _ in range(3)]
        with pytest.raises(SingularMatrixError, match="3x3 matrix is singular"):
            spec_from_tables(SMALL, ones, constants)

    def test_new_surfaces_singular_tables(self) -> None:
        """A provider serving singular tables fails sponge construction."""
        constants, _ = unoptimized_parameters(SMALL)

        def provider(params: PoseidonParams) -> PoseidonSpec:
            ones = [[params.field.one()] * params.width for _ in range(params.width)]
            return spec_from_tables(params, ones, constants)

        with pytest.raises(ConstructionError, match="singular"):
            PoseidonSponge.new(SMALL.rounds_f, SMALL.rounds_p, provider=provider)

    def test_new_surfaces_mds_failure(self) -> None:
        """A provider whose Cauchy generators repeat fails sponge construction."""
        constants, _ = unoptimized_parameters(SMALL)

        def provider(params: PoseidonParams) -> PoseidonSpec:
            xs = [Fr(value=1), Fr(value=1), Fr(value=2)]
            ys = [Fr(value=3), Fr(value=4), Fr(value=5)]
            return spec_from_tables(params, cauchy(xs, ys).rows, constants)

        with pytest.raises(MdsConstructionError, match="row generators are not pairwise distinct"):
            PoseidonSponge.new(SMALL.rounds_f, SMALL.rounds_p, provider=provider)

    def test_cached_spec_shares_bundles(self) -> None:
        """Identical parameters yield the very same bundle object."""
        params = PoseidonParams(field=Fr, width=4, rounds_f=4, rounds_p=2)
        first = cached_spec(params)
        second = cached_spec(PoseidonParams(field=Fr, width=4, rounds_f=4, rounds_p=2))

        assert first is second
        assert isinstance(first, PoseidonSpec)

    def test_bundles_are_immutable(self, test_spec: PoseidonSpec) -> None:
        """Shared bundles cannot be modified."""
        with pytest.raises(AttributeError):
            test_spec.mds = test_spec.pre_sparse_mds  # type: ignore[misc]
