"""Prometheus metrics for the Poseidon sponge."""

from .registry import (
    REGISTRY,
    generate_metrics,
    parameter_derivation_time,
    parameter_derivations,
    permutations,
)

__all__ = [
    "REGISTRY",
    "generate_metrics",
    "parameter_derivation_time",
    "parameter_derivations",
    "permutations",
]
