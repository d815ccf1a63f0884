"""
Metric registry using prometheus_client.

Counts permutation calls and parameter derivations so callers can see how
much work their transcripts trigger.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for Poseidon metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Permutation
# -----------------------------------------------------------------------------

permutations = Counter(
    "poseidon_permutations",
    "Total Poseidon permutations run by sponges and hashers",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Parameter Derivation
# -----------------------------------------------------------------------------

parameter_derivations = Counter(
    "poseidon_parameter_derivations",
    "Total parameter bundles derived from the Grain LFSR",
    registry=REGISTRY,
)

parameter_derivation_time = Histogram(
    "poseidon_parameter_derivation_seconds",
    "Time to derive round constants, MDS matrix and sparse decomposition",
    registry=REGISTRY,
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
