"""
Global configuration for the Poseidon sponge.

This module contains environment-specific settings that apply across all modules.
"""

import os

_SUPPORTED_POSEIDON_ENVS: list[str] = ["prod", "test"]

POSEIDON_ENV = os.environ.get("POSEIDON_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if POSEIDON_ENV not in _SUPPORTED_POSEIDON_ENVS:
    raise ValueError(
        f"Invalid POSEIDON_ENV environment variable: '{POSEIDON_ENV}'. "
        f"Supported values: {_SUPPORTED_POSEIDON_ENVS}"
    )

_RAW_CACHE_SIZE = os.environ.get("POSEIDON_PARAMETER_CACHE_SIZE", "16")

if not _RAW_CACHE_SIZE.isdigit():
    raise ValueError(
        f"Invalid POSEIDON_PARAMETER_CACHE_SIZE environment variable: '{_RAW_CACHE_SIZE}'. "
        "Expected a non-negative integer."
    )

PARAMETER_CACHE_SIZE: int = int(_RAW_CACHE_SIZE)
"""
How many derived parameter bundles the memoizing provider keeps.

Zero disables caching: every call derives a fresh bundle.
"""
