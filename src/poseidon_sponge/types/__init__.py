"""Reusable type definitions for the Poseidon sponge."""

from .base import FrozenModel, StrictBaseModel
from .exceptions import (
    ConstructionError,
    InputLengthError,
    MdsConstructionError,
    ParameterError,
    PoseidonError,
    SingularMatrixError,
    StateWidthError,
)

__all__ = [
    # Core types
    "FrozenModel",
    "StrictBaseModel",
    # Exceptions
    "PoseidonError",
    "ParameterError",
    "ConstructionError",
    "MdsConstructionError",
    "SingularMatrixError",
    "StateWidthError",
    "InputLengthError",
]
