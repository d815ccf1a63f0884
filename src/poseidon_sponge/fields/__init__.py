"""Prime fields the Poseidon sponge is instantiated over."""

from .base import PrimeField
from .bn254 import Fr
from .pallas import Fq

__all__ = [
    "PrimeField",
    "Fr",
    "Fq",
]
