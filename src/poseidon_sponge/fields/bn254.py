"""The scalar field of the BN254 curve."""

from typing import ClassVar

from .base import PrimeField

P: int = 21888242871839275222246405745257275088548364400416034343698204186575808495617
"""The BN254 group order r."""

P_BITS: int = 254
"""The number of bits in the prime P."""


class Fr(PrimeField):
    """An element in the BN254 scalar field."""

    P: ClassVar[int] = P
    NUM_BITS: ClassVar[int] = P_BITS
