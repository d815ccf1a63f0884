"""The scalar field of the Pallas curve (the base field of Vesta)."""

from typing import ClassVar

from .base import PrimeField

P: int = 0x40000000000000000000000000000000224698FC0994A8DD8C46EB2100000001
"""The Pallas group order q = 2^254 + 45560315531506369815346746415080538113."""

P_BITS: int = 255
"""The number of bits in the prime P."""


class Fq(PrimeField):
    """An element in the Pallas scalar field."""

    P: ClassVar[int] = P
    NUM_BITS: ClassVar[int] = P_BITS
