"""Shared definition of an element of a large prime field."""

import secrets
from random import Random
from typing import ClassVar, Self

from pydantic import Field, field_validator

from poseidon_sponge.types import StrictBaseModel


class PrimeField(StrictBaseModel):
    """
    An element in a prime field F_p.

    Concrete fields subclass this and pin the class constants. Elements are
    immutable: every operation returns a new element.
    """

    P: ClassVar[int]
    """The field modulus."""

    NUM_BITS: ClassVar[int]
    """The bit length of the modulus."""

    value: int = Field(ge=0, description="Field element value in the range [0, P)")

    @field_validator("value", mode="before")
    @classmethod
    def reduce_modulo_p(cls, v: int) -> int:
        """Reduces an integer input modulo P before validation."""
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError(f"Field element value must be an int, got {type(v).__name__}")
        return v % cls.P

    @classmethod
    def num_bytes(cls) -> int:
        """The size of a canonical encoding in bytes."""
        return (cls.NUM_BITS + 7) // 8

    @classmethod
    def zero(cls) -> Self:
        """The additive identity."""
        return cls(value=0)

    @classmethod
    def one(cls) -> Self:
        """The multiplicative identity."""
        return cls(value=1)

    @classmethod
    def random(cls, rng: Random | None = None) -> Self:
        """
        Samples a uniformly random element.

        Args:
            rng: Optional seeded generator. Without it a secure source is used.

        Returns:
            A random field element.
        """
        if rng is None:
            return cls(value=secrets.randbelow(cls.P))
        return cls(value=rng.randrange(cls.P))

    def is_zero(self) -> bool:
        """Whether this is the additive identity."""
        return self.value == 0

    def _check_same_field(self, other: object) -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with {type(other).__name__}"
            )

    def __add__(self, other: Self) -> Self:
        """Field addition."""
        self._check_same_field(other)
        return self.__class__(value=self.value + other.value)

    def __sub__(self, other: Self) -> Self:
        """Field subtraction."""
        self._check_same_field(other)
        return self.__class__(value=self.value - other.value)

    def __neg__(self) -> Self:
        """Field negation."""
        return self.__class__(value=-self.value)

    def __mul__(self, other: Self) -> Self:
        """Field multiplication."""
        self._check_same_field(other)
        return self.__class__(value=self.value * other.value)

    def __pow__(self, exponent: int) -> Self:
        """Field exponentiation."""
        return self.__class__(value=pow(self.value, exponent, self.P))

    def inverse(self) -> Self:
        """Computes the multiplicative inverse."""
        if self.value == 0:
            raise ZeroDivisionError("Cannot invert the zero element.")
        # a^(P-2) is the multiplicative inverse of a in F_p
        return self ** (self.P - 2)

    def __truediv__(self, other: Self) -> Self:
        """Field division."""
        return self * other.inverse()

    def __int__(self) -> int:
        return self.value

    def __bytes__(self) -> bytes:
        """
        Serialize the field element using Python's bytes protocol.

        Returns:
            Canonical little-endian representation of the field element.
        """
        return self.value.to_bytes(self.num_bytes(), byteorder="little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Deserialize a field element from its canonical encoding.

        Args:
            data: Little-endian representation of a field element.

        Returns:
            Deserialized field element.

        Raises:
            ValueError: If data has incorrect length or is not canonical.
        """
        if len(data) != cls.num_bytes():
            raise ValueError(f"Expected {cls.num_bytes()} bytes, got {len(data)}")

        value = int.from_bytes(data, byteorder="little")

        if value >= cls.P:
            raise ValueError(f"Value 0x{value:x} exceeds field modulus 0x{cls.P:x}")

        return cls(value=value)
