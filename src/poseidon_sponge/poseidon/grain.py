"""
Deterministic derivation of Poseidon round constants and MDS generators.

The derivation uses the Grain LFSR described in Section F of the
supplementary material of the Poseidon paper
(https://eprint.iacr.org/2019/458.pdf). It reproduces the reference
parameter script bit for bit, so constants generated here match the
published test vectors.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Tuple

from ..fields import PrimeField
from .matrix import Matrix, cauchy

FIELD_TYPE = 1
"""Field descriptor: only prime fields are supported."""

SBOX_TYPE = 0
"""S-box descriptor: only the `x^alpha` S-box is supported."""

STATE_BITS = 80
"""The size of the LFSR register."""

WARMUP_STEPS = 160
"""Number of outputs discarded right after seeding."""

TAPS = (0, 13, 23, 38, 51, 62)
"""Register positions XORed together to produce the next bit."""


def _append_bits(bits: List[bool], n: int, value: int) -> None:
    """Appends the `n` low bits of `value`, most significant first."""
    if value >> n:
        raise ValueError(f"{value} does not fit in {n} bits")
    bits.extend(bool((value >> i) & 1) for i in range(n - 1, -1, -1))


def initial_sequence(field_bits: int, width: int, rounds_f: int, rounds_p: int) -> List[bool]:
    """
    Builds the 80-bit seed of the register.

    Layout (most significant bit first):

    | field | sbox | n  | t  | R_F | R_P | padding   |
    |-------|------|----|----|-----|-----|-----------|
    | 2     | 4    | 12 | 12 | 10  | 10  | 30 ones   |
    """
    bits: List[bool] = []
    _append_bits(bits, 2, FIELD_TYPE)
    _append_bits(bits, 4, SBOX_TYPE)
    _append_bits(bits, 12, field_bits)
    _append_bits(bits, 12, width)
    _append_bits(bits, 10, rounds_f)
    _append_bits(bits, 10, rounds_p)
    _append_bits(bits, 30, (1 << 30) - 1)
    assert len(bits) == STATE_BITS
    return bits


class Grain:
    """Grain LFSR bound to a field and a Poseidon instance shape."""

    def __init__(self, field: type[PrimeField], width: int, rounds_f: int, rounds_p: int):
        """Seeds the register and runs the warm-up."""
        self.field = field
        self.width = width
        self.rounds_f = rounds_f
        self.rounds_p = rounds_p
        self._register = deque(
            initial_sequence(field.NUM_BITS, width, rounds_f, rounds_p), maxlen=STATE_BITS
        )
        for _ in range(WARMUP_STEPS):
            self._step()

    def _step(self) -> bool:
        """Advances the register by one position and returns the new bit."""
        register = self._register
        new_bit = False
        for position in TAPS:
            new_bit ^= register[position]
        # The deque drops the oldest bit on append.
        register.append(new_bit)
        return new_bit

    def bits(self) -> Iterator[bool]:
        """
        Yields the filtered output stream.

        Bits are produced in pairs: a `1` first bit keeps the second bit,
        a `0` first bit discards it.
        """
        while True:
            while not self._step():
                self._step()
            yield self._step()

    def _next_integer(self) -> int:
        """Reads `NUM_BITS` output bits as an integer, most significant bit first."""
        value = 0
        stream = self.bits()
        for _ in range(self.field.NUM_BITS):
            value = (value << 1) | next(stream)
        return value

    def next_field_element(self) -> PrimeField:
        """Returns the next element, rejecting candidates that are not below P."""
        while True:
            candidate = self._next_integer()
            if candidate < self.field.P:
                return self.field(value=candidate)

    def next_field_element_without_rejection(self) -> PrimeField:
        """Returns the next element, reducing the candidate modulo P."""
        return self.field(value=self._next_integer())

    def generate(self) -> Tuple[List[List[PrimeField]], Matrix]:
        """
        Derives the unoptimized round constants and the Cauchy MDS matrix.

        The order of draws is part of the format: all round constants first
        (one full-width row per round), then `t` row and `t` column generators.

        Returns:
            `R_F + R_P` constant rows and the MDS matrix.

        Raises:
            MdsConstructionError: If the drawn generators cannot form an MDS matrix.
        """
        constants = [
            [self.next_field_element() for _ in range(self.width)]
            for _ in range(self.rounds_f + self.rounds_p)
        ]
        xs = [self.next_field_element_without_rejection() for _ in range(self.width)]
        ys = [self.next_field_element_without_rejection() for _ in range(self.width)]
        return constants, cauchy(xs, ys)
