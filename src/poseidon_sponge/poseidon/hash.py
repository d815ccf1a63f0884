"""
Fixed-shape Poseidon hashers.

These complement the sponge when the input shape is known in advance. The
capacity element carries a domain tag that encodes the shape, following
Section 4.2 of the Poseidon paper, so each mode is separated from the
others and from the variable-length sponge.
"""

from __future__ import annotations

from typing import List, Sequence

from ..fields import PrimeField
from ..metrics import registry as metrics
from ..types import InputLengthError
from .params import PoseidonSpec
from .permutation import permute


def constant_length_tag(length: int) -> int:
    """Capacity value for hashing exactly `length` elements into one output."""
    return length << 64


def merkle_tag(arity: int) -> int:
    """Capacity value for a Merkle tree node of the given arity."""
    return (1 << arity) - 1


class ConstantLengthHash:
    """Hashes inputs of a length fixed at construction into one element."""

    def __init__(self, spec: PoseidonSpec, length: int):
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        self.spec = spec
        self.length = length

    def hash(self, elements: Sequence[PrimeField]) -> PrimeField:
        """
        Hashes exactly `length` elements.

        Inputs are zero padded to a multiple of the rate and absorbed one
        chunk per permutation.

        Raises:
            InputLengthError: If the number of elements is not `length`.
        """
        if len(elements) != self.length:
            raise InputLengthError("ConstantLengthHash", expected=self.length, actual=len(elements))

        field = self.spec.field
        rate = self.spec.rate
        state: List[PrimeField] = [field(value=constant_length_tag(self.length))] + [
            field.zero()
        ] * rate

        # An empty input still goes through one permutation.
        chunks = [elements[i : i + rate] for i in range(0, len(elements), rate)] or [[]]
        for chunk in chunks:
            for i, element in enumerate(chunk, start=1):
                state[i] = state[i] + element
            state = permute(state, self.spec)
            metrics.permutations.inc()

        return state[1]


class MerkleHash:
    """
    Stateless Merkle tree node hasher.

    The arity of the tree equals the rate: one node hashes `t - 1` children
    with a single permutation.
    """

    def __init__(self, spec: PoseidonSpec):
        self.spec = spec

    @property
    def arity(self) -> int:
        """Number of children per node."""
        return self.spec.rate

    def hash(self, children: Sequence[PrimeField]) -> PrimeField:
        """
        Hashes the children of a node.

        Raises:
            InputLengthError: If the number of children is not the arity.
        """
        if len(children) != self.arity:
            raise InputLengthError("MerkleHash", expected=self.arity, actual=len(children))

        field = self.spec.field
        state = [field(value=merkle_tag(self.arity))] + list(children)
        state = permute(state, self.spec)
        metrics.permutations.inc()
        return state[1]
