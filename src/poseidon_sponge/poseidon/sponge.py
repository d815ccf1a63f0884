"""
The variable-length Poseidon sponge.

### Sponge Algorithm

The state of width `t` is split into one capacity element (index 0) and a
rate region of `t - 1` elements.

1.  **Absorbing**: Inputs are buffered. Each time `rate` of them are pending,
    they are added into the rate region and the state is permuted.

2.  **Padding**: The first squeeze after absorbing appends the pad element
    `1` to whatever is still buffered, zero-fills the rest of the rate
    region and permutes. Inputs of different lengths therefore never end in
    the same state, even when one is a prefix of the other.

3.  **Squeezing**: Outputs are read from the rate region one element at a
    time. Once all `rate` elements of the current state are consumed, the
    state is permuted again.

The capacity element starts as the variable-length domain tag `2^64` and is
never returned.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List

from ..fields import Fr, PrimeField
from ..metrics import registry as metrics
from .params import ParameterProvider, PoseidonParams, PoseidonSpec, cached_spec
from .permutation import permute

VARIABLE_LENGTH_TAG = 1 << 64
"""
Initial capacity value for variable-length hashing with a single output.

The paper sets it to `2^64 + (o - 1)` where `o` is the output length.
"""


class SpongeMode(Enum):
    """Which phase of the sponge the last call belonged to."""

    ABSORBING = "absorbing"
    """Inputs may be pending; the next squeeze pads and permutes first."""

    SQUEEZING = "squeezing"
    """The rate region holds outputs that have not all been read yet."""


class PoseidonSponge:
    """
    An absorb/squeeze sponge over the Poseidon permutation.

    One instance serves one transcript. The parameter bundle is shared and
    read-only, the state is owned by the instance.
    """

    def __init__(self, spec: PoseidonSpec):
        """Creates a sponge with a fresh state for the given parameter bundle."""
        self.spec = spec
        field = spec.field
        self._state: List[PrimeField] = [field(value=VARIABLE_LENGTH_TAG)] + [
            field.zero()
        ] * spec.rate
        self._absorbing: List[PrimeField] = []
        self._cursor = 0
        self.mode = SpongeMode.ABSORBING

    @classmethod
    def new(
        cls,
        rounds_f: int,
        rounds_p: int,
        *,
        field: type[PrimeField] = Fr,
        width: int = 3,
        provider: ParameterProvider = cached_spec,
    ) -> PoseidonSponge:
        """
        Builds a sponge for the given round counts.

        Args:
            rounds_f: Total number of full rounds.
            rounds_p: Number of partial rounds.
            field: The prime field of the state.
            width: The state width `t`.
            provider: Source of the parameter bundle.

        Returns:
            A sponge in its initial state.

        Raises:
            ValidationError: If the parameters are out of range.
            ConstructionError: If matrices or constants cannot be built.
        """
        params = PoseidonParams(field=field, width=width, rounds_f=rounds_f, rounds_p=rounds_p)
        return cls(provider(params))

    @property
    def rate(self) -> int:
        """Number of elements absorbed or squeezed per permutation."""
        return self.spec.rate

    @property
    def pending(self) -> int:
        """Number of buffered inputs not yet absorbed into the state."""
        return len(self._absorbing)

    def update(self, elements: Iterable[PrimeField]) -> None:
        """
        Absorbs field elements.

        Every time `rate` elements are pending they are added into the rate
        region and the state is permuted. Leftovers stay buffered.

        Args:
            elements: The elements to absorb, in order.

        Raises:
            TypeError: If an element belongs to another field.
        """
        self.mode = SpongeMode.ABSORBING
        field = self.spec.field
        for element in elements:
            if type(element) is not field:
                raise TypeError(
                    f"Expected {field.__name__} elements, got {type(element).__name__}"
                )
            self._absorbing.append(element)
            if len(self._absorbing) == self.rate:
                self._absorb(self._absorbing)
                self._absorbing = []

    def squeeze(self) -> PrimeField:
        """
        Produces the next output element.

        Returns:
            A rate-region element of the permuted state.
        """
        if self.mode is SpongeMode.ABSORBING:
            # Pad with a single one; the zero fill comes from adding nothing.
            self._absorb(self._absorbing + [self.spec.field.one()])
            self._absorbing = []
            self.mode = SpongeMode.SQUEEZING
        elif self._cursor == self.rate:
            self._permute()

        output = self._state[1 + self._cursor]
        self._cursor += 1
        return output

    def _absorb(self, chunk: List[PrimeField]) -> None:
        """Adds at most `rate` elements into the rate region and permutes."""
        for i, element in enumerate(chunk, start=1):
            self._state[i] = self._state[i] + element
        self._permute()

    def _permute(self) -> None:
        self._state = permute(self._state, self.spec)
        self._cursor = 0
        metrics.permutations.inc()
