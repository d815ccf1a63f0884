"""The ordered sequence of rounds applied by the permutation."""

from __future__ import annotations

from enum import Enum
from itertools import groupby
from typing import List, Tuple

from pydantic import Field, model_validator

from ..types import StrictBaseModel


class RoundKind(Enum):
    """The two kinds of Poseidon rounds."""

    FULL = "full"
    """The S-box is applied to every state element."""

    PARTIAL = "partial"
    """The S-box is applied to the first state element only."""


class RoundPlan(StrictBaseModel):
    """
    The fixed round schedule: `R_F / 2` full, `R_P` partial, `R_F / 2` full.

    The plan is built once and read by both permutation variants, so round
    order and round counts live in exactly one place.
    """

    rounds: Tuple[RoundKind, ...] = Field(min_length=2)

    @model_validator(mode="after")
    def check_shape(self) -> "RoundPlan":
        """Ensures the schedule is full, partial, full with equal full halves."""
        segments = self.segments()
        kinds = [kind for kind, _ in segments]
        if kinds not in ([RoundKind.FULL], [RoundKind.FULL, RoundKind.PARTIAL, RoundKind.FULL]):
            raise ValueError("Round plan must be full rounds around an optional partial block.")
        if len(segments) == 3 and segments[0][1] != segments[2][1]:
            raise ValueError("Both full-round halves must have the same length.")
        if len(segments) == 1 and segments[0][1] % 2 != 0:
            raise ValueError("Full rounds must split into two equal halves.")
        return self

    @classmethod
    def build(cls, rounds_f: int, rounds_p: int) -> RoundPlan:
        """Builds the plan for `rounds_f` full and `rounds_p` partial rounds."""
        half = rounds_f // 2
        return cls(
            rounds=(RoundKind.FULL,) * half
            + (RoundKind.PARTIAL,) * rounds_p
            + (RoundKind.FULL,) * half
        )

    def segments(self) -> List[Tuple[RoundKind, int]]:
        """Collapses the plan into `(kind, count)` runs."""
        return [(kind, len(list(run))) for kind, run in groupby(self.rounds)]

    @property
    def rounds_f(self) -> int:
        """Total number of full rounds."""
        return self.rounds.count(RoundKind.FULL)

    @property
    def rounds_p(self) -> int:
        """Total number of partial rounds."""
        return self.rounds.count(RoundKind.PARTIAL)

    @property
    def half_rounds_f(self) -> int:
        """Number of full rounds on each side of the partial block."""
        return self.rounds_f // 2

    def __len__(self) -> int:
        return len(self.rounds)
