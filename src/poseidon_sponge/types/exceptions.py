"""Exception hierarchy for the Poseidon sponge."""

from __future__ import annotations


class PoseidonError(Exception):
    """
    Base exception for all Poseidon-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ParameterError(PoseidonError, ValueError):
    """
    Raised when precomputed tables do not fit the construction parameters.

    Attributes:
        name: The offending parameter.
        value: The rejected value.
    """

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class ConstructionError(PoseidonError):
    """
    Base class for fatal failures while building matrices or constants.

    A construction error means the parameters do not fit the field. The hasher
    must not be created, and no weaker substitute is ever used.
    """


class MdsConstructionError(ConstructionError):
    """
    Raised when no valid Cauchy MDS matrix can be built from the generators.

    Attributes:
        width: The state width the matrix was built for.
        detail: What went wrong with the generator values.
    """

    def __init__(self, width: int, detail: str) -> None:
        self.width = width
        self.detail = detail
        super().__init__(f"Cannot build a {width}x{width} MDS matrix: {detail}")


class SingularMatrixError(ConstructionError):
    """
    Raised when a matrix that must be invertible is singular.

    Attributes:
        size: The dimension of the singular matrix.
        column: The column where no pivot was found.
    """

    def __init__(self, size: int, column: int) -> None:
        self.size = size
        self.column = column
        super().__init__(f"{size}x{size} matrix is singular (no pivot in column {column})")


class StateWidthError(PoseidonError, ValueError):
    """
    Raised when a state vector does not match the permutation width.

    Attributes:
        expected: The configured width.
        actual: The length that was received.
    """

    def __init__(self, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Input state must have length {expected}, got {actual}")


class InputLengthError(PoseidonError, ValueError):
    """
    Raised when a fixed-shape hasher receives the wrong number of elements.

    Attributes:
        hasher: The name of the hasher.
        expected: The number of elements the hasher was built for.
        actual: The number of elements received.
    """

    def __init__(self, hasher: str, *, expected: int, actual: int) -> None:
        self.hasher = hasher
        self.expected = expected
        self.actual = actual
        super().__init__(f"{hasher} requires exactly {expected} elements, got {actual}")
