"""
Exception types raised by the filter and geometry components.
"""

from typing import Optional, Tuple


class MathError(Exception):
    """Base class for all errors raised by mathkit."""


class DimensionMismatchError(MathError, ValueError):
    """
    Raised when operand shapes are incompatible.

    Attributes:
        actual: Offending dimension or shape
        expected: Dimension or shape that was required
    """

    def __init__(self, actual, expected, what: str = "dimension"):
        self.actual = actual
        self.expected = expected
        self.what = what
        super().__init__(f"{what} mismatch: got {actual}, expected {expected}")


class SingularMatrixError(MathError, ArithmeticError):
    """
    Raised when a matrix that must be inverted is singular.

    Attributes:
        condition_number: Condition number of the matrix (inf when exactly singular)
    """

    def __init__(self, condition_number: float = float("inf"), shape: Optional[Tuple[int, int]] = None):
        self.condition_number = condition_number
        self.shape = shape
        message = "matrix is singular"
        if shape is not None:
            message += f" ({shape[0]}x{shape[1]})"
        message += f", condition number {condition_number:.3e}"
        super().__init__(message)


class NotConvexError(MathError, ValueError):
    """
    Raised when hull vertices do not turn consistently.

    Attributes:
        index: Index of the vertex where the turn direction flips
    """

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"vertices do not form a convex hull (turn direction changes at vertex {index})")


class InsufficientDataError(MathError, ValueError):
    """
    Raised when an operation needs more points than are available.

    Attributes:
        actual: Number of points available
        required: Minimum number of points needed
    """

    def __init__(self, actual: int, required: int):
        self.actual = actual
        self.required = required
        super().__init__(f"insufficient data: got {actual} points, need at least {required}")
