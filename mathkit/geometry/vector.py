"""
Two-dimensional point/vector value type.
"""

import math
from dataclasses import dataclass

import numpy as np

from ..math.utils import linear_combination


@dataclass(frozen=True)
class Vector2D:
    """
    Immutable point or displacement in the Euclidean plane.

    - x: Abscissa
    - y: Ordinate
    """

    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        # Normalize ints and numpy scalars so equality and hashing are consistent
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def of(cls, value) -> 'Vector2D':
        """Build a vector from another vector or any (x, y) sequence."""
        if isinstance(value, cls):
            return value
        if len(value) != 2:
            raise ValueError(f"A 2-D point needs exactly 2 coordinates, got {len(value)}")
        return cls(value[0], value[1])

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Vector2D':
        """Build a vector from a numpy array of length 2."""
        return cls.of(np.asarray(array, dtype=float).reshape(-1))

    def to_array(self) -> np.ndarray:
        """Get the vector as a numpy array [x, y]."""
        return np.array([self.x, self.y])

    def add(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x + other.x, self.y + other.y)

    def subtract(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x - other.x, self.y - other.y)

    def negate(self) -> 'Vector2D':
        return Vector2D(-self.x, -self.y)

    def scalar_multiply(self, factor: float) -> 'Vector2D':
        return Vector2D(factor * self.x, factor * self.y)

    def dot(self, other: 'Vector2D') -> float:
        return linear_combination(self.x, other.x, self.y, other.y)

    def cross(self, other: 'Vector2D') -> float:
        """Z component of the 3-D cross product of the two vectors."""
        return linear_combination(self.x, other.y, -self.y, other.x)

    @property
    def norm_sq(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_sq(self, other: 'Vector2D') -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy

    def distance(self, other: 'Vector2D') -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def __add__(self, other: 'Vector2D') -> 'Vector2D':
        return self.add(other)

    def __sub__(self, other: 'Vector2D') -> 'Vector2D':
        return self.subtract(other)

    def __neg__(self) -> 'Vector2D':
        return self.negate()

    def __mul__(self, factor: float) -> 'Vector2D':
        return self.scalar_multiply(factor)

    __rmul__ = __mul__

    def __iter__(self):
        yield self.x
        yield self.y

    def __str__(self) -> str:
        return f"({self.x:.6g}, {self.y:.6g})"


Vector2D.ZERO = Vector2D(0.0, 0.0)
