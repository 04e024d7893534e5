"""
Oriented lines and line segments in the plane.
"""

import math
from typing import Optional

from .vector import Vector2D
from ..math.constants import PI, DEFAULT_TOLERANCE
from ..math.utils import linear_combination, normalize_angle_positive


class Line:
    """
    Oriented infinite line in the plane.

    The line is stored as its angle and its offset from the origin. Points on
    its left side (with respect to the direction p1 -> p2) have a negative
    offset and are considered inside; points on its right side have a
    positive offset.
    """

    def __init__(self, p1, p2, tolerance: float = DEFAULT_TOLERANCE):
        """
        Build the line through two points, oriented from p1 to p2.

        Args:
            p1: First point
            p2: Second point
            tolerance: Distance below which points are considered on the line
        """
        p1 = Vector2D.of(p1)
        p2 = Vector2D.of(p2)
        self.tolerance = float(tolerance)

        dx = p2.x - p1.x
        dy = p2.y - p1.y
        d = math.hypot(dx, dy)
        if d == 0.0:
            # Degenerate line through a single point, arbitrarily horizontal
            self.angle = 0.0
            self.cos = 1.0
            self.sin = 0.0
            self.origin_offset = p1.y
        else:
            self.angle = normalize_angle_positive(PI + math.atan2(-dy, -dx))
            self.cos = math.cos(self.angle)
            self.sin = math.sin(self.angle)
            self.origin_offset = linear_combination(p2.x, p1.y, -p1.x, p2.y) / d

    @classmethod
    def _from_parameters(cls, angle: float, cos: float, sin: float,
                         origin_offset: float, tolerance: float) -> 'Line':
        line = cls.__new__(cls)
        line.angle = angle
        line.cos = cos
        line.sin = sin
        line.origin_offset = origin_offset
        line.tolerance = tolerance
        return line

    @property
    def direction(self) -> Vector2D:
        """Unit vector along the line orientation."""
        return Vector2D(self.cos, self.sin)

    def reverse(self) -> 'Line':
        """Get the same line with the opposite orientation."""
        angle = self.angle + PI if self.angle < PI else self.angle - PI
        return Line._from_parameters(angle, -self.cos, -self.sin, -self.origin_offset, self.tolerance)

    def offset(self, point) -> float:
        """
        Signed distance from the line to a point.

        Args:
            point: Query point

        Returns:
            Negative for points on the left side, positive on the right side
        """
        p = Vector2D.of(point)
        return linear_combination(self.sin, p.x, -self.cos, p.y) + self.origin_offset

    def distance(self, point) -> float:
        """Unsigned distance from the line to a point."""
        return abs(self.offset(point))

    def contains(self, point) -> bool:
        """Check whether a point lies on the line within tolerance."""
        return abs(self.offset(point)) <= self.tolerance

    def abscissa(self, point) -> float:
        """Position of the orthogonal projection of a point along the line."""
        p = Vector2D.of(point)
        return linear_combination(self.cos, p.x, self.sin, p.y)

    def point_at(self, abscissa: float, offset: float = 0.0) -> Vector2D:
        """Point at a given abscissa along the line and signed offset from it."""
        d_offset = offset - self.origin_offset
        return Vector2D(linear_combination(abscissa, self.cos, d_offset, self.sin),
                        linear_combination(abscissa, self.sin, -d_offset, self.cos))

    def project(self, point) -> Vector2D:
        """Orthogonal projection of a point on the line."""
        return self.point_at(self.abscissa(point))

    def _is_parallel(self, cross: float) -> bool:
        # An exact zero must count even when the tolerance is zero
        return cross == 0.0 or abs(cross) < self.tolerance

    def is_parallel_to(self, other: 'Line') -> bool:
        return self._is_parallel(linear_combination(self.sin, other.cos, -self.cos, other.sin))

    def intersection(self, other: 'Line') -> Optional[Vector2D]:
        """
        Intersection point of two lines.

        Returns:
            The intersection point, or None if the lines are parallel
        """
        d = linear_combination(self.sin, other.cos, -other.sin, self.cos)
        if self._is_parallel(d):
            return None
        return Vector2D(linear_combination(self.cos, other.origin_offset, -other.cos, self.origin_offset) / d,
                        linear_combination(self.sin, other.origin_offset, -other.sin, self.origin_offset) / d)

    def __repr__(self) -> str:
        return f"Line(angle={self.angle:.6g}, origin_offset={self.origin_offset:.6g})"


class Segment:
    """
    Bounded piece of a line between two endpoints.
    """

    def __init__(self, start, end, line: Optional[Line] = None):
        """
        Args:
            start: Start point
            end: End point
            line: Supporting line; built from the endpoints if not given
        """
        self.start = Vector2D.of(start)
        self.end = Vector2D.of(end)
        self.line = line if line is not None else Line(self.start, self.end)

    @property
    def length(self) -> float:
        return self.start.distance(self.end)

    def distance(self, point) -> float:
        """
        Minimal distance from a point to the segment.

        The point is projected on the supporting line with
        r = ((p - start) . d) / (d . d), d = end - start. When the projection
        falls outside the segment (r < 0 or r > 1) the closer endpoint is used.

        Args:
            point: Query point

        Returns:
            Euclidean distance to the nearest point of the segment
        """
        p = Vector2D.of(point)
        delta_x = self.end.x - self.start.x
        delta_y = self.end.y - self.start.y

        norm_sq = delta_x * delta_x + delta_y * delta_y
        if norm_sq == 0.0:
            return self.start.distance(p)

        r = ((p.x - self.start.x) * delta_x + (p.y - self.start.y) * delta_y) / norm_sq

        if r < 0 or r > 1:
            return min(self.start.distance(p), self.end.distance(p))

        foot = Vector2D(self.start.x + r * delta_x, self.start.y + r * delta_y)
        return foot.distance(p)

    def __repr__(self) -> str:
        return f"Segment({self.start}, {self.end})"
