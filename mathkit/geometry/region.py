"""
Convex regions built as the intersection of half-planes.
"""

import logging
import math
from enum import Enum
from typing import List, Sequence, Tuple

from .line import Line
from .vector import Vector2D
from ..math.constants import DEFAULT_TOLERANCE
from ..math.utils import linear_combination

logger = logging.getLogger(__name__)


class Location(Enum):
    """Position of a point with respect to a region."""
    INSIDE = "inside"
    OUTSIDE = "outside"
    BOUNDARY = "boundary"


class ConvexRegion:
    """
    Bounded convex polygon defined by a set of oriented lines.

    Each line keeps the half-plane on its left side (negative offset). The
    region is the intersection of those half-planes. Line sets that do not
    enclose a bounded area of positive size give an empty region.
    """

    def __init__(self, lines: Sequence[Line], tolerance: float = DEFAULT_TOLERANCE):
        self.lines: Tuple[Line, ...] = tuple(lines)
        self.tolerance = float(tolerance)
        self._vertices = self._compute_vertices()
        if not self._vertices:
            logger.debug("Convex region from %d lines is empty or unbounded", len(self.lines))

    def _compute_vertices(self) -> Tuple[Vector2D, ...]:
        """Intersect every pair of lines and keep the points inside all half-planes."""
        candidates: List[Vector2D] = []
        for i, first in enumerate(self.lines):
            for second in self.lines[i + 1:]:
                point = first.intersection(second)
                if point is None:
                    continue
                # Intersection round-off grows with the distance to the origin
                limit = self.tolerance + 1.0e-12 * max(1.0, point.norm)
                if all(line.offset(point) <= limit for line in self.lines):
                    if not any(point.distance(known) <= limit for known in candidates):
                        candidates.append(point)

        if len(candidates) < 3:
            return ()

        cx = sum(p.x for p in candidates) / len(candidates)
        cy = sum(p.y for p in candidates) / len(candidates)
        ordered = sorted(candidates, key=lambda p: math.atan2(p.y - cy, p.x - cx))

        if _signed_area(ordered) <= self.tolerance * self.tolerance:
            return ()

        # Half-planes that were never tight leave the polygon unbounded
        if not self._is_bounded(ordered):
            return ()

        return tuple(ordered)

    def _is_bounded(self, ordered: Sequence[Vector2D]) -> bool:
        """Check that every polygon edge lies on one of the bounding lines."""
        size = len(ordered)
        for i in range(size):
            a = ordered[i]
            b = ordered[(i + 1) % size]
            middle = Vector2D(0.5 * (a.x + b.x), 0.5 * (a.y + b.y))
            limit = self.tolerance + 1.0e-12 * max(1.0, middle.norm)
            if not any(abs(line.offset(middle)) <= limit for line in self.lines):
                return False
        return True

    @property
    def vertices(self) -> List[Vector2D]:
        """Polygon vertices in counter-clockwise order (empty list for an empty region)."""
        return list(self._vertices)

    def is_empty(self) -> bool:
        return len(self._vertices) == 0

    def check_point(self, point) -> Location:
        """
        Locate a point with respect to the region.

        Args:
            point: Query point

        Returns:
            INSIDE, OUTSIDE or BOUNDARY
        """
        if self.is_empty():
            return Location.OUTSIDE

        p = Vector2D.of(point)
        offsets = [line.offset(p) for line in self.lines]
        if max(offsets) > self.tolerance:
            return Location.OUTSIDE
        if any(abs(offset) <= self.tolerance for offset in offsets):
            return Location.BOUNDARY
        return Location.INSIDE

    def contains(self, point) -> bool:
        """Check whether a point is inside the region or on its boundary."""
        return self.check_point(point) is not Location.OUTSIDE

    @property
    def size(self) -> float:
        """Area of the region."""
        return _signed_area(self._vertices) if self._vertices else 0.0

    @property
    def boundary_size(self) -> float:
        """Perimeter of the region."""
        size = len(self._vertices)
        return sum(self._vertices[i].distance(self._vertices[(i + 1) % size]) for i in range(size))

    @property
    def barycenter(self) -> Vector2D:
        """Centroid of the region area."""
        if not self._vertices:
            raise ValueError("Empty region has no barycenter")

        size = len(self._vertices)
        sum_x = 0.0
        sum_y = 0.0
        sum_cross = 0.0
        for i in range(size):
            a = self._vertices[i]
            b = self._vertices[(i + 1) % size]
            cross = linear_combination(a.x, b.y, -a.y, b.x)
            sum_cross += cross
            sum_x += cross * (a.x + b.x)
            sum_y += cross * (a.y + b.y)
        return Vector2D(sum_x / (3.0 * sum_cross), sum_y / (3.0 * sum_cross))

    def __repr__(self) -> str:
        return f"ConvexRegion({len(self.lines)} lines, {len(self._vertices)} vertices)"


def _signed_area(points: Sequence[Vector2D]) -> float:
    """Shoelace area, positive for counter-clockwise ordering."""
    size = len(points)
    total = 0.0
    for i in range(size):
        a = points[i]
        b = points[(i + 1) % size]
        total += linear_combination(a.x, b.y, -a.y, b.x)
    return 0.5 * total


def build_convex(lines: Sequence[Line], tolerance: float = DEFAULT_TOLERANCE) -> ConvexRegion:
    """
    Build the convex region bounded by a set of oriented lines.

    Args:
        lines: Lines keeping the half-plane on their left side
        tolerance: Distance below which points are considered on a boundary

    Returns:
        The intersection of the half-planes as a ConvexRegion
    """
    return ConvexRegion(lines, tolerance)
