"""
Convex hull in the two-dimensional Euclidean plane.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .line import Line, Segment
from .region import ConvexRegion, build_convex
from .vector import Vector2D
from ..exceptions import NotConvexError, InsufficientDataError
from ..math.constants import DEFAULT_TOLERANCE
from ..math.utils import signum

logger = logging.getLogger(__name__)


def find_convexity_violation(vertices: Sequence[Vector2D]) -> Optional[int]:
    """
    Check that ordered vertices turn consistently.

    For each cyclic triple (p1, p2, p3) the sign of cross(p2 - p1, p3 - p2)
    is compared with the first nonzero sign seen. Collinear triples have a
    zero cross product and are always accepted.

    Args:
        vertices: Ordered hull vertices

    Returns:
        Index of the first vertex where the turn direction flips, or None if
        the vertices form a convex hull
    """
    size = len(vertices)
    if size < 3:
        return None

    sign = 0.0
    for i in range(size):
        p1 = vertices[i - 1]
        p2 = vertices[i]
        p3 = vertices[(i + 1) % size]

        d1 = p2.subtract(p1)
        d2 = p3.subtract(p2)

        cross = signum(d1.cross(d2))
        if cross != 0.0:
            if sign != 0.0 and cross != sign:
                return i
            sign = cross

    return None


class ConvexHull2D:
    """
    Validated convex polygon given by its ordered vertices.

    The vertices are not computed here: they must already describe the hull
    boundary in order (either winding). Fewer than three vertices describe
    degenerate hulls (empty, a point, or a single edge).
    """

    def __init__(self, vertices: Sequence, tolerance: float = DEFAULT_TOLERANCE):
        """
        Initialize the hull.

        Args:
            vertices: Ordered hull vertices, as Vector2D or (x, y) pairs
            tolerance: Distance below which points are considered identical

        Raises:
            ValueError: If the tolerance is negative
            NotConvexError: If the vertices do not form a convex hull
        """
        if tolerance < 0:
            raise ValueError(f"Tolerance must be non-negative, got {tolerance}")

        points = tuple(Vector2D.of(v) for v in vertices)

        index = find_convexity_violation(points)
        if index is not None:
            logger.warning("Rejected hull of %d vertices: not convex at vertex %d", len(points), index)
            raise NotConvexError(index)

        self._vertices: Tuple[Vector2D, ...] = points
        self.tolerance = float(tolerance)
        self._line_segments: Optional[Tuple[Segment, ...]] = None

        logger.debug("ConvexHull2D created with %d vertices", len(points))

    @property
    def vertices(self) -> List[Vector2D]:
        """Copy of the ordered hull vertices."""
        return list(self._vertices)

    def get_vertices(self) -> List[Vector2D]:
        return self.vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def get_line_segments(self) -> List[Segment]:
        """
        Get the boundary segments of the hull, ordered.

        Returns:
            A new list of segments: empty for 0 or 1 vertices, a single edge
            for 2 vertices, otherwise one segment per edge including the one
            closing from the last vertex back to the first
        """
        return list(self._retrieve_line_segments())

    def _retrieve_line_segments(self) -> Tuple[Segment, ...]:
        """Get the cached segments, building them on first access."""
        segments = self._line_segments
        if segments is None:
            # Build locally and publish in a single assignment
            segments = self._build_line_segments()
            self._line_segments = segments
        return segments

    def _build_line_segments(self) -> Tuple[Segment, ...]:
        size = len(self._vertices)
        if size <= 1:
            return ()

        if size == 2:
            p1, p2 = self._vertices
            return (Segment(p1, p2, Line(p1, p2, self.tolerance)),)

        segments = []
        for i in range(size):
            start = self._vertices[i]
            end = self._vertices[(i + 1) % size]
            segments.append(Segment(start, end, Line(start, end, self.tolerance)))
        return tuple(segments)

    def is_counter_clockwise(self) -> bool:
        """Check whether the vertices wind counter-clockwise (False for degenerate hulls)."""
        size = len(self._vertices)
        if size < 3:
            return False
        area = 0.0
        for i in range(size):
            area += self._vertices[i].cross(self._vertices[(i + 1) % size])
        return area > 0.0

    def perimeter(self) -> float:
        """Sum of the boundary segment lengths."""
        return sum(segment.length for segment in self._retrieve_line_segments())

    def create_region(self) -> ConvexRegion:
        """
        Build the convex region enclosed by the hull.

        Returns:
            Region bounded by the hull lines

        Raises:
            InsufficientDataError: If the hull has fewer than 3 vertices
        """
        if len(self._vertices) < 3:
            raise InsufficientDataError(len(self._vertices), 3)

        lines = [segment.line for segment in self._retrieve_line_segments()]
        if not self.is_counter_clockwise():
            # Regions keep the left side of each line, which is outside for clockwise hulls
            lines = [line.reverse() for line in lines]

        return build_convex(lines, self.tolerance)

    def __repr__(self) -> str:
        return f"ConvexHull2D({len(self._vertices)} vertices, tolerance={self.tolerance:g})"
