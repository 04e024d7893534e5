"""
Planar geometry: points, lines, segments, convex hulls and regions.
"""

from .vector import Vector2D
from .line import Line, Segment
from .region import ConvexRegion, Location, build_convex
from .hull import ConvexHull2D, find_convexity_violation

__all__ = [
    "Vector2D",
    "Line",
    "Segment",
    "ConvexRegion",
    "Location",
    "build_convex",
    "ConvexHull2D",
    "find_convexity_violation",
]
