# gvg_renderer/geometry.py
"""
Vertex generation for every GVG shape kind.

Each function returns a float64 numpy array of shape (N, 2) holding the
vertices in submission order. Functions producing independent segments
(LINES topology) return vertices in pairs; the ellipse returns a closed
polyline (LINE_LOOP topology).
"""
import math
from typing import Sequence, Tuple

import numpy as np

from .core import InvalidGeometry


def line_vertices(x1: float, y1: float, x2: float, y2: float) -> np.ndarray:
    """Both endpoints, unchanged."""
    return np.array([(x1, y1), (x2, y2)], dtype=np.float64)


def rect_vertices(x: float, y: float, width: float, height: float) -> np.ndarray:
    """
    Four edges of an axis-aligned rectangle as independent segments.

    The outline runs (x,y) -> (x+w,y) -> (x+w,y+h) -> (x,y+h) -> (x,y).

    Examples:
        >>> rect_vertices(0, 0, 10, 5)[:4].tolist()
        [[0.0, 0.0], [10.0, 0.0], [10.0, 0.0], [10.0, 5.0]]
    """
    corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
    return polygon_vertices(corners)


def regular_polygon_coords(cx: float, cy: float, r: float, sides: int,
                           rotate: float = 0.0) -> Tuple[Tuple[float, float], ...]:
    """
    Corners of a regular polygon inscribed in a circle.

    Vertex i sits at angle 2*pi*i/sides plus `rotate` degrees.

    Raises:
        InvalidGeometry: If sides is not a positive integer
    """
    if isinstance(sides, bool) or int(sides) != sides or sides < 1:
        raise InvalidGeometry(f"Polygon side count must be a positive integer, got {sides!r}")
    sides = int(sides)
    offset = math.radians(rotate)
    coords = []
    for i in range(sides):
        angle = 2 * math.pi * i / sides + offset
        coords.append((r * math.cos(angle) + cx, r * math.sin(angle) + cy))
    return tuple(coords)


def polygon_vertices(coords: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Closed outline through explicit vertices, as independent segments.

    Consecutive vertices are joined and the last vertex is joined back to the
    first. A single vertex yields one zero-length segment.

    Raises:
        InvalidGeometry: If coords is empty or holds something other than (x, y) pairs
    """
    try:
        points = np.asarray(coords, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidGeometry(f"Polygon vertices must be (x, y) pairs: {coords!r}") from exc
    if points.size == 0:
        raise InvalidGeometry("Polygon needs at least one vertex")
    if points.ndim != 2 or points.shape[1] != 2:
        raise InvalidGeometry(f"Polygon vertices must be (x, y) pairs, got shape {points.shape}")

    # every vertex starts one segment that ends at the next, wrapping around
    ends = np.roll(points, -1, axis=0)
    return np.stack([points, ends], axis=1).reshape(-1, 2)


def ellipse_vertices(cx: float, cy: float, rx: float, ry: float, segments: int) -> np.ndarray:
    """
    Tessellates an ellipse by repeatedly rotating a unit vector.

    Starting from (1, 0), each of the segments + 1 steps emits
    (x*rx + cx, y*ry + cy) and then rotates (x, y) by 2*pi/segments. The last
    point revisits the first, closing the loop.

    See: http://stackoverflow.com/questions/5886628/effecient-way-to-draw-ellipse-with-opengl-or-d3d
    """
    theta = 2 * math.pi / segments
    c = math.cos(theta)
    s = math.sin(theta)

    x = 1.0
    y = 0.0
    points = []
    for _ in range(segments + 1):
        points.append((x * rx + cx, y * ry + cy))
        x, y = c * x - s * y, s * x + c * y
    return np.array(points, dtype=np.float64)
