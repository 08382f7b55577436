"""Containment geometry for sprite rasterization.

Provides:
    - Euclidean distance and point-to-segment distance
    - Regular polygon generation (ellipse-inscribed vertex ring)
    - Unit-polygon scaling to a tile's pixel grid
    - Segment/segment intersection
    - Point-in-polygon and point-in-circle classification

Used by:
    - Region model: rounded corner classification (circle_contains)
    - PolyTile painting: tile polygon construction and classification
    - Tests: boundary cases on vertices, edges and collinear rings

All coordinates are pixel units. Pixel (x, y) is treated as the point at the
integer lattice position, with +Y pointing down (image convention).

Classification results are Containment values: OUTSIDE, INSIDE or BORDER.
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Iterator, Sequence

Point = tuple[float, float]
Polygon = Sequence[Point]

# Absolute tolerance for "same point" tests on intersection results
_EPS = 1e-9


class Containment(IntEnum):
    """Classification of a pixel against a shape."""

    OUTSIDE = 0
    INSIDE = 1
    BORDER = 2


# ---------------------------------------------------------------------------
# Distances
# ---------------------------------------------------------------------------


def distance(p: Point, q: Point) -> float:
    """Euclidean distance between two points."""
    dx = float(p[0]) - float(q[0])
    dy = float(p[1]) - float(q[1])
    return math.sqrt(dx * dx + dy * dy)


def point_to_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Shortest distance from *p* to the segment *a*-*b*.

    The projection parameter is clamped to [0, 1]; a zero-length segment
    degrades to the distance from *p* to *a*.
    """
    vx = float(b[0]) - float(a[0])
    vy = float(b[1]) - float(a[1])
    length_sq = vx * vx + vy * vy
    if length_sq == 0.0:
        return distance(p, a)
    t = ((p[0] - a[0]) * vx + (p[1] - a[1]) * vy) / length_sq
    t = max(0.0, min(1.0, t))
    return distance(p, (a[0] + t * vx, a[1] + t * vy))


# ---------------------------------------------------------------------------
# Polygon construction
# ---------------------------------------------------------------------------


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def polygon_factory(n: int, rx: float, ry: float) -> Iterator[tuple[int, int]]:
    """Yield the vertices of an *n*-gon inscribed in a ``2rx x 2ry`` box.

    Parameters
    ----------
    n : int
        Number of vertices. Values below 3 still yield *n* points; callers
        that need a closed shape clamp beforehand.
    rx, ry : float
        Horizontal and vertical radii.

    Yields
    ------
    tuple[int, int]
        ``(rx * (1 + cos t), ry * (1 + sin t))`` for ``t = 2*pi*k/n``,
        rounded to the nearest integer (halves round up).

    Notes
    -----
    This is a generator: it is consumed once and cannot be restarted.
    """
    for k in range(n):
        theta = 2.0 * math.pi * k / n
        yield (
            _round_half_up(rx * (1.0 + math.cos(theta))),
            _round_half_up(ry * (1.0 + math.sin(theta))),
        )


def scale_polygon(unit: Polygon, width: int, height: int) -> list[tuple[int, int]]:
    """Map unit-square vertices onto the pixel grid of a ``width x height`` tile.

    Vertex ``(0, 0)`` lands on the tile's first pixel and ``(1, 1)`` on its
    last, so the scaled polygon never leaves the tile.
    """
    sx = max(0, width - 1)
    sy = max(0, height - 1)
    return [(_round_half_up(u * sx), _round_half_up(v * sy)) for u, v in unit]


def polygon_bbox(polygon: Polygon) -> tuple[float, float, float, float]:
    """Bounding box ``(min_x, min_y, max_x, max_y)`` of a non-empty polygon."""
    xs = [float(p[0]) for p in polygon]
    ys = [float(p[1]) for p in polygon]
    return min(xs), min(ys), max(xs), max(ys)


# ---------------------------------------------------------------------------
# Intersections
# ---------------------------------------------------------------------------


def segment_intersection(a1: Point, a2: Point, b1: Point, b2: Point) -> Point | None:
    """Intersection point of segments *a1*-*a2* and *b1*-*b2*.

    Returns
    -------
    Point | None
        The crossing point, or ``None`` when the segments are parallel
        (including collinear overlap) or the crossing lies outside either
        segment.
    """
    rx = float(a2[0]) - float(a1[0])
    ry = float(a2[1]) - float(a1[1])
    sx = float(b2[0]) - float(b1[0])
    sy = float(b2[1]) - float(b1[1])

    denom = rx * sy - ry * sx
    if denom == 0.0:
        return None

    qx = float(b1[0]) - float(a1[0])
    qy = float(b1[1]) - float(a1[1])
    t = (qx * sy - qy * sx) / denom
    u = (qx * ry - qy * rx) / denom
    if t < 0.0 or t > 1.0 or u < 0.0 or u > 1.0:
        return None
    return (a1[0] + t * rx, a1[1] + t * ry)


def _same_point(p: Point, q: Point) -> bool:
    return abs(p[0] - q[0]) <= _EPS and abs(p[1] - q[1]) <= _EPS


def _cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _on_segment(p: Point, a: Point, b: Point) -> bool:
    if abs(_cross(a, b, p)) > _EPS:
        return False
    return (
        min(a[0], b[0]) - _EPS <= p[0] <= max(a[0], b[0]) + _EPS
        and min(a[1], b[1]) - _EPS <= p[1] <= max(a[1], b[1]) + _EPS
    )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _ray_anchor(polygon: Polygon) -> Point:
    """Fixed exterior start point for the containment ray.

    Sits just outside the bounding box, nudged off the integer lattice so a
    ray towards a lattice point cannot pass through another lattice vertex
    of a polygon spanning fewer than 1024 pixels.
    """
    min_x, min_y, _, _ = polygon_bbox(polygon)
    return (min_x - 1.0, min_y - 1.0 - 1.0 / 1024.0)


def point_in_polygon(
    polygon: Polygon,
    p: Point,
    border_thickness: float = 0,
) -> Containment:
    """Classify *p* against *polygon* by ray-cast parity.

    Parameters
    ----------
    polygon : Sequence[Point]
        Vertex ring; the closing edge (last -> first) is implicit.
    p : Point
        Point to classify.
    border_thickness : float
        Width of the border band measured inward from the edge the ray
        crossed last. 0 disables the band.

    Returns
    -------
    Containment
        INSIDE, BORDER or OUTSIDE.

    Notes
    -----
    - A point on the polygon boundary (a vertex or an edge) is INSIDE, or
      BORDER when border_thickness > 0.
    - A ray crossing a vertex shared by two consecutive edges is reported by
      both edges; the pair counts once when the neighbours lie on opposite
      sides of the ray and not at all when the ray only grazes the vertex.
    - Fewer than three vertices never enclose anything: OUTSIDE unless *p*
      sits on the degenerate boundary.
    """
    n = len(polygon)
    if n == 0:
        return Containment.OUTSIDE

    on_boundary = Containment.BORDER if border_thickness > 0 else Containment.INSIDE
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        if _on_segment(p, a, b):
            return on_boundary
    if n < 3:
        return Containment.OUTSIDE

    anchor = _ray_anchor(polygon)

    # Intersections per edge index: edge i runs polygon[i] -> polygon[i + 1]
    hits: dict[int, Point] = {}
    for i in range(n):
        hit = segment_intersection(anchor, p, polygon[i], polygon[(i + 1) % n])
        if hit is not None:
            hits[i] = hit

    crossed = dict(hits)
    for i in hits:
        j = (i + 1) % n
        shared = polygon[j]
        if j in hits and _same_point(hits[i], shared) and _same_point(hits[j], shared):
            crossed.pop(j, None)
            side_prev = _cross(anchor, p, polygon[i])
            side_next = _cross(anchor, p, polygon[(j + 1) % n])
            if side_prev * side_next >= 0:
                crossed.pop(i, None)

    if len(crossed) % 2 == 0:
        return Containment.OUTSIDE

    if border_thickness > 0:
        # The crossing nearest to p belongs to the last edge the ray passed
        last = min(crossed, key=lambda k: distance(crossed[k], p))
        a = polygon[last]
        b = polygon[(last + 1) % n]
        if point_to_segment_distance(p, a, b) < border_thickness:
            return Containment.BORDER
    return Containment.INSIDE


def circle_contains(
    p: Point,
    center: Point,
    radius: float,
    border_thickness: float = 0,
) -> Containment:
    """Classify *p* against a circle with an inner border band.

    OUTSIDE when the distance exceeds *radius*; BORDER when it lies in
    ``[radius - border_thickness, radius]``; INSIDE otherwise.
    """
    d = distance(p, center)
    if d > radius:
        return Containment.OUTSIDE
    if d >= radius - border_thickness:
        return Containment.BORDER
    return Containment.INSIDE
