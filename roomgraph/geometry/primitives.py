from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np

from roomgraph.geometry.tolerance import EPS_POS


Point2 = Tuple[float, float]


def as_xy(p: Any) -> Point2:
    if hasattr(p, "x") and hasattr(p, "y"):
        return (float(p.x), float(p.y))
    return (float(p[0]), float(p[1]))


def sub(a: Point2, b: Point2) -> Point2:
    return (float(a[0] - b[0]), float(a[1] - b[1]))


def dot(a: Point2, b: Point2) -> float:
    return float(a[0] * b[0] + a[1] * b[1])


def cross(a: Point2, b: Point2) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


def norm(a: Point2) -> float:
    return (dot(a, a)) ** 0.5


def distance(a: Any, b: Any) -> float:
    return norm(sub(as_xy(b), as_xy(a)))


def midpoint(a: Any, b: Any) -> Point2:
    pa, pb = as_xy(a), as_xy(b)
    return ((pa[0] + pb[0]) / 2.0, (pa[1] + pb[1]) / 2.0)


def _coords(points: Sequence[Any]) -> np.ndarray:
    return np.array([as_xy(p) for p in points], dtype=float).reshape(-1, 2)


def signed_area(points: Sequence[Any]) -> float:
    """Shoelace area; positive for counter-clockwise order in a y-up frame."""
    if len(points) < 3:
        return 0.0
    xy = _coords(points)
    x, y = xy[:, 0], xy[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def polygon_area(points: Sequence[Any]) -> float:
    return abs(signed_area(points))


def vertex_mean(points: Sequence[Any]) -> Point2:
    if not points:
        return (0.0, 0.0)
    xy = _coords(points)
    return (float(xy[:, 0].mean()), float(xy[:, 1].mean()))


def polygon_centroid(points: Sequence[Any]) -> Point2:
    """Area-weighted centroid; falls back to the vertex mean when degenerate."""
    if len(points) < 3:
        return vertex_mean(points)
    xy = _coords(points)
    x, y = xy[:, 0], xy[:, 1]
    x1, y1 = np.roll(x, -1), np.roll(y, -1)
    w = x * y1 - x1 * y
    a = 0.5 * float(np.sum(w))
    if abs(a) <= EPS_POS:
        return vertex_mean(points)
    cx = float(np.sum((x + x1) * w)) / (6.0 * a)
    cy = float(np.sum((y + y1) * w)) / (6.0 * a)
    return (cx, cy)


@dataclass(frozen=True)
class SegmentProjection:
    distance: float
    closest: Point2
    t: float


def point_to_segment_distance(point: Any, start: Any, end: Any) -> SegmentProjection:
    p, a, b = as_xy(point), as_xy(start), as_xy(end)
    d = sub(b, a)
    length_sq = dot(d, d)
    if length_sq <= EPS_POS:
        return SegmentProjection(distance=norm(sub(p, a)), closest=a, t=0.0)
    t = max(0.0, min(1.0, dot(sub(p, a), d) / length_sq))
    closest = (a[0] + t * d[0], a[1] + t * d[1])
    return SegmentProjection(distance=norm(sub(p, closest)), closest=closest, t=t)


def is_point_on_segment(point: Any, start: Any, end: Any, tolerance: float = 5.0) -> bool:
    # Points near either endpoint do not count as lying on the segment.
    proj = point_to_segment_distance(point, start, end)
    return proj.distance <= tolerance and 0.1 < proj.t < 0.9


def _orient(a: Point2, b: Point2, c: Point2) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def segments_intersect(p1: Any, p2: Any, p3: Any, p4: Any) -> bool:
    """True when the two segments cross at a point interior to both."""
    a, b, c, d = as_xy(p1), as_xy(p2), as_xy(p3), as_xy(p4)
    o1 = _orient(a, b, c)
    o2 = _orient(a, b, d)
    o3 = _orient(c, d, a)
    o4 = _orient(c, d, b)
    return (o1 * o2 < 0.0) and (o3 * o4 < 0.0)


def point_in_polygon(point: Any, polygon: Sequence[Any]) -> bool:
    """Even-odd ray cast; points on the boundary may land either side."""
    x, y = as_xy(point)
    pts = [as_xy(p) for p in polygon]
    inside = False
    n = len(pts)
    for i in range(n):
        x1, y1 = pts[i]
        x2, y2 = pts[(i + 1) % n]
        if ((y1 > y) != (y2 > y)) and (x < (x2 - x1) * (y - y1) / (y2 - y1) + x1):
            inside = not inside
    return inside


def ccw_half(reference: Point2, v: Point2) -> int:
    """Bucket ``v`` by its counter-clockwise angle from ``reference``.

    0: (0, pi], 1: (pi, 2*pi), 2: parallel to ``reference`` (angle 0 taken as 2*pi).
    """
    c = cross(reference, v)
    if c > 0.0:
        return 0
    if c < 0.0:
        return 1
    if dot(reference, v) < 0.0:
        return 0
    return 2


def ccw_before(reference: Point2, a: Point2, b: Point2) -> bool:
    """True when ``a`` is reached before ``b`` sweeping counter-clockwise from ``reference``."""
    ha, hb = ccw_half(reference, a), ccw_half(reference, b)
    if ha != hb:
        return ha < hb
    return cross(a, b) > 0.0
