"""
Linear resampling of a polyline.

Every edge is split into the same number of uniform steps; joints are
emitted once.
"""

from splinedraw.curves.vectors import as_array, lerp, to_points
from splinedraw.models import DEFAULT_SEGMENTS, clamp_segments


def resample_linear(points, closed=False, segments=DEFAULT_SEGMENTS):
    """
    Uniformly subdivide each edge of a polyline.

    Args:
        points: sequence of (x, y) points
        closed: also resample the edge from the last point back to the first
        segments: steps per edge

    Returns:
        list of (x, y) tuples. An open path of N points yields
        (N - 1) * segments + 1 points; a closed path ends with a copy of its
        first point. Fewer than two points are returned unchanged.
    """
    pts = as_array(points)
    count = len(pts)
    if count < 2:
        return to_points(pts)

    segments = clamp_segments(segments)
    edge_count = count if closed else count - 1

    out = []
    for i in range(edge_count):
        p1 = pts[i]
        p2 = pts[(i + 1) % count]
        first = 0 if i == 0 else 1
        for s in range(first, segments):
            out.append(lerp(p1, p2, s / segments))
        out.append(p2)

    return to_points(out)
