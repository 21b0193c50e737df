"""
Corner fillets for splinedraw.

Replaces polyline vertices with arcs. The offset of the tangent points from
the vertex never exceeds half the shorter adjacent edge, whatever radius is
requested. Two constructions are available:

- exact: the circular arc through the two tangent points and the vertex
  (closed-form circumcircle);
- affine: a quarter-ellipse drawn in the oblique basis spanned by the two
  tangent offsets, parameterized the same way for every corner angle.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from splinedraw.curves.vectors import (
    EPSILON, angle_between, as_array, circle_from_three_points, cross, to_points,
)
from splinedraw.models import DEFAULT_SEGMENTS, RadiusMode, clamp_segments, clamp_unit
from splinedraw.tracer import get_tracer


ANGLE_EPSILON = 1e-4
TWO_PI = 2 * math.pi


@dataclass
class Corner:
    """Transient construction record for one filleted vertex."""
    vertex: np.ndarray
    tangent_in: np.ndarray
    tangent_out: np.ndarray
    offset: float
    turn: float
    exact: bool
    center: Optional[np.ndarray] = None
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 0.0
    clockwise: bool = False

    @property
    def axis_in(self):
        return self.tangent_in - self.vertex

    @property
    def axis_out(self):
        return self.tangent_out - self.vertex

    @property
    def concave(self):
        return self.turn < 0

    def arc_points(self, segments):
        """Samples strictly between the two tangent points."""
        steps = max(2, segments)
        if not self.exact:
            u = self.axis_in
            v = self.axis_out
            return [
                self.vertex + u * (1 - math.sin(phi)) + v * (1 - math.cos(phi))
                for phi in (0.5 * math.pi * i / steps for i in range(1, steps))
            ]

        if self.clockwise:
            total = (self.start_angle - self.end_angle) % TWO_PI
            sign = -1.0
        else:
            total = (self.end_angle - self.start_angle) % TWO_PI
            sign = 1.0

        samples = []
        for i in range(1, steps):
            angle = self.start_angle + sign * total * i / steps
            samples.append(self.center + self.radius * np.array([math.cos(angle), math.sin(angle)]))
        return samples

    def emit(self, segments):
        """Tangent-in point, arc samples, tangent-out point."""
        return [self.tangent_in] + self.arc_points(segments) + [self.tangent_out]


def fillet_offset(len_in, len_out, angle, mode, value):
    """
    Distance from the vertex to each tangent point.

    relative: value in [0, 1] scales half the shorter edge.
    absolute: value is a radius; its tangent length radius * tan(angle / 2)
    is capped at half the shorter edge.
    """
    max_offset = 0.5 * min(len_in, len_out)
    if RadiusMode(mode) == RadiusMode.RELATIVE:
        return clamp_unit(value) * max_offset
    radius = max(0.0, float(value))
    return min(max_offset, radius * math.tan(angle / 2))


def build_corner(prev, curr, nxt, mode, value, exact=False):
    """
    Build the fillet construction at `curr`, or None when the vertex must be
    kept sharp (straight or reversing corner, zero-length edge, zero offset,
    or a degenerate circumcircle).
    """
    edge_in = curr - prev
    edge_out = nxt - curr
    len_in = math.hypot(edge_in[0], edge_in[1])
    len_out = math.hypot(edge_out[0], edge_out[1])
    if len_in <= EPSILON or len_out <= EPSILON:
        return None

    dir_in = edge_in / len_in
    dir_out = edge_out / len_out
    angle = angle_between(dir_in, dir_out)
    if angle < ANGLE_EPSILON or angle > math.pi - ANGLE_EPSILON:
        return None

    offset = fillet_offset(len_in, len_out, angle, mode, value)
    if offset <= EPSILON:
        return None

    corner = Corner(
        vertex=curr,
        tangent_in=curr - dir_in * offset,
        tangent_out=curr + dir_out * offset,
        offset=offset,
        turn=cross(dir_in, dir_out),
        exact=exact,
    )
    if not exact:
        return corner

    circle = circle_from_three_points(corner.tangent_in, curr, corner.tangent_out)
    if circle is None:
        return None

    center, radius = circle
    start = math.atan2(corner.tangent_in[1] - center[1], corner.tangent_in[0] - center[0])
    end = math.atan2(corner.tangent_out[1] - center[1], corner.tangent_out[0] - center[0])
    mid = math.atan2(curr[1] - center[1], curr[0] - center[0])

    preferred_clockwise = not _is_angle_between(start, mid, end, clockwise=False)
    if corner.concave:
        clockwise = _direction_through_mid(start, end, mid, preferred_clockwise)
    else:
        clockwise = _direction_around_mid(start, end, mid, preferred_clockwise)

    corner.center = center
    corner.radius = radius
    corner.start_angle = start
    corner.end_angle = end
    corner.clockwise = clockwise
    return corner


def _is_angle_between(start, mid, end, clockwise):
    """True when `mid` lies on the arc swept from `start` to `end`."""
    s = start % TWO_PI
    m = mid % TWO_PI
    e = end % TWO_PI
    if clockwise:
        if s < e:
            return m <= s or m >= e
        return e <= m <= s
    if s > e:
        return m >= s or m <= e
    return s <= m <= e


def _shorter_direction(start, end, preferred_clockwise):
    """Keep the preferred direction unless it sweeps more than half a turn."""
    s = start % TWO_PI
    e = end % TWO_PI
    sweep = (s - e) % TWO_PI if preferred_clockwise else (e - s) % TWO_PI
    if sweep <= math.pi + 1e-6:
        return preferred_clockwise
    return not preferred_clockwise


def _direction_through_mid(start, end, mid, preferred_clockwise):
    """Sweep direction whose arc contains `mid`; ambiguous cases take the shorter arc."""
    on_ccw = _is_angle_between(start, mid, end, clockwise=False)
    on_cw = _is_angle_between(start, mid, end, clockwise=True)
    if on_ccw and not on_cw:
        return False
    if on_cw and not on_ccw:
        return True
    return _shorter_direction(start, end, preferred_clockwise)


def _direction_around_mid(start, end, mid, preferred_clockwise):
    """Sweep direction whose arc avoids `mid`; ambiguous cases take the shorter arc."""
    on_ccw = _is_angle_between(start, mid, end, clockwise=False)
    on_cw = _is_angle_between(start, mid, end, clockwise=True)
    if on_ccw and not on_cw:
        return True
    if on_cw and not on_ccw:
        return False
    return _shorter_direction(start, end, preferred_clockwise)


def build_fillet_path(points, closed=False, mode=RadiusMode.RELATIVE, value=0.5,
                      segments=DEFAULT_SEGMENTS, exact=False):
    """
    Round the corners of a polyline.

    Open paths keep their first and last vertex; closed paths fillet every
    vertex and end with a copy of their first output point. Vertices that
    cannot be filleted are emitted unchanged. Fewer than three points are
    passed through.

    Returns list of (x, y) tuples.
    """
    pts = as_array(points)
    count = len(pts)
    if count < 3:
        return to_points(pts)

    mode = RadiusMode(mode)
    segments = clamp_segments(segments)

    skipped = 0

    def vertex_output(i):
        nonlocal skipped
        corner = build_corner(pts[(i - 1) % count], pts[i], pts[(i + 1) % count], mode, value, exact)
        if corner is None:
            skipped += 1
            return [pts[i]]
        return corner.emit(segments)

    out = []
    if closed:
        for i in range(count):
            out.extend(vertex_output(i))
        out.append(out[0].copy())
    else:
        out.append(pts[0])
        for i in range(1, count - 1):
            out.extend(vertex_output(i))
        out.append(pts[-1])

    if skipped:
        get_tracer().event(f"Kept {skipped} sharp corners", level="DEBUG", exact=exact)

    return to_points(out)


def corner_offsets(points, closed=False, mode=RadiusMode.RELATIVE, value=0.5):
    """
    Fillet offset at every vertex, 0.0 where the vertex stays sharp.

    Open paths report 0.0 for their end points.
    """
    pts = as_array(points)
    count = len(pts)
    offsets = [0.0] * count
    if count < 3:
        return offsets

    indices = range(count) if closed else range(1, count - 1)
    for i in indices:
        corner = build_corner(pts[(i - 1) % count], pts[i], pts[(i + 1) % count], mode, value)
        if corner is not None:
            offsets[i] = corner.offset
    return offsets
