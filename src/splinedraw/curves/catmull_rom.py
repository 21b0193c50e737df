"""
Catmull-Rom evaluation for splinedraw.

Interpolating cubic Hermite spline through every input point. Tangents are
scaled by tau = (1 - tension) / 2, so tension 0 gives the classic
Catmull-Rom curve and tension 1 collapses to straight segments.
"""

import numpy as np

from splinedraw.curves.linear import resample_linear
from splinedraw.curves.vectors import as_array, to_points
from splinedraw.models import DEFAULT_SEGMENTS, clamp_segments, clamp_unit
from splinedraw.tracer import get_tracer


def evaluate_catmull_rom(points, tension=0.5, closed=False, segments=DEFAULT_SEGMENTS, log_segments=False):
    """
    Sample a Catmull-Rom spline through the given points.

    Open paths extrapolate a phantom point before the first and after the
    last point by reflection; closed paths wrap around and end with a copy
    of the first point. Each segment contributes segments + 1 samples, the
    shared joint being emitted once.

    Returns list of (x, y) tuples; fewer than two points are returned
    unchanged.
    """
    pts = as_array(points)
    if len(pts) < 2:
        return to_points(pts)

    segments = clamp_segments(segments)
    tau = (1.0 - clamp_unit(tension)) * 0.5

    if tau == 0.0:
        # Zero tangents: the blend traces the chords, sampled uniformly.
        return resample_linear(pts, closed=closed, segments=segments)

    tracer = get_tracer()
    matrix = catmull_rom_matrix(tau) if log_segments else None

    out = []
    for index, p0, p1, p2, p3 in catmull_rom_segments(pts, closed):
        if matrix is not None and tracer.is_enabled_for("DEBUG"):
            coeff_x, coeff_y = catmull_rom_coefficients(matrix, p0, p1, p2, p3)
            tracer.event(
                f"segment {index} tau={tau:g} "
                f"x(t) = {format_polynomial(coeff_x)}; y(t) = {format_polynomial(coeff_y)}",
                level="DEBUG",
            )

        m1 = (p2 - p0) * tau
        m2 = (p3 - p1) * tau
        first = 0 if index == 0 else 1
        t = np.arange(first, segments + 1) / segments
        out.extend(hermite(p1, p2, m1, m2, t))

    return to_points(out)


def hermite(p1, p2, m1, m2, t):
    """Evaluate the cubic Hermite blend at parameter(s) t; returns (len(t), 2)."""
    t = np.atleast_1d(np.asarray(t, dtype=float))[:, None]
    t2 = t * t
    t3 = t2 * t
    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2
    return h00 * p1 + h10 * m1 + h01 * p2 + h11 * m2


def catmull_rom_segments(points, closed=False):
    """
    List the (index, p0, p1, p2, p3) neighbourhood of every spline segment.

    Segment i runs from p1 = points[i] to p2 = points[i + 1].
    """
    pts = as_array(points)
    count = len(pts)
    if count < 2:
        return []

    start_phantom = pts[0] + (pts[0] - pts[1])
    end_phantom = pts[-1] + (pts[-1] - pts[-2])

    def get_point(idx):
        if closed:
            return pts[idx % count]
        if idx < 0:
            return start_phantom
        if idx >= count:
            return end_phantom
        return pts[idx]

    last = count if closed else count - 1
    return [
        (i, get_point(i - 1), get_point(i), get_point(i + 1), get_point(i + 2))
        for i in range(last)
    ]


def catmull_rom_matrix(tau):
    """
    Characteristic matrix M with P(t) = [t^3 t^2 t 1] * M * [P0 P1 P2 P3].
    """
    return np.array([
        [-tau, 2 - tau, -2 + tau, tau],
        [2 * tau, -3 + tau, 3 - 2 * tau, -tau],
        [-tau, 0.0, tau, 0.0],
        [0.0, 1.0, 0.0, 0.0],
    ])


def catmull_rom_coefficients(matrix, p0, p1, p2, p3):
    """Polynomial coefficients (t^3, t^2, t, 1) for x and y of one segment."""
    control = np.array([p0, p1, p2, p3], dtype=float)
    coeffs = matrix @ control
    return coeffs[:, 0], coeffs[:, 1]


def format_polynomial(coeffs):
    """Render cubic coefficients (t^3, t^2, t, 1) as readable text."""
    terms = []
    for power, value in zip((3, 2, 1, 0), coeffs):
        if abs(value) <= 1e-10:
            continue
        magnitude = f"{round(abs(float(value)), 6):g}"
        if power == 0:
            body = magnitude
        elif power == 1:
            body = f"{magnitude}t"
        else:
            body = f"{magnitude}t^{power}"

        if not terms:
            terms.append(f"-{body}" if value < 0 else body)
        else:
            terms.append(f"{'-' if value < 0 else '+'} {body}")

    return " ".join(terms) if terms else "0"
