"""
Uniform B-spline evaluation for splinedraw.

Approximating spline of degree 1-5 over the input points used as control
points, evaluated with the de Boor recursion on a clamped uniform knot
vector.
"""

import numpy as np

from splinedraw.curves.linear import resample_linear
from splinedraw.curves.vectors import EPSILON, as_array, to_points
from splinedraw.models import DEFAULT_SEGMENTS, clamp_degree, clamp_segments
from splinedraw.tracer import get_tracer


def evaluate_bspline(points, degree=3, closed=False, segments=DEFAULT_SEGMENTS):
    """
    Sample a uniform B-spline controlled by the given points.

    Open paths repeat their first and last point `degree` times so the curve
    starts and ends on them; closed paths append their first `degree` points
    and the output ends with a copy of its first sample. Degree 1 is the
    linear resampler.

    Returns list of (x, y) tuples.
    """
    pts = as_array(points)
    if len(pts) < 2:
        return to_points(pts)

    degree = clamp_degree(degree)
    segments = clamp_segments(segments)
    if degree == 1:
        return resample_linear(pts, closed=closed, segments=segments)

    control = pad_control_points(pts, degree, closed)
    if len(control) <= degree:
        return to_points(pts)

    knots = build_knot_vector(len(control), degree)
    n = len(control) - 1

    out = []
    skipped = 0
    for k in range(degree, n + 1):
        lo = knots[k]
        hi = knots[k + 1]
        if hi - lo <= EPSILON:
            continue

        support = control[k - degree:k + 1]
        if np.ptp(support, axis=0).max() <= EPSILON:
            # Every control point of this piece coincides; it is a single point.
            skipped += 1
            continue

        first = 0 if not out else 1
        for s in range(first, segments + 1):
            t = lo + (hi - lo) * s / segments
            out.append(de_boor(k, t, degree, knots, control))

    if skipped:
        get_tracer().event(f"Skipped {skipped} degenerate B-spline pieces", level="DEBUG")

    if not out:
        # All control points coincide.
        out = [pts[0]]

    if closed:
        out.append(out[0].copy())

    return to_points(out)


def pad_control_points(points, degree, closed=False):
    """Repeat end points (open) or wrap the first `degree` points (closed)."""
    pts = as_array(points)
    if closed:
        wrap = [pts[i % len(pts)] for i in range(degree)]
        return np.vstack([pts] + wrap) if wrap else pts

    start = np.repeat(pts[:1], degree, axis=0)
    end = np.repeat(pts[-1:], degree, axis=0)
    return np.vstack([start, pts, end])


def build_knot_vector(count, degree):
    """
    Clamped uniform knot vector of length count + degree + 1.

    The first degree + 1 knots are 0, the last degree + 1 are
    count - degree, and the interior knots step by one.
    """
    n = count - 1
    m = n + degree + 1
    knots = []
    for i in range(m + 1):
        if i <= degree:
            knots.append(0.0)
        elif i >= m - degree:
            knots.append(float(n - degree + 1))
        else:
            knots.append(float(i - degree))
    return knots


def de_boor(k, t, degree, knots, control):
    """
    Evaluate the B-spline at parameter t lying in knot span k.

    Blends the degree + 1 control points control[k - degree .. k] in
    `degree` refinement passes. A zero-width knot interval contributes a
    zero blend weight.
    """
    d = np.array(control[k - degree:k + 1], dtype=float)
    for r in range(1, degree + 1):
        for j in range(degree, r - 1, -1):
            i = k - degree + j
            denom = knots[i + degree + 1 - r] - knots[i]
            alpha = 0.0 if abs(denom) < 1e-12 else (t - knots[i]) / denom
            d[j] = (1.0 - alpha) * d[j - 1] + alpha * d[j]
    return d[degree]
