"""
Vector primitives shared by the evaluators, the fillet builder and the
graph decomposer.

Points travel through the kernel as float64 numpy arrays of shape (2,) or
(N, 2); results are handed back to callers as (x, y) tuples.
"""

import math

import numpy as np


EPSILON = 1e-9


def as_array(points):
    """Convert a point sequence into an (N, 2) float array."""
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 2))
    return arr.reshape(-1, 2)


def to_points(arr):
    """Convert an (N, 2) array (or list of arrays) back into (x, y) tuples."""
    return [(float(p[0]), float(p[1])) for p in arr]


def length(v):
    return float(math.hypot(v[0], v[1]))


def normalize(v):
    """Unit vector along v; the zero vector stays zero."""
    n = length(v)
    if n <= EPSILON:
        return np.zeros(2)
    return np.asarray(v, dtype=float) / n


def dot(a, b):
    return float(a[0] * b[0] + a[1] * b[1])


def cross(a, b):
    """z component of the 2D cross product; positive for a left turn."""
    return float(a[0] * b[1] - a[1] * b[0])


def angle_between(a, b):
    """Angle in [0, pi] between two unit vectors."""
    return math.acos(max(-1.0, min(1.0, dot(a, b))))


def polar_angle(v):
    """Polar angle of v in [0, 2*pi)."""
    return math.atan2(v[1], v[0]) % (2 * math.pi)


def lerp(a, b, t):
    return a + (b - a) * t


def signed_area(points):
    """Shoelace area; positive when the ring runs counter-clockwise."""
    pts = as_array(points)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def circle_from_three_points(a, b, c):
    """
    Circumcircle through three points.

    Returns (center, radius) or None when the points are collinear or
    coincident.
    """
    ax, ay = a
    bx, by = b
    cx, cy = c

    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < 1e-8:
        return None

    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d

    center = np.array([ux, uy])
    return center, length(np.asarray(a, dtype=float) - center)
