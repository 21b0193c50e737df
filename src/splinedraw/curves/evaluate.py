"""
Curve evaluation entry point.

Hands a path to exactly one evaluator, chosen by the style variant, and
applies the insufficient-point fallbacks: fewer than two points pass
through, and curvature styles on two points degrade to linear resampling.
"""

from splinedraw.curves.bspline import evaluate_bspline
from splinedraw.curves.catmull_rom import evaluate_catmull_rom
from splinedraw.curves.fillet import build_fillet_path
from splinedraw.curves.linear import resample_linear
from splinedraw.curves.vectors import as_array, to_points
from splinedraw.models import (
    BSplineStyle, CatmullRomStyle, FilletStyle, LinearStyle, Path,
)
from splinedraw.tracer import get_tracer, trace


@trace(label="evaluate_curve")
def evaluate_curve(path, style, log_segments=False):
    """
    Evaluate a Path (or a bare point sequence, taken as open) with a curve style.

    Returns the renderable polyline as a list of (x, y) tuples.

    Raises:
        TypeError: if `style` is not one of the curve style models
    """
    if isinstance(path, Path):
        points, closed = path.points, path.closed
    else:
        points, closed = path, False

    pts = as_array(points)
    count = len(pts)

    if count < 2:
        return to_points(pts)

    if isinstance(style, LinearStyle):
        return resample_linear(pts, closed=closed, segments=style.segments_per_edge)

    if isinstance(style, CatmullRomStyle):
        if count < 3:
            return _linear_fallback(pts, closed, style.segments_per_edge, style)
        return evaluate_catmull_rom(
            pts, tension=style.tension, closed=closed,
            segments=style.segments_per_edge, log_segments=log_segments,
        )

    if isinstance(style, BSplineStyle):
        if count < 3 and style.degree >= 2:
            return _linear_fallback(pts, closed, style.segments_per_piece, style)
        return evaluate_bspline(pts, degree=style.degree, closed=closed, segments=style.segments_per_piece)

    if isinstance(style, FilletStyle):
        return build_fillet_path(
            pts, closed=closed, mode=style.mode, value=style.value,
            segments=style.segments_per_arc, exact=style.exact,
        )

    raise TypeError(f"Unsupported curve style: {type(style).__name__}")


def _linear_fallback(pts, closed, segments, style):
    get_tracer().event(f"{style.kind} needs 3 points, got {len(pts)}; resampling linearly", level="DEBUG")
    return resample_linear(pts, closed=closed, segments=segments)
