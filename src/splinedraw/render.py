"""
Rendering orchestration for splinedraw.

The calling layer around the kernel: decomposes graphs, trims junction ends
for interpolating styles, evaluates every path with one curve style and
builds fill regions for the boundary and interior faces.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import MultiPolygon, Polygon
from shapely.ops import unary_union
from shapely.validation import make_valid

from splinedraw.config import RenderConfig, style_from_config
from splinedraw.curves.evaluate import evaluate_curve
from splinedraw.curves.vectors import as_array, lerp
from splinedraw.graph.decompose import decompose_graph
from splinedraw.models import CatmullRomStyle, Decomposition, Path, Point, compute_bbox
from splinedraw.tracer import get_tracer, trace


MAX_TRIM_RATIO = 0.4


class RenderedCurve(BaseModel):
    """An evaluated polyline and the path it came from."""
    points: List[Point] = Field(default_factory=list)
    closed: bool = False
    source: Optional[Path] = None
    boundary: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class RenderResult(BaseModel):
    """Everything a drawing surface needs for one scene."""
    curves: List[RenderedCurve] = Field(default_factory=list)
    fill_regions: List[Any] = Field(default_factory=list)  # shapely polygons
    decomposition: Optional[Decomposition] = None

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    @property
    def bbox(self):
        return compute_bbox([p for curve in self.curves for p in curve.points])


def needs_junction_trim(style):
    """Interpolating curves kink where they hit a junction; approximating ones do not."""
    return isinstance(style, CatmullRomStyle)


def trim_junction_ends(path, ratio):
    """
    Pull each junction end of an open path toward its neighbouring point.

    `ratio` is the fraction of the end edge removed, clamped to
    [0, MAX_TRIM_RATIO] so both ends of a single edge never meet.
    Leaf ends and closed paths are returned unchanged.
    """
    ratio = max(0.0, min(MAX_TRIM_RATIO, float(ratio)))
    if path.closed or len(path.points) < 2 or ratio == 0.0:
        return path

    pts = as_array(path.points)
    trimmed = pts.copy()
    if path.start is not None and path.start.trim:
        trimmed[0] = lerp(pts[0], pts[1], ratio)
    if path.end is not None and path.end.trim:
        trimmed[-1] = lerp(pts[-1], pts[-2], ratio)

    return path.model_copy(update={"points": [(float(x), float(y)) for x, y in trimmed]})


def _resolve(style, config):
    config = config or RenderConfig()
    if style is None:
        style = style_from_config(config)
    return style, config


@trace(label="render_points")
def render_points(points, closed=False, style=None, config=None):
    """Evaluate a bare point list with a curve style."""
    style, config = _resolve(style, config)
    path = Path(points=points, closed=closed)
    curve = evaluate_curve(path, style, log_segments=config.style.log_segments)
    return RenderedCurve(points=curve, closed=closed, source=path)


@trace(label="render_graph")
def render_graph(graph, style=None, config=None):
    """
    Decompose a graph and evaluate each resulting path.

    Returns RenderResult with one curve per path (the boundary first, when
    the graph has one) and fill regions for the boundary and interior faces.
    """
    tracer = get_tracer()
    style, config = _resolve(style, config)

    decomposition = decompose_graph(graph, tie_epsilon=config.decompose.tie_epsilon)
    trim = config.decompose.trim_junction_ends and needs_junction_trim(style)

    curves = []
    with tracer.span("evaluate_paths", module="render"):
        for index, path in enumerate(decomposition.paths):
            prepared = trim_junction_ends(path, config.decompose.trim_ratio) if trim else path
            points = evaluate_curve(prepared, style, log_segments=config.style.log_segments)
            curves.append(RenderedCurve(
                points=points,
                closed=path.closed,
                source=path,
                boundary=index == 0 and decomposition.boundary is not None,
            ))

    with tracer.span("fill_regions", module="render"):
        fills = []
        if decomposition.boundary is not None:
            fills.append(curves[0].points)
        for face in decomposition.interior_faces:
            face_path = Path(
                points=[graph.vertices[v] for v in face.vertex_ids],
                closed=True,
                vertex_ids=list(face.vertex_ids),
            )
            fills.append(evaluate_curve(face_path, style))
        regions = [region for region in (fill_polygon(pts) for pts in fills) if region is not None]
        tracer.event(f"Built {len(regions)} fill regions")

    return RenderResult(curves=curves, fill_regions=regions, decomposition=decomposition)


def fill_polygon(points):
    """
    Polygon for a closed evaluated curve, repaired when the curve crosses
    itself. Returns None for fewer than three points or an empty result.
    """
    if len(points) < 3:
        return None
    polygon = Polygon(points)
    if not polygon.is_valid:
        polygon = _polygonal_parts(make_valid(polygon))
    if polygon is None or polygon.is_empty:
        return None
    return polygon


def _polygonal_parts(geometry):
    """Polygon or MultiPolygon pieces of a repaired geometry; lines and points are dropped."""
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    pieces = [g for g in getattr(geometry, "geoms", []) if isinstance(g, (Polygon, MultiPolygon))]
    if not pieces:
        return None
    return unary_union(pieces)
