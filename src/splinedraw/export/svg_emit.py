"""
SVG emission for splinedraw.

Writes rendered polylines and fill regions as an SVG document. Geometry is
y-up; the document flips it so drawings appear the right way round.
"""

import svgwrite

from splinedraw.tracer import get_tracer, trace


class _Frame:
    """Maps kernel coordinates into the SVG viewport."""

    def __init__(self, bbox, margin):
        min_x, min_y, max_x, max_y = bbox
        self.min_x = min_x
        self.max_y = max_y
        self.margin = margin
        self.width = max(max_x - min_x, 1e-6) + 2 * margin
        self.height = max(max_y - min_y, 1e-6) + 2 * margin

    def map(self, point):
        return (point[0] - self.min_x + self.margin, self.max_y - point[1] + self.margin)


def polyline_to_svg_path(points, frame, closed=False):
    """SVG path `d` attribute for a polyline."""
    if not points:
        return ""

    parts = []
    for i, point in enumerate(points):
        x, y = frame.map(point)
        parts.append(f"{'M' if i == 0 else 'L'} {x:.3f} {y:.3f}")
    if closed:
        parts.append("Z")
    return " ".join(parts)


def polygon_to_svg_path(region, frame):
    """SVG path `d` for a shapely Polygon or MultiPolygon, holes included."""
    polygons = getattr(region, "geoms", [region])
    parts = []
    for polygon in polygons:
        for ring in [polygon.exterior] + list(polygon.interiors):
            parts.append(polyline_to_svg_path(list(ring.coords)[:-1], frame, closed=True))
    return " ".join(p for p in parts if p)


@trace(label="emit_render_svg")
def emit_render_svg(result, export_config):
    """
    Create an SVG document for a RenderResult.

    Args:
        result: RenderResult from render_graph or a wrapped render_points curve
        export_config: ExportConfig with stroke, fill and marker settings

    Returns:
        svgwrite.Drawing object
    """
    tracer = get_tracer()

    frame = _Frame(result.bbox, export_config.margin)
    dwg = svgwrite.Drawing(size=(f"{frame.width:.3f}px", f"{frame.height:.3f}px"))
    dwg.viewbox(0, 0, frame.width, frame.height)

    if export_config.fill_faces and result.fill_regions:
        fill_group = dwg.g(id="fills", fill=export_config.fill_color,
                           fill_opacity=export_config.fill_opacity, stroke="none")
        for i, region in enumerate(result.fill_regions):
            d = polygon_to_svg_path(region, frame)
            if d:
                fill_group.add(dwg.path(d=d, id=f"fill_{i}", fill_rule="evenodd"))
        dwg.add(fill_group)

    curve_group = dwg.g(id="curves", fill="none", stroke=export_config.stroke_color,
                        stroke_width=export_config.stroke_width,
                        stroke_linecap="round", stroke_linejoin="round")
    for i, curve in enumerate(result.curves):
        d = polyline_to_svg_path(curve.points, frame)
        if d:
            curve_group.add(dwg.path(d=d, id=f"curve_{i}"))
    dwg.add(curve_group)

    if export_config.show_points:
        point_group = dwg.g(id="control_points", fill=export_config.stroke_color)
        for curve in result.curves:
            if curve.source is None:
                continue
            for point in curve.source.points:
                point_group.add(dwg.circle(center=frame.map(point), r=export_config.point_radius))
        dwg.add(point_group)

    tracer.event(f"SVG emitted with {len(result.curves)} curves, {len(result.fill_regions)} fills")

    return dwg
