"""Tests for corner fillets."""

import math

import numpy as np
import pytest


def _rounded(points, digits=9):
    return [(round(x, digits), round(y, digits)) for x, y in points]


class TestFilletOffset:
    """Tests for the offset rule."""

    def test_relative_scales_half_edge(self):
        from splinedraw.curves.fillet import fillet_offset

        assert fillet_offset(1.0, 3.0, math.pi / 2, "relative", 0.5) == pytest.approx(0.25)
        assert fillet_offset(1.0, 3.0, math.pi / 2, "relative", 1.0) == pytest.approx(0.5)

    def test_relative_value_clamped(self):
        from splinedraw.curves.fillet import fillet_offset

        assert fillet_offset(2.0, 2.0, 1.0, "relative", 4.0) == pytest.approx(1.0)
        assert fillet_offset(2.0, 2.0, 1.0, "relative", -1.0) == 0.0

    def test_absolute_uses_tangent_length(self):
        """A 90 degree corner has tangent length equal to the radius."""
        from splinedraw.curves.fillet import fillet_offset

        assert fillet_offset(1.0, 1.0, math.pi / 2, "absolute", 0.2) == pytest.approx(0.2)

    def test_absolute_capped(self):
        from splinedraw.curves.fillet import fillet_offset

        assert fillet_offset(1.0, 2.0, math.pi / 2, "absolute", 10.0) == pytest.approx(0.5)

    @pytest.mark.parametrize("mode", ["relative", "absolute"])
    def test_offset_never_exceeds_half_shorter_edge(self, mode):
        """Whatever the radius, the tangent points stay within half the shorter edge."""
        from splinedraw.curves.fillet import corner_offsets

        rng = np.random.default_rng(42)
        for _ in range(50):
            points = [tuple(p) for p in rng.uniform(-10, 10, size=(6, 2))]
            value = float(rng.uniform(0, 20))
            offsets = corner_offsets(points, closed=True, mode=mode, value=value)

            for i, offset in enumerate(offsets):
                a = math.dist(points[i - 1], points[i])
                b = math.dist(points[i], points[(i + 1) % len(points)])
                assert offset <= min(a, b) / 2 + 1e-12


class TestSquareScenario:
    """Closed unit square with relative radius 0.5."""

    def test_corner_offsets(self, unit_square):
        from splinedraw.curves.fillet import corner_offsets

        offsets = corner_offsets(unit_square, closed=True, mode="relative", value=0.5)
        assert offsets == pytest.approx([0.25] * 4)

    @pytest.mark.parametrize("exact", [False, True])
    def test_tangent_points(self, unit_square, exact):
        """Tangent points sit at 0.25 and 0.75 along every edge."""
        from splinedraw.curves.fillet import build_fillet_path

        result = _rounded(build_fillet_path(unit_square, closed=True, mode="relative",
                                            value=0.5, segments=8, exact=exact))

        expected = [
            (0.25, 0.0), (0.75, 0.0), (1.0, 0.25), (1.0, 0.75),
            (0.75, 1.0), (0.25, 1.0), (0.0, 0.75), (0.0, 0.25),
        ]
        for point in expected:
            assert point in result

    def test_closed_output_wraps(self, unit_square):
        from splinedraw.curves.fillet import build_fillet_path

        result = build_fillet_path(unit_square, closed=True, value=0.5, segments=8)

        assert len(result) == 4 * (2 + 7) + 1
        assert result[-1] == pytest.approx(result[0])
        assert result[0] == pytest.approx((0.0, 0.25))


class TestAffineArc:
    """Quarter-ellipse construction."""

    def test_arc_inside_corner_triangle(self):
        """Samples stay inside the triangle spanned by the tangent points and the vertex."""
        from shapely.geometry import Point, Polygon

        from splinedraw.curves.fillet import build_corner

        corner = build_corner(np.array([0.0, 0.0]), np.array([2.0, 0.0]), np.array([3.0, 2.0]),
                              "relative", 0.8)
        triangle = Polygon([tuple(corner.tangent_in), tuple(corner.vertex), tuple(corner.tangent_out)])
        triangle = triangle.buffer(1e-9)

        for sample in corner.arc_points(16):
            assert triangle.contains(Point(tuple(sample)))

    def test_arc_midpoint(self):
        from splinedraw.curves.fillet import build_corner

        corner = build_corner(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([1.0, 1.0]),
                              "relative", 0.5)
        samples = corner.arc_points(2)

        assert len(samples) == 1
        k = 1 - math.sqrt(0.5)
        assert samples[0] == pytest.approx([1.0 - 0.25 * k, 0.25 * k])


class TestExactArc:
    """Circular arc construction."""

    def test_samples_on_circle(self):
        from splinedraw.curves.fillet import build_corner

        corner = build_corner(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([1.0, 1.0]),
                              "relative", 0.5, exact=True)

        assert corner.center == pytest.approx([0.875, 0.125])
        assert corner.radius == pytest.approx(math.sqrt(2) * 0.125)
        for sample in corner.arc_points(16):
            assert np.linalg.norm(sample - corner.center) == pytest.approx(corner.radius)

    def test_concave_arc_passes_through_vertex(self):
        """A right turn sweeps the side of the circle holding the vertex."""
        from splinedraw.curves.fillet import build_corner

        corner = build_corner(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([1.0, -1.0]),
                              "relative", 0.5, exact=True)
        samples = corner.arc_points(16)

        assert corner.concave
        assert samples[7] == pytest.approx([1.0, 0.0], abs=1e-9)

    def test_convex_arc_avoids_vertex(self):
        """A left turn sweeps the side of the circle away from the vertex."""
        from splinedraw.curves.fillet import build_corner

        corner = build_corner(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([1.0, 1.0]),
                              "relative", 0.5, exact=True)
        samples = corner.arc_points(16)

        assert not corner.concave
        assert samples[7] == pytest.approx([0.75, 0.25], abs=1e-9)


class TestBuildFilletPath:
    """Tests for whole-path filleting."""

    def test_open_keeps_end_points(self, zigzag):
        from splinedraw.curves.fillet import build_fillet_path

        result = build_fillet_path(zigzag, closed=False, value=0.5, segments=6)

        assert result[0] == zigzag[0]
        assert result[-1] == zigzag[-1]
        assert len(result) == 2 + 3 * (2 + 5)

    def test_collinear_vertex_kept(self):
        """Straight-through vertices are emitted unchanged."""
        from splinedraw.curves.fillet import build_fillet_path

        points = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]
        assert build_fillet_path(points, value=0.5) == points

    def test_reversing_vertex_kept(self):
        from splinedraw.curves.fillet import build_fillet_path

        points = [(0.0, 0.0), (1.0, 0.0), (0.0, 0.0)]
        assert build_fillet_path(points, value=0.5) == points

    def test_zero_length_edge_kept(self):
        from splinedraw.curves.fillet import build_fillet_path

        points = [(0.0, 0.0), (1.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        result = build_fillet_path(points, value=0.5)
        assert (1.0, 0.0) in result

    def test_zero_radius_is_polyline(self, zigzag):
        from splinedraw.curves.fillet import build_fillet_path

        assert build_fillet_path(zigzag, value=0.0) == zigzag

    def test_fewer_than_three_points(self):
        from splinedraw.curves.fillet import build_fillet_path

        assert build_fillet_path([(0.0, 0.0), (1.0, 1.0)]) == [(0.0, 0.0), (1.0, 1.0)]

    @pytest.mark.parametrize("exact", [False, True])
    def test_converges_to_polyline(self, zigzag, exact):
        """Shrinking the radius pulls every sample onto the original vertices."""
        from splinedraw.curves.fillet import build_fillet_path

        vertices = np.array(zigzag)
        deviations = []
        for value in (1e-1, 1e-3, 1e-6):
            result = np.array(build_fillet_path(zigzag, value=value, segments=8, exact=exact))
            distances = np.linalg.norm(result[:, None, :] - vertices[None, :, :], axis=2).min(axis=1)
            deviations.append(distances.max())

        assert deviations[0] > deviations[1] > deviations[2]
        assert deviations[2] < 1e-5
