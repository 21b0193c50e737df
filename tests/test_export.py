"""Tests for scene files, SVG export and the CLI."""

import json
import os

import pytest


def _write(path, data):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return path


@pytest.fixture
def point_scene(temp_dir):
    return _write(os.path.join(temp_dir, "points.json"), {
        "points": [[0, 0], [4, 0], [4, 3], [0, 3]],
        "closed": True,
        "style": {"kind": "fillet", "mode": "relative", "value": 0.5, "segments_per_arc": 4},
    })


@pytest.fixture
def graph_scene(temp_dir):
    return _write(os.path.join(temp_dir, "graph.json"), {
        "graph": {
            "vertices": [[0, 0], [1, 0], [2, 0], [2, 1], [1, 1], [0, 1]],
            "edges": [[0, 1], [1, 2], [2, 3], [3, 4], [4, 5], [5, 0], [1, 4]],
        },
    })


class TestScene:
    """Tests for scene loading and saving."""

    def test_load_points(self, point_scene):
        from splinedraw.io.scene import load_scene
        from splinedraw.models import FilletStyle

        scene = load_scene(point_scene)

        assert scene.closed
        assert scene.points[2] == (4.0, 3.0)
        assert isinstance(scene.style, FilletStyle)
        assert scene.graph is None

    def test_load_graph(self, graph_scene):
        from splinedraw.io.scene import load_scene

        scene = load_scene(graph_scene)

        assert len(scene.graph.vertices) == 6
        assert scene.graph.edges[-1] == (1, 4)
        assert scene.style is None

    def test_missing_file(self, temp_dir):
        from splinedraw.io.scene import load_scene

        with pytest.raises(FileNotFoundError):
            load_scene(os.path.join(temp_dir, "nope.json"))

    def test_points_and_graph_rejected(self, temp_dir):
        from pydantic import ValidationError

        from splinedraw.io.scene import load_scene

        path = _write(os.path.join(temp_dir, "both.json"), {
            "points": [[0, 0], [1, 1]],
            "graph": {"vertices": [[0, 0]], "edges": []},
        })
        with pytest.raises(ValidationError):
            load_scene(path)

    def test_unknown_style_kind_rejected(self, temp_dir):
        from pydantic import ValidationError

        from splinedraw.io.scene import load_scene

        path = _write(os.path.join(temp_dir, "bad.json"), {
            "points": [[0, 0], [1, 1]],
            "style": {"kind": "nurbs"},
        })
        with pytest.raises(ValidationError):
            load_scene(path)

    def test_save_json_model(self, temp_dir):
        """Models are dumped in JSON mode; nested directories are created."""
        from splinedraw.io.scene import save_json
        from splinedraw.models import Path

        path = os.path.join(temp_dir, "out", "path.json")
        save_json(Path(points=[(0.0, 0.0), (1.0, 2.0)]), path)

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["points"] == [[0.0, 0.0], [1.0, 2.0]]
        assert data["closed"] is False


class TestSvgEmit:
    """Tests for SVG emission."""

    def test_frame_flips_y(self):
        from splinedraw.export.svg_emit import _Frame

        frame = _Frame([0.0, 0.0, 10.0, 5.0], margin=1.0)

        assert frame.width == pytest.approx(12.0)
        assert frame.height == pytest.approx(7.0)
        assert frame.map((0.0, 0.0)) == pytest.approx((1.0, 6.0))
        assert frame.map((10.0, 5.0)) == pytest.approx((11.0, 1.0))

    def test_polyline_path(self):
        from splinedraw.export.svg_emit import _Frame, polyline_to_svg_path

        frame = _Frame([0.0, 0.0, 1.0, 1.0], margin=0.0)
        d = polyline_to_svg_path([(0.0, 0.0), (1.0, 1.0)], frame, closed=True)

        assert d == "M 0.000 1.000 L 1.000 0.000 Z"
        assert polyline_to_svg_path([], frame) == ""

    def test_emit_graph(self, two_cell_graph, default_config):
        from splinedraw.export.svg_emit import emit_render_svg
        from splinedraw.render import render_graph

        default_config.export.fill_faces = True
        default_config.export.show_points = True
        result = render_graph(two_cell_graph, config=default_config)
        svg = emit_render_svg(result, default_config.export).tostring()

        assert 'id="curves"' in svg
        assert 'id="fills"' in svg
        assert 'id="control_points"' in svg
        assert svg.count("<path") == len(result.curves) + len(result.fill_regions)
        assert svg.count("<circle") == sum(len(c.source.points) for c in result.curves)

    def test_no_fills_by_default(self, two_cell_graph, default_config):
        from splinedraw.export.svg_emit import emit_render_svg
        from splinedraw.render import render_graph

        result = render_graph(two_cell_graph, config=default_config)
        svg = emit_render_svg(result, default_config.export).tostring()

        assert 'id="fills"' not in svg


class TestCli:
    """Tests for the command line."""

    def test_render_points(self, point_scene, temp_dir, capsys):
        from splinedraw.cli import main

        out = os.path.join(temp_dir, "points.svg")
        json_out = os.path.join(temp_dir, "points_curves.json")
        code = main(["render", "--scene", point_scene, "--out", out, "--json", json_out])

        assert code == 0
        assert os.path.exists(out)
        with open(json_out, encoding="utf-8") as f:
            data = json.load(f)
        assert len(data["curves"]) == 1
        assert data["curves"][0]["closed"] is True
        assert "Rendered 1 curves" in capsys.readouterr().out

    def test_render_graph_with_overrides(self, graph_scene, temp_dir):
        from splinedraw.cli import main

        out = os.path.join(temp_dir, "graph.svg")
        code = main(["render", "-s", graph_scene, "-o", out, "--style", "bspline", "--fill"])

        assert code == 0
        with open(out, encoding="utf-8") as f:
            assert 'id="fills"' in f.read()

    def test_render_with_config(self, graph_scene, temp_dir):
        from splinedraw.cli import main

        config_path = os.path.join(temp_dir, "config.yaml")
        with open(config_path, "w", encoding="utf-8") as f:
            f.write("style:\n  kind: linear\n  segments: 1\n")

        json_out = os.path.join(temp_dir, "graph.json.out")
        code = main(["render", "-s", graph_scene, "-o", os.path.join(temp_dir, "g.svg"),
                     "-c", config_path, "--json", json_out])

        assert code == 0
        with open(json_out, encoding="utf-8") as f:
            data = json.load(f)
        assert data["curves"][0]["boundary"] is True
        assert data["curves"][1]["points"] == [[1.0, 0.0], [1.0, 1.0]]

    def test_render_missing_scene(self, temp_dir, capsys):
        from splinedraw.cli import main

        code = main(["render", "-s", os.path.join(temp_dir, "absent.json"),
                     "-o", os.path.join(temp_dir, "x.svg")])

        assert code == 1
        assert "Scene not found" in capsys.readouterr().err

    def test_render_trace_file(self, point_scene, temp_dir):
        from splinedraw.cli import main

        trace_path = os.path.join(temp_dir, "trace.log")
        code = main(["render", "-s", point_scene, "-o", os.path.join(temp_dir, "p.svg"),
                     "--trace", "--trace-file", trace_path])

        assert code == 0
        with open(trace_path, encoding="utf-8") as f:
            log = f.read()
        assert "cli_render" in log
        assert "evaluate_curve" in log

    def test_init_config(self, temp_dir):
        from splinedraw.cli import main
        from splinedraw.config import RenderConfig, load_config

        path = os.path.join(temp_dir, "splinedraw.yaml")
        assert main(["init-config", "--out", path]) == 0
        assert load_config(path) == RenderConfig()

    def test_no_command(self, capsys):
        from splinedraw.cli import main

        assert main([]) == 0
        assert "render" in capsys.readouterr().out
