"""
Scene files for splinedraw.

A scene is JSON holding either a bare point list (with a closed flag) or a
graph, plus an optional curve style. Outputs are written as JSON and SVG.
"""

import json
import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from splinedraw.models import CurveStyle, Graph, Point
from splinedraw.tracer import get_tracer, trace


class Scene(BaseModel):
    """Input document: points or a graph, never both."""
    points: List[Point] = Field(default_factory=list)
    closed: bool = False
    graph: Optional[Graph] = None
    style: Optional[CurveStyle] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _points_or_graph(self):
        if self.graph is not None and self.points:
            raise ValueError("scene must contain either points or a graph, not both")
        return self


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


@trace(label="load_scene")
def load_scene(path):
    """
    Load a scene from a JSON file.

    Raises FileNotFoundError if path does not exist and
    pydantic.ValidationError if the content is not a valid scene.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Scene not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        scene = Scene.model_validate_json(f.read())

    if scene.graph is not None:
        get_tracer().event(f"Loaded graph scene: {len(scene.graph.vertices)} vertices, {len(scene.graph.edges)} edges")
    else:
        get_tracer().event(f"Loaded point scene: {len(scene.points)} points, closed={scene.closed}")
    return scene


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    get_tracer().event(f"Saved JSON: {path}")


def save_svg(dwg, path):
    """Write an svgwrite Drawing to file."""
    ensure_dir(os.path.dirname(path))
    dwg.saveas(path, pretty=True)
    get_tracer().event(f"Saved SVG: {path}")


def curves_to_json(result):
    """Plain JSON-ready structure for rendered curves."""
    return {
        "curves": [
            {
                "closed": curve.closed,
                "boundary": curve.boundary,
                "points": [[x, y] for x, y in curve.points],
            }
            for curve in result.curves
        ],
    }
