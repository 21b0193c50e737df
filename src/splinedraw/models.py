"""
Pydantic data models for the splinedraw geometry kernel.

Points are plain (x, y) float tuples so they compare by value. Paths, graphs
and curve styles are frozen models; the kernel never mutates its inputs and
only allocates transient working state inside a single call.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_SEGMENTS = 16
MAX_BSPLINE_DEGREE = 5

Point = Tuple[float, float]


class RadiusMode(str, Enum):
    """How a fillet radius value is interpreted."""
    ABSOLUTE = "absolute"  # drawing units
    RELATIVE = "relative"  # fraction of half the shorter adjacent edge


def clamp_segments(value):
    """Coerce a sample count to an integer >= 1."""
    return max(1, int(round(float(value))))


def clamp_unit(value):
    """Clamp a float into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


def clamp_degree(value):
    """Round and clamp a B-spline degree into [1, 5]."""
    return max(1, min(MAX_BSPLINE_DEGREE, int(round(float(value)))))


class LinearStyle(BaseModel):
    """Straight segments, uniformly resampled."""
    kind: Literal["linear"] = "linear"
    segments_per_edge: int = DEFAULT_SEGMENTS

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("segments_per_edge", mode="before")
    @classmethod
    def _clamp_segments(cls, value):
        return clamp_segments(value)


class CatmullRomStyle(BaseModel):
    """Interpolating cubic spline; tension 0 is loose, 1 is linear."""
    kind: Literal["catmull_rom"] = "catmull_rom"
    tension: float = 0.5
    segments_per_edge: int = DEFAULT_SEGMENTS

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("tension", mode="before")
    @classmethod
    def _clamp_tension(cls, value):
        return clamp_unit(value)

    @field_validator("segments_per_edge", mode="before")
    @classmethod
    def _clamp_segments(cls, value):
        return clamp_segments(value)


class BSplineStyle(BaseModel):
    """Approximating uniform B-spline of degree 1-5."""
    kind: Literal["bspline"] = "bspline"
    degree: int = 3
    segments_per_piece: int = DEFAULT_SEGMENTS

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("degree", mode="before")
    @classmethod
    def _clamp_degree(cls, value):
        return clamp_degree(value)

    @field_validator("segments_per_piece", mode="before")
    @classmethod
    def _clamp_segments(cls, value):
        return clamp_segments(value)


class FilletStyle(BaseModel):
    """Rounded corners, exact circular arcs or affine quarter-ellipses."""
    kind: Literal["fillet"] = "fillet"
    mode: RadiusMode = RadiusMode.RELATIVE
    value: float = 0.5
    segments_per_arc: int = DEFAULT_SEGMENTS
    exact: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("value", mode="before")
    @classmethod
    def _clamp_value(cls, value):
        return max(0.0, float(value))

    @field_validator("segments_per_arc", mode="before")
    @classmethod
    def _clamp_segments(cls, value):
        return clamp_segments(value)


CurveStyle = Annotated[
    Union[LinearStyle, CatmullRomStyle, BSplineStyle, FilletStyle],
    Field(discriminator="kind"),
]


class PathEnd(BaseModel):
    """Metadata for one extremity of an open path traced from a graph."""
    vertex_id: int
    leaf: bool  # graph degree 1; otherwise a junction/trim point

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def trim(self):
        """True when the extremity sits on a junction and may be trimmed."""
        return not self.leaf


class Path(BaseModel):
    """An ordered point sequence with a closed flag.

    A closed path never stores its first point twice; the closing edge is
    implicit.
    """
    points: List[Point] = Field(default_factory=list)
    closed: bool = False
    vertex_ids: List[int] = Field(default_factory=list)
    start: Optional[PathEnd] = None
    end: Optional[PathEnd] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class Graph(BaseModel):
    """Vertices with stable integer ids (their index) and directed edges."""
    vertices: List[Point] = Field(default_factory=list)
    edges: List[Tuple[int, int]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def has_vertex(self, vertex_id):
        return 0 <= vertex_id < len(self.vertices)

    def valid_edges(self):
        """Edges whose endpoints both exist, self-loops excluded, in input order."""
        return [
            (a, b) for a, b in self.edges
            if a != b and self.has_vertex(a) and self.has_vertex(b)
        ]


class Face(BaseModel):
    """A cycle of vertex ids traced from a graph."""
    vertex_ids: List[int] = Field(default_factory=list)
    signed_area: float = 0.0

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def area(self):
        return abs(self.signed_area)

    @property
    def key(self):
        """Order-independent identity used for deduplication."""
        return tuple(sorted(self.vertex_ids))


class Decomposition(BaseModel):
    """Result of decomposing a graph into renderable paths."""
    paths: List[Path] = Field(default_factory=list)
    boundary: Optional[Face] = None
    interior_faces: List[Face] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


def compute_bbox(points):
    """
    Compute bounding box from a list of (x, y) points.

    Returns [min_x, min_y, max_x, max_y].
    """
    if not points:
        return [0.0, 0.0, 0.0, 0.0]

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return [min(xs), min(ys), max(xs), max(ys)]
