"""Pytest fixtures for splinedraw tests."""

import tempfile

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def unit_square():
    """Counter-clockwise unit square."""
    return [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def zigzag():
    """Open polyline with alternating turns."""
    return [(0.0, 0.0), (2.0, 1.0), (4.0, -1.0), (6.0, 1.5), (8.0, 0.0)]


@pytest.fixture
def crossing_graph():
    """Two straight strokes crossing at vertex 4."""
    from splinedraw.models import Graph

    return Graph(
        vertices=[(-1.0, 0.0), (1.0, 0.0), (0.0, -1.0), (0.0, 1.0), (0.0, 0.0)],
        edges=[(0, 4), (4, 1), (2, 4), (4, 3)],
    )


@pytest.fixture
def hexagon_graph():
    """Single directed 6-cycle."""
    import math

    from splinedraw.models import Graph

    vertices = [
        (math.cos(i * math.pi / 3), math.sin(i * math.pi / 3))
        for i in range(6)
    ]
    return Graph(vertices=vertices, edges=[(i, (i + 1) % 6) for i in range(6)])


@pytest.fixture
def tree_graph():
    """Y-shaped tree: stem 0->1, branches 1->2 and 1->3."""
    from splinedraw.models import Graph

    return Graph(
        vertices=[(0.0, -2.0), (0.0, 0.0), (-1.5, 1.5), (1.5, 1.5)],
        edges=[(0, 1), (1, 2), (1, 3)],
    )


@pytest.fixture
def two_cell_graph():
    """Rectangle split into two squares by a middle edge, plus a tail."""
    from splinedraw.models import Graph

    return Graph(
        vertices=[
            (0.0, 0.0), (1.0, 0.0), (2.0, 0.0),
            (2.0, 1.0), (1.0, 1.0), (0.0, 1.0),
            (3.0, 0.0),
        ],
        edges=[(0, 1), (1, 2), (2, 3), (3, 4), (4, 5), (5, 0), (1, 4), (2, 6)],
    )


@pytest.fixture
def default_config():
    """Create default render configuration."""
    from splinedraw.config import RenderConfig
    return RenderConfig()


@pytest.fixture(autouse=True)
def quiet_tracer():
    """Leave the global tracer disabled between tests."""
    yield
    from splinedraw.tracer import configure_tracer
    configure_tracer(enabled=False)
