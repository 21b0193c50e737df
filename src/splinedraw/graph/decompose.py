"""
Graph decomposition for splinedraw.

Turns a vertex/edge graph with junctions of any degree into an ordered list
of paths:

1. trace faces and pick the boundary (largest area);
2. pair the edges at interior 2-in/2-out crossings;
3. emit the boundary as one closed path, then walk every remaining directed
   edge, following pairings, stopping at leaves, ambiguous junctions and
   already-walked edges, and fanning out at branch points.

Each open path records whether its ends are true leaves or junction points
so callers can decide whether to trim them.
"""

import networkx as nx

from splinedraw.curves.vectors import as_array
from splinedraw.graph.faces import cycle_edges, select_boundary, trace_faces, undirected_view
from splinedraw.graph.junctions import DEFAULT_TIE_EPSILON, pair_junctions
from splinedraw.models import Decomposition, Path, PathEnd
from splinedraw.tracer import get_tracer, trace


@trace(label="decompose_graph")
def decompose_graph(graph, tie_epsilon=DEFAULT_TIE_EPSILON):
    """
    Decompose a Graph into renderable paths.

    Dangling edges (unknown vertex ids) and self-loops are ignored; duplicate
    edges are walked once. Output order depends only on the input.

    Returns:
        Decomposition with the paths (boundary first when one exists), the
        boundary face, and the interior faces
    """
    tracer = get_tracer()

    edges = list(dict.fromkeys(graph.valid_edges()))
    dropped = len(graph.edges) - len(graph.valid_edges())
    if dropped:
        tracer.event(f"Ignored {dropped} edges with unknown endpoints or self-loops", level="WARN")

    positions = as_array(graph.vertices)
    digraph = nx.DiGraph()
    digraph.add_nodes_from(range(len(positions)))
    digraph.add_edges_from(edges)
    und = undirected_view(edges, len(positions))

    with tracer.span("faces", module="decompose"):
        faces = trace_faces(und, positions)
        boundary, interior = select_boundary(faces)

    boundary_vertices = set(boundary.vertex_ids) if boundary else set()
    with tracer.span("junctions", module="decompose"):
        pairing = pair_junctions(positions, digraph, boundary_vertices, tie_epsilon)

    walker = PathWalker(positions, digraph, und, pairing)
    paths = []

    with tracer.span("walk", module="decompose"):
        if boundary:
            paths.append(walker.take_boundary(boundary.vertex_ids))
            roots = []
        else:
            roots = _root_edges(digraph, und, edges)

        for edge in roots + _leaf_first(und, edges):
            if edge not in walker.visited:
                paths.extend(walker.walk(edge))

        tracer.event(f"Decomposed into {len(paths)} paths", boundary=boundary is not None)

    return Decomposition(paths=paths, boundary=boundary, interior_faces=interior)


def _root_edges(digraph, und, edges):
    """Out-edges of in-degree-0 vertices, else one edge to start from."""
    sources = [v for v in digraph.nodes() if digraph.in_degree(v) == 0 and digraph.out_degree(v) > 0]
    if sources:
        return [e for v in sources for e in digraph.out_edges(v)]
    return _leaf_first(und, edges)[:1]


def _leaf_first(und, edges):
    """Edges leaving a degree-1 vertex first, then the rest, each in input order."""
    from_leaf = [e for e in edges if und.degree(e[0]) == 1]
    return from_leaf + [e for e in edges if und.degree(e[0]) != 1]


class PathWalker:
    """
    Walks directed edges into paths with an explicit worklist.

    Walking an edge also consumes its reverse, so a graph that lists both
    directions of a line draws it once.
    """

    def __init__(self, positions, digraph, und, pairing):
        self.positions = positions
        self.digraph = digraph
        self.und = und
        self.pairing = pairing
        self.visited = set()
        self.boundary_edges = set()

    def _consume(self, edge):
        a, b = edge
        self.visited.add((a, b))
        self.visited.add((b, a))

    def take_boundary(self, cycle):
        """Closed path along the boundary cycle; its edges are consumed."""
        for a, b in cycle_edges(cycle):
            self._consume((a, b))
            self.boundary_edges.add((min(a, b), max(a, b)))
        return Path(
            points=[self._point(v) for v in cycle],
            closed=True,
            vertex_ids=list(cycle),
        )

    def walk(self, root):
        """
        Walk from a root edge; returns the list of paths it produced.

        Per path: follow a pairing if the arrival edge has one, stop at a
        leaf, stop at a 2-in / >2-out vertex, stop on an already walked
        edge, continue along a single free outgoing edge, or end the path
        and start one new path per free outgoing edge.
        """
        tracer = get_tracer()
        paths = []
        worklist = [([root[0]], root)]

        while worklist:
            ids, edge = worklist.pop()
            while True:
                if edge in self.visited:
                    break
                self._consume(edge)
                b = edge[1]
                ids.append(b)

                nxt = self.pairing.get(edge)
                if nxt is not None:
                    edge = nxt
                    continue

                out_degree = self.digraph.out_degree(b)
                if out_degree == 0:
                    break
                if self.digraph.in_degree(b) == 2 and out_degree > 2:
                    tracer.event(f"Stopped at junction {b} (in=2, out={out_degree})", level="DEBUG")
                    break

                free = [
                    e for e in self.digraph.out_edges(b)
                    if e not in self.visited and (min(e), max(e)) not in self.boundary_edges
                ]
                if len(free) == 1:
                    edge = free[0]
                    continue
                if free:
                    tracer.event(f"Branching at {b} into {len(free)} paths", level="DEBUG")
                    for branch in reversed(free):
                        worklist.append(([b], branch))
                break

            if len(ids) >= 2:
                paths.append(self._make_path(ids))

        return paths

    def _make_path(self, ids):
        if len(ids) >= 4 and ids[0] == ids[-1]:
            cycle = ids[:-1]
            return Path(points=[self._point(v) for v in cycle], closed=True, vertex_ids=cycle)

        return Path(
            points=[self._point(v) for v in ids],
            closed=False,
            vertex_ids=ids,
            start=self._end(ids[0]),
            end=self._end(ids[-1]),
        )

    def _end(self, vertex_id):
        return PathEnd(vertex_id=vertex_id, leaf=self.und.degree(vertex_id) == 1)

    def _point(self, vertex_id):
        p = self.positions[vertex_id]
        return (float(p[0]), float(p[1]))
