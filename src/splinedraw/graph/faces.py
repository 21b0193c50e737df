"""
Face tracing for splinedraw graphs.

Walks every half-edge of the undirected view, always turning to the next
clockwise neighbour relative to the arrival direction, and collects the
resulting cycles. The face with the largest absolute area is the boundary
(outer silhouette); the remaining faces are interior fill regions.
"""

import networkx as nx

from splinedraw.curves.vectors import polar_angle, signed_area
from splinedraw.models import Face
from splinedraw.tracer import get_tracer, trace


AREA_EPSILON = 1e-9


def undirected_view(edges, vertex_count):
    """Undirected networkx graph over all vertex ids."""
    und = nx.Graph()
    und.add_nodes_from(range(vertex_count))
    und.add_edges_from(edges)
    return und


def sorted_neighbors(und, positions):
    """Neighbours of every vertex in counter-clockwise polar order (ties by id)."""
    order = {}
    for v in und.nodes():
        origin = positions[v]
        order[v] = sorted(
            und.neighbors(v),
            key=lambda w: (polar_angle(positions[w] - origin), w),
        )
    return order


@trace(label="trace_faces")
def trace_faces(und, positions):
    """
    Trace all faces of a planar embedding.

    Each walk stops when it returns to its starting half-edge; a walk that
    exceeds 4 x edge-count steps is discarded. Faces are deduplicated by
    their sorted vertex ids, and back-and-forth spurs into dangling trees
    are removed from each cycle.

    Returns list of Face in discovery order.
    """
    tracer = get_tracer()

    order = sorted_neighbors(und, positions)
    half_edges = sorted([(u, v) for u, v in und.edges()] + [(v, u) for u, v in und.edges()])
    budget = 4 * max(1, und.number_of_edges())

    visited = set()
    faces = {}
    for start in half_edges:
        if start in visited:
            continue

        walk = []
        half_edge = start
        returned = False
        for _ in range(budget):
            visited.add(half_edge)
            walk.append(half_edge[0])

            u, v = half_edge
            ring = order[v]
            nxt = ring[(ring.index(u) - 1) % len(ring)]
            half_edge = (v, nxt)
            if half_edge == start:
                returned = True
                break

        if not returned:
            tracer.event(f"Face walk from {start} exceeded {budget} steps", level="WARN")
            continue

        cycle = remove_spurs(walk)
        if len(cycle) < 3:
            continue

        face = Face(vertex_ids=cycle, signed_area=signed_area(positions[walk]))
        faces.setdefault(face.key, face)

    tracer.event(f"Traced {len(faces)} faces from {len(half_edges)} half-edges")
    return list(faces.values())


def remove_spurs(walk):
    """
    Drop a, b, a excursions from a cyclic vertex walk.

    A face walk that runs around a dangling tree visits each tree edge
    twice; what is left is the cycle itself.
    """
    ids = list(walk)
    changed = True
    while changed and len(ids) >= 3:
        changed = False
        n = len(ids)
        for i in range(n):
            j = (i + 1) % n
            if ids[i - 1] == ids[j]:
                for idx in sorted({i, j}, reverse=True):
                    del ids[idx]
                changed = True
                break
    return ids if len(ids) >= 3 else []


def select_boundary(faces):
    """
    Split faces into the boundary and the interior faces.

    The boundary is the face of maximum absolute signed area; faces with
    (near) zero area never qualify and are not reported as interior either.

    Returns (boundary or None, list of interior faces).
    """
    candidates = [f for f in faces if f.area > AREA_EPSILON]
    if not candidates:
        return None, []

    boundary = max(candidates, key=lambda f: f.area)
    interior = [f for f in candidates if f is not boundary]
    return boundary, interior


def cycle_edges(vertex_ids):
    """Consecutive (a, b) pairs of a closed vertex cycle."""
    n = len(vertex_ids)
    return [(vertex_ids[i], vertex_ids[(i + 1) % n]) for i in range(n)]
