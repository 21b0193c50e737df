"""
Junction pairing for splinedraw graphs.

At an interior vertex with exactly two incoming and two outgoing edges,
decide which outgoing edge continues each incoming one so that paths run
straight through crossings instead of bouncing off them.
"""

from splinedraw.curves.vectors import cross, dot, normalize, polar_angle
from splinedraw.tracer import get_tracer


DEFAULT_TIE_EPSILON = 1e-9

IDENTITY = (0, 1)
SWAPPED = (1, 0)


def pair_junctions(positions, digraph, boundary_vertices=(), tie_epsilon=DEFAULT_TIE_EPSILON):
    """
    Build the continuation map for every pairable vertex.

    Args:
        positions: (N, 2) vertex coordinates indexed by vertex id
        digraph: networkx DiGraph of the valid directed edges
        boundary_vertices: vertex ids on the boundary face (never paired)
        tie_epsilon: score difference treated as a tie

    Returns:
        dict mapping incoming edge (a, v) to outgoing edge (v, b)
    """
    tracer = get_tracer()
    boundary_vertices = set(boundary_vertices)

    pairing = {}
    for v in sorted(digraph.nodes()):
        if v in boundary_vertices:
            continue
        if digraph.in_degree(v) != 2 or digraph.out_degree(v) != 2:
            continue

        incoming = list(digraph.in_edges(v))
        outgoing = list(digraph.out_edges(v))
        permutation = choose_pairing(positions, v, incoming, outgoing, tie_epsilon)
        for i, j in enumerate(permutation):
            pairing[incoming[i]] = outgoing[j]

        tracer.event(
            f"Junction {v}: {incoming[0]}->{outgoing[permutation[0]]}, "
            f"{incoming[1]}->{outgoing[permutation[1]]}",
            level="DEBUG",
        )

    return pairing


def choose_pairing(positions, v, incoming, outgoing, tie_epsilon=DEFAULT_TIE_EPSILON):
    """
    Pick IDENTITY (in0->out0, in1->out1) or SWAPPED (in0->out1, in1->out0).

    The pairing with the larger straightness score wins. On a tie, a vertex
    whose two incoming directions are angular neighbours takes the pairing
    whose paths do not cross; otherwise the pairing with more right-hand
    turns wins, and IDENTITY if that ties as well.
    """
    origin = positions[v]
    # Incoming directions reversed so that all four point away from v.
    in_dirs = [normalize(positions[a] - origin) for a, _ in incoming]
    out_dirs = [normalize(positions[b] - origin) for _, b in outgoing]

    identity = pairing_score(in_dirs, out_dirs, IDENTITY)
    swapped = pairing_score(in_dirs, out_dirs, SWAPPED)
    if identity - swapped > tie_epsilon:
        return IDENTITY
    if swapped - identity > tie_epsilon:
        return SWAPPED

    non_crossing = _non_crossing_pairing(in_dirs, out_dirs)
    if non_crossing is not None:
        return non_crossing

    if _right_turns(in_dirs, out_dirs, SWAPPED) > _right_turns(in_dirs, out_dirs, IDENTITY):
        return SWAPPED
    return IDENTITY


def pairing_score(in_dirs, out_dirs, permutation):
    """
    Sum of dot products between each incoming travel direction and its
    paired outgoing direction; 2.0 means both paths go straight through.
    """
    return sum(dot(-in_dirs[i], out_dirs[j]) for i, j in enumerate(permutation))


def _right_turns(in_dirs, out_dirs, permutation, eps=1e-12):
    return sum(1 for i, j in enumerate(permutation) if cross(-in_dirs[i], out_dirs[j]) < -eps)


def _non_crossing_pairing(in_dirs, out_dirs):
    """
    Pairing that keeps the two paths from crossing, when the incoming
    directions sit next to each other in angular order; None when they are
    opposite (in, out, in, out).
    """
    labelled = [("in", 0, in_dirs[0]), ("in", 1, in_dirs[1]),
                ("out", 0, out_dirs[0]), ("out", 1, out_dirs[1])]
    ring = [(kind, idx) for kind, idx, _ in sorted(labelled, key=lambda item: (polar_angle(item[2]), item[0], item[1]))]

    p = ring.index(("in", 0))
    q = ring.index(("in", 1))
    gap = (q - p) % 4
    if gap == 2:
        return None

    if gap == 1:
        # ring: in0, in1, X, Y -> in1 pairs with X, in0 with Y
        out_for_in1 = ring[(q + 1) % 4][1]
        out_for_in0 = ring[(p - 1) % 4][1]
    else:
        # ring: in1, in0, X, Y -> in0 pairs with X, in1 with Y
        out_for_in0 = ring[(p + 1) % 4][1]
        out_for_in1 = ring[(q - 1) % 4][1]

    if out_for_in0 == out_for_in1:
        return None
    return (out_for_in0, out_for_in1)
