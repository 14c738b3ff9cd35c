from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

import numpy as np

from .graph_errors import InvalidStartVertexError, UnreachableError


@dataclass(frozen=True)
class ShortestPathTree:
    """Output of one Dijkstra run, in internal indices.

    ``parents[root] == root``; vertices outside the root's component have
    ``None`` for both distance and parent.
    """

    root: int
    distances: tuple[float | None, ...]
    parents: tuple[int | None, ...]

    def distance_to(self, vertex: int) -> float | None:
        return self.distances[vertex]

    def reaches(self, vertex: int) -> bool:
        return self.parents[vertex] is not None


@dataclass(frozen=True)
class ShortestPath:
    start: Hashable
    end: Hashable
    distance: float
    route: tuple[Hashable, ...]

    reachable = True

    def unwrap(self) -> ShortestPath:
        return self


@dataclass(frozen=True)
class Unreachable:
    start: Hashable
    end: Hashable

    reachable = False

    def unwrap(self) -> ShortestPath:
        raise UnreachableError(self.start, self.end)


RouteResult = ShortestPath | Unreachable


def dijkstra_tree(distance: np.ndarray, adjacency: np.ndarray, root: int) -> ShortestPathTree:
    """Single-source shortest paths over non-negative weights, O(order^2).

    Each step confirms the unconfirmed vertex with the smallest known estimate
    (``argmin`` picks the lowest index on ties) and relaxes its unconfirmed
    neighbours whose estimate is unknown or strictly larger than the new
    candidate. The loop ends once no unconfirmed vertex has a known estimate,
    so disconnected vertices simply stay unknown.

    Whether a vertex has been reached is tracked in its own mask, not by a
    finite estimate: a sum of large weights may overflow to ``inf`` and the
    vertex is still reachable, at distance ``inf``.
    """
    order = int(distance.shape[0])
    if not 0 <= root < order:
        raise InvalidStartVertexError(root, order)

    estimate = np.full(order, np.inf, dtype=np.float64)
    parent = np.full(order, -1, dtype=np.int64)
    known = np.zeros(order, dtype=bool)
    confirmed = np.zeros(order, dtype=bool)
    estimate[root] = 0.0
    parent[root] = root
    known[root] = True

    while True:
        open_vertices = np.flatnonzero(known & ~confirmed)
        if open_vertices.size == 0:
            break
        current = int(open_vertices[np.argmin(estimate[open_vertices])])
        confirmed[current] = True

        with np.errstate(over="ignore"):
            candidate = estimate[current] + distance[current]
        improve = adjacency[current] & ~confirmed & (~known | (candidate < estimate))
        estimate[improve] = candidate[improve]
        parent[improve] = current
        known[improve] = True

    return ShortestPathTree(
        root=root,
        distances=tuple(float(d) if reached else None for d, reached in zip(estimate, known)),
        parents=tuple(int(p) if reached else None for p, reached in zip(parent, known)),
    )


def unwind_route(tree: ShortestPathTree, vertex: int) -> tuple[int, ...] | None:
    """Follow parent pointers from ``vertex`` up to the tree root.

    The returned route runs ``vertex -> ... -> root``; ``None`` means the
    vertex is not connected to the root.
    """
    route = [vertex]
    while route[-1] != tree.root:
        step = tree.parents[route[-1]]
        if step is None:
            return None
        route.append(step)
    return tuple(route)
