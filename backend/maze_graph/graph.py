from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any

import numpy as np

from .distance_matrix import normalize_distance_matrix
from .logging_utils import log_debug_event, log_event, log_tree_run
from .models import MapView
from .shortest_path import (
    RouteResult,
    ShortestPath,
    ShortestPathTree,
    Unreachable,
    dijkstra_tree,
    unwind_route,
)
from .tree_cache import TreeCacheStore
from .vertex_labels import VertexLabels


class Graph:
    """Weighted graph built once from a distance matrix, answering shortest-path queries.

    The distance and adjacency matrices are read-only after construction. The
    only state that changes afterwards is the tree cache, which grows as
    queries root new shortest-path trees and is never cleared.

    Queries take external labels; everything below the public methods works on
    internal indices ``0..order-1``.
    """

    def __init__(self, distance_matrix: Any, vertex_labels: Iterable[Hashable]) -> None:
        normalized = normalize_distance_matrix(distance_matrix)
        self._labels = VertexLabels(vertex_labels, normalized.order)
        self._distance = normalized.values
        self._matrix_kind = normalized.kind

        adjacency = ~np.isnan(self._distance)
        np.fill_diagonal(adjacency, False)
        adjacency.setflags(write=False)
        self._adjacency = adjacency

        self._symmetric = bool(np.array_equal(self._distance, self._distance.T, equal_nan=True))
        # Trees grown from a root along outgoing edges serve routes that start
        # there; trees grown against edge direction serve routes that end
        # there. On a symmetric graph the two coincide and share one store.
        self._outgoing = TreeCacheStore()
        self._incoming = self._outgoing if self._symmetric else TreeCacheStore()

        log_event(
            "graph_built",
            order=self.order,
            matrix_kind=self._matrix_kind,
            edge_count=int(adjacency.sum()),
            symmetric=self._symmetric,
        )

    @classmethod
    def from_map_view(cls, view: MapView) -> Graph:
        return cls(view.as_distance_matrix(), view.as_vertex_labels())

    # Read-only views

    @property
    def order(self) -> int:
        return int(self._distance.shape[0])

    @property
    def labels(self) -> VertexLabels:
        return self._labels

    @property
    def distance_matrix(self) -> np.ndarray:
        return self._distance

    @property
    def adjacency_matrix(self) -> np.ndarray:
        return self._adjacency

    @property
    def matrix_kind(self) -> str:
        return self._matrix_kind

    @property
    def symmetric(self) -> bool:
        return self._symmetric

    def __contains__(self, label: object) -> bool:
        return label in self._labels

    def __repr__(self) -> str:
        return f"Graph(order={self.order}, kind={self._matrix_kind!r}, symmetric={self._symmetric})"

    def edge_weight(self, start: Hashable, end: Hashable) -> float | None:
        """Weight of the direct edge ``start -> end``, or None when there is none."""
        i = self._labels.to_internal(start)
        j = self._labels.to_internal(end)
        if not self._adjacency[i, j]:
            return None
        return float(self._distance[i, j])

    def neighbors(self, label: Hashable) -> tuple[Hashable, ...]:
        i = self._labels.to_internal(label)
        return self._labels.to_external_many([int(j) for j in np.flatnonzero(self._adjacency[i])])

    # Shortest paths

    def shortest_path(self, start: Hashable, end: Hashable, *, prefer_start: bool = False) -> RouteResult:
        """Shortest route from ``start`` to ``end``.

        Reuses a cached tree rooted at ``end`` first, then one rooted at
        ``start``. With neither cached, a new tree is rooted at ``end`` unless
        ``prefer_start`` is set. Callers that ask "how do I reach X" from many
        places should leave the default; callers scanning many targets from
        one place should pass ``prefer_start=True``.

        Returns :class:`ShortestPath` with the route ordered start to end, or
        :class:`Unreachable` when no path exists.
        """
        s = self._labels.to_internal(start)
        e = self._labels.to_internal(end)

        if e in self._incoming:
            from_start = False
        elif s in self._outgoing:
            from_start = True
        else:
            from_start = prefer_start

        if from_start:
            tree = self._tree(s, outgoing=True)
            walk = unwind_route(tree, e)
            distance = tree.distance_to(e)
            internal_route = None if walk is None else walk[::-1]
        else:
            tree = self._tree(e, outgoing=False)
            internal_route = unwind_route(tree, s)
            distance = tree.distance_to(s)

        if internal_route is None or distance is None:
            return Unreachable(start=start, end=end)
        return ShortestPath(
            start=start,
            end=end,
            distance=distance,
            route=self._labels.to_external_many(internal_route),
        )

    def shortest_distance(self, start: Hashable, end: Hashable, *, prefer_start: bool = False) -> float | None:
        result = self.shortest_path(start, end, prefer_start=prefer_start)
        return result.distance if isinstance(result, ShortestPath) else None

    def cached_roots(self) -> tuple[Hashable, ...]:
        roots = dict.fromkeys(self._outgoing.roots())
        roots.update(dict.fromkeys(self._incoming.roots()))
        return self._labels.to_external_many(list(roots))

    def cache_stats(self) -> dict[str, int | bool]:
        stats: dict[str, int | bool] = dict(self._outgoing.snapshot())
        if self._incoming is not self._outgoing:
            for key, value in self._incoming.snapshot().items():
                stats[key] = int(stats[key]) + value
        stats["symmetric"] = self._symmetric
        return stats

    def _tree(self, root: int, *, outgoing: bool) -> ShortestPathTree:
        store = self._outgoing if outgoing else self._incoming
        tree, computed = store.get_or_compute(root, self._compute_outgoing if outgoing else self._compute_incoming)
        if not computed:
            log_debug_event("shortest_path_tree_reused", root=self._labels.to_external(root))
        return tree

    def _compute_outgoing(self, root: int) -> ShortestPathTree:
        return self._run_dijkstra(root, self._distance, self._adjacency, direction="outgoing")

    def _compute_incoming(self, root: int) -> ShortestPathTree:
        return self._run_dijkstra(root, self._distance.T, self._adjacency.T, direction="incoming")

    def _run_dijkstra(self, root: int, distance: np.ndarray, adjacency: np.ndarray, *, direction: str) -> ShortestPathTree:
        tree = dijkstra_tree(distance, adjacency, root)
        log_tree_run(
            root=self._labels.to_external(root),
            direction=direction if not self._symmetric else "undirected",
            reachable=sum(1 for parent in tree.parents if parent is not None),
            order=self.order,
        )
        return tree
