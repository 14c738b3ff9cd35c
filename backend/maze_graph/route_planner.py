from __future__ import annotations

import math
from collections.abc import Callable, Hashable
from dataclasses import dataclass

from .graph import Graph
from .logging_utils import log_event
from .models import MapView
from .settings import settings
from .shortest_path import ShortestPath

# Lower scores win. None marks a candidate that cannot be reached from the
# current vertex and is skipped; NaN has no rank and is skipped as well.
VertexScore = Callable[[Graph, Hashable, Hashable], float | None]


def shortest_distance_score(graph: Graph, current: Hashable, candidate: Hashable) -> float | None:
    return graph.shortest_distance(current, candidate, prefer_start=settings.planner_prefer_start)


@dataclass(frozen=True)
class PlannedRoute:
    found: bool
    target: Hashable | None = None
    distance: float | None = None
    route: tuple[Hashable, ...] = ()


class RoutePlanner:
    """Chooses the next vertex to explore and the route to it.

    The planner holds a map view, a :class:`Graph` built from it and the
    working set of vertices still to visit. Candidates are ranked by the
    score policy; equal scores fall back to working-set order so the choice
    is deterministic.
    """

    def __init__(self, view: MapView, *, score: VertexScore | None = None) -> None:
        self._score = score or shortest_distance_score
        self._view = view
        self._graph = Graph.from_map_view(view)
        self._to_explore = self._find_vertices_to_explore(self._graph, view)

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def view(self) -> MapView:
        return self._view

    @property
    def vertices_to_explore(self) -> tuple[Hashable, ...]:
        return tuple(self._to_explore)

    @staticmethod
    def _find_vertices_to_explore(graph: Graph, view: MapView) -> list[Hashable]:
        pending = list(dict.fromkeys(view.vertices_to_explore()))
        # Fail on vertices the graph does not know about.
        graph.labels.to_internal_many(pending)
        return pending

    def compute_next_vertex(self, current: Hashable) -> PlannedRoute:
        if not self._to_explore:
            return PlannedRoute(found=False)
        self._graph.labels.to_internal(current)

        best: tuple[tuple[float, int], Hashable] | None = None
        for position, candidate in enumerate(self._to_explore):
            score = self._score(self._graph, current, candidate)
            if score is None or math.isnan(score):
                continue
            key = (float(score), position)
            if best is None or key < best[0]:
                best = (key, candidate)

        if best is None:
            log_event(
                "planner_next_vertex",
                current=current,
                found=False,
                candidates=len(self._to_explore),
            )
            return PlannedRoute(found=False)

        target = best[1]
        result = self._graph.shortest_path(current, target, prefer_start=settings.planner_prefer_start)
        if not isinstance(result, ShortestPath):
            # A custom score ranked a vertex the graph cannot reach.
            return PlannedRoute(found=False)
        log_event(
            "planner_next_vertex",
            current=current,
            found=True,
            target=target,
            distance=result.distance,
            hops=len(result.route) - 1,
            candidates=len(self._to_explore),
        )
        return PlannedRoute(found=True, target=target, distance=result.distance, route=result.route)

    def mark_visited(self, vertex: Hashable) -> bool:
        """Drop ``vertex`` from the working set; True if it was pending."""
        try:
            self._to_explore.remove(vertex)
        except ValueError:
            return False
        return True

    def update(self, view: MapView) -> None:
        """Switch to a new map view.

        The graph is rebuilt, so its tree cache starts empty, and the working
        set is recomputed from the new view.
        """
        graph = Graph.from_map_view(view)
        pending = self._find_vertices_to_explore(graph, view)
        self._view = view
        self._graph = graph
        self._to_explore = pending
        log_event(
            "planner_updated",
            order=graph.order,
            to_explore=len(pending),
        )
