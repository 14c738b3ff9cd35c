from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Protocol

from pydantic import BaseModel, Field, field_validator, model_validator


class MapSnapshot(BaseModel):
    """Map-service view of the maze at one point in time.

    ``distance_matrix`` may be square or triangular, with ``-1`` or ``null``
    for "no direct edge". ``unexplored`` lists the vertices the planner still
    has to visit.
    """

    distance_matrix: list[list[float | None]]
    vertex_labels: list[int]
    unexplored: list[int] = Field(default_factory=list)

    @field_validator("unexplored")
    @classmethod
    def dedupe_unexplored(cls, v: list[int]) -> list[int]:
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def unexplored_are_labels(self) -> "MapSnapshot":
        known = set(self.vertex_labels)
        missing = [vertex for vertex in self.unexplored if vertex not in known]
        if missing:
            raise ValueError(f"unexplored vertices are not vertex labels: {missing}")
        return self

    def as_distance_matrix(self) -> list[list[float | None]]:
        return self.distance_matrix

    def as_vertex_labels(self) -> list[int]:
        return self.vertex_labels

    def vertices_to_explore(self) -> list[int]:
        return list(self.unexplored)


class MapView(Protocol):
    """What the route planner needs from the map service."""

    def as_distance_matrix(self) -> Sequence[Sequence[float | None]]: ...

    def as_vertex_labels(self) -> Sequence[Hashable]: ...

    def vertices_to_explore(self) -> Sequence[Hashable]: ...
