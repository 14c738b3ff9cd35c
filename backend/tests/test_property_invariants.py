from __future__ import annotations

import math
import random

import pytest

from maze_graph.graph import Graph
from maze_graph.shortest_path import ShortestPath

SEEDS = [3, 11, 29, 47, 101]


def _random_symmetric(rng: random.Random, order: int, density: float) -> list[list[float]]:
    matrix = [[-1.0] * order for _ in range(order)]
    for i in range(order):
        matrix[i][i] = 0.0
        for j in range(i + 1, order):
            if rng.random() < density:
                weight = float(rng.randint(0, 9))
                matrix[i][j] = weight
                matrix[j][i] = weight
    return matrix


def _random_directed(rng: random.Random, order: int, density: float) -> list[list[float]]:
    matrix = [[-1.0] * order for _ in range(order)]
    for i in range(order):
        matrix[i][i] = 0.0
        for j in range(order):
            if i != j and rng.random() < density:
                matrix[i][j] = float(rng.randint(1, 9))
    return matrix


def _floyd_warshall(matrix: list[list[float]]) -> list[list[float]]:
    order = len(matrix)
    dist = [[math.inf] * order for _ in range(order)]
    for i in range(order):
        dist[i][i] = 0.0
        for j in range(order):
            if i != j and matrix[i][j] >= 0:
                dist[i][j] = matrix[i][j]
    for k in range(order):
        for i in range(order):
            for j in range(order):
                if dist[i][k] + dist[k][j] < dist[i][j]:
                    dist[i][j] = dist[i][k] + dist[k][j]
    return dist


def _route_length(matrix: list[list[float]], route: tuple[int, ...]) -> float:
    return sum(matrix[a][b] for a, b in zip(route, route[1:]))


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("prefer_start", [False, True])
def test_symmetric_graph_matches_brute_force(seed: int, prefer_start: bool) -> None:
    rng = random.Random(seed)
    order = rng.randint(4, 12)
    matrix = _random_symmetric(rng, order, density=0.35)
    expected = _floyd_warshall(matrix)
    graph = Graph(matrix, list(range(order)))

    for s in range(order):
        for t in range(order):
            result = graph.shortest_path(s, t, prefer_start=prefer_start)
            if math.isinf(expected[s][t]):
                assert not result.reachable
                continue
            assert isinstance(result, ShortestPath)
            assert result.distance == pytest.approx(expected[s][t])
            assert result.route[0] == s
            assert result.route[-1] == t
            assert _route_length(matrix, result.route) == pytest.approx(result.distance)
            assert graph.shortest_distance(t, s) == pytest.approx(result.distance)


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("prefer_start", [False, True])
def test_directed_graph_matches_brute_force(seed: int, prefer_start: bool) -> None:
    rng = random.Random(seed)
    order = rng.randint(4, 10)
    matrix = _random_directed(rng, order, density=0.3)
    expected = _floyd_warshall(matrix)
    graph = Graph(matrix, [f"v{i}" for i in range(order)])

    for s in range(order):
        for t in range(order):
            distance = graph.shortest_distance(f"v{s}", f"v{t}", prefer_start=prefer_start)
            if math.isinf(expected[s][t]):
                assert distance is None
            else:
                assert distance == pytest.approx(expected[s][t])


@pytest.mark.parametrize("seed", SEEDS)
def test_triangular_input_answers_like_the_square_matrix(seed: int) -> None:
    rng = random.Random(seed)
    order = rng.randint(3, 9)
    square = _random_symmetric(rng, order, density=0.5)
    lower = [row[: i + 1] for i, row in enumerate(square)]
    upper = [row[i:] for i, row in enumerate(square)]
    labels = list(range(order))

    graphs = [Graph(square, labels), Graph(lower, labels), Graph(upper, labels)]

    assert graphs[1].matrix_kind == "symmetrized" or order == 1
    for s in range(order):
        for t in range(order):
            results = [g.shortest_path(s, t) for g in graphs]
            assert results[0] == results[1] == results[2]


@pytest.mark.parametrize("seed", SEEDS)
def test_every_vertex_reaches_itself_for_free(seed: int) -> None:
    rng = random.Random(seed)
    order = rng.randint(1, 8)
    matrix = _random_directed(rng, order, density=0.2)
    graph = Graph(matrix, list(range(order)))

    for v in range(order):
        assert graph.shortest_path(v, v) == ShortestPath(start=v, end=v, distance=0.0, route=(v,))
