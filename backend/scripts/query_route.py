from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from maze_graph.graph import Graph
from maze_graph.graph_errors import GraphError
from maze_graph.models import MapSnapshot
from maze_graph.route_planner import RoutePlanner
from maze_graph.shortest_path import ShortestPath


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Answer a shortest-route or next-vertex query against a map snapshot JSON file."
    )
    parser.add_argument("--snapshot", required=True, help="Path to a MapSnapshot JSON file.")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--start", type=int, default=None)
    group.add_argument("--next-from", type=int, default=None, dest="next_from")
    parser.add_argument("--end", type=int, default=None)
    parser.add_argument("--prefer-start", action="store_true")
    parser.add_argument("--out-file", default=None)
    return parser


def load_snapshot(path: str) -> MapSnapshot:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Snapshot payload must be a JSON object")
    return MapSnapshot.model_validate(payload)


def _route_record(graph: Graph, start: int, end: int, *, prefer_start: bool) -> dict[str, Any]:
    result = graph.shortest_path(start, end, prefer_start=prefer_start)
    record: dict[str, Any] = {
        "query": "shortest_path",
        "start": start,
        "end": end,
        "reachable": result.reachable,
        "distance": result.distance if isinstance(result, ShortestPath) else None,
        "route": list(result.route) if isinstance(result, ShortestPath) else [],
    }
    record["cache"] = graph.cache_stats()
    return record


def _next_vertex_record(snapshot: MapSnapshot, current: int) -> dict[str, Any]:
    planner = RoutePlanner(snapshot)
    planned = planner.compute_next_vertex(current)
    return {
        "query": "next_vertex",
        "current": current,
        "found": planned.found,
        "target": planned.target,
        "distance": planned.distance,
        "route": list(planned.route),
        "cache": planner.graph.cache_stats(),
    }


def run_query(args: argparse.Namespace) -> dict[str, Any]:
    try:
        snapshot = load_snapshot(args.snapshot)
        if args.next_from is not None:
            record = _next_vertex_record(snapshot, args.next_from)
        else:
            if args.end is None:
                raise ValueError("--end is required with --start")
            graph = Graph.from_map_view(snapshot)
            record = _route_record(graph, args.start, args.end, prefer_start=bool(args.prefer_start))
    except GraphError as exc:
        record = {
            "error": exc.reason_code,
            "message": exc.message,
            "details": exc.details or {},
        }
    except ValidationError as exc:
        record = {
            "error": "snapshot_invalid",
            "message": str(exc),
            "details": {"error_count": exc.error_count()},
        }

    if args.out_file:
        out_path = Path(args.out_file)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(record, indent=2, default=str), encoding="utf-8")
    return record


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    record = run_query(args)
    print(json.dumps(record, indent=2, default=str))
    return 1 if "error" in record else 0


if __name__ == "__main__":
    raise SystemExit(main())
