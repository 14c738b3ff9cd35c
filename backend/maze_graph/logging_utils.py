from __future__ import annotations

import logging
from pathlib import Path
from tempfile import gettempdir
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "maze_graph"
LOG_FILE_NAME = "graph.log.jsonl"

# Handler names mark what get_logger() installed, so extra handlers attached
# by callers (or tests) do not count as configuration.
_STREAM_HANDLER = "maze_graph.stream"
_FILE_HANDLER = "maze_graph.file"


def _parse_level(name: str) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _log_dir_candidates(out_dir: str) -> tuple[Path, ...]:
    return (
        Path(out_dir) / "logs",
        Path.cwd() / "out" / "logs",
        Path(gettempdir()) / "maze-route-graph" / "logs",
    )


def _is_writable_dir(log_dir: Path) -> bool:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        marker = log_dir / ".writetest"
        marker.touch(exist_ok=True)
        marker.unlink(missing_ok=True)
    except OSError:
        return False
    return True


def _resolve_log_dir(out_dir: str) -> Path | None:
    """First of ``OUT_DIR/logs``, ``./out/logs`` and a temp dir that accepts writes."""
    return next((d for d in _log_dir_candidates(out_dir) if _is_writable_dir(d)), None)


def _json_handler(handler: logging.Handler, name: str) -> logging.Handler:
    handler.set_name(name)
    handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    return handler


def get_logger() -> logging.Logger:
    """The package logger: JSON lines on stderr and, when a log dir is writable, in a file."""
    logger = logging.getLogger(LOGGER_NAME)
    installed = {handler.get_name() for handler in logger.handlers}
    if _STREAM_HANDLER in installed:
        return logger

    logger.setLevel(_parse_level(settings.log_level))
    logger.propagate = False
    logger.addHandler(_json_handler(logging.StreamHandler(), _STREAM_HANDLER))

    log_dir = _resolve_log_dir(settings.out_dir)
    if log_dir is not None and _FILE_HANDLER not in installed:
        try:
            file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
        except OSError:
            file_handler = None
        if file_handler is not None:
            logger.addHandler(_json_handler(file_handler, _FILE_HANDLER))
    return logger


def _emit(level: int, event: str, **fields: Any) -> None:
    logger = get_logger()
    if logger.isEnabledFor(level):
        # The event name is both the message and a top-level JSON key.
        logger.log(level, event, extra={"event": event, **fields})


def log_event(event: str, **fields: Any) -> None:
    _emit(logging.INFO, event, **fields)


def log_debug_event(event: str, **fields: Any) -> None:
    _emit(logging.DEBUG, event, **fields)


def log_tree_run(**fields: Any) -> None:
    """One ``shortest_path_tree_computed`` event per Dijkstra run, unless GRAPH_LOG_TREE_RUNS is off."""
    if settings.graph_log_tree_runs:
        _emit(logging.INFO, "shortest_path_tree_computed", **fields)
