from __future__ import annotations

from collections.abc import Callable
from threading import Lock

from .shortest_path import ShortestPathTree


class TreeCacheStore:
    """Append-only store of shortest-path trees keyed by root vertex.

    Slots are never evicted or overwritten: the graph they were computed from
    cannot change. ``get_or_compute`` holds the lock across
    check / compute / insert so a root is computed at most once.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._slots: list[ShortestPathTree] = []
        self._slot_by_root: dict[int, int] = {}

        self._hits = 0
        self._misses = 0

    def __contains__(self, root: object) -> bool:
        with self._lock:
            return root in self._slot_by_root

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def get_or_compute(self, root: int, compute: Callable[[int], ShortestPathTree]) -> tuple[ShortestPathTree, bool]:
        """Return ``(tree, computed)`` where ``computed`` is True on a cache miss."""
        with self._lock:
            slot = self._slot_by_root.get(root)
            if slot is not None:
                self._hits += 1
                return self._slots[slot], False
            self._misses += 1
            tree = compute(root)
            self._slots.append(tree)
            self._slot_by_root[root] = len(self._slots) - 1
            return tree, True

    def roots(self) -> tuple[int, ...]:
        """Cached roots in insertion order."""
        with self._lock:
            return tuple(tree.root for tree in self._slots)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {
                "size": len(self._slots),
                "hits": self._hits,
                "misses": self._misses,
            }
