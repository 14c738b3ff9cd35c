from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Iterable, Iterator, Sequence

from .graph_errors import (
    BadLabelCountError,
    IndexOutOfRangeError,
    RepeatedLabelError,
    UnknownVertexError,
)


class VertexLabels:
    """Bijection between caller labels and dense indices ``0..order-1``.

    The internal-to-external direction is the label sequence exactly as
    supplied, so ``labels[i]`` names internal vertex ``i``.
    """

    __slots__ = ("_to_external", "_to_internal")

    def __init__(self, labels: Iterable[Hashable], order: int) -> None:
        external = tuple(labels)
        if len(external) != order:
            raise BadLabelCountError(len(external), order)
        to_internal = {label: index for index, label in enumerate(external)}
        if len(to_internal) != order:
            counts = Counter(external)
            raise RepeatedLabelError([label for label, count in counts.items() if count > 1])
        self._to_external = external
        self._to_internal = to_internal

    def __len__(self) -> int:
        return len(self._to_external)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._to_external)

    def __contains__(self, label: object) -> bool:
        try:
            return label in self._to_internal
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"VertexLabels({list(self._to_external)!r})"

    @property
    def external(self) -> tuple[Hashable, ...]:
        return self._to_external

    def to_internal(self, label: Hashable) -> int:
        try:
            return self._to_internal[label]
        except (KeyError, TypeError):
            raise UnknownVertexError(label) from None

    def to_external(self, index: int) -> Hashable:
        # Negative indices would silently wrap on a tuple.
        if not 0 <= index < len(self._to_external):
            raise IndexOutOfRangeError(index, len(self._to_external))
        return self._to_external[index]

    def to_internal_many(self, labels: Iterable[Hashable]) -> tuple[int, ...]:
        return tuple(self.to_internal(label) for label in labels)

    def to_external_many(self, indices: Sequence[int]) -> tuple[Hashable, ...]:
        return tuple(self.to_external(index) for index in indices)
