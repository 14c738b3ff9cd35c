from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "matrix_too_large",
        "matrix_bad_shape",
        "matrix_invalid_elements",
        "labels_bad_count",
        "labels_repeated",
        "vertex_unknown",
        "vertex_index_out_of_range",
        "dijkstra_invalid_start_vertex",
        "route_unreachable",
    }
)

# Raised only when an internal invariant is broken; never caused by caller input.
DEFECT_REASON_CODES: frozenset[str] = frozenset(
    {
        "vertex_index_out_of_range",
        "dijkstra_invalid_start_vertex",
    }
)


@dataclass
class GraphError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message

    @property
    def is_defect(self) -> bool:
        return self.reason_code in DEFECT_REASON_CODES


class MatrixTooLargeError(GraphError):
    def __init__(self, order: int, max_order: int) -> None:
        super().__init__(
            reason_code="matrix_too_large",
            message=f"distance matrix order {order} exceeds the maximum of {max_order}",
            details={"order": int(order), "max_order": int(max_order)},
        )


class BadShapeError(GraphError):
    def __init__(self, row_lengths: Sequence[int | None]) -> None:
        super().__init__(
            reason_code="matrix_bad_shape",
            message=(
                "distance matrix is neither square nor lower/upper triangular "
                f"(row lengths {list(row_lengths)})"
            ),
            details={"row_lengths": list(row_lengths)},
        )


class InvalidElementsError(GraphError):
    def __init__(self, row: int, col: int, value: object) -> None:
        super().__init__(
            reason_code="matrix_invalid_elements",
            message=(
                f"distance matrix entry ({row}, {col}) = {value!r} is not a "
                "non-negative number or the no-edge marker -1"
            ),
            details={"row": int(row), "col": int(col), "value": repr(value)},
        )


class BadLabelCountError(GraphError):
    def __init__(self, label_count: int, order: int) -> None:
        super().__init__(
            reason_code="labels_bad_count",
            message=f"expected {order} vertex labels, got {label_count}",
            details={"label_count": int(label_count), "order": int(order)},
        )


class RepeatedLabelError(GraphError):
    def __init__(self, repeated: Sequence[Hashable]) -> None:
        super().__init__(
            reason_code="labels_repeated",
            message=f"vertex labels must be unique; repeated: {list(repeated)!r}",
            details={"repeated": list(repeated)},
        )


class UnknownVertexError(GraphError):
    def __init__(self, label: Hashable) -> None:
        super().__init__(
            reason_code="vertex_unknown",
            message=f"unknown vertex label {label!r}",
            details={"label": label},
        )


class IndexOutOfRangeError(GraphError):
    def __init__(self, index: int, order: int) -> None:
        super().__init__(
            reason_code="vertex_index_out_of_range",
            message=f"internal vertex index {index} outside 0..{order - 1}",
            details={"index": index, "order": int(order)},
        )


class InvalidStartVertexError(GraphError):
    def __init__(self, index: int, order: int) -> None:
        super().__init__(
            reason_code="dijkstra_invalid_start_vertex",
            message=f"cannot root a shortest-path tree at index {index} (order {order})",
            details={"index": index, "order": int(order)},
        )


class UnreachableError(GraphError):
    def __init__(self, start: Hashable, end: Hashable) -> None:
        super().__init__(
            reason_code="route_unreachable",
            message=f"no route from {start!r} to {end!r}",
            details={"start": start, "end": end},
        )

