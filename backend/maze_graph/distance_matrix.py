from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

import numpy as np

from .graph_errors import BadShapeError, InvalidElementsError, MatrixTooLargeError

# Vertex indices must stay addressable as unsigned 32-bit values.
MAX_ORDER = 2**32 - 1

# Input marker for "no direct edge". Normalized matrices store NaN instead.
NO_EDGE = -1

RawMatrix = Sequence[Sequence[float | None]]


class MatrixCheck(str, Enum):
    SQUARE = "square"
    LOWER_TRIANGULAR = "lower_triangular"
    UPPER_TRIANGULAR = "upper_triangular"
    TOO_LARGE = "too_large"
    BAD_SHAPE = "bad_shape"
    INVALID_ELEMENTS = "invalid_elements"

    @property
    def is_failure(self) -> bool:
        return self in (MatrixCheck.TOO_LARGE, MatrixCheck.BAD_SHAPE, MatrixCheck.INVALID_ELEMENTS)


@dataclass(frozen=True)
class NormalizedMatrix:
    """Square distance matrix ready for graph construction.

    ``kind`` is ``"square"`` when the input was already square and
    ``"symmetrized"`` when a triangular input was mirrored. ``values`` is a
    read-only ``float64`` array holding ``NaN`` wherever there is no edge.
    """

    kind: Literal["square", "symmetrized"]
    shape: MatrixCheck
    values: np.ndarray

    @property
    def order(self) -> int:
        return int(self.values.shape[0])


def _row_length(row: Any) -> int | None:
    if isinstance(row, (str, bytes, Mapping)):
        return None
    try:
        return len(row)
    except TypeError:
        return None


def _row_lengths(raw: Any) -> list[int | None]:
    if _row_length(raw) is None:
        return []
    return [_row_length(row) for row in raw]


def _is_valid_element(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    weight = float(value)
    if weight == NO_EDGE:
        return True
    return math.isfinite(weight) and weight >= 0.0


def _first_invalid_element(raw: Any) -> tuple[int, int, Any] | None:
    for i, row in enumerate(raw):
        for j, value in enumerate(row):
            if not _is_valid_element(value):
                return i, j, value
    return None


def _shape_of(raw: Any) -> MatrixCheck:
    n = len(raw)
    lengths = _row_lengths(raw)
    if any(length is None for length in lengths):
        return MatrixCheck.BAD_SHAPE
    if all(length == n for length in lengths):
        return MatrixCheck.SQUARE
    # Row 0 carries only the diagonal entry.
    if all(length == i + 1 for i, length in enumerate(lengths)):
        return MatrixCheck.LOWER_TRIANGULAR
    # Row 0 is a full row; each later row starts one column further right.
    if all(length == n - i for i, length in enumerate(lengths)):
        return MatrixCheck.UPPER_TRIANGULAR
    return MatrixCheck.BAD_SHAPE


def classify_distance_matrix(raw: Any) -> MatrixCheck:
    """Classify ``raw`` as square, lower or upper triangular, or a failure.

    Checks run in order: size, then shape, then element validity. Entries must
    be finite and ``>= 0``, or one of the no-edge markers ``-1`` / ``None``.
    """
    if isinstance(raw, np.ndarray):
        raw = raw.tolist()
    order = _row_length(raw)
    if order is None:
        return MatrixCheck.BAD_SHAPE
    if order > MAX_ORDER:
        return MatrixCheck.TOO_LARGE
    shape = _shape_of(raw)
    if shape is MatrixCheck.BAD_SHAPE:
        return shape
    if _first_invalid_element(raw) is not None:
        return MatrixCheck.INVALID_ELEMENTS
    return shape


def _as_weight(value: float | None) -> float:
    if value is None or float(value) == NO_EDGE:
        return math.nan
    return float(value)


def normalize_distance_matrix(raw: Any) -> NormalizedMatrix:
    """Validate ``raw`` and return it as a square, read-only ``NaN``-for-no-edge array.

    Triangular inputs describe an undirected graph: the omitted triangle is
    filled by symmetry, ``M[i][j] = M[j][i]``.
    """
    if isinstance(raw, np.ndarray):
        raw = raw.tolist()
    check = classify_distance_matrix(raw)
    if check is MatrixCheck.TOO_LARGE:
        raise MatrixTooLargeError(len(raw), MAX_ORDER)
    if check is MatrixCheck.BAD_SHAPE:
        raise BadShapeError(_row_lengths(raw))
    if check is MatrixCheck.INVALID_ELEMENTS:
        row, col, value = _first_invalid_element(raw)  # type: ignore[misc]
        raise InvalidElementsError(row, col, value)

    n = len(raw)
    values = np.full((n, n), np.nan, dtype=np.float64)
    for i, row in enumerate(raw):
        offset = i if check is MatrixCheck.UPPER_TRIANGULAR else 0
        for k, value in enumerate(row):
            values[i, offset + k] = _as_weight(value)

    if check is MatrixCheck.LOWER_TRIANGULAR:
        upper = np.triu_indices(n, k=1)
        values[upper] = values.T[upper]
    elif check is MatrixCheck.UPPER_TRIANGULAR:
        lower = np.tril_indices(n, k=-1)
        values[lower] = values.T[lower]

    values.setflags(write=False)
    kind: Literal["square", "symmetrized"] = "square" if check is MatrixCheck.SQUARE else "symmetrized"
    return NormalizedMatrix(kind=kind, shape=check, values=values)
