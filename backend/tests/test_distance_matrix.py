from __future__ import annotations

import math

import numpy as np
import pytest

from maze_graph.distance_matrix import (
    MAX_ORDER,
    MatrixCheck,
    classify_distance_matrix,
    normalize_distance_matrix,
)
from maze_graph.graph_errors import BadShapeError, InvalidElementsError, MatrixTooLargeError


class _HugeMatrix:
    """Claims more rows than an unsigned 32-bit index can address."""

    def __len__(self) -> int:
        return MAX_ORDER + 1

    def __iter__(self):
        raise AssertionError("rows should not be read once the size check fails")


def test_classify_square_and_triangular_shapes() -> None:
    assert classify_distance_matrix([[0, 1], [1, 0]]) is MatrixCheck.SQUARE
    assert classify_distance_matrix([[0], [1, 0], [-1, 2, 0]]) is MatrixCheck.LOWER_TRIANGULAR
    assert classify_distance_matrix([[0, 1, -1], [0, 2], [0]]) is MatrixCheck.UPPER_TRIANGULAR


def test_classify_prefers_square_for_single_vertex_and_empty() -> None:
    assert classify_distance_matrix([[0]]) is MatrixCheck.SQUARE
    assert classify_distance_matrix([]) is MatrixCheck.SQUARE


def test_classify_rejects_inconsistent_row_lengths() -> None:
    assert classify_distance_matrix([[0], [1, 0], [1, 2, 3, 4]]) is MatrixCheck.BAD_SHAPE
    # Rows grow by one but row 0 is not a single entry.
    assert classify_distance_matrix([[0, 1], [1, 0, 2], [1, 2, 0, 3]]) is MatrixCheck.BAD_SHAPE
    # Rows shrink by one but row 0 is not a full row.
    assert classify_distance_matrix([[0, 1], [0], []]) is MatrixCheck.BAD_SHAPE
    assert classify_distance_matrix(["ab", "cd"]) is MatrixCheck.BAD_SHAPE
    assert classify_distance_matrix(None) is MatrixCheck.BAD_SHAPE


def test_classify_checks_size_before_shape() -> None:
    assert classify_distance_matrix(_HugeMatrix()) is MatrixCheck.TOO_LARGE
    assert MatrixCheck.TOO_LARGE.is_failure
    assert not MatrixCheck.SQUARE.is_failure


@pytest.mark.parametrize("bad", [-2, -0.5, math.nan, math.inf, "1", True])
def test_classify_flags_invalid_elements(bad: object) -> None:
    assert classify_distance_matrix([[0, bad], [1, 0]]) is MatrixCheck.INVALID_ELEMENTS


def test_no_edge_markers_and_zero_weights_are_valid() -> None:
    assert classify_distance_matrix([[0, -1], [None, 0]]) is MatrixCheck.SQUARE
    assert classify_distance_matrix([[0, 0.0], [0, 0]]) is MatrixCheck.SQUARE


def test_normalize_square_maps_no_edge_to_nan_and_freezes() -> None:
    normalized = normalize_distance_matrix([[0, 1, -1], [1, 0, None], [-1, 4, 0]])

    assert normalized.kind == "square"
    assert normalized.shape is MatrixCheck.SQUARE
    assert normalized.order == 3
    assert normalized.values.dtype == np.float64
    assert np.isnan(normalized.values[0, 2])
    assert np.isnan(normalized.values[1, 2])
    assert normalized.values[2, 1] == 4.0
    assert not normalized.values.flags.writeable
    with pytest.raises(ValueError):
        normalized.values[0, 0] = 5.0


def test_normalize_lower_triangular_mirrors_into_symmetric_square() -> None:
    normalized = normalize_distance_matrix([[0], [1, 0], [-1, 2, 0], [7, -1, 3, 0]])

    expected = np.array(
        [
            [0, 1, np.nan, 7],
            [1, 0, 2, np.nan],
            [np.nan, 2, 0, 3],
            [7, np.nan, 3, 0],
        ]
    )
    assert normalized.kind == "symmetrized"
    assert normalized.shape is MatrixCheck.LOWER_TRIANGULAR
    assert np.array_equal(normalized.values, expected, equal_nan=True)


def test_normalize_upper_triangular_matches_lower_triangular() -> None:
    lower = normalize_distance_matrix([[0], [1, 0], [-1, 2, 0], [7, -1, 3, 0]])
    upper = normalize_distance_matrix([[0, 1, -1, 7], [0, 2, -1], [0, 3], [0]])

    assert upper.kind == "symmetrized"
    assert upper.shape is MatrixCheck.UPPER_TRIANGULAR
    assert np.array_equal(lower.values, upper.values, equal_nan=True)


def test_normalize_accepts_numpy_input() -> None:
    normalized = normalize_distance_matrix(np.array([[0.0, 2.5], [2.5, 0.0]]))
    assert normalized.kind == "square"
    assert normalized.values[0, 1] == 2.5


def test_normalize_raises_typed_errors_with_context() -> None:
    with pytest.raises(BadShapeError) as shape_exc:
        normalize_distance_matrix([[0], [1, 0], [1, 2, 3, 4]])
    assert shape_exc.value.reason_code == "matrix_bad_shape"
    assert shape_exc.value.details == {"row_lengths": [1, 2, 4]}

    with pytest.raises(InvalidElementsError) as element_exc:
        normalize_distance_matrix([[0, 1], [-2, 0]])
    assert element_exc.value.reason_code == "matrix_invalid_elements"
    assert element_exc.value.details is not None
    assert (element_exc.value.details["row"], element_exc.value.details["col"]) == (1, 0)

    with pytest.raises(MatrixTooLargeError) as size_exc:
        normalize_distance_matrix(_HugeMatrix())
    assert size_exc.value.details == {"order": MAX_ORDER + 1, "max_order": MAX_ORDER}
    assert not size_exc.value.is_defect
