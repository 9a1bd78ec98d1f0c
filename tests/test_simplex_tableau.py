"""Tests for the tableau engine.

Tests verify:
1. Initial tableau layout and labels
2. Optimality check and pivot selection
3. Gauss-Jordan elimination
4. The pivot loop and its statuses
"""

import logging

import numpy as np
import pytest

from simplex_tableau import (
    Label,
    LabelKind,
    Pivot,
    build_initial_tableau,
    eliminate,
    initial_labels,
    is_optimal,
    select_pivot,
    solve,
    transpose,
)


@pytest.fixture
def initial_tableau():
    return np.array(
        [
            [2.0, 3.0, 2.0, 1.0, 0.0, 0.0, 1000.0],
            [1.0, 1.0, 2.0, 0.0, 1.0, 0.0, 800.0],
            [-7.0, -8.0, -10.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )


def test_build_initial_tableau(initial_tableau):
    tableau = build_initial_tableau([-7, -8, -10], [[2, 3, 2, 1000], [1, 1, 2, 800]])

    assert tableau is not None
    np.testing.assert_array_equal(tableau, initial_tableau)


def test_build_initial_tableau_pads_narrow_rows():
    tableau = build_initial_tableau([-1, -1, -1], [[1, 2, 5], [1, 2, 3, 9]])

    np.testing.assert_array_equal(
        tableau,
        [
            [1, 2, 0, 1, 0, 0, 5],
            [1, 2, 3, 0, 1, 0, 9],
            [-1, -1, -1, 0, 0, 1, 0],
        ],
    )


def test_build_initial_tableau_shape():
    tableau = build_initial_tableau([-1, -2, -3, -4], [[1, 1, 1, 1, 4]] * 3)

    # variables + one slack per constraint + objective column + rhs
    assert tableau.shape == (3 + 1, 4 + 3 + 1 + 1)


@pytest.mark.parametrize(
    "constraints",
    [
        [],
        [[1, 5]],
        [[1, 2, 3], [1, 5]],
    ],
)
def test_build_initial_tableau_rejects_malformed_input(constraints):
    assert build_initial_tableau([-1, -1], constraints) is None


def test_initial_labels():
    row_labels, column_labels = initial_labels(3, 2)

    assert [str(label) for label in row_labels] == ["s0", "s1", "p"]
    assert [str(label) for label in column_labels] == ["x0", "x1", "x2", "s0", "s1", "p"]


def test_labels_are_tagged_not_strings():
    assert Label.decision(1) != Label.slack(1)
    assert Label.decision(1) == Label(LabelKind.DECISION, 1)
    assert str(Label.objective()) == "p"


def test_is_optimal(initial_tableau):
    assert not is_optimal(initial_tableau)

    solved = initial_tableau.copy()
    solved[-1] = [0, 1, 0, 2, 3, 1, 4400]
    assert is_optimal(solved)


def test_is_optimal_scans_right_hand_side():
    tableau = np.array([[1.0, 0.0, 1.0, 0.0, 2.0], [0.0, 0.0, 0.0, 1.0, -1.0]])

    assert not is_optimal(tableau)


def test_is_optimal_empty_tableau():
    assert not is_optimal(np.zeros((0, 0)))


def test_select_pivot(initial_tableau):
    pivot = select_pivot(initial_tableau)

    assert pivot == Pivot(row=1, column=2)


def test_select_pivot_ties_go_to_first_index():
    tableau = np.array(
        [
            [1.0, 1.0, 1.0, 0.0, 0.0, 4.0],
            [1.0, 1.0, 0.0, 1.0, 0.0, 4.0],
            [-5.0, -5.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )

    assert select_pivot(tableau) == Pivot(row=0, column=0)


def test_select_pivot_zero_rhs_counts_as_zero_ratio():
    # Row 0 has a zero right-hand side and a negative pivot-column entry.
    # The min-ratio test still takes it: its ratio is 0 whatever the divisor.
    tableau = np.array(
        [
            [-1.0, 1.0, 1.0, 0.0, 0.0, 0.0],
            [1.0, 1.0, 0.0, 1.0, 0.0, 4.0],
            [-2.0, -1.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )

    assert select_pivot(tableau) == Pivot(row=0, column=0)


def test_select_pivot_does_not_guard_divisor_sign():
    # -2 / -1 gives a negative ratio, which wins the minimum.
    tableau = np.array(
        [
            [-1.0, 1.0, 1.0, 0.0, 0.0, 2.0],
            [1.0, 1.0, 0.0, 1.0, 0.0, 4.0],
            [-2.0, -1.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )

    assert select_pivot(tableau) == Pivot(row=0, column=0)


def test_select_pivot_zero_divisor_gives_infinite_ratio():
    tableau = np.array(
        [
            [0.0, 1.0, 1.0, 0.0, 0.0, 2.0],
            [1.0, 1.0, 0.0, 1.0, 0.0, 4.0],
            [-2.0, -1.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )

    assert select_pivot(tableau) == Pivot(row=1, column=0)


@pytest.mark.parametrize(
    "tableau",
    [
        np.zeros((0, 0)),
        np.array([[-1.0, 1.0, 0.0]]),
    ],
)
def test_select_pivot_needs_constraint_rows(tableau):
    assert select_pivot(tableau) is None


def test_eliminate(initial_tableau):
    result = eliminate(initial_tableau, Pivot(row=1, column=2))

    np.testing.assert_array_equal(
        result,
        [
            [1, 2, 0, 1, -1, 0, 200],
            [0.5, 0.5, 1, 0, 0.5, 0, 400],
            [-2, -3, 0, 0, 5, 1, 4000],
        ],
    )


def test_eliminate_clears_pivot_column():
    tableau = np.array(
        [
            [3.0, 1.5, 1.0, 0.0, 0.0, 7.0],
            [0.7, 2.0, 0.0, 1.0, 0.0, 3.0],
            [-1.3, -4.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )

    result = eliminate(tableau, Pivot(row=1, column=1))

    assert result[1, 1] == pytest.approx(1.0)
    np.testing.assert_allclose(result[[0, 2], 1], [0.0, 0.0], atol=1e-12)


def test_eliminate_leaves_input_untouched(initial_tableau):
    before = initial_tableau.copy()

    eliminate(initial_tableau, Pivot(row=1, column=2))

    np.testing.assert_array_equal(initial_tableau, before)


def test_transpose():
    matrix = [[1, 2, 3], [4, 5, 6], [7, 8, 9], [10, 11, 12]]

    assert transpose(matrix) == [[1, 4, 7, 10], [2, 5, 8, 11], [3, 6, 9, 12]]
    assert transpose(transpose(matrix)) == matrix


@pytest.mark.parametrize("matrix", [[], [[1, 2], [3]]])
def test_transpose_rejects_ragged_or_empty_input(matrix):
    assert transpose(matrix) is None


def test_solve():
    result = solve([7, 8, 10], [[2, 3, 2, 1000], [1, 1, 2, 800]], 10)

    assert result.status == "optimal"
    assert result.solved
    assert is_optimal(result.tableau)
    assert result.iterations == 3
    assert result.row_labels == [Label.decision(0), Label.decision(2), Label.objective()]
    np.testing.assert_array_equal(result.tableau[-1], [0, 1, 0, 2, 3, 1, 4400])
    assert result.objective_value == 4400


def test_solve_stops_at_iteration_limit():
    result = solve([7, 8, 10], [[2, 3, 2, 1000], [1, 1, 2, 800]], 2)

    assert result.status == "iteration_limit"
    assert not result.solved
    assert result.iterations == 2


def test_solve_zero_iterations_on_optimal_start():
    result = solve([-1, -2], [[1, 1, 4], [1, 3, 6]], 0)

    assert result.status == "optimal"
    assert result.iterations == 0


def test_solve_invalid_problem():
    result = solve([1, 1], [], 10)

    assert result.status == "invalid"
    assert result.tableau.size == 0


def test_solve_logs_pivots(caplog):
    with caplog.at_level(logging.DEBUG, logger="simplex_tableau"):
        solve([7, 8, 10], [[2, 3, 2, 1000], [1, 1, 2, 800]], 10)

    assert "pivot at row 1, column 2 (x2 enters, s1 leaves)" in caplog.text
    assert "status optimal after 3 iteration(s)" in caplog.text
