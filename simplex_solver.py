from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from simplex_tableau import Label, SimplexResult, solve, transpose


logger = logging.getLogger(__name__)


class SimplexError(Exception):
    pass


def dual_problem(
    objective: Sequence[float], constraints: Sequence[Sequence[float]]
) -> Optional[Tuple[List[float], List[List[float]]]]:
    """Turn ``min c.x`` with ``>=`` constraints into its dual ``max`` problem.

    The constraints with the objective appended as ``c + [0]`` are transposed:
    the bounds become the new objective and the costs the new bounds.

        min 3x1 + 9x2          max 8y1 + 8y2
            2x1 +  x2 >= 8  ->     2y1 +  y2 <= 3
             x1 + 2x2 >= 8          y1 + 2y2 <= 9
    """
    matrix = [list(row) for row in constraints]
    matrix.append(list(objective) + [0.0])

    transposed = transpose(matrix)
    if transposed is None:
        logger.debug("constraint rows have unequal widths, no dual problem")
        return None

    dual_objective = transposed[-1][:-1]
    dual_constraints = transposed[:-1]
    return dual_objective, dual_constraints


def read_maximum(result: SimplexResult, variables: int) -> Optional[List[float]]:
    """Variable values and the maximum from a solved tableau.

    A decision variable labelling a row takes that row's right-hand side,
    the others are non-basic and stay at 0.
    """
    if not result.solved or result.tableau.shape[1] < 3:
        return None

    values_by_label = {
        label: float(row[-1]) for label, row in zip(result.row_labels, result.tableau)
    }
    values = [values_by_label.get(Label.decision(j), 0.0) for j in range(variables)]
    values.append(result.objective_value)
    return values


def read_minimum(result: SimplexResult, dual_variables: int) -> Optional[List[float]]:
    """Primal values and the minimum from a solved dual tableau.

    The primal values are the objective-row entries under the dual's slack
    columns.
    """
    if not result.solved:
        return None

    objective_row = result.tableau[-1]
    last_slack = len(result.column_labels) - 2
    values = [float(objective_row[j]) for j in range(dual_variables, last_slack + 1)]
    values.append(result.objective_value)
    return values


def maximize(
    objective: Sequence[float],
    constraints: Sequence[Sequence[float]],
    max_iterations: int = 100,
) -> Optional[List[float]]:
    """Maximize ``objective`` subject to ``<=`` constraints.

    Each constraint row holds its coefficients followed by its bound, e.g.
    ``[[2, 3, 2, 1000], [1, 1, 2, 800]]`` for ``2x1 + 3x2 + 2x3 <= 1000`` and
    ``x1 + x2 + 2x3 <= 800``. Returns the variable values followed by the
    maximum, or ``None`` when no optimum was reached in ``max_iterations``
    pivots or the input is malformed.
    """
    result = solve(objective, constraints, max_iterations)
    return read_maximum(result, len(objective))


def minimize(
    objective: Sequence[float],
    constraints: Sequence[Sequence[float]],
    max_iterations: int = 100,
) -> Optional[List[float]]:
    """Minimize ``objective`` subject to ``>=`` constraints by solving the dual.

    Returns the variable values followed by the minimum, or ``None``.
    """
    dual = dual_problem(objective, constraints)
    if dual is None:
        return None
    dual_objective, dual_constraints = dual

    result = solve(dual_objective, dual_constraints, max_iterations)
    return read_minimum(result, len(dual_objective))
