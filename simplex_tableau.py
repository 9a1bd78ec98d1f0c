"""
Tableau engine for the simplex method.

Layout of a tableau (m constraints, n decision variables):

    x0 .. x(n-1) | s0 .. s(m-1) | p | rhs
    -------------+--------------+---+-----
    constraint rows with one slack column each
    -c           | 0 ..         | 1 | 0      <- objective row

The objective row encodes ``-c.x + p = 0``; the problem is optimal once that
row holds no negative entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np


logger = logging.getLogger(__name__)


class LabelKind(Enum):
    DECISION = "x"
    SLACK = "s"
    OBJECTIVE = "p"


@dataclass(frozen=True)
class Label:
    """Name of a tableau row or column."""

    kind: LabelKind
    index: Optional[int] = None

    @classmethod
    def decision(cls, index: int) -> "Label":
        return cls(LabelKind.DECISION, index)

    @classmethod
    def slack(cls, index: int) -> "Label":
        return cls(LabelKind.SLACK, index)

    @classmethod
    def objective(cls) -> "Label":
        return cls(LabelKind.OBJECTIVE)

    def __str__(self) -> str:
        if self.kind is LabelKind.OBJECTIVE:
            return self.kind.value
        return f"{self.kind.value}{self.index}"


class Pivot(NamedTuple):
    row: int
    column: int


@dataclass
class SimplexResult:
    """Container for simplex outcomes."""

    status: str
    tableau: np.ndarray
    row_labels: List[Label] = field(default_factory=list)
    column_labels: List[Label] = field(default_factory=list)
    iterations: int = 0

    @property
    def solved(self) -> bool:
        return self.status == "optimal"

    @property
    def objective_value(self) -> float:
        return float(self.tableau[-1, -1])


def build_initial_tableau(
    objective: Sequence[float], constraints: Sequence[Sequence[float]]
) -> Optional[np.ndarray]:
    """Lay out ``objective`` and ``constraints`` as a tableau.

    ``objective`` goes into the last row as given, so callers pass it already
    negated. Rows narrower than the widest one are padded with zero
    coefficients in front of their right-hand side. Returns ``None`` when there
    are no constraints or a constraint has fewer than two coefficients.
    """
    if not constraints:
        return None
    if any(len(row) < 3 for row in constraints):
        return None

    m = len(constraints)
    n = max(len(objective), max(len(row) - 1 for row in constraints))

    tableau = np.zeros((m + 1, n + m + 2), dtype=float)
    for i, row in enumerate(constraints):
        coefficients = row[:-1]
        tableau[i, : len(coefficients)] = coefficients
        tableau[i, -1] = row[-1]
    tableau[:m, n : n + m] = np.eye(m, dtype=float)
    tableau[-1, : len(objective)] = objective
    tableau[-1, n + m] = 1.0

    return tableau


def initial_labels(variables: int, constraints: int) -> Tuple[List[Label], List[Label]]:
    slacks = [Label.slack(i) for i in range(constraints)]
    column_labels = [Label.decision(j) for j in range(variables)] + slacks + [Label.objective()]
    row_labels = slacks + [Label.objective()]
    return row_labels, column_labels


def is_optimal(tableau: np.ndarray) -> bool:
    # the right-hand side is scanned as well
    if tableau.size == 0:
        return False
    return not bool(np.any(tableau[-1] < 0))


def select_pivot(tableau: np.ndarray) -> Optional[Pivot]:
    """Most negative objective entry picks the column, smallest ratio the row.

    A constraint row with a zero right-hand side gets ratio 0 whatever its
    entry in the pivot column. Other ratios are not checked for the sign of
    the divisor, so a negative or zero entry yields a negative or infinite
    ratio. Ties go to the first index.
    """
    if tableau.ndim != 2 or tableau.shape[0] < 2 or tableau.shape[1] < 2:
        return None

    column = int(np.argmin(tableau[-1, :-1]))

    rhs = tableau[:-1, -1]
    divisors = tableau[:-1, column]
    with np.errstate(divide="ignore", invalid="ignore"):
        ratios = np.where(rhs == 0, 0.0, rhs / divisors)

    row = int(np.argmin(ratios))
    return Pivot(row=row, column=column)


def eliminate(tableau: np.ndarray, pivot: Pivot) -> np.ndarray:
    """Gauss-Jordan step around ``pivot``; returns a new tableau."""
    result = np.array(tableau, dtype=float, copy=True)
    row, column = pivot

    with np.errstate(divide="ignore", invalid="ignore"):
        result[row] = result[row] / result[row, column]

        for i in range(result.shape[0]):
            if i == row:
                continue
            factor = -result[i, column]
            result[i] = result[i] + factor * result[row]

    return result


def transpose(matrix: Sequence[Sequence[float]]) -> Optional[List[List[float]]]:
    if not matrix:
        return None
    if len({len(row) for row in matrix}) != 1:
        return None
    return [list(column) for column in zip(*matrix)]


def solve(
    objective: Sequence[float],
    constraints: Sequence[Sequence[float]],
    max_iterations: int,
) -> SimplexResult:
    """Maximize ``objective`` subject to ``constraints`` (all ``<=``).

    The returned result carries the final tableau with its labels. Its status
    is ``"optimal"``, ``"iteration_limit"`` when the pivot budget ran out, or
    ``"invalid"`` when the problem could not be laid out as a tableau.
    """
    tableau = build_initial_tableau([-value for value in objective], constraints)
    if tableau is None:
        logger.debug(
            "rejected problem with %d constraint(s) and %d objective coefficient(s)",
            len(constraints),
            len(objective),
        )
        return SimplexResult(status="invalid", tableau=np.zeros((0, 0)))

    m = tableau.shape[0] - 1
    n = tableau.shape[1] - m - 2
    row_labels, column_labels = initial_labels(n, m)

    iterations = 0
    while not is_optimal(tableau) and iterations < max_iterations:
        pivot = select_pivot(tableau)
        if pivot is None:
            break

        logger.debug(
            "iteration %d: pivot at row %d, column %d (%s enters, %s leaves)",
            iterations + 1,
            pivot.row,
            pivot.column,
            column_labels[pivot.column],
            row_labels[pivot.row],
        )
        tableau = eliminate(tableau, pivot)
        row_labels[pivot.row] = column_labels[pivot.column]
        iterations += 1

    status = "optimal" if is_optimal(tableau) else "iteration_limit"
    logger.debug("simplex finished with status %s after %d iteration(s)", status, iterations)

    return SimplexResult(
        status=status,
        tableau=tableau,
        row_labels=row_labels,
        column_labels=column_labels,
        iterations=iterations,
    )
