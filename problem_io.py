from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from typing import Dict, List, Optional

from simplex_solver import SimplexError, maximize, minimize
from simplex_tableau import SimplexResult


SENSES = ("max", "min")
DEFAULT_MAX_ITERATIONS = 100


@dataclass
class Problem:
    objective: List[float]
    constraints: List[List[float]]
    sense: str = "max"
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def solve(self) -> Optional[List[float]]:
        if self.sense == "min":
            return minimize(self.objective, self.constraints, self.max_iterations)
        return maximize(self.objective, self.constraints, self.max_iterations)


def _numbers(values, what: str) -> List[float]:
    if not isinstance(values, list):
        raise SimplexError(f"{what} must be a list of numbers.")
    try:
        return [float(value) for value in values]
    except (TypeError, ValueError) as exc:
        raise SimplexError(f"{what} must contain numeric values.") from exc


def _sense(value) -> str:
    sense = str(value).strip().lower()
    if sense not in SENSES:
        raise SimplexError("sense must be 'max' or 'min'.")
    return sense


def _max_iterations(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SimplexError("max_iterations must be a non-negative integer.")
    return value


def parse_json_payload(payload: str) -> Problem:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SimplexError(f"invalid json: {exc}") from exc

    if not isinstance(data, dict):
        raise SimplexError("json root must be an object containing objective and constraints.")
    missing = [key for key in ("objective", "constraints") if key not in data]
    if missing:
        raise SimplexError(f"json missing keys: {', '.join(missing)}.")

    objective = _numbers(data["objective"], "objective")
    if not isinstance(data["constraints"], list) or not data["constraints"]:
        raise SimplexError("constraints must be a non-empty list of rows.")
    constraints = [
        _numbers(row, f"constraint {i + 1}") for i, row in enumerate(data["constraints"])
    ]

    return Problem(
        objective=objective,
        constraints=constraints,
        sense=_sense(data.get("sense", "max")),
        max_iterations=_max_iterations(data.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
    )


def parse_csv_payload(payload: str, sense: str = "max") -> Problem:
    """Read a problem from csv with a ``type,x1,..,xn,b`` header.

    One row has type ``objective`` (its ``b`` cell is ignored), the others
    type ``constraint``. Empty coefficient cells count as 0.
    """
    reader = csv.DictReader(io.StringIO(payload))
    if reader.fieldnames is None:
        raise SimplexError("csv must include a header row.")

    fieldnames_lower = [field.strip().lower() for field in reader.fieldnames]
    if "type" not in fieldnames_lower or "b" not in fieldnames_lower:
        raise SimplexError("csv must include columns named 'type' and 'b'.")

    type_field = reader.fieldnames[fieldnames_lower.index("type")]
    b_field = reader.fieldnames[fieldnames_lower.index("b")]
    coefficient_headers = [
        field for field in reader.fieldnames if field not in (type_field, b_field)
    ]
    if not coefficient_headers:
        raise SimplexError("csv must include at least one decision variable column.")

    objective_rows = []
    constraint_rows = []

    for raw_row in reader:
        row_type = (raw_row.get(type_field) or "").strip().lower()
        if row_type == "objective":
            objective_rows.append(raw_row)
        elif row_type == "constraint":
            constraint_rows.append(raw_row)
        else:
            raise SimplexError("csv 'type' column must be 'objective' or 'constraint'.")

    if len(objective_rows) != 1:
        raise SimplexError("csv must contain exactly one objective row.")
    if not constraint_rows:
        raise SimplexError("csv must include at least one constraint row.")

    def _coefficients(row) -> List[float]:
        coeffs = []
        for header in coefficient_headers:
            value = (row.get(header) or "").strip()
            try:
                coeffs.append(float(value) if value else 0.0)
            except ValueError as exc:
                raise SimplexError(f"invalid number {value!r} in column '{header}'.") from exc
        return coeffs

    constraints = []
    for row in constraint_rows:
        value = (row.get(b_field) or "").strip()
        if value == "":
            raise SimplexError("constraint rows must include a value for b.")
        try:
            bound = float(value)
        except ValueError as exc:
            raise SimplexError(f"invalid number {value!r} in column '{b_field}'.") from exc
        constraints.append(_coefficients(row) + [bound])

    return Problem(
        objective=_coefficients(objective_rows[0]),
        constraints=constraints,
        sense=_sense(sense),
    )


def tableau_rows(result: SimplexResult, digits: int = 6) -> List[Dict[str, object]]:
    """Final tableau as one dict per row, keyed by column label."""
    headers = [str(label) for label in result.column_labels] + ["rhs"]
    rows = []
    for label, values in zip(result.row_labels, result.tableau):
        entry: Dict[str, object] = {"row": str(label)}
        for header, value in zip(headers, values):
            entry[header] = round(float(value), digits)
        rows.append(entry)
    return rows
