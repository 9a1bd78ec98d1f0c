import json
from typing import List

import streamlit as st

from problem_io import DEFAULT_MAX_ITERATIONS, Problem, parse_csv_payload, parse_json_payload, tableau_rows
from simplex_solver import SimplexError, dual_problem, read_maximum, read_minimum
from simplex_tableau import SimplexResult, solve


st.set_page_config(page_title="simplex solver", layout="wide")
st.title("simplex tableau solver")


def _display_tableau(result: SimplexResult) -> None:
    st.table(tableau_rows(result))


def _display_result(problem: Problem, values, result: SimplexResult) -> None:
    if values is not None:
        *variables, optimum = values
        st.success(
            f"optimal solution found in {result.iterations} iterations. "
            f"{problem.sense}imum: {round(optimum, 6)}"
        )
        st.write("decision variables:", [round(x, 6) for x in variables])
    elif result.status == "iteration_limit":
        st.error("no solution found within the iteration limit.")
    else:
        st.error("no solution: the problem could not be laid out as a tableau.")

    if result.tableau.size:
        title = "final dual tableau" if problem.sense == "min" else "final tableau"
        st.markdown(f"#### {title}")
        _display_tableau(result)


def _run_solver(problem: Problem) -> None:
    if problem.sense == "min":
        dual = dual_problem(problem.objective, problem.constraints)
        if dual is None:
            st.error("input error: every constraint needs one coefficient per variable and a bound.")
            return
        dual_objective, dual_constraints = dual
        result = solve(dual_objective, dual_constraints, problem.max_iterations)
        values = read_minimum(result, len(dual_objective))
    else:
        result = solve(problem.objective, problem.constraints, problem.max_iterations)
        values = read_maximum(result, len(problem.objective))

    _display_result(problem, values, result)


def _manual_tab():
    st.subheader("manual input")
    with st.form("manual_form"):
        sense_label = st.radio("goal", ["maximize", "minimize"], horizontal=True)
        n_vars = st.number_input("number of decision variables", min_value=2, value=3, step=1)
        n_cons = st.number_input("number of constraints", min_value=1, value=2, step=1)
        max_iterations = st.number_input(
            "maximum iterations", min_value=0, value=DEFAULT_MAX_ITERATIONS, step=1
        )
        relation = "≤" if sense_label == "maximize" else "≥"

        st.markdown("##### objective function coefficients")
        objective: List[float] = []
        for j in range(int(n_vars)):
            value = st.number_input(f"c{j}", value=0.0, step=1.0, key=f"c_{j}")
            objective.append(float(value))

        st.markdown(f"##### constraints (coefficients {relation} bound)")
        constraints: List[List[float]] = []
        for i in range(int(n_cons)):
            cols = st.columns(int(n_vars) + 1)
            row: List[float] = []
            for j in range(int(n_vars)):
                value = cols[j].number_input(
                    f"a[{i},{j}]",
                    value=0.0,
                    step=1.0,
                    key=f"a_{i}_{j}",
                )
                row.append(float(value))
            bound = cols[-1].number_input(f"b{i}", value=0.0, step=1.0, key=f"b_{i}")
            row.append(float(bound))
            constraints.append(row)

        submitted = st.form_submit_button("solve")

    if submitted:
        _run_solver(
            Problem(
                objective=objective,
                constraints=constraints,
                sense="min" if sense_label == "minimize" else "max",
                max_iterations=int(max_iterations),
            )
        )


def _file_upload_tab():
    st.subheader("upload json or csv")
    if "json_editor" not in st.session_state:
        st.session_state["json_editor"] = json.dumps(
            {
                "objective": [7, 8, 10],
                "constraints": [[2, 3, 2, 1000], [1, 1, 2, 800]],
                "sense": "max",
                "max_iterations": 10,
            },
        )
    if "csv_problem" not in st.session_state:
        st.session_state["csv_problem"] = None
    if "csv_filename" not in st.session_state:
        st.session_state["csv_filename"] = ""

    csv_sense = st.radio("goal for csv files", ["max", "min"], horizontal=True)
    uploaded = st.file_uploader(
        "upload file", type=["json", "csv"], accept_multiple_files=False
    )

    if uploaded:
        payload = uploaded.getvalue().decode("utf-8")
        if uploaded.name.lower().endswith(".json"):
            st.session_state["json_editor"] = payload
            st.session_state["csv_problem"] = None
            st.session_state["csv_filename"] = ""
            st.success(f"loaded json file '{uploaded.name}' into the editor.")
        else:
            try:
                parsed_csv = parse_csv_payload(payload, sense=csv_sense)
            except SimplexError as exc:
                st.session_state["csv_problem"] = None
                st.session_state["csv_filename"] = ""
                st.error(f"file error: {exc}")
            else:
                st.session_state["csv_problem"] = parsed_csv
                st.session_state["csv_filename"] = uploaded.name
                st.success(f"parsed csv file '{uploaded.name}'.")
    else:
        st.session_state["csv_problem"] = None
        st.session_state["csv_filename"] = ""

    st.caption(
        "json example: `{ \"objective\": [3, 9], \"constraints\": [[2, 1, 8], [1, 2, 8]], "
        "\"sense\": \"min\" }`. csv header example: `type,x1,x2,b`."
    )

    json_content = st.text_area(
        "json problem definition",
        key="json_editor",
        placeholder="paste or edit json for the lp here...",
        height=260,
    )

    json_status = st.empty()
    parsed_json_problem = None
    if json_content.strip():
        try:
            parsed_json_problem = parse_json_payload(json_content)
        except SimplexError as exc:
            json_status.error(f"json error: {exc}")
        else:
            json_status.success("json input is valid.")
    else:
        json_status.info("provide json above or use the file uploader.")

    if st.session_state["csv_filename"]:
        st.caption(f"active csv file: {st.session_state['csv_filename']}")

    if st.button("solve problem", use_container_width=True):
        csv_problem = st.session_state.get("csv_problem")
        if csv_problem:
            _run_solver(csv_problem)
        elif parsed_json_problem:
            _run_solver(parsed_json_problem)
        else:
            st.error("provide a valid json problem or upload a csv file before solving.")


tab_manual, tab_file = st.tabs(["manual input", "file upload"])
with tab_manual:
    _manual_tab()
with tab_file:
    _file_upload_tab()
