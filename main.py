"""
ExactSolver — Entry point.

Command-line access to the exact engine:

    python main.py simplify "2x + 3x - 1"
    python main.py factor "x^2 - 1"
    python main.py solve "x^2 - 5x + 6 = 0" [--steps]
    python main.py matrix det "[1, 2; 3, 4]" [--steps] [--save NAME]
    python main.py system "[1, 1; 1, -1]" "[10, 2]"
    python main.py eigen "[2, 0; 0, 3]"
    python main.py vecset "[1, 0; 0, 1]" "[1, 1; 0, 1]"
    python main.py show NAME | vars | import PATH
    python main.py export PATH [--csv NAME]
    python main.py history [--pin ID | --delete ID | --clear]

Every successful command is added to the workspace history.
"""

import argparse
import sys
from typing import Optional

from algebra.engine import factor_expression, simplify_expression, solve_equation_trail
from algebra.errors import AlgebraError, InvalidArgumentError
from linalg import MATRIX_OPERATIONS
from linalg.cofactor import EXPANSION_STRATEGIES, determinant_by_expansion
from linalg.eigen import characteristic_polynomial, eigenvalues
from linalg.history import run_recorded
from linalg.matrix import Matrix
from linalg.systems import EquationSolver
from linalg.vector import Vector
from linalg.vectorset import compare_vector_sets
from logging_config import configure_logging
from workspace import storage


def _friendly_error(command: str, exc: Exception) -> str:
    msg = str(exc)
    if isinstance(exc, (AlgebraError, ValueError, ZeroDivisionError)):
        return msg
    return (
        f'ExactSolver could not process "{command}".\n'
        "Expressions use one variable, e.g.  x^2 - 5x + 6 = 0 ;  "
        "matrices are written as  [1, 2; 3, 4].\n"
        f"Details: {msg}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exactsolver",
        description="Exact rational algebra and linear algebra.",
    )
    parser.add_argument("--log-level", default=None,
                        help="Logging level (default: the saved setting)")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, text in (("simplify", "Expression to simplify"),
                       ("factor", "Polynomial to factor")):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("expression", help=text)

    solve = sub.add_parser("solve", help="Solve a single-variable equation")
    solve.add_argument("equation", help='e.g. "x^2 - 5x + 6 = 0"')
    solve.add_argument("--steps", action="store_true", help="Print the solution steps")

    matrix = sub.add_parser("matrix", help="Run a matrix operation")
    matrix.add_argument("operation", choices=sorted(MATRIX_OPERATIONS))
    matrix.add_argument("matrix", help='e.g. "[1, 2; 3, 4]"')
    matrix.add_argument("--steps", action="store_true", help="Print the recorded steps")
    matrix.add_argument("--strategy", choices=EXPANSION_STRATEGIES, default=None,
                        help="Expansion line for det_expansion (default: the saved setting)")
    matrix.add_argument("--save", metavar="NAME", help="Store the result under NAME")

    system = sub.add_parser("system", help="Solve the linear system Ax = b")
    system.add_argument("a", help="Coefficient matrix")
    system.add_argument("b", help="Right-hand side vector")

    eigen = sub.add_parser("eigen", help="Characteristic polynomial and eigenvalues")
    eigen.add_argument("matrix")

    vecset = sub.add_parser("vecset", help="Compare the column vectors of A and B")
    vecset.add_argument("a", help="Columns are the vectors of the first set")
    vecset.add_argument("b", help="Columns are the vectors of the second set")

    show = sub.add_parser("show", help="Print a saved result")
    show.add_argument("name")
    sub.add_parser("vars", help="List saved results")
    history = sub.add_parser("history", help="Show command history")
    action = history.add_mutually_exclusive_group()
    action.add_argument("--pin", metavar="ID", help="Pin or unpin the entry whose id starts with ID")
    action.add_argument("--delete", metavar="ID", help="Delete the entry whose id starts with ID")
    action.add_argument("--clear", action="store_true", help="Delete every entry")
    export = sub.add_parser("export", help="Write saved results to a file")
    export.add_argument("path")
    export.add_argument("--csv", metavar="NAME", help="Write only the result saved under NAME, as CSV")
    imp = sub.add_parser("import", help="Load saved results from a file")
    imp.add_argument("path")
    return parser


# ── Commands ────────────────────────────────────────────────────────────

def _solve(args, settings: dict) -> str:
    trail = solve_equation_trail(args.equation)
    if not (args.steps or settings["show_steps"]):
        return trail["final_answer"]
    lines = [f"Step {s['step_number']}: {s['description']}\n    {s['expression']}"
             for s in trail["steps"]]
    lines.append(f"Answer: {trail['final_answer']}")
    return "\n".join(lines)


def _matrix(args, settings: dict) -> str:
    func = MATRIX_OPERATIONS[args.operation]
    matrix = Matrix.parse(args.matrix)
    kwargs = {}
    if func is determinant_by_expansion:
        kwargs["strategy"] = args.strategy or settings["expansion_strategy"]
    history = None
    if (args.steps or settings["show_steps"]) and hasattr(func, "history_type"):
        result, history = run_recorded(func, matrix, **kwargs)
    else:
        result = func(matrix, **kwargs)
    if args.save:
        storage.save_variable(args.save, result)
    answer = str(result)
    if history is not None:
        return f"{history.format()}\n\nResult:\n{answer}"
    return answer


def _system(args, settings: dict) -> str:
    return EquationSolver.solve(Matrix.parse(args.a), Vector.parse(args.b)).description


def _eigen(args, settings: dict) -> str:
    matrix = Matrix.parse(args.matrix)
    roots = ", ".join(str(r) for r in eigenvalues(matrix))
    return f"det(xI - A) = {characteristic_polynomial(matrix)}\neigenvalues: {roots}"


def _vecset(args, settings: dict) -> str:
    report = compare_vector_sets(Matrix.parse(args.a), Matrix.parse(args.b))
    lines = []
    for label, rep in (("A represents B", report["a_represents_b"]),
                       ("B represents A", report["b_represents_a"])):
        if not rep.representable:
            lines.append(f"{label}: no")
            continue
        kind = "unique" if rep.unique else "free weights set to 0"
        lines.append(f"{label}: yes ({kind})\n{rep.coefficients}")
    lines.append(f"equivalent: {'yes' if report['equivalent'] else 'no'}")
    return "\n".join(lines)


def _nothing_saved(name: str) -> InvalidArgumentError:
    return InvalidArgumentError(f"Nothing saved under '{name}'.")


def _show(args, settings: dict) -> str:
    try:
        return str(storage.load_variable(args.name))
    except KeyError:
        raise _nothing_saved(args.name) from None


def _export(args, settings: dict) -> str:
    if not args.csv:
        return f"Exported {storage.export_workspace(args.path)} result(s)."
    try:
        storage.export_result_csv(args.csv, args.path)
    except KeyError:
        raise _nothing_saved(args.csv) from None
    return f"Wrote {args.csv} to {args.path}."


def _history_id(prefix: str) -> str:
    try:
        return storage.resolve_history_id(prefix)
    except KeyError:
        raise InvalidArgumentError(f"No history entry with id '{prefix}'.") from None


def _history(args, settings: dict) -> str:
    if args.pin:
        record_id = _history_id(args.pin)
        state = "Pinned" if storage.toggle_pin(record_id) else "Unpinned"
        return f"{state} {record_id[:8]}."
    if args.delete:
        record_id = _history_id(args.delete)
        storage.delete_history_item(record_id)
        return f"Deleted {record_id[:8]}."
    if args.clear:
        storage.clear_history()
        return "History cleared."
    records = storage.get_history()
    if not records:
        return "No history yet."
    return "\n".join(
        f"{'*' if r['pinned'] else ' '} {r['id'][:8]}  {r['timestamp']}  {r['command']}  ->  {r['answer']}"
        for r in records
    )


_COMMANDS = {
    "simplify": lambda args, s: simplify_expression(args.expression),
    "factor": lambda args, s: factor_expression(args.expression),
    "solve": _solve,
    "matrix": _matrix,
    "system": _system,
    "eigen": _eigen,
    "vecset": _vecset,
    "show": _show,
    "vars": lambda args, s: "\n".join(storage.list_variables()) or "No saved results.",
    "history": _history,
    "export": _export,
    "import": lambda args, s: f"Imported {storage.import_workspace(args.path)} result(s).",
}

_RECORDED = {"simplify", "factor", "solve", "matrix", "system", "eigen", "vecset"}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = storage.get_settings()
    configure_logging(args.log_level or settings["log_level"])
    command_text = " ".join(sys.argv[1:] if argv is None else argv)
    try:
        answer = _COMMANDS[args.command](args, settings)
    except Exception as exc:
        print(_friendly_error(command_text, exc), file=sys.stderr)
        return 1
    print(answer)
    if args.command in _RECORDED:
        storage.add_history(command_text, answer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
