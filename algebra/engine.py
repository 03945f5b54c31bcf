"""Expression-level entry points of the exact algebra engine.

Each entry point takes one single-variable expression or equation string
(e.g. "x^2 - 5x + 6 = 0") and returns text: the canonical polynomial, its
factorization or its roots. ``solve_equation_trail`` returns the same
answer as a step-by-step record (given / method / steps / final_answer /
verification_steps / summary) for the HTTP layer.
"""

import logging
import time
from datetime import datetime

from algebra.equation import Equation, Solution, SolutionKind
from algebra.factorization import complete_factorization, factor
from algebra.parser import parse_polynomial
from algebra.rational import format_rational

logger = logging.getLogger(__name__)

_MAX_INPUT_LENGTH = 500


def _validate_input(text: str) -> str:
    text = text.strip()
    if not text:
        raise ValueError("Expression cannot be empty.")
    if len(text) > _MAX_INPUT_LENGTH:
        raise ValueError(f"Expression is too long (limit {_MAX_INPUT_LENGTH} characters).")
    return text


def simplify_expression(text: str) -> str:
    """Canonical form: like terms combined, powers descending."""
    return str(parse_polynomial(_validate_input(text)))


def factor_expression(text: str) -> str:
    """Factored form, e.g. ``"x^2 - 1"`` → ``"(x - 1) * (x + 1)"``."""
    return factor(parse_polynomial(_validate_input(text)))


def solve_expression(text: str) -> str:
    """Roots as text, e.g. ``"x^2 - 5x + 6 = 0"`` → ``"x = 3, x = 2"``."""
    equation = Equation(_validate_input(text))
    solution = equation.solve()
    logger.info("solved %s by %s: %s", equation.standard_form, solution.method, solution)
    return str(solution)


# ── Step trail ──────────────────────────────────────────────────────────

def _method_steps(equation: Equation, solution: Solution) -> list[dict]:
    poly = equation.polynomial
    v = equation.variable
    steps = []
    if solution.method == "constant":
        verdict = "always true" if solution.kind is SolutionKind.IDENTITY else "never true"
        steps.append({
            "description": "No variable term is left",
            "expression": equation.standard_form,
            "explanation": f"The equation reduces to a constant statement that is {verdict}.",
        })
    elif solution.method == "linear":
        a, b = poly.dense_coefficients()
        steps.append({
            "description": f"Isolate {v}",
            "expression": f"{v} = -({b}) / {format_rational(a, parens=True)}",
            "explanation": f"Subtract the constant and divide by the coefficient of {v}.",
        })
    elif solution.method == "quadratic formula":
        a, b, c = poly.dense_coefficients()
        discriminant = b * b - 4 * a * c
        steps.append({
            "description": "Compute the discriminant",
            "expression": f"D = b^2 - 4ac = {discriminant}",
            "explanation": f"Here a = {a}, b = {b}, c = {c}.",
        })
        if discriminant < 0:
            explanation = "A negative discriminant means there is no real root."
        elif discriminant == 0:
            explanation = "A zero discriminant gives one repeated root."
        else:
            explanation = "Substitute into the quadratic formula; square roots stay exact."
        steps.append({
            "description": "Apply the quadratic formula",
            "expression": f"{v} = (-b ± sqrt(D)) / 2a",
            "explanation": explanation,
        })
    else:
        factors = complete_factorization(poly)
        steps.append({
            "description": "Factor with the rational-root theorem",
            "expression": factor(poly),
            "explanation": (
                f"Found {len(factors)} factor(s) by testing candidates p/q and "
                f"dividing them out with synthetic division."
            ),
        })
        steps.append({
            "description": "Solve each factor",
            "expression": str(solution),
            "explanation": "Linear and quadratic factors are solved exactly; "
                           "anything of higher degree without a rational root is unsolvable.",
        })
    return steps


def _verification_steps(equation: Equation, solution: Solution) -> tuple[list[dict], bool]:
    v = equation.variable
    steps = []
    passed = True
    for root in solution.roots:
        if not root.is_rational():
            continue
        value = equation.polynomial.evaluate(root.rational)
        ok = value == 0
        passed = passed and ok
        steps.append({
            "description": f"Substitute {v} = {root}",
            "expression": f"P({root}) = {value}" + ("  ✓" if ok else "  ✗"),
            "explanation": "The left-hand side minus the right-hand side is exactly 0."
            if ok else "The substitution does not give 0.",
        })
    return steps, passed


def solve_equation_trail(text: str) -> dict:
    """
    Solve *text* and describe how.

    Returns a dict with the sections
      - given, method, steps, final_answer, verification_steps, summary
    Only rational roots are substituted back during verification.
    """
    t_start = time.perf_counter()
    equation = Equation(_validate_input(text))
    solution = equation.solve()

    steps = [
        {
            "description": "Write the equation",
            "expression": equation.text,
            "explanation": "This is the equation as entered.",
        },
        {
            "description": "Move every term to the left-hand side",
            "expression": equation.standard_form,
            "explanation": "Subtracting the right-hand side gives the standard form P(x) = 0.",
        },
    ]
    steps.extend(_method_steps(equation, solution))
    verification_steps, passed = _verification_steps(equation, solution)

    # ── Number the steps ────────────────────────────────────────────────
    for i, step in enumerate(steps, start=1):
        step["step_number"] = i
    for i, step in enumerate(verification_steps, start=1):
        step["step_number"] = i

    t_end = time.perf_counter()
    degree = equation.polynomial.degree
    return {
        "equation": text,
        "given": {
            "problem": f"Solve the equation: {equation.text}",
            "inputs": {
                "equation": equation.text,
                "left_side": str(equation.lhs),
                "right_side": str(equation.rhs),
                "variable": equation.variable,
            },
        },
        "method": {
            "name": solution.method.title(),
            "parameters": {
                "degree": "none" if degree is None else str(degree),
                "standard_form": equation.standard_form,
            },
        },
        "steps": steps,
        "final_answer": str(solution),
        "verification_steps": verification_steps,
        "summary": {
            "runtime_ms": round((t_end - t_start) * 1000, 2),
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "validation_status": "pass" if passed else "fail",
        },
    }
