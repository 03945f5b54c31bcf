"""
Polynomial factorization over the rationals.

``perform_factorization`` pulls out the rational content and the common
``x^k`` and splits a remaining quadratic with rational roots.
``complete_factorization`` then peels linear factors off anything of
degree > 2 with the rational-root theorem and synthetic division.
"""

import logging
import math
from fractions import Fraction

from algebra.errors import DomainError
from algebra.polynomial import Monomial, Polynomial
from algebra.rational import MAX_TRIAL_DIVISION, ONE, content, exact_sqrt, integer_divisors

logger = logging.getLogger(__name__)

# Upper bound on linear factors peeled by one complete_factorization call.
MAX_FACTOR_ITERATIONS = 20

# Largest |remainder| synthetic division accepts before refusing the root.
# Exact arithmetic never leaves slack, so only a true root is accepted.
SYNTHETIC_DIVISION_REMAINDER_LIMIT = 0


def _variable(poly: Polynomial) -> str:
    return poly.variable or "x"


# ── Rational roots ──────────────────────────────────────────────────────

def find_rational_roots(poly: Polynomial) -> list[Fraction]:
    """Candidate rational roots ``±p/q`` of *poly* (rational-root theorem).

    ``p`` runs over the divisors of the constant term and ``q`` over the
    divisors of the leading coefficient, after clearing denominators.
    Candidates come back integers first, then by ``|p|``, positive before
    negative. A polynomial without a constant term has the single
    candidate ``0``. Coefficients too large to factor by trial division
    give no candidates, so the polynomial is treated as having no
    rational root.
    """
    coefficients = poly.dense_coefficients()
    if len(coefficients) < 2:
        return []
    scale = math.lcm(*(c.denominator for c in coefficients))
    integers = [int(c * scale) for c in coefficients]
    constant, leading = integers[-1], integers[0]
    if constant == 0:
        return [Fraction(0)]
    if max(abs(constant), abs(leading)) > MAX_TRIAL_DIVISION:
        logger.info("coefficients of %s exceed %d; skipping the rational-root search",
                    poly, MAX_TRIAL_DIVISION)
        return []

    candidates: list[Fraction] = []
    seen = set()
    for p in integer_divisors(constant):
        for q in integer_divisors(leading):
            for candidate in (Fraction(p, q), Fraction(-p, q)):
                if candidate not in seen:
                    seen.add(candidate)
                    candidates.append(candidate)
    candidates.sort(key=lambda r: (r.denominator != 1, abs(r.numerator)))
    return candidates


def rational_roots(poly: Polynomial) -> list[Fraction]:
    """The candidates from :func:`find_rational_roots` that really are roots."""
    return [r for r in find_rational_roots(poly) if poly.evaluate(r) == 0]


def synthetic_division(poly: Polynomial, root) -> tuple[Polynomial, Fraction]:
    """Divide *poly* by ``(x - root)``; returns ``(quotient, remainder)``."""
    root = Fraction(root)
    coefficients = poly.dense_coefficients()
    if len(coefficients) < 2:
        raise DomainError(f"Cannot divide the constant '{poly}' by a linear factor.")
    carried = [coefficients[0]]
    for c in coefficients[1:]:
        carried.append(c + carried[-1] * root)
    remainder = carried.pop()
    return Polynomial.from_coefficients(carried, _variable(poly)), remainder


def divide_out_root(poly: Polynomial, root) -> Polynomial:
    """Quotient of *poly* by ``(x - root)``, refusing a non-root."""
    quotient, remainder = synthetic_division(poly, root)
    if abs(remainder) > SYNTHETIC_DIVISION_REMAINDER_LIMIT:
        raise DomainError(
            f"{root} is not a root of '{poly}' (remainder {remainder})."
        )
    return quotient


# ── Factorization ───────────────────────────────────────────────────────

def perform_factorization(poly: Polynomial) -> list[Polynomial]:
    """Content and common power first, then a quadratic with rational roots.

    Returns the factors in order; the last one is whatever could not be
    split further. Raises DomainError for radical coefficients or powers
    that are not non-negative integers.
    """
    coefficients = poly.dense_coefficients()
    if not coefficients:
        return [poly]
    variable = _variable(poly)
    factors: list[Polynomial] = []

    common = content(coefficients)
    min_power = poly.terms[-1].power
    if common != 1 or min_power != 0:
        common_factor = Polynomial([Monomial(common, min_power, variable)], variable)
        factors.append(common_factor)
        poly = poly / common_factor
        logger.debug("common factor %s leaves %s", common_factor, poly)

    if poly.degree == 2:
        a, b, c = poly.dense_coefficients()
        root = exact_sqrt(b * b - 4 * a * c)
        if root is not None:
            r1 = (-b + root) / (2 * a)
            r2 = (-b - root) / (2 * a)
            factors.extend([
                Polynomial.constant(a, variable),
                Polynomial.linear_factor(r1, variable),
                Polynomial.linear_factor(r2, variable),
            ])
            return factors

    factors.append(poly)
    return factors


def complete_factorization(poly: Polynomial) -> list[Polynomial]:
    """:func:`perform_factorization` plus rational-root peeling.

    Each pass looks for a rational root of the remaining degree > 2 part,
    emits ``(x - r)`` and continues with the quotient. The loop stops when
    the remainder has degree <= 2, has no rational root, or after
    ``MAX_FACTOR_ITERATIONS`` passes; the remainder is the last factor.
    """
    basic = perform_factorization(poly)
    factors = basic[:-1]
    current = basic[-1]
    variable = _variable(poly)

    iterations = 0
    while current.degree is not None and current.degree > 2 and iterations < MAX_FACTOR_ITERATIONS:
        iterations += 1
        root = next((r for r in find_rational_roots(current) if current.evaluate(r) == 0), None)
        if root is None:
            logger.debug("no rational root for %s", current)
            break
        factors.append(Polynomial.linear_factor(root, variable))
        current = divide_out_root(current, root)
        logger.debug("peeled root %s, quotient %s", root, current)

    factors.append(current)
    return factors


def factor(poly: Polynomial) -> str:
    """Factored text, e.g. ``"(x - 1) * (x + 1)"``.

    Quadratic factors are split again when their roots are rational, all
    constant factors are multiplied into one leading constant (dropped when
    it is 1), and multi-term factors are parenthesised.
    """
    if poly.is_zero():
        return "0"
    pieces: list[Polynomial] = []
    for piece in complete_factorization(poly):
        if piece.degree == 2 and not piece.is_monomial():
            pieces.extend(complete_factorization(piece))
        else:
            pieces.append(piece)

    constant = ONE
    variable_pieces: list[Polynomial] = []
    for piece in pieces:
        if piece.is_constant():
            constant *= piece.constant_value().rational_value()
        else:
            variable_pieces.append(piece)
    if constant == 1 and len(variable_pieces) == 1:
        return str(variable_pieces[0])

    texts = [
        str(piece) if piece.is_monomial() else f"({piece})"
        for piece in variable_pieces
    ]
    if constant != 1 or not texts:
        texts.insert(0, str(constant))
    return " * ".join(texts)
