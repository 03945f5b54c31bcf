"""
Single-variable equation solver.

An equation ``lhs = rhs`` is reduced once to the standard form
``P(x) = lhs - rhs = 0`` and solved by degree:

  - constant   → identity (``0 = 0``) or contradiction (``c = 0``)
  - linear     → ``x = -b/a``
  - quadratic  → quadratic formula, radical roots via ``simplify_sqrt``
  - higher     → ``complete_factorization`` and solve each factor

Roots that cannot be expressed exactly (a factor of degree > 2 without a
rational root) are reported as explicit ``Root.unsolvable()`` markers so
the roots that *were* found are kept.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Optional

from algebra.errors import AlgebraError, DomainError, InvalidArgumentError
from algebra.factorization import complete_factorization
from algebra.parser import parse_polynomial
from algebra.polynomial import Polynomial
from algebra.radical import SimplifiedRadical, simplify_sqrt
from algebra.rational import ZERO, exact_sqrt

logger = logging.getLogger(__name__)

UNSOLVABLE_MARKER = "unsolvable"


# ── Roots ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Root:
    """``rational + radical``; ``radical`` is None for a rational root."""

    rational: Fraction = ZERO
    radical: Optional[SimplifiedRadical] = None
    solvable: bool = True

    @classmethod
    def unsolvable(cls) -> "Root":
        return cls(solvable=False)

    def is_rational(self) -> bool:
        return self.solvable and (self.radical is None or self.radical.is_zero())

    def __str__(self) -> str:
        if not self.solvable:
            return UNSOLVABLE_MARKER
        if self.is_rational():
            return str(self.rational)
        if self.rational == 0:
            return str(self.radical)
        if self.radical.is_negative():
            return f"{self.rational} - {-self.radical}"
        return f"{self.rational} + {self.radical}"


def _linear_root(a: Fraction, b: Fraction) -> Root:
    return Root(-b / a)


def _quadratic_roots(a: Fraction, b: Fraction, c: Fraction) -> Optional[tuple[Root, Root]]:
    """Both roots from the quadratic formula; None when the discriminant is negative."""
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return None
    root = exact_sqrt(discriminant)
    if root is not None:
        return Root((-b + root) / (2 * a)), Root((-b - root) / (2 * a))
    base = -b / (2 * a)
    offset = simplify_sqrt(discriminant) / (2 * a)
    return Root(base, offset), Root(base, -offset)


def solve_all_roots(poly: Polynomial) -> list[Root]:
    """Every root of ``poly = 0``, one entry per unit of degree.

    A quadratic factor with a double root lists it twice. Factors of degree
    > 2 and quadratics with a negative discriminant contribute one
    unsolvable marker per unit of degree. If the factorization itself
    fails, every root is unsolvable.
    """
    degree = poly.degree
    if degree is None or degree <= 0:
        return []
    try:
        factors = complete_factorization(poly)
    except AlgebraError as exc:
        logger.info("factorization of %s failed (%s); reporting unsolvable roots", poly, exc)
        return [Root.unsolvable()] * max(int(degree), 1)

    roots: list[Root] = []
    for piece in factors:
        piece_degree = piece.degree
        if piece_degree is None or piece_degree == 0:
            continue
        n = int(piece_degree)
        if piece.is_monomial():
            roots.extend([Root(ZERO)] * n)
        elif n == 1:
            roots.append(_linear_root(*piece.dense_coefficients()))
        elif n == 2:
            try:
                pair = _quadratic_roots(*piece.dense_coefficients())
            except DomainError as exc:
                logger.info("quadratic factor %s left unsolved (%s)", piece, exc)
                pair = None
            roots.extend(pair if pair else [Root.unsolvable()] * 2)
        else:
            roots.extend([Root.unsolvable()] * n)
    return roots


# ── Equation ────────────────────────────────────────────────────────────

class SolutionKind(Enum):
    IDENTITY = "identity"
    CONTRADICTION = "contradiction"
    NO_REAL_ROOTS = "no_real_roots"
    ROOTS = "roots"


@dataclass(frozen=True)
class Solution:
    kind: SolutionKind
    variable: str
    method: str
    roots: tuple[Root, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if self.kind is SolutionKind.IDENTITY:
            return f"{self.variable} can be any value (identity)"
        if self.kind is SolutionKind.CONTRADICTION:
            return "No solution (contradiction)"
        if self.kind is SolutionKind.NO_REAL_ROOTS:
            return "No real solution (negative discriminant)"
        return ", ".join(f"{self.variable} = {root}" for root in self.roots)


def split_equation(text: str) -> tuple[str, str]:
    """Split on ``==`` or ``=``; a bare expression means ``expr = 0``."""
    separator = "==" if "==" in text else "="
    parts = text.split(separator)
    if len(parts) == 1:
        return text, "0"
    if len(parts) != 2:
        raise InvalidArgumentError("An equation must contain exactly one '='.")
    lhs, rhs = (part.strip() for part in parts)
    if not lhs or not rhs:
        raise InvalidArgumentError("Both sides of the equation need an expression.")
    return lhs, rhs


class Equation:
    """``lhs = rhs`` held in standard form ``lhs - rhs = 0``."""

    def __init__(self, text: str):
        self.text = text.strip()
        lhs_text, rhs_text = split_equation(self.text)
        self.lhs = parse_polynomial(lhs_text)
        self.rhs = parse_polynomial(rhs_text)
        self.polynomial = self.lhs - self.rhs
        self.variable = self.polynomial.variable or self.lhs.variable or self.rhs.variable or "x"

    @property
    def standard_form(self) -> str:
        return f"{self.polynomial} = 0"

    def _check_solvable(self) -> None:
        if not self.polynomial.has_only_rational_coefficients():
            raise DomainError("Equations with irrational coefficients cannot be solved.")
        if not self.polynomial.has_natural_powers():
            raise DomainError("Only non-negative integer powers can be solved.")

    def solve(self) -> Solution:
        self._check_solvable()
        poly = self.polynomial
        v = self.variable
        if poly.is_zero():
            return Solution(SolutionKind.IDENTITY, v, "constant")
        degree = poly.degree
        if degree == 0:
            return Solution(SolutionKind.CONTRADICTION, v, "constant")
        if degree == 1:
            return Solution(SolutionKind.ROOTS, v, "linear", (_linear_root(*poly.dense_coefficients()),))
        if degree == 2:
            pair = _quadratic_roots(*poly.dense_coefficients())
            if pair is None:
                return Solution(SolutionKind.NO_REAL_ROOTS, v, "quadratic formula")
            r1, r2 = pair
            roots = (r1,) if r1 == r2 else (r1, r2)
            return Solution(SolutionKind.ROOTS, v, "quadratic formula", roots)
        logger.debug("degree %s: solving %s by factorization", degree, poly)
        return Solution(SolutionKind.ROOTS, v, "factorization", tuple(solve_all_roots(poly)))

    def __str__(self) -> str:
        return self.standard_form
