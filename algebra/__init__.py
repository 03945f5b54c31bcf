"""
ExactSolver — exact symbolic algebra.

Rationals (``fractions.Fraction``), simplified square-root radicals and
single-variable polynomials, plus the equation solver built on them.
Nothing in this package rounds: every result is an exact rational or an
explicit ``k*sqrt(m)`` radical.
"""

import logging as _logging

from algebra.errors import (
    AlgebraError,
    DivisionByZeroError,
    DomainError,
    InvalidArgumentError,
    NotInvertibleError,
)

__all__ = [
    "AlgebraError",
    "DivisionByZeroError",
    "DomainError",
    "InvalidArgumentError",
    "NotInvertibleError",
]

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
