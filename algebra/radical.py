"""
Simplified square-root radicals: ``coefficient * sqrt(radicand)``.

The radicand is kept as a square-free positive integer (or ``1``, which
makes the radical an ordinary rational). Any other radicand handed to the
constructor is simplified on the way in, so ``SimplifiedRadical(1, 8)``
is stored as ``2*sqrt(2)`` and ``SimplifiedRadical(1, Fraction(1, 2))`` as
``1/2*sqrt(2)``.
"""

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Union

from algebra.errors import DivisionByZeroError, DomainError
from algebra.rational import ONE, ZERO, check_trial_division

RadicalLike = Union[int, Fraction, "SimplifiedRadical"]


def _split_square(n: int) -> tuple[int, int]:
    """Write the non-negative integer *n* as ``k*k*m`` with *m* square-free.

    Perfect squares of any size are split directly; anything else above
    ``MAX_TRIAL_DIVISION`` raises DomainError.
    """
    root = math.isqrt(n)
    if n and root * root == n:
        return root, 1
    check_trial_division(n)
    k = 1
    m = n
    while m and m % 4 == 0:
        m //= 4
        k *= 2
    i = 3
    while i * i <= m:
        while m % (i * i) == 0:
            m //= i * i
            k *= i
        i += 2
    return k, m


def _integer_root(n: int, degree: int) -> Optional[int]:
    """Exact integer *degree*-th root of ``n >= 0``, or None."""
    if n < 2:
        return n
    lo, hi = 1, 1 << (n.bit_length() // degree + 1)
    while lo <= hi:
        mid = (lo + hi) // 2
        power = mid ** degree
        if power == n:
            return mid
        if power < n:
            lo = mid + 1
        else:
            hi = mid - 1
    return None


@dataclass(frozen=True, eq=False)
class SimplifiedRadical:
    coefficient: Fraction = ONE
    radicand: int = 1

    def __post_init__(self):
        coefficient = Fraction(self.coefficient)
        radicand = Fraction(self.radicand)
        if radicand < 0:
            raise DomainError(
                f"Cannot take the square root of a negative number ({radicand})."
            )
        if coefficient == 0 or radicand == 0:
            coefficient, radicand_int = ZERO, 1
        else:
            # sqrt(p/q) = sqrt(p*q) / q
            k, radicand_int = _split_square(radicand.numerator * radicand.denominator)
            coefficient = coefficient * Fraction(k, radicand.denominator)
        object.__setattr__(self, "coefficient", coefficient)
        object.__setattr__(self, "radicand", radicand_int)

    # ── Predicates ──────────────────────────────────────────────────────

    def is_zero(self) -> bool:
        return self.coefficient == 0

    def is_rational(self) -> bool:
        return self.radicand == 1

    def is_negative(self) -> bool:
        return self.coefficient < 0

    def rational_value(self) -> Fraction:
        """The value as a Fraction; DomainError when an irrational part remains."""
        if not self.is_rational():
            raise DomainError(f"{self} is not a rational number.")
        return self.coefficient

    # ── Arithmetic ──────────────────────────────────────────────────────

    def __neg__(self) -> "SimplifiedRadical":
        return SimplifiedRadical(-self.coefficient, self.radicand)

    def __abs__(self) -> "SimplifiedRadical":
        return SimplifiedRadical(abs(self.coefficient), self.radicand)

    def __add__(self, other: RadicalLike) -> "SimplifiedRadical":
        other = as_radical(other)
        if other.is_zero():
            return self
        if self.is_zero():
            return other
        if self.radicand != other.radicand:
            raise DomainError(
                f"Cannot combine {self} and {other}: the radicands differ."
            )
        return SimplifiedRadical(self.coefficient + other.coefficient, self.radicand)

    __radd__ = __add__

    def __sub__(self, other: RadicalLike) -> "SimplifiedRadical":
        return self + (-as_radical(other))

    def __rsub__(self, other: RadicalLike) -> "SimplifiedRadical":
        return as_radical(other) - self

    def __mul__(self, other: RadicalLike) -> "SimplifiedRadical":
        other = as_radical(other)
        # __post_init__ pulls squares out of the product radicand.
        return SimplifiedRadical(
            self.coefficient * other.coefficient, self.radicand * other.radicand
        )

    __rmul__ = __mul__

    def __truediv__(self, other: RadicalLike) -> "SimplifiedRadical":
        other = as_radical(other)
        if other.is_zero():
            raise DivisionByZeroError(f"Cannot divide {self} by zero.")
        # (a*sqrt(m)) / (b*sqrt(n)) = a/(b*n) * sqrt(m*n)
        return SimplifiedRadical(
            self.coefficient / (other.coefficient * other.radicand),
            self.radicand * other.radicand,
        )

    def __rtruediv__(self, other: RadicalLike) -> "SimplifiedRadical":
        return as_radical(other) / self

    def __pow__(self, exponent: int) -> "SimplifiedRadical":
        if isinstance(exponent, Fraction):
            if exponent.denominator != 1:
                raise DomainError(
                    f"Cannot raise {self} to the fractional power {exponent}."
                )
            exponent = exponent.numerator
        if exponent < 0:
            if self.is_zero():
                raise DivisionByZeroError("0 cannot be raised to a negative power.")
            return (ONE / self) ** (-exponent)
        # (c*sqrt(m))^n = c^n * m^(n // 2) * sqrt(m)^(n % 2)
        return SimplifiedRadical(
            self.coefficient ** exponent * self.radicand ** (exponent // 2),
            self.radicand if exponent % 2 else 1,
        )

    # ── Comparison and display ──────────────────────────────────────────

    def __eq__(self, other):
        if isinstance(other, (int, Fraction)):
            return self.radicand == 1 and self.coefficient == other
        if isinstance(other, SimplifiedRadical):
            return (self.coefficient, self.radicand) == (other.coefficient, other.radicand)
        return NotImplemented

    def __hash__(self):
        if self.radicand == 1:
            return hash(self.coefficient)
        return hash((self.coefficient, self.radicand))

    def __str__(self) -> str:
        if self.is_rational():
            return str(self.coefficient)
        root = f"sqrt({self.radicand})"
        if self.coefficient == 1:
            return root
        if self.coefficient == -1:
            return f"-{root}"
        return f"{self.coefficient}*{root}"

    def __repr__(self) -> str:
        return f"SimplifiedRadical({self.coefficient!s}, {self.radicand})"


def as_radical(value: RadicalLike) -> SimplifiedRadical:
    if isinstance(value, SimplifiedRadical):
        return value
    if isinstance(value, (int, Fraction)):
        return SimplifiedRadical(Fraction(value), 1)
    raise TypeError(f"Cannot use {type(value).__name__} as a radical.")


def simplify_sqrt(value: Union[int, Fraction]) -> SimplifiedRadical:
    """``sqrt(value)`` as ``k*sqrt(m)`` with *m* square-free.

    The radicand is rationalised first (``sqrt(n/d) = sqrt(n*d)/d``); factors
    of 4 come out before the odd trial divisors. Zero gives ``0`` and a
    negative value raises DomainError, as does a non-square radicand above
    ``MAX_TRIAL_DIVISION``.
    """
    value = Fraction(value)
    if value < 0:
        raise DomainError(f"Cannot take the square root of a negative number ({value}).")
    if value == 0:
        return SimplifiedRadical(ZERO, 1)
    k, m = _split_square(value.numerator * value.denominator)
    return SimplifiedRadical(Fraction(k, value.denominator), m)


def pow_frac(base: Union[int, Fraction], exponent: Union[int, Fraction]) -> SimplifiedRadical:
    """Exact ``base ** exponent`` for a rational base and rational exponent.

    Integer exponents always work (except ``0`` to a non-positive power).
    Exponents with denominator 2 produce a radical. Any other denominator
    is accepted only when the root happens to be rational
    (``8 ** (1/3) == 2``); otherwise DomainError, since only square roots
    are represented.
    """
    base = Fraction(base)
    exponent = Fraction(exponent)
    if base == 0:
        if exponent <= 0:
            raise DivisionByZeroError("0 cannot be raised to a non-positive power.")
        return SimplifiedRadical(ZERO, 1)
    powered = base ** exponent.numerator
    degree = exponent.denominator
    if degree == 1:
        return SimplifiedRadical(powered, 1)
    if degree == 2:
        return simplify_sqrt(powered)
    if powered < 0 and degree % 2 == 0:
        raise DomainError(f"{base}^({exponent}) is not a real number.")
    num_root = _integer_root(abs(powered.numerator), degree)
    den_root = _integer_root(powered.denominator, degree)
    if num_root is None or den_root is None:
        raise DomainError(
            f"{base}^({exponent}) has no exact value; only square roots are supported."
        )
    sign = -1 if powered < 0 else 1
    return SimplifiedRadical(Fraction(sign * num_root, den_root), 1)
