"""
Exact rational helpers.

The rational value type of the whole engine is ``fractions.Fraction``:
always in lowest terms, denominator positive, zero stored as ``0/1`` and
compared by cross-multiplication. The helpers below add the checks and
conversions the engine needs around it.
"""

import math
from fractions import Fraction
from typing import Iterable, Optional, Union

from algebra.errors import DivisionByZeroError, DomainError, InvalidArgumentError

RationalLike = Union[int, Fraction]

ZERO = Fraction(0)
ONE = Fraction(1)

# Largest integer factored by trial division (at most a million divisors tried).
MAX_TRIAL_DIVISION = 10 ** 12


def check_trial_division(n: int) -> None:
    """DomainError when ``|n|`` is too large to factor by trial division."""
    if abs(n) > MAX_TRIAL_DIVISION:
        raise DomainError(
            f"{abs(n)} is too large to factor exactly (limit {MAX_TRIAL_DIVISION})."
        )


def make_rational(numerator: RationalLike, denominator: RationalLike = 1) -> Fraction:
    """Build ``numerator / denominator`` in lowest terms.

    Raises InvalidArgumentError for a zero denominator.
    """
    if denominator == 0:
        raise InvalidArgumentError("Denominator cannot be zero.")
    return Fraction(numerator) / Fraction(denominator)


def parse_rational(text: str) -> Fraction:
    """Parse ``"3"``, ``"-3/4"`` or ``"1.25"`` into an exact Fraction.

    Decimals are converted exactly (``"0.1"`` is ``1/10``).
    """
    cleaned = text.replace(" ", "")
    if not cleaned:
        raise InvalidArgumentError("Empty number.")
    try:
        return Fraction(cleaned)
    except ZeroDivisionError:
        raise InvalidArgumentError(f"Denominator cannot be zero in '{text}'.") from None
    except ValueError:
        raise InvalidArgumentError(f"'{text}' is not a rational number.") from None


def divide(a: RationalLike, b: RationalLike) -> Fraction:
    if b == 0:
        raise DivisionByZeroError("Division by zero.")
    return Fraction(a) / Fraction(b)


def exact_sqrt(value: RationalLike) -> Optional[Fraction]:
    """Return the exact rational square root of *value*, or None.

    None covers both negative input and a value that is not the square
    of a rational.
    """
    value = Fraction(value)
    if value < 0:
        return None
    num_root = math.isqrt(value.numerator)
    den_root = math.isqrt(value.denominator)
    if num_root * num_root != value.numerator or den_root * den_root != value.denominator:
        return None
    return Fraction(num_root, den_root)


def is_perfect_square(value: RationalLike) -> bool:
    return exact_sqrt(value) is not None


def is_integer(value: RationalLike) -> bool:
    return Fraction(value).denominator == 1


def format_rational(value: RationalLike, parens: bool = False) -> str:
    """``3``, ``-3/4``; with *parens*, negatives and fractions are wrapped
    so the text can be substituted into a product."""
    value = Fraction(value)
    text = str(value)
    if parens and (value < 0 or value.denominator != 1):
        return f"({text})"
    return text


def content(values: Iterable[RationalLike]) -> Fraction:
    """gcd of the numerators over lcm of the denominators.

    Dividing every value by the content leaves coprime integers.
    Returns 0 when every value is zero (or there are none).
    """
    num_gcd = 0
    den_lcm = 1
    for value in values:
        value = Fraction(value)
        if value == 0:
            continue
        num_gcd = math.gcd(num_gcd, abs(value.numerator))
        den_lcm = math.lcm(den_lcm, value.denominator)
    if num_gcd == 0:
        return ZERO
    return Fraction(num_gcd, den_lcm)


def integer_divisors(n: int) -> list[int]:
    """Positive divisors of ``|n|`` in ascending order (``n != 0``).

    Raises DomainError above ``MAX_TRIAL_DIVISION``.
    """
    n = abs(n)
    if n == 0:
        raise InvalidArgumentError("Zero has no finite set of divisors.")
    check_trial_division(n)
    small, large = [], []
    i = 1
    while i * i <= n:
        if n % i == 0:
            small.append(i)
            if i != n // i:
                large.append(n // i)
        i += 1
    return small + large[::-1]
